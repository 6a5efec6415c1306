"""Data Protection Application Operator."""

__version__ = "0.1.0"
