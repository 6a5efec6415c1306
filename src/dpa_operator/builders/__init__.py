"""Builders turning custom resource specs into service objects."""

from .cloud_provider import create_cloud_provider_from_spec

__all__ = ["create_cloud_provider_from_spec"]
