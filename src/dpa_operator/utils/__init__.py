"""Utility functions for the Data Protection Application Operator."""

from .conditions import get_condition, set_reconciled_condition, update_condition
from .events import emit_event
from .secrets import OperationResult, create_or_update_secret, get_secret_value
from .watch import ObjectKey, map_event_to_request, map_object_to_request

__all__ = [
    "update_condition",
    "get_condition",
    "set_reconciled_condition",
    "emit_event",
    "get_secret_value",
    "create_or_update_secret",
    "OperationResult",
    "ObjectKey",
    "map_object_to_request",
    "map_event_to_request",
]
