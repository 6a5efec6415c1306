"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

import kopf

from ..constants import (
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
)


class EventRecorder(Protocol):
    """Callable that records an event against a Kubernetes object."""

    def __call__(
        self,
        body: Mapping[str, Any],
        reason: str,
        message: str,
        type_: str = "Normal",
    ) -> None:
        ...


def emit_event(
    body: Mapping[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object the event refers to (apiVersion, kind and metadata)
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def object_reference(
    api_version: str,
    kind: str,
    meta: Mapping[str, Any],
) -> dict[str, Any]:
    """Build a minimal body usable as an event target."""
    return {
        "apiVersion": api_version,
        "kind": kind,
        "metadata": {
            "name": meta.get("name"),
            "namespace": meta.get("namespace"),
            "uid": meta.get("uid"),
        },
    }


def emit_reconcile_started(body: Mapping[str, Any], recorder: EventRecorder = emit_event) -> None:
    """Emit reconcile started event."""
    recorder(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(
    body: Mapping[str, Any], message: str, recorder: EventRecorder = emit_event
) -> None:
    """Emit reconcile failed event."""
    recorder(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_validate_failed(
    body: Mapping[str, Any], message: str, recorder: EventRecorder = emit_event
) -> None:
    """Emit validation failed event."""
    recorder(body, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")
