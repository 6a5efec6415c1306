"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_RECONCILED,
    REASON_COMPLETE,
    REASON_ERROR,
    RECONCILE_COMPLETE_MESSAGE,
)


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
    now: str | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    The ``lastTransitionTime`` of an existing condition is only moved when its
    status changes, so setting the same condition twice is a no-op.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed
        now: Timestamp to use for a transition (defaults to the current UTC time)

    Returns:
        Updated list of conditions
    """
    now = now or datetime.now(timezone.utc).isoformat()

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }

    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    if existing_idx is not None:
        existing = conditions[existing_idx]
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition of the given type, if present."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def set_reconciled_condition(
    conditions: list[dict[str, Any]],
    error: BaseException | None,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the aggregated Reconciled condition from a pipeline outcome."""
    if error is None:
        return update_condition(
            conditions,
            COND_RECONCILED,
            "True",
            REASON_COMPLETE,
            RECONCILE_COMPLETE_MESSAGE,
            observed_generation,
        )
    return update_condition(
        conditions,
        COND_RECONCILED,
        "False",
        REASON_ERROR,
        str(error),
        observed_generation,
    )
