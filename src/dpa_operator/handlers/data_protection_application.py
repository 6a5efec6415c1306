"""Handler for DataProtectionApplication CRD."""

from __future__ import annotations

from typing import Any

import kopf

from ..config import OperatorConfig
from ..constants import API_GROUP_VERSION, KIND_DPA
from ..pipeline import DataProtectionApplicationReconciler
from ..utils.watch import ObjectKey
from .base import BaseHandler
from .shared import get_core_api, get_custom_api
from .watch import request_reconcile


class DataProtectionApplicationHandler(BaseHandler):
    """Handler for DataProtectionApplication resources."""

    def __init__(self):
        super().__init__(KIND_DPA)

    def reconcile(self, meta: dict[str, Any]) -> None:
        """Reconcile a DataProtectionApplication through the step pipeline."""
        reconciler = DataProtectionApplicationReconciler(
            custom_api=get_custom_api(),
            core_api=get_core_api(),
            config=OperatorConfig.from_env(),
        )
        reconciler.reconcile(ObjectKey(meta["namespace"], meta["name"]))


# Global handler instance
_handler = DataProtectionApplicationHandler()

RESYNC_INTERVAL_SECONDS = OperatorConfig.from_env().resync_interval_seconds


@kopf.on.create(API_GROUP_VERSION, KIND_DPA)
@kopf.on.update(API_GROUP_VERSION, KIND_DPA)
@kopf.on.resume(API_GROUP_VERSION, KIND_DPA)
def handle_data_protection_application(
    body: kopf.Body,
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Handle DataProtectionApplication reconciliation."""
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(meta))


@kopf.timer(API_GROUP_VERSION, KIND_DPA, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_data_protection_application(
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Periodically request a reconcile so drift is corrected without an event.

    The timer runs outside the per-object handler queue, so it only stamps the
    reconcile annotation and leaves the pipeline to the update handler.
    """
    _handler.log_info(meta, "Periodic resync", event="resync", reason="Resync")
    request_reconcile(get_custom_api(), ObjectKey(meta["namespace"], meta["name"]))
