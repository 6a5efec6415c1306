"""Requeue DataProtectionApplications when their labelled secrets change."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import kopf
from kubernetes import client

from .. import metrics
from ..constants import ANNOTATION_RECONCILE_REQUESTED, API_GROUP, API_VERSION, LABEL_OADP_OPERATOR, PLURAL_DPA
from ..utils.watch import ObjectKey, map_event_to_request
from .shared import get_custom_api

logger = logging.getLogger(__name__)


def request_reconcile(api: client.CustomObjectsApi, key: ObjectKey) -> bool:
    """Touch the reconcile annotation so the update handler runs for ``key``.

    Returns:
        False when the DataProtectionApplication does not exist
    """
    body = {
        "metadata": {
            "annotations": {
                ANNOTATION_RECONCILE_REQUESTED: datetime.now(timezone.utc).isoformat(),
            }
        }
    }
    try:
        api.patch_namespaced_custom_object(
            group=API_GROUP,
            version=API_VERSION,
            namespace=key.namespace,
            plural=PLURAL_DPA,
            name=key.name,
            body=body,
        )
    except client.exceptions.ApiException as e:
        if e.status == 404:
            return False
        raise
    return True


@kopf.on.event("", "v1", "secrets", labels={LABEL_OADP_OPERATOR: kopf.PRESENT})
def handle_secret_event(event: dict[str, Any], **kwargs: Any) -> None:
    """Map a secret event to its owning DataProtectionApplication."""
    key = map_event_to_request(event)
    if key is None:
        metrics.watch_requests_total.labels(result="ignored").inc()
        return

    if request_reconcile(get_custom_api(), key):
        logger.debug(f"Requested reconcile of {key.namespace}/{key.name} after secret change")
        metrics.watch_requests_total.labels(result="enqueued").inc()
    else:
        metrics.watch_requests_total.labels(result="not_found").inc()
