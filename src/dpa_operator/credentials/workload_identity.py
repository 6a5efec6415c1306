"""Owner-referenced Azure workload identity secret for a DataProtectionApplication."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import kopf
from kubernetes import client

from .. import metrics
from ..config import STSConfig
from ..constants import (
    AZURE_WORKLOAD_IDENTITY_SECRET_NAME,
    EVENT_REASON_AZURE_WI_SECRET_RECONCILED,
    WEB_IDENTITY_TOKEN_PATH,
)
from ..utils.events import EventRecorder, emit_event, object_reference
from ..utils.labels import dpa_app_labels
from ..utils.secrets import OperationResult, create_or_update_secret

logger = logging.getLogger(__name__)


def azure_workload_identity_data(config: STSConfig) -> dict[str, str] | None:
    """Secret content consumed by Velero through ``envFrom``.

    Returns None unless client id, tenant id and subscription id are all set.
    """
    if not (config.client_id and config.tenant_id and config.subscription_id):
        return None
    return {
        "AZURE_CLIENT_ID": config.client_id,
        "AZURE_TENANT_ID": config.tenant_id,
        "AZURE_FEDERATED_TOKEN_FILE": WEB_IDENTITY_TOKEN_PATH,
    }


def reconcile_azure_workload_identity_secret(
    api: client.CoreV1Api,
    dpa: Mapping[str, Any],
    config: STSConfig,
    recorder: EventRecorder = emit_event,
) -> bool:
    """Ensure the Azure workload identity secret exists next to the DPA.

    The secret is owned by the DPA and garbage collected with it.

    Returns:
        Always True; absence of Azure workload identity configuration is not an error
    """
    data = azure_workload_identity_data(config)
    if data is None:
        return True

    meta = dpa["metadata"]
    namespace = meta["namespace"]
    owner = kopf.build_owner_reference(dpa, controller=True, block_owner_deletion=True)

    operation = create_or_update_secret(
        api,
        namespace,
        AZURE_WORKLOAD_IDENTITY_SECRET_NAME,
        data,
        labels=dpa_app_labels(meta["name"]),
        owner_references=[dict(owner)],
    )
    metrics.secret_operations_total.labels(
        secret=AZURE_WORKLOAD_IDENTITY_SECRET_NAME, operation=operation.value
    ).inc()

    if operation in (OperationResult.CREATED, OperationResult.UPDATED):
        secret_ref = object_reference(
            "v1",
            "Secret",
            {"name": AZURE_WORKLOAD_IDENTITY_SECRET_NAME, "namespace": namespace},
        )
        recorder(
            secret_ref,
            EVENT_REASON_AZURE_WI_SECRET_RECONCILED,
            f"performed {operation.value} on azure workload identity secret "
            f"{namespace}/{AZURE_WORKLOAD_IDENTITY_SECRET_NAME}",
        )
        logger.info(
            f"Azure workload identity secret {namespace}/{AZURE_WORKLOAD_IDENTITY_SECRET_NAME} {operation.value}"
        )

    return True
