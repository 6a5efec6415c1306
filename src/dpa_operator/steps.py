"""Reconcile steps run in order for every DataProtectionApplication."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .constants import EVENT_REASON_STS_SECRET_PROVISIONED
from .credentials.stsflow import provision_sts_credentials
from .credentials.workload_identity import (
    reconcile_azure_workload_identity_secret as _reconcile_azure_wi_secret,
)
from .utils.events import emit_validate_failed
from .utils.labels import correlation_labels
from .utils.secrets import OperationResult, ensure_secret_labels

if TYPE_CHECKING:
    from .pipeline import ReconcileContext


def validation_errors(spec: dict[str, Any]) -> list[str]:
    """Return human readable problems with a DataProtectionApplication spec."""
    problems = []

    configuration = spec.get("configuration")
    if not isinstance(configuration, dict) or not isinstance(configuration.get("velero"), dict):
        problems.append("spec.configuration.velero is required")

    for idx, location in enumerate(spec.get("backupLocations") or []):
        velero = location.get("velero")
        bucket = location.get("bucket")
        if bool(velero) == bool(bucket):
            problems.append(f"spec.backupLocations[{idx}] must set exactly one of velero or bucket")
            continue
        if velero:
            if not velero.get("provider"):
                problems.append(f"spec.backupLocations[{idx}].velero.provider is required")
            if not (velero.get("objectStorage") or {}).get("bucket"):
                problems.append(f"spec.backupLocations[{idx}].velero.objectStorage.bucket is required")
            problems.extend(_credential_problems(velero, f"spec.backupLocations[{idx}].velero"))

    for idx, location in enumerate(spec.get("snapshotLocations") or []):
        velero = location.get("velero") or {}
        if not velero.get("provider"):
            problems.append(f"spec.snapshotLocations[{idx}].velero.provider is required")
        problems.extend(_credential_problems(velero, f"spec.snapshotLocations[{idx}].velero"))

    return problems


def _credential_problems(velero: dict[str, Any], path: str) -> list[str]:
    credential = velero.get("credential")
    if credential is None:
        return []
    if not credential.get("name") or not credential.get("key"):
        return [f"{path}.credential requires name and key"]
    return []


def referenced_credential_secrets(spec: dict[str, Any]) -> list[str]:
    """Names of credential secrets referenced by backup and snapshot locations."""
    names = []
    for group in ("backupLocations", "snapshotLocations"):
        for location in spec.get(group) or []:
            credential = (location.get("velero") or {}).get("credential") or {}
            name = credential.get("name")
            if name and name not in names:
                names.append(name)
    return names


def validate_data_protection_application(ctx: ReconcileContext) -> bool:
    """Stop cleanly for resources being deleted or with an unusable spec."""
    if ctx.meta.get("deletionTimestamp"):
        ctx.logger.info(f"{ctx.namespace}/{ctx.name} is being deleted, skipping reconcile")
        return False

    problems = validation_errors(ctx.spec)
    if problems:
        message = "; ".join(problems)
        ctx.logger.warning(f"{ctx.namespace}/{ctx.name} failed validation: {message}")
        emit_validate_failed(ctx.dpa, message, recorder=ctx.recorder)
        return False

    return True


def label_credential_secrets(ctx: ReconcileContext) -> bool:
    """Label referenced credential secrets so their changes requeue this DPA."""
    labels = correlation_labels(ctx.name)
    for secret_name in referenced_credential_secrets(ctx.spec):
        patched = ensure_secret_labels(ctx.core_api, ctx.namespace, secret_name, labels)
        if patched is None:
            ctx.logger.warning(f"Credential secret {ctx.namespace}/{secret_name} not found")
        elif patched:
            ctx.logger.info(f"Labelled credential secret {ctx.namespace}/{secret_name}")
    return True


def reconcile_sts_credentials(ctx: ReconcileContext) -> bool:
    """Materialize the federated credential secret for the configured cloud."""
    result = provision_sts_credentials(ctx.core_api, ctx.namespace, ctx.config.sts)
    if result.skipped:
        return True

    if result.operation in (OperationResult.CREATED, OperationResult.UPDATED):
        ctx.recorder(
            ctx.dpa,
            EVENT_REASON_STS_SECRET_PROVISIONED,
            f"performed {result.operation.value} on {result.provider} STS secret {result.secret_name}",
        )
    for warning in result.warnings:
        ctx.recorder(
            ctx.dpa,
            EVENT_REASON_STS_SECRET_PROVISIONED,
            warning,
            type_="Warning",
        )
    return True


def reconcile_azure_workload_identity_secret(ctx: ReconcileContext) -> bool:
    """Ensure the owner-referenced Azure workload identity secret."""
    return _reconcile_azure_wi_secret(ctx.core_api, ctx.dpa, ctx.config.sts, recorder=ctx.recorder)


DEFAULT_STEPS = (
    validate_data_protection_application,
    label_credential_secrets,
    reconcile_sts_credentials,
    reconcile_azure_workload_identity_secret,
)
