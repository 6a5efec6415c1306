"""Provisioning of short-lived federated credential secrets for Velero."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

from kubernetes import client

from .. import metrics
from ..config import STSConfig
from ..constants import (
    ANNOTATION_AZURE_CLIENT_ID,
    LABEL_SECRET_TYPE,
    SECRET_TYPE_STS,
    VELERO_SERVICE_ACCOUNT,
)
from ..utils.errors import (
    PreconditionError,
    SecretWaitCancelledError,
    SecretWaitTimeoutError,
    sanitize_exception,
)
from ..utils.secrets import (
    OperationResult,
    create_secret,
    decode_secret_data,
    diff_string_data,
    patch_secret,
    read_secret,
)
from .providers import AzureCredentials, ProviderCredentials, select_credentials

logger = logging.getLogger(__name__)

DEFAULT_WAIT_TIMEOUT_SECONDS = 120.0
DEFAULT_WAIT_INTERVAL_SECONDS = 1.0


@dataclass
class ProvisionResult:
    """Outcome of a provisioning call.

    ``warnings`` carries failures of best-effort side effects; they never
    turn a successful secret write into an error.
    """

    provider: str | None = None
    secret_name: str | None = None
    operation: OperationResult | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.secret_name is None


def wait_for_secret(
    reader: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
    interval: float = DEFAULT_WAIT_INTERVAL_SECONDS,
    cancel_event: threading.Event | None = None,
) -> None:
    """Poll ``reader`` until the secret is readable.

    Raises:
        SecretWaitTimeoutError: If the secret is not visible within ``timeout`` seconds
        SecretWaitCancelledError: If ``cancel_event`` is set before the secret is visible
    """
    stop = cancel_event or threading.Event()
    deadline = time.monotonic() + timeout

    while True:
        if stop.is_set():
            raise SecretWaitCancelledError(
                f"wait for secret {namespace}/{secret_name} cancelled", namespace, secret_name
            )
        if read_secret(reader, namespace, secret_name) is not None:
            return

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise SecretWaitTimeoutError(
                f"timed out after {timeout}s waiting for secret {namespace}/{secret_name}",
                namespace,
                secret_name,
            )
        if stop.wait(min(interval, remaining)):
            raise SecretWaitCancelledError(
                f"wait for secret {namespace}/{secret_name} cancelled", namespace, secret_name
            )


def create_or_update_sts_secret(
    api: client.CoreV1Api,
    secret_name: str,
    string_data: Mapping[str, str],
    namespace: str,
    wait: bool = False,
    reader: client.CoreV1Api | None = None,
    timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
    interval: float = DEFAULT_WAIT_INTERVAL_SECONDS,
    cancel_event: threading.Event | None = None,
) -> OperationResult:
    """Create the STS secret or patch only the keys that differ.

    Args:
        api: Client used for reads and writes
        secret_name: Name of the secret
        string_data: Desired secret content
        namespace: Namespace of the secret
        wait: Block until the secret is readable through ``reader``
        reader: Independent read path for the visibility wait (defaults to ``api``)
        timeout: Overall deadline of the visibility wait in seconds
        interval: Poll interval of the visibility wait in seconds
        cancel_event: Aborts the visibility wait when set

    Returns:
        The write that was performed
    """
    marker = {LABEL_SECRET_TYPE: SECRET_TYPE_STS}
    operation = None

    existing = read_secret(api, namespace, secret_name)
    if existing is None:
        try:
            create_secret(api, namespace, secret_name, string_data, labels=marker)
            operation = OperationResult.CREATED
            logger.info(f"Created STS secret {namespace}/{secret_name}")
        except client.exceptions.ApiException as e:
            if e.status != 409:
                raise
            logger.info(f"STS secret {namespace}/{secret_name} created concurrently, updating")
            existing = read_secret(api, namespace, secret_name)
            if existing is None:
                raise

    if operation is None:
        changed, removed = diff_string_data(decode_secret_data(existing), string_data)
        labels = existing.metadata.labels or {}
        if not changed and not removed and labels.get(LABEL_SECRET_TYPE) == SECRET_TYPE_STS:
            operation = OperationResult.UNCHANGED
            logger.debug(f"STS secret {namespace}/{secret_name} is up to date")
        else:
            body: dict[str, Any] = {"metadata": {"labels": marker}}
            if existing.metadata.resource_version:
                body["metadata"]["resourceVersion"] = existing.metadata.resource_version
            if changed:
                body["stringData"] = changed
            if removed:
                body["data"] = {key: None for key in removed}
            patch_secret(api, namespace, secret_name, body)
            operation = OperationResult.UPDATED
            logger.info(
                f"Patched STS secret {namespace}/{secret_name}: "
                f"{len(changed)} key(s) changed, {len(removed)} removed"
            )

    metrics.secret_operations_total.labels(secret=secret_name, operation=operation.value).inc()

    if wait:
        wait_for_secret(reader or api, namespace, secret_name, timeout, interval, cancel_event)

    return operation


def annotate_velero_service_account_for_azure(
    api: client.CoreV1Api,
    client_id: str,
    namespace: str,
) -> None:
    """Annotate the Velero service account with the Azure workload identity client id.

    Raises:
        PreconditionError: If ``client_id`` is empty
        client.exceptions.ApiException: If the service account cannot be patched
    """
    if not client_id:
        raise PreconditionError("Azure client ID is required to annotate the Velero service account")

    api.patch_namespaced_service_account(
        name=VELERO_SERVICE_ACCOUNT,
        namespace=namespace,
        body={"metadata": {"annotations": {ANNOTATION_AZURE_CLIENT_ID: client_id}}},
    )


def provision_credentials(
    api: client.CoreV1Api,
    namespace: str,
    credentials: ProviderCredentials,
    **write_options: Any,
) -> ProvisionResult:
    """Materialize the secret for one credential variant.

    ``write_options`` are passed to :func:`create_or_update_sts_secret`.

    Raises:
        PreconditionError: If an Azure variant has no client id (nothing is written)
    """
    if isinstance(credentials, AzureCredentials) and not credentials.client_id:
        raise PreconditionError("Azure client ID is required for STS credentials")

    result = ProvisionResult(provider=credentials.provider, secret_name=credentials.secret_name)
    result.operation = create_or_update_sts_secret(
        api,
        credentials.secret_name,
        credentials.string_data(),
        namespace,
        **write_options,
    )

    if isinstance(credentials, AzureCredentials):
        try:
            annotate_velero_service_account_for_azure(api, credentials.client_id, namespace)
        except Exception as e:
            warning = f"Failed to annotate service account {VELERO_SERVICE_ACCOUNT}: {sanitize_exception(e)}"
            logger.warning(warning)
            result.warnings.append(warning)

    return result


def provision_sts_credentials(
    api: client.CoreV1Api,
    namespace: str,
    config: STSConfig,
    **write_options: Any,
) -> ProvisionResult:
    """Provision the secret for whichever federation mode ``config`` describes.

    Returns a skipped result when no provider has a complete configuration.
    """
    credentials = select_credentials(config)
    if credentials is None:
        logger.debug("No STS configuration found, skipping credential provisioning")
        return ProvisionResult()

    logger.info(f"Provisioning {credentials.provider} STS credentials in namespace {namespace}")
    return provision_credentials(api, namespace, credentials, **write_options)
