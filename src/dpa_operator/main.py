"""Main entry point for the Data Protection Application Operator."""

from __future__ import annotations

import logging
import threading
from typing import Any

import kopf
from kubernetes import client

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .credentials.stsflow import provision_sts_credentials
from .handlers.shared import load_kube_config
from .tracing import initialize_tracing
from .utils.errors import SecretWaitError, sanitize_exception

logger = logging.getLogger(__name__)

# Set on shutdown so a pending secret visibility wait returns early
_stopping = threading.Event()


def provision_startup_credentials(config: OperatorConfig) -> None:
    """Run the STS provisioner for the operator namespace and wait for the secret.

    Failures are logged and left to the DataProtectionApplication reconcile,
    which provisions the same secret on every pass.
    """
    load_kube_config()
    api = client.CoreV1Api()
    # Separate connection pool so the visibility check does not reuse the writer's
    reader = client.CoreV1Api(client.ApiClient())

    try:
        result = provision_sts_credentials(
            api,
            config.watch_namespace,
            config.sts,
            wait=True,
            reader=reader,
            timeout=config.secret_wait_timeout_seconds,
            interval=config.secret_wait_interval_seconds,
            cancel_event=_stopping,
        )
    except SecretWaitError as e:
        logger.error(f"STS secret {e.namespace}/{e.name} did not become visible: {e}")
        return
    except Exception as e:
        logger.error(f"Failed to provision STS credentials at startup: {sanitize_exception(e)}")
        return

    if result.skipped:
        logger.info("No STS configuration found, running with static credentials")
        return
    logger.info(
        f"STS secret {config.watch_namespace}/{result.secret_name} {result.operation.value} "
        f"for provider {result.provider}"
    )
    for warning in result.warnings:
        logger.warning(warning)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    config = OperatorConfig.from_env()

    # Set up structured JSON logging
    structured_logging.setup_structured_logging(config.log_level)

    # Use AnnotationsProgressStorage to avoid conflicts with status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = 0
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = 4

    # Metrics HTTP server with health check endpoints
    health.start_metrics_server(config.metrics_port)

    initialize_tracing()

    provision_startup_credentials(config)


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Release anything blocked on operator shutdown."""
    _stopping.set()
