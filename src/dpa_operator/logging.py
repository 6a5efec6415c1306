"""JSON resource event logging for the Data Protection Application Operator."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Mapping

REDACTED = "***REDACTED***"

# Keys of the credential secrets this operator writes or reads, plus their API spellings
SECRET_FIELDS = frozenset(
    {
        "credentials",
        "cloud",
        "service_account.json",
        "azurekey",
        "azure_client_secret",
        "azure_storage_account_access_key",
        "client_secret",
        "account_key",
        "session_token",
        "secret_key",
        "string_data",
        "stringdata",
        "data",
    }
)

# Cloud SDK loggers that log request and response details at INFO
NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
    "botocore",
    "boto3",
    "urllib3",
    "google.auth",
)


def setup_structured_logging(level: int | str = logging.INFO) -> None:
    """Send one JSON document per line to stdout and quiet the cloud SDKs."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log one event about a custom resource as a JSON document.

    Extra keyword arguments are added as top level fields after secret
    values have been replaced.
    """
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    payload.update(redact_secret_fields(kwargs))
    logger.log(level, json.dumps(payload, default=str))


def redact_secret_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """Replace credential values, descending into nested mappings."""
    redacted: dict[str, Any] = {}
    for key, value in values.items():
        if str(key).lower() in SECRET_FIELDS:
            redacted[key] = REDACTED
        elif isinstance(value, Mapping):
            redacted[key] = redact_secret_fields(value)
        else:
            redacted[key] = value
    return redacted
