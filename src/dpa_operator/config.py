"""Process configuration for the Data Protection Application Operator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from .constants import (
    CLIENT_ID_ENV_KEY,
    POOL_ID_ENV_KEY,
    PROJECT_NUMBER_ENV_KEY,
    PROVIDER_ID_ENV_KEY,
    ROLE_ARN_ENV_KEY,
    SERVICE_ACCOUNT_EMAIL_ENV_KEY,
    SUBSCRIPTION_ID_ENV_KEY,
    TENANT_ID_ENV_KEY,
)


@dataclass(frozen=True)
class STSConfig:
    """Cloud identity federation inputs. Empty strings mean "not configured"."""

    role_arn: str = ""
    service_account_email: str = ""
    project_number: str = ""
    pool_id: str = ""
    provider_id: str = ""
    client_id: str = ""
    tenant_id: str = ""
    subscription_id: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> STSConfig:
        env = os.environ if environ is None else environ
        return cls(
            role_arn=env.get(ROLE_ARN_ENV_KEY, ""),
            service_account_email=env.get(SERVICE_ACCOUNT_EMAIL_ENV_KEY, ""),
            project_number=env.get(PROJECT_NUMBER_ENV_KEY, ""),
            pool_id=env.get(POOL_ID_ENV_KEY, ""),
            provider_id=env.get(PROVIDER_ID_ENV_KEY, ""),
            client_id=env.get(CLIENT_ID_ENV_KEY, ""),
            tenant_id=env.get(TENANT_ID_ENV_KEY, ""),
            subscription_id=env.get(SUBSCRIPTION_ID_ENV_KEY, ""),
        )


@dataclass(frozen=True)
class OperatorConfig:
    """Operator level settings."""

    watch_namespace: str = "openshift-adp"
    resync_interval_seconds: float = 300.0
    metrics_port: int = 8080
    secret_wait_timeout_seconds: float = 120.0
    secret_wait_interval_seconds: float = 1.0
    log_level: str = "INFO"
    sts: STSConfig = field(default_factory=STSConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> OperatorConfig:
        env = os.environ if environ is None else environ
        return cls(
            watch_namespace=env.get("WATCH_NAMESPACE") or "openshift-adp",
            resync_interval_seconds=float(env.get("RESYNC_INTERVAL_SECONDS", "300")),
            metrics_port=int(env.get("METRICS_PORT", "8080")),
            secret_wait_timeout_seconds=float(env.get("STS_SECRET_WAIT_TIMEOUT_SECONDS", "120")),
            secret_wait_interval_seconds=float(env.get("STS_SECRET_WAIT_INTERVAL_SECONDS", "1")),
            log_level=env.get("LOG_LEVEL") or "INFO",
            sts=STSConfig.from_env(env),
        )
