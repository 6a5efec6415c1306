"""Per-cloud federated credential payloads and provider selection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Union

from ..config import STSConfig
from ..constants import (
    AWS_SECRET_KEY,
    AZURE_CLOUD_NAME,
    AZURE_SECRET_KEY,
    GCP_SECRET_JSON_KEY,
    VELERO_AWS_SECRET_NAME,
    VELERO_AZURE_SECRET_NAME,
    VELERO_GCP_SECRET_NAME,
    WEB_IDENTITY_TOKEN_PATH,
)


@dataclass(frozen=True)
class AWSCredentials:
    """AWS web identity federation through an IAM role."""

    role_arn: str

    provider = "aws"
    secret_name = VELERO_AWS_SECRET_NAME

    def is_complete(self) -> bool:
        return bool(self.role_arn)

    def string_data(self) -> dict[str, str]:
        credentials = (
            "[default]\n"
            "sts_regional_endpoints = regional\n"
            f"role_arn = {self.role_arn}\n"
            f"web_identity_token_file = {WEB_IDENTITY_TOKEN_PATH}"
        )
        return {AWS_SECRET_KEY: credentials}


@dataclass(frozen=True)
class GCPCredentials:
    """GCP workload identity federation impersonating a service account."""

    service_account_email: str
    project_number: str
    pool_id: str
    provider_id: str

    provider = "gcp"
    secret_name = VELERO_GCP_SECRET_NAME

    def is_complete(self) -> bool:
        return all(
            (self.service_account_email, self.project_number, self.pool_id, self.provider_id)
        )

    @property
    def audience(self) -> str:
        return (
            f"//iam.googleapis.com/projects/{self.project_number}"
            f"/locations/global/workloadIdentityPools/{self.pool_id}"
            f"/providers/{self.provider_id}"
        )

    def string_data(self) -> dict[str, str]:
        document = {
            "type": "external_account",
            "audience": self.audience,
            "subject_token_type": "urn:ietf:params:oauth:token-type:jwt",
            "token_url": "https://sts.googleapis.com/v1/token",
            "service_account_impersonation_url": (
                "https://iamcredentials.googleapis.com/v1/projects/-/serviceAccounts/"
                f"{self.service_account_email}:generateAccessToken"
            ),
            "credential_source": {
                "file": WEB_IDENTITY_TOKEN_PATH,
                "format": {"type": "text"},
            },
        }
        return {GCP_SECRET_JSON_KEY: json.dumps(document, indent=2)}


@dataclass(frozen=True)
class AzureCredentials:
    """Azure workload identity for a managed identity or app registration."""

    client_id: str
    tenant_id: str
    subscription_id: str

    provider = "azure"
    secret_name = VELERO_AZURE_SECRET_NAME

    def is_complete(self) -> bool:
        return all((self.client_id, self.tenant_id, self.subscription_id))

    def string_data(self) -> dict[str, str]:
        azurekey = (
            "\n"
            f"AZURE_SUBSCRIPTION_ID={self.subscription_id}\n"
            f"AZURE_TENANT_ID={self.tenant_id}\n"
            f"AZURE_CLIENT_ID={self.client_id}\n"
            f"AZURE_CLOUD_NAME={AZURE_CLOUD_NAME}\n"
        )
        return {AZURE_SECRET_KEY: azurekey}


ProviderCredentials = Union[AWSCredentials, GCPCredentials, AzureCredentials]


def candidate_credentials(config: STSConfig) -> tuple[ProviderCredentials, ...]:
    """All credential variants in selection priority order."""
    return (
        AWSCredentials(role_arn=config.role_arn),
        GCPCredentials(
            service_account_email=config.service_account_email,
            project_number=config.project_number,
            pool_id=config.pool_id,
            provider_id=config.provider_id,
        ),
        AzureCredentials(
            client_id=config.client_id,
            tenant_id=config.tenant_id,
            subscription_id=config.subscription_id,
        ),
    )


def select_credentials(config: STSConfig) -> ProviderCredentials | None:
    """Pick the first complete credential variant: AWS, then GCP, then Azure."""
    for candidate in candidate_credentials(config):
        if candidate.is_complete():
            return candidate
    return None
