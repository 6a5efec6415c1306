"""Azure Blob Storage adapter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from azure.core.exceptions import ServiceRequestTimeoutError, ServiceResponseTimeoutError
from azure.identity import CertificateCredential, ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.storage import StorageManagementClient
from azure.storage.blob import BlobServiceClient

from ...utils.errors import UploadTimeoutError
from .base import compute_speed_mbps, generate_payload, prepare_upload_test, timed_upload, upload_test_key
from .models import BucketMetadata, UploadSpeedTestConfig, UploadTestResult

logger = logging.getLogger(__name__)

AUTH_SHARED_KEY = "shared-key"
AUTH_CLIENT_SECRET = "client-secret"
AUTH_CERTIFICATE = "certificate"
AUTH_DEFAULT = "default"


@dataclass(frozen=True)
class AzureStorageCredentials:
    """Values read from an Azure credentials env file."""

    subscription_id: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    resource_group: str = ""
    storage_account: str = ""
    storage_account_key: str = ""
    certificate_path: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, str]) -> AzureStorageCredentials:
        return cls(
            subscription_id=data.get("AZURE_SUBSCRIPTION_ID", ""),
            tenant_id=data.get("AZURE_TENANT_ID", ""),
            client_id=data.get("AZURE_CLIENT_ID", ""),
            client_secret=data.get("AZURE_CLIENT_SECRET", ""),
            resource_group=data.get("AZURE_RESOURCE_GROUP", ""),
            storage_account=data.get("AZURE_STORAGE_ACCOUNT_ID", ""),
            storage_account_key=data.get("AZURE_STORAGE_ACCOUNT_ACCESS_KEY", ""),
            certificate_path=data.get("AZURE_CLIENT_CERTIFICATE_PATH", ""),
        )

    @property
    def account_url(self) -> str:
        return f"https://{self.storage_account}.blob.core.windows.net/"


def parse_env_file(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, ignoring blanks and comments."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = value.strip().strip('"').strip("'")
    return values


def _shared_key(creds: AzureStorageCredentials) -> Any:
    return {"account_name": creds.storage_account, "account_key": creds.storage_account_key}


def _client_secret(creds: AzureStorageCredentials) -> Any:
    return ClientSecretCredential(creds.tenant_id, creds.client_id, creds.client_secret)


def _certificate(creds: AzureStorageCredentials) -> Any:
    return CertificateCredential(creds.tenant_id, creds.client_id, certificate_path=creds.certificate_path)


def _default(creds: AzureStorageCredentials) -> Any:
    return DefaultAzureCredential()


# Evaluated in order, first match wins; DefaultAzureCredential otherwise
AUTH_CHAIN: list[tuple[str, Callable[[AzureStorageCredentials], bool], Callable[[AzureStorageCredentials], Any]]] = [
    (AUTH_SHARED_KEY, lambda c: bool(c.storage_account_key), _shared_key),
    (AUTH_CLIENT_SECRET, lambda c: bool(c.client_secret), _client_secret),
    (AUTH_CERTIFICATE, lambda c: bool(c.certificate_path), _certificate),
]


def resolve_auth(creds: AzureStorageCredentials) -> tuple[str, Any]:
    """Pick the data plane credential for the given values."""
    for mode, matches, build in AUTH_CHAIN:
        if matches(creds):
            return mode, build(creds)
    return AUTH_DEFAULT, _default(creds)


def management_credential(creds: AzureStorageCredentials, mode: str, credential: Any) -> Any:
    """Token credential for ARM calls; shared keys cannot authenticate those."""
    if mode == AUTH_SHARED_KEY:
        return DefaultAzureCredential()
    return credential


class AzureProvider:
    """Azure Blob Storage provider implementation."""

    name = "azure"

    def __init__(self, creds: AzureStorageCredentials) -> None:
        self.creds = creds
        self.auth_mode, self._credential = resolve_auth(creds)
        logger.info(f"Using Azure {self.auth_mode} authentication for account {creds.storage_account}")
        self.client = BlobServiceClient(creds.account_url, credential=self._credential)

    def upload_test(self, config: UploadSpeedTestConfig, bucket: str) -> UploadTestResult:
        """Upload a synthetic blob and measure throughput."""
        size, timeout = prepare_upload_test(config)
        logger.info(f"Starting Azure upload speed test: {size} bytes to {bucket}, timeout {timeout}s")

        payload = generate_payload(size)
        blob = self.client.get_blob_client(container=bucket, blob=upload_test_key())

        try:
            duration = timed_upload(
                lambda body: blob.upload_blob(
                    body,
                    length=size,
                    overwrite=True,
                    timeout=max(1, int(timeout)),
                    connection_timeout=timeout,
                    read_timeout=timeout,
                ),
                payload,
                timeout,
            )
        except (ServiceRequestTimeoutError, ServiceResponseTimeoutError) as e:
            raise UploadTimeoutError(f"upload to {bucket} timed out after {timeout}s") from e

        speed = compute_speed_mbps(size, duration)
        logger.info(f"Azure upload completed in {duration:.3f}s ({speed:.2f} Mbps)")
        return UploadTestResult(speed, duration)

    def get_bucket_metadata(self, bucket: str) -> BucketMetadata:
        """Read versioning and encryption of the storage account.

        Both are account level properties in Azure, so ``bucket`` is unused.
        """
        credential = management_credential(self.creds, self.auth_mode, self._credential)
        client = StorageManagementClient(credential, self.creds.subscription_id)

        service = client.blob_services.get_service_properties(
            self.creds.resource_group, self.creds.storage_account
        )
        versioning = "Enabled" if getattr(service, "is_versioning_enabled", None) else "Disabled"

        account = client.storage_accounts.get_properties(
            self.creds.resource_group, self.creds.storage_account
        )
        key_source = getattr(getattr(account, "encryption", None), "key_source", None)
        encryption = str(getattr(key_source, "value", key_source)) if key_source else "Unknown"

        return BucketMetadata(encryption_algorithm=encryption, versioning_status=versioning)

    def close(self) -> None:
        self.client.close()
