"""Google Cloud Storage adapter."""

from __future__ import annotations

import logging
from typing import Any

import google.auth
from google.api_core.exceptions import DeadlineExceeded
from google.cloud import storage
from requests.exceptions import Timeout

from ...utils.errors import UploadTimeoutError
from .base import compute_speed_mbps, generate_payload, prepare_upload_test, timed_upload, upload_test_key
from .models import BucketMetadata, UploadSpeedTestConfig, UploadTestResult

logger = logging.getLogger(__name__)

STORAGE_SCOPES = ["https://www.googleapis.com/auth/devstorage.full_control"]


class GCPProvider:
    """GCS provider built from service account or external account credentials."""

    name = "gcp"

    def __init__(self, credentials_info: dict[str, Any], project: str | None = None) -> None:
        """Initialize the GCS provider.

        Args:
            credentials_info: Parsed credentials JSON (``service_account`` or ``external_account``)
            project: Project overriding the one found in the credentials
        """
        credentials, project_id = google.auth.load_credentials_from_dict(
            credentials_info, scopes=STORAGE_SCOPES
        )
        self.client = storage.Client(project=project or project_id, credentials=credentials)

    def upload_test(self, config: UploadSpeedTestConfig, bucket: str) -> UploadTestResult:
        """Upload a synthetic object and measure throughput."""
        size, timeout = prepare_upload_test(config)
        logger.info(f"Starting GCS upload speed test: {size} bytes to {bucket}, timeout {timeout}s")

        payload = generate_payload(size)
        blob = self.client.bucket(bucket).blob(upload_test_key())

        try:
            duration = timed_upload(
                lambda body: blob.upload_from_file(
                    body,
                    size=size,
                    content_type="application/octet-stream",
                    timeout=timeout,
                ),
                payload,
                timeout,
            )
        except (Timeout, DeadlineExceeded) as e:
            raise UploadTimeoutError(f"upload to {bucket} timed out after {timeout}s") from e

        speed = compute_speed_mbps(size, duration)
        logger.info(f"GCS upload completed in {duration:.3f}s ({speed:.2f} Mbps)")
        return UploadTestResult(speed, duration)

    def get_bucket_metadata(self, bucket: str) -> BucketMetadata:
        """Read default KMS key and versioning of a bucket."""
        attrs = self.client.get_bucket(bucket)

        # GCS always encrypts at rest; a default KMS key means customer managed keys
        encryption = "google-kms" if attrs.default_kms_key_name else "google-managed"
        versioning = "Enabled" if attrs.versioning_enabled else "Suspended"

        logger.info(f"GCS bucket {bucket}: encryption={encryption}, versioning={versioning}")
        return BucketMetadata(encryption_algorithm=encryption, versioning_status=versioning)

    def close(self) -> None:
        self.client.close()
