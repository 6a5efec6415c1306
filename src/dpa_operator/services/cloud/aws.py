"""AWS S3 storage adapter."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError, ConnectTimeoutError, ReadTimeoutError

from ...utils.errors import UploadTimeoutError
from .base import compute_speed_mbps, generate_payload, prepare_upload_test, timed_upload, upload_test_key
from .models import BucketMetadata, UploadSpeedTestConfig, UploadTestResult

logger = logging.getLogger(__name__)

NO_ENCRYPTION_CODE = "ServerSideEncryptionConfigurationNotFoundError"


class AWSProvider:
    """S3 (or S3 compatible) provider implementation."""

    name = "aws"

    def __init__(
        self,
        region: str,
        access_key: str | None = None,
        secret_key: str | None = None,
        session_token: str | None = None,
        endpoint: str | None = None,
        path_style: bool = False,
        insecure_skip_verify: bool = False,
    ) -> None:
        """Initialize the S3 provider.

        Args:
            region: AWS region
            access_key: Access key ID (default credential chain when omitted)
            secret_key: Secret access key
            session_token: Session token for temporary credentials
            endpoint: Custom S3 endpoint URL
            path_style: Use path-style addressing
            insecure_skip_verify: Skip TLS verification
        """
        self.region = region
        self.endpoint = endpoint
        self.path_style = path_style
        self._client_kwargs: dict[str, Any] = {
            "region_name": region,
            "endpoint_url": endpoint or None,
            "aws_access_key_id": access_key,
            "aws_secret_access_key": secret_key,
            "aws_session_token": session_token,
            "verify": not insecure_skip_verify,
        }
        self.client = self._make_client()

    def _make_client(self, timeout: float | None = None) -> Any:
        options: dict[str, Any] = {
            "signature_version": "s3v4",
            "s3": {"addressing_style": "path" if self.path_style else "auto"},
        }
        if timeout is not None:
            options.update(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1},
            )
        return boto3.client("s3", config=boto3.session.Config(**options), **self._client_kwargs)

    def upload_test(self, config: UploadSpeedTestConfig, bucket: str) -> UploadTestResult:
        """Upload a synthetic object and measure throughput."""
        size, timeout = prepare_upload_test(config)
        logger.info(f"Starting S3 upload speed test: {size} bytes to {bucket}, timeout {timeout}s")

        payload = generate_payload(size)
        key = upload_test_key()
        s3 = self._make_client(timeout=timeout)

        try:
            duration = timed_upload(
                lambda body: s3.put_object(Bucket=bucket, Key=key, Body=body, ContentLength=size),
                payload,
                timeout,
            )
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise UploadTimeoutError(f"upload to {bucket} timed out after {timeout}s") from e
        finally:
            s3.close()

        speed = compute_speed_mbps(size, duration)
        logger.info(f"S3 upload completed in {duration:.3f}s ({speed:.2f} Mbps)")
        return UploadTestResult(speed, duration)

    def get_bucket_metadata(self, bucket: str) -> BucketMetadata:
        """Read default encryption and versioning of a bucket."""
        try:
            encryption = self.client.get_bucket_encryption(Bucket=bucket)
            rules = encryption.get("ServerSideEncryptionConfiguration", {}).get("Rules", [])
            algorithm = "None"
            if rules:
                algorithm = rules[0].get("ApplyServerSideEncryptionByDefault", {}).get(
                    "SSEAlgorithm", "None"
                )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != NO_ENCRYPTION_CODE:
                logger.error(f"Failed to get encryption for bucket {bucket}: {e}")
                raise
            algorithm = "None"

        try:
            versioning = self.client.get_bucket_versioning(Bucket=bucket)
        except ClientError as e:
            logger.error(f"Failed to get versioning for bucket {bucket}: {e}")
            raise

        return BucketMetadata(
            encryption_algorithm=algorithm,
            versioning_status=versioning.get("Status") or "Disabled",
        )

    def close(self) -> None:
        self.client.close()


def assume_role_with_web_identity(
    role_arn: str,
    token_file: str,
    region: str,
    session_name: str = "dpa-operator",
) -> dict[str, str]:
    """Exchange a projected service account token for temporary AWS credentials."""
    with open(token_file, encoding="utf-8") as f:
        token = f.read().strip()

    sts = boto3.client("sts", region_name=region)
    response = sts.assume_role_with_web_identity(
        RoleArn=role_arn,
        RoleSessionName=session_name,
        WebIdentityToken=token,
    )
    credentials = response["Credentials"]
    return {
        "access_key": credentials["AccessKeyId"],
        "secret_key": credentials["SecretAccessKey"],
        "session_token": credentials["SessionToken"],
    }
