"""Cloud storage provider interface and shared upload test helpers."""

from __future__ import annotations

import io
import time
from typing import Any, Callable, Protocol

from ...constants import (
    DEFAULT_UPLOAD_TIMEOUT_SECONDS,
    MAX_UPLOAD_TEST_BYTES,
    UPLOAD_TEST_KEY_PREFIX,
)
from ...utils.errors import ResourceLimitError, UploadTimeoutError
from ...utils.units import parse_file_size
from .models import BucketMetadata, UploadSpeedTestConfig, UploadTestResult


class CloudProvider(Protocol):
    """Protocol defining the storage checks every cloud adapter offers."""

    name: str

    def upload_test(self, config: UploadSpeedTestConfig, bucket: str) -> UploadTestResult:
        """Upload a synthetic object and measure throughput."""
        ...

    def get_bucket_metadata(self, bucket: str) -> BucketMetadata:
        """Read the encryption and versioning state of a bucket."""
        ...

    def close(self) -> None:
        """Release the SDK client and its connection pool."""
        ...


def prepare_upload_test(config: UploadSpeedTestConfig) -> tuple[int, float]:
    """Validate an upload test request before any network call.

    Returns:
        Tuple of (payload size in bytes, timeout in seconds)

    Raises:
        ValueError: If the file size cannot be parsed
        ResourceLimitError: If the file size exceeds the in-memory payload cap
    """
    try:
        size = parse_file_size(config.file_size)
    except ValueError as e:
        raise ValueError(f"invalid file size: {e}") from e

    if size > MAX_UPLOAD_TEST_BYTES:
        raise ResourceLimitError(
            f"test file size {size} exceeds max allowed {MAX_UPLOAD_TEST_BYTES // (1024 * 1024)}MB"
        )

    timeout = config.timeout or DEFAULT_UPLOAD_TIMEOUT_SECONDS
    return size, timeout


def generate_payload(size: int) -> bytes:
    """Synthetic payload of exactly ``size`` bytes."""
    return b"0" * size


def upload_test_key() -> str:
    """Object key that is unique per upload."""
    return f"{UPLOAD_TEST_KEY_PREFIX}-{time.time_ns()}"


def compute_speed_mbps(num_bytes: int, duration_seconds: float) -> float:
    """Throughput in megabits per second."""
    if duration_seconds <= 0:
        return 0.0
    return (num_bytes * 8) / duration_seconds / 1_000_000


class DeadlineReader(io.BytesIO):
    """In-memory upload body that fails reads once the overall deadline passes.

    SDKs pull the body through ``read``/``readinto`` while sending, so a slow
    but steady transfer is cut off even when every socket operation stays
    under its own timeout.
    """

    def __init__(self, payload: bytes, timeout: float) -> None:
        super().__init__(payload)
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout
        self.expired = False

    def check_deadline(self) -> None:
        if time.monotonic() > self.deadline:
            self.expired = True
            raise UploadTimeoutError(f"upload exceeded its {self.timeout}s deadline")

    def read(self, size: int | None = -1) -> bytes:
        self.check_deadline()
        return super().read(size)

    def read1(self, size: int | None = -1) -> bytes:
        self.check_deadline()
        return super().read1(size)

    def readinto(self, buffer: Any) -> int:
        self.check_deadline()
        return super().readinto(buffer)


def timed_upload(upload: Callable[[DeadlineReader], Any], payload: bytes, timeout: float) -> float:
    """Run ``upload`` with a deadline-bound body and return its duration in seconds.

    Raises:
        UploadTimeoutError: If the whole upload does not finish within ``timeout``,
            including when the SDK wraps the read failure in its own error
    """
    body = DeadlineReader(payload, timeout)
    start = time.monotonic()
    try:
        upload(body)
    except UploadTimeoutError:
        raise
    except Exception as e:
        if body.expired:
            raise UploadTimeoutError(f"upload exceeded its {timeout}s deadline") from e
        raise
    duration = time.monotonic() - start

    if duration > timeout:
        raise UploadTimeoutError(f"upload took {duration:.3f}s, over its {timeout}s deadline")
    return duration
