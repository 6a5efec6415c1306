"""Cloud storage adapters used by DataProtectionTest."""

from .base import CloudProvider
from .models import BucketMetadata, UploadSpeedTestConfig, UploadTestResult

__all__ = [
    "BucketMetadata",
    "CloudProvider",
    "UploadSpeedTestConfig",
    "UploadTestResult",
]
