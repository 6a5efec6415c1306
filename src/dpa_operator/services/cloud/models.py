"""Data models for cloud storage checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple

from ...utils.units import parse_duration


@dataclass(frozen=True)
class UploadSpeedTestConfig:
    """Upload speed test settings from a DataProtectionTest spec."""

    file_size: str
    timeout: float | None = None

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> UploadSpeedTestConfig:
        return cls(
            file_size=str(spec.get("fileSize", "")),
            timeout=parse_duration(spec.get("timeout")),
        )


class UploadTestResult(NamedTuple):
    """Measured throughput and wall-clock duration of one upload."""

    speed_mbps: float
    duration_seconds: float


@dataclass(frozen=True)
class BucketMetadata:
    """Encryption and versioning state of a bucket or storage account."""

    encryption_algorithm: str
    versioning_status: str

    def to_status(self) -> dict[str, str]:
        return {
            "encryptionAlgorithm": self.encryption_algorithm,
            "versioningStatus": self.versioning_status,
        }
