"""Parsing of human readable file sizes and durations."""

from __future__ import annotations

import re

_UNITS = {
    "": 1,
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "KIB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "MIB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
    "GIB": 1024**3,
    "T": 1024**4,
    "TB": 1024**4,
    "TIB": 1024**4,
}

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")


def parse_file_size(size: str) -> int:
    """Parse a size such as ``"10MB"``, ``"1.5GiB"`` or ``"2048"`` into bytes.

    Units are binary: ``KB`` and ``KiB`` both mean 1024 bytes.

    Raises:
        ValueError: If the size string is empty, malformed or uses an unknown unit
    """
    match = _SIZE_RE.match(size or "")
    if not match:
        raise ValueError(f"invalid file size {size!r}")

    number, unit = match.groups()
    multiplier = _UNITS.get(unit.upper())
    if multiplier is None:
        raise ValueError(f"unknown size unit {unit!r} in {size!r}")

    return int(float(number) * multiplier)


_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: str | float | int | None) -> float | None:
    """Parse a Kubernetes style duration (``"30s"``, ``"1m30s"``, ``"500ms"``) into seconds.

    Numbers are taken as seconds. None and empty strings return None.

    Raises:
        ValueError: If the duration is malformed
    """
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = value.strip()
    parts = _DURATION_PART_RE.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"invalid duration {value!r}")
    return sum(float(number) * _DURATION_SECONDS[unit] for number, unit in parts)
