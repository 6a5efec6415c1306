"""Operator error types and sanitization utilities to prevent information leakage."""

import re


class OperatorError(Exception):
    """Base class for errors raised by the operator."""


class PreconditionError(OperatorError, ValueError):
    """Required input is missing; raised before any write is attempted."""


class ResourceLimitError(OperatorError, ValueError):
    """Requested work exceeds a hard resource cap; raised before any I/O."""


class SecretWaitError(OperatorError):
    """A written secret could not be observed through the read path."""

    def __init__(self, message: str, namespace: str, name: str) -> None:
        super().__init__(message)
        self.namespace = namespace
        self.name = name


class SecretWaitTimeoutError(SecretWaitError, TimeoutError):
    """The secret did not become visible before the deadline."""


class SecretWaitCancelledError(SecretWaitError):
    """The caller cancelled the wait before the secret became visible."""


class UploadTimeoutError(OperatorError, TimeoutError):
    """An upload speed test exceeded its timeout."""


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"arn:aws:iam::\d+:role/([a-zA-Z0-9\-_/+=,.@]+)",
    r"client[_\s]?id[:=\s]+([a-zA-Z0-9\-]+)",
    r"tenant[_\s]?id[:=\s]+([a-zA-Z0-9\-]+)",
    r"subscription[_\s]?id[:=\s]+([a-zA-Z0-9\-]+)",
    r"access[_\s]?key[_\s]?id[:\s]+([A-Z0-9]{20})",
    r"secret[_\s]?access[_\s]?key[:\s]+([A-Za-z0-9/+=]{40})",
    r"account[_\s]?key[:=\s]+([A-Za-z0-9/+=]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "client_secret",
    "account_key",
    "password",
    "credentials",
    "token",
}


def _redact_group(match: re.Match[str]) -> str:
    """Replace only the captured value of a match."""
    offset = match.start()
    start, end = match.span(1)
    text = match.group(0)
    return text[: start - offset] + "[REDACTED]" + text[end - offset :]


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, _redact_group, sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=\s]+([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message."""
    return sanitize_error_message(str(error))
