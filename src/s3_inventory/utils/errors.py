"""Inventory error types and error sanitization utilities."""

from __future__ import annotations

import re
from typing import Sequence


class InventoryError(Exception):
    """Base class for every failure raised by an inventory pass."""


class TransportError(InventoryError):
    """A provider call failed for a reason other than a known absence."""


class BucketFetchError(TransportError):
    """Fetching one attribute of one bucket failed."""

    def __init__(self, bucket: str, attribute: str, message: str) -> None:
        self.bucket = bucket
        self.attribute = attribute
        super().__init__(f"Bucket {bucket}: failed to fetch {attribute}: {message}")


class MalformedDocumentError(InventoryError):
    """A policy document does not match the expected structure."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class BucketPolicyError(MalformedDocumentError):
    """The policy attached to a bucket could not be decoded."""

    def __init__(self, bucket: str, field: str, message: str) -> None:
        super().__init__(field, message)
        self.bucket = bucket

    def __str__(self) -> str:
        return f"Bucket {self.bucket}: malformed policy: {self.field}: {self.message}"


class ClientConstructionError(InventoryError):
    """A client for a region could not be built."""

    def __init__(self, region: str | None, message: str) -> None:
        self.region = region
        super().__init__(f"Failed to build S3 client for region {region}: {message}")


class FieldAlreadyAssignedError(InventoryError):
    """A bucket field was written a second time."""

    def __init__(self, bucket: str, field: str) -> None:
        self.bucket = bucket
        self.field = field
        super().__init__(f"Bucket {bucket}: field {field} already assigned")


class InventoryErrorGroup(InventoryError):
    """All failures of a phase, raised when fail-fast is disabled."""

    def __init__(self, phase: str, errors: Sequence[BaseException]) -> None:
        self.phase = phase
        self.errors = tuple(errors)
        super().__init__(f"{phase} failed with {len(self.errors)} error(s): {self.errors[0]}")

    @property
    def first(self) -> BaseException:
        """First failure observed by the phase."""
        return self.errors[0]


# Patterns that might expose credentials
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:\s]+([A-Z0-9]{20})",
    r"secret[_\s]?access[_\s]?key[:\s]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:\s]+([A-Za-z0-9/+=]+)",
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "access_key_id",
    "secret_access_key",
    "session_token",
    "password",
    "secret",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with credentials redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, "[REDACTED]", sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=\s]+([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))
