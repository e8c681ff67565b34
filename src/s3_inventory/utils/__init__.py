"""Utility functions for the S3 inventory."""

from .context import get_context_dict, get_run_id, new_run_id, with_run_id
from .errors import (
    BucketFetchError,
    BucketPolicyError,
    ClientConstructionError,
    FieldAlreadyAssignedError,
    InventoryError,
    InventoryErrorGroup,
    MalformedDocumentError,
    TransportError,
    sanitize_error_message,
    sanitize_exception,
)

__all__ = [
    "InventoryError",
    "TransportError",
    "BucketFetchError",
    "MalformedDocumentError",
    "BucketPolicyError",
    "ClientConstructionError",
    "FieldAlreadyAssignedError",
    "InventoryErrorGroup",
    "sanitize_error_message",
    "sanitize_exception",
    "new_run_id",
    "get_run_id",
    "with_run_id",
    "get_context_dict",
]
