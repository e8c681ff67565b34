"""Base S3 provider interface."""

from __future__ import annotations

from typing import Protocol

from ...models.bucket import BucketRecord, EncryptionConfig, LoggingConfig


class S3Provider(Protocol):
    """Read-only S3 operations needed by an inventory pass.

    Implementations translate provider failures into
    :class:`~s3_inventory.utils.errors.InventoryError` subclasses and report
    "not configured" answers as ``None``.
    """

    region: str | None

    def list_buckets(self) -> list[BucketRecord]:
        """List all buckets visible to the account, in listing order."""
        ...

    def get_bucket_region(self, name: str) -> str | None:
        """Get the raw location constraint of a bucket."""
        ...

    def get_bucket_policy(self, name: str) -> str | None:
        """Get the raw policy JSON text, None if no policy is set."""
        ...

    def get_bucket_encryption(self, name: str) -> EncryptionConfig | None:
        """Get default encryption, None if no configuration is found."""
        ...

    def get_bucket_logging(self, name: str) -> LoggingConfig | None:
        """Get access logging, None if logging is disabled."""
        ...
