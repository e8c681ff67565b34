"""AWS S3 client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, TypeVar

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import ERROR_CODE_NO_ENCRYPTION, ERROR_CODE_NO_POLICY
from ...models.bucket import BucketRecord, EncryptionConfig, LoggingConfig
from ...utils.errors import BucketFetchError, TransportError, sanitize_exception

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def error_code(error: ClientError) -> str:
    """Extract the provider error code of a ClientError."""
    return error.response.get("Error", {}).get("Code", "")


class AWSProvider:
    """AWS S3 provider implementation."""

    def __init__(self, client: Any, region: str | None = None) -> None:
        """Initialize AWS S3 provider.

        Args:
            client: boto3 S3 client
            region: Region the client is bound to (None for the session default)
        """
        self.client = client
        self.region = region

    @classmethod
    def from_session(
        cls,
        session: boto3.session.Session,
        region: str | None = None,
        endpoint_url: str | None = None,
        config: Config | None = None,
    ) -> AWSProvider:
        """Build a provider from an authenticated session.

        Args:
            session: boto3 session holding the credentials
            region: Region to bind the client to
            endpoint_url: Optional S3-compatible endpoint
            config: Optional botocore client configuration

        Returns:
            Provider wrapping a new S3 client
        """
        client = session.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            config=config,
        )
        return cls(client, region=region)

    def _timed(self, operation: str, call: Callable[[], _T]) -> _T:
        start_time = time.monotonic()
        try:
            return call()
        finally:
            metrics.api_call_duration_seconds.labels(operation=operation).observe(
                time.monotonic() - start_time
            )

    def _list_bucket_pages(self) -> list[dict[str, Any]]:
        paginator = self.client.get_paginator("list_buckets")
        buckets: list[dict[str, Any]] = []
        for page in paginator.paginate():
            buckets.extend(page.get("Buckets", []))
        return buckets

    def list_buckets(self) -> list[BucketRecord]:
        """List all buckets, following continuation tokens across pages."""
        try:
            entries = self._timed("list_buckets", self._list_bucket_pages)
        except (ClientError, BotoCoreError) as e:
            metrics.api_call_total.labels(operation="list_buckets", result="error").inc()
            logger.error(f"Failed to list buckets: {sanitize_exception(e)}")
            raise TransportError(f"Failed to list buckets: {e}") from e

        metrics.api_call_total.labels(operation="list_buckets", result="success").inc()
        return [
            BucketRecord(name=bucket["Name"], creation_date=bucket.get("CreationDate"))
            for bucket in entries
        ]

    def get_bucket_region(self, name: str) -> str | None:
        """Get bucket location constraint.

        Returns:
            Location constraint as reported; None or "" for the default region
        """
        try:
            response = self._timed(
                "get_bucket_location", lambda: self.client.get_bucket_location(Bucket=name)
            )
        except (ClientError, BotoCoreError) as e:
            metrics.api_call_total.labels(operation="get_bucket_location", result="error").inc()
            logger.error(f"Failed to get location for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "region", str(e)) from e

        metrics.api_call_total.labels(operation="get_bucket_location", result="success").inc()
        return response.get("LocationConstraint")

    def get_bucket_policy(self, name: str) -> str | None:
        """Get bucket policy.

        Returns:
            Raw policy JSON if a policy exists, None if no policy is set
        """
        try:
            response = self._timed(
                "get_bucket_policy", lambda: self.client.get_bucket_policy(Bucket=name)
            )
        except ClientError as e:
            # No policy configured - return None
            if error_code(e) == ERROR_CODE_NO_POLICY:
                metrics.api_call_total.labels(operation="get_bucket_policy", result="absent").inc()
                return None
            metrics.api_call_total.labels(operation="get_bucket_policy", result="error").inc()
            logger.error(f"Failed to get policy for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "policy", str(e)) from e
        except BotoCoreError as e:
            metrics.api_call_total.labels(operation="get_bucket_policy", result="error").inc()
            logger.error(f"Failed to get policy for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "policy", str(e)) from e

        metrics.api_call_total.labels(operation="get_bucket_policy", result="success").inc()
        return response.get("Policy")

    def get_bucket_encryption(self, name: str) -> EncryptionConfig | None:
        """Get bucket encryption configuration.

        Returns:
            Encryption configuration, None if none is configured
        """
        try:
            response = self._timed(
                "get_bucket_encryption", lambda: self.client.get_bucket_encryption(Bucket=name)
            )
        except ClientError as e:
            # Encryption not configured
            if error_code(e) == ERROR_CODE_NO_ENCRYPTION:
                metrics.api_call_total.labels(
                    operation="get_bucket_encryption", result="absent"
                ).inc()
                return None
            metrics.api_call_total.labels(operation="get_bucket_encryption", result="error").inc()
            logger.error(f"Failed to get encryption for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "encryption", str(e)) from e
        except BotoCoreError as e:
            metrics.api_call_total.labels(operation="get_bucket_encryption", result="error").inc()
            logger.error(f"Failed to get encryption for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "encryption", str(e)) from e

        metrics.api_call_total.labels(operation="get_bucket_encryption", result="success").inc()
        configuration = response.get("ServerSideEncryptionConfiguration")
        if configuration is None:
            return None
        return EncryptionConfig.from_response(configuration)

    def get_bucket_logging(self, name: str) -> LoggingConfig | None:
        """Get bucket access logging configuration.

        Returns:
            Logging configuration, None when access logging is disabled
        """
        try:
            response = self._timed(
                "get_bucket_logging", lambda: self.client.get_bucket_logging(Bucket=name)
            )
        except (ClientError, BotoCoreError) as e:
            metrics.api_call_total.labels(operation="get_bucket_logging", result="error").inc()
            logger.error(f"Failed to get logging for bucket {name}: {sanitize_exception(e)}")
            raise BucketFetchError(name, "logging", str(e)) from e

        logging_enabled = response.get("LoggingEnabled")
        if logging_enabled is None:
            metrics.api_call_total.labels(operation="get_bucket_logging", result="absent").inc()
            return None
        metrics.api_call_total.labels(operation="get_bucket_logging", result="success").inc()
        return LoggingConfig.from_response(logging_enabled)
