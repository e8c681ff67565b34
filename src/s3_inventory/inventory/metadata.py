"""Per-bucket metadata fetching."""

from __future__ import annotations

import logging
from typing import Mapping

from .. import metrics
from ..constants import ATTR_ENCRYPTION, ATTR_LOGGING, ATTR_POLICY, PHASE_METADATA
from ..logging import log_bucket_event
from ..models.bucket import BucketRecord
from ..models.policy import parse_policy
from ..services.s3.base import S3Provider
from ..utils.errors import BucketPolicyError, ClientConstructionError, MalformedDocumentError
from .fanout import PhaseRunner, observe_phase

logger = logging.getLogger(__name__)


async def fetch_policy(bucket: BucketRecord, provider: S3Provider, runner: PhaseRunner) -> None:
    """Fetch and decode the bucket policy."""
    text = await runner.fetch(bucket.name, ATTR_POLICY, provider.get_bucket_policy, bucket.name)
    if text is None:
        bucket.assign_policy(None)
        return

    try:
        result = parse_policy(text)
    except MalformedDocumentError as e:
        raise BucketPolicyError(bucket.name, e.field, e.message) from e

    for diagnostic in result.diagnostics:
        metrics.policy_diagnostics_total.inc()
        log_bucket_event(
            logger,
            PHASE_METADATA,
            bucket.name,
            "policy_diagnostic",
            diagnostic,
            level=logging.WARNING,
        )
    bucket.assign_policy(result.document, result.diagnostics)


async def fetch_encryption(bucket: BucketRecord, provider: S3Provider, runner: PhaseRunner) -> None:
    """Fetch the default encryption configuration."""
    encryption = await runner.fetch(
        bucket.name, ATTR_ENCRYPTION, provider.get_bucket_encryption, bucket.name
    )
    bucket.assign_encryption(encryption)


async def fetch_logging(bucket: BucketRecord, provider: S3Provider, runner: PhaseRunner) -> None:
    """Fetch the access logging configuration."""
    logging_config = await runner.fetch(
        bucket.name, ATTR_LOGGING, provider.get_bucket_logging, bucket.name
    )
    bucket.assign_logging(logging_config)


FETCHERS = (fetch_policy, fetch_encryption, fetch_logging)


async def fetch_metadata(
    buckets: list[BucketRecord],
    providers: Mapping[str, S3Provider],
    runner: PhaseRunner,
) -> int:
    """Fetch policy, encryption and logging of every bucket concurrently.

    Three tasks per bucket, each using the provider of the bucket's region;
    the first failure aborts the phase.

    Returns:
        Number of completed fetches, equal to ``3 * len(buckets)``

    Raises:
        ClientConstructionError: If a bucket's region has no provider
    """
    assignments = []
    for bucket in buckets:
        provider = providers.get(bucket.region) if bucket.region else None
        if provider is None:
            raise ClientConstructionError(
                bucket.region, f"no client available for bucket {bucket.name}"
            )
        assignments.append((bucket, provider))

    with observe_phase(PHASE_METADATA, buckets=len(buckets), regions=len(providers)):
        return await runner.run(
            PHASE_METADATA,
            (
                fetch(bucket, provider, runner)
                for bucket, provider in assignments
                for fetch in FETCHERS
            ),
        )
