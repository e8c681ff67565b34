"""Bucket region resolution."""

from __future__ import annotations

from ..constants import ATTR_REGION, DEFAULT_REGION, LEGACY_REGION_ALIASES, PHASE_REGIONS
from ..models.bucket import BucketRecord
from ..services.s3.base import S3Provider
from .fanout import PhaseRunner, observe_phase


def normalize_region(location: str | None, default_region: str = DEFAULT_REGION) -> str:
    """Turn a location constraint into a region name.

    Buckets in the default region report no location constraint at all, and
    some old buckets report the legacy ``EU`` constraint.
    """
    if not location:
        return default_region
    return LEGACY_REGION_ALIASES.get(location, location)


async def _resolve(
    bucket: BucketRecord,
    provider: S3Provider,
    runner: PhaseRunner,
    default_region: str,
) -> None:
    location = await runner.fetch(bucket.name, ATTR_REGION, provider.get_bucket_region, bucket.name)
    bucket.assign_region(normalize_region(location, default_region))


async def resolve_regions(
    provider: S3Provider,
    buckets: list[BucketRecord],
    runner: PhaseRunner,
    default_region: str = DEFAULT_REGION,
) -> int:
    """Resolve the home region of every bucket concurrently.

    One task per bucket; the first failure aborts the phase.

    Returns:
        Number of completed lookups, equal to ``len(buckets)``
    """
    with observe_phase(PHASE_REGIONS, buckets=len(buckets)):
        return await runner.run(
            PHASE_REGIONS,
            (_resolve(bucket, provider, runner, default_region) for bucket in buckets),
        )
