"""Bucket inventory loading."""

from __future__ import annotations

from ..constants import PHASE_LIST
from ..models.bucket import BucketRecord
from ..services.s3.base import S3Provider
from ..utils.errors import InventoryError, TransportError
from .fanout import PhaseRunner, observe_phase


async def load_bucket_records(provider: S3Provider, runner: PhaseRunner) -> list[BucketRecord]:
    """List every bucket visible to the account.

    Args:
        provider: Provider bound to the caller's session
        runner: Runner of the current pass

    Returns:
        One fresh record per bucket, in listing order

    Raises:
        TransportError: If the listing call fails
    """
    with observe_phase(PHASE_LIST):
        try:
            return await runner.call(provider.list_buckets)
        except InventoryError:
            raise
        except Exception as e:
            raise TransportError(f"Failed to list buckets: {e}") from e
