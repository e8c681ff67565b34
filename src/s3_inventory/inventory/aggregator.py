"""Inventory orchestration."""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor

import boto3

from .. import metrics
from ..builders.provider import (
    ProviderFactory,
    build_regional_providers,
    create_regional_provider,
    create_session_provider,
)
from ..config import InventoryConfig
from ..constants import PHASE_CLIENTS
from ..models.bucket import BucketRecord
from ..services.s3.base import S3Provider
from ..tracing import add_span_attribute, trace_span
from ..utils.context import with_run_id
from .fanout import PhaseRunner, observe_phase
from .loader import load_bucket_records
from .metadata import fetch_metadata
from .regions import resolve_regions

logger = logging.getLogger(__name__)


async def load_inventory_async(
    session: boto3.session.Session | None,
    config: InventoryConfig | None = None,
    *,
    provider: S3Provider | None = None,
    provider_factory: ProviderFactory | None = None,
) -> list[BucketRecord]:
    """Inventory every bucket of the account.

    Lists the buckets, resolves their regions, builds one client per region
    and fetches policy, encryption and logging for each bucket. Client
    construction runs on the pass executor, never on the event loop.

    Args:
        session: Authenticated boto3 session (may be None when ``provider`` is given)
        config: Inventory configuration (defaults apply when omitted)
        provider: Provider for account-wide calls, built from ``session`` when omitted
        provider_factory: Builds the provider of one region; by default regional
            clients come from ``config.profile``, or from ``session`` when no
            profile is configured

    Returns:
        Fully populated bucket records, in listing order

    Raises:
        InventoryError: The first fatal failure; no partial result is returned
    """
    config = config or InventoryConfig()
    if provider is None and session is None:
        raise ValueError("either session or provider is required")
    factory = provider_factory or functools.partial(create_regional_provider, session=session)

    with with_run_id() as run_id, trace_span("inventory", attributes={"inventory.run_id": run_id}):
        executor = ThreadPoolExecutor(
            max_workers=config.max_workers, thread_name_prefix="s3-inventory"
        )
        runner = PhaseRunner(executor, fail_fast=config.fail_fast)
        try:
            if provider is None:
                provider = await runner.call(create_session_provider, session, config)

            buckets = await load_bucket_records(provider, runner)
            await resolve_regions(provider, buckets, runner, config.default_region)

            with observe_phase(PHASE_CLIENTS, buckets=len(buckets)):
                providers = await runner.call(build_regional_providers, buckets, config, factory)

            await fetch_metadata(buckets, providers, runner)
        finally:
            # Calls abandoned by an aborted phase may still be running
            await asyncio.to_thread(executor.shutdown, wait=True, cancel_futures=True)

        add_span_attribute("inventory.buckets", len(buckets))
        add_span_attribute("inventory.regions", len(providers))

    metrics.buckets_inventoried_total.inc(len(buckets))
    logger.info(f"Inventoried {len(buckets)} buckets across {len(providers)} regions")
    return buckets


def load_inventory(
    session: boto3.session.Session | None,
    config: InventoryConfig | None = None,
    *,
    provider: S3Provider | None = None,
    provider_factory: ProviderFactory | None = None,
) -> list[BucketRecord]:
    """Synchronous wrapper around :func:`load_inventory_async`."""
    return asyncio.run(
        load_inventory_async(
            session,
            config,
            provider=provider,
            provider_factory=provider_factory,
        )
    )
