"""Builders for S3 provider instances."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import boto3
from botocore.exceptions import BotoCoreError

from .. import metrics
from ..config import InventoryConfig
from ..models.bucket import BucketRecord
from ..services.aws.client import AWSProvider
from ..services.s3.base import S3Provider
from ..utils.errors import ClientConstructionError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, InventoryConfig], S3Provider]


def create_session_provider(
    session: boto3.session.Session,
    config: InventoryConfig,
) -> AWSProvider:
    """Create the provider used for account-wide calls.

    Args:
        session: Authenticated boto3 session supplied by the caller
        config: Inventory configuration

    Returns:
        Provider bound to the session's own region

    Raises:
        ClientConstructionError: If the client cannot be built
    """
    try:
        return AWSProvider.from_session(
            session,
            region=session.region_name,
            endpoint_url=config.endpoint_url,
            config=config.boto_config(),
        )
    except (BotoCoreError, ValueError) as e:
        raise ClientConstructionError(session.region_name, str(e)) from e


def create_regional_provider(
    region: str,
    config: InventoryConfig,
    session: boto3.session.Session | None = None,
) -> AWSProvider:
    """Create a provider bound to one region.

    With a configured credential profile a fresh session is opened for that
    profile. Otherwise the client is built from ``session``, the caller's
    session, so regional calls run as the identity that listed the buckets.
    Without either, the default credential chain applies.

    Args:
        region: Region to bind the client to
        config: Inventory configuration carrying the profile selector
        session: Caller's session, used when no profile is configured

    Returns:
        Provider for the region

    Raises:
        ClientConstructionError: If the profile or region cannot be used
    """
    try:
        if config.profile is not None or session is None:
            session = boto3.session.Session(profile_name=config.profile, region_name=region)
        return AWSProvider.from_session(
            session,
            region=region,
            endpoint_url=config.endpoint_url,
            config=config.boto_config(),
        )
    except (BotoCoreError, ValueError) as e:
        raise ClientConstructionError(region, str(e)) from e


def build_regional_providers(
    buckets: Iterable[BucketRecord],
    config: InventoryConfig,
    factory: ProviderFactory = create_regional_provider,
) -> dict[str, S3Provider]:
    """Build one provider per distinct bucket region.

    Buckets are walked in order; a provider is constructed the first time a
    region is seen and reused for every later bucket of that region.

    Args:
        buckets: Buckets with resolved regions
        config: Inventory configuration
        factory: Callable building a provider for a region

    Returns:
        Mapping of region to provider

    Raises:
        ClientConstructionError: If a bucket has no region or a provider
            cannot be built; no partial mapping is returned
    """
    providers: dict[str, S3Provider] = {}
    for bucket in buckets:
        region = bucket.region
        if not region:
            raise ClientConstructionError(region, f"bucket {bucket.name} has no resolved region")
        if region in providers:
            continue
        providers[region] = factory(region, config)
        metrics.regional_clients_built_total.inc()
        logger.debug(f"Built S3 client for region {region}")
    return providers
