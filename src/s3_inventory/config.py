"""Configuration for an inventory pass."""

from __future__ import annotations

import os
from dataclasses import dataclass

from botocore.config import Config

from .constants import DEFAULT_MAX_POOL_CONNECTIONS, DEFAULT_MAX_WORKERS, DEFAULT_REGION

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class InventoryConfig:
    """Settings for one inventory pass.

    Attributes:
        profile: Named credential profile used to build regional clients; when
            unset, regional clients reuse the caller's session
        default_region: Region assumed when the provider reports none
        endpoint_url: Optional S3-compatible endpoint override
        max_workers: Threads available for blocking S3 calls
        max_pool_connections: Connection pool size of each S3 client
        fail_fast: Abort a phase on its first failure; when False, every task
            runs and all failures are raised together
    """

    profile: str | None = None
    default_region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    max_workers: int = DEFAULT_MAX_WORKERS
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS
    fail_fast: bool = True

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.max_pool_connections < 1:
            raise ValueError(
                f"max_pool_connections must be at least 1, got {self.max_pool_connections}"
            )
        if not self.default_region:
            raise ValueError("default_region must not be empty")

    @classmethod
    def from_env(cls) -> InventoryConfig:
        """Build a configuration from environment variables.

        Environment Variables:
            S3_INVENTORY_PROFILE: Credential profile (falls back to AWS_PROFILE)
            S3_INVENTORY_DEFAULT_REGION: Region for buckets without a location constraint
            S3_INVENTORY_ENDPOINT_URL: S3 endpoint override
            S3_INVENTORY_MAX_WORKERS: Worker threads (default: 32)
            S3_INVENTORY_MAX_POOL_CONNECTIONS: Connections per client (default: 50)
            S3_INVENTORY_FAIL_FAST: Stop at the first failure (default: true)
        """
        return cls(
            profile=os.getenv("S3_INVENTORY_PROFILE") or os.getenv("AWS_PROFILE") or None,
            default_region=os.getenv("S3_INVENTORY_DEFAULT_REGION") or DEFAULT_REGION,
            endpoint_url=os.getenv("S3_INVENTORY_ENDPOINT_URL") or None,
            max_workers=_env_int("S3_INVENTORY_MAX_WORKERS", DEFAULT_MAX_WORKERS),
            max_pool_connections=_env_int(
                "S3_INVENTORY_MAX_POOL_CONNECTIONS", DEFAULT_MAX_POOL_CONNECTIONS
            ),
            fail_fast=_env_bool("S3_INVENTORY_FAIL_FAST", True),
        )

    def boto_config(self) -> Config:
        """botocore client configuration shared by every S3 client of the pass."""
        return Config(
            signature_version="s3v4",
            max_pool_connections=self.max_pool_connections,
        )
