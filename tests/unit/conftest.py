"""Shared fixtures for unit tests."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterator

import pytest

from s3_inventory.inventory.fanout import PhaseRunner
from s3_inventory.models.bucket import BucketRecord, EncryptionConfig, LoggingConfig


class FakeProvider:
    """In-memory provider keyed by bucket name.

    ``errors`` maps ``(method, bucket)`` to the exception that call raises;
    ``delays`` maps the same keys to seconds slept before answering.
    """

    def __init__(
        self,
        buckets: list[str] | None = None,
        regions: dict[str, str | None] | None = None,
        policies: dict[str, str] | None = None,
        encryption: dict[str, EncryptionConfig] | None = None,
        logging: dict[str, LoggingConfig] | None = None,
        errors: dict[tuple[str, str], Exception] | None = None,
        delays: dict[tuple[str, str], float] | None = None,
        region: str | None = None,
    ) -> None:
        self.buckets = buckets or []
        self.regions = regions or {}
        self.policies = policies or {}
        self.encryption = encryption or {}
        self.logging = logging or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.region = region
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, method: str, bucket: str = "") -> None:
        with self._lock:
            self.calls.append((method, bucket))
        delay = self.delays.get((method, bucket))
        if delay:
            time.sleep(delay)
        error = self.errors.get((method, bucket))
        if error is not None:
            raise error

    def calls_to(self, method: str) -> list[str]:
        return [bucket for name, bucket in self.calls if name == method]

    def list_buckets(self) -> list[BucketRecord]:
        self._record("list_buckets")
        return [BucketRecord(name=name) for name in self.buckets]

    def get_bucket_region(self, name: str) -> str | None:
        self._record("get_bucket_region", name)
        return self.regions.get(name)

    def get_bucket_policy(self, name: str) -> str | None:
        self._record("get_bucket_policy", name)
        return self.policies.get(name)

    def get_bucket_encryption(self, name: str) -> EncryptionConfig | None:
        self._record("get_bucket_encryption", name)
        return self.encryption.get(name)

    def get_bucket_logging(self, name: str) -> LoggingConfig | None:
        self._record("get_bucket_logging", name)
        return self.logging.get(name)


class RecordingFactory:
    """Provider factory that hands out one shared fake and records regions."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider
        self.regions: list[str] = []

    def __call__(self, region: str, config: Any) -> Any:
        self.regions.append(region)
        return self.provider


@pytest.fixture
def executor() -> Iterator[ThreadPoolExecutor]:
    """Thread pool shut down after the test."""
    pool = ThreadPoolExecutor(max_workers=8)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def runner(executor: ThreadPoolExecutor) -> PhaseRunner:
    """Fail-fast phase runner."""
    return PhaseRunner(executor, fail_fast=True)


@pytest.fixture
def collecting_runner(executor: ThreadPoolExecutor) -> PhaseRunner:
    """Phase runner that lets every task finish."""
    return PhaseRunner(executor, fail_fast=False)
