"""Structured fan-out/fan-in of inventory tasks.

Every phase runs its tasks inside one :class:`asyncio.TaskGroup`. In fail-fast
mode the first failing task aborts the group: the remaining tasks are
cancelled and awaited before the failure is raised, so no task of a phase
outlives the phase. A cancelled task never reaches the point where it writes
its bucket field.

Blocking provider calls run on an executor owned by the inventory pass. A
call already running in a worker thread cannot be interrupted; its result is
dropped, and the pass shuts the executor down (waiting) before returning.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from concurrent.futures import Executor
from contextlib import contextmanager
from typing import Any, Callable, Coroutine, Iterable, Iterator, TypeVar

from .. import metrics
from ..logging import log_bucket_event
from ..tracing import trace_span
from ..utils.errors import BucketFetchError, InventoryError, InventoryErrorGroup

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


@contextmanager
def observe_phase(phase: str, **attributes: Any) -> Iterator[None]:
    """Trace, time and log one inventory phase."""
    start_time = time.monotonic()
    log_bucket_event(logger, phase, None, "started", f"{phase} started", **attributes)
    with trace_span(phase, attributes={f"inventory.{k}": v for k, v in attributes.items()}):
        try:
            yield
        except BaseException as e:
            metrics.phase_total.labels(phase=phase, result="error").inc()
            log_bucket_event(
                logger,
                phase,
                getattr(e, "bucket", None),
                "failed",
                f"{phase} failed: {e}",
                level=logging.ERROR,
            )
            raise
        finally:
            metrics.phase_duration_seconds.labels(phase=phase).observe(
                time.monotonic() - start_time
            )
    metrics.phase_total.labels(phase=phase, result="success").inc()
    log_bucket_event(logger, phase, None, "completed", f"{phase} completed")


class _FanIn:
    """Counts completions and collects failures of one phase."""

    def __init__(self, fail_fast: bool) -> None:
        self.fail_fast = fail_fast
        self.completed = 0
        self.errors: list[Exception] = []

    async def track(self, job: Coroutine[Any, Any, None]) -> None:
        try:
            await job
        except Exception as e:
            self.errors.append(e)
            if self.fail_fast:
                raise
            return
        self.completed += 1


class PhaseRunner:
    """Runs the concurrent phases of one inventory pass."""

    def __init__(self, executor: Executor, fail_fast: bool = True) -> None:
        """Initialize the runner.

        Args:
            executor: Executor for blocking provider calls
            fail_fast: Abort a phase on its first failure
        """
        self.executor = executor
        self.fail_fast = fail_fast

    async def call(self, func: Callable[..., _T], *args: Any) -> _T:
        """Run a blocking call on the pass executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(func, *args))

    async def fetch(
        self, bucket: str, attribute: str, func: Callable[..., _T], *args: Any
    ) -> _T:
        """Run a per-bucket provider call, tagging unexpected failures with the bucket."""
        try:
            return await self.call(func, *args)
        except InventoryError:
            raise
        except Exception as e:
            raise BucketFetchError(bucket, attribute, str(e)) from e

    async def run(self, phase: str, jobs: Iterable[Coroutine[Any, Any, None]]) -> int:
        """Run jobs concurrently and wait for all of them or the first failure.

        Args:
            phase: Phase name used for metrics, logs and errors
            jobs: Coroutines to run, one task each

        Returns:
            Number of completion signals observed (one per job on success)

        Raises:
            InventoryError: The first failure in fail-fast mode
            InventoryErrorGroup: Every failure, when fail-fast is disabled
        """
        fan_in = _FanIn(self.fail_fast)
        scheduled = 0
        try:
            async with asyncio.TaskGroup() as group:
                for job in jobs:
                    group.create_task(fan_in.track(job))
                    scheduled += 1
        except BaseExceptionGroup:
            if not fan_in.errors:
                raise
            logger.debug(
                f"{phase}: aborted after {fan_in.completed}/{scheduled} completions"
            )
            raise fan_in.errors[0]

        if fan_in.errors:
            raise InventoryErrorGroup(phase, fan_in.errors)

        logger.debug(f"{phase}: {fan_in.completed}/{scheduled} completions")
        return fan_in.completed
