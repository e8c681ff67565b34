"""Context propagation for inventory run identifiers."""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from typing import Any, Iterator

# Context variable for storing the current inventory run ID
run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar("run_id", default=None)


def new_run_id() -> str:
    """Generate a fresh run ID."""
    return uuid.uuid4().hex


def get_run_id() -> str | None:
    """Get the run ID from the current context.

    Returns:
        Run ID if set, None otherwise
    """
    return run_id.get()


@contextmanager
def with_run_id(value: str | None = None) -> Iterator[str]:
    """Context manager to set a run ID for the duration of a block.

    asyncio tasks created inside the block copy the context, so every
    task of the run sees the same ID.

    Args:
        value: Run ID to use (generated when omitted)

    Yields:
        The run ID
    """
    value = value or new_run_id()
    token = run_id.set(value)
    try:
        yield value
    finally:
        run_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get a dictionary of context values.

    Args:
        additional: Additional key-value pairs to include

    Returns:
        Dictionary with context values including run_id
    """
    ctx: dict[str, Any] = {}

    current = get_run_id()
    if current:
        ctx["run_id"] = current

    if additional:
        ctx.update(additional)

    return ctx
