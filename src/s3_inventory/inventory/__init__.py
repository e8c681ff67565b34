"""Inventory phases and orchestration."""

from .aggregator import load_inventory, load_inventory_async
from .fanout import PhaseRunner
from .loader import load_bucket_records
from .metadata import fetch_metadata
from .regions import normalize_region, resolve_regions

__all__ = [
    "PhaseRunner",
    "fetch_metadata",
    "load_bucket_records",
    "load_inventory",
    "load_inventory_async",
    "normalize_region",
    "resolve_regions",
]
