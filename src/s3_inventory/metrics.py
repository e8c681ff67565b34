"""Prometheus metrics for the S3 inventory."""

from prometheus_client import Counter, Histogram

# Provider API call metrics
api_call_total = Counter(
    "s3_inventory_api_call_total",
    "Total number of S3 API calls",
    ["operation", "result"],
)

api_call_duration_seconds = Histogram(
    "s3_inventory_api_call_duration_seconds",
    "Duration of S3 API calls in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Phase metrics
phase_total = Counter(
    "s3_inventory_phase_total",
    "Total number of inventory phases run",
    ["phase", "result"],
)

phase_duration_seconds = Histogram(
    "s3_inventory_phase_duration_seconds",
    "Duration of inventory phases in seconds",
    ["phase"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Inventory results
regional_clients_built_total = Counter(
    "s3_inventory_regional_clients_built_total",
    "Total number of regional S3 clients constructed",
)

buckets_inventoried_total = Counter(
    "s3_inventory_buckets_inventoried_total",
    "Total number of buckets fully inventoried",
)

policy_diagnostics_total = Counter(
    "s3_inventory_policy_diagnostics_total",
    "Total number of soft diagnostics raised while decoding bucket policies",
)
