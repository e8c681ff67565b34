"""Concurrent inventory of S3 buckets and their policy, encryption and logging."""

from .config import InventoryConfig
from .inventory import load_inventory, load_inventory_async
from .models import (
    BucketRecord,
    EncryptionConfig,
    LoggingConfig,
    PolicyDocument,
    Statement,
    TypedPrincipal,
    WildcardPrincipal,
    parse_policy,
)
from .utils.errors import (
    BucketFetchError,
    BucketPolicyError,
    ClientConstructionError,
    InventoryError,
    InventoryErrorGroup,
    MalformedDocumentError,
    TransportError,
)

__version__ = "0.1.0"

__all__ = [
    "InventoryConfig",
    "load_inventory",
    "load_inventory_async",
    "BucketRecord",
    "EncryptionConfig",
    "LoggingConfig",
    "PolicyDocument",
    "Statement",
    "TypedPrincipal",
    "WildcardPrincipal",
    "parse_policy",
    "InventoryError",
    "TransportError",
    "BucketFetchError",
    "MalformedDocumentError",
    "BucketPolicyError",
    "ClientConstructionError",
    "InventoryErrorGroup",
]
