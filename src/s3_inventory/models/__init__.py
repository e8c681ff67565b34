"""Domain models for the S3 inventory."""

from .bucket import BucketRecord, EncryptionConfig, EncryptionRule, LoggingConfig, LoggingGrant
from .policy import (
    Condition,
    PolicyDecodeResult,
    PolicyDocument,
    Principal,
    Statement,
    TypedPrincipal,
    WildcardPrincipal,
    decode_actions,
    decode_policy,
    decode_principal,
    parse_policy,
)

__all__ = [
    "BucketRecord",
    "EncryptionConfig",
    "EncryptionRule",
    "LoggingConfig",
    "LoggingGrant",
    "Condition",
    "PolicyDecodeResult",
    "PolicyDocument",
    "Principal",
    "Statement",
    "TypedPrincipal",
    "WildcardPrincipal",
    "decode_actions",
    "decode_policy",
    "decode_principal",
    "parse_policy",
]
