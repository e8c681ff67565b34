"""Builders for the S3 inventory."""

from .provider import (
    build_regional_providers,
    create_regional_provider,
    create_session_provider,
)

__all__ = [
    "build_regional_providers",
    "create_regional_provider",
    "create_session_provider",
]
