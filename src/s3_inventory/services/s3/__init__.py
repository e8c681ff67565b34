"""S3 provider interface."""

from .base import S3Provider

__all__ = ["S3Provider"]
