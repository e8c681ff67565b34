"""AWS-backed S3 provider."""

from .client import AWSProvider

__all__ = ["AWSProvider"]
