"""Domain models for inventoried buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.errors import FieldAlreadyAssignedError
from .policy import PolicyDocument


@dataclass(frozen=True)
class EncryptionRule:
    """One default server-side-encryption rule."""

    sse_algorithm: str
    kms_master_key_id: str | None = None
    bucket_key_enabled: bool | None = None


@dataclass(frozen=True)
class EncryptionConfig:
    """Default server-side-encryption configuration of a bucket."""

    rules: tuple[EncryptionRule, ...] = ()

    @property
    def algorithm(self) -> str | None:
        """Algorithm of the first rule, if any."""
        return self.rules[0].sse_algorithm if self.rules else None

    @classmethod
    def from_response(cls, configuration: dict[str, Any]) -> EncryptionConfig:
        """Copy the needed fields out of a GetBucketEncryption configuration."""
        rules = []
        for rule in configuration.get("Rules", []):
            sse = rule.get("ApplyServerSideEncryptionByDefault", {})
            rules.append(
                EncryptionRule(
                    sse_algorithm=sse.get("SSEAlgorithm", ""),
                    kms_master_key_id=sse.get("KMSMasterKeyID"),
                    bucket_key_enabled=rule.get("BucketKeyEnabled"),
                )
            )
        return cls(rules=tuple(rules))


@dataclass(frozen=True)
class LoggingGrant:
    """Permission granted on delivered access logs."""

    permission: str
    grantee_type: str
    grantee_id: str | None = None
    display_name: str | None = None
    email_address: str | None = None
    uri: str | None = None


@dataclass(frozen=True)
class LoggingConfig:
    """Server access logging configuration of a bucket."""

    target_bucket: str
    target_prefix: str = ""
    target_grants: tuple[LoggingGrant, ...] = ()

    @classmethod
    def from_response(cls, logging_enabled: dict[str, Any]) -> LoggingConfig:
        """Copy the needed fields out of a GetBucketLogging ``LoggingEnabled`` block."""
        grants = []
        for grant in logging_enabled.get("TargetGrants", []):
            grantee = grant.get("Grantee", {})
            grants.append(
                LoggingGrant(
                    permission=grant.get("Permission", ""),
                    grantee_type=grantee.get("Type", ""),
                    grantee_id=grantee.get("ID"),
                    display_name=grantee.get("DisplayName"),
                    email_address=grantee.get("EmailAddress"),
                    uri=grantee.get("URI"),
                )
            )
        return cls(
            target_bucket=logging_enabled.get("TargetBucket", ""),
            target_prefix=logging_enabled.get("TargetPrefix", ""),
            target_grants=tuple(grants),
        )


@dataclass
class BucketRecord:
    """One discovered bucket and the metadata gathered for it.

    ``region``, ``policy``, ``encryption`` and ``logging`` are each written by
    exactly one task over the record's lifetime, through the ``assign_*``
    methods. Assigning ``None`` (absent) counts as that single write.
    """

    name: str
    creation_date: datetime | None = None
    region: str | None = field(default=None, init=False)
    policy: PolicyDocument | None = field(default=None, init=False)
    encryption: EncryptionConfig | None = field(default=None, init=False)
    logging: LoggingConfig | None = field(default=None, init=False)
    policy_diagnostics: tuple[str, ...] = field(default=(), init=False)
    _assigned: set[str] = field(default_factory=set, init=False, repr=False, compare=False)

    def _claim(self, field_name: str) -> None:
        if field_name in self._assigned:
            raise FieldAlreadyAssignedError(self.name, field_name)
        self._assigned.add(field_name)

    def is_assigned(self, field_name: str) -> bool:
        """Whether a write-once field has been written."""
        return field_name in self._assigned

    def assign_region(self, region: str) -> None:
        self._claim("region")
        self.region = region

    def assign_policy(
        self, policy: PolicyDocument | None, diagnostics: tuple[str, ...] = ()
    ) -> None:
        self._claim("policy")
        self.policy = policy
        self.policy_diagnostics = diagnostics

    def assign_encryption(self, encryption: EncryptionConfig | None) -> None:
        self._claim("encryption")
        self.encryption = encryption

    def assign_logging(self, logging: LoggingConfig | None) -> None:
        self._claim("logging")
        self.logging = logging
