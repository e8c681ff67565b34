"""Bucket policy document model and decoder.

Bucket policies use a permissive JSON grammar in which several fields may be
written either as a single value or as a collection:

* ``Principal`` is the wildcard string ``"*"`` or an object mapping a
  principal type (``AWS``, ``Service``, ``Federated``, ...) to one or many
  identifiers.
* ``Action`` and ``Resource`` are a single string or an array of strings.
* ``Statement`` is a single statement object or an array of them.

Every such field is decoded in two explicit phases: the scalar shape is
checked first, then the collection/object shape, and anything else is a
:class:`MalformedDocumentError` naming the offending field. The decoded model
never exposes the scalar-vs-collection distinction.

Unexpected values inside a ``Principal`` object are not fatal. They are
skipped and reported as diagnostics next to the decoded document, so callers
decide whether to care about principal types this decoder does not know.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from ..utils.errors import MalformedDocumentError

ConditionValue = Union[str, tuple[str, ...]]
Condition = Mapping[str, Mapping[str, ConditionValue]]


@dataclass(frozen=True)
class WildcardPrincipal:
    """Principal written as a bare string, typically ``"*"``."""

    value: str


@dataclass(frozen=True)
class TypedPrincipal:
    """Principal written as an object of principal type to identifiers."""

    entries: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def values(self, principal_type: str) -> tuple[str, ...]:
        """Identifiers registered under one principal type."""
        return self.entries.get(principal_type, ())


Principal = Union[WildcardPrincipal, TypedPrincipal]


@dataclass(frozen=True)
class Statement:
    """One access rule of a policy document."""

    effect: str
    principal: Principal | None = None
    actions: tuple[str, ...] = ()
    resources: tuple[str, ...] = ()
    condition: Condition | None = None
    sid: str | None = None
    not_principal: Principal | None = None
    not_actions: tuple[str, ...] = ()
    not_resources: tuple[str, ...] = ()

    @property
    def resource(self) -> str:
        """First resource of the statement, empty when none is set."""
        return self.resources[0] if self.resources else ""


@dataclass(frozen=True)
class PolicyDocument:
    """A decoded bucket policy."""

    version: str
    statements: tuple[Statement, ...] = ()
    id: str | None = None


@dataclass(frozen=True)
class PolicyDecodeResult:
    """A decoded document and the soft diagnostics raised while decoding it."""

    document: PolicyDocument
    diagnostics: tuple[str, ...] = ()


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _optional_string(data: Mapping[str, Any], key: str, path: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedDocumentError(f"{path}{key}", f"expected string, got {_json_type(value)}")
    return value


def decode_string_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Decode a field written as one string or an array of strings.

    Args:
        value: Raw JSON value
        field_name: Field path used in error messages

    Returns:
        Non-empty tuple of strings, in source order

    Raises:
        MalformedDocumentError: If the value has neither shape, the array is
            empty or holds a non-string element
    """
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        if not value:
            raise MalformedDocumentError(field_name, "expected at least one value, got empty array")
        for index, item in enumerate(value):
            if not isinstance(item, str):
                raise MalformedDocumentError(
                    f"{field_name}[{index}]", f"expected string, got {_json_type(item)}"
                )
        return tuple(value)
    raise MalformedDocumentError(
        field_name, f"expected string or array of strings, got {_json_type(value)}"
    )


def decode_actions(value: Any, field_name: str = "Action") -> tuple[str, ...]:
    """Decode an ``Action`` value into a non-empty tuple of action names."""
    return decode_string_list(value, field_name)


def decode_principal(
    value: Any,
    field_name: str = "Principal",
    diagnostics: list[str] | None = None,
) -> Principal:
    """Decode a ``Principal`` value into one of the principal variants.

    Args:
        value: Raw JSON value
        field_name: Field path used in errors and diagnostics
        diagnostics: List receiving soft diagnostics for skipped entries

    Returns:
        ``WildcardPrincipal`` for a string, ``TypedPrincipal`` for an object

    Raises:
        MalformedDocumentError: If the value is neither a string nor an object
    """
    if isinstance(value, str):
        return WildcardPrincipal(value)

    if not isinstance(value, dict):
        raise MalformedDocumentError(
            field_name, f"expected string or object, got {_json_type(value)}"
        )

    if diagnostics is None:
        diagnostics = []

    entries: dict[str, tuple[str, ...]] = {}
    for principal_type, raw in value.items():
        if isinstance(raw, str):
            entries[principal_type] = (raw,)
        elif isinstance(raw, list):
            if not raw:
                diagnostics.append(f"{field_name}.{principal_type}: empty array")
                continue
            values = []
            for index, item in enumerate(raw):
                if isinstance(item, str):
                    values.append(item)
                else:
                    diagnostics.append(
                        f"{field_name}.{principal_type}[{index}]: skipped {_json_type(item)} value"
                    )
            if values:
                entries[principal_type] = tuple(values)
        else:
            diagnostics.append(f"{field_name}.{principal_type}: skipped {_json_type(raw)} value")

    return TypedPrincipal(entries)


def _condition_scalar(value: Any, field_name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        # JSON spelling: true/false, 10, 1.5
        return json.dumps(value)
    raise MalformedDocumentError(
        field_name, f"expected string, number or boolean, got {_json_type(value)}"
    )


def decode_condition(value: Any, field_name: str = "Condition") -> Condition:
    """Decode a ``Condition`` block of operator to key to value(s)."""
    if not isinstance(value, dict):
        raise MalformedDocumentError(field_name, f"expected object, got {_json_type(value)}")

    condition: dict[str, dict[str, ConditionValue]] = {}
    for operator, clauses in value.items():
        operator_path = f"{field_name}.{operator}"
        if not isinstance(clauses, dict):
            raise MalformedDocumentError(
                operator_path, f"expected object, got {_json_type(clauses)}"
            )
        decoded: dict[str, ConditionValue] = {}
        for key, raw in clauses.items():
            key_path = f"{operator_path}.{key}"
            if isinstance(raw, list):
                decoded[key] = tuple(
                    _condition_scalar(item, f"{key_path}[{index}]")
                    for index, item in enumerate(raw)
                )
            else:
                decoded[key] = _condition_scalar(raw, key_path)
        condition[operator] = decoded
    return condition


def _decode_statement(data: Any, path: str, diagnostics: list[str]) -> Statement:
    if not isinstance(data, dict):
        raise MalformedDocumentError(path, f"expected object, got {_json_type(data)}")

    prefix = f"{path}."
    principal = None
    if "Principal" in data:
        principal = decode_principal(data["Principal"], f"{prefix}Principal", diagnostics)
    not_principal = None
    if "NotPrincipal" in data:
        not_principal = decode_principal(data["NotPrincipal"], f"{prefix}NotPrincipal", diagnostics)

    actions: tuple[str, ...] = ()
    if "Action" in data:
        actions = decode_actions(data["Action"], f"{prefix}Action")
    not_actions: tuple[str, ...] = ()
    if "NotAction" in data:
        not_actions = decode_actions(data["NotAction"], f"{prefix}NotAction")

    resources: tuple[str, ...] = ()
    if "Resource" in data:
        resources = decode_string_list(data["Resource"], f"{prefix}Resource")
    not_resources: tuple[str, ...] = ()
    if "NotResource" in data:
        not_resources = decode_string_list(data["NotResource"], f"{prefix}NotResource")

    condition = None
    if data.get("Condition") is not None:
        condition = decode_condition(data["Condition"], f"{prefix}Condition")

    return Statement(
        effect=_optional_string(data, "Effect", prefix) or "",
        principal=principal,
        actions=actions,
        resources=resources,
        condition=condition,
        sid=_optional_string(data, "Sid", prefix),
        not_principal=not_principal,
        not_actions=not_actions,
        not_resources=not_resources,
    )


def decode_policy(data: Any) -> PolicyDecodeResult:
    """Decode an already-parsed policy JSON value.

    Raises:
        MalformedDocumentError: If the document structure is invalid
    """
    if not isinstance(data, dict):
        raise MalformedDocumentError("Policy", f"expected object, got {_json_type(data)}")

    diagnostics: list[str] = []

    raw_statements = data.get("Statement")
    if raw_statements is None:
        raw_statements = []
    elif isinstance(raw_statements, dict):
        raw_statements = [raw_statements]
    elif not isinstance(raw_statements, list):
        raise MalformedDocumentError(
            "Statement", f"expected object or array, got {_json_type(raw_statements)}"
        )

    statements = tuple(
        _decode_statement(item, f"Statement[{index}]", diagnostics)
        for index, item in enumerate(raw_statements)
    )

    document = PolicyDocument(
        version=_optional_string(data, "Version", "") or "",
        statements=statements,
        id=_optional_string(data, "Id", ""),
    )
    return PolicyDecodeResult(document=document, diagnostics=tuple(diagnostics))


def parse_policy(text: str) -> PolicyDecodeResult:
    """Parse raw policy JSON text.

    Args:
        text: Policy document as returned by GetBucketPolicy

    Returns:
        Decoded document with its soft diagnostics

    Raises:
        MalformedDocumentError: If the text is not JSON or does not match the
            policy grammar
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError("Policy", f"invalid JSON: {e}") from e
    return decode_policy(data)
