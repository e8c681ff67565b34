"""Tests for the bucket policy document model."""

from __future__ import annotations

import json

import pytest

from s3_inventory.models.policy import (
    TypedPrincipal,
    WildcardPrincipal,
    decode_actions,
    decode_condition,
    decode_principal,
    parse_policy,
)
from s3_inventory.utils.errors import MalformedDocumentError


def _policy(**statement: object) -> str:
    base = {"Effect": "Allow", "Principal": "*", "Action": "s3:GetObject"}
    base.update(statement)
    return json.dumps({"Version": "2012-10-17", "Statement": [base]})


class TestActions:
    """Test cases for Action decoding."""

    def test_scalar_and_array_decode_identically(self) -> None:
        """Test that a single action and a one-element array are the same."""
        assert decode_actions("s3:GetObject") == decode_actions(["s3:GetObject"])
        assert decode_actions("s3:GetObject") == ("s3:GetObject",)

    def test_array_order_preserved(self) -> None:
        """Test that array order is kept."""
        assert decode_actions(["s3:PutObject", "s3:GetObject"]) == ("s3:PutObject", "s3:GetObject")

    def test_empty_array_rejected(self) -> None:
        """Test that an empty action array is malformed."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            decode_actions([])
        assert exc_info.value.field == "Action"

    def test_non_string_element_rejected(self) -> None:
        """Test that non-string array elements are malformed."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            decode_actions(["s3:GetObject", 5])
        assert exc_info.value.field == "Action[1]"

    def test_object_rejected(self) -> None:
        """Test that an object is neither shape."""
        with pytest.raises(MalformedDocumentError):
            decode_actions({"s3": "GetObject"})


class TestPrincipal:
    """Test cases for Principal decoding."""

    def test_wildcard(self) -> None:
        """Test that a bare string becomes the wildcard variant."""
        principal = decode_principal("*")
        assert principal == WildcardPrincipal("*")

    def test_typed_single_value(self) -> None:
        """Test that a single value is normalized into a one-element tuple."""
        principal = decode_principal({"AWS": "arn:aws:iam::111122223333:root"})
        assert isinstance(principal, TypedPrincipal)
        assert dict(principal.entries) == {"AWS": ("arn:aws:iam::111122223333:root",)}

    def test_typed_multiple_values(self) -> None:
        """Test that arrays keep every value."""
        principal = decode_principal({"AWS": ["arn:a", "arn:b"]})
        assert isinstance(principal, TypedPrincipal)
        assert principal.values("AWS") == ("arn:a", "arn:b")

    def test_typed_multiple_types(self) -> None:
        """Test principals mixing several principal types."""
        principal = decode_principal(
            {"Service": "logging.s3.amazonaws.com", "Federated": ["cognito-identity.amazonaws.com"]}
        )
        assert principal.values("Service") == ("logging.s3.amazonaws.com",)
        assert principal.values("Federated") == ("cognito-identity.amazonaws.com",)
        assert principal.values("AWS") == ()

    def test_number_rejected(self) -> None:
        """Test that a number is neither a string nor an object."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            decode_principal(42)
        assert exc_info.value.field == "Principal"

    def test_unknown_value_types_are_soft_diagnostics(self) -> None:
        """Test that unexpected values inside the object are skipped and reported."""
        diagnostics: list[str] = []
        principal = decode_principal(
            {"AWS": ["arn:a", 7], "Custom": {"nested": True}, "Other": None},
            diagnostics=diagnostics,
        )
        assert principal.values("AWS") == ("arn:a",)
        assert "Custom" not in principal.entries
        assert "Other" not in principal.entries
        assert len(diagnostics) == 3
        assert any("Principal.AWS[1]" in d for d in diagnostics)

    def test_empty_array_is_soft_diagnostic(self) -> None:
        """Test that an empty value array is skipped and reported."""
        diagnostics: list[str] = []
        principal = decode_principal(
            {"AWS": [], "Service": "logging.s3.amazonaws.com"}, diagnostics=diagnostics
        )
        assert "AWS" not in principal.entries
        assert principal.values("Service") == ("logging.s3.amazonaws.com",)
        assert diagnostics == ["Principal.AWS: empty array"]


class TestCondition:
    """Test cases for Condition decoding."""

    def test_scalars_normalized_to_strings(self) -> None:
        """Test that booleans and numbers keep their JSON spelling."""
        condition = decode_condition(
            {"Bool": {"aws:SecureTransport": False}, "NumericLessThan": {"s3:max-keys": 10}}
        )
        assert condition["Bool"]["aws:SecureTransport"] == "false"
        assert condition["NumericLessThan"]["s3:max-keys"] == "10"

    def test_arrays_become_tuples(self) -> None:
        """Test that multi-valued keys are kept in order."""
        condition = decode_condition({"StringEquals": {"aws:SourceVpc": ["vpc-1", "vpc-2"]}})
        assert condition["StringEquals"]["aws:SourceVpc"] == ("vpc-1", "vpc-2")

    def test_operator_must_be_object(self) -> None:
        """Test that operator values must be objects."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            decode_condition({"Bool": "true"})
        assert exc_info.value.field == "Condition.Bool"


class TestParsePolicy:
    """Test cases for full document parsing."""

    def test_full_document(self) -> None:
        """Test decoding a realistic bucket policy."""
        text = json.dumps(
            {
                "Version": "2012-10-17",
                "Id": "PolicyForLogs",
                "Statement": [
                    {
                        "Sid": "DenyInsecure",
                        "Effect": "Deny",
                        "Principal": "*",
                        "Action": "s3:*",
                        "Resource": ["arn:aws:s3:::logs", "arn:aws:s3:::logs/*"],
                        "Condition": {"Bool": {"aws:SecureTransport": "false"}},
                    },
                    {
                        "Effect": "Allow",
                        "Principal": {"Service": "logging.s3.amazonaws.com"},
                        "Action": ["s3:PutObject"],
                        "Resource": "arn:aws:s3:::logs/*",
                    },
                ],
            }
        )
        result = parse_policy(text)
        document = result.document

        assert result.diagnostics == ()
        assert document.version == "2012-10-17"
        assert document.id == "PolicyForLogs"
        assert len(document.statements) == 2

        deny, allow = document.statements
        assert deny.sid == "DenyInsecure"
        assert deny.effect == "Deny"
        assert deny.principal == WildcardPrincipal("*")
        assert deny.actions == ("s3:*",)
        assert deny.resource == "arn:aws:s3:::logs"
        assert deny.resources == ("arn:aws:s3:::logs", "arn:aws:s3:::logs/*")
        assert deny.condition == {"Bool": {"aws:SecureTransport": "false"}}

        assert allow.effect == "Allow"
        assert allow.principal.values("Service") == ("logging.s3.amazonaws.com",)
        assert allow.resource == "arn:aws:s3:::logs/*"
        assert allow.condition is None

    def test_id_optional(self) -> None:
        """Test that a document without Id decodes with id None."""
        assert parse_policy(_policy()).document.id is None

    def test_effect_stored_verbatim(self) -> None:
        """Test that Effect is not validated."""
        statement = parse_policy(_policy(Effect="Maybe")).document.statements[0]
        assert statement.effect == "Maybe"

    def test_single_statement_object(self) -> None:
        """Test that a lone Statement object is normalized into a sequence."""
        text = json.dumps(
            {"Version": "2012-10-17", "Statement": {"Effect": "Allow", "Action": "s3:GetObject"}}
        )
        statements = parse_policy(text).document.statements
        assert len(statements) == 1
        assert statements[0].principal is None

    def test_not_principal_and_not_action(self) -> None:
        """Test the negated statement elements."""
        text = json.dumps(
            {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Deny",
                        "NotPrincipal": {"AWS": "arn:aws:iam::111122223333:root"},
                        "NotAction": "s3:GetObject",
                        "NotResource": "arn:aws:s3:::public/*",
                    }
                ],
            }
        )
        statement = parse_policy(text).document.statements[0]
        assert statement.not_principal.values("AWS") == ("arn:aws:iam::111122223333:root",)
        assert statement.not_actions == ("s3:GetObject",)
        assert statement.not_resources == ("arn:aws:s3:::public/*",)

    def test_numeric_principal_names_field(self) -> None:
        """Test that a numeric Principal fails with the field identified."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse_policy(_policy(Principal=123))
        assert exc_info.value.field == "Statement[0].Principal"
        assert "Principal" in str(exc_info.value)

    def test_diagnostics_returned_with_document(self) -> None:
        """Test that soft diagnostics travel with the decoded document."""
        result = parse_policy(_policy(Principal={"AWS": "arn:a", "Weird": 1}))
        assert result.document.statements[0].principal.values("AWS") == ("arn:a",)
        assert result.diagnostics == ("Statement[0].Principal.Weird: skipped number value",)

    def test_invalid_json(self) -> None:
        """Test that non-JSON text is malformed."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse_policy("{not json")
        assert exc_info.value.field == "Policy"

    def test_top_level_must_be_object(self) -> None:
        """Test that a JSON array is not a policy."""
        with pytest.raises(MalformedDocumentError):
            parse_policy("[]")

    def test_statement_must_be_object_or_array(self) -> None:
        """Test that a scalar Statement is malformed."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse_policy(json.dumps({"Version": "2012-10-17", "Statement": "all"}))
        assert exc_info.value.field == "Statement"

    def test_effect_type_checked(self) -> None:
        """Test that a non-string Effect is malformed."""
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse_policy(_policy(Effect=True))
        assert exc_info.value.field == "Statement[0].Effect"
