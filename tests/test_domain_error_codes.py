"""Regression tests for conversion error-code semantics and typed exceptions."""

from __future__ import annotations

import pytest

from captable_bridge.domain import (
    ConversionError,
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    SchemaMismatchError,
    UnknownEntityTypeError,
    conversion_error_default_message,
)
from captable_bridge.mapping.payload_fields import mapping_require_text


def test_domain_error_code_known_message_and_unknown_fallback() -> None:
    """Resolve known default messages and preserve fallback for unknown codes.

    Returns:
        None: Assertions validate message lookup.

    Raises:
        AssertionError: Raised when message resolution is incorrect.
    """

    assert (
        conversion_error_default_message(ConversionErrorCode.REQUIRED_FIELD_MISSING.value, "fallback")
        == "Required field is missing or empty"
    )
    assert conversion_error_default_message("NOT_A_CODE", "fallback") == "fallback"
    for error_code in ConversionErrorCode:
        assert conversion_error_default_message(error_code.value, "") != ""


def test_domain_validation_error_defaults_detail_from_error_code() -> None:
    """Use the canonical code message when no detail is passed.

    Returns:
        None: Assertions validate default validation detail.

    Raises:
        AssertionError: Raised when the default detail diverges from the code table.
    """

    missing_error = ConversionValidationError("stockTransfer.id", expected_type="string")
    assert missing_error.detail == "Required field is missing or empty"
    assert str(missing_error) == "Validation error at 'stockTransfer.id': Required field is missing or empty"

    type_error = ConversionValidationError("valuation", error_code=ConversionErrorCode.INVALID_TYPE.value)
    assert type_error.detail == conversion_error_default_message(ConversionErrorCode.INVALID_TYPE.value, "")

    explicit_error = ConversionValidationError("valuation", "Expected an object")
    assert explicit_error.detail == "Expected an object"


def test_domain_missing_field_failures_carry_code_message() -> None:
    """Report a missing required field with the canonical code message.

    Returns:
        None: Assertions validate converter failure details.

    Raises:
        AssertionError: Raised when converters report a different detail.
    """

    with pytest.raises(ConversionValidationError) as error:
        mapping_require_text({"id": "  "}, "id", "stockTransfer")

    assert error.value.field_path == "stockTransfer.id"
    assert error.value.error_code == ConversionErrorCode.REQUIRED_FIELD_MISSING.value
    assert error.value.detail == conversion_error_default_message(ConversionErrorCode.REQUIRED_FIELD_MISSING.value, "")


def test_domain_exceptions_carry_context_and_builtin_bases() -> None:
    """Expose field context and keep builtin exception bases for callers.

    Returns:
        None: Assertions validate exception attributes and hierarchy.

    Raises:
        AssertionError: Raised when exception context is missing.
    """

    validation_error = ConversionValidationError(
        "stockTransfer.id",
        expected_type="string",
        received_value=None,
    )
    assert validation_error.error_code == ConversionErrorCode.REQUIRED_FIELD_MISSING.value
    assert validation_error.expected_type == "string"
    assert isinstance(validation_error, ValueError)
    assert isinstance(validation_error, ConversionError)

    schema_error = SchemaMismatchError("missing field", source="issuance_data")
    assert isinstance(schema_error, ConversionParseError)
    assert schema_error.error_code == ConversionErrorCode.SCHEMA_MISMATCH.value

    unknown_error = UnknownEntityTypeError("fooBar")
    assert isinstance(unknown_error, LookupError)
    assert unknown_error.entity_type == "fooBar"
    assert "fooBar" in str(unknown_error)
