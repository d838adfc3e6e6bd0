"""Canonical conversion error-code semantics shared by every converter."""

from __future__ import annotations

from enum import Enum
from typing import Final


class ConversionErrorCode(str, Enum):
    """Known conversion failure codes surfaced to callers."""

    REQUIRED_FIELD_MISSING = "REQUIRED_FIELD_MISSING"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNKNOWN_ENUM_VALUE = "UNKNOWN_ENUM_VALUE"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    UNKNOWN_ENTITY_TYPE = "UNKNOWN_ENTITY_TYPE"


CONVERSION_ERROR_DEFAULT_MESSAGES: Final[dict[str, str]] = {
    ConversionErrorCode.REQUIRED_FIELD_MISSING.value: "Required field is missing or empty",
    ConversionErrorCode.INVALID_TYPE.value: "Value has an unexpected type",
    ConversionErrorCode.INVALID_FORMAT.value: "Value has an invalid format",
    ConversionErrorCode.UNKNOWN_ENUM_VALUE.value: "Value is not a known enumeration member",
    ConversionErrorCode.SCHEMA_MISMATCH.value: "Ledger payload does not match the expected schema",
    ConversionErrorCode.INVALID_RESPONSE.value: "Ledger response has an invalid structure",
    ConversionErrorCode.UNKNOWN_ENTITY_TYPE.value: "Entity type is not registered",
}


def conversion_error_default_message(error_code: str, fallback_message: str) -> str:
    """Return canonical default message for an error code.

    Args:
        error_code: Conversion error code value.
        fallback_message: Fallback message when code is unknown.

    Returns:
        str: Canonical message for known code, else provided fallback message.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return CONVERSION_ERROR_DEFAULT_MESSAGES.get(error_code, fallback_message)
