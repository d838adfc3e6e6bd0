"""Project-native typed exceptions for entity conversion failures."""

from __future__ import annotations

from .error_codes import ConversionErrorCode, conversion_error_default_message


class ConversionError(Exception):
    """Base exception for conversion-layer failures.

    Attributes:
        error_code: Conversion error code classifying the failure.
    """

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.error_code = error_code


class ConversionValidationError(ConversionError, ValueError):
    """Open-format input failed a field requirement on the write path.

    Attributes:
        field_path: Dotted path of the offending field, e.g. `stockTransfer.quantity`.
        detail: Failure detail, the canonical message of `error_code` when none is given.
        expected_type: Optional description of the expected value type.
        received_value: Offending raw value.
    """

    def __init__(
        self,
        field_path: str,
        message: str | None = None,
        expected_type: str | None = None,
        received_value: object | None = None,
        error_code: str = ConversionErrorCode.REQUIRED_FIELD_MISSING.value,
    ):
        if message is None:
            message = conversion_error_default_message(error_code, "Invalid value")
        super().__init__(f"Validation error at '{field_path}': {message}", error_code=error_code)
        self.field_path = field_path
        self.detail = message
        self.expected_type = expected_type
        self.received_value = received_value


class ConversionParseError(ConversionError, ValueError):
    """Ledger payload or query response could not be interpreted on the read path.

    Attributes:
        source: Field path or contract reference where parsing failed.
        received_value: Offending raw value.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        received_value: object | None = None,
        error_code: str = ConversionErrorCode.INVALID_RESPONSE.value,
    ):
        super().__init__(message, error_code=error_code)
        self.source = source
        self.received_value = received_value


class SchemaMismatchError(ConversionParseError):
    """Ledger create argument lacks the expected entity data field."""

    def __init__(self, message: str, source: str | None = None, received_value: object | None = None):
        super().__init__(
            message,
            source=source,
            received_value=received_value,
            error_code=ConversionErrorCode.SCHEMA_MISMATCH.value,
        )


class UnknownEntityTypeError(ConversionError, LookupError):
    """Dispatch was requested for an entity type with no registry entry.

    Attributes:
        entity_type: Unrecognized entity type value.
    """

    def __init__(self, entity_type: object):
        super().__init__(
            f"Unknown entity type: {entity_type}",
            error_code=ConversionErrorCode.UNKNOWN_ENTITY_TYPE.value,
        )
        self.entity_type = entity_type
