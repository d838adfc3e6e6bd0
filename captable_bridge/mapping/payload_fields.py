"""Field accessors for open-format objects and ledger payloads.

Write-path accessors (`mapping_require_*`, `mapping_optional_*`) read open-format
objects and raise `ConversionValidationError` naming the dotted field path.
Read-path accessors (`mapping_read_*`) read ledger payloads and raise
`ConversionParseError` naming the field and the raw value.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    domain_clean_comments,
    domain_date_to_ledger_time,
    domain_ledger_monetary_to_open,
    domain_ledger_numeric_to_open,
    domain_ledger_time_to_date,
    domain_monetary_to_ledger,
    domain_normalize_numeric_string,
    domain_optional_date_to_ledger,
    domain_optional_ledger_monetary_to_open,
    domain_optional_ledger_time_to_date,
    domain_optional_monetary_to_ledger,
    domain_optional_numeric_to_ledger,
)


def mapping_require_object(value: object, field_path: str) -> Mapping[str, Any]:
    """Require one open-format value to be an object.

    Args:
        value: Candidate value.
        field_path: Dotted field path reported on failure.

    Returns:
        Mapping[str, Any]: The value itself.

    Raises:
        ConversionValidationError: Raised when value is not a mapping.
    """

    if not isinstance(value, Mapping):
        raise ConversionValidationError(
            field_path,
            "Expected an object",
            expected_type="object",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )
    return value


def mapping_require_text(data: Mapping[str, Any], key: str, path: str) -> str:
    """Require one non-blank string field.

    Args:
        data: Open-format object.
        key: Field name.
        path: Dotted path of the enclosing object.

    Returns:
        str: Field value.

    Raises:
        ConversionValidationError: Raised when field is missing, blank, or not a string.
    """

    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConversionValidationError(
            f"{path}.{key}",
            expected_type="string",
            received_value=value,
        )
    return value


def mapping_optional_text(data: Mapping[str, Any], key: str, path: str) -> str | None:
    """Read one optional string field, mapping blank input to None.

    Raises:
        ConversionValidationError: Raised when a present value is not a string.
    """

    value = data.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConversionValidationError(
            f"{path}.{key}",
            "Expected a string",
            expected_type="string",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )
    return value


def mapping_require_date(data: Mapping[str, Any], key: str, path: str) -> str:
    """Require one date field and convert it to ledger time."""

    return domain_date_to_ledger_time(data.get(key), f"{path}.{key}")


def mapping_optional_date(data: Mapping[str, Any], key: str, path: str) -> str | None:
    """Convert one optional date field to ledger time or None."""

    return domain_optional_date_to_ledger(data.get(key), f"{path}.{key}")


def mapping_require_numeric(data: Mapping[str, Any], key: str, path: str) -> str:
    """Require one numeric field and normalize it.

    Args:
        data: Open-format object.
        key: Field name.
        path: Dotted path of the enclosing object.

    Returns:
        str: Canonical decimal string.

    Raises:
        ConversionValidationError: Raised when field is missing or malformed.
    """

    value = data.get(key)
    if value is None or value == "":
        raise ConversionValidationError(
            f"{path}.{key}",
            expected_type="string | number",
            received_value=value,
        )
    return domain_normalize_numeric_string(value, f"{path}.{key}")


def mapping_optional_numeric(data: Mapping[str, Any], key: str, path: str) -> str | None:
    """Normalize one optional numeric field or return None."""

    return domain_optional_numeric_to_ledger(data.get(key), f"{path}.{key}")


def mapping_require_integer(data: Mapping[str, Any], key: str, path: str) -> str:
    """Require one integer field and render it as a ledger decimal string.

    Raises:
        ConversionValidationError: Raised when field is missing or not integral.
    """

    normalized_value = mapping_require_numeric(data, key, path)
    if "." in normalized_value:
        raise ConversionValidationError(
            f"{path}.{key}",
            "Expected an integer",
            expected_type="integer",
            received_value=data.get(key),
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    return normalized_value


def mapping_require_monetary(data: Mapping[str, Any], key: str, path: str) -> dict[str, str]:
    """Require one monetary field and convert it to the ledger shape."""

    return domain_monetary_to_ledger(data.get(key), f"{path}.{key}")


def mapping_optional_monetary(data: Mapping[str, Any], key: str, path: str) -> dict[str, str] | None:
    """Convert one optional monetary field or return None."""

    return domain_optional_monetary_to_ledger(data.get(key), f"{path}.{key}")


def mapping_optional_bool(data: Mapping[str, Any], key: str, path: str) -> bool | None:
    """Read one optional boolean field.

    Raises:
        ConversionValidationError: Raised when a present value is not a boolean.
    """

    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConversionValidationError(
            f"{path}.{key}",
            "Expected a boolean",
            expected_type="boolean",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )
    return value


def mapping_text_list(data: Mapping[str, Any], key: str, path: str, required: bool = False) -> list[str]:
    """Read one list of identifiers.

    Args:
        data: Open-format object.
        key: Field name.
        path: Dotted path of the enclosing object.
        required: Whether the list must contain at least one entry.

    Returns:
        list[str]: Identifier strings.

    Raises:
        ConversionValidationError: Raised when the list is malformed or required but empty.
    """

    value = data.get(key)
    if value is None:
        value = []
    if not isinstance(value, (list, tuple)):
        raise ConversionValidationError(
            f"{path}.{key}",
            "Expected an array of strings",
            expected_type="string[]",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )
    for index, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            raise ConversionValidationError(
                f"{path}.{key}[{index}]",
                expected_type="string",
                received_value=item,
            )
    if required and not value:
        raise ConversionValidationError(
            f"{path}.{key}",
            "At least one entry is required",
            expected_type="string[]",
            received_value=value,
        )
    return list(value)


def mapping_object_list(data: Mapping[str, Any], key: str, path: str) -> list[Mapping[str, Any]]:
    """Read one optional list of open-format objects.

    Raises:
        ConversionValidationError: Raised when the value is not a list of objects.
    """

    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ConversionValidationError(
            f"{path}.{key}",
            "Expected an array",
            expected_type="object[]",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )
    return [mapping_require_object(item, f"{path}.{key}[{index}]") for index, item in enumerate(value)]


def mapping_read_record(payload: object, path: str) -> Mapping[str, Any]:
    """Require one ledger value to be an object.

    Args:
        payload: Candidate ledger value.
        path: Field path reported on failure.

    Returns:
        Mapping[str, Any]: The value itself.

    Raises:
        ConversionParseError: Raised when value is not a mapping.
    """

    if not isinstance(payload, Mapping):
        raise ConversionParseError(
            f"Expected an object at '{path}', received {payload!r}",
            source=path,
            received_value=payload,
        )
    return payload


def mapping_read_text(payload: Mapping[str, Any], key: str, path: str) -> str:
    """Read one required ledger string field.

    Raises:
        ConversionParseError: Raised when the field is missing or not a string.
    """

    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise ConversionParseError(
            f"Missing or invalid field '{path}.{key}': {value!r}",
            source=f"{path}.{key}",
            received_value=value,
        )
    return value


def mapping_read_optional_text(payload: Mapping[str, Any], key: str, path: str) -> str | None:
    """Read one nullable ledger string field.

    Raises:
        ConversionParseError: Raised when a present value is not a string.
    """

    value = payload.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConversionParseError(
            f"Invalid field '{path}.{key}': {value!r}",
            source=f"{path}.{key}",
            received_value=value,
        )
    return value


def mapping_read_date(payload: Mapping[str, Any], key: str, path: str) -> str:
    """Read one required ledger timestamp as an open-format date."""

    return domain_ledger_time_to_date(payload.get(key), f"{path}.{key}")


def mapping_read_optional_date(payload: Mapping[str, Any], key: str, path: str) -> str | None:
    """Read one nullable ledger timestamp as an open-format date."""

    return domain_optional_ledger_time_to_date(payload.get(key), f"{path}.{key}")


def mapping_read_numeric(payload: Mapping[str, Any], key: str, path: str) -> str:
    """Read one required ledger decimal."""

    return domain_ledger_numeric_to_open(payload.get(key), f"{path}.{key}")


def mapping_read_optional_numeric(payload: Mapping[str, Any], key: str, path: str) -> str | None:
    """Read one nullable ledger decimal."""

    value = payload.get(key)
    if value is None:
        return None
    return domain_ledger_numeric_to_open(value, f"{path}.{key}")


def mapping_read_integer(payload: Mapping[str, Any], key: str, path: str) -> int:
    """Read one ledger decimal-string integer as a Python int.

    Raises:
        ConversionParseError: Raised when the value is not integral.
    """

    normalized_value = mapping_read_numeric(payload, key, path)
    if "." in normalized_value:
        raise ConversionParseError(
            f"Expected an integer at '{path}.{key}': {payload.get(key)!r}",
            source=f"{path}.{key}",
            received_value=payload.get(key),
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    return int(normalized_value)


def mapping_read_monetary(payload: Mapping[str, Any], key: str, path: str) -> dict[str, str]:
    """Read one required ledger monetary value."""

    return domain_ledger_monetary_to_open(payload.get(key), f"{path}.{key}")


def mapping_read_optional_monetary(payload: Mapping[str, Any], key: str, path: str) -> dict[str, str] | None:
    """Read one nullable ledger monetary value."""

    return domain_optional_ledger_monetary_to_open(payload.get(key), f"{path}.{key}")


def mapping_read_text_list(payload: Mapping[str, Any], key: str, path: str) -> list[str]:
    """Read one ledger list of identifiers; null reads as an empty list.

    Raises:
        ConversionParseError: Raised when the value is not a list of strings.
    """

    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConversionParseError(
            f"Expected a list of strings at '{path}.{key}': {value!r}",
            source=f"{path}.{key}",
            received_value=value,
        )
    return list(value)


def mapping_read_object_list(payload: Mapping[str, Any], key: str, path: str) -> list[Mapping[str, Any]]:
    """Read one ledger list of objects; null reads as an empty list."""

    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConversionParseError(
            f"Expected a list at '{path}.{key}': {value!r}",
            source=f"{path}.{key}",
            received_value=value,
        )
    return [mapping_read_record(item, f"{path}.{key}[{index}]") for index, item in enumerate(value)]


def mapping_read_comments(payload: Mapping[str, Any]) -> list[str] | None:
    """Read ledger comments, returning None when none remain after cleaning."""

    return domain_clean_comments(payload.get("comments"))
