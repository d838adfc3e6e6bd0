"""Shared scalar normalizers for open-format and ledger value contracts.

Numeric values cross the boundary as canonical decimal strings, calendar dates
become midnight-UTC ledger timestamps, and optional values switch between the
open format's absent key and the ledger's explicit null. Every converter relies
on these helpers so the value contracts remain identical across entity types.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Final

from .error_codes import ConversionErrorCode
from .errors import ConversionParseError, ConversionValidationError

_DOMAIN_NUMERIC_PATTERN: Final = re.compile(r"^-?\d+(\.\d+)?$")
_DOMAIN_LEDGER_TIME_SUFFIX: Final[str] = "T00:00:00.000Z"


def domain_normalize_numeric_string(value: object, field_path: str = "numeric") -> str:
    """Normalize one numeric value into the canonical decimal string form.

    Trailing fractional zeros are stripped together with a dangling decimal
    point, so `"5000000.0000000000"` becomes `"5000000"` and `"123.4500"`
    becomes `"123.45"`. Integer digits are never altered.

    Args:
        value: Numeric string or number.
        field_path: Dotted field path reported on failure.

    Returns:
        str: Canonical decimal string.

    Raises:
        ConversionValidationError: Raised when value is not a number or a plain decimal string.
    """

    if isinstance(value, bool) or not isinstance(value, (str, int, float, Decimal)):
        raise ConversionValidationError(
            field_path,
            "Expected a numeric string or number",
            expected_type="string | number",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_TYPE.value,
        )

    text_value = value if isinstance(value, str) else str(value)
    if "e" in text_value or "E" in text_value:
        raise ConversionValidationError(
            field_path,
            "Scientific notation is not supported",
            expected_type="decimal string",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    if not _DOMAIN_NUMERIC_PATTERN.match(text_value):
        raise ConversionValidationError(
            field_path,
            "Invalid numeric string format",
            expected_type="decimal string",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )

    if "." in text_value:
        text_value = text_value.rstrip("0").rstrip(".")
    return text_value


def domain_optional_numeric_to_ledger(value: object | None, field_path: str = "numeric") -> str | None:
    """Normalize one optional numeric value, mapping missing input to null.

    Args:
        value: Optional numeric string or number.
        field_path: Dotted field path reported on failure.

    Returns:
        str | None: Canonical decimal string or None when absent.

    Raises:
        ConversionValidationError: Raised when a present value is malformed.
    """

    if value is None or value == "":
        return None
    return domain_normalize_numeric_string(value, field_path)


def domain_ledger_numeric_to_open(value: object, field_path: str) -> str:
    """Normalize one ledger numeric value for the open format.

    Args:
        value: Ledger decimal string.
        field_path: Dotted field path reported on failure.

    Returns:
        str: Canonical decimal string.

    Raises:
        ConversionParseError: Raised when the ledger value is not a decimal.
    """

    try:
        return domain_normalize_numeric_string(value, field_path)
    except ConversionValidationError as error:
        raise ConversionParseError(
            f"Invalid numeric value at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        ) from error


def domain_date_to_ledger_time(value: object, field_path: str = "date") -> str:
    """Convert one calendar date into the ledger midnight-UTC timestamp.

    Args:
        value: ISO date string, `date`, or an already-timestamped string.

    Returns:
        str: Timestamp such as `2024-01-15T00:00:00.000Z`.

    Raises:
        ConversionValidationError: Raised when value is missing or not a date.
    """

    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return f"{value.isoformat()}{_DOMAIN_LEDGER_TIME_SUFFIX}"
    if not isinstance(value, str) or not value.strip():
        raise ConversionValidationError(
            field_path,
            expected_type="date string",
            received_value=value,
        )
    normalized_value = value.strip()
    if "T" in normalized_value:
        return normalized_value
    return f"{normalized_value}{_DOMAIN_LEDGER_TIME_SUFFIX}"


def domain_ledger_time_to_date(value: object, field_path: str = "date") -> str:
    """Return the calendar-date portion of one ledger timestamp.

    Args:
        value: Ledger timestamp string.

    Returns:
        str: Date portion before the first `T`.

    Raises:
        ConversionParseError: Raised when value is not a non-empty string.
    """

    if not isinstance(value, str) or not value:
        raise ConversionParseError(
            f"Invalid ledger timestamp at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    return value.split("T")[0]


def domain_optional_date_to_ledger(value: object | None, field_path: str = "date") -> str | None:
    """Convert one optional date, mapping missing input to null."""

    if value is None or value == "":
        return None
    return domain_date_to_ledger_time(value, field_path)


def domain_optional_ledger_time_to_date(value: object | None, field_path: str = "date") -> str | None:
    """Convert one optional ledger timestamp, keeping null as None."""

    if value is None:
        return None
    return domain_ledger_time_to_date(value, field_path)


def domain_monetary_to_ledger(value: object, field_path: str = "monetary") -> dict[str, str]:
    """Convert one open-format monetary value to its ledger shape.

    Args:
        value: Mapping with `amount` and `currency`.
        field_path: Dotted field path reported on failure.

    Returns:
        dict[str, str]: Ledger monetary with canonical amount.

    Raises:
        ConversionValidationError: Raised when amount or currency is missing or invalid.
    """

    if not isinstance(value, Mapping):
        raise ConversionValidationError(
            field_path,
            expected_type="{amount, currency}",
            received_value=value,
        )
    currency = value.get("currency")
    if not isinstance(currency, str) or not currency.strip():
        raise ConversionValidationError(
            f"{field_path}.currency",
            expected_type="string",
            received_value=currency,
        )
    amount = value.get("amount")
    if amount is None or amount == "":
        raise ConversionValidationError(
            f"{field_path}.amount",
            expected_type="string | number",
            received_value=amount,
        )
    return {
        "amount": domain_normalize_numeric_string(amount, f"{field_path}.amount"),
        "currency": currency,
    }


def domain_optional_monetary_to_ledger(value: object | None, field_path: str = "monetary") -> dict[str, str] | None:
    """Convert one optional monetary value, mapping missing input to null."""

    if value is None:
        return None
    return domain_monetary_to_ledger(value, field_path)


def domain_ledger_monetary_to_open(value: object, field_path: str = "monetary") -> dict[str, str]:
    """Convert one ledger monetary value to its open-format shape.

    Args:
        value: Ledger mapping with `amount` and `currency`.
        field_path: Dotted field path reported on failure.

    Returns:
        dict[str, str]: Open-format monetary with canonical amount.

    Raises:
        ConversionParseError: Raised when the ledger monetary is malformed.
    """

    if not isinstance(value, Mapping):
        raise ConversionParseError(
            f"Invalid monetary value at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
        )
    currency = value.get("currency")
    if not isinstance(currency, str) or not currency:
        raise ConversionParseError(
            f"Invalid monetary currency at '{field_path}.currency': {currency!r}",
            source=f"{field_path}.currency",
            received_value=currency,
        )
    return {
        "amount": domain_ledger_numeric_to_open(value.get("amount"), f"{field_path}.amount"),
        "currency": currency,
    }


def domain_optional_ledger_monetary_to_open(value: object | None, field_path: str = "monetary") -> dict[str, str] | None:
    """Convert one optional ledger monetary value, keeping null as None."""

    if value is None:
        return None
    return domain_ledger_monetary_to_open(value, field_path)


def domain_to_ledger_optional(value: Any) -> Any:
    """Map one open-format optional value to its ledger representation.

    Args:
        value: Candidate optional value.

    Returns:
        Any: None for None, empty string, or empty list; the value otherwise.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None or value == "" or value == []:
        return None
    return value


def domain_to_open_optional(target: dict[str, Any], key: str, value: Any) -> None:
    """Assign one optional value onto an open-format object only when present.

    Args:
        target: Open-format object under construction.
        key: Field name to assign.
        value: Candidate value.

    Returns:
        None: The target is mutated in place.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None or value == "" or value == []:
        return
    target[key] = value


def domain_clean_comments(comments: object | None) -> list[str] | None:
    """Drop blank and non-string comment entries.

    Returns:
        list[str] | None: Remaining comments or None when nothing remains.
    """

    if not isinstance(comments, list):
        return None
    cleaned = [comment for comment in comments if isinstance(comment, str) and comment.strip()]
    return cleaned or None


def domain_comments_to_ledger(comments: object | None) -> list[str]:
    """Return ledger comments, which are always list-typed."""

    return domain_clean_comments(comments) or []


def domain_ensure_list(value: object | None) -> list[Any]:
    """Wrap a scalar into a list; None becomes an empty list."""

    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]
