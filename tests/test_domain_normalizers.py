"""Regression tests for shared scalar normalizers."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from itertools import product

import pytest

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    domain_clean_comments,
    domain_comments_to_ledger,
    domain_date_to_ledger_time,
    domain_ensure_list,
    domain_ledger_monetary_to_open,
    domain_ledger_time_to_date,
    domain_monetary_to_ledger,
    domain_normalize_numeric_string,
    domain_optional_numeric_to_ledger,
    domain_to_ledger_optional,
    domain_to_open_optional,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("5000000.0000000000", "5000000"),
        ("123.4500", "123.45"),
        ("100", "100"),
        ("1000.", None),
        (100, "100"),
        (1.5, "1.5"),
        (Decimal("2.50"), "2.5"),
        ("-0.100", "-0.1"),
        ("0.0", "0"),
    ],
)
def test_domain_normalize_numeric_string_strips_trailing_zeros(value: object, expected: str | None) -> None:
    """Strip trailing fractional zeros while keeping integer digits intact.

    Args:
        value: Numeric candidate.
        expected: Canonical string, or None when the input must be rejected.

    Returns:
        None: Assertions validate canonical numeric output.

    Raises:
        AssertionError: Raised when canonical form differs from expectation.
    """

    if expected is None:
        with pytest.raises(ConversionValidationError):
            domain_normalize_numeric_string(value)
        return
    assert domain_normalize_numeric_string(value) == expected


def test_domain_normalize_numeric_string_rejects_scientific_notation_and_text() -> None:
    """Reject scientific notation, words, and non-numeric types with typed errors.

    Returns:
        None: Assertions validate rejection codes.

    Raises:
        AssertionError: Raised when malformed values are accepted.
    """

    with pytest.raises(ConversionValidationError) as scientific_error:
        domain_normalize_numeric_string("1e5", "stockTransfer.quantity")
    assert scientific_error.value.error_code == ConversionErrorCode.INVALID_FORMAT.value
    assert scientific_error.value.field_path == "stockTransfer.quantity"

    with pytest.raises(ConversionValidationError):
        domain_normalize_numeric_string("abc")

    with pytest.raises(ConversionValidationError) as type_error:
        domain_normalize_numeric_string(True)
    assert type_error.value.error_code == ConversionErrorCode.INVALID_TYPE.value


def test_domain_optional_numeric_to_ledger_maps_missing_to_none() -> None:
    """Map None and blank optional numerics to None.

    Returns:
        None: Assertions validate optional numeric handling.

    Raises:
        AssertionError: Raised when missing values are not mapped to None.
    """

    assert domain_optional_numeric_to_ledger(None) is None
    assert domain_optional_numeric_to_ledger("") is None
    assert domain_optional_numeric_to_ledger("10.10") == "10.1"


def test_domain_date_round_trip_uses_midnight_utc() -> None:
    """Convert dates to midnight-UTC ledger timestamps and back.

    Returns:
        None: Assertions validate date conversion in both directions.

    Raises:
        AssertionError: Raised when timestamp shape is incorrect.
    """

    assert domain_date_to_ledger_time("2024-01-15") == "2024-01-15T00:00:00.000Z"
    assert domain_date_to_ledger_time(date(2024, 1, 15)) == "2024-01-15T00:00:00.000Z"
    assert domain_date_to_ledger_time("2024-01-15T10:30:00Z") == "2024-01-15T10:30:00Z"
    assert domain_ledger_time_to_date("2024-01-15T00:00:00.000Z") == "2024-01-15"

    with pytest.raises(ConversionValidationError):
        domain_date_to_ledger_time("")
    with pytest.raises(ConversionParseError):
        domain_ledger_time_to_date(None)


def test_domain_date_round_trip_holds_for_every_day_from_1900_to_2100() -> None:
    """Recover every calendar date from its ledger timestamp.

    Returns:
        None: Assertions validate date round trips over the supported range.

    Raises:
        AssertionError: Raised when any day does not survive the round trip.
    """

    day = date(1900, 1, 1)
    last_day = date(2100, 12, 31)
    while day <= last_day:
        text = day.isoformat()
        assert domain_ledger_time_to_date(domain_date_to_ledger_time(text)) == text
        assert domain_ledger_time_to_date(domain_date_to_ledger_time(day)) == text
        day += timedelta(days=1)


def test_domain_normalize_numeric_string_is_idempotent() -> None:
    """Keep canonical numeric strings stable and value-preserving.

    Returns:
        None: Assertions validate idempotence over generated decimal inputs.

    Raises:
        AssertionError: Raised when a second pass changes the value or the number changes.
    """

    integer_parts = ("0", "1", "7", "10", "100", "5000000", "123456789012345678901234567890")
    fractional_parts = ("", ".0", ".5", ".50", ".450", ".0001", ".0001000", ".0000000000", ".1234567890")
    inputs: list[object] = []
    for sign, integer_part, fractional_part in product(("", "-"), integer_parts, fractional_parts):
        text = f"{sign}{integer_part}{fractional_part}"
        inputs.append(text)
        # Decimal("0.0000000000") renders as "0E-10", which is rejected.
        if "E" not in str(Decimal(text)):
            inputs.append(Decimal(text))
    inputs.extend([0, 1, -42, 10**20, 0.25, 1.5, -12.125])

    for value in inputs:
        normalized = domain_normalize_numeric_string(value)
        assert domain_normalize_numeric_string(normalized) == normalized
        assert Decimal(normalized) == Decimal(str(value))
        if "." in normalized:
            assert not normalized.endswith("0")


def test_domain_monetary_conversion_normalizes_amount() -> None:
    """Normalize monetary amounts and require currency on write.

    Returns:
        None: Assertions validate monetary conversion.

    Raises:
        AssertionError: Raised when monetary shapes are incorrect.
    """

    assert domain_monetary_to_ledger({"amount": 10, "currency": "USD"}) == {"amount": "10", "currency": "USD"}
    assert domain_ledger_monetary_to_open({"amount": "1.2300", "currency": "EUR"}) == {
        "amount": "1.23",
        "currency": "EUR",
    }

    with pytest.raises(ConversionValidationError) as error:
        domain_monetary_to_ledger({"amount": "1"}, "stockRepurchase.price")
    assert error.value.field_path == "stockRepurchase.price.currency"

    with pytest.raises(ConversionParseError):
        domain_ledger_monetary_to_open({"amount": "abc", "currency": "USD"})


def test_domain_optional_bridge_between_absent_and_null() -> None:
    """Bridge open-format absent keys and ledger explicit nulls.

    Returns:
        None: Assertions validate optional bridging rules.

    Raises:
        AssertionError: Raised when empty values cross the boundary unchanged.
    """

    assert domain_to_ledger_optional(None) is None
    assert domain_to_ledger_optional("") is None
    assert domain_to_ledger_optional([]) is None
    assert domain_to_ledger_optional(0) == 0

    target: dict[str, object] = {}
    domain_to_open_optional(target, "empty", "")
    domain_to_open_optional(target, "none", None)
    domain_to_open_optional(target, "list", [])
    domain_to_open_optional(target, "flag", False)
    domain_to_open_optional(target, "text", "value")
    assert target == {"flag": False, "text": "value"}


def test_domain_comment_helpers_drop_blank_entries() -> None:
    """Drop blank comments and keep ledger comments list-typed.

    Returns:
        None: Assertions validate comment cleaning.

    Raises:
        AssertionError: Raised when blank comments survive cleaning.
    """

    assert domain_clean_comments(["a", " ", "", 3]) == ["a"]
    assert domain_clean_comments([]) is None
    assert domain_clean_comments("text") is None
    assert domain_comments_to_ledger(None) == []
    assert domain_ensure_list("x") == ["x"]
    assert domain_ensure_list(None) == []
    assert domain_ensure_list(("a", "b")) == ["a", "b"]
