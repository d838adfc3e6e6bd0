"""Regression tests for authorized-share, pool, split, and ratio adjustments."""

from __future__ import annotations

import pytest

from captable_bridge.domain import ConversionParseError, ConversionValidationError
from captable_bridge.mapping.adjustments import (
    RATIO_ADJUSTMENT_DEFAULT_CONVERSION_PRICE,
    RATIO_ADJUSTMENT_DEFAULT_ROUNDING_TYPE,
    mapping_issuer_authorized_shares_adjustment_to_ledger,
    mapping_issuer_authorized_shares_adjustment_to_open,
    mapping_stock_class_authorized_shares_adjustment_to_ledger,
    mapping_stock_class_conversion_ratio_adjustment_to_ledger,
    mapping_stock_class_conversion_ratio_adjustment_to_open,
    mapping_stock_class_split_to_ledger,
    mapping_stock_class_split_to_open,
    mapping_stock_plan_pool_adjustment_to_ledger,
    mapping_stock_plan_pool_adjustment_to_open,
)
from captable_bridge.mapping.variant_tables import ROUNDING_TYPE_TABLE


def test_mapping_stock_class_split_nests_flat_ratio_and_back() -> None:
    """Nest flat split ratio fields on the ledger and flatten them on read.

    Returns:
        None: Assertions validate split ratio reshaping.

    Raises:
        AssertionError: Raised when the ratio shape is wrong on either side.
    """

    data = {
        "object_type": "TX_STOCK_CLASS_SPLIT",
        "id": "split-1",
        "date": "2024-07-01",
        "stock_class_id": "common",
        "split_ratio_numerator": "2",
        "split_ratio_denominator": "1",
    }

    payload = mapping_stock_class_split_to_ledger(data)

    assert payload["split_ratio"] == {"numerator": "2", "denominator": "1"}
    assert "split_ratio_numerator" not in payload
    assert mapping_stock_class_split_to_open(payload) == data


def test_mapping_stock_class_split_read_rejects_missing_ratio() -> None:
    """Raise parse errors when the ledger split ratio is absent.

    Returns:
        None: Assertions validate missing ratio handling.

    Raises:
        AssertionError: Raised when a split without ratio is accepted.
    """

    with pytest.raises(ConversionParseError):
        mapping_stock_class_split_to_open(
            {"id": "split-1", "date": "2024-07-01T00:00:00.000Z", "stock_class_id": "common", "split_ratio": None}
        )


def test_mapping_conversion_ratio_adjustment_fills_mechanism_defaults() -> None:
    """Wrap the new ratio in a mechanism with default price and rounding.

    Returns:
        None: Assertions validate ratio adjustment defaults.

    Raises:
        AssertionError: Raised when the mechanism defaults change.
    """

    data = {
        "id": "adj-1",
        "date": "2024-07-01",
        "stock_class_id": "series-a",
        "new_ratio_numerator": "3",
        "new_ratio_denominator": "2",
        "board_approval_date": "2024-06-20",
    }

    payload = mapping_stock_class_conversion_ratio_adjustment_to_ledger(data)

    assert payload["new_ratio_conversion_mechanism"] == {
        "conversion_price": {"amount": "0", "currency": "USD"},
        "ratio": {"numerator": "3", "denominator": "2"},
        "rounding_type": "OcfRoundingNormal",
    }
    assert RATIO_ADJUSTMENT_DEFAULT_CONVERSION_PRICE == {"amount": "0", "currency": "USD"}
    assert RATIO_ADJUSTMENT_DEFAULT_ROUNDING_TYPE == "OcfRoundingNormal"
    assert ROUNDING_TYPE_TABLE.to_open(RATIO_ADJUSTMENT_DEFAULT_ROUNDING_TYPE, "rounding_type") == "NORMAL"
    assert "board_approval_date" not in payload

    result = mapping_stock_class_conversion_ratio_adjustment_to_open(payload)
    assert result == {
        "object_type": "TX_STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT",
        "id": "adj-1",
        "date": "2024-07-01",
        "stock_class_id": "series-a",
        "new_ratio_numerator": "3",
        "new_ratio_denominator": "2",
    }


def test_mapping_conversion_ratio_adjustment_default_price_is_not_shared() -> None:
    """Hand out a fresh default price mapping for every payload.

    Returns:
        None: Assertions validate default isolation.

    Raises:
        AssertionError: Raised when payloads share a mutable default.
    """

    data = {
        "id": "adj-1",
        "date": "2024-07-01",
        "stock_class_id": "series-a",
        "new_ratio_numerator": "1",
        "new_ratio_denominator": "1",
    }

    payload = mapping_stock_class_conversion_ratio_adjustment_to_ledger(data)
    payload["new_ratio_conversion_mechanism"]["conversion_price"]["amount"] = "99"

    assert RATIO_ADJUSTMENT_DEFAULT_CONVERSION_PRICE["amount"] == "0"


def test_mapping_authorized_shares_adjustments_round_trip() -> None:
    """Convert issuer and stock class authorized-share adjustments with approvals.

    Returns:
        None: Assertions validate authorized-share adjustment conversion.

    Raises:
        AssertionError: Raised when authorized-share values are altered.
    """

    issuer = {
        "object_type": "TX_ISSUER_AUTHORIZED_SHARES_ADJUSTMENT",
        "id": "auth-1",
        "date": "2024-07-01",
        "issuer_id": "issuer-1",
        "new_shares_authorized": "20000000",
        "board_approval_date": "2024-06-28",
    }

    payload = mapping_issuer_authorized_shares_adjustment_to_ledger(issuer)

    assert payload["board_approval_date"] == "2024-06-28T00:00:00.000Z"
    assert payload["stockholder_approval_date"] is None
    assert mapping_issuer_authorized_shares_adjustment_to_open(payload) == issuer

    with pytest.raises(ConversionValidationError) as error:
        mapping_stock_class_authorized_shares_adjustment_to_ledger(
            {"id": "auth-2", "date": "2024-07-01", "stock_class_id": "common"}
        )
    assert error.value.field_path == "stockClassAuthorizedSharesAdjustment.new_shares_authorized"


def test_mapping_stock_plan_pool_adjustment_normalizes_reserved_shares() -> None:
    """Normalize reserved share counts written as numbers.

    Returns:
        None: Assertions validate pool adjustment normalization.

    Raises:
        AssertionError: Raised when reserved shares are not canonical.
    """

    payload = mapping_stock_plan_pool_adjustment_to_ledger(
        {"id": "pool-1", "date": "2024-07-01", "stock_plan_id": "plan-1", "shares_reserved": 1500000.0}
    )

    assert payload["shares_reserved"] == "1500000"
    result = mapping_stock_plan_pool_adjustment_to_open(payload)
    assert result["object_type"] == "TX_STOCK_PLAN_POOL_ADJUSTMENT"
    assert result["shares_reserved"] == "1500000"
