"""Regression tests for issuance converters and their nested triggers."""

from __future__ import annotations

import pytest

from captable_bridge.domain import ConversionErrorCode, ConversionParseError, ConversionValidationError
from captable_bridge.mapping.issuances import (
    PLAN_SECURITY_COMPENSATION_TYPES,
    mapping_convertible_issuance_to_ledger,
    mapping_convertible_issuance_to_open,
    mapping_equity_compensation_issuance_to_ledger,
    mapping_equity_compensation_issuance_to_open,
    mapping_plan_security_issuance_to_ledger,
    mapping_stock_issuance_to_ledger,
    mapping_stock_issuance_to_open,
    mapping_warrant_issuance_to_ledger,
    mapping_warrant_issuance_to_open,
)


def _build_issuance_head(object_type: str, security_id: str) -> dict[str, object]:
    return {
        "object_type": object_type,
        "id": f"{security_id}-tx",
        "date": "2024-02-01",
        "security_id": security_id,
        "custom_id": f"{security_id.upper()}-001",
        "stakeholder_id": "sh-1",
        "security_law_exemptions": [{"description": "Reg D", "jurisdiction": "US"}],
    }


def _build_stock_issuance() -> dict[str, object]:
    return {
        **_build_issuance_head("TX_STOCK_ISSUANCE", "cs-1"),
        "board_approval_date": "2024-01-20",
        "stock_class_id": "common",
        "share_price": {"amount": "0.0001", "currency": "USD"},
        "quantity": "1000000",
        "share_numbers_issued": [
            {"starting_share_number": "0", "ending_share_number": "0"},
            {"starting_share_number": "1", "ending_share_number": "1000000"},
        ],
        "vestings": [
            {"date": "2024-06-01", "amount": "0"},
            {"date": "2025-02-01", "amount": "250000.00"},
        ],
        "stock_legend_ids": ["legend-1"],
        "issuance_type": "FOUNDERS_STOCK",
    }


def _build_safe_issuance() -> dict[str, object]:
    return {
        **_build_issuance_head("TX_CONVERTIBLE_ISSUANCE", "safe-1"),
        "investment_amount": {"amount": "250000.00", "currency": "USD"},
        "convertible_type": "SAFE",
        "seniority": 1,
        "conversion_triggers": [
            {
                "type": "AUTOMATIC_ON_CONDITION",
                "trigger_id": "qualified-financing",
                "conversion_right": {
                    "type": "CONVERTIBLE_CONVERSION_RIGHT",
                    "conversion_mechanism": {
                        "type": "SAFE_CONVERSION",
                        "conversion_valuation_cap": {"amount": "8000000", "currency": "USD"},
                        "conversion_mfn": False,
                    },
                },
            }
        ],
    }


def test_mapping_stock_issuance_drops_placeholder_ranges_and_empty_vestings() -> None:
    """Drop `0`-`0` share ranges and non-positive vestings before writing.

    Returns:
        None: Assertions validate ledger-side filtering.

    Raises:
        AssertionError: Raised when rejected ledger values survive conversion.
    """

    payload = mapping_stock_issuance_to_ledger(_build_stock_issuance())

    assert payload["share_numbers_issued"] == [{"starting_share_number": "1", "ending_share_number": "1000000"}]
    assert payload["vestings"] == [{"date": "2025-02-01T00:00:00.000Z", "amount": "250000"}]
    assert payload["issuance_type"] == "OcfStockIssuanceFounders"
    assert payload["board_approval_date"] == "2024-01-20T00:00:00.000Z"
    assert payload["stockholder_approval_date"] is None
    assert payload["cost_basis"] is None
    assert payload["security_law_exemptions"] == [{"description": "Reg D", "jurisdiction": "US"}]


def test_mapping_stock_issuance_round_trip() -> None:
    """Read back a stock issuance with calendar dates and omitted empty optionals.

    Returns:
        None: Assertions validate stock issuance round trip.

    Raises:
        AssertionError: Raised when issuance fields are lost or altered.
    """

    result = mapping_stock_issuance_to_open(mapping_stock_issuance_to_ledger(_build_stock_issuance()))

    assert result["object_type"] == "TX_STOCK_ISSUANCE"
    assert result["date"] == "2024-02-01"
    assert result["board_approval_date"] == "2024-01-20"
    assert "stockholder_approval_date" not in result
    assert "stock_plan_id" not in result
    assert result["share_price"] == {"amount": "0.0001", "currency": "USD"}
    assert result["vestings"] == [{"date": "2025-02-01", "amount": "250000"}]
    assert result["stock_legend_ids"] == ["legend-1"]
    assert result["issuance_type"] == "FOUNDERS_STOCK"


def test_mapping_stock_issuance_requires_share_price() -> None:
    """Reject stock issuances without a share price, naming the nested field.

    Returns:
        None: Assertions validate required monetary fields.

    Raises:
        AssertionError: Raised when a missing share price is accepted.
    """

    data = _build_stock_issuance()
    data["share_price"] = {"currency": "USD"}

    with pytest.raises(ConversionValidationError) as error:
        mapping_stock_issuance_to_ledger(data)
    assert error.value.field_path == "stockIssuance.share_price.amount"


def test_mapping_equity_compensation_issuance_round_trip() -> None:
    """Convert compensation types, booleans, and termination windows both ways.

    Returns:
        None: Assertions validate equity compensation issuance conversion.

    Raises:
        AssertionError: Raised when compensation fields are altered.
    """

    data = {
        **_build_issuance_head("TX_EQUITY_COMPENSATION_ISSUANCE", "opt-1"),
        "stock_plan_id": "plan-1",
        "compensation_type": "OPTION_ISO",
        "quantity": 48000,
        "exercise_price": {"amount": "1.50", "currency": "USD"},
        "early_exercisable": False,
        "expiration_date": "2034-02-01",
        "termination_exercise_windows": [
            {"reason": "VOLUNTARY_OTHER", "period": 90, "period_type": "DAYS"},
        ],
    }

    payload = mapping_equity_compensation_issuance_to_ledger(data)

    assert payload["compensation_type"] == "OcfCompensationTypeOptionISO"
    assert payload["quantity"] == "48000"
    assert payload["termination_exercise_windows"] == [
        {"reason": "OcfTermVoluntaryOther", "period": "90", "period_type": "OcfPeriodDays"}
    ]
    assert payload["base_price"] is None

    result = mapping_equity_compensation_issuance_to_open(payload)
    assert result["early_exercisable"] is False
    assert result["exercise_price"] == {"amount": "1.5", "currency": "USD"}
    assert result["termination_exercise_windows"] == [
        {"reason": "VOLUNTARY_OTHER", "period": 90, "period_type": "DAYS"}
    ]
    assert result["expiration_date"] == "2034-02-01"
    assert "base_price" not in result


def test_mapping_plan_security_issuance_lands_on_equity_compensation_contract() -> None:
    """Write legacy plan security issuances as equity compensation issuances.

    Returns:
        None: Assertions validate legacy type collapsing.

    Raises:
        AssertionError: Raised when plan security types map incorrectly.
    """

    data = {
        **_build_issuance_head("TX_PLAN_SECURITY_ISSUANCE", "ps-1"),
        "stock_plan_id": "plan-1",
        "plan_security_type": "RSU",
        "quantity": "1200",
    }

    payload = mapping_plan_security_issuance_to_ledger(data)

    assert payload["compensation_type"] == PLAN_SECURITY_COMPENSATION_TYPES["RSU"]
    result = mapping_equity_compensation_issuance_to_open(payload)
    assert result["object_type"] == "TX_EQUITY_COMPENSATION_ISSUANCE"
    assert result["compensation_type"] == "RSU"

    data["plan_security_type"] = "PHANTOM"
    with pytest.raises(ConversionParseError) as error:
        mapping_plan_security_issuance_to_ledger(data)
    assert error.value.error_code == ConversionErrorCode.UNKNOWN_ENUM_VALUE.value


@pytest.mark.parametrize("plan_security_type", [["RSU"], {"type": "OPTION"}, None, 1])
def test_mapping_plan_security_issuance_rejects_non_text_type(plan_security_type: object) -> None:
    """Reject non-text plan security types with a field-path parse error.

    Args:
        plan_security_type: Malformed plan security type value.

    Returns:
        None: Assertions validate malformed type handling.

    Raises:
        AssertionError: Raised when malformed types escape as another exception.
    """

    data = {
        **_build_issuance_head("TX_PLAN_SECURITY_ISSUANCE", "ps-2"),
        "plan_security_type": plan_security_type,
        "quantity": "10",
    }

    with pytest.raises(ConversionParseError) as error:
        mapping_plan_security_issuance_to_ledger(data)

    assert error.value.source == "planSecurityIssuance.plan_security_type"
    assert error.value.received_value == plan_security_type
    assert error.value.error_code == ConversionErrorCode.UNKNOWN_ENUM_VALUE.value


def test_mapping_convertible_issuance_round_trip() -> None:
    """Convert a SAFE issuance with its trigger and integer seniority.

    Returns:
        None: Assertions validate convertible issuance conversion.

    Raises:
        AssertionError: Raised when triggers or seniority are altered.
    """

    payload = mapping_convertible_issuance_to_ledger(_build_safe_issuance())

    assert payload["convertible_type"] == "OcfConvertibleSafe"
    assert payload["seniority"] == "1"
    assert payload["pro_rata"] is None
    assert payload["conversion_triggers"][0]["conversion_right"]["conversion_mechanism"]["tag"] == "OcfConvMechSAFE"

    result = mapping_convertible_issuance_to_open(payload)
    assert result["seniority"] == 1
    assert result["investment_amount"] == {"amount": "250000", "currency": "USD"}
    assert result["conversion_triggers"][0]["trigger_id"] == "qualified-financing"
    assert "pro_rata" not in result


def test_mapping_convertible_issuance_requires_trigger_ids_and_integer_seniority() -> None:
    """Reject triggers without identifiers and fractional seniority.

    Returns:
        None: Assertions validate convertible guard rails.

    Raises:
        AssertionError: Raised when malformed convertible issuances are accepted.
    """

    data = _build_safe_issuance()
    del data["conversion_triggers"][0]["trigger_id"]
    with pytest.raises(ConversionValidationError) as trigger_error:
        mapping_convertible_issuance_to_ledger(data)
    assert trigger_error.value.field_path == "conversionTrigger.trigger_id"

    data = _build_safe_issuance()
    data["seniority"] = "1.5"
    with pytest.raises(ConversionValidationError) as seniority_error:
        mapping_convertible_issuance_to_ledger(data)
    assert seniority_error.value.field_path == "convertibleIssuance.seniority"

    data = _build_safe_issuance()
    del data["conversion_triggers"]
    with pytest.raises(ConversionValidationError) as missing_error:
        mapping_convertible_issuance_to_ledger(data)
    assert missing_error.value.field_path == "convertibleIssuance.conversion_triggers"


def test_mapping_warrant_issuance_defaults_quantity_source() -> None:
    """Record warrant quantities without a source as unspecified.

    Returns:
        None: Assertions validate quantity source defaulting.

    Raises:
        AssertionError: Raised when the quantity source is not defaulted.
    """

    data = {
        **_build_issuance_head("TX_WARRANT_ISSUANCE", "w-1"),
        "quantity": "5000",
        "purchase_price": {"amount": "0", "currency": "USD"},
        "exercise_price": {"amount": "0.50", "currency": "USD"},
        "exercise_triggers": [],
    }

    payload = mapping_warrant_issuance_to_ledger(data)

    assert payload["quantity_source"] == "OcfQuantityUnspecified"
    assert payload["exercise_triggers"] == []
    result = mapping_warrant_issuance_to_open(payload)
    assert result["quantity"] == "5000"
    assert result["quantity_source"] == "UNSPECIFIED"
    assert result["exercise_price"] == {"amount": "0.5", "currency": "USD"}


def test_mapping_warrant_issuance_without_quantity_omits_source() -> None:
    """Leave the quantity source empty when the warrant has no quantity.

    Returns:
        None: Assertions validate optional quantity handling.

    Raises:
        AssertionError: Raised when a source is invented without a quantity.
    """

    data = {
        **_build_issuance_head("TX_WARRANT_ISSUANCE", "w-2"),
        "purchase_price": {"amount": "100", "currency": "USD"},
        "exercise_triggers": [],
    }

    payload = mapping_warrant_issuance_to_ledger(data)

    assert payload["quantity"] is None
    assert payload["quantity_source"] is None
    result = mapping_warrant_issuance_to_open(payload)
    assert "quantity" not in result
    assert "quantity_source" not in result
