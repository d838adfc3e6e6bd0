"""Regression tests for flat record converters without moving quantities."""

from __future__ import annotations

import pytest

from captable_bridge.domain import ConversionErrorCode, ConversionParseError, ConversionValidationError
from captable_bridge.mapping.simple_events import (
    mapping_convertible_conversion_to_ledger,
    mapping_convertible_conversion_to_open,
    mapping_stakeholder_relationship_change_to_ledger,
    mapping_stakeholder_relationship_change_to_open,
    mapping_stakeholder_status_change_to_ledger,
    mapping_stakeholder_status_change_to_open,
    mapping_stock_acceptance_to_ledger,
    mapping_stock_acceptance_to_open,
    mapping_stock_consolidation_to_ledger,
    mapping_stock_consolidation_to_open,
    mapping_stock_plan_return_to_pool_to_ledger,
    mapping_stock_plan_return_to_pool_to_open,
    mapping_vesting_acceleration_to_ledger,
    mapping_warrant_retraction_to_ledger,
    mapping_warrant_retraction_to_open,
)


def test_mapping_stock_acceptance_converts_head_fields() -> None:
    """Convert acceptance head fields with ledger dates and list comments.

    Returns:
        None: Assertions validate acceptance ledger payload.

    Raises:
        AssertionError: Raised when acceptance payload shape is incorrect.
    """

    payload = mapping_stock_acceptance_to_ledger(
        {"object_type": "TX_STOCK_ACCEPTANCE", "id": "acc-1", "date": "2024-03-01", "security_id": "sec-1"}
    )

    assert payload == {
        "id": "acc-1",
        "date": "2024-03-01T00:00:00.000Z",
        "security_id": "sec-1",
        "comments": [],
    }
    assert mapping_stock_acceptance_to_open(payload) == {
        "object_type": "TX_STOCK_ACCEPTANCE",
        "id": "acc-1",
        "date": "2024-03-01",
        "security_id": "sec-1",
    }


def test_mapping_simple_events_report_missing_id_first() -> None:
    """Report a missing id before any other missing field.

    Returns:
        None: Assertions validate id-first validation order.

    Raises:
        AssertionError: Raised when another field is reported first.
    """

    with pytest.raises(ConversionValidationError) as error:
        mapping_warrant_retraction_to_ledger({})
    assert error.value.field_path == "warrantRetraction.id"
    assert error.value.detail == "Required field is missing or empty"
    assert error.value.expected_type == "string"


def test_mapping_warrant_retraction_keeps_comments() -> None:
    """Keep non-blank comments on both sides of a retraction.

    Returns:
        None: Assertions validate comment handling.

    Raises:
        AssertionError: Raised when comments are lost or blank entries survive.
    """

    payload = mapping_warrant_retraction_to_ledger(
        {
            "id": "ret-1",
            "date": "2024-03-01",
            "security_id": "w-1",
            "reason_text": "Holder declined",
            "comments": ["note", ""],
        }
    )

    assert payload["comments"] == ["note"]
    assert mapping_warrant_retraction_to_open(payload)["comments"] == ["note"]


def test_mapping_vesting_acceleration_normalizes_quantity() -> None:
    """Normalize acceleration quantities into canonical decimal strings.

    Returns:
        None: Assertions validate numeric normalization.

    Raises:
        AssertionError: Raised when quantity is not normalized.
    """

    payload = mapping_vesting_acceleration_to_ledger(
        {"id": "va-1", "date": "2024-03-01", "security_id": "sec-1", "quantity": "250.00", "reason_text": "CIC"}
    )

    assert payload["quantity"] == "250"


def test_mapping_convertible_conversion_optional_fields_round_trip() -> None:
    """Write optional fields as nulls and omit them again on read.

    Returns:
        None: Assertions validate optional bridging for conversions.

    Raises:
        AssertionError: Raised when optional fields cross the boundary incorrectly.
    """

    payload = mapping_convertible_conversion_to_ledger(
        {"id": "cc-1", "date": "2024-03-01", "security_id": "conv-1", "resulting_security_ids": ["stock-9"]}
    )

    assert payload["balance_security_id"] is None
    assert payload["trigger_id"] is None
    result = mapping_convertible_conversion_to_open(payload)
    assert "balance_security_id" not in result
    assert "trigger_id" not in result
    assert result["resulting_security_ids"] == ["stock-9"]


def test_mapping_stock_consolidation_collapses_single_result() -> None:
    """Collapse a one-element resulting list to the singular ledger field and back.

    Returns:
        None: Assertions validate consolidation shape adaptation.

    Raises:
        AssertionError: Raised when the resulting security is not collapsed.
    """

    payload = mapping_stock_consolidation_to_ledger(
        {
            "id": "cons-1",
            "date": "2024-03-01",
            "security_ids": ["s-1", "s-2"],
            "resulting_security_ids": ["s-3"],
        }
    )

    assert payload["resulting_security_id"] == "s-3"
    assert "resulting_security_ids" not in payload
    result = mapping_stock_consolidation_to_open(payload)
    assert result["object_type"] == "TX_STOCK_CONSOLIDATION"
    assert result["resulting_security_ids"] == ["s-3"]
    assert result["security_ids"] == ["s-1", "s-2"]


def test_mapping_stock_consolidation_rejects_multiple_results() -> None:
    """Reject consolidations naming more than one resulting security.

    Returns:
        None: Assertions validate consolidation cardinality.

    Raises:
        AssertionError: Raised when several resulting securities are accepted.
    """

    with pytest.raises(ConversionValidationError) as error:
        mapping_stock_consolidation_to_ledger(
            {
                "id": "cons-1",
                "date": "2024-03-01",
                "security_ids": ["s-1"],
                "resulting_security_ids": ["s-3", "s-4"],
            }
        )
    assert error.value.field_path == "stockConsolidation.resulting_security_ids"


def test_mapping_stock_plan_return_to_pool_allows_missing_security() -> None:
    """Accept pool returns without a security and omit it on read.

    Returns:
        None: Assertions validate optional security handling.

    Raises:
        AssertionError: Raised when the optional security is required.
    """

    payload = mapping_stock_plan_return_to_pool_to_ledger(
        {"id": "rtp-1", "date": "2024-03-01", "stock_plan_id": "plan-1", "quantity": 100, "reason_text": "Forfeit"}
    )

    assert payload["security_id"] is None
    assert payload["quantity"] == "100"
    result = mapping_stock_plan_return_to_pool_to_open(payload)
    assert "security_id" not in result
    assert result["object_type"] == "TX_STOCK_PLAN_RETURN_TO_POOL"


def test_mapping_stakeholder_change_events_map_labels() -> None:
    """Map relationship and status codes through their variant tables.

    Returns:
        None: Assertions validate stakeholder event labels.

    Raises:
        AssertionError: Raised when labels are mapped incorrectly.
    """

    relationship_payload = mapping_stakeholder_relationship_change_to_ledger(
        {"id": "rel-1", "date": "2024-03-01", "stakeholder_id": "sh-1", "new_relationships": ["EMPLOYEE", "FOUNDER"]}
    )
    assert relationship_payload["new_relationships"] == ["OcfRelEmployee", "OcfRelFounder"]
    assert mapping_stakeholder_relationship_change_to_open(relationship_payload)["new_relationships"] == [
        "EMPLOYEE",
        "FOUNDER",
    ]

    status_payload = mapping_stakeholder_status_change_to_ledger(
        {"id": "st-1", "date": "2024-03-01", "stakeholder_id": "sh-1", "new_status": "ACTIVE"}
    )
    assert status_payload["new_status"] == "OcfStakeholderStatusActive"
    status = mapping_stakeholder_status_change_to_open(status_payload)
    assert status["object_type"] == "CE_STAKEHOLDER_STATUS"
    assert status["new_status"] == "ACTIVE"


def test_mapping_stakeholder_status_change_rejects_unknown_status() -> None:
    """Reject unknown status codes and missing statuses.

    Returns:
        None: Assertions validate status guard rails.

    Raises:
        AssertionError: Raised when invalid statuses are accepted.
    """

    with pytest.raises(ConversionParseError) as parse_error:
        mapping_stakeholder_status_change_to_ledger(
            {"id": "st-1", "date": "2024-03-01", "stakeholder_id": "sh-1", "new_status": "RETIRED"}
        )
    assert parse_error.value.error_code == ConversionErrorCode.UNKNOWN_ENUM_VALUE.value

    with pytest.raises(ConversionValidationError) as validation_error:
        mapping_stakeholder_status_change_to_ledger({"id": "st-1", "date": "2024-03-01", "stakeholder_id": "sh-1"})
    assert validation_error.value.field_path == "stakeholderStatusChangeEvent.new_status"
