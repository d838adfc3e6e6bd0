"""Converters for flat records without quantities moving between securities.

Acceptances, retractions, vesting events, conversions, reissuances,
consolidations, repricings, pool returns, and stakeholder change events each
carry a fixed set of scalar fields. Most are declared as field lists; the two
stakeholder change events and the consolidation need small shape adapters.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from captable_bridge.domain import (
    ConversionValidationError,
    domain_comments_to_ledger,
    domain_to_open_optional,
)

from .payload_fields import (
    mapping_optional_text,
    mapping_read_comments,
    mapping_read_date,
    mapping_read_optional_text,
    mapping_read_record,
    mapping_read_text,
    mapping_read_text_list,
    mapping_require_date,
    mapping_require_object,
    mapping_require_text,
    mapping_text_list,
)
from .record_fields import (
    TRANSACTION_HEAD_FIELDS,
    RecordField,
    date_field,
    id_list_field,
    mapping_record_to_ledger,
    mapping_record_to_open,
    numeric_field,
    text_field,
)
from .variant_tables import STAKEHOLDER_RELATIONSHIP_TABLE, STAKEHOLDER_STATUS_TABLE

LedgerConverter = Callable[[Mapping[str, Any]], dict[str, Any]]


def _mapping_record_pair(
    path: str,
    object_type: str,
    fields: tuple[RecordField, ...],
) -> tuple[LedgerConverter, LedgerConverter]:
    def to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
        return mapping_record_to_ledger(data, path, fields)

    def to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
        return mapping_record_to_open(payload, path, object_type, fields)

    to_ledger.__name__ = f"mapping_{path}_to_ledger"
    to_open.__name__ = f"mapping_{path}_to_open"
    return to_ledger, to_open


ACCEPTANCE_FIELDS: tuple[RecordField, ...] = TRANSACTION_HEAD_FIELDS

RETRACTION_FIELDS: tuple[RecordField, ...] = TRANSACTION_HEAD_FIELDS + (text_field("reason_text"),)

VESTING_CONDITION_EVENT_FIELDS: tuple[RecordField, ...] = TRANSACTION_HEAD_FIELDS + (
    text_field("vesting_condition_id"),
)

mapping_stock_acceptance_to_ledger, mapping_stock_acceptance_to_open = _mapping_record_pair(
    "stockAcceptance", "TX_STOCK_ACCEPTANCE", ACCEPTANCE_FIELDS
)
mapping_warrant_acceptance_to_ledger, mapping_warrant_acceptance_to_open = _mapping_record_pair(
    "warrantAcceptance", "TX_WARRANT_ACCEPTANCE", ACCEPTANCE_FIELDS
)
mapping_convertible_acceptance_to_ledger, mapping_convertible_acceptance_to_open = _mapping_record_pair(
    "convertibleAcceptance", "TX_CONVERTIBLE_ACCEPTANCE", ACCEPTANCE_FIELDS
)
(
    mapping_equity_compensation_acceptance_to_ledger,
    mapping_equity_compensation_acceptance_to_open,
) = _mapping_record_pair("equityCompensationAcceptance", "TX_EQUITY_COMPENSATION_ACCEPTANCE", ACCEPTANCE_FIELDS)

mapping_stock_retraction_to_ledger, mapping_stock_retraction_to_open = _mapping_record_pair(
    "stockRetraction", "TX_STOCK_RETRACTION", RETRACTION_FIELDS
)
mapping_warrant_retraction_to_ledger, mapping_warrant_retraction_to_open = _mapping_record_pair(
    "warrantRetraction", "TX_WARRANT_RETRACTION", RETRACTION_FIELDS
)
mapping_convertible_retraction_to_ledger, mapping_convertible_retraction_to_open = _mapping_record_pair(
    "convertibleRetraction", "TX_CONVERTIBLE_RETRACTION", RETRACTION_FIELDS
)
(
    mapping_equity_compensation_retraction_to_ledger,
    mapping_equity_compensation_retraction_to_open,
) = _mapping_record_pair("equityCompensationRetraction", "TX_EQUITY_COMPENSATION_RETRACTION", RETRACTION_FIELDS)

mapping_vesting_start_to_ledger, mapping_vesting_start_to_open = _mapping_record_pair(
    "vestingStart", "TX_VESTING_START", VESTING_CONDITION_EVENT_FIELDS
)
mapping_vesting_event_to_ledger, mapping_vesting_event_to_open = _mapping_record_pair(
    "vestingEvent", "TX_VESTING_EVENT", VESTING_CONDITION_EVENT_FIELDS
)
mapping_vesting_acceleration_to_ledger, mapping_vesting_acceleration_to_open = _mapping_record_pair(
    "vestingAcceleration",
    "TX_VESTING_ACCELERATION",
    TRANSACTION_HEAD_FIELDS + (numeric_field("quantity"), text_field("reason_text")),
)

mapping_stock_conversion_to_ledger, mapping_stock_conversion_to_open = _mapping_record_pair(
    "stockConversion",
    "TX_STOCK_CONVERSION",
    TRANSACTION_HEAD_FIELDS
    + (
        numeric_field("quantity"),
        id_list_field("resulting_security_ids"),
        text_field("balance_security_id", required=False),
    ),
)
mapping_convertible_conversion_to_ledger, mapping_convertible_conversion_to_open = _mapping_record_pair(
    "convertibleConversion",
    "TX_CONVERTIBLE_CONVERSION",
    TRANSACTION_HEAD_FIELDS
    + (
        id_list_field("resulting_security_ids"),
        text_field("balance_security_id", required=False),
        text_field("trigger_id", required=False),
    ),
)
mapping_stock_reissuance_to_ledger, mapping_stock_reissuance_to_open = _mapping_record_pair(
    "stockReissuance",
    "TX_STOCK_REISSUANCE",
    TRANSACTION_HEAD_FIELDS
    + (
        id_list_field("resulting_security_ids"),
        text_field("reason_text", required=False),
        text_field("split_transaction_id", required=False),
    ),
)
(
    mapping_equity_compensation_repricing_to_ledger,
    mapping_equity_compensation_repricing_to_open,
) = _mapping_record_pair(
    "equityCompensationRepricing",
    "TX_EQUITY_COMPENSATION_REPRICING",
    TRANSACTION_HEAD_FIELDS + (id_list_field("resulting_security_ids"),),
)
mapping_stock_plan_return_to_pool_to_ledger, mapping_stock_plan_return_to_pool_to_open = _mapping_record_pair(
    "stockPlanReturnToPool",
    "TX_STOCK_PLAN_RETURN_TO_POOL",
    (
        text_field("id"),
        date_field("date"),
        text_field("security_id", required=False),
        text_field("stock_plan_id"),
        numeric_field("quantity"),
        text_field("reason_text"),
    ),
)


def mapping_stock_consolidation_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock consolidation, collapsing its single resulting security.

    Args:
        data: Open-format consolidation.

    Returns:
        dict[str, Any]: Ledger payload with a singular `resulting_security_id`.

    Raises:
        ConversionValidationError: Raised when the consolidation does not name exactly one resulting security.
    """

    path = "stockConsolidation"
    record = mapping_require_object(data, path)
    entity_id = mapping_require_text(record, "id", path)
    resulting_security_ids = mapping_text_list(record, "resulting_security_ids", path, required=True)
    if len(resulting_security_ids) != 1:
        raise ConversionValidationError(
            f"{path}.resulting_security_ids",
            "Exactly one resulting security is required",
            expected_type="string[1]",
            received_value=resulting_security_ids,
        )
    return {
        "id": entity_id,
        "date": mapping_require_date(record, "date", path),
        "security_ids": mapping_text_list(record, "security_ids", path, required=True),
        "resulting_security_id": resulting_security_ids[0],
        "reason_text": mapping_optional_text(record, "reason_text", path),
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stock_consolidation_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger consolidation back to its list-shaped open-format record."""

    path = "stockConsolidation"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "TX_STOCK_CONSOLIDATION",
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "security_ids": mapping_read_text_list(record, "security_ids", path),
        "resulting_security_ids": [mapping_read_text(record, "resulting_security_id", path)],
    }
    domain_to_open_optional(output, "reason_text", mapping_read_optional_text(record, "reason_text", path))
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_stakeholder_relationship_change_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stakeholder relationship change event.

    Args:
        data: Open-format event.

    Returns:
        dict[str, Any]: Ledger payload with relationship labels.

    Raises:
        ConversionValidationError: Raised when a required field is missing.
        ConversionParseError: Raised when a relationship code is unknown.
    """

    path = "stakeholderRelationshipChangeEvent"
    record = mapping_require_object(data, path)
    entity_id = mapping_require_text(record, "id", path)
    relationships = mapping_text_list(record, "new_relationships", path)
    return {
        "id": entity_id,
        "date": mapping_require_date(record, "date", path),
        "stakeholder_id": mapping_require_text(record, "stakeholder_id", path),
        "new_relationships": [
            STAKEHOLDER_RELATIONSHIP_TABLE.to_ledger(code, f"{path}.new_relationships[{index}]")
            for index, code in enumerate(relationships)
        ],
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stakeholder_relationship_change_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger relationship change event back to open format."""

    path = "stakeholderRelationshipChangeEvent"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "CE_STAKEHOLDER_RELATIONSHIP",
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "stakeholder_id": mapping_read_text(record, "stakeholder_id", path),
        "new_relationships": [
            STAKEHOLDER_RELATIONSHIP_TABLE.to_open(label, f"{path}.new_relationships[{index}]")
            for index, label in enumerate(mapping_read_text_list(record, "new_relationships", path))
        ],
    }
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_stakeholder_status_change_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stakeholder status change event.

    Raises:
        ConversionValidationError: Raised when a required field is missing.
        ConversionParseError: Raised when the status code is unknown.
    """

    path = "stakeholderStatusChangeEvent"
    record = mapping_require_object(data, path)
    entity_id = mapping_require_text(record, "id", path)
    date = mapping_require_date(record, "date", path)
    stakeholder_id = mapping_require_text(record, "stakeholder_id", path)
    if record.get("new_status") in (None, ""):
        raise ConversionValidationError(
            f"{path}.new_status",
            expected_type="string",
            received_value=record.get("new_status"),
        )
    return {
        "id": entity_id,
        "date": date,
        "stakeholder_id": stakeholder_id,
        "new_status": STAKEHOLDER_STATUS_TABLE.to_ledger(record["new_status"], f"{path}.new_status"),
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stakeholder_status_change_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger status change event back to open format."""

    path = "stakeholderStatusChangeEvent"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "CE_STAKEHOLDER_STATUS",
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "stakeholder_id": mapping_read_text(record, "stakeholder_id", path),
        "new_status": STAKEHOLDER_STATUS_TABLE.to_open(record.get("new_status"), f"{path}.new_status"),
    }
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output
