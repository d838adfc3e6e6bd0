"""Issuance converters for stock, equity compensation, convertibles, and warrants.

Every issuance shares a head of identity, approval, and exemption fields.
Convertible and warrant issuances additionally carry lists of triggers with
nested conversion rights, handled by `conversion_mechanisms`.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Final

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    domain_comments_to_ledger,
    domain_date_to_ledger_time,
    domain_ledger_numeric_to_open,
    domain_ledger_time_to_date,
    domain_normalize_numeric_string,
    domain_to_open_optional,
)

from .conversion_mechanisms import (
    MechanismFamily,
    mapping_conversion_trigger_to_ledger,
    mapping_conversion_trigger_to_open,
)
from .payload_fields import (
    mapping_object_list,
    mapping_optional_bool,
    mapping_optional_date,
    mapping_optional_monetary,
    mapping_optional_numeric,
    mapping_optional_text,
    mapping_read_comments,
    mapping_read_date,
    mapping_read_integer,
    mapping_read_monetary,
    mapping_read_numeric,
    mapping_read_object_list,
    mapping_read_optional_date,
    mapping_read_optional_monetary,
    mapping_read_optional_numeric,
    mapping_read_optional_text,
    mapping_read_record,
    mapping_read_text,
    mapping_read_text_list,
    mapping_require_date,
    mapping_require_integer,
    mapping_require_monetary,
    mapping_require_numeric,
    mapping_require_object,
    mapping_require_text,
    mapping_text_list,
)
from .variant_tables import (
    COMPENSATION_TYPE_TABLE,
    CONVERTIBLE_TYPE_TABLE,
    PERIOD_TYPE_TABLE,
    QUANTITY_SOURCE_TABLE,
    STOCK_ISSUANCE_TYPE_TABLE,
    TERMINATION_REASON_TABLE,
)

# Legacy plan-security types collapse onto equity-compensation types; OTHER is lossy.
PLAN_SECURITY_COMPENSATION_TYPES: Final[dict[str, str]] = {
    "OPTION": "OcfCompensationTypeOption",
    "RSU": "OcfCompensationTypeRSU",
    "OTHER": "OcfCompensationTypeOption",
}


def _mapping_issuance_head_to_ledger(record: Mapping[str, Any], path: str) -> dict[str, Any]:
    return {
        "id": mapping_require_text(record, "id", path),
        "date": mapping_require_date(record, "date", path),
        "security_id": mapping_require_text(record, "security_id", path),
        "custom_id": mapping_require_text(record, "custom_id", path),
        "stakeholder_id": mapping_require_text(record, "stakeholder_id", path),
        "board_approval_date": mapping_optional_date(record, "board_approval_date", path),
        "stockholder_approval_date": mapping_optional_date(record, "stockholder_approval_date", path),
        "consideration_text": mapping_optional_text(record, "consideration_text", path),
        "security_law_exemptions": _mapping_exemptions_to_ledger(record, path),
    }


def _mapping_issuance_head_to_open(record: Mapping[str, Any], path: str, object_type: str) -> dict[str, Any]:
    output: dict[str, Any] = {
        "object_type": object_type,
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "security_id": mapping_read_text(record, "security_id", path),
        "custom_id": mapping_read_text(record, "custom_id", path),
        "stakeholder_id": mapping_read_text(record, "stakeholder_id", path),
    }
    domain_to_open_optional(
        output, "board_approval_date", mapping_read_optional_date(record, "board_approval_date", path)
    )
    domain_to_open_optional(
        output, "stockholder_approval_date", mapping_read_optional_date(record, "stockholder_approval_date", path)
    )
    domain_to_open_optional(
        output, "consideration_text", mapping_read_optional_text(record, "consideration_text", path)
    )
    output["security_law_exemptions"] = [
        {
            "description": mapping_read_text(exemption, "description", f"{path}.security_law_exemptions[{index}]"),
            "jurisdiction": mapping_read_text(exemption, "jurisdiction", f"{path}.security_law_exemptions[{index}]"),
        }
        for index, exemption in enumerate(mapping_read_object_list(record, "security_law_exemptions", path))
    ]
    return output


def _mapping_exemptions_to_ledger(record: Mapping[str, Any], path: str) -> list[dict[str, str]]:
    exemptions = []
    for index, exemption in enumerate(mapping_object_list(record, "security_law_exemptions", path)):
        item_path = f"{path}.security_law_exemptions[{index}]"
        exemptions.append(
            {
                "description": mapping_require_text(exemption, "description", item_path),
                "jurisdiction": mapping_require_text(exemption, "jurisdiction", item_path),
            }
        )
    return exemptions


def _mapping_vestings_to_ledger(record: Mapping[str, Any], path: str) -> list[dict[str, str]]:
    """Convert inline vestings, dropping entries whose amount is not positive."""

    vestings = []
    for index, vesting in enumerate(mapping_object_list(record, "vestings", path)):
        item_path = f"{path}.vestings[{index}]"
        amount = domain_normalize_numeric_string(vesting.get("amount"), f"{item_path}.amount")
        if Decimal(amount) <= 0:
            continue
        vestings.append(
            {
                "date": domain_date_to_ledger_time(vesting.get("date"), f"{item_path}.date"),
                "amount": amount,
            }
        )
    return vestings


def _mapping_vestings_to_open(record: Mapping[str, Any], path: str) -> list[dict[str, str]]:
    return [
        {
            "date": domain_ledger_time_to_date(vesting.get("date"), f"{path}.vestings[{index}].date"),
            "amount": domain_ledger_numeric_to_open(vesting.get("amount"), f"{path}.vestings[{index}].amount"),
        }
        for index, vesting in enumerate(mapping_read_object_list(record, "vestings", path))
    ]


def mapping_stock_issuance_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock issuance to its ledger payload.

    Placeholder `0`-`0` share-number ranges and non-positive vestings are
    dropped because the ledger contract rejects them.

    Args:
        data: Open-format stock issuance.

    Returns:
        dict[str, Any]: Ledger issuance payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when the issuance type is unknown.
    """

    path = "stockIssuance"
    record = mapping_require_object(data, path)
    payload = _mapping_issuance_head_to_ledger(record, path)
    share_ranges = []
    for index, share_range in enumerate(mapping_object_list(record, "share_numbers_issued", path)):
        item_path = f"{path}.share_numbers_issued[{index}]"
        starting = mapping_require_numeric(share_range, "starting_share_number", item_path)
        ending = mapping_require_numeric(share_range, "ending_share_number", item_path)
        if starting == "0" and ending == "0":
            continue
        share_ranges.append({"starting_share_number": starting, "ending_share_number": ending})
    payload.update(
        {
            "stock_class_id": mapping_require_text(record, "stock_class_id", path),
            "stock_plan_id": mapping_optional_text(record, "stock_plan_id", path),
            "share_numbers_issued": share_ranges,
            "share_price": mapping_require_monetary(record, "share_price", path),
            "quantity": mapping_require_numeric(record, "quantity", path),
            "vesting_terms_id": mapping_optional_text(record, "vesting_terms_id", path),
            "vestings": _mapping_vestings_to_ledger(record, path),
            "cost_basis": mapping_optional_monetary(record, "cost_basis", path),
            "stock_legend_ids": mapping_text_list(record, "stock_legend_ids", path),
            "issuance_type": STOCK_ISSUANCE_TYPE_TABLE.optional_to_ledger(
                record.get("issuance_type"), f"{path}.issuance_type"
            ),
            "comments": domain_comments_to_ledger(record.get("comments")),
        }
    )
    return payload


def mapping_stock_issuance_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock issuance to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "stockIssuance"
    record = mapping_read_record(payload, path)
    output = _mapping_issuance_head_to_open(record, path, "TX_STOCK_ISSUANCE")
    output["stock_class_id"] = mapping_read_text(record, "stock_class_id", path)
    domain_to_open_optional(output, "stock_plan_id", mapping_read_optional_text(record, "stock_plan_id", path))
    domain_to_open_optional(
        output,
        "share_numbers_issued",
        [
            {
                "starting_share_number": mapping_read_numeric(
                    share_range, "starting_share_number", f"{path}.share_numbers_issued[{index}]"
                ),
                "ending_share_number": mapping_read_numeric(
                    share_range, "ending_share_number", f"{path}.share_numbers_issued[{index}]"
                ),
            }
            for index, share_range in enumerate(mapping_read_object_list(record, "share_numbers_issued", path))
        ],
    )
    output["share_price"] = mapping_read_monetary(record, "share_price", path)
    output["quantity"] = mapping_read_numeric(record, "quantity", path)
    domain_to_open_optional(output, "vesting_terms_id", mapping_read_optional_text(record, "vesting_terms_id", path))
    domain_to_open_optional(output, "vestings", _mapping_vestings_to_open(record, path))
    domain_to_open_optional(output, "cost_basis", mapping_read_optional_monetary(record, "cost_basis", path))
    output["stock_legend_ids"] = mapping_read_text_list(record, "stock_legend_ids", path)
    domain_to_open_optional(
        output,
        "issuance_type",
        STOCK_ISSUANCE_TYPE_TABLE.optional_to_open(record.get("issuance_type"), f"{path}.issuance_type"),
    )
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def _mapping_termination_windows_to_ledger(record: Mapping[str, Any], path: str) -> list[dict[str, str]]:
    windows = []
    for index, window in enumerate(mapping_object_list(record, "termination_exercise_windows", path)):
        item_path = f"{path}.termination_exercise_windows[{index}]"
        windows.append(
            {
                "reason": TERMINATION_REASON_TABLE.to_ledger(window.get("reason"), f"{item_path}.reason"),
                "period": mapping_require_integer(window, "period", item_path),
                "period_type": PERIOD_TYPE_TABLE.to_ledger(window.get("period_type"), f"{item_path}.period_type"),
            }
        )
    return windows


def _mapping_termination_windows_to_open(record: Mapping[str, Any], path: str) -> list[dict[str, Any]]:
    windows = []
    for index, window in enumerate(mapping_read_object_list(record, "termination_exercise_windows", path)):
        item_path = f"{path}.termination_exercise_windows[{index}]"
        windows.append(
            {
                "reason": TERMINATION_REASON_TABLE.to_open(window.get("reason"), f"{item_path}.reason"),
                "period": mapping_read_integer(window, "period", item_path),
                "period_type": PERIOD_TYPE_TABLE.to_open(window.get("period_type"), f"{item_path}.period_type"),
            }
        )
    return windows


def mapping_equity_compensation_issuance_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one equity compensation issuance to its ledger payload.

    Args:
        data: Open-format equity compensation issuance.

    Returns:
        dict[str, Any]: Ledger issuance payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when a compensation type or termination label is unknown.
    """

    path = "equityCompensationIssuance"
    record = mapping_require_object(data, path)
    payload = _mapping_issuance_head_to_ledger(record, path)
    payload.update(
        {
            "stock_plan_id": mapping_optional_text(record, "stock_plan_id", path),
            "stock_class_id": mapping_optional_text(record, "stock_class_id", path),
            "vesting_terms_id": mapping_optional_text(record, "vesting_terms_id", path),
            "compensation_type": COMPENSATION_TYPE_TABLE.to_ledger(
                record.get("compensation_type"), f"{path}.compensation_type"
            ),
            "quantity": mapping_require_numeric(record, "quantity", path),
            "exercise_price": mapping_optional_monetary(record, "exercise_price", path),
            "base_price": mapping_optional_monetary(record, "base_price", path),
            "early_exercisable": mapping_optional_bool(record, "early_exercisable", path),
            "vestings": _mapping_vestings_to_ledger(record, path),
            "expiration_date": mapping_optional_date(record, "expiration_date", path),
            "termination_exercise_windows": _mapping_termination_windows_to_ledger(record, path),
            "comments": domain_comments_to_ledger(record.get("comments")),
        }
    )
    return payload


def mapping_equity_compensation_issuance_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger equity compensation issuance to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "equityCompensationIssuance"
    record = mapping_read_record(payload, path)
    output = _mapping_issuance_head_to_open(record, path, "TX_EQUITY_COMPENSATION_ISSUANCE")
    domain_to_open_optional(output, "stock_plan_id", mapping_read_optional_text(record, "stock_plan_id", path))
    domain_to_open_optional(output, "stock_class_id", mapping_read_optional_text(record, "stock_class_id", path))
    domain_to_open_optional(output, "vesting_terms_id", mapping_read_optional_text(record, "vesting_terms_id", path))
    output["compensation_type"] = COMPENSATION_TYPE_TABLE.to_open(
        record.get("compensation_type"), f"{path}.compensation_type"
    )
    output["quantity"] = mapping_read_numeric(record, "quantity", path)
    domain_to_open_optional(output, "exercise_price", mapping_read_optional_monetary(record, "exercise_price", path))
    domain_to_open_optional(output, "base_price", mapping_read_optional_monetary(record, "base_price", path))
    early_exercisable = record.get("early_exercisable")
    if isinstance(early_exercisable, bool):
        output["early_exercisable"] = early_exercisable
    domain_to_open_optional(output, "vestings", _mapping_vestings_to_open(record, path))
    domain_to_open_optional(output, "expiration_date", mapping_read_optional_date(record, "expiration_date", path))
    output["termination_exercise_windows"] = _mapping_termination_windows_to_open(record, path)
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_plan_security_issuance_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one legacy plan security issuance onto the equity compensation contract.

    Args:
        data: Open-format plan security issuance.

    Returns:
        dict[str, Any]: Equity compensation issuance payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when the plan security type is unknown.
    """

    path = "planSecurityIssuance"
    record = mapping_require_object(data, path)
    payload = _mapping_issuance_head_to_ledger(record, path)
    plan_security_type = record.get("plan_security_type")
    if not isinstance(plan_security_type, str) or plan_security_type not in PLAN_SECURITY_COMPENSATION_TYPES:
        raise ConversionParseError(
            f"Unknown plan security type at '{path}.plan_security_type': {plan_security_type!r}",
            source=f"{path}.plan_security_type",
            received_value=plan_security_type,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )
    payload.update(
        {
            "stock_plan_id": mapping_optional_text(record, "stock_plan_id", path),
            "stock_class_id": mapping_optional_text(record, "stock_class_id", path),
            "vesting_terms_id": mapping_optional_text(record, "vesting_terms_id", path),
            "compensation_type": PLAN_SECURITY_COMPENSATION_TYPES[plan_security_type],
            "quantity": mapping_require_numeric(record, "quantity", path),
            "exercise_price": mapping_optional_monetary(record, "exercise_price", path),
            "base_price": None,
            "early_exercisable": None,
            "vestings": [],
            "expiration_date": None,
            "termination_exercise_windows": [],
            "comments": domain_comments_to_ledger(record.get("comments")),
        }
    )
    return payload


def _mapping_triggers_to_ledger(
    record: Mapping[str, Any],
    key: str,
    path: str,
    family: MechanismFamily,
) -> list[dict[str, Any]]:
    triggers = record.get(key)
    if not isinstance(triggers, (list, tuple)):
        raise ConversionValidationError(
            f"{path}.{key}",
            expected_type="object[]",
            received_value=triggers,
        )
    return [mapping_conversion_trigger_to_ledger(trigger, family) for trigger in triggers]


def mapping_convertible_issuance_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one convertible issuance, including its conversion triggers.

    Args:
        data: Open-format convertible issuance.

    Returns:
        dict[str, Any]: Ledger issuance payload.

    Raises:
        ConversionValidationError: Raised when a required field or any `trigger_id` is missing.
        ConversionParseError: Raised when a convertible type, trigger type, or mechanism is unknown.
    """

    path = "convertibleIssuance"
    record = mapping_require_object(data, path)
    payload = _mapping_issuance_head_to_ledger(record, path)
    payload.update(
        {
            "investment_amount": mapping_require_monetary(record, "investment_amount", path),
            "convertible_type": CONVERTIBLE_TYPE_TABLE.to_ledger(
                record.get("convertible_type"), f"{path}.convertible_type"
            ),
            "conversion_triggers": _mapping_triggers_to_ledger(
                record, "conversion_triggers", path, MechanismFamily.CONVERTIBLE
            ),
            "pro_rata": mapping_optional_numeric(record, "pro_rata", path),
            "seniority": mapping_require_integer(record, "seniority", path),
            "comments": domain_comments_to_ledger(record.get("comments")),
        }
    )
    return payload


def mapping_convertible_issuance_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger convertible issuance to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "convertibleIssuance"
    record = mapping_read_record(payload, path)
    output = _mapping_issuance_head_to_open(record, path, "TX_CONVERTIBLE_ISSUANCE")
    output["investment_amount"] = mapping_read_monetary(record, "investment_amount", path)
    output["convertible_type"] = CONVERTIBLE_TYPE_TABLE.to_open(
        record.get("convertible_type"), f"{path}.convertible_type"
    )
    output["conversion_triggers"] = [
        mapping_conversion_trigger_to_open(trigger, MechanismFamily.CONVERTIBLE)
        for trigger in mapping_read_object_list(record, "conversion_triggers", path)
    ]
    domain_to_open_optional(output, "pro_rata", mapping_read_optional_numeric(record, "pro_rata", path))
    output["seniority"] = mapping_read_integer(record, "seniority", path)
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_warrant_issuance_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one warrant issuance, including its exercise triggers.

    A warrant with a quantity but no quantity source is recorded as
    `UNSPECIFIED`.

    Args:
        data: Open-format warrant issuance.

    Returns:
        dict[str, Any]: Ledger issuance payload.

    Raises:
        ConversionValidationError: Raised when a required field or any `trigger_id` is missing.
        ConversionParseError: Raised when a quantity source, trigger type, or mechanism is unknown.
    """

    path = "warrantIssuance"
    record = mapping_require_object(data, path)
    payload = _mapping_issuance_head_to_ledger(record, path)
    quantity = mapping_optional_numeric(record, "quantity", path)
    quantity_source = record.get("quantity_source")
    if quantity is not None and quantity_source in (None, ""):
        quantity_source = "UNSPECIFIED"
    payload.update(
        {
            "quantity": quantity,
            "quantity_source": QUANTITY_SOURCE_TABLE.optional_to_ledger(quantity_source, f"{path}.quantity_source"),
            "exercise_price": mapping_optional_monetary(record, "exercise_price", path),
            "purchase_price": mapping_require_monetary(record, "purchase_price", path),
            "exercise_triggers": _mapping_triggers_to_ledger(
                record, "exercise_triggers", path, MechanismFamily.WARRANT
            ),
            "warrant_expiration_date": mapping_optional_date(record, "warrant_expiration_date", path),
            "vesting_terms_id": mapping_optional_text(record, "vesting_terms_id", path),
            "vestings": _mapping_vestings_to_ledger(record, path),
            "comments": domain_comments_to_ledger(record.get("comments")),
        }
    )
    return payload


def mapping_warrant_issuance_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger warrant issuance to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "warrantIssuance"
    record = mapping_read_record(payload, path)
    output = _mapping_issuance_head_to_open(record, path, "TX_WARRANT_ISSUANCE")
    quantity = mapping_read_optional_numeric(record, "quantity", path)
    domain_to_open_optional(output, "quantity", quantity)
    quantity_source = QUANTITY_SOURCE_TABLE.optional_to_open(record.get("quantity_source"), f"{path}.quantity_source")
    if quantity is not None and quantity_source is None:
        quantity_source = "UNSPECIFIED"
    domain_to_open_optional(output, "quantity_source", quantity_source)
    domain_to_open_optional(output, "exercise_price", mapping_read_optional_monetary(record, "exercise_price", path))
    output["purchase_price"] = mapping_read_monetary(record, "purchase_price", path)
    output["exercise_triggers"] = [
        mapping_conversion_trigger_to_open(trigger, MechanismFamily.WARRANT)
        for trigger in mapping_read_object_list(record, "exercise_triggers", path)
    ]
    domain_to_open_optional(
        output, "warrant_expiration_date", mapping_read_optional_date(record, "warrant_expiration_date", path)
    )
    domain_to_open_optional(output, "vesting_terms_id", mapping_read_optional_text(record, "vesting_terms_id", path))
    domain_to_open_optional(output, "vestings", _mapping_vestings_to_open(record, path))
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output
