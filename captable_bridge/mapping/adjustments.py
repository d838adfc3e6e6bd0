"""Authorized-share, pool, split, and conversion-ratio adjustment converters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from captable_bridge.domain import domain_comments_to_ledger, domain_to_open_optional

from .payload_fields import (
    mapping_read_comments,
    mapping_read_date,
    mapping_read_numeric,
    mapping_read_record,
    mapping_read_text,
    mapping_require_date,
    mapping_require_numeric,
    mapping_require_object,
    mapping_require_text,
)
from .record_fields import (
    RecordField,
    date_field,
    mapping_record_to_ledger,
    mapping_record_to_open,
    numeric_field,
    text_field,
)
from .variant_tables import ROUNDING_TYPE_TABLE

_APPROVAL_FIELDS: Final[tuple[RecordField, ...]] = (
    date_field("board_approval_date", required=False),
    date_field("stockholder_approval_date", required=False),
)

ISSUER_AUTHORIZED_SHARES_FIELDS: Final[tuple[RecordField, ...]] = (
    text_field("id"),
    date_field("date"),
    text_field("issuer_id"),
    numeric_field("new_shares_authorized"),
) + _APPROVAL_FIELDS

STOCK_CLASS_AUTHORIZED_SHARES_FIELDS: Final[tuple[RecordField, ...]] = (
    text_field("id"),
    date_field("date"),
    text_field("stock_class_id"),
    numeric_field("new_shares_authorized"),
) + _APPROVAL_FIELDS

STOCK_PLAN_POOL_FIELDS: Final[tuple[RecordField, ...]] = (
    text_field("id"),
    date_field("date"),
    text_field("stock_plan_id"),
    numeric_field("shares_reserved"),
) + _APPROVAL_FIELDS

# The ledger mechanism requires a conversion price and rounding the open format never carries.
RATIO_ADJUSTMENT_DEFAULT_CONVERSION_PRICE: Final[dict[str, str]] = {"amount": "0", "currency": "USD"}
RATIO_ADJUSTMENT_DEFAULT_ROUNDING_TYPE: Final[str] = ROUNDING_TYPE_TABLE.to_ledger(
    "NORMAL", "stockClassConversionRatioAdjustment.rounding_type"
)


def mapping_issuer_authorized_shares_adjustment_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one issuer authorized-shares adjustment to its ledger payload."""

    return mapping_record_to_ledger(data, "issuerAuthorizedSharesAdjustment", ISSUER_AUTHORIZED_SHARES_FIELDS)


def mapping_issuer_authorized_shares_adjustment_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger issuer authorized-shares adjustment to open format."""

    return mapping_record_to_open(
        payload,
        "issuerAuthorizedSharesAdjustment",
        "TX_ISSUER_AUTHORIZED_SHARES_ADJUSTMENT",
        ISSUER_AUTHORIZED_SHARES_FIELDS,
    )


def mapping_stock_class_authorized_shares_adjustment_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock class authorized-shares adjustment to its ledger payload."""

    return mapping_record_to_ledger(data, "stockClassAuthorizedSharesAdjustment", STOCK_CLASS_AUTHORIZED_SHARES_FIELDS)


def mapping_stock_class_authorized_shares_adjustment_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock class authorized-shares adjustment to open format."""

    return mapping_record_to_open(
        payload,
        "stockClassAuthorizedSharesAdjustment",
        "TX_STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT",
        STOCK_CLASS_AUTHORIZED_SHARES_FIELDS,
    )


def mapping_stock_plan_pool_adjustment_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock plan pool adjustment to its ledger payload."""

    return mapping_record_to_ledger(data, "stockPlanPoolAdjustment", STOCK_PLAN_POOL_FIELDS)


def mapping_stock_plan_pool_adjustment_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock plan pool adjustment to open format."""

    return mapping_record_to_open(
        payload,
        "stockPlanPoolAdjustment",
        "TX_STOCK_PLAN_POOL_ADJUSTMENT",
        STOCK_PLAN_POOL_FIELDS,
    )


def _mapping_read_ratio(value: object, path: str) -> tuple[str, str]:
    ratio = mapping_read_record(value, path)
    return (
        mapping_read_numeric(ratio, "numerator", path),
        mapping_read_numeric(ratio, "denominator", path),
    )


def mapping_stock_class_split_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock class split, nesting its flat ratio fields.

    Args:
        data: Open-format split with `split_ratio_numerator` and `split_ratio_denominator`.

    Returns:
        dict[str, Any]: Ledger payload with a nested `split_ratio`.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
    """

    path = "stockClassSplit"
    record = mapping_require_object(data, path)
    return {
        "id": mapping_require_text(record, "id", path),
        "date": mapping_require_date(record, "date", path),
        "stock_class_id": mapping_require_text(record, "stock_class_id", path),
        "split_ratio": {
            "numerator": mapping_require_numeric(record, "split_ratio_numerator", path),
            "denominator": mapping_require_numeric(record, "split_ratio_denominator", path),
        },
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stock_class_split_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock class split back to its flat ratio fields.

    Raises:
        ConversionParseError: Raised when the ratio is missing or malformed.
    """

    path = "stockClassSplit"
    record = mapping_read_record(payload, path)
    numerator, denominator = _mapping_read_ratio(record.get("split_ratio"), f"{path}.split_ratio")
    output: dict[str, Any] = {
        "object_type": "TX_STOCK_CLASS_SPLIT",
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "stock_class_id": mapping_read_text(record, "stock_class_id", path),
        "split_ratio_numerator": numerator,
        "split_ratio_denominator": denominator,
    }
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_stock_class_conversion_ratio_adjustment_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one conversion ratio adjustment, wrapping the ratio in a ledger mechanism.

    The ledger mechanism also requires a conversion price and rounding type;
    both are filled with fixed defaults. Open-format approval dates have no
    ledger field and are dropped.

    Args:
        data: Open-format adjustment with `new_ratio_numerator` and `new_ratio_denominator`.

    Returns:
        dict[str, Any]: Ledger payload with `new_ratio_conversion_mechanism`.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
    """

    path = "stockClassConversionRatioAdjustment"
    record = mapping_require_object(data, path)
    return {
        "id": mapping_require_text(record, "id", path),
        "date": mapping_require_date(record, "date", path),
        "stock_class_id": mapping_require_text(record, "stock_class_id", path),
        "new_ratio_conversion_mechanism": {
            "conversion_price": dict(RATIO_ADJUSTMENT_DEFAULT_CONVERSION_PRICE),
            "ratio": {
                "numerator": mapping_require_numeric(record, "new_ratio_numerator", path),
                "denominator": mapping_require_numeric(record, "new_ratio_denominator", path),
            },
            "rounding_type": RATIO_ADJUSTMENT_DEFAULT_ROUNDING_TYPE,
        },
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stock_class_conversion_ratio_adjustment_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger conversion ratio adjustment back to its flat ratio fields.

    Raises:
        ConversionParseError: Raised when the mechanism or its ratio is missing or malformed.
    """

    path = "stockClassConversionRatioAdjustment"
    record = mapping_read_record(payload, path)
    mechanism_path = f"{path}.new_ratio_conversion_mechanism"
    mechanism = mapping_read_record(record.get("new_ratio_conversion_mechanism"), mechanism_path)
    numerator, denominator = _mapping_read_ratio(mechanism.get("ratio"), f"{mechanism_path}.ratio")
    output: dict[str, Any] = {
        "object_type": "TX_STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT",
        "id": mapping_read_text(record, "id", path),
        "date": mapping_read_date(record, "date", path),
        "stock_class_id": mapping_read_text(record, "stock_class_id", path),
        "new_ratio_numerator": numerator,
        "new_ratio_denominator": denominator,
    }
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output
