"""Quantity-based transactions converted by one shared parametric converter.

Transfers, cancellations, repurchases, exercises, and releases all move a
measured amount out of one security. They differ in the measure (a share
quantity or a monetary amount), the ledger field holding it, and a few trailing
fields. Each entity is described by a `QuantityEventShape`; the named
converter pairs below are thin adapters over `mapping_quantity_event_to_ledger`
and `mapping_quantity_event_to_open`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from .record_fields import (
    TRANSACTION_HEAD_FIELDS,
    RecordField,
    date_field,
    id_list_field,
    mapping_record_to_ledger,
    mapping_record_to_open,
    monetary_field,
    numeric_field,
    text_field,
)


@dataclass(frozen=True)
class QuantityEventShape:
    """Declarative shape of one quantity-based transaction.

    Attributes:
        entity_name: Entity tag used as the dotted path root.
        object_type: Open-format object type tag.
        measure: Field carrying the moved amount.
        trailing_fields: Fields following the measure, in ledger order.
    """

    entity_name: str
    object_type: str
    measure: RecordField
    trailing_fields: tuple[RecordField, ...] = ()

    @property
    def fields(self) -> tuple[RecordField, ...]:
        """Return every declared field in ledger order."""

        return TRANSACTION_HEAD_FIELDS + (self.measure,) + self.trailing_fields


def mapping_quantity_event_to_ledger(shape: QuantityEventShape, data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one quantity-based transaction to its ledger payload.

    Args:
        shape: Transaction shape.
        data: Open-format transaction.

    Returns:
        dict[str, Any]: Ledger payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
    """

    return mapping_record_to_ledger(data, shape.entity_name, shape.fields)


def mapping_quantity_event_to_open(shape: QuantityEventShape, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger quantity-based transaction to open format.

    Args:
        shape: Transaction shape.
        payload: Ledger payload.

    Returns:
        dict[str, Any]: Open-format transaction.

    Raises:
        ConversionParseError: Raised when a ledger value is missing or malformed.
    """

    return mapping_record_to_open(payload, shape.entity_name, shape.object_type, shape.fields)


_QUANTITY: Final = numeric_field("quantity")
_AMOUNT: Final = monetary_field("amount")

_TRANSFER_TAIL: Final[tuple[RecordField, ...]] = (
    id_list_field("resulting_security_ids"),
    text_field("balance_security_id", required=False),
    text_field("consideration_text", required=False),
)
_CANCELLATION_TAIL: Final[tuple[RecordField, ...]] = (
    text_field("reason_text"),
    text_field("balance_security_id", required=False),
)
_EXERCISE_TAIL: Final[tuple[RecordField, ...]] = (
    id_list_field("resulting_security_ids", required=False),
    text_field("consideration_text", required=False),
)

STOCK_TRANSFER_SHAPE: Final = QuantityEventShape("stockTransfer", "TX_STOCK_TRANSFER", _QUANTITY, _TRANSFER_TAIL)
WARRANT_TRANSFER_SHAPE: Final = QuantityEventShape(
    "warrantTransfer", "TX_WARRANT_TRANSFER", _QUANTITY, _TRANSFER_TAIL
)
EQUITY_COMPENSATION_TRANSFER_SHAPE: Final = QuantityEventShape(
    "equityCompensationTransfer", "TX_EQUITY_COMPENSATION_TRANSFER", _QUANTITY, _TRANSFER_TAIL
)
CONVERTIBLE_TRANSFER_SHAPE: Final = QuantityEventShape(
    "convertibleTransfer", "TX_CONVERTIBLE_TRANSFER", _AMOUNT, _TRANSFER_TAIL
)

STOCK_CANCELLATION_SHAPE: Final = QuantityEventShape(
    "stockCancellation", "TX_STOCK_CANCELLATION", _QUANTITY, _CANCELLATION_TAIL
)
WARRANT_CANCELLATION_SHAPE: Final = QuantityEventShape(
    "warrantCancellation", "TX_WARRANT_CANCELLATION", _QUANTITY, _CANCELLATION_TAIL
)
EQUITY_COMPENSATION_CANCELLATION_SHAPE: Final = QuantityEventShape(
    "equityCompensationCancellation", "TX_EQUITY_COMPENSATION_CANCELLATION", _QUANTITY, _CANCELLATION_TAIL
)
CONVERTIBLE_CANCELLATION_SHAPE: Final = QuantityEventShape(
    "convertibleCancellation", "TX_CONVERTIBLE_CANCELLATION", _AMOUNT, _CANCELLATION_TAIL
)

STOCK_REPURCHASE_SHAPE: Final = QuantityEventShape(
    "stockRepurchase",
    "TX_STOCK_REPURCHASE",
    _QUANTITY,
    (
        monetary_field("price"),
        text_field("balance_security_id", required=False),
        text_field("consideration_text", required=False),
    ),
)

EQUITY_COMPENSATION_EXERCISE_SHAPE: Final = QuantityEventShape(
    "equityCompensationExercise", "TX_EQUITY_COMPENSATION_EXERCISE", _QUANTITY, _EXERCISE_TAIL
)
WARRANT_EXERCISE_SHAPE: Final = QuantityEventShape(
    "warrantExercise",
    "TX_WARRANT_EXERCISE",
    _QUANTITY,
    _EXERCISE_TAIL + (text_field("balance_security_id", required=False),),
)
# Legacy plan-security exercises land on the equity-compensation exercise contract.
PLAN_SECURITY_EXERCISE_SHAPE: Final = QuantityEventShape(
    "planSecurityExercise",
    "TX_EQUITY_COMPENSATION_EXERCISE",
    _QUANTITY,
    _EXERCISE_TAIL + (text_field("balance_security_id", required=False),),
)

EQUITY_COMPENSATION_RELEASE_SHAPE: Final = QuantityEventShape(
    "equityCompensationRelease",
    "TX_EQUITY_COMPENSATION_RELEASE",
    _QUANTITY,
    (
        id_list_field("resulting_security_ids"),
        text_field("balance_security_id", required=False),
        date_field("settlement_date", required=False),
        text_field("consideration_text", required=False),
    ),
)

QUANTITY_EVENT_SHAPES: Final[tuple[QuantityEventShape, ...]] = (
    STOCK_TRANSFER_SHAPE,
    WARRANT_TRANSFER_SHAPE,
    EQUITY_COMPENSATION_TRANSFER_SHAPE,
    CONVERTIBLE_TRANSFER_SHAPE,
    STOCK_CANCELLATION_SHAPE,
    WARRANT_CANCELLATION_SHAPE,
    EQUITY_COMPENSATION_CANCELLATION_SHAPE,
    CONVERTIBLE_CANCELLATION_SHAPE,
    STOCK_REPURCHASE_SHAPE,
    EQUITY_COMPENSATION_EXERCISE_SHAPE,
    WARRANT_EXERCISE_SHAPE,
    PLAN_SECURITY_EXERCISE_SHAPE,
    EQUITY_COMPENSATION_RELEASE_SHAPE,
)


def _mapping_shape_pair(
    shape: QuantityEventShape,
) -> tuple[Callable[[Mapping[str, Any]], dict[str, Any]], Callable[[Mapping[str, Any]], dict[str, Any]]]:
    def to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
        return mapping_quantity_event_to_ledger(shape, data)

    def to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
        return mapping_quantity_event_to_open(shape, payload)

    to_ledger.__name__ = f"mapping_{shape.entity_name}_to_ledger"
    to_open.__name__ = f"mapping_{shape.entity_name}_to_open"
    return to_ledger, to_open


mapping_stock_transfer_to_ledger, mapping_stock_transfer_to_open = _mapping_shape_pair(STOCK_TRANSFER_SHAPE)
mapping_warrant_transfer_to_ledger, mapping_warrant_transfer_to_open = _mapping_shape_pair(WARRANT_TRANSFER_SHAPE)
(
    mapping_equity_compensation_transfer_to_ledger,
    mapping_equity_compensation_transfer_to_open,
) = _mapping_shape_pair(EQUITY_COMPENSATION_TRANSFER_SHAPE)
mapping_convertible_transfer_to_ledger, mapping_convertible_transfer_to_open = _mapping_shape_pair(
    CONVERTIBLE_TRANSFER_SHAPE
)

mapping_stock_cancellation_to_ledger, mapping_stock_cancellation_to_open = _mapping_shape_pair(
    STOCK_CANCELLATION_SHAPE
)
mapping_warrant_cancellation_to_ledger, mapping_warrant_cancellation_to_open = _mapping_shape_pair(
    WARRANT_CANCELLATION_SHAPE
)
(
    mapping_equity_compensation_cancellation_to_ledger,
    mapping_equity_compensation_cancellation_to_open,
) = _mapping_shape_pair(EQUITY_COMPENSATION_CANCELLATION_SHAPE)
mapping_convertible_cancellation_to_ledger, mapping_convertible_cancellation_to_open = _mapping_shape_pair(
    CONVERTIBLE_CANCELLATION_SHAPE
)

mapping_stock_repurchase_to_ledger, mapping_stock_repurchase_to_open = _mapping_shape_pair(STOCK_REPURCHASE_SHAPE)

(
    mapping_equity_compensation_exercise_to_ledger,
    mapping_equity_compensation_exercise_to_open,
) = _mapping_shape_pair(EQUITY_COMPENSATION_EXERCISE_SHAPE)
mapping_warrant_exercise_to_ledger, mapping_warrant_exercise_to_open = _mapping_shape_pair(WARRANT_EXERCISE_SHAPE)
mapping_plan_security_exercise_to_ledger, _ = _mapping_shape_pair(PLAN_SECURITY_EXERCISE_SHAPE)

(
    mapping_equity_compensation_release_to_ledger,
    mapping_equity_compensation_release_to_open,
) = _mapping_shape_pair(EQUITY_COMPENSATION_RELEASE_SHAPE)
