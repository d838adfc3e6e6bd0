"""Declarative field lists for flat open-format records.

Flat records (acceptances, retractions, transfers, cancellations, ...) differ
only in which fields they carry and how each field is typed. A converter
declares its fields once as `RecordField` values and both directions are
derived from that declaration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from captable_bridge.domain import domain_comments_to_ledger, domain_to_open_optional

from .payload_fields import (
    mapping_optional_date,
    mapping_optional_monetary,
    mapping_optional_numeric,
    mapping_optional_text,
    mapping_read_comments,
    mapping_read_date,
    mapping_read_monetary,
    mapping_read_numeric,
    mapping_read_optional_date,
    mapping_read_optional_monetary,
    mapping_read_optional_numeric,
    mapping_read_optional_text,
    mapping_read_record,
    mapping_read_text,
    mapping_read_text_list,
    mapping_require_date,
    mapping_require_monetary,
    mapping_require_numeric,
    mapping_require_object,
    mapping_require_text,
    mapping_text_list,
)


class FieldKind(str, Enum):
    """Value kinds supported by declarative record fields."""

    TEXT = "text"
    DATE = "date"
    NUMERIC = "numeric"
    MONETARY = "monetary"
    ID_LIST = "id_list"


@dataclass(frozen=True)
class RecordField:
    """One declared field of a flat record.

    Attributes:
        name: Field name, identical on both sides.
        kind: Value kind driving normalization.
        required: Whether the open-format value must be present.
    """

    name: str
    kind: FieldKind
    required: bool = True


def mapping_record_to_ledger(data: object, path: str, fields: tuple[RecordField, ...]) -> dict[str, Any]:
    """Convert one flat open-format record to its ledger payload.

    Args:
        data: Open-format record.
        path: Entity name used as the dotted path root.
        fields: Declared fields in ledger order.

    Returns:
        dict[str, Any]: Ledger payload with explicit nulls and list-typed comments.

    Raises:
        ConversionValidationError: Raised when a required field is missing or a value is malformed.
    """

    record = mapping_require_object(data, path)
    payload: dict[str, Any] = {}
    for field in fields:
        payload[field.name] = _mapping_field_to_ledger(record, field, path)
    payload["comments"] = domain_comments_to_ledger(record.get("comments"))
    return payload


def mapping_record_to_open(
    payload: object,
    path: str,
    object_type: str,
    fields: tuple[RecordField, ...],
) -> dict[str, Any]:
    """Convert one flat ledger payload to its open-format record.

    Args:
        payload: Ledger payload.
        path: Entity name used as the dotted path root.
        object_type: Open-format object type tag.
        fields: Declared fields in output order.

    Returns:
        dict[str, Any]: Open-format record without empty optional keys.

    Raises:
        ConversionParseError: Raised when a ledger value is missing or malformed.
    """

    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {"object_type": object_type}
    for field in fields:
        value = _mapping_field_to_open(record, field, path)
        if field.required:
            output[field.name] = value
        else:
            domain_to_open_optional(output, field.name, value)
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def _mapping_field_to_ledger(record: Mapping[str, Any], field: RecordField, path: str) -> Any:
    if field.kind is FieldKind.TEXT:
        if field.required:
            return mapping_require_text(record, field.name, path)
        return mapping_optional_text(record, field.name, path)
    if field.kind is FieldKind.DATE:
        if field.required:
            return mapping_require_date(record, field.name, path)
        return mapping_optional_date(record, field.name, path)
    if field.kind is FieldKind.NUMERIC:
        if field.required:
            return mapping_require_numeric(record, field.name, path)
        return mapping_optional_numeric(record, field.name, path)
    if field.kind is FieldKind.MONETARY:
        if field.required:
            return mapping_require_monetary(record, field.name, path)
        return mapping_optional_monetary(record, field.name, path)
    return mapping_text_list(record, field.name, path, required=field.required)


def _mapping_field_to_open(record: Mapping[str, Any], field: RecordField, path: str) -> Any:
    if field.kind is FieldKind.TEXT:
        if field.required:
            return mapping_read_text(record, field.name, path)
        return mapping_read_optional_text(record, field.name, path)
    if field.kind is FieldKind.DATE:
        if field.required:
            return mapping_read_date(record, field.name, path)
        return mapping_read_optional_date(record, field.name, path)
    if field.kind is FieldKind.NUMERIC:
        if field.required:
            return mapping_read_numeric(record, field.name, path)
        return mapping_read_optional_numeric(record, field.name, path)
    if field.kind is FieldKind.MONETARY:
        if field.required:
            return mapping_read_monetary(record, field.name, path)
        return mapping_read_optional_monetary(record, field.name, path)
    return mapping_read_text_list(record, field.name, path)


def text_field(name: str, required: bool = True) -> RecordField:
    """Declare one string field."""

    return RecordField(name=name, kind=FieldKind.TEXT, required=required)


def date_field(name: str, required: bool = True) -> RecordField:
    """Declare one date field."""

    return RecordField(name=name, kind=FieldKind.DATE, required=required)


def numeric_field(name: str, required: bool = True) -> RecordField:
    """Declare one numeric field."""

    return RecordField(name=name, kind=FieldKind.NUMERIC, required=required)


def monetary_field(name: str, required: bool = True) -> RecordField:
    """Declare one monetary field."""

    return RecordField(name=name, kind=FieldKind.MONETARY, required=required)


def id_list_field(name: str, required: bool = True) -> RecordField:
    """Declare one identifier list field; required lists must be non-empty."""

    return RecordField(name=name, kind=FieldKind.ID_LIST, required=required)


# Leading fields shared by nearly every transaction.
TRANSACTION_HEAD_FIELDS: tuple[RecordField, ...] = (
    text_field("id"),
    date_field("date"),
    text_field("security_id"),
)
