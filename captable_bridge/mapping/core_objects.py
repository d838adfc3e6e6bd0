"""Converters for cap-table reference objects.

Stakeholders, stock classes, stock plans, legend templates, documents, and
valuations are long-lived objects rather than transactions. Vesting terms live
in `vesting` because of their condition graph.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Final

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    domain_comments_to_ledger,
    domain_ledger_monetary_to_open,
    domain_ledger_numeric_to_open,
    domain_monetary_to_ledger,
    domain_normalize_numeric_string,
    domain_optional_date_to_ledger,
    domain_optional_ledger_time_to_date,
    domain_to_open_optional,
)

from .payload_fields import (
    mapping_object_list,
    mapping_optional_date,
    mapping_optional_monetary,
    mapping_optional_numeric,
    mapping_optional_text,
    mapping_read_comments,
    mapping_read_date,
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
    mapping_require_monetary,
    mapping_require_numeric,
    mapping_require_object,
    mapping_require_text,
    mapping_text_list,
)
from .record_fields import FieldKind, mapping_record_to_ledger, mapping_record_to_open, text_field
from .variant_tables import (
    ADDRESS_TYPE_TABLE,
    AUTHORIZED_SHARES_TABLE,
    EMAIL_TYPE_TABLE,
    OBJECT_REFERENCE_TYPE_TABLE,
    PHONE_TYPE_TABLE,
    PLAN_CANCELLATION_BEHAVIOR_TABLE,
    STAKEHOLDER_RELATIONSHIP_TABLE,
    STAKEHOLDER_STATUS_TABLE,
    STAKEHOLDER_TYPE_TABLE,
    STOCK_CLASS_CONVERSION_MECHANISM_TABLE,
    STOCK_CLASS_TRIGGER_TYPE_TABLE,
    STOCK_CLASS_TYPE_TABLE,
    VALUATION_TYPE_TABLE,
)

# Deprecated-field notices use their own logger so settings can silence them alone.
DEPRECATION_LOGGER_NAME: Final[str] = "captable_bridge.deprecation"

deprecation_logger = logging.getLogger(DEPRECATION_LOGGER_NAME)

_ADDRESS_OPTIONAL_FIELDS: Final[tuple[str, ...]] = ("street_suite", "city", "country_subdivision", "postal_code")

_INITIAL_SHARES_NUMERIC_TAG: Final[str] = "OcfInitialSharesNumeric"
_INITIAL_SHARES_ENUM_TAG: Final[str] = "OcfInitialSharesEnum"
_AUTHORIZED_SHARES_LABEL_PATTERN: Final = re.compile(r"^[A-Za-z_]+$")

_STOCK_CLASS_RIGHT_TYPE: Final[str] = "STOCK_CLASS_CONVERSION_RIGHT"

# Optional conversion-right values carried as `{"tag": "Some", "value": ...}` on the ledger.
_RIGHT_OPTIONAL_FIELDS: Final[tuple[tuple[str, FieldKind], ...]] = (
    ("percent_of_capitalization", FieldKind.NUMERIC),
    ("conversion_price", FieldKind.MONETARY),
    ("reference_share_price", FieldKind.MONETARY),
    ("reference_valuation_price_per_share", FieldKind.MONETARY),
    ("discount_rate", FieldKind.NUMERIC),
    ("valuation_cap", FieldKind.MONETARY),
    ("floor_price_per_share", FieldKind.MONETARY),
    ("ceiling_price_per_share", FieldKind.MONETARY),
    ("custom_description", FieldKind.TEXT),
)


def _mapping_name_to_ledger(value: object, path: str) -> dict[str, Any]:
    name = mapping_require_object(value, path)
    return {
        "legal_name": mapping_require_text(name, "legal_name", path),
        "first_name": mapping_optional_text(name, "first_name", path),
        "last_name": mapping_optional_text(name, "last_name", path),
    }


def _mapping_name_to_open(value: object, path: str) -> dict[str, Any]:
    name = mapping_read_record(value, path)
    output: dict[str, Any] = {"legal_name": mapping_read_text(name, "legal_name", path)}
    domain_to_open_optional(output, "first_name", mapping_read_optional_text(name, "first_name", path))
    domain_to_open_optional(output, "last_name", mapping_read_optional_text(name, "last_name", path))
    return output


def _mapping_channels_to_ledger(record: Mapping[str, Any], path: str) -> dict[str, list[dict[str, str]]]:
    phone_numbers = []
    for index, phone in enumerate(mapping_object_list(record, "phone_numbers", path)):
        item_path = f"{path}.phone_numbers[{index}]"
        phone_numbers.append(
            {
                "phone_type": PHONE_TYPE_TABLE.to_ledger(phone.get("phone_type"), f"{item_path}.phone_type"),
                "phone_number": mapping_require_text(phone, "phone_number", item_path),
            }
        )
    emails = []
    for index, email in enumerate(mapping_object_list(record, "emails", path)):
        item_path = f"{path}.emails[{index}]"
        emails.append(
            {
                "email_type": EMAIL_TYPE_TABLE.to_ledger(email.get("email_type"), f"{item_path}.email_type"),
                "email_address": mapping_require_text(email, "email_address", item_path),
            }
        )
    return {"phone_numbers": phone_numbers, "emails": emails}


def _mapping_channels_to_open(record: Mapping[str, Any], path: str) -> dict[str, list[dict[str, str]]]:
    phone_numbers = [
        {
            "phone_type": PHONE_TYPE_TABLE.to_open(phone.get("phone_type"), f"{path}.phone_numbers[{index}].phone_type"),
            "phone_number": mapping_read_text(phone, "phone_number", f"{path}.phone_numbers[{index}]"),
        }
        for index, phone in enumerate(mapping_read_object_list(record, "phone_numbers", path))
    ]
    emails = [
        {
            "email_type": EMAIL_TYPE_TABLE.to_open(email.get("email_type"), f"{path}.emails[{index}].email_type"),
            "email_address": mapping_read_text(email, "email_address", f"{path}.emails[{index}]"),
        }
        for index, email in enumerate(mapping_read_object_list(record, "emails", path))
    ]
    return {"phone_numbers": phone_numbers, "emails": emails}


def _mapping_address_to_ledger(address: Mapping[str, Any], path: str) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "address_type": ADDRESS_TYPE_TABLE.to_ledger(address.get("address_type"), f"{path}.address_type"),
    }
    for key in _ADDRESS_OPTIONAL_FIELDS:
        payload[key] = mapping_optional_text(address, key, path)
    payload["country"] = mapping_require_text(address, "country", path)
    return payload


def _mapping_address_to_open(address: Mapping[str, Any], path: str) -> dict[str, Any]:
    output: dict[str, Any] = {
        "address_type": ADDRESS_TYPE_TABLE.to_open(address.get("address_type"), f"{path}.address_type"),
        "country": mapping_read_text(address, "country", path),
    }
    for key in _ADDRESS_OPTIONAL_FIELDS:
        domain_to_open_optional(output, key, mapping_read_optional_text(address, key, path))
    return output


def mapping_stakeholder_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stakeholder to its ledger payload.

    Contact info without any phone number or email is stored as null.

    Args:
        data: Open-format stakeholder.

    Returns:
        dict[str, Any]: Ledger stakeholder payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when a type, status, relationship, or contact label is unknown.
    """

    path = "stakeholder"
    record = mapping_require_object(data, path)
    stakeholder_id = mapping_require_text(record, "id", path)

    primary_contact = None
    if record.get("primary_contact") is not None:
        contact_path = f"{path}.primary_contact"
        contact = mapping_require_object(record["primary_contact"], contact_path)
        primary_contact = {
            "name": _mapping_name_to_ledger(contact.get("name"), f"{contact_path}.name"),
            **_mapping_channels_to_ledger(contact, contact_path),
        }

    contact_info = None
    if record.get("contact_info") is not None:
        contact_path = f"{path}.contact_info"
        channels = _mapping_channels_to_ledger(mapping_require_object(record["contact_info"], contact_path), contact_path)
        if channels["phone_numbers"] or channels["emails"]:
            contact_info = channels

    tax_ids = []
    for index, tax_id in enumerate(mapping_object_list(record, "tax_ids", path)):
        item_path = f"{path}.tax_ids[{index}]"
        tax_ids.append(
            {
                "country": mapping_require_text(tax_id, "country", item_path),
                "tax_id": mapping_require_text(tax_id, "tax_id", item_path),
            }
        )

    return {
        "id": stakeholder_id,
        "name": _mapping_name_to_ledger(record.get("name"), f"{path}.name"),
        "stakeholder_type": STAKEHOLDER_TYPE_TABLE.to_ledger(
            record.get("stakeholder_type"), f"{path}.stakeholder_type"
        ),
        "issuer_assigned_id": mapping_optional_text(record, "issuer_assigned_id", path),
        "primary_contact": primary_contact,
        "contact_info": contact_info,
        "addresses": [
            _mapping_address_to_ledger(address, f"{path}.addresses[{index}]")
            for index, address in enumerate(mapping_object_list(record, "addresses", path))
        ],
        "tax_ids": tax_ids,
        "current_relationships": [
            STAKEHOLDER_RELATIONSHIP_TABLE.to_ledger(code, f"{path}.current_relationships[{index}]")
            for index, code in enumerate(mapping_text_list(record, "current_relationships", path))
        ],
        "current_status": STAKEHOLDER_STATUS_TABLE.optional_to_ledger(
            record.get("current_status"), f"{path}.current_status"
        ),
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stakeholder_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stakeholder to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "stakeholder"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "STAKEHOLDER",
        "id": mapping_read_text(record, "id", path),
        "name": _mapping_name_to_open(record.get("name"), f"{path}.name"),
        "stakeholder_type": STAKEHOLDER_TYPE_TABLE.to_open(record.get("stakeholder_type"), f"{path}.stakeholder_type"),
    }
    domain_to_open_optional(
        output, "issuer_assigned_id", mapping_read_optional_text(record, "issuer_assigned_id", path)
    )
    output["current_relationships"] = [
        STAKEHOLDER_RELATIONSHIP_TABLE.to_open(label, f"{path}.current_relationships[{index}]")
        for index, label in enumerate(mapping_read_text_list(record, "current_relationships", path))
    ]
    domain_to_open_optional(
        output,
        "current_status",
        STAKEHOLDER_STATUS_TABLE.optional_to_open(record.get("current_status"), f"{path}.current_status"),
    )
    if record.get("primary_contact") is not None:
        contact_path = f"{path}.primary_contact"
        contact = mapping_read_record(record["primary_contact"], contact_path)
        output["primary_contact"] = {
            "name": _mapping_name_to_open(contact.get("name"), f"{contact_path}.name"),
            **_mapping_channels_to_open(contact, contact_path),
        }
    if record.get("contact_info") is not None:
        contact_path = f"{path}.contact_info"
        output["contact_info"] = _mapping_channels_to_open(
            mapping_read_record(record["contact_info"], contact_path), contact_path
        )
    output["addresses"] = [
        _mapping_address_to_open(address, f"{path}.addresses[{index}]")
        for index, address in enumerate(mapping_read_object_list(record, "addresses", path))
    ]
    output["tax_ids"] = [
        {
            "country": mapping_read_text(tax_id, "country", f"{path}.tax_ids[{index}]"),
            "tax_id": mapping_read_text(tax_id, "tax_id", f"{path}.tax_ids[{index}]"),
        }
        for index, tax_id in enumerate(mapping_read_object_list(record, "tax_ids", path))
    ]
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def _mapping_initial_shares_to_ledger(value: object, path: str) -> dict[str, str]:
    if isinstance(value, str) and value in AUTHORIZED_SHARES_TABLE.open_codes():
        return {"tag": _INITIAL_SHARES_ENUM_TAG, "value": AUTHORIZED_SHARES_TABLE.to_ledger(value, path)}
    if value is None or value == "":
        raise ConversionValidationError(path, expected_type="string | number")
    if isinstance(value, str) and _AUTHORIZED_SHARES_LABEL_PATTERN.match(value):
        raise ConversionParseError(
            f"Unknown authorized shares value at '{path}': {value!r}",
            source=path,
            received_value=value,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )
    return {"tag": _INITIAL_SHARES_NUMERIC_TAG, "value": domain_normalize_numeric_string(value, path)}


def _mapping_initial_shares_to_open(value: object, path: str) -> str:
    if isinstance(value, Mapping):
        tag = value.get("tag")
        if tag == _INITIAL_SHARES_NUMERIC_TAG:
            return domain_ledger_numeric_to_open(value.get("value"), path)
        if tag == _INITIAL_SHARES_ENUM_TAG:
            return AUTHORIZED_SHARES_TABLE.to_open(value.get("value"), path)
    elif isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return domain_ledger_numeric_to_open(value, path)
    raise ConversionParseError(
        f"Invalid initial shares value at '{path}': {value!r}",
        source=path,
        received_value=value,
    )


def _mapping_some(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    return {"tag": "Some", "value": value}


def _mapping_unwrap_some(value: object) -> object | None:
    """Return the payload of an optional ledger value; bare values pass through."""

    if isinstance(value, Mapping) and "tag" in value:
        if value.get("tag") == "Some":
            return value.get("value")
        return None
    return value


def _mapping_right_value_to_ledger(right: Mapping[str, Any], key: str, kind: FieldKind, path: str) -> Any:
    value = right.get(key)
    if value is None or value == "":
        return None
    if kind is FieldKind.MONETARY:
        return domain_monetary_to_ledger(value, f"{path}.{key}")
    if kind is FieldKind.NUMERIC:
        return domain_normalize_numeric_string(value, f"{path}.{key}")
    return mapping_optional_text(right, key, path)


def _mapping_right_value_to_open(value: object, kind: FieldKind, field_path: str) -> Any:
    if value is None:
        return None
    if kind is FieldKind.MONETARY:
        return domain_ledger_monetary_to_open(value, field_path)
    if kind is FieldKind.NUMERIC:
        return domain_ledger_numeric_to_open(value, field_path)
    if not isinstance(value, str):
        raise ConversionParseError(
            f"Invalid field '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
        )
    return value


def _mapping_stock_class_right_to_ledger(right: Mapping[str, Any], path: str) -> dict[str, Any]:
    numerator = right.get("ratio_numerator")
    denominator = right.get("ratio_denominator")
    if numerator is None and right.get("ratio") is not None:
        # Legacy single-number ratios are expressed over one.
        numerator, denominator = right["ratio"], denominator if denominator is not None else 1
    ratio = None
    if numerator is not None or denominator is not None:
        if numerator is None or denominator is None:
            raise ConversionValidationError(
                f"{path}.ratio_denominator" if denominator is None else f"{path}.ratio_numerator",
                "Ratio numerator and denominator must be given together",
                expected_type="string | number",
            )
        ratio = {
            "numerator": domain_normalize_numeric_string(numerator, f"{path}.ratio_numerator"),
            "denominator": domain_normalize_numeric_string(denominator, f"{path}.ratio_denominator"),
        }

    payload: dict[str, Any] = {
        "type_": mapping_optional_text(right, "type", path) or _STOCK_CLASS_RIGHT_TYPE,
        "conversion_mechanism": STOCK_CLASS_CONVERSION_MECHANISM_TABLE.to_ledger(
            right.get("conversion_mechanism"), f"{path}.conversion_mechanism"
        ),
        "conversion_trigger": STOCK_CLASS_TRIGGER_TYPE_TABLE.to_ledger(
            right.get("conversion_trigger"), f"{path}.conversion_trigger"
        ),
        "converts_to_stock_class_id": mapping_require_text(right, "converts_to_stock_class_id", path),
        "ratio": _mapping_some(ratio),
    }
    for key, kind in _RIGHT_OPTIONAL_FIELDS:
        payload[key] = _mapping_some(_mapping_right_value_to_ledger(right, key, kind, path))
    payload["expires_at"] = domain_optional_date_to_ledger(right.get("expires_at"), f"{path}.expires_at")
    return payload


def _mapping_stock_class_right_to_open(right: Mapping[str, Any], path: str) -> dict[str, Any]:
    trigger = right.get("conversion_trigger")
    if isinstance(trigger, Mapping):
        trigger = trigger.get("tag")
    output: dict[str, Any] = {
        "type": mapping_read_optional_text(right, "type_", path) or _STOCK_CLASS_RIGHT_TYPE,
        "conversion_mechanism": STOCK_CLASS_CONVERSION_MECHANISM_TABLE.to_open(
            right.get("conversion_mechanism"), f"{path}.conversion_mechanism"
        ),
        "conversion_trigger": STOCK_CLASS_TRIGGER_TYPE_TABLE.to_open(trigger, f"{path}.conversion_trigger"),
        "converts_to_stock_class_id": mapping_read_text(right, "converts_to_stock_class_id", path),
    }
    ratio = _mapping_unwrap_some(right.get("ratio"))
    if ratio is not None:
        ratio_record = mapping_read_record(ratio, f"{path}.ratio")
        output["ratio_numerator"] = mapping_read_numeric(ratio_record, "numerator", f"{path}.ratio")
        output["ratio_denominator"] = mapping_read_numeric(ratio_record, "denominator", f"{path}.ratio")
    for key, kind in _RIGHT_OPTIONAL_FIELDS:
        domain_to_open_optional(
            output, key, _mapping_right_value_to_open(_mapping_unwrap_some(right.get(key)), kind, f"{path}.{key}")
        )
    domain_to_open_optional(
        output, "expires_at", domain_optional_ledger_time_to_date(right.get("expires_at"), f"{path}.expires_at")
    )
    return output


def mapping_stock_class_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock class to its ledger payload.

    `initial_shares_authorized` becomes a tagged value: numeric amounts use
    `OcfInitialSharesNumeric`, `UNLIMITED` and `NOT_APPLICABLE` use
    `OcfInitialSharesEnum`. Optional conversion-right values are wrapped as
    `{"tag": "Some", "value": ...}`.

    Args:
        data: Open-format stock class.

    Returns:
        dict[str, Any]: Ledger stock class payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when a class type, mechanism, trigger, or share label is unknown.
    """

    path = "stockClass"
    record = mapping_require_object(data, path)
    stock_class_id = mapping_require_text(record, "id", path)
    return {
        "id": stock_class_id,
        "name": mapping_require_text(record, "name", path),
        "class_type": STOCK_CLASS_TYPE_TABLE.to_ledger(record.get("class_type"), f"{path}.class_type"),
        "default_id_prefix": mapping_require_text(record, "default_id_prefix", path),
        "initial_shares_authorized": _mapping_initial_shares_to_ledger(
            record.get("initial_shares_authorized"), f"{path}.initial_shares_authorized"
        ),
        "votes_per_share": mapping_require_numeric(record, "votes_per_share", path),
        "seniority": mapping_require_numeric(record, "seniority", path),
        "board_approval_date": mapping_optional_date(record, "board_approval_date", path),
        "stockholder_approval_date": mapping_optional_date(record, "stockholder_approval_date", path),
        "par_value": mapping_optional_monetary(record, "par_value", path),
        "price_per_share": mapping_optional_monetary(record, "price_per_share", path),
        "conversion_rights": [
            _mapping_stock_class_right_to_ledger(right, f"{path}.conversion_rights[{index}]")
            for index, right in enumerate(mapping_object_list(record, "conversion_rights", path))
        ],
        "liquidation_preference_multiple": mapping_optional_numeric(record, "liquidation_preference_multiple", path),
        "participation_cap_multiple": mapping_optional_numeric(record, "participation_cap_multiple", path),
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stock_class_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock class to open format.

    Raises:
        ConversionParseError: Raised when a ledger value is missing, malformed, or unknown.
    """

    path = "stockClass"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "STOCK_CLASS",
        "id": mapping_read_text(record, "id", path),
        "name": mapping_read_text(record, "name", path),
        "class_type": STOCK_CLASS_TYPE_TABLE.to_open(record.get("class_type"), f"{path}.class_type"),
        "default_id_prefix": mapping_read_text(record, "default_id_prefix", path),
        "initial_shares_authorized": _mapping_initial_shares_to_open(
            record.get("initial_shares_authorized"), f"{path}.initial_shares_authorized"
        ),
        "votes_per_share": mapping_read_numeric(record, "votes_per_share", path),
        "seniority": mapping_read_numeric(record, "seniority", path),
    }
    domain_to_open_optional(
        output, "board_approval_date", mapping_read_optional_date(record, "board_approval_date", path)
    )
    domain_to_open_optional(
        output, "stockholder_approval_date", mapping_read_optional_date(record, "stockholder_approval_date", path)
    )
    domain_to_open_optional(output, "par_value", mapping_read_optional_monetary(record, "par_value", path))
    domain_to_open_optional(output, "price_per_share", mapping_read_optional_monetary(record, "price_per_share", path))
    domain_to_open_optional(
        output,
        "conversion_rights",
        [
            _mapping_stock_class_right_to_open(right, f"{path}.conversion_rights[{index}]")
            for index, right in enumerate(mapping_read_object_list(record, "conversion_rights", path))
        ],
    )
    domain_to_open_optional(
        output,
        "liquidation_preference_multiple",
        mapping_read_optional_numeric(record, "liquidation_preference_multiple", path),
    )
    domain_to_open_optional(
        output, "participation_cap_multiple", mapping_read_optional_numeric(record, "participation_cap_multiple", path)
    )
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_stock_plan_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock plan to its ledger payload.

    The deprecated singular `stock_class_id` is folded into `stock_class_ids`
    and reported on the deprecation logger.

    Args:
        data: Open-format stock plan.

    Returns:
        dict[str, Any]: Ledger stock plan payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when the cancellation behavior is unknown.
    """

    path = "stockPlan"
    record = mapping_require_object(data, path)
    plan_id = mapping_require_text(record, "id", path)
    stock_class_ids = mapping_text_list(record, "stock_class_ids", path)
    legacy_stock_class_id = mapping_optional_text(record, "stock_class_id", path)
    if legacy_stock_class_id is not None:
        deprecation_logger.warning(
            "stockPlan.stock_class_id is deprecated; use stock_class_ids (plan_id=%s)",
            plan_id,
        )
        if legacy_stock_class_id not in stock_class_ids:
            stock_class_ids.append(legacy_stock_class_id)
    return {
        "id": plan_id,
        "plan_name": mapping_require_text(record, "plan_name", path),
        "board_approval_date": mapping_optional_date(record, "board_approval_date", path),
        "stockholder_approval_date": mapping_optional_date(record, "stockholder_approval_date", path),
        "initial_shares_reserved": mapping_require_numeric(record, "initial_shares_reserved", path),
        "default_cancellation_behavior": PLAN_CANCELLATION_BEHAVIOR_TABLE.optional_to_ledger(
            record.get("default_cancellation_behavior"), f"{path}.default_cancellation_behavior"
        ),
        "stock_class_ids": stock_class_ids,
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_stock_plan_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock plan to open format."""

    path = "stockPlan"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "STOCK_PLAN",
        "id": mapping_read_text(record, "id", path),
        "plan_name": mapping_read_text(record, "plan_name", path),
    }
    domain_to_open_optional(
        output, "board_approval_date", mapping_read_optional_date(record, "board_approval_date", path)
    )
    domain_to_open_optional(
        output, "stockholder_approval_date", mapping_read_optional_date(record, "stockholder_approval_date", path)
    )
    output["initial_shares_reserved"] = mapping_read_numeric(record, "initial_shares_reserved", path)
    domain_to_open_optional(
        output,
        "default_cancellation_behavior",
        PLAN_CANCELLATION_BEHAVIOR_TABLE.optional_to_open(
            record.get("default_cancellation_behavior"), f"{path}.default_cancellation_behavior"
        ),
    )
    output["stock_class_ids"] = mapping_read_text_list(record, "stock_class_ids", path)
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


STOCK_LEGEND_TEMPLATE_FIELDS: Final = (text_field("id"), text_field("name"), text_field("text"))


def mapping_stock_legend_template_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one stock legend template to its ledger payload."""

    return mapping_record_to_ledger(data, "stockLegendTemplate", STOCK_LEGEND_TEMPLATE_FIELDS)


def mapping_stock_legend_template_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger stock legend template to open format."""

    return mapping_record_to_open(payload, "stockLegendTemplate", "STOCK_LEGEND_TEMPLATE", STOCK_LEGEND_TEMPLATE_FIELDS)


def mapping_document_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one document reference to its ledger payload.

    Args:
        data: Open-format document.

    Returns:
        dict[str, Any]: Ledger document payload.

    Raises:
        ConversionValidationError: Raised when `md5` is missing or neither `path` nor `uri` is given.
        ConversionParseError: Raised when a related object type is unknown.
    """

    path = "document"
    record = mapping_require_object(data, path)
    document_id = mapping_require_text(record, "id", path)
    document_path = mapping_optional_text(record, "path", path)
    document_uri = mapping_optional_text(record, "uri", path)
    if document_path is None and document_uri is None:
        raise ConversionValidationError(
            f"{path}.path",
            "Either path or uri is required",
            expected_type="string",
            received_value=record.get("path"),
        )
    related_objects = []
    for index, reference in enumerate(mapping_object_list(record, "related_objects", path)):
        item_path = f"{path}.related_objects[{index}]"
        related_objects.append(
            {
                "object_type": OBJECT_REFERENCE_TYPE_TABLE.to_ledger(
                    reference.get("object_type"), f"{item_path}.object_type"
                ),
                "object_id": mapping_require_text(reference, "object_id", item_path),
            }
        )
    return {
        "id": document_id,
        "path": document_path,
        "uri": document_uri,
        "md5": mapping_require_text(record, "md5", path),
        "related_objects": related_objects,
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_document_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger document reference to open format."""

    path = "document"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "DOCUMENT",
        "id": mapping_read_text(record, "id", path),
    }
    domain_to_open_optional(output, "path", mapping_read_optional_text(record, "path", path))
    domain_to_open_optional(output, "uri", mapping_read_optional_text(record, "uri", path))
    output["md5"] = mapping_read_text(record, "md5", path)
    domain_to_open_optional(
        output,
        "related_objects",
        [
            {
                "object_type": OBJECT_REFERENCE_TYPE_TABLE.to_open(
                    reference.get("object_type"), f"{path}.related_objects[{index}].object_type"
                ),
                "object_id": mapping_read_text(reference, "object_id", f"{path}.related_objects[{index}]"),
            }
            for index, reference in enumerate(mapping_read_object_list(record, "related_objects", path))
        ],
    )
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output


def mapping_valuation_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one valuation to its ledger payload.

    Args:
        data: Open-format valuation.

    Returns:
        dict[str, Any]: Ledger valuation payload.

    Raises:
        ConversionValidationError: Raised when a required field is missing or malformed.
        ConversionParseError: Raised when the valuation type is unknown.
    """

    path = "valuation"
    record = mapping_require_object(data, path)
    valuation_id = mapping_require_text(record, "id", path)
    return {
        "id": valuation_id,
        "stock_class_id": mapping_require_text(record, "stock_class_id", path),
        "provider": mapping_optional_text(record, "provider", path),
        "board_approval_date": mapping_optional_date(record, "board_approval_date", path),
        "stockholder_approval_date": mapping_optional_date(record, "stockholder_approval_date", path),
        "price_per_share": mapping_require_monetary(record, "price_per_share", path),
        "effective_date": mapping_require_date(record, "effective_date", path),
        "valuation_type": VALUATION_TYPE_TABLE.to_ledger(record.get("valuation_type"), f"{path}.valuation_type"),
        "comments": domain_comments_to_ledger(record.get("comments")),
    }


def mapping_valuation_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger valuation to open format."""

    path = "valuation"
    record = mapping_read_record(payload, path)
    output: dict[str, Any] = {
        "object_type": "VALUATION",
        "id": mapping_read_text(record, "id", path),
        "stock_class_id": mapping_read_text(record, "stock_class_id", path),
    }
    domain_to_open_optional(output, "provider", mapping_read_optional_text(record, "provider", path))
    domain_to_open_optional(
        output, "board_approval_date", mapping_read_optional_date(record, "board_approval_date", path)
    )
    domain_to_open_optional(
        output, "stockholder_approval_date", mapping_read_optional_date(record, "stockholder_approval_date", path)
    )
    output["price_per_share"] = mapping_read_monetary(record, "price_per_share", path)
    output["effective_date"] = mapping_read_date(record, "effective_date", path)
    output["valuation_type"] = VALUATION_TYPE_TABLE.to_open(record.get("valuation_type"), f"{path}.valuation_type")
    domain_to_open_optional(output, "comments", mapping_read_comments(record))
    return output
