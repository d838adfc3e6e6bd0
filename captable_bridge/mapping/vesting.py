"""Vesting terms, conditions, triggers, and periods.

Triggers and periods are closed sum types: each kind is a frozen dataclass
holding exactly its own fields, and unknown kinds are rejected in both
directions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
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

from .payload_fields import (
    mapping_object_list,
    mapping_optional_text,
    mapping_read_comments,
    mapping_read_object_list,
    mapping_read_optional_text,
    mapping_read_record,
    mapping_read_text,
    mapping_read_text_list,
    mapping_require_object,
    mapping_require_text,
    mapping_text_list,
)
from .variant_tables import VESTING_ALLOCATION_TABLE, VESTING_DAY_OF_MONTH_TABLE

_VESTING_TERMS_PATH: Final[str] = "vestingTerms"


def _mapping_positive_integer(value: object, field_path: str, minimum: int) -> int:
    if value is None or value == "":
        raise ConversionValidationError(field_path, expected_type="integer")
    normalized_value = domain_normalize_numeric_string(value, field_path)
    if "." in normalized_value or int(normalized_value) < minimum:
        raise ConversionValidationError(
            field_path,
            f"Expected an integer greater than or equal to {minimum}",
            expected_type="integer",
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    return int(normalized_value)


def _mapping_ledger_integer(value: object, field_path: str) -> int:
    normalized_value = domain_ledger_numeric_to_open(value, field_path)
    if "." in normalized_value:
        raise ConversionParseError(
            f"Expected an integer at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
            error_code=ConversionErrorCode.INVALID_FORMAT.value,
        )
    return int(normalized_value)


@dataclass(frozen=True)
class VestingPeriodDays:
    """Relative vesting period measured in days."""

    length: int
    occurrences: int
    cliff_installment: int | None

    def to_ledger(self) -> dict[str, Any]:
        return {
            "tag": "OcfVestingPeriodDays",
            "value": {
                "length_": str(self.length),
                "occurrences": str(self.occurrences),
                "cliff_installment": None if self.cliff_installment is None else str(self.cliff_installment),
            },
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {"type": "DAYS", "length": self.length, "occurrences": self.occurrences}
        if self.cliff_installment is not None:
            output["cliff_installment"] = self.cliff_installment
        return output


@dataclass(frozen=True)
class VestingPeriodMonths:
    """Relative vesting period measured in months on a fixed day."""

    length: int
    occurrences: int
    day_of_month: str
    cliff_installment: int | None

    def to_ledger(self) -> dict[str, Any]:
        return {
            "tag": "OcfVestingPeriodMonths",
            "value": {
                "length_": str(self.length),
                "occurrences": str(self.occurrences),
                "day_of_month": VESTING_DAY_OF_MONTH_TABLE.to_ledger(self.day_of_month, "period.day_of_month"),
                "cliff_installment": None if self.cliff_installment is None else str(self.cliff_installment),
            },
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {
            "type": "MONTHS",
            "length": self.length,
            "occurrences": self.occurrences,
            "day_of_month": self.day_of_month,
        }
        if self.cliff_installment is not None:
            output["cliff_installment"] = self.cliff_installment
        return output


VestingPeriod = VestingPeriodDays | VestingPeriodMonths


def mapping_parse_open_vesting_period(value: object, field_path: str) -> VestingPeriod:
    """Parse one open-format relative vesting period.

    Args:
        value: Open-format period object.
        field_path: Dotted field path reported on failure.

    Returns:
        VestingPeriod: Typed period.

    Raises:
        ConversionValidationError: Raised when length, occurrences, or day of month is invalid.
        ConversionParseError: Raised when the period type is unknown.
    """

    period = mapping_require_object(value, field_path)
    period_type = period.get("type")
    length = _mapping_positive_integer(period.get("length"), f"{field_path}.length", minimum=1)
    occurrences = _mapping_positive_integer(period.get("occurrences"), f"{field_path}.occurrences", minimum=1)
    cliff_value = period.get("cliff_installment")
    cliff_installment = (
        None
        if cliff_value is None
        else _mapping_positive_integer(cliff_value, f"{field_path}.cliff_installment", minimum=0)
    )
    if period_type == "DAYS":
        return VestingPeriodDays(length=length, occurrences=occurrences, cliff_installment=cliff_installment)
    if period_type == "MONTHS":
        day_of_month = period.get("day_of_month")
        if day_of_month is None or day_of_month == "":
            raise ConversionValidationError(
                f"{field_path}.day_of_month",
                "day_of_month is required for MONTHS periods",
                expected_type="string",
            )
        VESTING_DAY_OF_MONTH_TABLE.to_ledger(day_of_month, f"{field_path}.day_of_month")
        return VestingPeriodMonths(
            length=length,
            occurrences=occurrences,
            day_of_month=day_of_month,
            cliff_installment=cliff_installment,
        )
    raise ConversionParseError(
        f"Unknown vesting period type at '{field_path}.type': {period_type!r}",
        source=f"{field_path}.type",
        received_value=period_type,
        error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
    )


def mapping_parse_ledger_vesting_period(value: object, field_path: str) -> VestingPeriod:
    """Parse one ledger period variant into its typed kind.

    Raises:
        ConversionParseError: Raised when the variant tag or its values are invalid.
    """

    variant = mapping_read_record(value, field_path)
    tag = variant.get("tag")
    period = mapping_read_record(variant.get("value"), f"{field_path}.value")
    cliff_value = period.get("cliff_installment")
    length = _mapping_ledger_integer(period.get("length_"), f"{field_path}.length_")
    occurrences = _mapping_ledger_integer(period.get("occurrences"), f"{field_path}.occurrences")
    cliff_installment = None if cliff_value is None else _mapping_ledger_integer(cliff_value, f"{field_path}.cliff_installment")
    if tag == "OcfVestingPeriodDays":
        return VestingPeriodDays(length=length, occurrences=occurrences, cliff_installment=cliff_installment)
    if tag == "OcfVestingPeriodMonths":
        return VestingPeriodMonths(
            length=length,
            occurrences=occurrences,
            day_of_month=VESTING_DAY_OF_MONTH_TABLE.to_open(period.get("day_of_month"), f"{field_path}.day_of_month"),
            cliff_installment=cliff_installment,
        )
    raise ConversionParseError(
        f"Unknown vesting period tag at '{field_path}': {tag!r}",
        source=field_path,
        received_value=tag,
        error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
    )


@dataclass(frozen=True)
class VestingStartTrigger:
    """Vesting begins at the vesting start date."""

    def to_ledger(self) -> dict[str, Any]:
        return {"tag": "OcfVestingStartTrigger", "value": {}}

    def to_open(self) -> dict[str, Any]:
        return {"type": "VESTING_START_DATE"}


@dataclass(frozen=True)
class VestingEventTrigger:
    """Vesting happens on an externally recorded event."""

    def to_ledger(self) -> dict[str, Any]:
        return {"tag": "OcfVestingEventTrigger", "value": {}}

    def to_open(self) -> dict[str, Any]:
        return {"type": "VESTING_EVENT"}


@dataclass(frozen=True)
class VestingScheduleAbsoluteTrigger:
    """Vesting happens on a fixed calendar date."""

    date: str

    def to_ledger(self) -> dict[str, Any]:
        return {"tag": "OcfVestingScheduleAbsoluteTrigger", "value": domain_date_to_ledger_time(self.date)}

    def to_open(self) -> dict[str, Any]:
        return {"type": "VESTING_SCHEDULE_ABSOLUTE", "date": self.date}


@dataclass(frozen=True)
class VestingScheduleRelativeTrigger:
    """Vesting happens a period after another condition."""

    period: VestingPeriod
    relative_to_condition_id: str

    def to_ledger(self) -> dict[str, Any]:
        return {
            "tag": "OcfVestingScheduleRelativeTrigger",
            "value": {
                "period": self.period.to_ledger(),
                "relative_to_condition_id": self.relative_to_condition_id,
            },
        }

    def to_open(self) -> dict[str, Any]:
        return {
            "type": "VESTING_SCHEDULE_RELATIVE",
            "period": self.period.to_open(),
            "relative_to_condition_id": self.relative_to_condition_id,
        }


VestingTrigger = VestingStartTrigger | VestingEventTrigger | VestingScheduleAbsoluteTrigger | VestingScheduleRelativeTrigger


def mapping_parse_open_vesting_trigger(value: object, field_path: str) -> VestingTrigger:
    """Parse one open-format vesting trigger into its typed kind.

    Args:
        value: Open-format trigger object with a `type` discriminator.
        field_path: Dotted field path reported on failure.

    Returns:
        VestingTrigger: Typed trigger.

    Raises:
        ConversionValidationError: Raised when a required trigger field is missing.
        ConversionParseError: Raised when the trigger type is unknown.
    """

    trigger = mapping_require_object(value, field_path)
    trigger_type = trigger.get("type")
    if trigger_type == "VESTING_START_DATE":
        return VestingStartTrigger()
    if trigger_type == "VESTING_EVENT":
        return VestingEventTrigger()
    if trigger_type == "VESTING_SCHEDULE_ABSOLUTE":
        ledger_time = domain_date_to_ledger_time(trigger.get("date"), f"{field_path}.date")
        return VestingScheduleAbsoluteTrigger(date=domain_ledger_time_to_date(ledger_time, f"{field_path}.date"))
    if trigger_type == "VESTING_SCHEDULE_RELATIVE":
        return VestingScheduleRelativeTrigger(
            period=mapping_parse_open_vesting_period(trigger.get("period"), f"{field_path}.period"),
            relative_to_condition_id=mapping_require_text(trigger, "relative_to_condition_id", field_path),
        )
    raise ConversionParseError(
        f"Unknown vesting trigger type at '{field_path}.type': {trigger_type!r}",
        source=f"{field_path}.type",
        received_value=trigger_type,
        error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
    )


def mapping_parse_ledger_vesting_trigger(value: object, field_path: str) -> VestingTrigger:
    """Parse one ledger trigger variant into its typed kind.

    Raises:
        ConversionParseError: Raised when the variant tag or its values are invalid.
    """

    variant = mapping_read_record(value, field_path)
    tag = variant.get("tag")
    if tag == "OcfVestingStartTrigger":
        return VestingStartTrigger()
    if tag == "OcfVestingEventTrigger":
        return VestingEventTrigger()
    if tag == "OcfVestingScheduleAbsoluteTrigger":
        return VestingScheduleAbsoluteTrigger(date=domain_ledger_time_to_date(variant.get("value"), f"{field_path}.value"))
    if tag == "OcfVestingScheduleRelativeTrigger":
        relative = mapping_read_record(variant.get("value"), f"{field_path}.value")
        return VestingScheduleRelativeTrigger(
            period=mapping_parse_ledger_vesting_period(relative.get("period"), f"{field_path}.value.period"),
            relative_to_condition_id=mapping_read_text(relative, "relative_to_condition_id", f"{field_path}.value"),
        )
    raise ConversionParseError(
        f"Unknown vesting trigger tag at '{field_path}': {tag!r}",
        source=field_path,
        received_value=tag,
        error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
    )


def _mapping_portion_to_ledger(value: object, field_path: str) -> dict[str, Any]:
    portion = mapping_require_object(value, field_path)
    for key in ("numerator", "denominator"):
        if portion.get(key) is None or portion.get(key) == "":
            raise ConversionValidationError(f"{field_path}.{key}")
    return {
        "numerator": domain_normalize_numeric_string(portion["numerator"], f"{field_path}.numerator"),
        "denominator": domain_normalize_numeric_string(portion["denominator"], f"{field_path}.denominator"),
        "remainder": bool(portion.get("remainder", False)),
    }


def _mapping_portion_to_open(value: object, field_path: str) -> dict[str, Any] | None:
    if value is None:
        return None
    portion = mapping_read_record(value, field_path)
    # Optional values may arrive wrapped as a `Some` variant.
    if portion.get("tag") == "Some":
        portion = mapping_read_record(portion.get("value"), f"{field_path}.value")
    output: dict[str, Any] = {
        "numerator": domain_ledger_numeric_to_open(portion.get("numerator"), f"{field_path}.numerator"),
        "denominator": domain_ledger_numeric_to_open(portion.get("denominator"), f"{field_path}.denominator"),
    }
    if portion.get("remainder"):
        output["remainder"] = True
    return output


def mapping_vesting_condition_to_ledger(value: object, field_path: str) -> dict[str, Any]:
    """Convert one open-format vesting condition to its ledger shape.

    Raises:
        ConversionValidationError: Raised when the condition is missing fields or sets both portion and quantity.
        ConversionParseError: Raised when the trigger carries unknown kinds or labels.
    """

    condition = mapping_require_object(value, field_path)
    portion = condition.get("portion")
    quantity = condition.get("quantity")
    has_quantity = quantity is not None and quantity != ""
    if (portion is None) == (not has_quantity):
        raise ConversionValidationError(
            field_path,
            "Exactly one of portion or quantity is required",
            received_value={"portion": portion, "quantity": quantity},
        )
    return {
        "id": mapping_require_text(condition, "id", field_path),
        "description": mapping_optional_text(condition, "description", field_path),
        "portion": None if portion is None else _mapping_portion_to_ledger(portion, f"{field_path}.portion"),
        "quantity": domain_normalize_numeric_string(quantity, f"{field_path}.quantity") if has_quantity else None,
        "trigger": mapping_parse_open_vesting_trigger(condition.get("trigger"), f"{field_path}.trigger").to_ledger(),
        "next_condition_ids": mapping_text_list(condition, "next_condition_ids", field_path),
    }


def mapping_vesting_condition_to_open(value: object, field_path: str) -> dict[str, Any]:
    """Convert one ledger vesting condition to its open-format object."""

    condition = mapping_read_record(value, field_path)
    output: dict[str, Any] = {"id": mapping_read_text(condition, "id", field_path)}
    domain_to_open_optional(output, "description", mapping_read_optional_text(condition, "description", field_path))
    domain_to_open_optional(output, "portion", _mapping_portion_to_open(condition.get("portion"), f"{field_path}.portion"))
    if condition.get("quantity") is not None:
        output["quantity"] = domain_ledger_numeric_to_open(condition.get("quantity"), f"{field_path}.quantity")
    output["trigger"] = mapping_parse_ledger_vesting_trigger(condition.get("trigger"), f"{field_path}.trigger").to_open()
    output["next_condition_ids"] = mapping_read_text_list(condition, "next_condition_ids", field_path)
    return output


def mapping_vesting_terms_to_ledger(data: Mapping[str, Any]) -> dict[str, Any]:
    """Convert open-format vesting terms to the ledger payload.

    Args:
        data: Open-format vesting terms object.

    Returns:
        dict[str, Any]: Ledger vesting terms payload.

    Raises:
        ConversionValidationError: Raised when required fields are missing or invalid.
        ConversionParseError: Raised when allocation type or nested kinds are unknown.
    """

    terms = mapping_require_object(data, _VESTING_TERMS_PATH)
    return {
        "id": mapping_require_text(terms, "id", _VESTING_TERMS_PATH),
        "name": mapping_require_text(terms, "name", _VESTING_TERMS_PATH),
        "description": mapping_require_text(terms, "description", _VESTING_TERMS_PATH),
        "allocation_type": VESTING_ALLOCATION_TABLE.to_ledger(
            terms.get("allocation_type"), f"{_VESTING_TERMS_PATH}.allocation_type"
        ),
        "vesting_conditions": [
            mapping_vesting_condition_to_ledger(condition, f"{_VESTING_TERMS_PATH}.vesting_conditions[{index}]")
            for index, condition in enumerate(mapping_object_list(terms, "vesting_conditions", _VESTING_TERMS_PATH))
        ],
        "comments": domain_comments_to_ledger(terms.get("comments")),
    }


def mapping_vesting_terms_to_open(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Convert one ledger vesting terms payload to its open-format object.

    Raises:
        ConversionParseError: Raised when the payload is malformed or carries unknown labels.
    """

    terms = mapping_read_record(payload, _VESTING_TERMS_PATH)
    output: dict[str, Any] = {
        "object_type": "VESTING_TERMS",
        "id": mapping_read_text(terms, "id", _VESTING_TERMS_PATH),
        "name": mapping_read_text(terms, "name", _VESTING_TERMS_PATH),
        "description": mapping_read_optional_text(terms, "description", _VESTING_TERMS_PATH) or "",
        "allocation_type": VESTING_ALLOCATION_TABLE.to_open(
            terms.get("allocation_type"), f"{_VESTING_TERMS_PATH}.allocation_type"
        ),
        "vesting_conditions": [
            mapping_vesting_condition_to_open(condition, f"{_VESTING_TERMS_PATH}.vesting_conditions[{index}]")
            for index, condition in enumerate(
                mapping_read_object_list(terms, "vesting_conditions", _VESTING_TERMS_PATH)
            )
        ],
    }
    domain_to_open_optional(output, "comments", mapping_read_comments(terms))
    return output
