"""Conversion mechanisms, rights, and triggers for convertibles and warrants.

Each mechanism kind is a frozen dataclass that carries only its own fields.
Open-format objects and ledger variants are both parsed into the dataclass and
rendered from it, so a mechanism can never carry fields of a sibling kind.
Warrants share every mechanism kind except SAFE and note conversions, under a
different set of ledger tags.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Final

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    domain_date_to_ledger_time,
    domain_ledger_numeric_to_open,
    domain_ledger_time_to_date,
    domain_normalize_numeric_string,
    domain_optional_date_to_ledger,
    domain_optional_ledger_time_to_date,
    domain_to_open_optional,
)

from .payload_fields import (
    mapping_optional_bool,
    mapping_optional_monetary,
    mapping_optional_numeric,
    mapping_optional_text,
    mapping_read_optional_monetary,
    mapping_read_optional_numeric,
    mapping_read_optional_text,
    mapping_read_record,
    mapping_require_object,
)
from .variant_tables import (
    ACCRUAL_PERIOD_TABLE,
    COMPOUNDING_TABLE,
    CONVERSION_TIMING_TABLE,
    CONVERSION_TRIGGER_TYPE_TABLE,
    DAY_COUNT_TABLE,
    INTEREST_PAYOUT_TABLE,
    VariantTable,
)

_MECHANISM_PATH: Final[str] = "conversion_mechanism"


class MechanismFamily(str, Enum):
    """Instrument families that carry conversion mechanisms."""

    CONVERTIBLE = "convertible"
    WARRANT = "warrant"


_CAPITALIZATION_RULE_FIELDS: Final[tuple[str, ...]] = (
    "include_outstanding_shares",
    "include_outstanding_options",
    "include_outstanding_unissued_options",
    "include_this_security",
    "include_other_converting_securities",
    "include_option_pool_topup_for_promised_options",
    "include_additional_option_pool_topup",
    "include_new_money",
)


def _mapping_require_mechanism_value(data: Mapping[str, Any], key: str, mechanism_type: str) -> Any:
    value = data.get(key)
    if value is None or value == "":
        raise ConversionValidationError(
            f"{_MECHANISM_PATH}.{key}",
            f"{mechanism_type} requires {key}",
            received_value=value,
        )
    return value


def _mapping_read_mechanism_value(value: Mapping[str, Any], key: str, mechanism_type: str) -> Any:
    field_value = value.get(key)
    if field_value is None or field_value == "":
        raise ConversionParseError(
            f"{mechanism_type} ledger value is missing '{key}'",
            source=f"{_MECHANISM_PATH}.{key}",
            received_value=field_value,
            error_code=ConversionErrorCode.SCHEMA_MISMATCH.value,
        )
    return field_value


def _mapping_checked_code(table: VariantTable, data: Mapping[str, Any], key: str) -> str | None:
    code = data.get(key)
    table.optional_to_ledger(code, f"{_MECHANISM_PATH}.{key}")
    return code or None


@dataclass(frozen=True)
class CapitalizationDefinitionRules:
    """Flags describing which securities count toward capitalization.

    Attributes:
        flags: Rule name to boolean pairs in declaration order.
    """

    flags: tuple[tuple[str, bool], ...]

    @classmethod
    def from_value(cls, value: object | None) -> CapitalizationDefinitionRules | None:
        """Coerce one rules object from either side into typed flags."""

        if not isinstance(value, Mapping):
            return None
        return cls(flags=tuple((name, bool(value.get(name))) for name in _CAPITALIZATION_RULE_FIELDS))

    def as_dict(self) -> dict[str, bool]:
        """Return the rules as a plain mapping."""

        return dict(self.flags)


def _mapping_optional_rules_dict(rules: CapitalizationDefinitionRules | None) -> dict[str, bool] | None:
    return rules.as_dict() if rules is not None else None


@dataclass(frozen=True)
class InterestRate:
    """One interest rate period of a note conversion.

    Attributes:
        rate: Canonical decimal rate.
        accrual_start_date: Open-format accrual start date.
        accrual_end_date: Optional open-format accrual end date.
    """

    rate: str
    accrual_start_date: str
    accrual_end_date: str | None


@dataclass(frozen=True)
class SafeConversionMechanism:
    """SAFE conversion terms."""

    mechanism_type: ClassVar[str] = "SAFE_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {MechanismFamily.CONVERTIBLE: "OcfConvMechSAFE"}

    conversion_discount: str | None
    conversion_valuation_cap: dict[str, str] | None
    exit_multiple: tuple[str, str] | None
    conversion_mfn: bool | None
    conversion_timing: str | None
    capitalization_definition: str | None
    capitalization_definition_rules: CapitalizationDefinitionRules | None

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> SafeConversionMechanism:
        return cls(
            conversion_discount=mapping_optional_numeric(data, "conversion_discount", _MECHANISM_PATH),
            conversion_valuation_cap=mapping_optional_monetary(data, "conversion_valuation_cap", _MECHANISM_PATH),
            exit_multiple=_mapping_exit_multiple_from_open(data.get("exit_multiple")),
            conversion_mfn=mapping_optional_bool(data, "conversion_mfn", _MECHANISM_PATH),
            conversion_timing=_mapping_checked_code(CONVERSION_TIMING_TABLE, data, "conversion_timing"),
            capitalization_definition=mapping_optional_text(data, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                data.get("capitalization_definition_rules")
            ),
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> SafeConversionMechanism:
        return cls(
            conversion_discount=mapping_read_optional_numeric(value, "conversion_discount", _MECHANISM_PATH),
            conversion_valuation_cap=mapping_read_optional_monetary(value, "conversion_valuation_cap", _MECHANISM_PATH),
            exit_multiple=_mapping_exit_multiple_from_ledger(value.get("exit_multiple")),
            conversion_mfn=None if value.get("conversion_mfn") is None else bool(value.get("conversion_mfn")),
            conversion_timing=CONVERSION_TIMING_TABLE.optional_to_open(
                value.get("conversion_timing"), f"{_MECHANISM_PATH}.conversion_timing"
            ),
            capitalization_definition=mapping_read_optional_text(value, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                value.get("capitalization_definition_rules")
            ),
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {
            "conversion_discount": self.conversion_discount,
            "conversion_valuation_cap": self.conversion_valuation_cap,
            "exit_multiple": _mapping_ratio_dict(self.exit_multiple),
            "conversion_mfn": self.conversion_mfn,
            "conversion_timing": CONVERSION_TIMING_TABLE.optional_to_ledger(
                self.conversion_timing, f"{_MECHANISM_PATH}.conversion_timing"
            ),
            "capitalization_definition": self.capitalization_definition,
            "capitalization_definition_rules": _mapping_optional_rules_dict(self.capitalization_definition_rules),
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {"type": self.mechanism_type}
        domain_to_open_optional(output, "conversion_discount", self.conversion_discount)
        domain_to_open_optional(output, "conversion_valuation_cap", self.conversion_valuation_cap)
        domain_to_open_optional(output, "exit_multiple", _mapping_ratio_dict(self.exit_multiple))
        domain_to_open_optional(output, "conversion_mfn", self.conversion_mfn)
        domain_to_open_optional(output, "conversion_timing", self.conversion_timing)
        domain_to_open_optional(output, "capitalization_definition", self.capitalization_definition)
        domain_to_open_optional(
            output, "capitalization_definition_rules", _mapping_optional_rules_dict(self.capitalization_definition_rules)
        )
        return output


@dataclass(frozen=True)
class NoteConversionMechanism:
    """Convertible note conversion terms with interest accrual."""

    mechanism_type: ClassVar[str] = "CONVERTIBLE_NOTE_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {MechanismFamily.CONVERTIBLE: "OcfConvMechNote"}

    interest_rates: tuple[InterestRate, ...]
    day_count_convention: str
    interest_payout: str
    interest_accrual_period: str
    compounding_type: str
    conversion_discount: str | None
    conversion_valuation_cap: dict[str, str] | None
    capitalization_definition: str | None
    capitalization_definition_rules: CapitalizationDefinitionRules | None
    conversion_mfn: bool | None

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> NoteConversionMechanism:
        raw_rates = data.get("interest_rates")
        if not isinstance(raw_rates, (list, tuple)):
            raise ConversionValidationError(
                f"{_MECHANISM_PATH}.interest_rates",
                f"{cls.mechanism_type} requires interest_rates",
                expected_type="object[]",
                received_value=raw_rates,
            )
        interest_rates = []
        for index, raw_rate in enumerate(raw_rates):
            rate_path = f"{_MECHANISM_PATH}.interest_rates[{index}]"
            rate = mapping_require_object(raw_rate, rate_path)
            if rate.get("rate") is None or rate.get("rate") == "":
                raise ConversionValidationError(f"{rate_path}.rate")
            interest_rates.append(
                InterestRate(
                    rate=domain_normalize_numeric_string(rate.get("rate"), f"{rate_path}.rate"),
                    accrual_start_date=domain_ledger_time_to_date(
                        domain_date_to_ledger_time(rate.get("accrual_start_date"), f"{rate_path}.accrual_start_date")
                    ),
                    accrual_end_date=domain_optional_ledger_time_to_date(
                        domain_optional_date_to_ledger(rate.get("accrual_end_date"), f"{rate_path}.accrual_end_date")
                    ),
                )
            )
        for key in ("day_count_convention", "interest_payout", "interest_accrual_period", "compounding_type"):
            _mapping_require_mechanism_value(data, key, cls.mechanism_type)
        return cls(
            interest_rates=tuple(interest_rates),
            day_count_convention=_mapping_checked_code(DAY_COUNT_TABLE, data, "day_count_convention"),
            interest_payout=_mapping_checked_code(INTEREST_PAYOUT_TABLE, data, "interest_payout"),
            interest_accrual_period=_mapping_checked_code(ACCRUAL_PERIOD_TABLE, data, "interest_accrual_period"),
            compounding_type=_mapping_checked_code(COMPOUNDING_TABLE, data, "compounding_type"),
            conversion_discount=mapping_optional_numeric(data, "conversion_discount", _MECHANISM_PATH),
            conversion_valuation_cap=mapping_optional_monetary(data, "conversion_valuation_cap", _MECHANISM_PATH),
            capitalization_definition=mapping_optional_text(data, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                data.get("capitalization_definition_rules")
            ),
            conversion_mfn=mapping_optional_bool(data, "conversion_mfn", _MECHANISM_PATH),
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> NoteConversionMechanism:
        raw_rates = value.get("interest_rates") or []
        if not isinstance(raw_rates, list):
            raise ConversionParseError(
                f"Expected a list at '{_MECHANISM_PATH}.interest_rates': {raw_rates!r}",
                source=f"{_MECHANISM_PATH}.interest_rates",
                received_value=raw_rates,
            )
        interest_rates = []
        for index, raw_rate in enumerate(raw_rates):
            rate_path = f"{_MECHANISM_PATH}.interest_rates[{index}]"
            rate = mapping_read_record(raw_rate, rate_path)
            interest_rates.append(
                InterestRate(
                    rate=domain_ledger_numeric_to_open(rate.get("rate"), f"{rate_path}.rate"),
                    accrual_start_date=domain_ledger_time_to_date(
                        rate.get("accrual_start_date"), f"{rate_path}.accrual_start_date"
                    ),
                    accrual_end_date=domain_optional_ledger_time_to_date(
                        rate.get("accrual_end_date"), f"{rate_path}.accrual_end_date"
                    ),
                )
            )
        return cls(
            interest_rates=tuple(interest_rates),
            day_count_convention=DAY_COUNT_TABLE.to_open(
                value.get("day_count_convention"), f"{_MECHANISM_PATH}.day_count_convention"
            ),
            interest_payout=INTEREST_PAYOUT_TABLE.to_open(
                value.get("interest_payout"), f"{_MECHANISM_PATH}.interest_payout"
            ),
            interest_accrual_period=ACCRUAL_PERIOD_TABLE.to_open(
                value.get("interest_accrual_period"), f"{_MECHANISM_PATH}.interest_accrual_period"
            ),
            compounding_type=COMPOUNDING_TABLE.to_open(
                value.get("compounding_type"), f"{_MECHANISM_PATH}.compounding_type"
            ),
            conversion_discount=mapping_read_optional_numeric(value, "conversion_discount", _MECHANISM_PATH),
            conversion_valuation_cap=mapping_read_optional_monetary(value, "conversion_valuation_cap", _MECHANISM_PATH),
            capitalization_definition=mapping_read_optional_text(value, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                value.get("capitalization_definition_rules")
            ),
            conversion_mfn=None if value.get("conversion_mfn") is None else bool(value.get("conversion_mfn")),
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {
            "interest_rates": [
                {
                    "rate": rate.rate,
                    "accrual_start_date": domain_date_to_ledger_time(rate.accrual_start_date),
                    "accrual_end_date": domain_optional_date_to_ledger(rate.accrual_end_date),
                }
                for rate in self.interest_rates
            ],
            "day_count_convention": DAY_COUNT_TABLE.to_ledger(
                self.day_count_convention, f"{_MECHANISM_PATH}.day_count_convention"
            ),
            "interest_payout": INTEREST_PAYOUT_TABLE.to_ledger(
                self.interest_payout, f"{_MECHANISM_PATH}.interest_payout"
            ),
            "interest_accrual_period": ACCRUAL_PERIOD_TABLE.to_ledger(
                self.interest_accrual_period, f"{_MECHANISM_PATH}.interest_accrual_period"
            ),
            "compounding_type": COMPOUNDING_TABLE.to_ledger(self.compounding_type, f"{_MECHANISM_PATH}.compounding_type"),
            "conversion_discount": self.conversion_discount,
            "conversion_valuation_cap": self.conversion_valuation_cap,
            "capitalization_definition": self.capitalization_definition,
            "capitalization_definition_rules": _mapping_optional_rules_dict(self.capitalization_definition_rules),
            # Notes carry no exit multiple on the ledger.
            "exit_multiple": None,
            "conversion_mfn": self.conversion_mfn,
        }

    def to_open(self) -> dict[str, Any]:
        interest_rates = []
        for rate in self.interest_rates:
            rate_output = {"rate": rate.rate, "accrual_start_date": rate.accrual_start_date}
            domain_to_open_optional(rate_output, "accrual_end_date", rate.accrual_end_date)
            interest_rates.append(rate_output)
        output: dict[str, Any] = {
            "type": self.mechanism_type,
            "interest_rates": interest_rates,
            "day_count_convention": self.day_count_convention,
            "interest_payout": self.interest_payout,
            "interest_accrual_period": self.interest_accrual_period,
            "compounding_type": self.compounding_type,
        }
        domain_to_open_optional(output, "conversion_discount", self.conversion_discount)
        domain_to_open_optional(output, "conversion_valuation_cap", self.conversion_valuation_cap)
        domain_to_open_optional(output, "capitalization_definition", self.capitalization_definition)
        domain_to_open_optional(
            output, "capitalization_definition_rules", _mapping_optional_rules_dict(self.capitalization_definition_rules)
        )
        domain_to_open_optional(output, "conversion_mfn", self.conversion_mfn)
        return output


@dataclass(frozen=True)
class PercentCapitalizationMechanism:
    """Conversion into a fixed percentage of capitalization."""

    mechanism_type: ClassVar[str] = "FIXED_PERCENT_OF_CAPITALIZATION_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {
        MechanismFamily.CONVERTIBLE: "OcfConvMechPercentCapitalization",
        MechanismFamily.WARRANT: "OcfWarrantMechanismPercentCapitalization",
    }

    converts_to_percent: str
    capitalization_definition: str | None
    capitalization_definition_rules: CapitalizationDefinitionRules | None

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> PercentCapitalizationMechanism:
        percent = _mapping_require_mechanism_value(data, "converts_to_percent", cls.mechanism_type)
        return cls(
            converts_to_percent=domain_normalize_numeric_string(percent, f"{_MECHANISM_PATH}.converts_to_percent"),
            capitalization_definition=mapping_optional_text(data, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                data.get("capitalization_definition_rules")
            ),
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> PercentCapitalizationMechanism:
        percent = _mapping_read_mechanism_value(value, "converts_to_percent", cls.mechanism_type)
        return cls(
            converts_to_percent=domain_ledger_numeric_to_open(percent, f"{_MECHANISM_PATH}.converts_to_percent"),
            capitalization_definition=mapping_read_optional_text(value, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                value.get("capitalization_definition_rules")
            ),
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {
            "converts_to_percent": self.converts_to_percent,
            "capitalization_definition": self.capitalization_definition,
            "capitalization_definition_rules": _mapping_optional_rules_dict(self.capitalization_definition_rules),
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {"type": self.mechanism_type, "converts_to_percent": self.converts_to_percent}
        domain_to_open_optional(output, "capitalization_definition", self.capitalization_definition)
        domain_to_open_optional(
            output, "capitalization_definition_rules", _mapping_optional_rules_dict(self.capitalization_definition_rules)
        )
        return output


@dataclass(frozen=True)
class FixedAmountMechanism:
    """Conversion into a fixed share quantity."""

    mechanism_type: ClassVar[str] = "FIXED_AMOUNT_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {
        MechanismFamily.CONVERTIBLE: "OcfConvMechFixedAmount",
        MechanismFamily.WARRANT: "OcfWarrantMechanismFixedAmount",
    }

    converts_to_quantity: str

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> FixedAmountMechanism:
        quantity = _mapping_require_mechanism_value(data, "converts_to_quantity", cls.mechanism_type)
        return cls(
            converts_to_quantity=domain_normalize_numeric_string(quantity, f"{_MECHANISM_PATH}.converts_to_quantity")
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> FixedAmountMechanism:
        quantity = _mapping_read_mechanism_value(value, "converts_to_quantity", cls.mechanism_type)
        return cls(
            converts_to_quantity=domain_ledger_numeric_to_open(quantity, f"{_MECHANISM_PATH}.converts_to_quantity")
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {"converts_to_quantity": self.converts_to_quantity}

    def to_open(self) -> dict[str, Any]:
        return {"type": self.mechanism_type, "converts_to_quantity": self.converts_to_quantity}


@dataclass(frozen=True)
class ValuationBasedMechanism:
    """Conversion priced from a company valuation."""

    mechanism_type: ClassVar[str] = "VALUATION_BASED_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {
        MechanismFamily.CONVERTIBLE: "OcfConvMechValuationBased",
        MechanismFamily.WARRANT: "OcfWarrantMechanismValuationBased",
    }

    valuation_type: str
    valuation_amount: dict[str, str] | None
    capitalization_definition: str | None
    capitalization_definition_rules: CapitalizationDefinitionRules | None

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> ValuationBasedMechanism:
        return cls(
            valuation_type=_mapping_require_mechanism_value(data, "valuation_type", cls.mechanism_type),
            valuation_amount=mapping_optional_monetary(data, "valuation_amount", _MECHANISM_PATH),
            capitalization_definition=mapping_optional_text(data, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                data.get("capitalization_definition_rules")
            ),
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> ValuationBasedMechanism:
        return cls(
            valuation_type=_mapping_read_mechanism_value(value, "valuation_type", cls.mechanism_type),
            valuation_amount=mapping_read_optional_monetary(value, "valuation_amount", _MECHANISM_PATH),
            capitalization_definition=mapping_read_optional_text(value, "capitalization_definition", _MECHANISM_PATH),
            capitalization_definition_rules=CapitalizationDefinitionRules.from_value(
                value.get("capitalization_definition_rules")
            ),
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {
            "valuation_type": self.valuation_type,
            "valuation_amount": self.valuation_amount,
            "capitalization_definition": self.capitalization_definition,
            "capitalization_definition_rules": _mapping_optional_rules_dict(self.capitalization_definition_rules),
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {"type": self.mechanism_type, "valuation_type": self.valuation_type}
        domain_to_open_optional(output, "valuation_amount", self.valuation_amount)
        domain_to_open_optional(output, "capitalization_definition", self.capitalization_definition)
        domain_to_open_optional(
            output, "capitalization_definition_rules", _mapping_optional_rules_dict(self.capitalization_definition_rules)
        )
        return output


@dataclass(frozen=True)
class SharePriceBasedMechanism:
    """Conversion priced from a future share price, optionally discounted."""

    mechanism_type: ClassVar[str] = "SHARE_PRICE_BASED_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {
        MechanismFamily.CONVERTIBLE: "OcfConvMechSharePriceBased",
        MechanismFamily.WARRANT: "OcfWarrantMechanismSharePriceBased",
    }

    description: str
    discount: bool
    discount_percentage: str | None
    discount_amount: dict[str, str] | None

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> SharePriceBasedMechanism:
        description = _mapping_require_mechanism_value(data, "description", cls.mechanism_type)
        if not isinstance(description, str):
            raise ConversionValidationError(
                f"{_MECHANISM_PATH}.description",
                f"{cls.mechanism_type} requires description",
                expected_type="string",
                received_value=description,
                error_code=ConversionErrorCode.INVALID_TYPE.value,
            )
        return cls(
            description=description,
            discount=bool(data.get("discount")),
            discount_percentage=mapping_optional_numeric(data, "discount_percentage", _MECHANISM_PATH),
            discount_amount=mapping_optional_monetary(data, "discount_amount", _MECHANISM_PATH),
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> SharePriceBasedMechanism:
        return cls(
            description=_mapping_read_mechanism_value(value, "description", cls.mechanism_type),
            discount=bool(value.get("discount")),
            discount_percentage=mapping_read_optional_numeric(value, "discount_percentage", _MECHANISM_PATH),
            discount_amount=mapping_read_optional_monetary(value, "discount_amount", _MECHANISM_PATH),
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "discount": self.discount,
            "discount_percentage": self.discount_percentage,
            "discount_amount": self.discount_amount,
        }

    def to_open(self) -> dict[str, Any]:
        output: dict[str, Any] = {
            "type": self.mechanism_type,
            "description": self.description,
            "discount": self.discount,
        }
        domain_to_open_optional(output, "discount_percentage", self.discount_percentage)
        domain_to_open_optional(output, "discount_amount", self.discount_amount)
        return output


@dataclass(frozen=True)
class CustomConversionMechanism:
    """Free-text conversion terms."""

    mechanism_type: ClassVar[str] = "CUSTOM_CONVERSION"
    ledger_tags: ClassVar[dict[MechanismFamily, str]] = {
        MechanismFamily.CONVERTIBLE: "OcfConvMechCustom",
        MechanismFamily.WARRANT: "OcfWarrantMechanismCustom",
    }

    custom_conversion_description: str

    @classmethod
    def from_open(cls, data: Mapping[str, Any]) -> CustomConversionMechanism:
        return cls(
            custom_conversion_description=_mapping_require_mechanism_value(
                data, "custom_conversion_description", cls.mechanism_type
            )
        )

    @classmethod
    def from_ledger(cls, value: Mapping[str, Any]) -> CustomConversionMechanism:
        return cls(
            custom_conversion_description=_mapping_read_mechanism_value(
                value, "custom_conversion_description", cls.mechanism_type
            )
        )

    def to_ledger_value(self) -> dict[str, Any]:
        return {"custom_conversion_description": self.custom_conversion_description}

    def to_open(self) -> dict[str, Any]:
        return {"type": self.mechanism_type, "custom_conversion_description": self.custom_conversion_description}


ConversionMechanism = (
    SafeConversionMechanism
    | NoteConversionMechanism
    | PercentCapitalizationMechanism
    | FixedAmountMechanism
    | ValuationBasedMechanism
    | SharePriceBasedMechanism
    | CustomConversionMechanism
)

_MECHANISM_KINDS: Final[tuple[type, ...]] = (
    SafeConversionMechanism,
    NoteConversionMechanism,
    PercentCapitalizationMechanism,
    FixedAmountMechanism,
    ValuationBasedMechanism,
    SharePriceBasedMechanism,
    CustomConversionMechanism,
)


def _mapping_kinds_by_type(family: MechanismFamily) -> dict[str, type]:
    return {kind.mechanism_type: kind for kind in _MECHANISM_KINDS if family in kind.ledger_tags}


def _mapping_kinds_by_tag(family: MechanismFamily) -> dict[str, type]:
    return {kind.ledger_tags[family]: kind for kind in _MECHANISM_KINDS if family in kind.ledger_tags}


_MECHANISM_KINDS_BY_TYPE: Final[dict[MechanismFamily, dict[str, type]]] = {
    family: _mapping_kinds_by_type(family) for family in MechanismFamily
}
_MECHANISM_KINDS_BY_TAG: Final[dict[MechanismFamily, dict[str, type]]] = {
    family: _mapping_kinds_by_tag(family) for family in MechanismFamily
}


def _mapping_exit_multiple_from_open(value: object | None) -> tuple[str, str] | None:
    if not isinstance(value, Mapping):
        return None
    numerator = value.get("numerator")
    denominator = value.get("denominator")
    if numerator in (None, "") or denominator in (None, ""):
        return None
    return (
        domain_normalize_numeric_string(numerator, f"{_MECHANISM_PATH}.exit_multiple.numerator"),
        domain_normalize_numeric_string(denominator, f"{_MECHANISM_PATH}.exit_multiple.denominator"),
    )


def _mapping_exit_multiple_from_ledger(value: object | None) -> tuple[str, str] | None:
    if not isinstance(value, Mapping):
        return None
    return (
        domain_ledger_numeric_to_open(value.get("numerator"), f"{_MECHANISM_PATH}.exit_multiple.numerator"),
        domain_ledger_numeric_to_open(value.get("denominator"), f"{_MECHANISM_PATH}.exit_multiple.denominator"),
    )


def _mapping_ratio_dict(ratio: tuple[str, str] | None) -> dict[str, str] | None:
    if ratio is None:
        return None
    return {"numerator": ratio[0], "denominator": ratio[1]}


def mapping_parse_open_mechanism(value: object | None, family: MechanismFamily) -> ConversionMechanism:
    """Parse one open-format conversion mechanism into its typed kind.

    Args:
        value: Open-format mechanism object with a `type` discriminator.
        family: Instrument family owning the mechanism.

    Returns:
        ConversionMechanism: Typed mechanism.

    Raises:
        ConversionValidationError: Raised when the mechanism or one required field is missing.
        ConversionParseError: Raised when the mechanism type is unknown for the family.
    """

    if value is None:
        raise ConversionValidationError(
            "conversion_right.conversion_mechanism",
            "conversion_right.conversion_mechanism is required",
        )
    data = mapping_require_object(value, "conversion_right.conversion_mechanism")
    mechanism_type = data.get("type")
    kind = _MECHANISM_KINDS_BY_TYPE[family].get(mechanism_type) if isinstance(mechanism_type, str) else None
    if kind is None:
        raise ConversionParseError(
            f"Unknown {family.value} conversion mechanism at '{_MECHANISM_PATH}.type': {mechanism_type!r}",
            source=f"{_MECHANISM_PATH}.type",
            received_value=mechanism_type,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )
    return kind.from_open(data)


def mapping_parse_ledger_mechanism(value: object | None, family: MechanismFamily) -> ConversionMechanism:
    """Parse one ledger mechanism variant `{tag, value}` into its typed kind.

    Raises:
        ConversionParseError: Raised when the variant is malformed or the tag is unknown.
    """

    variant = mapping_read_record(value, "conversion_right.conversion_mechanism")
    tag = variant.get("tag")
    kind = _MECHANISM_KINDS_BY_TAG[family].get(tag) if isinstance(tag, str) else None
    if kind is None:
        raise ConversionParseError(
            f"Unknown {family.value} conversion mechanism tag at '{_MECHANISM_PATH}': {tag!r}",
            source=_MECHANISM_PATH,
            received_value=tag,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )
    return kind.from_ledger(mapping_read_record(variant.get("value"), f"{_MECHANISM_PATH}.value"))


def mapping_conversion_mechanism_to_ledger(value: object | None, family: MechanismFamily) -> dict[str, Any]:
    """Convert one open-format mechanism to its ledger variant."""

    mechanism = mapping_parse_open_mechanism(value, family)
    return {"tag": mechanism.ledger_tags[family], "value": mechanism.to_ledger_value()}


def mapping_conversion_mechanism_to_open(value: object | None, family: MechanismFamily) -> dict[str, Any]:
    """Convert one ledger mechanism variant to its open-format object."""

    return mapping_parse_ledger_mechanism(value, family).to_open()


_RIGHT_TYPES: Final[dict[MechanismFamily, str]] = {
    MechanismFamily.CONVERTIBLE: "CONVERTIBLE_CONVERSION_RIGHT",
    MechanismFamily.WARRANT: "WARRANT_CONVERSION_RIGHT",
}
_RIGHT_TAGS: Final[dict[MechanismFamily, str]] = {
    MechanismFamily.CONVERTIBLE: "OcfRightConvertible",
    MechanismFamily.WARRANT: "OcfRightWarrant",
}
_TRIGGER_PATHS: Final[dict[MechanismFamily, str]] = {
    MechanismFamily.CONVERTIBLE: "conversionTrigger",
    MechanismFamily.WARRANT: "warrantTrigger",
}


def mapping_conversion_right_to_ledger(value: object | None, family: MechanismFamily) -> dict[str, Any]:
    """Convert one open-format conversion right to its ledger shape.

    Convertible rights are emitted bare; warrant rights are wrapped in the
    `OcfRightWarrant` variant.
    """

    details = mapping_require_object(value, "conversion_right") if value is not None else {}
    converts_to_future_round = details.get("converts_to_future_round")
    right = {
        "type_": _RIGHT_TYPES[family],
        "conversion_mechanism": mapping_conversion_mechanism_to_ledger(details.get("conversion_mechanism"), family),
        "converts_to_future_round": converts_to_future_round if isinstance(converts_to_future_round, bool) else None,
        "converts_to_stock_class_id": mapping_optional_text(details, "converts_to_stock_class_id", "conversion_right"),
    }
    if family is MechanismFamily.WARRANT:
        return {"tag": _RIGHT_TAGS[family], "value": right}
    return right


def mapping_conversion_right_to_open(value: object | None, family: MechanismFamily) -> dict[str, Any]:
    """Convert one ledger conversion right, bare or variant-wrapped, to open format."""

    right = mapping_read_record(value, "conversion_right")
    if "tag" in right and "value" in right:
        if right.get("tag") != _RIGHT_TAGS[family]:
            raise ConversionParseError(
                f"Unknown conversion right tag at 'conversion_right': {right.get('tag')!r}",
                source="conversion_right",
                received_value=right.get("tag"),
                error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
            )
        right = mapping_read_record(right.get("value"), "conversion_right.value")
    output: dict[str, Any] = {
        "type": _RIGHT_TYPES[family],
        "conversion_mechanism": mapping_conversion_mechanism_to_open(right.get("conversion_mechanism"), family),
    }
    if isinstance(right.get("converts_to_future_round"), bool):
        output["converts_to_future_round"] = right["converts_to_future_round"]
    domain_to_open_optional(
        output,
        "converts_to_stock_class_id",
        mapping_read_optional_text(right, "converts_to_stock_class_id", "conversion_right"),
    )
    return output


def mapping_conversion_trigger_to_ledger(value: object, family: MechanismFamily) -> dict[str, Any]:
    """Convert one open-format conversion trigger to its ledger shape.

    Args:
        value: Open-format trigger object.
        family: Instrument family owning the trigger.

    Returns:
        dict[str, Any]: Ledger trigger with its conversion right.

    Raises:
        ConversionValidationError: Raised when `trigger_id` or the mechanism is missing.
        ConversionParseError: Raised when the trigger type or mechanism type is unknown.
    """

    trigger_path = _TRIGGER_PATHS[family]
    trigger = mapping_require_object(value, trigger_path)
    type_label = CONVERSION_TRIGGER_TYPE_TABLE.to_ledger(trigger.get("type"), f"{trigger_path}.type")
    trigger_id = trigger.get("trigger_id")
    if not isinstance(trigger_id, str) or not trigger_id.strip():
        raise ConversionValidationError(
            f"{trigger_path}.trigger_id",
            f"trigger_id is required for each {family.value} conversion trigger",
            expected_type="string",
            received_value=trigger_id,
        )
    return {
        "type_": type_label,
        "trigger_id": trigger_id,
        "nickname": mapping_optional_text(trigger, "nickname", trigger_path),
        "trigger_description": mapping_optional_text(trigger, "trigger_description", trigger_path),
        "conversion_right": mapping_conversion_right_to_ledger(trigger.get("conversion_right"), family),
        "trigger_date": domain_optional_date_to_ledger(trigger.get("trigger_date"), f"{trigger_path}.trigger_date"),
        "trigger_condition": mapping_optional_text(trigger, "trigger_condition", trigger_path),
    }


def mapping_conversion_trigger_to_open(value: object, family: MechanismFamily) -> dict[str, Any]:
    """Convert one ledger conversion trigger to its open-format object.

    Raises:
        ConversionParseError: Raised when the trigger is malformed or carries unknown labels.
    """

    trigger_path = _TRIGGER_PATHS[family]
    trigger = mapping_read_record(value, trigger_path)
    output: dict[str, Any] = {
        "type": CONVERSION_TRIGGER_TYPE_TABLE.to_open(trigger.get("type_"), f"{trigger_path}.type_"),
        "trigger_id": trigger.get("trigger_id"),
        "conversion_right": mapping_conversion_right_to_open(trigger.get("conversion_right"), family),
    }
    if not isinstance(output["trigger_id"], str) or not output["trigger_id"]:
        raise ConversionParseError(
            f"Missing or invalid field '{trigger_path}.trigger_id': {trigger.get('trigger_id')!r}",
            source=f"{trigger_path}.trigger_id",
            received_value=trigger.get("trigger_id"),
        )
    domain_to_open_optional(output, "nickname", mapping_read_optional_text(trigger, "nickname", trigger_path))
    domain_to_open_optional(
        output, "trigger_description", mapping_read_optional_text(trigger, "trigger_description", trigger_path)
    )
    domain_to_open_optional(
        output,
        "trigger_date",
        domain_optional_ledger_time_to_date(trigger.get("trigger_date"), f"{trigger_path}.trigger_date"),
    )
    domain_to_open_optional(
        output, "trigger_condition", mapping_read_optional_text(trigger, "trigger_condition", trigger_path)
    )
    return output

