"""Bidirectional enumeration tables between open-format codes and ledger labels.

Every table is total in both directions over its declared members. A value
outside the table is a parse failure naming the field and the raw value; no
table substitutes a default for an unknown member.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from captable_bridge.domain import ConversionErrorCode, ConversionParseError


class VariantTable:
    """Immutable two-way mapping between open-format codes and ledger labels.

    Attributes:
        name: Human-readable table name used in error messages.
    """

    def __init__(self, name: str, open_to_ledger: Mapping[str, str]):
        """Build one table and its inverse.

        Args:
            name: Human-readable table name.
            open_to_ledger: Open-format code to ledger label pairs.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when two codes share one ledger label.
        """

        ledger_to_open = {label: code for code, label in open_to_ledger.items()}
        if len(ledger_to_open) != len(open_to_ledger):
            raise ValueError(f"variant table '{name}' maps two codes onto one ledger label")
        self.name = name
        self._open_to_ledger = MappingProxyType(dict(open_to_ledger))
        self._ledger_to_open = MappingProxyType(ledger_to_open)

    def open_codes(self) -> tuple[str, ...]:
        """Return the declared open-format codes in declaration order."""

        return tuple(self._open_to_ledger)

    def ledger_labels(self) -> tuple[str, ...]:
        """Return the declared ledger labels in declaration order."""

        return tuple(self._open_to_ledger.values())

    def to_ledger(self, value: object, field_path: str) -> str:
        """Map one open-format code to its ledger label.

        Args:
            value: Open-format code.
            field_path: Dotted field path reported on failure.

        Returns:
            str: Ledger label.

        Raises:
            ConversionParseError: Raised when the code is not a table member.
        """

        if isinstance(value, str) and value in self._open_to_ledger:
            return self._open_to_ledger[value]
        raise ConversionParseError(
            f"Unknown {self.name} value at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )

    def to_open(self, value: object, field_path: str) -> str:
        """Map one ledger label to its open-format code.

        Raises:
            ConversionParseError: Raised when the label is not a table member.
        """

        if isinstance(value, str) and value in self._ledger_to_open:
            return self._ledger_to_open[value]
        raise ConversionParseError(
            f"Unknown {self.name} label at '{field_path}': {value!r}",
            source=field_path,
            received_value=value,
            error_code=ConversionErrorCode.UNKNOWN_ENUM_VALUE.value,
        )

    def optional_to_ledger(self, value: object | None, field_path: str) -> str | None:
        """Map one optional code; None and empty string map to None."""

        if value is None or value == "":
            return None
        return self.to_ledger(value, field_path)

    def optional_to_open(self, value: object | None, field_path: str) -> str | None:
        """Map one optional label; None maps to None."""

        if value is None:
            return None
        return self.to_open(value, field_path)


def _mapping_pascal_words(code: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in code.split("_"))


def _mapping_prefixed_table(name: str, prefix: str, codes: tuple[str, ...]) -> VariantTable:
    return VariantTable(name, {code: f"{prefix}{_mapping_pascal_words(code)}" for code in codes})


_MAPPING_TRIGGER_CODES: Final[tuple[str, ...]] = (
    "AUTOMATIC_ON_CONDITION",
    "AUTOMATIC_ON_DATE",
    "ELECTIVE_AT_WILL",
    "ELECTIVE_ON_CONDITION",
    "ELECTIVE_IN_RANGE",
    "UNSPECIFIED",
)

VALUATION_TYPE_TABLE: Final = VariantTable("valuation type", {"409A": "OcfValuationType409A"})

CONVERTIBLE_TYPE_TABLE: Final = VariantTable(
    "convertible type",
    {
        "NOTE": "OcfConvertibleNote",
        "SAFE": "OcfConvertibleSafe",
        "SECURITY": "OcfConvertibleSecurity",
    },
)

CONVERSION_TRIGGER_TYPE_TABLE: Final = _mapping_prefixed_table(
    "conversion trigger type", "OcfTriggerTypeType", _MAPPING_TRIGGER_CODES
)

STOCK_CLASS_TRIGGER_TYPE_TABLE: Final = _mapping_prefixed_table(
    "stock class conversion trigger", "OcfTriggerType", _MAPPING_TRIGGER_CODES
)

STOCK_CLASS_CONVERSION_MECHANISM_TABLE: Final = VariantTable(
    "stock class conversion mechanism",
    {
        "RATIO_CONVERSION": "OcfConversionMechanismRatioConversion",
        "PERCENT_CONVERSION": "OcfConversionMechanismPercentCapitalizationConversion",
        "FIXED_AMOUNT_CONVERSION": "OcfConversionMechanismFixedAmountConversion",
    },
)

ROUNDING_TYPE_TABLE: Final = _mapping_prefixed_table("rounding type", "OcfRounding", ("CEILING", "FLOOR", "NORMAL"))

CONVERSION_TIMING_TABLE: Final = VariantTable(
    "conversion timing",
    {
        "PRE_MONEY": "OcfConversionTimingPreMoney",
        "POST_MONEY": "OcfConversionTimingPostMoney",
    },
)

DAY_COUNT_TABLE: Final = VariantTable(
    "day count convention",
    {
        "ACTUAL_365": "OcfDayCountActual365",
        "30_360": "OcfDayCount30_360",
    },
)

INTEREST_PAYOUT_TABLE: Final = _mapping_prefixed_table("interest payout", "OcfInterestPayout", ("DEFERRED", "CASH"))

ACCRUAL_PERIOD_TABLE: Final = _mapping_prefixed_table(
    "interest accrual period", "OcfAccrual", ("DAILY", "MONTHLY", "QUARTERLY", "SEMI_ANNUAL", "ANNUAL")
)

COMPOUNDING_TABLE: Final = VariantTable(
    "compounding type",
    {
        "SIMPLE": "OcfSimple",
        "COMPOUNDING": "OcfCompounding",
    },
)

QUANTITY_SOURCE_TABLE: Final = _mapping_prefixed_table(
    "quantity source",
    "OcfQuantity",
    (
        "HUMAN_ESTIMATED",
        "MACHINE_ESTIMATED",
        "UNSPECIFIED",
        "INSTRUMENT_FIXED",
        "INSTRUMENT_MAX",
        "INSTRUMENT_MIN",
    ),
)

COMPENSATION_TYPE_TABLE: Final = VariantTable(
    "compensation type",
    {
        "OPTION_NSO": "OcfCompensationTypeOptionNSO",
        "OPTION_ISO": "OcfCompensationTypeOptionISO",
        "OPTION": "OcfCompensationTypeOption",
        "RSU": "OcfCompensationTypeRSU",
        "CSAR": "OcfCompensationTypeCSAR",
        "SSAR": "OcfCompensationTypeSSAR",
    },
)

TERMINATION_REASON_TABLE: Final = _mapping_prefixed_table(
    "termination window reason",
    "OcfTerm",
    (
        "VOLUNTARY_OTHER",
        "VOLUNTARY_GOOD_CAUSE",
        "VOLUNTARY_RETIREMENT",
        "INVOLUNTARY_OTHER",
        "INVOLUNTARY_DEATH",
        "INVOLUNTARY_DISABILITY",
        "INVOLUNTARY_WITH_CAUSE",
    ),
)

PERIOD_TYPE_TABLE: Final = _mapping_prefixed_table("period type", "OcfPeriod", ("DAYS", "MONTHS"))

STOCK_ISSUANCE_TYPE_TABLE: Final = VariantTable(
    "stock issuance type",
    {
        "RSA": "OcfStockIssuanceRSA",
        "FOUNDERS_STOCK": "OcfStockIssuanceFounders",
    },
)

STOCK_CLASS_TYPE_TABLE: Final = _mapping_prefixed_table("stock class type", "OcfStockClassType", ("COMMON", "PREFERRED"))

AUTHORIZED_SHARES_TABLE: Final = _mapping_prefixed_table(
    "authorized shares", "OcfAuthorizedShares", ("UNLIMITED", "NOT_APPLICABLE")
)

PLAN_CANCELLATION_BEHAVIOR_TABLE: Final = _mapping_prefixed_table(
    "stock plan cancellation behavior",
    "OcfPlanCancel",
    ("RETIRE", "RETURN_TO_POOL", "HOLD_AS_CAPITAL_STOCK", "DEFINED_PER_PLAN_SECURITY"),
)

STAKEHOLDER_TYPE_TABLE: Final = _mapping_prefixed_table(
    "stakeholder type", "OcfStakeholderType", ("INDIVIDUAL", "INSTITUTION")
)

STAKEHOLDER_STATUS_TABLE: Final = _mapping_prefixed_table(
    "stakeholder status",
    "OcfStakeholderStatus",
    (
        "ACTIVE",
        "LEAVE_OF_ABSENCE",
        "TERMINATION_VOLUNTARY_OTHER",
        "TERMINATION_VOLUNTARY_GOOD_CAUSE",
        "TERMINATION_VOLUNTARY_RETIREMENT",
        "TERMINATION_INVOLUNTARY_OTHER",
        "TERMINATION_INVOLUNTARY_DEATH",
        "TERMINATION_INVOLUNTARY_DISABILITY",
        "TERMINATION_INVOLUNTARY_WITH_CAUSE",
    ),
)

STAKEHOLDER_RELATIONSHIP_TABLE: Final = _mapping_prefixed_table(
    "stakeholder relationship",
    "OcfRel",
    ("EMPLOYEE", "ADVISOR", "INVESTOR", "FOUNDER", "BOARD_MEMBER", "OFFICER", "OTHER"),
)

ADDRESS_TYPE_TABLE: Final = _mapping_prefixed_table("address type", "OcfAddressType", ("LEGAL", "CONTACT", "OTHER"))

EMAIL_TYPE_TABLE: Final = _mapping_prefixed_table("email type", "OcfEmailType", ("PERSONAL", "BUSINESS", "OTHER"))

PHONE_TYPE_TABLE: Final = _mapping_prefixed_table("phone type", "OcfPhone", ("HOME", "MOBILE", "BUSINESS", "OTHER"))

VESTING_ALLOCATION_TABLE: Final = VariantTable(
    "vesting allocation type",
    {
        "CUMULATIVE_ROUNDING": "OcfAllocationCumulativeRounding",
        "CUMULATIVE_ROUND_DOWN": "OcfAllocationCumulativeRoundDown",
        "FRONT_LOADED": "OcfAllocationFrontLoaded",
        "BACK_LOADED": "OcfAllocationBackLoaded",
        "FRONT_LOADED_SINGLE_TRANCHE": "OcfAllocationFrontLoadedToSingleTranche",
        "BACK_LOADED_SINGLE_TRANCHE": "OcfAllocationBackLoadedToSingleTranche",
        "FRACTIONAL": "OcfAllocationFractional",
    },
)


def _mapping_vesting_day_codes() -> dict[str, str]:
    day_codes = {f"{day:02d}": f"OcfVestingDay{day:02d}" for day in range(1, 29)}
    for day in (29, 30, 31):
        day_codes[f"{day}_OR_LAST_DAY_OF_MONTH"] = f"OcfVestingDay{day}OrLast"
    day_codes["VESTING_START_DAY_OR_LAST_DAY_OF_MONTH"] = "OcfVestingStartDayOrLast"
    return day_codes


VESTING_DAY_OF_MONTH_TABLE: Final = VariantTable("vesting day of month", _mapping_vesting_day_codes())

OCF_OBJECT_TYPES: Final[tuple[str, ...]] = (
    "ISSUER",
    "STAKEHOLDER",
    "STOCK_CLASS",
    "STOCK_LEGEND_TEMPLATE",
    "STOCK_PLAN",
    "VALUATION",
    "VESTING_TERMS",
    "FINANCING",
    "DOCUMENT",
    "CE_STAKEHOLDER_RELATIONSHIP",
    "CE_STAKEHOLDER_STATUS",
    "TX_CONVERTIBLE_ACCEPTANCE",
    "TX_CONVERTIBLE_CANCELLATION",
    "TX_CONVERTIBLE_CONVERSION",
    "TX_CONVERTIBLE_ISSUANCE",
    "TX_CONVERTIBLE_RETRACTION",
    "TX_CONVERTIBLE_TRANSFER",
    "TX_EQUITY_COMPENSATION_ACCEPTANCE",
    "TX_EQUITY_COMPENSATION_CANCELLATION",
    "TX_EQUITY_COMPENSATION_EXERCISE",
    "TX_EQUITY_COMPENSATION_ISSUANCE",
    "TX_EQUITY_COMPENSATION_RELEASE",
    "TX_EQUITY_COMPENSATION_REPRICING",
    "TX_EQUITY_COMPENSATION_RETRACTION",
    "TX_EQUITY_COMPENSATION_TRANSFER",
    "TX_ISSUER_AUTHORIZED_SHARES_ADJUSTMENT",
    "TX_PLAN_SECURITY_ACCEPTANCE",
    "TX_PLAN_SECURITY_CANCELLATION",
    "TX_PLAN_SECURITY_EXERCISE",
    "TX_PLAN_SECURITY_ISSUANCE",
    "TX_PLAN_SECURITY_RELEASE",
    "TX_PLAN_SECURITY_RETRACTION",
    "TX_PLAN_SECURITY_TRANSFER",
    "TX_STOCK_ACCEPTANCE",
    "TX_STOCK_CANCELLATION",
    "TX_STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT",
    "TX_STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT",
    "TX_STOCK_CLASS_SPLIT",
    "TX_STOCK_CONSOLIDATION",
    "TX_STOCK_CONVERSION",
    "TX_STOCK_ISSUANCE",
    "TX_STOCK_PLAN_POOL_ADJUSTMENT",
    "TX_STOCK_PLAN_RETURN_TO_POOL",
    "TX_STOCK_REISSUANCE",
    "TX_STOCK_REPURCHASE",
    "TX_STOCK_RETRACTION",
    "TX_STOCK_TRANSFER",
    "TX_VESTING_ACCELERATION",
    "TX_VESTING_EVENT",
    "TX_VESTING_START",
    "TX_WARRANT_ACCEPTANCE",
    "TX_WARRANT_CANCELLATION",
    "TX_WARRANT_EXERCISE",
    "TX_WARRANT_ISSUANCE",
    "TX_WARRANT_RETRACTION",
    "TX_WARRANT_TRANSFER",
)

OBJECT_REFERENCE_TYPE_TABLE: Final = _mapping_prefixed_table("object reference type", "OcfObj", OCF_OBJECT_TYPES)
