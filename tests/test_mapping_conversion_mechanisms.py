"""Regression tests for conversion mechanisms, rights, and triggers."""

from __future__ import annotations

import pytest

from captable_bridge.domain import ConversionErrorCode, ConversionParseError, ConversionValidationError
from captable_bridge.mapping.conversion_mechanisms import (
    FixedAmountMechanism,
    MechanismFamily,
    SafeConversionMechanism,
    mapping_conversion_mechanism_to_ledger,
    mapping_conversion_mechanism_to_open,
    mapping_conversion_trigger_to_ledger,
    mapping_conversion_trigger_to_open,
    mapping_parse_open_mechanism,
)


def _build_safe_trigger() -> dict[str, object]:
    return {
        "type": "AUTOMATIC_ON_CONDITION",
        "trigger_id": "trigger-1",
        "trigger_condition": "Next equity financing",
        "conversion_right": {
            "type": "CONVERTIBLE_CONVERSION_RIGHT",
            "conversion_mechanism": {
                "type": "SAFE_CONVERSION",
                "conversion_discount": "0.2000",
                "conversion_valuation_cap": {"amount": "10000000.00", "currency": "USD"},
                "conversion_mfn": False,
                "conversion_timing": "POST_MONEY",
            },
            "converts_to_future_round": True,
        },
    }


def test_mapping_parse_open_mechanism_builds_only_the_declared_kind() -> None:
    """Parse a SAFE mechanism into its own dataclass without sibling fields.

    Returns:
        None: Assertions validate typed mechanism parsing.

    Raises:
        AssertionError: Raised when mechanism parsing picks the wrong kind.
    """

    mechanism = mapping_parse_open_mechanism(
        {"type": "SAFE_CONVERSION", "conversion_discount": "0.15"},
        MechanismFamily.CONVERTIBLE,
    )
    assert isinstance(mechanism, SafeConversionMechanism)
    assert mechanism.conversion_discount == "0.15"
    assert not hasattr(mechanism, "converts_to_quantity")


def test_mapping_conversion_mechanism_uses_family_specific_tags() -> None:
    """Emit convertible and warrant ledger tags for the shared fixed-amount kind.

    Returns:
        None: Assertions validate family-specific ledger tags.

    Raises:
        AssertionError: Raised when the family tag is wrong.
    """

    data = {"type": "FIXED_AMOUNT_CONVERSION", "converts_to_quantity": "1000.0"}
    convertible = mapping_conversion_mechanism_to_ledger(data, MechanismFamily.CONVERTIBLE)
    warrant = mapping_conversion_mechanism_to_ledger(data, MechanismFamily.WARRANT)

    assert convertible == {"tag": "OcfConvMechFixedAmount", "value": {"converts_to_quantity": "1000"}}
    assert warrant["tag"] == "OcfWarrantMechanismFixedAmount"
    assert mapping_conversion_mechanism_to_open(warrant, MechanismFamily.WARRANT) == {
        "type": "FIXED_AMOUNT_CONVERSION",
        "converts_to_quantity": "1000",
    }
    assert isinstance(
        mapping_parse_open_mechanism(data, MechanismFamily.WARRANT),
        FixedAmountMechanism,
    )


def test_mapping_conversion_mechanism_rejects_safe_for_warrants() -> None:
    """Reject SAFE mechanisms for warrants, which have no SAFE variant.

    Returns:
        None: Assertions validate family membership checks.

    Raises:
        AssertionError: Raised when a SAFE warrant mechanism is accepted.
    """

    with pytest.raises(ConversionParseError) as error:
        mapping_conversion_mechanism_to_ledger({"type": "SAFE_CONVERSION"}, MechanismFamily.WARRANT)
    assert error.value.error_code == ConversionErrorCode.UNKNOWN_ENUM_VALUE.value


def test_mapping_conversion_mechanism_requires_kind_fields() -> None:
    """Require each mechanism kind's mandatory fields on write.

    Returns:
        None: Assertions validate mandatory mechanism fields.

    Raises:
        AssertionError: Raised when a required mechanism field is missing silently.
    """

    with pytest.raises(ConversionValidationError) as error:
        mapping_conversion_mechanism_to_ledger(
            {"type": "FIXED_PERCENT_OF_CAPITALIZATION_CONVERSION"},
            MechanismFamily.CONVERTIBLE,
        )
    assert error.value.field_path == "conversion_mechanism.converts_to_percent"

    with pytest.raises(ConversionValidationError):
        mapping_conversion_mechanism_to_ledger(None, MechanismFamily.CONVERTIBLE)


def test_mapping_conversion_trigger_round_trips_safe_trigger() -> None:
    """Convert a SAFE trigger to the ledger and back without losing fields.

    Returns:
        None: Assertions validate trigger conversion in both directions.

    Raises:
        AssertionError: Raised when trigger fields are lost or altered.
    """

    ledger_trigger = mapping_conversion_trigger_to_ledger(_build_safe_trigger(), MechanismFamily.CONVERTIBLE)

    assert ledger_trigger["type_"] == "OcfTriggerTypeTypeAutomaticOnCondition"
    assert ledger_trigger["trigger_date"] is None
    right = ledger_trigger["conversion_right"]
    assert right["type_"] == "CONVERTIBLE_CONVERSION_RIGHT"
    assert right["conversion_mechanism"]["tag"] == "OcfConvMechSAFE"
    assert right["conversion_mechanism"]["value"]["conversion_discount"] == "0.2"
    assert right["conversion_mechanism"]["value"]["conversion_timing"] == "OcfConversionTimingPostMoney"

    open_trigger = mapping_conversion_trigger_to_open(ledger_trigger, MechanismFamily.CONVERTIBLE)
    assert open_trigger["trigger_id"] == "trigger-1"
    assert open_trigger["trigger_condition"] == "Next equity financing"
    assert "trigger_date" not in open_trigger
    mechanism = open_trigger["conversion_right"]["conversion_mechanism"]
    assert mechanism["conversion_valuation_cap"] == {"amount": "10000000", "currency": "USD"}
    assert mechanism["conversion_mfn"] is False
    assert open_trigger["conversion_right"]["converts_to_future_round"] is True


def test_mapping_conversion_trigger_wraps_warrant_rights() -> None:
    """Wrap warrant rights in their ledger variant and unwrap them on read.

    Returns:
        None: Assertions validate warrant right wrapping.

    Raises:
        AssertionError: Raised when the warrant right variant is missing.
    """

    trigger = {
        "type": "ELECTIVE_AT_WILL",
        "trigger_id": "wt-1",
        "conversion_right": {
            "conversion_mechanism": {"type": "CUSTOM_CONVERSION", "custom_conversion_description": "Board decides"},
        },
    }
    ledger_trigger = mapping_conversion_trigger_to_ledger(trigger, MechanismFamily.WARRANT)

    assert ledger_trigger["conversion_right"]["tag"] == "OcfRightWarrant"
    assert ledger_trigger["conversion_right"]["value"]["type_"] == "WARRANT_CONVERSION_RIGHT"
    open_trigger = mapping_conversion_trigger_to_open(ledger_trigger, MechanismFamily.WARRANT)
    assert open_trigger["conversion_right"]["conversion_mechanism"] == {
        "type": "CUSTOM_CONVERSION",
        "custom_conversion_description": "Board decides",
    }


def test_mapping_conversion_trigger_requires_trigger_id() -> None:
    """Reject triggers without a trigger_id, naming the trigger path.

    Returns:
        None: Assertions validate trigger_id requirement.

    Raises:
        AssertionError: Raised when a trigger without identifier is accepted.
    """

    trigger = _build_safe_trigger()
    del trigger["trigger_id"]

    with pytest.raises(ConversionValidationError) as error:
        mapping_conversion_trigger_to_ledger(trigger, MechanismFamily.CONVERTIBLE)
    assert error.value.field_path == "conversionTrigger.trigger_id"


def test_mapping_conversion_trigger_rejects_unknown_type() -> None:
    """Reject unknown trigger types instead of defaulting.

    Returns:
        None: Assertions validate unknown trigger rejection.

    Raises:
        AssertionError: Raised when an unknown trigger type is accepted.
    """

    trigger = _build_safe_trigger()
    trigger["type"] = "SOMETIME"

    with pytest.raises(ConversionParseError) as error:
        mapping_conversion_trigger_to_ledger(trigger, MechanismFamily.CONVERTIBLE)
    assert error.value.received_value == "SOMETIME"
