"""Regression tests for the entity registry and dispatch functions."""

from __future__ import annotations

import pytest

from captable_bridge.domain import (
    ConversionErrorCode,
    ConversionParseError,
    ConversionValidationError,
    EntityType,
    PlanSecurityAlias,
    SchemaMismatchError,
    UnknownEntityTypeError,
)
from captable_bridge.mapping import (
    ENTITY_REGISTRY,
    PLAN_SECURITY_WRITERS,
    mapping_convert_to_ledger,
    mapping_convert_to_open,
    mapping_extract_create_argument,
    mapping_extract_entity_payload,
    mapping_get_registry_entry,
    mapping_read_entity,
    mapping_resolve_entity_type,
)

_VALUATION = {
    "id": "val-1",
    "stock_class_id": "sc-1",
    "price_per_share": {"amount": "1.50", "currency": "USD"},
    "effective_date": "2024-01-15",
    "valuation_type": "409A",
}


def _build_events_response(create_argument: object) -> dict[str, object]:
    return {"created": {"createdEvent": {"createArgument": create_argument}}}


def test_mapping_registry_covers_every_entity_type_once() -> None:
    """Keep exactly one registry entry per entity type with derived labels.

    Returns:
        None: Assertions validate registry completeness.

    Raises:
        AssertionError: Raised when a type is missing or labels are malformed.
    """

    assert len(ENTITY_REGISTRY) == len(EntityType) == 47
    for entity_type, entry in ENTITY_REGISTRY.items():
        assert entry.entity_type is entity_type
        suffix = entity_type.value[:1].upper() + entity_type.value[1:]
        assert entry.create_label == f"OcfCreate{suffix}"
        assert entry.edit_label == f"OcfEdit{suffix}"
        assert entry.delete_label == f"OcfDelete{suffix}"
        assert entry.ledger_field_name.endswith("_data")


def test_mapping_registry_is_read_only() -> None:
    """Refuse mutation of the published registry.

    Returns:
        None: Assertions validate registry immutability.

    Raises:
        AssertionError: Raised when the registry can be mutated.
    """

    with pytest.raises(TypeError):
        ENTITY_REGISTRY[EntityType.VALUATION] = ENTITY_REGISTRY[EntityType.STOCK_CLASS]  # type: ignore[index]


def test_mapping_registry_entry_for_valuation() -> None:
    """Return the valuation entry with its field name and object type.

    Returns:
        None: Assertions validate entry lookup.

    Raises:
        AssertionError: Raised when entry attributes are wrong.
    """

    entry = mapping_get_registry_entry("valuation")

    assert entry.ledger_field_name == "valuation_data"
    assert entry.object_type == "VALUATION"
    assert entry.create_label == "OcfCreateValuation"


def test_mapping_resolve_entity_type_follows_plan_security_aliases() -> None:
    """Resolve plan-security aliases onto equity compensation entity types.

    Returns:
        None: Assertions validate alias resolution.

    Raises:
        AssertionError: Raised when aliases resolve incorrectly.
    """

    assert mapping_resolve_entity_type("planSecurityIssuance") is EntityType.EQUITY_COMPENSATION_ISSUANCE
    assert mapping_resolve_entity_type(PlanSecurityAlias.PLAN_SECURITY_TRANSFER) is (
        EntityType.EQUITY_COMPENSATION_TRANSFER
    )
    assert mapping_resolve_entity_type(EntityType.STOCK_CLASS) is EntityType.STOCK_CLASS
    assert set(PLAN_SECURITY_WRITERS) == {
        PlanSecurityAlias.PLAN_SECURITY_ISSUANCE,
        PlanSecurityAlias.PLAN_SECURITY_EXERCISE,
    }


@pytest.mark.parametrize("entity_type", ["stockOption", "", "Valuation", 42])
def test_mapping_convert_to_open_rejects_unknown_entity_type(entity_type: object) -> None:
    """Fail with an unknown-entity-type error naming the rejected value.

    Args:
        entity_type: Value that names no registered entity type.

    Returns:
        None: Assertions validate unknown type rejection.

    Raises:
        AssertionError: Raised when unknown types are dispatched.
    """

    with pytest.raises(UnknownEntityTypeError) as error:
        mapping_convert_to_open(entity_type, {})  # type: ignore[arg-type]
    assert error.value.entity_type == entity_type
    assert str(entity_type) in str(error.value)
    assert error.value.error_code == ConversionErrorCode.UNKNOWN_ENTITY_TYPE.value


def test_mapping_convert_to_ledger_and_back_through_dispatch() -> None:
    """Dispatch a valuation through both registry directions.

    Returns:
        None: Assertions validate dispatch conversions.

    Raises:
        AssertionError: Raised when dispatch output differs from direct conversion.
    """

    payload = mapping_convert_to_ledger(EntityType.VALUATION, _VALUATION)
    result = mapping_convert_to_open("valuation", payload)

    assert payload["effective_date"] == "2024-01-15T00:00:00.000Z"
    assert result["price_per_share"]["amount"] == "1.5"


def test_mapping_convert_to_ledger_uses_plan_security_writer() -> None:
    """Route plan-security issuance writes through the dedicated converter.

    Returns:
        None: Assertions validate alias-specific writers.

    Raises:
        AssertionError: Raised when the equity compensation writer is used instead.
    """

    payload = mapping_convert_to_ledger(
        "planSecurityIssuance",
        {
            "id": "ps-tx",
            "date": "2024-02-01",
            "security_id": "ps-1",
            "custom_id": "PS-001",
            "stakeholder_id": "sh-1",
            "plan_security_type": "OPTION",
            "quantity": "100",
        },
    )

    assert payload["compensation_type"] == "OcfCompensationTypeOption"
    assert mapping_convert_to_open("planSecurityIssuance", payload)["object_type"] == (
        "TX_EQUITY_COMPENSATION_ISSUANCE"
    )


def test_mapping_convert_rejects_non_object_input() -> None:
    """Reject non-object input in both directions with direction-specific errors.

    Returns:
        None: Assertions validate input shape guards.

    Raises:
        AssertionError: Raised when non-object input is accepted.
    """

    with pytest.raises(ConversionValidationError) as write_error:
        mapping_convert_to_ledger("valuation", ["not", "an", "object"])  # type: ignore[arg-type]
    assert write_error.value.field_path == "valuation"

    with pytest.raises(ConversionParseError):
        mapping_convert_to_open("valuation", "payload")  # type: ignore[arg-type]


def test_mapping_extract_entity_payload_errors() -> None:
    """Report missing or malformed entity fields as schema mismatches.

    Returns:
        None: Assertions validate payload extraction errors.

    Raises:
        AssertionError: Raised when malformed create arguments are accepted.
    """

    with pytest.raises(SchemaMismatchError) as missing_error:
        mapping_extract_entity_payload("valuation", {"context": {}})
    assert "Expected field 'valuation_data' not found" in str(missing_error.value)
    assert missing_error.value.error_code == ConversionErrorCode.SCHEMA_MISMATCH.value

    with pytest.raises(SchemaMismatchError):
        mapping_extract_entity_payload("valuation", {"valuation_data": "oops"})

    with pytest.raises(ConversionParseError) as shape_error:
        mapping_extract_entity_payload("valuation", None)
    assert shape_error.value.error_code == ConversionErrorCode.INVALID_RESPONSE.value


def test_mapping_extract_create_argument_requires_created_event() -> None:
    """Reject events responses without a created event, naming the contract.

    Returns:
        None: Assertions validate events response parsing.

    Raises:
        AssertionError: Raised when incomplete responses are accepted.
    """

    with pytest.raises(ConversionParseError) as error:
        mapping_extract_create_argument({"created": {}}, "00abc")
    assert error.value.source == "contract 00abc"
    assert "missing created event or create argument" in str(error.value)

    assert mapping_extract_create_argument(_build_events_response({"x": 1}), "00abc") == {"x": 1}


def test_mapping_read_entity_reads_from_events_response() -> None:
    """Read one entity from an events response into the open format.

    Returns:
        None: Assertions validate the full read path.

    Raises:
        AssertionError: Raised when the read path returns the wrong entity.
    """

    payload = mapping_convert_to_ledger("valuation", _VALUATION)
    response = _build_events_response({"context": {"issuer": "issuer-1"}, "valuation_data": payload})

    result = mapping_read_entity("valuation", response, "00abc")

    assert result["object_type"] == "VALUATION"
    assert result["effective_date"] == "2024-01-15"
