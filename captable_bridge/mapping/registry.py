"""Entity registry and dispatch for both conversion directions.

The registry is built once at import time and exposed read-only. Every
`EntityType` has exactly one row; plan-security aliases resolve onto their
equity-compensation rows and two of them carry dedicated write converters.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Final

from captable_bridge.domain import (
    PLAN_SECURITY_ALIAS_TARGETS,
    ConversionErrorCode,
    ConversionParseError,
    EntityType,
    PlanSecurityAlias,
    SchemaMismatchError,
    UnknownEntityTypeError,
    domain_entity_type_pascal_name,
)

from . import adjustments, core_objects, issuances, quantity_events, simple_events, vesting
from .interfaces import LedgerConverter, OpenConverter, RegistryEntry
from .payload_fields import mapping_read_record, mapping_require_object

logger = logging.getLogger(__name__)

_REGISTRY_ROWS: Final[tuple[tuple[EntityType, str, str, LedgerConverter, OpenConverter], ...]] = (
    (
        EntityType.CONVERTIBLE_ACCEPTANCE,
        "acceptance_data",
        "TX_CONVERTIBLE_ACCEPTANCE",
        simple_events.mapping_convertible_acceptance_to_ledger,
        simple_events.mapping_convertible_acceptance_to_open,
    ),
    (
        EntityType.CONVERTIBLE_CANCELLATION,
        "cancellation_data",
        "TX_CONVERTIBLE_CANCELLATION",
        quantity_events.mapping_convertible_cancellation_to_ledger,
        quantity_events.mapping_convertible_cancellation_to_open,
    ),
    (
        EntityType.CONVERTIBLE_CONVERSION,
        "conversion_data",
        "TX_CONVERTIBLE_CONVERSION",
        simple_events.mapping_convertible_conversion_to_ledger,
        simple_events.mapping_convertible_conversion_to_open,
    ),
    (
        EntityType.CONVERTIBLE_ISSUANCE,
        "issuance_data",
        "TX_CONVERTIBLE_ISSUANCE",
        issuances.mapping_convertible_issuance_to_ledger,
        issuances.mapping_convertible_issuance_to_open,
    ),
    (
        EntityType.CONVERTIBLE_RETRACTION,
        "retraction_data",
        "TX_CONVERTIBLE_RETRACTION",
        simple_events.mapping_convertible_retraction_to_ledger,
        simple_events.mapping_convertible_retraction_to_open,
    ),
    (
        EntityType.CONVERTIBLE_TRANSFER,
        "transfer_data",
        "TX_CONVERTIBLE_TRANSFER",
        quantity_events.mapping_convertible_transfer_to_ledger,
        quantity_events.mapping_convertible_transfer_to_open,
    ),
    (
        EntityType.DOCUMENT,
        "document_data",
        "DOCUMENT",
        core_objects.mapping_document_to_ledger,
        core_objects.mapping_document_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_ACCEPTANCE,
        "acceptance_data",
        "TX_EQUITY_COMPENSATION_ACCEPTANCE",
        simple_events.mapping_equity_compensation_acceptance_to_ledger,
        simple_events.mapping_equity_compensation_acceptance_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_CANCELLATION,
        "cancellation_data",
        "TX_EQUITY_COMPENSATION_CANCELLATION",
        quantity_events.mapping_equity_compensation_cancellation_to_ledger,
        quantity_events.mapping_equity_compensation_cancellation_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_EXERCISE,
        "exercise_data",
        "TX_EQUITY_COMPENSATION_EXERCISE",
        quantity_events.mapping_equity_compensation_exercise_to_ledger,
        quantity_events.mapping_equity_compensation_exercise_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_ISSUANCE,
        "issuance_data",
        "TX_EQUITY_COMPENSATION_ISSUANCE",
        issuances.mapping_equity_compensation_issuance_to_ledger,
        issuances.mapping_equity_compensation_issuance_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_RELEASE,
        "release_data",
        "TX_EQUITY_COMPENSATION_RELEASE",
        quantity_events.mapping_equity_compensation_release_to_ledger,
        quantity_events.mapping_equity_compensation_release_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_REPRICING,
        "repricing_data",
        "TX_EQUITY_COMPENSATION_REPRICING",
        simple_events.mapping_equity_compensation_repricing_to_ledger,
        simple_events.mapping_equity_compensation_repricing_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_RETRACTION,
        "retraction_data",
        "TX_EQUITY_COMPENSATION_RETRACTION",
        simple_events.mapping_equity_compensation_retraction_to_ledger,
        simple_events.mapping_equity_compensation_retraction_to_open,
    ),
    (
        EntityType.EQUITY_COMPENSATION_TRANSFER,
        "transfer_data",
        "TX_EQUITY_COMPENSATION_TRANSFER",
        quantity_events.mapping_equity_compensation_transfer_to_ledger,
        quantity_events.mapping_equity_compensation_transfer_to_open,
    ),
    (
        EntityType.ISSUER_AUTHORIZED_SHARES_ADJUSTMENT,
        "adjustment_data",
        "TX_ISSUER_AUTHORIZED_SHARES_ADJUSTMENT",
        adjustments.mapping_issuer_authorized_shares_adjustment_to_ledger,
        adjustments.mapping_issuer_authorized_shares_adjustment_to_open,
    ),
    (
        EntityType.STAKEHOLDER,
        "stakeholder_data",
        "STAKEHOLDER",
        core_objects.mapping_stakeholder_to_ledger,
        core_objects.mapping_stakeholder_to_open,
    ),
    (
        EntityType.STAKEHOLDER_RELATIONSHIP_CHANGE_EVENT,
        "relationship_change_data",
        "CE_STAKEHOLDER_RELATIONSHIP",
        simple_events.mapping_stakeholder_relationship_change_to_ledger,
        simple_events.mapping_stakeholder_relationship_change_to_open,
    ),
    (
        EntityType.STAKEHOLDER_STATUS_CHANGE_EVENT,
        "status_change_data",
        "CE_STAKEHOLDER_STATUS",
        simple_events.mapping_stakeholder_status_change_to_ledger,
        simple_events.mapping_stakeholder_status_change_to_open,
    ),
    (
        EntityType.STOCK_ACCEPTANCE,
        "acceptance_data",
        "TX_STOCK_ACCEPTANCE",
        simple_events.mapping_stock_acceptance_to_ledger,
        simple_events.mapping_stock_acceptance_to_open,
    ),
    (
        EntityType.STOCK_CANCELLATION,
        "cancellation_data",
        "TX_STOCK_CANCELLATION",
        quantity_events.mapping_stock_cancellation_to_ledger,
        quantity_events.mapping_stock_cancellation_to_open,
    ),
    (
        EntityType.STOCK_CLASS,
        "stock_class_data",
        "STOCK_CLASS",
        core_objects.mapping_stock_class_to_ledger,
        core_objects.mapping_stock_class_to_open,
    ),
    (
        EntityType.STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT,
        "adjustment_data",
        "TX_STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT",
        adjustments.mapping_stock_class_authorized_shares_adjustment_to_ledger,
        adjustments.mapping_stock_class_authorized_shares_adjustment_to_open,
    ),
    (
        EntityType.STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT,
        "adjustment_data",
        "TX_STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT",
        adjustments.mapping_stock_class_conversion_ratio_adjustment_to_ledger,
        adjustments.mapping_stock_class_conversion_ratio_adjustment_to_open,
    ),
    (
        EntityType.STOCK_CLASS_SPLIT,
        "split_data",
        "TX_STOCK_CLASS_SPLIT",
        adjustments.mapping_stock_class_split_to_ledger,
        adjustments.mapping_stock_class_split_to_open,
    ),
    (
        EntityType.STOCK_CONSOLIDATION,
        "consolidation_data",
        "TX_STOCK_CONSOLIDATION",
        simple_events.mapping_stock_consolidation_to_ledger,
        simple_events.mapping_stock_consolidation_to_open,
    ),
    (
        EntityType.STOCK_CONVERSION,
        "conversion_data",
        "TX_STOCK_CONVERSION",
        simple_events.mapping_stock_conversion_to_ledger,
        simple_events.mapping_stock_conversion_to_open,
    ),
    (
        EntityType.STOCK_ISSUANCE,
        "issuance_data",
        "TX_STOCK_ISSUANCE",
        issuances.mapping_stock_issuance_to_ledger,
        issuances.mapping_stock_issuance_to_open,
    ),
    (
        EntityType.STOCK_LEGEND_TEMPLATE,
        "stock_legend_template_data",
        "STOCK_LEGEND_TEMPLATE",
        core_objects.mapping_stock_legend_template_to_ledger,
        core_objects.mapping_stock_legend_template_to_open,
    ),
    (
        EntityType.STOCK_PLAN,
        "stock_plan_data",
        "STOCK_PLAN",
        core_objects.mapping_stock_plan_to_ledger,
        core_objects.mapping_stock_plan_to_open,
    ),
    (
        EntityType.STOCK_PLAN_POOL_ADJUSTMENT,
        "adjustment_data",
        "TX_STOCK_PLAN_POOL_ADJUSTMENT",
        adjustments.mapping_stock_plan_pool_adjustment_to_ledger,
        adjustments.mapping_stock_plan_pool_adjustment_to_open,
    ),
    (
        EntityType.STOCK_PLAN_RETURN_TO_POOL,
        "return_data",
        "TX_STOCK_PLAN_RETURN_TO_POOL",
        simple_events.mapping_stock_plan_return_to_pool_to_ledger,
        simple_events.mapping_stock_plan_return_to_pool_to_open,
    ),
    (
        EntityType.STOCK_REISSUANCE,
        "reissuance_data",
        "TX_STOCK_REISSUANCE",
        simple_events.mapping_stock_reissuance_to_ledger,
        simple_events.mapping_stock_reissuance_to_open,
    ),
    (
        EntityType.STOCK_REPURCHASE,
        "repurchase_data",
        "TX_STOCK_REPURCHASE",
        quantity_events.mapping_stock_repurchase_to_ledger,
        quantity_events.mapping_stock_repurchase_to_open,
    ),
    (
        EntityType.STOCK_RETRACTION,
        "retraction_data",
        "TX_STOCK_RETRACTION",
        simple_events.mapping_stock_retraction_to_ledger,
        simple_events.mapping_stock_retraction_to_open,
    ),
    (
        EntityType.STOCK_TRANSFER,
        "transfer_data",
        "TX_STOCK_TRANSFER",
        quantity_events.mapping_stock_transfer_to_ledger,
        quantity_events.mapping_stock_transfer_to_open,
    ),
    (
        EntityType.VALUATION,
        "valuation_data",
        "VALUATION",
        core_objects.mapping_valuation_to_ledger,
        core_objects.mapping_valuation_to_open,
    ),
    (
        EntityType.VESTING_ACCELERATION,
        "vesting_acceleration_data",
        "TX_VESTING_ACCELERATION",
        simple_events.mapping_vesting_acceleration_to_ledger,
        simple_events.mapping_vesting_acceleration_to_open,
    ),
    (
        EntityType.VESTING_EVENT,
        "vesting_event_data",
        "TX_VESTING_EVENT",
        simple_events.mapping_vesting_event_to_ledger,
        simple_events.mapping_vesting_event_to_open,
    ),
    (
        EntityType.VESTING_START,
        "vesting_start_data",
        "TX_VESTING_START",
        simple_events.mapping_vesting_start_to_ledger,
        simple_events.mapping_vesting_start_to_open,
    ),
    (
        EntityType.VESTING_TERMS,
        "vesting_terms_data",
        "VESTING_TERMS",
        vesting.mapping_vesting_terms_to_ledger,
        vesting.mapping_vesting_terms_to_open,
    ),
    (
        EntityType.WARRANT_ACCEPTANCE,
        "acceptance_data",
        "TX_WARRANT_ACCEPTANCE",
        simple_events.mapping_warrant_acceptance_to_ledger,
        simple_events.mapping_warrant_acceptance_to_open,
    ),
    (
        EntityType.WARRANT_CANCELLATION,
        "cancellation_data",
        "TX_WARRANT_CANCELLATION",
        quantity_events.mapping_warrant_cancellation_to_ledger,
        quantity_events.mapping_warrant_cancellation_to_open,
    ),
    (
        EntityType.WARRANT_EXERCISE,
        "exercise_data",
        "TX_WARRANT_EXERCISE",
        quantity_events.mapping_warrant_exercise_to_ledger,
        quantity_events.mapping_warrant_exercise_to_open,
    ),
    (
        EntityType.WARRANT_ISSUANCE,
        "issuance_data",
        "TX_WARRANT_ISSUANCE",
        issuances.mapping_warrant_issuance_to_ledger,
        issuances.mapping_warrant_issuance_to_open,
    ),
    (
        EntityType.WARRANT_RETRACTION,
        "retraction_data",
        "TX_WARRANT_RETRACTION",
        simple_events.mapping_warrant_retraction_to_ledger,
        simple_events.mapping_warrant_retraction_to_open,
    ),
    (
        EntityType.WARRANT_TRANSFER,
        "transfer_data",
        "TX_WARRANT_TRANSFER",
        quantity_events.mapping_warrant_transfer_to_ledger,
        quantity_events.mapping_warrant_transfer_to_open,
    ),
)

PLAN_SECURITY_WRITERS: Final[Mapping[PlanSecurityAlias, LedgerConverter]] = MappingProxyType(
    {
        PlanSecurityAlias.PLAN_SECURITY_ISSUANCE: issuances.mapping_plan_security_issuance_to_ledger,
        PlanSecurityAlias.PLAN_SECURITY_EXERCISE: quantity_events.mapping_plan_security_exercise_to_ledger,
    }
)


def _mapping_build_registry() -> Mapping[EntityType, RegistryEntry]:
    entries: dict[EntityType, RegistryEntry] = {}
    for entity_type, ledger_field_name, object_type, to_ledger, to_open in _REGISTRY_ROWS:
        if entity_type in entries:
            raise RuntimeError(f"Duplicate registry row for entity type {entity_type.value}")
        pascal_name = domain_entity_type_pascal_name(entity_type)
        entries[entity_type] = RegistryEntry(
            entity_type=entity_type,
            ledger_field_name=ledger_field_name,
            object_type=object_type,
            create_label=f"OcfCreate{pascal_name}",
            edit_label=f"OcfEdit{pascal_name}",
            delete_label=f"OcfDelete{pascal_name}",
            to_ledger=to_ledger,
            to_open=to_open,
        )
    missing = [entity_type.value for entity_type in EntityType if entity_type not in entries]
    if missing:
        raise RuntimeError(f"Entity registry is missing rows for: {', '.join(missing)}")
    return MappingProxyType(entries)


ENTITY_REGISTRY: Final[Mapping[EntityType, RegistryEntry]] = _mapping_build_registry()


def _mapping_as_alias(value: object) -> PlanSecurityAlias | None:
    if isinstance(value, PlanSecurityAlias):
        return value
    if isinstance(value, str) and not isinstance(value, EntityType):
        try:
            return PlanSecurityAlias(value)
        except ValueError:
            return None
    return None


def mapping_resolve_entity_type(value: EntityType | PlanSecurityAlias | str) -> EntityType:
    """Resolve an entity type tag or plan-security alias to its registry key.

    Args:
        value: `EntityType`, tag string, or plan-security alias.

    Returns:
        EntityType: Registry key for the value.

    Raises:
        UnknownEntityTypeError: Raised when the value names no entity type or alias.
    """

    if isinstance(value, EntityType):
        return value
    alias = _mapping_as_alias(value)
    if alias is not None:
        return PLAN_SECURITY_ALIAS_TARGETS[alias]
    if isinstance(value, str):
        try:
            return EntityType(value)
        except ValueError:
            pass
    raise UnknownEntityTypeError(value)


def mapping_get_registry_entry(value: EntityType | PlanSecurityAlias | str) -> RegistryEntry:
    """Return the registry entry for an entity type tag or alias.

    Raises:
        UnknownEntityTypeError: Raised when the value names no entity type or alias.
    """

    return ENTITY_REGISTRY[mapping_resolve_entity_type(value)]


def mapping_convert_to_ledger(
    entity_type: EntityType | PlanSecurityAlias | str,
    data: Mapping[str, Any],
) -> dict[str, Any]:
    """Convert one open-format object to the ledger payload of its entity type.

    Args:
        entity_type: Entity type tag or plan-security alias.
        data: Open-format object.

    Returns:
        dict[str, Any]: Ledger payload.

    Raises:
        UnknownEntityTypeError: Raised when entity type has no registry entry.
        ConversionValidationError: Raised when data is not an object or a field is invalid.
    """

    entry = mapping_get_registry_entry(entity_type)
    alias = _mapping_as_alias(entity_type)
    converter = entry.to_ledger
    if alias is not None:
        converter = PLAN_SECURITY_WRITERS.get(alias, entry.to_ledger)
        mapping_require_object(data, alias.value)
    else:
        mapping_require_object(data, entry.entity_type.value)
    logger.debug("Converting %s to ledger payload", entry.entity_type.value)
    return converter(data)


def mapping_convert_to_open(
    entity_type: EntityType | PlanSecurityAlias | str,
    payload: Mapping[str, Any],
) -> dict[str, Any]:
    """Convert one ledger payload to the open-format object of its entity type.

    Args:
        entity_type: Entity type tag or plan-security alias.
        payload: Ledger payload.

    Returns:
        dict[str, Any]: Open-format object.

    Raises:
        UnknownEntityTypeError: Raised when entity type has no registry entry.
        ConversionParseError: Raised when payload is not an object or a value cannot be parsed.
    """

    entry = mapping_get_registry_entry(entity_type)
    mapping_read_record(payload, entry.entity_type.value)
    logger.debug("Converting %s ledger payload to open format", entry.entity_type.value)
    return entry.to_open(payload)


def mapping_extract_entity_payload(
    entity_type: EntityType | PlanSecurityAlias | str,
    create_argument: object,
) -> Mapping[str, Any]:
    """Return the entity payload nested in a contract create argument.

    Args:
        entity_type: Entity type tag or plan-security alias.
        create_argument: Contract create argument.

    Returns:
        Mapping[str, Any]: Entity payload found under the registry field name.

    Raises:
        UnknownEntityTypeError: Raised when entity type has no registry entry.
        ConversionParseError: Raised when create argument is not an object.
        SchemaMismatchError: Raised when the expected field is missing or not an object.
    """

    entry = mapping_get_registry_entry(entity_type)
    if not isinstance(create_argument, Mapping):
        raise ConversionParseError(
            f"Contract create argument for {entry.entity_type.value} is not an object",
            source="createArgument",
            received_value=create_argument,
            error_code=ConversionErrorCode.INVALID_RESPONSE.value,
        )
    field_name = entry.ledger_field_name
    if field_name not in create_argument:
        raise SchemaMismatchError(
            f"Expected field '{field_name}' not found in contract create argument for {entry.entity_type.value}",
            source=field_name,
        )
    payload = create_argument[field_name]
    if not isinstance(payload, Mapping):
        raise SchemaMismatchError(
            f"Field '{field_name}' in contract create argument for {entry.entity_type.value} is not an object",
            source=field_name,
            received_value=payload,
        )
    return payload


def mapping_extract_create_argument(events_response: object, contract_id: str) -> Mapping[str, Any]:
    """Return the create argument of a contract events response.

    Args:
        events_response: Response shaped `{created: {createdEvent: {createArgument}}}`.
        contract_id: Contract identifier used in error context.

    Returns:
        Mapping[str, Any]: Contract create argument.

    Raises:
        ConversionParseError: Raised when any level of the response is missing.
    """

    create_argument: object = None
    if isinstance(events_response, Mapping):
        created = events_response.get("created")
        if isinstance(created, Mapping):
            created_event = created.get("createdEvent")
            if isinstance(created_event, Mapping):
                create_argument = created_event.get("createArgument")
    if not isinstance(create_argument, Mapping):
        raise ConversionParseError(
            "Invalid contract events response: missing created event or create argument",
            source=f"contract {contract_id}",
            received_value=events_response,
            error_code=ConversionErrorCode.INVALID_RESPONSE.value,
        )
    return create_argument


def mapping_read_entity(
    entity_type: EntityType | PlanSecurityAlias | str,
    events_response: object,
    contract_id: str,
) -> dict[str, Any]:
    """Read one entity from a contract events response into open format.

    Raises:
        UnknownEntityTypeError: Raised when entity type has no registry entry.
        ConversionParseError: Raised when the response or payload cannot be interpreted.
        SchemaMismatchError: Raised when the create argument lacks the entity field.
    """

    create_argument = mapping_extract_create_argument(events_response, contract_id)
    payload = mapping_extract_entity_payload(entity_type, create_argument)
    return mapping_convert_to_open(entity_type, payload)
