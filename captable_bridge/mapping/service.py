"""Entity conversion service facade over the registry and equivalence checker."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from captable_bridge.domain import EntityType, PlanSecurityAlias

from .equivalence import DEFAULT_DEPRECATED_FIELDS, DEFAULT_INTERNAL_FIELDS, mapping_compare
from .interfaces import EquivalenceResult
from .registry import (
    mapping_convert_to_ledger,
    mapping_convert_to_open,
    mapping_extract_entity_payload,
    mapping_get_registry_entry,
    mapping_read_entity,
)


@dataclass(frozen=True)
class ConversionServiceConfig:
    """Configuration for round-trip equivalence behavior.

    Attributes:
        extra_ignored_fields: Keys skipped by round-trip checks in addition to the internal defaults.
        deprecated_fields: Keys that may differ between source and read-back objects.
    """

    extra_ignored_fields: tuple[str, ...] = ()
    deprecated_fields: tuple[str, ...] = DEFAULT_DEPRECATED_FIELDS

    def mapping_ignored_fields(self) -> tuple[str, ...]:
        """Return every key ignored by round-trip checks.

        Returns:
            tuple[str, ...]: Internal defaults followed by configured extras.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return DEFAULT_INTERNAL_FIELDS + tuple(
            field_name for field_name in self.extra_ignored_fields if field_name not in DEFAULT_INTERNAL_FIELDS
        )

    def mapping_validate(self) -> None:
        """Validate conversion configuration values.

        Returns:
            None: This method does not return a value.

        Raises:
            ValueError: Raised when a configured field name is blank.
        """

        for field_name in self.extra_ignored_fields + self.deprecated_fields:
            if not field_name.strip():
                raise ValueError("config field names must not be blank")


class EntityConversionService:
    """Concrete conversion service for cap-table entities."""

    def __init__(self, config: ConversionServiceConfig | None = None):
        """Initialize entity conversion service.

        Args:
            config: Optional conversion configuration values.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        resolved_config = config or ConversionServiceConfig()
        resolved_config.mapping_validate()

        self._config = resolved_config

    def mapping_contract_version(self) -> str:
        """Return conversion contract version identifier.

        Returns:
            str: Conversion contract version string.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return "v1"

    def mapping_convert_to_ledger(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        data: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Convert one open-format object into its ledger payload.

        Raises:
            UnknownEntityTypeError: Raised when entity type has no registry entry.
            ConversionValidationError: Raised when a required field is missing or malformed.
        """

        return mapping_convert_to_ledger(entity_type, data)

    def mapping_convert_to_open(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Convert one ledger payload into its open-format object.

        Raises:
            UnknownEntityTypeError: Raised when entity type has no registry entry.
            ConversionParseError: Raised when a ledger value cannot be interpreted.
        """

        return mapping_convert_to_open(entity_type, payload)

    def mapping_extract_entity_payload(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        create_argument: object,
    ) -> Mapping[str, Any]:
        """Return the entity payload nested in a contract create argument.

        Raises:
            ConversionParseError: Raised when create argument is not an object.
            SchemaMismatchError: Raised when the expected field is missing.
        """

        return mapping_extract_entity_payload(entity_type, create_argument)

    def mapping_read_entity(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        events_response: Mapping[str, Any],
        contract_id: str,
    ) -> dict[str, Any]:
        """Read one entity from a ledger contract events response.

        Raises:
            ConversionParseError: Raised when the response or payload cannot be interpreted.
            SchemaMismatchError: Raised when the create argument lacks the entity field.
        """

        return mapping_read_entity(entity_type, events_response, contract_id)

    def mapping_check_round_trip(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        data: Mapping[str, Any],
    ) -> EquivalenceResult:
        """Write one open-format object, read it back, and compare both sides.

        The ledger payload is additionally passed through the create-argument
        extraction so the registry field name is exercised as well.

        Args:
            entity_type: Entity type tag or plan-security alias.
            data: Open-format object.

        Returns:
            EquivalenceResult: Comparison of source and read-back objects.

        Raises:
            UnknownEntityTypeError: Raised when entity type has no registry entry.
            ConversionValidationError: Raised when data cannot be written.
            ConversionParseError: Raised when the written payload cannot be read back.
        """

        entry = mapping_get_registry_entry(entity_type)
        payload = mapping_convert_to_ledger(entity_type, data)
        create_argument = {entry.ledger_field_name: payload}
        read_back = mapping_convert_to_open(entity_type, mapping_extract_entity_payload(entity_type, create_argument))
        return mapping_compare(
            data,
            read_back,
            ignored_fields=self._config.mapping_ignored_fields(),
            deprecated_fields=self._config.deprecated_fields,
        )
