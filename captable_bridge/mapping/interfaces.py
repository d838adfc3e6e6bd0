"""Typed interfaces for entity conversion between open format and ledger payloads."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from captable_bridge.domain import EntityType, PlanSecurityAlias

LedgerConverter = Callable[[Mapping[str, Any]], dict[str, Any]]
OpenConverter = Callable[[Mapping[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class RegistryEntry:
    """Conversion contract for one entity type.

    Attributes:
        entity_type: Entity type tag.
        ledger_field_name: Create-argument field holding the entity payload.
        object_type: Open-format object type emitted on the read path.
        create_label: Ledger choice label creating the entity.
        edit_label: Ledger choice label editing the entity.
        delete_label: Ledger choice label deleting the entity.
        to_ledger: Write-path converter.
        to_open: Read-path converter.
    """

    entity_type: EntityType
    ledger_field_name: str
    object_type: str
    create_label: str
    edit_label: str
    delete_label: str
    to_ledger: LedgerConverter
    to_open: OpenConverter


@dataclass(frozen=True)
class EquivalenceResult:
    """Outcome of comparing two open-format objects.

    Attributes:
        equal: Whether the objects are semantically equivalent.
        differences: Dotted paths with a short description of each mismatch.
    """

    equal: bool
    differences: tuple[str, ...] = ()


class ConversionPort(Protocol):
    """Port definition for converting cap-table entities in both directions."""

    def mapping_contract_version(self) -> str:
        """Return conversion contract version identifier.

        Returns:
            str: Conversion contract version identifier.

        Raises:
            RuntimeError: Raised when version metadata cannot be resolved.
        """

    def mapping_convert_to_ledger(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        data: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Convert one open-format object into its ledger payload.

        Args:
            entity_type: Entity type tag or plan-security alias.
            data: Open-format object.

        Returns:
            dict[str, Any]: Ledger payload.

        Raises:
            UnknownEntityTypeError: Raised when entity type has no registry entry.
            ConversionValidationError: Raised when a required field is missing or malformed.
        """

    def mapping_convert_to_open(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Convert one ledger payload into its open-format object.

        Args:
            entity_type: Entity type tag or plan-security alias.
            payload: Ledger payload.

        Returns:
            dict[str, Any]: Open-format object.

        Raises:
            UnknownEntityTypeError: Raised when entity type has no registry entry.
            ConversionParseError: Raised when a ledger value cannot be interpreted.
        """

    def mapping_read_entity(
        self,
        entity_type: EntityType | PlanSecurityAlias | str,
        events_response: Mapping[str, Any],
        contract_id: str,
    ) -> dict[str, Any]:
        """Read one entity from a ledger contract events response.

        Args:
            entity_type: Entity type tag or plan-security alias.
            events_response: Ledger events-by-contract-id response.
            contract_id: Contract identifier used in error context.

        Returns:
            dict[str, Any]: Open-format object.

        Raises:
            ConversionParseError: Raised when the response or payload cannot be interpreted.
            SchemaMismatchError: Raised when the create argument lacks the entity field.
        """
