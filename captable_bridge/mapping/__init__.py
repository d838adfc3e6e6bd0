"""Mapping layer package for open-format and ledger payload conversion."""

from .equivalence import (
	DEFAULT_DEPRECATED_FIELDS,
	DEFAULT_INTERNAL_FIELDS,
	mapping_compare,
	mapping_equivalent,
	mapping_is_absent_like,
	mapping_strip_internal_fields,
)
from .interfaces import ConversionPort, EquivalenceResult, RegistryEntry
from .registry import (
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
from .service import ConversionServiceConfig, EntityConversionService

__all__ = [
	"ConversionPort",
	"RegistryEntry",
	"EquivalenceResult",
	"ENTITY_REGISTRY",
	"PLAN_SECURITY_WRITERS",
	"mapping_resolve_entity_type",
	"mapping_get_registry_entry",
	"mapping_convert_to_ledger",
	"mapping_convert_to_open",
	"mapping_extract_entity_payload",
	"mapping_extract_create_argument",
	"mapping_read_entity",
	"DEFAULT_INTERNAL_FIELDS",
	"DEFAULT_DEPRECATED_FIELDS",
	"mapping_compare",
	"mapping_equivalent",
	"mapping_is_absent_like",
	"mapping_strip_internal_fields",
	"ConversionServiceConfig",
	"EntityConversionService",
]
