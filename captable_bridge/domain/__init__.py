"""Domain contracts shared across conversion layer boundaries."""

from .entity_types import (
	PLAN_SECURITY_ALIAS_TARGETS,
	PLAN_SECURITY_OBJECT_TYPE_ALIASES,
	EntityType,
	PlanSecurityAlias,
	domain_entity_type_pascal_name,
	domain_normalize_object_type,
)
from .error_codes import (
	ConversionErrorCode,
	conversion_error_default_message,
)
from .errors import (
	ConversionError,
	ConversionParseError,
	ConversionValidationError,
	SchemaMismatchError,
	UnknownEntityTypeError,
)
from .normalizers import (
	domain_clean_comments,
	domain_comments_to_ledger,
	domain_date_to_ledger_time,
	domain_ensure_list,
	domain_ledger_monetary_to_open,
	domain_ledger_numeric_to_open,
	domain_ledger_time_to_date,
	domain_monetary_to_ledger,
	domain_normalize_numeric_string,
	domain_optional_date_to_ledger,
	domain_optional_ledger_monetary_to_open,
	domain_optional_ledger_time_to_date,
	domain_optional_monetary_to_ledger,
	domain_optional_numeric_to_ledger,
	domain_to_ledger_optional,
	domain_to_open_optional,
)

__all__ = [
	"EntityType",
	"PlanSecurityAlias",
	"PLAN_SECURITY_ALIAS_TARGETS",
	"PLAN_SECURITY_OBJECT_TYPE_ALIASES",
	"domain_entity_type_pascal_name",
	"domain_normalize_object_type",
	"ConversionErrorCode",
	"conversion_error_default_message",
	"ConversionError",
	"ConversionValidationError",
	"ConversionParseError",
	"SchemaMismatchError",
	"UnknownEntityTypeError",
	"domain_normalize_numeric_string",
	"domain_optional_numeric_to_ledger",
	"domain_ledger_numeric_to_open",
	"domain_date_to_ledger_time",
	"domain_ledger_time_to_date",
	"domain_optional_date_to_ledger",
	"domain_optional_ledger_time_to_date",
	"domain_monetary_to_ledger",
	"domain_optional_monetary_to_ledger",
	"domain_ledger_monetary_to_open",
	"domain_optional_ledger_monetary_to_open",
	"domain_to_ledger_optional",
	"domain_to_open_optional",
	"domain_clean_comments",
	"domain_comments_to_ledger",
	"domain_ensure_list",
]
