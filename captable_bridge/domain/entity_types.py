"""Closed enumeration of convertible cap-table entity types."""

from __future__ import annotations

from enum import Enum
from typing import Final


class EntityType(str, Enum):
    """Entity type tags accepted by the conversion dispatcher."""

    CONVERTIBLE_ACCEPTANCE = "convertibleAcceptance"
    CONVERTIBLE_CANCELLATION = "convertibleCancellation"
    CONVERTIBLE_CONVERSION = "convertibleConversion"
    CONVERTIBLE_ISSUANCE = "convertibleIssuance"
    CONVERTIBLE_RETRACTION = "convertibleRetraction"
    CONVERTIBLE_TRANSFER = "convertibleTransfer"
    DOCUMENT = "document"
    EQUITY_COMPENSATION_ACCEPTANCE = "equityCompensationAcceptance"
    EQUITY_COMPENSATION_CANCELLATION = "equityCompensationCancellation"
    EQUITY_COMPENSATION_EXERCISE = "equityCompensationExercise"
    EQUITY_COMPENSATION_ISSUANCE = "equityCompensationIssuance"
    EQUITY_COMPENSATION_RELEASE = "equityCompensationRelease"
    EQUITY_COMPENSATION_REPRICING = "equityCompensationRepricing"
    EQUITY_COMPENSATION_RETRACTION = "equityCompensationRetraction"
    EQUITY_COMPENSATION_TRANSFER = "equityCompensationTransfer"
    ISSUER_AUTHORIZED_SHARES_ADJUSTMENT = "issuerAuthorizedSharesAdjustment"
    STAKEHOLDER = "stakeholder"
    STAKEHOLDER_RELATIONSHIP_CHANGE_EVENT = "stakeholderRelationshipChangeEvent"
    STAKEHOLDER_STATUS_CHANGE_EVENT = "stakeholderStatusChangeEvent"
    STOCK_ACCEPTANCE = "stockAcceptance"
    STOCK_CANCELLATION = "stockCancellation"
    STOCK_CLASS = "stockClass"
    STOCK_CLASS_AUTHORIZED_SHARES_ADJUSTMENT = "stockClassAuthorizedSharesAdjustment"
    STOCK_CLASS_CONVERSION_RATIO_ADJUSTMENT = "stockClassConversionRatioAdjustment"
    STOCK_CLASS_SPLIT = "stockClassSplit"
    STOCK_CONSOLIDATION = "stockConsolidation"
    STOCK_CONVERSION = "stockConversion"
    STOCK_ISSUANCE = "stockIssuance"
    STOCK_LEGEND_TEMPLATE = "stockLegendTemplate"
    STOCK_PLAN = "stockPlan"
    STOCK_PLAN_POOL_ADJUSTMENT = "stockPlanPoolAdjustment"
    STOCK_PLAN_RETURN_TO_POOL = "stockPlanReturnToPool"
    STOCK_REISSUANCE = "stockReissuance"
    STOCK_REPURCHASE = "stockRepurchase"
    STOCK_RETRACTION = "stockRetraction"
    STOCK_TRANSFER = "stockTransfer"
    VALUATION = "valuation"
    VESTING_ACCELERATION = "vestingAcceleration"
    VESTING_EVENT = "vestingEvent"
    VESTING_START = "vestingStart"
    VESTING_TERMS = "vestingTerms"
    WARRANT_ACCEPTANCE = "warrantAcceptance"
    WARRANT_CANCELLATION = "warrantCancellation"
    WARRANT_EXERCISE = "warrantExercise"
    WARRANT_ISSUANCE = "warrantIssuance"
    WARRANT_RETRACTION = "warrantRetraction"
    WARRANT_TRANSFER = "warrantTransfer"


class PlanSecurityAlias(str, Enum):
    """Legacy plan-security names that resolve onto equity-compensation types."""

    PLAN_SECURITY_ACCEPTANCE = "planSecurityAcceptance"
    PLAN_SECURITY_CANCELLATION = "planSecurityCancellation"
    PLAN_SECURITY_EXERCISE = "planSecurityExercise"
    PLAN_SECURITY_ISSUANCE = "planSecurityIssuance"
    PLAN_SECURITY_RELEASE = "planSecurityRelease"
    PLAN_SECURITY_RETRACTION = "planSecurityRetraction"
    PLAN_SECURITY_TRANSFER = "planSecurityTransfer"


PLAN_SECURITY_ALIAS_TARGETS: Final[dict[PlanSecurityAlias, EntityType]] = {
    PlanSecurityAlias.PLAN_SECURITY_ACCEPTANCE: EntityType.EQUITY_COMPENSATION_ACCEPTANCE,
    PlanSecurityAlias.PLAN_SECURITY_CANCELLATION: EntityType.EQUITY_COMPENSATION_CANCELLATION,
    PlanSecurityAlias.PLAN_SECURITY_EXERCISE: EntityType.EQUITY_COMPENSATION_EXERCISE,
    PlanSecurityAlias.PLAN_SECURITY_ISSUANCE: EntityType.EQUITY_COMPENSATION_ISSUANCE,
    PlanSecurityAlias.PLAN_SECURITY_RELEASE: EntityType.EQUITY_COMPENSATION_RELEASE,
    PlanSecurityAlias.PLAN_SECURITY_RETRACTION: EntityType.EQUITY_COMPENSATION_RETRACTION,
    PlanSecurityAlias.PLAN_SECURITY_TRANSFER: EntityType.EQUITY_COMPENSATION_TRANSFER,
}

PLAN_SECURITY_OBJECT_TYPE_ALIASES: Final[dict[str, str]] = {
    "TX_PLAN_SECURITY_ACCEPTANCE": "TX_EQUITY_COMPENSATION_ACCEPTANCE",
    "TX_PLAN_SECURITY_CANCELLATION": "TX_EQUITY_COMPENSATION_CANCELLATION",
    "TX_PLAN_SECURITY_EXERCISE": "TX_EQUITY_COMPENSATION_EXERCISE",
    "TX_PLAN_SECURITY_ISSUANCE": "TX_EQUITY_COMPENSATION_ISSUANCE",
    "TX_PLAN_SECURITY_RELEASE": "TX_EQUITY_COMPENSATION_RELEASE",
    "TX_PLAN_SECURITY_RETRACTION": "TX_EQUITY_COMPENSATION_RETRACTION",
    "TX_PLAN_SECURITY_TRANSFER": "TX_EQUITY_COMPENSATION_TRANSFER",
}


def domain_entity_type_pascal_name(entity_type: EntityType | PlanSecurityAlias) -> str:
    """Return the Pascal-case name used in ledger choice labels.

    Args:
        entity_type: Entity type or plan-security alias.

    Returns:
        str: Tag value with its first letter upper-cased.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    tag = entity_type.value
    return tag[:1].upper() + tag[1:]


def domain_normalize_object_type(object_type: str) -> str:
    """Map plan-security object types onto their equity-compensation names."""

    return PLAN_SECURITY_OBJECT_TYPE_ALIASES.get(object_type, object_type)
