"""Semantic equivalence of open-format objects across a round trip.

Two objects are equivalent when they differ only in representation: numbers
written as strings, trailing zeros, surrounding whitespace, and empty values
that one side omits and the other spells out. Array order is significant.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Final

from captable_bridge.domain import domain_normalize_object_type

from .interfaces import EquivalenceResult

logger = logging.getLogger(__name__)

DEFAULT_INTERNAL_FIELDS: Final[tuple[str, ...]] = (
    "__v",
    "_id",
    "_source",
    "issuer",
    "tx_hash",
    "createdAt",
    "updatedAt",
    "is_onchain_synced",
    "vestings",
)
DEFAULT_DEPRECATED_FIELDS: Final[tuple[str, ...]] = ("option_grant_type",)

_DECIMAL_TEXT_PATTERN: Final = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _mapping_as_decimal(value: object) -> Decimal | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Decimal)):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_TEXT_PATTERN.match(text):
            return None
        try:
            return Decimal(text)
        except InvalidOperation:
            return None
    return None


def _mapping_is_zero_share_range(value: object) -> bool:
    if not isinstance(value, Mapping):
        return False
    if "starting_share_number" not in value or "ending_share_number" not in value:
        return False
    start = _mapping_as_decimal(value["starting_share_number"])
    end = _mapping_as_decimal(value["ending_share_number"])
    return start == 0 and end == 0


def mapping_is_absent_like(value: object) -> bool:
    """Return whether a value counts as empty for equivalence purposes.

    Absent-like values are None, blank strings, empty containers, containers
    holding only absent-like values, and 0-0 share number range placeholders.

    Args:
        value: Candidate value.

    Returns:
        bool: True when value is absent-like.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        if not value:
            return True
        if all(mapping_is_absent_like(item) for item in value):
            return True
        return all(_mapping_is_zero_share_range(item) for item in value)
    if isinstance(value, Mapping):
        if not value:
            return True
        if _mapping_is_zero_share_range(value):
            return True
        return all(mapping_is_absent_like(item) for item in value.values())
    return False


class _EquivalenceWalker:
    def __init__(self, skipped_fields: frozenset[str]):
        self._skipped_fields = skipped_fields
        self.differences: list[str] = []

    def _is_absent(self, value: object) -> bool:
        # Skipped keys never make a mapping count as present.
        if isinstance(value, Mapping):
            if _mapping_is_zero_share_range(value):
                return True
            return all(self._is_absent(item) for key, item in value.items() if key not in self._skipped_fields)
        if isinstance(value, (list, tuple)):
            if all(self._is_absent(item) for item in value):
                return True
            return all(_mapping_is_zero_share_range(item) for item in value)
        return mapping_is_absent_like(value)

    def compare(self, left: object, right: object, path: str) -> bool:
        left_absent = self._is_absent(left)
        right_absent = self._is_absent(right)
        if left_absent and right_absent:
            return True
        if left_absent != right_absent:
            self.differences.append(f"{path or '<root>'}: one side is empty/undefined")
            return False
        if isinstance(left, Mapping) and isinstance(right, Mapping):
            return self._compare_mappings(left, right, path)
        if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
            return self._compare_lists(left, right, path)
        return self._compare_scalars(left, right, path)

    def _compare_mappings(self, left: Mapping[str, Any], right: Mapping[str, Any], path: str) -> bool:
        keys = [key for key in left if key not in self._skipped_fields]
        keys.extend(key for key in right if key not in self._skipped_fields and key not in left)
        all_match = True
        for key in keys:
            child_path = f"{path}.{key}" if path else str(key)
            left_value = left.get(key)
            right_value = right.get(key)
            if key == "object_type" and isinstance(left_value, str) and isinstance(right_value, str):
                left_value = domain_normalize_object_type(left_value.strip())
                right_value = domain_normalize_object_type(right_value.strip())
            if not self.compare(left_value, right_value, child_path):
                all_match = False
        return all_match

    def _compare_lists(self, left: list[Any] | tuple[Any, ...], right: list[Any] | tuple[Any, ...], path: str) -> bool:
        if len(left) != len(right):
            present_left = [item for item in left if not self._is_absent(item)]
            present_right = [item for item in right if not self._is_absent(item)]
            if len(present_left) != len(present_right):
                self.differences.append(f"{path}: array length mismatch ({len(left)} vs {len(right)})")
                return False
        all_match = True
        for index in range(max(len(left), len(right))):
            left_item = left[index] if index < len(left) else None
            right_item = right[index] if index < len(right) else None
            if not self.compare(left_item, right_item, f"{path}[{index}]"):
                all_match = False
        return all_match

    def _compare_scalars(self, left: object, right: object, path: str) -> bool:
        left_number = _mapping_as_decimal(left)
        right_number = _mapping_as_decimal(right)
        if left_number is not None and right_number is not None:
            matched = left_number == right_number
        elif isinstance(left, str) and isinstance(right, str):
            matched = left.strip() == right.strip()
        elif isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
            self.differences.append(f"{path}: type mismatch ({type(left).__name__} vs {type(right).__name__})")
            return False
        elif isinstance(left, bool) != isinstance(right, bool):
            matched = False
        else:
            matched = left == right
        if not matched:
            self.differences.append(f"{path}: {left!r} != {right!r}")
        return matched


def mapping_compare(
    left: object,
    right: object,
    ignored_fields: Iterable[str] | None = None,
    deprecated_fields: Iterable[str] | None = None,
) -> EquivalenceResult:
    """Compare two open-format objects and report each difference.

    Args:
        left: Expected object, typically the source.
        right: Actual object, typically the read-back result.
        ignored_fields: Keys skipped at every depth. Defaults to `DEFAULT_INTERNAL_FIELDS`.
        deprecated_fields: Keys that may legitimately differ. Defaults to `DEFAULT_DEPRECATED_FIELDS`.

    Returns:
        EquivalenceResult: Equality flag and difference paths.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    skipped_fields = frozenset(DEFAULT_INTERNAL_FIELDS if ignored_fields is None else ignored_fields) | frozenset(
        DEFAULT_DEPRECATED_FIELDS if deprecated_fields is None else deprecated_fields
    )
    walker = _EquivalenceWalker(skipped_fields)
    equal = walker.compare(left, right, "")
    if walker.differences:
        logger.debug("Equivalence differences: %s", "; ".join(walker.differences))
    return EquivalenceResult(equal=equal, differences=tuple(walker.differences))


def mapping_equivalent(
    left: object,
    right: object,
    ignored_fields: Iterable[str] | None = None,
    deprecated_fields: Iterable[str] | None = None,
) -> bool:
    """Return whether two open-format objects are semantically equivalent."""

    return mapping_compare(left, right, ignored_fields=ignored_fields, deprecated_fields=deprecated_fields).equal


def mapping_strip_internal_fields(value: Any, fields: Iterable[str] | None = None) -> Any:
    """Return a copy of value with internal and deprecated keys removed at every depth.

    Args:
        value: Open-format object or nested value.
        fields: Keys to remove. Defaults to internal plus deprecated fields.

    Returns:
        Any: Copy without the removed keys.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    removed = frozenset(DEFAULT_INTERNAL_FIELDS + DEFAULT_DEPRECATED_FIELDS if fields is None else fields)
    if isinstance(value, Mapping):
        return {
            key: mapping_strip_internal_fields(item, removed) for key, item in value.items() if key not in removed
        }
    if isinstance(value, list):
        return [mapping_strip_internal_fields(item, removed) for item in value]
    return value
