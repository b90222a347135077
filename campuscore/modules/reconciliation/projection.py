"""
Filter projection: the displayed subset of a collection.

Each criteria key maps to a FilterRule naming the record field(s) it tests
and how. A record must satisfy every non-empty key; within one key any of
its fields may match. Output keeps the input order.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from dataclasses import dataclass
from enum import Enum


class MatchMode(str, Enum):
    CONTAINS = "contains"  # case-folded substring, for free text
    EXACT = "exact"        # equality, for enums and dates


@dataclass(frozen=True)
class FilterRule:
    fields: Tuple[str, ...]
    mode: MatchMode = MatchMode.CONTAINS

    @classmethod
    def contains(cls, *fields: str) -> "FilterRule":
        return cls(tuple(fields), MatchMode.CONTAINS)

    @classmethod
    def exact(cls, *fields: str) -> "FilterRule":
        return cls(tuple(fields), MatchMode.EXACT)


def is_empty_value(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def field_value(record: Any, field_name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field_name)
    return getattr(record, field_name, None)


def _matches_value(value: Any, needle: str, mode: MatchMode) -> bool:
    if mode is MatchMode.CONTAINS:
        return str(needle).casefold() in str(value).casefold()
    return str(value) == str(needle)


def matches(record: Any, key: str, needle: Any, rules: Optional[Mapping[str, FilterRule]] = None) -> bool:
    rule = (rules or {}).get(key) or FilterRule.exact(key)
    present = [v for v in (field_value(record, f) for f in rule.fields) if v is not None]
    if not present:
        return False
    return any(_matches_value(v, needle, rule.mode) for v in present)


def active_criteria(criteria: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (criteria or {}).items() if not is_empty_value(v)}


def project(
    collection: Iterable[Any],
    criteria: Optional[Mapping[str, Any]],
    rules: Optional[Mapping[str, FilterRule]] = None
) -> List[Any]:
    """Return the records of `collection` matching every non-empty criterion"""
    active = active_criteria(criteria)
    if not active:
        return list(collection)
    return [
        record for record in collection
        if all(matches(record, key, needle, rules) for key, needle in active.items())
    ]


class FilterProjection:
    """Projection bound to one entity's filter rules"""

    def __init__(self, rules: Optional[Mapping[str, FilterRule]] = None):
        self.rules: Dict[str, FilterRule] = dict(rules or {})

    def project(self, collection: Iterable[Any], criteria: Optional[Mapping[str, Any]]) -> List[Any]:
        return project(collection, criteria, self.rules)

    __call__ = project
