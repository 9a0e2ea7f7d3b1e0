"""
Filter engine for entity and relation listings.

A RecordFilter is a conjunction of three kinds of predicate:
- organization: record.organization must equal it
- type: record.type must equal it
- attribute_equals: every named attribute must be present and deeply equal

Predicates are ANDed; there is no OR or NOT. Results keep the order of
the input sequence (the store's insertion order), which is what makes
offset/limit pagination repeatable while the store is unchanged.

Equality follows JSON semantics rather than Python's: True is not 1,
1 equals 1.0, and containers compare element by element.

Example:
    >>> f = RecordFilter(type="Developer", attribute_equals={"role": "lead"})
    >>> filter_records(repo.all(RecordKind.ENTITY), f, limit=10)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .types import Record

_MISSING = object()


@dataclass
class RecordFilter:
    """
    Declarative conjunctive filter.

    Attributes:
        organization: Required organization (None = any)
        type: Required record type (None = any)
        attribute_equals: Attribute values that must all match
    """

    organization: Optional[str] = None
    type: Optional[str] = None
    attribute_equals: Dict[str, Any] = field(default_factory=dict)

    def is_empty(self) -> bool:
        """True if the filter matches every record."""
        return not self.organization and not self.type and not self.attribute_equals

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordFilter":
        """
        Build a filter from the wire-level filter object.

        Accepts "type" as well as the per-kind "entityType"/"relationType"
        keys, and "attributes" for attribute equality.
        """
        record_type = data.get("type") or data.get("entityType") or data.get("relationType")
        return cls(
            organization=data.get("organization"),
            type=record_type,
            attribute_equals=dict(data.get("attributes") or {}),
        )


def json_equal(left: Any, right: Any) -> bool:
    """
    Deep equality with JSON semantics.

    Booleans only equal booleans, numbers compare by value across int and
    float, and dicts/lists compare recursively.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, dict) and isinstance(right, dict):
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (dict, list, tuple)) or isinstance(right, (dict, list, tuple)):
        return False
    return left == right


def matches(record: Record, record_filter: Optional[RecordFilter]) -> bool:
    """
    Check whether a record satisfies every predicate of a filter.

    A missing attribute never matches, not even a filter value of None.
    """
    if record_filter is None:
        return True
    if record_filter.organization and record.organization != record_filter.organization:
        return False
    if record_filter.type and record.type != record_filter.type:
        return False
    for key, expected in record_filter.attribute_equals.items():
        actual = record.attributes.get(key, _MISSING)
        if actual is _MISSING or not json_equal(actual, expected):
            return False
    return True


def apply(records: Iterable[Record], record_filter: Optional[RecordFilter]) -> List[Record]:
    """Matching subset of records, in input order."""
    return [record for record in records if matches(record, record_filter)]


def paginate(records: Sequence[Record], limit: int, offset: int = 0) -> List[Record]:
    """
    Slice a page out of records: skip offset, then take limit.

    An offset past the end or a limit <= 0 gives an empty list. A
    negative offset counts as 0.
    """
    if limit <= 0:
        return []
    start = max(offset, 0)
    return list(records[start:start + limit])


def filter_records(
    records: Iterable[Record],
    record_filter: Optional[RecordFilter],
    limit: int,
    offset: int = 0,
) -> List[Record]:
    """Apply a filter, then paginate the result."""
    return paginate(apply(records, record_filter), limit, offset)
