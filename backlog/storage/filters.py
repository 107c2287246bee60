"""
Filter matching and sort keys for documents held in memory.

Supports the subset of MongoDB filter syntax used against backlog items:
field equality plus the $eq, $ne, $in, $nin and $exists operators, with
MongoDB's rules for null and array fields:

- a None operand matches a missing field as well as an explicit null
- a scalar operand matches an array field if any element matches

Sorting follows MongoDB's cross-type order (null, numbers, strings,
documents, binary, ObjectId, booleans, dates). An array sorts ascending by
its smallest element; an empty array sorts before null.
"""
from datetime import datetime
from typing import Any, Dict, Mapping, Tuple

from bson import ObjectId

_MISSING = object()


class UnsupportedFilterError(ValueError):
    """Raised for filter operators the in-memory matcher does not implement."""


def _scalar_equals(value: Any, operand: Any) -> bool:
    # bool is an int subclass; MongoDB keeps them apart
    if isinstance(value, bool) != isinstance(operand, bool):
        return False
    return value == operand


def _equals(value: Any, operand: Any) -> bool:
    if operand is None:
        if value is _MISSING or value is None:
            return True
        return isinstance(value, list) and any(element is None for element in value)
    if value is _MISSING:
        return False
    if _scalar_equals(value, operand):
        return True
    return isinstance(value, list) and any(_scalar_equals(element, operand) for element in value)


def _is_operator_document(condition: Any) -> bool:
    return isinstance(condition, Mapping) and bool(condition) and all(k.startswith("$") for k in condition)


def _matches_condition(value: Any, condition: Any) -> bool:
    if not _is_operator_document(condition):
        return _equals(value, condition)

    for operator, operand in condition.items():
        if operator == "$eq":
            ok = _equals(value, operand)
        elif operator == "$ne":
            ok = not _equals(value, operand)
        elif operator in ("$in", "$nin"):
            if not isinstance(operand, (list, tuple, set)):
                raise UnsupportedFilterError(f"{operator} needs an array, got {type(operand).__name__}")
            found = any(_equals(value, candidate) for candidate in operand)
            ok = found if operator == "$in" else not found
        elif operator == "$exists":
            ok = (value is not _MISSING) == bool(operand)
        else:
            raise UnsupportedFilterError(f"Unsupported filter operator: {operator}")
        if not ok:
            return False
    return True


def matches(document: Mapping[str, Any], filter: Dict[str, Any]) -> bool:
    """Return True if ``document`` satisfies every clause of ``filter``."""
    for field, condition in filter.items():
        if field.startswith("$"):
            raise UnsupportedFilterError(f"Unsupported filter operator: {field}")
        if not _matches_condition(document.get(field, _MISSING), condition):
            return False
    return True


def _value_key(value: Any) -> Tuple[int, Any]:
    if isinstance(value, list):
        if not value:
            return (0, 0)
        return min(_value_key(element) for element in value)
    if value is None:
        return (1, 0)
    if isinstance(value, bool):
        return (7, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value)
    if isinstance(value, Mapping):
        return (4, tuple((key, _value_key(item)) for key, item in value.items()))
    if isinstance(value, (bytes, bytearray)):
        return (5, (len(value), bytes(value)))
    if isinstance(value, ObjectId):
        return (6, value)
    if isinstance(value, datetime):
        return (8, value)
    return (9, value)


def sort_key(field: str):
    """Ascending sort key; documents missing the field sort with nulls."""
    def key(document: Mapping[str, Any]) -> Tuple[int, Any]:
        return _value_key(document.get(field))
    return key
