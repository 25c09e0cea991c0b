# src/docrest/db/matching.py
"""In-process evaluation of filter expressions and sort specifications."""

import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from docrest.query.fields import get_value
from docrest.query.operators import Predicate, PredicateKind


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_text(value: Any) -> str:
    """Render a stored scalar the way it would be written in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def _order(value: Any, operand: str) -> int:
    left, right = _as_number(value), _as_number(operand)
    if left is None or right is None:
        left, right = _as_text(value), operand
    return (left > right) - (left < right)


def _equals(value: Any, operand: Any) -> bool:
    if value == operand:
        return True
    if value is None or not isinstance(operand, str):
        return False
    return _as_text(value) == operand


def _contains(value: Any, operand: str) -> bool:
    if isinstance(value, list):
        return any(_equals(item, operand) for item in value)
    return operand in _as_text(value)


# Dispatch table from predicate kind to comparison: (stored value, operand) -> bool
COMPARATORS: Dict[PredicateKind, Callable[[Any, str], bool]] = {
    PredicateKind.GT: lambda value, operand: _order(value, operand) > 0,
    PredicateKind.GTE: lambda value, operand: _order(value, operand) >= 0,
    PredicateKind.LT: lambda value, operand: _order(value, operand) < 0,
    PredicateKind.LTE: lambda value, operand: _order(value, operand) <= 0,
    PredicateKind.STARTS_WITH: lambda value, operand: _as_text(value).startswith(operand),
    PredicateKind.CONTAINS: _contains,
}


def match_operand(value: Any, operand: Any) -> bool:
    if isinstance(operand, Predicate):
        if value is None:
            return False
        return COMPARATORS[operand.kind](value, operand.operand)
    return _equals(value, operand)


def matches(document: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    """True when every filter field matches its operand."""
    return all(
        match_operand(get_value(document, key), operand)
        for key, operand in filters.items()
    )


def _sort_key(value: Any) -> tuple:
    # Ranks keep unlike types apart: numbers, strings, structures, then missing
    number = _as_number(value) if not isinstance(value, str) else None
    if number is not None:
        return (0, number, "")
    if isinstance(value, str):
        return (1, 0.0, value)
    if value is None:
        return (3, 0.0, "")
    return (2, 0.0, _as_text(value))


def sort_documents(documents: List[Dict[str, Any]], sort: Mapping[str, str]) -> List[Dict[str, Any]]:
    """Sort by every field in `sort`; earlier fields take priority."""
    ordered = list(documents)
    # Stable sorts applied from the lowest priority field upwards
    for field, direction in reversed(list(sort.items())):
        ordered.sort(
            key=lambda document: _sort_key(get_value(document, field)),
            reverse=str(direction).lower() == "desc",
        )
    return ordered
