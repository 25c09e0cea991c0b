# src/docrest/query/operators.py
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PredicateKind(str, Enum):
    """Every comparison a filter expression can ask the store for."""

    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    STARTS_WITH = "startsWith"
    CONTAINS = "contains"
    # Any other operator name; it resolves to a plain literal match.
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class Predicate:
    """A named comparison applied to a single string operand."""

    kind: PredicateKind
    operand: str


# Maps operator names from the filter grammar to predicate kinds.
# For example, `age:gte(18)` uses the 'gte' key to build Predicate(GTE, '18').
# `between` (two operands) and `compare` (function operand) are not exposed.
OPERATOR_MAP = {
    'gt': PredicateKind.GT,                     # Greater Than
    'gte': PredicateKind.GTE,                   # Greater Than or Equal
    'lt': PredicateKind.LT,                     # Less Than
    'lte': PredicateKind.LTE,                   # Less Than or Equal
    'startsWith': PredicateKind.STARTS_WITH,    # String prefix
    'contains': PredicateKind.CONTAINS,         # Substring or list member
}


def lookup_operator(name: str) -> PredicateKind:
    return OPERATOR_MAP.get(name, PredicateKind.UNRECOGNIZED)


def build_operand(kind: PredicateKind, value: str) -> Any:
    """Return the filter operand for `kind`; unrecognized kinds become the literal value."""
    if kind is PredicateKind.UNRECOGNIZED:
        return value
    return Predicate(kind, value)
