import pytest

from docrest.query.operators import (
    OPERATOR_MAP,
    Predicate,
    PredicateKind,
    build_operand,
    lookup_operator,
)


@pytest.mark.parametrize(
    "name, kind",
    [
        ("gt", PredicateKind.GT),
        ("gte", PredicateKind.GTE),
        ("lt", PredicateKind.LT),
        ("lte", PredicateKind.LTE),
        ("startsWith", PredicateKind.STARTS_WITH),
        ("contains", PredicateKind.CONTAINS),
    ],
)
def test_known_operators_map_to_their_kind(name, kind):
    assert lookup_operator(name) is kind
    assert build_operand(kind, "5") == Predicate(kind, "5")


def test_operator_table_is_closed():
    assert set(OPERATOR_MAP) == {"gt", "gte", "lt", "lte", "startsWith", "contains"}
    assert PredicateKind.UNRECOGNIZED not in OPERATOR_MAP.values()


@pytest.mark.parametrize("name", ["between", "compare", "GT", "startswith", ""])
def test_unknown_operator_is_unrecognized(name):
    assert lookup_operator(name) is PredicateKind.UNRECOGNIZED


def test_unrecognized_operand_is_the_literal_value():
    assert build_operand(PredicateKind.UNRECOGNIZED, "soy") == "soy"
