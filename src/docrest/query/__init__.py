"""Translation of request parameters into structured document queries."""

from docrest.query.builder import (
    DERIVATION_KEYS,
    RESERVED_KEYS,
    DocumentQuery,
    QueryBuilder,
    requested_derivation,
    strip_reserved,
)
from docrest.query.fields import FieldSpec, fieldify, get_value, project
from docrest.query.filters import parse_expression, queryify
from docrest.query.operators import OPERATOR_MAP, Predicate, PredicateKind
from docrest.query.pagination import Pagination, normalize_paging
from docrest.query.sorting import sortify

__all__ = [
    "DocumentQuery",
    "QueryBuilder",
    "RESERVED_KEYS",
    "strip_reserved",
    "DERIVATION_KEYS",
    "requested_derivation",
    "FieldSpec",
    "fieldify",
    "get_value",
    "project",
    "parse_expression",
    "queryify",
    "OPERATOR_MAP",
    "Predicate",
    "PredicateKind",
    "Pagination",
    "normalize_paging",
    "sortify",
]
