# src/docrest/query/builder.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .fields import FieldSpec, fieldify
from .filters import queryify
from .pagination import Pagination
from .sorting import sortify

# Query-string keys that steer the request and never become filters
RESERVED_KEYS = ("_page", "_limit", "_fields", "_sort", "_decode")
# Bare keys (`?schema`, `?openapi`) asking for a derived schema instead of data
DERIVATION_KEYS = ("openapi", "schema")


def strip_reserved(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        key: value
        for key, value in params.items()
        if key not in RESERVED_KEYS and key not in DERIVATION_KEYS
    }


def requested_derivation(params: Mapping[str, Any]) -> Optional[str]:
    """Return the derivation the query string asks for; `openapi` wins over `schema`."""
    return next((key for key in DERIVATION_KEYS if key in params), None)


@dataclass
class DocumentQuery:
    """Everything a read request asks of a collection."""

    filters: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[Dict[str, str]] = None
    fields: Optional[List[FieldSpec]] = None
    pagination: Pagination = field(default_factory=Pagination)


class QueryBuilder:
    """
    Builds a DocumentQuery from API request parameters.

    An inline `path_query` replaces the query-string filters entirely, and
    inline `path_fields` win over `_fields`.
    """

    def __init__(
        self,
        params: Mapping[str, Any],
        path_query: Optional[str] = None,
        path_fields: Optional[str] = None,
    ):
        self.params = dict(params)
        self.path_query = path_query
        self.path_fields = path_fields

    def build(self) -> DocumentQuery:
        filters = queryify(self.path_query or strip_reserved(self.params))

        return DocumentQuery(
            filters=filters,
            sort=sortify(self.params.get("_sort")),
            fields=fieldify(self.path_fields or self.params.get("_fields")),
            pagination=Pagination.from_params(self.params),
        )
