# src/docrest/query/filters.py
"""
Filter grammar.

Filters arrive either as the inline path form::

    field1:value;field2:startsWith(value);nested.field:gt(10)

or as a mapping of query-string parameters whose values use the same
expression syntax. Parsing is total: anything that does not look like a known
operator call is matched literally.
"""

import re
from typing import Any, Dict, Mapping, Optional, Union

from .operators import build_operand, lookup_operator

_CALL_PATTERN = re.compile(r"([^)]+)\(([^)]+)\)")


def parse_expression(text: Any) -> Any:
    """
    Convert a single filter expression to a store operand.

    parse_expression('contains(soy)') -> Predicate(CONTAINS, 'soy')
    parse_expression('between(1)')    -> '1'
    parse_expression('soy')           -> 'soy'
    """
    if not isinstance(text, str):
        return text

    match = _CALL_PATTERN.search(text)
    if not match:
        # Not the operator format, so it is an exact match on the whole string
        return text

    name, value = match.groups()
    return build_operand(lookup_operator(name), value)


def queryify(query: Optional[Union[str, Mapping[str, Any]]]) -> Dict[str, Any]:
    """Convert a filter string or mapping into a filter expression."""
    if isinstance(query, Mapping):
        return {key: parse_expression(value) for key, value in query.items()}

    result: Dict[str, Any] = {}
    if not isinstance(query, str):
        return result

    for clause in query.split(";"):
        key, _, rest = clause.partition(":")
        if not key:
            continue
        result[key] = parse_expression(rest)

    return result
