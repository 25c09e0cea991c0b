# src/docrest/query/sorting.py
from typing import Dict, Optional

DEFAULT_DIRECTION = "asc"


def sortify(text: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Convert a string of sortable fields to an ordered mapping.

    sortify('field1:asc,field2:desc,field3') ->
        {'field1': 'asc', 'field2': 'desc', 'field3': 'asc'}

    Directions are not validated here; the store decides what they mean.
    """
    if not text:
        return None

    sort: Dict[str, str] = {}
    for token in text.split(","):
        field, _, direction = token.partition(":")
        sort[field] = direction.split(":")[0] or DEFAULT_DIRECTION

    return sort
