# src/docrest/query/pagination.py
from dataclasses import dataclass
from typing import Any, Dict, Mapping

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


@dataclass(frozen=True)
class Pagination:
    """Requested page window; both values are 1 or more."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Pagination":
        """Read `_page` and `_limit`, falling back to defaults for bad values."""
        return cls(
            page=_positive_int(params.get("_page"), DEFAULT_PAGE),
            limit=_positive_int(params.get("_limit"), DEFAULT_LIMIT),
        )


def normalize_paging(page_info: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rename the store's `size` to the public `limit`.

    {'size': 10, 'page': 1, 'total': 42} -> {'page': 1, 'total': 42, 'limit': 10}
    """
    paging = dict(page_info)
    paging["limit"] = paging.pop("size", None)
    return paging
