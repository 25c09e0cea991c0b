"""API generation components for docrest."""

from docrest.api.crud import CrudOps, get_registry

__all__ = ["CrudOps", "get_registry"]
