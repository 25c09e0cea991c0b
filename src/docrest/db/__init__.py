"""Document storage components: store, matching and the instance registry."""

from docrest.db.registry import IDENTIFIER_SCHEMA, InstanceRegistry, default_hooks
from docrest.db.store import Collection, Database, Hook, HookEvent, ResultSet, identifier_patcher

__all__ = [
    "Collection",
    "Database",
    "Hook",
    "HookEvent",
    "IDENTIFIER_SCHEMA",
    "InstanceRegistry",
    "ResultSet",
    "default_hooks",
    "identifier_patcher",
]
