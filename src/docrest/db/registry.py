# src/docrest/db/registry.py
"""
Lazy registry of database handles and collection models.

Handles and models are created on first use and then reused for the lifetime
of the registry. Creation is single-flight per key: concurrent first lookups
of the same name build exactly one instance and all receive it.
"""

import threading
from pathlib import Path
from typing import Callable, Dict, Hashable, MutableMapping, Tuple, TypeVar, Union

from docrest.core.errors import BadRequestError
from docrest.core.logging import color_palette, log
from docrest.db.store import Collection, Database, Hook, HookEvent, identifier_patcher

T = TypeVar("T")

# Identifier schema every collection model is created with
IDENTIFIER_SCHEMA = {"id": str}


def default_hooks() -> Tuple[Hook, ...]:
    """Hooks that map the public `id` onto the store's `_id` before mutations."""
    patcher = identifier_patcher(public="id", internal="_id")
    return (
        Hook(HookEvent.BEFORE_UPDATE, patcher),
        Hook(HookEvent.BEFORE_DELETE, patcher),
    )


class KeyedLocks:
    """Hands out one lock per key, creating it on demand."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}

    def __getitem__(self, key: Hashable) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())


def get_or_create(
    cache: MutableMapping[str, T],
    key: str,
    factory: Callable[[], T],
    lock: threading.Lock,
) -> T:
    found = cache.get(key)
    if found is not None:
        return found

    with lock:
        # Another caller may have finished creating it while we waited
        found = cache.get(key)
        if found is None:
            found = factory()
            cache[key] = found
    return found


class InstanceRegistry:
    """Resolves database and collection names to live store objects."""

    def __init__(
        self,
        root: Union[str, Path],
        database_factory: Callable[[Path, str], Database] = Database,
    ):
        self.root = Path(root)
        self.database_factory = database_factory
        self.databases: Dict[str, Database] = {}
        self._locks = KeyedLocks()

    def database_path(self, name: str) -> Path:
        """Return `<root>/<name>`, refusing names that escape the storage root."""
        if name in ("", ".", "..") or "/" in name or "\\" in name:
            raise BadRequestError(f"Invalid database name: {name!r}")

        path = self.root / name
        root = self.root.resolve()
        if root not in path.resolve().parents:
            raise BadRequestError(f"Database {name!r} resolves outside the storage root")
        return path

    def resolve_database(self, name: str) -> Database:
        """Return the handle for `name`, creating it under `<root>/<name>` if needed."""
        path = self.database_path(name)

        def create() -> Database:
            log.debug(f"Creating database handle {color_palette['database'](name)}")
            return self.database_factory(path, name)

        return get_or_create(self.databases, name, create, self._locks[("database", name)])

    def resolve_model(self, name: str, database: Database) -> Collection:
        """Return the collection model `name` of `database`, creating it if needed."""

        def create() -> Collection:
            log.debug(
                f"Creating collection model "
                f"{color_palette['database'](database.name)}.{color_palette['collection'](name)}"
            )
            return database.model(name, schema=IDENTIFIER_SCHEMA, hooks=default_hooks())

        lock = self._locks[("model", str(database.root), name)]
        return get_or_create(database.models, name, create, lock)

    def resolve(self, database: str, collection: str) -> Collection:
        return self.resolve_model(collection, self.resolve_database(database))

    def dispose(self) -> None:
        """Release every engine held by the registry's handles."""
        for database in self.databases.values():
            database.dispose()
