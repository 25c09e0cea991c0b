# src/docrest/db/store.py
"""
SQLite-backed document store.

Each database handle owns a directory holding one SQLite file; each collection
is a table of JSON documents keyed by an internal `_id`. Filters, sorting and
paging are evaluated in process over the stored documents.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Union

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import JSON, Column, Integer, MetaData, String, Table, create_engine, delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from docrest.core.errors import BadRequestError, ConflictError, NotFoundError
from docrest.db.matching import matches, sort_documents

DATABASE_FILE = "collections.db"
ID_FIELD = "_id"

Document = Dict[str, Any]
Documents = Union[Document, List[Document]]


class HookEvent(str, Enum):
    BEFORE_UPDATE = "before-update"
    BEFORE_DELETE = "before-delete"


class Hook(NamedTuple):
    """A handler the collection calls with (collection, document) before a mutation."""

    event: HookEvent
    handler: Callable[["Collection", Document], Optional[Document]]


@dataclass
class ResultSet:
    """A page of matching documents plus the store's paging metadata."""

    records: List[Document]
    page_info: Dict[str, int] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


def generate_id() -> str:
    return uuid.uuid4().hex


def table_name(collection: str) -> str:
    """
    Map a collection name onto its SQLite table name.

    SQLite compares table names case-insensitively and reserves the
    `sqlite_` prefix, so the name is hex-encoded behind a fixed prefix.
    """
    return f"c_{collection.encode('utf-8').hex()}"


def identifier_patcher(public: str = "id", internal: str = ID_FIELD) -> Callable[["Collection", Document], Document]:
    """
    Build a hook that fills the internal identifier from the public one.

    A document addressed only by `public` gets the `internal` identifier of
    the stored document carrying that value, or the value itself when no
    stored document does.
    """

    def patch(collection: "Collection", document: Document) -> Document:
        if document.get(internal) is not None or document.get(public) is None:
            return document

        stored = collection.find_one({public: document[public]})
        document[internal] = stored[internal] if stored else str(document[public])
        return document

    return patch


class Database:
    """A named root directory holding the collections of one database."""

    def __init__(self, root: Union[str, Path], name: Optional[str] = None):
        self.root = Path(root)
        self.name = name or self.root.name
        self.models: Dict[str, "Collection"] = {}

        self.root.mkdir(parents=True, exist_ok=True)
        self.engine = create_engine(
            f"sqlite:///{self.root / DATABASE_FILE}",
            connect_args={"check_same_thread": False},
        )
        self.metadata = MetaData()

    def model(
        self,
        name: str,
        schema: Optional[Mapping[str, type]] = None,
        hooks: Sequence[Hook] = (),
    ) -> "Collection":
        """Create a collection model; caching it is up to the caller."""
        return Collection(self, name, schema=schema, hooks=hooks)

    def dispose(self) -> None:
        self.engine.dispose()


class Collection:
    """A queryable set of JSON documents with async CRUD operations."""

    def __init__(
        self,
        database: Database,
        name: str,
        schema: Optional[Mapping[str, type]] = None,
        hooks: Sequence[Hook] = (),
    ):
        self.database = database
        self.name = name
        self.schema = dict(schema or {})
        self.hooks = tuple(hooks)

        self.table = Table(
            table_name(name),
            database.metadata,
            Column("seq", Integer, primary_key=True, autoincrement=True),
            Column(ID_FIELD, String, nullable=False, unique=True),
            Column("document", JSON, nullable=False),
            extend_existing=True,
        )
        database.metadata.create_all(database.engine, tables=[self.table])

    @property
    def engine(self):
        return self.database.engine

    # ===== Async API =====

    async def get(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[Mapping[str, str]] = None,
        page: int = 1,
        limit: int = 10,
    ) -> ResultSet:
        """Return one page of the documents matching `filters`."""
        return await run_in_threadpool(self.read, filters or {}, sort, page, limit)

    async def add(self, documents: Documents) -> Documents:
        return await run_in_threadpool(self._each, self._add, documents)

    async def update(self, documents: Documents) -> Documents:
        return await run_in_threadpool(self._each, self._update, documents)

    async def delete(self, documents: Documents) -> Documents:
        return await run_in_threadpool(self._each, self._delete, documents)

    # ===== Sync implementation =====

    def read(
        self,
        filters: Mapping[str, Any],
        sort: Optional[Mapping[str, str]] = None,
        page: int = 1,
        limit: int = 10,
    ) -> ResultSet:
        matched = [document for document in self._all() if matches(document, filters)]
        if sort:
            matched = sort_documents(matched, sort)

        start = (page - 1) * limit
        return ResultSet(
            records=matched[start:start + limit],
            page_info={"size": limit, "page": page, "total": len(matched)},
        )

    def find_one(self, filters: Mapping[str, Any]) -> Optional[Document]:
        return next((d for d in self._all() if matches(d, filters)), None)

    def _all(self) -> List[Document]:
        query = select(self.table.c.document).order_by(self.table.c.seq)
        with self.engine.connect() as conn:
            return [dict(row.document) for row in conn.execute(query)]

    def _each(self, operation: Callable[[Document], Document], documents: Documents) -> Documents:
        if isinstance(documents, list):
            return [operation(self._checked(document)) for document in documents]
        return operation(self._checked(documents))

    def _checked(self, document: Any) -> Document:
        if not isinstance(document, Mapping):
            raise BadRequestError(f"Expected a JSON object for {self.name}, got {type(document).__name__}")
        return self._apply_schema(dict(document))

    def _apply_schema(self, document: Document) -> Document:
        for key, cast in self.schema.items():
            value = document.get(key)
            if value is not None and not isinstance(value, cast):
                document[key] = cast(value)
        return document

    def _run_hooks(self, event: HookEvent, document: Document) -> Document:
        for hook in self.hooks:
            if hook.event is event:
                document = hook.handler(self, document) or document
        return document

    def _identifier(self, document: Document, action: str) -> str:
        identifier = document.get(ID_FIELD)
        if identifier is None:
            raise BadRequestError(f"Cannot {action} a document of {self.name} without an identifier")
        return str(identifier)

    def _fetch(self, conn, identifier: str) -> Document:
        id_column = self.table.c[ID_FIELD]
        row = conn.execute(select(self.table.c.document).where(id_column == identifier)).first()
        if row is None:
            raise NotFoundError(f"Document '{identifier}' not found in {self.name}")
        return dict(row.document)

    def _add(self, document: Document) -> Document:
        document[ID_FIELD] = str(document.get(ID_FIELD) or generate_id())

        try:
            with self.engine.begin() as conn:
                conn.execute(insert(self.table).values({ID_FIELD: document[ID_FIELD], "document": document}))
        except IntegrityError as e:
            raise ConflictError(f"Document '{document[ID_FIELD]}' already exists in {self.name}") from e

        return document

    def _update(self, document: Document) -> Document:
        document = self._run_hooks(HookEvent.BEFORE_UPDATE, document)
        identifier = self._identifier(document, "update")
        id_column = self.table.c[ID_FIELD]

        with self.engine.begin() as conn:
            merged = {**self._fetch(conn, identifier), **document, ID_FIELD: identifier}
            conn.execute(update(self.table).where(id_column == identifier).values(document=merged))

        return merged

    def _delete(self, document: Document) -> Document:
        document = self._run_hooks(HookEvent.BEFORE_DELETE, document)
        identifier = self._identifier(document, "delete")
        id_column = self.table.c[ID_FIELD]

        with self.engine.begin() as conn:
            stored = self._fetch(conn, identifier)
            conn.execute(delete(self.table).where(id_column == identifier))

        return stored
