# src/docrest/api/crud.py
"""CRUD operations over document collections with FastAPI routes."""

import json
from enum import Enum
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from docrest.api.responses import envelope, projection_response
from docrest.api.schema import derive_json_schema, derive_openapi_schema
from docrest.core.errors import BadRequestError
from docrest.core.logging import color_palette, log
from docrest.db.registry import InstanceRegistry
from docrest.db.store import Collection
from docrest.query.builder import QueryBuilder, requested_derivation


class Derivation(str, Enum):
    """What a read returns instead of data."""

    SCHEMA = "schema"
    OPENAPI = "openapi"


def get_registry(request: Request) -> InstanceRegistry:
    """Dependency returning the registry owned by the running application."""
    return request.app.state.registry


async def read_body(request: Request) -> Any:
    """Parse the JSON request body; an empty body counts as `{}`."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError as e:
        raise BadRequestError(f"Request body is not valid JSON: {e}") from e


class CrudOps:
    """Class to handle CRUD operations on collections with FastAPI routes."""

    def __init__(
        self,
        router: APIRouter,
        registry_dependency: Callable[..., InstanceRegistry] = get_registry,
        prefix: str = "",
    ):
        """Initialize CRUD handler with common parameters."""
        self.router = router
        self.registry_dependency = registry_dependency
        self.prefix = prefix

    def _get_route_path(self, operation: str = "") -> str:
        """Generate route path with optional prefix."""
        base_path = "/{database}/{collection}"
        if operation:
            base_path = f"{base_path}/{operation}"
        return f"{self.prefix}{base_path}"

    async def _resolve(self, registry: InstanceRegistry, database: str, collection: str) -> Collection:
        return await run_in_threadpool(registry.resolve, database, collection)

    def create(self) -> None:
        """Add CREATE route."""

        @self.router.post(
            self._get_route_path(),
            summary="Create documents",
            description="Add the document (or list of documents) in the body to a collection",
        )
        async def create_resource(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            model = await self._resolve(registry, database, collection)
            return await model.add(await read_body(request))

    def read(self) -> None:
        """Add the READ routes: listing, schema derivation, inline queries and projection."""

        @self.router.get(
            self._get_route_path(),
            summary="List documents",
            description="Paged listing filtered and sorted by query-string parameters",
        )
        async def read_resources(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            return await self._read(request, registry, database, collection)

        @self.router.get(
            self._get_route_path(Derivation.SCHEMA.value),
            summary="Derive JSON Schema",
            description="JSON Schema inferred from a sample read of the collection",
        )
        async def read_schema(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            return await self._read(request, registry, database, collection, derive=Derivation.SCHEMA)

        @self.router.get(
            self._get_route_path(Derivation.OPENAPI.value),
            summary="Derive OpenAPI schema",
            description="OpenAPI schema fragment inferred from a sample read of the collection",
        )
        async def read_openapi(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            return await self._read(request, registry, database, collection, derive=Derivation.OPENAPI)

        @self.router.get(
            self._get_route_path("{query}"),
            summary="Query documents",
            description="Listing filtered by the inline grammar `field:value;field:op(value)`",
        )
        async def query_resources(
            database: str,
            collection: str,
            query: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            return await self._read(request, registry, database, collection, query=query)

        @self.router.get(
            self._get_route_path("{query}/field/{fields}"),
            summary="Stream document fields",
            description="Raw values of `key[:decode[:contentType]];...` from each matching document",
        )
        async def read_fields(
            database: str,
            collection: str,
            query: str,
            fields: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            return await self._read(request, registry, database, collection, query=query, fields=fields)

    async def _read(
        self,
        request: Request,
        registry: InstanceRegistry,
        database: str,
        collection: str,
        query: Optional[str] = None,
        fields: Optional[str] = None,
        derive: Optional[Derivation] = None,
    ) -> Any:
        if derive is None:
            requested = requested_derivation(request.query_params)
            derive = Derivation(requested) if requested else None

        model = await self._resolve(registry, database, collection)
        document_query = QueryBuilder(request.query_params, path_query=query, path_fields=fields).build()

        result = await model.get(
            document_query.filters,
            sort=document_query.sort,
            page=document_query.pagination.page,
            limit=document_query.pagination.limit,
        )

        if document_query.fields:
            return projection_response(result.records, document_query.fields)

        if derive:
            schema = await derive_json_schema(collection, result.records)
            if derive is Derivation.OPENAPI:
                return await derive_openapi_schema(schema)
            return schema

        return envelope(result)

    def update(self) -> None:
        """Add UPDATE route."""

        @self.router.patch(
            self._get_route_path(),
            summary="Update documents",
            description="Patch the document(s) addressed by `id` or `_id` in the body",
        )
        async def update_resource(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            model = await self._resolve(registry, database, collection)
            return await model.update(await read_body(request))

    def delete(self) -> None:
        """Add DELETE route."""

        @self.router.delete(
            self._get_route_path(),
            summary="Delete documents",
            description="Delete the document(s) addressed by `id` or `_id` in the body",
        )
        async def delete_resource(
            database: str,
            collection: str,
            request: Request,
            registry: InstanceRegistry = Depends(self.registry_dependency),
        ) -> Any:
            model = await self._resolve(registry, database, collection)
            return await model.delete(await read_body(request))

    def generate_all(self) -> None:
        """Generate all CRUD routes."""
        self.read()
        self.create()
        self.update()
        self.delete()
        log.success(f"Generated collection routes at {color_palette['path'](self._get_route_path())}")
