# src/docrest/api/schema.py
"""
Schema derivation from sample documents.

`infer_json_schema` has genson build a draft-04 JSON Schema describing a list
of records; `to_openapi_schema` rewrites such a schema into the OpenAPI 3.0
dialect (no `$schema`, no `null` type, `nullable` instead).
"""

from typing import Any, Dict, List

from fastapi.concurrency import run_in_threadpool
from genson import SchemaBuilder

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-04/schema#"

Schema = Dict[str, Any]


def _types(schema: Schema) -> List[str]:
    kind = schema.get("type")
    if kind is None:
        return []
    return list(kind) if isinstance(kind, list) else [kind]


def infer_json_schema(title: str, records: List[Any]) -> Schema:
    """Build a JSON Schema for an array of records named `title`."""
    builder = SchemaBuilder(schema_uri=JSON_SCHEMA_DRAFT)
    builder.add_object(list(records))
    schema = builder.to_schema()

    items = schema.get("items") or {}
    schema["title"] = f"{title} Set"
    schema["items"] = {"title": title, **items} if items else {}
    return schema


def to_openapi_schema(schema: Schema) -> Schema:
    """Convert a JSON Schema (draft-04) into an OpenAPI 3.0 schema object."""
    converted: Schema = {}
    for key, value in schema.items():
        if key == "$schema":
            continue
        if key == "properties":
            converted[key] = {name: to_openapi_schema(sub) for name, sub in value.items()}
        elif key == "items" and isinstance(value, dict):
            converted[key] = to_openapi_schema(value)
        elif key in ("anyOf", "oneOf", "allOf"):
            converted[key] = [to_openapi_schema(sub) for sub in value]
        elif key != "type":
            converted[key] = value

    types = _types(schema)
    if "null" in types:
        converted["nullable"] = True
        types = [t for t in types if t != "null"]

    if len(types) == 1:
        converted["type"] = types[0]
    elif types:
        converted["anyOf"] = [{"type": t} for t in types]

    return converted


async def derive_json_schema(title: str, records: List[Any]) -> Schema:
    return await run_in_threadpool(infer_json_schema, title, records)


async def derive_openapi_schema(json_schema: Schema) -> Schema:
    return await run_in_threadpool(to_openapi_schema, json_schema)
