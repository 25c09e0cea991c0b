import asyncio

from docrest.api.schema import (
    JSON_SCHEMA_DRAFT,
    derive_json_schema,
    derive_openapi_schema,
    infer_json_schema,
    to_openapi_schema,
)

RECORDS = [
    {"name": "ann", "age": 31, "tags": ["a"], "owner": {"id": "1"}},
    {"name": "bob", "age": 17.5, "tags": [], "note": None},
]


def test_infer_json_schema_describes_record_set():
    schema = infer_json_schema("people", RECORDS)

    assert schema["$schema"] == JSON_SCHEMA_DRAFT
    assert schema["title"] == "people Set"
    assert schema["type"] == "array"
    items = schema["items"]
    assert items["title"] == "people"
    assert items["type"] == "object"
    assert items["properties"]["name"] == {"type": "string"}
    assert items["properties"]["age"] == {"type": "number"}
    assert items["properties"]["tags"] == {"type": "array", "items": {"type": "string"}}
    assert items["properties"]["owner"]["properties"]["id"] == {"type": "string"}
    assert items["properties"]["note"] == {"type": "null"}
    # Only keys present in every record stay required
    assert sorted(items["required"]) == ["age", "name", "tags"]


def test_infer_json_schema_merges_nullable_values():
    schema = infer_json_schema("people", [{"nick": None}, {"nick": "b"}])
    assert sorted(schema["items"]["properties"]["nick"]["type"]) == ["null", "string"]


def test_infer_json_schema_of_empty_set():
    schema = infer_json_schema("none", [])
    assert schema["type"] == "array"
    assert schema["items"] == {}


def test_to_openapi_schema_drops_draft_and_null_types():
    schema = {
        "$schema": JSON_SCHEMA_DRAFT,
        "type": "object",
        "properties": {
            "maybe": {"type": ["string", "null"]},
            "either": {"type": ["integer", "string"]},
            "list": {"type": "array", "items": {"type": ["null", "boolean"]}},
        },
    }

    converted = to_openapi_schema(schema)

    assert "$schema" not in converted
    assert converted["type"] == "object"
    assert converted["properties"]["maybe"] == {"type": "string", "nullable": True}
    assert converted["properties"]["either"] == {"anyOf": [{"type": "integer"}, {"type": "string"}]}
    assert converted["properties"]["list"]["items"] == {"type": "boolean", "nullable": True}


def test_async_derivation_matches_sync_helpers():
    async def derive():
        json_schema = await derive_json_schema("people", RECORDS)
        return json_schema, await derive_openapi_schema(json_schema)

    json_schema, openapi = asyncio.run(derive())
    assert json_schema == infer_json_schema("people", RECORDS)
    assert openapi == to_openapi_schema(json_schema)
