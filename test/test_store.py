import asyncio

import pytest

from docrest.core.errors import BadRequestError, ConflictError, NotFoundError
from docrest.db.store import Database, Hook, HookEvent, identifier_patcher, table_name
from docrest.query.filters import queryify


def run(coro):
    return asyncio.run(coro)


def test_add_generates_internal_identifier(collection):
    document = run(collection.add({"hello": "world"}))
    assert document["hello"] == "world"
    assert document["_id"]


def test_add_accepts_a_list(collection):
    documents = run(collection.add([{"n": 1}, {"n": 2}]))
    assert [d["n"] for d in documents] == [1, 2]
    assert documents[0]["_id"] != documents[1]["_id"]


def test_add_casts_identifier_schema(collection):
    assert run(collection.add({"id": 7}))["id"] == "7"


def test_add_rejects_duplicate_identifier(collection):
    run(collection.add({"_id": "same"}))
    with pytest.raises(ConflictError) as info:
        run(collection.add({"_id": "same"}))
    assert info.value.code == 409


def test_add_rejects_non_objects(collection):
    with pytest.raises(BadRequestError):
        run(collection.add(["not a document"]))


def test_get_pages_and_reports_engine_paging(collection):
    run(collection.add([{"n": i} for i in range(15)]))

    result = run(collection.get({}, page=2, limit=10))

    assert [d["n"] for d in result] == list(range(10, 15))
    assert result.page_info == {"size": 10, "page": 2, "total": 15}


def test_get_filters_and_sorts(collection):
    run(collection.add([
        {"name": "ann", "age": 31},
        {"name": "bob", "age": 17},
        {"name": "cy", "age": 45},
    ]))

    result = run(collection.get(queryify("age:gte(18)"), sort={"age": "desc"}))

    assert [d["name"] for d in result] == ["cy", "ann"]
    assert result.page_info["total"] == 2


def test_update_by_public_id_reaches_generated_identifier(collection):
    created = run(collection.add({"id": "abc", "v": 1, "keep": True}))

    updated = run(collection.update({"id": "abc", "v": 2}))

    assert updated["_id"] == created["_id"]
    assert updated["v"] == 2
    assert updated["keep"] is True
    assert collection.find_one({"_id": created["_id"]})["v"] == 2


def test_update_by_internal_identifier(collection):
    created = run(collection.add({"v": 1}))
    assert run(collection.update({"_id": created["_id"], "v": 5}))["v"] == 5


def test_update_unknown_document_is_not_found(collection):
    with pytest.raises(NotFoundError) as info:
        run(collection.update({"id": "ghost", "v": 1}))
    assert info.value.code == 404


def test_update_without_identifier_is_a_bad_request(collection):
    with pytest.raises(BadRequestError):
        run(collection.update({"v": 1}))


def test_delete_by_public_id(collection):
    created = run(collection.add({"id": "gone", "v": 1}))

    deleted = run(collection.delete({"id": "gone"}))

    assert deleted == created
    assert run(collection.get({})).page_info["total"] == 0


def test_hooks_run_before_each_mutation(tmp_path):
    database = Database(tmp_path / "db", "db")
    seen = []

    def recorder(collection, document):
        stored = collection.find_one({"_id": document["_id"]})
        seen.append((document["_event"], stored["v"]))
        return document

    model = database.model(
        "things",
        hooks=[
            Hook(HookEvent.BEFORE_UPDATE, identifier_patcher()),
            Hook(HookEvent.BEFORE_UPDATE, recorder),
            Hook(HookEvent.BEFORE_DELETE, identifier_patcher()),
            Hook(HookEvent.BEFORE_DELETE, recorder),
        ],
    )
    run(model.add({"id": "x", "v": 1}))
    run(model.update({"id": "x", "v": 2, "_event": "update"}))
    run(model.delete({"id": "x", "_event": "delete"}))
    database.dispose()

    # Each hook saw the document as stored before its mutation applied
    assert seen == [("update", 1), ("delete", 2)]


def test_identifier_patcher_keeps_existing_internal_identifier(collection):
    patch = identifier_patcher()
    assert patch(collection, {"_id": "keep", "id": "other"}) == {"_id": "keep", "id": "other"}
    assert patch(collection, {"id": "unknown"}) == {"id": "unknown", "_id": "unknown"}
    assert patch(collection, {"v": 1}) == {"v": 1}


def test_collection_names_differing_in_case_are_separate(registry):
    upper = registry.resolve("shop", "Items")
    lower = registry.resolve("shop", "items")

    run(upper.add({"name": "upper"}))

    assert [d["name"] for d in run(lower.get())] == []
    assert [d["name"] for d in run(upper.get())] == ["upper"]


@pytest.mark.parametrize("name", ["sqlite_master", "sqlite_items", "with space", "ünïcode"])
def test_any_collection_name_is_storable(registry, name):
    model = registry.resolve("shop", name)

    run(model.add({"name": name}))

    assert [d["name"] for d in run(model.get())] == [name]


def test_table_name_is_case_sensitive_and_prefixed():
    assert table_name("Items") != table_name("items")
    assert table_name("sqlite_master").startswith("c_")
