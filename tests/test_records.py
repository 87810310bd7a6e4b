import typing
from typing import List

import pytest

from fakes import FakeAPIError
from sales_dashboard.errors import Conflict, NotFound, PermissionDenied
from sales_dashboard.models import SalesRecord
from sales_dashboard.store.records import RecordStore


@pytest.fixture
def store(client, feed):
    return RecordStore(client, "sales", feed)


def test_insert_then_list_returns_server_fields(store):
    store.insert({"name": "Widget", "value": 12.5})
    rows = store.list()
    assert len(rows) == 1
    rec = SalesRecord.from_row(rows[0])
    assert (rec.name, rec.value) == ("Widget", 12.5)
    assert rec.id is not None
    assert rec.created_at is not None and rec.created_at.tzinfo is not None


def test_bulk_insert_is_one_request(store, client):
    store.insert([{"name": "A", "value": 1}, {"name": "B", "value": 2}])
    inserts = [c for c in client.db.calls if c[1] == "insert"]
    assert len(inserts) == 1
    assert len(store.list()) == 2


def test_list_ordering(store):
    for name in ("A", "B", "C"):
        store.insert({"name": name, "value": 1})
    assert [r["name"] for r in store.list(order_by="id", ascending=False)] == ["C", "B", "A"]


def test_get_missing_returns_none(store):
    assert store.get(999) is None


def test_update_and_delete_missing_raise_not_found(store):
    with pytest.raises(NotFound):
        store.update(42, {"name": "x"})
    with pytest.raises(NotFound):
        store.delete(42)


def test_hidden_row_message_mentions_access(store, client):
    row = store.insert({"name": "A", "value": 1})[0]
    client.db.tables["sales"].clear()
    with pytest.raises(NotFound) as info:
        store.delete(row["id"])
    assert "not allowed" in info.value.user_message


def test_return_annotations_resolve_to_builtin_list():
    for method in (RecordStore.list, RecordStore.insert, RecordStore.upsert):
        assert typing.get_type_hints(method)["return"] == List[dict]


def test_update_patches_row(store):
    row = store.insert({"name": "A", "value": 1})[0]
    store.update(row["id"], {"value": 9})
    assert store.get(row["id"])["value"] == 9


def test_writes_publish_changes(store, feed):
    row = store.insert({"name": "A", "value": 1})[0]
    store.update(row["id"], {"value": 2})
    store.delete(row["id"])
    assert feed.version("sales") == 3


def test_failed_write_does_not_publish(store, client, feed):
    client.db.fail[("sales", "insert")] = FakeAPIError("42501", "permission denied for table sales")
    with pytest.raises(PermissionDenied):
        store.insert({"name": "A", "value": 1})
    assert feed.version("sales") == 0


def test_backend_errors_are_mapped(store, client):
    client.db.fail[("sales", "insert")] = FakeAPIError("23505", "duplicate key value")
    with pytest.raises(Conflict) as info:
        store.insert({"name": "A", "value": 1})
    assert isinstance(info.value.__cause__, FakeAPIError)


def test_upsert_ignoring_duplicates_keeps_existing(client):
    store = RecordStore(client, "profiles")
    store.upsert({"id": "u1", "name": "first"}, ignore_duplicates=True)
    assert store.upsert({"id": "u1", "name": "second"}, ignore_duplicates=True) == []
    assert store.get("u1")["name"] == "first"


def test_subscribe_changes(store):
    hits = []
    with store.subscribe_changes(lambda: hits.append(1)):
        store.insert({"name": "A", "value": 1})
    store.insert({"name": "B", "value": 1})
    assert hits == [1]


def test_subscribe_without_feed_fails(client):
    with pytest.raises(RuntimeError):
        RecordStore(client, "sales").subscribe_changes(lambda: None)
