import pytest

from fakes import FakeAPIError
from sales_dashboard.controllers.sales import SalesController, format_value, matches
from sales_dashboard.ingest import parse_import_file
from sales_dashboard.models import SalesRecord, SalesStats


@pytest.fixture
def controller(backend):
    return SalesController(backend.sales)


def _seed(controller, *pairs):
    for name, value in pairs:
        controller.store.insert({"name": name, "value": value})
    controller.refresh()


def test_stats_from_full_list(controller):
    _seed(controller, ("A", 100), ("B", 50), ("C", 30))
    assert controller.stats == SalesStats(total=180, average=60.0, count=3)


def test_stats_average_rounds_to_cents():
    stats = SalesStats.from_records([SalesRecord(1, "A", 1), SalesRecord(2, "B", 1),
                                     SalesRecord(3, "C", 0)])
    assert stats.average == 0.67


def test_refresh_lists_newest_first(controller):
    _seed(controller, ("A", 1), ("B", 2))
    assert [r.name for r in controller.records] == ["B", "A"]


def test_submit_creates_then_clears_draft(controller):
    controller.set_draft("Widget", "12.5")
    assert controller.submit()
    assert controller.draft.name == ""
    assert [(r.name, r.value) for r in controller.records] == [("Widget", 12.5)]


def test_submit_with_id_updates(controller):
    _seed(controller, ("A", 1))
    controller.edit(controller.records[0])
    controller.draft.value = 7
    assert controller.submit()
    assert controller.records[0].value == 7
    assert len(controller.records) == 1


@pytest.mark.parametrize("name,value,message", [
    ("  ", 1, "Name is required"),
    ("A", "abc", "Amount must be a number"),
    ("A", None, "Amount must be a number"),
])
def test_invalid_draft_is_rejected_without_store_call(controller, client, name, value, message):
    controller.set_draft(name, value)
    assert not controller.submit()
    assert controller.error == message
    assert not [c for c in client.db.calls if c[1] in ("insert", "update")]


def test_cancelled_delete_issues_no_call(controller, client):
    _seed(controller, ("A", 1))
    controller.request_delete(controller.records[0].id)
    controller.cancel_delete()
    assert not controller.confirm_delete()
    assert not [c for c in client.db.calls if c[1] == "delete"]
    assert len(controller.records) == 1


def test_confirmed_delete_removes_and_relists(controller):
    _seed(controller, ("A", 1), ("B", 2))
    target = controller.records[0]
    controller.edit(target)
    controller.request_delete(target.id)
    assert controller.confirm_delete()
    assert [r.name for r in controller.records] == ["A"]
    assert controller.draft.id is None
    assert controller.stats.count == 1


def test_failures_stay_inline(controller, client):
    client.db.fail[("sales", "select")] = FakeAPIError("42501", "permission denied for table sales")
    assert not controller.refresh()
    assert controller.records == []
    assert controller.error.startswith("Failed to load data: Permission denied")
    assert controller.needs_permission_fix


def test_search_matches_name_and_value(controller):
    _seed(controller, ("Blue Widget", 100), ("Gadget", 60.5))
    assert [r.name for r in controller.filtered("widget")] == ["Blue Widget"]
    assert [r.name for r in controller.filtered("60.5")] == ["Gadget"]
    assert len(controller.filtered("")) == 2


def test_format_value_and_matches():
    assert format_value(100.0) == "100"
    assert format_value(60.5) == "60.5"
    assert matches(SalesRecord(1, "Widget", 10), "10")


def test_commit_import_is_one_bulk_insert(controller, client):
    batch = parse_import_file(b"name,value\nA,1\nB,2\nC,3\n", "csv")
    assert controller.commit_import(batch) == 3
    assert len([c for c in client.db.calls if c[1] == "insert"]) == 1
    assert controller.stats.total == 6


def test_failed_import_inserts_nothing(controller, client):
    client.db.fail[("sales", "insert")] = FakeAPIError("XX000", "server error")
    batch = parse_import_file(b"name,value\nA,1\n", "csv")
    assert controller.commit_import(batch) == 0
    assert controller.error.startswith("Import failed")
    assert client.db.rows("sales") == []


def test_records_state_round_trip(controller):
    _seed(controller, ("A", 5))
    other = SalesController(store=None)
    other.load_records(controller.records_state())
    assert other.records == controller.records
    assert other.stats.total == 5
