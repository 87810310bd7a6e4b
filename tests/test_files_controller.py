import pytest

from fakes import FakeAPIError, FakeStorageError
from sales_dashboard.config import MIB
from sales_dashboard.controllers.files import (
    FileRepositoryController, UserFilesController, format_size, is_previewable,
)
from sales_dashboard.models import FileRecord


@pytest.fixture
def repo(backend):
    return FileRepositoryController(backend.files, backend.reports, backend.identity)


def test_oversized_upload_fails_before_any_call(repo, client, signed_in):
    assert repo.upload("big.csv", b"x" * (60 * MIB), "text/csv") is None
    assert repo.failure.tag == "SizeLimitExceeded"
    assert client.storage.calls == []
    assert client.db.calls == []


def test_upload_requires_identity(repo, client):
    assert repo.upload("a.txt", b"hi", "text/plain") is None
    assert repo.failure.tag == "Unauthenticated"
    assert client.storage.calls == []


def test_upload_stores_blob_and_metadata(repo, client, signed_in):
    record = repo.upload("Q1 report.pdf", b"%PDF", "application/pdf", category="Sales Report")
    assert record.id is not None
    assert record.user_id == signed_in.id
    assert record.category == "Sales Report"
    assert record.size == 4
    key = repo.blobs.key_from_url(record.url)
    assert key.endswith(".pdf")
    assert client.storage.objects["uploads"][key]["data"] == b"%PDF"
    assert [f.name for f in repo.files] == ["Q1 report.pdf"]


def test_upload_under_all_category_defaults_to_other(repo, signed_in):
    assert repo.upload("notes.txt", b"x").category == "Other"


def test_metadata_failure_removes_uploaded_blob(repo, client, signed_in):
    client.db.fail[("files", "insert")] = FakeAPIError("42501", "new row violates row-level security policy")
    assert repo.upload("a.txt", b"hi", "text/plain") is None
    assert repo.needs_permission_fix
    assert client.storage.objects["uploads"] == {}


def test_compensation_failure_still_reports_commit_error(repo, client, signed_in):
    client.db.fail[("files", "insert")] = FakeAPIError("XX000", "insert failed")
    client.storage.fail[("uploads", "remove")] = FakeStorageError("500", "internal", "down")
    assert repo.upload("a.txt", b"hi", "text/plain") is None
    assert "insert failed" in repo.error


def test_refresh_lists_newest_first(repo, signed_in):
    repo.upload("first.txt", b"1")
    repo.upload("second.txt", b"2")
    assert repo.refresh()
    assert [f.name for f in repo.files] == ["second.txt", "first.txt"]


def test_refresh_signed_out(repo):
    assert not repo.refresh()
    assert repo.failure.tag == "Unauthenticated"


def test_filtered_by_category_and_search(repo, signed_in):
    repo.upload("sales-q1.csv", b"1", category="Sales Report")
    repo.upload("clients.csv", b"2", category="Customer Data")
    assert [f.name for f in repo.filtered("Sales Report")] == ["sales-q1.csv"]
    assert [f.name for f in repo.filtered("All", "CLIENT")] == ["clients.csv"]
    assert len(repo.filtered("All", "")) == 2


def test_delete_needs_confirmation_and_removes_row_then_blob(repo, client, signed_in):
    record = repo.upload("a.txt", b"hi")
    repo.request_delete(record)
    repo.cancel_delete()
    assert not repo.confirm_delete()
    assert client.storage.objects["uploads"]

    repo.request_delete(record)
    assert repo.confirm_delete()
    assert repo.files == []
    assert client.storage.objects["uploads"] == {}


def test_update_category(repo, signed_in):
    record = repo.upload("a.txt", b"hi")
    assert repo.update_category(record, "Financial Document")
    assert repo.files[0].category == "Financial Document"
    with pytest.raises(ValueError):
        repo.update_category(record, "All")


def test_download_returns_bytes(repo, signed_in):
    record = repo.upload("a.txt", b"hello")
    assert repo.download(record) == b"hello"


def test_format_size_and_preview():
    assert format_size(512) == "512 B"
    assert format_size(2048) == "2.0 KB"
    assert format_size(3 * MIB) == "3.0 MB"
    make = lambda mime: FileRecord(id="1", name="f", size=1, type=mime, url="")
    assert is_previewable(make("image/png"))
    assert is_previewable(make("application/pdf"))
    assert not is_previewable(make("application/zip"))


def test_user_files_bucket(backend, client):
    files = UserFilesController(backend.user_files)
    key = files.upload("notes.txt", b"hello", "text/plain")
    assert key.endswith("_notes.txt")
    assert [f["name"] for f in files.files] == [key]
    assert files.download(key) == b"hello"
    assert files.download("missing") is None
    assert files.failure.tag == "NotFound"


def test_user_files_size_limit(backend, client):
    files = UserFilesController(backend.user_files, max_size=10)
    assert files.upload("big.bin", b"x" * 11) is None
    assert client.storage.calls == []
