import logging

import pytest

from fakes import FakeAPIError, FakeStorageError
from sales_dashboard.errors import Conflict, PermissionDenied, Unknown
from sales_dashboard.saga import store_then_commit, upload_then_commit
from sales_dashboard.store.blobs import BlobStore


def test_commit_result_is_returned():
    assert store_then_commit(lambda: "k", lambda k: k + "!", lambda k: None) == "k!"


def test_commit_failure_compensates_once_and_reraises():
    undone = []

    def commit(_):
        raise Conflict("taken")

    with pytest.raises(Conflict):
        store_then_commit(lambda: "k", commit, undone.append)
    assert undone == ["k"]


def test_store_failure_skips_commit_and_compensation():
    calls = []

    def store():
        raise PermissionDenied()

    with pytest.raises(PermissionDenied):
        store_then_commit(store, calls.append, calls.append)
    assert calls == []


def test_compensation_failure_is_logged_not_raised(caplog):
    def commit(_):
        raise Conflict("taken")

    def compensate(_):
        raise RuntimeError("storage down")

    with caplog.at_level(logging.ERROR, logger="sales_dashboard.saga"):
        with pytest.raises(Conflict):
            store_then_commit(lambda: "k", commit, compensate)
    assert "orphaned blob" in caplog.text


def test_upload_then_commit_removes_blob_when_commit_fails(client):
    blobs = BlobStore(client, "uploads")

    def commit(url):
        raise FakeAPIError("42501", "permission denied for table files")

    with pytest.raises(FakeAPIError):
        upload_then_commit(blobs, "k.txt", b"data", "text/plain", commit)
    assert client.storage.objects["uploads"] == {}
    assert ("uploads", "remove") in client.storage.calls


def test_upload_then_commit_passes_public_url(client):
    blobs = BlobStore(client, "uploads")
    url = upload_then_commit(blobs, "k.txt", b"data", "text/plain", lambda u: u)
    assert url.endswith("/uploads/k.txt")
    assert "k.txt" in client.storage.objects["uploads"]


def test_failed_upload_never_commits(client):
    client.storage.fail[("uploads", "upload")] = FakeStorageError("500", "internal", "boom")
    committed = []
    with pytest.raises(Unknown):
        upload_then_commit(BlobStore(client, "uploads"), "k", b"x", None, committed.append)
    assert committed == []
