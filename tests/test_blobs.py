import re
import typing
from typing import List

import pytest

from fakes import FakeStorageError
from sales_dashboard.config import MIB
from sales_dashboard.errors import Conflict, NotFound, PermissionDenied, SizeLimitExceeded
from sales_dashboard.store.blobs import BlobStore, check_size, guess_content_type, make_object_key


@pytest.fixture
def bucket(client):
    return BlobStore(client, "uploads")


def test_object_key_shape():
    assert re.fullmatch(r"\d{13}-\d{6}\.pdf", make_object_key("Report.PDF"))
    assert re.fullmatch(r"avatars/u1/\d{13}-\d{6}\.png", make_object_key("me.png", prefix="avatars/u1"))
    assert re.fullmatch(r"\d{13}-\d{6}", make_object_key("README"))


def test_check_size():
    check_size(50 * MIB, 50 * MIB)
    with pytest.raises(SizeLimitExceeded) as info:
        check_size(60 * MIB, 50 * MIB)
    assert "50MB" in str(info.value)


def test_guess_content_type():
    assert guess_content_type("a.csv") == "text/csv"
    assert guess_content_type("blob") == "application/octet-stream"


def test_upload_sends_cache_and_no_upsert(bucket, client):
    bucket.upload("k.txt", b"hello", content_type="text/plain")
    stored = client.storage.objects["uploads"]["k.txt"]
    assert stored["data"] == b"hello"
    assert stored["options"] == {"cache-control": "3600", "content-type": "text/plain",
                                 "upsert": "false"}


def test_duplicate_key_is_conflict(bucket):
    bucket.upload("k.txt", b"1")
    with pytest.raises(Conflict):
        bucket.upload("k.txt", b"2")


def test_download_missing_is_not_found(bucket):
    with pytest.raises(NotFound):
        bucket.download("nope")


def test_list_delete_and_public_url(bucket):
    bucket.upload("a.txt", b"a")
    bucket.upload("b.txt", b"b")
    assert [e["name"] for e in bucket.list()] == ["a.txt", "b.txt"]
    bucket.delete(["a.txt"])
    assert [e["name"] for e in bucket.list()] == ["b.txt"]
    url = bucket.public_url("b.txt")
    assert bucket.key_from_url(url) == "b.txt"


def test_key_from_url_keeps_folders(bucket):
    url = "https://x.supabase.co/storage/v1/object/public/uploads/avatars/u1/1-000001.png"
    assert bucket.key_from_url(url) == "avatars/u1/1-000001.png"


def test_storage_permission_error(bucket, client):
    client.storage.fail[("uploads", "upload")] = FakeStorageError(
        "403", "Unauthorized", "new row violates row-level security policy")
    with pytest.raises(PermissionDenied):
        bucket.upload("x", b"x")


def test_list_and_delete_annotate_builtin_list():
    for method in (BlobStore.list, BlobStore.delete):
        assert typing.get_type_hints(method)["return"] == List[dict]
