"""
blobs.py — Wrapper over one Supabase Storage bucket.

The adapter enforces no size limit and no key uniqueness; callers check
sizes (check_size) and generate keys (make_object_key) before uploading.
"""

import logging
import mimetypes
import os
import random
import time
from typing import List
from urllib.parse import unquote, urlparse

from sales_dashboard.config import CACHE_CONTROL
from sales_dashboard.errors import SizeLimitExceeded, map_backend_error

logger = logging.getLogger(__name__)


def make_object_key(filename: str, prefix: str = "") -> str:
    """<ms timestamp>-<random>.<ext>, optionally under a prefix."""
    ext = os.path.splitext(filename or "")[1].lower()
    key = f"{int(time.time() * 1000)}-{random.randint(0, 999999):06d}{ext}"
    return f"{prefix.strip('/')}/{key}" if prefix else key


def check_size(size: int, limit: int):
    if size > limit:
        raise SizeLimitExceeded(size, limit)


def guess_content_type(filename: str) -> str:
    return mimetypes.guess_type(filename or "")[0] or "application/octet-stream"


class BlobStore:
    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def _call(self, action, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except Exception as e:
            err = map_backend_error(e)
            logger.warning("%s in bucket %s failed [%s]: %s", action, self.bucket, err.tag, err)
            raise err from e

    def upload(self, key: str, data: bytes, content_type: str = None,
               cache_control: str = CACHE_CONTROL) -> str:
        options = {
            "cache-control": cache_control,
            "content-type": content_type or guess_content_type(key),
            "upsert": "false",
        }
        self._call("upload", self._bucket().upload, key, data, options)
        logger.info("Uploaded %s (%d bytes) to %s", key, len(data), self.bucket)
        return key

    def download(self, key: str) -> bytes:
        return self._call("download", self._bucket().download, key)

    def list(self, prefix: str = "", limit: int = 100, offset: int = 0) -> List[dict]:
        options = {"limit": limit, "offset": offset}
        return self._call("list", self._bucket().list, prefix, options) or []

    def delete(self, keys) -> List[dict]:
        return self._call("delete", self._bucket().remove, list(keys)) or []

    def public_url(self, key: str) -> str:
        return self._bucket().get_public_url(key)

    def key_from_url(self, url: str) -> str:
        """Recover the object key from a public URL produced by public_url."""
        path = unquote(urlparse(url or "").path)
        marker = f"/{self.bucket}/"
        if marker in path:
            return path.split(marker, 1)[1]
        return path.rsplit("/", 1)[-1]
