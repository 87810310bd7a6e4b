"""
File repository controllers.

FileRepositoryController keeps a `files` metadata row for every blob in the
reports bucket; UserFilesController is the plain bucket browser over
`user-files` with no metadata table.
"""

import logging
import time

from sales_dashboard.config import CATEGORY_ALL, FILE_CATEGORIES, MAX_FILE_SIZE
from sales_dashboard.controllers.common import ErrorState
from sales_dashboard.errors import DashboardError
from sales_dashboard.models import FileRecord, normalize_category
from sales_dashboard.saga import upload_then_commit
from sales_dashboard.store.blobs import check_size, guess_content_type, make_object_key

logger = logging.getLogger(__name__)

PREVIEW_TYPES = {"application/pdf", "text/plain", "text/html", "text/css", "text/javascript"}


def format_size(size):
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def is_previewable(record):
    mime = (record.type or "").lower()
    return mime.startswith("image/") or mime in PREVIEW_TYPES


class FileRepositoryController(ErrorState):
    def __init__(self, records, blobs, identity, max_size=MAX_FILE_SIZE):
        self.records = records
        self.blobs = blobs
        self.identity = identity
        self.max_size = max_size
        self.files = []
        self.pending_delete = None

    def refresh(self):
        self._clear()
        try:
            self.identity.require_user()
            rows = self.records.list(order_by="created_at", ascending=False)
        except DashboardError as e:
            self.files = []
            self._fail(e, "Failed to load files")
            return False
        self.files = [FileRecord.from_row(r) for r in rows]
        return True

    def filtered(self, category=CATEGORY_ALL, search=""):
        out = list(self.files)
        if category and category != CATEGORY_ALL:
            out = [f for f in out if f.category == category]
        if search:
            term = search.lower()
            out = [f for f in out if term in f.name.lower()]
        return out

    def upload(self, filename, data, content_type=None, category=CATEGORY_ALL):
        """Size check, then blob upload + metadata insert; the blob is deleted if the insert fails."""
        self._clear()
        try:
            check_size(len(data), self.max_size)
            user = self.identity.require_user()
            key = make_object_key(filename)
            content_type = content_type or guess_content_type(filename)

            def _commit(url):
                record = FileRecord(
                    id=None, name=filename, size=len(data), type=content_type, url=url,
                    category=normalize_category(category), user_id=user.id,
                )
                rows = self.records.insert(record.to_insert())
                return FileRecord.from_row(rows[0]) if rows else record

            record = upload_then_commit(self.blobs, key, data, content_type, _commit)
        except DashboardError as e:
            self._fail(e, "File upload failed")
            return None
        self.refresh()
        return record

    # ── Delete (confirmation required) ───────────────────────────────────────
    def request_delete(self, record):
        self.pending_delete = record

    def cancel_delete(self):
        self.pending_delete = None

    def confirm_delete(self):
        if self.pending_delete is None:
            return False
        record, self.pending_delete = self.pending_delete, None
        self._clear()
        try:
            self.records.delete(record.id)
        except DashboardError as e:
            self._fail(e, "Failed to delete file")
            return False
        key = self.blobs.key_from_url(record.url)
        if key:
            try:
                self.blobs.delete([key])
            except DashboardError as e:
                # row already gone; an orphaned blob is never listed
                logger.warning("Blob %s left behind after deleting %s: %s", key, record.id, e)
        self.refresh()
        return True

    def update_category(self, record, category):
        self._clear()
        if category not in FILE_CATEGORIES or category == CATEGORY_ALL:
            raise ValueError(f"Unknown category: {category!r}")
        try:
            self.records.update(record.id, {"category": category})
        except DashboardError as e:
            self._fail(e, "Failed to update category")
            return False
        self.refresh()
        return True

    def download(self, record):
        self._clear()
        try:
            return self.blobs.download(self.blobs.key_from_url(record.url))
        except DashboardError as e:
            self._fail(e, "Download failed")
            return None


class UserFilesController(ErrorState):
    def __init__(self, blobs, max_size=MAX_FILE_SIZE):
        self.blobs = blobs
        self.max_size = max_size
        self.files = []

    def refresh(self):
        self._clear()
        try:
            self.files = [f for f in self.blobs.list("", limit=100, offset=0) if f.get("name")]
        except DashboardError as e:
            self.files = []
            self._fail(e, "Failed to list files")
            return False
        return True

    def upload(self, filename, data, content_type=None):
        self._clear()
        key = f"{int(time.time() * 1000)}_{filename}"
        try:
            check_size(len(data), self.max_size)
            self.blobs.upload(key, data, content_type=content_type or guess_content_type(filename))
        except DashboardError as e:
            self._fail(e, "Upload failed")
            return None
        self.refresh()
        return key

    def download(self, name):
        self._clear()
        try:
            return self.blobs.download(name)
        except DashboardError as e:
            self._fail(e, "Download failed")
            return None
