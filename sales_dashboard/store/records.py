"""
records.py — Thin request/response wrapper over one Supabase table.

No caching and no retry: each call is one round-trip, and any failure is
raised as a tagged DashboardError for the caller to show inline.
"""

import logging
from typing import List

from sales_dashboard.errors import NotFound, map_backend_error

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, client, table: str, changes=None):
        self.client = client
        self.table = table
        self.changes = changes

    def _execute(self, query, action):
        try:
            return query.execute()
        except Exception as e:
            err = map_backend_error(e)
            logger.warning("%s on %s failed [%s]: %s", action, self.table, err.tag, err)
            raise err from e

    def _changed(self):
        if self.changes is not None:
            self.changes.publish(self.table)

    def list(self, order_by: str = "id", ascending: bool = True) -> List[dict]:
        query = self.client.table(self.table).select("*").order(order_by, desc=not ascending)
        return self._execute(query, "list").data or []

    def get(self, record_id, key: str = "id"):
        query = self.client.table(self.table).select("*").eq(key, record_id).limit(1)
        rows = self._execute(query, "get").data or []
        return rows[0] if rows else None

    def insert(self, records) -> List[dict]:
        """Insert one dict or a list of dicts in a single request."""
        query = self.client.table(self.table).insert(records)
        rows = self._execute(query, "insert").data or []
        self._changed()
        return rows

    def _missing(self, record_id):
        # row-level security hides rows instead of rejecting the write
        return NotFound(f"No {self.table} record with id {record_id}, "
                        "or your account is not allowed to change it")

    def update(self, record_id, patch: dict) -> dict:
        query = self.client.table(self.table).update(patch).eq("id", record_id)
        rows = self._execute(query, "update").data or []
        if not rows:
            raise self._missing(record_id)
        self._changed()
        return rows[0]

    def delete(self, record_id) -> dict:
        query = self.client.table(self.table).delete().eq("id", record_id)
        rows = self._execute(query, "delete").data or []
        if not rows:
            raise self._missing(record_id)
        self._changed()
        return rows[0]

    def upsert(self, record: dict, on_conflict: str = "id", ignore_duplicates: bool = False) -> List[dict]:
        query = self.client.table(self.table).upsert(
            record, on_conflict=on_conflict, ignore_duplicates=ignore_duplicates)
        rows = self._execute(query, "upsert").data or []
        if rows:
            self._changed()
        return rows

    def subscribe_changes(self, callback):
        """Register a payload-less change callback; close() the returned Subscription."""
        if self.changes is None:
            raise RuntimeError(f"No change feed configured for {self.table}")
        return self.changes.subscribe(self.table, callback)
