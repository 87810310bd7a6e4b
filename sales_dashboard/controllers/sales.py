"""
Sales management controller — draft form, record list, stats, search, import commit.

The list is replaced on every fetch and the stats are recomputed from the
whole list each time, never patched incrementally.
"""

import logging

from sales_dashboard.controllers.common import ErrorState
from sales_dashboard.errors import DashboardError
from sales_dashboard.models import SalesDraft, SalesRecord, SalesStats

logger = logging.getLogger(__name__)


def format_value(value):
    """100.0 -> '100', 60.5 -> '60.5' (how the table shows and searches values)."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def matches(record, term):
    """Case-insensitive substring match over name and stringified value."""
    if not term:
        return True
    term = term.lower()
    return term in record.name.lower() or term in format_value(record.value)


class SalesController(ErrorState):
    def __init__(self, store):
        self.store = store
        self.records = []
        self.stats = SalesStats()
        self.draft = SalesDraft()
        self.search = ""
        self.pending_delete = None

    # ── Fetch ────────────────────────────────────────────────────────────────
    def refresh(self, order_by="id", ascending=False):
        """Reload every record; the table view shows newest first."""
        self._clear()
        try:
            rows = self.store.list(order_by=order_by, ascending=ascending)
        except DashboardError as e:
            self._fail(e, "Failed to load data")
            self.records = []
            self.stats = SalesStats()
            return False
        self.records = [SalesRecord.from_row(r) for r in rows]
        self.stats = SalesStats.from_records(self.records)
        return True

    def filtered(self, term=None):
        term = self.search if term is None else term
        return [r for r in self.records if matches(r, term)]

    # ── Draft ────────────────────────────────────────────────────────────────
    def set_draft(self, name, value, record_id=None):
        self.draft = SalesDraft(name=name or "", value=value, id=record_id)

    def edit(self, record):
        self.draft = SalesDraft(name=record.name, value=record.value, id=record.id)

    def reset_draft(self):
        self.draft = SalesDraft()

    def _validate_draft(self):
        name = (self.draft.name or "").strip()
        if not name:
            return None, "Name is required"
        try:
            value = float(self.draft.value)
        except (TypeError, ValueError):
            return None, "Amount must be a number"
        return {"name": name, "value": value}, None

    def submit(self):
        """Insert a new draft or update the one being edited; clears the draft and re-lists on success."""
        self._clear()
        payload, problem = self._validate_draft()
        if problem:
            self.error = problem
            return False
        editing = self.draft.editing
        try:
            if editing:
                self.store.update(self.draft.id, payload)
            else:
                self.store.insert(payload)
        except DashboardError as e:
            self._fail(e, "Update failed" if editing else "Create failed")
            return False
        self.reset_draft()
        self.refresh()
        return True

    # ── Delete (confirmation required) ───────────────────────────────────────
    def request_delete(self, record_id):
        self.pending_delete = record_id

    def cancel_delete(self):
        self.pending_delete = None

    def confirm_delete(self):
        if self.pending_delete is None:
            return False
        record_id, self.pending_delete = self.pending_delete, None
        self._clear()
        try:
            self.store.delete(record_id)
        except DashboardError as e:
            self._fail(e, "Delete failed")
            return False
        if self.draft.id == record_id:
            self.reset_draft()
        self.refresh()
        return True

    # ── Import ───────────────────────────────────────────────────────────────
    def commit_import(self, batch):
        """One bulk insert for the whole batch, then re-list. Returns the row count."""
        self._clear()
        if not len(batch):
            return 0
        try:
            self.store.insert(batch.to_insert())
        except DashboardError as e:
            self._fail(e, "Import failed")
            return 0
        logger.info("Imported %d sales rows from %s", len(batch), batch.source or "upload")
        self.refresh()
        return len(batch)

    # ── dcc.Store round trip ─────────────────────────────────────────────────
    def records_state(self):
        return [r.to_store() for r in self.records]

    def load_records(self, data):
        """Rehydrate the cached list from a dcc.Store payload (stats follow the list)."""
        self.records = [SalesRecord.from_row(r) for r in (data or [])]
        self.stats = SalesStats.from_records(self.records)
