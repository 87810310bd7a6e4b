"""
services.py — The application's service handle.

Built once in wsgi.py / app.py and passed to create_app(); pages and
callbacks receive it explicitly instead of importing a global client.
Each request opens its own Backend bound to the caller's session tokens.
"""

import logging
import threading
from collections import OrderedDict

from sales_dashboard.aggregate import ChartBinding
from sales_dashboard.config import FILES_TABLE, PROFILES_TABLE, SALES_TABLE
from sales_dashboard.store.blobs import BlobStore
from sales_dashboard.store.changes import ChangeFeed, ChangeWatcher, RealtimeBridge
from sales_dashboard.store.client import client_factory as default_client_factory
from sales_dashboard.store.identity import IdentityProvider
from sales_dashboard.store.records import RecordStore

logger = logging.getLogger(__name__)


class Backend:
    """Per-request handle over one Supabase client."""

    def __init__(self, client, settings, changes=None):
        self.client = client
        self.settings = settings
        self.identity = IdentityProvider(client)
        self.sales = RecordStore(client, SALES_TABLE, changes)
        self.files = RecordStore(client, FILES_TABLE, changes)
        self.profiles = RecordStore(client, PROFILES_TABLE, changes)
        self.reports = BlobStore(client, settings.reports_bucket)
        self.user_files = BlobStore(client, settings.user_files_bucket)
        self.avatars = BlobStore(client, settings.avatar_bucket)
        self.tokens = None


class Services:
    def __init__(self, settings, client_factory=None, changes=None):
        self.settings = settings
        self.client_factory = client_factory or default_client_factory(settings)
        if changes is None:
            bridge = None
            if settings.realtime_enabled and settings.backend_configured:
                bridge = RealtimeBridge(settings.supabase_url, settings.supabase_key)
            changes = ChangeFeed(bridge=bridge)
        self.changes = changes
        self.watchers = {}
        self._bindings = OrderedDict()
        self._lock = threading.Lock()

    def backend(self, tokens=None):
        """Open a Backend; `tokens` are the session tokens kept in the Flask session."""
        backend = Backend(self.client_factory(), self.settings, self.changes)
        if tokens:
            backend.tokens = backend.identity.restore(tokens)
        return backend

    def watcher(self, table, view):
        """The single ChangeWatcher for (table, view), created on first use."""
        key = (table, view)
        with self._lock:
            if key not in self.watchers:
                self.watchers[key] = ChangeWatcher(self.changes, table, view)
            return self.watchers[key]

    def chart_binding(self, view_id, limit=256):
        """The ChartBinding owned by one browser tab (least recently used tabs are dropped)."""
        with self._lock:
            binding = self._bindings.pop(view_id, None)
            if binding is None:
                binding = ChartBinding()
            self._bindings[view_id] = binding
            while len(self._bindings) > limit:
                _, stale = self._bindings.popitem(last=False)
                stale.dispose()
            return binding

    def close(self):
        for watcher in self.watchers.values():
            watcher.close()
        self.watchers.clear()
        for binding in self._bindings.values():
            binding.dispose()
        self._bindings.clear()
        if self.changes.bridge is not None:
            self.changes.bridge.close()
        logger.info("Services closed")
