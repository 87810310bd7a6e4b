"""
changes.py — "Something changed" signals per table.

Signals carry no payload. Delivery is at-least-once and unordered: a local
write and the realtime echo of the same write both publish, and consumers
simply re-list. The first subscription for a table opens a remote realtime
channel; closing the last one removes it again.
"""

import asyncio
import logging
import threading
from collections import defaultdict

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ChangeFeed.subscribe. Close it when the owning view goes away."""

    def __init__(self, feed, table, callback):
        self.feed = feed
        self.table = table
        self.callback = callback
        self.closed = False

    def close(self):
        if not self.closed:
            self.closed = True
            self.feed._unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class ChangeFeed:
    def __init__(self, bridge=None):
        self.bridge = bridge
        self._lock = threading.Lock()
        self._subs = defaultdict(list)
        self._versions = defaultdict(int)

    def subscribe(self, table, callback):
        sub = Subscription(self, table, callback)
        with self._lock:
            first = not self._subs[table]
            self._subs[table].append(sub)
        if first and self.bridge is not None:
            self.bridge.watch(table, self.publish)
        return sub

    def _unsubscribe(self, sub):
        with self._lock:
            subs = self._subs[sub.table]
            if sub in subs:
                subs.remove(sub)
            last = not subs
        if last and self.bridge is not None:
            self.bridge.unwatch(sub.table)

    def subscriber_count(self, table):
        with self._lock:
            return len(self._subs[table])

    def version(self, table):
        with self._lock:
            return self._versions[table]

    def publish(self, table):
        with self._lock:
            self._versions[table] += 1
            subs = list(self._subs[table])
        for sub in subs:
            try:
                sub.callback()
            except Exception:
                logger.exception("Change callback for %s failed", table)


class ChangeWatcher:
    """One subscription per (table, view); counts signals for dcc.Interval polling."""

    def __init__(self, feed, table, view):
        self.table = table
        self.view = view
        self.generation = 0
        self._lock = threading.Lock()
        self._subscription = feed.subscribe(table, self._bump)

    def _bump(self):
        with self._lock:
            self.generation += 1

    @property
    def closed(self):
        return self._subscription.closed

    def close(self):
        self._subscription.close()


class RealtimeBridge:
    """Forwards Supabase postgres_changes events into a ChangeFeed.

    supabase-py only ships realtime on the async client, so the bridge owns
    an event loop on a daemon thread and schedules channel work onto it.
    """

    def __init__(self, url, key, schema="public"):
        self.url = url
        self.key = key
        self.schema = schema
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._loop.run_forever, daemon=True,
                                        name="realtime-bridge")
        self._client = None
        self._channels = {}
        self._thread.start()

    def _run(self, coro, timeout=15):
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    async def _ensure_client(self):
        if self._client is None:
            from supabase import acreate_client
            self._client = await acreate_client(self.url, self.key)
        return self._client

    async def _watch(self, table, publish):
        client = await self._ensure_client()
        channel = client.channel(f"{table}_changes")
        channel.on_postgres_changes("*", schema=self.schema, table=table,
                                    callback=lambda _payload: publish(table))
        await channel.subscribe()
        self._channels[table] = channel
        logger.info("Realtime channel open for %s", table)

    async def _unwatch(self, table):
        channel = self._channels.pop(table, None)
        if channel is not None and self._client is not None:
            await self._client.remove_channel(channel)
            logger.info("Realtime channel removed for %s", table)

    def watch(self, table, publish):
        try:
            self._run(self._watch(table, publish))
        except Exception as e:
            # Local writes still publish; only remote edits go unseen.
            logger.warning("Realtime subscribe for %s failed: %s", table, e)

    def unwatch(self, table):
        try:
            self._run(self._unwatch(table))
        except Exception as e:
            logger.warning("Realtime unsubscribe for %s failed: %s", table, e)

    def close(self):
        for table in list(self._channels):
            self.unwatch(table)
        self._loop.call_soon_threadsafe(self._loop.stop)
