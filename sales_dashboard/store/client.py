"""
client.py — Supabase client construction.

One client per request/session; the dashboard never keeps a process-wide
singleton. Session persistence and token auto-refresh are off because the
Flask session, not the client, owns the tokens.
"""

import logging

from supabase import ClientOptions, create_client

logger = logging.getLogger(__name__)


class BackendNotConfigured(RuntimeError):
    pass


def create_supabase_client(settings):
    """Return a Supabase client, or raise if credentials are missing."""
    if not settings.backend_configured:
        raise BackendNotConfigured("Set SUPABASE_URL and SUPABASE_KEY in .env first.")
    options = ClientOptions(
        postgrest_client_timeout=settings.backend_timeout,
        storage_client_timeout=int(settings.backend_timeout),
        auto_refresh_token=False,
        persist_session=False,
    )
    return create_client(settings.supabase_url, settings.supabase_key, options=options)


def client_factory(settings):
    """Zero-arg callable the Services handle uses to open per-request clients."""
    def _factory():
        return create_supabase_client(settings)
    return _factory
