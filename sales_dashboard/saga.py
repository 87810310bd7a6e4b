"""
saga.py — Two-phase write across object storage and the relational store.

Phase 1 stores the blob, phase 2 commits the metadata. If phase 2 fails the
compensating action runs once, best-effort: its own failure is logged and
swallowed (never retried) and the phase-2 error is what the caller sees.
"""

import logging

logger = logging.getLogger(__name__)


def store_then_commit(store, commit, compensate):
    """Run store() then commit(stored); on commit failure run compensate(stored) and re-raise."""
    stored = store()
    try:
        return commit(stored)
    except Exception:
        try:
            compensate(stored)
            logger.info("Compensated after failed commit: %r", stored)
        except Exception as comp_err:
            logger.error("Compensation failed, orphaned blob %r: %s", stored, comp_err)
        raise


def upload_then_commit(blobs, key, data, content_type, commit):
    """Blob upload + commit(public_url) with compensating delete of `key`."""
    def _store():
        blobs.upload(key, data, content_type=content_type)
        return key

    return store_then_commit(
        _store,
        lambda k: commit(blobs.public_url(k)),
        lambda k: blobs.delete([k]),
    )
