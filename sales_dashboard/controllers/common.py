"""Shared error bookkeeping for controllers that report failures inline."""

import logging

from sales_dashboard.errors import PermissionDenied, user_message

logger = logging.getLogger(__name__)


class ErrorState:
    """`failure` is the last DashboardError, `error` its inline message."""
    failure = None
    error = None

    @property
    def needs_permission_fix(self):
        return isinstance(self.failure, PermissionDenied)

    def _clear(self):
        self.failure = None
        self.error = None

    def _fail(self, err, action):
        self.failure = err
        self.error = user_message(err, action)
        logger.info("%s: [%s] %s", action, err.tag, err)
