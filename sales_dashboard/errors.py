"""
errors.py — Error taxonomy shared by the ingestor, store adapters and controllers.

Every failure that reaches a view is a DashboardError subclass carrying a
short `tag` and a `user_message` that the page renders inline.
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    tag = "Unknown"
    default_message = "Something went wrong"

    def __init__(self, message=None, *, cause=None):
        super().__init__(message or self.default_message)
        self.cause = cause

    @property
    def user_message(self):
        return str(self)


# ── Ingestion ────────────────────────────────────────────────────────────────

class UnsupportedFormat(DashboardError):
    tag = "UnsupportedFormat"
    default_message = "Please upload a .csv or .xlsx file"


class EmptyFile(DashboardError):
    tag = "EmptyFile"
    default_message = "The file contains no data"


class MissingColumns(DashboardError):
    tag = "MissingColumns"
    default_message = "Invalid layout: the file must contain 'name' and 'value' columns"


class InvalidRow(DashboardError):
    tag = "InvalidRow"

    def __init__(self, index, reason="", *, cause=None):
        self.index = index
        msg = f"Row {index + 1} is invalid"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, cause=cause)


# ── Backend ──────────────────────────────────────────────────────────────────

class PermissionDenied(DashboardError):
    tag = "PermissionDenied"
    default_message = "Permission denied: your account cannot access this data"


class NotFound(DashboardError):
    tag = "NotFound"
    default_message = "The record no longer exists"


class Conflict(DashboardError):
    tag = "Conflict"
    default_message = "The record already exists"


class RequestTimeout(DashboardError):
    tag = "RequestTimeout"
    default_message = "The backend did not answer in time"


class Unauthenticated(DashboardError):
    tag = "Unauthenticated"
    default_message = "Not signed in or the session has expired, please sign in again"


class SizeLimitExceeded(DashboardError):
    tag = "SizeLimitExceeded"

    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File size cannot exceed {limit / 1024 / 1024:.0f}MB "
            f"(current file: {size / 1024 / 1024:.2f}MB)"
        )


class Unknown(DashboardError):
    tag = "Unknown"


# ── Mapping ──────────────────────────────────────────────────────────────────

_PERMISSION_CODES = {"42501", "PGRST301", "PGRST302", "401", "403"}
_NOT_FOUND_CODES = {"PGRST116", "PGRST205", "404", "NoSuchKey"}
_CONFLICT_CODES = {"23505", "409", "Duplicate"}
_PERMISSION_WORDS = ("permission denied", "security policy", "row-level security", "unauthorized")


def _error_fields(exc):
    """Pull (code, status, message) out of postgrest / storage / auth exceptions."""
    code = getattr(exc, "code", None)
    status = getattr(exc, "status", None) or getattr(exc, "status_code", None)
    message = getattr(exc, "message", None)
    # storage3 raises StorageException(dict)
    if exc.args and isinstance(exc.args[0], dict):
        raw = exc.args[0]
        code = code or raw.get("code") or raw.get("error")
        status = status or raw.get("statusCode")
        message = message or raw.get("message")
    return (
        str(code) if code is not None else "",
        str(status) if status is not None else "",
        str(message or exc),
    )


def map_backend_error(exc):
    """Translate a backend exception into the dashboard taxonomy."""
    if isinstance(exc, DashboardError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeout(cause=exc)
    code, status, message = _error_fields(exc)
    lowered = message.lower()
    if code in _PERMISSION_CODES or status in ("401", "403") \
            or any(w in lowered for w in _PERMISSION_WORDS):
        return PermissionDenied(f"Permission denied: {message}", cause=exc)
    if code in _CONFLICT_CODES or status == "409" or "duplicate key" in lowered:
        return Conflict(message, cause=exc)
    if code in _NOT_FOUND_CODES or status == "404" or "not found" in lowered:
        return NotFound(message, cause=exc)
    return Unknown(message, cause=exc)


def user_message(exc, action=""):
    """Inline text for a failed action, e.g. user_message(e, "Delete failed")."""
    err = map_backend_error(exc)
    if action:
        return f"{action}: {err.user_message}"
    return err.user_message


RLS_FIX_STEPS = [
    "Sign in to the Supabase dashboard for this project.",
    "Open the SQL editor from the left-hand menu.",
    "Paste the row-level security policies for the 'files', 'sales' and 'profiles' tables.",
    "Run the statements.",
    "Reload this page. Contact an administrator if the problem persists.",
]
