"""Glue shared by the callback modules: per-request backend and upload decoding."""
import base64

import dash_bootstrap_components as dbc
from flask import session

from sales_dashboard.store.identity import SESSION_KEY
from sales_dashboard.theme import TOAST_STYLE


def open_backend(services):
    """Backend bound to the caller's stored session; refreshed tokens are written back."""
    tokens = session.get(SESSION_KEY)
    backend = services.backend(tokens)
    if tokens and backend.tokens is None:
        forget()
    elif backend.tokens and backend.tokens != tokens:
        remember(backend.tokens)
    return backend


def remember(tokens):
    session[SESSION_KEY] = tokens


def forget():
    session.pop(SESSION_KEY, None)


def decode_upload(contents):
    """dcc.Upload data URL -> (mime type, raw bytes)."""
    content_type, content_string = contents.split(",", 1)
    mime = content_type[5:].split(";")[0] if content_type.startswith("data:") else ""
    return mime, base64.b64decode(content_string)


def toast(message, header, icon="success"):
    return dbc.Toast(message, header=header, icon=icon, duration=3000,
                     dismissable=True, style=TOAST_STYLE)
