import base64

import httpx
import pytest
from dash import no_update
from flask import session

from fakes import FakeAPIError
from sales_dashboard.aggregate import by_name
from sales_dashboard.app import NAV_ITEMS, create_app, serve_layout
from sales_dashboard.callbacks.auth_cb import authenticate
from sales_dashboard.callbacks.chart_cb import load_chart_records
from sales_dashboard.callbacks.helpers import decode_upload, open_backend
from sales_dashboard.callbacks.navigation_cb import render_route
from sales_dashboard.config import Settings
from sales_dashboard.controllers.sales import SalesController
from sales_dashboard.services import Services
from sales_dashboard.store.identity import SESSION_KEY


@pytest.fixture
def app(services):
    return create_app(services)


@pytest.fixture
def request_ctx(app):
    with app.server.test_request_context("/"):
        yield


def _ids(component):
    """Every component id in a layout tree."""
    found = []
    stack = [component]
    while stack:
        node = stack.pop()
        if isinstance(node, (list, tuple)):
            stack.extend(node)
            continue
        if node is None or isinstance(node, (str, int, float)):
            continue
        if getattr(node, "id", None) is not None:
            found.append(node.id)
        stack.append(getattr(node, "children", None))
    return found


def test_layout_has_routing_shell(app):
    ids = _ids(serve_layout())
    for needed in ("url", "redirect", "page-content", "header-user"):
        assert needed in ids
    assert app.server.secret_key == "test-secret"
    assert [href for group in NAV_ITEMS for _, _, href in group] == ["/", "/sales", "/files", "/settings"]


def test_login_page_renders_without_backend(services, request_ctx):
    page, redirect, header = render_route(services, "/login")
    assert "login-submit" in _ids(page)
    assert redirect is no_update


def test_unknown_path_is_404(services, request_ctx):
    page, redirect, _ = render_route(services, "/nowhere")
    assert "404" in str(page)


def test_signed_out_visitors_are_sent_to_login(services, request_ctx):
    page, redirect, header = render_route(services, "/sales")
    assert redirect == "/login"
    assert header is None


@pytest.mark.parametrize("path,marker", [
    ("/", "sales-chart"),
    ("/sales", "sales-table"),
    ("/files", "file-table"),
    ("/settings", "profile-save"),
])
def test_signed_in_pages_render(services, request_ctx, signed_in, path, marker):
    page, redirect, header = render_route(services, path)
    assert marker in _ids(page)
    assert redirect is no_update
    assert "sign-out" in _ids(header)


@pytest.mark.parametrize("path", ["/", "/sales", "/settings"])
def test_session_check_timeout_renders_inline(services, client, request_ctx, signed_in, path):
    client.auth.fail["get_user"] = httpx.ReadTimeout("slow")
    page, redirect, header = render_route(services, path)
    assert redirect is no_update
    assert header is None
    assert "did not answer in time" in str(page)


def test_profile_load_failure_keeps_page_usable(services, client, request_ctx, signed_in):
    client.db.fail[("profiles", "select")] = FakeAPIError("XX000", "profiles table unavailable")
    page, redirect, header = render_route(services, "/sales")
    assert "sales-table" in _ids(page)
    assert "Failed to load profile" in str(page)
    assert "sign-out" in _ids(header)


def test_chart_lists_categories_in_first_sale_order(services, backend, request_ctx):
    backend.sales.insert({"name": "A", "value": 1})
    backend.sales.insert({"name": "B", "value": 2})
    assert list(by_name(load_chart_records(services).records)) == ["A", "B"]

    table = SalesController(backend.sales)
    table.refresh()
    assert [r.name for r in table.records] == ["B", "A"]


def test_unconfigured_backend_shows_notice(request_ctx):
    svc = Services(Settings())
    page, _, _ = render_route(svc, "/")
    assert "Backend not configured" in str(page)


def test_sign_in_keeps_tokens_in_session(services, client, request_ctx):
    client.auth.add_account("ada@example.com", "secret", user_id="u-1")
    redirect, status = authenticate(services, "login-submit", "ada@example.com", "secret")
    assert redirect == "/"
    assert session[SESSION_KEY]["access_token"] == "access-u-1"

    client.auth.user = None
    assert open_backend(services).identity.current_user().id == "u-1"


def test_rejected_session_is_forgotten(services, request_ctx):
    session[SESSION_KEY] = {"access_token": "forged", "refresh_token": "x"}
    open_backend(services)
    assert SESSION_KEY not in session


def test_sign_in_failure_is_inline(services, client, request_ctx):
    redirect, status = authenticate(services, "login-submit", "ada@example.com", "wrong")
    assert redirect is no_update
    assert "Sign in failed" in str(status)
    assert SESSION_KEY not in session


def test_decode_upload():
    payload = base64.b64encode(b"name,value\nA,1\n").decode()
    mime, data = decode_upload(f"data:text/csv;base64,{payload}")
    assert mime == "text/csv"
    assert data == b"name,value\nA,1\n"
