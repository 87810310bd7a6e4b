"""Page routing callback — auth gate, page rendering and the header user menu."""
import logging

from dash import html, Input, Output, no_update
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *
from sales_dashboard.callbacks.helpers import open_backend, forget
from sales_dashboard.components.cards import failure_panel, status_alert
from sales_dashboard.components.thumbnail import avatar, initials_for
from sales_dashboard.controllers.profile import ProfileController
from sales_dashboard.errors import DashboardError, Unauthenticated
from sales_dashboard.pages import overview, sales, files, settings, login
from sales_dashboard.store.client import BackendNotConfigured

logger = logging.getLogger(__name__)

PAGES = {
    "/": overview,
    "/sales": sales,
    "/files": files,
    "/settings": settings,
}


def _not_found(pathname):
    return html.Div([
        html.H3("404 — Page Not Found", style={"color": RED}),
        html.P(f"No page at '{pathname}'"),
    ], style={"padding": "40px"})


def _not_configured(err):
    return html.Div([
        html.H3("Backend not configured", style={"color": ORANGE}),
        status_alert(str(err), color="warning"),
    ], style={"padding": "40px"})


def _unavailable(controller):
    return html.Div([
        html.H3("Dashboard unavailable", style={"color": ORANGE}),
        failure_panel(controller),
    ], style={"padding": "40px"})


def user_menu(controller):
    """Header block: avatar, email, role and a sign-out button."""
    user, profile = controller.user, controller.profile
    name = profile.name if profile else ""
    return html.Div([
        avatar(profile.avatar_url if profile else "", initials_for(name, user.email), size=32),
        html.Div([
            html.Div(name or user.email, style={"color": WHITE, "fontSize": "13px"}),
            html.Div(controller.role or "", style={"color": DARKGRAY, "fontSize": "11px",
                                                   "textTransform": "uppercase"}),
        ], style={"marginLeft": "10px", "marginRight": "14px"}),
        dbc.Button("Sign out", id="sign-out", color="secondary", size="sm", outline=True),
    ], style={"display": "flex", "alignItems": "center"})


def render_route(services, pathname):
    """(page content, redirect href, header user area) for `pathname`."""
    pathname = pathname or "/"
    if pathname == "/login":
        return login.layout(services.settings), no_update, None
    if pathname not in PAGES:
        return _not_found(pathname), no_update, no_update

    try:
        backend = open_backend(services)
    except BackendNotConfigured as e:
        return _not_configured(e), no_update, None

    controller = ProfileController(backend.identity, backend.profiles, backend.avatars,
                                   services.settings.max_avatar_size)
    try:
        controller.activate()
    except Unauthenticated:
        return html.Div(), "/login", None
    if controller.user is None:
        return _unavailable(controller), no_update, None

    if pathname == "/settings":
        page = settings.layout(controller)
    else:
        page = PAGES[pathname].layout(services.settings)
        if controller.profile is None:
            page = html.Div([failure_panel(controller), page])
    return page, no_update, user_menu(controller)


def register_callbacks(app, services):
    @app.callback(
        Output("page-content", "children"),
        Output("redirect", "href"),
        Output("header-user", "children"),
        Input("url", "pathname"),
    )
    def route_page(pathname):
        return render_route(services, pathname)

    @app.callback(
        Output("redirect", "href", allow_duplicate=True),
        Input("sign-out", "n_clicks"),
        prevent_initial_call=True,
    )
    def sign_out(n_clicks):
        if not n_clicks:
            return no_update
        try:
            open_backend(services).identity.sign_out()
        except (DashboardError, BackendNotConfigured) as e:
            logger.warning("Sign-out failed, dropping the local session anyway: %s", e)
        forget()
        return "/login"
