"""
Sales Dashboard — sales records, spreadsheet import, file repository, profile settings.
Run:  python -m sales_dashboard.app
Open: http://127.0.0.1:8070
"""

import atexit
import logging
import os

import dash
from dash import html, dcc
import dash_bootstrap_components as dbc

from sales_dashboard.config import configure_logging, load_settings
from sales_dashboard.services import Services

logger = logging.getLogger(__name__)

# ── Sidebar navigation ──────────────────────────────────────────────────────
NAV_ITEMS = [
    [("Overview", "\U0001f4ca", "/"), ("Sales", "\U0001f4b0", "/sales")],
    [("Files", "\U0001f4c1", "/files")],
    [("Settings", "\u2699\ufe0f", "/settings")],
]


def _nav_link(label, icon, href):
    return dbc.NavLink([html.Span(icon, className="nav-icon"), label], href=href, active="exact")


def _build_sidebar():
    """Brand block plus one link group per NAV_ITEMS entry, separated by dividers."""
    groups = []
    for i, group in enumerate(NAV_ITEMS):
        if i:
            groups.append(html.Hr(className="sidebar-divider"))
        groups.extend(_nav_link(*item) for item in group)
    return html.Div([
        html.Div([html.H4("SALES"), html.Small("Business Dashboard")], className="sidebar-brand"),
        dbc.Nav(groups, vertical=True, pills=True),
    ], className="sidebar")


# ── App layout ───────────────────────────────────────────────────────────────
def serve_layout():
    return html.Div([
        dcc.Location(id="url", refresh=False),
        dcc.Location(id="redirect", refresh=True),

        # Sidebar
        _build_sidebar(),

        # Main content area
        html.Div([
            # Header
            html.Div([
                html.Div([
                    html.H3("SALES DASHBOARD"),
                    html.Div("Sales, files and team settings in one place",
                             className="header-subtitle"),
                ]),
                html.Div(id="header-user", style={"marginLeft": "auto"}),
            ], className="app-header"),

            # Page content (rendered by routing callback)
            html.Div(id="page-content"),
        ], className="main-content"),
    ])


def create_app(services):
    """Build the Dash app around an explicit Services handle."""
    app = dash.Dash(
        __name__,
        suppress_callback_exceptions=True,
        external_stylesheets=[
            dbc.themes.DARKLY,
            "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap",
        ],
        assets_folder=os.path.join(os.path.dirname(__file__), "assets"),
        title="Sales Dashboard",
    )
    app.server.secret_key = services.settings.secret_key
    app.layout = serve_layout

    # ── Register callbacks ───────────────────────────────────────────────
    from sales_dashboard.callbacks import navigation_cb, auth_cb, sales_cb, chart_cb, files_cb, profile_cb
    for module in (navigation_cb, auth_cb, sales_cb, chart_cb, files_cb, profile_cb):
        module.register_callbacks(app, services)

    atexit.register(services.close)
    return app


# ── Run ──────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    settings = load_settings()
    configure_logging(settings.log_level)
    if not settings.backend_configured:
        logger.warning("SUPABASE_URL / SUPABASE_KEY are not set; pages will ask for configuration")
    app = create_app(Services(settings))
    print(f"\n  Sales Dashboard")
    print(f"  http://127.0.0.1:{settings.port}\n")
    app.run(debug=False, host="0.0.0.0", port=settings.port)
