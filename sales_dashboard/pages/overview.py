"""Overview page — sales chart with a bar / pie / trend switch."""
import uuid

from dash import html, dcc
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *
from sales_dashboard.aggregate import CHART_MODES
from sales_dashboard.components.cards import section


def layout(settings):
    """Build the Overview page. The chart itself is bound by chart_cb."""
    mode_switch = dbc.RadioItems(
        id="chart-mode",
        options=[{"label": label, "value": mode} for mode, label in CHART_MODES.items()],
        value="bar",
        inline=True,
        inputClassName="me-1",
        labelStyle={"fontSize": "13px", "marginRight": "14px"},
    )
    return html.Div([
        html.P("Live view of every sale recorded in the dashboard.",
               style={"color": GRAY, "fontSize": "13px"}),
        html.Div(id="chart-status"),
        section("SALES CHART", [
            dcc.Loading(dcc.Graph(id="sales-chart", config={"displayModeBar": False}),
                        type="dot", color=BLUE),
        ], color=BLUE, header_right=mode_switch),

        dcc.Store(id="chart-records"),
        dcc.Store(id="chart-feed-gen"),
        dcc.Store(id="chart-view-id", data=uuid.uuid4().hex),
        dcc.Interval(id="chart-poll", interval=settings.change_poll_ms),
    ])
