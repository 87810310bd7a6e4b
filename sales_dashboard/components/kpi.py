"""KPI pills for the sales stats row."""
from dash import html
import dash_bootstrap_components as dbc
from sales_dashboard.theme import *
from sales_dashboard.components.cards import money


def _badge(symbol, color):
    return html.Span(symbol, style={
        "width": "34px", "height": "34px", "borderRadius": "50%", "flexShrink": "0",
        "display": "inline-flex", "alignItems": "center", "justifyContent": "center",
        "backgroundColor": f"{color}33", "color": color, "fontWeight": "bold",
    })


def kpi_pill(symbol, label, value_id, color, value=""):
    """Stat pill whose value element (`value_id`) is filled in by a callback."""
    return dbc.Card(dbc.CardBody([
        _badge(symbol, color),
        html.Div([
            html.Small(label, style={"color": GRAY, "letterSpacing": "1px",
                                     "textTransform": "uppercase"}),
            html.Div(value, id=value_id, style={"color": WHITE, "fontSize": "26px",
                                                "fontWeight": "bold", "fontFamily": "monospace"}),
        ], style={"marginLeft": "12px"}),
    ], style={"display": "flex", "alignItems": "center", "padding": "12px 16px"}),
        style={"borderLeft": f"4px solid {color}", "flex": "1", "minWidth": "150px"},
        className="kpi-pill")


def sales_kpis():
    """Total / average / count row shown above the sales table."""
    return html.Div([
        kpi_pill("$", "Total sales", "sales-total", GREEN, money(0)),
        kpi_pill("~", "Average sale", "sales-average", BLUE, money(0)),
        kpi_pill("#", "Records", "sales-count", ORANGE, "0"),
    ], style={"display": "flex", "gap": "12px", "flexWrap": "wrap"}, className="mb-3")
