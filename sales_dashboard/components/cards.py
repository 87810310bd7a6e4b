"""Reusable card/section builders."""
from dash import html
import dash_bootstrap_components as dbc
from sales_dashboard.theme import *
from sales_dashboard.errors import RLS_FIX_STEPS


def money(val):
    """Format a number as $X,XXX.XX (convenience for templates)."""
    if val < 0:
        return f"-${abs(val):,.2f}"
    return f"${val:,.2f}"


def section(title, children, color=ORANGE, header_right=None):
    """Titled section card with colored top border."""
    header = [html.Span(title)]
    if header_right is not None:
        header.append(html.Div(header_right, style={"marginLeft": "auto"}))
    return dbc.Card([
        dbc.CardHeader(header, style={"color": color, "fontWeight": "bold", "fontSize": "16px",
                                      "borderBottom": f"2px solid {color}",
                                      "backgroundColor": "transparent", "padding": "12px 16px",
                                      "display": "flex", "alignItems": "center"}),
        dbc.CardBody(children, style={"padding": "16px"}),
    ], className="mb-3")


def status_alert(message, color="danger"):
    """Inline result of an action; None renders nothing."""
    if not message:
        return None
    return dbc.Alert(message, color=color, dismissable=True, className="mb-3")


def permission_panel(message):
    """Remediation panel shown instead of a bare error when row-level security blocks access."""
    return dbc.Alert([
        html.H5("Permission problem", className="alert-heading"),
        html.P(message, style={"fontSize": "13px"}),
        dbc.Accordion([
            dbc.AccordionItem(
                html.Ol([html.Li(step, style={"fontSize": "12px"}) for step in RLS_FIX_STEPS]),
                title="how to fix the access policies",
            ),
        ], start_collapsed=True, flush=True),
    ], color="warning", className="mb-3")


def failure_panel(controller):
    """Pick the right inline panel for a controller's last failure."""
    if not controller.error:
        return None
    if controller.needs_permission_fix:
        return permission_panel(controller.error)
    return status_alert(controller.error)


def empty_state(text):
    return html.P(text, style={"color": DARKGRAY, "fontSize": "13px", "textAlign": "center",
                               "padding": "16px 0", "margin": 0})
