"""Login page — email/password sign in and sign up."""
from dash import html
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *


def layout(settings=None):
    return html.Div([
        dbc.Card(dbc.CardBody([
            html.H4("Sign in", style={"color": WHITE, "fontWeight": "bold"}),
            html.P("Use your dashboard account.", style={"color": GRAY, "fontSize": "13px"}),
            html.Div(id="login-status"),
            dbc.Input(id="login-email", type="email", placeholder="Email", className="mb-2"),
            dbc.Input(id="login-password", type="password", placeholder="Password",
                      className="mb-3"),
            dbc.Button("Sign in", id="login-submit", color="primary", className="me-2"),
            dbc.Button("Create account", id="login-signup", color="secondary", outline=True),
        ]), style={"borderTop": f"3px solid {BLUE}", "maxWidth": "420px", "margin": "60px auto"}),
    ])
