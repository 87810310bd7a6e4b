"""Settings page — avatar, profile fields and notification preferences."""
from dash import html, dcc
import dash_bootstrap_components as dbc

from sales_dashboard.theme import *
from sales_dashboard.components.cards import section, failure_panel
from sales_dashboard.components.thumbnail import avatar, initials_for


def _field(label, component):
    return html.Div([
        dbc.Label(label, style={"color": GRAY, "fontSize": "12px"}),
        component,
    ], className="mb-3")


def layout(controller):
    """Build the Settings page from an activated ProfileController."""
    profile = controller.profile
    user = controller.user
    if profile is None:
        return html.Div(failure_panel(controller))

    prefs = []
    if profile.preferences.notifications:
        prefs.append("notifications")
    if profile.preferences.theme:
        prefs.append("theme")

    return html.Div([
        html.Div(id="profile-status"),
        html.Div(id="profile-toast"),

        section("AVATAR", [
            html.Div([
                html.Div(avatar(profile.avatar_url, initials_for(profile.name, user.email), size=96),
                         id="profile-avatar"),
                dcc.Upload(
                    id="avatar-upload",
                    children=dbc.Button("Change photo", color="secondary", size="sm", outline=True),
                    accept="image/*",
                    className="ms-3",
                ),
            ], style={"display": "flex", "alignItems": "center"}),
            html.Small("PNG, JPG or GIF up to 5 MB.", style={"color": DARKGRAY}),
        ], color=PINK),

        section("PROFILE", [
            _field("Name", dbc.Input(id="profile-name", value=profile.name, type="text")),
            _field("Email", dbc.Input(id="profile-email", value=user.email, disabled=True)),
            _field("Company", dbc.Input(id="profile-company", value=profile.company, type="text")),
            _field("Role", html.Div(profile.role, style={"color": WHITE, "fontSize": "13px"})),
        ], color=BLUE),

        section("PREFERENCES", [
            dbc.Checklist(
                id="profile-preferences",
                options=[
                    {"label": "Email notifications", "value": "notifications"},
                    {"label": "Dark mode", "value": "theme"},
                ],
                value=prefs,
                switch=True,
            ),
        ], color=TEAL),

        html.Div([
            dbc.Button("Save changes", id="profile-save", color="primary", className="me-2"),
            dcc.Link(dbc.Button("Cancel", color="secondary", outline=True), href="/"),
        ]),
    ])
