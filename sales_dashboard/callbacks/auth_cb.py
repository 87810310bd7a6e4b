"""Login page callbacks — sign in and sign up."""
import logging

from dash import Input, Output, State, callback_context, no_update

from sales_dashboard.callbacks.helpers import open_backend, remember
from sales_dashboard.components.cards import status_alert
from sales_dashboard.errors import DashboardError, user_message
from sales_dashboard.store.client import BackendNotConfigured

logger = logging.getLogger(__name__)


def authenticate(services, action, email, password):
    """Run sign in / sign up; returns (redirect href, status)."""
    email = (email or "").strip()
    if not email or not password:
        return no_update, status_alert("Email and password are required", color="warning")
    try:
        identity = open_backend(services).identity
        if action == "login-signup":
            tokens = identity.sign_up(email, password)
            if tokens is None:
                return no_update, status_alert(
                    "Account created. Check your email to confirm it, then sign in.",
                    color="info")
        else:
            tokens = identity.sign_in(email, password)
    except BackendNotConfigured as e:
        return no_update, status_alert(str(e), color="warning")
    except DashboardError as e:
        verb = "Sign up failed" if action == "login-signup" else "Sign in failed"
        return no_update, status_alert(user_message(e, verb))
    remember(tokens)
    logger.info("Signed in %s", email)
    return "/", None


def register_callbacks(app, services):
    @app.callback(
        Output("redirect", "href", allow_duplicate=True),
        Output("login-status", "children"),
        Input("login-submit", "n_clicks"),
        Input("login-signup", "n_clicks"),
        State("login-email", "value"),
        State("login-password", "value"),
        prevent_initial_call=True,
    )
    def login(n_login, n_signup, email, password):
        trigger = callback_context.triggered_id
        if trigger is None or not (n_login or n_signup):
            return no_update, no_update
        return authenticate(services, trigger, email, password)
