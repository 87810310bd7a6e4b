"""identity.py — Supabase Auth wrapper: current user, sign in/up/out, session restore."""

import logging

from sales_dashboard.errors import PermissionDenied, Unauthenticated, map_backend_error
from sales_dashboard.models import Identity

logger = logging.getLogger(__name__)

SESSION_KEY = "sb_session"


def session_tokens(session):
    """Auth session -> plain dict safe to keep in the Flask session cookie."""
    if session is None:
        return None
    return {"access_token": session.access_token, "refresh_token": session.refresh_token}


class IdentityProvider:
    def __init__(self, client):
        self.client = client

    def _call(self, action, fn, *args):
        try:
            return fn(*args)
        except Exception as e:
            err = map_backend_error(e)
            logger.info("auth %s failed [%s]: %s", action, err.tag, err)
            raise err from e

    def current_user(self):
        """The signed-in Identity, or None."""
        try:
            resp = self._call("get_user", self.client.auth.get_user)
        except (PermissionDenied, Unauthenticated):
            # expired or revoked token
            return None
        user = getattr(resp, "user", None)
        if user is None:
            return None
        return Identity(id=str(user.id), email=user.email or "")

    def require_user(self):
        user = self.current_user()
        if user is None:
            raise Unauthenticated()
        return user

    def restore(self, tokens):
        """Re-attach a session stored by a previous request; returns the refreshed tokens."""
        if not tokens:
            return None
        try:
            resp = self.client.auth.set_session(tokens["access_token"], tokens["refresh_token"])
        except Exception as e:
            logger.info("Stored session rejected: %s", e)
            return None
        return session_tokens(getattr(resp, "session", None))

    def sign_in(self, email, password):
        resp = self._call("sign_in", self.client.auth.sign_in_with_password,
                          {"email": email, "password": password})
        if getattr(resp, "session", None) is None:
            raise Unauthenticated("Sign-in did not return a session")
        return session_tokens(resp.session)

    def sign_up(self, email, password):
        """Returns tokens when the project auto-confirms, None when email confirmation is pending."""
        resp = self._call("sign_up", self.client.auth.sign_up,
                          {"email": email, "password": password})
        return session_tokens(getattr(resp, "session", None))

    def sign_out(self):
        self._call("sign_out", self.client.auth.sign_out)

    def on_session_change(self, callback):
        """callback(event, session); returns a subscription with unsubscribe()."""
        return self.client.auth.on_auth_state_change(callback)
