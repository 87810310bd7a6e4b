import pytest

from fakes import FakeAPIError
from sales_dashboard.errors import Unauthenticated, Unknown
from sales_dashboard.store.identity import IdentityProvider


@pytest.fixture
def identity(client):
    client.auth.add_account("ada@example.com", "secret", user_id="u-1")
    return IdentityProvider(client)


def test_no_user_when_signed_out(identity):
    assert identity.current_user() is None
    with pytest.raises(Unauthenticated):
        identity.require_user()


def test_sign_in_returns_tokens(identity):
    tokens = identity.sign_in("ada@example.com", "secret")
    assert tokens == {"access_token": "access-u-1", "refresh_token": "refresh-u-1"}
    assert identity.current_user().email == "ada@example.com"


def test_bad_password(identity):
    with pytest.raises(Unknown) as info:
        identity.sign_in("ada@example.com", "nope")
    assert "Invalid login credentials" in str(info.value)


def test_sign_up_with_pending_confirmation(identity, client):
    client.auth.confirm_signups = False
    assert identity.sign_up("new@example.com", "pw") is None
    assert identity.current_user() is None


def test_sign_up_auto_confirmed(identity):
    assert identity.sign_up("new@example.com", "pw")["access_token"].startswith("access-")


def test_restore_and_sign_out(identity, client):
    tokens = identity.sign_in("ada@example.com", "secret")
    identity.sign_out()
    assert identity.current_user() is None
    assert identity.restore(tokens) == tokens
    assert identity.current_user().id == "u-1"


def test_restore_rejects_unknown_tokens(identity):
    assert identity.restore({"access_token": "forged", "refresh_token": "x"}) is None
    assert identity.restore(None) is None


def test_expired_token_reads_as_signed_out(identity, client):
    client.auth.user = client.auth.accounts["ada@example.com"][1]
    client.auth.fail["get_user"] = FakeAPIError("401", "JWT expired")
    assert identity.current_user() is None


def test_session_change_callback(identity):
    events = []
    sub = identity.on_session_change(lambda event, session: events.append(event))
    identity.sign_in("ada@example.com", "secret")
    identity.sign_out()
    sub.unsubscribe()
    identity.sign_in("ada@example.com", "secret")
    assert events == ["SIGNED_IN", "SIGNED_OUT"]


def test_services_restore_session(services, client):
    client.auth.add_account("ada@example.com", "secret", user_id="u-1")
    tokens = services.backend().identity.sign_in("ada@example.com", "secret")
    client.auth.user = None
    backend = services.backend(tokens)
    assert backend.tokens == tokens
    assert backend.identity.current_user().id == "u-1"
