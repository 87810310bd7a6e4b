import pytest

from fakes import FakeClient
from sales_dashboard.config import Settings
from sales_dashboard.services import Services
from sales_dashboard.store.changes import ChangeFeed


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def settings():
    return Settings(supabase_url="https://fake.supabase.co", supabase_key="anon-key",
                    secret_key="test-secret")


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def services(client, settings, feed):
    svc = Services(settings, client_factory=lambda: client, changes=feed)
    yield svc
    svc.close()


@pytest.fixture
def backend(services):
    return services.backend()


@pytest.fixture
def signed_in(client):
    """The fake auth user every backend call sees."""
    return client.auth.sign_in_as("ada@example.com")
