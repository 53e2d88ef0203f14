"""Pytest configuration and shared fixtures."""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.main import app
from storefront.services.admin_session import AdminSessionStore, get_admin_session_store
from storefront.services.chatbot import (
    ConversationRegistry,
    get_conversation_registry,
)
from storefront.services.notifications import (
    MockNotificationService,
    RealNotificationService,
    get_notification_service,
)

FAST_TYPING_DELAY = 0.01


def make_settings(**overrides) -> Settings:
    """Settings isolated from the environment and any .env file."""
    values = {
        "twilio_account_sid": None,
        "twilio_auth_token": None,
        "twilio_phone_number": None,
        "sendgrid_api_key": None,
        "notifications_mock": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeTwilioMessages:
    """Stands in for twilio_client.messages."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(sid="SM1234567890abcdef")


class FakeTwilioClient:
    def __init__(self, error=None):
        self.messages = FakeTwilioMessages(error)


class FakeSendGridClient:
    def __init__(self, error=None, status_code=202):
        self.error = error
        self.status_code = status_code
        self.sent = []

    def send(self, message):
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            status_code=self.status_code,
            headers={"X-Message-Id": "sg-message-id-1"},
        )


@pytest.fixture
def mock_service():
    """Mock notification service that never fails and never sleeps."""
    return MockNotificationService(failure_rate=0.0, min_latency=0.0, max_latency=0.0)


@pytest.fixture
def unconfigured_service():
    """Real notification service without any provider credentials."""
    return RealNotificationService(make_settings())


@pytest.fixture
def registry():
    registry = ConversationRegistry(typing_delay=FAST_TYPING_DELAY, max_sessions=10)
    yield registry
    registry.close_all()


@pytest.fixture
def admin_store(tmp_path):
    return AdminSessionStore(tmp_path / "admin_session.json", username="admin", password="s3cret")


@pytest.fixture
def client(mock_service, registry, admin_store):
    """TestClient with fast chat replies and in-memory notifications."""
    app.dependency_overrides[get_notification_service] = lambda: mock_service
    app.dependency_overrides[get_conversation_registry] = lambda: registry
    app.dependency_overrides[get_admin_session_store] = lambda: admin_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
