# backend/tests/conftest.py
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.api_v1.endpoints.contact import get_mail_settings, get_transport_factory
from app.core.config import MailSettings
from app.main import app
from app.services.mail_transport import MailDeliveryError

FIXED_NOW = datetime(2024, 3, 1, 15, 30, 5, 123000, tzinfo=timezone.utc)


class RecordingTransport:
    """Stands in for the SMTP relay; records what would have been sent."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []
        self.settings_seen = []

    def factory(self, mail_settings):
        self.settings_seen.append(mail_settings)
        return self

    def send(self, mail):
        if self.fail:
            raise MailDeliveryError("relay refused connection")
        self.sent.append(mail)


@pytest.fixture
def mail_settings():
    return MailSettings(
        host="smtp.example.com",
        port=465,
        user="relay@example.com",
        password="secret",
        mail_to="sales@example.com",
        mail_from="noreply@example.com",
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def client(mail_settings, transport):
    app.dependency_overrides[get_mail_settings] = lambda: mail_settings
    app.dependency_overrides[get_transport_factory] = lambda: transport.factory
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
