"""Shared fixtures: an app on in-memory SQLite with a recording mailer."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import replace
from typing import Callable, Iterator, Optional
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import Settings, SmtpConfig
from app.core.errors import DispatchError
from app.main import create_app
from app.services.mailer import SmtpMailer
from app.services.notifications import NotificationMessage


class RecordingMailer:
    """Stands in for SMTP; remembers every message and returns a preset outcome."""

    def __init__(self, error: Optional[DispatchError] = None) -> None:
        self.error = error
        self.sent: list[NotificationMessage] = []

    def send(self, message: NotificationMessage) -> Optional[DispatchError]:
        self.sent.append(message)
        return self.error


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite://",
        SITE_NAME="Swayog Energy",
        NOTIFY_EMAIL="owner@swayog-energy.in",
        EMAIL_FROM="website@swayog-energy.in",
        SMTP=SmtpConfig(host="smtp.swayog-energy.in", port=587, user="website@swayog-energy.in", password="s3cret"),
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def make_client(settings: Settings, mailer: RecordingMailer) -> Iterator[Callable[..., TestClient]]:
    """Build a started client; keyword arguments override fields of ``settings``."""
    with ExitStack() as stack:

        def _make(**overrides) -> TestClient:
            app = create_app(settings=replace(settings, **overrides), mailer=mailer)
            return stack.enter_context(TestClient(app))

        yield _make


@pytest.fixture
def smtp_server() -> Iterator[MagicMock]:
    """Patched SMTP connection that serializes what it is asked to send."""
    with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
        server = MagicMock()
        server.has_extn.return_value = False
        server.send_message.side_effect = lambda mime: mime.as_string()
        smtp_cls.return_value.__enter__.return_value = server
        yield server


@pytest.fixture
def smtp_client(settings: Settings, smtp_server: MagicMock) -> Iterator[TestClient]:
    """Client wired to the real SMTP mailer over the patched connection."""
    app = create_app(settings=settings, mailer=SmtpMailer(settings.SMTP))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def app(client: TestClient) -> FastAPI:
    return client.app


@pytest.fixture
def contact_payload() -> dict:
    return {
        "firstName": "Asha",
        "lastName": "Patil",
        "email": "asha.patil@gmail.com",
        "subject": "Rooftop solar for my home",
        "message": "Hello,\nI would like a quote for a 5 kW rooftop system.",
    }


@pytest.fixture
def inquiry_payload() -> dict:
    return {
        "name": "Ravi Kulkarni",
        "email": "ravi.kulkarni@gmail.com",
        "phone": "+91 98220 12345",
        "customerNo": "170012345678",
        "projectType": "residential",
        "message": "Need a 3 kW on-grid system with net metering.",
        "termsAccepted": True,
    }
