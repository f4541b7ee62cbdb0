from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from app.core.config import SmtpConfig
from app.core.errors import AUTHENTICATION, CONNECTION, GENERIC
from app.services.mailer import SmtpMailer, build_mime_message
from app.services.notifications import NotificationMessage

MESSAGE = NotificationMessage(
    to="owner@swayog-energy.in",
    from_addr="website@swayog-energy.in",
    reply_to="asha.patil@gmail.com",
    subject="Contact Message - Rooftop solar",
    text="plain body",
    html="<p>html body</p>",
)

CONFIG = SmtpConfig(host="smtp.swayog-energy.in", port=587, user="website@swayog-energy.in", password="s3cret", timeout=5)


@pytest.fixture
def smtp():
    with patch("app.services.mailer.smtplib.SMTP") as smtp_cls:
        server = MagicMock()
        server.has_extn.return_value = True
        smtp_cls.return_value.__enter__.return_value = server
        yield smtp_cls, server


def test_mime_message_headers_and_parts():
    mime = build_mime_message(MESSAGE)

    assert mime["To"] == "owner@swayog-energy.in"
    assert mime["From"] == "website@swayog-energy.in"
    assert mime["Reply-To"] == "asha.patil@gmail.com"
    assert mime["Subject"] == "Contact Message - Rooftop solar"
    assert [part.get_content_type() for part in mime.get_payload()] == ["text/plain", "text/html"]


def test_send_success(smtp):
    smtp_cls, server = smtp

    assert SmtpMailer(CONFIG).send(MESSAGE) is None

    smtp_cls.assert_called_once_with("smtp.swayog-energy.in", 587, timeout=5)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("website@swayog-energy.in", "s3cret")
    server.send_message.assert_called_once()


def test_send_without_credentials_skips_login(smtp):
    _, server = smtp

    assert SmtpMailer(SmtpConfig(host="localhost", port=25)).send(MESSAGE) is None

    server.login.assert_not_called()


def test_secure_config_uses_ssl():
    with patch("app.services.mailer.smtplib.SMTP_SSL") as ssl_cls:
        server = ssl_cls.return_value.__enter__.return_value

        error = SmtpMailer(SmtpConfig(host="smtp.gmail.com", port=465, secure=True)).send(MESSAGE)

    assert error is None
    server.starttls.assert_not_called()
    server.send_message.assert_called_once()


def test_authentication_failure(smtp):
    _, server = smtp
    server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"5.7.8 Username and Password not accepted")

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "EAUTH"
    assert error.category == AUTHENTICATION
    assert error.response_code == 535
    assert error.command == "AUTH"
    assert "Username and Password not accepted" in error.detail
    server.send_message.assert_not_called()


def test_connection_refused(smtp):
    smtp_cls, _ = smtp
    smtp_cls.side_effect = ConnectionRefusedError(111, "Connection refused")

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "ECONNECTION"
    assert error.category == CONNECTION


def test_timeout(smtp):
    smtp_cls, _ = smtp
    smtp_cls.side_effect = TimeoutError("timed out")

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "ETIMEDOUT"
    assert error.category == CONNECTION


def test_server_disconnect(smtp):
    _, server = smtp
    server.send_message.side_effect = smtplib.SMTPServerDisconnected("Connection unexpectedly closed")

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "ECONNECTION"
    assert error.command == "DATA"


def test_rejected_message_is_generic(smtp):
    _, server = smtp
    server.send_message.side_effect = smtplib.SMTPDataError(554, b"Message rejected as spam")

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "EMESSAGE"
    assert error.category == GENERIC
    assert error.response_code == 554
    assert error.detail == "Message rejected as spam"


def test_single_attempt_only(smtp):
    smtp_cls, server = smtp
    server.send_message.side_effect = smtplib.SMTPRecipientsRefused({"owner@swayog-energy.in": (550, b"no such user")})

    error = SmtpMailer(CONFIG).send(MESSAGE)

    assert error.code == "EMESSAGE"
    assert smtp_cls.call_count == 1
    assert server.send_message.call_count == 1


def test_unserializable_header_is_a_dispatch_error(smtp):
    _, server = smtp
    server.send_message.side_effect = lambda mime: mime.as_string()
    message = NotificationMessage(
        to=MESSAGE.to,
        from_addr=MESSAGE.from_addr,
        reply_to=MESSAGE.reply_to,
        subject="Hello\r\nBcc: attacker@evil.com",
        text=MESSAGE.text,
        html=MESSAGE.html,
    )

    error = SmtpMailer(CONFIG).send(message)

    assert error is not None
    assert error.code == "EMESSAGE"
    assert error.category == GENERIC
    assert error.command == "DATA"
