from __future__ import annotations

import logging
import smtplib
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

from app.core.config import SmtpConfig
from app.core.errors import DispatchError
from app.services.notifications import NotificationMessage

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, message: NotificationMessage) -> Optional[DispatchError]: ...


def build_mime_message(message: NotificationMessage) -> MIMEMultipart:
    mime = MIMEMultipart("alternative")
    mime["Subject"] = message.subject
    mime["From"] = message.from_addr
    mime["To"] = message.to
    mime["Reply-To"] = message.reply_to
    mime.attach(MIMEText(message.text, "plain", "utf-8"))
    mime.attach(MIMEText(message.html, "html", "utf-8"))
    return mime


def _response_text(exc: smtplib.SMTPResponseException) -> str:
    raw = exc.smtp_error
    if isinstance(raw, bytes):
        return raw.decode("utf-8", "replace")
    return str(raw)


class SmtpMailer:
    """Sends one notification per call over SMTP.

    A single attempt is made. Transport problems come back as a
    :class:`DispatchError` instead of being raised, so callers decide
    whether a failed delivery fails the request.
    """

    def __init__(self, config: SmtpConfig) -> None:
        self.config = config

    def _connect(self) -> smtplib.SMTP:
        if self.config.secure:
            return smtplib.SMTP_SSL(self.config.host, self.config.port, timeout=self.config.timeout)
        return smtplib.SMTP(self.config.host, self.config.port, timeout=self.config.timeout)

    def send(self, message: NotificationMessage) -> Optional[DispatchError]:
        command = "CONN"
        try:
            with self._connect() as server:
                if not self.config.secure:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        command = "STARTTLS"
                        server.starttls()
                        server.ehlo()
                if self.config.user and self.config.password:
                    command = "AUTH"
                    server.login(self.config.user, self.config.password)
                command = "DATA"
                server.send_message(build_mime_message(message))
        except smtplib.SMTPAuthenticationError as exc:
            return DispatchError(
                code="EAUTH",
                detail=_response_text(exc),
                response_code=exc.smtp_code,
                command="AUTH",
            )
        except (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected) as exc:
            return DispatchError(
                code="ECONNECTION",
                detail=str(exc),
                response_code=getattr(exc, "smtp_code", None),
                command=command,
            )
        except smtplib.SMTPResponseException as exc:
            return DispatchError(
                code="EMESSAGE",
                detail=_response_text(exc),
                response_code=exc.smtp_code,
                command=command,
            )
        except smtplib.SMTPException as exc:
            return DispatchError(code="EMESSAGE", detail=str(exc), command=command)
        except (MessageError, ValueError) as exc:
            # message could not be serialized, e.g. a header with an embedded line break
            return DispatchError(code="EMESSAGE", detail=str(exc), command=command)
        except TimeoutError as exc:
            return DispatchError(code="ETIMEDOUT", detail=str(exc) or "Connection timed out", command=command)
        except OSError as exc:
            return DispatchError(code="ECONNECTION", detail=str(exc), command=command)

        logger.info("Notification sent to %s (reply-to %s)", message.to, message.reply_to)
        return None
