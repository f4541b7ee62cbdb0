from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api import responses
from app.api.deps import get_json_body, get_mailer, get_settings
from app.core.config import Settings, get_receiver_email, get_sender_email, get_smtp_config
from app.core.errors import AUTHENTICATION, CONNECTION, ConfigurationError, ValidationFailure
from app.crud.inquiry import create_inquiry
from app.db.session import get_db
from app.models.inquiry import Inquiry
from app.schemas.inquiry import InquiryCreate, InquiryOut
from app.services.mailer import Mailer
from app.services.notifications import compose_inquiry_notification
from app.services.validation import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inquiries", tags=["inquiries"])

_TROUBLESHOOTING = {
    AUTHENTICATION: "Authentication error: check EMAIL_USER and EMAIL_PASS",
    CONNECTION: "Connection error: check EMAIL_HOST and EMAIL_PORT",
}


def _notify(inquiry: Inquiry, settings: Settings, receiver: str, mailer: Mailer) -> None:
    sender = get_sender_email(settings)
    if isinstance(sender, ConfigurationError):
        logger.error("Inquiry %s stored but %s is not configured, no notification sent", inquiry.id, sender.setting)
        return

    message = compose_inquiry_notification(
        inquiry,
        sender=sender,
        receiver=receiver,
        site_name=settings.SITE_NAME,
    )
    error = mailer.send(message)
    if error is None:
        logger.info("Inquiry %s notification sent", inquiry.id)
        return

    logger.error("Failed to send inquiry %s notification: %s", inquiry.id, error.as_log_fields())
    logger.warning("Inquiry %s saved but email notification failed, check SMTP settings", inquiry.id)
    if error.category in _TROUBLESHOOTING:
        logger.error(_TROUBLESHOOTING[error.category])


@router.post("")
def submit_inquiry(
    body: Optional[Any] = Depends(get_json_body),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
) -> JSONResponse:
    logger.info("Received inquiry request")
    data = validate_submission(InquiryCreate, body)
    if isinstance(data, ValidationFailure):
        logger.info("Inquiry rejected: %s (%s)", data.message, data.field)
        return responses.validation_error(data)

    # PersistenceError propagates to the app-level handler; nothing is sent for it.
    inquiry = create_inquiry(db, data)
    logger.info("Inquiry saved: id=%s name=%s", inquiry.id, inquiry.name)

    receiver = get_receiver_email(settings)
    if isinstance(receiver, ConfigurationError):
        logger.error("%s not configured, inquiry %s stored without notification", receiver.setting, inquiry.id)
        return responses.configuration_error(receiver)

    logger.info("Email configuration check: %s", {**get_smtp_config(settings).describe(), "target_email": receiver})
    _notify(inquiry, settings, receiver, mailer)

    return responses.inquiry_created(InquiryOut.model_validate(inquiry))
