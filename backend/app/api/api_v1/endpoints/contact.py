from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api import responses
from app.api.deps import get_json_body, get_mailer, get_settings
from app.core.config import Settings, get_receiver_email, get_sender_email, get_smtp_config
from app.core.errors import ConfigurationError, ValidationFailure
from app.schemas.contact import ContactCreate
from app.services.mailer import Mailer
from app.services.notifications import compose_contact_notification
from app.services.validation import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("")
def submit_contact(
    body: Optional[Any] = Depends(get_json_body),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
) -> JSONResponse:
    logger.info("Received contact form request")
    contact = validate_submission(ContactCreate, body)
    if isinstance(contact, ValidationFailure):
        logger.info("Contact form rejected: %s (%s)", contact.message, contact.field)
        return responses.validation_error(contact)

    receiver = get_receiver_email(settings)
    if isinstance(receiver, ConfigurationError):
        logger.error("%s not configured, contact message not sent", receiver.setting)
        return responses.configuration_error(receiver)

    sender = get_sender_email(settings)
    if isinstance(sender, ConfigurationError):
        logger.error("%s not configured, contact message not sent", sender.setting)
        return responses.configuration_error(sender)

    logger.info("Email configuration check: %s", {**get_smtp_config(settings).describe(), "target_email": receiver})

    message = compose_contact_notification(
        contact,
        sender=sender,
        receiver=receiver,
        site_name=settings.SITE_NAME,
    )
    error = mailer.send(message)
    if error is not None:
        logger.error("Failed to send contact notification: %s", error.as_log_fields())
        return responses.dispatch_error(error)

    logger.info("Contact form email sent")
    return responses.contact_sent()
