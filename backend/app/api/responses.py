from __future__ import annotations

from typing import Any, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from app.core.errors import (
    AUTHENTICATION,
    CONNECTION,
    ConfigurationError,
    DispatchError,
    ValidationFailure,
)
from app.schemas.inquiry import InquiryOut

CONTACT_SENT_MESSAGE = "Message sent successfully"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"
INTERNAL_ERROR_MESSAGE = "Internal server error"

_DISPATCH_MESSAGES = {
    AUTHENTICATION: "Email authentication failed. Please check your email credentials in the .env file.",
    CONNECTION: "Connection to email server failed. Please check your internet connection and SMTP settings.",
}
_DISPATCH_FALLBACK = "Failed to send email. Please try again later or contact us directly."


def _failure(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def validation_error(failure: ValidationFailure) -> JSONResponse:
    return _failure(status.HTTP_400_BAD_REQUEST, failure.message, field=failure.field)


def method_not_allowed() -> JSONResponse:
    return _failure(status.HTTP_405_METHOD_NOT_ALLOWED, METHOD_NOT_ALLOWED_MESSAGE)


def configuration_error(error: ConfigurationError) -> JSONResponse:
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, error.message)


def dispatch_error_message(error: DispatchError) -> str:
    if error.category in _DISPATCH_MESSAGES:
        return _DISPATCH_MESSAGES[error.category]
    if error.detail:
        return f"Email sending failed: {error.detail}"
    return _DISPATCH_FALLBACK


def dispatch_error(error: DispatchError) -> JSONResponse:
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, dispatch_error_message(error))


def internal_error(exc: BaseException, *, diagnostics: bool) -> JSONResponse:
    extra = {"error": str(exc)} if diagnostics else {}
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE, **extra)


def http_error(status_code: int, detail: Optional[str]) -> JSONResponse:
    return _failure(status_code, detail or "Request failed")


def contact_sent() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={"success": True, "message": CONTACT_SENT_MESSAGE},
    )


def inquiry_created(inquiry: InquiryOut) -> JSONResponse:
    # emailSent reports that delivery was attempted, not that it succeeded.
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "success": True,
            **inquiry.model_dump(mode="json", by_alias=True),
            "emailSent": True,
        },
    )
