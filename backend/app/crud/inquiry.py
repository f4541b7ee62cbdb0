from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import PersistenceError
from app.models.inquiry import Inquiry
from app.schemas.inquiry import InquiryCreate


def create_inquiry(db: Session, data: InquiryCreate) -> Inquiry:
    inquiry = Inquiry(
        name=data.name,
        email=str(data.email),
        phone=data.phone,
        customer_no=data.customer_no,
        project_type=data.project_type,
        message=data.message,
        terms_accepted=data.terms_accepted,
    )
    try:
        db.add(inquiry)
        db.commit()
        db.refresh(inquiry)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Could not store inquiry: {exc}") from exc
    return inquiry
