from __future__ import annotations

from app.schemas.contact import ContactCreate
from app.schemas.inquiry import InquiryCreate, InquiryOut

__all__ = [
    "ContactCreate",
    "InquiryCreate",
    "InquiryOut",
]
