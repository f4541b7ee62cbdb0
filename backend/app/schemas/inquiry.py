from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from pydantic_core import PydanticCustomError


class InquiryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(title="Name", min_length=1)
    email: EmailStr = Field(title="Email")
    phone: str = Field(title="Phone number", min_length=1)
    customer_no: Optional[str] = Field(default=None, alias="customerNo", title="Consumer ID")
    project_type: str = Field(alias="projectType", title="Project type", min_length=1)
    message: str = Field(title="Message", min_length=1)
    terms_accepted: bool = Field(alias="termsAccepted", title="Terms acceptance")

    @field_validator("terms_accepted")
    @classmethod
    def _terms_must_be_accepted(cls, value: bool) -> bool:
        if not value:
            raise PydanticCustomError("terms_not_accepted", "You must accept the terms and conditions")
        return value


class InquiryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: EmailStr
    phone: str
    customer_no: Optional[str] = Field(default=None, alias="customerNo")
    project_type: str = Field(alias="projectType")
    message: str
    terms_accepted: bool = Field(alias="termsAccepted")
    created_at: datetime = Field(alias="createdAt")

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        # sqlite hands back naive datetimes; they were written as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
