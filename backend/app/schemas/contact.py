from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", title="First name", min_length=1)
    last_name: str = Field(alias="lastName", title="Last name", min_length=1)
    email: EmailStr = Field(title="Email")
    subject: str = Field(title="Subject", min_length=1)
    message: str = Field(title="Message", min_length=1)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
