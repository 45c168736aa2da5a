"""
Contact domain: Pydantic V2 schemas for the public contact form.
"""
from __future__ import annotations

from pydantic import ConfigDict, EmailStr, Field

from shared.models import CamelModel


class ContactRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=30)
    organization: str | None = Field(default=None, max_length=200)
    subject: str | None = Field(default=None, max_length=200)
    message: str = Field(min_length=1, max_length=5000)
