"""Schemas for the singleton site settings document."""

import re
import uuid
from datetime import datetime
from typing import ClassVar, Optional

from pydantic import BaseModel, Field, field_validator

from realfolio.schemas.common import PatchModel

EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


class SiteSettingsUpdate(PatchModel):
    NOT_NULL: ClassVar[tuple[str, ...]] = (
        "phone", "email", "office_address", "services", "languages",
    )

    phone: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    office_address: Optional[str] = Field(None, min_length=1)
    youtube_url: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    telegram_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    whatsapp_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    about: Optional[str] = Field(None, max_length=2000)
    services: Optional[list[str]] = None
    languages: Optional[list[str]] = None
    experience: Optional[str] = None
    license: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not EMAIL_RE.match(value):
            raise ValueError("Please enter a valid email")
        return value


class SiteSettingsRead(BaseModel):
    id: uuid.UUID
    phone: str
    email: str
    office_address: str
    youtube_url: Optional[str]
    facebook_url: Optional[str]
    instagram_url: Optional[str]
    telegram_url: Optional[str]
    tiktok_url: Optional[str]
    whatsapp_url: Optional[str]
    linkedin_url: Optional[str]
    about: Optional[str]
    services: list[str]
    languages: list[str]
    experience: Optional[str]
    license: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
