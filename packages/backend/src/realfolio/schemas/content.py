"""Pydantic schemas for media content entries.

`views` and `likes` are counters owned by the server; they are not
accepted on create or update.
"""

import re
import uuid
from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from realfolio.schemas.common import AgentSummary, PatchModel

Platform = Literal["youtube", "tiktok", "facebook", "instagram", "telegram"]
Category = Literal[
    "market-insights",
    "investment-tips",
    "neighborhood-guides",
    "home-buying",
    "property-tours",
    "client-testimonials",
]

URL_RE = re.compile(
    r"^https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)$"
)


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not URL_RE.match(value):
        raise ValueError("Please provide a valid URL if specified")
    return value


class ContentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    platform: Platform
    duration: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[Category] = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    scheduled: Optional[datetime] = None

    check_url = field_validator("url")(_check_url)


class ContentUpdate(PatchModel):
    NOT_NULL: ClassVar[tuple[str, ...]] = ("title", "platform", "tags", "featured")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    platform: Optional[Platform] = None
    duration: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    category: Optional[Category] = None
    tags: Optional[list[str]] = None
    featured: Optional[bool] = None
    scheduled: Optional[datetime] = None
    agent_id: Optional[uuid.UUID] = None

    check_url = field_validator("url")(_check_url)


class ContentRead(BaseModel):
    id: uuid.UUID
    title: str
    platform: str
    duration: Optional[str]
    url: Optional[str]
    thumbnail: Optional[str]
    category: Optional[str]
    tags: list[str]
    featured: bool
    scheduled: Optional[datetime]
    views: int
    likes: int
    agent_id: uuid.UUID
    agent: Optional[AgentSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
