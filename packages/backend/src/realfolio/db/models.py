"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. List and sub-document fields (amenities, images,
tags, services) are JSON columns, stored as JSONB on PostgreSQL.
Column types are portable so the same models run on SQLite in tests.
"""

import re
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def slugify(title: str) -> str:
    """Lowercase, drop anything but [a-z0-9 -], spaces to dashes, collapse dashes."""
    slug = re.sub(r"[^a-z0-9 -]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    return re.sub(r"-+", "-", slug)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )


# ══════════════════════════════════════════════════════════════
# Identities
# ══════════════════════════════════════════════════════════════


class User(TimestampMixin, Base):
    """A registered admin or agent who can log in.

    Never deleted by the API; last_login moves on every login and
    password_hash on password change.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="agent")
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


# ══════════════════════════════════════════════════════════════
# Owned resources
# ══════════════════════════════════════════════════════════════


class Property(TimestampMixin, Base):
    """A listing. `agent_id` is the creator and is stamped server-side."""

    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_status_featured", "status", "featured"),
        Index("ix_properties_type_price", "type", "price"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    bedrooms: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bathrooms: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    year_built: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    parking: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    amenities: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    images: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )
    slug: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    meta_title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    meta_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    agent: Mapped["User"] = relationship()


class Content(TimestampMixin, Base):
    """A media entry (video, reel, post) published on an external platform."""

    __tablename__ = "content"
    __table_args__ = (
        Index("ix_content_platform_featured", "platform", "featured"),
        Index("ix_content_category_scheduled", "category", "scheduled"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    scheduled: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    agent_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )

    agent: Mapped["User"] = relationship()


# ══════════════════════════════════════════════════════════════
# Site settings (singleton)
# ══════════════════════════════════════════════════════════════


class SiteSettings(TimestampMixin, Base):
    """Contact details and profile copy shown on the public site.

    Only one row is ever used; see SettingsService.get_or_create().
    """

    __tablename__ = "site_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    office_address: Mapped[str] = mapped_column(String(255), nullable=False)
    youtube_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    facebook_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    instagram_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    telegram_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    tiktok_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    whatsapp_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    about: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    services: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    languages: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    experience: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    license: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
