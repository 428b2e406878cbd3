"""Site settings service — one document, created on first read."""

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.db.models import SiteSettings

logger = structlog.get_logger()

DEFAULT_SETTINGS = {
    "phone": "+251 918 410 705",
    "email": "mequanintalemu@gmail.com",
    "office_address": "Bole, Addis Ababa, Ethiopia",
}


class SettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _first(self) -> SiteSettings | None:
        result = await self.db.execute(
            select(SiteSettings).order_by(SiteSettings.created_at).limit(1)
        )
        return result.scalars().first()

    async def get_or_create(self) -> SiteSettings:
        settings = await self._first()
        if settings is None:
            settings = SiteSettings(**DEFAULT_SETTINGS)
            self.db.add(settings)
            await self.db.commit()
            logger.info("settings.created_defaults", id=str(settings.id))
        return settings

    async def update(self, changes: dict[str, Any]) -> SiteSettings:
        """Upsert: patch the existing document, or create it from defaults + changes."""
        settings = await self._first()
        if settings is None:
            settings = SiteSettings(**{**DEFAULT_SETTINGS, **changes})
            self.db.add(settings)
        else:
            for name, value in changes.items():
                setattr(settings, name, value)
        await self.db.commit()
        await self.db.refresh(settings)
        logger.info("settings.updated", fields=sorted(changes))
        return settings
