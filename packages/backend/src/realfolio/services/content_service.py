"""Content service — media entries with view and like counters.

Counters are bumped with a single `UPDATE ... SET views = views + 1` so
concurrent readers never lose increments.
"""

import uuid

from sqlalchemy import update

from realfolio.db.models import Content
from realfolio.errors import NotFound
from realfolio.services.resource_service import OwnedResourceService, parse_object_id


class ContentService(OwnedResourceService):
    model = Content
    noun = "content"
    search_columns = ("title",)
    sortable = frozenset(
        {
            "created_at",
            "updated_at",
            "title",
            "platform",
            "category",
            "featured",
            "scheduled",
            "views",
            "likes",
        }
    )

    async def _increment(self, resource_id: str | uuid.UUID, counter: str) -> Content:
        oid = parse_object_id(resource_id)
        if oid is None:
            raise NotFound("Content not found")
        column = getattr(Content, counter)
        result = await self.db.execute(
            update(Content)
            .where(Content.id == oid)
            .values({counter: column + 1})
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFound("Content not found")
        await self.db.commit()
        return await self._load(oid)

    async def view(self, resource_id: str | uuid.UUID) -> Content:
        """Read one entry, counting the read as a view."""
        return await self._increment(resource_id, "views")

    async def like(self, resource_id: str | uuid.UUID) -> Content:
        return await self._increment(resource_id, "likes")
