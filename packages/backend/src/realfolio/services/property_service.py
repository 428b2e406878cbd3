"""Property service — listings, slugs and image galleries."""

import structlog

from realfolio.db.models import Property, slugify
from realfolio.services.resource_service import OwnedResourceService
from realfolio.storage.files import StoredFile

logger = structlog.get_logger()


class PropertyService(OwnedResourceService):
    model = Property
    noun = "property"
    search_columns = ("title", "description", "location")
    sortable = frozenset(
        {
            "created_at",
            "updated_at",
            "title",
            "price",
            "location",
            "type",
            "status",
            "featured",
            "bedrooms",
        }
    )

    def _before_save(self, item: Property, changed: set[str]) -> None:
        if "title" in changed:
            # Titles with no latin letters or digits get no slug; NULLs never collide
            item.slug = slugify(item.title) or None

    async def add_images(self, item: Property, files: list[StoredFile]) -> Property:
        """Append uploaded images; the first becomes primary if none exist yet.

        `item` must already have passed fetch_for_mutation().
        """
        images = [
            {"url": f.url, "filename": f.filename, "is_primary": False}
            for f in files
        ]
        if not item.images and images:
            images[0]["is_primary"] = True
        item.images = [*item.images, *images]
        await self._commit()
        logger.info("property.images_added", id=str(item.id), count=len(images))
        return await self._load(item.id)
