"""Content API routes.

Learn: Same gate layout as properties. Two public writes exist on
purpose: reading one entry bumps `views`, and PUT /{id}/like bumps
`likes`. Neither requires a token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.api.responses import paginated, success
from realfolio.auth.dependencies import require_writer
from realfolio.auth.policy import Identity
from realfolio.config import settings
from realfolio.db.engine import get_db
from realfolio.schemas.content import ContentCreate, ContentRead, ContentUpdate
from realfolio.services.content_service import ContentService
from realfolio.services.resource_service import DEFAULT_SORT, ListQuery

router = APIRouter(prefix="/content")


def _svc(db: AsyncSession = Depends(get_db)) -> ContentService:
    return ContentService(db)


@router.get("")
async def list_content(
    search: Optional[str] = Query(None, description="Search in title"),
    platform: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    sort: str = Query(DEFAULT_SORT),
    flat: bool = Query(False),
    svc: ContentService = Depends(_svc),
):
    query = ListQuery(
        filters={"platform": platform, "category": category, "featured": featured},
        search=search,
        page=page,
        limit=min(limit or settings.default_page_size, settings.max_page_size),
        sort=sort,
    )
    return paginated(await svc.list(query), ContentRead, flat=flat)


@router.get("/{content_id}")
async def get_content(content_id: str, svc: ContentService = Depends(_svc)):
    """Get one entry and count the view."""
    return success(ContentRead.model_validate(await svc.view(content_id)))


@router.post("", status_code=201)
async def create_content(
    body: ContentCreate,
    identity: Identity = Depends(require_writer),
    svc: ContentService = Depends(_svc),
):
    item = await svc.create(body.model_dump(), creator_id=identity.id)
    return success(ContentRead.model_validate(item))


@router.put("/{content_id}")
async def update_content(
    content_id: str,
    body: ContentUpdate,
    identity: Identity = Depends(require_writer),
    svc: ContentService = Depends(_svc),
):
    item = await svc.update(content_id, body.changes(), identity)
    return success(ContentRead.model_validate(item))


@router.delete("/{content_id}")
async def delete_content(
    content_id: str,
    identity: Identity = Depends(require_writer),
    svc: ContentService = Depends(_svc),
):
    await svc.delete(content_id, identity)
    return success({}, message="Content deleted successfully")


@router.put("/{content_id}/like")
async def like_content(content_id: str, svc: ContentService = Depends(_svc)):
    item = await svc.like(content_id)
    return success(ContentRead.model_validate(item), message="Content liked successfully")
