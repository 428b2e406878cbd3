"""Property API routes.

Learn: Reads are public. Every mutating route depends on `require_writer`
(token + role gate) before the handler runs; the service then applies the
ownership gate after loading the row.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.api.responses import paginated, success
from realfolio.auth.dependencies import require_writer
from realfolio.auth.policy import Identity
from realfolio.config import settings
from realfolio.db.engine import get_db
from realfolio.errors import ValidationFailed
from realfolio.schemas.property import (
    PropertyCreate,
    PropertyRead,
    PropertyUpdate,
)
from realfolio.services.property_service import PropertyService
from realfolio.services.resource_service import DEFAULT_SORT, ListQuery
from realfolio.storage.files import LocalFileStorage, UploadRejected

router = APIRouter(prefix="/properties")


def _svc(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage.from_settings(settings)


@router.get("")
async def list_properties(
    search: Optional[str] = Query(None, description="Search title, description, location"),
    type_: Optional[str] = Query(None, alias="type"),
    status: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    bedrooms: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    sort: str = Query(DEFAULT_SORT),
    flat: bool = Query(False, description="Return a bare array"),
    svc: PropertyService = Depends(_svc),
):
    query = ListQuery(
        filters={"type": type_, "status": status, "featured": featured, "bedrooms": bedrooms},
        search=search,
        page=page,
        limit=min(limit or settings.default_page_size, settings.max_page_size),
        sort=sort,
    )
    return paginated(await svc.list(query), PropertyRead, flat=flat)


@router.get("/{property_id}")
async def get_property(property_id: str, svc: PropertyService = Depends(_svc)):
    return success(PropertyRead.model_validate(await svc.get(property_id)))


@router.post("", status_code=201)
async def create_property(
    body: PropertyCreate,
    identity: Identity = Depends(require_writer),
    svc: PropertyService = Depends(_svc),
):
    item = await svc.create(body.model_dump(), creator_id=identity.id)
    return success(PropertyRead.model_validate(item))


@router.put("/{property_id}")
async def update_property(
    property_id: str,
    body: PropertyUpdate,
    identity: Identity = Depends(require_writer),
    svc: PropertyService = Depends(_svc),
):
    item = await svc.update(property_id, body.changes(), identity)
    return success(PropertyRead.model_validate(item))


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    identity: Identity = Depends(require_writer),
    svc: PropertyService = Depends(_svc),
):
    await svc.delete(property_id, identity)
    return success({}, message="Property deleted successfully")


@router.put("/{property_id}/images")
async def upload_property_images(
    property_id: str,
    images: Optional[list[UploadFile]] = File(None),
    identity: Identity = Depends(require_writer),
    svc: PropertyService = Depends(_svc),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Attach images to a listing (multipart field `images`)."""
    item = await svc.fetch_for_mutation(property_id, identity, "update")

    if not images:
        raise ValidationFailed("Please upload at least one image")
    if len(images) > settings.max_upload_files:
        raise ValidationFailed(f"Too many files. Maximum is {settings.max_upload_files}.")
    try:
        stored = await storage.save(images)
    except UploadRejected as e:
        raise ValidationFailed(str(e))

    item = await svc.add_images(item, stored)
    return success(PropertyRead.model_validate(item), message="Images uploaded successfully")
