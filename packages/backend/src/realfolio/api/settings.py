"""Settings API — the site's contact details and profile copy.

Learn: One document for the whole site. GET creates it with defaults the
first time; PUT and POST are both upserts with a partial payload.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.api.responses import success
from realfolio.auth.dependencies import require_writer
from realfolio.auth.policy import Identity
from realfolio.db.engine import get_db
from realfolio.schemas.settings import SiteSettingsRead, SiteSettingsUpdate
from realfolio.services.settings_service import SettingsService

router = APIRouter(prefix="/settings")


def _svc(db: AsyncSession = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


@router.get("")
async def get_settings(
    flat: bool = Query(False),
    svc: SettingsService = Depends(_svc),
):
    data = SiteSettingsRead.model_validate(await svc.get_or_create())
    return data if flat else success(data)


@router.api_route("", methods=["PUT", "POST"])
async def update_settings(
    body: Optional[SiteSettingsUpdate] = None,
    identity: Identity = Depends(require_writer),
    svc: SettingsService = Depends(_svc),
):
    data = SiteSettingsRead.model_validate(await svc.update(body.changes() if body else {}))
    return success(data, message="Settings updated successfully")
