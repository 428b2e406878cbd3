"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Unlike a fully private API, reads here are public, so auth is not
applied at the include_router level. Each mutating route declares
`require_writer` itself (token + admin/agent role gate).
"""

from fastapi import APIRouter

from realfolio.api.auth import router as auth_router
from realfolio.api.content import router as content_router
from realfolio.api.health import router as health_router
from realfolio.api.properties import router as properties_router
from realfolio.api.settings import router as settings_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(properties_router, tags=["properties"])
api_router.include_router(content_router, tags=["content"])
api_router.include_router(settings_router, tags=["settings"])
