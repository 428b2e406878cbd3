"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (token service check, Redis,
database engine). Middleware, CORS, exception handlers, routers and the
/uploads static mount are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from realfolio import __version__
from realfolio.api import api_router
from realfolio.api.handlers import register_exception_handlers
from realfolio.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at
    shutdown. A missing signing secret stops the server here, before the
    first request is served.
    """
    logger.info(
        "realfolio.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from realfolio.auth.dependencies import get_token_service
    get_token_service()

    from realfolio.db.redis_pool import close_redis, init_redis
    try:
        await init_redis()
        logger.info("realfolio.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("realfolio.redis_unavailable", error=str(e))
        # Redis is optional; rate limiting is skipped without it

    from realfolio.db.engine import create_tables, engine
    if settings.auto_create_tables:
        await create_tables()
        logger.info("realfolio.tables_created")

    yield

    logger.info("realfolio.shutdown")
    await close_redis()
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Realfolio API",
        description="Real-estate portfolio backend: properties, video content and site settings",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from realfolio.middleware.rate_limit import RateLimitMiddleware
    from realfolio.middleware.request_id import RequestIdMiddleware
    from realfolio.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router)

    # Uploaded images are served as-is; the directory is created on first upload
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.upload_path, check_dir=False),
        name="uploads",
    )

    return app


# Default app instance (used by uvicorn: realfolio.main:app)
app = create_app()
