"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current identity from the request.

The gate accepts exactly `Authorization: Bearer <token>`. A missing
header, a different scheme, a malformed token, a tampered token and an
expired token all produce the same 401 message, so callers cannot tell
which check failed.
"""

import uuid
from functools import lru_cache
from typing import Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.auth.jwt import InvalidTokenError, TokenService
from realfolio.auth.policy import WRITE_ROLES, Identity, authorize
from realfolio.config import settings
from realfolio.db.engine import get_db
from realfolio.db.models import User
from realfolio.errors import InternalError, Unauthenticated

logger = structlog.get_logger()

NOT_AUTHORIZED = "Not authorized to access this route"


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built from settings.

    Raises ConfigurationError when no secret is set; the app lifespan calls
    this once so a bad configuration aborts startup.
    """
    return TokenService.from_settings(settings)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from `Bearer <token>`, or None for anything else."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Resolve the request's bearer token to an Identity (401 otherwise)."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated(NOT_AUTHORIZED)

    try:
        subject_id = tokens.verify(token)
        user_id = uuid.UUID(subject_id)
    except (InvalidTokenError, ValueError) as e:
        logger.info("auth.token_rejected", reason=str(e))
        raise Unauthenticated(NOT_AUTHORIZED)

    try:
        user = await db.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("auth.lookup_failed", user_id=str(user_id))
        raise InternalError("Server error in authentication")

    if user is None:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise Unauthenticated("Account is disabled")

    identity = Identity.from_user(user)
    request.state.user = identity
    return identity


def require_roles(*roles: str):
    """Build a dependency that authenticates and then applies the role gate."""

    async def dependency(
        identity: Identity = Depends(get_current_user),
    ) -> Identity:
        authorize(roles, identity)
        return identity

    return dependency


# Shared gate for every mutating listing/content/settings route.
require_writer = require_roles(*WRITE_ROLES)
