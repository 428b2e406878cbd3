"""Auth service — registration, login and password changes.

Each successful call hands back a freshly issued bearer token. Tokens are
never stored, so changing a password does not invalidate older tokens.
"""

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.auth.jwt import TokenService
from realfolio.auth.password import hash_password, verify_password
from realfolio.auth.policy import AGENT, ROLES
from realfolio.db.models import User
from realfolio.errors import Conflict, NotFound, Unauthenticated

logger = structlog.get_logger()


class AuthService:
    def __init__(self, db: AsyncSession, tokens: TokenService):
        self.db = db
        self.tokens = tokens

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalars().first()

    async def create_user(
        self, name: str, email: str, password: str, role: str = AGENT
    ) -> User:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        if await self.find_by_email(email):
            raise Conflict("User already exists with this email")

        user = User(
            name=name,
            email=email.strip().lower(),
            password_hash=hash_password(password),
            role=role,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User already exists with this email")
        logger.info("auth.user_created", user_id=str(user.id), role=role)
        return user

    async def register(self, name: str, email: str, password: str) -> tuple[User, str]:
        user = await self.create_user(name=name, email=email, password=password)
        return user, self.tokens.issue(str(user.id))

    async def login(self, email: str, password: str) -> tuple[User, str]:
        user = await self.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", email=email)
            raise Unauthenticated("Invalid credentials")
        if not user.is_active:
            raise Unauthenticated("Account is disabled")

        user.last_login = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info("auth.login_succeeded", user_id=str(user.id))
        return user, self.tokens.issue(str(user.id))

    async def update_password(
        self, user_id: uuid.UUID, current_password: str, new_password: str
    ) -> tuple[User, str]:
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        if not verify_password(current_password, user.password_hash):
            raise Unauthenticated("Current password is incorrect")

        user.password_hash = hash_password(new_password)
        await self.db.commit()
        logger.info("auth.password_changed", user_id=str(user.id))
        return user, self.tokens.issue(str(user.id))
