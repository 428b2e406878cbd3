"""Auth API — registration, login, current user, password change.

Learn: Routes for user authentication:
- POST /auth/register → create an agent account, returns a token
- POST /auth/login → email/password → token
- GET /auth/me → current user info
- PUT /auth/updatepassword → change password, returns a fresh token
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from realfolio.api.responses import success
from realfolio.auth.dependencies import get_current_user, get_token_service
from realfolio.auth.jwt import TokenService
from realfolio.auth.policy import Identity
from realfolio.db.engine import get_db
from realfolio.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


# ─── Schemas ─────────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdatePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class AuthData(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    token: str


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


def _svc(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(db, tokens)


def _auth_data(user, token: str) -> AuthData:
    return AuthData(id=user.id, name=user.name, email=user.email, role=user.role, token=token)


# ─── Routes ──────────────────────────────────────────────


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_svc)):
    """Create a new agent account."""
    user, token = await svc.register(name=body.name, email=body.email, password=body.password)
    return success(_auth_data(user, token))


@router.post("/login")
async def login(body: LoginRequest, svc: AuthService = Depends(_svc)):
    """Login with email and password → bearer token."""
    user, token = await svc.login(email=body.email, password=body.password)
    return success(_auth_data(user, token))


@router.get("/me")
async def get_me(identity: Identity = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return success(UserRead.model_validate(identity))


@router.put("/updatepassword")
async def update_password(
    body: UpdatePasswordRequest,
    identity: Identity = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    user, token = await svc.update_password(
        identity.id, body.current_password, body.new_password
    )
    return success(_auth_data(user, token), message="Password updated successfully")
