"""Authorization policy — role gate and ownership gate.

Learn: Two independent checks over plain data.

- authorize(): coarse, route-level. Runs before the database is touched.
- check_ownership(): fine, resource-level. Runs after the resource has been
  fetched and before any mutation, so a failed check never leaves a
  partial write behind.

A non-owner agent gets 403 for a resource that exists and 404 for one that
does not, so the 403 does reveal existence. That matches the public API
contract and is kept as is.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol

from realfolio.errors import Forbidden

ADMIN = "admin"
AGENT = "agent"
ROLES = (ADMIN, AGENT)

# Roles that may create, update or delete listings, content and settings.
WRITE_ROLES = (ADMIN, AGENT)


@dataclass(frozen=True)
class Identity:
    """An authenticated user as seen by handlers. Never carries the hash."""

    id: uuid.UUID
    email: str
    name: str
    role: str
    is_active: bool = True
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            is_active=user.is_active,
            last_login=user.last_login,
            created_at=user.created_at,
        )


class OwnedResource(Protocol):
    agent_id: uuid.UUID


def has_role(identity: Identity, allowed_roles: Iterable[str]) -> bool:
    return identity.role in set(allowed_roles)


def is_owner_or_admin(resource: OwnedResource, identity: Identity) -> bool:
    return identity.is_admin or str(resource.agent_id) == str(identity.id)


def authorize(allowed_roles: Iterable[str], identity: Identity) -> None:
    """Raise Forbidden unless the identity's role is in `allowed_roles`."""
    if not has_role(identity, allowed_roles):
        raise Forbidden(
            f"User role {identity.role or 'unknown'} is not authorized to access this route"
        )


def check_ownership(
    resource: OwnedResource,
    identity: Identity,
    action: str = "update",
    noun: str = "resource",
) -> None:
    """Raise Forbidden unless the identity created the resource or is admin."""
    if not is_owner_or_admin(resource, identity):
        raise Forbidden(f"Not authorized to {action} this {noun}")
