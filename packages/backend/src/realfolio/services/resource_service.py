"""Owned-resource service — the CRUD pattern shared by properties and content.

Learn: Service layer separates business logic from HTTP routing.
Every mutation follows the same order:

    fetch by id → NotFound if absent → ownership gate → mutate → commit

so a caller who fails the ownership gate never causes a partial write.
`create` always stamps the creator from the authenticated identity.
Concurrent updates are last-write-wins; there is no locking.
"""

import math
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog
from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from realfolio.auth.policy import Identity, check_ownership
from realfolio.db.models import User
from realfolio.errors import Conflict, NotFound, ValidationFailed

logger = structlog.get_logger()

DEFAULT_SORT = "-createdAt"


@dataclass
class ListQuery:
    """Filters, pagination and sort for a list call.

    `filters` holds exact-match values; None and "all" disable a filter.
    `search` is a case-insensitive substring match over the service's text
    columns. All conditions are ANDed.
    """

    filters: dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort: str = DEFAULT_SORT


@dataclass
class Page:
    items: list
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def parse_object_id(resource_id: str | uuid.UUID) -> Optional[uuid.UUID]:
    """Parse an id from the URL; malformed ids are treated as not found."""
    if isinstance(resource_id, uuid.UUID):
        return resource_id
    try:
        return uuid.UUID(str(resource_id))
    except ValueError:
        return None


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class OwnedResourceService:
    """Base for services whose rows carry an `agent_id` creator reference.

    Subclasses set `model`, `noun`, `search_columns` and `sortable`.
    """

    model: type = None
    noun: str = "resource"
    search_columns: tuple[str, ...] = ()
    sortable: frozenset[str] = frozenset({"created_at", "updated_at", "title"})

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────

    async def _load(self, resource_id: uuid.UUID):
        """Select one row with its agent populated, refreshing any cached copy."""
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == resource_id)
            .options(selectinload(self.model.agent))
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get(self, resource_id: str | uuid.UUID):
        oid = parse_object_id(resource_id)
        item = await self._load(oid) if oid else None
        if item is None:
            raise NotFound(f"{self.noun.capitalize()} not found")
        return item

    def _conditions(self, query: ListQuery) -> list[ColumnElement]:
        conditions = []
        for name, value in query.filters.items():
            if value is None or value == "all":
                continue
            conditions.append(getattr(self.model, name) == value)
        if query.search:
            pattern = f"%{_escape_like(query.search)}%"
            conditions.append(
                or_(
                    *(
                        getattr(self.model, col).ilike(pattern, escape="\\")
                        for col in self.search_columns
                    )
                )
            )
        return conditions

    def _order_by(self, sort: str) -> list:
        """Translate "-createdAt,price" style sort specs into ORDER BY clauses."""
        clauses = []
        for token in re.split(r"[,\s]+", sort.strip()):
            if not token:
                continue
            descending = token.startswith("-")
            name = _snake(token.lstrip("-+"))
            if name not in self.sortable:
                raise ValidationFailed(
                    f"Cannot sort by '{token.lstrip('-+')}'",
                    errors=[{"field": "sort", "message": f"Unknown sort field {token}"}],
                )
            column = getattr(self.model, name)
            clauses.append(column.desc() if descending else column.asc())
        if not clauses:
            clauses.append(self.model.created_at.desc())
        clauses.append(self.model.id.asc())
        return clauses

    async def list(self, query: ListQuery) -> Page:
        conditions = self._conditions(query)
        page = max(query.page, 1)
        limit = max(query.limit, 1)

        stmt = (
            select(self.model)
            .where(*conditions)
            .options(selectinload(self.model.agent))
            .order_by(*self._order_by(query.sort))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        items = list(result.scalars().all())

        total = await self.db.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        return Page(items=items, total=total or 0, page=page, limit=limit)

    # ─── Writes ─────────────────────────────────────────

    def _before_save(self, item, changed: set[str]) -> None:
        """Hook for derived fields (e.g. slugs). Called on create and update."""

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Duplicate field value entered")

    async def create(self, payload: dict[str, Any], creator_id: uuid.UUID):
        """Insert a row owned by `creator_id`; any `agent` in payload is dropped."""
        data = {k: v for k, v in payload.items() if k not in ("agent", "agent_id")}
        item = self.model(**data, agent_id=creator_id)
        self._before_save(item, set(data))
        self.db.add(item)
        await self._commit()
        logger.info(f"{self.noun}.created", id=str(item.id), agent_id=str(creator_id))
        return await self._load(item.id)

    async def fetch_for_mutation(
        self, resource_id: str | uuid.UUID, identity: Identity, action: str
    ):
        """Load the row and apply the ownership gate. Nothing is written."""
        oid = parse_object_id(resource_id)
        item = await self.db.get(self.model, oid) if oid else None
        if item is None:
            raise NotFound(f"{self.noun.capitalize()} not found")
        check_ownership(item, identity, action=action, noun=self.noun)
        return item

    async def _resolve_reassignment(
        self, changes: dict[str, Any], identity: Identity
    ) -> None:
        """Admins may move a resource to another agent; others cannot."""
        agent_id = changes.pop("agent_id", None)
        changes.pop("agent", None)
        if agent_id is None:
            return
        if not identity.is_admin:
            logger.info(
                f"{self.noun}.reassign_ignored",
                identity_id=str(identity.id),
                requested_agent=str(agent_id),
            )
            return
        if await self.db.get(User, agent_id) is None:
            raise ValidationFailed(
                "Agent not found",
                errors=[{"field": "agent_id", "message": "Agent not found"}],
            )
        changes["agent_id"] = agent_id

    async def update(
        self,
        resource_id: str | uuid.UUID,
        changes: dict[str, Any],
        identity: Identity,
    ):
        item = await self.fetch_for_mutation(resource_id, identity, "update")
        changes = dict(changes)
        await self._resolve_reassignment(changes, identity)
        for name, value in changes.items():
            setattr(item, name, value)
        self._before_save(item, set(changes))
        await self._commit()
        logger.info(f"{self.noun}.updated", id=str(item.id), by=str(identity.id))
        return await self._load(item.id)

    async def delete(self, resource_id: str | uuid.UUID, identity: Identity) -> None:
        item = await self.fetch_for_mutation(resource_id, identity, "delete")
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"{self.noun}.deleted", id=str(item.id), by=str(identity.id))
