"""Shared schema pieces — agent summaries, pagination, patch validation."""

import uuid
from typing import ClassVar

from pydantic import BaseModel, model_validator


class AgentSummary(BaseModel):
    """The populated `agent` reference on listings and content."""
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    page: int
    pages: int
    total: int


class PatchModel(BaseModel):
    """Partial-update base: fields in NOT_NULL may be omitted but not nulled."""

    NOT_NULL: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.NOT_NULL:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
