"""Pydantic schemas for property listings.

Learn: Separate "Create" schemas (input) from "Read" schemas (output).
There is no `agent` field on the input side — the creator is always the
authenticated caller, so an `agent` key in the request body is dropped.
"""

import uuid
from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, Field

from realfolio.schemas.common import AgentSummary, PatchModel

PropertyType = Literal["villa", "apartment", "townhouse", "penthouse", "commercial", "land"]
PropertyStatus = Literal["active", "sold", "rented", "pending"]
Amenity = Literal[
    "wifi",
    "parking",
    "garden",
    "gym",
    "pool",
    "security",
    "air-conditioning",
    "balcony",
    "furnished",
]


class PropertyImage(BaseModel):
    url: str
    filename: str
    is_primary: bool = False


class PropertyCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    type: PropertyType
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    size: Optional[str] = None
    year_built: Optional[str] = None
    parking: Optional[str] = None
    amenities: list[Amenity] = Field(default_factory=list)
    featured: bool = False
    status: PropertyStatus = "active"
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = None


class PropertyUpdate(PatchModel):
    """Partial update. `agent_id` is honoured for admins only."""

    NOT_NULL: ClassVar[tuple[str, ...]] = (
        "title", "price", "location", "type", "amenities", "images", "featured", "status",
    )

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    price: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    type: Optional[PropertyType] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    size: Optional[str] = None
    year_built: Optional[str] = None
    parking: Optional[str] = None
    amenities: Optional[list[Amenity]] = None
    images: Optional[list[PropertyImage]] = None
    featured: Optional[bool] = None
    status: Optional[PropertyStatus] = None
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = None
    agent_id: Optional[uuid.UUID] = None


class PropertyRead(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str]
    price: str
    location: str
    type: str
    bedrooms: Optional[str]
    bathrooms: Optional[str]
    size: Optional[str]
    year_built: Optional[str]
    parking: Optional[str]
    amenities: list[str]
    images: list[PropertyImage]
    featured: bool
    status: str
    slug: Optional[str]
    meta_title: Optional[str]
    meta_description: Optional[str]
    agent_id: uuid.UUID
    agent: Optional[AgentSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
