"""Yacht catalog schemas."""

from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, Field

YachtType = Literal["private-yacht", "shared-trip", "jet-ski", "speed-boat", "catamaran"]
Location = Literal["marsa-matruh", "north-coast", "alexandria", "el-gouna"]


class YachtResponse(BaseModel):
    """Schema for a catalog yacht."""

    id: str
    owner_id: str | None = None
    name: str
    name_ar: str | None = None
    type: YachtType
    location: Location
    capacity: int = Field(ge=1)
    price_per_person: int
    price_per_hour: int
    description: str | None = None
    description_ar: str | None = None
    amenities: list[str] | None = None
    included: list[str] | None = None
    image_urls: list[str] | None = None
    rating: float | None = None
    review_count: int | None = None
    is_available: bool | None = None


class YachtListResponse(BaseModel):
    """Schema for a yacht list."""

    yachts: list[YachtResponse]
    total: int


class AvailabilityResponse(BaseModel):
    """Remaining seats for a yacht on one date."""

    yacht_id: str
    date: date_type
    capacity: int
    slots_remaining: int
    max_seats: int
