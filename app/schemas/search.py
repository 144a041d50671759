"""
Search schemas: the normalized filter set and the paginated listing-card result.
"""

from dataclasses import dataclass, field
from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from app.models.listing import Gender


@dataclass(frozen=True)
class SearchCriteria:
    """
    Typed, validated search filters.

    Every filter is optional; None means "no constraint". ``page`` is 1-based
    and always at least 1.
    """

    city: Optional[str] = None
    min_rent: Optional[Decimal] = None
    max_rent: Optional[Decimal] = None
    gender: Optional[str] = None
    furnished: Optional[bool] = None
    search: Optional[str] = None
    page: int = 1


@dataclass(frozen=True)
class NormalizedSearch:
    """Normalizer output: the criteria plus the names of raw fields that were dropped."""

    criteria: SearchCriteria
    ignored: Tuple[str, ...] = field(default_factory=tuple)


class ListingCard(BaseModel):
    """Listing projection returned by search: one card in the result grid."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    rent: float
    city: str
    address: str
    gender: Gender
    furnished: bool
    amenities: Optional[str] = None
    available_from: Optional[date] = None
    created_at: datetime
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    thumbnail: Optional[str] = None


class SearchPage(BaseModel):
    """One page of search results."""

    listings: List[ListingCard] = Field(default_factory=list)
    total: int = Field(..., ge=0, description="Number of matching listings")
    page: int = Field(..., ge=1, description="Requested page, 1-based")
    pages: int = Field(..., ge=0, description="ceil(total / page size)")
