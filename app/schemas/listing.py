"""
Listing schemas for validated input and the per-audience listing projections.
"""

from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from app.models.listing import Gender


class ListingInput(BaseModel):
    """Validated editable fields of a listing, shared by create and update."""

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    rent: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    gender: Gender = Gender.ANY
    furnished: bool = False
    amenities: Optional[str] = None
    available_from: Optional[date] = None

    def to_columns(self) -> dict:
        return self.model_dump()


class ListingDetail(BaseModel):
    """Full public view of one listing."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    rent: float
    address: str
    city: str
    gender: Gender
    furnished: bool
    amenities: Optional[str] = None
    available_from: Optional[date] = None
    is_active: bool
    views: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    landlord_name: Optional[str] = None
    landlord_email: Optional[str] = None
    landlord_phone: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    is_favorite: bool = False


class OwnerListingItem(BaseModel):
    """Row of the landlord's own listing table."""

    id: int
    title: str
    rent: float
    city: str
    is_active: bool
    views: int
    created_at: datetime
    thumbnail: Optional[str] = None
    inquiry_count: int = 0


class LatestListingItem(BaseModel):
    id: int
    title: str
    rent: float
    city: str
    gender: Gender
    furnished: bool
    thumbnail: Optional[str] = None


class AdminListingItem(BaseModel):
    """Row of the admin moderation table."""

    id: int
    user_id: int
    title: str
    rent: float
    city: str
    is_active: bool
    views: int
    created_at: datetime
    landlord_name: Optional[str] = None
    landlord_email: Optional[str] = None
    thumbnail: Optional[str] = None
    inquiry_count: int = 0
    favorite_count: int = 0


class FavoriteItem(BaseModel):
    """Saved listing as shown on the favorites page."""

    id: int
    title: str
    rent: float
    city: str
    address: str
    gender: Gender
    furnished: bool
    favorited_at: datetime
    landlord_name: Optional[str] = None
    landlord_phone: Optional[str] = None
    thumbnail: Optional[str] = None
