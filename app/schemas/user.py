"""
Pydantic schemas for user profile and admin user views.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict
from app.models.user import UserRole


class UserProfile(BaseModel):
    """Profile of the authenticated user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    role: UserRole
    created_at: datetime


class AdminUserItem(BaseModel):
    """Row of the admin user table."""

    id: int
    name: str
    email: str
    phone: str
    role: UserRole
    is_active: bool
    created_at: datetime
    listing_count: int = 0
    inquiry_count: int = 0


class AdminStats(BaseModel):
    """Dashboard counters."""

    users_by_role: Dict[str, int] = Field(default_factory=dict)
    total_listings: int = Field(0, description="Active listings")
    total_inquiries: int = 0
    total_favorites: int = 0
    recent_listings: int = Field(0, description="Listings created in the last 7 days")
    recent_users: int = Field(0, description="Users registered in the last 7 days")
