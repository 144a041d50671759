"""
Listing model for rental properties posted by landlords.
Includes rent, location, tenant preferences and search indexes.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Date, Enum as SQLEnum, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
import enum
from datetime import date
from decimal import Decimal
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.image import ListingImage


class Gender(str, enum.Enum):
    """Preferred tenant gender for a listing."""
    MALE = "male"
    FEMALE = "female"
    ANY = "any"


class Listing(Base):
    """
    Rental listing owned by a landlord.
    Soft-deleted by clearing is_active; inactive listings never appear publicly.
    """

    __tablename__ = "listings"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the landlord who owns this listing"
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Free-text description"
    )

    rent: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        index=True,
        comment="Monthly rent"
    )

    address: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Street address"
    )

    city: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="City name"
    )

    gender: Mapped[Gender] = mapped_column(
        SQLEnum(Gender, name="listing_gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Gender.ANY,
        comment="Preferred tenant gender"
    )

    furnished: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the property is furnished"
    )

    amenities: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Comma separated amenity names"
    )

    available_from: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        comment="Date the property becomes available"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the listing is publicly visible"
    )

    views: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="Detail page view counter"
    )

    landlord: Mapped["User"] = relationship(
        "User",
        back_populates="listings",
        lazy="selectin"
    )

    images: Mapped[List["ListingImage"]] = relationship(
        "ListingImage",
        back_populates="listing",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ListingImage.display_order.asc()"
    )

    def __repr__(self) -> str:
        """String representation of the listing."""
        return f"<Listing(id={self.id}, title={self.title[:30]}, rent={self.rent})>"


# Composite indexes for the public search path
city_active_index = Index(
    "idx_listings_city_active",
    Listing.city,
    Listing.is_active,
)

active_created_index = Index(
    "idx_listings_active_created",
    Listing.is_active,
    Listing.created_at,
)

owner_active_index = Index(
    "idx_listings_owner_active",
    Listing.user_id,
    Listing.is_active,
)
