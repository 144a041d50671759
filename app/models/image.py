"""
ListingImage model for images attached to a listing.
The first image of a listing is primary and serves as its thumbnail.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.listing import Listing


class ListingImage(Base):
    """Stored image path for a listing, ordered by display_order."""

    __tablename__ = "listing_images"

    listing_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("listings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the listing this image belongs to"
    )

    image_path: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Relative path of the stored image file"
    )

    is_primary: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether this is the listing thumbnail"
    )

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="1-based display position"
    )

    listing: Mapped["Listing"] = relationship(
        "Listing",
        back_populates="images",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<ListingImage(id={self.id}, listing_id={self.listing_id}, primary={self.is_primary})>"


primary_image_index = Index(
    "idx_listing_images_primary",
    ListingImage.listing_id,
    ListingImage.is_primary,
)
