"""
Inquiry repository for tenant-to-landlord contact messages.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.repositories.base import BaseRepository
from app.repositories.listing import thumbnail_column
from app.models.inquiry import Inquiry
from app.models.listing import Listing
from app.models.user import User
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class InquiryRepository(BaseRepository[Inquiry]):
    """Repository for inquiries, queried from both the landlord and the sender side."""

    def __init__(self, db: AsyncSession):
        super().__init__(Inquiry, db)

    async def list_for_landlord(self, landlord_id: int, listing_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Inquiries received on a landlord's listings, newest first.

        Args:
            landlord_id: Owner of the listings
            listing_id: Optional single listing to restrict to
        """
        query = (
            select(
                Inquiry.id,
                Inquiry.name,
                Inquiry.email,
                Inquiry.phone,
                Inquiry.message,
                Inquiry.status,
                Inquiry.created_at,
                Listing.id.label("listing_id"),
                Listing.title.label("listing_title"),
            )
            .select_from(Inquiry)
            .join(Listing, Listing.id == Inquiry.listing_id)
            .where(Listing.user_id == landlord_id)
            .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        )
        if listing_id is not None:
            query = query.where(Inquiry.listing_id == listing_id)

        result = await self.db.execute(query)
        rows = [dict(row._mapping) for row in result]
        logger.debug(f"Retrieved {len(rows)} inquiries for landlord {landlord_id}")
        return rows

    async def list_for_sender(self, user_id: int) -> List[Dict[str, Any]]:
        """Inquiries a user has sent, with the listing and landlord contact, newest first."""
        query = (
            select(
                Inquiry.id,
                Inquiry.message,
                Inquiry.status,
                Inquiry.created_at,
                Listing.id.label("listing_id"),
                Listing.title.label("listing_title"),
                Listing.rent,
                Listing.city,
                User.name.label("landlord_name"),
                User.email.label("landlord_email"),
                User.phone.label("landlord_phone"),
                thumbnail_column(),
            )
            .select_from(Inquiry)
            .join(Listing, Listing.id == Inquiry.listing_id)
            .outerjoin(User, User.id == Listing.user_id)
            .where(Inquiry.user_id == user_id)
            .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
        )
        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def get_with_owner(self, inquiry_id: int) -> Optional[Tuple[Inquiry, int]]:
        """Load an inquiry together with the user id of the owning landlord."""
        result = await self.db.execute(
            select(Inquiry, Listing.user_id)
            .join(Listing, Listing.id == Inquiry.listing_id)
            .where(Inquiry.id == inquiry_id)
        )
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]
