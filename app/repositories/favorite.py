"""
Favorite repository for saved listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from app.repositories.base import BaseRepository
from app.repositories.listing import thumbnail_column
from app.models.favorite import Favorite
from app.models.listing import Listing
from app.models.user import User
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class FavoriteRepository(BaseRepository[Favorite]):
    """Repository for the user/listing favorites relation."""

    def __init__(self, db: AsyncSession):
        super().__init__(Favorite, db)

    async def get_for(self, user_id: int, listing_id: int) -> Optional[Favorite]:
        result = await self.db.execute(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.listing_id == listing_id)
        )
        return result.scalar_one_or_none()

    async def is_favorite(self, user_id: int, listing_id: int) -> bool:
        result = await self.db.execute(
            select(func.count(Favorite.id)).where(
                Favorite.user_id == user_id,
                Favorite.listing_id == listing_id
            )
        )
        return (result.scalar() or 0) > 0

    async def add(self, user_id: int, listing_id: int) -> Favorite:
        return await self.create({"user_id": user_id, "listing_id": listing_id})

    async def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        """
        A user's favorites on active listings, most recently saved first.

        Returns:
            Rows with listing card columns, favorited_at, landlord contact and thumbnail
        """
        query = (
            select(
                Listing.id,
                Listing.title,
                Listing.rent,
                Listing.city,
                Listing.address,
                Listing.gender,
                Listing.furnished,
                Favorite.created_at.label("favorited_at"),
                User.name.label("landlord_name"),
                User.phone.label("landlord_phone"),
                thumbnail_column(),
            )
            .select_from(Favorite)
            .join(Listing, Listing.id == Favorite.listing_id)
            .outerjoin(User, User.id == Listing.user_id)
            .where(Favorite.user_id == user_id, Listing.is_active.is_(True))
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        result = await self.db.execute(query)
        rows = [dict(row._mapping) for row in result]
        logger.debug(f"Retrieved {len(rows)} favorites for user {user_id}")
        return rows
