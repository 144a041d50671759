"""
Favorite service for saving and un-saving listings.
"""

from typing import Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from app.repositories.favorite import FavoriteRepository
from app.repositories.listing import ListingRepository
from app.schemas.listing import FavoriteItem
from app.utils.dependencies import Identity, require_auth
from app.utils.exceptions import APIException, ListingNotFoundError, StorageError
from app.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    """Per-user favorites; every operation requires an authenticated caller."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.favorite_repo = FavoriteRepository(db_session)
        self.listing_repo = ListingRepository(db_session)

    async def toggle(self, identity: Identity, listing_id_param: Any) -> bool:
        """
        Add the listing to the caller's favorites, or remove it if already there.

        Returns:
            The new favorite state

        Raises:
            ListingNotFoundError: If the listing is missing or inactive
        """
        require_auth(identity)
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            if not await self.listing_repo.is_active(listing_id):
                raise ListingNotFoundError()

            existing = await self.favorite_repo.get_for(identity.user_id, listing_id)
            if existing:
                await self.favorite_repo.delete(existing)
                logger.info(f"User {identity.user_id} removed listing {listing_id} from favorites")
                return False

            await self.favorite_repo.add(identity.user_id, listing_id)
            logger.info(f"User {identity.user_id} added listing {listing_id} to favorites")
            return True
        except APIException:
            raise
        except IntegrityError:
            # A concurrent toggle inserted the same pair first
            return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to toggle favorite {listing_id} for user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to update favorites")

    async def list_favorites(self, identity: Identity) -> List[FavoriteItem]:
        require_auth(identity)

        try:
            rows = await self.favorite_repo.list_for_user(identity.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve favorites for user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve favorites")

        return [FavoriteItem.model_validate(row) for row in rows]

    async def check(self, identity: Identity, listing_id_param: Any) -> bool:
        require_auth(identity)
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            return await self.favorite_repo.is_favorite(identity.user_id, listing_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to check favorite {listing_id} for user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to check favorite status")
