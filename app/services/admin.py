"""
Admin service for platform moderation and dashboard statistics.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from app.models.user import UserRole
from app.repositories.user import UserRepository
from app.repositories.listing import ListingRepository
from app.repositories.favorite import FavoriteRepository
from app.repositories.inquiry import InquiryRepository
from app.schemas.listing import AdminListingItem
from app.schemas.user import AdminUserItem, AdminStats
from app.utils.dependencies import Identity, require_role
from app.utils.exceptions import (
    APIException,
    BadRequestError,
    ListingNotFoundError,
    NotFoundError,
    StorageError
)
from app.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)


class AdminService:
    """
    Admin-only operations over all users and listings.

    Every public method checks the admin role first.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.listing_repo = ListingRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)
        self.inquiry_repo = InquiryRepository(db_session)

    async def list_users(self, identity: Identity) -> List[AdminUserItem]:
        require_role(identity, UserRole.ADMIN)

        try:
            rows = await self.user_repo.list_with_counts()
        except SQLAlchemyError as e:
            logger.error(f"Admin user listing failed: {e}", exc_info=True)
            raise StorageError("Failed to retrieve users")

        return [AdminUserItem.model_validate(row) for row in rows]

    async def list_listings(self, identity: Identity) -> List[AdminListingItem]:
        require_role(identity, UserRole.ADMIN)

        try:
            rows = await self.listing_repo.list_for_admin()
        except SQLAlchemyError as e:
            logger.error(f"Admin listing overview failed: {e}", exc_info=True)
            raise StorageError("Failed to retrieve listings")

        return [AdminListingItem.model_validate(row) for row in rows]

    async def toggle_user(self, identity: Identity, user_id_param: Any) -> bool:
        """
        Flip a user's active flag.

        Returns:
            The new active state

        Raises:
            BadRequestError: If the id is invalid or targets the caller
            NotFoundError: If the user does not exist
        """
        require_role(identity, UserRole.ADMIN)
        user_id = ValidationUtils.validate_positive_id(user_id_param, "Invalid user ID")
        if user_id == identity.user_id:
            raise BadRequestError("Cannot deactivate your own account")

        try:
            user = await self.user_repo.get_by_id(user_id)
            if not user:
                raise NotFoundError("User")
            user = await self.user_repo.set_active(user, not user.is_active)
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to toggle user {user_id}: {e}", exc_info=True)
            raise StorageError("Failed to update user status")

        logger.info(f"Admin {identity.email} set user {user_id} active={user.is_active}")
        return user.is_active

    async def toggle_listing(self, identity: Identity, listing_id_param: Any) -> bool:
        """Flip any listing's active flag and return the new state."""
        require_role(identity, UserRole.ADMIN)
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            listing = await self.listing_repo.get_by_id(listing_id)
            if not listing:
                raise ListingNotFoundError()
            listing = await self.listing_repo.set_active(listing, not listing.is_active)
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to toggle listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to update listing status")

        logger.info(f"Admin {identity.email} set listing {listing_id} active={listing.is_active}")
        return listing.is_active

    async def stats(self, identity: Identity) -> AdminStats:
        """Dashboard counters; the recent figures cover the last seven days."""
        require_role(identity, UserRole.ADMIN)
        since = datetime.now(timezone.utc) - RECENT_WINDOW

        try:
            return AdminStats(
                users_by_role=await self.user_repo.count_by_role(),
                total_listings=await self.listing_repo.count_active(),
                total_inquiries=await self.inquiry_repo.count(),
                total_favorites=await self.favorite_repo.count(),
                recent_listings=await self.listing_repo.count_created_since(since),
                recent_users=await self.user_repo.count_created_since(since),
            )
        except SQLAlchemyError as e:
            logger.error(f"Admin statistics failed: {e}", exc_info=True)
            raise StorageError("Failed to retrieve statistics")

    async def delete_user(self, identity: Identity, user_id_param: Any) -> None:
        """
        Permanently delete a user and everything they own.

        Raises:
            BadRequestError: If the id is invalid or targets the caller
            NotFoundError: If the user does not exist
        """
        require_role(identity, UserRole.ADMIN)
        user_id = ValidationUtils.validate_positive_id(user_id_param, "Invalid user ID")
        if user_id == identity.user_id:
            raise BadRequestError("Cannot delete your own account")

        try:
            deleted = await self.user_repo.delete_with_cascade(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete user {user_id}: {e}", exc_info=True)
            raise StorageError("Failed to delete user")

        if not deleted:
            raise NotFoundError("User")
        logger.info(f"Admin {identity.email} deleted user {user_id}")

    async def delete_listing(self, identity: Identity, listing_id_param: Any) -> None:
        """Permanently delete a listing with its images, favorites and inquiries."""
        require_role(identity, UserRole.ADMIN)
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            deleted = await self.listing_repo.delete_with_cascade(listing_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to delete listing")

        if not deleted:
            raise ListingNotFoundError()
        logger.info(f"Admin {identity.email} deleted listing {listing_id}")
