"""
User repository for authentication and account management operations.
Provides user lookups, admin listings with activity counts and cascading deletes.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete, update
from app.repositories.base import BaseRepository
from app.models.user import User, UserRole
from app.models.listing import Listing
from app.models.image import ListingImage
from app.models.favorite import Favorite
from app.models.inquiry import Inquiry
from app.utils.auth import hash_password, verify_password
from typing import Optional, List, Dict, Any
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user, hashing the plain password.

        Args:
            user_data: Dictionary containing user information
                      Must include: name, email, phone, password
                      Optional: role (defaults to TENANT), is_active

        Returns:
            Created user instance
        """
        data = dict(user_data)
        password = data.pop("password")

        create_data = {
            **data,
            "email": data["email"].lower().strip(),
            "hashed_password": hash_password(password),
            "role": data.get("role", UserRole.TENANT),
            "is_active": data.get("is_active", True)
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address to search for

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()

            result = await self.db.execute(select(User).where(User.email == normalized_email))
            user = result.scalar_one_or_none()

            if user:
                logger.debug(f"Retrieved user by email: {email}")
            else:
                logger.debug(f"User with email {email} not found")

            return user
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Look up a user by email and check the password.

        Active status is not checked here so the caller can report a
        deactivated account separately from bad credentials.

        Returns:
            User instance if the password matches, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not verify_password(password, user.hashed_password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def list_with_counts(self) -> List[Dict[str, Any]]:
        """All users, newest first, with the number of listings and inquiries each has made."""
        listing_count = (
            select(func.count(Listing.id))
            .where(Listing.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        inquiry_count = (
            select(func.count(Inquiry.id))
            .where(Inquiry.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )

        query = (
            select(
                User.id,
                User.name,
                User.email,
                User.phone,
                User.role,
                User.is_active,
                User.created_at,
                listing_count.label("listing_count"),
                inquiry_count.label("inquiry_count"),
            )
            .order_by(User.created_at.desc(), User.id.desc())
        )

        result = await self.db.execute(query)
        rows = [dict(row._mapping) for row in result]
        logger.debug(f"Retrieved {len(rows)} users with activity counts")
        return rows

    async def count_by_role(self) -> Dict[str, int]:
        result = await self.db.execute(
            select(User.role, func.count(User.id)).group_by(User.role)
        )
        return {role.value if isinstance(role, UserRole) else str(role): count for role, count in result}

    async def count_created_since(self, since: datetime) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.created_at >= since)
        )
        return result.scalar() or 0

    async def set_active(self, user: User, is_active: bool) -> User:
        return await self.update(user, {"is_active": is_active})

    async def delete_with_cascade(self, user_id: int) -> bool:
        """
        Hard-delete a user together with everything they own.

        Removes the user's listings (with their images, favorites and
        inquiries) and the user's own favorites. Inquiries the user sent
        on other listings are kept with the sender reference cleared.

        Returns:
            True if the user existed and was deleted
        """
        try:
            owned_listings = select(Listing.id).where(Listing.user_id == user_id)
            statements = [
                delete(ListingImage).where(ListingImage.listing_id.in_(owned_listings)),
                delete(Favorite).where(Favorite.listing_id.in_(owned_listings)),
                delete(Inquiry).where(Inquiry.listing_id.in_(owned_listings)),
                delete(Listing).where(Listing.user_id == user_id),
                delete(Favorite).where(Favorite.user_id == user_id),
                update(Inquiry).where(Inquiry.user_id == user_id).values(user_id=None),
            ]
            for stmt in statements:
                await self.db.execute(stmt.execution_options(synchronize_session=False))

            result = await self.db.execute(
                delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
            )
            await self.db.commit()

            deleted = result.rowcount > 0
            logger.debug(f"Cascade delete of user {user_id}: {deleted}")
            return deleted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise
