"""
Listing repository for rental listings.
Executes the paginated search over compiled predicates and serves the
landlord, public and admin listing projections.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update, delete
from app.repositories.base import BaseRepository
from app.repositories.predicates import Predicate, to_clauses, render
from app.models.listing import Listing
from app.models.user import User
from app.models.image import ListingImage
from app.models.favorite import Favorite
from app.models.inquiry import Inquiry
from typing import Optional, List, Dict, Any, Sequence
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def thumbnail_column():
    """Correlated sub-select yielding the primary image path of the outer listing, or NULL."""
    return (
        select(ListingImage.image_path)
        .where(
            ListingImage.listing_id == Listing.id,
            ListingImage.is_primary.is_(True),
        )
        .order_by(ListingImage.display_order.asc())
        .limit(1)
        .correlate(Listing)
        .scalar_subquery()
        .label("thumbnail")
    )


def _count_column(model, label: str):
    return (
        select(func.count(model.id))
        .where(model.listing_id == Listing.id)
        .correlate(Listing)
        .scalar_subquery()
        .label(label)
    )


class ListingRepository(BaseRepository[Listing]):
    """
    Repository for listing management and search.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Listing, db)

    async def create_listing(self, listing_data: Dict[str, Any], image_paths: Sequence[str] = ()) -> Listing:
        """
        Create a listing and its images in one transaction.

        The first image path becomes the primary image; display order starts at 1.

        Args:
            listing_data: Column values for the listing
            image_paths: Stored image paths in display order

        Returns:
            Created listing instance
        """
        try:
            listing = Listing(**listing_data)
            listing.images = self._build_images(image_paths)
            self.db.add(listing)

            await self.db.commit()
            await self.db.refresh(listing)
            logger.info(f"Created listing: {listing.title} (ID: {listing.id}, images: {len(image_paths)})")
            return listing
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create listing: {e}")
            raise

    @staticmethod
    def _build_images(image_paths: Sequence[str]) -> List[ListingImage]:
        return [
            ListingImage(image_path=path, is_primary=index == 0, display_order=index + 1)
            for index, path in enumerate(image_paths)
        ]

    async def update_listing(
        self,
        listing: Listing,
        listing_data: Dict[str, Any],
        image_paths: Optional[Sequence[str]] = None
    ) -> Listing:
        """
        Overwrite listing fields, optionally replacing its image set.

        Args:
            listing: Loaded listing
            listing_data: Full set of editable column values
            image_paths: New image paths; None keeps the current images
        """
        try:
            for field, value in listing_data.items():
                setattr(listing, field, value)

            if image_paths is not None:
                listing.images.clear()
                await self.db.flush()
                listing.images.extend(self._build_images(image_paths))

            await self.db.commit()
            await self.db.refresh(listing)
            logger.debug(f"Updated listing {listing.id}")
            return listing
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update listing {listing.id}: {e}")
            raise

    async def get_active(self, listing_id: int) -> Optional[Listing]:
        """Get a publicly visible listing with its landlord and images loaded."""
        try:
            result = await self.db.execute(
                select(Listing).where(Listing.id == listing_id, Listing.is_active.is_(True))
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get active listing {listing_id}: {e}")
            raise

    async def get_owned(self, listing_id: int, user_id: int) -> Optional[Listing]:
        """Get a listing only if it belongs to the given landlord, active or not."""
        try:
            result = await self.db.execute(
                select(Listing).where(Listing.id == listing_id, Listing.user_id == user_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get listing {listing_id} for owner {user_id}: {e}")
            raise

    async def is_active(self, listing_id: int) -> bool:
        result = await self.db.execute(
            select(func.count(Listing.id)).where(Listing.id == listing_id, Listing.is_active.is_(True))
        )
        return (result.scalar() or 0) > 0

    async def increment_views(self, listing_id: int) -> None:
        """Add one to the view counter; no de-duplication per viewer."""
        try:
            await self.db.execute(
                update(Listing)
                .where(Listing.id == listing_id)
                .values(views=Listing.views + 1)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to increment views for listing {listing_id}: {e}")
            raise

    async def set_active(self, listing: Listing, is_active: bool) -> Listing:
        return await self.update(listing, {"is_active": is_active})

    async def count_matching(self, predicates: Sequence[Predicate]) -> int:
        """
        Count listings satisfying every predicate.

        Args:
            predicates: Ordered predicate list from the predicate builder

        Returns:
            Number of matching listings
        """
        try:
            query = select(func.count(Listing.id)).where(*to_clauses(predicates))
            result = await self.db.execute(query)
            total = result.scalar() or 0
            logger.debug(f"Search count {total} for {render(predicates)}")
            return total
        except Exception as e:
            logger.error(f"Failed to count listings: {e}")
            raise

    async def fetch_page(
        self,
        predicates: Sequence[Predicate],
        limit: int,
        offset: int
    ) -> List[Dict[str, Any]]:
        """
        Fetch one window of matching listings, newest first.

        Each row carries the card columns, the landlord's name and phone
        (null when the owner row is missing) and the primary image path.
        Ties on creation time are broken by descending id.
        """
        try:
            query = (
                select(
                    Listing.id,
                    Listing.title,
                    Listing.rent,
                    Listing.city,
                    Listing.address,
                    Listing.gender,
                    Listing.furnished,
                    Listing.amenities,
                    Listing.available_from,
                    Listing.created_at,
                    User.name.label("landlord_name"),
                    User.phone.label("landlord_phone"),
                    thumbnail_column(),
                )
                .select_from(Listing)
                .outerjoin(User, User.id == Listing.user_id)
                .where(*to_clauses(predicates))
                .order_by(Listing.created_at.desc(), Listing.id.desc())
                .limit(limit)
                .offset(offset)
            )

            result = await self.db.execute(query)
            rows = [dict(row._mapping) for row in result]
            logger.debug(f"Search page offset={offset} limit={limit} returned {len(rows)} rows")
            return rows
        except Exception as e:
            logger.error(f"Failed to fetch listing page: {e}")
            raise

    async def list_by_owner(self, user_id: int) -> List[Dict[str, Any]]:
        """All of a landlord's listings, including inactive ones, newest first."""
        query = (
            select(
                Listing.id,
                Listing.title,
                Listing.rent,
                Listing.city,
                Listing.is_active,
                Listing.views,
                Listing.created_at,
                thumbnail_column(),
                _count_column(Inquiry, "inquiry_count"),
            )
            .where(Listing.user_id == user_id)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def latest(self, limit: int) -> List[Dict[str, Any]]:
        """Newest active listings for the landing page."""
        query = (
            select(
                Listing.id,
                Listing.title,
                Listing.rent,
                Listing.city,
                Listing.gender,
                Listing.furnished,
                thumbnail_column(),
            )
            .where(Listing.is_active.is_(True))
            .order_by(Listing.created_at.desc(), Listing.id.desc())
            .limit(limit)
        )
        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def list_for_admin(self) -> List[Dict[str, Any]]:
        """Every listing, active or not, with owner contact and activity counts."""
        query = (
            select(
                Listing.id,
                Listing.title,
                Listing.rent,
                Listing.city,
                Listing.is_active,
                Listing.views,
                Listing.created_at,
                Listing.user_id,
                User.name.label("landlord_name"),
                User.email.label("landlord_email"),
                thumbnail_column(),
                _count_column(Inquiry, "inquiry_count"),
                _count_column(Favorite, "favorite_count"),
            )
            .select_from(Listing)
            .outerjoin(User, User.id == Listing.user_id)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
        )
        result = await self.db.execute(query)
        return [dict(row._mapping) for row in result]

    async def count_active(self) -> int:
        return await self.count({"is_active": True})

    async def count_created_since(self, since: datetime) -> int:
        result = await self.db.execute(
            select(func.count(Listing.id)).where(Listing.created_at >= since)
        )
        return result.scalar() or 0

    async def delete_with_cascade(self, listing_id: int) -> bool:
        """
        Hard-delete a listing with its images, favorites and inquiries.

        Returns:
            True if the listing existed and was deleted
        """
        try:
            statements = [
                delete(ListingImage).where(ListingImage.listing_id == listing_id),
                delete(Favorite).where(Favorite.listing_id == listing_id),
                delete(Inquiry).where(Inquiry.listing_id == listing_id),
            ]
            for stmt in statements:
                await self.db.execute(stmt.execution_options(synchronize_session=False))

            result = await self.db.execute(
                delete(Listing).where(Listing.id == listing_id).execution_options(synchronize_session=False)
            )
            await self.db.commit()

            deleted = result.rowcount > 0
            logger.debug(f"Cascade delete of listing {listing_id}: {deleted}")
            return deleted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete listing {listing_id}: {e}")
            raise
