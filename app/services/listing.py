"""
Listing service for landlord listing management and public search.
Handles ownership rules, input validation, the search pipeline and result shaping.
"""

import math
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.models.listing import Listing, Gender
from app.models.user import UserRole
from app.repositories.listing import ListingRepository
from app.repositories.favorite import FavoriteRepository
from app.repositories.predicates import build_predicates
from app.schemas.listing import ListingInput, ListingDetail, OwnerListingItem, LatestListingItem
from app.schemas.search import ListingCard, SearchPage
from app.utils.dependencies import Identity, require_role
from app.utils.exceptions import (
    APIException,
    ListingNotFoundError,
    ListingOwnershipError,
    StorageError
)
from app.utils.search_filters import normalize_search_params
from app.utils.validators import ValidationUtils
import json
import logging

logger = logging.getLogger(__name__)

REQUIRED_LISTING_FIELDS = ["title", "rent", "address", "city"]


def present_search_page(rows: List[Mapping[str, Any]], total: int, page: int, page_size: int) -> SearchPage:
    """
    Shape executor rows into the paginated result.

    ``pages`` is ceil(total / page_size), so an empty result has zero pages
    while still reporting the requested page.
    """
    return SearchPage(
        listings=[ListingCard.model_validate(row) for row in rows],
        total=total,
        page=page,
        pages=math.ceil(total / page_size) if total else 0,
    )


def parse_image_paths(raw: Any) -> Optional[List[str]]:
    """
    Read the images parameter: a JSON array string, or an already decoded list.

    Returns None when the parameter is absent and an empty list when it is
    present but not a usable array.
    """
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        items = raw
    else:
        text = str(raw).strip()
        if not text:
            return []
        try:
            items = json.loads(text)
        except ValueError:
            logger.debug("Ignoring images parameter that is not a JSON array")
            return []
        if not isinstance(items, list):
            return []
    return [str(item).strip() for item in items if str(item).strip()]


class ListingService:
    """
    Listing service for CRUD with ownership checks and the public search.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)

    @staticmethod
    def parse_listing_input(params: Dict[str, Any]) -> ListingInput:
        """
        Validate create/update parameters.

        An unknown gender falls back to "any"; furnished uses checkbox
        semantics; amenities may be a list or a comma separated string.

        Raises:
            MissingFieldsError: If title, rent, address or city is blank
            ValidationError: If rent or available_from is malformed
        """
        ValidationUtils.require_fields(params, REQUIRED_LISTING_FIELDS)

        rent = ValidationUtils.validate_rent(params.get("rent"))

        gender_value = ValidationUtils.clean_string(params.get("gender")).lower()
        gender = Gender(gender_value) if gender_value in {g.value for g in Gender} else Gender.ANY

        amenities = ", ".join(ValidationUtils.parse_string_list(params.get("amenities")))

        return ListingInput(
            title=ValidationUtils.clean_string(params.get("title")),
            description=ValidationUtils.clean_string(params.get("description")) or None,
            rent=rent.quantize(Decimal("0.01")),
            address=ValidationUtils.clean_string(params.get("address")),
            city=ValidationUtils.clean_string(params.get("city")),
            gender=gender,
            furnished=ValidationUtils.parse_flag(params.get("furnished")),
            amenities=amenities or None,
            available_from=ValidationUtils.validate_date(params.get("available_from")),
        )

    async def create_listing(self, identity: Identity, params: Dict[str, Any]) -> Listing:
        """
        Create a listing owned by the calling landlord.

        Args:
            identity: Caller, must be a landlord
            params: Listing fields plus an optional images JSON array

        Returns:
            Created listing
        """
        require_role(identity, UserRole.LANDLORD)
        listing_input = self.parse_listing_input(params)
        image_paths = parse_image_paths(params.get("images")) or []

        try:
            listing = await self.listing_repo.create_listing(
                {**listing_input.to_columns(), "user_id": identity.user_id},
                image_paths[:settings.max_images_per_listing]
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to create listing for user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to create listing")

        logger.info(f"Listing created by user {identity.email}: {listing.title} (ID: {listing.id})")
        return listing

    async def search(self, raw_params: Mapping[str, Any]) -> SearchPage:
        """
        Run the public listing search.

        Raw parameters are normalized (invalid filters are dropped), compiled
        to predicates, counted, and one page of at most listings_per_page
        cards is fetched newest first.

        Raises:
            StorageError: "Search failed" on any database error
        """
        normalized = normalize_search_params(raw_params)
        criteria = normalized.criteria
        predicates = build_predicates(criteria)

        page_size = settings.listings_per_page
        offset = (criteria.page - 1) * page_size

        try:
            total = await self.listing_repo.count_matching(predicates)
            rows = []
            if offset < total:
                rows = await self.listing_repo.fetch_page(predicates, limit=page_size, offset=offset)
        except SQLAlchemyError as e:
            logger.error(f"Search failed: {e}", exc_info=True)
            raise StorageError("Search failed")

        return present_search_page(rows, total, criteria.page, page_size)

    async def get_detail(self, identity: Identity, listing_id_param: Any) -> ListingDetail:
        """
        Public detail view of an active listing.

        Every successful fetch adds one to the view counter; the returned
        views value is the count before this fetch.

        Raises:
            BadRequestError: If the id is not a positive integer
            ListingNotFoundError: If the listing is missing or inactive
        """
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            listing = await self.listing_repo.get_active(listing_id)
            if not listing:
                raise ListingNotFoundError()

            detail = ListingDetail(
                id=listing.id,
                user_id=listing.user_id,
                title=listing.title,
                description=listing.description,
                rent=listing.rent,
                address=listing.address,
                city=listing.city,
                gender=listing.gender,
                furnished=listing.furnished,
                amenities=listing.amenities,
                available_from=listing.available_from,
                is_active=listing.is_active,
                views=listing.views,
                created_at=listing.created_at,
                updated_at=listing.updated_at,
                landlord_name=listing.landlord.name if listing.landlord else None,
                landlord_email=listing.landlord.email if listing.landlord else None,
                landlord_phone=listing.landlord.phone if listing.landlord else None,
                images=[image.image_path for image in listing.images],
            )

            await self.listing_repo.increment_views(listing_id)

            if identity.is_authenticated:
                detail.is_favorite = await self.favorite_repo.is_favorite(identity.user_id, listing_id)

            return detail
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve listing")

    async def _get_owned_listing(self, identity: Identity, listing_id: int) -> Listing:
        listing = await self.listing_repo.get_owned(listing_id, identity.user_id)
        if not listing:
            logger.warning(f"User {identity.user_id} tried to modify listing {listing_id} they do not own")
            raise ListingOwnershipError()
        return listing

    async def update_listing(self, identity: Identity, params: Dict[str, Any]) -> Listing:
        """
        Overwrite all editable fields of a listing the caller owns.

        When an images array is supplied it replaces the current images.

        Raises:
            ListingOwnershipError: If the listing is missing or owned by someone else
        """
        require_role(identity, UserRole.LANDLORD)
        listing_id = ValidationUtils.validate_positive_id(params.get("id"), "Invalid listing ID")
        listing_input = self.parse_listing_input(params)
        image_paths = parse_image_paths(params.get("images"))
        if image_paths is not None:
            image_paths = image_paths[:settings.max_images_per_listing]

        try:
            listing = await self._get_owned_listing(identity, listing_id)
            listing = await self.listing_repo.update_listing(listing, listing_input.to_columns(), image_paths)
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to update listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to update listing")

        logger.info(f"Listing {listing_id} updated by user {identity.email}")
        return listing

    async def delete_listing(self, identity: Identity, listing_id_param: Any) -> None:
        """Soft-delete a listing the caller owns by marking it inactive."""
        require_role(identity, UserRole.LANDLORD)
        listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            listing = await self._get_owned_listing(identity, listing_id)
            await self.listing_repo.set_active(listing, False)
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to delete listing")

        logger.info(f"Listing {listing_id} deactivated by owner {identity.email}")

    async def my_listings(self, identity: Identity) -> List[OwnerListingItem]:
        require_role(identity, UserRole.LANDLORD)

        try:
            rows = await self.listing_repo.list_by_owner(identity.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve listings of user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve listings")

        return [OwnerListingItem.model_validate(row) for row in rows]

    async def latest(self, limit_param: Any = None) -> List[LatestListingItem]:
        """Newest active listings; limit defaults to 6 and is clamped to 1..12."""
        try:
            limit = int(str(limit_param).strip()) if limit_param not in (None, "") else settings.latest_listings_default
        except ValueError:
            limit = settings.latest_listings_default
        limit = max(1, min(limit, settings.latest_listings_max))

        try:
            rows = await self.listing_repo.latest(limit)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve latest listings: {e}", exc_info=True)
            raise StorageError("Failed to retrieve listings")

        return [LatestListingItem.model_validate(row) for row in rows]
