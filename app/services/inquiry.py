"""
Inquiry service for tenant-to-landlord contact messages.
"""

from typing import Any, Dict, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from app.models.inquiry import Inquiry, InquiryStatus
from app.models.user import UserRole
from app.repositories.inquiry import InquiryRepository
from app.repositories.listing import ListingRepository
from app.schemas.inquiry import InquiryCreate, ReceivedInquiry, SentInquiry
from app.utils.dependencies import Identity, require_auth, require_role
from app.utils.exceptions import (
    APIException,
    BadRequestError,
    ForbiddenError,
    ListingNotFoundError,
    StorageError
)
from app.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)

STATUS_VALUES = {status.value for status in InquiryStatus}


class InquiryService:
    """
    Inquiry service. Anyone may send; landlords read and triage what they receive.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.inquiry_repo = InquiryRepository(db_session)
        self.listing_repo = ListingRepository(db_session)

    async def send(self, identity: Identity, params: Dict[str, Any]) -> Inquiry:
        """
        Record an inquiry on an active listing.

        The sender's user id is attached when the caller is signed in.

        Args:
            identity: Caller, possibly anonymous
            params: listing_id, name, email, phone and an optional message

        Raises:
            MissingFieldsError: If name, email or phone is blank
            ValidationError: If email or phone is malformed
            ListingNotFoundError: If the listing is missing or inactive
        """
        ValidationUtils.require_fields(params, ["name", "email", "phone"])
        listing_id = ValidationUtils.validate_positive_id(params.get("listing_id"), "Invalid listing ID")

        inquiry_in = InquiryCreate(
            listing_id=listing_id,
            user_id=identity.user_id if identity.is_authenticated else None,
            name=ValidationUtils.clean_string(params.get("name")),
            email=ValidationUtils.validate_email_address(params.get("email")),
            phone=ValidationUtils.validate_phone_number(params.get("phone")),
            message=ValidationUtils.clean_string(params.get("message")) or None,
        )

        try:
            if not await self.listing_repo.is_active(listing_id):
                raise ListingNotFoundError()
            inquiry = await self.inquiry_repo.create(inquiry_in.model_dump())
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to send inquiry on listing {listing_id}: {e}", exc_info=True)
            raise StorageError("Failed to send inquiry")

        logger.info(f"Inquiry {inquiry.id} sent on listing {listing_id} by {inquiry.email}")
        return inquiry

    async def list_received(self, identity: Identity, listing_id_param: Any = None) -> List[ReceivedInquiry]:
        """Inquiries on the calling landlord's listings, optionally for a single listing."""
        require_role(identity, UserRole.LANDLORD)

        listing_id = None
        if listing_id_param not in (None, ""):
            listing_id = ValidationUtils.validate_positive_id(listing_id_param, "Invalid listing ID")

        try:
            rows = await self.inquiry_repo.list_for_landlord(identity.user_id, listing_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve inquiries for landlord {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve inquiries")

        return [ReceivedInquiry.model_validate(row) for row in rows]

    async def list_sent(self, identity: Identity) -> List[SentInquiry]:
        require_auth(identity)

        try:
            rows = await self.inquiry_repo.list_for_sender(identity.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to retrieve inquiries sent by user {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve inquiries")

        return [SentInquiry.model_validate(row) for row in rows]

    async def update_status(self, identity: Identity, params: Dict[str, Any]) -> Inquiry:
        """
        Change the status of an inquiry received on one of the caller's listings.

        Raises:
            BadRequestError: If the inquiry id or status is invalid
            ForbiddenError: If the inquiry does not exist or belongs to another landlord
        """
        require_role(identity, UserRole.LANDLORD)
        inquiry_id = ValidationUtils.validate_positive_id(params.get("inquiry_id"), "Invalid inquiry ID")

        status_value = ValidationUtils.clean_string(params.get("status")).lower()
        if status_value not in STATUS_VALUES:
            raise BadRequestError("Invalid status")

        try:
            found = await self.inquiry_repo.get_with_owner(inquiry_id)
            if found is None or found[1] != identity.user_id:
                raise ForbiddenError("Unauthorized or inquiry not found")

            inquiry = await self.inquiry_repo.update(found[0], {"status": InquiryStatus(status_value)})
        except APIException:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to update status of inquiry {inquiry_id}: {e}", exc_info=True)
            raise StorageError("Failed to update status")

        logger.info(f"Inquiry {inquiry_id} marked {status_value} by landlord {identity.user_id}")
        return inquiry
