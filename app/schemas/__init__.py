"""
Pydantic schemas for request/response validation.
"""

from .envelope import Envelope, FieldError, envelope, success_response, error_response
from .auth import AuthResult, SessionInfo
from .user import UserProfile, AdminUserItem, AdminStats
from .search import SearchCriteria, NormalizedSearch, ListingCard, SearchPage
from .listing import (
    ListingInput,
    ListingDetail,
    OwnerListingItem,
    LatestListingItem,
    AdminListingItem,
    FavoriteItem
)
from .inquiry import InquiryCreate, ReceivedInquiry, SentInquiry
from .upload import UploadedFile, UploadResult

__all__ = [
    # Envelope
    "Envelope",
    "FieldError",
    "envelope",
    "success_response",
    "error_response",

    # Auth and users
    "AuthResult",
    "SessionInfo",
    "UserProfile",
    "AdminUserItem",
    "AdminStats",

    # Search
    "SearchCriteria",
    "NormalizedSearch",
    "ListingCard",
    "SearchPage",

    # Listings
    "ListingInput",
    "ListingDetail",
    "OwnerListingItem",
    "LatestListingItem",
    "AdminListingItem",
    "FavoriteItem",

    # Inquiries
    "InquiryCreate",
    "ReceivedInquiry",
    "SentInquiry",

    # Uploads
    "UploadedFile",
    "UploadResult",
]
