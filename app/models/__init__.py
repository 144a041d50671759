"""
Database models for the Rental Listing API.
Includes User, Listing, ListingImage, Favorite and Inquiry models.
"""

from app.models.user import User, UserRole
from app.models.listing import Listing, Gender
from app.models.image import ListingImage
from app.models.favorite import Favorite
from app.models.inquiry import Inquiry, InquiryStatus

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Listing",
    "Gender",
    "ListingImage",
    "Favorite",
    "Inquiry",
    "InquiryStatus",
]
