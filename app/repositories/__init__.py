"""
Repository layer for data access operations.
Provides database operations with logging and rollback on failure.
"""

from app.repositories.base import BaseRepository
from app.repositories.user import UserRepository
from app.repositories.listing import ListingRepository
from app.repositories.favorite import FavoriteRepository
from app.repositories.inquiry import InquiryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ListingRepository",
    "FavoriteRepository",
    "InquiryRepository",
]
