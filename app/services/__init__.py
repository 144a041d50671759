"""
Service layer for business logic implementation.
Contains services for authentication, listings, favorites, inquiries, admin, uploads and error handling.
"""

from .auth import AuthService
from .listing import ListingService
from .favorite import FavoriteService
from .inquiry import InquiryService
from .admin import AdminService
from .upload import UploadService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "ListingService",
    "FavoriteService",
    "InquiryService",
    "AdminService",
    "UploadService",
    "ErrorHandlerService"
]
