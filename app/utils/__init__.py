"""
Utility modules for the Rental Listing API.
"""

from .auth import (
    create_access_token,
    verify_token,
    hash_password,
    verify_password,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    MissingFieldsError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    PayloadTooLargeError,
    StorageError,
    InvalidCredentialsError,
    InactiveUserError,
    InsufficientPermissionsError,
    ListingNotFoundError,
    ListingOwnershipError,
    InvalidActionError
)

# Request parsing, validators and dependencies import models and settings,
# so they are imported from their own modules.

__all__ = [
    "create_access_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "TokenPayload",
    "APIException",
    "ValidationError",
    "MissingFieldsError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "PayloadTooLargeError",
    "StorageError",
    "InvalidCredentialsError",
    "InactiveUserError",
    "InsufficientPermissionsError",
    "ListingNotFoundError",
    "ListingOwnershipError",
    "InvalidActionError",
]
