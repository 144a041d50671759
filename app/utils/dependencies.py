"""
FastAPI dependency injection utilities for authentication.
Resolves the bearer token into a request-scoped Identity passed to every handler.
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError
import logging

from app.database import get_db
from app.models.user import UserRole
from app.repositories.user import UserRepository
from app.utils.auth import verify_token
from app.utils.exceptions import UnauthorizedError, InsufficientPermissionsError

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """
    Caller identity for one request.

    An anonymous caller has every field set to None.
    """

    user_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_role(self, role: UserRole) -> bool:
        return self.is_authenticated and self.role == role

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value if self.role else None,
        }


ANONYMOUS = Identity()


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Identity:
    """
    Resolve the caller from the Authorization header.

    Missing, malformed or expired tokens, and tokens of deleted or
    deactivated accounts, all resolve to the anonymous identity; handlers
    that need a user reject it themselves.
    """
    if not credentials:
        return ANONYMOUS

    try:
        payload = verify_token(credentials.credentials)
    except JWTError as e:
        logger.debug(f"Ignoring invalid bearer token: {e}")
        return ANONYMOUS

    user = await UserRepository(db).get_by_id(payload.user_id)
    if user is None or not user.is_active:
        logger.debug(f"Token for unavailable user {payload.user_id} treated as anonymous")
        return ANONYMOUS

    return Identity(user_id=user.id, name=user.name, email=user.email, role=user.role)


def require_auth(identity: Identity) -> Identity:
    """
    Reject anonymous callers.

    Raises:
        UnauthorizedError: If the caller is not authenticated
    """
    if not identity.is_authenticated:
        raise UnauthorizedError("Authentication required. Please login.")
    return identity


def require_role(identity: Identity, role: UserRole) -> Identity:
    """
    Reject callers without exactly the given role.

    Raises:
        UnauthorizedError: If the caller is not authenticated
        InsufficientPermissionsError: If the caller has a different role
    """
    require_auth(identity)
    if identity.role != role:
        raise InsufficientPermissionsError()
    return identity
