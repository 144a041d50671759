"""
Authentication service for registration, login and profile lookups.
Handles credential checks, token issuing and account status rules.
"""

from typing import Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from app.config import settings
from app.repositories.user import UserRepository
from app.models.user import User, UserRole
from app.schemas.auth import AuthResult, SessionInfo
from app.schemas.user import UserProfile
from app.utils.auth import create_access_token
from app.utils.dependencies import Identity, require_auth
from app.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InactiveUserError,
    NotFoundError,
    ConflictError,
    StorageError,
    UnauthorizedError,
    ValidationError
)
from app.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = (UserRole.TENANT.value, UserRole.LANDLORD.value)


class AuthService:
    """
    Authentication service for account creation and sign-in.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    def issue_token(self, user: User) -> AuthResult:
        """
        Create an access token for a user.

        Args:
            user: Authenticated user

        Returns:
            AuthResult carrying the user summary and token
        """
        access_token = create_access_token(
            user_id=user.id,
            email=user.email,
            name=user.name,
            role=user.role
        )
        return AuthResult(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            access_token=access_token,
            expires_in=settings.access_token_expire_minutes * 60
        )

    async def register(self, params: Dict[str, Any]) -> AuthResult:
        """
        Register a tenant or landlord account.

        Args:
            params: Request parameters with name, email, phone, password and optional role

        Returns:
            AuthResult for the new account, already signed in

        Raises:
            MissingFieldsError: If a required field is blank
            ValidationError: If email, phone or password is invalid
            ConflictError: If the email is already registered
        """
        ValidationUtils.require_fields(params, ["name", "email", "phone", "password"])

        name = ValidationUtils.clean_string(params.get("name"))
        email = ValidationUtils.validate_email_address(params.get("email"))
        phone = ValidationUtils.validate_phone_number(
            params.get("phone"),
            "Invalid phone number. Must be 10 digits starting with 6-9"
        )
        password = ValidationUtils.validate_password(params.get("password"), settings.password_min_length)

        role_value = ValidationUtils.clean_string(params.get("role")).lower()
        role = UserRole(role_value) if role_value in SELF_SERVICE_ROLES else UserRole.TENANT

        try:
            if await self.user_repo.get_by_email(email):
                raise ConflictError("Email already registered")

            user = await self.user_repo.create_user({
                "name": name,
                "email": email,
                "phone": phone,
                "password": password,
                "role": role,
            })
        except APIException:
            raise
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError("Email already registered")
        except SQLAlchemyError as e:
            logger.error(f"Registration failed for {email}: {e}", exc_info=True)
            raise StorageError("Registration failed. Please try again.")

        logger.info(f"Registered {role.value} account: {email} (ID: {user.id})")
        return self.issue_token(user)

    async def login(self, params: Dict[str, Any]) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            ValidationError: If email or password is missing
            InvalidCredentialsError: If the credentials do not match
            InactiveUserError: If the account has been deactivated
        """
        email = ValidationUtils.clean_string(params.get("email"))
        password = "" if params.get("password") is None else str(params.get("password"))

        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            user = await self.user_repo.authenticate_user(email, password)
        except SQLAlchemyError as e:
            logger.error(f"Login failed for {email}: {e}", exc_info=True)
            raise StorageError("Login failed. Please try again.")

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login attempt on deactivated account: {email}")
            raise InactiveUserError()

        logger.info(f"User authenticated successfully: {user.email}")
        return self.issue_token(user)

    def check(self, identity: Identity) -> SessionInfo:
        if not identity.is_authenticated:
            raise UnauthorizedError("Not authenticated")
        return SessionInfo(
            user_id=identity.user_id,
            name=identity.name,
            email=identity.email,
            role=identity.role
        )

    async def profile(self, identity: Identity) -> UserProfile:
        """Load the caller's own profile."""
        require_auth(identity)

        try:
            user = await self.user_repo.get_by_id(identity.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load profile {identity.user_id}: {e}", exc_info=True)
            raise StorageError("Failed to retrieve profile")

        if not user:
            raise NotFoundError("User")

        return UserProfile.model_validate(user)
