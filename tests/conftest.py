"""
Test configuration and fixtures for the rental listing API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read once at import time, so the environment is prepared first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-rental-listing-suite")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "rental-listing-test-uploads"))

import pytest
import uuid
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.database import Base, get_db
from app.models.user import User, UserRole
from app.models.listing import Listing, Gender
from app.models.image import ListingImage
from app.models.favorite import Favorite
from app.models.inquiry import Inquiry, InquiryStatus
from app.repositories.user import UserRepository
from app.repositories.listing import ListingRepository
from app.services.auth import AuthService
from app.services.listing import ListingService
from app.utils.auth import create_access_token
from app.utils.dependencies import Identity


DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client sharing the test database session."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository and service fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def listing_repository(db_session: AsyncSession) -> ListingRepository:
    return ListingRepository(db_session)


@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def listing_service(db_session: AsyncSession) -> ListingService:
    return ListingService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    _phone_counter = 0

    @classmethod
    def next_phone(cls) -> str:
        cls._phone_counter += 1
        return f"98{cls._phone_counter:08d}"

    @classmethod
    async def create(
        cls,
        session: AsyncSession,
        role: UserRole = UserRole.TENANT,
        name: str = "Test User",
        email: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True
    ) -> User:
        return await UserRepository(session).create_user({
            "name": name,
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "phone": cls.next_phone(),
            "password": password,
            "role": role,
            "is_active": is_active,
        })


class ListingFactory:
    """Factory for creating test listings."""

    @staticmethod
    def listing_data(**overrides) -> Dict:
        data = {
            "title": "Sunny room near station",
            "description": "Quiet street, close to shops",
            "rent": Decimal("10000.00"),
            "address": "12 MG Road",
            "city": "Pune",
            "gender": Gender.ANY,
            "furnished": False,
            "amenities": "WiFi, Parking",
            "available_from": date(2026, 1, 1),
            "is_active": True,
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create(
        session: AsyncSession,
        owner: User,
        image_paths: List[str] = (),
        **overrides
    ) -> Listing:
        return await ListingRepository(session).create_listing(
            {**ListingFactory.listing_data(**overrides), "user_id": owner.id},
            list(image_paths)
        )


class ImageFactory:
    """Factory for attaching images to an existing listing."""

    @staticmethod
    async def create(
        session: AsyncSession,
        listing: Listing,
        image_path: str = "uploads/test.jpg",
        is_primary: bool = False,
        display_order: int = 1
    ) -> ListingImage:
        image = ListingImage(
            listing_id=listing.id,
            image_path=image_path,
            is_primary=is_primary,
            display_order=display_order
        )
        session.add(image)
        await session.commit()
        await session.refresh(image)
        return image


class FavoriteFactory:
    @staticmethod
    async def create(session: AsyncSession, user: User, listing: Listing) -> Favorite:
        favorite = Favorite(user_id=user.id, listing_id=listing.id)
        session.add(favorite)
        await session.commit()
        await session.refresh(favorite)
        return favorite


class InquiryFactory:
    @staticmethod
    async def create(
        session: AsyncSession,
        listing: Listing,
        sender: Optional[User] = None,
        status: InquiryStatus = InquiryStatus.PENDING,
        message: str = "Is this still available?"
    ) -> Inquiry:
        inquiry = Inquiry(
            listing_id=listing.id,
            user_id=sender.id if sender else None,
            name=sender.name if sender else "Guest Visitor",
            email=sender.email if sender else "guest@example.com",
            phone=sender.phone if sender else "9000000001",
            message=message,
            status=status
        )
        session.add(inquiry)
        await session.commit()
        await session.refresh(inquiry)
        return inquiry


def identity_for(user: User) -> Identity:
    return Identity(user_id=user.id, name=user.name, email=user.email, role=user.role)


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user_id=user.id, email=user.email, name=user.name, role=user.role)
    return {"Authorization": f"Bearer {token}"}


# Common users
@pytest.fixture
async def tenant(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, UserRole.TENANT, name="Tara Tenant")


@pytest.fixture
async def landlord(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, UserRole.LANDLORD, name="Lalit Landlord")


@pytest.fixture
async def other_landlord(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, UserRole.LANDLORD, name="Omar Owner")


@pytest.fixture
async def admin(db_session: AsyncSession) -> User:
    return await UserFactory.create(db_session, UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
async def listing(db_session: AsyncSession, landlord: User) -> Listing:
    return await ListingFactory.create(
        db_session,
        landlord,
        image_paths=["uploads/front.jpg", "uploads/kitchen.jpg"]
    )
