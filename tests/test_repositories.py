"""
Tests for repository classes.
Covers persistence, projections with joined landlord data and cascading deletes.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select, func

from app.models.favorite import Favorite
from app.models.image import ListingImage
from app.models.inquiry import Inquiry
from app.models.listing import Listing
from app.models.user import User, UserRole
from app.repositories.favorite import FavoriteRepository
from app.repositories.inquiry import InquiryRepository
from app.repositories.listing import ListingRepository
from app.repositories.predicates import build_predicates
from app.repositories.user import UserRepository
from app.schemas.search import SearchCriteria
from app.utils.auth import verify_password
from tests.conftest import (
    DEFAULT_PASSWORD,
    FavoriteFactory,
    InquiryFactory,
    ListingFactory,
    UserFactory
)


async def count_rows(session, model, *conditions) -> int:
    result = await session.execute(select(func.count(model.id)).where(*conditions))
    return result.scalar()


class TestUserRepository:
    """Test UserRepository functionality."""

    async def test_create_user_hashes_password(self, user_repository: UserRepository):
        user = await user_repository.create_user({
            "name": "Asha",
            "email": "  Asha@Example.com ",
            "phone": "9876543210",
            "password": "secret99",
        })

        assert user.id is not None
        assert user.email == "asha@example.com"
        assert user.role == UserRole.TENANT
        assert user.is_active is True
        assert user.hashed_password != "secret99"
        assert verify_password("secret99", user.hashed_password)

    async def test_authenticate_user(self, user_repository: UserRepository, tenant: User):
        assert (await user_repository.authenticate_user(tenant.email, DEFAULT_PASSWORD)).id == tenant.id
        assert await user_repository.authenticate_user(tenant.email, "wrong-password") is None
        assert await user_repository.authenticate_user("nobody@example.com", DEFAULT_PASSWORD) is None

    async def test_count_by_role(self, user_repository: UserRepository, tenant, landlord, other_landlord, admin):
        counts = await user_repository.count_by_role()

        assert counts == {"tenant": 1, "landlord": 2, "admin": 1}

    async def test_list_with_counts(self, user_repository: UserRepository, db_session, landlord, tenant, listing):
        await InquiryFactory.create(db_session, listing, sender=tenant)

        rows = {row["id"]: row for row in await user_repository.list_with_counts()}

        assert rows[landlord.id]["listing_count"] == 1
        assert rows[landlord.id]["inquiry_count"] == 0
        assert rows[tenant.id]["inquiry_count"] == 1
        assert "hashed_password" not in rows[tenant.id]

    async def test_count_created_since(self, user_repository: UserRepository, tenant):
        past = datetime.now(timezone.utc) - timedelta(days=7)
        future = datetime.now(timezone.utc) + timedelta(days=1)

        assert await user_repository.count_created_since(past) == 1
        assert await user_repository.count_created_since(future) == 0

    async def test_delete_with_cascade(
        self, user_repository: UserRepository, db_session, landlord, tenant, listing
    ):
        other_owner = await UserFactory.create(db_session, UserRole.LANDLORD)
        other_listing = await ListingFactory.create(db_session, other_owner)
        await FavoriteFactory.create(db_session, tenant, listing)
        await FavoriteFactory.create(db_session, landlord, other_listing)
        await InquiryFactory.create(db_session, listing, sender=tenant)
        sent = await InquiryFactory.create(db_session, other_listing, sender=landlord)

        assert await user_repository.delete_with_cascade(landlord.id) is True

        assert await count_rows(db_session, User, User.id == landlord.id) == 0
        assert await count_rows(db_session, Listing, Listing.user_id == landlord.id) == 0
        assert await count_rows(db_session, ListingImage, ListingImage.listing_id == listing.id) == 0
        assert await count_rows(db_session, Favorite) == 0
        assert await count_rows(db_session, Inquiry, Inquiry.listing_id == listing.id) == 0

        # Inquiries sent on other listings survive without a sender
        result = await db_session.execute(select(Inquiry.user_id).where(Inquiry.id == sent.id))
        assert result.one() == (None,)

    async def test_delete_missing_user(self, user_repository: UserRepository):
        assert await user_repository.delete_with_cascade(999) is False


class TestListingRepository:
    """Test ListingRepository functionality."""

    async def test_create_listing_with_images(self, listing_repository: ListingRepository, landlord):
        listing = await listing_repository.create_listing(
            {**ListingFactory.listing_data(), "user_id": landlord.id},
            ["uploads/a.jpg", "uploads/b.jpg", "uploads/c.jpg"]
        )

        assert [image.image_path for image in listing.images] == ["uploads/a.jpg", "uploads/b.jpg", "uploads/c.jpg"]
        assert [image.display_order for image in listing.images] == [1, 2, 3]
        assert [image.is_primary for image in listing.images] == [True, False, False]
        assert listing.primary_image.image_path == "uploads/a.jpg"
        assert listing.views == 0

    async def test_update_listing_replaces_images(self, listing_repository: ListingRepository, db_session, listing):
        await listing_repository.update_listing(listing, {"title": "Renamed"}, ["uploads/new.jpg"])

        assert listing.title == "Renamed"
        assert await count_rows(db_session, ListingImage, ListingImage.listing_id == listing.id) == 1
        assert listing.images[0].image_path == "uploads/new.jpg"
        assert listing.images[0].is_primary is True

    async def test_update_listing_keeps_images_by_default(self, listing_repository: ListingRepository, db_session, listing):
        await listing_repository.update_listing(listing, {"rent": Decimal("11000.00")})

        assert await count_rows(db_session, ListingImage, ListingImage.listing_id == listing.id) == 2

    async def test_get_active_and_owned(self, listing_repository: ListingRepository, db_session, landlord, other_landlord):
        hidden = await ListingFactory.create(db_session, landlord, is_active=False)

        assert await listing_repository.get_active(hidden.id) is None
        assert (await listing_repository.get_owned(hidden.id, landlord.id)).id == hidden.id
        assert await listing_repository.get_owned(hidden.id, other_landlord.id) is None

    async def test_increment_views(self, listing_repository: ListingRepository, db_session, listing):
        await listing_repository.increment_views(listing.id)
        await listing_repository.increment_views(listing.id)

        result = await db_session.execute(select(Listing.views).where(Listing.id == listing.id))
        assert result.scalar() == 2

    async def test_count_and_fetch_agree(self, listing_repository: ListingRepository, db_session, landlord):
        for city in ("Pune", "Pune", "Mumbai"):
            await ListingFactory.create(db_session, landlord, city=city)
        predicates = build_predicates(SearchCriteria(city="pune"))

        total = await listing_repository.count_matching(predicates)
        rows = await listing_repository.fetch_page(predicates, limit=12, offset=0)

        assert total == len(rows) == 2
        assert {row["city"] for row in rows} == {"Pune"}
        assert set(rows[0]) >= {"id", "title", "rent", "landlord_name", "landlord_phone", "thumbnail"}

    async def test_thumbnail_is_primary_image(self, listing_repository: ListingRepository, db_session, landlord):
        await ListingFactory.create(db_session, landlord, image_paths=["uploads/first.png", "uploads/second.png"])

        rows = await listing_repository.fetch_page(build_predicates(SearchCriteria()), limit=12, offset=0)

        assert rows[0]["thumbnail"] == "uploads/first.png"

    async def test_list_by_owner_includes_inactive(self, listing_repository: ListingRepository, db_session, landlord, tenant):
        active = await ListingFactory.create(db_session, landlord)
        await ListingFactory.create(db_session, landlord, is_active=False)
        await InquiryFactory.create(db_session, active, sender=tenant)
        await InquiryFactory.create(db_session, active)

        rows = await listing_repository.list_by_owner(landlord.id)

        assert len(rows) == 2
        assert {row["id"]: row["inquiry_count"] for row in rows}[active.id] == 2

    async def test_latest(self, listing_repository: ListingRepository, db_session, landlord):
        created = [await ListingFactory.create(db_session, landlord, title=f"N{i}") for i in range(4)]
        await ListingFactory.create(db_session, landlord, is_active=False)

        rows = await listing_repository.latest(3)

        assert [row["id"] for row in rows] == [created[3].id, created[2].id, created[1].id]

    async def test_list_for_admin_counts(self, listing_repository: ListingRepository, db_session, listing, tenant):
        await FavoriteFactory.create(db_session, tenant, listing)
        await InquiryFactory.create(db_session, listing, sender=tenant)

        row = (await listing_repository.list_for_admin())[0]

        assert row["favorite_count"] == 1
        assert row["inquiry_count"] == 1
        assert row["landlord_email"] is not None

    async def test_delete_with_cascade(self, listing_repository: ListingRepository, db_session, listing, tenant):
        await FavoriteFactory.create(db_session, tenant, listing)
        await InquiryFactory.create(db_session, listing, sender=tenant)

        assert await listing_repository.delete_with_cascade(listing.id) is True

        assert await count_rows(db_session, Listing) == 0
        assert await count_rows(db_session, ListingImage) == 0
        assert await count_rows(db_session, Favorite) == 0
        assert await count_rows(db_session, Inquiry) == 0


class TestFavoriteRepository:
    """Test FavoriteRepository functionality."""

    async def test_add_and_check(self, db_session, tenant, listing):
        repo = FavoriteRepository(db_session)

        assert await repo.is_favorite(tenant.id, listing.id) is False
        await repo.add(tenant.id, listing.id)
        assert await repo.is_favorite(tenant.id, listing.id) is True
        assert (await repo.get_for(tenant.id, listing.id)) is not None

    async def test_list_for_user_skips_inactive(self, db_session, tenant, landlord, listing):
        hidden = await ListingFactory.create(db_session, landlord, is_active=False)
        await FavoriteFactory.create(db_session, tenant, listing)
        await FavoriteFactory.create(db_session, tenant, hidden)

        rows = await FavoriteRepository(db_session).list_for_user(tenant.id)

        assert [row["id"] for row in rows] == [listing.id]
        assert rows[0]["landlord_name"] == landlord.name
        assert rows[0]["thumbnail"] == "uploads/front.jpg"


class TestInquiryRepository:
    """Test InquiryRepository functionality."""

    async def test_list_for_landlord(self, db_session, landlord, other_landlord, tenant, listing):
        other_listing = await ListingFactory.create(db_session, other_landlord)
        mine = await InquiryFactory.create(db_session, listing, sender=tenant)
        await InquiryFactory.create(db_session, other_listing, sender=tenant)

        rows = await InquiryRepository(db_session).list_for_landlord(landlord.id)

        assert [row["id"] for row in rows] == [mine.id]
        assert rows[0]["listing_title"] == listing.title

    async def test_list_for_landlord_filtered_by_listing(self, db_session, landlord, tenant, listing):
        second = await ListingFactory.create(db_session, landlord)
        await InquiryFactory.create(db_session, listing, sender=tenant)
        await InquiryFactory.create(db_session, second, sender=tenant)

        rows = await InquiryRepository(db_session).list_for_landlord(landlord.id, second.id)

        assert [row["listing_id"] for row in rows] == [second.id]

    async def test_list_for_sender(self, db_session, landlord, tenant, listing):
        await InquiryFactory.create(db_session, listing, sender=tenant)
        await InquiryFactory.create(db_session, listing)

        rows = await InquiryRepository(db_session).list_for_sender(tenant.id)

        assert len(rows) == 1
        assert rows[0]["landlord_email"] == landlord.email
        assert rows[0]["thumbnail"] == "uploads/front.jpg"

    async def test_get_with_owner(self, db_session, landlord, tenant, listing):
        inquiry = await InquiryFactory.create(db_session, listing, sender=tenant)

        found, owner_id = await InquiryRepository(db_session).get_with_owner(inquiry.id)

        assert found.id == inquiry.id
        assert owner_id == landlord.id
        assert await InquiryRepository(db_session).get_with_owner(999) is None
