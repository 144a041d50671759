"""
API tests for the admin endpoint.
"""

from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.user import User
from tests.conftest import DEFAULT_PASSWORD, FavoriteFactory, auth_headers

ADMIN_URL = "/api/admin"


class TestAdminAccess:

    async def test_non_admin_rejected(self, async_client: AsyncClient, landlord):
        response = await async_client.get(ADMIN_URL, params={"action": "users"}, headers=auth_headers(landlord))

        assert response.status_code == 403
        assert response.json() == {"success": False, "message": "Insufficient permissions."}

    async def test_anonymous_rejected(self, async_client: AsyncClient):
        response = await async_client.get(ADMIN_URL, params={"action": "stats"})

        assert response.status_code == 401


class TestAdminActions:

    async def test_users(self, async_client: AsyncClient, admin, tenant, landlord, listing):
        response = await async_client.get(ADMIN_URL, params={"action": "users"}, headers=auth_headers(admin))

        body = response.json()
        assert body["message"] == "Users retrieved"
        counts = {row["id"]: row["listing_count"] for row in body["data"]}
        assert counts[landlord.id] == 1
        assert counts[tenant.id] == 0

    async def test_listings(self, async_client: AsyncClient, db_session, admin, tenant, listing):
        await FavoriteFactory.create(db_session, tenant, listing)

        response = await async_client.get(ADMIN_URL, params={"action": "listings"}, headers=auth_headers(admin))

        row = response.json()["data"][0]
        assert row["favorite_count"] == 1
        assert row["landlord_name"] == "Lalit Landlord"

    async def test_toggle_user_blocks_login(self, async_client: AsyncClient, admin, tenant):
        response = await async_client.post(
            ADMIN_URL, data={"action": "toggle-user", "user_id": str(tenant.id)}, headers=auth_headers(admin)
        )
        assert response.json() == {"success": True, "message": "User deactivated", "data": {"is_active": False}}

        login = await async_client.post(
            "/api/auth", data={"action": "login", "email": tenant.email, "password": DEFAULT_PASSWORD}
        )
        assert login.status_code == 403

    async def test_toggle_self(self, async_client: AsyncClient, admin):
        response = await async_client.post(
            ADMIN_URL, data={"action": "toggle-user", "user_id": str(admin.id)}, headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot deactivate your own account"

    async def test_toggle_listing(self, async_client: AsyncClient, admin, listing):
        response = await async_client.post(
            ADMIN_URL, data={"action": "toggle-listing", "listing_id": str(listing.id)}, headers=auth_headers(admin)
        )

        assert response.json()["message"] == "Listing deactivated"
        search = await async_client.get("/api/listings", params={"action": "search"})
        assert search.json()["data"]["total"] == 0

    async def test_stats(self, async_client: AsyncClient, admin, listing):
        response = await async_client.get(ADMIN_URL, params={"action": "stats"}, headers=auth_headers(admin))

        data = response.json()["data"]
        assert response.json()["message"] == "Statistics retrieved"
        assert data["users_by_role"] == {"admin": 1, "landlord": 1}
        assert data["total_listings"] == 1
        assert data["recent_listings"] == 1

    async def test_delete_user(self, async_client: AsyncClient, db_session, admin, landlord, listing):
        response = await async_client.post(
            ADMIN_URL, data={"action": "delete-user", "user_id": str(landlord.id)}, headers=auth_headers(admin)
        )

        assert response.json() == {"success": True, "message": "User deleted successfully"}
        result = await db_session.execute(select(func.count(User.id)))
        assert result.scalar() == 1

    async def test_delete_listing(self, async_client: AsyncClient, admin, listing):
        response = await async_client.post(
            ADMIN_URL, data={"action": "delete-listing", "listing_id": str(listing.id)}, headers=auth_headers(admin)
        )

        assert response.json()["message"] == "Listing deleted successfully"
        detail = await async_client.get("/api/listings", params={"action": "detail", "id": listing.id})
        assert detail.status_code == 404
