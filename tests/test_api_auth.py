"""
API tests for the authentication endpoint.
"""

from httpx import AsyncClient

from app.utils.auth import create_access_token
from tests.conftest import DEFAULT_PASSWORD, UserFactory, auth_headers

AUTH_URL = "/api/auth"


class TestRegister:

    async def test_register_with_json_body(self, async_client: AsyncClient):
        response = await async_client.post(AUTH_URL, params={"action": "register"}, json={
            "name": "Meera",
            "email": "meera@example.com",
            "phone": "9812345678",
            "password": "secret1",
            "role": "landlord",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Registration successful"
        assert body["data"]["role"] == "landlord"
        assert body["data"]["access_token"]

    async def test_register_with_form_body(self, async_client: AsyncClient):
        response = await async_client.post(AUTH_URL, data={
            "action": "register",
            "name": "Form User",
            "email": "form@example.com",
            "phone": "9812345679",
            "password": "secret1",
        })

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "tenant"

    async def test_register_missing_fields(self, async_client: AsyncClient):
        response = await async_client.post(AUTH_URL, data={"action": "register", "name": "X"})

        assert response.status_code == 422
        assert response.json() == {
            "success": False,
            "message": "Missing required fields: email, phone, password",
        }

    async def test_register_duplicate(self, async_client: AsyncClient, tenant):
        response = await async_client.post(AUTH_URL, data={
            "action": "register",
            "name": "Again",
            "email": tenant.email,
            "phone": "9812345670",
            "password": "secret1",
        })

        assert response.status_code == 409
        assert response.json()["message"] == "Email already registered"


class TestLogin:

    async def test_login_success(self, async_client: AsyncClient, tenant):
        response = await async_client.post(AUTH_URL, data={
            "action": "login", "email": tenant.email, "password": DEFAULT_PASSWORD,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["user_id"] == tenant.id

    async def test_login_invalid(self, async_client: AsyncClient, tenant):
        response = await async_client.post(AUTH_URL, data={
            "action": "login", "email": tenant.email, "password": "wrong-pass",
        })

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid email or password"}

    async def test_login_deactivated(self, async_client: AsyncClient, db_session):
        user = await UserFactory.create(db_session, is_active=False)

        response = await async_client.post(AUTH_URL, data={
            "action": "login", "email": user.email, "password": DEFAULT_PASSWORD,
        })

        assert response.status_code == 403
        assert response.json()["message"] == "Account is deactivated. Please contact admin."


class TestSession:

    async def test_logout(self, async_client: AsyncClient):
        response = await async_client.post(AUTH_URL, params={"action": "logout"})

        assert response.json() == {"success": True, "message": "Logged out successfully"}

    async def test_check_authenticated(self, async_client: AsyncClient, landlord):
        response = await async_client.get(AUTH_URL, params={"action": "check"}, headers=auth_headers(landlord))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "user_id": landlord.id,
            "name": landlord.name,
            "email": landlord.email,
            "role": "landlord",
        }

    async def test_check_anonymous(self, async_client: AsyncClient):
        response = await async_client.get(AUTH_URL, params={"action": "check"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated"}

    async def test_invalid_token_is_anonymous(self, async_client: AsyncClient):
        response = await async_client.get(
            AUTH_URL, params={"action": "check"}, headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401

    async def test_token_of_deactivated_user_is_anonymous(self, async_client: AsyncClient, db_session):
        user = await UserFactory.create(db_session, is_active=False)
        token = create_access_token(user_id=user.id, email=user.email, name=user.name, role=user.role)

        response = await async_client.get(
            AUTH_URL, params={"action": "profile"}, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Authentication required. Please login."

    async def test_profile(self, async_client: AsyncClient, tenant):
        response = await async_client.get(AUTH_URL, params={"action": "profile"}, headers=auth_headers(tenant))

        data = response.json()["data"]
        assert data["email"] == tenant.email
        assert data["phone"] == tenant.phone
        assert "hashed_password" not in data


class TestDispatch:

    async def test_unknown_action(self, async_client: AsyncClient):
        response = await async_client.get(AUTH_URL, params={"action": "explode"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid action"}

    async def test_missing_action(self, async_client: AsyncClient):
        response = await async_client.get(AUTH_URL)

        assert response.json()["message"] == "Invalid action"
