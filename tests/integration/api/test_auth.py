"""Integration tests for auth endpoints."""

import pytest
from httpx import AsyncClient

from workforce.config import settings
from workforce.core.auth import Role
from tests.factories import TEST_PASSWORD


pytestmark = pytest.mark.integration


class TestLogin:
    """Tests for the login endpoint."""

    async def test_login_success(self, client: AsyncClient, acme_employee):
        """POST /api/v1/auth/login should return a token and set the cookie."""
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": acme_employee.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == 200
        assert body["message"] == "Login successful"
        assert body["data"]["token_type"] == "bearer"
        assert body["data"]["access_token"]
        assert settings.access_token_cookie_name in response.cookies

    async def test_login_wrong_password(self, client: AsyncClient, acme_employee):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": acme_employee.email, "password": "Wr0ng!Password"},
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_credentials")

    async def test_login_unknown_email_looks_like_wrong_password(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_credentials")

    async def test_login_inactive_account(self, client: AsyncClient, db, acme_employee):
        acme_employee.is_active = False
        await db.flush()

        response = await client.post(
            "/api/v1/auth/login",
            json={"email": acme_employee.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 401

    async def test_logout_clears_cookie(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 200
        assert settings.access_token_cookie_name in response.headers.get("set-cookie", "")


class TestCurrentPrincipal:
    """Tests for GET /auth/me and token resolution."""

    async def test_me_with_bearer_token(
        self, client: AsyncClient, acme, make_user, make_sub_role, auth_headers
    ):
        sub_role = await make_sub_role(
            {"tasks.manage": True, "tasks.read": True, "users.read": False}, company=acme
        )
        user = await make_user(role=Role.COMPANY_ADMIN, company=acme, sub_role=sub_role)

        response = await client.get("/api/v1/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user.id
        assert data["role"] == "COMPANY_ADMIN"
        assert data["company_id"] == acme.id
        assert data["sub_role_id"] == sub_role.id
        assert data["permissions"] == ["tasks.manage", "tasks.read"]

    async def test_me_with_cookie(self, client: AsyncClient, acme_employee):
        login = await client.post(
            "/api/v1/auth/login",
            json={"email": acme_employee.email, "password": TEST_PASSWORD},
        )
        client.cookies.set(
            settings.access_token_cookie_name, login.json()["data"]["access_token"]
        )

        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["data"]["email"] == acme_employee.email

    async def test_me_without_token(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/missing_token")

    async def test_me_with_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/invalid_token")

    async def test_deactivated_user_token_rejected(
        self, client: AsyncClient, db, acme_employee, auth_headers
    ):
        headers = auth_headers(acme_employee)
        acme_employee.is_active = False
        await db.flush()

        response = await client.get("/api/v1/auth/me", headers=headers)

        assert response.status_code == 401
        assert response.json()["type"].endswith("/errors/user_inactive")

    async def test_role_change_applies_to_existing_token(
        self, client: AsyncClient, db, acme_employee, auth_headers
    ):
        headers = auth_headers(acme_employee)
        acme_employee.role = Role.COMPANY_ADMIN
        await db.flush()

        response = await client.get("/api/v1/auth/me", headers=headers)

        assert response.json()["data"]["role"] == "COMPANY_ADMIN"
