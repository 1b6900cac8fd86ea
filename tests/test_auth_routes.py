"""
Forum — Login, Registration, Home and Health Tests
===================================================

What we test:
    ✅ Login with good / bad credentials, `next` handling
    ✅ Logout drops the session
    ✅ Registration creates a ROLE_USER account and logs it in
    ✅ Home page, health probe, unknown routes
    ✅ Request ids: well-formed ones echoed, anything else replaced
"""

import pytest

from forum.middleware.request_id import accept_request_id
from forum.models import ROLE_USER, User
from forum.repositories import UserRepository


class TestLogin:

    @pytest.mark.asyncio
    async def test_form_renders(self, client):
        response = await client.get("/login")
        assert response.status_code == 200
        assert 'name="password"' in response.text

    @pytest.mark.asyncio
    async def test_bad_credentials(self, client, seeded):
        response = await client.post(
            "/login", data={"email": "admin@example.com", "password": "not-the-password"}
        )
        assert response.status_code == 200
        assert "Invalid credentials." in response.text
        # The typed password is never echoed back
        assert "not-the-password" not in response.text

    @pytest.mark.asyncio
    async def test_unknown_email(self, client, seeded):
        response = await client.post(
            "/login", data={"email": "ghost@example.com", "password": "whatever"}
        )
        assert "Invalid credentials." in response.text

    @pytest.mark.asyncio
    async def test_next_is_followed(self, client, seeded):
        response = await client.post(
            "/login",
            params={"next": "/questions/create"},
            data={"email": "admin@example.com", "password": "admin1234"},
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/questions/create"

    @pytest.mark.asyncio
    async def test_offsite_next_is_ignored(self, client, seeded):
        response = await client.post(
            "/login",
            params={"next": "//evil.example.com/"},
            data={"email": "admin@example.com", "password": "admin1234"},
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    @pytest.mark.asyncio
    async def test_logout(self, admin_client):
        response = await admin_client.get("/logout")
        assert response.status_code == 303
        assert response.headers["location"] == "/"

        home = await admin_client.get("/")
        assert "You have been logged out." in home.text
        assert (await admin_client.get("/questions/create")).status_code == 303


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_logs_in(self, client, seeded, session_factory):
        response = await client.post(
            "/register",
            data={
                "email": "Newbie@Example.com",
                "nickname": "",
                "password": "newbie-secret",
                "password_repeat": "newbie-secret",
            },
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        async with session_factory() as session:
            newbie = await UserRepository(session).find_one_by_email("newbie@example.com")
        assert newbie.nickname == "newbie"
        assert newbie.roles == [ROLE_USER]
        assert newbie.password != "newbie-secret"

        home = await client.get("/")
        assert "Your account has been created. Welcome!" in home.text
        assert "Log out" in home.text

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, seeded, count):
        response = await client.post(
            "/register",
            data={
                "email": "member@example.com",
                "password": "another-secret",
                "password_repeat": "another-secret",
            },
        )
        assert response.status_code == 200
        assert "This e-mail address is already registered." in response.text
        assert await count(User) == 2


class TestHomeAndHealth:

    @pytest.mark.asyncio
    async def test_home_lists_latest_questions(self, client, make_question):
        for index in range(7):
            await make_question(title=f"Recent question {index}")

        response = await client.get("/")

        assert response.status_code == 200
        assert response.text.count("Recent question") == 5
        assert "Recent question 6" in response.text

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unknown_route_renders_error_page(self, client):
        response = await client.get("/no/such/page")
        assert response.status_code == 404
        assert "Error 404" in response.text

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sent", ["", "has spaces", "<script>", "x" * 65])
    async def test_malformed_request_id_is_replaced(self, client, sent):
        response = await client.get("/", headers={"X-Request-ID": sent})
        returned = response.headers["X-Request-ID"]
        assert returned != sent
        assert len(returned) == 12

    @pytest.mark.asyncio
    async def test_missing_request_id_is_generated(self, client):
        first = await client.get("/")
        second = await client.get("/")
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]


@pytest.mark.parametrize("incoming", ["abc123", "edge-01.req_7", "A" * 64])
def test_well_formed_ids_are_kept(incoming):
    assert accept_request_id(incoming) == incoming


@pytest.mark.asyncio
async def test_error_page_shows_request_id(client):
    response = await client.get("/no/such/page", headers={"X-Request-ID": "trace-42"})
    assert response.status_code == 404
    assert "Request ID: trace-42" in response.text
