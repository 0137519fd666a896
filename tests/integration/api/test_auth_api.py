"""Integration tests for the authentication API."""

from urllib.parse import parse_qs, urlparse

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from domain.entities.user import UserWithProfile
from infrastructure.database.models import ProfileModel, UserModel
from infrastructure.mail import InMemoryMailer
from tests.conftest import TEST_PASSWORD

REGISTRATION = {
    "email": "new@example.com",
    "password": "secret1",
    "firstName": "Andrew",
    "lastName": "Pavlov",
}


def _link_param(mailer: InMemoryMailer, name: str) -> str:
    text = mailer.outbox[-1].text
    link = next(word for word in text.split() if word.startswith("http"))
    return parse_qs(urlparse(link).query)[name][0]


async def _count_users(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(UserModel))).scalar_one()


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_sends_email_without_creating_user(
        self,
        client: AsyncClient,
        mailer: InMemoryMailer,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        response = await client.post("/register", json=REGISTRATION)

        assert response.status_code == 200
        assert response.json() == {"message": "Email sent"}
        assert mailer.outbox[0].to == "new@example.com"
        assert await _count_users(session_factory) == 0

    @pytest.mark.asyncio
    async def test_confirm_creates_user_and_profile(
        self,
        client: AsyncClient,
        mailer: InMemoryMailer,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        await client.post("/register", json=REGISTRATION)
        tkey = _link_param(mailer, "tkey")

        response = await client.get("/register/confirm", params={"tkey": tkey})

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new@example.com"
        assert data["firstName"] == "Andrew"
        assert data["commercial"] is False
        async with session_factory() as session:
            profiles = (await session.execute(select(ProfileModel))).scalars().all()
        assert len(profiles) == 1

        login = await client.post(
            "/login", json={"email": "new@example.com", "password": "secret1"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_confirm_twice_conflicts(self, client: AsyncClient, mailer: InMemoryMailer):
        await client.post("/register", json=REGISTRATION)
        tkey = _link_param(mailer, "tkey")
        await client.get("/register/confirm", params={"tkey": tkey})

        response = await client.get("/register/confirm", params={"tkey": tkey})

        assert response.status_code == 409
        assert response.json()["error_code"] == "USER_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_confirm_rejects_session_token(
        self, client: AsyncClient, session_token: str
    ):
        response = await client.get("/register/confirm", params={"tkey": session_token})

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_PURPOSE_MISMATCH"

    @pytest.mark.asyncio
    async def test_confirm_requires_token(self, client: AsyncClient):
        response = await client.get("/register/confirm")

        assert response.status_code == 400
        assert response.json()["details"][0]["location"] == "query"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_409_even_with_invalid_fields(
        self, client: AsyncClient, registered_user: UserWithProfile
    ):
        response = await client.post(
            "/register", json={"email": "JANE@example.com", "password": "x"}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "USER_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_invalid_registration_is_400(self, client: AsyncClient):
        response = await client.post(
            "/register", json={**REGISTRATION, "password": "toolongpassword"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert body["details"][0]["path"] == "password"


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_returns_token_and_user(
        self, client: AsyncClient, registered_user: UserWithProfile
    ):
        response = await client.post(
            "/login", json={"email": "jane@example.com", "password": TEST_PASSWORD}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "jane@example.com"
        assert data["user"]["firstName"] == "Jane"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_match(
        self, client: AsyncClient, registered_user: UserWithProfile
    ):
        wrong = await client.post(
            "/login", json={"email": "jane@example.com", "password": "wrong1"}
        )
        unknown = await client.post(
            "/login", json={"email": "nobody@example.com", "password": TEST_PASSWORD}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["message"] == "Login or password incorrect"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_invalidates_session(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.get("/logout", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Done"}

        again = await client.get("/user/profile", headers=auth_headers)
        assert again.status_code == 401
        assert again.json()["error_code"] == "TOKEN_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_logout_without_token_is_403(self, client: AsyncClient):
        response = await client.get("/logout")

        assert response.status_code == 403
        assert response.json()["error_code"] == "AUTH_TOKEN_MISSING"

    @pytest.mark.asyncio
    async def test_other_sessions_survive_logout(
        self, client: AsyncClient, registered_user: UserWithProfile, auth_headers: dict[str, str]
    ):
        other = await client.post(
            "/login", json={"email": "jane@example.com", "password": TEST_PASSWORD}
        )
        other_headers = {"Authorization": f"Bearer {other.json()['token']}"}

        await client.get("/logout", headers=auth_headers)

        assert (await client.get("/user/profile", headers=other_headers)).status_code == 200


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email(self, client: AsyncClient):
        response = await client.post("/forgotpassword", json={"email": "nobody@example.com"})

        assert response.status_code == 401
        assert response.json()["error_code"] == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_reset_flow_changes_password_once(
        self, client: AsyncClient, registered_user: UserWithProfile, mailer: InMemoryMailer
    ):
        response = await client.post("/forgotpassword", json={"email": "jane@example.com"})
        assert response.status_code == 200
        assert response.json() == {"message": "Email sent"}
        reset_headers = {"Authorization": f"Bearer {_link_param(mailer, 'token')}"}

        changed = await client.post(
            "/changepassword", json={"password": "newpw1"}, headers=reset_headers
        )
        assert changed.status_code == 201
        assert changed.json() == {"message": "Password changed"}

        reused = await client.post(
            "/changepassword", json={"password": "newpw2"}, headers=reset_headers
        )
        assert reused.status_code == 401

        old = await client.post(
            "/login", json={"email": "jane@example.com", "password": TEST_PASSWORD}
        )
        new = await client.post("/login", json={"email": "jane@example.com", "password": "newpw1"})
        assert old.status_code == 401
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_reset_token_is_not_a_session(
        self, client: AsyncClient, registered_user: UserWithProfile, mailer: InMemoryMailer
    ):
        await client.post("/forgotpassword", json={"email": "jane@example.com"})
        reset_headers = {"Authorization": f"Bearer {_link_param(mailer, 'token')}"}

        response = await client.get("/user/profile", headers=reset_headers)

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_PURPOSE_MISMATCH"

    @pytest.mark.asyncio
    async def test_change_password_with_session(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/changepassword", json={"password": "newpw1"}, headers=auth_headers
        )

        assert response.status_code == 201
        # The session stays valid after a password change
        assert (await client.get("/user/profile", headers=auth_headers)).status_code == 200

    @pytest.mark.asyncio
    async def test_change_password_validates_length(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/changepassword", json={"password": "123"}, headers=auth_headers
        )

        assert response.status_code == 400
