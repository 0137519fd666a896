"""Integration tests for the User profile API."""

import pytest
from httpx import AsyncClient

from infrastructure.storage import LocalStorage
from tests.conftest import PNG_BYTES


def _avatar(data: bytes = PNG_BYTES, content_type: str = "image/png") -> dict:
    return {"avatar": ("me.png", data, content_type)}


class TestProfile:
    @pytest.mark.asyncio
    async def test_new_user_has_empty_profile(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/user/profile")

        assert response.status_code == 200
        assert response.json() == {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane@example.com",
            "avatar": None,
            "phone": None,
            "description": None,
            "latitude": None,
            "longitude": None,
            "commercial": False,
        }

    @pytest.mark.asyncio
    async def test_profile_requires_token(self, client: AsyncClient):
        response = await client.get("/user/profile")

        assert response.status_code == 403
        assert response.json()["error_code"] == "AUTH_TOKEN_MISSING"

    @pytest.mark.asyncio
    async def test_profile_rejects_bad_token(self, client: AsyncClient):
        response = await client.get(
            "/user/profile", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self, authenticated_client: AsyncClient):
        first = await authenticated_client.post(
            "/user/update",
            json={"phone": "+380965528451", "description": "Have a nice day!"},
        )
        assert first.status_code == 200

        response = await authenticated_client.post(
            "/user/update",
            json={"firstName": "Andrew", "latitude": 43.12543, "longitude": 153.63234, "commercial": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["firstName"] == "Andrew"
        assert data["lastName"] == "Doe"
        assert data["phone"] == "+380965528451"
        assert data["description"] == "Have a nice day!"
        assert data["latitude"] == 43.12543
        assert data["commercial"] is True

        profile = await authenticated_client.get("/user/profile")
        assert profile.json() == data

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("payload", "path"),
        [
            ({"phone": "+3809655284511234"}, "phone"),
            ({"latitude": 100}, "latitude"),
            ({"longitude": 200}, "longitude"),
        ],
    )
    async def test_update_validation(
        self, authenticated_client: AsyncClient, payload: dict, path: str
    ):
        response = await authenticated_client.post("/user/update", json=payload)

        assert response.status_code == 400
        assert response.json()["details"][0]["path"] == path


class TestAvatar:
    @pytest.mark.asyncio
    async def test_upload_avatar(
        self, authenticated_client: AsyncClient, storage: LocalStorage
    ):
        response = await authenticated_client.post("/user/avatar", files=_avatar())

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "File saved"
        assert body["avatar"].startswith("/uploads/avatars/")
        assert storage.exists(body["avatar"].removeprefix("/uploads/"))

        profile = await authenticated_client.get("/user/profile")
        assert profile.json()["avatar"] == body["avatar"]

    @pytest.mark.asyncio
    async def test_new_avatar_replaces_old_file(
        self, authenticated_client: AsyncClient, storage: LocalStorage
    ):
        first = (await authenticated_client.post("/user/avatar", files=_avatar())).json()
        second = (await authenticated_client.post("/user/avatar", files=_avatar())).json()

        assert first["avatar"] != second["avatar"]
        assert not storage.exists(first["avatar"].removeprefix("/uploads/"))

    @pytest.mark.asyncio
    async def test_empty_avatar(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/user/avatar", files=_avatar(b""))

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMPTY_FILE"

    @pytest.mark.asyncio
    async def test_missing_avatar(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post("/user/avatar", data={"other": "x"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "EMPTY_FILE"

    @pytest.mark.asyncio
    async def test_non_image_avatar(self, authenticated_client: AsyncClient):
        response = await authenticated_client.post(
            "/user/avatar", files=_avatar(b"%PDF-1.4", "application/pdf")
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "UNSUPPORTED_FILE_TYPE"

    @pytest.mark.asyncio
    async def test_delete_avatar(
        self, authenticated_client: AsyncClient, storage: LocalStorage
    ):
        uploaded = (await authenticated_client.post("/user/avatar", files=_avatar())).json()

        response = await authenticated_client.delete("/user/avatar")

        assert response.status_code == 200
        assert response.json() == {"message": "File deleted"}
        assert not storage.exists(uploaded["avatar"].removeprefix("/uploads/"))
        assert (await authenticated_client.get("/user/profile")).json()["avatar"] is None

    @pytest.mark.asyncio
    async def test_delete_without_avatar_conflicts(self, authenticated_client: AsyncClient):
        response = await authenticated_client.delete("/user/avatar")

        assert response.status_code == 409
        assert response.json()["error_code"] == "AVATAR_NOT_FOUND"
