"""API tests for room photo and profile image uploads."""

import pytest
from bson import ObjectId
from botocore.exceptions import ClientError

from app.media.services.object_storage import ObjectStorageService

S3_PREFIX = "https://capsule-test.s3.eu-north-1.amazonaws.com/"


async def _create_room(client, headers, **fields):
    response = await client.post("/rooms", json={"name": "Summer", **fields}, headers=headers)
    return response.json()["id"]


async def _second_user(client):
    response = await client.post("/signup", json={"email": "erik@example.com", "password": "secret1"})
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _image(name="beach.jpg", data=b"\xff\xd8jpeg-bytes"):
    return {"image": (name, data, "image/jpeg")}


class TestRoomPhotoUpload:
    @pytest.mark.asyncio
    async def test_uploads_and_attaches_photo(self, client, db, s3_client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)

        response = await client.post(
            "/upload/room-photo",
            files=_image(),
            data={"roomId": room_id},
            headers=headers,
        )

        assert response.status_code == 200
        image_url = response.json()["imageUrl"]
        assert image_url.startswith(f"{S3_PREFIX}rooms/{room_id}/")
        assert image_url.endswith("-beach.jpg")

        kwargs = s3_client.put_object.call_args[1]
        assert kwargs["Bucket"] == "capsule-test"
        assert kwargs["Body"] == b"\xff\xd8jpeg-bytes"
        assert kwargs["ContentType"] == "image/jpeg"

        room = await db["Rooms"].find_one({"_id": ObjectId(room_id)})
        assert room["photos"] == [image_url]

    @pytest.mark.asyncio
    async def test_missing_file(self, client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)

        response = await client.post("/upload/room-photo", data={"roomId": room_id}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NO_FILE"

    @pytest.mark.asyncio
    async def test_missing_room_id(self, client, signed_up):
        _, headers = signed_up

        response = await client.post("/upload/room-photo", files=_image(), headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ROOM_ID_REQUIRED"

    @pytest.mark.asyncio
    async def test_file_too_large(self, client, services, s3_client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)
        services.settings.MAX_UPLOAD_BYTES = 4

        response = await client.post(
            "/upload/room-photo",
            files=_image(data=b"12345"),
            data={"roomId": room_id},
            headers=headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FILE_TOO_LARGE"
        s3_client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_users_private_room_is_hidden(self, client, s3_client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)
        other = await _second_user(client)

        response = await client.post(
            "/upload/room-photo",
            files=_image(),
            data={"roomId": room_id},
            headers=other,
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ROOM_NOT_FOUND"
        s3_client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_collaboration_room_accepts_other_users(self, client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers, isCollaboration=True)
        other = await _second_user(client)

        response = await client.post(
            "/upload/room-photo",
            files=_image(),
            data={"roomId": room_id},
            headers=other,
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_s3_failure(self, client, s3_client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)
        s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}},
            "PutObject",
        )

        response = await client.post(
            "/upload/room-photo",
            files=_image(),
            data={"roomId": room_id},
            headers=headers,
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "UPLOAD_FAILED"

    @pytest.mark.asyncio
    async def test_unconfigured_storage(self, client, services, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)
        services.object_storage = ObjectStorageService(bucket=None, region=None)

        response = await client.post(
            "/upload/room-photo",
            files=_image(),
            data={"roomId": room_id},
            headers=headers,
        )

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "STORAGE_NOT_CONFIGURED"


class TestProfileUpload:
    @pytest.mark.asyncio
    async def test_sets_profile_image(self, client, signed_up):
        user, headers = signed_up

        response = await client.post("/upload/profile", files=_image(), headers=headers)
        me = await client.get("/me", headers=headers)

        assert response.status_code == 200
        image_url = response.json()["imageUrl"]
        assert image_url.startswith(f"{S3_PREFIX}profiles/{user['id']}-")
        assert me.json()["user"]["profileImage"] == image_url

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        response = await client.post("/upload/profile", files=_image())

        assert response.status_code == 401
