"""API tests for rooms and saved rooms."""

import pytest
from datetime import datetime, timedelta, timezone
from bson import ObjectId


async def _create_room(client, headers, **fields):
    body = {"name": "Summer", **fields}
    response = await client.post("/rooms", json=body, headers=headers)
    assert response.status_code == 200
    return response.json()["id"]


class TestCreateRoom:
    @pytest.mark.asyncio
    async def test_creates_room_owned_by_caller(self, client, db, signed_up):
        user, headers = signed_up

        room_id = await _create_room(client, headers, name="  Summer  ", isCollaboration=True)

        room = await db["Rooms"].find_one({"_id": ObjectId(room_id)})
        assert room["name"] == "Summer"
        assert str(room["ownerId"]) == user["id"]
        assert room["ownerEmail"] == "anna@example.com"
        assert room["photos"] == []
        assert room["isCollaboration"] is True

    @pytest.mark.asyncio
    async def test_name_required(self, client, signed_up):
        _, headers = signed_up

        response = await client.post("/rooms", json={"name": "   "}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NAME_REQUIRED"

    @pytest.mark.asyncio
    async def test_negative_capsule_delay_rejected(self, client, signed_up):
        _, headers = signed_up

        response = await client.post("/rooms", json={"name": "x", "capsuleDays": -1}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_capsule_delay_upper_bound(self, client, signed_up):
        _, headers = signed_up

        too_long = await client.post(
            "/rooms", json={"name": "x", "capsuleDays": 1000000000}, headers=headers
        )
        longest = await client.post(
            "/rooms",
            json={"name": "x", "capsuleDays": 36500, "capsuleHours": 876000, "capsuleMinutes": 52560000},
            headers=headers,
        )

        assert too_long.status_code == 400
        assert too_long.json()["error"]["code"] == "VALIDATION_ERROR"
        assert longest.status_code == 200

    @pytest.mark.asyncio
    async def test_requires_session(self, client):
        response = await client.post("/rooms", json={"name": "Summer"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "MISSING_TOKEN"


class TestListRooms:
    @pytest.mark.asyncio
    async def test_capsule_delay_locks_room(self, client, signed_up):
        _, headers = signed_up
        await _create_room(client, headers, name="Open")
        await _create_room(client, headers, name="Capsule", capsuleDays=1, capsuleHours=2)

        response = await client.get("/rooms", headers=headers)

        rooms = {room["name"]: room for room in response.json()}
        assert rooms["Open"]["isLocked"] is False
        assert rooms["Capsule"]["isLocked"] is True
        assert rooms["Capsule"]["capsuleDays"] == 1

    @pytest.mark.asyncio
    async def test_newest_first_and_only_own_rooms(self, client, db, signed_up):
        user, headers = signed_up
        owner = ObjectId(user["id"])
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        await db["Rooms"].insert_many([
            {"name": "older", "ownerId": owner, "createdAt": base, "unlockAt": base},
            {"name": "newer", "ownerId": owner, "createdAt": base + timedelta(days=1), "unlockAt": base},
            {"name": "foreign", "ownerId": ObjectId(), "createdAt": base, "unlockAt": base},
        ])

        response = await client.get("/rooms", headers=headers)

        assert [room["name"] for room in response.json()] == ["newer", "older"]


class TestSavedRooms:
    @pytest.mark.asyncio
    async def test_save_list_unsave(self, client, signed_up):
        _, headers = signed_up
        room_id = await _create_room(client, headers)

        saved = await client.post(f"/rooms/{room_id}/save", headers=headers)
        saved_again = await client.post(f"/rooms/{room_id}/save", headers=headers)
        listed = await client.get("/rooms/saved", headers=headers)
        removed = await client.delete(f"/rooms/{room_id}/save", headers=headers)
        listed_after = await client.get("/rooms/saved", headers=headers)

        assert saved.json() == {"ok": True}
        assert saved_again.status_code == 200
        assert [room["id"] for room in listed.json()] == [room_id]
        assert removed.json() == {"ok": True}
        assert listed_after.json() == []

    @pytest.mark.asyncio
    async def test_save_unknown_room(self, client, signed_up):
        _, headers = signed_up

        response = await client.post(f"/rooms/{ObjectId()}/save", headers=headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ROOM_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_room_id(self, client, signed_up):
        _, headers = signed_up

        response = await client.post("/rooms/not-an-id/save", headers=headers)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ROOM_ID"

