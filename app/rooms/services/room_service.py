"""
Room service for time capsule rooms.

Handles room creation, listing, photo attachment and the per-user
saved-rooms bookmark list.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.utils.dates import as_utc, utc_now
from common.utils.exceptions import BadRequestException, NotFoundException
from app.auth.services.credential_store import to_object_id

logger = logging.getLogger(__name__)


class RoomService:
    """
    Manages rooms and users' saved rooms.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        rooms_collection: str = "Rooms",
        users_collection: str = "Users",
    ):
        """
        Initialize RoomService.

        Args:
            db: MongoDB database connection
            rooms_collection: Name of the rooms collection
            users_collection: Name of the users collection (saved rooms)
        """
        self._db = db
        self._rooms_collection = db[rooms_collection]
        self._users_collection = db[users_collection]

    async def ensure_indexes(self) -> None:
        """Index rooms by owner for the newest-first listing."""
        await self._rooms_collection.create_index([("ownerId", 1), ("createdAt", -1)])

    async def create_room(
        self,
        owner_id: str,
        owner_email: Optional[str],
        name: str,
        capsule_days: int = 0,
        capsule_hours: int = 0,
        capsule_minutes: int = 0,
        is_public: bool = True,
        is_collaboration: bool = False,
    ) -> str:
        """
        Create a room owned by a user.

        The capsule delay sets ``unlockAt``; a zero delay unlocks immediately.

        Returns:
            The new room's id

        Raises:
            BadRequestException: Missing name
        """
        if not name or not name.strip():
            raise BadRequestException(message="name is required", code="NAME_REQUIRED")

        now = utc_now()
        delay = timedelta(days=capsule_days, hours=capsule_hours, minutes=capsule_minutes)

        room_doc = {
            "name": name.strip(),
            "ownerId": ObjectId(owner_id),
            "ownerEmail": owner_email,
            "createdAt": now,
            "photos": [],
            "capsuleDays": capsule_days,
            "capsuleHours": capsule_hours,
            "capsuleMinutes": capsule_minutes,
            "unlockAt": now + delay,
            "isPublic": is_public,
            "isCollaboration": is_collaboration,
        }

        result = await self._rooms_collection.insert_one(room_doc)

        logger.info(f"Room created: {result.inserted_id} by user {owner_id}")
        return str(result.inserted_id)

    async def list_rooms(self, owner_id: str) -> List[Dict[str, Any]]:
        """List a user's rooms, newest first."""
        cursor = self._rooms_collection.find({"ownerId": ObjectId(owner_id)}).sort("createdAt", -1)
        rooms = await cursor.to_list(length=None)
        now = utc_now()
        return [format_room(room, now) for room in rooms]

    async def get_uploadable_room(self, room_id: str, user_id: str) -> dict:
        """
        Load a room the user may add photos to.

        Owners can always upload; other users only to collaboration rooms.

        Raises:
            BadRequestException: Malformed room id
            NotFoundException: Room missing or not writable by the user
        """
        oid = self._parse_room_id(room_id)
        room = await self._rooms_collection.find_one({"_id": oid})

        if not room:
            raise NotFoundException(message="Room not found", code="ROOM_NOT_FOUND")

        if str(room.get("ownerId")) != user_id and not room.get("isCollaboration"):
            raise NotFoundException(message="Room not found", code="ROOM_NOT_FOUND")

        return room

    async def add_photo(self, room_id: str, image_url: str) -> bool:
        """Append a photo URL to a room."""
        result = await self._rooms_collection.update_one(
            {"_id": self._parse_room_id(room_id)},
            {"$push": {"photos": image_url}}
        )
        if result.modified_count == 0:
            logger.warning(f"Room not modified when adding photo: {room_id}")
        return result.modified_count == 1

    async def save_room(self, user_id: str, room_id: str) -> None:
        """
        Bookmark a room for a user (idempotent).

        Raises:
            BadRequestException: Malformed room id
            NotFoundException: Room does not exist
        """
        oid = self._parse_room_id(room_id)

        room = await self._rooms_collection.find_one({"_id": oid}, projection={"_id": 1})
        if not room:
            raise NotFoundException(message="Room not found", code="ROOM_NOT_FOUND")

        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$addToSet": {"savedRooms": oid}}
        )

    async def unsave_room(self, user_id: str, room_id: str) -> None:
        """Remove a room from a user's saved rooms (idempotent)."""
        oid = self._parse_room_id(room_id)
        await self._users_collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$pull": {"savedRooms": oid}}
        )

    async def list_saved_rooms(self, user_id: str) -> List[Dict[str, Any]]:
        """List the rooms a user has saved, newest first."""
        user = await self._users_collection.find_one(
            {"_id": ObjectId(user_id)},
            projection={"savedRooms": 1}
        )
        room_ids = (user or {}).get("savedRooms") or []
        if not room_ids:
            return []

        cursor = self._rooms_collection.find({"_id": {"$in": room_ids}}).sort("createdAt", -1)
        rooms = await cursor.to_list(length=None)
        now = utc_now()
        return [format_room(room, now) for room in rooms]

    @staticmethod
    def _parse_room_id(room_id: str) -> ObjectId:
        oid = to_object_id(room_id)
        if oid is None:
            raise BadRequestException(message="Invalid Room ID", code="INVALID_ROOM_ID")
        return oid


def format_room(room: dict, now: Optional[datetime] = None) -> dict:
    """Format room document for response."""
    now = now or utc_now()
    unlock_at = as_utc(room.get("unlockAt"))
    return {
        "id": str(room["_id"]),
        "name": room.get("name"),
        "ownerId": str(room["ownerId"]) if room.get("ownerId") else None,
        "ownerEmail": room.get("ownerEmail"),
        "photos": room.get("photos", []),
        "capsuleDays": room.get("capsuleDays", 0),
        "capsuleHours": room.get("capsuleHours", 0),
        "capsuleMinutes": room.get("capsuleMinutes", 0),
        "unlockAt": unlock_at,
        "isLocked": bool(unlock_at and unlock_at > now),
        "isPublic": room.get("isPublic", True),
        "isCollaboration": room.get("isCollaboration", False),
        "createdAt": room.get("createdAt"),
    }
