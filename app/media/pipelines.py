"""
Upload pipeline functions for room photos and profile images.
"""

import logging
import time
from typing import Dict, Optional

from common.utils.exceptions import BadRequestException
from app.auth.services.credential_store import CredentialStore
from app.media.services.object_storage import ObjectStorageService
from app.rooms.services.room_service import RoomService

logger = logging.getLogger(__name__)


def _check_file(data: Optional[bytes], max_bytes: int) -> bytes:
    if not data:
        raise BadRequestException(message="No file uploaded", code="NO_FILE")
    if len(data) > max_bytes:
        raise BadRequestException(
            message=f"File exceeds {max_bytes} bytes",
            code="FILE_TOO_LARGE"
        )
    return data


def _epoch_millis() -> int:
    return int(time.time() * 1000)


async def upload_room_photo_pipeline(
    storage: ObjectStorageService,
    room_service: RoomService,
    user_id: str,
    room_id: Optional[str],
    filename: Optional[str],
    data: Optional[bytes],
    content_type: Optional[str],
    max_bytes: int,
) -> Dict[str, str]:
    """
    Upload a photo and attach it to a room.

    Returns:
        dict with imageUrl

    Raises:
        BadRequestException: Missing file/room id, malformed id, oversized file
        NotFoundException: Room missing or not writable by the user
        DependencyException: Upload failed
    """
    data = _check_file(data, max_bytes)

    if not room_id:
        raise BadRequestException(message="Room ID required", code="ROOM_ID_REQUIRED")

    await room_service.get_uploadable_room(room_id, user_id)

    safe_name = (filename or "photo").replace("/", "_")
    key = f"rooms/{room_id}/{_epoch_millis()}-{safe_name}"

    image_url = await storage.upload(key, data, content_type)
    await room_service.add_photo(room_id, image_url)

    logger.info(f"Room photo uploaded for room {room_id}")
    return {"imageUrl": image_url}


async def upload_profile_image_pipeline(
    storage: ObjectStorageService,
    store: CredentialStore,
    user_id: str,
    data: Optional[bytes],
    content_type: Optional[str],
    max_bytes: int,
) -> Dict[str, str]:
    """Upload a profile image and store its URL on the user."""
    data = _check_file(data, max_bytes)

    key = f"profiles/{user_id}-{_epoch_millis()}"
    image_url = await storage.upload(key, data, content_type)

    await store.update_fields(user_id, set_fields={"profileImage": image_url})

    logger.info(f"Profile image uploaded for user {user_id}")
    return {"imageUrl": image_url}
