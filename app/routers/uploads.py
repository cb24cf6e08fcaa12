"""
FastAPI router for photo uploads.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.auth.services.credential_store import CredentialStore
from app.config import Settings
from app.dependencies import (
    get_credential_store,
    get_object_storage,
    get_room_service,
    get_settings_dep,
    require_auth,
)
from app.media import pipelines as media_pipelines
from app.media.services.object_storage import ObjectStorageService
from app.rooms.services.room_service import RoomService
from app.schemas.rooms import ImageUrlResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["uploads"])


async def _read(file: Optional[UploadFile]) -> Optional[bytes]:
    if file is None:
        return None
    return await file.read()


@router.post("/room-photo", response_model=ImageUrlResponse)
async def upload_room_photo(
    user: Annotated[dict, Depends(require_auth)],
    storage: Annotated[ObjectStorageService, Depends(get_object_storage)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    image: Optional[UploadFile] = File(None),
    roomId: Optional[str] = Form(None),
):
    """Upload a photo into a room."""
    return await media_pipelines.upload_room_photo_pipeline(
        storage=storage,
        room_service=room_service,
        user_id=user["userId"],
        room_id=roomId,
        filename=image.filename if image else None,
        data=await _read(image),
        content_type=image.content_type if image else None,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )


@router.post("/profile", response_model=ImageUrlResponse)
async def upload_profile_image(
    user: Annotated[dict, Depends(require_auth)],
    storage: Annotated[ObjectStorageService, Depends(get_object_storage)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    image: Optional[UploadFile] = File(None),
):
    """Upload the current user's profile image."""
    return await media_pipelines.upload_profile_image_pipeline(
        storage=storage,
        store=store,
        user_id=user["userId"],
        data=await _read(image),
        content_type=image.content_type if image else None,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )
