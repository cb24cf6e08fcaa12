"""
FastAPI router for Rooms endpoints.

Provides room creation/listing and saved-room bookmarks.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from app.dependencies import get_room_service, require_auth
from app.rooms.services.room_service import RoomService
from app.schemas.auth import OkResponse
from app.schemas.rooms import CreateRoomRequest, RoomCreatedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("")
async def get_rooms(
    user: Annotated[dict, Depends(require_auth)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
):
    """List the current user's rooms, newest first."""
    return await room_service.list_rooms(user["userId"])


@router.post("", response_model=RoomCreatedResponse)
async def create_room(
    body: CreateRoomRequest,
    user: Annotated[dict, Depends(require_auth)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
):
    """Create a room with an optional time capsule delay."""
    room_id = await room_service.create_room(
        owner_id=user["userId"],
        owner_email=user.get("email"),
        name=body.name,
        capsule_days=body.capsuleDays,
        capsule_hours=body.capsuleHours,
        capsule_minutes=body.capsuleMinutes,
        is_public=body.isPublic,
        is_collaboration=body.isCollaboration,
    )
    return RoomCreatedResponse(id=room_id)


@router.get("/saved")
async def get_saved_rooms(
    user: Annotated[dict, Depends(require_auth)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
):
    """List rooms the current user has saved."""
    return await room_service.list_saved_rooms(user["userId"])


@router.post("/{room_id}/save", response_model=OkResponse)
async def save_room(
    room_id: str,
    user: Annotated[dict, Depends(require_auth)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
):
    """Save (bookmark) a room."""
    await room_service.save_room(user["userId"], room_id)
    return OkResponse()


@router.delete("/{room_id}/save", response_model=OkResponse)
async def unsave_room(
    room_id: str,
    user: Annotated[dict, Depends(require_auth)],
    room_service: Annotated[RoomService, Depends(get_room_service)],
):
    """Remove a room from saved rooms."""
    await room_service.unsave_room(user["userId"], room_id)
    return OkResponse()
