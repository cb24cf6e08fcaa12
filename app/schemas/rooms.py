"""
Pydantic models for Rooms and uploads.
"""

from typing import Optional
from pydantic import BaseModel, Field


MAX_CAPSULE_DAYS = 36500


class CreateRoomRequest(BaseModel):
    """Request body for creating a room."""
    name: Optional[str] = None
    capsuleDays: int = Field(default=0, ge=0, le=MAX_CAPSULE_DAYS)
    capsuleHours: int = Field(default=0, ge=0, le=MAX_CAPSULE_DAYS * 24)
    capsuleMinutes: int = Field(default=0, ge=0, le=MAX_CAPSULE_DAYS * 24 * 60)
    isPublic: bool = True
    isCollaboration: bool = False


class RoomCreatedResponse(BaseModel):
    """Response for a created room."""
    id: str


class ImageUrlResponse(BaseModel):
    """Response for an uploaded image."""
    imageUrl: str
