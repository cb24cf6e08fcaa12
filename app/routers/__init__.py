"""
Capsule API Routers.

All routers are imported here for easy access.
"""

from app.routers.auth import router as auth_router
from app.routers.rooms import router as rooms_router
from app.routers.uploads import router as uploads_router
from app.routers.calendar import router as calendar_router

__all__ = [
    "auth_router",
    "rooms_router",
    "uploads_router",
    "calendar_router",
]
