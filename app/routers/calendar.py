"""
FastAPI router for Calendar endpoints.

Provides Google OAuth linking and upcoming events.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from app.calendar.services.connection_service import CalendarConnectionService
from app.config import Settings
from app.dependencies import get_calendar_connection, get_settings_dep, require_auth
from app.schemas.calendar import CalendarAuthUrlResponse, CalendarEventsResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calendar"])


@router.get("/calendar/auth", response_model=CalendarAuthUrlResponse)
async def get_google_auth_url(
    user: Annotated[dict, Depends(require_auth)],
    connection_service: Annotated[CalendarConnectionService, Depends(get_calendar_connection)],
):
    """Get Google OAuth authorization URL."""
    return CalendarAuthUrlResponse(url=connection_service.get_auth_url(user["userId"]))


@router.get("/auth/google/callback")
async def google_oauth_callback(
    connection_service: Annotated[CalendarConnectionService, Depends(get_calendar_connection)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
    code: str = Query(...),
    state: Optional[str] = Query(None),
):
    """Handle Google OAuth callback and return to the app."""
    await connection_service.handle_oauth_callback(code=code, state=state)
    return RedirectResponse(
        url=f"{settings.CALENDAR_CONNECTED_REDIRECT}?status=success",
        status_code=302,
    )


@router.get("/calendar/events", response_model=CalendarEventsResponse)
async def get_events(
    user: Annotated[dict, Depends(require_auth)],
    connection_service: Annotated[CalendarConnectionService, Depends(get_calendar_connection)],
):
    """List upcoming events from the linked Google Calendar."""
    events = await connection_service.get_upcoming_events(user["userId"])
    return {"events": events}
