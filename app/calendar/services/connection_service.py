"""
Calendar connection management service.

Links a Google account to a user and reads upcoming events with the
stored tokens.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from common.utils.dates import utc_now
from common.utils.exceptions import DependencyException, UnauthorizedException
from app.auth.services.credential_store import CredentialStore
from app.calendar.services.google_calendar_service import GoogleCalendarService

logger = logging.getLogger(__name__)


class CalendarConnectionService:
    """
    Manages calendar connections and OAuth tokens.
    """

    UNKNOWN_STATE = "unknown"
    MAX_EVENTS = 20

    def __init__(
        self,
        store: CredentialStore,
        google_calendar: GoogleCalendarService,
    ):
        """
        Initialize CalendarConnectionService.

        Args:
            store: Credential store holding the linked tokens
            google_calendar: Google Calendar API client
        """
        self._store = store
        self._google_calendar = google_calendar

    def get_auth_url(self, user_id: Optional[str]) -> str:
        """Authorization URL carrying the user id as OAuth state."""
        return self._google_calendar.get_auth_url(state=user_id or self.UNKNOWN_STATE)

    async def handle_oauth_callback(self, code: str, state: Optional[str]) -> bool:
        """
        Exchange the code and store tokens on the user named by *state*.

        Returns:
            True if tokens were linked to a user

        Raises:
            DependencyException: Code exchange failed
        """
        try:
            tokens = await self._google_calendar.exchange_code(code)
        except (ValueError, KeyError, httpx.HTTPError) as e:
            logger.error(f"OAuth callback error: {e}")
            raise DependencyException(message="Authentication failed", code="OAUTH_EXCHANGE_FAILED")

        if not state or state == self.UNKNOWN_STATE:
            logger.warning("OAuth callback without user state; tokens not stored")
            return False

        linked = await self._store.update_fields(
            state,
            set_fields={"googleTokens": {**tokens, "obtainedAt": utc_now()}},
        )
        if linked:
            logger.info(f"Calendar connected for user {state}")
        else:
            logger.warning(f"OAuth callback for unknown user state: {state}")
        return linked

    async def get_upcoming_events(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Read the user's next events from the primary calendar.

        Raises:
            UnauthorizedException: No calendar linked
            DependencyException: Google API call failed
        """
        user = await self._store.find_with_fields(user_id, ["googleTokens"])
        tokens = (user or {}).get("googleTokens") or {}
        access_token = tokens.get("accessToken")

        if not access_token:
            raise UnauthorizedException(
                message="Google Calendar not connected",
                code="CALENDAR_NOT_CONNECTED"
            )

        try:
            items = await self._google_calendar.list_events(
                access_token,
                time_min=utc_now(),
                max_results=self.MAX_EVENTS,
            )
        except (ValueError, httpx.HTTPError) as e:
            logger.error(f"Fetch events error for user {user_id}: {e}")
            raise DependencyException(message="Failed to fetch events", code="CALENDAR_FETCH_FAILED")

        return [format_event(item) for item in items]


def format_event(event: dict) -> dict:
    """Format a Google event resource for response."""
    start = event.get("start", {})
    end = event.get("end", {})
    return {
        "id": event.get("id"),
        "title": event.get("summary") or "No Title",
        "start": start.get("dateTime") or start.get("date"),
        "end": end.get("dateTime") or end.get("date"),
        "description": event.get("description"),
        "location": event.get("location"),
    }
