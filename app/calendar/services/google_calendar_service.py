"""
Google Calendar API client.

Covers the OAuth authorization-code flow and reading upcoming events.
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any
from urllib.parse import urlencode

import httpx

logger = logging.getLogger(__name__)


class GoogleCalendarService:
    """
    Google Calendar API client.
    Manages OAuth code exchange and event listing.
    """

    OAUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"

    SCOPES = [
        "https://www.googleapis.com/auth/calendar.events.readonly",
    ]

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize GoogleCalendarService.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            redirect_uri: OAuth callback URL
            transport: Optional httpx transport (tests)
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=15.0, transport=self._transport)

    def get_auth_url(self, state: Optional[str] = None) -> str:
        """
        Generate Google OAuth authorization URL.

        Args:
            state: Opaque state value echoed back to the callback

        Returns:
            Authorization URL to redirect user to
        """
        params = {
            "client_id": self._client_id or "",
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.SCOPES),
            "access_type": "offline",
        }

        if state:
            params["state"] = state

        return f"{self.OAUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Dict[str, Any]:
        """
        Exchange authorization code for tokens.

        Args:
            code: Authorization code from OAuth callback

        Returns:
            dict with accessToken, refreshToken, expiresIn, tokenType, scope

        Raises:
            ValueError: Google rejected the exchange
            httpx.HTTPError: Google could not be reached
        """
        async with self._client() as client:
            response = await client.post(
                self.TOKEN_URL,
                data={
                    "code": code,
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "redirect_uri": self._redirect_uri,
                    "grant_type": "authorization_code",
                }
            )

            if response.status_code != 200:
                logger.error(f"Token exchange failed: {response.text}")
                raise ValueError(f"Token exchange failed: {response.status_code}")

            data = response.json()
            return {
                "accessToken": data["access_token"],
                "refreshToken": data.get("refresh_token"),
                "expiresIn": data.get("expires_in"),
                "tokenType": data.get("token_type"),
                "scope": data.get("scope"),
            }

    async def list_events(
        self,
        access_token: str,
        time_min: datetime,
        max_results: int = 20,
        calendar_id: str = "primary",
    ) -> List[Dict[str, Any]]:
        """
        List upcoming single events ordered by start time.

        Args:
            access_token: Valid access token
            time_min: Only events ending after this instant
            max_results: Maximum number of events
            calendar_id: Calendar to read

        Returns:
            Raw event resources

        Raises:
            ValueError: Google rejected the request (e.g. revoked token)
            httpx.HTTPError: Google could not be reached
        """
        async with self._client() as client:
            response = await client.get(
                f"{self.CALENDAR_API_BASE}/calendars/{calendar_id}/events",
                headers={"Authorization": f"Bearer {access_token}"},
                params={
                    "timeMin": time_min.isoformat(),
                    "maxResults": max_results,
                    "singleEvents": "true",
                    "orderBy": "startTime",
                }
            )

            if response.status_code != 200:
                logger.error(f"List events failed: {response.text}")
                raise ValueError(f"Failed to list events: {response.status_code}")

            return response.json().get("items", [])
