"""
Pydantic models for Calendar endpoints.
"""

from typing import List, Optional
from pydantic import BaseModel


class CalendarAuthUrlResponse(BaseModel):
    """Response containing the Google OAuth URL."""
    url: str


class CalendarEvent(BaseModel):
    """An upcoming calendar event."""
    id: Optional[str] = None
    title: str
    start: Optional[str] = None
    end: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None


class CalendarEventsResponse(BaseModel):
    """Response for listing events."""
    events: List[CalendarEvent]
