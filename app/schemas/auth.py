"""
Pydantic models for Auth system request/response validation.

Request fields are optional at the schema level; the auth pipelines decide
which error a missing or malformed value produces.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Request body for signup."""
    name: Optional[str] = Field(None, description="Display name (trimmed)")
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = Field(None, description="Validated only together with countryCode")
    countryCode: Optional[str] = Field(None, description="ISO 3166-1 alpha-2")


class LoginRequest(BaseModel):
    """Request body for login."""
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordResetRequest(BaseModel):
    """Request body for requesting a password reset link."""
    email: Optional[str] = None


class PasswordResetBody(BaseModel):
    """Request body for resetting the password with a token."""
    token: Optional[str] = None
    newPassword: Optional[str] = None


class OkResponse(BaseModel):
    """Acknowledgement response."""
    ok: bool = True
