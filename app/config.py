"""
Capsule application settings.

Extends the base settings with Capsule-specific configuration.
"""

from datetime import timedelta
from typing import List, Optional

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Capsule-specific settings."""

    # ==========================================================================
    # Collections
    # ==========================================================================
    COLLECTION_USERS: str = "Users"
    COLLECTION_ROOMS: str = "Rooms"

    # ==========================================================================
    # Credential Lifecycle
    # ==========================================================================
    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 10

    # Email verification settings
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = 24

    # Password reset settings
    PASSWORD_RESET_EXPIRE_MINUTES: int = 30

    # ==========================================================================
    # External Services
    # ==========================================================================
    # BigDataCloud phone validation
    PHONE_VALIDATION_API_KEY: Optional[str] = None
    PHONE_VALIDATION_URL: str = "https://api-bdc.net/data/phone-number-validate"

    # S3 object storage
    AWS_REGION: Optional[str] = None
    AWS_S3_BUCKET: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Google Calendar
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_REDIRECT_URI: str = "http://localhost:3000/auth/google/callback"
    CALENDAR_CONNECTED_REDIRECT: str = "bestbefore://calendar-connected"

    # ==========================================================================
    # Frontend URL (for verification / reset links)
    # ==========================================================================
    FRONTEND_URL: str = "http://localhost:5173"

    def verification_token_lifetime(self) -> timedelta:
        return timedelta(hours=self.EMAIL_VERIFICATION_EXPIRE_HOURS)

    def reset_token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.PASSWORD_RESET_EXPIRE_MINUTES)

    def missing_optional(self) -> List[str]:
        """Integration settings that are unset; their features fail on use."""
        optional = {
            "PHONE_VALIDATION_API_KEY": self.PHONE_VALIDATION_API_KEY,
            "AWS_REGION": self.AWS_REGION,
            "AWS_S3_BUCKET": self.AWS_S3_BUCKET,
            "GOOGLE_CLIENT_ID": self.GOOGLE_CLIENT_ID,
            "GOOGLE_CLIENT_SECRET": self.GOOGLE_CLIENT_SECRET,
        }
        return [name for name, value in optional.items() if not value]


def get_settings() -> Settings:
    """Load settings from the environment (and ``.env``)."""
    return Settings()
