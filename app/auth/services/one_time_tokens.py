"""
One-time token generation and hashing.

Verification and reset tokens are handed to the user in plain form and
stored only as SHA-256 hashes.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from common.utils.dates import as_utc, utc_now


@dataclass(frozen=True)
class IssuedToken:
    """A freshly generated one-time token."""
    token: str
    token_hash: str
    expires_at: datetime


class OneTimeTokens:
    """
    Handles one-time token generation, hashing and expiry checks.
    """

    TOKEN_BYTES = 32

    @staticmethod
    def generate_token(length: int = TOKEN_BYTES) -> str:
        """
        Generate a cryptographically secure random token.

        Args:
            length: Number of random bytes (output will be hex, so 2x length)

        Returns:
            Hex-encoded random string
        """
        return secrets.token_hex(length)

    @staticmethod
    def hash_token(token: str) -> str:
        """
        Create SHA-256 hash of a token for storage and lookup.

        Args:
            token: Plain token string

        Returns:
            Hex-encoded SHA-256 hash
        """
        return hashlib.sha256(token.encode()).hexdigest()

    @classmethod
    def issue(cls, lifetime: timedelta, now: Optional[datetime] = None) -> IssuedToken:
        """Generate a token that expires *lifetime* from *now*."""
        now = now or utc_now()
        token = cls.generate_token()
        return IssuedToken(
            token=token,
            token_hash=cls.hash_token(token),
            expires_at=now + lifetime,
        )

    @staticmethod
    def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
        """
        Check an expiry read back from the database.

        A missing expiry counts as expired.
        """
        if expires_at is None:
            return True
        return as_utc(expires_at) <= (now or utc_now())
