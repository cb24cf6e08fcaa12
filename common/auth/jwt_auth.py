"""
JWT + bcrypt authentication provider.

A stateless authentication implementation using:
- JWT tokens for session authentication (no revocation list: a token is
  valid until it expires or the secret is rotated)
- bcrypt for secure password hashing

Example:
    auth = JWTAuth(secret="your-secret-key", session_expire_days=7)

    password_hash = await auth.hash_password("secret1")
    token = await auth.create_token(user_id, email="a@x.com")

    claims = await auth.verify_token(token)
    print(claims["userId"])
"""

import asyncio
import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import bcrypt as bcrypt_lib
from jose import jwt, JWTError


class JWTAuth:
    """
    JWT + bcrypt authentication provider.

    Handles session token creation/verification and password hashing.
    User storage lives elsewhere; this class never touches the database.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        session_expire_days: int = 7,
        bcrypt_rounds: int = 10,
    ):
        """
        Initialize JWT auth provider.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            session_expire_days: Session token lifetime
            bcrypt_rounds: bcrypt cost factor

        Raises:
            ValueError: If no secret is provided
        """
        if not secret:
            raise ValueError("JWT secret is required")

        self.secret = secret
        self.algorithm = algorithm
        self.session_expire = timedelta(days=session_expire_days)
        self.bcrypt_rounds = bcrypt_rounds

    def _prehash_password(self, password: str) -> str:
        """
        Pre-hash password with SHA-256 before bcrypt.

        This handles bcrypt's 72-byte limit and ensures consistent
        behavior across all password lengths.
        """
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def _hash_password_sync(self, password: str) -> str:
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def _verify_password_sync(self, password: str, hashed: str) -> bool:
        hashed_bytes = hashed.encode("utf-8")

        # Try new method first (SHA-256 pre-hash)
        prehashed = self._prehash_password(password)
        try:
            if bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed_bytes):
                return True
        except ValueError:
            pass

        # Fallback to legacy method (direct bcrypt) for old hashes
        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            return False

    async def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        return await asyncio.to_thread(self._hash_password_sync, password)

    async def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Supports both new (SHA-256 pre-hashed) and legacy (direct bcrypt) hashes
        for backwards compatibility.
        """
        if not hashed:
            return False
        return await asyncio.to_thread(self._verify_password_sync, password, hashed)

    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """Create a signed session token carrying the user id and extra claims."""
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            **claims,
            "iat": now,
            "exp": now + self.session_expire,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a session token.

        Raises:
            ValueError: Malformed, expired or badly signed token
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
            )
        except JWTError as e:
            raise ValueError(f"Invalid token: {e}")
