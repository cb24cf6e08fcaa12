"""
FastAPI authentication dependencies.

Provides a factory to create the bearer-token guard that is injected into
route handlers. The guard only checks token validity; it knows nothing
about the routes it protects.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    def get_auth() -> JWTAuth:
        return JWTAuth(secret="your-secret")

    require_auth = create_auth_dependency(get_auth)

    @app.get("/profile")
    async def get_profile(user: dict = Depends(require_auth)):
        return {"user_id": user["userId"]}
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Header, Request

from common.auth.jwt_auth import JWTAuth
from common.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str], scheme: str = "Bearer") -> Optional[str]:
    """
    Extract the token from an Authorization header value.

    Returns None when the header is absent, uses another scheme, or carries
    an empty token.
    """
    if not authorization:
        return None

    prefix = f"{scheme} "
    if not authorization.startswith(prefix):
        return None

    token = authorization[len(prefix):].strip()
    return token or None


def create_auth_dependency(
    get_auth_provider: Callable[..., JWTAuth],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_auth_provider: FastAPI dependency that returns the JWTAuth instance
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency that verifies the token, attaches
        ``{"userId", "email"}`` to ``request.state.user`` and returns it
    """

    async def require_auth(
        request: Request,
        authorization: Optional[str] = Header(None, alias=header_name),
        auth: JWTAuth = Depends(get_auth_provider),
    ) -> dict:
        """
        Extract and verify the session identity from the authorization header.

        Raises:
            UnauthorizedException 401: If token is missing, invalid, or expired
        """
        token = extract_bearer_token(authorization, scheme)
        if not token:
            raise UnauthorizedException(message="Missing token", code="MISSING_TOKEN")

        try:
            payload = await auth.verify_token(token)
        except ValueError as e:
            logger.debug(f"Session token rejected: {e}")
            raise UnauthorizedException(message="Invalid token", code="INVALID_TOKEN")

        user_id = payload.get("userId")
        if not user_id:
            raise UnauthorizedException(message="Invalid token", code="INVALID_TOKEN")

        identity = {"userId": user_id, "email": payload.get("email")}
        request.state.user = identity
        return identity

    return require_auth
