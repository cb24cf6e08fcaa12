"""
Custom HTTP exceptions with error codes.

Extends FastAPI's HTTPException with standardized error codes
for consistent API error responses.

Example:
    from common.utils import NotFoundException

    @app.get("/users/{id}")
    async def get_user(id: str):
        user = await users.find_one({"_id": ObjectId(id)})
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """
    Base API exception with error code support.

    Provides consistent error response format across the API.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Create an API exception.

        Args:
            status_code: HTTP status code
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
            headers: Optional response headers
        """
        detail: Dict[str, Any] = {"message": message}

        if code:
            detail["code"] = code

        if details is not None:
            detail["details"] = details

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def code(self) -> Optional[str]:
        return self.detail.get("code")


class BadRequestException(APIException):
    """400 Bad Request - Invalid input or malformed request."""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, message, code, details)


class UnauthorizedException(APIException):
    """401 Unauthorized - Missing or invalid authentication."""

    def __init__(
        self,
        message: str = "Unauthorized",
        code: str = "UNAUTHORIZED",
        details: Optional[Any] = None,
    ):
        super().__init__(401, message, code, details)


class NotFoundException(APIException):
    """404 Not Found - Resource doesn't exist."""

    def __init__(
        self,
        message: str = "Not found",
        code: str = "NOT_FOUND",
        details: Optional[Any] = None,
    ):
        super().__init__(404, message, code, details)


class ConflictException(APIException):
    """409 Conflict - Resource already exists or state conflict."""

    def __init__(
        self,
        message: str = "Conflict",
        code: str = "CONFLICT",
        details: Optional[Any] = None,
    ):
        super().__init__(409, message, code, details)


class DependencyException(APIException):
    """
    External service failure (phone validation, object storage, calendar).

    500 by default; 400 when the failure blocks the caller's own request
    (e.g. a phone number that cannot be validated during signup).
    """

    def __init__(
        self,
        message: str = "External service error",
        code: str = "DEPENDENCY_ERROR",
        details: Optional[Any] = None,
        status_code: int = 500,
    ):
        super().__init__(status_code, message, code, details)


class InternalServerException(APIException):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(500, message, code, details)
