"""
Standard API error response helpers.

Every failure leaves the API in the same envelope so clients can rely on
``body["error"]["message"]`` and ``body["error"]["code"]``.

Example:
    from common.utils import error_response

    return JSONResponse(
        status_code=404,
        content=error_response("User not found", code="NOT_FOUND"),
    )
"""

from typing import Any, Optional, Dict


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Any] = None,
    errors: Optional[list] = None,
) -> Dict[str, Any]:
    """
    Create a standard error response.

    Args:
        message: Human-readable error message
        code: Machine-readable error code (e.g., "EMAIL_TAKEN")
        details: Additional error details
        errors: List of specific errors (for validation errors)

    Returns:
        Dictionary with success=False and error info
    """
    error: Dict[str, Any] = {"message": message}

    if code:
        error["code"] = code

    if details is not None:
        error["details"] = details

    if errors:
        error["errors"] = errors

    return {"success": False, "error": error}
