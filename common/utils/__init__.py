"""
Utilities module - Common helpers for API responses, exceptions, and password policy.
"""

from common.utils.responses import error_response
from common.utils.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
    ConflictException,
    DependencyException,
    InternalServerException,
)
from common.utils.password import validate_password

__all__ = [
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    "ConflictException",
    "DependencyException",
    "InternalServerException",
    "validate_password",
]
