"""
Common library for reusable infrastructure components.

This package provides generic modules that the application builds on:

- database: Async MongoDB connection with Beanie ODM
- auth: JWT sessions, bcrypt hashing, bearer-token guard
- utils: Error responses, exceptions, password policy
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import JWTAuth, create_auth_dependency
from common.utils import (
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
    ConflictException,
    DependencyException,
    validate_password,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "JWTAuth",
    "create_auth_dependency",
    # Utils
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    "ConflictException",
    "DependencyException",
    "validate_password",
    # Config
    "BaseAppSettings",
]
