"""
Authentication module - JWT sessions, bcrypt hashing and the bearer guard.
"""

from common.auth.jwt_auth import JWTAuth
from common.auth.dependencies import create_auth_dependency, extract_bearer_token

__all__ = ["JWTAuth", "create_auth_dependency", "extract_bearer_token"]
