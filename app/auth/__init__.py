"""
Auth System

Handles signup, login, email verification and password reset over the
credential store, with stateless JWT sessions.
"""

from app.auth.services.credential_store import CredentialStore
from app.auth.services.one_time_tokens import OneTimeTokens
from app.auth.services.phone_validator import PhoneValidator
from app.auth.services.notifier import LinkNotifier

__all__ = [
    "CredentialStore",
    "OneTimeTokens",
    "PhoneValidator",
    "LinkNotifier",
]
