"""
Auth system pipeline functions.

Stateless orchestration logic for the credential lifecycle: signup, login,
profile lookup, email verification and password reset.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from email_validator import EmailNotValidError, validate_email

from common.auth.jwt_auth import JWTAuth
from common.utils.dates import utc_now
from common.utils.exceptions import (
    BadRequestException,
    ConflictException,
    DependencyException,
    NotFoundException,
    UnauthorizedException,
)
from common.utils.password import validate_password
from app.auth.services.credential_store import (
    CredentialStore,
    RESET_EXPIRES_FIELD,
    RESET_TOKEN_FIELD,
    VERIFY_EXPIRES_FIELD,
    VERIFY_TOKEN_FIELD,
)
from app.auth.services.notifier import LinkNotifier
from app.auth.services.one_time_tokens import OneTimeTokens
from app.auth.services.phone_validator import PhoneValidator

logger = logging.getLogger(__name__)

VERIFY_TOKEN_LIFETIME = timedelta(hours=24)
RESET_TOKEN_LIFETIME = timedelta(minutes=30)
MIN_PASSWORD_LENGTH = 6


async def signup_pipeline(
    store: CredentialStore,
    auth: JWTAuth,
    phone_validator: PhoneValidator,
    notifier: LinkNotifier,
    name: Optional[str],
    email: Any,
    password: Any,
    phone: Optional[str] = None,
    country_code: Optional[str] = None,
    verify_lifetime: timedelta = VERIFY_TOKEN_LIFETIME,
    min_password_length: int = MIN_PASSWORD_LENGTH,
) -> Dict[str, Any]:
    """
    Orchestrates the signup flow.

    Args:
        store: Credential store for the new user record
        auth: Hashes the password and issues the session token
        phone_validator: External phone number validation
        notifier: Emits the verification link
        name: Optional display name (trimmed)
        email: Email address
        password: Plain password
        phone: Optional phone number (validated only with country_code)
        country_code: ISO country code for phone validation
        verify_lifetime: Lifetime of the email verification token
        min_password_length: Minimum accepted password length

    Returns:
        dict with user and token; the user is authenticated immediately,
        before the email is verified

    Raises:
        BadRequestException: Invalid email, weak password or invalid phone
        DependencyException: Phone validation service unavailable (400)
        ConflictException: Email already registered
    """
    _check_email(email)

    is_valid, errors = validate_password(password, min_length=min_password_length)
    if not is_valid:
        raise BadRequestException(
            message=f"password must be at least {min_password_length} characters",
            code="WEAK_PASSWORD",
            details=errors,
        )

    validated_phone = None
    if phone and country_code:
        validated_phone = await _validate_phone(phone_validator, phone, country_code)

    display_name = name.strip() if isinstance(name, str) else None

    existing = await store.find_by_email(email)
    if existing:
        raise ConflictException(message="email already in use", code="EMAIL_TAKEN")

    password_hash = await auth.hash_password(password)
    now = utc_now()
    verification = OneTimeTokens.issue(verify_lifetime, now=now)

    # The unique email index rejects a concurrent duplicate here
    user_id = await store.insert({
        "name": display_name,
        "email": email,
        "passwordHash": password_hash,
        "phone": validated_phone,
        "emailVerified": False,
        VERIFY_TOKEN_FIELD: verification.token_hash,
        VERIFY_EXPIRES_FIELD: verification.expires_at,
        "savedRooms": [],
        "createdAt": now,
    })

    await notifier.send_verification(email, verification.token)

    token = await auth.create_token(user_id, email=email)

    logger.info(f"User signed up: {user_id}")

    return {
        "user": {
            "id": user_id,
            "name": display_name,
            "email": email,
            "phone": validated_phone,
        },
        "token": token,
    }


async def login_pipeline(
    store: CredentialStore,
    auth: JWTAuth,
    email: Any,
    password: Any,
) -> Dict[str, Any]:
    """
    Orchestrates the login flow.

    Unknown email and wrong password raise the same error so callers
    cannot tell which accounts exist.

    Returns:
        dict with user and token

    Raises:
        BadRequestException: Email or password missing
        UnauthorizedException: Invalid credentials
    """
    if not email or not password:
        raise BadRequestException(
            message="email and password are required",
            code="MISSING_CREDENTIALS"
        )

    invalid = UnauthorizedException(message="invalid credentials", code="INVALID_CREDENTIALS")

    if not isinstance(email, str) or not isinstance(password, str):
        raise invalid

    user = await store.find_by_email(email)
    if not user:
        raise invalid

    if not await auth.verify_password(password, user.get("passwordHash", "")):
        raise invalid

    user_id = str(user["_id"])
    token = await auth.create_token(user_id, email=user["email"])

    logger.info(f"User logged in: {user_id}")

    return {
        "user": {
            "id": user_id,
            "name": user.get("name"),
            "email": user["email"],
        },
        "token": token,
    }


async def get_me_pipeline(
    store: CredentialStore,
    claims: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Load the public profile of the session's user.

    Raises:
        NotFoundException: User record no longer exists
    """
    user = await store.find_by_id(claims["userId"])
    if not user:
        raise NotFoundException(message="not found", code="NOT_FOUND")

    return {"user": format_public_user(user)}


async def verify_email_pipeline(
    store: CredentialStore,
    token: Optional[str],
) -> Dict[str, Any]:
    """
    Consume an email verification token.

    Raises:
        BadRequestException: No user holds this token, or it expired
    """
    invalid = BadRequestException(message="Token expired or invalid", code="INVALID_TOKEN")

    if not token:
        raise invalid

    token_hash = OneTimeTokens.hash_token(token)
    user = await store.find_by_token(VERIFY_TOKEN_FIELD, token_hash)

    if not user or OneTimeTokens.is_expired(user.get(VERIFY_EXPIRES_FIELD)):
        raise invalid

    consumed = await store.consume_token(
        user["_id"],
        VERIFY_TOKEN_FIELD,
        token_hash,
        set_fields={"emailVerified": True},
        unset_fields=[VERIFY_TOKEN_FIELD, VERIFY_EXPIRES_FIELD],
    )
    if not consumed:
        raise invalid

    logger.info(f"Email verified for user {user['_id']}")

    return {"ok": True}


async def request_password_reset_pipeline(
    store: CredentialStore,
    notifier: LinkNotifier,
    email: Any,
    reset_lifetime: timedelta = RESET_TOKEN_LIFETIME,
) -> Dict[str, Any]:
    """
    Issue a password reset token if the account exists.

    Always returns the same response so callers cannot tell which
    accounts exist. A new request replaces any outstanding token.
    """
    if not isinstance(email, str) or not email:
        return {"ok": True}

    user = await store.find_by_email(email)
    if not user:
        logger.debug("Password reset requested for unknown email")
        return {"ok": True}

    reset = OneTimeTokens.issue(reset_lifetime)

    await store.update_fields(
        str(user["_id"]),
        set_fields={
            RESET_TOKEN_FIELD: reset.token_hash,
            RESET_EXPIRES_FIELD: reset.expires_at,
        },
    )

    await notifier.send_password_reset(email, reset.token)

    logger.info(f"Password reset requested for user {user['_id']}")

    return {"ok": True}


async def reset_password_pipeline(
    store: CredentialStore,
    auth: JWTAuth,
    token: Optional[str],
    new_password: Any,
    min_password_length: int = MIN_PASSWORD_LENGTH,
) -> Dict[str, Any]:
    """
    Replace the password using a reset token.

    Raises:
        BadRequestException: Weak password, or token unknown/expired
    """
    is_valid, errors = validate_password(new_password, min_length=min_password_length)
    if not is_valid:
        raise BadRequestException(message="Weak password", code="WEAK_PASSWORD", details=errors)

    invalid = BadRequestException(message="Invalid or expired token", code="INVALID_TOKEN")

    if not token or not isinstance(token, str):
        raise invalid

    token_hash = OneTimeTokens.hash_token(token)
    user = await store.find_by_token(RESET_TOKEN_FIELD, token_hash)

    if not user or OneTimeTokens.is_expired(user.get(RESET_EXPIRES_FIELD)):
        raise invalid

    password_hash = await auth.hash_password(new_password)

    consumed = await store.consume_token(
        user["_id"],
        RESET_TOKEN_FIELD,
        token_hash,
        set_fields={"passwordHash": password_hash},
        unset_fields=[RESET_TOKEN_FIELD, RESET_EXPIRES_FIELD],
    )
    if not consumed:
        raise invalid

    logger.info(f"Password reset for user {user['_id']}")

    return {"ok": True}


def _check_email(email: Any) -> None:
    """Reject malformed addresses; the address is stored exactly as given."""
    invalid = BadRequestException(message="Please enter a valid email", code="INVALID_EMAIL")
    if not isinstance(email, str) or not email:
        raise invalid
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise invalid


async def _validate_phone(
    phone_validator: PhoneValidator,
    phone: str,
    country_code: str,
) -> str:
    result = await phone_validator.validate(phone, country_code)

    if result is None:
        raise DependencyException(
            message="invalid phone number",
            code="PHONE_INVALID",
            details="Phone validation service unavailable",
            status_code=400,
        )

    if not result.get("isValid"):
        raise BadRequestException(
            message="invalid phone number",
            code="PHONE_INVALID",
            details=f"Phone number is not valid for {country_code}",
        )

    return result.get("e164Format") or phone


def format_public_user(user: dict) -> dict:
    """Format a user document for API responses (no credential fields)."""
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "phone": user.get("phone"),
        "emailVerified": bool(user.get("emailVerified", False)),
        "profileImage": user.get("profileImage"),
        "createdAt": user.get("createdAt"),
    }
