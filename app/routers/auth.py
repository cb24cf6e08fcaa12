"""
FastAPI router for Auth system endpoints.

Provides signup, login, profile, email verification and password reset.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.auth import JWTAuth
from app.auth import pipelines as auth_pipelines
from app.auth.services.credential_store import CredentialStore
from app.auth.services.notifier import LinkNotifier
from app.auth.services.phone_validator import PhoneValidator
from app.config import Settings
from app.dependencies import (
    get_auth,
    get_credential_store,
    get_notifier,
    get_phone_validator,
    get_settings_dep,
    require_auth,
)
from app.schemas.auth import (
    LoginRequest,
    OkResponse,
    PasswordResetBody,
    PasswordResetRequest,
    SignupRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/signup")
async def signup(
    body: SignupRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    auth: Annotated[JWTAuth, Depends(get_auth)],
    phone_validator: Annotated[PhoneValidator, Depends(get_phone_validator)],
    notifier: Annotated[LinkNotifier, Depends(get_notifier)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
):
    """
    Create an account and sign in.

    The returned token is valid immediately; email verification is tracked
    separately.
    """
    return await auth_pipelines.signup_pipeline(
        store=store,
        auth=auth,
        phone_validator=phone_validator,
        notifier=notifier,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        country_code=body.countryCode,
        verify_lifetime=settings.verification_token_lifetime(),
        min_password_length=settings.PASSWORD_MIN_LENGTH,
    )


@router.post("/login")
async def login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    auth: Annotated[JWTAuth, Depends(get_auth)],
):
    """Authenticate with email and password."""
    return await auth_pipelines.login_pipeline(
        store=store,
        auth=auth,
        email=body.email,
        password=body.password,
    )


@router.get("/me")
async def get_me(
    user: Annotated[dict, Depends(require_auth)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Get the current user's public profile."""
    return await auth_pipelines.get_me_pipeline(store=store, claims=user)


@router.get("/auth/verify-email", response_model=OkResponse)
async def verify_email(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    token: Optional[str] = Query(None),
):
    """Verify an email address with the emailed token."""
    return await auth_pipelines.verify_email_pipeline(store=store, token=token)


@router.post("/auth/password-reset-request", response_model=OkResponse)
async def password_reset_request(
    body: PasswordResetRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    notifier: Annotated[LinkNotifier, Depends(get_notifier)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
):
    """
    Request a password reset link.

    Always succeeds, whether or not the account exists.
    """
    return await auth_pipelines.request_password_reset_pipeline(
        store=store,
        notifier=notifier,
        email=body.email,
        reset_lifetime=settings.reset_token_lifetime(),
    )


@router.post("/auth/password-reset", response_model=OkResponse)
async def password_reset(
    body: PasswordResetBody,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    auth: Annotated[JWTAuth, Depends(get_auth)],
    settings: Annotated[Settings, Depends(get_settings_dep)],
):
    """Set a new password using a reset token."""
    return await auth_pipelines.reset_password_pipeline(
        store=store,
        auth=auth,
        token=body.token,
        new_password=body.newPassword,
        min_password_length=settings.PASSWORD_MIN_LENGTH,
    )
