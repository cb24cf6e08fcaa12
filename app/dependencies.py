"""
FastAPI dependencies for the Capsule application.

Services are built once at startup into a ServiceContainer stored on
``app.state.services``; route dependencies read them from the request.
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, create_auth_dependency
from app.config import Settings
from app.auth.services.credential_store import CredentialStore
from app.auth.services.notifier import LinkNotifier
from app.auth.services.phone_validator import PhoneValidator
from app.calendar.services.connection_service import CalendarConnectionService
from app.calendar.services.google_calendar_service import GoogleCalendarService
from app.media.services.object_storage import ObjectStorageService
from app.rooms.services.room_service import RoomService

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Service container
# ─────────────────────────────────────────────────────────────────

@dataclass
class ServiceContainer:
    """All request-independent services, built once per process."""
    settings: Settings
    auth: JWTAuth
    credential_store: CredentialStore
    phone_validator: PhoneValidator
    notifier: LinkNotifier
    room_service: RoomService
    object_storage: ObjectStorageService
    calendar_connection: CalendarConnectionService


def build_services(db: AsyncIOMotorDatabase, settings: Settings) -> ServiceContainer:
    """
    Construct every service over one database handle.

    Raises:
        ValueError: JWT secret missing
    """
    credential_store = CredentialStore(db=db, collection_name=settings.COLLECTION_USERS)

    google_calendar = GoogleCalendarService(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.GOOGLE_REDIRECT_URI,
    )

    return ServiceContainer(
        settings=settings,
        auth=JWTAuth(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            session_expire_days=settings.SESSION_EXPIRE_DAYS,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        ),
        credential_store=credential_store,
        phone_validator=PhoneValidator(
            api_key=settings.PHONE_VALIDATION_API_KEY,
            url=settings.PHONE_VALIDATION_URL,
        ),
        notifier=LinkNotifier(frontend_url=settings.FRONTEND_URL),
        room_service=RoomService(
            db=db,
            rooms_collection=settings.COLLECTION_ROOMS,
            users_collection=settings.COLLECTION_USERS,
        ),
        object_storage=ObjectStorageService(
            bucket=settings.AWS_S3_BUCKET,
            region=settings.AWS_REGION,
            access_key_id=settings.AWS_ACCESS_KEY_ID,
            secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        ),
        calendar_connection=CalendarConnectionService(
            store=credential_store,
            google_calendar=google_calendar,
        ),
    )


async def init_services(db: AsyncIOMotorDatabase, settings: Settings) -> ServiceContainer:
    """Build services and ensure the indexes they rely on."""
    services = build_services(db, settings)
    await services.credential_store.ensure_indexes()
    await services.room_service.ensure_indexes()
    logger.info("All services initialized")
    return services


# ─────────────────────────────────────────────────────────────────
# Request dependencies
# ─────────────────────────────────────────────────────────────────

def get_services(request: Request) -> ServiceContainer:
    """Get the service container of the running app."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized. Start the app through its lifespan.")
    return services


def get_settings_dep(services: Annotated[ServiceContainer, Depends(get_services)]) -> Settings:
    return services.settings


def get_auth(services: Annotated[ServiceContainer, Depends(get_services)]) -> JWTAuth:
    return services.auth


def get_credential_store(services: Annotated[ServiceContainer, Depends(get_services)]) -> CredentialStore:
    return services.credential_store


def get_phone_validator(services: Annotated[ServiceContainer, Depends(get_services)]) -> PhoneValidator:
    return services.phone_validator


def get_notifier(services: Annotated[ServiceContainer, Depends(get_services)]) -> LinkNotifier:
    return services.notifier


def get_room_service(services: Annotated[ServiceContainer, Depends(get_services)]) -> RoomService:
    return services.room_service


def get_object_storage(services: Annotated[ServiceContainer, Depends(get_services)]) -> ObjectStorageService:
    return services.object_storage


def get_calendar_connection(
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> CalendarConnectionService:
    return services.calendar_connection


# Session guard: bearer token -> {"userId", "email"}
require_auth = create_auth_dependency(get_auth)
