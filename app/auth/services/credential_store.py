"""
Credential store for user records.

All reads and writes of credential state (password hash, verification and
reset tokens) go through this service. Email uniqueness is enforced by a
unique index, so concurrent signups for one address cannot both succeed.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from common.utils.exceptions import ConflictException

logger = logging.getLogger(__name__)


VERIFY_TOKEN_FIELD = "emailVerifyToken"
VERIFY_EXPIRES_FIELD = "emailVerifyExpires"
RESET_TOKEN_FIELD = "passwordResetToken"
RESET_EXPIRES_FIELD = "passwordResetExpires"

PRIVATE_FIELDS = (
    "passwordHash",
    VERIFY_TOKEN_FIELD,
    VERIFY_EXPIRES_FIELD,
    RESET_TOKEN_FIELD,
    RESET_EXPIRES_FIELD,
    "googleTokens",
)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, returning None when malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class CredentialStore:
    """
    Persists user records and their credential lifecycle fields.
    """

    PUBLIC_PROJECTION = {field: 0 for field in PRIVATE_FIELDS}

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "Users"):
        """
        Initialize CredentialStore.

        Args:
            db: MongoDB database connection
            collection_name: Name of the users collection
        """
        self._db = db
        self._users_collection = db[collection_name]

    async def ensure_indexes(self) -> None:
        """Create the unique email index and token lookup indexes."""
        await self._users_collection.create_index("email", unique=True)
        await self._users_collection.create_index(VERIFY_TOKEN_FIELD, sparse=True)
        await self._users_collection.create_index(RESET_TOKEN_FIELD, sparse=True)
        logger.info("User indexes ensured")

    async def find_by_email(self, email: str) -> Optional[dict]:
        """
        Load the full user record by email (case-sensitive).

        The returned document includes the password hash; it is meant for
        the auth pipelines only and must not be returned to clients.
        """
        return await self._users_collection.find_one({"email": email})

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        """
        Load a user by id without any credential fields.

        Returns:
            User document or None if not found or the id is malformed
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._users_collection.find_one(
            {"_id": oid},
            projection=self.PUBLIC_PROJECTION,
        )

    async def find_with_fields(self, user_id: str, fields: Iterable[str]) -> Optional[dict]:
        """Load only *fields* of a user (used for private integration data)."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self._users_collection.find_one(
            {"_id": oid},
            projection={field: 1 for field in fields},
        )

    async def insert(self, user_doc: Dict[str, Any]) -> str:
        """
        Insert a new user record.

        Returns:
            The new user's id as a string

        Raises:
            ConflictException: Email already registered (unique index violation)
        """
        try:
            result = await self._users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.info("Signup rejected by unique email index")
            raise ConflictException(message="email already in use", code="EMAIL_TAKEN")

        user_doc["_id"] = result.inserted_id
        return str(result.inserted_id)

    async def update_fields(
        self,
        user_id: str,
        set_fields: Optional[Dict[str, Any]] = None,
        unset_fields: Optional[Iterable[str]] = None,
    ) -> bool:
        """
        Apply a partial update to a user.

        Returns:
            True if a user matched the id
        """
        oid = to_object_id(user_id)
        if oid is None:
            return False

        update = self._build_update(set_fields, unset_fields)
        if not update:
            return True

        result = await self._users_collection.update_one({"_id": oid}, update)
        return result.matched_count == 1

    async def find_by_token(self, token_field: str, token_hash: str) -> Optional[dict]:
        """Find the user currently holding a one-time token hash."""
        if not token_hash:
            return None
        return await self._users_collection.find_one({token_field: token_hash})

    async def consume_token(
        self,
        user_id: ObjectId,
        token_field: str,
        token_hash: str,
        set_fields: Dict[str, Any],
        unset_fields: Iterable[str],
    ) -> bool:
        """
        Apply the state change a one-time token authorizes and clear the token.

        The filter requires the token to still be present, so only one of
        several concurrent consumers can succeed.

        Returns:
            True if this call consumed the token
        """
        result = await self._users_collection.update_one(
            {"_id": user_id, token_field: token_hash},
            self._build_update(set_fields, unset_fields),
        )
        return result.modified_count == 1

    @staticmethod
    def _build_update(
        set_fields: Optional[Dict[str, Any]],
        unset_fields: Optional[Iterable[str]],
    ) -> Dict[str, Any]:
        update: Dict[str, Any] = {}
        if set_fields:
            update["$set"] = dict(set_fields)
        unset_fields = list(unset_fields or [])
        if unset_fields:
            update["$unset"] = {field: "" for field in unset_fields}
        return update
