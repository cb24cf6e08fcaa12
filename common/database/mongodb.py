"""
Generic MongoDB connection manager using Beanie ODM.

This module provides async MongoDB connectivity that works with any database.
Models are provided at connection time, allowing complete separation of
database infrastructure from application-specific schemas.

The manager is owned by whoever constructs it (normally the application
lifespan) and handed to services as a database handle; there is no
module-level instance.

Example:
    from common.database import MongoDB

    db = MongoDB()
    await db.connect(
        uri="mongodb://localhost:27017",
        database_name="capsule",
    )
    users = db.get_collection("Users")
    ...
    await db.disconnect()
"""

import logging
from typing import List, Type, Optional

from beanie import init_beanie, Document
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


def mask_uri(uri: str) -> str:
    """Strip credentials from a connection string for logging."""
    return uri.split("@")[-1] if "@" in uri else uri


class MongoDB:
    """Generic MongoDB connection manager - works with any database."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._initialized: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        document_models: Optional[List[Type[Document]]] = None,
    ) -> None:
        """
        Connect to MongoDB and initialize Beanie with provided models.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            document_models: Beanie Document classes to initialize (may be empty)
        """
        document_models = document_models or []
        logger.info(f"Connecting to MongoDB: {mask_uri(uri)}")
        logger.debug(f"Database name: {database_name}")

        try:
            # tz_aware so stored expiries come back comparable with UTC now
            self._client = AsyncIOMotorClient(uri, tz_aware=True)
            self._database_name = database_name

            logger.debug("Initializing Beanie ODM")
            await init_beanie(
                database=self._client[database_name],
                document_models=document_models,
            )
            self._initialized = True
            logger.info(f"Successfully connected to MongoDB database: {database_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            self._initialized = False
            logger.debug("MongoDB connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if database is connected and initialized."""
        return self._initialized

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]

    def get_collection(self, name: str):
        """
        Get a raw Motor collection for direct access.

        Args:
            name: Collection name

        Returns:
            AsyncIOMotorCollection instance
        """
        if not self._client or not self._database_name:
            logger.error("Attempted to get collection without database connection")
            raise RuntimeError("Database not connected")
        logger.debug(f"Getting collection: {name}")
        return self._client[self._database_name][name]
