"""Database configuration for async MongoDB connection using Motor."""

import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


logger = logging.getLogger(__name__)


class Database:
    """
    MongoDB connection handle.

    Constructed explicitly with a URL and database name, connected during the
    application lifespan and handed to request handlers through dependencies.
    """

    def __init__(self, url: str, name: str):
        self.url = url
        self.name = name
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self.db is not None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        if self.is_connected:
            return
        if not self.url:
            raise RuntimeError("MONGODB_URL is not set in environment variables")

        self.client = AsyncIOMotorClient(
            self.url,
            maxPoolSize=10,
            minPoolSize=1,
            tz_aware=True
        )
        self.db = self.client[self.name]
        logger.info("Connected to MongoDB database %s", self.name)

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")
        self.client = None
        self.db = None

    async def health_check(self) -> bool:
        """Check if database connection is healthy."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.db is None:
            raise RuntimeError("Database is not connected")
        return self.db

    def get_collection(self, collection_name: str):
        """Get a specific collection from the database."""
        return self.get_database()[collection_name]


async def get_database(request: Request) -> Database:
    """Dependency to get the application's database handle."""
    return request.app.state.database
