"""MongoDB connection shared by the repositories."""
import logging
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
from portal.config import settings

logger = logging.getLogger(__name__)

SERVER_SELECTION_TIMEOUT_MS = 5000


class Database:
    """Process-wide motor client, opened and closed by the app lifespan."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls, url: Optional[str] = None, db_name: Optional[str] = None):
        """Open the client and fail fast if the server is unreachable."""
        db_name = db_name or settings.mongodb_db_name
        cls.client = AsyncIOMotorClient(
            url or settings.mongodb_url,
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
        )
        await cls.client.admin.command("ping")
        cls.db = cls.client[db_name]
        logger.info("Connected to MongoDB: %s", db_name)

    @classmethod
    async def disconnect(cls):
        if cls.client is None:
            return
        cls.client.close()
        cls.client = None
        cls.db = None
        logger.info("Disconnected from MongoDB")

    @classmethod
    def get_database(cls) -> AsyncIOMotorDatabase:
        """Database used by the session, candidate and lock repositories."""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return cls.db
