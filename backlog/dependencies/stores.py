"""
Builds MongoDB-backed stores from settings.

One client is shared by the process. Each user gets their own database with a
single items collection, and a store bound to it. Choosing which user a call
belongs to stays with the caller.
"""
import logging
from typing import Optional

from pymongo import AsyncMongoClient

from backlog.config import StoreSettings
from backlog.storage import MongoBacklogStore

logger = logging.getLogger(__name__)

# Global client instance
_client: Optional[AsyncMongoClient] = None


def get_client(settings: Optional[StoreSettings] = None) -> AsyncMongoClient:
    """Get or create the shared MongoDB client."""
    global _client
    if _client is None:
        settings = settings or StoreSettings.from_env()
        _client = AsyncMongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms
        )
        logger.info(f"MongoDB client created (timeout: {settings.server_selection_timeout_ms}ms)")
    return _client


async def reset_client() -> None:
    """Close and forget the shared client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        logger.info("MongoDB client closed")


def create_backlog_store(
    user_id: str,
    client: Optional[AsyncMongoClient] = None,
    settings: Optional[StoreSettings] = None
) -> MongoBacklogStore:
    """
    Create a store bound to one user's backlog collection.

    Args:
        user_id: Owner of the backlog
        client: Client to use; defaults to the shared client
        settings: Naming settings; defaults to the environment

    Raises:
        ConfigurationError: If user_id is empty or settings are malformed
    """
    settings = settings or StoreSettings.from_env()
    db_name = settings.database_name(user_id)
    client = client if client is not None else get_client(settings)
    collection = client[db_name][settings.collection]
    logger.debug(f"Bound backlog store to {db_name}.{settings.collection}")
    return MongoBacklogStore(collection, tenant=db_name)
