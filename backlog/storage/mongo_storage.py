"""
MongoDB implementation of the backlog store interface.

Each user has their own database holding a single collection with all of
their backlog items. A store instance is bound to that one collection;
mapping a tenant to its store is left to the caller.

Known gaps: no pagination, no query options other than sort, no retry of
failed calls, and no timeout beyond what the client is configured with.
"""
import logging
from typing import Optional, List, Dict, Any, Sequence

from pydantic import ValidationError
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from backlog.exceptions import StoreQueryError
from backlog.models import BacklogItem
from backlog.models.backlog_models import DEFAULT_SORT_FIELD
from .interface import BacklogStore

logger = logging.getLogger(__name__)


class MongoBacklogStore(BacklogStore):
    """Backlog store backed by one MongoDB collection."""

    def __init__(self, user_collection: AsyncCollection, tenant: Optional[str] = None):
        """
        Initialize MongoBacklogStore.

        Args:
            user_collection: Collection holding this tenant's items
            tenant: Tenant name used in log records and errors
        """
        self.user_collection = user_collection
        self.tenant = tenant or user_collection.database.name
        self._log_extra = {"tenant": self.tenant}

    async def write_items(self, new_items: Sequence[BacklogItem]) -> bool:
        """Insert all items with one insert_many call."""
        documents = [item.to_document() for item in new_items]
        if not documents:
            logger.debug("No items to insert", extra=self._log_extra)
            return True
        try:
            result = await self.user_collection.insert_many(documents)
        except PyMongoError as e:
            logger.error(f"Issue inserting new items to backlog: {e}", extra=self._log_extra)
            return False
        logger.debug(
            f"Successfully inserted {len(result.inserted_ids)} new items",
            extra=self._log_extra
        )
        return True

    async def get_items(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None
    ) -> List[BacklogItem]:
        """
        Query the collection and drain the cursor into a list.

        Documents that fail to decode are logged and skipped; any backend
        error aborts the read.

        Raises:
            StoreQueryError: If the query or cursor iteration fails
        """
        sort_field = sort_by or DEFAULT_SORT_FIELD
        query = filter if filter is not None else {}
        items: List[BacklogItem] = []
        try:
            cursor = self.user_collection.find(query, sort=[(sort_field, ASCENDING)])
            async for document in cursor:
                try:
                    items.append(BacklogItem.from_document(document))
                except ValidationError as e:
                    logger.error(
                        f"Unknown item in iteration (_id={document.get('_id')}): {e}",
                        extra=self._log_extra
                    )
        except PyMongoError as e:
            logger.error(f"Issue querying backlog items: {e}", extra=self._log_extra)
            raise StoreQueryError(
                f"Failed to query backlog items: {e}",
                filter=query,
                sort_by=sort_field,
                tenant=self.tenant,
                original_error=e
            ) from e
        logger.debug(f"Items returned from mongodb: {len(items)}", extra=self._log_extra)
        return items

    async def delete_items(self, filter: Dict[str, Any]) -> bool:
        """
        Delete every document matching the filter with one delete_many call.

        Raises:
            ValueError: If filter is None; use {} to delete everything
        """
        if filter is None:
            raise ValueError("delete_items requires an explicit filter; use {} to match all items")
        try:
            result = await self.user_collection.delete_many(filter)
        except PyMongoError as e:
            logger.error(f"Issue deleting items from backlog: {e}", extra=self._log_extra)
            return False
        logger.debug(f"Successfully deleted {result.deleted_count} items", extra=self._log_extra)
        return True

    async def update_item(self, item: BacklogItem) -> bool:
        """
        Replace the document with the item's (title, category).

        A filter that matches nothing still reports success and inserts nothing.
        """
        try:
            result = await self.user_collection.replace_one(item.key_filter(), item.to_document())
        except PyMongoError as e:
            logger.error(f"Issue updating item {item.natural_key()}: {e}", extra=self._log_extra)
            return False
        logger.debug(
            f"Updated item {item.natural_key()}: matched={result.matched_count} "
            f"modified={result.modified_count}",
            extra=self._log_extra
        )
        return True
