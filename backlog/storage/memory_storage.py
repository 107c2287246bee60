"""
In-memory implementation of the backlog store interface.

Used as a test double for code that depends on BacklogStore. Documents are
kept in a mapping keyed by natural key so duplicates written by
write_items sit side by side under the same key.
"""
import asyncio
import copy
import logging
from typing import Optional, List, Dict, Any, Iterable, Iterator, Mapping, Sequence, Tuple

from pydantic import ValidationError

from backlog.exceptions import StoreQueryError
from backlog.models import BacklogItem
from backlog.models.backlog_models import DEFAULT_SORT_FIELD
from .filters import UnsupportedFilterError, matches, sort_key
from .interface import BacklogStore

logger = logging.getLogger(__name__)


def _document_key(document: Mapping[str, Any]) -> Tuple[Any, Any]:
    return (document.get("title"), document.get("category"))


class InMemoryBacklogStore(BacklogStore):
    """Backlog store holding documents in process memory."""

    def __init__(self, documents: Optional[Iterable[Mapping[str, Any]]] = None, tenant: str = "memory"):
        """
        Initialize InMemoryBacklogStore.

        Args:
            documents: Raw documents to seed the store with. They are not
                validated, so undecodable records can be staged for tests.
            tenant: Tenant name used in log records and errors
        """
        self.tenant = tenant
        self._log_extra = {"tenant": tenant}
        self._documents: Dict[Tuple[Any, Any], List[Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        for document in documents or []:
            self._insert(dict(document))

    def _insert(self, document: Dict[str, Any]) -> None:
        self._documents.setdefault(_document_key(document), []).append(copy.deepcopy(document))

    def _iter_documents(self) -> Iterator[Dict[str, Any]]:
        for bucket in self._documents.values():
            yield from bucket

    def document_count(self) -> int:
        """Number of stored documents, undecodable ones included."""
        return sum(len(bucket) for bucket in self._documents.values())

    async def write_items(self, new_items: Sequence[BacklogItem]) -> bool:
        """Append every item; duplicates of a natural key are kept."""
        documents = [item.to_document() for item in new_items]
        async with self._lock:
            for document in documents:
                self._insert(document)
        logger.debug(f"Successfully inserted {len(documents)} new items", extra=self._log_extra)
        return True

    async def get_items(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None
    ) -> List[BacklogItem]:
        """
        Return decoded copies of matching documents, sorted ascending.

        Raises:
            StoreQueryError: If the filter uses an unsupported operator or the
                sort field holds values that cannot be compared
        """
        sort_field = sort_by or DEFAULT_SORT_FIELD
        query = filter if filter is not None else {}
        async with self._lock:
            try:
                selected = [doc for doc in self._iter_documents() if matches(doc, query)]
                selected.sort(key=sort_key(sort_field))
            except (UnsupportedFilterError, TypeError) as e:
                logger.error(f"Issue querying backlog items: {e}", extra=self._log_extra)
                raise StoreQueryError(
                    f"Failed to query backlog items: {e}",
                    filter=query,
                    sort_by=sort_field,
                    tenant=self.tenant,
                    original_error=e
                ) from e

        items: List[BacklogItem] = []
        for document in selected:
            try:
                items.append(BacklogItem.from_document(copy.deepcopy(document)))
            except ValidationError as e:
                logger.error(f"Unknown item in iteration: {e}", extra=self._log_extra)
        logger.debug(f"Items returned from memory: {len(items)}", extra=self._log_extra)
        return items

    async def delete_items(self, filter: Dict[str, Any]) -> bool:
        """
        Remove every document matching the filter.

        Raises:
            ValueError: If filter is None; use {} to delete everything
        """
        if filter is None:
            raise ValueError("delete_items requires an explicit filter; use {} to match all items")
        deleted = 0
        async with self._lock:
            try:
                remaining = {}
                for key, bucket in self._documents.items():
                    kept = [doc for doc in bucket if not matches(doc, filter)]
                    deleted += len(bucket) - len(kept)
                    if kept:
                        remaining[key] = kept
            except UnsupportedFilterError as e:
                logger.error(f"Issue deleting items from backlog: {e}", extra=self._log_extra)
                return False
            self._documents = remaining
        logger.debug(f"Successfully deleted {deleted} items", extra=self._log_extra)
        return True

    async def update_item(self, item: BacklogItem) -> bool:
        """Replace the first document stored under the item's natural key."""
        async with self._lock:
            bucket = self._documents.get(item.natural_key())
            matched = 1 if bucket else 0
            if bucket:
                bucket[0] = copy.deepcopy(item.to_document())
        logger.debug(
            f"Updated item {item.natural_key()}: matched={matched}",
            extra=self._log_extra
        )
        return True
