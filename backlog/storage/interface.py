"""
Storage interface - defines the contract for all backlog store backends.
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Sequence

from backlog.models import BacklogItem


class BacklogStore(ABC):
    """
    Abstract interface for backlog persistence.

    One instance serves one tenant's items and may be shared by concurrent
    callers. Mutating operations report failure as ``False`` and log the cause;
    the read raises ``StoreQueryError`` so callers can tell an empty result
    from a failed query.
    """

    @abstractmethod
    async def write_items(self, new_items: Sequence[BacklogItem]) -> bool:
        """Insert all items in one batch. Empty input succeeds without a write."""
        pass

    @abstractmethod
    async def get_items(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None
    ) -> List[BacklogItem]:
        """
        Return items matching ``filter`` sorted ascending by ``sort_by``.

        Args:
            filter: Filter document; None matches every item
            sort_by: Field to sort on; None sorts by category

        Returns:
            Matching items; documents that cannot be decoded are skipped

        Raises:
            StoreQueryError: If the backend query fails
        """
        pass

    @abstractmethod
    async def delete_items(self, filter: Dict[str, Any]) -> bool:
        """Delete every item matching ``filter``. Pass ``{}`` to delete all."""
        pass

    @abstractmethod
    async def update_item(self, item: BacklogItem) -> bool:
        """Replace the stored item with the same (title, category) by ``item``."""
        pass
