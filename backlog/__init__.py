"""
Backlog store - persistence abstraction for per-user backlog items.
"""
from backlog.models import BacklogItem
from backlog.storage import BacklogStore, MongoBacklogStore, InMemoryBacklogStore
from backlog.exceptions import BacklogError, StoreError, StoreQueryError, ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "BacklogItem",
    "BacklogStore",
    "MongoBacklogStore",
    "InMemoryBacklogStore",
    "BacklogError",
    "StoreError",
    "StoreQueryError",
    "ConfigurationError",
]
