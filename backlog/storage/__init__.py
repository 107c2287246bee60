"""
Storage abstraction layer.
Provides a clean interface for backlog persistence that can be swapped out.
"""
from .interface import BacklogStore
from .mongo_storage import MongoBacklogStore
from .memory_storage import InMemoryBacklogStore

__all__ = ['BacklogStore', 'MongoBacklogStore', 'InMemoryBacklogStore']
