"""
Store wiring from settings.
"""
from .stores import get_client, create_backlog_store, reset_client

__all__ = ["get_client", "create_backlog_store", "reset_client"]
