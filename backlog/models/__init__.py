"""
Pydantic models for stored backlog documents.
"""
from .backlog_models import BacklogItem

__all__ = ["BacklogItem"]
