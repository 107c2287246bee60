"""
Exception hierarchy for the backlog store.

Only the read path raises these to callers. Mutating store operations report
failure as ``False`` and log the cause instead.
"""
from typing import Any, Dict, Optional


class BacklogError(Exception):
    """Base class for backlog errors, carrying context and the original cause."""

    def __init__(
        self,
        message: str,
        tenant: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.message = message
        self.tenant = tenant
        self.context = dict(context) if context else {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logs or API responses."""
        result: Dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
        }
        if self.tenant is not None:
            result["tenant"] = self.tenant
        if self.context:
            result["context"] = self.context
        if self.original_error is not None:
            result["original_error"] = {
                "type": type(self.original_error).__name__,
                "message": str(self.original_error),
            }
        return result


class StoreError(BacklogError):
    """A backend operation failed."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        if operation is not None:
            self.context["operation"] = operation


class StoreQueryError(StoreError):
    """A read could not be executed; the caller decides whether to retry."""

    def __init__(
        self,
        message: str,
        filter: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        **kwargs
    ):
        kwargs.setdefault("operation", "get_items")
        super().__init__(message, **kwargs)
        self.filter = filter
        self.sort_by = sort_by
        if filter is not None:
            self.context["filter"] = filter
        if sort_by is not None:
            self.context["sort_by"] = sort_by


class ConfigurationError(BacklogError):
    """Settings are missing or malformed."""

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.setting = setting
        if setting is not None:
            self.context["setting"] = setting
