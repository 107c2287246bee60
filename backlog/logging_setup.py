"""
Logging configuration and setup.
"""
import logging
from typing import Optional

from backlog.config import StoreSettings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(tenant)s] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class TenantFilter(logging.Filter):
    """Logging filter to add the tenant name to log records."""

    def filter(self, record):
        """Add tenant to log record if the caller did not pass one."""
        if not hasattr(record, 'tenant'):
            record.tenant = '-'
        return True


class SafeFormatter(logging.Formatter):
    """Safe formatter that handles a missing tenant gracefully."""

    def format(self, record):
        """Format log record, handling missing tenant."""
        if not hasattr(record, 'tenant'):
            record.tenant = '-'
        return super().format(record)


def setup_logging(level: Optional[str] = None) -> logging.Handler:
    """
    Configure root logging with tenant-aware formatting.

    Args:
        level: Level name; defaults to the LOG_LEVEL setting

    Returns:
        The installed stream handler
    """
    if level is None:
        level = StoreSettings.from_env().log_level
    log_level = getattr(logging, level.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = logging.StreamHandler()
    handler.addFilter(TenantFilter())
    handler.setFormatter(SafeFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logging.basicConfig(level=log_level, handlers=[handler], force=True)
    return handler
