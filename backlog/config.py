"""
Environment-driven settings for connecting backlog stores.
"""
import os
from dataclasses import dataclass
from typing import Optional

from backlog.exceptions import ConfigurationError

# Characters MongoDB rejects in database names, plus whitespace
INVALID_DB_NAME_CHARS = frozenset('/\\. "$*<>:|?\0\t\n\r')
MAX_DB_NAME_BYTES = 63


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}",
            setting=name,
            original_error=e
        ) from e


@dataclass(frozen=True)
class StoreSettings:
    """Connection and naming settings for MongoDB-backed stores."""
    mongo_uri: str = "mongodb://localhost:27017"
    db_prefix: str = "backlog_"
    collection: str = "items"
    server_selection_timeout_ms: int = 5000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "StoreSettings":
        """
        Load settings from the environment.

        Raises:
            ConfigurationError: If a numeric setting is not an integer
        """
        return cls(
            mongo_uri=os.getenv("BACKLOG_MONGO_URI", cls.mongo_uri),
            db_prefix=os.getenv("BACKLOG_DB_PREFIX", cls.db_prefix),
            collection=os.getenv("BACKLOG_COLLECTION", cls.collection),
            server_selection_timeout_ms=_int_env(
                "BACKLOG_SERVER_SELECTION_TIMEOUT_MS", cls.server_selection_timeout_ms
            ),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )

    def database_name(self, user_id: Optional[str]) -> str:
        """
        Name of the database holding ``user_id``'s backlog.

        Raises:
            ConfigurationError: If user_id is empty, contains characters MongoDB
                forbids in database names, or makes the name too long
        """
        if not user_id:
            raise ConfigurationError("user_id is required to select a backlog database", setting="user_id")
        bad = sorted(set(user_id) & INVALID_DB_NAME_CHARS)
        if bad:
            raise ConfigurationError(
                f"user_id {user_id!r} contains characters not allowed in a database name: {bad!r}",
                setting="user_id"
            )
        name = f"{self.db_prefix}{user_id}"
        if len(name.encode("utf-8")) > MAX_DB_NAME_BYTES:
            raise ConfigurationError(
                f"Database name {name!r} exceeds {MAX_DB_NAME_BYTES} bytes",
                setting="user_id"
            )
        return name
