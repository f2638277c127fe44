"""Persistent storage for the serialized cart.

Each back-end holds a single named slot that is read once when the store
starts and overwritten wholesale on every accepted mutation.
"""
import os
import tempfile
from pathlib import Path
from typing import Protocol

from cartstore.config import Settings, load_settings
from cartstore.errors import StorageError
from cartstore.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    def load(self) -> str | None: ...

    def save(self, payload: str) -> None: ...


class MemoryCartStorage:
    """Process-local slot. Does not survive a restart."""

    def __init__(self, payload: str | None = None):
        self.payload = payload

    def load(self) -> str | None:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload


class FileCartStorage:
    """JSON file on local disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read cart from {self.path}: {e}") from e
        return text or None

    def save(self, payload: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target then swap, so readers never see half a cart
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write cart to {self.path}: {e}") from e


class RedisCartStorage:
    """Upstash Redis key without TTL."""

    def __init__(self, redis, key: str):
        self.redis = redis
        self.key = key

    def load(self) -> str | None:
        try:
            data = self.redis.get(self.key)
        except Exception as e:
            logger.error(f"Failed to get cart from Redis: {e}")
            raise StorageError(f"Cart storage unavailable: {e!s}") from e
        return data or None

    def save(self, payload: str) -> None:
        try:
            self.redis.set(self.key, payload)
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise StorageError(f"Cart storage unavailable: {e!s}") from e


def get_cart_storage(settings: Settings | None = None) -> CartStorage:
    """Redis when Upstash credentials are configured, a local file otherwise."""
    settings = settings or load_settings()
    if settings.use_redis:
        from cartstore.db import RedisKeys, get_redis_sync

        return RedisCartStorage(get_redis_sync(settings), RedisKeys.cart_key(settings.storage_key))
    return FileCartStorage(settings.storage_path)
