"""Single-slot guards that keep sync runs from overlapping."""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from leadsync.repositories.redis.redis_lock import RedisLockStore

logger = logging.getLogger(__name__)


class SyncRunGuard:
    """In-process guard. A second caller is turned away instead of waiting."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, label: str) -> Iterator[bool]:
        """
        Hold the guard for the duration of the block.

        Yields True when the guard was acquired and False when another run holds it;
        the block must then do nothing.
        """
        if not self.try_acquire():
            logger.warning("Sync %s skipped: another sync run is in progress", label)
            yield False
            return
        try:
            yield True
        finally:
            self.release()


class RedisSyncRunGuard(SyncRunGuard):
    """Guard shared by every process that talks to the same Redis server."""

    def __init__(self, store: RedisLockStore, key: str, ttl_seconds: int) -> None:
        super().__init__()
        self.store = store
        self.key = key
        self.ttl_seconds = ttl_seconds
        self._token: Optional[str] = None

    def try_acquire(self) -> bool:
        if not super().try_acquire():
            return False
        token = uuid.uuid4().hex
        if not self.store.acquire(self.key, token, self.ttl_seconds):
            super().release()
            return False
        self._token = token
        return True

    def release(self) -> None:
        try:
            if self._token is not None:
                self.store.release(self.key, self._token)
        finally:
            self._token = None
            super().release()
