"""
Per-key asyncio locks with bounded waits.

Every schedule ID gets its own lock, so two schedules never contend. Locks
are created on first use and dropped once nobody holds or waits for them.
A task that already holds a key may enter it again (the coordinator holds a
schedule while calling into the ledger, which locks the same schedule).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from ..domain.errors import BusyError

logger = logging.getLogger("clinicslots")


class _KeyedLockEntry:
    __slots__ = ("lock", "owner", "depth", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.owner: Optional[asyncio.Task] = None
        self.depth = 0
        self.users = 0


class KeyedLockManager:
    """Registry of re-entrant per-key locks."""

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        if timeout_seconds <= 0:
            raise ValueError("Lock timeout must be positive")
        self._timeout = timeout_seconds
        self._entries: Dict[str, _KeyedLockEntry] = {}

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def is_locked(self, key: str) -> bool:
        entry = self._entries.get(key)
        return bool(entry and entry.lock.locked())

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, key: str, timeout: Optional[float] = None) -> AsyncIterator[None]:
        """Hold ``key`` exclusively; raises BusyError if it cannot be had in time."""
        task = asyncio.current_task()
        entry = self._entries.get(key)

        if entry is not None and task is not None and entry.owner is task:
            entry.depth += 1
            try:
                yield
            finally:
                entry.depth -= 1
            return

        if entry is None:
            entry = self._entries[key] = _KeyedLockEntry()
        entry.users += 1
        wait = self._timeout if timeout is None else timeout
        try:
            try:
                await asyncio.wait_for(entry.lock.acquire(), timeout=wait)
            except asyncio.TimeoutError:
                logger.warning(f"Lock wait timed out for key={key} after {wait}s")
                raise BusyError(key, wait) from None

            entry.owner = task
            entry.depth = 1
            try:
                yield
            finally:
                entry.owner = None
                entry.depth = 0
                entry.lock.release()
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]
