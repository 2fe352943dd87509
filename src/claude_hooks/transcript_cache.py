from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 5 * 60


@dataclass
class TranscriptCacheEntry:
    messages: tuple[Any, ...]
    fetched_at: float


class TranscriptCache:
    """In-memory cache of parsed transcripts, keyed by path.

    Entries older than ``ttl`` seconds count as absent and are dropped when
    next looked up. ``start_sweeper`` runs a background task on the current
    event loop that also drops them every ``ttl`` seconds, so a process that
    touches many transcripts does not keep them all.
    """

    def __init__(self, ttl: float = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, TranscriptCacheEntry] = {}
        self._sweeper: asyncio.Task | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, entry: TranscriptCacheEntry, now: float) -> bool:
        return now - entry.fetched_at >= self.ttl

    def get(self, path: str | os.PathLike) -> tuple[Any, ...] | None:
        key = os.fspath(path)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, self._clock()):
            del self._entries[key]
            return None
        return entry.messages

    def put(self, path: str | os.PathLike, messages: Sequence[Any]) -> None:
        self._entries[os.fspath(path)] = TranscriptCacheEntry(tuple(messages), self._clock())

    def invalidate(self, path: str | os.PathLike | None = None) -> None:
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(os.fspath(path), None)

    def sweep(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("evicted %d expired transcript cache entries", len(stale))
        return len(stale)

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self) -> None:
        """Start the periodic sweep on the running loop. No-op if already running."""
        if self.sweeping:
            return
        self._sweeper = asyncio.get_running_loop().create_task(self._sweep_periodically())

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _sweep_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.ttl)
            self.sweep()
