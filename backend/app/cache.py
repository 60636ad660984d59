from __future__ import annotations

import time
from typing import Callable

from cachetools import TTLCache

from app.schemas.indicators import BatchResult

DEFAULT_TTL_SECONDS = 600
DEFAULT_MAX_ENTRIES = 32


def cache_key(period: int) -> str:
    return f"rsi_data_{period}"


class ResultCache:
    """In-memory batch results with a fixed time-to-live.

    Entries are replaced whole on ``set``; an expired entry reads as missing.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: TTLCache[str, BatchResult] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=clock
        )

    def get(self, key: str) -> BatchResult | None:
        self._entries.expire()
        return self._entries.get(key)

    def set(self, key: str, result: BatchResult) -> None:
        self._entries[key] = result

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)
