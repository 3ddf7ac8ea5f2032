from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from contract_proxy.models import CachedSchemaStats, CacheEntry, CacheStats

logger = logging.getLogger(__name__)

_CacheKey = tuple[str, str]


class SchemaCache:
    """In-memory cache of generated singular payloads.

    Entries are keyed by ``(type_name, source_file)`` so same-named types from
    different files never collide. When disabled every operation is a no-op
    except :meth:`stats`.
    """

    def __init__(self, enabled: bool = True, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[_CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self._enabled = enabled
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, type_name: str, source_file: str) -> dict[str, Any] | None:
        if not self._enabled:
            return None
        with self._lock:
            entry = self._entries.get((type_name, source_file))
        if entry is None:
            return None
        logger.debug("Cache HIT: %s from %s", type_name, source_file)
        return entry.payload

    def set(self, type_name: str, source_file: str, payload: dict[str, Any]) -> None:
        if not self._enabled:
            return
        entry = CacheEntry(type_name=type_name, source_file=source_file, payload=payload, created_at=self._clock())
        with self._lock:
            self._entries[(type_name, source_file)] = entry
        logger.debug("Cache SET: %s from %s", type_name, source_file)

    def invalidate_file(self, source_file: str) -> int:
        """Drop every entry generated from ``source_file``; returns how many were removed."""
        if not self._enabled:
            return 0
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.source_file == source_file]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.info("Cache invalidated: %d schema(s) from %s", len(stale), source_file)
        return len(stale)

    def clear(self) -> int:
        if not self._enabled:
            return 0
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared: %d schema(s) removed", removed)
        return removed

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())
        return CacheStats(
            size=len(entries),
            enabled=self._enabled,
            schemas=[
                CachedSchemaStats(type_name=e.type_name, source_file=e.source_file, age=max(now - e.created_at, 0.0))
                for e in entries
            ],
        )
