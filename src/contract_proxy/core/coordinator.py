from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from contract_proxy.core.cache import SchemaCache
from contract_proxy.models import Added, Changed, Removed, TypeCatalog, WatchError, WatchEvent

logger = logging.getLogger(__name__)


class WatchCoordinator:
    """Turn filesystem events into cache invalidation and catalog rebuilds.

    Events are consumed one at a time from a single queue; :meth:`apply` is also
    serialized by a lock so direct callers never interleave with the consumer.
    """

    def __init__(self, cache: SchemaCache, rebuild: Callable[[], TypeCatalog]) -> None:
        self._cache = cache
        self._rebuild = rebuild
        self._lock = threading.Lock()
        self._queue: asyncio.Queue[WatchEvent] | None = None
        self._task: asyncio.Task[None] | None = None

    def submit(self, event: WatchEvent) -> None:
        if self._queue is None:
            raise RuntimeError("WatchCoordinator.start() must be awaited before submitting events")
        self._queue.put_nowait(event)

    def apply(self, event: WatchEvent) -> bool:
        """Process one event synchronously. Returns ``True`` if a new catalog was published."""
        if isinstance(event, WatchError):
            logger.warning("File watcher error: %s", event.detail)
            return False

        # watchfiles reports absolute paths; catalog source files are resolved the same way.
        stale = str(Path(event.path).resolve()) if isinstance(event, (Changed, Removed)) else None

        with self._lock:
            if stale is not None:
                self._cache.invalidate_file(stale)

            try:
                catalog = self._rebuild()
            except Exception:
                logger.exception("Catalog rebuild after %s failed, keeping previous catalog", event)
                return False

            # Requests served from the old catalog during the rebuild may have cached it again.
            if stale is not None:
                self._cache.invalidate_file(stale)

        if isinstance(event, Added):
            logger.info("New file detected: %s", event.path)
        elif isinstance(event, Changed):
            logger.info("File changed: %s", event.path)
        else:
            logger.warning("File deleted: %s", event.path)
        logger.debug("Catalog now holds %d type(s)", len(catalog))
        return True

    async def start(self) -> None:
        if self._task is not None:
            return
        self._queue = asyncio.Queue()
        self._task = asyncio.create_task(self._consume(self._queue))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        self._queue = None

    async def drain(self) -> None:
        """Wait until every submitted event has been processed."""
        if self._queue is not None:
            await self._queue.join()

    async def _consume(self, queue: asyncio.Queue[WatchEvent]) -> None:
        while True:
            event = await queue.get()
            try:
                await asyncio.to_thread(self.apply, event)
            except Exception:
                logger.exception("Error while applying %s", event)
            finally:
                queue.task_done()
