from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from watchfiles import Change, awatch

from contract_proxy.core.scanner import is_definition_file, is_excluded_directory
from contract_proxy.models import Added, Changed, Removed, WatchError, WatchEvent

logger = logging.getLogger(__name__)

_CHANGE_EVENTS: dict[Change, type[Added] | type[Changed] | type[Removed]] = {
    Change.added: Added,
    Change.modified: Changed,
    Change.deleted: Removed,
}


def _relative_parts(path: Path, roots: Sequence[Path]) -> tuple[str, ...]:
    for root in roots:
        with contextlib.suppress(ValueError):
            return path.parent.relative_to(root).parts
    return ()


def _is_watched_file(path: Path, roots: Sequence[Path] = ()) -> bool:
    if not is_definition_file(path):
        return False
    return not any(is_excluded_directory(part) for part in _relative_parts(path, roots))


def to_watch_events(changes: set[tuple[Change, str]], roots: Sequence[Path] = ()) -> list[WatchEvent]:
    """Translate a raw ``watchfiles`` batch into watch events, in a stable order."""
    events: list[WatchEvent] = []
    for change, raw_path in sorted(changes, key=lambda item: (item[1], item[0].value)):
        if _is_watched_file(Path(raw_path), roots):
            events.append(_CHANGE_EVENTS[change](raw_path))
    return events


class WatchfilesWatcher:
    """Watch contract directories and feed watch events to a single consumer.

    Implements the ``FileWatcherPort`` protocol.
    """

    def __init__(
        self,
        directories: Sequence[str | Path],
        on_event: Callable[[WatchEvent], None],
    ) -> None:
        self._directories = [Path(directory) for directory in directories]
        self._on_event = on_event
        self._task: asyncio.Task[None] | None = None

    @property
    def directories(self) -> Sequence[Path]:
        return tuple(self._directories)

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        count = len(self._directories)
        logger.info("Starting file watcher on %d director%s", count, "ies" if count != 1 else "y")
        for directory in self._directories:
            logger.info("  - %s", directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("File watcher stopped")

    async def _watch(self) -> None:
        roots = [directory for directory in self._directories if directory.is_dir()]
        if not roots:
            logger.warning("No existing directory to watch")
            return
        try:
            async for changes in awatch(*roots):
                events = to_watch_events(changes, roots)
                if events:
                    logger.info("Detected changes in %d file(s)", len(events))
                for event in events:
                    self._emit(event)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("File watcher stopped unexpectedly")
            self._emit(WatchError(f"{type(exc).__name__}: {exc}", cause=exc))

    def _emit(self, event: WatchEvent) -> None:
        try:
            self._on_event(event)
        except Exception:
            logger.exception("Error in watcher callback")
