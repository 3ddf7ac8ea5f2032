from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class FileWatcherPort(Protocol):
    """Watches contract directories and reports ``WatchEvent`` values to one consumer."""

    @property
    def directories(self) -> Sequence[Path]: ...

    async def start(self) -> None: ...

    async def stop(self) -> None: ...
