from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from contract_proxy.config import ServerConfig
from contract_proxy.core.engine import Engine
from contract_proxy.core.ports.watcher import FileWatcherPort
from contract_proxy.watcher.watchfiles_adapter import WatchfilesWatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    engine: Engine = app.state.engine
    config: ServerConfig = app.state.config
    app.state.started_at = time.monotonic()

    watcher: FileWatcherPort | None = None
    if config.hot_reload:
        await engine.coordinator.start()
        watcher = WatchfilesWatcher(engine.directories, engine.coordinator.submit)
        await watcher.start()
    else:
        logger.info("Hot reload disabled")

    yield

    if watcher is not None:
        await watcher.stop()
        await engine.coordinator.stop()
    if app.state.forwarder is not None:
        await app.state.forwarder.aclose()
