from __future__ import annotations

from fastapi import Request

from contract_proxy.config import ServerConfig
from contract_proxy.core.engine import Engine
from contract_proxy.core.ports.upstream import UpstreamForwarder


def get_engine(request: Request) -> Engine:
    """Return the engine owned by the running application."""
    engine: Engine = request.app.state.engine
    return engine


def get_config(request: Request) -> ServerConfig:
    config: ServerConfig = request.app.state.config
    return config


def get_forwarder(request: Request) -> UpstreamForwarder | None:
    forwarder: UpstreamForwarder | None = request.app.state.forwarder
    return forwarder
