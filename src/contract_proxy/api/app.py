from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contract_proxy.api.lifespan import lifespan
from contract_proxy.api.middleware import LatencyMiddleware, RequestLoggingMiddleware, StatusOverrideMiddleware
from contract_proxy.api.routes.admin import router as admin_router
from contract_proxy.api.routes.docs import router as docs_router
from contract_proxy.api.routes.health import router as health_router
from contract_proxy.api.routes.mock import forced_status
from contract_proxy.api.routes.mock import router as mock_router
from contract_proxy.config import ServerConfig
from contract_proxy.core.ast import TreeSitterShapeExtractor
from contract_proxy.core.cache import SchemaCache
from contract_proxy.core.engine import Engine
from contract_proxy.core.extract import RegexShapeExtractor
from contract_proxy.core.ports.extractor import ShapeExtractor
from contract_proxy.core.ports.upstream import UpstreamForwarder
from contract_proxy.errors import MockGenerationFailure, TypeNotFound, UpstreamUnreachable
from contract_proxy.upstream.httpx_adapter import HttpxForwarder

logger = logging.getLogger(__name__)


def create_extractor(parser: str) -> ShapeExtractor:
    if parser == "tree-sitter":
        return TreeSitterShapeExtractor()
    return RegexShapeExtractor()


def create_engine(config: ServerConfig) -> Engine:
    return Engine(
        config.all_directories,
        extractor=create_extractor(config.parser),
        cache=SchemaCache(enabled=config.cache),
        target_url=config.target_url,
    )


async def _type_not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=forced_status(request) or 404,
        content={
            "error": "Type not found",
            "message": str(exc),
            "hint": "Make sure you have exported an interface in your contracts directory",
        },
    )


async def _mock_generation_failed(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Error generating mock: %s", exc, exc_info=exc.__cause__)
    return JSONResponse(
        status_code=forced_status(request) or 500,
        content={"error": "Mock generation failed", "message": str(exc)},
    )


async def _upstream_unreachable(_request: Request, exc: Exception) -> JSONResponse:
    detail = exc.detail if isinstance(exc, UpstreamUnreachable) else str(exc)
    return JSONResponse(
        status_code=502,
        content={"error": "Proxy Error", "message": "Failed to reach the target backend", "details": detail},
    )


def create_app(
    config: ServerConfig | None = None,
    engine: Engine | None = None,
    forwarder: UpstreamForwarder | None = None,
) -> FastAPI:
    config = config or ServerConfig()
    engine = engine or create_engine(config)
    if forwarder is None and config.target_url:
        forwarder = HttpxForwarder(config.target_url)

    # Serve a consistent catalog from the first request on.
    engine.rebuild()

    app = FastAPI(
        title="Contract Proxy",
        description="Mock REST API generated from TypeScript interfaces, with an optional real backend.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.engine = engine
    app.state.forwarder = forwarder
    app.state.started_at = time.monotonic()

    app.add_exception_handler(TypeNotFound, _type_not_found)
    app.add_exception_handler(MockGenerationFailure, _mock_generation_failed)
    app.add_exception_handler(UpstreamUnreachable, _upstream_unreachable)

    # Added innermost first: latency, then status override, logging, CORS outermost.
    if config.latency is not None:
        app.add_middleware(LatencyMiddleware, min_ms=config.latency.min_ms, max_ms=config.latency.max_ms)
    app.add_middleware(StatusOverrideMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    app.include_router(health_router, include_in_schema=False)
    app.include_router(admin_router)
    app.include_router(docs_router)
    # Must stay last: it matches every path.
    app.include_router(mock_router)

    return app
