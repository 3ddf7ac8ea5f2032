"""Catch-all route: mock from the catalog, or forward to the real backend."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from contract_proxy.api.dependencies import get_engine, get_forwarder
from contract_proxy.core.engine import Engine
from contract_proxy.core.gate import Decision
from contract_proxy.core.ports.upstream import UpstreamForwarder
from contract_proxy.upstream.httpx_adapter import filter_response_headers

logger = logging.getLogger(__name__)

router = APIRouter()

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def forced_status(request: Request) -> int | None:
    return getattr(request.state, "forced_status", None)


@router.api_route("/{path:path}", methods=_METHODS, include_in_schema=False)
async def dynamic_route(
    request: Request,
    engine: Engine = Depends(get_engine),
    forwarder: UpstreamForwarder | None = Depends(get_forwarder),
) -> Response:
    path = request.url.path
    catalog = engine.catalog
    mapping = engine.route(path, catalog)
    decision = engine.decide(mapping)

    if decision is Decision.FORWARD and forwarder is not None:
        logger.debug("[PROXY] No type found for %s, forwarding to backend", path)
        upstream = await forwarder.forward(
            request.method,
            path,
            request.url.query,
            dict(request.headers),
            await request.body(),
        )
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            headers=filter_response_headers(upstream.headers),
        )

    status = forced_status(request)
    if mapping is not None:
        logger.debug("Matched URL %r -> Type %r (array: %s)", path, mapping.type_name, mapping.is_array)
        if status is not None and status >= 400:
            return JSONResponse(
                status_code=status,
                content={"error": "Forced error", "message": f"Status {status} forced via x-mock-status header"},
            )

    # Raises TypeNotFound / MockGenerationFailure, mapped by the app's exception handlers.
    _, payload = engine.mock_payload(path, catalog)
    return JSONResponse(status_code=status or 200, content=payload)
