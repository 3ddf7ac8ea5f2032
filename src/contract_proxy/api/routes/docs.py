from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse

from contract_proxy.api.dependencies import get_engine
from contract_proxy.api.openapi import generate_openapi
from contract_proxy.core.engine import Engine

router = APIRouter(tags=["docs"])

OPENAPI_PATH = "/api-docs/openapi.json"


@router.get(OPENAPI_PATH)
async def contracts_openapi(request: Request, engine: Engine = Depends(get_engine)) -> dict[str, Any]:
    """OpenAPI document for the routes served from the current catalog."""
    server_url = str(request.base_url).rstrip("/")
    return generate_openapi(engine.catalog, server_url)


@router.get("/api-docs", include_in_schema=False)
async def contracts_swagger_ui() -> HTMLResponse:
    """Interactive Swagger UI for the contract routes."""
    return get_swagger_ui_html(openapi_url=OPENAPI_PATH, title="Contract Proxy API Docs")
