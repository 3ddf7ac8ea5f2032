import time

from fastapi import APIRouter, Depends, Request

from contract_proxy.api.dependencies import get_config, get_engine
from contract_proxy.api.schemas import HealthResponse, ServerHealthResponse
from contract_proxy.config import ServerConfig
from contract_proxy.core.engine import Engine

router = APIRouter()


@router.get("/health", response_model=ServerHealthResponse)
async def health(
    request: Request,
    engine: Engine = Depends(get_engine),
    config: ServerConfig = Depends(get_config),
) -> ServerHealthResponse:
    return ServerHealthResponse(
        uptime=time.monotonic() - request.app.state.started_at,
        types=len(engine.catalog),
        cache=engine.cache.stats(),
        config=config.summary(),
    )


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse()
