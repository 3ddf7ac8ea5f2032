from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from contract_proxy.models import CacheStats


class HealthResponse(BaseModel):
    status: str = "ok"


class ServerHealthResponse(BaseModel):
    status: str = "ok"
    uptime: float
    types: int
    cache: CacheStats
    config: dict[str, Any]


class ClearCacheResponse(BaseModel):
    removed: int


class FieldSchema(BaseModel):
    name: str
    kind: str
    optional: bool
    is_array: bool
    format: str | None = None
    enum: list[str] = []
    type_ref: str | None = None


class TypeSchema(BaseModel):
    name: str
    source_file: str
    fields: list[FieldSchema]
