from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from contract_proxy.api.dependencies import get_engine
from contract_proxy.api.schemas import ClearCacheResponse, FieldSchema, TypeSchema
from contract_proxy.core.engine import Engine
from contract_proxy.models import CacheStats, TypeDescriptor

router = APIRouter(prefix="/_admin", tags=["admin"])


def _type_schema(descriptor: TypeDescriptor) -> TypeSchema:
    return TypeSchema(
        name=descriptor.name,
        source_file=descriptor.source_file,
        fields=[
            FieldSchema(
                name=field.name,
                kind=field.kind,
                optional=field.optional,
                is_array=field.is_array,
                format=field.format,
                enum=list(field.enum),
                type_ref=field.type_ref,
            )
            for field in descriptor.fields
        ],
    )


@router.get("/cache", response_model=CacheStats)
async def cache_stats(engine: Engine = Depends(get_engine)) -> CacheStats:
    return engine.cache.stats()


@router.delete("/cache", response_model=ClearCacheResponse)
async def clear_cache(engine: Engine = Depends(get_engine)) -> ClearCacheResponse:
    return ClearCacheResponse(removed=engine.cache.clear())


@router.get("/types", response_model=list[TypeSchema])
async def list_types(engine: Engine = Depends(get_engine)) -> list[TypeSchema]:
    catalog = engine.catalog
    return [_type_schema(catalog[name]) for name in sorted(catalog)]


@router.get("/types/{name}", response_model=TypeSchema)
async def get_type(name: str, engine: Engine = Depends(get_engine)) -> TypeSchema:
    descriptor = engine.lookup(name)
    if descriptor is None:
        raise HTTPException(status_code=404, detail=f"Type {name!r} is not in the catalog.")
    return _type_schema(descriptor)


@router.post("/reload", response_model=list[TypeSchema])
async def reload_catalog(engine: Engine = Depends(get_engine)) -> list[TypeSchema]:
    """Force a full rescan of every contract directory."""
    catalog = await asyncio.to_thread(engine.rebuild)
    return [_type_schema(catalog[name]) for name in sorted(catalog)]
