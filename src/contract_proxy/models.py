from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel

FieldKind = Literal["string", "number", "boolean", "object"]


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    kind: FieldKind
    optional: bool = False
    is_array: bool = False
    format: str | None = None
    # Literal values of a string-literal union, e.g. ("admin", "user").
    enum: tuple[str, ...] = ()
    # Referenced type name, kept so the generator can expand other catalog types.
    type_ref: str | None = None


@dataclass(frozen=True)
class TypeDescriptor:
    name: str
    source_file: str
    fields: tuple[FieldDescriptor, ...] = ()


class TypeCatalog(Mapping[str, TypeDescriptor]):
    """Read-only name -> descriptor snapshot.

    A catalog is never mutated after construction; a rebuild produces a new one.
    """

    __slots__ = ("_types", "_directories")

    def __init__(self, types: Mapping[str, TypeDescriptor] | None = None, directories: tuple[str, ...] = ()) -> None:
        self._types: dict[str, TypeDescriptor] = dict(types or {})
        self._directories = directories

    @property
    def directories(self) -> tuple[str, ...]:
        return self._directories

    def lookup(self, name: str) -> TypeDescriptor | None:
        if not name:
            return None
        return self._types.get(name)

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self._types[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"TypeCatalog({len(self._types)} types from {len(self._directories)} directories)"


@dataclass(frozen=True)
class RouteMapping:
    type_name: str
    is_array: bool
    source_file: str


@dataclass(frozen=True)
class CacheEntry:
    type_name: str
    source_file: str
    payload: dict[str, Any]
    created_at: float


# --- Watch events ---


@dataclass(frozen=True)
class Added:
    path: str


@dataclass(frozen=True)
class Changed:
    path: str


@dataclass(frozen=True)
class Removed:
    path: str


@dataclass(frozen=True)
class WatchError:
    detail: str
    cause: BaseException | None = field(default=None, compare=False)


WatchEvent = Added | Changed | Removed | WatchError


# --- Reporting models ---


class CachedSchemaStats(BaseModel):
    type_name: str
    source_file: str
    age: float


class CacheStats(BaseModel):
    size: int
    enabled: bool
    schemas: list[CachedSchemaStats] = []
