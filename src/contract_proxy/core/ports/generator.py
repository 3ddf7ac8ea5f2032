from typing import Any, Protocol

from contract_proxy.models import TypeCatalog, TypeDescriptor


class MockGenerator(Protocol):
    def generate(self, descriptor: TypeDescriptor, catalog: TypeCatalog) -> dict[str, Any]: ...

    def generate_many(self, descriptor: TypeDescriptor, catalog: TypeCatalog, count: int | None = None) -> list[dict[str, Any]]: ...
