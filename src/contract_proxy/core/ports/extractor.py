from typing import Protocol

from contract_proxy.models import FieldDescriptor


class ShapeExtractor(Protocol):
    name: str

    def extract(self, content: str) -> list[tuple[str, tuple[FieldDescriptor, ...]]]: ...
