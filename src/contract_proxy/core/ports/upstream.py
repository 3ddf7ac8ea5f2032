from collections.abc import Mapping
from typing import Protocol


class UpstreamResponse(Protocol):
    status_code: int
    headers: Mapping[str, str]
    content: bytes


class UpstreamForwarder(Protocol):
    async def forward(
        self,
        method: str,
        path: str,
        query: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> UpstreamResponse: ...

    async def aclose(self) -> None: ...
