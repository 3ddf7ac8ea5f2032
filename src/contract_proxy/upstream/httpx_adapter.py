from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from contract_proxy.errors import UpstreamUnreachable

logger = logging.getLogger(__name__)

# RFC 7230 hop-by-hop headers, plus headers httpx recomputes itself.
_HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "host",
        "content-length",
    }
)


def filter_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {key: value for key, value in headers.items() if key.lower() not in _HOP_BY_HOP}


def filter_response_headers(headers: Mapping[str, str]) -> dict[str, str]:
    # httpx hands back decoded content, so the original encoding no longer applies.
    return {key: value for key, value in filter_headers(headers).items() if key.lower() != "content-encoding"}


class HttpxForwarder:
    """Forward a request verbatim to the configured backend.

    Implements the ``UpstreamForwarder`` protocol. Exactly one attempt is made;
    any transport or protocol failure becomes ``UpstreamUnreachable``.
    """

    def __init__(
        self,
        target_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.target_url = target_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.target_url,
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        )

    async def forward(
        self,
        method: str,
        path: str,
        query: str,
        headers: Mapping[str, str],
        body: bytes,
    ) -> httpx.Response:
        url = f"{path}?{query}" if query else path
        logger.info("[PROXY] Forwarding %s %s -> %s", method, url, self.target_url)
        try:
            response = await self._client.request(method, url, headers=filter_headers(headers), content=body)
        except httpx.HTTPError as exc:
            logger.error("[PROXY] Error: %s", exc)
            raise UpstreamUnreachable(self.target_url, str(exc) or type(exc).__name__) from exc
        logger.debug("[PROXY] Response %d from %s", response.status_code, url)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
