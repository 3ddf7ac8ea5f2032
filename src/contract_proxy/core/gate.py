from __future__ import annotations

import enum

from contract_proxy.models import RouteMapping


class Decision(enum.Enum):
    MOCK = "mock"
    FORWARD = "forward"


def decide(mapping: RouteMapping | None, upstream_configured: bool) -> Decision:
    """Pick mock-serving or forwarding for one request.

    Only type resolution decides: a resolved type is always mocked, even with an
    upstream configured, and without an upstream everything goes to the mock
    path (which reports ``TypeNotFound`` itself). Upstream health is never consulted.
    """
    if not upstream_configured:
        return Decision.MOCK
    if mapping is not None:
        return Decision.MOCK
    return Decision.FORWARD


class MockProxyGate:
    def __init__(self, target_url: str | None = None) -> None:
        self.target_url = target_url

    @property
    def upstream_configured(self) -> bool:
        return bool(self.target_url)

    def decide(self, mapping: RouteMapping | None) -> Decision:
        return decide(mapping, self.upstream_configured)
