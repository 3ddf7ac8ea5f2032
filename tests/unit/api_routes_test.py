"""Tests for the FastAPI app: mocked routes, forwarding and admin endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from contract_proxy.api.app import create_app
from contract_proxy.api.middleware import parse_forced_status
from contract_proxy.config import LatencyRange, ServerConfig
from contract_proxy.core.engine import Engine
from contract_proxy.errors import UpstreamUnreachable
from contract_proxy.generator.faker_adapter import FakerMockGenerator
from contract_proxy.models import TypeCatalog, TypeDescriptor

_TARGET = "http://backend.test"


@dataclass
class _UpstreamResponse:
    status_code: int
    headers: dict[str, str]
    content: bytes


@dataclass
class _FakeForwarder:
    response: _UpstreamResponse = field(
        default_factory=lambda: _UpstreamResponse(
            200, {"content-type": "application/json", "x-upstream": "yes", "content-encoding": "gzip"}, b'{"real":true}'
        )
    )
    calls: list[tuple[str, str, str, bytes]] = field(default_factory=list)
    closed: bool = False

    async def forward(
        self, method: str, path: str, query: str, headers: Mapping[str, str], body: bytes
    ) -> _UpstreamResponse:
        self.calls.append((method, path, query, body))
        return self.response

    async def aclose(self) -> None:
        self.closed = True


class _UnreachableForwarder(_FakeForwarder):
    async def forward(
        self, method: str, path: str, query: str, headers: Mapping[str, str], body: bytes
    ) -> _UpstreamResponse:
        raise UpstreamUnreachable(_TARGET, "connection refused")


class _BrokenGenerator:
    def generate(self, descriptor: TypeDescriptor, catalog: TypeCatalog) -> dict[str, Any]:
        raise ValueError("unsupported construct")

    def generate_many(
        self, descriptor: TypeDescriptor, catalog: TypeCatalog, count: int | None = None
    ) -> list[dict[str, Any]]:
        raise ValueError("unsupported construct")


def _config(contracts_dir: Path, **overrides: Any) -> ServerConfig:
    return ServerConfig(contracts_dir=contracts_dir, hot_reload=False, **overrides)


@pytest.fixture
def client(engine: Engine, contracts_dir: Path) -> TestClient:
    return TestClient(create_app(_config(contracts_dir), engine=engine))


@pytest.fixture
def proxy_engine(contracts_dir: Path) -> Engine:
    return Engine([contracts_dir], generator=FakerMockGenerator(seed=1), target_url=_TARGET)


class TestLivenessRoute:
    def test_liveness_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/healthz/live")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestHealthRoute:
    def test_reports_types_cache_and_config(self, client: TestClient, contracts_dir: Path) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["types"] == 7
        assert body["cache"]["enabled"] is True
        assert body["config"]["contracts_dir"] == str(contracts_dir)

    def test_uptime_counts_from_application_start(self, engine: Engine, contracts_dir: Path) -> None:
        app = create_app(_config(contracts_dir), engine=engine)
        app.state.started_at -= 1_000_000
        assert TestClient(app).get("/health").json()["uptime"] >= 1_000_000

        with TestClient(app) as client:
            assert client.get("/health").json()["uptime"] < 60


class TestMockRoutes:
    def test_plural_path_returns_list(self, client: TestClient) -> None:
        resp = client.get("/api/v1/users")
        assert resp.status_code == 200
        body = resp.json()
        assert isinstance(body, list)
        assert 3 <= len(body) <= 10
        assert set(body[0]) == {"id", "name", "email", "role", "isActive", "createdAt"}

    def test_singular_path_returns_object(self, client: TestClient) -> None:
        resp = client.get("/api/order")
        assert resp.status_code == 200
        body = resp.json()
        assert isinstance(body, dict)
        assert set(body["shippingAddress"]) == {"street", "city"}

    def test_singular_payload_is_stable_across_requests(self, client: TestClient) -> None:
        assert client.get("/api/user").json() == client.get("/api/user").json()

    def test_any_method_is_mocked(self, client: TestClient) -> None:
        resp = client.post("/api/product", json={"ignored": True})
        assert resp.status_code == 200
        assert "price" in resp.json()

    def test_unknown_path_is_404(self, client: TestClient) -> None:
        resp = client.get("/api/widgets")
        assert resp.status_code == 404
        body = resp.json()
        assert body["error"] == "Type not found"
        assert body["message"] == "No TypeScript interface matches the URL: /api/widgets"
        assert "hint" in body

    def test_root_path_is_404(self, client: TestClient) -> None:
        assert client.get("/").status_code == 404

    def test_generation_failure_is_500(self, contracts_dir: Path) -> None:
        engine = Engine([contracts_dir], generator=_BrokenGenerator())
        client = TestClient(create_app(_config(contracts_dir), engine=engine))

        resp = client.get("/api/user")

        assert resp.status_code == 500
        assert resp.json()["error"] == "Mock generation failed"


class TestStatusOverride:
    def test_forced_error_status(self, client: TestClient) -> None:
        resp = client.get("/api/users", headers={"x-mock-status": "503"})
        assert resp.status_code == 503
        assert resp.json()["error"] == "Forced error"

    def test_forced_success_status_keeps_payload(self, client: TestClient) -> None:
        resp = client.get("/api/user", headers={"x-mock-status": "201"})
        assert resp.status_code == 201
        assert "email" in resp.json()

    def test_forced_status_applies_to_not_found(self, client: TestClient) -> None:
        resp = client.get("/api/widgets", headers={"x-mock-status": "418"})
        assert resp.status_code == 418
        assert resp.json()["error"] == "Type not found"

    def test_invalid_header_is_ignored(self, client: TestClient) -> None:
        assert client.get("/api/user", headers={"x-mock-status": "banana"}).status_code == 200

    @pytest.mark.parametrize(("raw", "expected"), [("404", 404), (" 200 ", 200), ("99", None), ("600", None), (None, None)])
    def test_parse_forced_status(self, raw: str | None, expected: int | None) -> None:
        assert parse_forced_status(raw) == expected


class TestForwarding:
    def test_unknown_path_is_forwarded(self, proxy_engine: Engine, contracts_dir: Path) -> None:
        forwarder = _FakeForwarder()
        client = TestClient(create_app(_config(contracts_dir, target_url=_TARGET), proxy_engine, forwarder))

        resp = client.post("/api/widgets?page=2", content=b"payload")

        assert resp.status_code == 200
        assert resp.json() == {"real": True}
        assert resp.headers["x-upstream"] == "yes"
        assert "content-encoding" not in resp.headers
        assert forwarder.calls == [("POST", "/api/widgets", "page=2", b"payload")]

    def test_known_type_is_mocked_even_with_upstream(self, proxy_engine: Engine, contracts_dir: Path) -> None:
        forwarder = _FakeForwarder()
        client = TestClient(create_app(_config(contracts_dir, target_url=_TARGET), proxy_engine, forwarder))

        resp = client.get("/api/users")

        assert resp.status_code == 200
        assert isinstance(resp.json(), list)
        assert forwarder.calls == []

    def test_upstream_status_is_relayed(self, proxy_engine: Engine, contracts_dir: Path) -> None:
        forwarder = _FakeForwarder(response=_UpstreamResponse(503, {"content-type": "text/plain"}, b"down"))
        client = TestClient(create_app(_config(contracts_dir, target_url=_TARGET), proxy_engine, forwarder))

        resp = client.get("/api/widgets")

        assert resp.status_code == 503
        assert resp.text == "down"

    def test_unreachable_upstream_is_502(self, proxy_engine: Engine, contracts_dir: Path) -> None:
        client = TestClient(
            create_app(_config(contracts_dir, target_url=_TARGET), proxy_engine, _UnreachableForwarder())
        )

        resp = client.get("/api/widgets")

        assert resp.status_code == 502
        body = resp.json()
        assert body["error"] == "Proxy Error"
        assert body["details"] == "connection refused"

    def test_forwarder_is_closed_on_shutdown(self, proxy_engine: Engine, contracts_dir: Path) -> None:
        forwarder = _FakeForwarder()
        with TestClient(create_app(_config(contracts_dir, target_url=_TARGET), proxy_engine, forwarder)) as client:
            client.get("/healthz/live")
        assert forwarder.closed is True


class TestAdminRoutes:
    def test_cache_stats_and_clear(self, client: TestClient) -> None:
        client.get("/api/user")
        client.get("/api/product")
        client.get("/api/users")

        stats = client.get("/_admin/cache").json()
        assert stats["size"] == 2
        assert {schema["type_name"] for schema in stats["schemas"]} == {"User", "Product"}

        resp = client.delete("/_admin/cache")
        assert resp.status_code == 200
        assert resp.json() == {"removed": 2}
        assert client.get("/_admin/cache").json()["size"] == 0

    def test_list_types(self, client: TestClient) -> None:
        names = [item["name"] for item in client.get("/_admin/types").json()]
        assert names == sorted(["User", "Person", "UserProfile", "Product", "Order", "OrderItem", "Address"])

    def test_get_type(self, client: TestClient) -> None:
        body = client.get("/_admin/types/User").json()
        role = next(field for field in body["fields"] if field["name"] == "role")
        assert role["enum"] == ["admin", "user", "guest"]

    def test_get_missing_type(self, client: TestClient) -> None:
        assert client.get("/_admin/types/Widget").status_code == 404

    def test_reload_picks_up_new_contracts(self, client: TestClient, contracts_dir: Path) -> None:
        (contracts_dir / "invoice.ts").write_text("export interface Invoice { total: number }\n", encoding="utf-8")

        names = [item["name"] for item in client.post("/_admin/reload").json()]

        assert "Invoice" in names
        assert client.get("/api/invoice").status_code == 200


class TestOpenAPIDocument:
    def test_swagger_ui_page(self, client: TestClient) -> None:
        resp = client.get("/api-docs")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "swagger-ui" in resp.text
        assert "/api-docs/openapi.json" in resp.text

    def test_paths_and_schemas(self, client: TestClient) -> None:
        doc = client.get("/api-docs/openapi.json").json()
        assert doc["openapi"] == "3.0.0"
        assert "/users" in doc["paths"]
        assert "/user" in doc["paths"]
        assert "/people" in doc["paths"]
        assert "/user-profiles" in doc["paths"]
        assert "/order-items" in doc["paths"]
        user = doc["components"]["schemas"]["User"]
        assert user["properties"]["role"]["enum"] == ["admin", "user", "guest"]
        assert "nickname" not in doc["components"]["schemas"]["Person"]["required"]
        order = doc["components"]["schemas"]["Order"]
        assert order["properties"]["items"] == {"type": "array", "items": {"$ref": "#/components/schemas/OrderItem"}}


def test_latency_middleware_is_installed(engine: Engine, contracts_dir: Path) -> None:
    client = TestClient(create_app(_config(contracts_dir, latency=LatencyRange(min_ms=0, max_ms=1)), engine=engine))
    assert client.get("/api/user").status_code == 200
