"""Shared fixtures and helpers for tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from contract_proxy.core.cache import SchemaCache
from contract_proxy.core.engine import Engine
from contract_proxy.generator.faker_adapter import FakerMockGenerator

_REPO_ROOT = Path(__file__).parent.parent

USER_CONTRACTS = """\
/**
 * Example user contract
 */
export interface User {
  id: number;
  name: string;
  email: string;
  role: 'admin' | 'user' | 'guest';
  isActive: boolean;
  createdAt: string;
}

export interface Person {
  id: string;
  nickname?: string;
  birthday: Date;
}

export interface UserProfile {
  userId: number;
  bio: string | null;
  tags: string[];
}
"""

PRODUCT_CONTRACTS = """\
export interface Product {
  id: string;
  title: string;
  price: number;
  inStock: boolean;
  tags: string[];
}

export interface Order {
  id: string;
  items: OrderItem[];
  total: number;
  shippingAddress: Address;
}

export interface OrderItem {
  productId: number;
  quantity: number;
}

export interface Address {
  street: string;
  city: string;
}
"""


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

WriteContract = Callable[[Path, str, str], Path]


@pytest.fixture
def write_contract() -> WriteContract:
    """Return a helper that writes ``content`` to ``directory / name``."""

    def _write(directory: Path, name: str, content: str) -> Path:
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def contracts_dir(tmp_path: Path, write_contract: WriteContract) -> Path:
    """A contracts directory holding the user and product contracts."""
    directory = tmp_path / "contracts"
    write_contract(directory, "user.ts", USER_CONTRACTS)
    write_contract(directory, "shop/product.ts", PRODUCT_CONTRACTS)
    return directory


@pytest.fixture
def engine(contracts_dir: Path) -> Engine:
    engine = Engine([contracts_dir], cache=SchemaCache(), generator=FakerMockGenerator(seed=1234))
    engine.rebuild()
    return engine
