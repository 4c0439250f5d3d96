"""Shared pytest fixtures and test helpers for shopledger tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from shopledger.config.settings import ShopSettings
from shopledger.infrastructure.catalog import InventoryCatalog
from shopledger.infrastructure.database.engine import init_database
from shopledger.infrastructure.registry import CustomerRegistry
from shopledger.infrastructure.shop import Shop
from shopledger.infrastructure.storage import MemoryStorage


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sequential_ids() -> Callable[[str], str]:
    """Deterministic id factory: ``itm_0000000001``, ``itm_0000000002``, ..."""
    counter = {"n": 0}

    def factory(prefix: str) -> str:
        counter["n"] += 1
        return f"{prefix}{counter['n']:010x}"

    return factory


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def catalog(storage: MemoryStorage) -> InventoryCatalog:
    """Write-through catalog over in-memory storage."""
    return InventoryCatalog(storage)


@pytest.fixture
def registry(storage: MemoryStorage) -> CustomerRegistry:
    return CustomerRegistry(storage)


@pytest.fixture
def shop_root(tmp_path: Path) -> Path:
    """Temporary shop directory (the parent of ``.shopledger/``)."""
    return tmp_path


@pytest.fixture
def shop(shop_root: Path) -> Iterator[Shop]:
    """Shop on a temp directory backed by a real SQLite database."""
    settings = ShopSettings.from_cli(shop_root=shop_root)
    s = Shop(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_shop(shop_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp shop root so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_shop")`` on command test
    classes.
    """
    monkeypatch.delenv("SHOPLEDGER_CONFIG", raising=False)
    monkeypatch.chdir(shop_root)


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------


def product(name: str = "Rice", **fields: object) -> dict[str, object]:
    """Input dict for a product with sensible defaults."""
    data: dict[str, object] = {
        "type": "product",
        "name": name,
        "category": "Grains",
        "quantity": 20,
        "buying_price": 80.0,
        "selling_price": 100.0,
        "measuring_unit": "kg",
    }
    data.update(fields)
    return data


def service(name: str = "Delivery", **fields: object) -> dict[str, object]:
    data: dict[str, object] = {"type": "service", "name": name, "charges": 150.0}
    data.update(fields)
    return data
