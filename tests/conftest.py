"""Pytest configuration and fixtures."""

import itertools
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from pathlib import Path

import pytest

from stockledger.application.dto.requests import PurchaseItemRequest, RecordPurchaseRequest
from stockledger.application.services import reset_services
from stockledger.application.use_cases import RecordPurchaseUseCase
from stockledger.config import reset_settings
from stockledger.core.entities.catalog import (
    Branch,
    Category,
    MeasurementUnit,
    Product,
    ProductType,
)
from stockledger.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCatalogStore,
    SQLiteInventoryStore,
    reset_stores,
)
from stockledger.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at a per-test data directory and drop every singleton."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LEDGER_CONFLICT_RETRY_WAIT", "0")
    reset_settings()
    reset_services()
    reset_stores()
    yield
    reset_settings()
    reset_services()
    reset_stores()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a database file that does not exist yet."""
    return tmp_path / "ledger.db"


@pytest.fixture
async def pool(db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over a freshly migrated database."""
    await initialize_database(db_path, create_backup_before=False)
    pool = ConnectionPool(db_path, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def catalog_store(pool: ConnectionPool) -> SQLiteCatalogStore:
    return SQLiteCatalogStore(pool)


@pytest.fixture
def inventory_store(pool: ConnectionPool) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(pool)


@dataclass
class Catalog:
    """Two branches and three products to post against."""

    branch: Branch
    other_branch: Branch
    category: Category
    product_type: ProductType
    flour: Product
    sugar: Product
    cake: Product


@pytest.fixture
async def catalog(catalog_store: SQLiteCatalogStore) -> Catalog:
    branch = await catalog_store.create_branch(Branch(name="Downtown", location="Main St"))
    other = await catalog_store.create_branch(Branch(name="Airport"))
    category = await catalog_store.create_category(Category(name="Bakery"))
    product_type = await catalog_store.create_product_type(ProductType(name="Raw"))

    async def product(name: str, sku: str) -> Product:
        return await catalog_store.create_product(
            Product(
                name=name,
                sku=sku,
                category_id=category.id,
                product_type_id=product_type.id,
                unit=MeasurementUnit.KILOGRAM,
            )
        )

    return Catalog(
        branch=branch,
        other_branch=other,
        category=category,
        product_type=product_type,
        flour=await product("Flour", "FLBARA1001"),
        sugar=await product("Sugar", "SUBARA1002"),
        cake=await product("Cake", "CABARA1003"),
    )


@pytest.fixture
def receive(inventory_store: SQLiteInventoryStore):
    """Post a purchase of one line; returns the use case result."""
    numbers = itertools.count(1)

    async def _receive(
        branch_id: int,
        product_id: int,
        quantity: float,
        unit_price: float,
        vat_percentage: float = 15.0,
    ):
        return await RecordPurchaseUseCase(inventory_store=inventory_store).execute(
            RecordPurchaseRequest(
                branch_id=branch_id,
                supplier="Mill Co",
                invoice_number=f"PO-{next(numbers):04d}",
                items=[
                    PurchaseItemRequest(
                        product_id=product_id,
                        quantity=quantity,
                        unit_price=unit_price,
                        vat_percentage=vat_percentage,
                    )
                ],
            )
        )

    return _receive
