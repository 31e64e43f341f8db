"""Fixtures for use case unit tests: a mocked store handing out one mocked session."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from stockledger.core.entities.catalog import Branch, Product


@pytest.fixture
def session():
    session = AsyncMock()
    session.get_branch.return_value = Branch(id=1, name="Downtown")
    session.get_product.side_effect = lambda product_id: Product(
        id=product_id, name=f"P{product_id}", sku=f"SKU{product_id}", category_id=1, product_type_id=1
    )
    return session


@pytest.fixture
def mock_inventory_store(session):
    store = MagicMock()

    @asynccontextmanager
    async def _unit_of_work():
        yield session

    store.transaction.side_effect = _unit_of_work
    store.session.side_effect = _unit_of_work
    return store


@pytest.fixture
def mock_ledger():
    return AsyncMock()
