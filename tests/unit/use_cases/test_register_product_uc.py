"""Unit tests for the catalog use cases."""

import random
from unittest.mock import AsyncMock

import pytest

from stockledger.application.dto.requests import (
    CreateBranchRequest,
    RegisterProductRequest,
    UpdateProductRequest,
)
from stockledger.application.use_cases.manage_catalog import CreateBranchUseCase
from stockledger.application.use_cases.register_product import (
    RegisterProductUseCase,
    UpdateProductUseCase,
)
from stockledger.config import reset_settings
from stockledger.core.entities.actor import Actor, Role
from stockledger.core.entities.catalog import Category, Product, ProductType
from stockledger.core.exceptions import (
    AccessDeniedError,
    CategoryNotFoundError,
    DuplicateSkuError,
    ProductNotFoundError,
    ValidationError,
)

MANAGER = Actor(actor_id="mgr", role=Role.BRANCH_MANAGER, branch_id=1)


def _product(**overrides) -> Product:
    fields = dict(id=1, name="Olive Oil", sku="OLOIRA1234", category_id=1, product_type_id=1)
    fields.update(overrides)
    return Product(**fields)


@pytest.fixture
def mock_catalog_store():
    store = AsyncMock()
    store.get_category.return_value = Category(id=1, name="Oils")
    store.get_product_type.return_value = ProductType(id=1, name="Raw")
    store.get_product_by_barcode.return_value = None
    store.get_product_by_sku.return_value = None

    async def create_product(product):
        product.id = 1
        return product

    store.create_product.side_effect = create_product
    return store


class TestRegisterProductUseCase:
    async def test_generates_sku(self, mock_catalog_store):
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store, rng=random.Random(1))

        product = await use_case.execute(
            RegisterProductRequest(name="Olive Oil", category_id=1, product_type_id=1)
        )

        assert product.sku.startswith("OLOIRA")
        assert len(product.sku) == 10

    async def test_collision_draws_again(self, mock_catalog_store):
        mock_catalog_store.get_product_by_sku.side_effect = [_product(), None]
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)

        await use_case.execute(
            RegisterProductRequest(name="Olive Oil", category_id=1, product_type_id=1)
        )

        assert mock_catalog_store.get_product_by_sku.await_count == 2
        mock_catalog_store.create_product.assert_awaited_once()

    async def test_insert_race_draws_again(self, mock_catalog_store):
        created = _product(id=2)
        mock_catalog_store.create_product.side_effect = [DuplicateSkuError("X"), created]
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)

        product = await use_case.execute(
            RegisterProductRequest(name="Olive Oil", category_id=1, product_type_id=1)
        )

        assert product is created

    async def test_gives_up_after_configured_attempts(self, mock_catalog_store, monkeypatch):
        monkeypatch.setenv("LEDGER_SKU_ATTEMPTS", "3")
        reset_settings()
        mock_catalog_store.get_product_by_sku.return_value = _product()
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)

        with pytest.raises(DuplicateSkuError) as exc:
            await use_case.execute(
                RegisterProductRequest(name="Olive Oil", category_id=1, product_type_id=1)
            )

        assert exc.value.details["attempts"] == 3
        mock_catalog_store.create_product.assert_not_awaited()

    async def test_unknown_category(self, mock_catalog_store):
        mock_catalog_store.get_category.return_value = None
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)
        with pytest.raises(CategoryNotFoundError):
            await use_case.execute(
                RegisterProductRequest(name="Olive Oil", category_id=5, product_type_id=1)
            )

    async def test_barcode_in_use(self, mock_catalog_store):
        mock_catalog_store.get_product_by_barcode.return_value = _product(id=9)
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)
        with pytest.raises(ValidationError):
            await use_case.execute(
                RegisterProductRequest(
                    name="Olive Oil", category_id=1, product_type_id=1, barcode="123"
                )
            )

    async def test_managers_cannot_register(self, mock_catalog_store):
        use_case = RegisterProductUseCase(catalog_store=mock_catalog_store)
        with pytest.raises(AccessDeniedError):
            await use_case.execute(
                RegisterProductRequest(name="Olive Oil", category_id=1, product_type_id=1),
                MANAGER,
            )


class TestUpdateProductUseCase:
    async def test_updates_only_sent_fields(self, mock_catalog_store):
        mock_catalog_store.get_product.return_value = _product(description="old")
        mock_catalog_store.update_product.side_effect = lambda p: p
        use_case = UpdateProductUseCase(catalog_store=mock_catalog_store)

        product = await use_case.execute(1, UpdateProductRequest(name="Extra Virgin"))

        assert product.name == "Extra Virgin"
        assert product.description == "old"
        assert product.sku == "OLOIRA1234"

    async def test_empty_barcode_clears_it(self, mock_catalog_store):
        mock_catalog_store.get_product.return_value = _product(barcode="123")
        mock_catalog_store.update_product.side_effect = lambda p: p
        use_case = UpdateProductUseCase(catalog_store=mock_catalog_store)

        product = await use_case.execute(1, UpdateProductRequest(barcode=""))

        assert product.barcode is None

    async def test_unknown_product(self, mock_catalog_store):
        mock_catalog_store.get_product.return_value = None
        use_case = UpdateProductUseCase(catalog_store=mock_catalog_store)
        with pytest.raises(ProductNotFoundError):
            await use_case.execute(1, UpdateProductRequest(name="x"))


class TestCreateBranchUseCase:
    async def test_admin_only(self, mock_catalog_store):
        use_case = CreateBranchUseCase(catalog_store=mock_catalog_store)
        with pytest.raises(AccessDeniedError):
            await use_case.execute(CreateBranchRequest(name="Harbor"), MANAGER)
        mock_catalog_store.create_branch.assert_not_awaited()
