"""Catalog product use cases: register with a generated SKU, edit descriptive fields."""

import random

from stockledger.application.dto.requests import RegisterProductRequest, UpdateProductRequest
from stockledger.application.dto.responses import ProductResponse
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.catalog import Product
from stockledger.core.exceptions import (
    CategoryNotFoundError,
    DuplicateSkuError,
    ProductNotFoundError,
    ProductTypeNotFoundError,
    ValidationError,
)
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.services.access import Permission, authorize
from stockledger.core.services.numbering import generate_sku

logger = get_logger(__name__)


class CatalogUseCase:
    def __init__(self, catalog_store: ICatalogStore | None = None):
        self._catalog_store = catalog_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from stockledger.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    @staticmethod
    async def _check_barcode(
        store: ICatalogStore, barcode: str | None, product_id: int | None = None
    ) -> None:
        if not barcode:
            return
        owner = await store.get_product_by_barcode(barcode)
        if owner is not None and owner.id != product_id:
            raise ValidationError("barcode", "barcode already in use", barcode)


class RegisterProductUseCase(CatalogUseCase):
    """
    Register a product under a category and type.

    The SKU is built from name, category and type prefixes plus a random
    suffix; on collision a new suffix is drawn, up to the configured number
    of attempts.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        rng: random.Random | None = None,
    ):
        super().__init__(catalog_store)
        self._rng = rng

    async def execute(
        self,
        request: RegisterProductRequest,
        actor: Actor | None = None,
    ) -> Product:
        if actor is not None:
            authorize(actor, Permission.MANAGE_CATALOG)

        store = await self._get_catalog_store()
        category = await store.get_category(request.category_id)
        if category is None:
            raise CategoryNotFoundError(request.category_id)
        product_type = await store.get_product_type(request.product_type_id)
        if product_type is None:
            raise ProductTypeNotFoundError(request.product_type_id)
        await self._check_barcode(store, request.barcode)

        attempts = get_settings().ledger.sku_attempts
        sku = ""
        for attempt in range(1, attempts + 1):
            sku = generate_sku(request.name, category.name, product_type.name, self._rng)
            if await store.get_product_by_sku(sku) is not None:
                logger.debug("sku_collision", sku=sku, attempt=attempt)
                continue
            try:
                product = await store.create_product(
                    Product(
                        name=request.name,
                        sku=sku,
                        barcode=request.barcode or None,
                        category_id=category.id,
                        product_type_id=product_type.id,
                        unit=request.unit,
                        description=request.description,
                    )
                )
            except DuplicateSkuError:
                logger.debug("sku_collision", sku=sku, attempt=attempt)
                continue
            logger.info("product_registered", product_id=product.id, sku=product.sku)
            return product

        logger.warning("sku_generation_exhausted", name=request.name, attempts=attempts)
        raise DuplicateSkuError(sku, attempts)

    def to_response(self, product: Product) -> ProductResponse:
        return ProductResponse.model_validate(product)


class UpdateProductUseCase(CatalogUseCase):
    """Change name, barcode, unit or description. SKU, category and type are fixed."""

    async def execute(
        self,
        product_id: int,
        request: UpdateProductRequest,
        actor: Actor | None = None,
    ) -> Product:
        if actor is not None:
            authorize(actor, Permission.MANAGE_CATALOG)

        store = await self._get_catalog_store()
        product = await store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        changes = request.model_dump(exclude_unset=True)
        if "name" in changes and changes["name"] is None:
            raise ValidationError("name", "product name cannot be empty")
        if changes.get("barcode") == "":
            changes["barcode"] = None
        if "unit" in changes and changes["unit"] is None:
            del changes["unit"]
        await self._check_barcode(store, changes.get("barcode"), product.id)

        for key, value in changes.items():
            setattr(product, key, value)
        product = await store.update_product(product)

        logger.info("product_updated", product_id=product.id, fields=sorted(changes))
        return product

    def to_response(self, product: Product) -> ProductResponse:
        return ProductResponse.model_validate(product)
