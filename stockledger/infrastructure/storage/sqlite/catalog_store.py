"""
SQLite implementation of catalog storage.

Branches, categories, product types and products. Catalog writes are
independent of the ledger and each runs in its own short transaction.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.catalog import (
    Branch,
    Category,
    MeasurementUnit,
    Product,
    ProductType,
)
from stockledger.core.exceptions import DuplicateSkuError, ValidationError
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from stockledger.infrastructure.storage.sqlite.rows import iso, parse_datetime

logger = get_logger(__name__)


def row_to_branch(row: aiosqlite.Row) -> Branch:
    return Branch(
        id=row["id"],
        name=row["name"],
        location=row["location"] or "",
        created_at=parse_datetime(row["created_at"]),
    )


def row_to_product(row: aiosqlite.Row) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        sku=row["sku"],
        barcode=row["barcode"],
        category_id=row["category_id"],
        product_type_id=row["product_type_id"],
        unit=MeasurementUnit(row["unit"]),
        description=row["description"],
        created_at=parse_datetime(row["created_at"]),
    )


class SQLiteCatalogStore(ICatalogStore):
    """SQLite implementation of catalog storage."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is None:
            self._pool = await get_pool()
        async with self._pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is None:
            self._pool = await get_pool()
        async with self._pool.transaction() as conn:
            yield conn

    # Branches

    async def create_branch(self, branch: Branch) -> Branch:
        """Create a branch; names are unique."""
        async with self._transaction() as conn:
            try:
                cursor = await conn.execute(
                    "INSERT INTO branches (name, location, created_at) VALUES (?, ?, ?)",
                    (branch.name, branch.location, iso(branch.created_at)),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError("name", "branch name already exists", branch.name) from e
            branch.id = cursor.lastrowid
        logger.info("branch_created", branch_id=branch.id, name=branch.name)
        return branch

    async def get_branch(self, branch_id: int) -> Branch | None:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM branches WHERE id = ?", (branch_id,))
            row = await cursor.fetchone()
            return row_to_branch(row) if row else None

    async def list_branches(self) -> list[Branch]:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM branches ORDER BY name")
            rows = await cursor.fetchall()
            return [row_to_branch(row) for row in rows]

    async def update_branch(self, branch: Branch) -> Branch:
        async with self._transaction() as conn:
            try:
                await conn.execute(
                    "UPDATE branches SET name = ?, location = ? WHERE id = ?",
                    (branch.name, branch.location, branch.id),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError("name", "branch name already exists", branch.name) from e
        logger.info("branch_updated", branch_id=branch.id)
        return branch

    # Categories

    async def create_category(self, category: Category) -> Category:
        async with self._transaction() as conn:
            try:
                cursor = await conn.execute(
                    "INSERT INTO categories (name, description, created_at) VALUES (?, ?, ?)",
                    (category.name, category.description, iso(category.created_at)),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError(
                    "name", "category name already exists", category.name
                ) from e
            category.id = cursor.lastrowid
        logger.info("category_created", category_id=category.id, name=category.name)
        return category

    async def get_category(self, category_id: int) -> Category | None:
        async with self._connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_category(row) if row else None

    async def list_categories(self) -> list[Category]:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM categories ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_category(row) for row in rows]

    # Product types

    async def create_product_type(self, product_type: ProductType) -> ProductType:
        async with self._transaction() as conn:
            try:
                cursor = await conn.execute(
                    "INSERT INTO product_types (name, description, created_at) VALUES (?, ?, ?)",
                    (product_type.name, product_type.description, iso(product_type.created_at)),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError(
                    "name", "product type name already exists", product_type.name
                ) from e
            product_type.id = cursor.lastrowid
        logger.info(
            "product_type_created",
            product_type_id=product_type.id,
            name=product_type.name,
        )
        return product_type

    async def get_product_type(self, product_type_id: int) -> ProductType | None:
        async with self._connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM product_types WHERE id = ?", (product_type_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_product_type(row) if row else None

    async def list_product_types(self) -> list[ProductType]:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM product_types ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_product_type(row) for row in rows]

    # Products

    async def create_product(self, product: Product) -> Product:
        """Create a product. Raises DuplicateSkuError if the SKU is taken."""
        async with self._transaction() as conn:
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO products (
                        name, sku, barcode, category_id, product_type_id,
                        unit, description, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        product.name,
                        product.sku,
                        product.barcode,
                        product.category_id,
                        product.product_type_id,
                        product.unit.value,
                        product.description,
                        iso(product.created_at),
                    ),
                )
            except aiosqlite.IntegrityError as e:
                message = str(e)
                if "products.sku" in message:
                    raise DuplicateSkuError(product.sku) from e
                if "products.barcode" in message:
                    raise ValidationError(
                        "barcode", "barcode already in use", product.barcode
                    ) from e
                raise
            product.id = cursor.lastrowid
        logger.info("product_created", product_id=product.id, sku=product.sku)
        return product

    async def get_product(self, product_id: int) -> Product | None:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return row_to_product(row) if row else None

    async def get_product_by_sku(self, sku: str) -> Product | None:
        async with self._connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE sku = ?", (sku,))
            row = await cursor.fetchone()
            return row_to_product(row) if row else None

    async def get_product_by_barcode(self, barcode: str) -> Product | None:
        async with self._connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE barcode = ?", (barcode,)
            )
            row = await cursor.fetchone()
            return row_to_product(row) if row else None

    async def list_products(
        self,
        category_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Product]:
        """List products with pagination and optional category filter."""
        async with self._connection() as conn:
            if category_id is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM products
                    WHERE category_id = ?
                    ORDER BY name, id
                    LIMIT ? OFFSET ?
                    """,
                    (category_id, limit, offset),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM products
                    ORDER BY name, id
                    LIMIT ? OFFSET ?
                    """,
                    (limit, offset),
                )
            rows = await cursor.fetchall()
            return [row_to_product(row) for row in rows]

    async def update_product(self, product: Product) -> Product:
        """Update name, barcode, unit and description. SKU is immutable."""
        async with self._transaction() as conn:
            try:
                await conn.execute(
                    """
                    UPDATE products SET
                        name = ?,
                        barcode = ?,
                        unit = ?,
                        description = ?
                    WHERE id = ?
                    """,
                    (
                        product.name,
                        product.barcode,
                        product.unit.value,
                        product.description,
                        product.id,
                    ),
                )
            except aiosqlite.IntegrityError as e:
                raise ValidationError(
                    "barcode", "barcode already in use", product.barcode
                ) from e
        logger.info("product_updated", product_id=product.id)
        return product

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=parse_datetime(row["created_at"]),
        )

    @staticmethod
    def _row_to_product_type(row: aiosqlite.Row) -> ProductType:
        return ProductType(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=parse_datetime(row["created_at"]),
        )
