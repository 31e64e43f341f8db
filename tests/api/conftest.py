"""Fixtures for the HTTP API tests."""

import itertools
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.main import create_app
from stockledger.infrastructure.storage.sqlite import close_pool, reset_stores
from stockledger.infrastructure.storage.sqlite.migrations import initialize_database

ADMIN = {"X-Actor-Id": "root", "X-Actor-Role": "admin"}


def manager(branch_id: int) -> dict[str, str]:
    return {
        "X-Actor-Id": "mgr",
        "X-Actor-Role": "branch_manager",
        "X-Actor-Branch": str(branch_id),
    }


def clerk(branch_id: int) -> dict[str, str]:
    return {"X-Actor-Id": "clerk", "X-Actor-Role": "user", "X-Actor-Branch": str(branch_id)}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Client against the app, backed by a migrated database in the test data dir."""
    await initialize_database(create_backup_before=False)
    app = create_app(use_lifespan=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await close_pool()
    reset_stores()


@dataclass
class Seed:
    branch_id: int
    other_branch_id: int
    flour_id: int
    sugar_id: int
    cake_id: int


@pytest.fixture
async def seed(client: AsyncClient) -> Seed:
    """Two branches and three products created through the API."""

    async def post(path: str, body: dict) -> dict:
        response = await client.post(path, json=body, headers=ADMIN)
        assert response.status_code == 201, response.text
        return response.json()

    branch = await post("/api/branches", {"name": "Downtown", "location": "Main St"})
    other = await post("/api/branches", {"name": "Airport"})
    category = await post("/api/catalog/categories", {"name": "Bakery"})
    product_type = await post("/api/catalog/product-types", {"name": "Raw"})

    async def product(name: str) -> int:
        created = await post(
            "/api/catalog/products",
            {
                "name": name,
                "category_id": category["id"],
                "product_type_id": product_type["id"],
                "unit": "kilogram",
            },
        )
        return created["id"]

    return Seed(
        branch_id=branch["id"],
        other_branch_id=other["id"],
        flour_id=await product("Flour"),
        sugar_id=await product("Sugar"),
        cake_id=await product("Cake"),
    )


@pytest.fixture
def purchase(client: AsyncClient):
    """POST one purchase line; returns the response."""
    numbers = itertools.count(1)

    async def _purchase(
        branch_id: int,
        product_id: int,
        quantity: float,
        unit_price: float,
        headers: dict | None = None,
    ):
        return await client.post(
            "/api/purchases",
            json={
                "branch_id": branch_id,
                "supplier": "Mill Co",
                "invoice_number": f"PO-{next(numbers):04d}",
                "items": [
                    {"product_id": product_id, "quantity": quantity, "unit_price": unit_price}
                ],
            },
            headers=headers or ADMIN,
        )

    return _purchase


@pytest.fixture
def as_admin() -> dict[str, str]:
    return ADMIN


@pytest.fixture
def as_manager():
    return manager


@pytest.fixture
def as_clerk():
    return clerk
