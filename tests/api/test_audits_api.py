"""API tests for the stock count workflow."""

import pytest


@pytest.fixture
async def counted_stock(client, seed, purchase):
    await purchase(seed.branch_id, seed.flour_id, 15, 2.0)
    await purchase(seed.branch_id, seed.sugar_id, 4, 3.0)
    return seed


async def _open_audit(client, headers, branch_id: int, audit_date: str = "2024-05-01") -> dict:
    response = await client.post(
        "/api/audits",
        json={"branch_id": branch_id, "audit_date": audit_date},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestAuditWorkflow:
    async def test_count_and_complete(self, client, counted_stock, as_clerk, as_manager):
        seed = counted_stock
        clerk = as_clerk(seed.branch_id)
        audit = await _open_audit(client, clerk, seed.branch_id)
        assert audit["status"] == "draft"

        populated = await client.post(f"/api/audits/{audit['id']}/populate", headers=clerk)
        data = populated.json()
        assert data["status"] == "in_progress"
        assert data["item_count"] == 2

        counts = {seed.flour_id: 12, seed.sugar_id: 4}
        for item in data["items"]:
            response = await client.put(
                f"/api/audits/{audit['id']}/items/{item['id']}/count",
                json={"actual_quantity": counts[item["product_id"]]},
                headers=clerk,
            )
            assert response.status_code == 200

        completed = await client.post(
            f"/api/audits/{audit['id']}/complete", headers=as_manager(seed.branch_id)
        )

        assert completed.status_code == 200
        result = completed.json()
        assert result["audit"]["status"] == "completed"
        assert result["audit"]["counted_count"] == 2
        assert len(result["adjustments"]) == 1
        assert result["adjustments"][0]["kind"] == "audit_adjustment"
        assert result["adjustments"][0]["quantity_delta"] == -3
        entry = await client.get(
            f"/api/inventory/entries/{seed.branch_id}/{seed.flour_id}", headers=clerk
        )
        assert entry.json()["quantity"] == 12

    async def test_item_notes(self, client, counted_stock, as_clerk):
        seed = counted_stock
        clerk = as_clerk(seed.branch_id)
        audit = await _open_audit(client, clerk, seed.branch_id)
        items = (await client.post(f"/api/audits/{audit['id']}/populate", headers=clerk)).json()[
            "items"
        ]

        response = await client.put(
            f"/api/audits/{audit['id']}/items/{items[0]['id']}/notes",
            json={"notes": "top shelf"},
            headers=clerk,
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "top shelf"
        assert response.json()["actual_quantity"] is None

    async def test_duplicate_day(self, client, seed, as_admin):
        await _open_audit(client, as_admin, seed.branch_id)

        response = await client.post(
            "/api/audits",
            json={"branch_id": seed.branch_id, "audit_date": "2024-05-01"},
            headers=as_admin,
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_AUDIT"

    async def test_complete_requires_every_count(self, client, counted_stock, as_admin):
        audit = await _open_audit(client, as_admin, counted_stock.branch_id)
        await client.post(f"/api/audits/{audit['id']}/populate", headers=as_admin)

        response = await client.post(f"/api/audits/{audit['id']}/complete", headers=as_admin)

        assert response.status_code == 409
        assert response.json()["error_code"] == "INCOMPLETE_AUDIT"

    async def test_clerk_cannot_close(self, client, counted_stock, as_clerk):
        clerk = as_clerk(counted_stock.branch_id)
        audit = await _open_audit(client, clerk, counted_stock.branch_id)

        completed = await client.post(f"/api/audits/{audit['id']}/complete", headers=clerk)
        cancelled = await client.post(f"/api/audits/{audit['id']}/cancel", headers=clerk)

        assert completed.status_code == 403
        assert cancelled.status_code == 403

    async def test_cancel_and_filter(self, client, seed, as_admin):
        first = await _open_audit(client, as_admin, seed.branch_id, "2024-05-01")
        await _open_audit(client, as_admin, seed.branch_id, "2024-05-02")

        cancelled = await client.post(f"/api/audits/{first['id']}/cancel", headers=as_admin)
        listed = await client.get("/api/audits?status=cancelled", headers=as_admin)

        assert cancelled.json()["status"] == "cancelled"
        assert [a["id"] for a in listed.json()["audits"]] == [first["id"]]

    async def test_unknown_audit(self, client, as_admin):
        response = await client.get("/api/audits/999", headers=as_admin)
        assert response.status_code == 404
        assert response.json()["error_code"] == "AUDIT_NOT_FOUND"


class TestMovementLookup:
    async def test_unknown_movement(self, client, as_admin):
        response = await client.get("/api/movements/999", headers=as_admin)
        assert response.status_code == 404
        assert response.json()["error_code"] == "MOVEMENT_NOT_FOUND"
