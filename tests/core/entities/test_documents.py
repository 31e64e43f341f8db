"""Tests for ledger and document entities."""

import pytest

from stockledger.core.entities.documents import (
    DocumentStatus,
    InventoryAdjustment,
    PurchaseInvoice,
    PurchaseItem,
    Transformation,
    TransformationItem,
    WasteReason,
    WasteRecord,
)
from stockledger.core.entities.ledger import LedgerEntry, Movement, MovementKind


class TestLedgerEntry:
    def test_defaults(self):
        entry = LedgerEntry(product_id=1, branch_id=2)
        assert entry.quantity == 0.0
        assert entry.average_cost == 0.0
        assert entry.version == 0
        assert entry.key == (1, 2)

    def test_total_value(self):
        entry = LedgerEntry(product_id=1, branch_id=1, quantity=15, average_cost=3.0)
        assert entry.total_value == pytest.approx(45.0)


class TestMovement:
    def test_inbound_and_value(self):
        movement = Movement(
            product_id=1,
            branch_id=1,
            kind=MovementKind.PURCHASE_RECEIPT,
            quantity_delta=10,
            unit_cost=5.0,
        )
        assert movement.is_inbound
        assert movement.value == pytest.approx(50.0)

    def test_outbound_value_is_negative(self):
        movement = Movement(
            product_id=1,
            branch_id=1,
            kind=MovementKind.WASTE_DEDUCTION,
            quantity_delta=-5,
            unit_cost=3.0,
        )
        assert not movement.is_inbound
        assert movement.value == pytest.approx(-15.0)


class TestPurchaseInvoice:
    def test_line_amounts(self):
        item = PurchaseItem(product_id=1, quantity=10, unit_price=5.0)
        assert item.subtotal == pytest.approx(50.0)
        assert item.vat_amount == pytest.approx(7.5)
        assert item.total_price == pytest.approx(57.5)

    def test_zero_vat_line(self):
        item = PurchaseItem(product_id=1, quantity=4, unit_price=2.5, vat_percentage=0)
        assert item.vat_amount == 0
        assert item.total_price == pytest.approx(10.0)

    def test_invoice_rolls_up_lines(self):
        invoice = PurchaseInvoice(
            invoice_number="INV-1",
            supplier="Mill Co",
            branch_id=1,
            items=[
                PurchaseItem(product_id=1, quantity=10, unit_price=5.0),
                PurchaseItem(product_id=2, quantity=2, unit_price=10.0, vat_percentage=5),
            ],
        )
        assert invoice.subtotal == pytest.approx(70.0)
        assert invoice.vat_amount == pytest.approx(8.5)
        assert invoice.total_amount == pytest.approx(78.5)
        assert invoice.status is DocumentStatus.ACTIVE


class TestTransformation:
    def test_unit_cost_spreads_consumed_cost(self):
        transformation = Transformation(
            branch_id=1,
            final_product_id=3,
            final_quantity=4,
            items=[
                TransformationItem(raw_product_id=1, quantity=2, cost_per_unit=3.0),
                TransformationItem(raw_product_id=2, quantity=1, cost_per_unit=6.0),
            ],
        )
        assert transformation.items[0].total_cost == pytest.approx(6.0)
        assert transformation.total_cost == pytest.approx(12.0)
        assert transformation.unit_cost == pytest.approx(3.0)


class TestWasteAndAdjustment:
    def test_waste_reason_values(self):
        assert {r.value for r in WasteReason} == {
            "expiry",
            "damage",
            "breakage",
            "loss",
            "theft",
            "other",
        }

    def test_waste_record_defaults(self):
        record = WasteRecord(branch_id=1, product_id=1, quantity=2, reason=WasteReason.LOSS)
        assert record.status is DocumentStatus.ACTIVE
        assert record.voided_at is None

    def test_adjustment_delta(self):
        adjustment = InventoryAdjustment(
            branch_id=1, product_id=1, previous_quantity=15, new_quantity=12, reason="recount"
        )
        assert adjustment.delta == -3
