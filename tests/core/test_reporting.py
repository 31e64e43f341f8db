"""Tests for report aggregation."""

from datetime import UTC, datetime

import pytest

from stockledger.core.entities.catalog import Product
from stockledger.core.entities.documents import (
    DocumentStatus,
    PurchaseInvoice,
    PurchaseItem,
    WasteReason,
    WasteRecord,
)
from stockledger.core.entities.ledger import LedgerEntry
from stockledger.core.services.reporting import (
    build_purchase_report,
    build_valuation_report,
    build_waste_report,
)

DAY_ONE = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)
DAY_TWO = datetime(2024, 5, 2, 9, 0, tzinfo=UTC)


def _waste(product_id, quantity, cost, reason, at=DAY_ONE, status=DocumentStatus.ACTIVE):
    return WasteRecord(
        branch_id=1,
        product_id=product_id,
        quantity=quantity,
        cost=cost,
        reason=reason,
        recorded_at=at,
        status=status,
    )


class TestWasteReport:
    def test_totals_skip_voided(self):
        report = build_waste_report(
            [
                _waste(1, 5, 15.0, WasteReason.DAMAGE),
                _waste(2, 1, 4.0, WasteReason.EXPIRY, at=DAY_TWO),
                _waste(1, 9, 27.0, WasteReason.THEFT, status=DocumentStatus.VOIDED),
            ],
            product_names={1: "Flour"},
        )
        assert report.record_count == 2
        assert report.total_quantity == pytest.approx(6)
        assert report.total_cost == pytest.approx(19.0)

    def test_groups(self):
        report = build_waste_report(
            [
                _waste(1, 5, 15.0, WasteReason.DAMAGE),
                _waste(1, 2, 6.0, WasteReason.DAMAGE, at=DAY_TWO),
                _waste(2, 1, 4.0, WasteReason.EXPIRY),
            ],
            product_names={1: "Flour"},
        )
        assert [g.key for g in report.by_product] == ["1", "2"]
        assert report.by_product[0].label == "Flour"
        assert report.by_product[0].amount == pytest.approx(21.0)
        assert report.by_product[1].label == "2"
        assert report.by_reason[0].key == "damage"
        assert report.by_reason[0].count == 2
        assert [g.key for g in report.by_date] == ["2024-05-01", "2024-05-02"]

    def test_empty(self):
        report = build_waste_report([])
        assert report.record_count == 0
        assert report.by_product == []


class TestPurchaseReport:
    def test_totals_and_breakdowns(self):
        invoices = [
            PurchaseInvoice(
                invoice_number="A",
                supplier="Mill Co",
                branch_id=1,
                created_at=DAY_ONE,
                items=[PurchaseItem(product_id=1, quantity=10, unit_price=5.0)],
            ),
            PurchaseInvoice(
                invoice_number="B",
                supplier="Mill Co",
                branch_id=2,
                created_at=DAY_TWO,
                items=[
                    PurchaseItem(product_id=1, quantity=2, unit_price=5.0, vat_percentage=0),
                    PurchaseItem(product_id=2, quantity=1, unit_price=100.0, vat_percentage=0),
                ],
            ),
            PurchaseInvoice(
                invoice_number="C",
                supplier="Mill Co",
                branch_id=1,
                status=DocumentStatus.VOIDED,
                items=[PurchaseItem(product_id=1, quantity=99, unit_price=1.0)],
            ),
        ]
        report = build_purchase_report(invoices, branch_names={1: "Downtown"})

        assert report.invoice_count == 2
        assert report.subtotal == pytest.approx(160.0)
        assert report.vat_amount == pytest.approx(7.5)
        assert report.total_amount == pytest.approx(167.5)
        assert [g.key for g in report.by_branch] == ["2", "1"]
        assert report.by_branch[1].label == "Downtown"
        assert report.by_product[0].key == "2"
        product_one = next(g for g in report.by_product if g.key == "1")
        assert product_one.quantity == pytest.approx(12)
        assert [g.key for g in report.by_date] == ["2024-05-01", "2024-05-02"]


class TestValuationReport:
    def test_by_branch_and_category(self):
        products = {
            1: Product(id=1, name="Flour", sku="S1", category_id=10, product_type_id=1),
            2: Product(id=2, name="Cake", sku="S2", category_id=20, product_type_id=1),
        }
        entries = [
            LedgerEntry(product_id=1, branch_id=1, quantity=15, average_cost=3.0),
            LedgerEntry(product_id=2, branch_id=1, quantity=2, average_cost=10.0),
            LedgerEntry(product_id=1, branch_id=2, quantity=5, average_cost=4.0),
            LedgerEntry(product_id=9, branch_id=2, quantity=1, average_cost=1.0),
        ]
        report = build_valuation_report(
            entries, products, category_names={10: "Bakery"}, branch_names={1: "Downtown"}
        )

        assert report.total_quantity == pytest.approx(23)
        assert report.total_value == pytest.approx(86.0)
        assert report.by_branch[0].key == "1"
        assert report.by_branch[0].amount == pytest.approx(65.0)
        assert report.by_branch[0].label == "Downtown"
        categories = {g.key: g for g in report.by_category}
        assert categories["10"].amount == pytest.approx(65.0)
        assert categories["10"].label == "Bakery"
        assert categories["uncategorized"].amount == pytest.approx(1.0)
