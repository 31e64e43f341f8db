"""
Read-side projections for dashboards and reports.

Pure aggregation over records already loaded from the store. Voided
documents never count.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from stockledger.core.entities.catalog import Product
from stockledger.core.entities.documents import DocumentStatus, PurchaseInvoice, WasteRecord
from stockledger.core.entities.ledger import LedgerEntry


@dataclass
class GroupTotal:
    """One row of a grouped report."""

    key: str
    label: str
    quantity: float = 0.0
    amount: float = 0.0
    count: int = 0


@dataclass
class WasteReport:
    total_quantity: float = 0.0
    total_cost: float = 0.0
    record_count: int = 0
    by_product: list[GroupTotal] = field(default_factory=list)
    by_reason: list[GroupTotal] = field(default_factory=list)
    by_date: list[GroupTotal] = field(default_factory=list)


@dataclass
class PurchaseReport:
    invoice_count: int = 0
    subtotal: float = 0.0
    vat_amount: float = 0.0
    total_amount: float = 0.0
    by_date: list[GroupTotal] = field(default_factory=list)
    by_product: list[GroupTotal] = field(default_factory=list)
    by_branch: list[GroupTotal] = field(default_factory=list)


@dataclass
class ValuationReport:
    total_quantity: float = 0.0
    total_value: float = 0.0
    by_branch: list[GroupTotal] = field(default_factory=list)
    by_category: list[GroupTotal] = field(default_factory=list)


class _Grouper:
    """Accumulates quantity/amount/count per key."""

    def __init__(self, labels: dict[str, str] | None = None):
        self._labels = labels or {}
        self._groups: dict[str, GroupTotal] = {}

    def add(self, key: str, quantity: float, amount: float, label: str | None = None) -> None:
        group = self._groups.get(key)
        if group is None:
            group = GroupTotal(key=key, label=label or self._labels.get(key, key))
            self._groups[key] = group
        group.quantity += quantity
        group.amount += amount
        group.count += 1

    def by_amount(self) -> list[GroupTotal]:
        return sorted(self._groups.values(), key=lambda g: (-g.amount, g.key))

    def by_key(self) -> list[GroupTotal]:
        return sorted(self._groups.values(), key=lambda g: g.key)


def build_waste_report(
    records: Iterable[WasteRecord],
    product_names: dict[int, str] | None = None,
) -> WasteReport:
    """Totals and breakdowns of written-off stock."""
    product_names = product_names or {}
    report = WasteReport()
    by_product = _Grouper()
    by_reason = _Grouper()
    by_date = _Grouper()

    for record in records:
        if record.status is not DocumentStatus.ACTIVE:
            continue
        report.record_count += 1
        report.total_quantity += record.quantity
        report.total_cost += record.cost
        by_product.add(
            str(record.product_id),
            record.quantity,
            record.cost,
            label=product_names.get(record.product_id),
        )
        by_reason.add(record.reason.value, record.quantity, record.cost)
        by_date.add(record.recorded_at.date().isoformat(), record.quantity, record.cost)

    report.by_product = by_product.by_amount()
    report.by_reason = by_reason.by_amount()
    report.by_date = by_date.by_key()
    return report


def build_purchase_report(
    invoices: Iterable[PurchaseInvoice],
    product_names: dict[int, str] | None = None,
    branch_names: dict[int, str] | None = None,
) -> PurchaseReport:
    """Purchase totals, by day, product and branch."""
    product_names = product_names or {}
    branch_names = branch_names or {}
    report = PurchaseReport()
    by_date = _Grouper()
    by_product = _Grouper()
    by_branch = _Grouper()

    for invoice in invoices:
        if invoice.status is not DocumentStatus.ACTIVE:
            continue
        report.invoice_count += 1
        report.subtotal += invoice.subtotal
        report.vat_amount += invoice.vat_amount
        report.total_amount += invoice.total_amount

        quantity = sum(i.quantity for i in invoice.items)
        by_date.add(invoice.created_at.date().isoformat(), quantity, invoice.total_amount)
        by_branch.add(
            str(invoice.branch_id),
            quantity,
            invoice.total_amount,
            label=branch_names.get(invoice.branch_id),
        )
        for item in invoice.items:
            by_product.add(
                str(item.product_id),
                item.quantity,
                item.total_price,
                label=product_names.get(item.product_id),
            )

    report.by_date = by_date.by_key()
    report.by_product = by_product.by_amount()
    report.by_branch = by_branch.by_amount()
    return report


def build_valuation_report(
    entries: Iterable[LedgerEntry],
    products: dict[int, Product],
    category_names: dict[int, str] | None = None,
    branch_names: dict[int, str] | None = None,
) -> ValuationReport:
    """Stock on hand valued at average cost, per branch and per category."""
    category_names = category_names or {}
    branch_names = branch_names or {}
    report = ValuationReport()
    by_branch = _Grouper()
    by_category = _Grouper()

    for entry in entries:
        value = entry.total_value
        report.total_quantity += entry.quantity
        report.total_value += value
        by_branch.add(
            str(entry.branch_id),
            entry.quantity,
            value,
            label=branch_names.get(entry.branch_id),
        )
        product = products.get(entry.product_id)
        if product is None:
            by_category.add("uncategorized", entry.quantity, value)
        else:
            by_category.add(
                str(product.category_id),
                entry.quantity,
                value,
                label=category_names.get(product.category_id),
            )

    report.by_branch = by_branch.by_amount()
    report.by_category = by_category.by_amount()
    return report
