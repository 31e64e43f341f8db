"""Build Reports Use Case: waste, purchase and valuation projections."""

from collections.abc import Iterable

from stockledger.application.dto.requests import ReportRequest
from stockledger.application.dto.responses import (
    PurchaseReportResponse,
    ValuationReportResponse,
    WasteReportResponse,
)
from stockledger.application.use_cases.base import InventoryUseCase
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.catalog import Product
from stockledger.core.exceptions import ValidationError
from stockledger.core.interfaces.catalog_store import ICatalogStore
from stockledger.core.interfaces.inventory_store import IInventorySession, IInventoryStore
from stockledger.core.services.access import Permission, authorize, scoped_branch
from stockledger.core.services.reporting import (
    PurchaseReport,
    ValuationReport,
    WasteReport,
    build_purchase_report,
    build_valuation_report,
    build_waste_report,
)
from stockledger.core.services.stock_ledger import StockLedger

logger = get_logger(__name__)


async def _load_products(
    session: IInventorySession, product_ids: Iterable[int]
) -> dict[int, Product]:
    products = {}
    for product_id in set(product_ids):
        product = await session.get_product(product_id)
        if product is not None:
            products[product_id] = product
    return products


class BuildReportsUseCase(InventoryUseCase):
    """Read-only reports; non-admin actors only ever see their own branch."""

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        catalog_store: ICatalogStore | None = None,
        ledger: StockLedger | None = None,
    ):
        super().__init__(inventory_store, ledger)
        self._catalog_store = catalog_store

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from stockledger.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    @staticmethod
    def _scope(request: ReportRequest, actor: Actor | None) -> int | None:
        if request.start and request.end and request.start > request.end:
            raise ValidationError("start", "start date is after end date", request.start)
        if actor is None:
            return request.branch_id
        branch_id = scoped_branch(actor, request.branch_id)
        authorize(actor, Permission.VIEW_REPORTS, branch_id)
        return branch_id

    async def waste_report(
        self, request: ReportRequest, actor: Actor | None = None
    ) -> WasteReport:
        branch_id = self._scope(request, actor)
        store = await self._get_inventory_store()
        async with store.session() as session:
            records = await session.list_waste_records(
                branch_id=branch_id, start=request.start, end=request.end
            )
            products = await _load_products(session, (r.product_id for r in records))

        report = build_waste_report(records, {pid: p.name for pid, p in products.items()})
        logger.info("waste_report_built", branch_id=branch_id, records=report.record_count)
        return report

    async def purchase_report(
        self, request: ReportRequest, actor: Actor | None = None
    ) -> PurchaseReport:
        branch_id = self._scope(request, actor)
        store = await self._get_inventory_store()
        async with store.session() as session:
            invoices = await session.list_purchase_invoices(
                branch_id=branch_id, start=request.start, end=request.end
            )
            products = await _load_products(
                session, (i.product_id for inv in invoices for i in inv.items)
            )

        branches = await (await self._get_catalog_store()).list_branches()
        report = build_purchase_report(
            invoices,
            product_names={pid: p.name for pid, p in products.items()},
            branch_names={b.id: b.name for b in branches},
        )
        logger.info("purchase_report_built", branch_id=branch_id, invoices=report.invoice_count)
        return report

    async def valuation_report(
        self, request: ReportRequest, actor: Actor | None = None
    ) -> ValuationReport:
        branch_id = self._scope(request, actor)
        store = await self._get_inventory_store()
        async with store.session() as session:
            entries = await session.list_entries(branch_id=branch_id)
            products = await _load_products(session, (e.product_id for e in entries))

        catalog = await self._get_catalog_store()
        categories = await catalog.list_categories()
        branches = await catalog.list_branches()
        report = build_valuation_report(
            entries,
            products,
            category_names={c.id: c.name for c in categories},
            branch_names={b.id: b.name for b in branches},
        )
        logger.info(
            "valuation_report_built",
            branch_id=branch_id,
            total_value=round(report.total_value, 2),
        )
        return report

    @staticmethod
    def waste_response(report: WasteReport) -> WasteReportResponse:
        return WasteReportResponse.model_validate(report)

    @staticmethod
    def purchase_response(report: PurchaseReport) -> PurchaseReportResponse:
        return PurchaseReportResponse.model_validate(report)

    @staticmethod
    def valuation_response(report: ValuationReport) -> ValuationReportResponse:
        return ValuationReportResponse.model_validate(report)
