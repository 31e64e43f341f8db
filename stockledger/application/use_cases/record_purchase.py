"""Record Purchase Use Case: receive a supplier invoice into a branch."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import PurchaseItemRequest, RecordPurchaseRequest
from stockledger.application.dto.responses import (
    PurchaseInvoiceResponse,
    RecordPurchaseResponse,
)
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    posting_response,
    require_branch,
    require_product,
    resolve_actor_id,
)
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.documents import PurchaseInvoice, PurchaseItem
from stockledger.core.entities.ledger import MovementKind, SourceType
from stockledger.core.exceptions import InvalidQuantityError, ValidationError
from stockledger.core.services.access import Permission
from stockledger.core.services.numbering import generate_invoice_number
from stockledger.core.services.stock_ledger import Posting

logger = get_logger(__name__)


@dataclass
class RecordPurchaseResult:
    """Result of recording a purchase."""

    invoice: PurchaseInvoice
    postings: list[Posting] = field(default_factory=list)


class RecordPurchaseUseCase(InventoryUseCase):
    """Receive every invoice line into stock at its unit price, all or nothing."""

    async def execute(
        self,
        request: RecordPurchaseRequest,
        actor: Actor | None = None,
    ) -> RecordPurchaseResult:
        """Execute record purchase use case."""
        check_access(actor, Permission.RECORD_MOVEMENT, request.branch_id)
        actor_id = resolve_actor_id(actor, request.actor_id)
        self._validate(request)

        logger.info(
            "purchase_started",
            branch_id=request.branch_id,
            supplier=request.supplier,
            items=len(request.items),
        )

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            await require_branch(session, request.branch_id)
            for line in request.items:
                await require_product(session, line.product_id)

            invoice = await session.add_purchase_invoice(
                PurchaseInvoice(
                    invoice_number=request.invoice_number or generate_invoice_number(),
                    supplier=request.supplier,
                    branch_id=request.branch_id,
                    items=[
                        PurchaseItem(
                            product_id=line.product_id,
                            quantity=line.quantity,
                            unit_price=line.unit_price,
                            vat_percentage=self._vat_percentage(line),
                        )
                        for line in request.items
                    ],
                    created_by=actor_id,
                )
            )

            postings = []
            for item in invoice.items:
                postings.append(
                    await self._ledger.apply_positive_movement(
                        session,
                        item.product_id,
                        invoice.branch_id,
                        item.quantity,
                        item.unit_price,
                        kind=MovementKind.PURCHASE_RECEIPT,
                        source_type=SourceType.PURCHASE_INVOICE,
                        source_id=invoice.id,
                        actor_id=actor_id,
                    )
                )

        logger.info(
            "purchase_recorded",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            total_amount=round(invoice.total_amount, 2),
        )
        return RecordPurchaseResult(invoice=invoice, postings=postings)

    @staticmethod
    def _vat_percentage(line: PurchaseItemRequest) -> float:
        if line.vat_percentage is not None:
            return line.vat_percentage
        return round(get_settings().ledger.default_vat_rate * 100, 4)

    @staticmethod
    def _validate(request: RecordPurchaseRequest) -> None:
        if not request.items:
            raise ValidationError("items", "a purchase needs at least one item")
        for index, line in enumerate(request.items):
            if line.quantity <= 0:
                raise InvalidQuantityError(line.quantity, field=f"items[{index}].quantity")
            if line.unit_price < 0:
                raise ValidationError(
                    f"items[{index}].unit_price", "must be >= 0", line.unit_price
                )
            if line.vat_percentage is not None and not 0 <= line.vat_percentage <= 100:
                raise ValidationError(
                    f"items[{index}].vat_percentage",
                    "must be between 0 and 100",
                    line.vat_percentage,
                )

    def to_response(self, result: RecordPurchaseResult) -> RecordPurchaseResponse:
        """Convert result to API response."""
        return RecordPurchaseResponse(
            invoice=PurchaseInvoiceResponse.model_validate(result.invoice),
            postings=[posting_response(p) for p in result.postings],
        )
