"""Record Waste Use Case: write stock off at its current average cost."""

from dataclasses import dataclass

from stockledger.application.dto.requests import RecordWasteRequest
from stockledger.application.dto.responses import RecordWasteResponse, WasteRecordResponse
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    posting_response,
    require_branch,
    require_product,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.documents import WasteRecord
from stockledger.core.entities.ledger import MovementKind, SourceType
from stockledger.core.exceptions import InsufficientStockError, InvalidQuantityError
from stockledger.core.services.access import Permission
from stockledger.core.services.stock_ledger import QUANTITY_EPSILON, Posting

logger = get_logger(__name__)


@dataclass
class RecordWasteResult:
    record: WasteRecord
    posting: Posting


class RecordWasteUseCase(InventoryUseCase):
    """Deduct lost stock and charge it at the average cost before the deduction."""

    async def execute(
        self,
        request: RecordWasteRequest,
        actor: Actor | None = None,
    ) -> RecordWasteResult:
        check_access(actor, Permission.RECORD_MOVEMENT, request.branch_id)
        actor_id = resolve_actor_id(actor, request.actor_id)
        if request.quantity <= 0:
            raise InvalidQuantityError(request.quantity)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            await require_branch(session, request.branch_id)
            await require_product(session, request.product_id)

            entry = await session.get_entry(request.product_id, request.branch_id)
            available = entry.quantity if entry is not None else 0.0
            if entry is None or request.quantity > available + QUANTITY_EPSILON:
                raise InsufficientStockError(
                    product_id=request.product_id,
                    branch_id=request.branch_id,
                    requested=request.quantity,
                    available=available,
                )

            record = await session.add_waste_record(
                WasteRecord(
                    branch_id=request.branch_id,
                    product_id=request.product_id,
                    quantity=request.quantity,
                    reason=request.reason,
                    cost=request.quantity * entry.average_cost,
                    notes=request.notes,
                    recorded_by=actor_id,
                )
            )
            posting = await self._ledger.apply_negative_movement(
                session,
                record.product_id,
                record.branch_id,
                record.quantity,
                kind=MovementKind.WASTE_DEDUCTION,
                source_type=SourceType.WASTE_RECORD,
                source_id=record.id,
                notes=record.reason.value,
                actor_id=actor_id,
            )

        logger.info(
            "waste_recorded",
            record_id=record.id,
            product_id=record.product_id,
            quantity=record.quantity,
            reason=record.reason.value,
            cost=round(record.cost, 4),
        )
        return RecordWasteResult(record=record, posting=posting)

    def to_response(self, result: RecordWasteResult) -> RecordWasteResponse:
        return RecordWasteResponse(
            record=WasteRecordResponse.model_validate(result.record),
            posting=posting_response(result.posting),
        )
