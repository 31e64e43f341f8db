"""Adjust Inventory Use Case: manual override of the quantity on hand."""

from dataclasses import dataclass

from stockledger.application.dto.requests import AdjustInventoryRequest
from stockledger.application.dto.responses import (
    AdjustInventoryResponse,
    InventoryAdjustmentResponse,
)
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
from stockledger.core.entities.documents import InventoryAdjustment
from stockledger.core.entities.ledger import MovementKind, SourceType
from stockledger.core.exceptions import InvalidQuantityError, ValidationError
from stockledger.core.services.access import Permission
from stockledger.core.services.stock_ledger import Posting

logger = get_logger(__name__)

MIN_REASON_LENGTH = 3


@dataclass
class AdjustInventoryResult:
    adjustment: InventoryAdjustment
    posting: Posting


class AdjustInventoryUseCase(InventoryUseCase):
    """Set the counted quantity directly, keeping the average cost."""

    async def execute(
        self,
        request: AdjustInventoryRequest,
        actor: Actor | None = None,
    ) -> AdjustInventoryResult:
        check_access(actor, Permission.ADJUST_INVENTORY, request.branch_id)
        actor_id = resolve_actor_id(actor, request.actor_id)
        if request.new_quantity < 0:
            raise InvalidQuantityError(request.new_quantity, field="new_quantity", allow_zero=True)
        reason = request.reason.strip()
        if len(reason) < MIN_REASON_LENGTH:
            raise ValidationError(
                "reason", f"must be at least {MIN_REASON_LENGTH} characters", request.reason
            )

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            await require_branch(session, request.branch_id)
            await require_product(session, request.product_id)

            entry = await self._ledger.get_or_create(
                session, request.product_id, request.branch_id
            )
            adjustment = await session.add_adjustment(
                InventoryAdjustment(
                    branch_id=request.branch_id,
                    product_id=request.product_id,
                    previous_quantity=entry.quantity,
                    new_quantity=request.new_quantity,
                    reason=reason,
                    created_by=actor_id,
                )
            )
            posting = await self._ledger.set_absolute(
                session,
                request.product_id,
                request.branch_id,
                request.new_quantity,
                reason,
                kind=MovementKind.MANUAL_ADJUSTMENT,
                source_type=SourceType.INVENTORY_ADJUSTMENT,
                source_id=adjustment.id,
                actor_id=actor_id,
            )

        logger.info(
            "inventory_adjusted",
            adjustment_id=adjustment.id,
            product_id=adjustment.product_id,
            branch_id=adjustment.branch_id,
            previous_quantity=adjustment.previous_quantity,
            new_quantity=adjustment.new_quantity,
        )
        return AdjustInventoryResult(adjustment=adjustment, posting=posting)

    def to_response(self, result: AdjustInventoryResult) -> AdjustInventoryResponse:
        return AdjustInventoryResponse(
            adjustment=InventoryAdjustmentResponse.model_validate(result.adjustment),
            posting=posting_response(result.posting),
        )
