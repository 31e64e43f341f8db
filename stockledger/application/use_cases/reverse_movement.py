"""Reverse Movement Use Case: undo one movement with its exact inverse."""

from dataclasses import dataclass

from stockledger.application.dto.requests import ReverseMovementRequest
from stockledger.application.dto.responses import (
    LedgerEntryResponse,
    MovementResponse,
    ReverseMovementResponse,
)
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.ledger import LedgerEntry, Movement
from stockledger.core.exceptions import MovementNotFoundError
from stockledger.core.services.access import Permission

logger = get_logger(__name__)


@dataclass
class ReverseMovementResult:
    original: Movement
    reversal: Movement
    entry: LedgerEntry


class ReverseMovementUseCase(InventoryUseCase):
    """
    Post a reversal movement for a mistaken one.

    Movements are never deleted; the pair (original, reversal) nets to zero
    quantity and the original is linked to its reversal.
    """

    async def execute(
        self,
        request: ReverseMovementRequest,
        actor: Actor | None = None,
    ) -> ReverseMovementResult:
        store = await self._get_inventory_store()
        async with store.transaction() as session:
            original = await session.get_movement(request.movement_id)
            if original is None:
                raise MovementNotFoundError(request.movement_id)
            check_access(actor, Permission.VOID_DOCUMENT, original.branch_id)

            posting = await self._reverse(
                session,
                original,
                resolve_actor_id(actor, request.actor_id),
                notes=request.notes,
            )

        logger.info(
            "movement_reversed",
            movement_id=original.id,
            reversal_id=posting.movement.id,
            product_id=original.product_id,
            branch_id=original.branch_id,
        )
        return ReverseMovementResult(
            original=original,
            reversal=posting.movement,
            entry=posting.entry,
        )

    def to_response(self, result: ReverseMovementResult) -> ReverseMovementResponse:
        return ReverseMovementResponse(
            original=MovementResponse.model_validate(result.original),
            reversal=MovementResponse.model_validate(result.reversal),
            entry=LedgerEntryResponse.model_validate(result.entry),
        )
