"""Single-movement endpoints."""

from fastapi import APIRouter, Depends

from stockledger.api.dependencies import get_actor, get_inv_store, get_reverse_movement_use_case
from stockledger.application.dto.requests import ReverseMovementBody, ReverseMovementRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    MovementResponse,
    ReverseMovementResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import ReverseMovementUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import MovementNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/movements", tags=["movements"])


@router.get(
    "/{movement_id}",
    response_model=MovementResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_movement(
    movement_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> MovementResponse:
    async with store.session() as session:
        movement = await session.get_movement(movement_id)
    if movement is None:
        raise MovementNotFoundError(movement_id)
    scoped_branch(actor, movement.branch_id)
    return MovementResponse.model_validate(movement)


@router.post(
    "/{movement_id}/reverse",
    response_model=ReverseMovementResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def reverse_movement(
    movement_id: int,
    body: ReverseMovementBody | None = None,
    actor: Actor = Depends(get_actor),
    use_case: ReverseMovementUseCase = Depends(get_reverse_movement_use_case),
) -> ReverseMovementResponse:
    """Post the exact inverse of a movement."""
    request = ReverseMovementRequest(
        movement_id=movement_id, notes=body.notes if body else None
    )
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)
