"""Inventory ledger endpoints: stock on hand, movement history, adjustments."""

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import (
    get_actor,
    get_adjust_inventory_use_case,
    get_inv_store,
    get_verify_ledger_use_case,
)
from stockledger.application.dto.requests import AdjustInventoryRequest, VerifyLedgerRequest
from stockledger.application.dto.responses import (
    AdjustInventoryResponse,
    ErrorResponse,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    LedgerIntegrityResponse,
    MovementListResponse,
    MovementResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import AdjustInventoryUseCase, VerifyLedgerUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import LedgerEntryNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


@router.get("/entries", response_model=LedgerEntryListResponse)
async def list_entries(
    branch_id: int | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> LedgerEntryListResponse:
    """Quantity on hand and average cost per product and branch."""
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        entries = await session.list_entries(branch_id=branch_id)

    page = entries[offset : offset + limit]
    return LedgerEntryListResponse(
        entries=[LedgerEntryResponse.model_validate(e) for e in page],
        total_value=sum(e.total_value for e in entries),
        total=len(entries),
        limit=limit,
        offset=offset,
        has_more=offset + limit < len(entries),
    )


@router.get(
    "/entries/{branch_id}/{product_id}",
    response_model=LedgerEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_entry(
    branch_id: int,
    product_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> LedgerEntryResponse:
    scoped_branch(actor, branch_id)
    async with store.session() as session:
        entry = await session.get_entry(product_id, branch_id)
    if entry is None:
        raise LedgerEntryNotFoundError(f"{product_id}@{branch_id}")
    return LedgerEntryResponse.model_validate(entry)


@router.get(
    "/entries/{branch_id}/{product_id}/movements",
    response_model=MovementListResponse,
)
async def list_entry_movements(
    branch_id: int,
    product_id: int,
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> MovementListResponse:
    """Movement history of one product at one branch, oldest first."""
    scoped_branch(actor, branch_id)
    async with store.session() as session:
        movements = await session.list_movements(
            product_id=product_id, branch_id=branch_id, limit=limit, offset=offset
        )
    return MovementListResponse(
        movements=[MovementResponse.model_validate(m) for m in movements],
        total=len(movements),
    )


@router.get("/movements", response_model=MovementListResponse)
async def list_movements(
    branch_id: int | None = Query(default=None),
    product_id: int | None = Query(default=None),
    limit: int | None = Query(default=500, ge=1),
    offset: int = Query(default=0, ge=0),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> MovementListResponse:
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        movements = await session.list_movements(
            product_id=product_id, branch_id=branch_id, limit=limit, offset=offset
        )
    return MovementListResponse(
        movements=[MovementResponse.model_validate(m) for m in movements],
        total=len(movements),
    )


@router.post(
    "/adjust",
    response_model=AdjustInventoryResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def adjust_inventory(
    request: AdjustInventoryRequest,
    actor: Actor = Depends(get_actor),
    use_case: AdjustInventoryUseCase = Depends(get_adjust_inventory_use_case),
) -> AdjustInventoryResponse:
    """Set the quantity on hand to an absolute value."""
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)


@router.get("/integrity", response_model=LedgerIntegrityResponse)
async def verify_integrity(
    branch_id: int | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    use_case: VerifyLedgerUseCase = Depends(get_verify_ledger_use_case),
) -> LedgerIntegrityResponse:
    """Compare every ledger entry with the fold of its movements."""
    result = await use_case.execute(VerifyLedgerRequest(branch_id=branch_id), actor)
    return use_case.to_response(result)
