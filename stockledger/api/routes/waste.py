"""Waste record endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_inv_store,
    get_record_waste_use_case,
    get_void_waste_use_case,
)
from stockledger.application.dto.requests import RecordWasteRequest, VoidDocumentRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    WasteRecordResponse,
    RecordWasteResponse,
    VoidDocumentResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import RecordWasteUseCase, VoidWasteUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import WasteRecordNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/waste", tags=["waste"])


@router.post(
    "",
    response_model=RecordWasteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_waste(
    request: RecordWasteRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordWasteUseCase = Depends(get_record_waste_use_case),
) -> RecordWasteResponse:
    """Write stock off at its current average cost."""
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)


@router.get("", response_model=list[WasteRecordResponse])
async def list_waste_records(
    branch_id: int | None = Query(default=None),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    include_voided: bool = Query(default=False),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> list[WasteRecordResponse]:
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        records = await session.list_waste_records(
            branch_id=branch_id, start=start, end=end, include_voided=include_voided
        )
    return [WasteRecordResponse.model_validate(r) for r in records]


@router.get(
    "/{record_id}",
    response_model=WasteRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_waste_record(
    record_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> WasteRecordResponse:
    async with store.session() as session:
        record = await session.get_waste_record(record_id)
    if record is None:
        raise WasteRecordNotFoundError(record_id)
    scoped_branch(actor, record.branch_id)
    return WasteRecordResponse.model_validate(record)


@router.post(
    "/{record_id}/void",
    response_model=VoidDocumentResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def void_waste_record(
    record_id: int,
    actor: Actor = Depends(get_actor),
    use_case: VoidWasteUseCase = Depends(get_void_waste_use_case),
) -> VoidDocumentResponse:
    """Void the record and return the stock to the ledger."""
    request = VoidDocumentRequest(document_id=record_id)
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)
