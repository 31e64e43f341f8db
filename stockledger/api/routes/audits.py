"""Inventory audit (stock count) endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_cancel_audit_use_case,
    get_complete_audit_use_case,
    get_create_audit_use_case,
    get_inv_store,
    get_populate_audit_use_case,
    get_record_count_use_case,
    get_update_item_notes_use_case,
)
from stockledger.application.dto.requests import (
    AuditActionRequest,
    AuditCountBody,
    AuditItemNotesBody,
    CreateAuditRequest,
    RecordAuditCountRequest,
    UpdateAuditItemNotesRequest,
)
from stockledger.application.dto.responses import (
    AuditItemResponse,
    AuditListResponse,
    AuditResponse,
    CompleteAuditResponse,
    ErrorResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import (
    CancelInventoryAuditUseCase,
    CompleteInventoryAuditUseCase,
    CreateInventoryAuditUseCase,
    PopulateInventoryAuditUseCase,
    RecordAuditCountUseCase,
    UpdateAuditItemNotesUseCase,
)
from stockledger.application.use_cases.base import audit_response
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.audit import AuditStatus
from stockledger.core.exceptions import AuditNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/audits", tags=["audits"])


@router.post(
    "",
    response_model=AuditResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_audit(
    request: CreateAuditRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreateInventoryAuditUseCase = Depends(get_create_audit_use_case),
) -> AuditResponse:
    """Open a stock count for a branch and date."""
    audit = await use_case.execute(request, actor)
    return use_case.to_response(audit)


@router.get("", response_model=AuditListResponse)
async def list_audits(
    branch_id: int | None = Query(default=None),
    audit_status: AuditStatus | None = Query(default=None, alias="status"),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> AuditListResponse:
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        audits = await session.list_audits(branch_id=branch_id, status=audit_status)
    return AuditListResponse(
        audits=[audit_response(a) for a in audits],
        total=len(audits),
    )


@router.get(
    "/{audit_id}",
    response_model=AuditResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_audit(
    audit_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> AuditResponse:
    async with store.session() as session:
        audit = await session.get_audit(audit_id)
    if audit is None:
        raise AuditNotFoundError(audit_id)
    scoped_branch(actor, audit.branch_id)
    return audit_response(audit)


@router.post(
    "/{audit_id}/populate",
    response_model=AuditResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def populate_audit(
    audit_id: int,
    actor: Actor = Depends(get_actor),
    use_case: PopulateInventoryAuditUseCase = Depends(get_populate_audit_use_case),
) -> AuditResponse:
    """Snapshot the branch's ledger into audit items. Safe to repeat."""
    audit = await use_case.execute(AuditActionRequest(audit_id=audit_id), actor)
    return use_case.to_response(audit)


@router.put(
    "/{audit_id}/items/{item_id}/count",
    response_model=AuditItemResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_count(
    audit_id: int,
    item_id: int,
    body: AuditCountBody,
    actor: Actor = Depends(get_actor),
    use_case: RecordAuditCountUseCase = Depends(get_record_count_use_case),
) -> AuditItemResponse:
    request = RecordAuditCountRequest(
        audit_id=audit_id,
        item_id=item_id,
        actual_quantity=body.actual_quantity,
        notes=body.notes,
    )
    item = await use_case.execute(request, actor)
    return use_case.to_response(item)


@router.put(
    "/{audit_id}/items/{item_id}/notes",
    response_model=AuditItemResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_item_notes(
    audit_id: int,
    item_id: int,
    body: AuditItemNotesBody,
    actor: Actor = Depends(get_actor),
    use_case: UpdateAuditItemNotesUseCase = Depends(get_update_item_notes_use_case),
) -> AuditItemResponse:
    request = UpdateAuditItemNotesRequest(audit_id=audit_id, item_id=item_id, notes=body.notes)
    item = await use_case.execute(request, actor)
    return use_case.to_response(item)


@router.post(
    "/{audit_id}/complete",
    response_model=CompleteAuditResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def complete_audit(
    audit_id: int,
    actor: Actor = Depends(get_actor),
    use_case: CompleteInventoryAuditUseCase = Depends(get_complete_audit_use_case),
) -> CompleteAuditResponse:
    """Close the audit and reconcile every difference into the ledger."""
    result = await run_with_conflict_retry(
        use_case.execute, AuditActionRequest(audit_id=audit_id), actor
    )
    return use_case.to_response(result)


@router.post(
    "/{audit_id}/cancel",
    response_model=AuditResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def cancel_audit(
    audit_id: int,
    actor: Actor = Depends(get_actor),
    use_case: CancelInventoryAuditUseCase = Depends(get_cancel_audit_use_case),
) -> AuditResponse:
    audit = await use_case.execute(AuditActionRequest(audit_id=audit_id), actor)
    return use_case.to_response(audit)
