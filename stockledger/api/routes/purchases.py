"""Purchase invoice endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_inv_store,
    get_record_purchase_use_case,
    get_void_purchase_use_case,
)
from stockledger.application.dto.requests import RecordPurchaseRequest, VoidDocumentRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    PurchaseInvoiceResponse,
    RecordPurchaseResponse,
    VoidDocumentResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import RecordPurchaseUseCase, VoidPurchaseUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import PurchaseInvoiceNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


@router.post(
    "",
    response_model=RecordPurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_purchase(
    request: RecordPurchaseRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordPurchaseUseCase = Depends(get_record_purchase_use_case),
) -> RecordPurchaseResponse:
    """Receive a supplier invoice; every line is posted to the ledger."""
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)


@router.get("", response_model=list[PurchaseInvoiceResponse])
async def list_purchases(
    branch_id: int | None = Query(default=None),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    include_voided: bool = Query(default=False),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> list[PurchaseInvoiceResponse]:
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        invoices = await session.list_purchase_invoices(
            branch_id=branch_id, start=start, end=end, include_voided=include_voided
        )
    return [PurchaseInvoiceResponse.model_validate(i) for i in invoices]


@router.get(
    "/{invoice_id}",
    response_model=PurchaseInvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase(
    invoice_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> PurchaseInvoiceResponse:
    async with store.session() as session:
        invoice = await session.get_purchase_invoice(invoice_id)
    if invoice is None:
        raise PurchaseInvoiceNotFoundError(invoice_id)
    scoped_branch(actor, invoice.branch_id)
    return PurchaseInvoiceResponse.model_validate(invoice)


@router.post(
    "/{invoice_id}/void",
    response_model=VoidDocumentResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def void_purchase(
    invoice_id: int,
    actor: Actor = Depends(get_actor),
    use_case: VoidPurchaseUseCase = Depends(get_void_purchase_use_case),
) -> VoidDocumentResponse:
    """Void the invoice and reverse every line it posted."""
    request = VoidDocumentRequest(document_id=invoice_id)
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)
