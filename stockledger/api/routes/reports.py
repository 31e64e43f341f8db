"""Reporting endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from stockledger.api.dependencies import get_actor, get_build_reports_use_case
from stockledger.application.dto.requests import ReportRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    PurchaseReportResponse,
    ValuationReportResponse,
    WasteReportResponse,
)
from stockledger.application.use_cases import BuildReportsUseCase
from stockledger.core.entities.actor import Actor

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    responses={403: {"model": ErrorResponse}},
)


def report_filters(
    branch_id: int | None = Query(default=None),
    start: date | None = Query(default=None, description="First day included"),
    end: date | None = Query(default=None, description="Last day included"),
) -> ReportRequest:
    return ReportRequest(branch_id=branch_id, start=start, end=end)


@router.get("/waste", response_model=WasteReportResponse)
async def waste_report(
    filters: ReportRequest = Depends(report_filters),
    actor: Actor = Depends(get_actor),
    use_case: BuildReportsUseCase = Depends(get_build_reports_use_case),
) -> WasteReportResponse:
    """Written-off stock by product, reason and day."""
    report = await use_case.waste_report(filters, actor)
    return use_case.waste_response(report)


@router.get("/purchases", response_model=PurchaseReportResponse)
async def purchase_report(
    filters: ReportRequest = Depends(report_filters),
    actor: Actor = Depends(get_actor),
    use_case: BuildReportsUseCase = Depends(get_build_reports_use_case),
) -> PurchaseReportResponse:
    """Purchase totals by day, product and branch."""
    report = await use_case.purchase_report(filters, actor)
    return use_case.purchase_response(report)


@router.get("/valuation", response_model=ValuationReportResponse)
async def valuation_report(
    branch_id: int | None = Query(default=None),
    actor: Actor = Depends(get_actor),
    use_case: BuildReportsUseCase = Depends(get_build_reports_use_case),
) -> ValuationReportResponse:
    """Stock on hand valued at average cost."""
    report = await use_case.valuation_report(ReportRequest(branch_id=branch_id), actor)
    return use_case.valuation_response(report)
