"""Verify Ledger Use Case: check every entry against the fold of its movements."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import VerifyLedgerRequest
from stockledger.application.dto.responses import (
    LedgerDiscrepancyResponse,
    LedgerIntegrityResponse,
)
from stockledger.application.use_cases.base import InventoryUseCase
from stockledger.config import get_logger, get_settings
from stockledger.core.entities.actor import Actor
from stockledger.core.services.access import Permission, authorize, scoped_branch
from stockledger.core.services.stock_ledger import LedgerDiscrepancy

logger = get_logger(__name__)


@dataclass
class VerifyLedgerResult:
    checked_entries: int
    discrepancies: list[LedgerDiscrepancy] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.discrepancies


class VerifyLedgerUseCase(InventoryUseCase):
    """Integrity check used by the CLI and the inventory endpoint."""

    async def execute(
        self,
        request: VerifyLedgerRequest,
        actor: Actor | None = None,
    ) -> VerifyLedgerResult:
        branch_id = request.branch_id
        if actor is not None:
            branch_id = scoped_branch(actor, branch_id)
            authorize(actor, Permission.VIEW_REPORTS, branch_id)
        tolerance = (
            request.tolerance
            if request.tolerance is not None
            else get_settings().ledger.integrity_tolerance
        )

        store = await self._get_inventory_store()
        async with store.session() as session:
            checked = len(await session.list_entries(branch_id=branch_id))
            discrepancies = await self._ledger.verify(session, branch_id, tolerance)

        logger.info(
            "ledger_verified",
            branch_id=branch_id,
            checked_entries=checked,
            discrepancies=len(discrepancies),
        )
        return VerifyLedgerResult(checked_entries=checked, discrepancies=discrepancies)

    def to_response(self, result: VerifyLedgerResult) -> LedgerIntegrityResponse:
        return LedgerIntegrityResponse(
            ok=result.ok,
            checked_entries=result.checked_entries,
            discrepancies=[
                LedgerDiscrepancyResponse.model_validate(d) for d in result.discrepancies
            ],
        )
