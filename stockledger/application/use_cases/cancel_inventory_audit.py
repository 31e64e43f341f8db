"""Cancel Inventory Audit Use Case."""

from stockledger.application.dto.requests import AuditActionRequest
from stockledger.application.dto.responses import AuditResponse
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    audit_response,
    check_access,
    require_audit,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.audit import AuditStatus, InventoryAudit
from stockledger.core.services.access import Permission

logger = get_logger(__name__)


class CancelInventoryAuditUseCase(InventoryUseCase):
    """Abandon an open audit. The ledger is untouched and items are kept."""

    async def execute(
        self,
        request: AuditActionRequest,
        actor: Actor | None = None,
    ) -> InventoryAudit:
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            audit = await require_audit(session, request.audit_id)
            check_access(actor, Permission.CLOSE_AUDIT, audit.branch_id)
            audit.transition_to(AuditStatus.CANCELLED, actor_id)
            await session.update_audit(audit)

        logger.info("audit_cancelled", audit_id=audit.id, branch_id=audit.branch_id)
        return audit

    def to_response(self, audit: InventoryAudit) -> AuditResponse:
        return audit_response(audit)
