"""Create Inventory Audit Use Case."""

from stockledger.application.dto.requests import CreateAuditRequest
from stockledger.application.dto.responses import AuditResponse
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    audit_response,
    check_access,
    require_branch,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.audit import InventoryAudit
from stockledger.core.exceptions import DuplicateAuditError
from stockledger.core.services.access import Permission

logger = get_logger(__name__)


class CreateInventoryAuditUseCase(InventoryUseCase):
    """Open a draft stock count for a branch; one live audit per branch and day."""

    async def execute(
        self,
        request: CreateAuditRequest,
        actor: Actor | None = None,
    ) -> InventoryAudit:
        check_access(actor, Permission.COUNT_AUDIT, request.branch_id)
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            await require_branch(session, request.branch_id)

            existing = await session.find_open_audit(request.branch_id, request.audit_date)
            if existing is not None:
                raise DuplicateAuditError(
                    request.branch_id, request.audit_date.isoformat(), existing.id
                )

            audit = await session.add_audit(
                InventoryAudit(
                    branch_id=request.branch_id,
                    audit_date=request.audit_date,
                    notes=request.notes,
                    created_by=actor_id,
                    updated_by=actor_id,
                )
            )

        logger.info(
            "audit_created",
            audit_id=audit.id,
            branch_id=audit.branch_id,
            audit_date=audit.audit_date.isoformat(),
        )
        return audit

    def to_response(self, audit: InventoryAudit) -> AuditResponse:
        return audit_response(audit)
