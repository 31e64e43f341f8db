"""Complete Inventory Audit Use Case: reconcile counted stock into the ledger."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import AuditActionRequest
from stockledger.application.dto.responses import CompleteAuditResponse, MovementResponse
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
from stockledger.core.entities.ledger import Movement, MovementKind, SourceType
from stockledger.core.exceptions import IncompleteAuditError, InvalidAuditTransitionError
from stockledger.core.services.access import Permission

logger = get_logger(__name__)

RECONCILIATION_REASON = "audit reconciliation"


@dataclass
class CompleteAuditResult:
    audit: InventoryAudit
    adjustments: list[Movement] = field(default_factory=list)


class CompleteInventoryAuditUseCase(InventoryUseCase):
    """
    Close an in-progress audit.

    Every item must be counted. Each item with a non-zero difference posts
    that difference (counted minus snapshot) as one signed adjustment, so
    stock received or consumed after the snapshot stays on the ledger.
    """

    async def execute(
        self,
        request: AuditActionRequest,
        actor: Actor | None = None,
    ) -> CompleteAuditResult:
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            audit = await require_audit(session, request.audit_id)
            check_access(actor, Permission.CLOSE_AUDIT, audit.branch_id)
            if not audit.can_transition_to(AuditStatus.COMPLETED):
                raise InvalidAuditTransitionError(
                    audit.id, audit.status.value, AuditStatus.COMPLETED.value
                )

            uncounted = audit.uncounted_items
            if uncounted:
                raise IncompleteAuditError(audit.id, [i.product_id for i in uncounted])

            adjustments = []
            for item in audit.items:
                if not item.difference:
                    continue
                posting = await self._ledger.apply_adjustment(
                    session,
                    item.product_id,
                    audit.branch_id,
                    item.difference,
                    RECONCILIATION_REASON,
                    kind=MovementKind.AUDIT_ADJUSTMENT,
                    source_type=SourceType.INVENTORY_AUDIT,
                    source_id=audit.id,
                    actor_id=actor_id,
                )
                adjustments.append(posting.movement)

            audit.transition_to(AuditStatus.COMPLETED, actor_id)
            await session.update_audit(audit)

        logger.info(
            "audit_completed",
            audit_id=audit.id,
            branch_id=audit.branch_id,
            items=audit.item_count,
            adjustments=len(adjustments),
        )
        return CompleteAuditResult(audit=audit, adjustments=adjustments)

    def to_response(self, result: CompleteAuditResult) -> CompleteAuditResponse:
        return CompleteAuditResponse(
            audit=audit_response(result.audit),
            adjustments=[MovementResponse.model_validate(m) for m in result.adjustments],
        )
