"""Populate Inventory Audit Use Case: snapshot the ledger into count sheets."""

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
from stockledger.core.entities.audit import AuditStatus, InventoryAudit, InventoryAuditItem
from stockledger.core.services.access import Permission

logger = get_logger(__name__)


class PopulateInventoryAuditUseCase(InventoryUseCase):
    """
    Snapshot every ledger entry of the branch into audit items.

    Runs once: an audit that already has items keeps them untouched, so
    counts entered so far are never reset. A draft audit moves to
    in_progress.
    """

    async def execute(
        self,
        request: AuditActionRequest,
        actor: Actor | None = None,
    ) -> InventoryAudit:
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            audit = await require_audit(session, request.audit_id)
            check_access(actor, Permission.COUNT_AUDIT, audit.branch_id)
            audit.ensure_open("populate")

            if audit.items:
                logger.debug("audit_already_populated", audit_id=audit.id, items=audit.item_count)
            else:
                entries = await session.list_entries(branch_id=audit.branch_id)
                audit.items = await session.add_audit_items(
                    audit.id,
                    [
                        InventoryAuditItem(
                            product_id=entry.product_id,
                            expected_quantity=entry.quantity,
                        )
                        for entry in entries
                    ],
                )
                logger.info("audit_populated", audit_id=audit.id, items=audit.item_count)

            if audit.status is AuditStatus.DRAFT:
                audit.transition_to(AuditStatus.IN_PROGRESS, actor_id)
                await session.update_audit(audit)

        return audit

    def to_response(self, audit: InventoryAudit) -> AuditResponse:
        return audit_response(audit)
