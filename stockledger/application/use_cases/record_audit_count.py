"""Record Audit Count Use Cases: enter counted quantities and item notes."""

from datetime import UTC, datetime

from stockledger.application.dto.requests import (
    RecordAuditCountRequest,
    UpdateAuditItemNotesRequest,
)
from stockledger.application.dto.responses import AuditItemResponse
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    require_audit,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.audit import AuditStatus, InventoryAudit, InventoryAuditItem
from stockledger.core.exceptions import AuditItemNotFoundError, InvalidQuantityError
from stockledger.core.interfaces.inventory_store import IInventorySession
from stockledger.core.services.access import Permission

logger = get_logger(__name__)


def _find_item(audit: InventoryAudit, item_id: int) -> InventoryAuditItem:
    for item in audit.items:
        if item.id == item_id:
            return item
    raise AuditItemNotFoundError(item_id)


async def _touch(
    session: IInventorySession, audit: InventoryAudit, actor_id: str | None
) -> None:
    """Stamp the editor; the first edit of a draft starts the count."""
    if audit.status is AuditStatus.DRAFT:
        audit.transition_to(AuditStatus.IN_PROGRESS, actor_id)
    else:
        audit.updated_by = actor_id
        audit.updated_at = datetime.now(UTC)
    await session.update_audit(audit)


class RecordAuditCountUseCase(InventoryUseCase):
    """Store the counted quantity of one item. Nothing touches the ledger yet."""

    async def execute(
        self,
        request: RecordAuditCountRequest,
        actor: Actor | None = None,
    ) -> InventoryAuditItem:
        actor_id = resolve_actor_id(actor, request.actor_id)
        if request.actual_quantity < 0:
            raise InvalidQuantityError(
                request.actual_quantity, field="actual_quantity", allow_zero=True
            )

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            audit = await require_audit(session, request.audit_id)
            check_access(actor, Permission.COUNT_AUDIT, audit.branch_id)
            audit.ensure_open("count")

            item = _find_item(audit, request.item_id)
            item.record_count(request.actual_quantity)
            if request.notes is not None:
                item.notes = request.notes
            await session.update_audit_item(item)
            await _touch(session, audit, actor_id)

        logger.info(
            "audit_count_recorded",
            audit_id=audit.id,
            item_id=item.id,
            product_id=item.product_id,
            difference=item.difference,
        )
        return item

    def to_response(self, item: InventoryAuditItem) -> AuditItemResponse:
        return AuditItemResponse.model_validate(item)


class UpdateAuditItemNotesUseCase(InventoryUseCase):
    """Edit an item's notes without touching its count."""

    async def execute(
        self,
        request: UpdateAuditItemNotesRequest,
        actor: Actor | None = None,
    ) -> InventoryAuditItem:
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            audit = await require_audit(session, request.audit_id)
            check_access(actor, Permission.COUNT_AUDIT, audit.branch_id)
            audit.ensure_open("update_notes")

            item = _find_item(audit, request.item_id)
            item.notes = request.notes
            await session.update_audit_item(item)
            await _touch(session, audit, actor_id)

        return item

    def to_response(self, item: InventoryAuditItem) -> AuditItemResponse:
        return AuditItemResponse.model_validate(item)
