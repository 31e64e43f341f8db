"""Shared plumbing for the ledger use cases."""

from stockledger.application.dto.responses import (
    AuditResponse,
    LedgerEntryResponse,
    MovementResponse,
    PostingResponse,
)
from stockledger.application.services import get_stock_ledger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.audit import InventoryAudit
from stockledger.core.entities.catalog import Branch, Product
from stockledger.core.entities.ledger import Movement, MovementKind
from stockledger.core.exceptions import (
    AuditNotFoundError,
    BranchNotFoundError,
    MovementAlreadyReversedError,
    ProductNotFoundError,
    ValidationError,
)
from stockledger.core.interfaces.inventory_store import IInventorySession, IInventoryStore
from stockledger.core.services.access import Permission, authorize
from stockledger.core.services.stock_ledger import Posting, StockLedger


class InventoryUseCase:
    """
    Base for use cases that read or mutate the ledger.

    The store is resolved lazily so tests can inject a fake and the API can
    rely on the process-wide SQLite store.
    """

    def __init__(
        self,
        inventory_store: IInventoryStore | None = None,
        ledger: StockLedger | None = None,
    ):
        self._inventory_store = inventory_store
        self._ledger = ledger or get_stock_ledger()

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockledger.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store

    async def _reverse(
        self,
        session: IInventorySession,
        original: Movement,
        actor_id: str | None,
        notes: str | None = None,
    ) -> Posting:
        """
        Post the exact inverse of ``original`` and link the two.

        The reversal keeps the original unit cost. Undoing a receipt whose
        stock was already consumed fails with InsufficientStockError.
        """
        if original.kind is MovementKind.REVERSAL or original.reversal_of is not None:
            raise ValidationError(
                "movement_id", "a reversal cannot itself be reversed", original.id
            )
        if original.reversed_by is not None:
            raise MovementAlreadyReversedError(original.id, original.reversed_by)

        quantity = abs(original.quantity_delta)
        common = dict(
            kind=MovementKind.REVERSAL,
            source_type=original.source_type,
            source_id=original.source_id,
            reversal_of=original.id,
            notes=notes or f"reversal of movement {original.id}",
            actor_id=actor_id,
        )
        if original.is_inbound:
            posting = await self._ledger.apply_negative_movement(
                session,
                original.product_id,
                original.branch_id,
                quantity,
                unit_cost=original.unit_cost,
                **common,
            )
        else:
            posting = await self._ledger.apply_positive_movement(
                session,
                original.product_id,
                original.branch_id,
                quantity,
                original.unit_cost,
                **common,
            )

        await session.mark_movement_reversed(original.id, posting.movement.id)
        original.reversed_by = posting.movement.id
        return posting


def check_access(actor: Actor | None, permission: Permission, branch_id: int | None) -> None:
    """Authorize when an actor is supplied; library callers without one are trusted."""
    if actor is not None:
        authorize(actor, permission, branch_id)


def resolve_actor_id(actor: Actor | None, requested: str | None) -> str | None:
    return actor.actor_id if actor is not None else requested


async def require_branch(session: IInventorySession, branch_id: int) -> Branch:
    branch = await session.get_branch(branch_id)
    if branch is None:
        raise BranchNotFoundError(branch_id)
    return branch


async def require_product(session: IInventorySession, product_id: int) -> Product:
    product = await session.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product


def posting_response(posting: Posting) -> PostingResponse:
    return PostingResponse(
        entry=LedgerEntryResponse.model_validate(posting.entry),
        movement=(
            MovementResponse.model_validate(posting.movement)
            if posting.movement is not None
            else None
        ),
    )


async def require_audit(session: IInventorySession, audit_id: int) -> InventoryAudit:
    audit = await session.get_audit(audit_id)
    if audit is None:
        raise AuditNotFoundError(audit_id)
    return audit


def audit_response(audit: InventoryAudit) -> AuditResponse:
    return AuditResponse.model_validate(audit)
