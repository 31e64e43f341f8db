"""
Stock ledger service.

Owns the mutation rules of the per-(product, branch) ledger. Every method
runs inside the caller's open session, and every mutation writes its
movement record next to the updated entry, so the entry always equals the
fold of its movements.

Layer-pure: depends only on core entities, interfaces and exceptions.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

from stockledger.config import get_logger
from stockledger.core.entities.ledger import LedgerEntry, Movement, MovementKind, SourceType
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ValidationError,
)
from stockledger.core.interfaces.inventory_store import IInventorySession
from stockledger.core.services.cost_model import apply_delta, fold_movements

logger = get_logger(__name__)

# Absorbs float noise when a deduction takes exactly what is on hand
QUANTITY_EPSILON = 1e-9


@dataclass
class Posting:
    """Ledger entry after a mutation, and the movement that produced it."""

    entry: LedgerEntry
    movement: Movement | None


@dataclass
class LedgerDiscrepancy:
    """A ledger entry that no longer matches its movement history."""

    product_id: int
    branch_id: int
    ledger_quantity: float
    folded_quantity: float
    ledger_average_cost: float
    folded_average_cost: float
    movement_count: int


class StockLedger:
    """Quantity and moving-average cost bookkeeping per product and branch."""

    async def get_or_create(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
    ) -> LedgerEntry:
        """Return the entry for the pair, creating a zero entry on first access."""
        entry = await session.get_entry(product_id, branch_id)
        if entry is not None:
            return entry
        entry = await session.insert_entry(
            LedgerEntry(product_id=product_id, branch_id=branch_id)
        )
        logger.info(
            "ledger_entry_created",
            entry_id=entry.id,
            product_id=product_id,
            branch_id=branch_id,
        )
        return entry

    async def available(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
    ) -> float:
        """Quantity on hand; a pair with no entry yet has none."""
        entry = await session.get_entry(product_id, branch_id)
        return entry.quantity if entry is not None else 0.0

    async def apply_positive_movement(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
        qty: float,
        unit_cost: float,
        *,
        kind: MovementKind,
        source_type: SourceType | None = None,
        source_id: int | None = None,
        reversal_of: int | None = None,
        notes: str | None = None,
        actor_id: str | None = None,
    ) -> Posting:
        """Receive ``qty`` at ``unit_cost``, blending it into the average."""
        if qty <= 0:
            raise InvalidQuantityError(qty)
        if unit_cost < 0:
            raise InvalidQuantityError(unit_cost, field="unit_cost", allow_zero=True)

        entry = await self.get_or_create(session, product_id, branch_id)
        return await self._post(
            session,
            entry,
            Movement(
                product_id=product_id,
                branch_id=branch_id,
                kind=kind,
                quantity_delta=qty,
                unit_cost=unit_cost,
                source_type=source_type,
                source_id=source_id,
                reversal_of=reversal_of,
                notes=notes,
                actor_id=actor_id,
            ),
        )

    async def apply_negative_movement(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
        qty: float,
        *,
        kind: MovementKind,
        unit_cost: float | None = None,
        source_type: SourceType | None = None,
        source_id: int | None = None,
        reversal_of: int | None = None,
        notes: str | None = None,
        actor_id: str | None = None,
    ) -> Posting:
        """
        Take ``qty`` out of stock; the average cost is unchanged.

        The movement is valued at the current average unless ``unit_cost``
        is given (reversals keep the cost basis of what they undo).
        """
        if qty <= 0:
            raise InvalidQuantityError(qty)

        entry = await session.get_entry(product_id, branch_id)
        available = entry.quantity if entry is not None else 0.0
        if entry is None or qty > available + QUANTITY_EPSILON:
            raise InsufficientStockError(
                product_id=product_id,
                branch_id=branch_id,
                requested=qty,
                available=available,
            )

        return await self._post(
            session,
            entry,
            Movement(
                product_id=product_id,
                branch_id=branch_id,
                kind=kind,
                quantity_delta=-qty,
                unit_cost=entry.average_cost if unit_cost is None else unit_cost,
                source_type=source_type,
                source_id=source_id,
                reversal_of=reversal_of,
                notes=notes,
                actor_id=actor_id,
            ),
        )

    async def set_absolute(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
        qty: float,
        actor_reason: str,
        *,
        kind: MovementKind = MovementKind.MANUAL_ADJUSTMENT,
        source_type: SourceType | None = None,
        source_id: int | None = None,
        actor_id: str | None = None,
    ) -> Posting:
        """
        Replace the quantity on hand with ``qty``.

        Writes an adjustment movement for the signed difference, valued at
        the current average so the average itself does not move. Setting the
        quantity it already has writes nothing.
        """
        if qty < 0:
            raise InvalidQuantityError(qty, allow_zero=True)

        entry = await self.get_or_create(session, product_id, branch_id)
        delta = qty - entry.quantity
        if delta == 0:
            return Posting(entry=entry, movement=None)

        return await self._post(
            session,
            entry,
            Movement(
                product_id=product_id,
                branch_id=branch_id,
                kind=kind,
                quantity_delta=delta,
                unit_cost=entry.average_cost,
                source_type=source_type,
                source_id=source_id,
                notes=actor_reason,
                actor_id=actor_id,
            ),
        )

    async def apply_adjustment(
        self,
        session: IInventorySession,
        product_id: int,
        branch_id: int,
        delta: float,
        actor_reason: str,
        *,
        kind: MovementKind,
        source_type: SourceType | None = None,
        source_id: int | None = None,
        actor_id: str | None = None,
    ) -> Posting:
        """
        Post a signed correction of ``delta`` at the current average cost.

        The resulting quantity is not fixed: stock posted by other movements
        since the correction was measured stays on the ledger.
        """
        if delta == 0:
            raise ValidationError("delta", "must be non-zero", delta)
        if delta < 0:
            return await self.apply_negative_movement(
                session,
                product_id,
                branch_id,
                -delta,
                kind=kind,
                source_type=source_type,
                source_id=source_id,
                notes=actor_reason,
                actor_id=actor_id,
            )

        entry = await self.get_or_create(session, product_id, branch_id)
        return await self.apply_positive_movement(
            session,
            product_id,
            branch_id,
            delta,
            entry.average_cost,
            kind=kind,
            source_type=source_type,
            source_id=source_id,
            notes=actor_reason,
            actor_id=actor_id,
        )

    async def verify(
        self,
        session: IInventorySession,
        branch_id: int | None = None,
        tolerance: float = 1e-6,
    ) -> list[LedgerDiscrepancy]:
        """Refold every entry's movements and report the ones that diverge."""
        discrepancies = []
        for entry in await session.list_entries(branch_id=branch_id):
            movements = await session.list_movements(
                product_id=entry.product_id, branch_id=entry.branch_id
            )
            quantity, average_cost = fold_movements(movements)
            if (
                abs(quantity - entry.quantity) > tolerance
                or abs(average_cost - entry.average_cost) > tolerance
            ):
                discrepancies.append(
                    LedgerDiscrepancy(
                        product_id=entry.product_id,
                        branch_id=entry.branch_id,
                        ledger_quantity=entry.quantity,
                        folded_quantity=quantity,
                        ledger_average_cost=entry.average_cost,
                        folded_average_cost=average_cost,
                        movement_count=len(movements),
                    )
                )
        if discrepancies:
            logger.warning(
                "ledger_discrepancies_found",
                branch_id=branch_id,
                count=len(discrepancies),
            )
        return discrepancies

    async def _post(
        self,
        session: IInventorySession,
        entry: LedgerEntry,
        movement: Movement,
    ) -> Posting:
        quantity, average_cost = apply_delta(
            entry.quantity, entry.average_cost, movement.quantity_delta, movement.unit_cost
        )
        # Deductions of exactly the stock on hand can leave float dust
        if abs(quantity) < QUANTITY_EPSILON:
            quantity = 0.0

        entry.quantity = quantity
        entry.average_cost = average_cost
        entry.updated_at = datetime.now(UTC)
        entry = await session.update_entry(entry)

        movement.created_at = entry.updated_at
        movement = await session.add_movement(movement)

        logger.info(
            "ledger_posted",
            movement_id=movement.id,
            kind=movement.kind.value,
            product_id=entry.product_id,
            branch_id=entry.branch_id,
            delta=movement.quantity_delta,
            quantity=entry.quantity,
            average_cost=round(entry.average_cost, 4),
        )
        return Posting(entry=entry, movement=movement)
