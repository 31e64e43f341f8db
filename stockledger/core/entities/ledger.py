"""Stock ledger domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class MovementKind(str, Enum):
    """Source of a quantity change on a ledger entry."""

    PURCHASE_RECEIPT = "purchase_receipt"
    TRANSFORMATION_CONSUMPTION = "transformation_consumption"
    TRANSFORMATION_OUTPUT = "transformation_output"
    WASTE_DEDUCTION = "waste_deduction"
    AUDIT_ADJUSTMENT = "audit_adjustment"
    MANUAL_ADJUSTMENT = "manual_adjustment"
    REVERSAL = "reversal"


class SourceType(str, Enum):
    """Business document a movement was posted from."""

    PURCHASE_INVOICE = "purchase_invoice"
    TRANSFORMATION = "transformation"
    WASTE_RECORD = "waste_record"
    INVENTORY_AUDIT = "inventory_audit"
    INVENTORY_ADJUSTMENT = "inventory_adjustment"


class LedgerEntry(BaseModel):
    """Current quantity and moving-average cost of one product at one branch."""

    id: int | None = None
    product_id: int
    branch_id: int
    quantity: float = 0.0
    average_cost: float = 0.0
    version: int = 0  # optimistic concurrency token
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_value(self) -> float:
        """Stock value at average cost."""
        return self.quantity * self.average_cost

    @property
    def key(self) -> tuple[int, int]:
        return (self.product_id, self.branch_id)


class Movement(BaseModel):
    """
    Immutable record of one signed quantity change.

    The ledger entry for (product_id, branch_id) is always the fold of its
    movements in id order. Movements are never deleted; a mistake is undone
    by a REVERSAL movement pointing back through ``reversal_of``.
    """

    id: int | None = None
    product_id: int
    branch_id: int
    kind: MovementKind
    quantity_delta: float  # signed, never zero
    unit_cost: float = 0.0
    source_type: SourceType | None = None
    source_id: int | None = None
    reversal_of: int | None = None
    reversed_by: int | None = None
    notes: str | None = None
    actor_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_inbound(self) -> bool:
        return self.quantity_delta > 0

    @property
    def value(self) -> float:
        """Signed value moved, at the movement's unit cost."""
        return self.quantity_delta * self.unit_cost
