"""
Inventory audit (physical stock count) entities.

An audit moves draft -> in_progress -> completed, and can be cancelled from
either open state. Only completion touches the ledger.
"""

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from stockledger.core.exceptions import InvalidAuditTransitionError


class AuditStatus(str, Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (AuditStatus.COMPLETED, AuditStatus.CANCELLED)

    @property
    def is_open(self) -> bool:
        return not self.is_terminal


ALLOWED_TRANSITIONS: dict[AuditStatus, frozenset[AuditStatus]] = {
    AuditStatus.DRAFT: frozenset({AuditStatus.IN_PROGRESS, AuditStatus.CANCELLED}),
    AuditStatus.IN_PROGRESS: frozenset({AuditStatus.COMPLETED, AuditStatus.CANCELLED}),
    AuditStatus.COMPLETED: frozenset(),
    AuditStatus.CANCELLED: frozenset(),
}


class InventoryAuditItem(BaseModel):
    """Expected vs. counted quantity of one product."""

    id: int | None = None
    audit_id: int | None = None
    product_id: int
    expected_quantity: float  # ledger quantity when the count started
    actual_quantity: float | None = None
    difference: float | None = None  # actual - expected
    notes: str | None = None

    @property
    def is_counted(self) -> bool:
        return self.actual_quantity is not None

    def record_count(self, actual_quantity: float) -> None:
        self.actual_quantity = actual_quantity
        self.difference = actual_quantity - self.expected_quantity


class InventoryAudit(BaseModel):
    """A stock count exercise for one branch on one date."""

    id: int | None = None
    branch_id: int
    audit_date: date
    status: AuditStatus = AuditStatus.DRAFT
    notes: str | None = None
    items: list[InventoryAuditItem] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_by: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    completed_by: str | None = None
    completed_at: datetime | None = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def counted_count(self) -> int:
        return sum(1 for i in self.items if i.is_counted)

    @property
    def uncounted_items(self) -> list[InventoryAuditItem]:
        return [i for i in self.items if not i.is_counted]

    def can_transition_to(self, target: AuditStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, target: AuditStatus, actor_id: str | None = None) -> None:
        """Move to ``target`` or raise InvalidAuditTransitionError."""
        if not self.can_transition_to(target):
            raise InvalidAuditTransitionError(self.id, self.status.value, target.value)
        now = datetime.now(UTC)
        self.status = target
        self.updated_by = actor_id
        self.updated_at = now
        if target is AuditStatus.COMPLETED:
            self.completed_by = actor_id
            self.completed_at = now

    def ensure_open(self, action: str) -> None:
        """Reject edits once the audit reached a terminal state."""
        if self.status.is_terminal:
            raise InvalidAuditTransitionError(self.id, self.status.value, action)
