"""
Persistence port for the inventory ledger.

All ledger mutations run inside one ``IInventoryStore.transaction()``: the
session it yields holds the store's write lock from the first read to the
commit, so check-then-write sequences cannot interleave. Leaving the context
normally commits; an exception rolls everything back.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date, datetime

from stockledger.core.entities.audit import AuditStatus, InventoryAudit, InventoryAuditItem
from stockledger.core.entities.catalog import Branch, Product
from stockledger.core.entities.documents import (
    InventoryAdjustment,
    PurchaseInvoice,
    Transformation,
    WasteRecord,
)
from stockledger.core.entities.ledger import LedgerEntry, Movement, SourceType


class IInventorySession(ABC):
    """Queries and writes available within one unit of work."""

    # Catalog lookups
    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def get_branch(self, branch_id: int) -> Branch | None:
        """Get branch by ID."""
        pass

    # Ledger entries
    @abstractmethod
    async def get_entry(self, product_id: int, branch_id: int) -> LedgerEntry | None:
        """Get the ledger entry for a (product, branch) pair."""
        pass

    @abstractmethod
    async def insert_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Create a ledger entry."""
        pass

    @abstractmethod
    async def update_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Write quantity and average cost back.

        Compares ``entry.version`` with the stored row and raises
        ConcurrentModificationError on mismatch; bumps the version on success.
        """
        pass

    @abstractmethod
    async def list_entries(
        self,
        branch_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LedgerEntry]:
        """List ledger entries, optionally for one branch."""
        pass

    # Movements
    @abstractmethod
    async def add_movement(self, movement: Movement) -> Movement:
        """Append a movement record."""
        pass

    @abstractmethod
    async def get_movement(self, movement_id: int) -> Movement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        product_id: int | None = None,
        branch_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Movement]:
        """List movements in commit order (oldest first)."""
        pass

    @abstractmethod
    async def list_movements_for_source(
        self, source_type: SourceType, source_id: int
    ) -> list[Movement]:
        """List the movements posted by one business document."""
        pass

    @abstractmethod
    async def mark_movement_reversed(self, movement_id: int, reversal_id: int) -> None:
        """Link a movement to the reversal that undid it."""
        pass

    # Business documents
    @abstractmethod
    async def add_purchase_invoice(self, invoice: PurchaseInvoice) -> PurchaseInvoice:
        """Create a purchase invoice with its items."""
        pass

    @abstractmethod
    async def get_purchase_invoice(self, invoice_id: int) -> PurchaseInvoice | None:
        """Get purchase invoice with items."""
        pass

    @abstractmethod
    async def list_purchase_invoices(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[PurchaseInvoice]:
        """List purchase invoices with items, newest first."""
        pass

    @abstractmethod
    async def add_transformation(self, transformation: Transformation) -> Transformation:
        """Create a transformation with its source items."""
        pass

    @abstractmethod
    async def get_transformation(self, transformation_id: int) -> Transformation | None:
        """Get transformation with items."""
        pass

    @abstractmethod
    async def list_transformations(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[Transformation]:
        """List transformations with items, newest first."""
        pass

    @abstractmethod
    async def add_waste_record(self, record: WasteRecord) -> WasteRecord:
        """Create a waste record."""
        pass

    @abstractmethod
    async def get_waste_record(self, record_id: int) -> WasteRecord | None:
        """Get waste record by ID."""
        pass

    @abstractmethod
    async def list_waste_records(
        self,
        branch_id: int | None = None,
        start: date | None = None,
        end: date | None = None,
        include_voided: bool = False,
    ) -> list[WasteRecord]:
        """List waste records, newest first."""
        pass

    @abstractmethod
    async def void_document(
        self,
        source_type: SourceType,
        document_id: int,
        actor_id: str | None,
        voided_at: datetime,
    ) -> None:
        """Mark a purchase invoice, transformation or waste record as voided."""
        pass

    @abstractmethod
    async def add_adjustment(self, adjustment: InventoryAdjustment) -> InventoryAdjustment:
        """Record a manual inventory adjustment."""
        pass

    # Audits
    @abstractmethod
    async def add_audit(self, audit: InventoryAudit) -> InventoryAudit:
        """Create an audit header."""
        pass

    @abstractmethod
    async def get_audit(self, audit_id: int) -> InventoryAudit | None:
        """Get audit with its items."""
        pass

    @abstractmethod
    async def find_open_audit(
        self, branch_id: int, audit_date: date
    ) -> InventoryAudit | None:
        """Find the non-cancelled audit for a branch and date, if any."""
        pass

    @abstractmethod
    async def list_audits(
        self,
        branch_id: int | None = None,
        status: AuditStatus | None = None,
    ) -> list[InventoryAudit]:
        """List audit headers (without items), newest first."""
        pass

    @abstractmethod
    async def update_audit(self, audit: InventoryAudit) -> InventoryAudit:
        """Persist audit status, notes and completion fields."""
        pass

    @abstractmethod
    async def add_audit_items(
        self, audit_id: int, items: list[InventoryAuditItem]
    ) -> list[InventoryAuditItem]:
        """Attach snapshot items to an audit."""
        pass

    @abstractmethod
    async def get_audit_item(self, item_id: int) -> InventoryAuditItem | None:
        """Get audit item by ID."""
        pass

    @abstractmethod
    async def update_audit_item(self, item: InventoryAuditItem) -> InventoryAuditItem:
        """Persist an item's count, difference and notes."""
        pass


class IInventoryStore(ABC):
    """Factory for inventory sessions."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[IInventorySession]:
        """Open a serialized read-write unit of work."""
        pass

    @abstractmethod
    def session(self) -> AbstractAsyncContextManager[IInventorySession]:
        """Open a read-only session."""
        pass
