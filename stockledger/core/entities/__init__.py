"""Core domain entities."""

from stockledger.core.entities.actor import Actor, Role
from stockledger.core.entities.audit import (
    ALLOWED_TRANSITIONS,
    AuditStatus,
    InventoryAudit,
    InventoryAuditItem,
)
from stockledger.core.entities.catalog import (
    Branch,
    Category,
    MeasurementUnit,
    Product,
    ProductType,
)
from stockledger.core.entities.documents import (
    DocumentStatus,
    InventoryAdjustment,
    PurchaseInvoice,
    PurchaseItem,
    Transformation,
    TransformationItem,
    WasteReason,
    WasteRecord,
)
from stockledger.core.entities.ledger import (
    LedgerEntry,
    Movement,
    MovementKind,
    SourceType,
)

__all__ = [
    # Actor
    "Actor",
    "Role",
    # Audit
    "ALLOWED_TRANSITIONS",
    "AuditStatus",
    "InventoryAudit",
    "InventoryAuditItem",
    # Catalog
    "Branch",
    "Category",
    "MeasurementUnit",
    "Product",
    "ProductType",
    # Documents
    "DocumentStatus",
    "InventoryAdjustment",
    "PurchaseInvoice",
    "PurchaseItem",
    "Transformation",
    "TransformationItem",
    "WasteReason",
    "WasteRecord",
    # Ledger
    "LedgerEntry",
    "Movement",
    "MovementKind",
    "SourceType",
]
