"""Application use cases."""

from stockledger.application.use_cases.adjust_inventory import (
    AdjustInventoryResult,
    AdjustInventoryUseCase,
)
from stockledger.application.use_cases.build_reports import BuildReportsUseCase
from stockledger.application.use_cases.cancel_inventory_audit import CancelInventoryAuditUseCase
from stockledger.application.use_cases.complete_inventory_audit import (
    CompleteAuditResult,
    CompleteInventoryAuditUseCase,
)
from stockledger.application.use_cases.create_inventory_audit import CreateInventoryAuditUseCase
from stockledger.application.use_cases.manage_catalog import (
    CreateBranchUseCase,
    CreateCategoryUseCase,
    UpdateBranchUseCase,
)
from stockledger.application.use_cases.populate_inventory_audit import (
    PopulateInventoryAuditUseCase,
)
from stockledger.application.use_cases.record_audit_count import (
    RecordAuditCountUseCase,
    UpdateAuditItemNotesUseCase,
)
from stockledger.application.use_cases.record_purchase import (
    RecordPurchaseResult,
    RecordPurchaseUseCase,
)
from stockledger.application.use_cases.record_transformation import (
    RecordTransformationResult,
    RecordTransformationUseCase,
)
from stockledger.application.use_cases.record_waste import RecordWasteResult, RecordWasteUseCase
from stockledger.application.use_cases.register_product import (
    RegisterProductUseCase,
    UpdateProductUseCase,
)
from stockledger.application.use_cases.reverse_movement import (
    ReverseMovementResult,
    ReverseMovementUseCase,
)
from stockledger.application.use_cases.verify_ledger import (
    VerifyLedgerResult,
    VerifyLedgerUseCase,
)
from stockledger.application.use_cases.void_document import (
    VoidDocumentResult,
    VoidDocumentUseCase,
    VoidPurchaseUseCase,
    VoidTransformationUseCase,
    VoidWasteUseCase,
)

__all__ = [
    # Catalog
    "CreateBranchUseCase",
    "UpdateBranchUseCase",
    "CreateCategoryUseCase",
    "RegisterProductUseCase",
    "UpdateProductUseCase",
    # Movements
    "RecordPurchaseUseCase",
    "RecordPurchaseResult",
    "RecordTransformationUseCase",
    "RecordTransformationResult",
    "RecordWasteUseCase",
    "RecordWasteResult",
    "AdjustInventoryUseCase",
    "AdjustInventoryResult",
    "ReverseMovementUseCase",
    "ReverseMovementResult",
    "VoidDocumentUseCase",
    "VoidDocumentResult",
    "VoidPurchaseUseCase",
    "VoidTransformationUseCase",
    "VoidWasteUseCase",
    # Audits
    "CreateInventoryAuditUseCase",
    "PopulateInventoryAuditUseCase",
    "RecordAuditCountUseCase",
    "UpdateAuditItemNotesUseCase",
    "CompleteInventoryAuditUseCase",
    "CompleteAuditResult",
    "CancelInventoryAuditUseCase",
    # Reads
    "BuildReportsUseCase",
    "VerifyLedgerUseCase",
    "VerifyLedgerResult",
]
