"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field

from stockledger.core.entities.audit import AuditStatus
from stockledger.core.entities.catalog import MeasurementUnit
from stockledger.core.entities.documents import DocumentStatus, WasteReason
from stockledger.core.entities.ledger import MovementKind, SourceType


class EntityResponse(BaseModel):
    """Base for DTOs built straight from domain entities."""

    model_config = ConfigDict(from_attributes=True)


# --- Catalog ---


class BranchResponse(EntityResponse):
    id: int
    name: str
    location: str = ""
    created_at: datetime


class CategoryResponse(EntityResponse):
    """Category or product type."""

    id: int
    name: str
    description: str | None = None
    created_at: datetime


class ProductResponse(EntityResponse):
    """Product response DTO."""

    id: int
    name: str
    sku: str
    barcode: str | None = None
    category_id: int
    product_type_id: int
    unit: MeasurementUnit
    description: str | None = None
    created_at: datetime


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


class ProductListResponse(PaginatedResponse):
    products: list[ProductResponse]


# --- Ledger ---


class LedgerEntryResponse(EntityResponse):
    """Quantity and average cost of one product at one branch."""

    id: int
    product_id: int
    branch_id: int
    quantity: float
    average_cost: float
    total_value: float
    version: int
    created_at: datetime
    updated_at: datetime


class MovementResponse(EntityResponse):
    """One immutable ledger movement."""

    id: int
    product_id: int
    branch_id: int
    kind: MovementKind
    quantity_delta: float
    unit_cost: float
    value: float
    source_type: SourceType | None = None
    source_id: int | None = None
    reversal_of: int | None = None
    reversed_by: int | None = None
    notes: str | None = None
    actor_id: str | None = None
    created_at: datetime


class PostingResponse(BaseModel):
    """Ledger state after a mutation and the movement that produced it."""

    entry: LedgerEntryResponse
    movement: MovementResponse | None = None


class LedgerEntryListResponse(PaginatedResponse):
    entries: list[LedgerEntryResponse]
    total_value: float


class MovementListResponse(BaseModel):
    movements: list[MovementResponse]
    total: int


# --- Documents ---


class PurchaseItemResponse(EntityResponse):
    id: int
    product_id: int
    quantity: float
    unit_price: float
    vat_percentage: float
    subtotal: float
    vat_amount: float
    total_price: float


class PurchaseInvoiceResponse(EntityResponse):
    """Purchase invoice response DTO."""

    id: int
    invoice_number: str
    supplier: str
    branch_id: int
    subtotal: float
    vat_amount: float
    total_amount: float
    status: DocumentStatus
    items: list[PurchaseItemResponse] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime
    voided_by: str | None = None
    voided_at: datetime | None = None


class RecordPurchaseResponse(BaseModel):
    invoice: PurchaseInvoiceResponse
    postings: list[PostingResponse]


class TransformationItemResponse(EntityResponse):
    id: int
    raw_product_id: int
    quantity: float
    cost_per_unit: float
    total_cost: float


class TransformationResponse(EntityResponse):
    """Transformation response DTO."""

    id: int
    branch_id: int
    final_product_id: int
    final_quantity: float
    total_cost: float
    unit_cost: float
    notes: str | None = None
    status: DocumentStatus
    items: list[TransformationItemResponse] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime
    voided_by: str | None = None
    voided_at: datetime | None = None


class RecordTransformationResponse(BaseModel):
    transformation: TransformationResponse
    postings: list[PostingResponse]


class WasteRecordResponse(EntityResponse):
    id: int
    branch_id: int
    product_id: int
    quantity: float
    reason: WasteReason
    cost: float
    notes: str | None = None
    status: DocumentStatus
    recorded_by: str | None = None
    recorded_at: datetime
    voided_by: str | None = None
    voided_at: datetime | None = None


class RecordWasteResponse(BaseModel):
    record: WasteRecordResponse
    posting: PostingResponse


class ReverseMovementResponse(BaseModel):
    original: MovementResponse
    reversal: MovementResponse
    entry: LedgerEntryResponse


class VoidDocumentResponse(BaseModel):
    """Result of voiding a document: its status and the reversals written."""

    document_type: SourceType
    document_id: int
    status: DocumentStatus
    voided_by: str | None = None
    voided_at: datetime | None = None
    reversals: list[MovementResponse]


class InventoryAdjustmentResponse(EntityResponse):
    id: int
    branch_id: int
    product_id: int
    previous_quantity: float
    new_quantity: float
    delta: float
    reason: str
    created_by: str | None = None
    created_at: datetime


class AdjustInventoryResponse(BaseModel):
    adjustment: InventoryAdjustmentResponse
    posting: PostingResponse


# --- Audits ---


class AuditItemResponse(EntityResponse):
    id: int
    audit_id: int
    product_id: int
    expected_quantity: float
    actual_quantity: float | None = None
    difference: float | None = None
    notes: str | None = None


class AuditResponse(EntityResponse):
    """Inventory audit with its items and counters."""

    id: int
    branch_id: int
    audit_date: date
    status: AuditStatus
    notes: str | None = None
    item_count: int
    counted_count: int
    items: list[AuditItemResponse] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime
    updated_by: str | None = None
    updated_at: datetime
    completed_by: str | None = None
    completed_at: datetime | None = None


class CompleteAuditResponse(BaseModel):
    audit: AuditResponse
    adjustments: list[MovementResponse]


class AuditListResponse(BaseModel):
    audits: list[AuditResponse]
    total: int


# --- Reports ---


class GroupTotalResponse(EntityResponse):
    key: str
    label: str
    quantity: float
    amount: float
    count: int


class WasteReportResponse(EntityResponse):
    total_quantity: float
    total_cost: float
    record_count: int
    by_product: list[GroupTotalResponse]
    by_reason: list[GroupTotalResponse]
    by_date: list[GroupTotalResponse]


class PurchaseReportResponse(EntityResponse):
    invoice_count: int
    subtotal: float
    vat_amount: float
    total_amount: float
    by_date: list[GroupTotalResponse]
    by_product: list[GroupTotalResponse]
    by_branch: list[GroupTotalResponse]


class ValuationReportResponse(EntityResponse):
    total_quantity: float
    total_value: float
    by_branch: list[GroupTotalResponse]
    by_category: list[GroupTotalResponse]


class LedgerDiscrepancyResponse(EntityResponse):
    product_id: int
    branch_id: int
    ledger_quantity: float
    folded_quantity: float
    ledger_average_cost: float
    folded_average_cost: float
    movement_count: int


class LedgerIntegrityResponse(BaseModel):
    """Outcome of refolding every ledger entry from its movements."""

    ok: bool
    checked_entries: int
    discrepancies: list[LedgerDiscrepancyResponse]


# --- Service ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = "unknown"
    schema_version: str | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict | None = Field(default=None, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
