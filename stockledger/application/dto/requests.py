"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Quantities are not range-checked here: the processors own those rules and
raise InvalidQuantityError, so library callers and HTTP callers see the
same error.
"""

from datetime import date

from pydantic import BaseModel, Field

from stockledger.core.entities.catalog import MeasurementUnit
from stockledger.core.entities.documents import WasteReason

# --- Catalog ---


class CreateBranchRequest(BaseModel):
    """Request to open a branch."""

    name: str = Field(..., min_length=1, max_length=200, description="Branch name")
    location: str = Field(default="", max_length=500, description="Address or area")


class UpdateBranchRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=500)


class CreateCategoryRequest(BaseModel):
    """Request to create a category or product type."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)


class RegisterProductRequest(BaseModel):
    """Request to register a product; the SKU is generated."""

    name: str = Field(..., min_length=1, max_length=300, description="Product name")
    category_id: int = Field(..., description="Category ID")
    product_type_id: int = Field(..., description="Product type ID")
    unit: MeasurementUnit = Field(
        default=MeasurementUnit.PIECE, description="Unit the product is counted in"
    )
    barcode: str | None = Field(default=None, max_length=100, description="Barcode (EAN/UPC)")
    description: str | None = Field(default=None, max_length=2000)


class UpdateProductRequest(BaseModel):
    """Editable product fields. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=300)
    barcode: str | None = Field(default=None, max_length=100)
    unit: MeasurementUnit | None = None
    description: str | None = Field(default=None, max_length=2000)


# --- Purchases ---


class PurchaseItemRequest(BaseModel):
    """One line of a purchase invoice."""

    product_id: int = Field(..., description="Product received")
    quantity: float = Field(..., description="Quantity received (> 0)")
    unit_price: float = Field(..., description="Price per unit before VAT (>= 0)")
    vat_percentage: float | None = Field(
        default=None, description="VAT percentage (0-100); the configured default when omitted"
    )


class RecordPurchaseRequest(BaseModel):
    """Request to receive a supplier invoice into a branch."""

    branch_id: int = Field(..., description="Receiving branch")
    supplier: str = Field(..., min_length=1, max_length=300, description="Supplier name")
    invoice_number: str | None = Field(
        default=None,
        max_length=100,
        description="Supplier invoice number (generated when omitted)",
        examples=["INV-482913-057"],
    )
    items: list[PurchaseItemRequest] = Field(default_factory=list)
    actor_id: str | None = Field(default=None, description="Acting user")


# --- Transformations ---


class TransformationSourceRequest(BaseModel):
    product_id: int = Field(..., description="Raw material consumed")
    quantity: float = Field(..., description="Quantity consumed (> 0)")


class RecordTransformationRequest(BaseModel):
    """Request to turn raw materials into a finished product."""

    branch_id: int
    target_product_id: int = Field(..., description="Product produced")
    target_quantity: float = Field(..., description="Quantity produced (> 0)")
    source_items: list[TransformationSourceRequest] = Field(default_factory=list)
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


# --- Waste ---


class RecordWasteRequest(BaseModel):
    """Request to write stock off."""

    branch_id: int
    product_id: int
    quantity: float = Field(..., description="Quantity written off (> 0)")
    reason: WasteReason = Field(..., description="Why the stock was lost")
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


# --- Ledger corrections ---


class ReverseMovementRequest(BaseModel):
    movement_id: int
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


class ReverseMovementBody(BaseModel):
    """HTTP body for a reversal; the movement id comes from the path."""

    notes: str | None = Field(default=None, max_length=2000)


class VoidDocumentRequest(BaseModel):
    """Request to void a purchase, transformation or waste record."""

    document_id: int
    actor_id: str | None = None


class AdjustInventoryRequest(BaseModel):
    """Manual override of the quantity on hand."""

    branch_id: int
    product_id: int
    new_quantity: float = Field(..., description="Quantity after the adjustment (>= 0)")
    reason: str = Field(..., description="Why the count was overridden (3+ characters)")
    actor_id: str | None = None


# --- Audits ---


class CreateAuditRequest(BaseModel):
    """Request to open a stock count."""

    branch_id: int
    audit_date: date = Field(..., description="Day the count belongs to")
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


class AuditActionRequest(BaseModel):
    """Populate, complete or cancel an audit."""

    audit_id: int
    actor_id: str | None = None


class RecordAuditCountRequest(BaseModel):
    """Counted quantity for one audit item."""

    audit_id: int
    item_id: int
    actual_quantity: float = Field(..., description="Counted quantity (>= 0)")
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


class UpdateAuditItemNotesRequest(BaseModel):
    audit_id: int
    item_id: int
    notes: str | None = Field(default=None, max_length=2000)
    actor_id: str | None = None


class AuditCountBody(BaseModel):
    """HTTP body for recording a count; audit and item ids come from the path."""

    actual_quantity: float = Field(..., description="Counted quantity (>= 0)")
    notes: str | None = Field(default=None, max_length=2000)


class AuditItemNotesBody(BaseModel):
    notes: str | None = Field(default=None, max_length=2000)


# --- Reports ---


class ReportRequest(BaseModel):
    """Branch and date filters shared by the reports."""

    branch_id: int | None = Field(default=None, description="Restrict to one branch")
    start: date | None = Field(default=None, description="First day included")
    end: date | None = Field(default=None, description="Last day included")


class VerifyLedgerRequest(BaseModel):
    branch_id: int | None = None
    tolerance: float | None = Field(
        default=None, ge=0, description="Allowed drift (defaults to settings)"
    )
