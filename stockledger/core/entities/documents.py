"""
Business documents that post movements to the ledger.

Purchase invoices, transformations and waste records are never erased.
Deleting one in the back office voids it and reverses its movements.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from stockledger.core.services.cost_model import DEFAULT_VAT_RATE, total_with_vat, vat_amount


class DocumentStatus(str, Enum):
    ACTIVE = "active"
    VOIDED = "voided"


class WasteReason(str, Enum):
    """Why stock was written off."""

    EXPIRY = "expiry"
    DAMAGE = "damage"
    BREAKAGE = "breakage"
    LOSS = "loss"
    THEFT = "theft"
    OTHER = "other"


class PurchaseItem(BaseModel):
    """A received line on a purchase invoice."""

    id: int | None = None
    purchase_invoice_id: int | None = None
    product_id: int
    quantity: float
    unit_price: float
    vat_percentage: float = round(DEFAULT_VAT_RATE * 100, 4)
    subtotal: float = 0.0  # quantity * unit_price
    vat_amount: float = 0.0
    total_price: float = 0.0  # subtotal incl. VAT

    @model_validator(mode="after")
    def compute_line(self) -> "PurchaseItem":
        """Compute subtotal, VAT and total from quantity, price and VAT %."""
        rate = self.vat_percentage / 100
        self.subtotal = self.quantity * self.unit_price
        self.vat_amount = vat_amount(self.subtotal, rate)
        self.total_price = total_with_vat(self.subtotal, rate)
        return self


class PurchaseInvoice(BaseModel):
    """Supplier invoice received into one branch."""

    id: int | None = None
    invoice_number: str
    supplier: str
    branch_id: int
    subtotal: float = 0.0
    vat_amount: float = 0.0
    total_amount: float = 0.0
    status: DocumentStatus = DocumentStatus.ACTIVE
    items: list[PurchaseItem] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    voided_by: str | None = None
    voided_at: datetime | None = None

    @model_validator(mode="after")
    def compute_totals(self) -> "PurchaseInvoice":
        """Roll line totals up to the invoice."""
        if self.items:
            self.subtotal = sum(i.subtotal for i in self.items)
            self.vat_amount = sum(i.vat_amount for i in self.items)
            self.total_amount = sum(i.total_price for i in self.items)
        return self


class TransformationItem(BaseModel):
    """A raw material consumed by a transformation."""

    id: int | None = None
    transformation_id: int | None = None
    raw_product_id: int
    quantity: float
    cost_per_unit: float = 0.0  # average cost at commit time
    total_cost: float = 0.0

    @model_validator(mode="after")
    def compute_cost(self) -> "TransformationItem":
        self.total_cost = self.quantity * self.cost_per_unit
        return self


class Transformation(BaseModel):
    """Manufacturing event turning raw materials into a finished product."""

    id: int | None = None
    branch_id: int
    final_product_id: int
    final_quantity: float
    total_cost: float = 0.0
    unit_cost: float = 0.0  # total_cost / final_quantity
    notes: str | None = None
    status: DocumentStatus = DocumentStatus.ACTIVE
    items: list[TransformationItem] = Field(default_factory=list)
    created_by: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    voided_by: str | None = None
    voided_at: datetime | None = None

    @model_validator(mode="after")
    def compute_totals(self) -> "Transformation":
        if self.items:
            self.total_cost = sum(i.total_cost for i in self.items)
        if self.final_quantity > 0:
            self.unit_cost = self.total_cost / self.final_quantity
        return self


class WasteRecord(BaseModel):
    """Stock written off, valued at the average cost when recorded."""

    id: int | None = None
    branch_id: int
    product_id: int
    quantity: float
    reason: WasteReason
    cost: float = 0.0
    notes: str | None = None
    status: DocumentStatus = DocumentStatus.ACTIVE
    recorded_by: str | None = None
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    voided_by: str | None = None
    voided_at: datetime | None = None


class InventoryAdjustment(BaseModel):
    """Manual override of a ledger quantity."""

    id: int | None = None
    branch_id: int
    product_id: int
    previous_quantity: float
    new_quantity: float
    reason: str
    created_by: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def delta(self) -> float:
        return self.new_quantity - self.previous_quantity
