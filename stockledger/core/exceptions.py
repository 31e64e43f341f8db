"""
Domain exceptions for the stock ledger.

Every rejected operation surfaces as one of these. None of them is fatal;
callers map them to a rejected request. Only ConcurrentModificationError is
worth retrying automatically.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Input Exceptions
class ValidationError(StockLedgerError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(StockLedgerError):
    """A quantity that must be positive (or non-negative) is not."""

    def __init__(self, quantity: float, field: str = "quantity", allow_zero: bool = False):
        expectation = ">= 0" if allow_zero else "> 0"
        super().__init__(
            f"Invalid {field}: {quantity} (must be {expectation})",
            code="INVALID_QUANTITY",
            details={"field": field, "quantity": quantity, "expected": expectation},
        )


# Stock Exceptions
class StockError(StockLedgerError):
    """Base exception for ledger state conflicts."""

    pass


class InsufficientStockError(StockError):
    """Requested deduction exceeds the ledger quantity."""

    def __init__(
        self,
        product_id: int,
        branch_id: int,
        requested: float,
        available: float,
    ):
        super().__init__(
            f"Insufficient stock for product {product_id} at branch {branch_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "branch_id": branch_id,
                "requested": requested,
                "available": available,
            },
        )


class ConcurrentModificationError(StockError):
    """A ledger row changed between read and write."""

    retryable = True

    def __init__(self, product_id: int, branch_id: int, expected_version: int):
        super().__init__(
            f"Ledger entry for product {product_id} at branch {branch_id} "
            f"was modified concurrently (expected version {expected_version})",
            code="CONCURRENT_MODIFICATION",
            details={
                "product_id": product_id,
                "branch_id": branch_id,
                "expected_version": expected_version,
            },
        )


class MovementAlreadyReversedError(StockError):
    """The movement already has a reversal."""

    def __init__(self, movement_id: int, reversed_by: int):
        super().__init__(
            f"Movement {movement_id} was already reversed by movement {reversed_by}",
            code="MOVEMENT_ALREADY_REVERSED",
            details={"movement_id": movement_id, "reversed_by": reversed_by},
        )


class DocumentAlreadyVoidedError(StockError):
    """The purchase, transformation or waste record is already voided."""

    def __init__(self, document_type: str, document_id: int):
        super().__init__(
            f"{document_type} {document_id} is already voided",
            code="DOCUMENT_ALREADY_VOIDED",
            details={"document_type": document_type, "document_id": document_id},
        )


class DuplicateSkuError(StockError):
    """No unique SKU could be generated or the supplied one is taken."""

    def __init__(self, sku: str, attempts: int = 1):
        super().__init__(
            f"SKU already in use: {sku}",
            code="DUPLICATE_SKU",
            details={"sku": sku, "attempts": attempts},
        )


# Audit Exceptions
class AuditError(StockLedgerError):
    """Base exception for inventory audit operations."""

    pass


class DuplicateAuditError(AuditError):
    """A non-cancelled audit already exists for the branch and date."""

    def __init__(self, branch_id: int, audit_date: str, existing_id: int | None = None):
        super().__init__(
            f"An audit already exists for branch {branch_id} on {audit_date}",
            code="DUPLICATE_AUDIT",
            details={
                "branch_id": branch_id,
                "audit_date": audit_date,
                "existing_id": existing_id,
            },
        )


class IncompleteAuditError(AuditError):
    """Completion attempted while some items are uncounted."""

    def __init__(self, audit_id: int, uncounted: list[int]):
        super().__init__(
            f"Audit {audit_id} has {len(uncounted)} uncounted item(s)",
            code="INCOMPLETE_AUDIT",
            details={"audit_id": audit_id, "uncounted_product_ids": uncounted},
        )


class InvalidAuditTransitionError(AuditError):
    """The audit cannot move from its current status to the requested one."""

    def __init__(self, audit_id: int | None, current: str, target: str):
        super().__init__(
            f"Audit {audit_id} cannot move from '{current}' to '{target}'",
            code="INVALID_AUDIT_TRANSITION",
            details={"audit_id": audit_id, "current": current, "target": target},
        )


# Not Found Exceptions
class NotFoundError(StockLedgerError):
    """Referenced record does not exist."""

    resource: str = "Resource"

    def __init__(self, resource_id: Any):
        code = self.resource.upper().replace(" ", "_") + "_NOT_FOUND"
        super().__init__(
            f"{self.resource} not found: {resource_id}",
            code=code,
            details={"id": resource_id},
        )


class ProductNotFoundError(NotFoundError):
    resource = "Product"


class BranchNotFoundError(NotFoundError):
    resource = "Branch"


class CategoryNotFoundError(NotFoundError):
    resource = "Category"


class ProductTypeNotFoundError(NotFoundError):
    resource = "Product type"


class LedgerEntryNotFoundError(NotFoundError):
    resource = "Ledger entry"


class MovementNotFoundError(NotFoundError):
    resource = "Movement"


class AuditNotFoundError(NotFoundError):
    resource = "Audit"


class AuditItemNotFoundError(NotFoundError):
    resource = "Audit item"


class PurchaseInvoiceNotFoundError(NotFoundError):
    resource = "Purchase invoice"


class TransformationNotFoundError(NotFoundError):
    resource = "Transformation"


class WasteRecordNotFoundError(NotFoundError):
    resource = "Waste record"


# Access Exceptions
class AccessDeniedError(StockLedgerError):
    """The actor's role or branch does not allow the operation."""

    def __init__(self, actor_id: str, action: str, branch_id: int | None = None):
        super().__init__(
            f"Actor {actor_id} may not {action}"
            + (f" at branch {branch_id}" if branch_id is not None else ""),
            code="ACCESS_DENIED",
            details={"actor_id": actor_id, "action": action, "branch_id": branch_id},
        )


# Storage Exceptions
class StorageError(StockLedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )
