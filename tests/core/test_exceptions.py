"""Unit tests for domain exceptions."""

from stockledger.core.exceptions import (
    AccessDeniedError,
    AuditError,
    AuditNotFoundError,
    ConcurrentModificationError,
    DatabaseError,
    DocumentAlreadyVoidedError,
    DuplicateAuditError,
    IncompleteAuditError,
    InsufficientStockError,
    InvalidAuditTransitionError,
    InvalidQuantityError,
    MovementAlreadyReversedError,
    NotFoundError,
    ProductNotFoundError,
    ProductTypeNotFoundError,
    StockError,
    StockLedgerError,
    StorageError,
    ValidationError,
)


class TestStockLedgerError:
    def test_defaults(self):
        err = StockLedgerError("boom")
        assert err.message == "boom"
        assert err.code == "StockLedgerError"
        assert err.details == {}
        assert err.retryable is False

    def test_to_dict(self):
        err = StockLedgerError("boom", code="X", details={"a": 1})
        assert err.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


class TestInputErrors:
    def test_validation_error(self):
        err = ValidationError("reason", "too short", "ab")
        assert err.code == "VALIDATION_ERROR"
        assert err.details["field"] == "reason"
        assert err.details["value"] == "ab"
        assert "reason" in str(err)

    def test_validation_error_truncates_value(self):
        err = ValidationError("notes", "too long", "x" * 500)
        assert len(err.details["value"]) == 100

    def test_invalid_quantity_positive(self):
        err = InvalidQuantityError(0)
        assert err.code == "INVALID_QUANTITY"
        assert err.details["expected"] == "> 0"

    def test_invalid_quantity_non_negative(self):
        err = InvalidQuantityError(-1, field="new_quantity", allow_zero=True)
        assert err.details == {"field": "new_quantity", "quantity": -1, "expected": ">= 0"}


class TestStockErrors:
    def test_insufficient_stock(self):
        err = InsufficientStockError(product_id=1, branch_id=2, requested=8, available=5)
        assert isinstance(err, StockError)
        assert err.code == "INSUFFICIENT_STOCK"
        assert err.details["requested"] == 8
        assert err.details["available"] == 5
        assert not err.retryable

    def test_concurrent_modification_is_retryable(self):
        err = ConcurrentModificationError(1, 2, expected_version=3)
        assert err.retryable is True
        assert err.code == "CONCURRENT_MODIFICATION"

    def test_already_reversed(self):
        err = MovementAlreadyReversedError(10, 11)
        assert err.details == {"movement_id": 10, "reversed_by": 11}

    def test_already_voided(self):
        err = DocumentAlreadyVoidedError("waste_record", 4)
        assert err.code == "DOCUMENT_ALREADY_VOIDED"
        assert "waste_record 4" in str(err)


class TestAuditErrors:
    def test_hierarchy(self):
        assert issubclass(DuplicateAuditError, AuditError)
        assert issubclass(IncompleteAuditError, AuditError)
        assert issubclass(InvalidAuditTransitionError, AuditError)

    def test_incomplete_lists_products(self):
        err = IncompleteAuditError(1, [3, 4])
        assert err.details["uncounted_product_ids"] == [3, 4]
        assert "2 uncounted" in str(err)

    def test_invalid_transition(self):
        err = InvalidAuditTransitionError(5, "completed", "cancelled")
        assert err.code == "INVALID_AUDIT_TRANSITION"
        assert err.details["current"] == "completed"


class TestNotFoundErrors:
    def test_code_from_resource(self):
        assert ProductNotFoundError(1).code == "PRODUCT_NOT_FOUND"
        assert AuditNotFoundError(1).code == "AUDIT_NOT_FOUND"
        assert ProductTypeNotFoundError(1).code == "PRODUCT_TYPE_NOT_FOUND"

    def test_message_and_details(self):
        err = ProductNotFoundError(42)
        assert isinstance(err, NotFoundError)
        assert str(err) == "Product not found: 42"
        assert err.details == {"id": 42}


class TestOtherErrors:
    def test_access_denied_with_branch(self):
        err = AccessDeniedError("u1", "void_document", 3)
        assert err.code == "ACCESS_DENIED"
        assert "at branch 3" in str(err)

    def test_access_denied_without_branch(self):
        assert "branch" not in str(AccessDeniedError("u1", "manage_catalog"))

    def test_database_error(self):
        err = DatabaseError("insert", "disk full")
        assert isinstance(err, StorageError)
        assert err.details == {"operation": "insert", "error": "disk full"}
