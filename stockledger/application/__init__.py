"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate the stock ledger
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers and the CLI.
"""

from stockledger.application.dto.requests import (
    AdjustInventoryRequest,
    AuditActionRequest,
    CreateAuditRequest,
    RecordAuditCountRequest,
    RecordPurchaseRequest,
    RecordTransformationRequest,
    RecordWasteRequest,
    RegisterProductRequest,
    ReportRequest,
    ReverseMovementRequest,
    VerifyLedgerRequest,
    VoidDocumentRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    LedgerEntryResponse,
    MovementResponse,
    PaginatedResponse,
)
from stockledger.application.retry import conflict_retry, run_with_conflict_retry
from stockledger.application.services import get_stock_ledger, reset_services
from stockledger.application.use_cases import (
    AdjustInventoryUseCase,
    BuildReportsUseCase,
    CompleteInventoryAuditUseCase,
    CreateInventoryAuditUseCase,
    RecordPurchaseUseCase,
    RecordTransformationUseCase,
    RecordWasteUseCase,
    ReverseMovementUseCase,
    VerifyLedgerUseCase,
)

__all__ = [
    # Request DTOs
    "RegisterProductRequest",
    "RecordPurchaseRequest",
    "RecordTransformationRequest",
    "RecordWasteRequest",
    "AdjustInventoryRequest",
    "ReverseMovementRequest",
    "VoidDocumentRequest",
    "CreateAuditRequest",
    "AuditActionRequest",
    "RecordAuditCountRequest",
    "ReportRequest",
    "VerifyLedgerRequest",
    # Response DTOs
    "LedgerEntryResponse",
    "MovementResponse",
    "HealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
    # Use Cases
    "RecordPurchaseUseCase",
    "RecordTransformationUseCase",
    "RecordWasteUseCase",
    "AdjustInventoryUseCase",
    "ReverseMovementUseCase",
    "CreateInventoryAuditUseCase",
    "CompleteInventoryAuditUseCase",
    "BuildReportsUseCase",
    "VerifyLedgerUseCase",
    # Retry
    "conflict_retry",
    "run_with_conflict_retry",
    # Service factories
    "get_stock_ledger",
    "reset_services",
]
