"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    AdjustInventoryRequest,
    AuditActionRequest,
    AuditCountBody,
    AuditItemNotesBody,
    CreateAuditRequest,
    CreateBranchRequest,
    CreateCategoryRequest,
    PurchaseItemRequest,
    RecordAuditCountRequest,
    RecordPurchaseRequest,
    RecordTransformationRequest,
    RecordWasteRequest,
    RegisterProductRequest,
    ReportRequest,
    ReverseMovementRequest,
    ReverseMovementBody,
    TransformationSourceRequest,
    UpdateAuditItemNotesRequest,
    UpdateBranchRequest,
    UpdateProductRequest,
    VerifyLedgerRequest,
    VoidDocumentRequest,
)
from stockledger.application.dto.responses import (
    AdjustInventoryResponse,
    AuditItemResponse,
    AuditListResponse,
    AuditResponse,
    BranchResponse,
    CategoryResponse,
    CompleteAuditResponse,
    ErrorResponse,
    HealthResponse,
    LedgerEntryListResponse,
    LedgerEntryResponse,
    LedgerIntegrityResponse,
    MovementListResponse,
    MovementResponse,
    PaginatedResponse,
    PostingResponse,
    ProductListResponse,
    ProductResponse,
    PurchaseInvoiceResponse,
    PurchaseReportResponse,
    RecordPurchaseResponse,
    RecordTransformationResponse,
    RecordWasteResponse,
    ReverseMovementResponse,
    TransformationResponse,
    ValuationReportResponse,
    VoidDocumentResponse,
    WasteRecordResponse,
    WasteReportResponse,
)

__all__ = [
    # Requests
    "AdjustInventoryRequest",
    "AuditActionRequest",
    "AuditCountBody",
    "AuditItemNotesBody",
    "CreateAuditRequest",
    "CreateBranchRequest",
    "CreateCategoryRequest",
    "PurchaseItemRequest",
    "RecordAuditCountRequest",
    "RecordPurchaseRequest",
    "RecordTransformationRequest",
    "RecordWasteRequest",
    "RegisterProductRequest",
    "ReportRequest",
    "ReverseMovementRequest",
    "ReverseMovementBody",
    "TransformationSourceRequest",
    "UpdateAuditItemNotesRequest",
    "UpdateBranchRequest",
    "UpdateProductRequest",
    "VerifyLedgerRequest",
    "VoidDocumentRequest",
    # Responses
    "AdjustInventoryResponse",
    "AuditItemResponse",
    "AuditListResponse",
    "AuditResponse",
    "BranchResponse",
    "CategoryResponse",
    "CompleteAuditResponse",
    "ErrorResponse",
    "HealthResponse",
    "LedgerEntryListResponse",
    "LedgerEntryResponse",
    "LedgerIntegrityResponse",
    "MovementListResponse",
    "MovementResponse",
    "PaginatedResponse",
    "PostingResponse",
    "ProductListResponse",
    "ProductResponse",
    "PurchaseInvoiceResponse",
    "PurchaseReportResponse",
    "RecordPurchaseResponse",
    "RecordTransformationResponse",
    "RecordWasteResponse",
    "ReverseMovementResponse",
    "TransformationResponse",
    "ValuationReportResponse",
    "VoidDocumentResponse",
    "WasteRecordResponse",
    "WasteReportResponse",
]
