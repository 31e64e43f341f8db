"""
Dependency injection container for FastAPI.

Provides stores, use cases and the calling actor to route handlers.
"""

from functools import lru_cache

from fastapi import Header, HTTPException, status

from stockledger.application.use_cases import (
    AdjustInventoryUseCase,
    BuildReportsUseCase,
    CancelInventoryAuditUseCase,
    CompleteInventoryAuditUseCase,
    CreateBranchUseCase,
    CreateCategoryUseCase,
    CreateInventoryAuditUseCase,
    PopulateInventoryAuditUseCase,
    RecordAuditCountUseCase,
    RecordPurchaseUseCase,
    RecordTransformationUseCase,
    RecordWasteUseCase,
    RegisterProductUseCase,
    ReverseMovementUseCase,
    UpdateAuditItemNotesUseCase,
    UpdateBranchUseCase,
    UpdateProductUseCase,
    VerifyLedgerUseCase,
    VoidPurchaseUseCase,
    VoidTransformationUseCase,
    VoidWasteUseCase,
)
from stockledger.config import Settings, bind_actor, get_settings
from stockledger.core.entities.actor import Actor, Role
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteInventoryStore,
    get_catalog_store,
    get_inventory_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Identity
async def get_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
    x_actor_branch: int | None = Header(default=None),
) -> Actor:
    """
    Build the calling actor from the identity headers.

    The headers are set by the authenticating proxy in front of the service
    and are trusted as-is.
    """
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id and X-Actor-Role headers are required",
        )
    try:
        role = Role(x_actor_role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown actor role: {x_actor_role}",
        )
    bind_actor(x_actor_id, role.value, x_actor_branch)
    return Actor(actor_id=x_actor_id, role=role, branch_id=x_actor_branch)


# Store dependencies
async def get_cat_store() -> SQLiteCatalogStore:
    """Get catalog store."""
    return await get_catalog_store()


async def get_inv_store() -> SQLiteInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


# Catalog use cases
def get_create_branch_use_case() -> CreateBranchUseCase:
    return CreateBranchUseCase()


def get_update_branch_use_case() -> UpdateBranchUseCase:
    return UpdateBranchUseCase()


def get_create_category_use_case() -> CreateCategoryUseCase:
    return CreateCategoryUseCase()


def get_create_product_type_use_case() -> CreateCategoryUseCase:
    return CreateCategoryUseCase(product_type=True)


def get_register_product_use_case() -> RegisterProductUseCase:
    return RegisterProductUseCase()


def get_update_product_use_case() -> UpdateProductUseCase:
    return UpdateProductUseCase()


# Movement use cases
def get_record_purchase_use_case() -> RecordPurchaseUseCase:
    """Get record purchase use case."""
    return RecordPurchaseUseCase()


def get_record_transformation_use_case() -> RecordTransformationUseCase:
    """Get record transformation use case."""
    return RecordTransformationUseCase()


def get_record_waste_use_case() -> RecordWasteUseCase:
    """Get record waste use case."""
    return RecordWasteUseCase()


def get_adjust_inventory_use_case() -> AdjustInventoryUseCase:
    return AdjustInventoryUseCase()


def get_reverse_movement_use_case() -> ReverseMovementUseCase:
    return ReverseMovementUseCase()


def get_void_purchase_use_case() -> VoidPurchaseUseCase:
    return VoidPurchaseUseCase()


def get_void_transformation_use_case() -> VoidTransformationUseCase:
    return VoidTransformationUseCase()


def get_void_waste_use_case() -> VoidWasteUseCase:
    return VoidWasteUseCase()


# Audit use cases
def get_create_audit_use_case() -> CreateInventoryAuditUseCase:
    return CreateInventoryAuditUseCase()


def get_populate_audit_use_case() -> PopulateInventoryAuditUseCase:
    return PopulateInventoryAuditUseCase()


def get_record_count_use_case() -> RecordAuditCountUseCase:
    return RecordAuditCountUseCase()


def get_update_item_notes_use_case() -> UpdateAuditItemNotesUseCase:
    return UpdateAuditItemNotesUseCase()


def get_complete_audit_use_case() -> CompleteInventoryAuditUseCase:
    return CompleteInventoryAuditUseCase()


def get_cancel_audit_use_case() -> CancelInventoryAuditUseCase:
    return CancelInventoryAuditUseCase()


# Reporting
def get_build_reports_use_case() -> BuildReportsUseCase:
    """Get reports use case."""
    return BuildReportsUseCase()


def get_verify_ledger_use_case() -> VerifyLedgerUseCase:
    """Get ledger integrity use case."""
    return VerifyLedgerUseCase()
