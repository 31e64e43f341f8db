"""Branch endpoints."""

from fastapi import APIRouter, Depends, status

from stockledger.api.dependencies import (
    get_actor,
    get_cat_store,
    get_create_branch_use_case,
    get_update_branch_use_case,
)
from stockledger.application.dto.requests import CreateBranchRequest, UpdateBranchRequest
from stockledger.application.dto.responses import BranchResponse, ErrorResponse
from stockledger.application.use_cases import CreateBranchUseCase, UpdateBranchUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import BranchNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteCatalogStore

router = APIRouter(prefix="/api/branches", tags=["branches"])


@router.post(
    "",
    response_model=BranchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_branch(
    request: CreateBranchRequest,
    actor: Actor = Depends(get_actor),
    use_case: CreateBranchUseCase = Depends(get_create_branch_use_case),
) -> BranchResponse:
    """Open a new branch (admin only)."""
    branch = await use_case.execute(request, actor)
    return use_case.to_response(branch)


@router.get("", response_model=list[BranchResponse])
async def list_branches(
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> list[BranchResponse]:
    """List branches visible to the caller."""
    branches = await store.list_branches()
    if not actor.is_admin:
        branches = [b for b in branches if b.id == actor.branch_id]
    return [BranchResponse.model_validate(b) for b in branches]


@router.get(
    "/{branch_id}",
    response_model=BranchResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_branch(
    branch_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteCatalogStore = Depends(get_cat_store),
) -> BranchResponse:
    scoped_branch(actor, branch_id)
    branch = await store.get_branch(branch_id)
    if branch is None:
        raise BranchNotFoundError(branch_id)
    return BranchResponse.model_validate(branch)


@router.patch(
    "/{branch_id}",
    response_model=BranchResponse,
    responses={404: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def update_branch(
    branch_id: int,
    request: UpdateBranchRequest,
    actor: Actor = Depends(get_actor),
    use_case: UpdateBranchUseCase = Depends(get_update_branch_use_case),
) -> BranchResponse:
    """Rename or relocate a branch (admin only)."""
    branch = await use_case.execute(branch_id, request, actor)
    return use_case.to_response(branch)
