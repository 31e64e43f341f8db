"""Transformation endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_actor,
    get_inv_store,
    get_record_transformation_use_case,
    get_void_transformation_use_case,
)
from stockledger.application.dto.requests import RecordTransformationRequest, VoidDocumentRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    TransformationResponse,
    RecordTransformationResponse,
    VoidDocumentResponse,
)
from stockledger.application.retry import run_with_conflict_retry
from stockledger.application.use_cases import RecordTransformationUseCase, VoidTransformationUseCase
from stockledger.core.entities.actor import Actor
from stockledger.core.exceptions import TransformationNotFoundError
from stockledger.core.services.access import scoped_branch
from stockledger.infrastructure.storage.sqlite import SQLiteInventoryStore

router = APIRouter(prefix="/api/transformations", tags=["transformations"])


@router.post(
    "",
    response_model=RecordTransformationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_transformation(
    request: RecordTransformationRequest,
    actor: Actor = Depends(get_actor),
    use_case: RecordTransformationUseCase = Depends(get_record_transformation_use_case),
) -> RecordTransformationResponse:
    """Consume raw materials and produce the target product in one step."""
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)


@router.get("", response_model=list[TransformationResponse])
async def list_transformations(
    branch_id: int | None = Query(default=None),
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    include_voided: bool = Query(default=False),
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> list[TransformationResponse]:
    branch_id = scoped_branch(actor, branch_id)
    async with store.session() as session:
        transformations = await session.list_transformations(
            branch_id=branch_id, start=start, end=end, include_voided=include_voided
        )
    return [TransformationResponse.model_validate(t) for t in transformations]


@router.get(
    "/{transformation_id}",
    response_model=TransformationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transformation(
    transformation_id: int,
    actor: Actor = Depends(get_actor),
    store: SQLiteInventoryStore = Depends(get_inv_store),
) -> TransformationResponse:
    async with store.session() as session:
        transformation = await session.get_transformation(transformation_id)
    if transformation is None:
        raise TransformationNotFoundError(transformation_id)
    scoped_branch(actor, transformation.branch_id)
    return TransformationResponse.model_validate(transformation)


@router.post(
    "/{transformation_id}/void",
    response_model=VoidDocumentResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def void_transformation(
    transformation_id: int,
    actor: Actor = Depends(get_actor),
    use_case: VoidTransformationUseCase = Depends(get_void_transformation_use_case),
) -> VoidDocumentResponse:
    """Void the transformation: the output is reversed before the inputs."""
    request = VoidDocumentRequest(document_id=transformation_id)
    result = await run_with_conflict_retry(use_case.execute, request, actor)
    return use_case.to_response(result)
