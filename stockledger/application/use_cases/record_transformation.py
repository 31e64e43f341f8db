"""Record Transformation Use Case: consume raw materials, produce a product."""

from dataclasses import dataclass, field

from stockledger.application.dto.requests import RecordTransformationRequest
from stockledger.application.dto.responses import (
    RecordTransformationResponse,
    TransformationResponse,
)
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    posting_response,
    require_branch,
    require_product,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.documents import Transformation, TransformationItem
from stockledger.core.entities.ledger import MovementKind, SourceType
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ValidationError,
)
from stockledger.core.services.access import Permission
from stockledger.core.services.stock_ledger import QUANTITY_EPSILON, Posting

logger = get_logger(__name__)


@dataclass
class RecordTransformationResult:
    transformation: Transformation
    consumed: list[Posting] = field(default_factory=list)
    produced: Posting | None = None


class RecordTransformationUseCase(InventoryUseCase):
    """
    Turn raw materials into a finished product.

    Every source is checked against the ledger before anything is written.
    The output is valued at the consumed cost spread over the produced
    quantity.
    """

    async def execute(
        self,
        request: RecordTransformationRequest,
        actor: Actor | None = None,
    ) -> RecordTransformationResult:
        check_access(actor, Permission.RECORD_MOVEMENT, request.branch_id)
        actor_id = resolve_actor_id(actor, request.actor_id)
        required = self._aggregate_sources(request)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            await require_branch(session, request.branch_id)
            await require_product(session, request.target_product_id)

            items = []
            for product_id, quantity in required.items():
                await require_product(session, product_id)
                entry = await session.get_entry(product_id, request.branch_id)
                available = entry.quantity if entry is not None else 0.0
                if entry is None or quantity > available + QUANTITY_EPSILON:
                    logger.info(
                        "transformation_rejected",
                        product_id=product_id,
                        requested=quantity,
                        available=available,
                    )
                    raise InsufficientStockError(
                        product_id=product_id,
                        branch_id=request.branch_id,
                        requested=quantity,
                        available=available,
                    )
                items.append(
                    TransformationItem(
                        raw_product_id=product_id,
                        quantity=quantity,
                        cost_per_unit=entry.average_cost,
                    )
                )

            transformation = await session.add_transformation(
                Transformation(
                    branch_id=request.branch_id,
                    final_product_id=request.target_product_id,
                    final_quantity=request.target_quantity,
                    notes=request.notes,
                    items=items,
                    created_by=actor_id,
                )
            )

            consumed = []
            for item in transformation.items:
                consumed.append(
                    await self._ledger.apply_negative_movement(
                        session,
                        item.raw_product_id,
                        transformation.branch_id,
                        item.quantity,
                        kind=MovementKind.TRANSFORMATION_CONSUMPTION,
                        unit_cost=item.cost_per_unit,
                        source_type=SourceType.TRANSFORMATION,
                        source_id=transformation.id,
                        actor_id=actor_id,
                    )
                )

            produced = await self._ledger.apply_positive_movement(
                session,
                transformation.final_product_id,
                transformation.branch_id,
                transformation.final_quantity,
                transformation.unit_cost,
                kind=MovementKind.TRANSFORMATION_OUTPUT,
                source_type=SourceType.TRANSFORMATION,
                source_id=transformation.id,
                actor_id=actor_id,
            )

        logger.info(
            "transformation_recorded",
            transformation_id=transformation.id,
            final_product_id=transformation.final_product_id,
            final_quantity=transformation.final_quantity,
            unit_cost=round(transformation.unit_cost, 4),
        )
        return RecordTransformationResult(
            transformation=transformation,
            consumed=consumed,
            produced=produced,
        )

    @staticmethod
    def _aggregate_sources(request: RecordTransformationRequest) -> dict[int, float]:
        """Validate the request and sum repeated source products."""
        if request.target_quantity <= 0:
            raise InvalidQuantityError(request.target_quantity, field="target_quantity")
        if not request.source_items:
            raise ValidationError("source_items", "at least one raw material is required")

        required: dict[int, float] = {}
        for index, source in enumerate(request.source_items):
            if source.quantity <= 0:
                raise InvalidQuantityError(
                    source.quantity, field=f"source_items[{index}].quantity"
                )
            if source.product_id == request.target_product_id:
                raise ValidationError(
                    f"source_items[{index}].product_id",
                    "the target product cannot be one of its own sources",
                    source.product_id,
                )
            required[source.product_id] = required.get(source.product_id, 0.0) + source.quantity
        return required

    def to_response(self, result: RecordTransformationResult) -> RecordTransformationResponse:
        postings = list(result.consumed)
        if result.produced is not None:
            postings.append(result.produced)
        return RecordTransformationResponse(
            transformation=TransformationResponse.model_validate(result.transformation),
            postings=[posting_response(p) for p in postings],
        )
