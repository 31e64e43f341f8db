"""
Void Document Use Cases.

Deleting a purchase, transformation or waste record in the back office
voids it: every movement it posted that is still live gets a reversal, in
one transaction, and the document is stamped voided. Outputs are undone
before inputs, so a transformation gives its product back before its raw
materials return.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime

from stockledger.application.dto.requests import VoidDocumentRequest
from stockledger.application.dto.responses import MovementResponse, VoidDocumentResponse
from stockledger.application.use_cases.base import (
    InventoryUseCase,
    check_access,
    resolve_actor_id,
)
from stockledger.config import get_logger
from stockledger.core.entities.actor import Actor
from stockledger.core.entities.documents import (
    DocumentStatus,
    PurchaseInvoice,
    Transformation,
    WasteRecord,
)
from stockledger.core.entities.ledger import Movement, SourceType
from stockledger.core.exceptions import (
    DocumentAlreadyVoidedError,
    NotFoundError,
    PurchaseInvoiceNotFoundError,
    TransformationNotFoundError,
    WasteRecordNotFoundError,
)
from stockledger.core.interfaces.inventory_store import IInventorySession
from stockledger.core.services.access import Permission

logger = get_logger(__name__)

Document = PurchaseInvoice | Transformation | WasteRecord


@dataclass
class VoidDocumentResult:
    source_type: SourceType
    document: Document
    reversals: list[Movement] = field(default_factory=list)


class VoidDocumentUseCase(InventoryUseCase, ABC):
    """Shared void flow; subclasses name the document kind."""

    source_type: SourceType
    not_found: type[NotFoundError]

    @abstractmethod
    async def _load(self, session: IInventorySession, document_id: int) -> Document | None:
        """Fetch the document, or None when there is no such id."""

    async def execute(
        self,
        request: VoidDocumentRequest,
        actor: Actor | None = None,
    ) -> VoidDocumentResult:
        actor_id = resolve_actor_id(actor, request.actor_id)

        store = await self._get_inventory_store()
        async with store.transaction() as session:
            document = await self._load(session, request.document_id)
            if document is None:
                raise self.not_found(request.document_id)
            check_access(actor, Permission.VOID_DOCUMENT, document.branch_id)
            if document.status is DocumentStatus.VOIDED:
                raise DocumentAlreadyVoidedError(self.source_type.value, request.document_id)

            movements = await session.list_movements_for_source(
                self.source_type, request.document_id
            )
            live = [m for m in movements if m.reversal_of is None and m.reversed_by is None]
            live.sort(key=lambda m: (not m.is_inbound, m.id))

            reversals = []
            for movement in live:
                posting = await self._reverse(
                    session,
                    movement,
                    actor_id,
                    notes=f"void {self.source_type.value} {request.document_id}",
                )
                reversals.append(posting.movement)

            voided_at = datetime.now(UTC)
            await session.void_document(self.source_type, request.document_id, actor_id, voided_at)
            document.status = DocumentStatus.VOIDED
            document.voided_by = actor_id
            document.voided_at = voided_at

        logger.info(
            "document_voided",
            document_type=self.source_type.value,
            document_id=request.document_id,
            reversals=len(reversals),
        )
        return VoidDocumentResult(
            source_type=self.source_type,
            document=document,
            reversals=reversals,
        )

    def to_response(self, result: VoidDocumentResult) -> VoidDocumentResponse:
        return VoidDocumentResponse(
            document_type=result.source_type,
            document_id=result.document.id,
            status=result.document.status,
            voided_by=result.document.voided_by,
            voided_at=result.document.voided_at,
            reversals=[MovementResponse.model_validate(m) for m in result.reversals],
        )


class VoidPurchaseUseCase(VoidDocumentUseCase):
    source_type = SourceType.PURCHASE_INVOICE
    not_found = PurchaseInvoiceNotFoundError

    async def _load(self, session: IInventorySession, document_id: int) -> Document | None:
        return await session.get_purchase_invoice(document_id)


class VoidTransformationUseCase(VoidDocumentUseCase):
    source_type = SourceType.TRANSFORMATION
    not_found = TransformationNotFoundError

    async def _load(self, session: IInventorySession, document_id: int) -> Document | None:
        return await session.get_transformation(document_id)


class VoidWasteUseCase(VoidDocumentUseCase):
    source_type = SourceType.WASTE_RECORD
    not_found = WasteRecordNotFoundError

    async def _load(self, session: IInventorySession, document_id: int) -> Document | None:
        return await session.get_waste_record(document_id)
