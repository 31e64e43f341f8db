"""Unit tests for the inventory audit use cases."""

from datetime import date

import pytest

from stockledger.application.dto.requests import (
    AuditActionRequest,
    CreateAuditRequest,
    RecordAuditCountRequest,
)
from stockledger.application.use_cases.complete_inventory_audit import (
    CompleteInventoryAuditUseCase,
)
from stockledger.application.use_cases.create_inventory_audit import (
    CreateInventoryAuditUseCase,
)
from stockledger.application.use_cases.record_audit_count import RecordAuditCountUseCase
from stockledger.core.entities.actor import Actor, Role
from stockledger.core.entities.audit import AuditStatus, InventoryAudit, InventoryAuditItem
from stockledger.core.entities.ledger import MovementKind, SourceType
from stockledger.core.exceptions import (
    AccessDeniedError,
    AuditItemNotFoundError,
    DuplicateAuditError,
    IncompleteAuditError,
    InvalidAuditTransitionError,
    InvalidQuantityError,
)

AUDIT_DAY = date(2024, 5, 1)


def _audit(status: AuditStatus, *items: InventoryAuditItem) -> InventoryAudit:
    return InventoryAudit(id=1, branch_id=1, audit_date=AUDIT_DAY, status=status, items=list(items))


class TestCreateInventoryAuditUseCase:
    @pytest.fixture
    def use_case(self, mock_inventory_store, mock_ledger):
        return CreateInventoryAuditUseCase(inventory_store=mock_inventory_store, ledger=mock_ledger)

    async def test_creates_draft(self, use_case, session):
        session.find_open_audit.return_value = None
        session.add_audit.side_effect = lambda audit: audit

        audit = await use_case.execute(CreateAuditRequest(branch_id=1, audit_date=AUDIT_DAY))

        assert audit.status is AuditStatus.DRAFT

    async def test_duplicate_for_same_day(self, use_case, session):
        session.find_open_audit.return_value = _audit(AuditStatus.IN_PROGRESS)

        with pytest.raises(DuplicateAuditError) as exc:
            await use_case.execute(CreateAuditRequest(branch_id=1, audit_date=AUDIT_DAY))

        assert exc.value.details["existing_id"] == 1
        session.add_audit.assert_not_awaited()


class TestRecordAuditCountUseCase:
    @pytest.fixture
    def use_case(self, mock_inventory_store, mock_ledger):
        return RecordAuditCountUseCase(inventory_store=mock_inventory_store, ledger=mock_ledger)

    async def test_first_count_starts_draft(self, use_case, session):
        audit = _audit(AuditStatus.DRAFT, InventoryAuditItem(id=7, product_id=3, expected_quantity=15))
        session.get_audit.return_value = audit

        item = await use_case.execute(
            RecordAuditCountRequest(audit_id=1, item_id=7, actual_quantity=12, notes="shelf 2")
        )

        assert item.difference == -3
        assert item.notes == "shelf 2"
        assert audit.status is AuditStatus.IN_PROGRESS
        session.update_audit_item.assert_awaited_once_with(item)

    async def test_unknown_item(self, use_case, session):
        session.get_audit.return_value = _audit(AuditStatus.IN_PROGRESS)
        with pytest.raises(AuditItemNotFoundError):
            await use_case.execute(RecordAuditCountRequest(audit_id=1, item_id=99, actual_quantity=1))

    async def test_closed_audit(self, use_case, session):
        session.get_audit.return_value = _audit(
            AuditStatus.COMPLETED, InventoryAuditItem(id=7, product_id=3, expected_quantity=15)
        )
        with pytest.raises(InvalidAuditTransitionError):
            await use_case.execute(RecordAuditCountRequest(audit_id=1, item_id=7, actual_quantity=1))

    async def test_negative_count(self, use_case):
        with pytest.raises(InvalidQuantityError):
            await use_case.execute(RecordAuditCountRequest(audit_id=1, item_id=7, actual_quantity=-1))


class TestCompleteInventoryAuditUseCase:
    @pytest.fixture
    def use_case(self, mock_inventory_store, mock_ledger):
        return CompleteInventoryAuditUseCase(inventory_store=mock_inventory_store, ledger=mock_ledger)

    async def test_adjusts_only_differences(self, use_case, session, mock_ledger):
        short = InventoryAuditItem(id=1, product_id=3, expected_quantity=15)
        short.record_count(12)
        exact = InventoryAuditItem(id=2, product_id=4, expected_quantity=5)
        exact.record_count(5)
        session.get_audit.return_value = _audit(AuditStatus.IN_PROGRESS, short, exact)

        result = await use_case.execute(AuditActionRequest(audit_id=1, actor_id="mgr"))

        assert result.audit.status is AuditStatus.COMPLETED
        assert result.audit.completed_by == "mgr"
        assert mock_ledger.apply_adjustment.await_count == 1
        call = mock_ledger.apply_adjustment.await_args
        assert call.args[1:4] == (3, 1, -3)
        assert call.kwargs["kind"] is MovementKind.AUDIT_ADJUSTMENT
        assert call.kwargs["source_type"] is SourceType.INVENTORY_AUDIT
        session.update_audit.assert_awaited_once()

    async def test_uncounted_items_block_completion(self, use_case, session, mock_ledger):
        session.get_audit.return_value = _audit(
            AuditStatus.IN_PROGRESS, InventoryAuditItem(id=1, product_id=3, expected_quantity=15)
        )
        with pytest.raises(IncompleteAuditError):
            await use_case.execute(AuditActionRequest(audit_id=1))
        mock_ledger.apply_adjustment.assert_not_awaited()

    async def test_draft_cannot_complete(self, use_case, session):
        session.get_audit.return_value = _audit(AuditStatus.DRAFT)
        with pytest.raises(InvalidAuditTransitionError):
            await use_case.execute(AuditActionRequest(audit_id=1))

    async def test_users_cannot_close(self, use_case, session):
        session.get_audit.return_value = _audit(AuditStatus.IN_PROGRESS)
        actor = Actor(actor_id="clerk", role=Role.USER, branch_id=1)
        with pytest.raises(AccessDeniedError):
            await use_case.execute(AuditActionRequest(audit_id=1), actor)
