"""Unit tests for StockLedger against a mocked session."""

from unittest.mock import AsyncMock

import pytest

from stockledger.core.entities.ledger import LedgerEntry, Movement, MovementKind, SourceType
from stockledger.core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    ValidationError,
)
from stockledger.core.services.stock_ledger import StockLedger


def _session(entry: LedgerEntry | None = None) -> AsyncMock:
    session = AsyncMock()
    session.get_entry.return_value = entry

    async def insert_entry(e):
        e.id = 1
        return e

    async def add_movement(m):
        m.id = 100
        return m

    session.insert_entry.side_effect = insert_entry
    session.update_entry.side_effect = lambda e: e
    session.add_movement.side_effect = add_movement
    return session


@pytest.fixture
def ledger():
    return StockLedger()


class TestGetOrCreate:
    async def test_creates_zero_entry(self, ledger):
        session = _session(None)
        entry = await ledger.get_or_create(session, 3, 1)
        assert entry.id == 1
        assert entry.quantity == 0
        session.insert_entry.assert_awaited_once()

    async def test_returns_existing(self, ledger):
        existing = LedgerEntry(id=7, product_id=3, branch_id=1, quantity=4)
        session = _session(existing)
        assert await ledger.get_or_create(session, 3, 1) is existing
        session.insert_entry.assert_not_awaited()

    async def test_available(self, ledger):
        assert await ledger.available(_session(None), 3, 1) == 0.0
        entry = LedgerEntry(id=7, product_id=3, branch_id=1, quantity=4)
        assert await ledger.available(_session(entry), 3, 1) == 4


class TestPositiveMovement:
    async def test_first_receipt(self, ledger):
        session = _session(None)
        posting = await ledger.apply_positive_movement(
            session,
            3,
            1,
            10,
            5.0,
            kind=MovementKind.PURCHASE_RECEIPT,
            source_type=SourceType.PURCHASE_INVOICE,
            source_id=9,
        )
        assert posting.entry.quantity == 10
        assert posting.entry.average_cost == 5.0
        assert posting.movement.id == 100
        assert posting.movement.quantity_delta == 10
        assert posting.movement.source_id == 9
        assert posting.movement.created_at == posting.entry.updated_at

    async def test_blends_average(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=50, average_cost=4.0)
        posting = await ledger.apply_positive_movement(
            _session(entry), 3, 1, 50, 6.0, kind=MovementKind.PURCHASE_RECEIPT
        )
        assert posting.entry.quantity == 100
        assert posting.entry.average_cost == pytest.approx(5.0)

    @pytest.mark.parametrize("qty", [0, -1])
    async def test_rejects_non_positive_quantity(self, ledger, qty):
        session = _session(None)
        with pytest.raises(InvalidQuantityError):
            await ledger.apply_positive_movement(
                session, 3, 1, qty, 1.0, kind=MovementKind.PURCHASE_RECEIPT
            )
        session.add_movement.assert_not_awaited()

    async def test_rejects_negative_cost(self, ledger):
        with pytest.raises(InvalidQuantityError):
            await ledger.apply_positive_movement(
                _session(None), 3, 1, 1, -0.5, kind=MovementKind.PURCHASE_RECEIPT
            )


class TestNegativeMovement:
    async def test_deducts_at_average_cost(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=20, average_cost=3.0)
        posting = await ledger.apply_negative_movement(
            _session(entry), 3, 1, 5, kind=MovementKind.WASTE_DEDUCTION
        )
        assert posting.entry.quantity == 15
        assert posting.entry.average_cost == 3.0
        assert posting.movement.quantity_delta == -5
        assert posting.movement.unit_cost == 3.0

    async def test_explicit_unit_cost(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=20, average_cost=3.0)
        posting = await ledger.apply_negative_movement(
            _session(entry), 3, 1, 5, kind=MovementKind.REVERSAL, unit_cost=2.0
        )
        assert posting.movement.unit_cost == 2.0
        assert posting.entry.average_cost == 3.0

    async def test_insufficient_stock(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=5, average_cost=3.0)
        session = _session(entry)
        with pytest.raises(InsufficientStockError) as exc:
            await ledger.apply_negative_movement(
                session, 3, 1, 8, kind=MovementKind.WASTE_DEDUCTION
            )
        assert exc.value.details["available"] == 5
        session.update_entry.assert_not_awaited()
        session.add_movement.assert_not_awaited()

    async def test_missing_entry_is_insufficient(self, ledger):
        with pytest.raises(InsufficientStockError):
            await ledger.apply_negative_movement(
                _session(None), 3, 1, 1, kind=MovementKind.WASTE_DEDUCTION
            )

    async def test_takes_everything_without_dust(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=0.3, average_cost=1.0)
        posting = await ledger.apply_negative_movement(
            _session(entry), 3, 1, 0.1 + 0.2, kind=MovementKind.WASTE_DEDUCTION
        )
        assert posting.entry.quantity == 0.0


class TestSetAbsolute:
    async def test_writes_signed_difference(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=15, average_cost=3.0)
        posting = await ledger.set_absolute(_session(entry), 3, 1, 12, "recount")
        assert posting.entry.quantity == 12
        assert posting.entry.average_cost == 3.0
        assert posting.movement.kind is MovementKind.MANUAL_ADJUSTMENT
        assert posting.movement.quantity_delta == -3
        assert posting.movement.notes == "recount"

    async def test_no_change_writes_nothing(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=15, average_cost=3.0)
        session = _session(entry)
        posting = await ledger.set_absolute(session, 3, 1, 15, "recount")
        assert posting.movement is None
        session.add_movement.assert_not_awaited()

    async def test_rejects_negative(self, ledger):
        with pytest.raises(InvalidQuantityError):
            await ledger.set_absolute(_session(None), 3, 1, -1, "recount")


class TestApplyAdjustment:
    async def test_shortfall_keeps_later_stock(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=20, average_cost=3.0)
        posting = await ledger.apply_adjustment(
            _session(entry), 3, 1, -3, "recount", kind=MovementKind.AUDIT_ADJUSTMENT
        )
        assert posting.entry.quantity == 17
        assert posting.entry.average_cost == 3.0
        assert posting.movement.quantity_delta == -3
        assert posting.movement.notes == "recount"

    async def test_surplus_valued_at_average(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=10, average_cost=4.0)
        posting = await ledger.apply_adjustment(
            _session(entry), 3, 1, 2, "recount", kind=MovementKind.AUDIT_ADJUSTMENT
        )
        assert posting.entry.quantity == 12
        assert posting.entry.average_cost == pytest.approx(4.0)
        assert posting.movement.unit_cost == 4.0

    async def test_shortfall_beyond_stock(self, ledger):
        entry = LedgerEntry(id=1, product_id=3, branch_id=1, quantity=2, average_cost=4.0)
        with pytest.raises(InsufficientStockError):
            await ledger.apply_adjustment(
                _session(entry), 3, 1, -5, "recount", kind=MovementKind.AUDIT_ADJUSTMENT
            )

    async def test_rejects_zero(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.apply_adjustment(
                _session(None), 3, 1, 0, "recount", kind=MovementKind.AUDIT_ADJUSTMENT
            )


class TestVerify:
    async def test_reports_drift(self, ledger):
        good = LedgerEntry(id=1, product_id=1, branch_id=1, quantity=10, average_cost=5.0)
        bad = LedgerEntry(id=2, product_id=2, branch_id=1, quantity=99, average_cost=5.0)
        session = AsyncMock()
        session.list_entries.return_value = [good, bad]

        def movements(product_id, branch_id):
            return [
                Movement(
                    product_id=product_id,
                    branch_id=branch_id,
                    kind=MovementKind.PURCHASE_RECEIPT,
                    quantity_delta=10,
                    unit_cost=5.0,
                )
            ]

        session.list_movements.side_effect = movements

        discrepancies = await ledger.verify(session, branch_id=1)

        assert len(discrepancies) == 1
        assert discrepancies[0].product_id == 2
        assert discrepancies[0].ledger_quantity == 99
        assert discrepancies[0].folded_quantity == 10
        assert discrepancies[0].movement_count == 1
        session.list_entries.assert_awaited_once_with(branch_id=1)
