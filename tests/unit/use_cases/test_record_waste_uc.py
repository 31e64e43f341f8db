"""Unit tests for RecordWasteUseCase."""

import pytest

from stockledger.application.dto.requests import RecordWasteRequest
from stockledger.application.use_cases.record_waste import RecordWasteUseCase
from stockledger.core.entities.documents import WasteReason
from stockledger.core.entities.ledger import LedgerEntry, MovementKind, SourceType
from stockledger.core.exceptions import InsufficientStockError, InvalidQuantityError


@pytest.fixture
def use_case(mock_inventory_store, mock_ledger):
    return RecordWasteUseCase(inventory_store=mock_inventory_store, ledger=mock_ledger)


def _request(quantity: float = 5) -> RecordWasteRequest:
    return RecordWasteRequest(
        branch_id=1, product_id=3, quantity=quantity, reason=WasteReason.DAMAGE
    )


class TestRecordWasteUseCase:
    async def test_costs_at_average(self, use_case, session, mock_ledger):
        session.get_entry.return_value = LedgerEntry(
            id=1, product_id=3, branch_id=1, quantity=20, average_cost=3.0
        )

        async def add_record(record):
            record.id = 8
            return record

        session.add_waste_record.side_effect = add_record

        result = await use_case.execute(_request())

        assert result.record.cost == pytest.approx(15.0)
        call = mock_ledger.apply_negative_movement.await_args
        assert call.args[1:] == (3, 1, 5)
        assert call.kwargs["kind"] is MovementKind.WASTE_DEDUCTION
        assert call.kwargs["source_type"] is SourceType.WASTE_RECORD
        assert call.kwargs["source_id"] == 8
        assert call.kwargs["notes"] == "damage"

    async def test_insufficient_stock_writes_nothing(self, use_case, session, mock_ledger):
        session.get_entry.return_value = LedgerEntry(
            id=1, product_id=3, branch_id=1, quantity=5, average_cost=3.0
        )

        with pytest.raises(InsufficientStockError):
            await use_case.execute(_request(8))

        session.add_waste_record.assert_not_awaited()
        mock_ledger.apply_negative_movement.assert_not_awaited()

    async def test_no_entry_is_insufficient(self, use_case, session):
        session.get_entry.return_value = None
        with pytest.raises(InsufficientStockError):
            await use_case.execute(_request(1))

    async def test_rejects_zero_quantity(self, use_case, mock_inventory_store):
        with pytest.raises(InvalidQuantityError):
            await use_case.execute(_request(0))
        mock_inventory_store.transaction.assert_not_called()
