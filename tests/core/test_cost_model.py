"""Tests for VAT and moving-average valuation."""

import pytest

from stockledger.core.entities.ledger import Movement, MovementKind
from stockledger.core.services.cost_model import (
    DEFAULT_VAT_RATE,
    apply_delta,
    blend_average_cost,
    fold_movements,
    total_with_vat,
    vat_amount,
)


def _movement(delta: float, unit_cost: float) -> Movement:
    kind = MovementKind.PURCHASE_RECEIPT if delta > 0 else MovementKind.WASTE_DEDUCTION
    return Movement(product_id=1, branch_id=1, kind=kind, quantity_delta=delta, unit_cost=unit_cost)


class TestVat:
    def test_default_rate(self):
        assert DEFAULT_VAT_RATE == 0.15
        assert vat_amount(100.0) == pytest.approx(15.0)

    def test_total_with_vat(self):
        assert total_with_vat(50.0) == pytest.approx(57.5)
        assert total_with_vat(50.0, 0.0) == 50.0

    def test_custom_rate(self):
        assert vat_amount(200.0, 0.05) == pytest.approx(10.0)


class TestBlendAverageCost:
    def test_cold_ledger(self):
        assert blend_average_cost(0, 0, 0, 0) == 0.0

    def test_first_receipt_takes_incoming_cost(self):
        assert blend_average_cost(0, 0, 10, 5.0) == 5.0

    def test_zero_incoming_keeps_average(self):
        assert blend_average_cost(10, 4.0, 0, 99.0) == 4.0

    def test_weighted_blend(self):
        assert blend_average_cost(50, 4.0, 50, 6.0) == pytest.approx(5.0)

    def test_uneven_weights(self):
        # (30 * 2 + 10 * 6) / 40
        assert blend_average_cost(30, 2.0, 10, 6.0) == pytest.approx(3.0)


class TestApplyDelta:
    def test_inbound_blends(self):
        assert apply_delta(10, 2.0, 10, 4.0) == (20, pytest.approx(3.0))

    def test_outbound_keeps_average(self):
        assert apply_delta(10, 2.0, -4, 999.0) == (6, 2.0)


class TestFoldMovements:
    def test_empty_history(self):
        assert fold_movements([]) == (0.0, 0.0)

    def test_replays_in_order(self):
        movements = [_movement(50, 4.0), _movement(50, 6.0), _movement(-20, 5.0)]
        quantity, average_cost = fold_movements(movements)
        assert quantity == pytest.approx(80)
        assert average_cost == pytest.approx(5.0)

    def test_refill_after_empty(self):
        movements = [_movement(10, 3.0), _movement(-10, 3.0), _movement(5, 7.0)]
        quantity, average_cost = fold_movements(movements)
        assert quantity == pytest.approx(5)
        assert average_cost == pytest.approx(7.0)
