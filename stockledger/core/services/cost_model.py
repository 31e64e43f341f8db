"""
Cost model: VAT and weighted moving-average valuation.

Pure functions, no I/O. Rates are fractions (0.15 == 15%); callers holding a
percentage divide it by 100 first.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stockledger.core.entities.ledger import Movement

DEFAULT_VAT_RATE = 0.15


def vat_amount(base: float, rate: float = DEFAULT_VAT_RATE) -> float:
    """VAT due on ``base`` at ``rate``."""
    return base * rate


def total_with_vat(base: float, rate: float = DEFAULT_VAT_RATE) -> float:
    """``base`` plus its VAT."""
    return base + vat_amount(base, rate)


def blend_average_cost(
    current_qty: float,
    current_avg_cost: float,
    incoming_qty: float,
    incoming_cost: float,
) -> float:
    """
    Quantity-weighted average of the stock on hand and an incoming lot.

    Returns 0 on a cold ledger (both quantities zero). Blending in a zero
    quantity returns the current average unchanged.
    """
    if current_qty == 0 and incoming_qty == 0:
        return 0.0
    if incoming_qty == 0:
        return current_avg_cost
    if current_qty == 0:
        return incoming_cost
    total_value = current_qty * current_avg_cost + incoming_qty * incoming_cost
    return total_value / (current_qty + incoming_qty)


def apply_delta(
    quantity: float,
    average_cost: float,
    delta: float,
    unit_cost: float,
) -> tuple[float, float]:
    """
    One valuation step.

    Inbound deltas blend into the average; outbound deltas are consumed at
    the current average and leave it untouched.
    """
    if delta > 0:
        return quantity + delta, blend_average_cost(quantity, average_cost, delta, unit_cost)
    return quantity + delta, average_cost


def fold_movements(movements: "Iterable[Movement]") -> tuple[float, float]:
    """Replay a movement history (in commit order) from an empty ledger."""
    quantity, average_cost = 0.0, 0.0
    for movement in movements:
        quantity, average_cost = apply_delta(
            quantity, average_cost, movement.quantity_delta, movement.unit_cost
        )
    return quantity, average_cost
