from __future__ import annotations

from decimal import Decimal
from typing import List, Sequence

from shipquote.domain.models import RecipientEntry, round_weight, to_decimal

D = Decimal


def unit_weight(total_weight: D, total_quantity: int) -> D:
    """total_weight / total_quantity, 0 when there is no quantity (never divides by 0)."""
    if total_quantity <= 0:
        return D("0")
    return to_decimal(total_weight) / D(total_quantity)


class WeightAllocator:
    """
    Apportions an order's total weight over recipients by their quantity.

    Each weight = unit_weight * quantity, rounded to 3 dp half away from zero.
    Rounded weights are not re-balanced to hit the total exactly.
    """

    def allocate(
        self, total_weight: D, total_quantity: int, entries: Sequence[RecipientEntry]
    ) -> List[D]:
        unit = unit_weight(total_weight, total_quantity)
        return [round_weight(unit * D(e.quantity)) for e in entries]
