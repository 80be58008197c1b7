from __future__ import annotations

from decimal import Decimal

from shipquote.domain.models import RecipientEntry
from shipquote.engine.allocator import WeightAllocator, unit_weight

D = Decimal


def test_allocate_proportional_to_quantity():
    entries = [RecipientEntry("a", 1000), RecipientEntry("b", 750)]
    weights = WeightAllocator().allocate(D("47.157"), 1750, entries)

    # unit ~0.0269469 kg; 26.94686 -> 26.947, 20.21014 -> 20.210
    assert weights == [D("26.947"), D("20.210")]
    assert abs(sum(weights) - D("47.157")) <= D("0.001")


def test_zero_quantity_never_divides():
    assert unit_weight(D("10"), 0) == D("0")
    weights = WeightAllocator().allocate(D("10"), 0, [RecipientEntry("a", 3)])
    assert weights == [D("0.000")]


def test_rounds_half_away_from_zero():
    # 0.0025 * 1 -> 0.003 (banker's rounding would give 0.002)
    weights = WeightAllocator().allocate(D("0.0025"), 1, [RecipientEntry("a", 1)])
    assert weights == [D("0.003")]


def test_zero_quantity_entry_gets_zero_weight():
    weights = WeightAllocator().allocate(D("10"), 5, [RecipientEntry("a", 0)])
    assert weights == [D("0.000")]
