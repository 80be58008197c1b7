from __future__ import annotations

from decimal import Decimal

import pytest

from shipquote.engine.resolver import RateResolver
from shipquote.engine.rule_table import RuleTable

D = Decimal


def _rule(prefix, lo, hi, flat=None, per_kg=None, carrier="DHL"):
    return {
        "carrier": carrier,
        "postal_prefix": prefix,
        "min_weight": lo,
        "max_weight": hi,
        "flat_price": flat,
        "price_per_kg": per_kg,
    }


def _resolver(*rules):
    return RateResolver(RuleTable.from_records(list(rules)))


def test_specific_beats_wildcard(resolver):
    res = resolver.resolve("DHL", "75", D("3"))
    assert res.matched
    assert res.price == D("10")


def test_wildcard_fallback(resolver):
    res = resolver.resolve("DHL", "69", D("3"))
    assert res.price == D("15")
    assert res.rule.is_wildcard


@pytest.mark.parametrize("weight", ["2", "4"])
def test_band_boundaries_inclusive(weight):
    r = _resolver(_rule("75", 2, 4, flat=7))
    res = r.resolve("DHL", "75", D(weight))
    assert res.matched
    assert res.price == D("7")


def test_just_outside_band_does_not_match():
    r = _resolver(_rule("75", 2, 4, flat=7))
    assert not r.resolve("DHL", "75", D("4.0001")).matched
    assert not r.resolve("DHL", "75", D("1.999")).matched


def test_specific_outranks_narrower_wildcard():
    r = _resolver(
        _rule(None, 2.9, 3.1, flat=1),  # much narrower band
        _rule("7", 0, 100, flat=50),
    )
    assert r.resolve("DHL", "75", D("3")).price == D("50")


def test_longest_prefix_wins():
    r = _resolver(_rule("7", 0, 10, flat=70), _rule("75", 0, 10, flat=75))
    assert r.resolve("DHL", "75001", D("1")).price == D("75")


def test_highest_min_weight_wins_within_same_prefix():
    r = _resolver(_rule("75", 0, 10, flat=1), _rule("75", 2, 10, flat=2))
    assert r.resolve("DHL", "75", D("3")).price == D("2")


def test_residual_tie_keeps_table_order():
    r = _resolver(_rule("75", 0, 10, flat=1), _rule("75", 0, 20, flat=2))
    assert r.resolve("DHL", "75", D("3")).price == D("1")


def test_empty_prefix_matches_wildcards_only():
    r = _resolver(_rule("75", 0, 10, flat=1))
    assert not r.resolve("DHL", "", D("1")).matched

    r = _resolver(_rule("75", 0, 10, flat=1), _rule(None, 0, 10, flat=9))
    assert r.resolve("DHL", "", D("1")).price == D("9")


def test_rule_prefix_longer_than_destination_prefix():
    r = _resolver(_rule("750", 0, 10, flat=1))
    assert not r.resolve("DHL", "75", D("1")).matched


def test_other_carrier_ignored():
    r = _resolver(_rule(None, 0, 10, flat=1, carrier="UPS"))
    assert not r.resolve("DHL", "75", D("1")).matched


def test_price_per_kg():
    r = _resolver(_rule(None, 0, 10, per_kg=2.5))
    assert r.resolve("DHL", "75", D("3.2")).price == D("8.00")


def test_flat_price_wins_over_per_kg():
    r = _resolver(_rule(None, 0, 10, flat=4, per_kg=2.5))
    assert r.resolve("DHL", "75", D("3")).price == D("4")


def test_no_price_fields_priced_zero():
    r = _resolver(_rule(None, 0, 10))
    res = r.resolve("DHL", "75", D("3"))
    assert res.matched
    assert res.price == D("0")


def test_no_match_is_tagged_not_zero(resolver):
    res = resolver.resolve("DHL", "75", D("6"))
    assert not res.matched
    assert res.rule is None
