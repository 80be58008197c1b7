from __future__ import annotations

import json
from decimal import Decimal

import pytest
import yaml

from shipquote.core.errors import StartupError
from shipquote.core.settings import DEFAULT_RATE_GRID_PATH
from shipquote.engine.rule_table import RuleTable


def test_load_json(tmp_path, grid_records):
    p = tmp_path / "rateGrid.json"
    p.write_text(json.dumps(grid_records), encoding="utf-8")

    table = RuleTable.from_file(str(p))

    assert len(table) == 2
    first = list(table)[0]
    assert first.postal_prefix == "75"
    assert first.flat_price == Decimal("10")


def test_load_yaml(tmp_path, grid_records):
    p = tmp_path / "rate_grid.yaml"
    p.write_text(yaml.safe_dump(grid_records), encoding="utf-8")

    table = RuleTable.from_file(str(p))
    assert [r.postal_prefix for r in table] == ["75", None]


def test_packaged_grid_loads():
    assert len(RuleTable.from_file(DEFAULT_RATE_GRID_PATH)) > 0


def test_missing_file_fails_fast(tmp_path):
    with pytest.raises(StartupError):
        RuleTable.from_file(str(tmp_path / "nope.json"))


def test_unparseable_file_fails_fast(tmp_path):
    p = tmp_path / "rateGrid.json"
    p.write_text("[{not json", encoding="utf-8")
    with pytest.raises(StartupError):
        RuleTable.from_file(str(p))


def test_schema_violation_fails_fast():
    with pytest.raises(StartupError) as ei:
        RuleTable.from_records(
            [{"carrier": "DHL", "min_weight": -1, "max_weight": 5, "flat_price": 1}]
        )
    assert ei.value.code == "STARTUP_ERROR"


def test_not_a_list_fails_fast():
    with pytest.raises(StartupError):
        RuleTable.from_records({"carrier": "DHL"})


def test_inverted_band_fails_fast():
    with pytest.raises(StartupError) as ei:
        RuleTable.from_records(
            [{"carrier": "DHL", "min_weight": 5, "max_weight": 1, "flat_price": 1}]
        )
    assert ei.value.meta == {"index": 0}


def test_empty_prefix_is_wildcard():
    table = RuleTable.from_records(
        [{"carrier": "DHL", "postal_prefix": "", "min_weight": 0, "max_weight": 1, "flat_price": 3}]
    )
    assert list(table)[0].is_wildcard


def test_table_is_read_only(rule_table):
    rule = list(rule_table)[0]
    with pytest.raises(AttributeError):
        rule.flat_price = Decimal("1")  # frozen dataclass
    assert not hasattr(rule_table, "append")
