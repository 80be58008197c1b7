from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, List, Sequence, Tuple

import yaml
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from shipquote.core.errors import StartupError
from shipquote.core.logging_config import logger
from shipquote.domain.models import RateRule

SCHEMA_PATH = Path(__file__).resolve().parents[1] / "data" / "rate_grid.schema.json"


class RuleTable:
    """
    Immutable rate grid, loaded once at process start.

    Order is preserved: it is the last tie-break of the resolver.
    """

    def __init__(self, rules: Sequence[RateRule]):
        self._rules: Tuple[RateRule, ...] = tuple(rules)

    def __iter__(self) -> Iterator[RateRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def for_carrier(self, carrier: str) -> List[RateRule]:
        return [r for r in self._rules if r.carrier == carrier]

    @classmethod
    def from_records(cls, records: Any) -> "RuleTable":
        """Validate raw records (schema + cross-field) and build the table."""
        with SCHEMA_PATH.open("r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            validate(instance=records, schema=schema)
        except SchemaValidationError as e:
            path = "/".join(str(p) for p in e.absolute_path)
            raise StartupError(
                f"Rate grid invalid at '{path}': {e.message}", {"path": path}
            ) from e

        rules: List[RateRule] = []
        for idx, raw in enumerate(records):
            rule = RateRule.from_dict(raw)
            if rule.max_weight < rule.min_weight:
                raise StartupError(
                    f"Rate grid row {idx}: max_weight < min_weight",
                    {"index": idx},
                )
            rules.append(rule)

        return cls(rules)

    @classmethod
    def from_file(cls, path: str) -> "RuleTable":
        """
        Load .json / .yaml / .yml. Fail fast: the process may not serve
        traffic without a rate grid.
        """
        grid_path = Path(path)
        if not grid_path.exists():
            raise StartupError(f"Rate grid not found: {path}", {"path": path})

        try:
            with grid_path.open("r", encoding="utf-8") as f:
                if grid_path.suffix.lower() in (".yaml", ".yml"):
                    records = yaml.safe_load(f)
                else:
                    records = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise StartupError(
                f"Rate grid unparseable: {path}", {"path": path, "detail": str(e)}
            ) from e

        table = cls.from_records(records)
        logger.info("rule_table_loaded", path=path, rules=len(table))
        return table
