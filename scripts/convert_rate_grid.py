# scripts/convert_rate_grid.py
"""
Convert the carrier's .xlsx rate sheet into the JSON rate grid.

Sheet layout (first sheet):
  row 1, columns B..  upper weight limit of each band
  row 9, columns B..  flat price of that band

Bands are contiguous: [0, l1], [l1 + 0.0001, l2], ...

    python -m scripts.convert_rate_grid rateGrid.xlsx -o shipquote/data/rate_grid.json
"""
from __future__ import annotations

import argparse
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from openpyxl import load_workbook

from shipquote.engine.rule_table import RuleTable

D = Decimal

LIMITS_ROW = 1
PRICES_ROW = 9
BAND_GAP = D("0.0001")


def _to_decimal(v: Any) -> Optional[D]:
    if v is None or (isinstance(v, str) and v.strip() == ""):
        return None
    try:
        return D(str(v).strip().replace(",", "."))
    except InvalidOperation:
        return None


def read_sheet(path: Path) -> Tuple[List[D], List[D]]:
    """(weight limits, prices) from the first sheet, skipping blank/non-numeric cells."""
    wb = load_workbook(filename=str(path), data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = list(ws.iter_rows(min_row=1, max_row=PRICES_ROW, values_only=True))
    finally:
        wb.close()

    def numeric_cells(row_idx: int) -> List[D]:
        if len(rows) < row_idx:
            return []
        out = []
        for cell in rows[row_idx - 1][1:]:
            value = _to_decimal(cell)
            if value is not None:
                out.append(value)
        return out

    return numeric_cells(LIMITS_ROW), numeric_cells(PRICES_ROW)


def build_rate_grid(
    weight_limits: Sequence[D],
    prices: Sequence[D],
    *,
    carrier: str = "DHL",
    postal_prefix: Optional[str] = None,
) -> List[Dict[str, Any]]:
    grid: List[Dict[str, Any]] = []
    previous = D("0")
    for i, limit in enumerate(weight_limits):
        price = prices[i] if i < len(prices) else D("0")
        grid.append(
            {
                "carrier": carrier,
                "postal_prefix": postal_prefix,
                "min_weight": float(previous),
                "max_weight": float(limit),
                "flat_price": float(price),
                "price_per_kg": None,
            }
        )
        previous = limit + BAND_GAP
    return grid


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="xlsx rate sheet -> JSON rate grid")
    parser.add_argument("xlsx", type=Path)
    parser.add_argument("-o", "--output", type=Path, default=Path("rate_grid.json"))
    parser.add_argument("--carrier", default="DHL")
    parser.add_argument("--postal-prefix", default=None)
    args = parser.parse_args(argv)

    limits, prices = read_sheet(args.xlsx)
    grid = build_rate_grid(
        limits, prices, carrier=args.carrier, postal_prefix=args.postal_prefix
    )

    # same validation the service runs at startup
    RuleTable.from_records(grid)

    args.output.write_text(json.dumps(grid, indent=2), encoding="utf-8")
    print(f"rate grid written: {args.output} ({len(grid)} bands)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
