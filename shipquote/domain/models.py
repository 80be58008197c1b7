from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Union

D = Decimal

WEIGHT_QUANT = D("0.001")
MONEY_QUANT = D("0.01")

# RawString | Structured{postal, ...}
Address = Union[str, Dict[str, Any]]


def to_decimal(value: Any) -> D:
    if isinstance(value, D):
        return value
    return D(str(value))


def round_weight(value: D) -> D:
    return value.quantize(WEIGHT_QUANT, rounding=ROUND_HALF_UP)


def round_money(value: D) -> D:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RateRule:
    """
    One row of the rate grid.

    postal_prefix None = wildcard (any destination for this carrier/weight band).
    Price: flat_price wins; else weight * price_per_kg; both None -> 0.
    """

    carrier: str
    postal_prefix: Optional[str]
    min_weight: D
    max_weight: D
    flat_price: Optional[D] = None
    price_per_kg: Optional[D] = None

    @property
    def is_wildcard(self) -> bool:
        return self.postal_prefix is None

    def covers(self, weight: D) -> bool:
        return self.min_weight <= weight <= self.max_weight

    def price_for(self, weight: D) -> D:
        if self.flat_price is not None:
            return self.flat_price
        if self.price_per_kg is not None:
            return weight * self.price_per_kg
        return D("0")

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RateRule":
        prefix = d.get("postal_prefix")
        flat = d.get("flat_price")
        per_kg = d.get("price_per_kg")
        return cls(
            carrier=str(d["carrier"]),
            # converter output uses "" for "no prefix"
            postal_prefix=str(prefix) if prefix not in (None, "") else None,
            min_weight=to_decimal(d["min_weight"]),
            max_weight=to_decimal(d["max_weight"]),
            flat_price=to_decimal(flat) if flat is not None else None,
            price_per_kg=to_decimal(per_kg) if per_kg is not None else None,
        )


@dataclass(frozen=True)
class RecipientEntry:
    address: Address
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "quantity": self.quantity}


@dataclass(frozen=True)
class DistributionRecord:
    entries: List[RecipientEntry]
    total_quantity: int
    total_weight: D

    def to_dict(self) -> Dict[str, Any]:
        return {
            "list": [e.to_dict() for e in self.entries],
            "totalQuantity": self.total_quantity,
            "totalWeight": str(self.total_weight),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DistributionRecord":
        entries = [
            RecipientEntry(
                address=e.get("address", ""),
                quantity=int(e.get("quantity", e.get("qty", 0)) or 0),
            )
            for e in d.get("list") or []
        ]
        return cls(
            entries=entries,
            total_quantity=int(d.get("totalQuantity") or 0),
            total_weight=to_decimal(d.get("totalWeight") or "0"),
        )


@dataclass(frozen=True)
class RecipientQuote:
    address: Address
    postal: str
    quantity: int
    weight: D
    cost: D
    matched: bool = True


@dataclass(frozen=True)
class QuoteResult:
    """
    Per-line costs are rounded before summing; the total is rounded again after.
    The two are not forced to reconcile to the cent.
    """

    carrier: str
    currency: str
    per_recipient: List[RecipientQuote]
    total_cost: D
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carrier": self.carrier,
            "currency": self.currency,
            "perRecipient": [
                {
                    "address": r.address,
                    "postal": r.postal,
                    "quantity": r.quantity,
                    "weight": float(r.weight),
                    "cost": float(r.cost),
                    "matched": r.matched,
                }
                for r in self.per_recipient
            ],
            "totalCost": float(self.total_cost),
            "warnings": self.warnings,
        }
