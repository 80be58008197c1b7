from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from shipquote.core.errors import NoRateMatch
from shipquote.core.logging_config import logger
from shipquote.domain.models import (
    QuoteResult,
    RecipientEntry,
    RecipientQuote,
    round_money,
    to_decimal,
)
from shipquote.domain.postal import extract_postal, postal_prefix
from shipquote.engine.allocator import WeightAllocator
from shipquote.engine.resolver import RateResolver

D = Decimal

POLICY_ZERO_WITH_WARNING = "zero_with_warning"
POLICY_FAIL = "fail"
NO_RATE_POLICIES = (POLICY_ZERO_WITH_WARNING, POLICY_FAIL)


@dataclass
class QuoteContext:
    """
    Per-quote execution context (stateless outside this object).

    - carrier / currency / prefix_length for this quote
    - warnings accumulator, exposed on the QuoteResult
    """

    carrier: str
    currency: str = "EUR"
    prefix_length: int = 2
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def warn(self, code: str, message: str, **meta: Any) -> None:
        self.warnings.append({"code": code, "message": message, "meta": meta})


class CostAggregator:
    """
    Drives WeightAllocator + RateResolver over the recipients of one order.

    NoRateMatch policy is decided here and only here:
      - zero_with_warning: line cost 0.00, matched=False, NO_RATE_MATCH warning
      - fail: the first unmatched recipient raises NoRateMatch and the whole
        quote is rejected (HTTP 422); no partial result is returned
    """

    def __init__(
        self,
        resolver: RateResolver,
        allocator: WeightAllocator | None = None,
        no_rate_policy: str = POLICY_ZERO_WITH_WARNING,
    ):
        if no_rate_policy not in NO_RATE_POLICIES:
            raise ValueError(f"Unknown no-rate policy: {no_rate_policy}")
        self.resolver = resolver
        self.allocator = allocator or WeightAllocator()
        self.no_rate_policy = no_rate_policy

    def quote(
        self,
        recipients: Sequence[RecipientEntry],
        total_weight: Any,
        total_quantity: int,
        ctx: QuoteContext,
    ) -> QuoteResult:
        total_weight = to_decimal(total_weight)
        if total_quantity <= 0 or total_weight <= 0:
            ctx.warn(
                "ZERO_WEIGHT",
                "No order totals available; weights set to 0. Resupply totalWeight/totalQuantity.",
                total_weight=str(total_weight),
                total_quantity=total_quantity,
            )

        weights = self.allocator.allocate(total_weight, total_quantity, recipients)

        lines: List[RecipientQuote] = []
        total = D("0")
        for entry, weight in zip(recipients, weights):
            postal = extract_postal(entry.address)
            prefix = postal_prefix(postal, ctx.prefix_length)
            res = self.resolver.resolve(ctx.carrier, prefix, weight)

            if res.matched:
                cost = round_money(res.price)
            elif self.no_rate_policy == POLICY_FAIL:
                raise NoRateMatch(
                    f"No rate for carrier={ctx.carrier}, prefix={prefix!r}, weight={weight}",
                    {"carrier": ctx.carrier, "prefix": prefix, "weight": str(weight)},
                )
            else:
                cost = D("0.00")
                ctx.warn(
                    "NO_RATE_MATCH",
                    f"No rate for prefix {prefix!r} at {weight}; line priced 0.00.",
                    carrier=ctx.carrier,
                    prefix=prefix,
                    weight=str(weight),
                    address=entry.address,
                )

            lines.append(
                RecipientQuote(
                    address=entry.address,
                    postal=postal,
                    quantity=entry.quantity,
                    weight=weight,
                    cost=cost,
                    matched=res.matched,
                )
            )
            total += cost

        result = QuoteResult(
            carrier=ctx.carrier,
            currency=ctx.currency,
            per_recipient=lines,
            total_cost=round_money(total),
            warnings=ctx.warnings,
        )
        logger.info(
            "quote_computed",
            carrier=ctx.carrier,
            recipients=len(lines),
            total_cost=str(result.total_cost),
            warnings=len(ctx.warnings),
        )
        return result
