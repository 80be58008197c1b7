from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from shipquote.core.logging_config import logger
from shipquote.domain.models import RateRule
from shipquote.engine.rule_table import RuleTable

D = Decimal


@dataclass(frozen=True)
class Resolution:
    """
    Tagged result of a lookup: a matched rule + price, or no match.
    "No rule found" is never folded into a zero price here; the aggregator
    owns that policy.
    """

    rule: Optional[RateRule]
    price: D = D("0")

    @property
    def matched(self) -> bool:
        return self.rule is not None

    @staticmethod
    def no_match() -> "Resolution":
        return Resolution(rule=None)


def _specificity(rule: RateRule) -> Tuple[int, int, D]:
    # specific > wildcard, then longest prefix, then narrowest band (highest min_weight)
    prefix_len = len(rule.postal_prefix) if rule.postal_prefix is not None else 0
    return (0 if rule.is_wildcard else 1, prefix_len, rule.min_weight)


class RateResolver:
    def __init__(self, table: RuleTable):
        self.table = table

    def candidates(self, carrier: str, prefix: str, weight: D) -> List[RateRule]:
        """All rules for this carrier whose prefix and weight band both apply."""
        out: List[RateRule] = []
        for rule in self.table.for_carrier(carrier):
            if rule.is_wildcard:
                prefix_ok = True
            else:
                # empty destination prefix matches no specific rule
                prefix_ok = bool(prefix) and prefix.startswith(rule.postal_prefix)
            if prefix_ok and rule.covers(weight):
                out.append(rule)
        return out

    def resolve(self, carrier: str, prefix: str, weight: D) -> Resolution:
        found = self.candidates(carrier, prefix, weight)
        if not found:
            logger.warning(
                "rate_not_found", carrier=carrier, prefix=prefix, weight=str(weight)
            )
            return Resolution.no_match()

        # max() keeps the first of equal keys -> table order breaks residual ties
        best = max(found, key=_specificity)
        price = best.price_for(weight)
        logger.debug(
            "rate_matched",
            carrier=carrier,
            prefix=prefix,
            weight=str(weight),
            rule_prefix=best.postal_prefix,
            min_weight=str(best.min_weight),
            price=str(price),
        )
        return Resolution(rule=best, price=price)
