from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from shipquote.core.logging_config import logger
from shipquote.domain.models import QuoteResult, RecipientEntry, to_decimal
from shipquote.engine.aggregator import CostAggregator, QuoteContext
from shipquote.schemas.quote import QuoteIn, WebhookIn
from shipquote.services.distribution_service import DistributionService, validation_error

D = Decimal


class QuoteService:
    """
    Quote operation: resolves recipients + totals, then hands off to CostAggregator.

    Recipients: explicit list > stored list > one synthetic recipient (qty 1).
    Totals: request > stored record > 0 (weights 0, flagged ZERO_WEIGHT).
    Unknown/expired distKey is not an error here: it falls back and warns
    DISTRIBUTION_NOT_FOUND.
    """

    def __init__(
        self,
        aggregator: CostAggregator,
        distributions: DistributionService,
        default_carrier: str = "DHL",
        prefix_length: int = 2,
        currency: str = "EUR",
    ):
        self.aggregator = aggregator
        self.distributions = distributions
        self.default_carrier = default_carrier
        self.prefix_length = prefix_length
        self.currency = currency

    def quote(self, payload: Mapping[str, Any]) -> QuoteResult:
        try:
            data = QuoteIn.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error(e, "Invalid quote request") from e

        recipients = (
            [r.to_entry() for r in data.recipients] if data.recipients is not None else None
        )
        return self.run(
            dist_key=data.dist_key,
            recipients=recipients,
            total_weight=data.total_weight,
            total_quantity=data.total_quantity,
            carrier=data.carrier,
        )

    def parse_webhook(self, payload: Mapping[str, Any]) -> WebhookIn:
        try:
            return WebhookIn.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error(e, "Invalid webhook payload") from e

    def quote_webhook(self, data: WebhookIn) -> QuoteResult:
        return self.run(
            dist_key=data.distKey,
            recipients=None,
            total_weight=data.hdnTotalWeight,
            total_quantity=data.hdnTotalQty,
            fallback_address=data.destination(),
        )

    def run(
        self,
        *,
        dist_key: Optional[str] = None,
        recipients: Optional[Sequence[RecipientEntry]] = None,
        total_weight: Any = None,
        total_quantity: Optional[int] = None,
        carrier: Optional[str] = None,
        fallback_address: Any = "",
    ) -> QuoteResult:
        ctx = QuoteContext(
            carrier=carrier or self.default_carrier,
            currency=self.currency,
            prefix_length=self.prefix_length,
        )

        record = None
        if dist_key:
            record = self.distributions.load(dist_key)
            if record is None:
                logger.info("distribution_missing", dist_key=dist_key)
                ctx.warn(
                    "DISTRIBUTION_NOT_FOUND",
                    f"Distribution '{dist_key}' unknown or expired.",
                    distKey=dist_key,
                )

        entries: List[RecipientEntry] = list(recipients or [])
        if not entries and record is not None:
            entries = list(record.entries)

        if total_weight is None:
            total_weight = record.total_weight if record is not None else D("0")
        if total_quantity is None:
            total_quantity = record.total_quantity if record is not None else 0

        if not entries:
            entries = [RecipientEntry(address=fallback_address, quantity=1)]
            ctx.warn(
                "FALLBACK_SINGLE_RECIPIENT",
                "No recipients available; quoting a single package to the order destination.",
            )

        return self.aggregator.quote(entries, to_decimal(total_weight), total_quantity, ctx)
