from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from shipquote.core.errors import DistributionNotFound, ValidationError
from shipquote.core.logging_config import logger
from shipquote.core.settings import DISTRIBUTION_TTL_SECONDS
from shipquote.domain.models import DistributionRecord, to_decimal
from shipquote.schemas.distribution import SaveDistributionIn
from shipquote.store.distribution_store import DistributionStore

KEY_PREFIX = "dist:"


def store_key(dist_key: str) -> str:
    return f"{KEY_PREFIX}{dist_key}"


def validation_error(e: PydanticValidationError, message: str) -> ValidationError:
    errors = e.errors(include_url=False, include_context=False, include_input=False)
    return ValidationError(message, {"errors": errors})


class DistributionService:
    """
    Save + lookup of distribution lists under `dist:<distKey>`, TTL fixed at 2h.
    Last write wins; every save replaces the whole record.
    """

    def __init__(self, store: DistributionStore, ttl_seconds: int = DISTRIBUTION_TTL_SECONDS):
        self.store = store
        self.ttl_seconds = ttl_seconds

    def save(self, payload: Mapping[str, Any]) -> str:
        try:
            data = SaveDistributionIn.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error(
                e, "distKey, distributionList, totalQuantity and totalWeight required"
            ) from e

        record = DistributionRecord(
            entries=[e.to_entry() for e in data.distribution_list],
            total_quantity=data.total_quantity,
            total_weight=to_decimal(data.total_weight),
        )
        self.store.put(store_key(data.dist_key), record, self.ttl_seconds)

        logger.info(
            "distribution_saved",
            dist_key=data.dist_key,
            entries=len(record.entries),
            total_quantity=record.total_quantity,
            total_weight=str(record.total_weight),
        )
        return data.dist_key

    def load(self, dist_key: str) -> Optional[DistributionRecord]:
        """Record or None (never written / expired)."""
        return self.store.get(store_key(dist_key))

    def get(self, dist_key: str) -> DistributionRecord:
        record = self.load(dist_key)
        if record is None:
            raise DistributionNotFound(
                f"Unknown or expired distribution: {dist_key}", {"distKey": dist_key}
            )
        return record
