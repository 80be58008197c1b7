# shipquote/schemas/quote.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shipquote.schemas.distribution import RecipientEntryIn


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


class QuoteIn(BaseModel):
    """
    Quote request: either a stored list (`distKey`) or direct `recipients`.
    Totals on the request win over stored totals.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dist_key: Optional[str] = Field(None, alias="distKey")
    recipients: Optional[List[RecipientEntryIn]] = None
    total_weight: Optional[float] = Field(
        None, alias="totalWeight", ge=0, allow_inf_nan=False
    )
    total_quantity: Optional[int] = Field(None, alias="totalQuantity", ge=0)
    carrier: Optional[str] = None

    @field_validator("dist_key", "total_weight", "total_quantity", mode="before")
    @classmethod
    def blank_fields(cls, v: Any) -> Any:
        return _blank_to_none(v)


class WebhookIn(BaseModel):
    """Storefront shipping webhook body (only the fields we read)."""

    model_config = ConfigDict(extra="ignore")

    distKey: Optional[str] = None
    packagesinfo: Optional[List[Dict[str, Any]]] = None
    hdnTotalWeight: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    hdnTotalQty: Optional[int] = Field(None, ge=0)

    @field_validator("distKey", "hdnTotalWeight", "hdnTotalQty", mode="before")
    @classmethod
    def blank_fields(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def destination(self) -> Any:
        if self.packagesinfo:
            return self.packagesinfo[0].get("to") or ""
        return ""

    def origin(self) -> Dict[str, Any]:
        if self.packagesinfo:
            return self.packagesinfo[0].get("from") or {}
        return {}


class RecipientQuoteOut(BaseModel):
    address: Any
    postal: str
    quantity: int
    weight: float
    cost: float
    matched: bool


class QuoteOut(BaseModel):
    carrier: str
    currency: str
    perRecipient: List[RecipientQuoteOut]
    totalCost: float
    warnings: List[Dict[str, Any]] = []
