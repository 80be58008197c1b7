# shipquote/schemas/distribution.py
from __future__ import annotations

from typing import Any, Dict, List, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, constr

from shipquote.domain.models import RecipientEntry


class RecipientEntryIn(BaseModel):
    """One address + quantity. Storefront lists use `qty`; both names accepted."""

    model_config = ConfigDict(extra="ignore")

    address: Union[str, Dict[str, Any]] = ""
    quantity: int = Field(
        1, ge=0, validation_alias=AliasChoices("quantity", "qty")
    )

    def to_entry(self) -> RecipientEntry:
        return RecipientEntry(address=self.address, quantity=self.quantity)


class SaveDistributionIn(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    dist_key: constr(strip_whitespace=True, min_length=1) = Field(alias="distKey")  # type: ignore
    distribution_list: List[RecipientEntryIn] = Field(alias="distributionList")
    total_quantity: int = Field(alias="totalQuantity", ge=0)
    total_weight: float = Field(alias="totalWeight", ge=0, allow_inf_nan=False)


class SaveDistributionOut(BaseModel):
    status: str = "ok"
    distKey: str
