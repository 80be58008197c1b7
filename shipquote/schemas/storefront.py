# shipquote/schemas/storefront.py
from __future__ import annotations

from typing import Any, Dict, List

from shipquote.domain.models import QuoteResult


def to_storefront_envelope(
    result: QuoteResult,
    *,
    origin: Dict[str, Any],
    service_code: str = "External",
    days_to_deliver: int = 2,
) -> Dict[str, Any]:
    """Map a QuoteResult onto the storefront's shipping-webhook response."""
    packages: List[Dict[str, Any]] = []
    for line in result.per_recipient:
        cost = f"{line.cost:.2f}"
        packages.append(
            {
                "Package": {
                    "ID": None,
                    "From": origin,
                    "To": {"Postal": line.postal},
                    "Weight": f"{line.weight:.3f}",
                    "WeightUnit": 1,
                    "PackageCost": cost,
                    "TotalOrderCost": cost,
                    "CurrencyCode": result.currency,
                    "Items": [],
                },
                "CanShip": True,
                "Messages": [],
                "Cost": float(line.cost),
                "DaysToDeliver": days_to_deliver,
                "MISID": None,
            }
        )

    return {
        "Carrier": result.carrier,
        "ServiceCode": service_code,
        "TotalCost": float(result.total_cost),
        "Messages": [w["message"] for w in result.warnings],
        "Packages": packages,
    }
