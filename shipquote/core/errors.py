# shipquote/core/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple


class ShippingError(Exception):
    """
    Base class for every error the quoting core surfaces.

    - code: stable machine-readable identifier
    - message: human readable
    - meta: structured details (never secrets)
    """

    code = "SHIPPING_ERROR"
    status_code = 500

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")


class ValidationError(ShippingError):
    """Malformed save/quote input. Not retried."""

    code = "VALIDATION_ERROR"
    status_code = 400


class DistributionNotFound(ShippingError):
    code = "DISTRIBUTION_NOT_FOUND"
    status_code = 404


class NoRateMatch(ShippingError):
    """No pricing rule covers (carrier, prefix, weight)."""

    code = "NO_RATE_MATCH"
    status_code = 422


class StoreUnavailable(ShippingError):
    """Key-value backend unreachable. Fatal to the request."""

    code = "STORE_UNAVAILABLE"
    status_code = 502


class StartupError(ShippingError):
    """Rule source missing or unparseable. Fatal to the process."""

    code = "STARTUP_ERROR"
    status_code = 500


def map_shipping_error(e: ShippingError) -> Tuple[int, Dict[str, Any]]:
    body = {
        "ok": False,
        "error": {
            "type": type(e).__name__,
            "code": e.code,
            "message": e.message,
            "meta": e.meta,
        },
    }
    return e.status_code, body
