from __future__ import annotations

import re
from typing import Any

# first standalone 5-digit run, e.g. "12 rue X, 75001 Paris" -> "75001"
POSTAL_RE = re.compile(r"\b(\d{5})\b")

STRUCTURED_POSTAL_KEYS = ("postal", "Postal")


def extract_postal(address: Any) -> str:
    """
    Postal code from a recipient address.

    - str: first 5-digit run, "" when there is none
    - mapping: its `postal` (or `Postal`) field
    - anything else: ""
    """
    if isinstance(address, str):
        m = POSTAL_RE.search(address)
        return m.group(1) if m else ""

    if isinstance(address, dict):
        for key in STRUCTURED_POSTAL_KEYS:
            value = address.get(key)
            if value not in (None, ""):
                return str(value).strip()

    return ""


def postal_prefix(postal: str, length: int) -> str:
    return postal[:length] if length > 0 else ""
