from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from shipquote.core.settings import Settings
from shipquote.dependencies import get_quote_service, get_settings_dep
from shipquote.schemas.quote import QuoteOut
from shipquote.schemas.storefront import to_storefront_envelope
from shipquote.services.quote_service import QuoteService

router = APIRouter(tags=["quote"])


@router.post("/quote", response_model=QuoteOut)
def quote(
    payload: Dict[str, Any] = Body(...),
    svc: QuoteService = Depends(get_quote_service),
) -> Dict[str, Any]:
    return svc.quote(payload).to_dict()


@router.post("/webhook")
def storefront_webhook(
    payload: Dict[str, Any] = Body(...),
    svc: QuoteService = Depends(get_quote_service),
    settings: Settings = Depends(get_settings_dep),
) -> Dict[str, Any]:
    data = svc.parse_webhook(payload)
    result = svc.quote_webhook(data)
    return to_storefront_envelope(
        result,
        origin=data.origin(),
        service_code=settings.SERVICE_CODE,
        days_to_deliver=settings.DAYS_TO_DELIVER,
    )
