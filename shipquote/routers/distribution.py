from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from shipquote.dependencies import get_distribution_service
from shipquote.schemas.distribution import SaveDistributionOut
from shipquote.services.distribution_service import DistributionService

router = APIRouter(tags=["distribution"])


@router.post("/save-distribution", response_model=SaveDistributionOut)
def save_distribution(
    payload: Dict[str, Any] = Body(...),
    svc: DistributionService = Depends(get_distribution_service),
) -> SaveDistributionOut:
    dist_key = svc.save(payload)
    return SaveDistributionOut(status="ok", distKey=dist_key)


@router.get("/distribution/{dist_key}")
def get_distribution(
    dist_key: str,
    svc: DistributionService = Depends(get_distribution_service),
) -> Dict[str, Any]:
    record = svc.get(dist_key)
    return {"distKey": dist_key, **record.to_dict()}
