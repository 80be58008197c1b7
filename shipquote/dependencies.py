from __future__ import annotations

from fastapi import Request

from shipquote.core.settings import Settings
from shipquote.services.distribution_service import DistributionService
from shipquote.services.quote_service import QuoteService


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_distribution_service(request: Request) -> DistributionService:
    return request.app.state.distributions


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quotes
