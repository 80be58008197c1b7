# shipquote/main.py
from __future__ import annotations

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from shipquote.core.errors import ShippingError, map_shipping_error
from shipquote.core.logging_config import logger, setup_logging
from shipquote.core.settings import Settings, get_settings
from shipquote.engine.aggregator import CostAggregator
from shipquote.engine.allocator import WeightAllocator
from shipquote.engine.resolver import RateResolver
from shipquote.engine.rule_table import RuleTable
from shipquote.middleware.request_id import RequestIdMiddleware
from shipquote.routers import distribution, quotes
from shipquote.services.distribution_service import DistributionService
from shipquote.services.quote_service import QuoteService
from shipquote.store.distribution_store import DistributionStore, RedisDistributionStore


def create_app(
    settings: Optional[Settings] = None,
    *,
    rule_table: Optional[RuleTable] = None,
    store: Optional[DistributionStore] = None,
) -> FastAPI:
    """
    Build the service. The rate grid is loaded here, before any route exists:
    a missing/invalid grid raises StartupError and no app is returned.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    rule_table = rule_table or RuleTable.from_file(settings.RATE_GRID_PATH)
    store = store or RedisDistributionStore.from_url(
        settings.REDIS_URL, socket_timeout=settings.REDIS_SOCKET_TIMEOUT
    )

    distributions = DistributionService(store)
    aggregator = CostAggregator(
        RateResolver(rule_table),
        WeightAllocator(),
        no_rate_policy=settings.NO_RATE_POLICY,
    )

    app = FastAPI(title="shipquote", version="0.1.0")
    app.state.settings = settings
    app.state.distributions = distributions
    app.state.quotes = QuoteService(
        aggregator,
        distributions,
        default_carrier=settings.DEFAULT_CARRIER,
        prefix_length=settings.POSTAL_PREFIX_LENGTH,
        currency=settings.CURRENCY_CODE,
    )

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return "Service shipping opérationnel"

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "rules": len(rule_table)}

    # ----------------------------------------------------
    # Logging middleware
    # ----------------------------------------------------
    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        start = time.time()

        request_id = getattr(request.state, "request_id", None) or request.headers.get(
            "X-Request-ID", "unknown"
        )
        bound_logger = logger.bind(
            request_id=request_id,
            endpoint=str(request.url.path),
            method=request.method,
        )

        bound_logger.info("request_started")
        response = await call_next(request)
        latency_ms = round((time.time() - start) * 1000, 2)

        bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
            "request_finished"
        )
        return response

    # ----------------------------------------------------
    # Middleware
    # ----------------------------------------------------
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(ShippingError)
    def shipping_error_handler(request: Request, exc: ShippingError):
        status, body = map_shipping_error(exc)
        logger.bind(endpoint=str(request.url.path), status_code=status).warning(
            "request_failed", code=exc.code, message=exc.message
        )
        return JSONResponse(status_code=status, content=body)

    # ----------------------------------------------------
    # Routers
    # ----------------------------------------------------
    app.include_router(distribution.router)
    app.include_router(quotes.router)

    logger.info(
        "startup",
        service="shipquote",
        rules=len(rule_table),
        carrier=settings.DEFAULT_CARRIER,
        no_rate_policy=settings.NO_RATE_POLICY,
    )
    return app


app = create_app()
