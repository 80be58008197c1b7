from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from shipquote.core.settings import Settings
from shipquote.engine.aggregator import CostAggregator, QuoteContext
from shipquote.engine.allocator import WeightAllocator
from shipquote.engine.resolver import RateResolver
from shipquote.engine.rule_table import RuleTable
from shipquote.main import create_app
from shipquote.services.distribution_service import DistributionService
from shipquote.services.quote_service import QuoteService
from shipquote.store.distribution_store import InMemoryDistributionStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def grid_records():
    return [
        {"carrier": "DHL", "postal_prefix": "75", "min_weight": 0, "max_weight": 5, "flat_price": 10, "price_per_kg": None},
        {"carrier": "DHL", "postal_prefix": None, "min_weight": 0, "max_weight": 5, "flat_price": 15, "price_per_kg": None},
    ]


@pytest.fixture
def rule_table(grid_records):
    return RuleTable.from_records(grid_records)


@pytest.fixture
def resolver(rule_table):
    return RateResolver(rule_table)


@pytest.fixture
def aggregator(resolver):
    return CostAggregator(resolver, WeightAllocator())


@pytest.fixture
def ctx():
    return QuoteContext(carrier="DHL", currency="EUR", prefix_length=2)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryDistributionStore(clock=clock)


@pytest.fixture
def distributions(store):
    return DistributionService(store)


@pytest.fixture
def quote_service(aggregator, distributions):
    return QuoteService(aggregator, distributions, default_carrier="DHL", prefix_length=2)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def client(settings, rule_table, store):
    app = create_app(settings, rule_table=rule_table, store=store)
    return TestClient(app)
