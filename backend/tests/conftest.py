"""Shared pytest fixtures for forecast service tests."""

import pytest

from services.cache import TTLCache
from services.models import Forecast
from services.refresh import RefreshPipeline
from tests.fakes import FakeClock, StubFetcher


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(ttl_seconds=12 * 3600, clock=clock)


@pytest.fixture
def fetcher() -> StubFetcher:
    return StubFetcher(default=Forecast(title="Weekly Title", body="Weekly body"))


@pytest.fixture
def pipeline(cache, fetcher) -> RefreshPipeline:
    return RefreshPipeline(cache, fetcher)
