"""Tests for the cache-first refresh pipeline.

Run with: pytest backend/tests/test_refresh.py
"""

import asyncio

import pytest

from errors import ParseError, ResolutionError, SourceConnectionError, UnknownTopicError
from services.cache import cache_key
from services.models import Forecast
from services.refresh import RefreshPipeline
from tests.fakes import StubFetcher


async def drain(pipeline: RefreshPipeline) -> None:
    await asyncio.gather(*pipeline.pending_refreshes)


# -----------------------------------------------------------------------------
# Miss path
# -----------------------------------------------------------------------------


@pytest.mark.unit
class TestResolveMiss:
    @pytest.mark.asyncio
    async def test_aries_scenario(self, cache):
        fetcher = StubFetcher(results={"aries": Forecast(title="Aries Weekly", body="Expect good news")})
        pipeline = RefreshPipeline(cache, fetcher)

        result = await pipeline.resolve("aries")

        assert (result.title, result.body) == ("Aries Weekly", "Expect good news")
        assert cache.get("aries:title") == "Aries Weekly"
        assert cache.get("aries:body") == "Expect good news"

    @pytest.mark.asyncio
    async def test_miss_fetches_synchronously(self, pipeline, fetcher):
        await pipeline.resolve("leo")

        assert fetcher.calls == ["leo"]
        assert pipeline.pending_refreshes == ()

    @pytest.mark.asyncio
    async def test_unknown_sign_fails_without_fetching(self, pipeline, fetcher):
        with pytest.raises(UnknownTopicError) as exc_info:
            await pipeline.resolve("not-a-real-sign")

        assert fetcher.calls == []
        assert exc_info.value.status_code == 404
        assert "aries" in str(exc_info.value)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [SourceConnectionError("https://x.test/leo"), ParseError("https://x.test/leo")],
    )
    async def test_fetch_error_wrapped_and_nothing_cached(self, cache, error):
        pipeline = RefreshPipeline(cache, StubFetcher(results={"leo": error}))

        with pytest.raises(ResolutionError) as exc_info:
            await pipeline.resolve("leo")

        assert exc_info.value.cause is error
        assert exc_info.value.__cause__ is error
        assert cache.stats()["entries"] == 0

    @pytest.mark.asyncio
    async def test_title_only_is_cached_partially(self, cache):
        pipeline = RefreshPipeline(cache, StubFetcher(results={"virgo": Forecast(title="Virgo Weekly")}))

        result = await pipeline.resolve("virgo")

        assert result == Forecast(title="Virgo Weekly", body="")
        assert cache.get(cache_key("virgo", "title")) == "Virgo Weekly"
        assert cache.get(cache_key("virgo", "body")) is None

    @pytest.mark.asyncio
    async def test_body_only_is_cached_partially(self, cache):
        pipeline = RefreshPipeline(cache, StubFetcher(results={"virgo": Forecast(body="Busy week")}))

        result = await pipeline.resolve("virgo")

        assert result == Forecast(title="", body="Busy week")
        assert cache.get("virgo:body") == "Busy week"
        assert cache.get("virgo:title") is None

    @pytest.mark.asyncio
    async def test_partial_cache_counts_as_miss(self, cache, pipeline, fetcher):
        cache.set("gemini:title", "Cached title")

        result = await pipeline.resolve("gemini")

        assert fetcher.calls == ["gemini"]
        assert result == Forecast(title="Weekly Title", body="Weekly body")

    @pytest.mark.asyncio
    async def test_expired_entries_force_refetch(self, cache, clock, pipeline, fetcher):
        cache.set("pisces:title", "old title")
        cache.set("pisces:body", "old body")
        clock.advance(12 * 3600 + 0.5)

        result = await pipeline.resolve("pisces")

        assert fetcher.calls == ["pisces"]
        assert result == Forecast(title="Weekly Title", body="Weekly body")
        assert cache.get("pisces:title") == "Weekly Title"


# -----------------------------------------------------------------------------
# Hit path
# -----------------------------------------------------------------------------


@pytest.mark.unit
class TestResolveHit:
    @pytest.mark.asyncio
    async def test_hit_returns_cached_value(self, cache, pipeline, fetcher):
        cache.set("libra:title", "Cached title")
        cache.set("libra:body", "Cached body")

        result = await pipeline.resolve("libra")

        assert result == Forecast(title="Cached title", body="Cached body")
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_hit_schedules_background_refresh(self, cache, pipeline, fetcher):
        cache.set("libra:title", "Cached title")
        cache.set("libra:body", "Cached body")

        await pipeline.resolve("libra")
        assert len(pipeline.pending_refreshes) == 1
        await drain(pipeline)

        assert fetcher.calls == ["libra"]
        assert cache.get("libra:title") == "Weekly Title"
        assert pipeline.pending_refreshes == ()

    @pytest.mark.asyncio
    async def test_background_failure_is_invisible_to_caller(self, cache, caplog):
        fetcher = StubFetcher(results={"libra": SourceConnectionError("https://x.test/libra")})
        pipeline = RefreshPipeline(cache, fetcher)
        cache.set("libra:title", "Cached title")
        cache.set("libra:body", "Cached body")

        with caplog.at_level("WARNING"):
            result = await pipeline.resolve("libra")
            await drain(pipeline)

        assert result == Forecast(title="Cached title", body="Cached body")
        assert cache.get("libra:title") == "Cached title"
        assert "Background refresh failed for libra" in caplog.text

    @pytest.mark.asyncio
    async def test_refresh_on_hit_can_be_disabled(self, cache, fetcher):
        pipeline = RefreshPipeline(cache, fetcher, refresh_on_hit=False)
        cache.set("libra:title", "Cached title")
        cache.set("libra:body", "Cached body")

        await pipeline.resolve("libra")

        assert pipeline.pending_refreshes == ()
        assert fetcher.calls == []


@pytest.mark.unit
class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_overwrites_fresh_entries(self, cache, pipeline):
        cache.set("leo:title", "old")
        cache.set("leo:body", "old")

        forecast = await pipeline.refresh("leo")

        assert forecast == Forecast(title="Weekly Title", body="Weekly body")
        assert cache.get("leo:title") == "Weekly Title"

    @pytest.mark.asyncio
    async def test_refresh_propagates_fetch_errors(self, cache):
        error = ParseError("https://x.test/leo")
        pipeline = RefreshPipeline(cache, StubFetcher(results={"leo": error}))

        with pytest.raises(ParseError):
            await pipeline.refresh("leo")


@pytest.mark.unit
class TestPartialForecastLogging:
    @pytest.mark.asyncio
    async def test_partial_fetch_is_logged(self, cache, caplog):
        pipeline = RefreshPipeline(cache, StubFetcher(results={"cancer": Forecast(title="Cancer Weekly")}))

        with caplog.at_level("WARNING"):
            await pipeline.resolve("cancer")

        assert "Serving partial forecast for cancer" in caplog.text

    @pytest.mark.asyncio
    async def test_complete_fetch_is_not_flagged(self, pipeline, caplog):
        with caplog.at_level("WARNING"):
            await pipeline.resolve("cancer")

        assert "partial forecast" not in caplog.text
