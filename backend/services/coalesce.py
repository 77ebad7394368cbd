"""Collapse concurrent fetches of the same sign into one upstream request."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from services.fetcher import Fetcher
from services.models import Forecast

logger = logging.getLogger(__name__)


class SingleFlight:
    """Callers asking for a key already in flight await the same task."""

    def __init__(self):
        self._inflight: dict[str, asyncio.Task] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._inflight

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        if self.in_flight(key):
            logger.debug("Joining in-flight fetch for %s", key)
        else:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._release(key, t))
        # A cancelled waiter must not cancel the fetch the others share
        return await asyncio.shield(self._inflight[key])

    def _release(self, key: str, task: asyncio.Task) -> None:
        self._inflight.pop(key, None)
        # Every waiter may have been cancelled; the outcome is still consumed
        if not task.cancelled() and task.exception() is not None:
            logger.debug("In-flight fetch for %s failed: %s", key, task.exception())


class CoalescingFetcher:
    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher
        self._flight = SingleFlight()

    async def fetch(self, sign: str) -> Forecast:
        return await self._flight.do(sign, lambda: self.fetcher.fetch(sign))
