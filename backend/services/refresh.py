"""Cache-first forecast resolution with background revalidation.

resolve(sign):
    hit  (title and body both fresh) -> return cached values, and when
         refresh_on_hit is set, kick off a background refetch
    miss (either field absent/expired) -> reject unknown signs without touching
         the network, otherwise fetch live, cache what was obtained, return it

Every hit refetching is deliberate stale-while-revalidate; refresh_on_hit turns
it off.
"""

import asyncio
import logging

from errors import FetchError, ResolutionError, UnknownTopicError
from services import topics
from services.cache import TTLCache, cache_key
from services.fetcher import Fetcher
from services.models import Forecast

logger = logging.getLogger(__name__)


class RefreshPipeline:
    def __init__(self, cache: TTLCache, fetcher: Fetcher, refresh_on_hit: bool = True):
        self.cache = cache
        self.fetcher = fetcher
        self.refresh_on_hit = refresh_on_hit
        self._background: set[asyncio.Task] = set()

    @property
    def pending_refreshes(self) -> tuple[asyncio.Task, ...]:
        return tuple(self._background)

    async def resolve(self, sign: str) -> Forecast:
        title = self.cache.get(cache_key(sign, "title"))
        body = self.cache.get(cache_key(sign, "body"))

        if title is not None and body is not None:
            if self.refresh_on_hit:
                self.schedule_background_refresh(sign)
            return Forecast(title=title, body=body)

        if not topics.is_known(sign):
            raise UnknownTopicError(sign, list(topics.TOPICS))

        try:
            fetched = await self.refresh(sign)
        except FetchError as e:
            raise ResolutionError(sign, e) from e

        if not fetched.is_complete:
            logger.warning("Serving partial forecast for %s", sign)
        return Forecast(title=fetched.title or "", body=fetched.body or "")

    async def refresh(self, sign: str) -> Forecast:
        """Fetch live and cache whichever fields came back."""
        forecast = await self.fetcher.fetch(sign)
        if forecast.title is not None:
            self.cache.set(cache_key(sign, "title"), forecast.title)
        if forecast.body is not None:
            self.cache.set(cache_key(sign, "body"), forecast.body)
        return forecast

    def schedule_background_refresh(self, sign: str) -> None:
        task = asyncio.create_task(self._refresh_quietly(sign))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_quietly(self, sign: str) -> None:
        try:
            await self.refresh(sign)
        except FetchError as e:
            logger.warning("Background refresh failed for %s: %s", sign, e)
        except Exception:
            logger.exception("Background refresh crashed for %s", sign)
        else:
            logger.debug("Background refresh done for %s", sign)
