"""Live retrieval of one sign's forecast page.

One GET per fetch against ``base_url + topic path``, always with a timeout so
a stalled upstream cannot pin a task (and its socket) indefinitely.
"""

import logging
from typing import Protocol

import httpx

from errors import ParseError, SourceConnectionError
from services import topics
from services.extractor import ContentExtractor, DocumentParseError, HoroscopeExtractor
from services.models import Forecast

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self, sign: str) -> Forecast: ...


class ContentFetcher:
    def __init__(
        self,
        base_url: str,
        extractor: ContentExtractor | None = None,
        timeout_seconds: float = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.extractor = extractor or HoroscopeExtractor()
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def fetch(self, sign: str) -> Forecast:
        """Fetch and extract a forecast. Missing fields come back as None.

        Raises:
            UnknownTopicError: sign has no upstream page.
            SourceConnectionError: request failed or returned an error status.
            ParseError: response body is not a parseable document.
        """
        url = topics.source_url(sign, self.base_url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Forecast fetch failed for %s: %s", url, e)
            raise SourceConnectionError(url) from e

        try:
            forecast = self.extractor.extract(resp.content)
        except DocumentParseError as e:
            logger.warning("Could not parse %s: %s", url, e)
            raise ParseError(url) from e

        if forecast.title is None:
            logger.warning("problem fetching title from %s", url)
        if forecast.body is None:
            logger.warning("problem fetching forecast from %s", url)
        return forecast
