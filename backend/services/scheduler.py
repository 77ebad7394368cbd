"""Cache warming: every sign once at startup, then once per interval."""

import asyncio
import logging
import time

from errors import ForecastError
from services.refresh import RefreshPipeline

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 24 * 3600


class WarmScheduler:
    def __init__(
        self,
        pipeline: RefreshPipeline,
        signs: list[str],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        self.pipeline = pipeline
        self.signs = signs
        self.interval_seconds = interval_seconds
        self.last_completed_at: float | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def warm_all(self) -> dict[str, bool]:
        """Resolve every sign in turn. A failing sign is logged and skipped."""
        outcome = {}
        for sign in self.signs:
            try:
                await self.pipeline.resolve(sign)
            except ForecastError as e:
                logger.warning("Cache warm failed for %s: %s", sign, e)
                outcome[sign] = False
            else:
                logger.info("cache warmed for forecast for %s", sign)
                outcome[sign] = True

        self.last_completed_at = time.time()
        failed = [sign for sign, ok in outcome.items() if not ok]
        if failed:
            logger.warning("Cache warming finished with %d failure(s): %s", len(failed), ", ".join(failed))
        else:
            logger.info("Cache warming finished successfully")
        return outcome

    def start(self) -> None:
        """Warm now in the background, then again every interval."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            try:
                await self.warm_all()
            except Exception:
                logger.exception("Cache warm pass crashed")
            await asyncio.sleep(self.interval_seconds)
