from __future__ import annotations

import asyncio
from typing import Sequence

from app.cache import ResultCache, cache_key
from app.catalog.stocks import all_instruments
from app.config.settings import Settings
from app.errors import InvalidParameterError
from app.jobs.batch import Sleep, run_batch
from app.logging.config import get_logger
from app.providers.base import PriceSource
from app.schemas.indicators import BatchResult
from app.schemas.stocks import Instrument

logger = get_logger(__name__)


def validate_period(period: int, allowed: Sequence[int]) -> int:
    if period not in allowed:
        raise InvalidParameterError(
            "Invalid period. Must be " + ", ".join(str(value) for value in allowed),
            parameter="period",
            value=period,
            allowed=list(allowed),
        )
    return period


class IndicatorService:
    """Serves batch results from the cache and recomputes them on demand.

    At most one computation per cache key is in flight; concurrent callers
    that need a fresh result await the same task.
    """

    def __init__(
        self,
        source: PriceSource,
        cache: ResultCache,
        settings: Settings,
        instruments: Sequence[Instrument] | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.source = source
        self.cache = cache
        self.settings = settings
        self.instruments = list(instruments) if instruments is not None else all_instruments()
        self._sleep = sleep
        self._inflight: dict[str, asyncio.Task[BatchResult]] = {}

    async def get_indicators(
        self, period: int, force_refresh: bool = False
    ) -> tuple[BatchResult, bool]:
        """Return ``(result, cached)`` for ``period``."""
        validate_period(period, self.settings.indicators.allowed_periods)
        key = cache_key(period)

        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit", key=key)
                return cached, True

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._compute(key, period))
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.info("Joining in-flight computation", key=key, force_refresh=force_refresh)

        result = await asyncio.shield(task)
        return result, False

    def _forget(self, key: str, task: asyncio.Task[BatchResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _compute(self, key: str, period: int) -> BatchResult:
        indicator_settings = self.settings.indicators
        batch_settings = self.settings.batch
        result = await run_batch(
            self.source,
            self.instruments,
            period,
            batch_size=batch_settings.batch_size,
            batch_delay=batch_settings.batch_delay_seconds,
            extended=indicator_settings.extended,
            timeout=self.settings.providers.timeout_seconds,
            stoch_period=indicator_settings.stoch_period,
            ema_period=indicator_settings.ema_period,
            sleep=self._sleep,
        )
        self.cache.set(key, result)
        return result
