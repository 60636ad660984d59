from __future__ import annotations

import asyncio
import datetime
import time
from typing import Awaitable, Callable, Sequence

from app.jobs.symbol_fetch import SMOOTHING_PERIOD, STOCH_RSI_PERIOD, fetch_symbol_snapshot
from app.logging.config import get_logger
from app.providers.base import PriceSource
from app.schemas.indicators import BatchResult, IndicatorSnapshot
from app.schemas.stocks import Instrument

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def chunked(items: Sequence[Instrument], size: int) -> list[Sequence[Instrument]]:
    if size < 1:
        raise ValueError("batch size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


async def fetch_all_stocks(
    source: PriceSource,
    instruments: Sequence[Instrument],
    period: int,
    *,
    batch_size: int = 10,
    batch_delay: float = 1.0,
    extended: bool = True,
    timeout: float = 10.0,
    stoch_period: int = STOCH_RSI_PERIOD,
    ema_period: int = SMOOTHING_PERIOD,
    sleep: Sleep = asyncio.sleep,
) -> dict[str, IndicatorSnapshot]:
    """
    Fetch every instrument in sequential groups of ``batch_size``.

    Calls inside a group run concurrently; the next group starts only after
    the whole group finished and ``batch_delay`` seconds elapsed. Per-symbol
    failures come back as error snapshots and never stop the batch.
    """
    results: dict[str, IndicatorSnapshot] = {}
    groups = chunked(instruments, batch_size)
    now = datetime.datetime.now(datetime.UTC)

    for index, group in enumerate(groups):
        snapshots = await asyncio.gather(
            *(
                fetch_symbol_snapshot(
                    source,
                    instrument.symbol,
                    period,
                    extended=extended,
                    now=now,
                    timeout=timeout,
                    stoch_period=stoch_period,
                    ema_period=ema_period,
                )
                for instrument in group
            )
        )
        for snapshot in snapshots:
            results[snapshot.symbol] = snapshot

        failed = sum(1 for snapshot in snapshots if snapshot.error)
        logger.debug(
            "Batch group finished",
            group=index + 1,
            groups=len(groups),
            symbols=len(group),
            failed=failed,
        )

        if index < len(groups) - 1:
            await sleep(batch_delay)

    return results


async def run_batch(
    source: PriceSource,
    instruments: Sequence[Instrument],
    period: int,
    **kwargs,
) -> BatchResult:
    started = time.monotonic()
    logger.info("Fetching fresh RSI data", period=period, symbols=len(instruments))
    data = await fetch_all_stocks(source, instruments, period, **kwargs)
    failed = sum(1 for snapshot in data.values() if snapshot.error)
    logger.info(
        "RSI batch complete",
        period=period,
        symbols=len(data),
        failed=failed,
        elapsed_seconds=round(time.monotonic() - started, 2),
    )
    return BatchResult(
        data=data,
        timestamp=datetime.datetime.now(datetime.UTC),
        period=period,
    )
