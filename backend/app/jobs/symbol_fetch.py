from __future__ import annotations

import asyncio
import datetime
from typing import Sequence

from app.errors import InsufficientHistoryError, ProviderError
from app.indicators.rsi import (
    calculate_rsi,
    calculate_rsi_momentum,
    calculate_smoothed_rsi,
    calculate_stoch_rsi,
    round2,
    rsi_history,
)
from app.logging.config import get_logger
from app.providers.base import PriceSource
from app.schemas.indicators import IndicatorSnapshot
from app.scoring.scoring import opportunity_score, score_breakdown

logger = get_logger(__name__)

STOCH_RSI_PERIOD = 14
SMOOTHING_PERIOD = 9


def lookback_trading_days(period: int) -> int:
    return max(period + 20, 35)


def lookback_window(period: int, now: datetime.datetime) -> tuple[datetime.datetime, datetime.datetime]:
    # Five trading days per calendar week plus a week of holiday slack.
    trading_days = lookback_trading_days(period)
    calendar_days = trading_days * 7 // 5 + 7
    return now - datetime.timedelta(days=calendar_days), now


def build_snapshot(
    symbol: str,
    closes: Sequence[float],
    period: int,
    extended: bool = True,
    stoch_period: int = STOCH_RSI_PERIOD,
    ema_period: int = SMOOTHING_PERIOD,
) -> IndicatorSnapshot:
    """Compute the indicator snapshot for one symbol from its valid closes."""
    if len(closes) < period + 1:
        raise InsufficientHistoryError(
            "Insufficient data",
            required_count=period + 1,
            available_count=len(closes),
            context={"symbol": symbol},
        )

    rsi = calculate_rsi(closes, period)
    current_price = closes[-1]
    previous_price = closes[-2]
    change = current_price - previous_price
    change_percent = change / previous_price * 100 if previous_price else None

    fields = {
        "symbol": symbol,
        "rsi": rsi,
        "price": round2(current_price),
        "change": round2(change),
        "change_percent": round2(change_percent) if change_percent is not None else None,
    }

    if extended:
        stoch_rsi = calculate_stoch_rsi(rsi_history(closes, period), stoch_period)
        momentum = calculate_rsi_momentum(closes, period)
        fields.update(
            stoch_rsi=stoch_rsi,
            rsi_smoothed=calculate_smoothed_rsi(closes, period, ema_period),
            momentum=momentum,
            opportunity_score=opportunity_score(
                rsi, stoch_rsi, momentum, fields["change_percent"]
            ),
        )
        logger.debug(
            "Opportunity score",
            symbol=symbol,
            score=fields["opportunity_score"],
            **score_breakdown(rsi, stoch_rsi, momentum, fields["change_percent"]).model_dump(),
        )

    return IndicatorSnapshot(**fields)


async def fetch_symbol_snapshot(
    source: PriceSource,
    symbol: str,
    period: int,
    *,
    extended: bool = True,
    now: datetime.datetime | None = None,
    timeout: float = 10.0,
    stoch_period: int = STOCH_RSI_PERIOD,
    ema_period: int = SMOOTHING_PERIOD,
) -> IndicatorSnapshot:
    """Fetch one symbol and compute its snapshot; failures become error snapshots."""
    start, end = lookback_window(period, now or datetime.datetime.now(datetime.UTC))
    try:
        history = await asyncio.wait_for(
            source.fetch_history(symbol, start, end), timeout=timeout
        )
    except TimeoutError:
        logger.warning("Price source timed out", symbol=symbol, timeout=timeout)
        return IndicatorSnapshot.failed(symbol, "Timeout")
    except ProviderError as exc:
        logger.warning("Price source failed", symbol=symbol, error=str(exc), context=exc.context)
        return IndicatorSnapshot.failed(symbol, str(exc))

    try:
        return build_snapshot(
            symbol,
            history.valid_closes(),
            period,
            extended,
            stoch_period=stoch_period,
            ema_period=ema_period,
        )
    except InsufficientHistoryError as exc:
        logger.info(
            "Insufficient history",
            symbol=symbol,
            required=exc.required_count,
            available=exc.available_count,
        )
        return IndicatorSnapshot.failed(symbol, str(exc))
