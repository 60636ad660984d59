from __future__ import annotations

import datetime

from app.config.settings import HistorySettings
from app.errors import InsufficientHistoryError
from app.indicators.rsi import calculate_ema, calculate_stoch_rsi, round2, rsi_history
from app.providers.base import PriceSource
from app.schemas.provider import PriceHistory
from app.schemas.stocks import HistoryPoint, StockHistoryResponse, StockInfo


def build_history_points(
    points: list[tuple[int, float]],
    period: int,
    stoch_period: int = 14,
    ema_period: int = 9,
) -> list[HistoryPoint]:
    """
    Per-day price and indicator values from index ``period`` onwards.

    ``rsi_values[k]`` is the RSI of the prefix ending at ``period + k``; the
    StochRSI and smoothed RSI of a day only ever look at RSI values up to
    that day.
    """
    prices = [price for _, price in points]
    rsi_values = rsi_history(prices, period)

    history: list[HistoryPoint] = []
    for offset, rsi in enumerate(rsi_values):
        timestamp, price = points[period + offset]
        seen = rsi_values[: offset + 1]
        history.append(
            HistoryPoint(
                date=datetime.datetime.fromtimestamp(timestamp, tz=datetime.UTC).date(),
                price=round2(price),
                rsi=rsi,
                stoch_rsi=calculate_stoch_rsi(seen, stoch_period),
                rsi_smoothed=calculate_ema(seen, ema_period),
            )
        )
    return history


def build_stock_info(history: PriceHistory, symbol: str, name: str | None = None) -> StockInfo:
    closes = history.valid_closes()
    last_close = closes[-1] if closes else 0.0
    prior_close = closes[-2] if len(closes) > 1 else 0.0

    current_price = history.regular_market_price or history.chart_previous_close or last_close
    previous_close = history.previous_close or history.chart_previous_close or prior_close
    change = current_price - previous_close if previous_close else 0.0
    change_percent = change / previous_close * 100 if previous_close else 0.0

    return StockInfo(
        symbol=history.symbol or symbol,
        name=name or symbol,
        currency=history.currency or "USD",
        current_price=current_price,
        previous_close=previous_close,
        change=change,
        change_percent=change_percent,
    )


async def load_stock_history(
    source: PriceSource,
    symbol: str,
    period: int,
    history_settings: HistorySettings,
    *,
    name: str | None = None,
    stoch_period: int = 14,
    ema_period: int = 9,
    now: datetime.datetime | None = None,
) -> StockHistoryResponse:
    end = now or datetime.datetime.now(datetime.UTC)
    start = end - datetime.timedelta(days=history_settings.fetch_days)
    history = await source.fetch_history(symbol, start, end)

    points = list(history.valid_points())
    required = period + history_settings.min_extra_points
    if len(points) < required:
        raise InsufficientHistoryError(
            "Insufficient data",
            required_count=required,
            available_count=len(points),
            context={"symbol": symbol},
        )

    historical_data = build_history_points(points, period, stoch_period, ema_period)
    return StockHistoryResponse(
        stock_info=build_stock_info(history, symbol, name),
        historical_data=historical_data[-history_settings.display_points:],
        period=period,
    )
