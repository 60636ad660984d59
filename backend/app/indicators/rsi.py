"""RSI family of oscillators: RSI, StochRSI, EMA-smoothed RSI and RSI momentum.

All functions are pure. Values are rounded half-up to two decimals, and
``None`` is returned whenever the input is too short for the requested period.
"""

from __future__ import annotations

import math
from typing import Literal, Optional, Sequence

Momentum = Literal["up", "down", "neutral"]

MOMENTUM_THRESHOLD = 1.5
MOMENTUM_LOOKBACK = 3


def round2(value: float) -> float:
    """Round half-up to two decimals (``0.125 -> 0.13``, ``-0.125 -> -0.12``)."""
    return math.floor(value * 100 + 0.5) / 100


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return round2(100 - 100 / (1 + rs))


def _seed_averages(prices: Sequence[float], period: int) -> tuple[float, float]:
    gains = 0.0
    losses = 0.0
    for i in range(1, period + 1):
        change = prices[i] - prices[i - 1]
        if change >= 0:
            gains += change
        else:
            losses += abs(change)
    return gains / period, losses / period


def _smooth(avg_gain: float, avg_loss: float, change: float, period: int) -> tuple[float, float]:
    gain = change if change >= 0 else 0.0
    loss = abs(change) if change < 0 else 0.0
    avg_gain = (avg_gain * (period - 1) + gain) / period
    avg_loss = (avg_loss * (period - 1) + loss) / period
    return avg_gain, avg_loss


def calculate_rsi(prices: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Calculate the Relative Strength Index with Wilder's smoothing.

    The first ``period`` price differences seed the average gain and loss
    with a simple mean; every later difference is folded in with weight
    ``1/period``. A series without losses saturates at exactly 100.

    Args:
        prices: Closing prices in chronological order
        period: Smoothing window (default 14)

    Returns:
        RSI in [0, 100] or None if fewer than ``period + 1`` prices
    """
    if len(prices) < period + 1:
        return None

    avg_gain, avg_loss = _seed_averages(prices, period)
    for i in range(period + 1, len(prices)):
        avg_gain, avg_loss = _smooth(avg_gain, avg_loss, prices[i] - prices[i - 1], period)

    return _rsi_from_averages(avg_gain, avg_loss)


def rsi_history(prices: Sequence[float], period: int = 14) -> list[float]:
    """
    RSI for every price prefix ending at index ``period`` .. ``len(prices) - 1``.

    Runs a single pass that carries the smoothed averages forward. Each step
    performs the same floating-point operations, in the same order, as
    ``calculate_rsi(prices[:i + 1], period)``, so the values are identical to
    recomputing every prefix from scratch.
    """
    if len(prices) < period + 1:
        return []

    avg_gain, avg_loss = _seed_averages(prices, period)
    history = [_rsi_from_averages(avg_gain, avg_loss)]
    for i in range(period + 1, len(prices)):
        avg_gain, avg_loss = _smooth(avg_gain, avg_loss, prices[i] - prices[i - 1], period)
        history.append(_rsi_from_averages(avg_gain, avg_loss))
    return history


def calculate_stoch_rsi(rsi_values: Sequence[float], period: int = 14) -> Optional[float]:
    """
    Normalize the latest RSI into [0, 100] against its trailing min/max.

    A flat window (max == min) yields the neutral value 50.
    """
    if len(rsi_values) < period:
        return None

    window = rsi_values[-period:]
    highest = max(window)
    lowest = min(window)
    if highest == lowest:
        return 50.0

    current = rsi_values[-1]
    return round2((current - lowest) / (highest - lowest) * 100)


def calculate_ema(values: Sequence[float], period: int) -> Optional[float]:
    """Exponential moving average seeded with the SMA of the first ``period`` values."""
    if len(values) < period:
        return None

    multiplier = 2 / (period + 1)
    ema = sum(values[:period]) / period
    for value in values[period:]:
        ema = (value - ema) * multiplier + ema
    return round2(ema)


def calculate_smoothed_rsi(
    prices: Sequence[float], rsi_period: int = 14, ema_period: int = 9
) -> Optional[float]:
    """EMA of the full RSI history, or None below ``rsi_period + ema_period`` prices."""
    if len(prices) < rsi_period + ema_period:
        return None
    return calculate_ema(rsi_history(prices, rsi_period), ema_period)


def calculate_rsi_momentum(prices: Sequence[float], rsi_period: int = 14) -> Momentum:
    """
    Classify the recent RSI direction from the RSI of the last three prefixes.

    The mean of the two consecutive RSI deltas above ``MOMENTUM_THRESHOLD``
    is ``up``, below its negative is ``down``; anything else, including too
    little history, is ``neutral``.
    """
    if len(prices) < rsi_period + MOMENTUM_LOOKBACK:
        return "neutral"

    recent = rsi_history(prices, rsi_period)[-MOMENTUM_LOOKBACK:]
    deltas = [recent[i] - recent[i - 1] for i in range(1, len(recent))]
    trend = sum(deltas) / len(deltas)

    if trend > MOMENTUM_THRESHOLD:
        return "up"
    if trend < -MOMENTUM_THRESHOLD:
        return "down"
    return "neutral"
