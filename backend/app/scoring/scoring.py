from __future__ import annotations

from typing import Optional

from app.schemas.indicators import Momentum, ScoreBreakdown

# (upper bound inclusive, points)
_RSI_BUCKETS = ((20, 40), (30, 35), (40, 25), (50, 10))
_STOCH_RSI_BUCKETS = ((20, 25), (30, 20), (40, 10))
_MOMENTUM_POINTS = {"up": 20, "neutral": 5, "down": 0}


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _bucket_points(value: float, buckets: tuple[tuple[int, int], ...]) -> float:
    for upper, points in buckets:
        if value <= upper:
            return float(points)
    return 0.0


def _reversal_points(
    rsi: float, momentum: Optional[Momentum], change_percent: Optional[float]
) -> float:
    if change_percent is None:
        return 0.0
    if change_percent < -3 and rsi < 35:
        return 15.0
    if change_percent < -1.5 and rsi < 40:
        return 10.0
    if change_percent > 2 and momentum == "up" and rsi < 50:
        return 8.0
    return 0.0


def score_breakdown(
    rsi: float,
    stoch_rsi: Optional[float],
    momentum: Optional[Momentum],
    change_percent: Optional[float],
) -> ScoreBreakdown:
    return ScoreBreakdown(
        rsi_points=_bucket_points(rsi, _RSI_BUCKETS),
        stoch_rsi_points=(
            _bucket_points(stoch_rsi, _STOCH_RSI_BUCKETS) if stoch_rsi is not None else 0.0
        ),
        momentum_points=float(_MOMENTUM_POINTS.get(momentum or "neutral", 0)),
        reversal_points=_reversal_points(rsi, momentum, change_percent),
    )


def opportunity_score(
    rsi: Optional[float],
    stoch_rsi: Optional[float],
    momentum: Optional[Momentum],
    change_percent: Optional[float],
) -> Optional[int]:
    """Composite 0-100 buy-side score; None when RSI is unavailable."""
    if rsi is None:
        return None
    breakdown = score_breakdown(rsi, stoch_rsi, momentum, change_percent)
    return int(clamp(round(breakdown.total)))
