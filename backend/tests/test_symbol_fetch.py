import asyncio
import datetime
from unittest.mock import patch

import pytest

from conftest import FakePriceSource, zigzag
from app.errors import (
    EmptyResultError,
    InsufficientHistoryError,
    MalformedResponseError,
    ProviderUnavailableError,
)
from app.indicators.rsi import calculate_rsi
from app.jobs.symbol_fetch import (
    build_snapshot,
    fetch_symbol_snapshot,
    lookback_trading_days,
    lookback_window,
)


def test_lookback_covers_minimum_trading_days() -> None:
    assert lookback_trading_days(7) == 35
    assert lookback_trading_days(14) == 35
    assert lookback_trading_days(30) == 50

    now = datetime.datetime(2025, 6, 2, tzinfo=datetime.UTC)
    start, end = lookback_window(30, now)
    assert end == now
    assert (end - start).days >= 50 * 7 // 5


def test_build_snapshot_basic_fields() -> None:
    closes = [10.0, 11.0, 10.5, 11.5, 12.0, 11.0, 12.5, 13.0, 12.0]
    snapshot = build_snapshot("ABC", closes, 7, extended=False)

    assert snapshot.symbol == "ABC"
    assert snapshot.rsi == calculate_rsi(closes, 7)
    assert snapshot.price == 12.0
    assert snapshot.change == -1.0
    assert snapshot.change_percent == -7.69
    assert snapshot.stoch_rsi is None
    assert snapshot.opportunity_score is None
    assert snapshot.momentum is None
    assert snapshot.error is None


def test_build_snapshot_extended_fields() -> None:
    closes = zigzag(60)
    snapshot = build_snapshot("ABC", closes, 14)

    assert snapshot.rsi is not None
    assert snapshot.stoch_rsi is not None
    assert snapshot.rsi_smoothed is not None
    assert snapshot.momentum in {"up", "down", "neutral"}
    assert isinstance(snapshot.opportunity_score, int)
    assert 0 <= snapshot.opportunity_score <= 100


def test_build_snapshot_rejects_short_history() -> None:
    with pytest.raises(InsufficientHistoryError) as excinfo:
        build_snapshot("ABC", [1.0] * 14, 14)
    assert excinfo.value.required_count == 15
    assert excinfo.value.available_count == 14


def test_fetch_filters_missing_closes() -> None:
    closes = zigzag(20)
    with_gaps = closes[:5] + [None] + closes[5:] + [None]
    source = FakePriceSource(closes={"ABC": with_gaps})

    snapshot = asyncio.run(fetch_symbol_snapshot(source, "ABC", 14))

    assert snapshot.error is None
    assert snapshot.rsi == calculate_rsi(closes, 14)
    assert source.calls == ["ABC"]


def test_fetch_insufficient_data_snapshot() -> None:
    source = FakePriceSource(closes={"ABC": [10.0] * 10 + [None] * 10})

    snapshot = asyncio.run(fetch_symbol_snapshot(source, "ABC", 14))

    assert snapshot.error == "Insufficient data"
    assert snapshot.rsi is None
    assert snapshot.momentum == "neutral"
    assert snapshot.price is None


@pytest.mark.parametrize(
    "error",
    [
        ProviderUnavailableError("HTTP 503", symbol="ABC", status_code=503),
        EmptyResultError("No data", symbol="ABC"),
        MalformedResponseError("Invalid JSON", symbol="ABC"),
    ],
)
def test_fetch_provider_failure_becomes_error_snapshot(error) -> None:
    source = FakePriceSource(failures={"ABC": error})

    snapshot = asyncio.run(fetch_symbol_snapshot(source, "ABC", 14))

    assert snapshot.error == str(error)
    assert snapshot.rsi is None
    assert snapshot.momentum == "neutral"
    assert snapshot.opportunity_score is None
    assert snapshot.change_percent is None


def test_fetch_timeout_becomes_error_snapshot() -> None:
    source = FakePriceSource(delay=0.5)

    snapshot = asyncio.run(fetch_symbol_snapshot(source, "ABC", 14, timeout=0.01))

    assert snapshot.error == "Timeout"
    assert snapshot.rsi is None
    assert snapshot.momentum == "neutral"


def test_build_snapshot_logs_score_breakdown() -> None:
    with patch("app.jobs.symbol_fetch.logger") as logger_mock:
        snapshot = build_snapshot("ABC", zigzag(60), 14)

    logger_mock.debug.assert_called_once()
    fields = logger_mock.debug.call_args.kwargs
    assert fields["symbol"] == "ABC"
    assert fields["score"] == snapshot.opportunity_score
    assert {"rsi_points", "stoch_rsi_points", "momentum_points", "reversal_points"} <= set(fields)


def test_build_snapshot_without_extended_set_skips_score_log() -> None:
    with patch("app.jobs.symbol_fetch.logger") as logger_mock:
        build_snapshot("ABC", zigzag(60), 14, extended=False)

    logger_mock.debug.assert_not_called()
