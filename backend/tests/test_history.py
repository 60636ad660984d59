import asyncio
import datetime

import pytest

from conftest import FakePriceSource, make_history, zigzag
from app.config.settings import HistorySettings
from app.errors import InsufficientHistoryError
from app.indicators.rsi import (
    calculate_rsi,
    calculate_smoothed_rsi,
    calculate_stoch_rsi,
    round2,
)
from app.services.history import build_history_points, build_stock_info, load_stock_history


def test_history_points_match_prefix_recomputation() -> None:
    closes = zigzag(50)
    history = make_history("AAPL", closes)
    points = build_history_points(list(history.valid_points()), 14)

    assert len(points) == len(closes) - 14
    for offset, point in enumerate(points):
        end = 14 + offset
        prefix = closes[: end + 1]
        naive_rsis = [calculate_rsi(closes[: j + 1], 14) for j in range(14, end + 1)]
        assert point.rsi == calculate_rsi(prefix, 14)
        assert point.rsi_smoothed == calculate_smoothed_rsi(prefix, 14, 9)
        expected_stoch = calculate_stoch_rsi(naive_rsis, 14) if len(naive_rsis) >= 14 else None
        assert point.stoch_rsi == expected_stoch


def test_history_points_use_utc_dates() -> None:
    history = make_history("AAPL", zigzag(16))
    points = build_history_points(list(history.valid_points()), 14)

    assert points[0].date == datetime.date(2025, 1, 16)
    assert points[0].stoch_rsi is None
    assert points[0].rsi_smoothed is None


def test_stock_info_prefers_meta_prices() -> None:
    history = make_history(
        "AAPL",
        [10.0, 11.0],
        currency="USD",
        regular_market_price=12.0,
        previous_close=10.0,
    )

    info = build_stock_info(history, "AAPL", "Apple")

    assert info.name == "Apple"
    assert info.current_price == 12.0
    assert info.previous_close == 10.0
    assert info.change == 2.0
    assert info.change_percent == pytest.approx(20.0)


def test_stock_info_falls_back_to_closes() -> None:
    history = make_history("YPFD.BA", [100.0, None, 110.0])

    info = build_stock_info(history, "YPFD.BA")

    assert info.name == "YPFD.BA"
    assert info.currency == "USD"
    assert info.current_price == 110.0
    assert info.previous_close == 100.0
    assert info.change_percent == pytest.approx(10.0)


def test_load_history_trims_to_display_window() -> None:
    source = FakePriceSource(closes={"AAPL": zigzag(130)})
    settings = HistorySettings(display_points=90)

    response = asyncio.run(load_stock_history(source, "AAPL", 14, settings, name="Apple"))

    assert len(response.historical_data) == 90
    assert response.period == 14
    assert response.stock_info.name == "Apple"
    assert response.historical_data[-1].price == round2(zigzag(130)[-1])


def test_load_history_requires_extra_points() -> None:
    source = FakePriceSource(closes={"AAPL": zigzag(33)})

    with pytest.raises(InsufficientHistoryError) as excinfo:
        asyncio.run(load_stock_history(source, "AAPL", 14, HistorySettings()))

    assert excinfo.value.required_count == 34
    assert excinfo.value.available_count == 33
