"""Shared fakes for the price source and instrument universe."""

import asyncio
import datetime

import pytest

from app.errors import ProviderUnavailableError
from app.schemas.provider import PriceHistory
from app.schemas.stocks import Instrument

DAY = 86_400
START_TS = int(datetime.datetime(2025, 1, 2, tzinfo=datetime.UTC).timestamp())


def make_history(symbol: str, closes: list[float | None], **meta) -> PriceHistory:
    timestamps = [START_TS + index * DAY for index in range(len(closes))]
    return PriceHistory(symbol=symbol, timestamps=timestamps, closes=closes, **meta)


def zigzag(count: int, base: float = 100.0) -> list[float]:
    return [base + (index % 5) - (index % 3) * 0.5 + index * 0.1 for index in range(count)]


class FakePriceSource:
    """Records every call; serves fixed closes or raises per symbol."""

    def __init__(self, closes=None, failures=None, delay: float = 0.0) -> None:
        self.closes = closes or {}
        self.failures = failures or {}
        self.delay = delay
        self.calls: list[str] = []
        self.active = 0
        self.max_active = 0

    async def fetch_history(self, symbol, start, end) -> PriceHistory:
        self.calls.append(symbol)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if symbol in self.failures:
                raise self.failures[symbol]
            return make_history(symbol, self.closes.get(symbol, zigzag(60)))
        finally:
            self.active -= 1


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def make_instruments(count: int) -> list[Instrument]:
    return [
        Instrument(symbol=f"SYM{index:02d}", name=f"Symbol {index}", market="foreign")
        for index in range(count)
    ]


@pytest.fixture
def fake_source() -> FakePriceSource:
    return FakePriceSource()


@pytest.fixture
def failing_source() -> FakePriceSource:
    return FakePriceSource(
        failures={"SYM03": ProviderUnavailableError("Provider unavailable", symbol="SYM03")}
    )
