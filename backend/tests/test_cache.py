import datetime

from app.cache import ResultCache, cache_key
from app.schemas.indicators import BatchResult, IndicatorSnapshot


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_result(period: int = 14) -> BatchResult:
    return BatchResult(
        data={"AAPL": IndicatorSnapshot(symbol="AAPL", rsi=55.0)},
        timestamp=datetime.datetime(2025, 1, 2, tzinfo=datetime.UTC),
        period=period,
    )


def test_cache_key_per_period() -> None:
    assert cache_key(14) == "rsi_data_14"
    assert cache_key(7) != cache_key(14)


def test_set_then_get_returns_identical_result() -> None:
    cache = ResultCache(ttl_seconds=600, clock=FakeClock())
    result = make_result()

    cache.set("rsi_data_14", result)

    assert cache.get("rsi_data_14") is result


def test_get_missing_key() -> None:
    assert ResultCache().get("rsi_data_14") is None


def test_entry_expires_after_ttl() -> None:
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=600, clock=clock)
    cache.set("rsi_data_14", make_result())

    clock.now += 599
    assert cache.get("rsi_data_14") is not None

    clock.now += 1
    assert cache.get("rsi_data_14") is None
    assert len(cache) == 0


def test_set_replaces_entry_and_resets_ttl() -> None:
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=600, clock=clock)
    first = make_result()
    second = make_result()
    cache.set("rsi_data_14", first)

    clock.now += 500
    cache.set("rsi_data_14", second)
    clock.now += 500

    assert cache.get("rsi_data_14") is second


def test_independent_caches_do_not_share_entries() -> None:
    first = ResultCache()
    second = ResultCache()
    first.set("rsi_data_14", make_result())

    assert second.get("rsi_data_14") is None


def test_capacity_bounds_entries() -> None:
    cache = ResultCache(clock=FakeClock(), max_entries=2)
    for period in (7, 14, 21):
        cache.set(cache_key(period), make_result(period))

    assert len(cache) == 2
    assert cache.get(cache_key(21)) is not None
