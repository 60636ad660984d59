from __future__ import annotations

import asyncio
import datetime
import json
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from app.config.settings import ProviderSettings
from app.errors import EmptyResultError, MalformedResponseError, ProviderUnavailableError
from app.logging.config import get_logger
from app.schemas.provider import PriceHistory

logger = get_logger(__name__)

_CHART_PATH = "/v8/finance/chart/"


def _to_epoch(value: datetime.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.UTC)
    return int(value.timestamp())


def _optional_float(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_chart_payload(symbol: str, payload: object) -> PriceHistory:
    """Turn a chart API response body into a ``PriceHistory``."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("Unexpected payload type", symbol=symbol)

    chart = payload.get("chart")
    results = chart.get("result") if isinstance(chart, dict) else None
    if not results:
        raise EmptyResultError("No data", symbol=symbol)
    if not isinstance(results, list):
        raise MalformedResponseError("Unexpected result type", symbol=symbol)

    result = results[0]
    if not isinstance(result, dict):
        raise MalformedResponseError("Unexpected result entry", symbol=symbol)

    meta = result.get("meta") or {}
    if not isinstance(meta, dict):
        raise MalformedResponseError("Unexpected meta type", symbol=symbol)
    timestamps = result.get("timestamp") or []
    try:
        quotes = result["indicators"]["quote"][0]
        closes = quotes.get("close") or []
    except (KeyError, IndexError, TypeError, AttributeError) as exc:
        raise MalformedResponseError(
            "Missing close quotes", symbol=symbol, context={"reason": str(exc)}
        ) from exc

    if not timestamps or not closes:
        raise EmptyResultError("No data", symbol=symbol)
    if not isinstance(timestamps, list) or not isinstance(closes, list):
        raise MalformedResponseError("Unexpected series type", symbol=symbol)

    try:
        return PriceHistory(
            symbol=meta.get("symbol") or symbol,
            timestamps=timestamps,
            closes=[_optional_float(close) for close in closes],
            currency=meta.get("currency"),
            regular_market_price=_optional_float(meta.get("regularMarketPrice")),
            previous_close=_optional_float(meta.get("previousClose")),
            chart_previous_close=_optional_float(meta.get("chartPreviousClose")),
        )
    except ValidationError as exc:
        raise MalformedResponseError(
            "Invalid price series", symbol=symbol, context={"reason": str(exc)}
        ) from exc


class YahooChartSource:
    """Daily closes from the Yahoo Finance chart endpoint.

    Blocking requests run on a private pool of ``max_workers`` threads, one
    per request of a batch group.
    """

    def __init__(self, provider_settings: ProviderSettings, max_workers: int = 10) -> None:
        self.settings = provider_settings
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="yahoo-chart"
        )

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _build_url(self, symbol: str, params: dict[str, str]) -> str:
        base_url = self.settings.yahoo_base_url.rstrip("/")
        return f"{base_url}{_CHART_PATH}{quote(symbol, safe='')}?{urlencode(params)}"

    def _fetch_sync(
        self, symbol: str, start: datetime.datetime, end: datetime.datetime
    ) -> PriceHistory:
        url = self._build_url(
            symbol,
            {
                "period1": str(_to_epoch(start)),
                "period2": str(_to_epoch(end)),
                "interval": "1d",
            },
        )
        request = Request(url, headers={"User-Agent": self.settings.user_agent})
        try:
            with urlopen(request, timeout=self.settings.timeout_seconds) as response:
                body = response.read().decode("utf-8")
            payload = json.loads(body)
        except HTTPError as exc:
            if exc.code == 404:
                raise EmptyResultError("No data", symbol=symbol) from exc
            message = "Rate limited" if exc.code == 429 else f"HTTP {exc.code}"
            raise ProviderUnavailableError(
                message, symbol=symbol, status_code=exc.code
            ) from exc
        except (OSError, HTTPException) as exc:
            raise ProviderUnavailableError(
                "Provider unavailable", symbol=symbol, context={"reason": str(exc)}
            ) from exc
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedResponseError(
                "Invalid JSON", symbol=symbol, context={"reason": str(exc)}
            ) from exc

        return parse_chart_payload(symbol, payload)

    async def fetch_history(
        self, symbol: str, start: datetime.datetime, end: datetime.datetime
    ) -> PriceHistory:
        logger.debug("Fetching chart", symbol=symbol, start=start.isoformat(), end=end.isoformat())
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, partial(self._fetch_sync, symbol, start, end)
        )
