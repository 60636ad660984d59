from __future__ import annotations

import datetime
from typing import Protocol

from app.schemas.provider import PriceHistory


class PriceSource(Protocol):
    """Daily close history keyed by symbol and date range.

    Implementations raise ``ProviderUnavailableError``, ``EmptyResultError``
    or ``MalformedResponseError`` instead of returning partial data.
    """

    async def fetch_history(
        self, symbol: str, start: datetime.datetime, end: datetime.datetime
    ) -> PriceHistory: ...
