from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.indicators import CamelModel

Market = Literal["domestic", "foreign"]


class Instrument(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    market: Market


class Sector(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    stocks: list[Instrument] = Field(default_factory=list)


class HistoryPoint(CamelModel):
    date: datetime.date
    price: float
    rsi: Optional[float] = None
    stoch_rsi: Optional[float] = None
    rsi_smoothed: Optional[float] = None


class StockInfo(CamelModel):
    symbol: str
    name: str
    currency: str = "USD"
    current_price: float
    previous_close: float
    change: float
    change_percent: float


class StockHistoryResponse(CamelModel):
    stock_info: StockInfo
    historical_data: list[HistoryPoint] = Field(default_factory=list)
    period: int
