from __future__ import annotations

import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Momentum = Literal["up", "down", "neutral"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IndicatorSnapshot(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    symbol: str
    rsi: Optional[float] = Field(default=None, ge=0, le=100)
    stoch_rsi: Optional[float] = None
    rsi_smoothed: Optional[float] = None
    momentum: Optional[Momentum] = None
    opportunity_score: Optional[int] = Field(default=None, ge=0, le=100)
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, symbol: str, error: str) -> "IndicatorSnapshot":
        return cls(symbol=symbol, error=error, momentum="neutral")


class BatchResult(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    data: dict[str, IndicatorSnapshot] = Field(default_factory=dict)
    timestamp: datetime.datetime
    period: int


class IndicatorsResponse(CamelModel):
    data: dict[str, IndicatorSnapshot]
    cached: bool
    timestamp: datetime.datetime
    period: int


class OpportunityEntry(CamelModel):
    symbol: str
    name: str
    sector: str
    market: str
    snapshot: IndicatorSnapshot


class OpportunitiesResponse(CamelModel):
    buy: list[OpportunityEntry] = Field(default_factory=list)
    sell: list[OpportunityEntry] = Field(default_factory=list)
    cached: bool
    timestamp: datetime.datetime
    period: int


class SectorSummary(CamelModel):
    name: str
    symbols: list[str] = Field(default_factory=list)
    average_change_percent: Optional[float] = None


class SectorsResponse(CamelModel):
    sectors: list[SectorSummary] = Field(default_factory=list)
    cached: bool
    timestamp: datetime.datetime
    period: int


class ScoreBreakdown(BaseModel):
    rsi_points: float = 0.0
    stoch_rsi_points: float = 0.0
    momentum_points: float = 0.0
    reversal_points: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.rsi_points
            + self.stoch_rsi_points
            + self.momentum_points
            + self.reversal_points
        )
