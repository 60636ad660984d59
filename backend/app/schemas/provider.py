from __future__ import annotations

from typing import Iterator, Optional

from pydantic import BaseModel, Field, model_validator


class PriceHistory(BaseModel):
    symbol: str
    timestamps: list[int] = Field(default_factory=list)
    closes: list[Optional[float]] = Field(default_factory=list)
    currency: Optional[str] = None
    regular_market_price: Optional[float] = None
    previous_close: Optional[float] = None
    chart_previous_close: Optional[float] = None

    @model_validator(mode="after")
    def _check_series(self) -> "PriceHistory":
        if len(self.timestamps) != len(self.closes):
            raise ValueError("timestamps and closes must have the same length")
        for previous, current in zip(self.timestamps, self.timestamps[1:]):
            if current <= previous:
                raise ValueError("timestamps must be strictly increasing")
        return self

    def valid_points(self) -> Iterator[tuple[int, float]]:
        for timestamp, close in zip(self.timestamps, self.closes):
            if close is None:
                continue
            yield timestamp, close

    def valid_closes(self) -> list[float]:
        return [close for _, close in self.valid_points()]
