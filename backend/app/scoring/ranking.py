from __future__ import annotations

from app.config.settings import OpportunitySettings
from app.indicators.rsi import round2
from app.schemas.indicators import BatchResult, OpportunityEntry, SectorSummary
from app.schemas.stocks import Sector


def _entries(batch: BatchResult, sectors: list[Sector]) -> list[OpportunityEntry]:
    entries: list[OpportunityEntry] = []
    seen: set[str] = set()
    for sector in sectors:
        for stock in sector.stocks:
            snapshot = batch.data.get(stock.symbol)
            if snapshot is None or snapshot.rsi is None or stock.symbol in seen:
                continue
            seen.add(stock.symbol)
            entries.append(
                OpportunityEntry(
                    symbol=stock.symbol,
                    name=stock.name,
                    sector=sector.name,
                    market=stock.market,
                    snapshot=snapshot,
                )
            )
    return entries


def buy_candidates(
    batch: BatchResult, sectors: list[Sector], thresholds: OpportunitySettings
) -> list[OpportunityEntry]:
    """Oversold or well-scored symbols, best opportunity score first."""
    candidates = [
        entry
        for entry in _entries(batch, sectors)
        if entry.snapshot.rsi < thresholds.buy_rsi_below
        or (entry.snapshot.opportunity_score or 0) >= thresholds.buy_min_score
    ]
    candidates.sort(key=lambda entry: entry.snapshot.opportunity_score or 0, reverse=True)
    return candidates[: thresholds.limit]


def sell_candidates(
    batch: BatchResult, sectors: list[Sector], thresholds: OpportunitySettings
) -> list[OpportunityEntry]:
    """Overbought symbols, highest RSI first."""
    candidates = [
        entry
        for entry in _entries(batch, sectors)
        if entry.snapshot.rsi > thresholds.sell_rsi_above
    ]
    candidates.sort(key=lambda entry: entry.snapshot.rsi, reverse=True)
    return candidates[: thresholds.limit]


def sector_changes(batch: BatchResult, sectors: list[Sector]) -> list[SectorSummary]:
    summaries: list[SectorSummary] = []
    for sector in sectors:
        changes = [
            snapshot.change_percent
            for snapshot in (batch.data.get(stock.symbol) for stock in sector.stocks)
            if snapshot is not None and snapshot.change_percent is not None
        ]
        average = round2(sum(changes) / len(changes)) if changes else None
        summaries.append(
            SectorSummary(
                name=sector.name,
                symbols=[stock.symbol for stock in sector.stocks],
                average_change_percent=average,
            )
        )
    return summaries
