from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.catalog.stocks import SECTORS, find_instrument
from app.errors import (
    EmptyResultError,
    InsufficientHistoryError,
    InvalidParameterError,
    ProviderError,
)
from app.logging.config import get_logger
from app.schemas.indicators import (
    BatchResult,
    IndicatorsResponse,
    OpportunitiesResponse,
    SectorsResponse,
)
from app.schemas.stocks import StockHistoryResponse
from app.scoring.ranking import buy_candidates, sector_changes, sell_candidates
from app.services.history import load_stock_history
from app.services.indicators import IndicatorService, validate_period

router = APIRouter()
logger = get_logger(__name__)


def get_indicator_service(request: Request) -> IndicatorService:
    """FastAPI dependency returning the service owned by the app lifespan."""
    return request.app.state.indicator_service


def _resolve_period(period: int | None, service: IndicatorService) -> int:
    if period is None:
        return service.settings.indicators.default_period
    return period


def _raise_invalid_parameter(exc: InvalidParameterError) -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": str(exc), "parameter": exc.parameter, "allowed": exc.allowed},
    ) from exc


async def _load_batch(
    service: IndicatorService, period: int, force_refresh: bool
) -> tuple[BatchResult, bool]:
    try:
        return await service.get_indicators(period, force_refresh=force_refresh)
    except InvalidParameterError as exc:
        _raise_invalid_parameter(exc)
    except Exception as exc:
        logger.exception("RSI batch failed", period=period)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to fetch RSI data"},
        ) from exc


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/api/rsi", response_model=IndicatorsResponse)
async def get_rsi_endpoint(
    period: int | None = Query(None),
    force: bool = Query(False),
    service: IndicatorService = Depends(get_indicator_service),
) -> IndicatorsResponse:
    period = _resolve_period(period, service)
    batch, cached = await _load_batch(service, period, force)
    return IndicatorsResponse(
        data=batch.data,
        cached=cached,
        timestamp=batch.timestamp,
        period=period,
    )


@router.get("/api/opportunities", response_model=OpportunitiesResponse)
async def get_opportunities_endpoint(
    period: int | None = Query(None),
    service: IndicatorService = Depends(get_indicator_service),
) -> OpportunitiesResponse:
    period = _resolve_period(period, service)
    batch, cached = await _load_batch(service, period, False)
    thresholds = service.settings.opportunities
    return OpportunitiesResponse(
        buy=buy_candidates(batch, SECTORS, thresholds),
        sell=sell_candidates(batch, SECTORS, thresholds),
        cached=cached,
        timestamp=batch.timestamp,
        period=period,
    )


@router.get("/api/sectors", response_model=SectorsResponse)
async def get_sectors_endpoint(
    period: int | None = Query(None),
    service: IndicatorService = Depends(get_indicator_service),
) -> SectorsResponse:
    period = _resolve_period(period, service)
    batch, cached = await _load_batch(service, period, False)
    return SectorsResponse(
        sectors=sector_changes(batch, SECTORS),
        cached=cached,
        timestamp=batch.timestamp,
        period=period,
    )


@router.get("/api/stock-history", response_model=StockHistoryResponse)
async def get_stock_history_endpoint(
    symbol: str | None = Query(None),
    period: int | None = Query(None),
    service: IndicatorService = Depends(get_indicator_service),
) -> StockHistoryResponse:
    cleaned = (symbol or "").strip().upper()
    if not cleaned:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Symbol is required"},
        )
    period = _resolve_period(period, service)
    try:
        validate_period(period, service.settings.indicators.allowed_periods)
    except InvalidParameterError as exc:
        _raise_invalid_parameter(exc)

    instrument = find_instrument(cleaned)
    indicator_settings = service.settings.indicators
    try:
        return await load_stock_history(
            service.source,
            cleaned,
            period,
            service.settings.history,
            name=instrument.name if instrument else None,
            stoch_period=indicator_settings.stoch_period,
            ema_period=indicator_settings.ema_period,
        )
    except EmptyResultError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "No data available for this symbol"},
        ) from exc
    except InsufficientHistoryError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Insufficient data",
                "required": exc.required_count,
                "available": exc.available_count,
            },
        ) from exc
    except ProviderError as exc:
        logger.warning("Stock history fetch failed", symbol=cleaned, error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": "Failed to fetch stock history"},
        ) from exc
