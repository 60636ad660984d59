from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import router
from app.cache import ResultCache
from app.config.settings import Settings, settings as default_settings
from app.logging.config import configure_logging, get_logger
from app.providers.base import PriceSource
from app.providers.yahoo import YahooChartSource
from app.services.indicators import IndicatorService

logger = get_logger(__name__)


def create_app(
    app_settings: Settings | None = None, source: PriceSource | None = None
) -> FastAPI:
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(level=app_settings.log_level, format_json=app_settings.log_json)
        cache = ResultCache(ttl_seconds=app_settings.cache_ttl_seconds)
        owned_source = None
        if source is None:
            owned_source = YahooChartSource(
                app_settings.providers, max_workers=app_settings.batch.batch_size
            )
        app.state.indicator_service = IndicatorService(
            source=source or owned_source,
            cache=cache,
            settings=app_settings,
        )
        logger.info("Indicator service started", cache_ttl_seconds=app_settings.cache_ttl_seconds)
        yield
        cache.clear()
        if owned_source is not None:
            owned_source.close()

    app = FastAPI(title="momentumdesk", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
