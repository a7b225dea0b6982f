"""
FastAPI Main Application
Wires the fasting engine, remote calendar, caches and config store
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from shaum.api.routes import fasting, health
from shaum.config import settings
from shaum.core.logging import setup_logging
from shaum.domain.services.recommendation_engine import RecommendationEngine
from shaum.infrastructure.cache.memory_cache import InMemoryCache
from shaum.infrastructure.cache.redis_cache import RedisCache
from shaum.infrastructure.calendar.aladhan_client import AladhanCalendarClient
from shaum.infrastructure.repositories.fasting_settings_repository import FastingSettingsRepository
from shaum.infrastructure.store.config_store import build_config_store
from shaum.services.forecast_service import ForecastService

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# Global instances
forecast_service: ForecastService | None = None
settings_repository: FastingSettingsRepository | None = None
calendar_client: AladhanCalendarClient | None = None
calendar_cache = None
config_store = None


def _log_config_change(key: str) -> None:
    logger.info("FASTING_CONFIG_UPDATED | key=%s", key)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of the engine's collaborators
    """
    global forecast_service, settings_repository
    global calendar_client, calendar_cache, config_store

    # ===================
    # STARTUP
    # ===================
    logger.info("Starting shaum fasting engine (env=%s)", settings.APP_ENV)

    # 1. Config store
    config_store = build_config_store(
        settings.CONFIG_STORE_BACKEND,
        redis_url=settings.REDIS_URL,
        path=settings.CONFIG_STORE_PATH,
    )
    settings_repository = FastingSettingsRepository(config_store)
    settings_repository.subscribe(_log_config_change)
    logger.info("Config store: %s", settings.CONFIG_STORE_BACKEND)

    # 2. Remote calendar + cache
    if settings.ALADHAN_ENABLED:
        calendar_client = AladhanCalendarClient(
            base_url=settings.ALADHAN_BASE_URL,
            timeout=settings.ALADHAN_TIMEOUT_SECONDS,
        )
        if settings.REDIS_ENABLED:
            calendar_cache = RedisCache(settings.REDIS_URL)
        else:
            calendar_cache = InMemoryCache()
        logger.info("Remote calendar enabled: %s", settings.ALADHAN_BASE_URL)
    else:
        logger.info("Remote calendar disabled, using local conversion only")

    # 3. Engine
    engine = RecommendationEngine(max_override_span_days=settings.RAMADHAN_OVERRIDE_MAX_SPAN_DAYS)
    forecast_service = ForecastService(
        engine=engine,
        lookup=calendar_client,
        cache=calendar_cache,
        offset_days=settings.HIJRI_OFFSET_DAYS,
        cache_ttl_seconds=settings.CALENDAR_CACHE_TTL_SECONDS,
    )
    logger.info("Fasting engine ready (hijri offset=%s days)", settings.HIJRI_OFFSET_DAYS)

    yield

    # ===================
    # SHUTDOWN
    # ===================
    logger.info("Shutting down shaum fasting engine")
    if calendar_client is not None:
        await calendar_client.close()
    if isinstance(calendar_cache, RedisCache):
        await calendar_cache.close()
    close_store = getattr(config_store, "close", None)
    if close_store is not None:
        await close_store()


app = FastAPI(
    title="Shaum Fasting Engine",
    description="Hijri calendar, fasting recommendations and monthly forecasts",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["Health"])
app.include_router(fasting.router, prefix="/api/v1/fasting", tags=["Fasting"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shaum.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
