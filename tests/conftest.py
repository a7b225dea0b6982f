from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from shaum.api.routes import fasting, health
from shaum.domain.services.recommendation_engine import RecommendationEngine
from shaum.infrastructure.repositories.fasting_settings_repository import FastingSettingsRepository
from shaum.infrastructure.store.config_store import InMemoryConfigStore
from shaum.services.forecast_service import ForecastService
import shaum.main as app_main


@pytest.fixture()
def config_store() -> InMemoryConfigStore:
    return InMemoryConfigStore()


@pytest.fixture()
def settings_repository(config_store) -> FastingSettingsRepository:
    return FastingSettingsRepository(config_store)


@pytest.fixture()
def engine() -> RecommendationEngine:
    return RecommendationEngine(max_override_span_days=40)


@pytest.fixture()
def forecast_service(engine) -> ForecastService:
    # Local conversion only, no network in tests
    return ForecastService(engine=engine)


@pytest.fixture()
def app(forecast_service, settings_repository):
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(fasting.router, prefix="/api/v1/fasting", tags=["Fasting"])

    app_main.forecast_service = forecast_service
    app_main.settings_repository = settings_repository

    yield app

    app_main.forecast_service = None
    app_main.settings_repository = None


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
