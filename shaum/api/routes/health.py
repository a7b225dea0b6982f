from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready():
    from shaum.main import forecast_service, settings_repository

    engine_ready = forecast_service is not None and settings_repository is not None
    return {
        "status": "ready" if engine_ready else "not_ready",
        "remote_calendar": forecast_service is not None and forecast_service.lookup is not None,
    }
