"""
Fasting API Routes
Hijri dates, daily recommendations, monthly forecasts and user schedules
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from shaum.domain.models import (
    FastingType,
    ForecastDay,
    HijriDate,
    IndexBy,
    RamadhanOverride,
    Recommendation,
)
from shaum.domain.schemas.fasting import (
    FastingLogPayload,
    RamadhanOverridePayload,
    RecurrenceConfigPayload,
)
from shaum.domain.services.fasting_stats import build_log_entry, compute_log_stats
from shaum.domain.services.hijri_calendar import to_hijri
from shaum.domain.services.prohibited_days import prohibited_reason
from shaum.exceptions import ConfigValidationError
from shaum.utils.time import today_local

logger = logging.getLogger(__name__)
router = APIRouter()


# Response models
class HijriDateResponse(BaseModel):
    day: int
    month: int
    month_name: str
    year: int
    era: str


class RecommendationResponse(BaseModel):
    type: Optional[FastingType]
    is_forbidden: bool
    is_nadzar: bool
    is_qadha: bool
    reason: Optional[str]
    label_key: str


class DayRecommendationResponse(BaseModel):
    date: date
    hijri: HijriDateResponse
    recommendation: RecommendationResponse
    override_warning: Optional[str] = None


class RamadhanConfigResponse(RamadhanOverridePayload):
    override_warning: Optional[str] = None


class ProhibitedDayResponse(BaseModel):
    date: date
    hijri: HijriDateResponse
    is_prohibited: bool
    reason: Optional[str]


class ForecastDayResponse(BaseModel):
    date: date
    hijri: HijriDateResponse
    recommendation: RecommendationResponse
    source: str


class ForecastResponse(BaseModel):
    year: int
    month: int
    index_by: IndexBy
    days: List[ForecastDayResponse]


class LogEntryRequest(BaseModel):
    date: date
    type: FastingType
    notes: Optional[str] = None


class StatsResponse(BaseModel):
    total: int
    nadzar: int
    qadha: int
    sunnah: int
    wajib: int


def _hijri_response(hijri: HijriDate) -> HijriDateResponse:
    return HijriDateResponse(
        day=hijri.day,
        month=hijri.month.number,
        month_name=hijri.month.name,
        year=hijri.year,
        era=hijri.era_label,
    )


def _recommendation_response(rec: Recommendation) -> RecommendationResponse:
    return RecommendationResponse(
        type=rec.type,
        is_forbidden=rec.is_forbidden,
        is_nadzar=rec.is_nadzar,
        is_qadha=rec.is_qadha,
        reason=rec.reason,
        label_key=rec.label_key,
    )


def _forecast_day_response(day: ForecastDay) -> ForecastDayResponse:
    return ForecastDayResponse(
        date=day.date,
        hijri=_hijri_response(day.hijri),
        recommendation=_recommendation_response(day.recommendation),
        source=day.source.value,
    )


def _local_hijri(day: date, offset_days: int) -> HijriDate:
    try:
        return to_hijri(day, offset_days)
    except (ValueError, OverflowError) as exc:
        raise HTTPException(status_code=400, detail=f"Date out of range: {exc}") from exc


def _override_warning(override: Optional[RamadhanOverride], max_span_days: int) -> Optional[str]:
    problem = override.problem(max_span_days) if override else None
    return f"Ramadhan override ignored: {problem}" if problem else None


def _services():
    from shaum.main import forecast_service, settings_repository

    if forecast_service is None or settings_repository is None:
        raise HTTPException(status_code=500, detail="Fasting engine not initialized")
    return forecast_service, settings_repository


@router.get("/hijri", response_model=HijriDateResponse)
async def get_hijri_date(
    on: Optional[date] = Query(default=None, alias="date"),
    offset: Optional[int] = Query(default=None, ge=-30, le=30),
):
    """
    Convert a Gregorian date (default: today) to Hijri
    """
    forecast_service, _ = _services()
    day = on or today_local()
    offset_days = forecast_service.offset_days if offset is None else offset
    return _hijri_response(_local_hijri(day, offset_days))


@router.get("/recommendation", response_model=DayRecommendationResponse)
async def get_recommendation(on: Optional[date] = Query(default=None, alias="date")):
    """
    Fasting recommendation for a date (default: today)
    """
    forecast_service, settings_repository = _services()
    engine = forecast_service.engine
    day = on or today_local()

    preferences = await settings_repository.get_preferences()
    override = preferences.ramadhan_override
    warning = _override_warning(override, engine.max_override_span_days)

    hijri = _local_hijri(day, forecast_service.offset_days)
    rec = engine.resolve(day, hijri, preferences.nadzar, preferences.qadha, override)

    return DayRecommendationResponse(
        date=day,
        hijri=_hijri_response(hijri),
        recommendation=_recommendation_response(rec),
        override_warning=warning,
    )


@router.get("/prohibited", response_model=ProhibitedDayResponse)
async def get_prohibited(on: Optional[date] = Query(default=None, alias="date")):
    """
    Whether fasting is forbidden on a date, and why
    """
    forecast_service, settings_repository = _services()
    engine = forecast_service.engine
    day = on or today_local()

    override = engine.validated_override(await settings_repository.get_ramadhan_override())
    hijri = _local_hijri(day, forecast_service.offset_days)

    reason = prohibited_reason(hijri, day, override, engine.max_override_span_days)
    return ProhibitedDayResponse(
        date=day,
        hijri=_hijri_response(hijri),
        is_prohibited=reason is not None,
        reason=reason,
    )


@router.get("/forecast", response_model=ForecastResponse)
async def get_forecast(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    index_by: IndexBy = IndexBy.GREGORIAN,
):
    """
    Day-by-day recommendations for a Gregorian or Hijri month
    """
    forecast_service, settings_repository = _services()
    preferences = await settings_repository.get_preferences()

    try:
        days = await forecast_service.forecast_month(year, month, index_by, preferences)
    except (ValueError, OverflowError) as exc:
        raise HTTPException(status_code=400, detail=f"Month out of range: {exc}") from exc

    return ForecastResponse(
        year=year,
        month=month,
        index_by=index_by,
        days=[_forecast_day_response(d) for d in days],
    )


@router.get("/config/nadzar", response_model=RecurrenceConfigPayload)
async def get_nadzar_config():
    _, settings_repository = _services()
    return RecurrenceConfigPayload.from_domain(await settings_repository.get_nadzar_config())


@router.put("/config/nadzar", response_model=RecurrenceConfigPayload)
async def update_nadzar_config(payload: RecurrenceConfigPayload):
    _, settings_repository = _services()
    try:
        config = await settings_repository.save_nadzar_config(payload.to_store())
    except ConfigValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RecurrenceConfigPayload.from_domain(config)


@router.get("/config/qadha", response_model=RecurrenceConfigPayload)
async def get_qadha_config():
    _, settings_repository = _services()
    return RecurrenceConfigPayload.from_domain(await settings_repository.get_qadha_config())


@router.put("/config/qadha", response_model=RecurrenceConfigPayload)
async def update_qadha_config(payload: RecurrenceConfigPayload):
    _, settings_repository = _services()
    try:
        config = await settings_repository.save_qadha_config(payload.to_store())
    except ConfigValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RecurrenceConfigPayload.from_domain(config)


@router.get("/config/ramadhan", response_model=RamadhanOverridePayload)
async def get_ramadhan_config():
    _, settings_repository = _services()
    return RamadhanOverridePayload.from_domain(await settings_repository.get_ramadhan_override())


@router.put("/config/ramadhan", response_model=RamadhanConfigResponse)
async def update_ramadhan_config(payload: RamadhanOverridePayload):
    forecast_service, settings_repository = _services()
    try:
        override = await settings_repository.save_ramadhan_override(payload.to_store())
    except ConfigValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    # Stored as entered; the engine skips it while it is invalid
    stored = RamadhanOverridePayload.from_domain(override)
    warning = _override_warning(override, forecast_service.engine.max_override_span_days)
    if warning:
        logger.warning("RAMADHAN_OVERRIDE_SAVED_INVALID | %s", warning)

    return RamadhanConfigResponse(
        start_date=stored.start_date,
        end_date=stored.end_date,
        override_warning=warning,
    )


@router.delete("/config/ramadhan")
async def delete_ramadhan_config():
    _, settings_repository = _services()
    await settings_repository.clear_ramadhan_override()
    return {"status": "cleared"}


@router.post("/log-entry", response_model=FastingLogPayload, response_model_by_alias=True)
async def create_log_entry(request: LogEntryRequest):
    """
    Build a fasting log with Nadzar/Qadha flags derived from the schedules
    """
    _, settings_repository = _services()
    preferences = await settings_repository.get_preferences()
    log = build_log_entry(
        request.date,
        request.type,
        preferences.nadzar,
        preferences.qadha,
        notes=request.notes,
    )
    return FastingLogPayload(
        date=log.date,
        type=log.type,
        is_completed=log.is_completed,
        is_nadzar=log.is_nadzar,
        is_qadha=log.is_qadha,
        notes=log.notes,
    )


@router.post("/stats", response_model=StatsResponse)
async def get_stats(logs: List[FastingLogPayload]):
    """
    Aggregate counts for a list of fasting logs
    """
    forecast_service, _ = _services()
    stats = compute_log_stats(
        (log.to_domain() for log in logs),
        offset_days=forecast_service.offset_days,
    )
    return StatsResponse(
        total=stats.total,
        nadzar=stats.nadzar,
        qadha=stats.qadha,
        sunnah=stats.sunnah,
        wajib=stats.wajib,
    )
