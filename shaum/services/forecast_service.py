"""
MONTHLY FORECAST SERVICE
Project fasting recommendations over a Gregorian or Hijri month

RESPONSIBILITIES:
- Pair each day of the month with its Hijri/Gregorian counterpart
- Prefer the remote calendar (cached per month), fall back to local conversion
- Run the recommendation engine for every day

RULES:
❌ Remote lookup errors never escape
❌ Recommendations are never cached, only raw remote months
✅ Lazy, finite, restartable iteration
✅ Cold and warm cache give the same result
"""

import asyncio
import calendar
import logging
from datetime import date, timedelta
from typing import AsyncIterator, Dict, Iterator, List, Optional

from shaum.domain.models import (
    FastingPreferences,
    ForecastDay,
    ForecastSource,
    HijriDate,
    IndexBy,
    RamadhanOverride,
)
from shaum.domain.services.hijri_calendar import hijri_month_length, hijri_month_start, to_hijri
from shaum.domain.services.recommendation_engine import RecommendationEngine
from shaum.exceptions import CalendarLookupError
from shaum.infrastructure.calendar.types import (
    GREGORIAN_TO_HIJRI,
    HIJRI_TO_GREGORIAN,
    CalendarDay,
    CalendarLookup,
    LookupCache,
    LookupKey,
)

logger = logging.getLogger(__name__)


class ForecastService:
    """
    Monthly Forecast Service
    Stateless apart from the injected remote-month cache
    """

    def __init__(
        self,
        engine: RecommendationEngine,
        lookup: Optional[CalendarLookup] = None,
        cache: Optional[LookupCache] = None,
        offset_days: int = 0,
        cache_ttl_seconds: int = 86_400,
    ):
        self.engine = engine
        self.lookup = lookup
        self.cache = cache
        self.offset_days = offset_days
        self.cache_ttl_seconds = cache_ttl_seconds
        self._inflight: Dict[LookupKey, asyncio.Task] = {}

    async def forecast_month(
        self,
        year: int,
        month: int,
        index_by: IndexBy = IndexBy.GREGORIAN,
        preferences: Optional[FastingPreferences] = None,
    ) -> List[ForecastDay]:
        """Materialized monthly forecast"""
        return [day async for day in self.iter_month(year, month, index_by, preferences)]

    async def iter_month(
        self,
        year: int,
        month: int,
        index_by: IndexBy = IndexBy.GREGORIAN,
        preferences: Optional[FastingPreferences] = None,
    ) -> AsyncIterator[ForecastDay]:
        """
        Yield one ForecastDay per day of the month

        Args:
            year: Gregorian year, or Hijri year when indexing by Hijri
            month: Month number (1-12) in the chosen calendar
            index_by: Calendar the month is expressed in
            preferences: Nadzar/Qadha schedules and Ramadhan override
        """
        preferences = preferences or FastingPreferences()
        override = self.engine.validated_override(preferences.ramadhan_override)

        if index_by == IndexBy.HIJRI:
            pairs = self._hijri_month_pairs(year, month)
        else:
            pairs = self._gregorian_month_pairs(year, month)

        async for day, hijri, source in pairs:
            yield self._forecast_day(day, hijri, source, preferences, override)

    def iter_month_local(
        self,
        year: int,
        month: int,
        index_by: IndexBy = IndexBy.GREGORIAN,
        preferences: Optional[FastingPreferences] = None,
    ) -> Iterator[ForecastDay]:
        """Synchronous forecast from local conversion only"""
        preferences = preferences or FastingPreferences()
        override = self.engine.validated_override(preferences.ramadhan_override)

        if index_by == IndexBy.HIJRI:
            pairs = self._local_hijri_pairs(year, month)
        else:
            pairs = (
                (day, to_hijri(day, self.offset_days))
                for day in self._gregorian_days(year, month)
            )

        for day, hijri in pairs:
            yield self._forecast_day(day, hijri, ForecastSource.LOCAL, preferences, override)

    def _forecast_day(
        self,
        day: date,
        hijri: HijriDate,
        source: ForecastSource,
        preferences: FastingPreferences,
        override: Optional[RamadhanOverride],
    ) -> ForecastDay:
        recommendation = self.engine.resolve(
            day,
            hijri,
            preferences.nadzar,
            preferences.qadha,
            override,
        )
        return ForecastDay(date=day, hijri=hijri, recommendation=recommendation, source=source)

    # ------------------------------------------------------------------
    # Gregorian-indexed
    # ------------------------------------------------------------------

    @staticmethod
    def _gregorian_days(year: int, month: int) -> Iterator[date]:
        last_day = calendar.monthrange(year, month)[1]
        for dom in range(1, last_day + 1):
            yield date(year, month, dom)

    async def _gregorian_month_pairs(self, year: int, month: int):
        # Remote months looked up during this iteration only
        remote_months: Dict[LookupKey, Optional[Dict[date, HijriDate]]] = {}

        for day in self._gregorian_days(year, month):
            shifted = day + timedelta(days=self.offset_days)
            key = LookupKey(GREGORIAN_TO_HIJRI, shifted.year, shifted.month)

            if key not in remote_months:
                remote_days = await self._remote_month(key)
                remote_months[key] = (
                    {item.gregorian_date: item.hijri for item in remote_days}
                    if remote_days
                    else None
                )

            by_date = remote_months[key]
            if by_date is not None and shifted in by_date:
                yield day, by_date[shifted], ForecastSource.REMOTE
            else:
                yield day, to_hijri(day, self.offset_days), ForecastSource.LOCAL

    # ------------------------------------------------------------------
    # Hijri-indexed
    # ------------------------------------------------------------------

    async def _hijri_month_pairs(self, year: int, month: int):
        key = LookupKey(HIJRI_TO_GREGORIAN, year, month)
        remote_days = await self._remote_month(key)

        if remote_days and self._is_consistent_hijri_month(remote_days, year, month):
            for item in sorted(remote_days, key=lambda d: d.hijri.day):
                day = item.gregorian_date - timedelta(days=self.offset_days)
                yield day, item.hijri, ForecastSource.REMOTE
            return

        for day, hijri in self._local_hijri_pairs(year, month):
            yield day, hijri, ForecastSource.LOCAL

    def _local_hijri_pairs(self, year: int, month: int) -> Iterator[tuple]:
        # hijri(day) = table(day + offset), so the table date moves back by the offset
        start = hijri_month_start(year, month) - timedelta(days=self.offset_days)
        for index in range(hijri_month_length(year, month)):
            yield start + timedelta(days=index), HijriDate.of(year, month, index + 1)

    @staticmethod
    def _is_consistent_hijri_month(days: List[CalendarDay], year: int, month: int) -> bool:
        hijri_days = [d.hijri.day for d in days]
        if not 29 <= len(days) <= 30 or sorted(hijri_days) != list(range(1, len(days) + 1)):
            logger.warning("CALENDAR_LOOKUP_INCONSISTENT | year=%s | month=%s", year, month)
            return False
        if any(d.hijri.year != year or d.hijri.month.number != month for d in days):
            logger.warning("CALENDAR_LOOKUP_INCONSISTENT | year=%s | month=%s", year, month)
            return False
        return True

    # ------------------------------------------------------------------
    # Remote lookup with cache
    # ------------------------------------------------------------------

    async def _remote_month(self, key: LookupKey) -> Optional[List[CalendarDay]]:
        """Raw remote month from cache or lookup; None means use local conversion"""
        if self.lookup is None:
            return None

        cached = await self._cached_month(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_month(key))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _cached_month(self, key: LookupKey) -> Optional[List[CalendarDay]]:
        if self.cache is None:
            return None
        raw = await self.cache.get_json(key)
        if raw is None:
            return None
        try:
            return [CalendarDay.from_dict(item) for item in raw]
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Discarding unreadable cached month %s: %s", key.as_str(), exc)
            return None

    async def _fetch_month(self, key: LookupKey) -> Optional[List[CalendarDay]]:
        try:
            if key.kind == HIJRI_TO_GREGORIAN:
                days = await self.lookup.hijri_to_gregorian(key.month, key.year)
            else:
                days = await self.lookup.gregorian_to_hijri(key.month, key.year)
        except CalendarLookupError as exc:
            logger.warning("CALENDAR_LOOKUP_FAILED | key=%s | error=%s", key.as_str(), exc)
            return None
        except Exception:
            logger.exception("CALENDAR_LOOKUP_ERROR | key=%s", key.as_str())
            return None
        finally:
            self._inflight.pop(key, None)

        if self.cache is not None and days:
            await self.cache.set_json(key, [d.to_dict() for d in days], self.cache_ttl_seconds)

        return days
