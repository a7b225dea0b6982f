"""
RECOMMENDATION ENGINE
Decide which fasting obligation applies to a single date

RESPONSIBILITIES:
- Apply the manual / calendar Ramadhan window
- Block forbidden days
- Resolve Qadha > Nadzar > Sunnah priority, keeping both config flags

RULES:
❌ No hidden state, configs come in as parameters
❌ No fasting type on a forbidden day
✅ Ramadhan window beats everything
✅ Deterministic output
"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from shaum.domain.models import (
    RAMADHAN_MONTH,
    FastingType,
    HijriDate,
    RamadhanOverride,
    Recommendation,
    RecurrenceConfig,
)
from shaum.domain.services.hijri_calendar import to_hijri
from shaum.domain.services.prohibited_days import (
    THURSDAY,
    is_ayyamul_bidh,
    is_monday_thursday,
    prohibited_reason,
)
from shaum.domain.services.recurrence_matcher import matches_any

logger = logging.getLogger(__name__)

LABEL_RAMADHAN = "fasting.types.ramadhan"
LABEL_FORBIDDEN = "fasting.types.forbidden"
LABEL_MONDAY = "fasting.types.monday"
LABEL_THURSDAY = "fasting.types.thursday"
LABEL_MID_MONTH = "fasting.types.midMonth"
LABEL_NADZAR = "fasting.types.nadzar"
LABEL_QADHA = "fasting.types.qadha"


class RecommendationEngine:
    """
    Recommendation Engine
    Resolves one Recommendation per date, never persists anything
    """

    def __init__(self, max_override_span_days: int = 40):
        self.max_override_span_days = max_override_span_days

    def validated_override(
        self,
        ramadhan_override: Optional[RamadhanOverride],
    ) -> Optional[RamadhanOverride]:
        """
        Return the override when usable, else None (with a warning)
        """
        if ramadhan_override is None:
            return None

        problem = ramadhan_override.problem(self.max_override_span_days)
        if problem is not None:
            logger.warning(
                "RAMADHAN_OVERRIDE_IGNORED | start=%s | end=%s | reason=%s",
                ramadhan_override.start_date,
                ramadhan_override.end_date,
                problem,
            )
            return None
        return ramadhan_override

    def resolve(
        self,
        day: date,
        hijri: HijriDate,
        nadzar_config: RecurrenceConfig,
        qadha_config: RecurrenceConfig,
        ramadhan_override: Optional[RamadhanOverride] = None,
    ) -> Recommendation:
        """
        Resolve the fasting recommendation for a date

        Args:
            day: Gregorian date
            hijri: Hijri date for `day` (already offset-adjusted)
            nadzar_config: Vow schedule
            qadha_config: Makeup-debt schedule
            ramadhan_override: Manually announced Ramadhan window

        Returns:
            Recommendation
        """
        override = self.validated_override(ramadhan_override)

        # 1. Ramadhan
        if override is not None and override.contains(day):
            return Recommendation(type=FastingType.RAMADHAN, label_key=LABEL_RAMADHAN)
        if hijri.month.number == RAMADHAN_MONTH and not self._announced_for(hijri, override):
            return Recommendation(type=FastingType.RAMADHAN, label_key=LABEL_RAMADHAN)

        # 2. Forbidden days
        reason = prohibited_reason(hijri, day, override, self.max_override_span_days)
        if reason is not None:
            return Recommendation(
                type=None,
                is_forbidden=True,
                reason=reason,
                label_key=LABEL_FORBIDDEN,
            )

        # 3. Both schedules are evaluated, flags accumulate
        day_types = self.sunnah_types(day, hijri)
        is_qadha = matches_any(qadha_config, day, day_types)
        is_nadzar = matches_any(nadzar_config, day, day_types)

        # 4. Qadha outranks Nadzar
        if is_qadha:
            fasting_type, label_key = self._primary(day, hijri, FastingType.QADHA, LABEL_QADHA)
            return Recommendation(
                type=fasting_type,
                is_nadzar=is_nadzar,
                is_qadha=True,
                label_key=label_key,
            )

        # 5. Nadzar
        if is_nadzar:
            fasting_type, label_key = self._primary(day, hijri, FastingType.NADZAR, LABEL_NADZAR)
            return Recommendation(type=fasting_type, is_nadzar=True, label_key=label_key)

        # 6-7. Plain sunnah days
        if is_ayyamul_bidh(hijri):
            return Recommendation(type=FastingType.AYYAMUL_BIDH, label_key=LABEL_MID_MONTH)

        if is_monday_thursday(day):
            return Recommendation(
                type=FastingType.MONDAY_THURSDAY,
                label_key=self._weekday_label(day),
            )

        # 8. Nothing scheduled
        return Recommendation()

    @staticmethod
    def _announced_for(hijri: HijriDate, override: Optional[RamadhanOverride]) -> bool:
        """
        True when the override announces the Ramadhan of this Hijri year

        The override replaces the calendar month only for its own year; a
        stored override from an earlier year leaves later Ramadhans alone.
        """
        if override is None:
            return False
        midpoint = override.start_date + timedelta(days=override.span_days // 2)
        return to_hijri(midpoint).year == hijri.year

    @staticmethod
    def sunnah_types(day: date, hijri: HijriDate) -> List[FastingType]:
        """Canonical sunnah types a day carries, used as recurrence triggers"""
        types = []
        if is_monday_thursday(day):
            types.append(FastingType.MONDAY_THURSDAY)
        if is_ayyamul_bidh(hijri):
            types.append(FastingType.AYYAMUL_BIDH)
        return types

    @classmethod
    def _primary(
        cls,
        day: date,
        hijri: HijriDate,
        fallback: FastingType,
        fallback_label: str,
    ) -> tuple[FastingType, str]:
        """Sunnah name wins for display when the obligation lands on a sunnah day"""
        if is_monday_thursday(day):
            return FastingType.MONDAY_THURSDAY, cls._weekday_label(day)
        if is_ayyamul_bidh(hijri):
            return FastingType.AYYAMUL_BIDH, LABEL_MID_MONTH
        return fallback, fallback_label

    @staticmethod
    def _weekday_label(day: date) -> str:
        return LABEL_THURSDAY if day.weekday() == THURSDAY else LABEL_MONDAY


_default_engine = RecommendationEngine()


def resolve(
    day: date,
    hijri: HijriDate,
    nadzar_config: RecurrenceConfig,
    qadha_config: RecurrenceConfig,
    ramadhan_override: Optional[RamadhanOverride] = None,
) -> Recommendation:
    """Resolve with the default 40-day override span guard"""
    return _default_engine.resolve(day, hijri, nadzar_config, qadha_config, ramadhan_override)
