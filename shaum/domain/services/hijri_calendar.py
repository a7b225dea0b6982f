"""
HIJRI CALENDAR CONVERTER
Gregorian <-> Hijri conversion

RESPONSIBILITIES:
- Convert a Gregorian date (plus day offset) to a Hijri date
- Locate the first Gregorian day and length of a Hijri month

RULES:
✅ Umm al-Qura table where it is defined (1343-1500 AH)
✅ Arithmetic tabular calendar outside that range
✅ Deterministic output, never raises for a valid date
"""

import logging
from datetime import date, timedelta

from hijridate import Gregorian, Hijri

from shaum.domain.models import HijriDate

logger = logging.getLogger(__name__)

# R.D. ordinal of 1 Muharram 1 AH (16 July 622 Julian), same scale as date.toordinal()
ISLAMIC_EPOCH = 227015


def to_hijri(day: date, offset_days: int = 0) -> HijriDate:
    """
    Convert a Gregorian date to Hijri

    Args:
        day: Gregorian date
        offset_days: Days added to the date before conversion

    Returns:
        HijriDate
    """
    target = day + timedelta(days=offset_days) if offset_days else day
    try:
        hijri = Gregorian.fromdate(target).to_hijri()
        return HijriDate.of(hijri.year, hijri.month, hijri.day)
    except (OverflowError, ValueError):
        logger.debug("HIJRI_TABULAR_FALLBACK | date=%s", target)
        year, month, dom = _tabular_from_ordinal(target.toordinal())
        return HijriDate.of(year, month, dom)


def hijri_month_start(year: int, month: int) -> date:
    """Gregorian date of the 1st day of a Hijri month"""
    try:
        g = Hijri(year, month, 1).to_gregorian()
        return date(g.year, g.month, g.day)
    except (OverflowError, ValueError):
        return date.fromordinal(_tabular_to_ordinal(year, month, 1))


def hijri_month_length(year: int, month: int) -> int:
    """Number of days (29 or 30) in a Hijri month"""
    try:
        return Hijri(year, month, 1).month_length()
    except (OverflowError, ValueError):
        next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
        return _tabular_to_ordinal(next_year, next_month, 1) - _tabular_to_ordinal(year, month, 1)


def _tabular_to_ordinal(year: int, month: int, day: int) -> int:
    return (
        ISLAMIC_EPOCH - 1
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + 29 * (month - 1)
        + month // 2
        + day
    )


def _tabular_from_ordinal(ordinal: int) -> tuple[int, int, int]:
    year = (30 * (ordinal - ISLAMIC_EPOCH) + 10646) // 10631
    prior_days = ordinal - _tabular_to_ordinal(year, 1, 1)
    month = (11 * prior_days + 330) // 325
    day = ordinal - _tabular_to_ordinal(year, month, 1) + 1
    return year, month, day
