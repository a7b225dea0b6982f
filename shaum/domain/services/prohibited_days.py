"""
PROHIBITED DAY CHECKER
Days on which fasting is forbidden, plus the sunnah-day predicates

RULES:
✅ Table driven by (Hijri month, Hijri day)
✅ Manually announced Eid al-Fitr (override end + 1 day) wins over the table
❌ Dzulhijjah holidays are never shifted by the Ramadhan override
"""

from datetime import date
from typing import Dict, Optional, Tuple

from shaum.domain.models import (
    DZULHIJJAH_MONTH,
    SYAWAL_MONTH,
    HijriDate,
    RamadhanOverride,
)

EID_AL_FITR = "Eid al-Fitr"
EID_AL_ADHA = "Eid al-Adha"
TASYRIK = "Tasyrik"

PROHIBITED_DAYS: Dict[Tuple[int, int], str] = {
    (SYAWAL_MONTH, 1): EID_AL_FITR,
    (DZULHIJJAH_MONTH, 10): EID_AL_ADHA,
    (DZULHIJJAH_MONTH, 11): TASYRIK,
    (DZULHIJJAH_MONTH, 12): TASYRIK,
    (DZULHIJJAH_MONTH, 13): TASYRIK,
}

AYYAMUL_BIDH_DAYS = (13, 14, 15)

MONDAY = 0
THURSDAY = 3


def prohibited_reason(
    hijri: HijriDate,
    day: Optional[date] = None,
    ramadhan_override: Optional[RamadhanOverride] = None,
    max_span_days: int = 40,
) -> Optional[str]:
    """
    Holiday label when fasting is forbidden, else None

    Args:
        hijri: Hijri date of the day being checked
        day: Gregorian date (needed for the manual Eid check)
        ramadhan_override: Manually announced Ramadhan; ignored when invalid
        max_span_days: Longest accepted override window
    """
    if (
        day is not None
        and ramadhan_override is not None
        and ramadhan_override.is_valid(max_span_days)
        and day == ramadhan_override.eid_al_fitr
    ):
        return EID_AL_FITR

    return PROHIBITED_DAYS.get((hijri.month.number, hijri.day))


def is_prohibited(
    hijri: HijriDate,
    day: Optional[date] = None,
    ramadhan_override: Optional[RamadhanOverride] = None,
    max_span_days: int = 40,
) -> bool:
    return prohibited_reason(hijri, day, ramadhan_override, max_span_days) is not None


def is_ayyamul_bidh(hijri: HijriDate) -> bool:
    """13-15 of any Hijri month, except 13 Dzulhijjah (a Tasyrik day)"""
    if hijri.month.number == DZULHIJJAH_MONTH and hijri.day == 13:
        return False
    return hijri.day in AYYAMUL_BIDH_DAYS


def is_monday_thursday(day: date) -> bool:
    return day.weekday() in (MONDAY, THURSDAY)
