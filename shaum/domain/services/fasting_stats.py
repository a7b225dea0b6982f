"""
Fasting log helpers: flag derivation for new logs and aggregate counts
"""

from datetime import date
from typing import Iterable, Optional

from shaum.domain.models import (
    FastingLog,
    FastingLogStats,
    FastingType,
    RecurrenceConfig,
)
from shaum.domain.services.hijri_calendar import to_hijri
from shaum.domain.services.prohibited_days import is_ayyamul_bidh, is_monday_thursday
from shaum.domain.services.recurrence_matcher import matches

SUNNAH_TYPES = frozenset({
    FastingType.MONDAY_THURSDAY,
    FastingType.AYYAMUL_BIDH,
    FastingType.OTHER,
})


def build_log_entry(
    day: date,
    fasting_type: FastingType,
    nadzar_config: RecurrenceConfig,
    qadha_config: RecurrenceConfig,
    is_completed: bool = True,
    notes: Optional[str] = None,
) -> FastingLog:
    """
    Build a log for a fast the user just recorded

    The logged type itself counts as a trigger, so a Monday fast logged
    as Senin-Kamis carries the Nadzar flag when the vow covers Senin-Kamis.
    """
    is_nadzar = matches(nadzar_config, day, fasting_type) or fasting_type == FastingType.NADZAR
    is_qadha = matches(qadha_config, day, fasting_type) or fasting_type == FastingType.QADHA

    return FastingLog(
        date=day,
        type=fasting_type,
        is_completed=is_completed,
        is_nadzar=is_nadzar,
        is_qadha=is_qadha,
        notes=notes,
    )


def compute_log_stats(logs: Iterable[FastingLog], offset_days: int = 0) -> FastingLogStats:
    """
    Count logs per obligation bucket

    A log can land in more than one bucket (a flagged Senin-Kamis fast
    counts as both sunnah and Nadzar).
    """
    total = nadzar = qadha = sunnah = wajib = 0

    for log in logs:
        total += 1

        if log.type == FastingType.NADZAR or log.is_nadzar:
            nadzar += 1

        if log.type == FastingType.QADHA or log.is_qadha:
            qadha += 1

        if log.type == FastingType.RAMADHAN:
            wajib += 1

        if log.type in SUNNAH_TYPES or _is_implicit_sunnah(log, offset_days):
            sunnah += 1

    return FastingLogStats(total=total, nadzar=nadzar, qadha=qadha, sunnah=sunnah, wajib=wajib)


def _is_implicit_sunnah(log: FastingLog, offset_days: int) -> bool:
    """A vow fast that fell on a sunnah day still counts as sunnah"""
    if log.type != FastingType.NADZAR:
        return False
    if is_monday_thursday(log.date):
        return True
    return is_ayyamul_bidh(to_hijri(log.date, offset_days))
