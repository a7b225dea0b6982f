"""
Recurrence config matching for Nadzar / Qadha schedules
"""

from datetime import date
from typing import Iterable, Optional

from shaum.domain.models import FastingType, RecurrenceConfig, js_weekday


def matches(
    config: RecurrenceConfig,
    day: date,
    fasting_type_of_day: Optional[FastingType],
) -> bool:
    """
    Check whether a recurring obligation applies to a date

    A match needs the date inside the config's validity window and any of:
    weekday listed, ISO date listed, or the day's fasting type listed as a
    trigger.
    """
    if config.is_empty or not config.covers(day):
        return False

    if js_weekday(day) in config.weekdays:
        return True

    if day.isoformat() in config.explicit_dates:
        return True

    return fasting_type_of_day is not None and fasting_type_of_day in config.trigger_types


def matches_any(
    config: RecurrenceConfig,
    day: date,
    fasting_types_of_day: Iterable[FastingType],
) -> bool:
    """Match against every canonical type the day carries (or none)"""
    types = list(fasting_types_of_day)
    if not types:
        return matches(config, day, None)
    return any(matches(config, day, fasting_type) for fasting_type in types)
