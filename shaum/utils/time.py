"""Time utilities (user's local timezone)."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from shaum.config import settings


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def today_local() -> date:
    """
    Today's date where the user lives; fasting days follow the local calendar.
    """
    return datetime.now(local_tz()).date()
