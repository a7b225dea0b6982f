"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    FastingType,
    ForecastSource,
    IndexBy,

    # Constants
    DZULHIJJAH_MONTH,
    HIJRI_MONTH_NAMES,
    RAMADHAN_MONTH,
    SYAWAL_MONTH,

    # Entities
    FastingLog,
    FastingLogStats,
    FastingPreferences,
    ForecastDay,
    HijriDate,
    HijriMonth,
    RamadhanOverride,
    Recommendation,
    RecurrenceConfig,

    # Helpers
    js_weekday,
)

__all__ = [
    # Enums
    "FastingType",
    "ForecastSource",
    "IndexBy",

    # Constants
    "DZULHIJJAH_MONTH",
    "HIJRI_MONTH_NAMES",
    "RAMADHAN_MONTH",
    "SYAWAL_MONTH",

    # Entities
    "FastingLog",
    "FastingLogStats",
    "FastingPreferences",
    "ForecastDay",
    "HijriDate",
    "HijriMonth",
    "RamadhanOverride",
    "Recommendation",
    "RecurrenceConfig",

    # Helpers
    "js_weekday",
]
