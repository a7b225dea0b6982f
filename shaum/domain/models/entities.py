"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import FrozenSet, Optional


class FastingType(str, Enum):
    """Fasting type tag (values match the stored log/config labels)"""
    MONDAY_THURSDAY = "Senin-Kamis"
    AYYAMUL_BIDH = "Ayyamul Bidh"
    RAMADHAN = "Ramadhan"
    NADZAR = "Nadzar"
    QADHA = "Qadha"
    OTHER = "Lainnya"


class IndexBy(str, Enum):
    """Calendar used to index a monthly forecast"""
    GREGORIAN = "gregorian"
    HIJRI = "hijri"


class ForecastSource(str, Enum):
    """Where a forecast day's Hijri/Gregorian pairing came from"""
    REMOTE = "remote"
    LOCAL = "local"


HIJRI_MONTH_NAMES = (
    "Muharram", "Safar", "Rabi'ul Awal", "Rabi'ul Akhir",
    "Jumadil Awal", "Jumadil Akhir", "Rajab", "Sya'ban",
    "Ramadhan", "Syawal", "Dzulkaidah", "Dzulhijjah",
)

RAMADHAN_MONTH = 9
SYAWAL_MONTH = 10
DZULHIJJAH_MONTH = 12


@dataclass(frozen=True)
class HijriMonth:
    """Hijri month - Immutable"""
    number: int
    name: str

    @classmethod
    def of(cls, number: int) -> "HijriMonth":
        return cls(number=number, name=HIJRI_MONTH_NAMES[number - 1])


@dataclass(frozen=True)
class HijriDate:
    """Hijri calendar date - Immutable value, produced per conversion"""
    day: int
    month: HijriMonth
    year: int
    era_label: str = "H"

    def __post_init__(self):
        if not 1 <= self.day <= 30:
            raise ValueError(f"Hijri day out of range: {self.day}")
        if not 1 <= self.month.number <= 12:
            raise ValueError(f"Hijri month out of range: {self.month.number}")

    @classmethod
    def of(cls, year: int, month: int, day: int) -> "HijriDate":
        return cls(day=day, month=HijriMonth.of(month), year=year)

    def __str__(self) -> str:
        return f"{self.day} {self.month.name} {self.year} {self.era_label}"


def js_weekday(day: date) -> int:
    """Weekday numbered 0 = Sunday ... 6 = Saturday (stored config convention)"""
    return day.isoweekday() % 7


@dataclass(frozen=True)
class RecurrenceConfig:
    """
    User-defined recurring obligation (one for Nadzar, one for Qadha).

    weekdays use 0 = Sunday ... 6 = Saturday.
    """
    trigger_types: FrozenSet[FastingType] = frozenset()
    weekdays: FrozenSet[int] = frozenset()
    explicit_dates: FrozenSet[str] = frozenset()
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None

    def __post_init__(self):
        for weekday in self.weekdays:
            if not 0 <= weekday <= 6:
                raise ValueError(f"Weekday must be between 0 and 6, got {weekday}")

    @property
    def is_empty(self) -> bool:
        return not (self.trigger_types or self.weekdays or self.explicit_dates)

    def covers(self, day: date) -> bool:
        """Check the optional validity window"""
        if self.valid_from is not None and day < self.valid_from:
            return False
        if self.valid_to is not None and day > self.valid_to:
            return False
        return True

    def without_triggers(self, types: FrozenSet[FastingType]) -> "RecurrenceConfig":
        return RecurrenceConfig(
            trigger_types=self.trigger_types - types,
            weekdays=self.weekdays,
            explicit_dates=self.explicit_dates,
            valid_from=self.valid_from,
            valid_to=self.valid_to,
        )


@dataclass(frozen=True)
class RamadhanOverride:
    """Manually announced Ramadhan window - Immutable"""
    start_date: date
    end_date: date

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days

    @property
    def eid_al_fitr(self) -> date:
        """1 Syawal as announced: the day after the last Ramadhan day"""
        return self.end_date + timedelta(days=1)

    def problem(self, max_span_days: int = 40) -> Optional[str]:
        """Describe why the override is unusable, or None when it is valid"""
        if self.end_date < self.start_date:
            return "end date is before start date"
        if self.span_days > max_span_days:
            return f"span of {self.span_days} days exceeds {max_span_days}"
        return None

    def is_valid(self, max_span_days: int = 40) -> bool:
        return self.problem(max_span_days) is None

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Recommendation:
    """Fasting recommendation for one date - computed on demand"""
    type: Optional[FastingType] = None
    is_forbidden: bool = False
    is_nadzar: bool = False
    is_qadha: bool = False
    reason: Optional[str] = None
    label_key: str = ""


@dataclass(frozen=True)
class FastingPreferences:
    """A user's full fasting configuration, threaded into the engine"""
    nadzar: RecurrenceConfig = field(default_factory=RecurrenceConfig)
    qadha: RecurrenceConfig = field(default_factory=RecurrenceConfig)
    ramadhan_override: Optional[RamadhanOverride] = None


@dataclass(frozen=True)
class ForecastDay:
    """One day of a monthly forecast"""
    date: date
    hijri: HijriDate
    recommendation: Recommendation
    source: ForecastSource = ForecastSource.LOCAL


@dataclass(frozen=True)
class FastingLog:
    """Logged fast (owned by consumers, read by statistics)"""
    date: date
    type: FastingType
    is_completed: bool = True
    is_nadzar: bool = False
    is_qadha: bool = False
    notes: Optional[str] = None


@dataclass(frozen=True)
class FastingLogStats:
    """Aggregated fasting log counts"""
    total: int
    nadzar: int
    qadha: int
    sunnah: int
    wajib: int
