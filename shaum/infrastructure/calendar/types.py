"""
Remote calendar lookup protocol and cache key types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Protocol

from shaum.domain.models import HijriDate

GREGORIAN_TO_HIJRI = "g2h"
HIJRI_TO_GREGORIAN = "h2g"


@dataclass(frozen=True)
class CalendarDay:
    gregorian_date: date
    hijri: HijriDate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gregorian_date": self.gregorian_date.isoformat(),
            "hijri": {
                "day": self.hijri.day,
                "month": self.hijri.month.number,
                "year": self.hijri.year,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalendarDay":
        hijri = data["hijri"]
        return cls(
            gregorian_date=date.fromisoformat(data["gregorian_date"]),
            hijri=HijriDate.of(int(hijri["year"]), int(hijri["month"]), int(hijri["day"])),
        )


@dataclass(frozen=True)
class LookupKey:
    """Cache key for one remote month: direction + month + year"""
    kind: str
    year: int
    month: int

    def as_str(self) -> str:
        return f"{self.kind}:{self.year}:{self.month:02d}"


class CalendarLookup(Protocol):
    async def gregorian_to_hijri(self, month: int, year: int) -> List[CalendarDay]:
        ...

    async def hijri_to_gregorian(self, month: int, year: int) -> List[CalendarDay]:
        ...


class LookupCache(Protocol):
    async def get_json(self, key: LookupKey) -> Optional[Any]:
        ...

    async def set_json(self, key: LookupKey, value: Any, ttl_seconds: int) -> None:
        ...
