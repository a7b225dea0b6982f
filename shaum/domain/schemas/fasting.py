"""
Stored / submitted shapes of the fasting configuration and logs.

Field aliases follow the keys the tracker has always persisted
(types, days, customDates, startDate, endDate, isNadzar, ...).
"""

from datetime import date
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from shaum.domain.models import (
    FastingLog,
    FastingType,
    RamadhanOverride,
    RecurrenceConfig,
)

Weekday = Annotated[int, Field(ge=0, le=6)]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Unset dates are persisted as "" by the settings form
OptionalDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]


class RecurrenceConfigPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trigger_types: List[FastingType] = Field(default_factory=list, alias="types")
    weekdays: List[Weekday] = Field(default_factory=list, alias="days")
    explicit_dates: List[date] = Field(default_factory=list, alias="customDates")
    valid_from: OptionalDate = Field(default=None, alias="startDate")
    valid_to: OptionalDate = Field(default=None, alias="endDate")

    @model_validator(mode="after")
    def check_window(self):
        if self.valid_from and self.valid_to and self.valid_to < self.valid_from:
            raise ValueError("endDate must not be before startDate")
        return self

    def to_domain(self) -> RecurrenceConfig:
        return RecurrenceConfig(
            trigger_types=frozenset(self.trigger_types),
            weekdays=frozenset(self.weekdays),
            explicit_dates=frozenset(d.isoformat() for d in self.explicit_dates),
            valid_from=self.valid_from,
            valid_to=self.valid_to,
        )

    @classmethod
    def from_domain(cls, config: RecurrenceConfig) -> "RecurrenceConfigPayload":
        return cls(
            trigger_types=sorted(config.trigger_types, key=lambda t: t.value),
            weekdays=sorted(config.weekdays),
            explicit_dates=sorted(date.fromisoformat(d) for d in config.explicit_dates),
            valid_from=config.valid_from,
            valid_to=config.valid_to,
        )

    def to_store(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class RamadhanOverridePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: OptionalDate = Field(default=None, alias="startDate")
    end_date: OptionalDate = Field(default=None, alias="endDate")

    def to_domain(self) -> Optional[RamadhanOverride]:
        """Both dates are needed; a half-filled form means no override"""
        if self.start_date is None or self.end_date is None:
            return None
        return RamadhanOverride(start_date=self.start_date, end_date=self.end_date)

    @classmethod
    def from_domain(cls, override: Optional[RamadhanOverride]) -> "RamadhanOverridePayload":
        if override is None:
            return cls()
        return cls(start_date=override.start_date, end_date=override.end_date)

    def to_store(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class FastingLogPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: date
    type: FastingType
    is_completed: bool = Field(default=True, alias="isCompleted")
    is_nadzar: bool = Field(default=False, alias="isNadzar")
    is_qadha: bool = Field(default=False, alias="isQadha")
    notes: Optional[str] = None

    def to_domain(self) -> FastingLog:
        return FastingLog(
            date=self.date,
            type=self.type,
            is_completed=self.is_completed,
            is_nadzar=self.is_nadzar,
            is_qadha=self.is_qadha,
            notes=self.notes,
        )
