"""
Unit Tests for RecommendationEngine

✅ Ramadhan window (calendar and manual override)
✅ Forbidden-day exclusivity
✅ Qadha > Nadzar > Sunnah priority with accumulated flags
✅ Override span guard
"""

import logging
from datetime import date

import pytest

from shaum.domain.models import (
    FastingType,
    HijriDate,
    RamadhanOverride,
    Recommendation,
    RecurrenceConfig,
)
from shaum.domain.services import recommendation_engine
from shaum.domain.services.recommendation_engine import (
    LABEL_FORBIDDEN,
    LABEL_MID_MONTH,
    LABEL_MONDAY,
    LABEL_QADHA,
    LABEL_RAMADHAN,
    LABEL_THURSDAY,
    RecommendationEngine,
)

EMPTY = RecurrenceConfig()
ALL_WEEKDAYS = frozenset(range(7))

MONDAY = date(2024, 3, 18)
TUESDAY = date(2024, 3, 19)
WEDNESDAY = date(2024, 3, 20)
THURSDAY = date(2024, 3, 21)
SATURDAY = date(2024, 3, 16)

RAMADHAN_1445 = RamadhanOverride(start_date=date(2024, 3, 11), end_date=date(2024, 4, 9))


@pytest.fixture
def engine():
    return RecommendationEngine(max_override_span_days=40)


# ------------------------------------------------------------------
# Ramadhan
# ------------------------------------------------------------------

def test_calendar_ramadhan_without_override(engine):
    rec = engine.resolve(WEDNESDAY, HijriDate.of(1445, 9, 10), EMPTY, EMPTY)
    assert rec.type == FastingType.RAMADHAN
    assert rec.label_key == LABEL_RAMADHAN
    assert not rec.is_forbidden


def test_override_window_is_ramadhan_even_on_a_table_holiday(engine):
    qadha = RecurrenceConfig(weekdays=ALL_WEEKDAYS)
    # Tabular calendar already says 1 Syawal, the announcement says Ramadhan
    rec = engine.resolve(date(2024, 4, 9), HijriDate.of(1445, 10, 1), EMPTY, qadha, RAMADHAN_1445)
    assert rec == Recommendation(type=FastingType.RAMADHAN, label_key=LABEL_RAMADHAN)


def test_valid_override_replaces_calendar_month(engine):
    # Tabular month 9 but outside the announced window
    rec = engine.resolve(date(2024, 3, 10), HijriDate.of(1445, 9, 1), EMPTY, EMPTY, RAMADHAN_1445)
    assert rec.type != FastingType.RAMADHAN


def test_last_years_override_keeps_calendar_ramadhan(engine):
    qadha = RecurrenceConfig(weekdays=frozenset({1}))
    # Monday in Ramadhan 1446 with the 1445 override still stored
    rec = engine.resolve(date(2025, 3, 10), HijriDate.of(1446, 9, 10), EMPTY, qadha, RAMADHAN_1445)
    assert rec == Recommendation(type=FastingType.RAMADHAN, label_key=LABEL_RAMADHAN)


def test_manual_eid_day_after_override(engine):
    rec = engine.resolve(date(2024, 4, 10), HijriDate.of(1445, 9, 30), EMPTY, EMPTY, RAMADHAN_1445)
    assert rec.type is None
    assert rec.is_forbidden
    assert rec.reason == "Eid al-Fitr"
    assert rec.label_key == LABEL_FORBIDDEN


# ------------------------------------------------------------------
# Forbidden days
# ------------------------------------------------------------------

def test_eid_al_fitr_without_override(engine):
    rec = engine.resolve(date(2024, 4, 10), HijriDate.of(1445, 10, 1), EMPTY, EMPTY)
    assert rec.type is None
    assert rec.is_forbidden


@pytest.mark.parametrize("hijri_day", [10, 11, 12, 13])
def test_forbidden_days_ignore_every_schedule(engine, hijri_day):
    everything = RecurrenceConfig(
        trigger_types=frozenset(FastingType),
        weekdays=ALL_WEEKDAYS,
        explicit_dates=frozenset({"2024-06-17"}),
    )
    rec = engine.resolve(date(2024, 6, 17), HijriDate.of(1445, 12, hijri_day), everything, everything)
    assert rec.type is None
    assert rec.is_forbidden
    assert not rec.is_nadzar
    assert not rec.is_qadha


# ------------------------------------------------------------------
# Qadha / Nadzar
# ------------------------------------------------------------------

def test_saturday_qadha(engine):
    qadha = RecurrenceConfig(weekdays=frozenset({6}))
    rec = engine.resolve(SATURDAY, HijriDate.of(1445, 8, 6), EMPTY, qadha)
    assert rec.type == FastingType.QADHA
    assert rec.is_qadha
    assert not rec.is_nadzar
    assert rec.label_key == LABEL_QADHA


def test_qadha_wins_but_nadzar_flag_is_kept(engine):
    nadzar = RecurrenceConfig(explicit_dates=frozenset({"2024-03-19"}))
    qadha = RecurrenceConfig(explicit_dates=frozenset({"2024-03-19"}))
    rec = engine.resolve(TUESDAY, HijriDate.of(1445, 8, 9), nadzar, qadha)
    assert rec.type == FastingType.QADHA
    assert rec.is_qadha
    assert rec.is_nadzar


def test_qadha_on_monday_keeps_sunnah_name(engine):
    qadha = RecurrenceConfig(weekdays=frozenset({1}))
    rec = engine.resolve(MONDAY, HijriDate.of(1445, 8, 8), EMPTY, qadha)
    assert rec.type == FastingType.MONDAY_THURSDAY
    assert rec.is_qadha
    assert rec.label_key == LABEL_MONDAY


def test_nadzar_triggered_by_ayyamul_bidh(engine):
    nadzar = RecurrenceConfig(trigger_types=frozenset({FastingType.AYYAMUL_BIDH}))
    rec = engine.resolve(TUESDAY, HijriDate.of(1445, 8, 14), nadzar, EMPTY)
    assert rec.type == FastingType.AYYAMUL_BIDH
    assert rec.is_nadzar
    assert not rec.is_qadha
    assert rec.label_key == LABEL_MID_MONTH


def test_nadzar_triggered_by_thursday(engine):
    nadzar = RecurrenceConfig(trigger_types=frozenset({FastingType.MONDAY_THURSDAY}))
    rec = engine.resolve(THURSDAY, HijriDate.of(1445, 8, 11), nadzar, EMPTY)
    assert rec.type == FastingType.MONDAY_THURSDAY
    assert rec.is_nadzar
    assert rec.label_key == LABEL_THURSDAY


def test_trigger_does_not_fire_on_plain_day(engine):
    nadzar = RecurrenceConfig(trigger_types=frozenset({FastingType.MONDAY_THURSDAY}))
    rec = engine.resolve(WEDNESDAY, HijriDate.of(1445, 8, 10), nadzar, EMPTY)
    assert rec == Recommendation()


def test_schedule_outside_validity_window(engine):
    qadha = RecurrenceConfig(weekdays=frozenset({6}), valid_to=date(2024, 3, 10))
    rec = engine.resolve(SATURDAY, HijriDate.of(1445, 8, 6), EMPTY, qadha)
    assert rec.type is None
    assert not rec.is_qadha


# ------------------------------------------------------------------
# Sunnah days
# ------------------------------------------------------------------

def test_plain_ayyamul_bidh(engine):
    rec = engine.resolve(WEDNESDAY, HijriDate.of(1445, 8, 13), EMPTY, EMPTY)
    assert rec.type == FastingType.AYYAMUL_BIDH
    assert not rec.is_nadzar and not rec.is_qadha


def test_plain_monday(engine):
    rec = engine.resolve(MONDAY, HijriDate.of(1445, 8, 8), EMPTY, EMPTY)
    assert rec.type == FastingType.MONDAY_THURSDAY
    assert rec.label_key == LABEL_MONDAY


def test_nothing_scheduled(engine):
    rec = engine.resolve(WEDNESDAY, HijriDate.of(1445, 8, 10), EMPTY, EMPTY)
    assert rec == Recommendation()


# ------------------------------------------------------------------
# Override guard & determinism
# ------------------------------------------------------------------

def test_override_longer_than_limit_is_ignored(engine, caplog):
    too_long = RamadhanOverride(start_date=date(2024, 1, 1), end_date=date(2024, 3, 1))
    hijri = HijriDate.of(1445, 9, 5)

    with caplog.at_level(logging.WARNING):
        with_override = engine.resolve(date(2024, 1, 10), hijri, EMPTY, EMPTY, too_long)

    assert with_override == engine.resolve(date(2024, 1, 10), hijri, EMPTY, EMPTY)
    assert with_override.type == FastingType.RAMADHAN
    assert "RAMADHAN_OVERRIDE_IGNORED" in caplog.text


def test_backwards_override_is_ignored(engine):
    backwards = RamadhanOverride(start_date=date(2024, 4, 9), end_date=date(2024, 3, 11))
    assert engine.validated_override(backwards) is None
    rec = engine.resolve(date(2024, 3, 20), HijriDate.of(1445, 9, 10), EMPTY, EMPTY, backwards)
    assert rec.type == FastingType.RAMADHAN


def test_span_limit_is_configurable():
    # 2024-03-11 .. 2024-04-09 spans 29 days
    strict = RecommendationEngine(max_override_span_days=28)
    assert strict.validated_override(RAMADHAN_1445) is None
    assert RecommendationEngine().validated_override(RAMADHAN_1445) == RAMADHAN_1445


def test_resolve_is_deterministic(engine):
    nadzar = RecurrenceConfig(trigger_types=frozenset({FastingType.MONDAY_THURSDAY}))
    qadha = RecurrenceConfig(weekdays=frozenset({1}))
    args = (MONDAY, HijriDate.of(1445, 8, 8), nadzar, qadha, None)
    assert engine.resolve(*args) == engine.resolve(*args)


def test_module_level_resolve_uses_default_guard():
    rec = recommendation_engine.resolve(date(2024, 4, 10), HijriDate.of(1445, 9, 30), EMPTY, EMPTY, RAMADHAN_1445)
    assert rec.reason == "Eid al-Fitr"
