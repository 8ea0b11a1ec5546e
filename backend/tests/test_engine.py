"""Pure pipeline pieces: recurrence, grid, conflicts."""

from dataclasses import dataclass
from datetime import date

import pytest

from timegrid.services.slots.calculator import calculate_day_slots
from timegrid.services.slots.config import format_time, minutes_to_time_str
from timegrid.services.slots.conflicts import filter_conflicts
from timegrid.services.slots.errors import ConfigurationError
from timegrid.services.slots.intervals import fits, overlaps
from timegrid.services.slots.recurrence import expand, rule_precedence, select_rule
from timegrid.services.slots.sheet import VacancyRule, parse

from conftest import CONSULTING_SHEET

TUESDAY = date(2030, 1, 1)
WEDNESDAY = date(2030, 1, 2)

GRID_9_TO_18 = ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
                "12:00", "12:30", "13:00", "13:30", "14:00"]


@dataclass
class Appt:
    start_minute: int
    duration_minutes: int


# ── Recurrence ───────────────────────────────────────────────────────────


def test_expand_matching_weekday():
    sheet = parse(CONSULTING_SHEET)
    assert TUESDAY.weekday() == 1
    assert expand(sheet, "onsite-4hs-support", TUESDAY) == [(540, 1080)]


def test_expand_no_rule_for_weekday():
    sheet = parse(CONSULTING_SHEET)
    assert expand(sheet, "onsite-4hs-support", WEDNESDAY) == []


def test_expand_unknown_service():
    sheet = parse(CONSULTING_SHEET)
    assert expand(sheet, "other", TUESDAY) == []


def test_higher_priority_wins():
    sheet = parse("svc:1\n tue\n  9-18\nsvc:5\n tue\n  10-12\n  13-15\n")
    assert expand(sheet, "svc", TUESDAY) == [(600, 720), (780, 900)]


def test_wildcard_applies_to_every_service():
    sheet = parse("*:1\n tue\n  8-10\n")
    assert expand(sheet, "anything", TUESDAY) == [(480, 600)]


def test_specific_beats_wildcard_at_equal_priority():
    sheet = parse("*:3\n tue\n  8-10\nsvc:3\n tue\n  14-16\n")
    assert expand(sheet, "svc", TUESDAY) == [(840, 960)]
    assert expand(sheet, "other", TUESDAY) == [(480, 600)]


def test_wildcard_with_higher_priority_beats_specific():
    sheet = parse("svc:1\n tue\n  14-16\n*:2\n tue\n  8-10\n")
    assert expand(sheet, "svc", TUESDAY) == [(480, 600)]


def test_rule_precedence_ordering():
    wildcard = VacancyRule("*", 3, frozenset({1}), ((0, 60),))
    specific = VacancyRule("svc", 3, frozenset({1}), ((0, 60),))
    lower = VacancyRule("svc", 2, frozenset({1}), ((0, 60),))

    assert rule_precedence(specific, "svc") > rule_precedence(wildcard, "svc")
    assert rule_precedence(wildcard, "svc") > rule_precedence(lower, "svc")


def test_select_rule_none():
    sheet = parse(CONSULTING_SHEET)
    assert select_rule(sheet, "onsite-4hs-support", 0) is None


# ── Grid ─────────────────────────────────────────────────────────────────


def test_grid_nine_to_eighteen_four_hour_service():
    slots = calculate_day_slots([(540, 1080)], 30, 240)

    assert [minutes_to_time_str(s) for s in slots] == GRID_9_TO_18
    assert all(s + 240 <= 1080 for s in slots)
    assert slots[-1] + 240 == 1080


def test_grid_restarts_at_each_interval():
    slots = calculate_day_slots([(540, 660), (785, 900)], 45, 60)
    assert slots == [540, 585, 785, 830]


def test_grid_empty_when_service_longer_than_interval():
    assert calculate_day_slots([(540, 600)], 30, 90) == []


@pytest.mark.parametrize("step", [0, -30])
def test_grid_rejects_non_positive_step(step):
    with pytest.raises(ConfigurationError):
        calculate_day_slots([(540, 1080)], step, 60)


def test_grid_rejects_non_positive_duration():
    with pytest.raises(ConfigurationError):
        calculate_day_slots([(540, 1080)], 30, 0)


# ── Conflicts ────────────────────────────────────────────────────────────


def test_overlap_primitive_is_half_open():
    assert overlaps(600, 60, 630, 60)
    assert not overlaps(600, 60, 660, 60)
    assert not overlaps(660, 60, 600, 60)
    assert fits(840, 240, 540, 1080)
    assert not fits(870, 240, 540, 1080)


def test_long_appointment_blocks_whole_window():
    candidates = calculate_day_slots([(540, 1080)], 30, 240)
    remaining = filter_conflicts(candidates, [Appt(690, 240)], 240)

    assert remaining == []
    for c in candidates:
        assert c < 690 + 240 and c + 240 > 690


def test_short_candidates_around_appointment():
    candidates = calculate_day_slots([(540, 1080)], 30, 60)
    remaining = filter_conflicts(candidates, [Appt(690, 240)], 60)

    assert [minutes_to_time_str(m) for m in remaining] == [
        "09:00", "09:30", "10:00", "10:30",
        "15:30", "16:00", "16:30", "17:00",
    ]
    for c in remaining:
        assert not (c < 930 and c + 60 > 690)


def test_filter_without_appointments_keeps_order():
    candidates = [540, 570, 600]
    assert filter_conflicts(candidates, [], 30) == candidates


# ── Presentation ─────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "minutes, fmt, expected",
    [
        (690, "h:i a", "11:30 am"),
        (840, "h:i a", "02:00 pm"),
        (840, "H:i", "14:00"),
        (0, "g:i A", "12:00 AM"),
        (720, "g:i a", "12:00 pm"),
    ],
)
def test_format_time(minutes, fmt, expected):
    assert format_time(minutes, fmt) == expected
