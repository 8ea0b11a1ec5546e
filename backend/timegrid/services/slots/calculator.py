# backend/timegrid/services/slots/calculator.py
"""
Slot grid generation.

Each open interval gets its own grid: starts at the interval start and
advances by the business step. A start is kept only while the whole
service duration still fits before the interval end.

    9-18, step 30, duration 240 → 09:00, 09:30, ... 14:00 (11 slots)

Does NOT contain:
✗ Existing appointments (see conflicts.py)
✗ Past-date policy (HTTP layer)
"""

from .config import validate_duration, validate_step
from .intervals import fits


def calculate_day_slots(
    intervals: list[tuple[int, int]],
    step_minutes: int,
    duration_minutes: int,
) -> list[int]:
    """
    Candidate start minutes for the given open intervals.

    Returns:
        Ascending start minutes (intervals are sorted and disjoint).

    Raises:
        ConfigurationError: step or duration is not a positive integer.
    """
    step = validate_step(step_minutes)
    duration = validate_duration(duration_minutes)

    slots: list[int] = []
    for start_min, end_min in intervals:
        t = start_min
        while fits(t, duration, start_min, end_min):
            slots.append(t)
            t += step

    return slots
