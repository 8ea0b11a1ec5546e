# backend/timegrid/services/slots/intervals.py
"""
Half-open minute intervals [start, start + duration).

Slot generation and conflict filtering both use these, so "fits in the
window" and "still free" agree on where an interval ends.
"""


def end_of(start: int, duration: int) -> int:
    return start + duration


def overlaps(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """True when [start_a, start_a + duration_a) meets [start_b, start_b + duration_b)."""
    return start_a < end_of(start_b, duration_b) and end_of(start_a, duration_a) > start_b


def fits(start: int, duration: int, window_start: int, window_end: int) -> bool:
    """True when [start, start + duration) lies inside [window_start, window_end)."""
    return start >= window_start and end_of(start, duration) <= window_end
