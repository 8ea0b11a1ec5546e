# backend/timegrid/services/slots/conflicts.py
"""Drop candidate starts that would overlap a confirmed appointment."""

from typing import Iterable, Protocol

from .intervals import overlaps


class Booked(Protocol):
    start_minute: int
    duration_minutes: int


def filter_conflicts(
    candidates: list[int],
    appointments: Iterable[Booked],
    duration_minutes: int,
) -> list[int]:
    """Order-preserving; appointments must already be scoped to one business and date."""
    booked = [(a.start_minute, a.duration_minutes) for a in appointments]
    return [
        c for c in candidates
        if not any(overlaps(c, duration_minutes, start, length) for start, length in booked)
    ]
