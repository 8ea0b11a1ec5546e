# backend/timegrid/services/slots/__init__.py
"""
Availability scheduling engine.

sheet       - vacancy sheet text → VacancySheet
recurrence  - VacancySheet + date → open intervals
calculator  - intervals → candidate slot grid
conflicts   - grid − existing appointments
availability - orchestration and conflict-safe booking commit
"""

from .config import BookingConfig, get_booking_config
from .errors import (
    SchedulingError,
    ParseError,
    NotFound,
    ConfigurationError,
    ConflictError,
)
from .sheet import VacancyRule, VacancySheet, parse, dump
from .recurrence import expand, rule_precedence
from .calculator import calculate_day_slots
from .conflicts import filter_conflicts
from .redis_store import SheetRedisStore
from .invalidator import invalidate_business_sheet
from .availability import get_available_times, book_appointment, get_appointment

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "SchedulingError",
    "ParseError",
    "NotFound",
    "ConfigurationError",
    "ConflictError",
    "VacancyRule",
    "VacancySheet",
    "parse",
    "dump",
    "expand",
    "rule_precedence",
    "calculate_day_slots",
    "filter_conflicts",
    "SheetRedisStore",
    "invalidate_business_sheet",
    "get_available_times",
    "book_appointment",
    "get_appointment",
]
