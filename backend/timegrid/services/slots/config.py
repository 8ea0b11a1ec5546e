# backend/timegrid/services/slots/config.py
"""
Booking configuration and time helpers for slots calculation.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from .errors import ConfigurationError


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability engine.

    Attributes:
        horizon_days: How many days ahead slots may be queried or booked
        default_step_minutes: Grid step for businesses without a preference
        sheet_cache_ttl_seconds: Redis TTL for parsed vacancy sheets
    """
    horizon_days: int = 90
    default_step_minutes: int = 30
    sheet_cache_ttl_seconds: int = 86400  # 24 hours

    def __post_init__(self):
        """Validate configuration."""
        validate_step(self.default_step_minutes)
        if self.horizon_days < 0:
            raise ConfigurationError(f"horizon_days must be >= 0, got {self.horizon_days}")


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton)."""
    return BookingConfig()


def validate_step(step_minutes: int) -> int:
    """Grid step must be a positive integer number of minutes."""
    if not isinstance(step_minutes, int) or isinstance(step_minutes, bool) or step_minutes <= 0:
        raise ConfigurationError(f"timeslot step must be a positive integer, got {step_minutes!r}")
    return step_minutes


def validate_duration(duration_minutes: int) -> int:
    """Service duration must be a positive integer number of minutes."""
    if not isinstance(duration_minutes, int) or isinstance(duration_minutes, bool) or duration_minutes <= 0:
        raise ConfigurationError(f"service duration must be a positive integer, got {duration_minutes!r}")
    return duration_minutes


# ── Time helpers ─────────────────────────────────────────────────────────

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    match = _TIME_RE.match(value)
    if not match:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (24-hour, zero-padded)."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_time(minutes: int, time_format: str = "h:i a") -> str:
    """
    Render a time of day with a business time_format preference.

    Understands the date-format tokens businesses configure:
    H (00-23), G (0-23), h (01-12), g (1-12), i (minutes), a (am/pm), A (AM/PM).
    Any other character is copied as is.
    """
    hour, minute = divmod(minutes, 60)
    hour12 = hour % 12 or 12
    meridiem = "am" if hour < 12 else "pm"

    tokens = {
        "H": f"{hour:02d}",
        "G": str(hour),
        "h": f"{hour12:02d}",
        "g": str(hour12),
        "i": f"{minute:02d}",
        "a": meridiem,
        "A": meridiem.upper(),
    }
    return "".join(tokens.get(ch, ch) for ch in time_format)
