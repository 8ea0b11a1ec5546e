# backend/timegrid/services/slots/errors.py
"""
Scheduling engine exceptions.

Each error is terminal for the request that raised it; the engine never
retries internally.
"""


class SchedulingError(Exception):
    """Base exception for availability engine errors."""
    pass


class ParseError(SchedulingError):
    """Vacancy sheet rejected. Nothing from it was stored."""

    def __init__(self, message: str, line_no: int | None = None, line: str | None = None):
        self.message = message
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


class NotFound(SchedulingError):
    """Business, service or date is unknown."""
    pass


class ConfigurationError(SchedulingError):
    """Non-positive grid step or service duration."""
    pass


class ConflictError(SchedulingError):
    """Requested time is not (or no longer) available."""
    pass
