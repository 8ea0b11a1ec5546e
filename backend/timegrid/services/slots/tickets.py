# backend/timegrid/services/slots/tickets.py
"""Ticket codes and confirmation text for committed appointments."""

import secrets

from .config import format_time

CODE_BYTES = 4  # 8 hex characters


def generate_code() -> str:
    """Human-presentable confirmation code, e.g. "3FA94C0B"."""
    return secrets.token_hex(CODE_BYTES).upper()


def confirmation_line(start_minute: int, time_format: str = "h:i a") -> str:
    return f"Please arrive at {format_time(start_minute, time_format)}"
