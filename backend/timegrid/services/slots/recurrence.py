# backend/timegrid/services/slots/recurrence.py
"""
Recurrence expansion: which open intervals a vacancy sheet gives a
service on a calendar date.

Rule selection among the rules matching (service, weekday):
  1. higher priority wins
  2. at equal priority, a rule naming the service beats the "*" rule

Pure and date-agnostic: no wall clock involved.
"""

from datetime import date

from .sheet import WILDCARD, VacancyRule, VacancySheet


def rule_precedence(rule: VacancyRule, service_key: str) -> tuple[int, int]:
    """
    Sort key for competing rules. Greater wins.

    >>> rule_precedence(VacancyRule("*", 2, frozenset({0}), ((540, 600),)), "x")
    (2, 0)
    """
    specific = 1 if rule.service_key == service_key and service_key != WILDCARD else 0
    return rule.priority, specific


def select_rule(
    sheet: VacancySheet,
    service_key: str,
    weekday: int,
) -> VacancyRule | None:
    """Winning rule for service on weekday (0 = Monday), or None."""
    candidates = [rule for rule in sheet if rule.applies_to(service_key, weekday)]
    if not candidates:
        return None
    return max(candidates, key=lambda rule: rule_precedence(rule, service_key))


def expand(
    sheet: VacancySheet,
    service_key: str,
    target_date: date,
) -> list[tuple[int, int]]:
    """
    Open intervals for service on target_date.

    Returns:
        Sorted (start_minute, end_minute) pairs; empty list when no rule matches.
    """
    rule = select_rule(sheet, service_key, target_date.weekday())
    if rule is None:
        return []
    return list(rule.time_ranges)
