# backend/timegrid/services/slots/sheet.py
"""
Vacancy sheet parsing.

A business declares its recurring weekly availability as text:

    onsite-4hs-support:1
     tue, thu, sat
      9-18

Three indentation levels: service key with priority, weekday group,
hour ranges. Hour ranges attach to the nearest preceding weekday line,
weekday lines to the nearest preceding service-key line. "*" as service
key applies to every service.

The sheet is accepted or rejected as a whole: parse() either returns a
complete VacancySheet or raises ParseError.
"""

import re
from dataclasses import dataclass
from itertools import groupby
from typing import Iterator

from .errors import ParseError


WILDCARD = "*"
DAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

_KEY_RE = re.compile(r"^(\*|[a-z0-9][a-z0-9_-]*)\s*:\s*(\d+)$", re.IGNORECASE)
_RANGE_RE = re.compile(r"^(\d{1,2})\s*-\s*(\d{1,2})$")

# Token depth
SERVICE, DAYS, HOURS = 0, 1, 2


@dataclass(frozen=True)
class VacancyRule:
    service_key: str
    priority: int
    days: frozenset[int]  # 0 = Monday, 6 = Sunday
    time_ranges: tuple[tuple[int, int], ...]  # minutes of day, sorted

    def applies_to(self, service_key: str, weekday: int) -> bool:
        return (
            weekday in self.days
            and self.service_key in (service_key, WILDCARD)
        )


@dataclass(frozen=True)
class VacancySheet:
    rules: tuple[VacancyRule, ...]

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[VacancyRule]:
        return iter(self.rules)


@dataclass(frozen=True)
class _Token:
    line_no: int
    depth: int
    text: str  # stripped
    raw: str  # as submitted, echoed back in ParseError


# ── Tokenizer ────────────────────────────────────────────────────────────


def tokenize(raw_text: str) -> list[_Token]:
    """
    Split the sheet into (line_no, depth, text) tokens.

    Depth comes from an indentation stack: a deeper indent opens exactly
    one level, a shallower one must return to an indent seen before.
    Blank lines and "#" comments are skipped.
    """
    tokens: list[_Token] = []
    indents = [0]

    for line_no, line in enumerate(raw_text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        indent = len(line) - len(line.lstrip())

        if indent > indents[-1]:
            indents.append(indent)
        else:
            while indent < indents[-1]:
                indents.pop()
            if indent != indents[-1]:
                raise ParseError("inconsistent indentation", line_no, line)

        depth = len(indents) - 1
        if depth > HOURS:
            raise ParseError("too deeply indented", line_no, line)

        tokens.append(_Token(line_no, depth, stripped, line))

    return tokens


# ── Parser ───────────────────────────────────────────────────────────────


def parse(raw_text: str) -> VacancySheet:
    """
    Parse a vacancy sheet.

    Raises:
        ParseError: on any malformed line, on duplicate priority for the
            same service key and weekday, or when the sheet has no rules.
    """
    tokens = tokenize(raw_text or "")
    if not tokens:
        raise ParseError("vacancy sheet is empty")

    rules: list[VacancyRule] = []

    # Stack of open nodes: [service header, day group]
    service: tuple[str, int, _Token] | None = None
    day_group: tuple[frozenset[int], _Token] | None = None
    ranges: list[tuple[int, int, _Token]] = []
    service_has_days = False

    def close_day_group():
        nonlocal day_group, ranges
        if day_group is None:
            return
        days, token = day_group
        if not ranges:
            raise ParseError("weekday line has no hour ranges", token.line_no, token.raw)
        rules.append(VacancyRule(
            service_key=service[0],
            priority=service[1],
            days=days,
            time_ranges=_ordered_ranges(ranges),
        ))
        day_group = None
        ranges = []

    def close_service():
        nonlocal service
        close_day_group()
        if service is not None and not service_has_days:
            token = service[2]
            raise ParseError("service line has no weekday lines", token.line_no, token.raw)
        service = None

    for token in tokens:
        if token.depth == SERVICE:
            close_service()
            key, priority = _parse_service_key(token)
            service = (key, priority, token)
            service_has_days = False

        elif token.depth == DAYS:
            if service is None:
                raise ParseError("weekday line without a service line", token.line_no, token.raw)
            close_day_group()
            day_group = (_parse_days(token), token)
            service_has_days = True

        else:
            if day_group is None:
                raise ParseError("hour range without a weekday line", token.line_no, token.raw)
            start, end = _parse_range(token)
            ranges.append((start, end, token))

    close_service()

    _check_priorities(rules, tokens)
    return VacancySheet(rules=tuple(rules))


def _parse_service_key(token: _Token) -> tuple[str, int]:
    match = _KEY_RE.match(token.text)
    if not match:
        raise ParseError("expected <service>:<priority>", token.line_no, token.raw)
    return match.group(1).lower(), int(match.group(2))


def _parse_days(token: _Token) -> frozenset[int]:
    days = set()
    for part in token.text.split(","):
        name = part.strip().lower()
        if name not in DAY_NAMES:
            raise ParseError(f"unknown day {part.strip()!r}", token.line_no, token.raw)
        days.add(DAY_NAMES.index(name))
    return frozenset(days)


def _parse_range(token: _Token) -> tuple[int, int]:
    match = _RANGE_RE.match(token.text)
    if not match:
        raise ParseError("expected <startHour>-<endHour>", token.line_no, token.raw)
    start, end = int(match.group(1)), int(match.group(2))
    if end > 24 or start >= end:
        raise ParseError("hour range must be increasing within 0-24", token.line_no, token.raw)
    return start * 60, end * 60


def _ordered_ranges(ranges: list[tuple[int, int, _Token]]) -> tuple[tuple[int, int], ...]:
    """Sort a day group's ranges; overlapping ranges reject the sheet."""
    ordered = sorted(ranges, key=lambda r: (r[0], r[1]))
    for prev, cur in zip(ordered, ordered[1:]):
        if cur[0] < prev[1]:
            token = cur[2]
            raise ParseError("hour range overlaps another range", token.line_no, token.raw)
    return tuple((start, end) for start, end, _ in ordered)


def _check_priorities(rules: list[VacancyRule], tokens: list[_Token]) -> None:
    """Same service key + same weekday + same priority is ambiguous."""
    seen: dict[tuple[str, int, int], VacancyRule] = {}
    for rule in rules:
        for day in sorted(rule.days):
            key = (rule.service_key, day, rule.priority)
            if key in seen:
                line_no, text = _header_line(rule, tokens)
                raise ParseError(
                    f"duplicate priority {rule.priority} for {rule.service_key} on {DAY_NAMES[day]}",
                    line_no,
                    text,
                )
            seen[key] = rule


def _header_line(rule: VacancyRule, tokens: list[_Token]) -> tuple[int | None, str | None]:
    """Last service line declaring the rule's key and priority."""
    found = (None, None)
    for token in tokens:
        if token.depth != SERVICE:
            continue
        match = _KEY_RE.match(token.text)
        if match and (match.group(1).lower(), int(match.group(2))) == (rule.service_key, rule.priority):
            found = (token.line_no, token.raw)
    return found


# ── Canonical form ───────────────────────────────────────────────────────


def dump(sheet: VacancySheet) -> str:
    """
    Serialize a sheet in canonical form.

    Consecutive rules sharing service key and priority are written under
    one service line; days in Monday..Sunday order, one range per line.
    """
    lines: list[str] = []
    for (key, priority), group in groupby(sheet.rules, key=lambda r: (r.service_key, r.priority)):
        lines.append(f"{key}:{priority}")
        for rule in group:
            lines.append(" " + ", ".join(DAY_NAMES[d] for d in sorted(rule.days)))
            for start, end in rule.time_ranges:
                lines.append(f"  {start // 60}-{end // 60}")
    return "\n".join(lines) + "\n"


def sheet_to_dict(sheet: VacancySheet) -> list[dict]:
    """JSON-friendly form for caching."""
    return [
        {
            "service_key": rule.service_key,
            "priority": rule.priority,
            "days": sorted(rule.days),
            "time_ranges": [list(r) for r in rule.time_ranges],
        }
        for rule in sheet.rules
    ]


def sheet_from_dict(data: list[dict]) -> VacancySheet:
    return VacancySheet(rules=tuple(
        VacancyRule(
            service_key=item["service_key"],
            priority=int(item["priority"]),
            days=frozenset(int(d) for d in item["days"]),
            time_ranges=tuple((int(s), int(e)) for s, e in item["time_ranges"]),
        )
        for item in data
    ))
