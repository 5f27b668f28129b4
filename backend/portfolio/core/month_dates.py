"""Month Dates — parsing and arithmetic over "Mon YYYY" duration tokens.

Invariants:
    - parse_month_token never raises: unparseable input returns None
    - ONGOING resolves to `today` only in duration arithmetic (resolve_end),
      never in parse_month_token, so stored values compare as written
    - duration_months = (end_year - start_year) * 12 + (end_month - start_month)
    - total_years rounds to 1 decimal

Design Decisions:
    - `today` is a parameter everywhere it matters: deterministic tests, no clock in core
    - Dates are the first day of the month (datetime.date)
"""

import re
from datetime import date

from portfolio.core.domain_types import MONTH_ABBREVIATIONS, MONTH_TOKEN_PATTERN, ONGOING
from portfolio.core.record_types import Duration

_MONTH_TOKEN_RE = re.compile(MONTH_TOKEN_PATTERN)

# Sorts after every concrete month when ordering by recency
_ONGOING_SORT_KEY = (1, date.max)


def is_month_token(value: object) -> bool:
    return isinstance(value, str) and bool(_MONTH_TOKEN_RE.match(value))


def parse_month_token(value: object) -> date | None:
    """'Mar 2021' -> date(2021, 3, 1). ONGOING and garbage -> None."""
    if not isinstance(value, str):
        return None
    match = _MONTH_TOKEN_RE.match(value)
    if not match:
        return None
    month = MONTH_ABBREVIATIONS.index(match.group(1)) + 1
    return date(int(match.group(2)), month, 1)


def format_month_token(d: date) -> str:
    return f"{MONTH_ABBREVIATIONS[d.month - 1]} {d.year}"


def resolve_end(duration: Duration, today: date | None = None) -> date | None:
    """End date for arithmetic: ONGOING becomes the first of the current month."""
    if duration.end == ONGOING:
        today = today or date.today()
        return date(today.year, today.month, 1)
    return parse_month_token(duration.end)


def duration_months(duration: Duration | None, today: date | None = None) -> int:
    """Length in whole months. Unparseable or missing durations count 0."""
    if duration is None:
        return 0
    start = parse_month_token(duration.start)
    end = resolve_end(duration, today)
    if start is None or end is None:
        return 0
    return (end.year - start.year) * 12 + (end.month - start.month)


def total_years(durations: list[Duration | None], today: date | None = None) -> float:
    months = sum(duration_months(d, today) for d in durations)
    return round(months / 12, 1)


def average_tenure_months(durations: list[Duration | None], today: date | None = None) -> float:
    if not durations:
        return 0.0
    months = sum(duration_months(d, today) for d in durations)
    return round(months / len(durations), 1)


def start_sort_key(duration: Duration | None) -> tuple[int, date]:
    """Ascending key on the start token; missing/unparseable sorts first."""
    start = parse_month_token(duration.start) if duration else None
    return (0, date.min) if start is None else (0, start)


def end_sort_key(duration: Duration | None) -> tuple[int, date]:
    """Ascending key on the end token; ONGOING sorts after every concrete date."""
    if duration is None:
        return (0, date.min)
    if duration.end == ONGOING:
        return _ONGOING_SORT_KEY
    end = parse_month_token(duration.end)
    return (0, date.min) if end is None else (0, end)


def overlaps(
    duration: Duration | None,
    range_start: date | None,
    range_end: date | None,
    today: date | None = None,
) -> bool:
    """Inclusive overlap between a record span and a (possibly open) range.

    A record without a parseable span never overlaps a constrained range.
    """
    if range_start is None and range_end is None:
        return True
    if duration is None:
        return False
    start = parse_month_token(duration.start)
    end = resolve_end(duration, today)
    if start is None or end is None:
        return False
    if range_start is not None and end < range_start:
        return False
    if range_end is not None and start > range_end:
        return False
    return True
