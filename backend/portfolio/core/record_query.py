"""Record Query — filtering, sorting, free-text search and grouping over records.

Invariants:
    - All functions are PURE: input lists are never mutated, new lists returned
    - Filters are AND-combined; a None predicate imposes no constraint
    - desc sorting negates the asc comparator; sorting is stable
      (equal elements keep collection order in both directions)
    - search_records("") returns the input collection unchanged, in order
    - Text predicates are case-insensitive substring tests

Design Decisions:
    - Record-kind specifics (which field is "company", how a record is
      flattened for search) are injected as callables by record_kinds
    - Comparators, not key functions: the mirror law is stated over comparators
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from functools import cmp_to_key
from typing import TypeVar

from portfolio.core.domain_types import (
    BusinessImpactFilter, CapabilityType, EmploymentType, ProjectCategory, ProjectStatus,
    SortDirection,
)
from portfolio.core.metric_values import parse_metric_number
from portfolio.core.month_dates import overlaps, parse_month_token
from portfolio.core.record_types import Experience, Project

T = TypeVar("T")
Comparator = Callable[[T, T], int]

HIGH_ROI_THRESHOLD = 200


# ─── Requests ────────────────────────────────────────────────────

@dataclass
class DateRange:
    """Inclusive month range; either end may be open."""
    start: str | None = None
    end: str | None = None


@dataclass
class ExperienceFilter:
    company: str | None = None
    skills: list[str] | None = None
    date_range: DateRange | None = None
    type: EmploymentType | None = None
    industry: str | None = None
    featured: bool | None = None
    is_remote: bool | None = None
    tags: list[str] | None = None


@dataclass
class ProjectFilter:
    client: str | None = None
    technologies: list[str] | None = None
    date_range: DateRange | None = None
    category: ProjectCategory | None = None
    status: ProjectStatus | None = None
    ai_capability: CapabilityType | None = None
    business_impact: BusinessImpactFilter | None = None
    featured: bool | None = None
    tags: list[str] | None = None


@dataclass
class SortRequest:
    field: str
    direction: SortDirection = SortDirection.ASC


# ─── Predicates ──────────────────────────────────────────────────

def contains_text(haystack: str | None, needle: str) -> bool:
    return haystack is not None and needle.lower() in haystack.lower()


def matches_any(values: Iterable[str] | None, wanted: Iterable[str]) -> bool:
    """True when some wanted term is a substring of some value."""
    values = list(values or [])
    return any(contains_text(v, w) for w in wanted for v in values)


def _date_range_ok(duration, date_range: DateRange | None, today: date | None) -> bool:
    if date_range is None:
        return True
    return overlaps(
        duration,
        parse_month_token(date_range.start),
        parse_month_token(date_range.end),
        today,
    )


def experience_matches(exp: Experience, f: ExperienceFilter, today: date | None = None) -> bool:
    if f.company and not contains_text(exp.company, f.company):
        return False
    if f.skills and not matches_any(exp.skills, f.skills):
        return False
    if not _date_range_ok(exp.duration, f.date_range, today):
        return False
    if f.type is not None and exp.type != f.type:
        return False
    if f.industry and not contains_text(exp.industry, f.industry):
        return False
    if f.featured is not None and exp.featured != f.featured:
        return False
    if f.is_remote is not None and exp.is_remote != f.is_remote:
        return False
    if f.tags and not matches_any(exp.tags, f.tags):
        return False
    return True


def _business_impact_ok(project: Project, bucket: BusinessImpactFilter | None) -> bool:
    if bucket is None:
        return True
    impact = project.business_impact
    if impact is None:
        return False
    if bucket == BusinessImpactFilter.HIGH_ROI:
        return parse_metric_number(impact.roi) >= HIGH_ROI_THRESHOLD
    if bucket == BusinessImpactFilter.COST_SAVINGS:
        return bool(impact.cost_savings)
    if bucket == BusinessImpactFilter.TIME_REDUCTION:
        return bool(impact.time_reduction)
    return bool(impact.user_growth)


def project_matches(project: Project, f: ProjectFilter, today: date | None = None) -> bool:
    if f.client and not contains_text(project.client, f.client):
        return False
    if f.technologies and not matches_any(project.technologies, f.technologies):
        return False
    if not _date_range_ok(project.duration, f.date_range, today):
        return False
    if f.category is not None and project.category != f.category:
        return False
    if f.status is not None and project.status != f.status:
        return False
    if f.ai_capability is not None and not any(
        cap.type == f.ai_capability for cap in project.ai_capabilities or []
    ):
        return False
    if not _business_impact_ok(project, f.business_impact):
        return False
    if f.featured is not None and project.featured != f.featured:
        return False
    if f.tags and not matches_any(project.tags, f.tags):
        return False
    return True


def filter_records(records: list[T], predicate: Callable[[T], bool]) -> list[T]:
    return [r for r in records if predicate(r)]


# ─── Sorting ─────────────────────────────────────────────────────

def compare_values(a, b) -> int:
    return (a > b) - (a < b)


def by_key(key: Callable[[T], object]) -> Comparator:
    """Ascending comparator from a key function."""
    return lambda a, b: compare_values(key(a), key(b))


def by_text(key: Callable[[T], str | None]) -> Comparator:
    """Case-insensitive collation, ties broken by the raw string."""
    def _key(record):
        text = key(record) or ""
        return (text.casefold(), text)
    return by_key(_key)


def sort_records(
    records: list[T],
    comparators: Mapping[str, Comparator],
    request: SortRequest,
) -> list[T]:
    """Stable sort by a named comparator. Unknown fields keep collection order."""
    compare = comparators.get(request.field)
    if compare is None:
        return list(records)
    if request.direction == SortDirection.DESC:
        ascending = compare
        compare = lambda a, b: -ascending(a, b)  # noqa: E731
    return sorted(records, key=cmp_to_key(compare))


# ─── Search ──────────────────────────────────────────────────────

def search_records(records: list[T], query: str | None, text_of: Callable[[T], str]) -> list[T]:
    if query is None or query.strip() == "":
        return records
    term = query.strip().lower()
    return [r for r in records if term in text_of(r)]


def join_search_text(*parts: str | list[str] | None) -> str:
    """Flatten text and string lists into one lower-cased search blob."""
    chunks: list[str] = []
    for part in parts:
        if part is None:
            continue
        if isinstance(part, list):
            chunks.extend(part)
        else:
            chunks.append(part)
    return " ".join(chunks).lower()


# ─── Grouping / counting ─────────────────────────────────────────

def group_by(records: list[T], key: Callable[[T], str]) -> dict[str, list[T]]:
    groups: dict[str, list[T]] = {}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups


def count_frequency(value_lists: Iterable[Iterable[str] | None]) -> dict[str, int]:
    """Occurrences per value, in first-seen order."""
    counts: dict[str, int] = {}
    for values in value_lists:
        for value in values or []:
            counts[value] = counts.get(value, 0) + 1
    return counts


def top_values(frequency: Mapping[str, int], limit: int) -> list[str]:
    """Most frequent first; equal counts keep first-seen order."""
    ranked = sorted(frequency.items(), key=lambda item: -item[1])
    return [value for value, _ in ranked[:limit]]


def unique_sorted(value_lists: Iterable[Iterable[str] | None]) -> list[str]:
    return sorted({value for values in value_lists for value in values or []})


def paginate(records: list[T], offset: int = 0, limit: int | None = None) -> list[T]:
    offset = max(offset, 0)
    if limit is None:
        return records[offset:]
    return records[offset:offset + max(limit, 0)]
