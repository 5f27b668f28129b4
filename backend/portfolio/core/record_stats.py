"""Record Stats — derived analytics over experience and project collections.

Invariants:
    - PURE: read-only over the input lists, returns JSON-safe dicts
    - Never divides by zero: empty collections yield 0 / 0.0 aggregates
    - recency_sorted: end date descending (ONGOING first), then start descending
"""

from collections.abc import Callable
from datetime import date
from typing import TypeVar

from portfolio.core.domain_types import ProjectStatus
from portfolio.core.metric_values import parse_metric_number
from portfolio.core.month_dates import (
    average_tenure_months, end_sort_key, start_sort_key, total_years,
)
from portfolio.core.record_query import count_frequency, unique_sorted
from portfolio.core.record_types import Duration, Experience, Project

T = TypeVar("T")


def recency_sorted(records: list[T], duration_of: Callable[[T], Duration | None]) -> list[T]:
    return sorted(
        records,
        key=lambda r: (end_sort_key(duration_of(r)), start_sort_key(duration_of(r))),
        reverse=True,
    )


def _distribution(values: list[str | None]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for value in values:
        if value:
            counts[value] = counts.get(value, 0) + 1
    return counts


# --- Experience ----------------------------------------------------------------

def experience_stats(experiences: list[Experience], today: date | None = None) -> dict:
    durations = [e.duration for e in experiences]
    return {
        "total_records": len(experiences),
        "total_years": total_years(durations, today),
        "companies_worked_at": len({e.company for e in experiences}),
        "unique_skills": len(unique_sorted(e.skills for e in experiences)),
        "featured_records": sum(1 for e in experiences if e.featured),
        "average_tenure": average_tenure_months(durations, today),
        "skill_frequency": count_frequency(e.skills for e in experiences),
        "company_types": _distribution(
            [e.company_size.value if e.company_size else None for e in experiences],
        ),
        "industry_distribution": _distribution([e.industry for e in experiences]),
    }


def skill_relevance(experiences: list[Experience], skill: str) -> list[tuple[Experience, int]]:
    """Experiences mentioning `skill`, most relevant first (stable on ties)."""
    needle = skill.lower()
    ranked = []
    for exp in experiences:
        relevance = 0
        for s in exp.skills:
            if s.lower() == needle:
                relevance += 3
            elif needle in s.lower():
                relevance += 2
        for tech in exp.technologies or []:
            if tech.lower() == needle:
                relevance += 2
            elif needle in tech.lower():
                relevance += 1
        if needle in exp.title.lower():
            relevance += 1
        if needle in exp.description.lower():
            relevance += 1
        if relevance > 0:
            ranked.append((exp, relevance))
    return sorted(ranked, key=lambda pair: -pair[1])


def technology_relevance(projects: list[Project], technology: str) -> list[tuple[Project, int]]:
    """Projects using `technology`, exact matches ahead of partial ones."""
    needle = technology.lower()
    ranked = []
    for project in projects:
        relevance = 0
        for tech in project.technologies:
            if tech.lower() == needle:
                relevance += 3
            elif needle in tech.lower():
                relevance += 2
        if needle in project.title.lower():
            relevance += 1
        if needle in project.description.lower():
            relevance += 1
        if relevance > 0:
            ranked.append((project, relevance))
    return sorted(ranked, key=lambda pair: -pair[1])


def career_progression(
    records: list[T],
    entity_of: Callable[[T], str] = lambda e: e.company,
    duration_of: Callable[[T], Duration | None] = lambda e: e.duration,
    skills_of: Callable[[T], list[str]] = lambda e: e.skills,
) -> dict:
    """Titles newest first, each skill's first-seen trail, and the entity path oldest first."""
    newest_first = recency_sorted(records, duration_of)
    oldest_first = list(reversed(newest_first))
    skill_evolution: dict[str, list[str]] = {}
    for record in oldest_first:
        duration = duration_of(record)
        since = duration.start if duration else "undated"
        for s in skills_of(record):
            skill_evolution.setdefault(s, []).append(f"{entity_of(record)} ({since})")
    companies = [entity_of(r) for r in oldest_first]
    return {
        "progression": [f"{r.title} at {entity_of(r)}" for r in newest_first],
        "skill_evolution": skill_evolution,
        "career_path": (
            f"Career progression through {len(companies)} companies: "
            + " → ".join(companies)
        ),
    }


# --- Project -------------------------------------------------------------------

def project_stats(projects: list[Project], today: date | None = None) -> dict:
    total = len(projects)
    metric_count = sum(len(p.metrics) for p in projects)
    with_roi = [p for p in projects if p.business_impact and p.business_impact.roi]
    roi_total = sum(parse_metric_number(p.business_impact.roi) for p in with_roi)
    return {
        "total_records": total,
        "featured_records": sum(1 for p in projects if p.featured),
        "completed_projects": sum(1 for p in projects if p.status == ProjectStatus.COMPLETED),
        "total_technologies": len(unique_sorted(p.technologies for p in projects)),
        "total_ai_capabilities": len({
            cap.type.value for p in projects for cap in p.ai_capabilities or []
        }),
        "avg_metrics_per_project": round(metric_count / total, 1) if total else 0.0,
        "avg_roi": round(roi_total / len(with_roi)) if with_roi else 0,
        "category_distribution": _distribution([p.category.value for p in projects]),
        "technology_frequency": count_frequency(p.technologies for p in projects),
        "total_years": total_years([p.duration for p in projects], today),
    }
