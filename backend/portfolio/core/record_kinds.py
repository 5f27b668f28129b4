"""Record Kinds — binds the generic record mechanics to each catalog's field set.

Invariants:
    - One RecordKind per catalog; RecordManager is generic over it
    - admit() = validate -> sanitize -> re-validate the sanitized form, so a
      record that sanitization empties out is rejected instead of stored
    - skills_of feeds skill listings; frequency_of feeds frequency rankings
      (experience skills only, technologies excluded)
    - search_text covers every textual and string-list field of the record
    - comparators are ascending; direction is applied by sort_records

Design Decisions:
    - Frozen dataclass of callables over an ABC hierarchy: the two kinds differ
      only in data, not in control flow
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from portfolio.core.domain_types import ProjectStatus, RecordKindName
from portfolio.core.impact_score import ImpactWeights, compute_impact_score, technology_score
from portfolio.core.month_dates import duration_months, end_sort_key, start_sort_key
from portfolio.core.record_export import ExportLayout, XmlNode
from portfolio.core.record_query import (
    Comparator, by_key, by_text, experience_matches,
    join_search_text, project_matches,
)
from portfolio.core.record_stats import (
    experience_stats, project_stats, skill_relevance, technology_relevance,
)
from portfolio.core.record_types import Duration, Experience, Project, RecordModel
from portfolio.core.sanitize import sanitize_record
from portfolio.core.validation import (
    ValidationResult, validate_experience, validate_experiences, validate_project, validate_projects,
)


@dataclass(frozen=True)
class RecordKind:
    name: RecordKindName
    label: str
    validate_one: Callable[[object], ValidationResult]
    validate_batch: Callable[[Sequence[object]], ValidationResult]
    entity_of: Callable[[Any], str]
    duration_of: Callable[[Any], Duration | None]
    skills_of: Callable[[Any], list[str]]
    frequency_of: Callable[[Any], list[str]]
    search_text: Callable[[Any], str]
    matches: Callable[[Any, Any, date | None], bool]
    comparators: Callable[[ImpactWeights, date | None], Mapping[str, Comparator]]
    stats: Callable[[list, date | None], dict]
    rank_by_skill: Callable[[list, str], list[tuple[Any, int]]]
    export_layout: ExportLayout

    def admit(self, candidate: object) -> ValidationResult:
        """Validate and sanitize one candidate for storage."""
        result = self.validate_one(candidate)
        if not result.is_valid:
            return result
        return self.validate_one(sanitize_record(result.data).to_dict())

    def to_dict(self, record: RecordModel) -> dict:
        return record.to_dict()


# ─── Experience ──────────────────────────────────────────────────

def _experience_text(exp: Experience) -> str:
    return join_search_text(
        exp.title, exp.company, exp.description, exp.industry, exp.location,
        exp.achievements, exp.skills, exp.responsibilities, exp.technologies, exp.tags,
    )


def _experience_comparators(weights: ImpactWeights, today: date | None) -> dict[str, Comparator]:
    return {
        "start_date": by_key(lambda e: start_sort_key(e.duration)),
        "end_date": by_key(lambda e: end_sort_key(e.duration)),
        "company": by_text(lambda e: e.company),
        "title": by_text(lambda e: e.title),
        "duration": by_key(lambda e: duration_months(e.duration, today)),
        "impact": by_key(lambda e: compute_impact_score(e, weights)),
    }


def _experience_xml(exp: Experience) -> list[XmlNode]:
    return [
        ("title", exp.title),
        ("company", exp.company),
        ("duration", [("start", exp.duration.start), ("end", exp.duration.end)]),
        ("skills", [("skill", s) for s in exp.skills]),
        ("featured", "true" if exp.featured else "false"),
    ]


EXPERIENCE_KIND = RecordKind(
    name=RecordKindName.EXPERIENCE,
    label="Experience",
    validate_one=validate_experience,
    validate_batch=validate_experiences,
    entity_of=lambda e: e.company,
    duration_of=lambda e: e.duration,
    skills_of=lambda e: list(e.skills) + list(e.technologies or []),
    frequency_of=lambda e: list(e.skills),
    search_text=_experience_text,
    matches=experience_matches,
    comparators=_experience_comparators,
    stats=experience_stats,
    rank_by_skill=skill_relevance,
    export_layout=ExportLayout(
        root_tag="experiences",
        item_tag="experience",
        csv_columns=(
            ("ID", lambda e: e.id),
            ("Title", lambda e: e.title),
            ("Company", lambda e: e.company),
            ("Start Date", lambda e: e.duration.start),
            ("End Date", lambda e: e.duration.end),
            ("Skills", lambda e: e.skills),
            ("Featured", lambda e: e.featured),
        ),
        xml_children=_experience_xml,
    ),
)


# ─── Project ─────────────────────────────────────────────────────

def _project_text(p: Project) -> str:
    return join_search_text(
        p.title, p.client, p.description, p.short_description, p.timeline,
        p.technologies, p.tags, p.challenges, p.outcomes,
        [m.label for m in p.metrics],
        [c.description for c in p.ai_capabilities or []],
    )


def _project_comparators(weights: ImpactWeights, today: date | None) -> dict[str, Comparator]:
    return {
        "date": by_key(lambda p: (end_sort_key(p.duration), start_sort_key(p.duration))),
        "title": by_text(lambda p: p.title),
        "client": by_text(lambda p: p.client),
        "duration": by_key(lambda p: duration_months(p.duration, today)),
        "technology": by_key(lambda p: technology_score(p.technologies)),
        "featured": by_key(lambda p: not p.featured),
        "impact": by_key(lambda p: compute_impact_score(p, weights)),
    }


def _project_xml(p: Project) -> list[XmlNode]:
    nodes: list[XmlNode] = [
        ("title", p.title),
        ("client", p.client),
        ("category", p.category.value),
        ("timeline", p.timeline),
        ("status", p.status.value if p.status else ""),
        ("featured", "true" if p.featured else "false"),
        ("technologies", [("technology", t) for t in p.technologies]),
        ("metrics", [
            ("metric", [("label", m.label), ("value", m.value), ("improvement", m.improvement or "")])
            for m in p.metrics
        ]),
        ("ai_capabilities", [("capability", c.type.value) for c in p.ai_capabilities or []]),
    ]
    return nodes


PROJECT_KIND = RecordKind(
    name=RecordKindName.PROJECT,
    label="Project",
    validate_one=validate_project,
    validate_batch=validate_projects,
    entity_of=lambda p: p.client,
    duration_of=lambda p: p.duration,
    skills_of=lambda p: list(p.technologies),
    frequency_of=lambda p: list(p.technologies),
    search_text=_project_text,
    matches=project_matches,
    comparators=_project_comparators,
    stats=project_stats,
    rank_by_skill=technology_relevance,
    export_layout=ExportLayout(
        root_tag="projects",
        item_tag="project",
        csv_columns=(
            ("ID", lambda p: p.id),
            ("Title", lambda p: p.title),
            ("Client", lambda p: p.client),
            ("Category", lambda p: p.category.value),
            ("Timeline", lambda p: p.timeline),
            ("Status", lambda p: p.status.value if p.status else ProjectStatus.COMPLETED.value),
            ("Featured", lambda p: p.featured),
            ("Technologies", lambda p: p.technologies),
            ("Metrics Count", lambda p: len(p.metrics)),
            ("AI Capabilities", lambda p: [c.type.value for c in p.ai_capabilities or []]),
        ),
        xml_children=_project_xml,
    ),
)
