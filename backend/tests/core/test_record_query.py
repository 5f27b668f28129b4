"""Record query — AND-combined filters, stable mirrored sorting, search identity."""

from datetime import date

from portfolio.core.domain_types import (
    BusinessImpactFilter, CapabilityType, EmploymentType, SortDirection,
)
from portfolio.core.impact_score import DEFAULT_WEIGHTS
from portfolio.core.record_kinds import EXPERIENCE_KIND, PROJECT_KIND
from portfolio.core.record_query import (
    DateRange, ExperienceFilter, ProjectFilter, SortRequest, count_frequency,
    experience_matches, group_by, paginate, project_matches, search_records,
    sort_records, top_values, unique_sorted,
)
from portfolio.core.record_types import Experience, Project
from tests.factories import make_experience, make_project

TODAY = date(2024, 6, 15)


def _experiences():
    return [
        Experience.model_validate(make_experience(
            id="e1", company="Ogilvy", title="Senior PM", skills=["Machine Learning", "Agile"],
            duration={"start": "Jan 2022", "end": "Present"}, type="full-time",
            industry="Advertising", featured=True, is_remote=False, tags=["AI"],
        )),
        Experience.model_validate(make_experience(
            id="e2", company="AKQA", title="Producer", skills=["Content"],
            duration={"start": "Sep 2015", "end": "May 2017"}, type="contract",
            industry="Digital Agency", is_remote=True,
        )),
        Experience.model_validate(make_experience(
            id="e3", company="Publicis", title="Coordinator", skills=["Documentation"],
            duration={"start": "Jun 2017", "end": "Mar 2019"},
        )),
    ]


# --- Filters -------------------------------------------------------------------

def test_empty_filter_matches_everything():
    assert all(experience_matches(e, ExperienceFilter(), TODAY) for e in _experiences())


def test_company_is_case_insensitive_substring():
    matched = [e.id for e in _experiences() if experience_matches(e, ExperienceFilter(company="ogil"), TODAY)]
    assert matched == ["e1"]


def test_skills_match_any_substring():
    f = ExperienceFilter(skills=["learning", "docu"])
    matched = [e.id for e in _experiences() if experience_matches(e, f, TODAY)]
    assert matched == ["e1", "e3"]


def test_filters_are_and_combined():
    f = ExperienceFilter(type=EmploymentType.CONTRACT, is_remote=False)
    assert not any(experience_matches(e, f, TODAY) for e in _experiences())


def test_date_range_overlap_includes_ongoing_roles():
    f = ExperienceFilter(date_range=DateRange(start="Jan 2024"))
    matched = [e.id for e in _experiences() if experience_matches(e, f, TODAY)]
    assert matched == ["e1"]


def test_tags_absent_on_record_do_not_match():
    f = ExperienceFilter(tags=["AI"])
    matched = [e.id for e in _experiences() if experience_matches(e, f, TODAY)]
    assert matched == ["e1"]


def test_project_business_impact_buckets():
    high = Project.model_validate(make_project(id="p1", business_impact={"roi": "320%"}))
    low = Project.model_validate(make_project(id="p2", business_impact={"roi": "150%", "cost_savings": "$10K"}))
    bare = Project.model_validate(make_project(id="p3"))
    f_roi = ProjectFilter(business_impact=BusinessImpactFilter.HIGH_ROI)
    f_savings = ProjectFilter(business_impact=BusinessImpactFilter.COST_SAVINGS)
    assert [p.id for p in (high, low, bare) if project_matches(p, f_roi)] == ["p1"]
    assert [p.id for p in (high, low, bare) if project_matches(p, f_savings)] == ["p2"]


def test_project_capability_is_exact_type():
    vision = Project.model_validate(make_project(
        ai_capabilities=[{"type": "computer-vision", "description": "Detection"}],
    ))
    assert project_matches(vision, ProjectFilter(ai_capability=CapabilityType.COMPUTER_VISION))
    assert not project_matches(vision, ProjectFilter(ai_capability=CapabilityType.NLP))


def test_undated_project_excluded_by_date_range():
    project = Project.model_validate(make_project())
    assert not project_matches(project, ProjectFilter(date_range=DateRange(start="Jan 2020")), TODAY)


# --- Sorting -------------------------------------------------------------------

def test_sort_mirror_law_for_every_experience_field():
    records = _experiences()
    comparators = EXPERIENCE_KIND.comparators(DEFAULT_WEIGHTS, TODAY)
    for field in ("start_date", "end_date", "company", "title", "duration"):
        asc = sort_records(records, comparators, SortRequest(field, SortDirection.ASC))
        desc = sort_records(records, comparators, SortRequest(field, SortDirection.DESC))
        assert [r.id for r in asc] == [r.id for r in reversed(desc)], field


def test_sort_by_company_is_case_insensitive():
    records = _experiences()
    comparators = EXPERIENCE_KIND.comparators(DEFAULT_WEIGHTS, TODAY)
    ordered = sort_records(records, comparators, SortRequest("company"))
    assert [r.company for r in ordered] == ["AKQA", "Ogilvy", "Publicis"]


def test_sort_is_stable_on_ties():
    records = [Project.model_validate(make_project(id=f"p{i}")) for i in range(4)]
    comparators = PROJECT_KIND.comparators(DEFAULT_WEIGHTS, TODAY)
    for direction in SortDirection:
        ordered = sort_records(records, comparators, SortRequest("impact", direction))
        assert [r.id for r in ordered] == ["p0", "p1", "p2", "p3"]


def test_sort_projects_featured_first():
    records = [
        Project.model_validate(make_project(id="plain")),
        Project.model_validate(make_project(id="star", featured=True)),
    ]
    comparators = PROJECT_KIND.comparators(DEFAULT_WEIGHTS, TODAY)
    ordered = sort_records(records, comparators, SortRequest("featured"))
    assert [r.id for r in ordered] == ["star", "plain"]


def test_unknown_sort_field_keeps_collection_order():
    records = _experiences()
    ordered = sort_records(records, EXPERIENCE_KIND.comparators(DEFAULT_WEIGHTS, TODAY), SortRequest("salary"))
    assert [r.id for r in ordered] == ["e1", "e2", "e3"]


def test_sort_does_not_mutate_input():
    records = _experiences()
    sort_records(records, EXPERIENCE_KIND.comparators(DEFAULT_WEIGHTS, TODAY), SortRequest("company"))
    assert [r.id for r in records] == ["e1", "e2", "e3"]


# --- Search --------------------------------------------------------------------

def test_empty_search_returns_collection_in_order():
    records = _experiences()
    assert search_records(records, "", EXPERIENCE_KIND.search_text) == records
    assert search_records(records, "   ", EXPERIENCE_KIND.search_text) == records


def test_search_spans_text_and_list_fields():
    records = _experiences()
    assert [r.id for r in search_records(records, "  MACHINE ", EXPERIENCE_KIND.search_text)] == ["e1"]
    assert [r.id for r in search_records(records, "advertising", EXPERIENCE_KIND.search_text)] == ["e1"]
    assert search_records(records, "kubernetes", EXPERIENCE_KIND.search_text) == []


# --- Grouping / counting -------------------------------------------------------

def test_group_by_entity():
    groups = group_by(_experiences(), lambda e: e.company)
    assert sorted(groups) == ["AKQA", "Ogilvy", "Publicis"]


def test_frequency_and_top_values_keep_first_seen_order_on_ties():
    freq = count_frequency([["Python", "SQL"], ["SQL", "Go"], None])
    assert freq == {"Python": 1, "SQL": 2, "Go": 1}
    assert top_values(freq, 2) == ["SQL", "Python"]


def test_unique_sorted_deduplicates():
    assert unique_sorted([["b", "a"], ["a"], None]) == ["a", "b"]


def test_paginate_bounds():
    assert paginate([1, 2, 3, 4], offset=1, limit=2) == [2, 3]
    assert paginate([1, 2, 3], offset=5) == []
    assert paginate([1, 2, 3]) == [1, 2, 3]
