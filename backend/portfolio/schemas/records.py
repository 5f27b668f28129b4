"""Record Schemas — query parameters and request bodies for the catalog routes.

Invariants:
    - Query models only describe shape; to_filter()/to_sort() produce core request types
    - Month-token bounds are pattern-checked here so core never sees garbage ranges
    - Record bodies arrive as dicts and are validated by the core record models,
      so seeds and API writes report the same ErrorCode-tagged issues

Design Decisions:
    - Query parameter models (FastAPI Annotated[Model, Query()]) over long handler signatures
"""

from typing import Any

from pydantic import BaseModel, Field

from portfolio.core.domain_types import (
    BusinessImpactFilter, CapabilityType, EmploymentType,
    ProjectCategory, ProjectStatus, SortDirection,
)
from portfolio.core.record_query import DateRange, ExperienceFilter, ProjectFilter, SortRequest
from portfolio.core.record_types import MonthToken


class RecordQuery(BaseModel):
    """Search, date range, sort and paging shared by both catalogs."""
    search: str | None = Field(None, max_length=200)
    featured: bool | None = None
    tags: list[str] | None = None
    start_date: MonthToken | None = None
    end_date: MonthToken | None = None
    sort_field: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    offset: int = Field(0, ge=0)
    limit: int | None = Field(None, ge=1, le=500)

    def date_range(self) -> DateRange | None:
        if self.start_date is None and self.end_date is None:
            return None
        return DateRange(start=self.start_date, end=self.end_date)

    def to_sort(self) -> SortRequest | None:
        if not self.sort_field:
            return None
        return SortRequest(field=self.sort_field, direction=self.sort_direction)


class ExperienceQuery(RecordQuery):
    company: str | None = None
    skills: list[str] | None = None
    type: EmploymentType | None = None
    industry: str | None = None
    is_remote: bool | None = None

    def to_filter(self) -> ExperienceFilter:
        return ExperienceFilter(
            company=self.company,
            skills=self.skills,
            date_range=self.date_range(),
            type=self.type,
            industry=self.industry,
            featured=self.featured,
            is_remote=self.is_remote,
            tags=self.tags,
        )


class ProjectQuery(RecordQuery):
    client: str | None = None
    technologies: list[str] | None = None
    category: ProjectCategory | None = None
    status: ProjectStatus | None = None
    ai_capability: CapabilityType | None = None
    business_impact: BusinessImpactFilter | None = None

    def to_filter(self) -> ProjectFilter:
        return ProjectFilter(
            client=self.client,
            technologies=self.technologies,
            date_range=self.date_range(),
            category=self.category,
            status=self.status,
            ai_capability=self.ai_capability,
            business_impact=self.business_impact,
            featured=self.featured,
            tags=self.tags,
        )


# --- Bodies --------------------------------------------------------------------

class BulkUpdateEntry(BaseModel):
    id: str = Field(min_length=1)
    updates: dict[str, Any]


class BulkUpdateRequest(BaseModel):
    """Each entry is applied independently; failures are reported per id."""
    updates: list[BulkUpdateEntry] = Field(min_length=1, max_length=500)


class CVSyncRequest(BaseModel):
    """Snapshot options. target_ref defaults to the configured CV location."""
    target_ref: str | None = Field(None, pattern=r"^(https?://|/)\S+$")
    include_all: bool = False
    max_records: int | None = Field(None, ge=1)
    education: list[dict[str, Any]] | None = None
    certifications: list[dict[str, Any]] | None = None
