"""Record Types — Pydantic models for the two catalogs and their sub-records.

Invariants:
    - Optional sub-records are None when absent, never an empty placeholder
    - Enum-valued fields hold the Enum member once a record is built
    - Duration start strictly precedes a concrete end (INVALID_DATE_RANGE otherwise)
    - SalaryRange min strictly below max (INVALID_RANGE otherwise)
    - to_dict() is JSON-safe: Enums become their values, None fields are dropped

Design Decisions:
    - Field rules live on the models; core.validation turns ValidationError
      entries into ErrorCode-tagged issues, so there is one rule set for
      seeds, writes and snapshots
    - Rules that need a specific ErrorCode raise PydanticCustomError with the
      code as the error type
    - Experience.projects stores Project ids; resolution goes through the project catalog
"""

from typing import Annotated

from pydantic import (
    AfterValidator, BaseModel, ConfigDict, Field, StrictBool, StrictInt, StringConstraints,
    model_validator,
)
from pydantic_core import PydanticCustomError

from portfolio.core.domain_types import (
    MONTH_ABBREVIATIONS, MONTH_TOKEN_PATTERN, ONGOING,
    CapabilityType, CompanySize, EmploymentType, ErrorCode, MetricCategory, MetricTrend,
    ProjectCategory, ProjectStatus,
)

END_TOKEN_PATTERN = rf"^(?:({'|'.join(MONTH_ABBREVIATIONS)}) \d{{4}}|{ONGOING})$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"
URL_PATTERN = r"^https?://.+"
YEAR_PATTERN = r"^\d{4}$"


def _non_negative(value: int) -> int:
    if value < 0:
        raise PydanticCustomError(
            ErrorCode.INVALID_VALUE.value, "Must be a non-negative integer",
        )
    return value


RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
MonthToken = Annotated[str, StringConstraints(pattern=MONTH_TOKEN_PATTERN)]
EndToken = Annotated[str, StringConstraints(pattern=END_TOKEN_PATTERN)]
Email = Annotated[str, StringConstraints(pattern=EMAIL_PATTERN)]
Phone = Annotated[str, StringConstraints(pattern=PHONE_PATTERN)]
Url = Annotated[str, StringConstraints(pattern=URL_PATTERN)]
Count = Annotated[StrictInt, AfterValidator(_non_negative)]


def _month_ordinal(token: str) -> int | None:
    """Months since year 0 for a pattern-checked token; None for ONGOING."""
    if token == ONGOING:
        return None
    month, year = token.split(" ")
    return int(year) * 12 + MONTH_ABBREVIATIONS.index(month)


class RecordModel(BaseModel):
    """Base for every record and sub-record."""

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


# ─── Shared ──────────────────────────────────────────────────────

class Duration(RecordModel):
    """Month-year span. end is a "Mon YYYY" token or ONGOING."""
    start: MonthToken
    end: EndToken

    @model_validator(mode="after")
    def _start_before_end(self) -> "Duration":
        start, end = _month_ordinal(self.start), _month_ordinal(self.end)
        if end is not None and start >= end:
            raise PydanticCustomError(
                ErrorCode.INVALID_DATE_RANGE.value, "Start date must be before end date",
            )
        return self


class ClosedDuration(Duration):
    """Duration whose end must be a concrete month (education)."""
    end: MonthToken


# ─── Experience ──────────────────────────────────────────────────

class SalaryRange(RecordModel):
    min: float
    max: float

    @model_validator(mode="after")
    def _min_below_max(self) -> "SalaryRange":
        if self.min >= self.max:
            raise PydanticCustomError(
                ErrorCode.INVALID_RANGE.value, "Salary minimum must be less than maximum",
            )
        return self


class Salary(RecordModel):
    currency: RequiredText
    amount: float | None = Field(None, ge=0)
    range: SalaryRange | None = None


class Reference(RecordModel):
    name: RequiredText
    title: RequiredText
    email: Email | None = None
    phone: Phone | None = None
    linkedin: Url | None = None


class Experience(RecordModel):
    """One professional role."""
    id: RequiredText
    title: RequiredText
    company: RequiredText
    description: RequiredText
    duration: Duration
    achievements: list[str] = Field(min_length=1)
    skills: list[str] = Field(min_length=1)
    projects: list[str]
    featured: StrictBool = False
    location: str | None = None
    type: EmploymentType | None = None
    company_size: CompanySize | None = None
    industry: str | None = None
    responsibilities: list[str] | None = None
    technologies: list[str] | None = None
    team_size: Count | None = None
    reporting_to: str | None = None
    direct_reports: Count | None = None
    salary: Salary | None = None
    company_logo: Url | None = None
    company_website: Url | None = None
    linkedin_url: Url | None = None
    references: list[Reference] | None = None
    tags: list[str] | None = None
    is_remote: StrictBool | None = None
    created_at: str | None = None
    updated_at: str | None = None


# ─── Project ─────────────────────────────────────────────────────

class ProjectMedia(RecordModel):
    hero: RequiredText
    gallery: list[str] = Field(default_factory=list)
    video: str | None = None
    thumbnail: str | None = None


class ProjectMetric(RecordModel):
    label: RequiredText
    value: RequiredText
    improvement: str | None = None
    description: str | None = None
    trend: MetricTrend | None = None
    category: MetricCategory | None = None


class AICapability(RecordModel):
    model_config = ConfigDict(protected_namespaces=())

    type: CapabilityType
    description: RequiredText
    accuracy: float | None = Field(None, ge=0, le=100)
    confidence: float | None = Field(None, ge=0, le=1)
    model_type: str | None = None
    training_data: str | None = None
    features: list[str] | None = None


class BusinessImpact(RecordModel):
    """Free-text business metrics, e.g. roi="320%", cost_savings="$120K annually"."""
    roi: str | None = None
    cost_savings: str | None = None
    time_reduction: str | None = None
    user_growth: str | None = None
    revenue_increase: str | None = None
    productivity_gain: str | None = None
    error_reduction: str | None = None
    customer_satisfaction: str | None = None


class TechnicalDetails(RecordModel):
    architecture: str | None = None
    deployment: str | None = None
    scalability: str | None = None
    performance: str | None = None
    api_endpoints: list[str] | None = None
    databases: list[str] | None = None
    cloud_services: list[str] | None = None


class Testimonial(RecordModel):
    quote: RequiredText
    author: RequiredText
    role: RequiredText
    company: RequiredText


class Award(RecordModel):
    name: RequiredText
    organization: RequiredText
    year: Annotated[str, StringConstraints(pattern=YEAR_PATTERN)]
    category: str | None = None


class Project(RecordModel):
    """One portfolio project."""
    id: RequiredText
    title: RequiredText
    client: RequiredText
    description: RequiredText
    short_description: RequiredText
    category: ProjectCategory
    media: ProjectMedia
    technologies: list[str] = Field(min_length=1)
    timeline: RequiredText
    featured: StrictBool = False
    metrics: list[ProjectMetric] = Field(default_factory=list)
    status: ProjectStatus | None = None
    duration: Duration | None = None
    tags: list[str] | None = None
    challenges: list[str] | None = None
    outcomes: list[str] | None = None
    testimonial: Testimonial | None = None
    ai_capabilities: list[AICapability] | None = None
    business_impact: BusinessImpact | None = None
    technical_details: TechnicalDetails | None = None
    awards: list[Award] | None = None


# ─── CV credentials ──────────────────────────────────────────────

class Education(RecordModel):
    id: RequiredText
    institution: RequiredText
    degree: RequiredText
    field: RequiredText
    duration: ClosedDuration
    description: str | None = None


class Certification(RecordModel):
    id: RequiredText
    name: RequiredText
    issuer: RequiredText
    date: MonthToken
    url: Url | None = None
    description: str | None = None
