"""Domain Types — closed vocabularies shared by validation, queries and export.

Invariants:
    - Every closed set of values is a str Enum — no raw string matching in core
    - ErrorCode is the complete validation taxonomy (8 members)
    - MONTH_ABBREVIATIONS index == calendar month - 1

Design Decisions:
    - str Enums: serialize to JSON and CSV without custom encoders
    - ONGOING is a plain str constant, not an Enum member: it lives inside
      stored duration tokens next to "Mon YYYY" values
"""

from enum import Enum


# ─── Date tokens ─────────────────────────────────────────────────

MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
ONGOING = "Present"
MONTH_TOKEN_PATTERN = r"^(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) (\d{4})$"


# ─── Enums ───────────────────────────────────────────────────────

class ErrorCode(str, Enum):
    """Validation error taxonomy — every ValidationIssue carries one."""
    REQUIRED_FIELD = "REQUIRED_FIELD"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_VALUE = "INVALID_VALUE"
    INVALID_RANGE = "INVALID_RANGE"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    DUPLICATE_ID = "DUPLICATE_ID"
    NOT_FOUND = "NOT_FOUND"


class EmploymentType(str, Enum):
    FULL_TIME = "full-time"
    CONTRACT = "contract"
    FREELANCE = "freelance"
    INTERNSHIP = "internship"


class CompanySize(str, Enum):
    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class ProjectCategory(str, Enum):
    AI = "ai"
    DIGITAL = "digital"
    PRODUCTION = "production"


class ProjectStatus(str, Enum):
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    PLANNED = "planned"


class CapabilityType(str, Enum):
    """AI capability kinds a project may declare."""
    COMPUTER_VISION = "computer-vision"
    NLP = "nlp"
    MACHINE_LEARNING = "machine-learning"
    DEEP_LEARNING = "deep-learning"
    AUTOMATION = "automation"
    PREDICTION = "prediction"
    RECOMMENDATION = "recommendation"
    OPTIMIZATION = "optimization"


class MetricTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MetricCategory(str, Enum):
    PERFORMANCE = "performance"
    ENGAGEMENT = "engagement"
    BUSINESS = "business"
    TECHNICAL = "technical"


class BusinessImpactFilter(str, Enum):
    """Project filter buckets over the business_impact sub-record."""
    HIGH_ROI = "high-roi"
    COST_SAVINGS = "cost-savings"
    TIME_REDUCTION = "time-reduction"
    USER_GROWTH = "user-growth"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    XML = "xml"


class RecordKindName(str, Enum):
    """The two catalogs served by the record core."""
    EXPERIENCE = "experience"
    PROJECT = "project"
