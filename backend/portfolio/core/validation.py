"""Validation — ErrorCode-tagged results over the Pydantic record models.

Invariants:
    - Validators NEVER raise: every outcome is a ValidationResult
    - One pass collects every violation (Pydantic reports all field errors at once)
    - is_valid is True iff errors is empty, and data is set iff is_valid
    - Every issue carries an ErrorCode; Pydantic error types map onto the taxonomy
      through error_code(), custom errors use the code itself as their type
    - validate_many reports one DUPLICATE_ID per distinct colliding id,
      and prefixes per-record field paths with "<collection>[i]."

Design Decisions:
    - Field paths come from the error loc: ("references", 0, "email") -> "references[0].email"
    - The same mapping serves request validation in the API error handler
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from portfolio.core.domain_types import ErrorCode
from portfolio.core.record_types import Certification, Education, Experience, Project

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_TYPE_CODES: dict[str, ErrorCode] = {
    "missing": ErrorCode.REQUIRED_FIELD,
    "string_too_short": ErrorCode.REQUIRED_FIELD,
    "too_short": ErrorCode.REQUIRED_FIELD,
    "string_pattern_mismatch": ErrorCode.INVALID_FORMAT,
    "enum": ErrorCode.INVALID_VALUE,
    "literal_error": ErrorCode.INVALID_VALUE,
    "greater_than": ErrorCode.INVALID_RANGE,
    "greater_than_equal": ErrorCode.INVALID_RANGE,
    "less_than": ErrorCode.INVALID_RANGE,
    "less_than_equal": ErrorCode.INVALID_RANGE,
    "string_too_long": ErrorCode.INVALID_RANGE,
    "too_long": ErrorCode.INVALID_RANGE,
}
_CUSTOM_CODES = {code.value: code for code in ErrorCode}


@dataclass
class ValidationIssue:
    field: str
    message: str
    code: ErrorCode

    def prefixed(self, prefix: str) -> "ValidationIssue":
        return ValidationIssue(f"{prefix}{self.field}", self.message, self.code)

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message, "code": self.code.value}


@dataclass
class ValidationResult(Generic[T]):
    is_valid: bool
    data: T | None = None
    errors: list[ValidationIssue] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "ValidationResult[T]":
        return cls(is_valid=True, data=data, errors=[])

    @classmethod
    def fail(cls, errors: list[ValidationIssue]) -> "ValidationResult[T]":
        return cls(is_valid=False, data=None, errors=list(errors))

    def error_dicts(self) -> list[dict]:
        return [e.to_dict() for e in self.errors]


# ─── Pydantic error mapping ──────────────────────────────────────

def error_code(error: Mapping) -> ErrorCode:
    """ErrorCode for one entry of ValidationError.errors()."""
    kind = error["type"]
    if kind in _CUSTOM_CODES:
        return _CUSTOM_CODES[kind]
    if error.get("input") is None and kind != "missing":
        # Explicit null on a required field
        return ErrorCode.REQUIRED_FIELD
    if kind in _TYPE_CODES:
        return _TYPE_CODES[kind]
    if kind.endswith(("_type", "_parsing")):
        return ErrorCode.INVALID_TYPE
    return ErrorCode.INVALID_VALUE


def field_path(loc: Sequence[str | int]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def issue_from_error(error: Mapping, root: str = "") -> ValidationIssue:
    return ValidationIssue(field_path(error["loc"]) or root, error["msg"], error_code(error))


def validate_model(model: type[M], candidate: object, root: str) -> ValidationResult[M]:
    """Build `model` from a raw candidate, or collect every issue. Never raises."""
    try:
        record = model.model_validate(candidate)
    except ValidationError as exc:
        return ValidationResult.fail([issue_from_error(e, root) for e in exc.errors()])
    return ValidationResult.ok(record)


def validate_many(
    candidates: Sequence[object],
    validate_one: Callable[[object], ValidationResult[T]],
    collection: str,
    label: str,
) -> ValidationResult[list[T]]:
    """Validate each candidate independently, then scan for duplicate ids."""
    issues: list[ValidationIssue] = []
    records: list[T] = []
    for index, candidate in enumerate(candidates):
        result = validate_one(candidate)
        if result.is_valid:
            records.append(result.data)
        else:
            issues.extend(e.prefixed(f"{collection}[{index}].") for e in result.errors)

    seen: set[str] = set()
    reported: set[str] = set()
    for candidate in candidates:
        record_id = candidate.get("id") if isinstance(candidate, Mapping) else None
        if not isinstance(record_id, str) or not record_id:
            continue
        if record_id in seen and record_id not in reported:
            issues.append(ValidationIssue(
                "id", f"Duplicate {label} ID: {record_id}", ErrorCode.DUPLICATE_ID,
            ))
            reported.add(record_id)
        seen.add(record_id)

    if issues:
        return ValidationResult.fail(issues)
    return ValidationResult.ok(records)


# ─── Per-kind entry points ───────────────────────────────────────

def validate_experience(candidate: object) -> ValidationResult[Experience]:
    return validate_model(Experience, candidate, "experience")


def validate_experiences(candidates: Sequence[object]) -> ValidationResult[list[Experience]]:
    return validate_many(candidates, validate_experience, "experiences", "experience")


def validate_project(candidate: object) -> ValidationResult[Project]:
    return validate_model(Project, candidate, "project")


def validate_projects(candidates: Sequence[object]) -> ValidationResult[list[Project]]:
    return validate_many(candidates, validate_project, "projects", "project")


def validate_education(candidate: object) -> ValidationResult[Education]:
    return validate_model(Education, candidate, "education")


def validate_certification(candidate: object) -> ValidationResult[Certification]:
    return validate_model(Certification, candidate, "certification")
