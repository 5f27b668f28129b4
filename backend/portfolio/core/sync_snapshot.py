"""Sync Snapshot — builds the denormalized CV document from a record collection.

Invariants:
    - generate_sync_snapshot NEVER raises: internal failures become success=False
      with an empty-sectioned snapshot and a populated errors list
    - Validation problems in the collection are reported in errors, not fatal
    - Default inclusion is featured-only; an empty featured set falls back to
      all records with a warning (never an empty snapshot silently)
    - Order of operations: include -> sort by recency -> cap at max_records
    - Education / certification entries that fail validation are dropped and
      reported in errors

Design Decisions:
    - `now` is a parameter: the manager owns the clock
    - Sections hold JSON-safe dicts, not dataclasses: the snapshot is a wire document
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime

from portfolio.core.month_dates import total_years
from portfolio.core.record_kinds import RecordKind
from portfolio.core.record_query import count_frequency, top_values, unique_sorted
from portfolio.core.record_stats import recency_sorted
from portfolio.core.validation import validate_certification, validate_education

logger = logging.getLogger(__name__)

_TARGET_REF_RE = re.compile(r"^(https?://|/)\S+$")
TOP_SKILLS_IN_SUMMARY = 3


@dataclass
class SnapshotOptions:
    include_all: bool = False
    max_records: int | None = None
    education: list[Mapping] | None = None
    certifications: list[Mapping] | None = None


@dataclass
class SyncResult:
    success: bool
    snapshot: dict
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    last_sync_date: str = ""

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "snapshot": self.snapshot,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "last_sync_date": self.last_sync_date,
        }


def _empty_sections(summary: str = "") -> dict:
    return {
        "summary": summary,
        "records": [],
        "skills": [],
        "education": [],
        "certifications": [],
    }


def build_summary(kind: RecordKind, records: list, today: date | None = None) -> str:
    """One-line profile: total years (ONGOING counted to `today`) and top-ranked skills."""
    years = total_years([kind.duration_of(r) for r in records], today)
    entities = len({kind.entity_of(r) for r in records})
    top = top_values(count_frequency(kind.frequency_of(r) for r in records), TOP_SKILLS_IN_SUMMARY)
    return (
        f"Experienced professional with {years} years of experience across "
        f"{entities} companies and {len(records)} roles, specializing in {', '.join(top)}."
    )


def _validated_entries(entries, validate, label: str, errors: list[str]) -> list[dict]:
    kept = []
    for index, entry in enumerate(entries or []):
        result = validate(entry)
        if result.is_valid:
            kept.append(result.data.to_dict())
        else:
            errors.extend(f"{label}[{index}].{e.field}: {e.message}" for e in result.errors)
    return kept


def _select_records(records: list, options: SnapshotOptions, warnings: list[str]) -> list:
    selected = records
    if not options.include_all:
        selected = [r for r in records if getattr(r, "featured", False)]
        if not selected:
            warnings.append("No featured records found, including all records")
            selected = records
    return selected


def generate_sync_snapshot(
    records: list,
    kind: RecordKind,
    target_ref: str,
    options: SnapshotOptions | None = None,
    now: datetime | None = None,
) -> SyncResult:
    """Build the CV snapshot for `records`. Pure apart from logging."""
    options = options or SnapshotOptions()
    now = now or datetime.now()
    warnings: list[str] = []
    errors: list[str] = []
    try:
        if not isinstance(target_ref, str) or not _TARGET_REF_RE.match(target_ref):
            raise ValueError(f"Invalid export target: {target_ref!r}")

        validation = kind.validate_batch([kind.to_dict(r) for r in records])
        errors.extend(f"{e.field}: {e.message}" for e in validation.errors)

        selected = recency_sorted(_select_records(records, options, warnings), kind.duration_of)
        if options.max_records is not None and len(selected) > options.max_records:
            selected = selected[:options.max_records]
            warnings.append(f"Limited to {options.max_records} records")

        sections = {
            "summary": build_summary(kind, selected, now.date()),
            "records": [r.to_dict() for r in selected],
            "skills": unique_sorted(kind.skills_of(r) for r in selected),
            "education": _validated_entries(options.education, validate_education, "education", errors),
            "certifications": _validated_entries(
                options.certifications, validate_certification, "certifications", errors,
            ),
        }
        success = True
    except Exception as e:
        logger.error(f"Snapshot generation failed: {e}", exc_info=True)
        errors.append(f"Failed to generate snapshot: {e}")
        sections = _empty_sections("Error generating summary")
        success = False

    return SyncResult(
        success=success,
        snapshot={
            "target_ref": target_ref,
            "last_updated": now.date().isoformat(),
            "sections": sections,
        },
        warnings=warnings,
        errors=errors,
        last_sync_date=now.isoformat(),
    )
