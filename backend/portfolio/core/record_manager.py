"""Record Manager — in-memory catalog of validated records for one RecordKind.

Invariants:
    - No two stored records share an id (add rejects, update keeps identity)
    - Every write goes through kind.admit (validate -> sanitize -> re-validate)
    - set_all is all-or-nothing: any invalid record leaves the collection untouched
    - update merges over the stored record and commits only a valid merged result
    - bulk_update isolates entries: one failure never blocks another's success
    - Reads hand out deep copies; callers cannot reach stored state
    - last_sync_date changes only on a successful snapshot, cleared by reset()

Design Decisions:
    - One instance per catalog, constructed by the caller (no module-level default)
    - Synchronous and lock-free: the host serializes mutations
    - Clock injected for deterministic "today"/"now" in durations and snapshots
"""

import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from portfolio.core.domain_types import ErrorCode, ExportFormat
from portfolio.core.impact_score import DEFAULT_WEIGHTS, ImpactWeights
from portfolio.core.month_dates import format_month_token, overlaps, parse_month_token
from portfolio.core.record_export import export_records
from portfolio.core.record_kinds import RecordKind
from portfolio.core.record_query import (
    SortRequest, filter_records, group_by, paginate, search_records, sort_records, unique_sorted,
)
from portfolio.core.record_stats import career_progression, recency_sorted
from portfolio.core.sync_snapshot import (
    SnapshotOptions, SyncResult, build_summary, generate_sync_snapshot,
)
from portfolio.core.validation import ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_RECENT_MONTHS = 24


@dataclass
class BulkFailure:
    id: str
    errors: list[ValidationIssue]

    def to_dict(self) -> dict:
        return {"id": self.id, "errors": [e.to_dict() for e in self.errors]}


@dataclass
class BulkUpdateResult:
    successful: list = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "successful": [r.to_dict() for r in self.successful],
            "failed": [f.to_dict() for f in self.failed],
        }


@dataclass
class QueryPage:
    items: list
    total: int
    offset: int = 0
    limit: int | None = None


class RecordManager:
    """Stateful collection of one record kind."""

    def __init__(
        self,
        kind: RecordKind,
        weights: ImpactWeights = DEFAULT_WEIGHTS,
        clock: Callable[[], datetime] | None = None,
    ):
        self.kind = kind
        self.weights = weights
        self._clock = clock or datetime.now
        self._records: list = []
        self.last_sync_date: str | None = None

    def __len__(self) -> int:
        return len(self._records)

    @property
    def today(self) -> date:
        return self._clock().date()

    def _log_extra(self, operation: str, **extra: Any) -> dict:
        return {"record_kind": self.kind.name.value, "operation": operation, **extra}

    def _index_of(self, record_id: str) -> int | None:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    # ─── Mutations ───────────────────────────────────────────────

    def set_all(self, candidates: Sequence[object]) -> ValidationResult[list]:
        """Replace the whole collection, or change nothing."""
        batch = self.kind.validate_batch(candidates)
        if not batch.is_valid:
            logger.warning(
                f"Rejected {self.kind.label} batch: {len(batch.errors)} errors",
                extra=self._log_extra("set_all", count=len(batch.errors)),
            )
            return batch

        admitted = []
        issues: list[ValidationIssue] = []
        for index, candidate in enumerate(candidates):
            result = self.kind.admit(candidate)
            if result.is_valid:
                admitted.append(result.data)
            else:
                issues.extend(e.prefixed(f"{self.kind.name.value}s[{index}].") for e in result.errors)
        if issues:
            logger.warning(
                f"Rejected {self.kind.label} batch after sanitization",
                extra=self._log_extra("set_all", count=len(issues)),
            )
            return ValidationResult.fail(issues)

        self._records = admitted
        logger.info(
            f"Loaded {len(admitted)} {self.kind.label} records",
            extra=self._log_extra("set_all", count=len(admitted)),
        )
        return ValidationResult.ok(copy.deepcopy(admitted))

    def add(self, candidate: object) -> ValidationResult:
        result = self.kind.admit(candidate)
        if not result.is_valid:
            logger.warning(
                f"Rejected new {self.kind.label}",
                extra=self._log_extra("add", count=len(result.errors)),
            )
            return result
        record = result.data
        if self._index_of(record.id) is not None:
            logger.warning(
                f"Duplicate {self.kind.label} id '{record.id}'",
                extra=self._log_extra(
                    "add", record_id=record.id, error_code=ErrorCode.DUPLICATE_ID.value,
                ),
            )
            return ValidationResult.fail([ValidationIssue(
                "id", f"{self.kind.label} with ID {record.id} already exists",
                ErrorCode.DUPLICATE_ID,
            )])
        self._records.append(record)
        logger.info(
            f"Added {self.kind.label} '{record.id}'",
            extra=self._log_extra("add", record_id=record.id),
        )
        return ValidationResult.ok(copy.deepcopy(record))

    def update(self, record_id: str, updates: Mapping) -> ValidationResult:
        """Merge `updates` over the stored record; commit only if the merge is valid."""
        index = self._index_of(record_id)
        if index is None:
            return ValidationResult.fail([ValidationIssue(
                "id", f"{self.kind.label} with ID {record_id} not found", ErrorCode.NOT_FOUND,
            )])
        if not isinstance(updates, Mapping):
            return ValidationResult.fail([ValidationIssue(
                "updates", "Updates must be an object", ErrorCode.INVALID_TYPE,
            )])

        merged = {**self._records[index].to_dict(), **updates, "id": record_id}
        result = self.kind.admit(merged)
        if not result.is_valid:
            logger.warning(
                f"Rejected update of {self.kind.label} '{record_id}'",
                extra=self._log_extra("update", record_id=record_id, count=len(result.errors)),
            )
            return result
        self._records[index] = result.data
        logger.info(
            f"Updated {self.kind.label} '{record_id}'",
            extra=self._log_extra("update", record_id=record_id),
        )
        return ValidationResult.ok(copy.deepcopy(result.data))

    def remove(self, record_id: str) -> bool:
        index = self._index_of(record_id)
        if index is None:
            return False
        del self._records[index]
        logger.info(
            f"Removed {self.kind.label} '{record_id}'",
            extra=self._log_extra("remove", record_id=record_id),
        )
        return True

    def bulk_update(self, entries: Sequence[Mapping]) -> BulkUpdateResult:
        """Apply update() per entry; entries are {"id", "updates"}."""
        outcome = BulkUpdateResult()
        for entry in entries:
            record_id = str(entry.get("id", "")) if isinstance(entry, Mapping) else ""
            updates = entry.get("updates", {}) if isinstance(entry, Mapping) else {}
            result = self.update(record_id, updates)
            if result.is_valid:
                outcome.successful.append(result.data)
            else:
                outcome.failed.append(BulkFailure(record_id, result.errors))
        logger.info(
            f"Bulk update: {len(outcome.successful)} ok, {len(outcome.failed)} failed",
            extra=self._log_extra("bulk_update", count=len(entries)),
        )
        return outcome

    def clone(self, record_filter: object | None = None) -> "RecordManager":
        """Independent manager over (optionally filtered) copies of the records."""
        twin = RecordManager(self.kind, self.weights, self._clock)
        twin._records = copy.deepcopy(self._select(record_filter))
        return twin

    def reset(self) -> None:
        self._records = []
        self.last_sync_date = None
        logger.info(f"Reset {self.kind.label} catalog", extra=self._log_extra("reset"))

    # ─── Reads ───────────────────────────────────────────────────

    def _select(self, record_filter: object | None) -> list:
        if record_filter is None:
            return list(self._records)
        today = self.today
        return filter_records(self._records, lambda r: self.kind.matches(r, record_filter, today))

    def get_by_id(self, record_id: str):
        index = self._index_of(record_id)
        return None if index is None else copy.deepcopy(self._records[index])

    def get_all(self) -> list:
        return copy.deepcopy(self._records)

    def filter(self, record_filter: object | None) -> list:
        return copy.deepcopy(self._select(record_filter))

    def sort(self, request: SortRequest) -> list:
        comparators = self.kind.comparators(self.weights, self.today)
        return copy.deepcopy(sort_records(self._records, comparators, request))

    def search(self, query: str | None) -> list:
        return copy.deepcopy(search_records(self._records, query, self.kind.search_text))

    def query(
        self,
        record_filter: object | None = None,
        search: str | None = None,
        sort: SortRequest | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> QueryPage:
        """filter -> search -> sort -> page, in one pass over the collection."""
        selected = search_records(self._select(record_filter), search, self.kind.search_text)
        if sort is not None:
            selected = sort_records(selected, self.kind.comparators(self.weights, self.today), sort)
        return QueryPage(
            items=copy.deepcopy(paginate(selected, offset, limit)),
            total=len(selected),
            offset=offset,
            limit=limit,
        )

    def get_featured(self) -> list:
        return copy.deepcopy([r for r in self._records if r.featured])

    def get_recent(self, months: int = DEFAULT_RECENT_MONTHS) -> list:
        """Records active at any point in the last `months` months, newest first."""
        today = self.today
        total = today.year * 12 + (today.month - 1) - max(months, 0)
        cutoff = format_month_token(date(total // 12, total % 12 + 1, 1))
        return self.get_by_date_range(cutoff, None)

    def get_by_entity(self, name: str) -> list:
        needle = name.strip().lower()
        return copy.deepcopy([
            r for r in self._records if self.kind.entity_of(r).lower() == needle
        ])

    def get_by_date_range(self, start: str | None, end: str | None) -> list:
        """Records overlapping the inclusive month range; unparseable bounds match nothing."""
        range_start, range_end = parse_month_token(start), parse_month_token(end)
        if (start and range_start is None) or (end and range_end is None):
            return []
        today = self.today
        selected = [
            r for r in self._records
            if overlaps(self.kind.duration_of(r), range_start, range_end, today)
        ]
        return copy.deepcopy(recency_sorted(selected, self.kind.duration_of))

    def get_by_skill(self, skill: str) -> list:
        ranked = self.kind.rank_by_skill(self._records, skill)
        return copy.deepcopy([record for record, _ in ranked])

    def unique_entities(self) -> list[str]:
        return unique_sorted([self.kind.entity_of(r)] for r in self._records)

    def unique_skills(self) -> list[str]:
        return unique_sorted(self.kind.skills_of(r) for r in self._records)

    def group_by_entity(self) -> dict[str, list]:
        """Records keyed by company or client, each group in collection order."""
        return copy.deepcopy(group_by(self._records, self.kind.entity_of))

    def stats(self) -> dict:
        return self.kind.stats(self._records, self.today)

    def summary(self) -> str:
        return build_summary(self.kind, self._records, self.today)

    def career_progression(self) -> dict:
        return career_progression(
            self._records,
            entity_of=self.kind.entity_of,
            duration_of=self.kind.duration_of,
            skills_of=self.kind.skills_of,
        )

    # ─── Sync / export ───────────────────────────────────────────

    def generate_snapshot(
        self, target_ref: str, options: SnapshotOptions | None = None,
    ) -> SyncResult:
        result = generate_sync_snapshot(
            self._records, self.kind, target_ref, options, now=self._clock(),
        )
        if result.success:
            self.last_sync_date = result.last_sync_date
            logger.info(
                f"Generated {self.kind.label} snapshot for {target_ref}",
                extra=self._log_extra("generate_snapshot", count=len(result.snapshot["sections"]["records"])),
            )
        else:
            logger.warning(
                f"Snapshot for {target_ref} failed",
                extra=self._log_extra("generate_snapshot", count=len(result.errors)),
            )
        return result

    def export(self, fmt: ExportFormat | str) -> str:
        """Serialize the collection. Raises UnsupportedFormatError on unknown formats."""
        return export_records(self._records, fmt, self.kind.export_layout)

