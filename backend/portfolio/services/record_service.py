"""Record Service — maps RecordManager results onto the API envelope.

Invariants:
    - Success payloads are {success: True, data}; failures raise PortfolioError
      subclasses so the global handlers render them
    - A failed write never mutates state (guaranteed by the manager)
    - NOT_FOUND from update() becomes RecordNotFoundError (404), every other
      rejected write becomes RecordValidationError (422) with itemized errors
    - Unknown sort fields are rejected here (InvalidQueryError) instead of
      silently keeping collection order

Design Decisions:
    - Plain functions taking the manager: routes stay thin, tests call them directly
"""

import logging
from collections.abc import Mapping, Sequence

from portfolio.core.domain_types import ErrorCode, ExportFormat
from portfolio.core.errors import (
    InvalidQueryError, RecordNotFoundError, RecordValidationError, UnsupportedFormatError,
)
from portfolio.core.record_manager import RecordManager
from portfolio.core.record_query import SortRequest
from portfolio.core.sync_snapshot import SnapshotOptions
from portfolio.core.validation import ValidationResult
from portfolio.infrastructure.observability import log_context

logger = logging.getLogger(__name__)

EXPORT_MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
    ExportFormat.XML: "application/xml",
}


def envelope(data: object) -> dict:
    return {"success": True, "data": data}


def _raise_rejected(manager: RecordManager, result: ValidationResult, record_id: str | None = None):
    if any(e.code == ErrorCode.NOT_FOUND for e in result.errors):
        raise RecordNotFoundError(manager.kind.label, record_id or "")
    raise RecordValidationError(manager.kind.label, result.error_dicts())


def _check_sort(manager: RecordManager, sort: SortRequest | None) -> None:
    if sort is None:
        return
    known = manager.kind.comparators(manager.weights, manager.today)
    if sort.field not in known:
        raise InvalidQueryError(
            f"Unknown sort field '{sort.field}'. Expected one of: {', '.join(known)}",
            "sort_field",
        )


# --- Reads ---------------------------------------------------------------------

def list_records(
    manager: RecordManager,
    record_filter: object | None = None,
    search: str | None = None,
    sort: SortRequest | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> dict:
    _check_sort(manager, sort)
    page = manager.query(record_filter, search, sort, offset, limit)
    return envelope({
        "items": [r.to_dict() for r in page.items],
        "total": page.total,
        "offset": page.offset,
        "limit": page.limit,
    })


def get_record(manager: RecordManager, record_id: str) -> dict:
    record = manager.get_by_id(record_id)
    if record is None:
        raise RecordNotFoundError(manager.kind.label, record_id)
    return envelope(record.to_dict())


def record_stats(manager: RecordManager) -> dict:
    return envelope({
        **manager.stats(),
        "summary": manager.summary(),
        "unique_entities": manager.unique_entities(),
        "by_entity": {
            entity: [r.id for r in records]
            for entity, records in manager.group_by_entity().items()
        },
        "career_progression": manager.career_progression(),
    })


# --- Writes --------------------------------------------------------------------

def create_record(manager: RecordManager, candidate: Mapping) -> dict:
    result = manager.add(candidate)
    if not result.is_valid:
        _raise_rejected(manager, result)
    return envelope(result.data.to_dict())


def update_record(manager: RecordManager, record_id: str, updates: Mapping) -> dict:
    result = manager.update(record_id, updates)
    if not result.is_valid:
        _raise_rejected(manager, result, record_id)
    return envelope(result.data.to_dict())


def delete_record(manager: RecordManager, record_id: str) -> dict:
    if not manager.remove(record_id):
        raise RecordNotFoundError(manager.kind.label, record_id)
    return envelope({"id": record_id, "deleted": True})


def bulk_update(manager: RecordManager, entries: Sequence[Mapping]) -> dict:
    """Partial-failure batch: always 200, failures itemized per id."""
    return envelope(manager.bulk_update(entries).to_dict())


# --- Export / sync -------------------------------------------------------------

def export_collection(manager: RecordManager, fmt: str) -> tuple[str, str]:
    """Returns (body, media_type). Unknown formats raise UnsupportedFormatError."""
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        raise UnsupportedFormatError(fmt) from None
    body = manager.export(export_format)
    logger.info(
        f"Exported {len(manager)} {manager.kind.label} records as {export_format.value}",
        extra=log_context(manager.kind.name.value, "export", count=len(manager)),
    )
    return body, EXPORT_MEDIA_TYPES[export_format]


def sync_cv(
    manager: RecordManager, target_ref: str, options: SnapshotOptions,
) -> tuple[int, dict]:
    """Returns (http_status, body). Warnings and itemized errors ride along on success."""
    result = manager.generate_snapshot(target_ref, options)
    if result.success:
        return 200, envelope(result.to_dict())
    return 500, {
        "success": False,
        "error": result.errors[0] if result.errors else "Failed to generate snapshot",
        "errors": result.errors,
        "data": result.to_dict(),
    }
