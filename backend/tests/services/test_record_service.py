"""Record Service — manager results mapped onto envelopes and domain errors."""

import pytest

from portfolio.core.errors import (
    InvalidQueryError, RecordNotFoundError, RecordValidationError, UnsupportedFormatError,
)
from portfolio.core.record_query import SortRequest
from portfolio.core.sync_snapshot import SnapshotOptions
from portfolio.services import record_service
from tests.factories import experience_manager, make_experience


@pytest.fixture
def manager():
    return experience_manager(make_experience(id="a", featured=True), make_experience(id="b"))


def test_envelope():
    assert record_service.envelope([1]) == {"success": True, "data": [1]}


def test_list_records_rejects_unknown_sort(manager):
    with pytest.raises(InvalidQueryError) as exc_info:
        record_service.list_records(manager, sort=SortRequest("nope"))
    assert exc_info.value.http_status == 400
    assert exc_info.value.parameter == "sort_field"


def test_list_records_pages(manager):
    body = record_service.list_records(manager, offset=1, limit=5)
    assert body["data"]["total"] == 2
    assert [r["id"] for r in body["data"]["items"]] == ["b"]
    assert body["data"]["limit"] == 5


def test_get_record_missing_raises(manager):
    with pytest.raises(RecordNotFoundError) as exc_info:
        record_service.get_record(manager, "zzz")
    assert exc_info.value.context.record_id == "zzz"


def test_create_record_invalid_raises_with_itemized_errors(manager):
    with pytest.raises(RecordValidationError) as exc_info:
        record_service.create_record(manager, make_experience(id="c", skills=[]))
    response = exc_info.value.to_response()
    assert response["code"] == "VALIDATION_FAILED"
    assert response["errors"][0]["field"] == "skills"


def test_update_missing_maps_to_not_found(manager):
    with pytest.raises(RecordNotFoundError):
        record_service.update_record(manager, "zzz", {"title": "T"})


def test_update_invalid_maps_to_validation_error(manager):
    with pytest.raises(RecordValidationError):
        record_service.update_record(manager, "a", {"title": ""})


def test_delete_record(manager):
    assert record_service.delete_record(manager, "a")["data"] == {"id": "a", "deleted": True}
    with pytest.raises(RecordNotFoundError):
        record_service.delete_record(manager, "a")


def test_export_collection_media_types(manager):
    _, media_type = record_service.export_collection(manager, "xml")
    assert media_type == "application/xml"
    with pytest.raises(UnsupportedFormatError):
        record_service.export_collection(manager, "pdf")


def test_sync_failure_is_500_with_result(manager):
    status, body = record_service.sync_cv(manager, "not-a-target", SnapshotOptions())
    assert status == 500
    assert body["success"] is False
    assert body["error"].startswith("Failed to generate snapshot")
    assert body["data"]["snapshot"]["sections"]["summary"] == "Error generating summary"
    assert manager.last_sync_date is None


def test_sync_success_envelope(manager):
    status, body = record_service.sync_cv(manager, "/cv.pdf", SnapshotOptions())
    assert status == 200
    assert body["data"]["success"] is True
