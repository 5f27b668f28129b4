"""Experience Routes — query, CRUD, bulk update, stats, export and project links over HTTP.

Invariants:
    - Rejected writes answer 422 with itemized errors[] and leave the catalog unchanged
    - Unknown ids answer 404 with code NOT_FOUND
    - Unknown sort fields answer 400 (INVALID_QUERY) instead of silently not sorting
"""

import json

from tests.factories import make_experience

BASE = "/api/v1/experiences"


def _ids(res) -> list[str]:
    return [item["id"] for item in res.json()["data"]["items"]]


# --- Listing -------------------------------------------------------------------

async def test_list_returns_envelope_with_all_records(client):
    res = await client.get(BASE)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["total"] == 2
    assert _ids(res) == ["exp-1", "exp-2"]


async def test_list_filters_by_company_case_insensitively(client):
    res = await client.get(BASE, params={"company": "ogilvy"})
    assert _ids(res) == ["exp-1"]


async def test_list_filters_by_featured_and_skills(client):
    res = await client.get(BASE, params={"featured": "false", "skills": ["stakeholder"]})
    assert _ids(res) == ["exp-2"]


async def test_list_search(client):
    res = await client.get(BASE, params={"search": "Digital"})
    assert _ids(res) == ["exp-2"]


async def test_list_sorts_descending(client):
    res = await client.get(BASE, params={"sort_field": "company", "sort_direction": "desc"})
    assert _ids(res) == ["exp-2", "exp-1"]


async def test_list_pages_after_sorting(client):
    res = await client.get(BASE, params={"sort_field": "start_date", "offset": 1, "limit": 1})
    body = res.json()["data"]
    assert body["total"] == 2
    assert [item["id"] for item in body["items"]] == ["exp-1"]


async def test_list_date_range_overlap(client):
    res = await client.get(BASE, params={"start_date": "Jan 2020", "end_date": "Dec 2020"})
    assert _ids(res) == ["exp-2"]


async def test_unknown_sort_field_is_400(client):
    res = await client.get(BASE, params={"sort_field": "salary"})
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_QUERY"


async def test_malformed_month_bound_is_422(client):
    res = await client.get(BASE, params={"start_date": "2020-01"})
    assert res.status_code == 422
    body = res.json()
    assert body["code"] == "VALIDATION_ERROR"
    [error] = body["errors"]
    assert error["field"].endswith("start_date")
    assert error["code"] == "INVALID_FORMAT"


# --- Single record -------------------------------------------------------------

async def test_get_by_id(client):
    res = await client.get(f"{BASE}/exp-1")
    assert res.status_code == 200
    assert res.json()["data"]["company"] == "Ogilvy"


async def test_get_unknown_id_is_404(client):
    res = await client.get(f"{BASE}/missing")
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"


# --- Writes --------------------------------------------------------------------

async def test_create_returns_201_with_sanitized_record(client, experiences):
    payload = make_experience(id="exp-3", title="<b>Producer</b>")
    res = await client.post(BASE, json=payload)
    assert res.status_code == 201
    assert res.json()["data"]["title"] == "Producer"
    assert experiences.get_by_id("exp-3") is not None


async def test_create_invalid_record_is_422_with_itemized_errors(client, experiences):
    payload = make_experience(id="exp-3", title="", duration={"start": "Jan 2021", "end": "Jan 2020"})
    res = await client.post(BASE, json=payload)
    assert res.status_code == 422
    body = res.json()
    assert body["code"] == "VALIDATION_FAILED"
    fields = {e["field"]: e["code"] for e in body["errors"]}
    assert fields["title"] == "REQUIRED_FIELD"
    assert fields["duration"] == "INVALID_DATE_RANGE"
    assert len(experiences) == 2


async def test_create_duplicate_id_is_rejected(client):
    res = await client.post(BASE, json=make_experience(id="exp-1"))
    assert res.status_code == 422
    assert res.json()["errors"][0]["code"] == "DUPLICATE_ID"


async def test_patch_merges_updates(client):
    res = await client.patch(f"{BASE}/exp-2", json={"title": "Programme Lead"})
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["title"] == "Programme Lead"
    assert data["company"] == "Wunderman Thompson"


async def test_patch_invalid_merge_leaves_record_unchanged(client, experiences):
    res = await client.patch(f"{BASE}/exp-2", json={"duration": {"start": "Jan 2023", "end": "Jan 2020"}})
    assert res.status_code == 422
    assert experiences.get_by_id("exp-2").duration.start == "Mar 2019"


async def test_patch_unknown_id_is_404(client):
    res = await client.patch(f"{BASE}/missing", json={"title": "T"})
    assert res.status_code == 404


async def test_delete_then_get_is_404(client):
    res = await client.delete(f"{BASE}/exp-2")
    assert res.status_code == 200
    assert res.json()["data"] == {"id": "exp-2", "deleted": True}
    assert (await client.get(f"{BASE}/exp-2")).status_code == 404


async def test_delete_unknown_id_is_404(client):
    res = await client.delete(f"{BASE}/missing")
    assert res.status_code == 404


async def test_bulk_update_reports_partial_failure(client, experiences):
    res = await client.post(f"{BASE}/bulk-update", json={"updates": [
        {"id": "exp-1", "updates": {"title": "Head of AI Delivery"}},
        {"id": "missing", "updates": {"title": "Z"}},
    ]})
    assert res.status_code == 200
    data = res.json()["data"]
    assert [r["id"] for r in data["successful"]] == ["exp-1"]
    assert data["failed"][0]["id"] == "missing"
    assert data["failed"][0]["errors"][0]["code"] == "NOT_FOUND"
    assert experiences.get_by_id("exp-1").title == "Head of AI Delivery"


async def test_bulk_update_requires_entries(client):
    res = await client.post(f"{BASE}/bulk-update", json={"updates": []})
    assert res.status_code == 422


# --- Stats / export / links ----------------------------------------------------

async def test_stats(client):
    res = await client.get(f"{BASE}/stats")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["total_records"] == 2
    assert data["companies_worked_at"] == 2
    assert data["featured_records"] == 1
    assert data["skill_frequency"]["Agile"] == 2
    assert data["unique_entities"] == ["Ogilvy", "Wunderman Thompson"]
    assert data["by_entity"] == {"Ogilvy": ["exp-1"], "Wunderman Thompson": ["exp-2"]}
    assert data["career_progression"]["progression"][0] == "Senior AI Project Manager at Ogilvy"


async def test_export_json(client):
    res = await client.get(f"{BASE}/export", params={"format": "json"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/json")
    assert [r["id"] for r in json.loads(res.text)] == ["exp-1", "exp-2"]


async def test_export_csv_as_attachment(client):
    res = await client.get(f"{BASE}/export", params={"format": "csv"})
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert res.headers["content-disposition"] == 'attachment; filename="experiences.csv"'
    assert res.text.split("\n")[0].startswith('"ID","Title","Company"')


async def test_export_xml(client):
    res = await client.get(f"{BASE}/export", params={"format": "xml"})
    assert res.status_code == 200
    assert "<experiences>" in res.text
    assert "<company>Ogilvy</company>" in res.text


async def test_export_unknown_format_is_400(client):
    res = await client.get(f"{BASE}/export", params={"format": "yaml"})
    assert res.status_code == 400
    assert res.json()["code"] == "UNSUPPORTED_FORMAT"


async def test_linked_projects_reports_missing_ids(client):
    res = await client.get(f"{BASE}/exp-1/projects")
    assert res.status_code == 200
    data = res.json()["data"]
    assert [p["id"] for p in data["projects"]] == ["proj-1"]
    assert data["missing"] == ["proj-gone"]


async def test_linked_projects_unknown_experience_is_404(client):
    res = await client.get(f"{BASE}/missing/projects")
    assert res.status_code == 404
