"""Project Routes — CRUD, query, bulk update, stats and export for the project catalog.

Invariants:
    - Same surface and envelope as the experience routes
    - Fixed paths (/stats, /export, /bulk-update) registered before /{project_id}
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from portfolio.api.dependencies import get_project_manager
from portfolio.core.record_manager import RecordManager
from portfolio.schemas.records import BulkUpdateRequest, ProjectQuery
from portfolio.services import record_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])

Manager = Annotated[RecordManager, Depends(get_project_manager)]


@router.get("")
async def list_projects(manager: Manager, params: Annotated[ProjectQuery, Query()]):
    return record_service.list_records(
        manager,
        record_filter=params.to_filter(),
        search=params.search,
        sort=params.to_sort(),
        offset=params.offset,
        limit=params.limit,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(manager: Manager, body: Annotated[dict[str, Any], Body()]):
    return record_service.create_record(manager, body)


@router.get("/stats")
async def project_stats(manager: Manager):
    return record_service.record_stats(manager)


@router.get("/export")
async def export_projects(manager: Manager, fmt: str = Query("json", alias="format")):
    content, media_type = record_service.export_collection(manager, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="projects.{fmt}"'},
    )


@router.post("/bulk-update")
async def bulk_update_projects(manager: Manager, body: BulkUpdateRequest):
    return record_service.bulk_update(manager, [entry.model_dump() for entry in body.updates])


@router.get("/{project_id}")
async def get_project(manager: Manager, project_id: str):
    return record_service.get_record(manager, project_id)


@router.patch("/{project_id}")
async def update_project(manager: Manager, project_id: str, body: Annotated[dict[str, Any], Body()]):
    return record_service.update_record(manager, project_id, body)


@router.delete("/{project_id}")
async def delete_project(manager: Manager, project_id: str):
    return record_service.delete_record(manager, project_id)
