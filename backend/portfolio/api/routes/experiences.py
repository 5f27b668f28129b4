"""Experience Routes — CRUD, query, bulk update, stats and export for the experience catalog.

Invariants:
    - Handlers are async def: each core call runs to completion on the event loop,
      so catalog mutations are serialized
    - Fixed paths (/stats, /export, /bulk-update) registered before /{experience_id}
    - No business logic here: everything delegates to services
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Response, status

from portfolio.api.dependencies import get_experience_manager, get_project_manager
from portfolio.core.record_manager import RecordManager
from portfolio.schemas.records import BulkUpdateRequest, ExperienceQuery
from portfolio.services import record_service
from portfolio.services.project_links import linked_projects

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/experiences", tags=["experiences"])

Manager = Annotated[RecordManager, Depends(get_experience_manager)]


@router.get("")
async def list_experiences(manager: Manager, params: Annotated[ExperienceQuery, Query()]):
    """Filter, search, sort and page the experience catalog."""
    return record_service.list_records(
        manager,
        record_filter=params.to_filter(),
        search=params.search,
        sort=params.to_sort(),
        offset=params.offset,
        limit=params.limit,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_experience(manager: Manager, body: Annotated[dict[str, Any], Body()]):
    return record_service.create_record(manager, body)


@router.get("/stats")
async def experience_stats(manager: Manager):
    return record_service.record_stats(manager)


@router.get("/export")
async def export_experiences(manager: Manager, fmt: str = Query("json", alias="format")):
    content, media_type = record_service.export_collection(manager, fmt)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="experiences.{fmt}"'},
    )


@router.post("/bulk-update")
async def bulk_update_experiences(manager: Manager, body: BulkUpdateRequest):
    return record_service.bulk_update(manager, [entry.model_dump() for entry in body.updates])


@router.get("/{experience_id}")
async def get_experience(manager: Manager, experience_id: str):
    return record_service.get_record(manager, experience_id)


@router.get("/{experience_id}/projects")
async def get_experience_projects(
    manager: Manager,
    projects: Annotated[RecordManager, Depends(get_project_manager)],
    experience_id: str,
):
    """Projects referenced by an experience, resolved through the project catalog."""
    return record_service.envelope(linked_projects(manager, projects, experience_id))


@router.patch("/{experience_id}")
async def update_experience(
    manager: Manager, experience_id: str, body: Annotated[dict[str, Any], Body()],
):
    return record_service.update_record(manager, experience_id, body)


@router.delete("/{experience_id}")
async def delete_experience(manager: Manager, experience_id: str):
    return record_service.delete_record(manager, experience_id)
