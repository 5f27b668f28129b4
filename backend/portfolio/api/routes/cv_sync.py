"""CV Sync Route — builds the CV snapshot from the experience catalog.

Invariants:
    - Never 500s on validation problems: those ride in the result's errors[]
    - A successful sync stamps last_sync_date on the experience manager
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from portfolio.api.dependencies import get_app_settings, get_experience_manager
from portfolio.config import Settings
from portfolio.core.record_manager import RecordManager
from portfolio.core.sync_snapshot import SnapshotOptions
from portfolio.schemas.records import CVSyncRequest
from portfolio.services import record_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cv", tags=["cv"])


@router.post("/sync")
async def sync_cv(
    body: CVSyncRequest,
    manager: Annotated[RecordManager, Depends(get_experience_manager)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Generate the CV snapshot. Defaults: featured only, configured target and cap."""
    options = SnapshotOptions(
        include_all=body.include_all,
        max_records=body.max_records or settings.snapshot_max_records,
        education=body.education,
        certifications=body.certifications,
    )
    status_code, content = record_service.sync_cv(
        manager, body.target_ref or settings.cv_pdf_url, options,
    )
    return JSONResponse(status_code=status_code, content=content)


@router.get("/status")
async def sync_status(manager: Annotated[RecordManager, Depends(get_experience_manager)]):
    return record_service.envelope({"last_sync_date": manager.last_sync_date})
