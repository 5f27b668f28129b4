"""Route Dependencies — hand the lifespan-built managers to handlers.

Invariants:
    - Managers are read from app.state (set in main.lifespan or by test fixtures)
    - No module-level manager instances
"""

from fastapi import Request

from portfolio.config import Settings, get_settings
from portfolio.core.record_manager import RecordManager


def get_experience_manager(request: Request) -> RecordManager:
    return request.app.state.experience_manager


def get_project_manager(request: Request) -> RecordManager:
    return request.app.state.project_manager


def get_app_settings() -> Settings:
    return get_settings()
