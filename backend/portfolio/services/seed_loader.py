"""Seed Loader — builds the two catalog managers from JSON seed files at startup.

Invariants:
    - Seeds go through RecordManager.set_all: same validation as any write
    - An invalid seed fails startup (SeedDataError), it is never partially loaded
    - No configured path means the JSON bundled in portfolio/data

Design Decisions:
    - Called from the lifespan; managers live on app.state, not in module globals
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from portfolio.config import Settings
from portfolio.core.errors import ErrorCategory, ErrorSeverity, PortfolioError
from portfolio.core.record_kinds import EXPERIENCE_KIND, PROJECT_KIND, RecordKind
from portfolio.core.record_manager import RecordManager
from portfolio.infrastructure.observability import log_context

logger = logging.getLogger(__name__)

BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class SeedDataError(PortfolioError):
    """Seed file missing, unreadable, or rejected by validation."""
    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(
            message, "SEED_DATA_INVALID", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.errors = errors or []


@dataclass
class Catalogs:
    experiences: RecordManager
    projects: RecordManager


def read_seed(path: Path) -> list:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SeedDataError(f"Cannot read seed file {path}: {e}") from e
    if not isinstance(payload, list):
        raise SeedDataError(f"Seed file {path} must contain a JSON array")
    return payload


def load_catalog(
    kind: RecordKind,
    path: Path,
    settings: Settings,
    clock: Callable[[], datetime] | None = None,
) -> RecordManager:
    manager = RecordManager(kind, weights=settings.impact_weights(), clock=clock)
    result = manager.set_all(read_seed(path))
    if not result.is_valid:
        logger.error(
            f"Seed {path} rejected with {len(result.errors)} errors",
            extra=log_context(kind.name.value, "seed", count=len(result.errors)),
        )
        raise SeedDataError(f"Seed file {path} failed validation", result.error_dicts())
    return manager


def load_catalogs(settings: Settings, clock: Callable[[], datetime] | None = None) -> Catalogs:
    experiences_path = Path(settings.experiences_seed_path or BUNDLED_DATA_DIR / "experiences.json")
    projects_path = Path(settings.projects_seed_path or BUNDLED_DATA_DIR / "projects.json")
    return Catalogs(
        experiences=load_catalog(EXPERIENCE_KIND, experiences_path, settings, clock),
        projects=load_catalog(PROJECT_KIND, projects_path, settings, clock),
    )
