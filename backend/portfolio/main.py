"""Portfolio API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map PortfolioError → structured JSON envelopes
    - CORS configured from settings (not hardcoded)
    - Catalog managers built on startup via lifespan and stored on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Managers on app.state instead of module globals: one instance per process,
      injectable in tests
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.api.error_handlers import register_error_handlers
from portfolio.api.routes import cv_sync, experiences, health, projects
from portfolio.config import get_settings
from portfolio.infrastructure.observability import setup_logging
from portfolio.services.seed_loader import load_catalogs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    catalogs = load_catalogs(settings)
    app.state.experience_manager = catalogs.experiences
    app.state.project_manager = catalogs.projects
    logger.info(
        f"Portfolio API started with {len(catalogs.experiences)} experiences "
        f"and {len(catalogs.projects)} projects",
    )
    yield
    logger.info("Portfolio API shutting down")


app = FastAPI(title="Portfolio API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(experiences.router)
app.include_router(projects.router)
app.include_router(cv_sync.router)

register_error_handlers(app)
