"""Service test fixtures — seeded catalog managers + FastAPI test client.

Invariants:
    - Every test gets fresh managers; nothing leaks between tests through app.state
    - Managers use the fixed clock so "Present" durations and sync dates are stable
    - Settings dependency overridden with an explicit Settings instance

Design Decisions:
    - ASGITransport does not run the lifespan, so the fixture places the managers
      on app.state itself (same attributes the lifespan sets)
    - Small hand-written catalogs instead of the bundled seeds: assertions stay
      readable and independent of the seed content
"""

import pytest
from httpx import ASGITransport, AsyncClient

from portfolio.api.dependencies import get_app_settings
from portfolio.config import Settings
from portfolio.main import app
from tests.factories import experience_manager, make_experience, make_project, project_manager


@pytest.fixture
def experiences():
    return experience_manager(
        make_experience(
            id="exp-1", title="Senior AI Project Manager", company="Ogilvy", featured=True,
            duration={"start": "Jan 2022", "end": "Present"},
            skills=["AI Project Management", "Agile"], projects=["proj-1", "proj-gone"],
        ),
        make_experience(
            id="exp-2", title="Digital Project Manager", company="Wunderman Thompson",
            duration={"start": "Mar 2019", "end": "Dec 2021"},
            skills=["Agile", "Stakeholder Management"], projects=["proj-2"],
        ),
    )


@pytest.fixture
def projects():
    return project_manager(
        make_project(
            id="proj-1", title="ChromaVerse", client="Maybelline", featured=True,
            technologies=["TensorFlow.js", "WebGL"],
            metrics=[{"label": "Engagement", "value": "45%", "improvement": "+45%"}],
        ),
        make_project(
            id="proj-2", title="Video Automation", client="Unilever", category="production",
            technologies=["Python", "FFmpeg"],
        ),
    )


@pytest.fixture
def settings():
    return Settings(cv_pdf_url="/cv/test-cv.pdf", snapshot_max_records=None)


@pytest.fixture
async def client(experiences, projects, settings):
    """FastAPI test client over the fixture catalogs."""
    app.state.experience_manager = experiences
    app.state.project_manager = projects
    app.dependency_overrides[get_app_settings] = lambda: settings

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.experience_manager
    del app.state.project_manager
