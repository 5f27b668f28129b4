"""Project Links — resolves an experience's project ids through the project catalog.

Invariants:
    - Experiences store ids only; resolution is a lookup, never an embedded object
    - Order follows the experience's id list; unknown ids are reported, not dropped silently
"""

from portfolio.core.errors import RecordNotFoundError
from portfolio.core.record_manager import RecordManager


def linked_projects(experiences: RecordManager, projects: RecordManager, experience_id: str) -> dict:
    experience = experiences.get_by_id(experience_id)
    if experience is None:
        raise RecordNotFoundError(experiences.kind.label, experience_id)
    resolved, missing = [], []
    for project_id in experience.projects:
        project = projects.get_by_id(project_id)
        if project is None:
            missing.append(project_id)
        else:
            resolved.append(project.to_dict())
    return {"experience_id": experience_id, "projects": resolved, "missing": missing}
