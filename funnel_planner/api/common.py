"""
Shared helpers of the API routers.

Domain exceptions are translated to HTTP errors here so every router reports
missing projects, rows and unknown fields the same way.
"""

import logging

from fastapi import HTTPException

from funnel_planner.core.store import ProjectStore
from funnel_planner.models.exceptions import (
    FunnelPlannerError,
    PlatformRowNotFoundError,
    ProjectNotFoundError,
    UnknownFieldError,
)
from funnel_planner.models.schemas import Project


logger = logging.getLogger(__name__)


def http_error(exc: FunnelPlannerError) -> HTTPException:
    """
    Map a domain error to an HTTPException.

    - ProjectNotFoundError, PlatformRowNotFoundError -> 404
    - UnknownFieldError -> 422
    - anything else -> 400
    """
    if isinstance(exc, (ProjectNotFoundError, PlatformRowNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, UnknownFieldError):
        return HTTPException(status_code=422, detail=str(exc))
    logger.warning(f"Unmapped domain error: {exc}")
    return HTTPException(status_code=400, detail=str(exc))


def load_project(store: ProjectStore, project_id: int) -> Project:
    """
    Fetch a project or fail the request.

    Raises:
        HTTPException 404: If the project does not exist.
    """
    try:
        return store.get(project_id)
    except ProjectNotFoundError as e:
        raise http_error(e)
