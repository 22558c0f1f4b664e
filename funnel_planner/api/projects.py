"""
Projects API router.

Endpoints:
- POST   /projects                          Create a project with the starting plan
- GET    /projects                          List projects
- GET    /projects/{project_id}             Full project aggregate
- PATCH  /projects/{project_id}             Update name / point of contact / status
- DELETE /projects/{project_id}             Remove a project
- PUT    /projects/{project_id}/platforms   Replace the observed platform performance
"""

import logging
from typing import List

from fastapi import APIRouter, Response

from funnel_planner.api.common import http_error, load_project
from funnel_planner.core.dependencies import StoreDep
from funnel_planner.models.exceptions import ProjectNotFoundError
from funnel_planner.models.schemas import (
    PlatformPerformance,
    Project,
    ProjectCreate,
    ProjectUpdate,
)
from funnel_planner.services import projects as project_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=Project, status_code=201)
async def create_project(request: ProjectCreate, store: StoreDep) -> Project:
    project = project_service.new_project(
        store.next_id(),
        name=request.name,
        poc=request.poc,
        status=request.status,
    )
    store.put(project)
    logger.info(f"Created project {project.id} ({project.name}) for {project.poc}")
    return project


@router.get("", response_model=List[Project])
async def list_projects(store: StoreDep) -> List[Project]:
    return store.list()


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: int, store: StoreDep) -> Project:
    return load_project(store, project_id)


@router.patch("/{project_id}", response_model=Project)
async def update_project(project_id: int, request: ProjectUpdate, store: StoreDep) -> Project:
    project = load_project(store, project_id)
    updated = project_service.update_details(
        project,
        name=request.name,
        poc=request.poc,
        status=request.status,
    )
    return store.put(updated)


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: int, store: StoreDep) -> Response:
    try:
        store.delete(project_id)
    except ProjectNotFoundError as e:
        raise http_error(e)
    return Response(status_code=204)


@router.put("/{project_id}/platforms", response_model=Project)
async def replace_platforms(
    project_id: int,
    platforms: List[PlatformPerformance],
    store: StoreDep,
) -> Project:
    """Replace the observed per-platform performance used to seed the simulator."""
    project = load_project(store, project_id)
    return store.put(project_service.set_current_platforms(project, platforms))
