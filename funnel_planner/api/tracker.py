"""
Performance tracker API router.

- GET   /projects/{project_id}/tracker                       Enriched weeks + totals
- PATCH /projects/{project_id}/tracker/weeks/{week_index}    Edit one achieved metric
- PUT   /projects/{project_id}/tracker/achieved              Replace achieved metrics of all weeks

Every response is the freshly enriched tracker, recomputed from the stored
weeks after the edit.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from funnel_planner.api.common import http_error, load_project
from funnel_planner.core.dependencies import SettingsDep, StoreDep
from funnel_planner.models.exceptions import UnknownFieldError
from funnel_planner.models.schemas import AchievedImportRecord, FieldEdit, TrackerView
from funnel_planner.services import projects as project_service


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{project_id}/tracker", response_model=TrackerView)
async def get_tracker(project_id: int, store: StoreDep, settings: SettingsDep) -> TrackerView:
    return project_service.tracker_view(load_project(store, project_id), settings)


@router.patch("/{project_id}/tracker/weeks/{week_index}", response_model=TrackerView)
async def edit_achieved(
    project_id: int,
    week_index: int,
    edit: FieldEdit,
    store: StoreDep,
    settings: SettingsDep,
) -> TrackerView:
    """
    Replace one achieved metric of one tracked week.

    Raises:
        HTTPException 404: Unknown project or week index.
        HTTPException 422: `field` is not a performance metric.
    """
    project = load_project(store, project_id)
    if week_index < 0 or week_index >= len(project.performance):
        raise HTTPException(
            status_code=404,
            detail=f"Week {week_index} not found; project {project_id} tracks {len(project.performance)} weeks",
        )

    try:
        updated = project_service.edit_achieved(project, week_index, edit.field, edit.value)
    except UnknownFieldError as e:
        raise http_error(e)

    store.put(updated)
    return project_service.tracker_view(updated, settings)


@router.put("/{project_id}/tracker/achieved", response_model=TrackerView)
async def replace_achieved(
    project_id: int,
    records: List[AchievedImportRecord],
    store: StoreDep,
    settings: SettingsDep,
) -> TrackerView:
    """Bulk import: weeks without a record are reset to zero."""
    project = load_project(store, project_id)
    updated = project_service.import_achieved(project, records)
    store.put(updated)
    return project_service.tracker_view(updated, settings)
