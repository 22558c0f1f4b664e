"""
Planning API router.

Quarterly plan and weekly distribution endpoints:
- GET   /projects/{project_id}/plan                    Current plan (inputs + derived)
- PATCH /projects/{project_id}/plan                    Edit one plan input
- POST  /projects/{project_id}/weekly-plan/preview     Week windows and targets, nothing stored
- POST  /projects/{project_id}/weekly-plan/commit      Regenerate the tracked weeks

Committing replaces the tracked weeks with the active weeks of the plan;
achieved values carry over according to the configured carry-over policy.
"""

import logging

from fastapi import APIRouter

from funnel_planner.api.common import http_error, load_project
from funnel_planner.core.dependencies import SettingsDep, StoreDep
from funnel_planner.models.exceptions import UnknownFieldError
from funnel_planner.models.schemas import (
    FieldEdit,
    QuarterlyPlan,
    TrackerView,
    WeeklyPlanPreview,
    WeeklyPlanRequest,
)
from funnel_planner.services import projects as project_service
from funnel_planner.services.weekly_distribution import distribution_total_percent


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{project_id}/plan", response_model=QuarterlyPlan)
async def get_plan(project_id: int, store: StoreDep) -> QuarterlyPlan:
    return load_project(store, project_id).plan


@router.patch("/{project_id}/plan", response_model=QuarterlyPlan)
async def edit_plan(project_id: int, edit: FieldEdit, store: StoreDep) -> QuarterlyPlan:
    """
    Set one plan input and re-derive the plan.

    Raises:
        HTTPException 404: Unknown project.
        HTTPException 422: `field` is not a plan input.
    """
    project = load_project(store, project_id)
    try:
        updated = project_service.edit_plan(project, edit.field, edit.value)
    except UnknownFieldError as e:
        raise http_error(e)
    return store.put(updated).plan


@router.post("/{project_id}/weekly-plan/preview", response_model=WeeklyPlanPreview)
async def preview_weekly_plan(
    project_id: int,
    request: WeeklyPlanRequest,
    store: StoreDep,
    settings: SettingsDep,
) -> WeeklyPlanPreview:
    project = load_project(store, project_id)
    rows = project_service.preview_weekly_plan(
        project,
        request.start_date,
        rows=request.rows,
        number_of_weeks=request.number_of_weeks,
        settings=settings,
    )
    return WeeklyPlanPreview(
        rows=rows,
        total_distribution_percent=distribution_total_percent(rows),
    )


@router.post("/{project_id}/weekly-plan/commit", response_model=TrackerView)
async def commit_weekly_plan(
    project_id: int,
    request: WeeklyPlanRequest,
    store: StoreDep,
    settings: SettingsDep,
) -> TrackerView:
    project = load_project(store, project_id)
    updated = project_service.commit_weekly(
        project,
        request.start_date,
        rows=request.rows,
        number_of_weeks=request.number_of_weeks,
        settings=settings,
    )
    store.put(updated)
    return project_service.tracker_view(updated, settings)
