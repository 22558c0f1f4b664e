"""
Platform forecast simulator API router.

- GET    /simulator/vendors                                   Default vendor names
- GET    /projects/{project_id}/forecast                      Rows + totals
- POST   /projects/{project_id}/forecast/rows                 Add a blank row
- PATCH  /projects/{project_id}/forecast/rows/{row_id}        Edit one field of one row
- DELETE /projects/{project_id}/forecast/rows/{row_id}        Remove a row
- POST   /projects/{project_id}/forecast/seed                 Rebuild rows from current platforms
- POST   /projects/{project_id}/forecast/commit               Append totals as a tracked week
"""

import logging
from typing import List, Optional

from fastapi import APIRouter

from funnel_planner.api.common import http_error, load_project
from funnel_planner.core.dependencies import SettingsDep, StoreDep
from funnel_planner.models.exceptions import PlatformRowNotFoundError, UnknownFieldError
from funnel_planner.models.schemas import (
    FieldEdit,
    ForecastCommitRequest,
    ForecastRowCreate,
    ForecastView,
    TrackerView,
)
from funnel_planner.services import projects as project_service
from funnel_planner.services.forecast_simulator import DEFAULT_VENDORS, forecast_view


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/simulator/vendors", response_model=List[str])
async def list_vendors() -> List[str]:
    return list(DEFAULT_VENDORS)


@router.get("/projects/{project_id}/forecast", response_model=ForecastView)
async def get_forecast(project_id: int, store: StoreDep) -> ForecastView:
    return forecast_view(load_project(store, project_id).forecast_rows)


@router.post("/projects/{project_id}/forecast/rows", response_model=ForecastView, status_code=201)
async def add_forecast_row(
    project_id: int,
    request: ForecastRowCreate,
    store: StoreDep,
    settings: SettingsDep,
) -> ForecastView:
    project = load_project(store, project_id)
    updated = store.put(project_service.add_forecast_row(project, request.name, settings))
    return forecast_view(updated.forecast_rows)


@router.patch("/projects/{project_id}/forecast/rows/{row_id}", response_model=ForecastView)
async def edit_forecast_row(
    project_id: int,
    row_id: str,
    edit: FieldEdit,
    store: StoreDep,
    settings: SettingsDep,
) -> ForecastView:
    """
    Edit one field of one row; the edited field wins the spend/CPL/leads triangle.

    Raises:
        HTTPException 404: Unknown project or row.
        HTTPException 422: `field` is not an editable forecast field.
    """
    project = load_project(store, project_id)
    try:
        updated = project_service.edit_forecast_row(project, row_id, edit.field, edit.value, settings)
    except (PlatformRowNotFoundError, UnknownFieldError) as e:
        raise http_error(e)
    return forecast_view(store.put(updated).forecast_rows)


@router.delete("/projects/{project_id}/forecast/rows/{row_id}", response_model=ForecastView)
async def remove_forecast_row(project_id: int, row_id: str, store: StoreDep) -> ForecastView:
    project = load_project(store, project_id)
    try:
        updated = project_service.remove_forecast_row(project, row_id)
    except PlatformRowNotFoundError as e:
        raise http_error(e)
    return forecast_view(store.put(updated).forecast_rows)


@router.post("/projects/{project_id}/forecast/seed", response_model=ForecastView)
async def seed_forecast(project_id: int, store: StoreDep) -> ForecastView:
    project = load_project(store, project_id)
    updated = store.put(project_service.seed_forecast_from_platforms(project))
    logger.info(f"Project {project_id}: seeded {len(updated.forecast_rows)} forecast row(s)")
    return forecast_view(updated.forecast_rows)


@router.post("/projects/{project_id}/forecast/commit", response_model=TrackerView)
async def commit_forecast(
    project_id: int,
    store: StoreDep,
    settings: SettingsDep,
    request: Optional[ForecastCommitRequest] = None,
) -> TrackerView:
    project = load_project(store, project_id)
    start_date = request.start_date if request else None
    updated = store.put(project_service.commit_forecast_rows(project, start_date))
    return project_service.tracker_view(updated, settings)
