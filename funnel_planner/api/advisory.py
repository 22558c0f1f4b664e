"""
Advisory API router.

- GET  /projects/{project_id}/advisory/snapshot   Snapshot sent to the external advisory call
- POST /advisory/validate                         Validate an advisory result for display

The advisory call itself is made by the client; this service never stores its
result.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException

from funnel_planner.api.common import load_project
from funnel_planner.core.dependencies import SettingsDep, StoreDep
from funnel_planner.models.schemas import StrategicPlan
from funnel_planner.services.advisory import (
    build_advisory_snapshot,
    parse_advisory_result,
    snapshot_payload,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/projects/{project_id}/advisory/snapshot")
async def get_advisory_snapshot(
    project_id: int,
    store: StoreDep,
    settings: SettingsDep,
) -> Dict[str, Any]:
    project = load_project(store, project_id)
    snapshot = build_advisory_snapshot(project, recent_weeks=settings.advisory_recent_weeks)
    return snapshot_payload(snapshot)


@router.post("/advisory/validate", response_model=StrategicPlan)
async def validate_advisory_result(payload: Any = Body(...)) -> StrategicPlan:
    """
    Raises:
        HTTPException 422: The payload is not a well-formed strategic plan.
    """
    plan = parse_advisory_result(payload)
    if plan is None:
        raise HTTPException(status_code=422, detail="Malformed advisory result")
    return plan
