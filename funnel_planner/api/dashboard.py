"""
Dashboard API router.

- GET /dashboard                         Per-project rows and cross-project totals
- GET /dashboard/pocs                    'All' plus distinct points of contact
- GET /dashboard/projects/{project_id}   Totals of a single project

The view configuration comes from query parameters:
    taxMode=exclusive|inclusive, startDate, endDate (ISO dates, either optional)
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from funnel_planner.api.common import load_project
from funnel_planner.core.dependencies import SettingsDep, StoreDep
from funnel_planner.models.enums import TaxMode
from funnel_planner.models.schemas import DashboardView, ProjectTotals, ViewConfig
from funnel_planner.services.aggregation import build_dashboard, list_pocs, project_totals


logger = logging.getLogger(__name__)

router = APIRouter()


def _view_config(
    tax_mode: TaxMode,
    start_date: Optional[date],
    end_date: Optional[date],
) -> ViewConfig:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400,
            detail=f"startDate {start_date.isoformat()} is after endDate {end_date.isoformat()}",
        )
    return ViewConfig(tax_mode=tax_mode, filter_start=start_date, filter_end=end_date)


@router.get("", response_model=DashboardView)
async def get_dashboard(
    store: StoreDep,
    settings: SettingsDep,
    tax_mode: TaxMode = Query(default=TaxMode.EXCLUSIVE, alias="taxMode"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    poc: Optional[str] = Query(default=None),
) -> DashboardView:
    view = _view_config(tax_mode, start_date, end_date)
    return build_dashboard(store.list(), view=view, poc=poc, tax_multiplier=settings.tax_multiplier)


@router.get("/pocs", response_model=List[str])
async def get_pocs(store: StoreDep) -> List[str]:
    return list_pocs(store.list())


@router.get("/projects/{project_id}", response_model=ProjectTotals)
async def get_project_totals(
    project_id: int,
    store: StoreDep,
    settings: SettingsDep,
    tax_mode: TaxMode = Query(default=TaxMode.EXCLUSIVE, alias="taxMode"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
) -> ProjectTotals:
    view = _view_config(tax_mode, start_date, end_date)
    project = load_project(store, project_id)
    return project_totals(project, view, tax_multiplier=settings.tax_multiplier)
