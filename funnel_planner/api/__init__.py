"""
Funnel Planner API package.

Router modules:
- projects: project create / list / get / update / delete, observed platforms
- planning: quarterly plan edits, weekly plan preview and commit
- tracker: enriched performance tracker, achieved edits and bulk import
- simulator: platform forecast rows, totals and commit
- dashboard: per-project and cross-project totals under a view configuration
- advisory: advisory snapshot export and result validation
"""

from fastapi import APIRouter

from funnel_planner.api.projects import router as projects_router
from funnel_planner.api.planning import router as planning_router
from funnel_planner.api.tracker import router as tracker_router
from funnel_planner.api.simulator import router as simulator_router
from funnel_planner.api.dashboard import router as dashboard_router
from funnel_planner.api.advisory import router as advisory_router

api_router = APIRouter()

api_router.include_router(projects_router, prefix="/projects", tags=["projects"])
api_router.include_router(planning_router, prefix="/projects", tags=["planning"])
api_router.include_router(tracker_router, prefix="/projects", tags=["tracker"])
api_router.include_router(simulator_router, tags=["simulator"])  # simulator router has its own paths
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(advisory_router, tags=["advisory"])  # advisory router has its own paths

__all__ = [
    "api_router",
    "projects_router",
    "planning_router",
    "tracker_router",
    "simulator_router",
    "dashboard_router",
    "advisory_router",
]
