"""
Project aggregate service.

Applies every kind of edit to a Project and returns a new Project value; the
caller stores it back as a whole (replace-on-write). Settings-dependent
constants (tax multiplier, carry-over and leads-edit policies, defaults) are
read from the application Settings here and passed explicitly into the pure
calculation functions.
"""

import logging
from datetime import date
from typing import Any, List, Optional

from funnel_planner.core.config import Settings, get_settings
from funnel_planner.models.enums import ProjectStatus
from funnel_planner.models.schemas import (
    AchievedImportRecord,
    PlatformPerformance,
    Project,
    QuarterlyPlanInputs,
    TrackerView,
    WeeklyDistributionRow,
    WeeklyTargetRow,
)
from funnel_planner.services.forecast_simulator import (
    apply_edit,
    commit_forecast,
    new_platform_row,
    remove_platform_row,
    rows_from_platforms,
)
from funnel_planner.services.quarterly_plan import build_quarterly_plan, update_plan_input
from funnel_planner.services.reconciliation import (
    build_tracker_view,
    replace_achieved_bulk,
    update_achieved_field,
)
from funnel_planner.services.weekly_distribution import (
    commit_weekly_plan,
    compute_weekly_targets,
    default_distribution_rows,
    generate_weeks,
)


logger = logging.getLogger(__name__)


# Starting assumptions of a new project; business value and ticket size are
# zero, so every derived target starts at zero.
NEW_PROJECT_INPUTS = QuarterlyPlanInputs(
    overall_business_value=0.0,
    digital_contribution_percent=10.0,
    average_ticket_size=0.0,
    visit_to_booking_rate_percent=5.0,
    lead_to_visit_rate_percent=3.0,
    target_cost_per_lead=2000.0,
)


def _settings(settings: Optional[Settings]) -> Settings:
    return settings or get_settings()


# =============================================================================
# Lifecycle
# =============================================================================


def new_project(
    project_id: int,
    name: str,
    poc: str,
    status: ProjectStatus = ProjectStatus.NA,
) -> Project:
    """A project with the starting plan and an empty tracker."""
    return Project(
        id=project_id,
        name=name,
        poc=poc,
        status=status,
        plan=build_quarterly_plan(NEW_PROJECT_INPUTS.model_copy()),
    )


def update_details(
    project: Project,
    name: Optional[str] = None,
    poc: Optional[str] = None,
    status: Optional[ProjectStatus] = None,
) -> Project:
    changes = {
        key: value
        for key, value in (('name', name), ('poc', poc), ('status', status))
        if value is not None
    }
    return project.model_copy(update=changes)


def set_current_platforms(project: Project, platforms: List[PlatformPerformance]) -> Project:
    """Replace the observed per-platform performance the simulator seeds from."""
    return project.model_copy(update={'current_platforms': list(platforms)})


# =============================================================================
# Quarterly Plan
# =============================================================================


def edit_plan(project: Project, field: str, raw_value: Any) -> Project:
    return project.model_copy(update={'plan': update_plan_input(project.plan, field, raw_value)})


# =============================================================================
# Weekly Planning
# =============================================================================


def preview_weekly_plan(
    project: Project,
    start_date: date,
    rows: Optional[List[WeeklyDistributionRow]] = None,
    number_of_weeks: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> List[WeeklyTargetRow]:
    """
    Generate weeks from `start_date` and compute their targets.

    Without explicit rows the default even split is used. When rows are given
    and no week count is, one week is generated per row.
    """
    settings = _settings(settings)
    if number_of_weeks is None:
        number_of_weeks = len(rows) if rows else settings.default_week_count

    weeks = generate_weeks(start_date, number_of_weeks)
    if rows is None:
        rows = default_distribution_rows(
            weeks,
            project.plan,
            active_weeks=settings.default_active_weeks,
            fallback_visit_conversion=settings.default_visit_conversion_percent,
        )

    return compute_weekly_targets(
        weeks,
        rows,
        project.plan.derived,
        tax_multiplier=settings.tax_multiplier,
        mid_funnel_multiplier=settings.mid_funnel_multiplier,
    )


def commit_weekly(
    project: Project,
    start_date: date,
    rows: Optional[List[WeeklyDistributionRow]] = None,
    number_of_weeks: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> Project:
    """Regenerate the tracked weeks from a weekly plan."""
    settings = _settings(settings)
    target_rows = preview_weekly_plan(project, start_date, rows, number_of_weeks, settings)
    performance = commit_weekly_plan(target_rows, project.performance, settings.achieved_carryover)
    logger.info(f"Project {project.id}: weekly plan committed from {start_date.isoformat()}")
    return project.model_copy(update={'performance': performance})


# =============================================================================
# Performance Tracker
# =============================================================================


def tracker_view(project: Project, settings: Optional[Settings] = None) -> TrackerView:
    settings = _settings(settings)
    return build_tracker_view(
        project.performance,
        tax_multiplier=settings.tax_multiplier,
        rolling_window=settings.rolling_window_weeks,
    )


def edit_achieved(project: Project, week_index: int, field: str, raw_value: Any) -> Project:
    performance = update_achieved_field(project.performance, week_index, field, raw_value)
    return project.model_copy(update={'performance': performance})


def import_achieved(project: Project, records: List[AchievedImportRecord]) -> Project:
    performance = replace_achieved_bulk(project.performance, records)
    logger.info(f"Project {project.id}: imported {len(records)} achieved record(s)")
    return project.model_copy(update={'performance': performance})


# =============================================================================
# Forecast Simulator
# =============================================================================


def add_forecast_row(project: Project, name: str = '', settings: Optional[Settings] = None) -> Project:
    settings = _settings(settings)
    row = new_platform_row(
        name,
        stage_a_percent=settings.default_stage_a_percent,
        stage_b_percent=settings.default_stage_b_percent,
        stage_c_percent=settings.default_stage_c_percent,
    )
    return project.model_copy(update={'forecast_rows': project.forecast_rows + [row]})


def remove_forecast_row(project: Project, row_id: str) -> Project:
    return project.model_copy(update={'forecast_rows': remove_platform_row(project.forecast_rows, row_id)})


def edit_forecast_row(
    project: Project,
    row_id: str,
    field: str,
    raw_value: Any,
    settings: Optional[Settings] = None,
) -> Project:
    settings = _settings(settings)
    rows = apply_edit(project.forecast_rows, row_id, field, raw_value, settings.leads_edit_policy)
    return project.model_copy(update={'forecast_rows': rows})


def seed_forecast_from_platforms(project: Project) -> Project:
    return project.model_copy(update={'forecast_rows': rows_from_platforms(project.current_platforms)})


def commit_forecast_rows(project: Project, start_date: Optional[date] = None) -> Project:
    """Append the simulator totals as the next tracked week."""
    performance = commit_forecast(project.performance, project.forecast_rows, start_date)
    return project.model_copy(update={'performance': performance})
