"""
Aggregation & view service.

Builds planned-vs-achieved totals per project and across projects under an
immutable ViewConfig (tax mode + optional date range).

Date-range filtering:
    A week is included when [week_start, week_end] overlaps
    [filter_start, filter_end]. Absent bounds are unbounded.

Planned figures:
    - No date filter: the quarterly plan (budget, leads, final visits), each
      falling back to the weekly target sum when the plan value is 0.
      Mid-funnel targets are always weekly sums.
    - Date filter set: sums of the included weeks' targets.
Achieved figures are always sums of the included weeks' achieved metrics.

Tax view:
    Sums are kept tax-exclusive (raw) until presentation; the view's tax
    factor is then applied exactly once to every monetary figure. Cross-project
    totals add raw sums first and recompute ratios from the summed numerators
    and denominators, never by averaging per-project ratios.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from funnel_planner.models.schemas import (
    DashboardView,
    Project,
    ProjectSummaryRow,
    ProjectTotals,
    ViewConfig,
    WeeklyPerformancePoint,
)
from funnel_planner.services.numeric import (
    ratio_percent,
    safe_divide,
    tax_factor,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

ALL_POCS: str = 'All'

FAR_PAST: date = date.min
FAR_FUTURE: date = date.max


# =============================================================================
# Date-Range Filtering
# =============================================================================


def week_overlaps(
    week_start: date,
    week_end: date,
    filter_start: Optional[date] = None,
    filter_end: Optional[date] = None,
) -> bool:
    """True when the week interval overlaps the (possibly open) filter interval."""
    lower = filter_start or FAR_PAST
    upper = filter_end or FAR_FUTURE
    return week_start <= upper and week_end >= lower


def filter_weeks(points: List[WeeklyPerformancePoint], view: ViewConfig) -> List[WeeklyPerformancePoint]:
    """Tracked weeks overlapping the view's date range."""
    if not view.is_filtered:
        return list(points)
    return [
        point for point in points
        if week_overlaps(point.week.start_date, point.week.end_date, view.filter_start, view.filter_end)
    ]


# =============================================================================
# Raw (tax-exclusive) Sums
# =============================================================================


@dataclass
class RawTotals:
    """Tax-exclusive planned and achieved sums, before presentation."""
    planned_budget: float = 0.0
    spend: float = 0.0
    leads_target: float = 0.0
    leads_achieved: float = 0.0
    mid_funnel_target: float = 0.0
    mid_funnel_achieved: float = 0.0
    final_visits_target: float = 0.0
    final_visits_achieved: float = 0.0

    def add(self, other: "RawTotals") -> "RawTotals":
        return RawTotals(
            planned_budget=self.planned_budget + other.planned_budget,
            spend=self.spend + other.spend,
            leads_target=self.leads_target + other.leads_target,
            leads_achieved=self.leads_achieved + other.leads_achieved,
            mid_funnel_target=self.mid_funnel_target + other.mid_funnel_target,
            mid_funnel_achieved=self.mid_funnel_achieved + other.mid_funnel_achieved,
            final_visits_target=self.final_visits_target + other.final_visits_target,
            final_visits_achieved=self.final_visits_achieved + other.final_visits_achieved,
        )


def raw_project_totals(project: Project, view: ViewConfig) -> RawTotals:
    """Planned and achieved sums of one project under the view's date range."""
    weeks = filter_weeks(project.performance, view)

    target_leads = sum(w.target.leads for w in weeks)
    target_mid = sum(w.target.mid_funnel_visits for w in weeks)
    target_final = sum(w.target.final_visits for w in weeks)
    target_spend = sum(w.target.spend for w in weeks)

    if view.is_filtered:
        planned_budget = target_spend
        leads_target = target_leads
        final_target = target_final
    else:
        derived = project.plan.derived
        planned_budget = derived.total_budget or target_spend
        leads_target = derived.required_leads_target or target_leads
        final_target = derived.required_visits_target or target_final

    return RawTotals(
        planned_budget=planned_budget,
        spend=sum(w.achieved.spend for w in weeks),
        leads_target=leads_target,
        leads_achieved=sum(w.achieved.leads for w in weeks),
        mid_funnel_target=target_mid,
        mid_funnel_achieved=sum(w.achieved.mid_funnel_visits for w in weeks),
        final_visits_target=final_target,
        final_visits_achieved=sum(w.achieved.final_visits for w in weeks),
    )


# =============================================================================
# Presentation
# =============================================================================


def present_totals(
    raw: RawTotals,
    view: ViewConfig,
    tax_multiplier: Optional[float] = None,
) -> ProjectTotals:
    """
    Compute ratios from raw sums and apply the view's tax factor once.

    Cost ratios scale linearly with spend, so multiplying the raw ratio is the
    same as dividing tax-inclusive spend.
    """
    factor = tax_factor(view.tax_mode, tax_multiplier)
    return ProjectTotals(
        planned_budget=raw.planned_budget * factor,
        spend=raw.spend * factor,
        leads_target=raw.leads_target,
        leads_achieved=raw.leads_achieved,
        mid_funnel_target=raw.mid_funnel_target,
        mid_funnel_achieved=raw.mid_funnel_achieved,
        final_visits_target=raw.final_visits_target,
        final_visits_achieved=raw.final_visits_achieved,
        cost_per_lead=safe_divide(raw.spend, raw.leads_achieved) * factor,
        cost_per_mid_funnel_visit=safe_divide(raw.spend, raw.mid_funnel_achieved) * factor,
        cost_per_final_visit=safe_divide(raw.spend, raw.final_visits_achieved) * factor,
        leads_achievement_percent=ratio_percent(raw.leads_achieved, raw.leads_target),
        mid_funnel_achievement_percent=ratio_percent(raw.mid_funnel_achieved, raw.mid_funnel_target),
        final_visits_achievement_percent=ratio_percent(raw.final_visits_achieved, raw.final_visits_target),
        budget_utilization_percent=ratio_percent(raw.spend, raw.planned_budget),
    )


def project_totals(
    project: Project,
    view: Optional[ViewConfig] = None,
    tax_multiplier: Optional[float] = None,
) -> ProjectTotals:
    """Planned vs achieved totals of one project under a view."""
    view = view or ViewConfig()
    return present_totals(raw_project_totals(project, view), view, tax_multiplier)


# =============================================================================
# Cross-Project Dashboard
# =============================================================================


def list_pocs(projects: Iterable[Project]) -> List[str]:
    """'All' followed by the distinct points of contact, in first-seen order."""
    pocs = [ALL_POCS]
    for project in projects:
        if project.poc not in pocs:
            pocs.append(project.poc)
    return pocs


def filter_projects(projects: Iterable[Project], poc: Optional[str] = None) -> List[Project]:
    if not poc or poc == ALL_POCS:
        return list(projects)
    return [project for project in projects if project.poc == poc]


def build_dashboard(
    projects: List[Project],
    view: Optional[ViewConfig] = None,
    poc: Optional[str] = None,
    tax_multiplier: Optional[float] = None,
) -> DashboardView:
    """
    Per-project summary rows and cross-project totals.

    Args:
        projects: All projects.
        view: Tax mode and date range; defaults to exclusive, unfiltered.
        poc: Point-of-contact filter; None or 'All' keeps every project.
        tax_multiplier: Multiplier of the inclusive tax mode
            (default: Settings.tax_multiplier).
    """
    view = view or ViewConfig()
    selected = filter_projects(projects, poc)

    rows: List[ProjectSummaryRow] = []
    overall = RawTotals()
    for project in selected:
        raw = raw_project_totals(project, view)
        overall = overall.add(raw)
        rows.append(ProjectSummaryRow(
            project_id=project.id,
            name=project.name,
            poc=project.poc,
            status=project.status,
            totals=present_totals(raw, view, tax_multiplier),
        ))

    logger.debug(f"Dashboard: {len(selected)} of {len(projects)} project(s), view={view!r}")
    return DashboardView(
        view=view,
        poc=poc,
        pocs=list_pocs(projects),
        projects=rows,
        totals=present_totals(overall, view, tax_multiplier),
    )
