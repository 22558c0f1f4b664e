"""
Weekly distribution service.

Spreads the quarterly targets over a sequence of Monday-Sunday weeks using
editable per-week distribution weights and visit conversion rates, then
commits the result to the performance tracker.

Per-week targets (in week order, with running cumulative totals):
    leads              = round(required_leads x distribution% / 100 x active)
    final_visits       = round(leads x visit_conversion% / 100)
    mid_funnel_visits  = final_visits x 2
    spend              = round(total_budget x distribution% / 100 x active)
    tax_inclusive      = round(spend x 1.18)

An inactive week contributes zero to its own row and carries the running
cumulative totals through unchanged.

Commit keeps only the active weeks. Achieved values already entered are
carried over either by position (the default) or by week start date; see
CarryoverPolicy.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Union

from funnel_planner.core.config import get_settings
from funnel_planner.models.enums import CarryoverPolicy
from funnel_planner.models.schemas import (
    PerformanceMetrics,
    QuarterlyPlan,
    QuarterlyPlanDerived,
    WeeklyDistributionRow,
    WeeklyPerformancePoint,
    WeeklyTargetRow,
    WeekWindow,
)
from funnel_planner.services.numeric import round_count


logger = logging.getLogger(__name__)


# =============================================================================
# Week Generation
# =============================================================================


def monday_of(day: date) -> date:
    """Monday of the week containing `day` (a Sunday maps to the prior Monday)."""
    return day - timedelta(days=day.weekday())


def generate_weeks(start_date: date, number_of_weeks: Optional[int] = None) -> List[WeekWindow]:
    """
    Generate consecutive Monday-Sunday week windows.

    The start date is normalized to the Monday of its week. The week count
    defaults to Settings.default_week_count.

    Example:
        >>> weeks = generate_weeks(date(2025, 10, 8), 2)
        >>> [(w.start_date.isoformat(), w.end_date.isoformat()) for w in weeks]
        [('2025-10-06', '2025-10-12'), ('2025-10-13', '2025-10-19')]
    """
    if number_of_weeks is None:
        number_of_weeks = get_settings().default_week_count

    monday = monday_of(start_date)
    return [
        WeekWindow(
            index=i,
            start_date=monday + timedelta(weeks=i),
            end_date=monday + timedelta(weeks=i, days=6),
        )
        for i in range(max(number_of_weeks, 0))
    ]


def default_distribution_rows(
    weeks: List[WeekWindow],
    plan: QuarterlyPlan,
    active_weeks: Optional[int] = None,
    fallback_visit_conversion: Optional[float] = None,
) -> List[WeeklyDistributionRow]:
    """
    Even split over the leading `active_weeks` weeks; later weeks inactive.

    The visit conversion of every week defaults to the plan's lead-to-visit
    rate, or `fallback_visit_conversion` when the plan has none. Unset
    arguments come from Settings.
    """
    settings = get_settings()
    if active_weeks is None:
        active_weeks = settings.default_active_weeks
    if fallback_visit_conversion is None:
        fallback_visit_conversion = settings.default_visit_conversion_percent

    active_count = min(active_weeks, len(weeks))
    share = 100.0 / active_count if active_count > 0 else 0.0
    conversion = plan.inputs.lead_to_visit_rate_percent or fallback_visit_conversion

    return [
        WeeklyDistributionRow(
            distribution_percent=share if i < active_count else 0.0,
            visit_conversion_percent=conversion,
            active_flag=1 if i < active_count else 0,
        )
        for i in range(len(weeks))
    ]


def distribution_total_percent(rows: Sequence[Union[WeeklyDistributionRow, WeeklyTargetRow]]) -> float:
    """Sum of distribution over active rows. Expected ~100 but never enforced."""
    return sum(row.distribution_percent for row in rows if row.active_flag)


# =============================================================================
# Target Computation
# =============================================================================


def compute_weekly_targets(
    weeks: List[WeekWindow],
    rows: List[WeeklyDistributionRow],
    derived: QuarterlyPlanDerived,
    tax_multiplier: Optional[float] = None,
    mid_funnel_multiplier: Optional[int] = None,
) -> List[WeeklyTargetRow]:
    """
    Compute per-week and cumulative targets in week order.

    Rows pair with weeks by position; a week without a row is treated as
    inactive with zero distribution.

    Args:
        weeks: Ordered week windows.
        rows: Distribution rows, one per week.
        derived: The quarterly derived bundle (leads and budget totals).
        tax_multiplier: Multiplier of the tax-inclusive spend column
            (default: Settings.tax_multiplier).
        mid_funnel_multiplier: Mid-funnel visits per final visit
            (default: Settings.mid_funnel_multiplier).

    Returns:
        One WeeklyTargetRow per week.
    """
    settings = get_settings()
    if tax_multiplier is None:
        tax_multiplier = settings.tax_multiplier
    if mid_funnel_multiplier is None:
        mid_funnel_multiplier = settings.mid_funnel_multiplier

    if len(rows) != len(weeks):
        logger.warning(f"{len(rows)} distribution rows for {len(weeks)} weeks; pairing by position")

    cum_leads = 0
    cum_final = 0
    cum_mid = 0
    cum_spend = 0
    cum_tax_inclusive = 0

    result: List[WeeklyTargetRow] = []
    for i, week in enumerate(weeks):
        row = rows[i] if i < len(rows) else WeeklyDistributionRow(active_flag=0)
        share = row.distribution_percent / 100.0 * row.active_flag

        leads = round_count(derived.required_leads_target * share)
        final_visits = round_count(leads * row.visit_conversion_percent / 100.0)
        mid_funnel_visits = final_visits * mid_funnel_multiplier
        spend = round_count(derived.total_budget * share)
        tax_inclusive = round_count(spend * tax_multiplier)

        cum_leads += leads
        cum_final += final_visits
        cum_mid += mid_funnel_visits
        cum_spend += spend
        cum_tax_inclusive += tax_inclusive

        result.append(WeeklyTargetRow(
            week=week,
            distribution_percent=row.distribution_percent,
            visit_conversion_percent=row.visit_conversion_percent,
            active_flag=row.active_flag,
            leads=leads,
            final_visits=final_visits,
            mid_funnel_visits=mid_funnel_visits,
            spend=spend,
            tax_inclusive_spend=tax_inclusive,
            cumulative_leads=cum_leads,
            cumulative_final_visits=cum_final,
            cumulative_mid_funnel_visits=cum_mid,
            cumulative_spend=cum_spend,
            cumulative_tax_inclusive_spend=cum_tax_inclusive,
        ))

    return result


# =============================================================================
# Commit to Tracker
# =============================================================================


def _carried_achieved(
    existing: List[WeeklyPerformancePoint],
    position: int,
    week: WeekWindow,
    policy: CarryoverPolicy,
    by_week_id: Dict[str, PerformanceMetrics],
) -> PerformanceMetrics:
    if policy == CarryoverPolicy.WEEK_START:
        found = by_week_id.get(week.week_id)
        return found.model_copy() if found is not None else PerformanceMetrics()

    if position < len(existing):
        return existing[position].achieved.model_copy()
    return PerformanceMetrics()


def commit_weekly_plan(
    target_rows: List[WeeklyTargetRow],
    existing: Optional[List[WeeklyPerformancePoint]] = None,
    policy: CarryoverPolicy = CarryoverPolicy.INDEX,
) -> List[WeeklyPerformancePoint]:
    """
    Convert generated target rows into tracked weeks.

    Only active weeks are committed; they are re-indexed and labelled W1..Wn.
    Targets are replaced wholesale. Achieved values are carried over from
    `existing` according to `policy`:

    - INDEX: the n-th committed week takes the n-th existing week's achieved
      values. A plan regenerated with another start date therefore re-labels
      history onto different dates.
    - WEEK_START: achieved values follow the week's start date; weeks that
      were not tracked before start at zero.
    """
    existing = existing or []
    by_week_id = {point.week.week_id: point.achieved for point in existing}

    committed: List[WeeklyPerformancePoint] = []
    for row in target_rows:
        if not row.active_flag:
            continue
        position = len(committed)
        week = WeekWindow(
            index=position,
            start_date=row.week.start_date,
            end_date=row.week.end_date,
        )
        committed.append(WeeklyPerformancePoint(
            week=week,
            label=f"W{position + 1}",
            target=PerformanceMetrics(
                leads=row.leads,
                mid_funnel_visits=row.mid_funnel_visits,
                final_visits=row.final_visits,
                spend=row.spend,
            ),
            achieved=_carried_achieved(existing, position, week, policy, by_week_id),
        ))

    dropped = len(existing) - len(committed)
    if policy == CarryoverPolicy.INDEX and dropped > 0:
        logger.warning(f"Weekly plan commit dropped achieved values of {dropped} trailing week(s)")

    logger.info(f"Committed {len(committed)} weekly targets (carryover={policy.value})")
    return committed
