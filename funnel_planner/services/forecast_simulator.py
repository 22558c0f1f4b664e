"""
Platform forecast simulator.

A per-platform what-if table. Each row holds spend, cost per lead (CPL) and
leads, which are mutually constrained (spend = leads x CPL), and a fixed
three-stage downstream funnel:

    stage_a = round(leads   x stage_a% / 100)   proposed appointments (CAPI)
    stage_b = round(stage_a x stage_b% / 100)   appointments done (AP)
    stage_c = round(stage_b x stage_c% / 100)   walk-ins (AD)

The spend / CPL / leads triangle has a cycle. Each edit is an explicit
command naming the edited field, and the last-edited field wins:

    EditSpend, EditCostPerLead -> leads := round(spend / CPL)   (0 if CPL is 0)
    EditLeads                  -> depends on LeadsEditPolicy:
        RECOMPUTE_SPEND          spend := round(leads x CPL)       (default)
        RECOMPUTE_COST_PER_LEAD  CPL   := spend / leads            (0 if leads is 0)
    EditRate(stage)            -> only the downstream stages change
    EditName                   -> label only

After any numeric edit the three stages are recomputed from the resolved
leads, in stage order. Only the edited row changes.

Committing the simulator appends one tracked week whose targets are the
row-set totals and whose achieved metrics are zero.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, List, Optional, Union

from funnel_planner.core.config import get_settings
from funnel_planner.models.enums import ForecastField, FunnelStage, LeadsEditPolicy
from funnel_planner.models.exceptions import PlatformRowNotFoundError, UnknownFieldError
from funnel_planner.models.schemas import (
    ForecastTotals,
    ForecastView,
    PerformanceMetrics,
    PlatformForecastRow,
    PlatformPerformance,
    WeeklyPerformancePoint,
    WeekWindow,
)
from funnel_planner.services.numeric import coerce_number, round_count, safe_divide
from funnel_planner.services.weekly_distribution import monday_of


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_VENDORS: List[str] = [
    "Google Search",
    "Google Demand Gen",
    "Google Display",
    "Google PMax",
    "Meta Main",
    "Meta PP",
    "99 Acres",
    "MagicBricks",
    "Housing.com",
    "Taboola",
    "Outbrain",
    "Times of India",
]

_STAGE_PERCENT_ATTR = {
    FunnelStage.STAGE_A: 'stage_a_percent',
    FunnelStage.STAGE_B: 'stage_b_percent',
    FunnelStage.STAGE_C: 'stage_c_percent',
}


# =============================================================================
# Edit Commands
# =============================================================================


@dataclass(frozen=True)
class EditSpend:
    value: float


@dataclass(frozen=True)
class EditCostPerLead:
    value: float


@dataclass(frozen=True)
class EditLeads:
    value: float


@dataclass(frozen=True)
class EditRate:
    stage: FunnelStage
    value: float


@dataclass(frozen=True)
class EditName:
    value: str


EditCommand = Union[EditSpend, EditCostPerLead, EditLeads, EditRate, EditName]


def command_for_field(field: Union[ForecastField, str], raw_value: Any) -> EditCommand:
    """
    Build the edit command for a named field and a raw input value.

    Numeric values are coerced (unparseable -> 0).

    Raises:
        UnknownFieldError: If `field` is not an editable forecast field.
    """
    try:
        field = ForecastField(field)
    except ValueError:
        raise UnknownFieldError(str(field), 'forecast') from None

    if field == ForecastField.NAME:
        return EditName('' if raw_value is None else str(raw_value))

    value = coerce_number(raw_value)
    if field == ForecastField.SPEND:
        return EditSpend(value)
    if field == ForecastField.COST_PER_LEAD:
        return EditCostPerLead(value)
    if field == ForecastField.LEADS:
        return EditLeads(value)
    if field == ForecastField.STAGE_A_PERCENT:
        return EditRate(FunnelStage.STAGE_A, value)
    if field == ForecastField.STAGE_B_PERCENT:
        return EditRate(FunnelStage.STAGE_B, value)
    return EditRate(FunnelStage.STAGE_C, value)


# =============================================================================
# Row Recalculation
# =============================================================================


def recompute_stages(row: PlatformForecastRow) -> PlatformForecastRow:
    """Recompute the downstream funnel from the row's leads, A then B then C."""
    stage_a = round_count(row.leads * row.stage_a_percent / 100.0)
    stage_b = round_count(stage_a * row.stage_b_percent / 100.0)
    stage_c = round_count(stage_b * row.stage_c_percent / 100.0)
    return row.model_copy(update={
        'stage_a': stage_a,
        'stage_b': stage_b,
        'stage_c': stage_c,
    })


def apply_command(
    row: PlatformForecastRow,
    command: EditCommand,
    policy: LeadsEditPolicy = LeadsEditPolicy.RECOMPUTE_SPEND,
) -> PlatformForecastRow:
    """
    Apply one edit command to a row and resolve the spend/CPL/leads triangle.

    Args:
        row: The row being edited.
        command: The tagged edit.
        policy: Resolution policy for EditLeads.

    Returns:
        The updated row with downstream stages recomputed.
    """
    if isinstance(command, EditName):
        return row.model_copy(update={'name': command.value})

    if isinstance(command, EditSpend):
        spend = command.value
        updated = row.model_copy(update={
            'spend': spend,
            'leads': float(round_count(safe_divide(spend, row.cost_per_lead))),
        })
    elif isinstance(command, EditCostPerLead):
        cpl = command.value
        updated = row.model_copy(update={
            'cost_per_lead': cpl,
            'leads': float(round_count(safe_divide(row.spend, cpl))),
        })
    elif isinstance(command, EditLeads):
        leads = command.value
        if policy == LeadsEditPolicy.RECOMPUTE_COST_PER_LEAD:
            updated = row.model_copy(update={
                'leads': leads,
                'cost_per_lead': safe_divide(row.spend, leads),
            })
        else:
            updated = row.model_copy(update={
                'leads': leads,
                'spend': float(round_count(leads * row.cost_per_lead)),
            })
    elif isinstance(command, EditRate):
        updated = row.model_copy(update={_STAGE_PERCENT_ATTR[command.stage]: command.value})
    else:
        raise TypeError(f"Unsupported edit command: {command!r}")

    return recompute_stages(updated)


def apply_edit(
    rows: List[PlatformForecastRow],
    row_id: str,
    field: Union[ForecastField, str],
    raw_value: Any,
    policy: LeadsEditPolicy = LeadsEditPolicy.RECOMPUTE_SPEND,
) -> List[PlatformForecastRow]:
    """
    Apply a single-field edit to the row with `row_id`.

    Raises:
        PlatformRowNotFoundError: If no row has `row_id`.
        UnknownFieldError: If `field` is not editable.
    """
    command = command_for_field(field, raw_value)

    for i, row in enumerate(rows):
        if row.id == row_id:
            updated = list(rows)
            updated[i] = apply_command(row, command, policy)
            logger.debug(f"Forecast row {row.name or row_id}: {command!r}")
            return updated

    raise PlatformRowNotFoundError(row_id)


# =============================================================================
# Row Set Management
# =============================================================================


def _row_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def new_platform_row(
    name: str = '',
    stage_a_percent: Optional[float] = None,
    stage_b_percent: Optional[float] = None,
    stage_c_percent: Optional[float] = None,
) -> PlatformForecastRow:
    """A blank simulator row; unset funnel rates come from Settings."""
    settings = get_settings()
    return PlatformForecastRow(
        id=_row_id('new'),
        name=name,
        stage_a_percent=settings.default_stage_a_percent if stage_a_percent is None else stage_a_percent,
        stage_b_percent=settings.default_stage_b_percent if stage_b_percent is None else stage_b_percent,
        stage_c_percent=settings.default_stage_c_percent if stage_c_percent is None else stage_c_percent,
    )


def rows_from_platforms(platforms: List[PlatformPerformance]) -> List[PlatformForecastRow]:
    """
    Seed simulator rows from a project's current platform performance.

    CPL is the observed spend per lead; AP and AD carry the observed counts
    until the first edit recomputes them from the default rates. Every row
    gets its own id, so platforms sharing a name stay separately editable.
    """
    settings = get_settings()
    return [
        PlatformForecastRow(
            id=_row_id('seed'),
            name=platform.name,
            spend=platform.spend,
            leads=platform.leads,
            cost_per_lead=safe_divide(platform.spend, platform.leads),
            stage_a_percent=settings.default_stage_a_percent,
            stage_b_percent=settings.default_stage_b_percent,
            stage_c_percent=settings.baseline_stage_c_percent,
            stage_b=round_count(platform.mid_funnel_visits),
            stage_c=round_count(platform.final_visits),
        )
        for platform in platforms
    ]


def remove_platform_row(rows: List[PlatformForecastRow], row_id: str) -> List[PlatformForecastRow]:
    """
    Drop the row with `row_id`.

    Raises:
        PlatformRowNotFoundError: If no row has `row_id`.
    """
    remaining = [row for row in rows if row.id != row_id]
    if len(remaining) == len(rows):
        raise PlatformRowNotFoundError(row_id)
    return remaining


# =============================================================================
# Totals & Commit
# =============================================================================


def forecast_totals(rows: List[PlatformForecastRow]) -> ForecastTotals:
    """Per-field sums across rows plus the blended cost per lead."""
    spend = sum(row.spend for row in rows)
    leads = sum(row.leads for row in rows)
    return ForecastTotals(
        spend=spend,
        leads=leads,
        stage_a=sum(row.stage_a for row in rows),
        stage_b=sum(row.stage_b for row in rows),
        stage_c=sum(row.stage_c for row in rows),
        cost_per_lead=safe_divide(spend, leads),
    )


def forecast_view(rows: List[PlatformForecastRow]) -> ForecastView:
    return ForecastView(rows=list(rows), totals=forecast_totals(rows))


def commit_forecast(
    points: List[WeeklyPerformancePoint],
    rows: List[PlatformForecastRow],
    start_date: Optional[date] = None,
) -> List[WeeklyPerformancePoint]:
    """
    Append the simulator totals as the next tracked week.

    The new week follows the last tracked week. With an empty tracker it
    starts on the Monday of `start_date` (default: today).

    Targets: leads, AP (stage_b) as mid-funnel visits, AD (stage_c) as final
    visits, spend. Achieved metrics start at zero.
    """
    totals = forecast_totals(rows)

    if points:
        week_start = points[-1].week.end_date + timedelta(days=1)
    else:
        week_start = monday_of(start_date or date.today())

    position = len(points)
    new_week = WeeklyPerformancePoint(
        week=WeekWindow(
            index=position,
            start_date=week_start,
            end_date=week_start + timedelta(days=6),
        ),
        label=f"W{position + 1} (Forecast)",
        target=PerformanceMetrics(
            leads=totals.leads,
            mid_funnel_visits=totals.stage_b,
            final_visits=totals.stage_c,
            spend=totals.spend,
        ),
        achieved=PerformanceMetrics(),
    )
    logger.info(
        f"Committed forecast of {len(rows)} platform(s) as {new_week.label}: "
        f"leads={totals.leads}, spend={totals.spend}"
    )
    return list(points) + [new_week]
