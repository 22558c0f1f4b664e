"""
Performance reconciliation service.

Merges achieved inputs with weekly targets and derives, for every tracked
week in sequence order:

- running cumulative target and achieved totals
- tax-inclusive spend for both variants (spend x 1.18)
- per-week ratios on achieved metrics:
    cost_per_lead               = spend / leads
    cost_per_mid_funnel_visit   = spend / mid_funnel_visits
    cost_per_final_visit        = spend / final_visits
    lead_to_final_visit_percent = final_visits / leads x 100
    lead_to_mid_funnel_percent  = mid_funnel_visits / leads x 100
- the same ratios over the cumulative achieved totals
- a rolling cost per lead over the current week and up to 3 preceding weeks
  (sum of spend / sum of leads, window clipped at the sequence start)

Every ratio uses safe division (0 when the denominator is 0).

The enrichment is recomputed from scratch after every edit. With at most a
few dozen weeks per project this is a handful of vectorized pandas passes.

Mutation entry points:
- update_achieved_field: replace one scalar of one week's achieved metrics
- replace_achieved_bulk: replace achieved metrics of all weeks from an
  externally normalized import
"""

import logging
from typing import Any, List, Optional, Union

import pandas as pd

from funnel_planner.core.config import get_settings
from funnel_planner.models.enums import PerformanceField
from funnel_planner.models.exceptions import UnknownFieldError
from funnel_planner.models.schemas import (
    AchievedImportRecord,
    EnrichedWeek,
    PerformanceMetrics,
    RatioSet,
    TrackerTotals,
    TrackerView,
    WeeklyPerformancePoint,
)
from funnel_planner.services.numeric import (
    coerce_number,
    ratio_percent,
    safe_divide,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

METRIC_COLUMNS: List[str] = [field.value for field in PerformanceField]

IMPORT_REQUIRED_COLUMNS: List[str] = ['week_index'] + METRIC_COLUMNS


# =============================================================================
# Ratio Helpers
# =============================================================================


def compute_ratios(metrics: PerformanceMetrics) -> RatioSet:
    """Cost and conversion ratios of one metrics record."""
    return RatioSet(
        cost_per_lead=safe_divide(metrics.spend, metrics.leads),
        cost_per_mid_funnel_visit=safe_divide(metrics.spend, metrics.mid_funnel_visits),
        cost_per_final_visit=safe_divide(metrics.spend, metrics.final_visits),
        lead_to_final_visit_percent=ratio_percent(metrics.final_visits, metrics.leads),
        lead_to_mid_funnel_percent=ratio_percent(metrics.mid_funnel_visits, metrics.leads),
    )


def _metrics_frame(points: List[WeeklyPerformancePoint], variant: str) -> pd.DataFrame:
    return pd.DataFrame(
        [getattr(point, variant).model_dump() for point in points],
        columns=METRIC_COLUMNS,
        dtype=float,
    )


def _metrics_at(frame: pd.DataFrame, position: int) -> PerformanceMetrics:
    row = frame.iloc[position]
    return PerformanceMetrics(**{col: float(row[col]) for col in METRIC_COLUMNS})


# =============================================================================
# Enrichment
# =============================================================================


def enrich_performance(
    points: List[WeeklyPerformancePoint],
    tax_multiplier: Optional[float] = None,
    rolling_window: Optional[int] = None,
) -> List[EnrichedWeek]:
    """
    Enrich tracked weeks with cumulative totals, ratios and rolling CPL.

    Args:
        points: Tracked weeks in sequence order.
        tax_multiplier: Multiplier of the tax-inclusive spend columns
            (default: Settings.tax_multiplier).
        rolling_window: Trailing window (in weeks) of the rolling cost per lead
            (default: Settings.rolling_window_weeks).

    Returns:
        One EnrichedWeek per input week, same order.

    Example:
        >>> weeks = enrich_performance(points)
        >>> weeks[0].rolling_cost_per_lead == weeks[0].ratios.cost_per_lead
        True
    """
    if not points:
        return []

    settings = get_settings()
    if tax_multiplier is None:
        tax_multiplier = settings.tax_multiplier
    if rolling_window is None:
        rolling_window = settings.rolling_window_weeks

    targets = _metrics_frame(points, 'target')
    achieved = _metrics_frame(points, 'achieved')

    cum_targets = targets.cumsum()
    cum_achieved = achieved.cumsum()

    target_tax_inclusive = targets['spend'] * tax_multiplier
    achieved_tax_inclusive = achieved['spend'] * tax_multiplier
    cum_target_tax_inclusive = target_tax_inclusive.cumsum()
    cum_achieved_tax_inclusive = achieved_tax_inclusive.cumsum()

    window = max(rolling_window, 1)
    rolling = achieved[['spend', 'leads']].rolling(window=window, min_periods=1).sum()

    enriched: List[EnrichedWeek] = []
    for i, point in enumerate(points):
        cumulative_achieved = _metrics_at(cum_achieved, i)
        enriched.append(EnrichedWeek(
            index=i,
            label=point.label,
            week=point.week,
            target=point.target,
            achieved=point.achieved,
            target_tax_inclusive_spend=float(target_tax_inclusive.iloc[i]),
            achieved_tax_inclusive_spend=float(achieved_tax_inclusive.iloc[i]),
            cumulative_target=_metrics_at(cum_targets, i),
            cumulative_achieved=cumulative_achieved,
            cumulative_target_tax_inclusive_spend=float(cum_target_tax_inclusive.iloc[i]),
            cumulative_achieved_tax_inclusive_spend=float(cum_achieved_tax_inclusive.iloc[i]),
            ratios=compute_ratios(point.achieved),
            cumulative_ratios=compute_ratios(cumulative_achieved),
            rolling_cost_per_lead=safe_divide(
                float(rolling['spend'].iloc[i]),
                float(rolling['leads'].iloc[i]),
            ),
        ))

    return enriched


def tracker_totals(enriched: List[EnrichedWeek]) -> TrackerTotals:
    """Totals column of the tracker: the last week's cumulative values."""
    if not enriched:
        return TrackerTotals()
    last = enriched[-1]
    return TrackerTotals(
        target=last.cumulative_target,
        achieved=last.cumulative_achieved,
        target_tax_inclusive_spend=last.cumulative_target_tax_inclusive_spend,
        achieved_tax_inclusive_spend=last.cumulative_achieved_tax_inclusive_spend,
    )


def build_tracker_view(
    points: List[WeeklyPerformancePoint],
    tax_multiplier: Optional[float] = None,
    rolling_window: Optional[int] = None,
) -> TrackerView:
    """Enriched weeks plus the totals column."""
    weeks = enrich_performance(points, tax_multiplier, rolling_window)
    return TrackerView(weeks=weeks, totals=tracker_totals(weeks))


# =============================================================================
# Mutation Entry Points
# =============================================================================


def update_achieved_field(
    points: List[WeeklyPerformancePoint],
    index: int,
    field: Union[PerformanceField, str],
    raw_value: Any,
) -> List[WeeklyPerformancePoint]:
    """
    Replace exactly one achieved scalar of one week.

    Targets and all other weeks are left untouched. An out-of-range index
    returns the sequence unchanged.

    Raises:
        UnknownFieldError: If `field` is not a performance metric.
    """
    try:
        field = PerformanceField(field)
    except ValueError:
        raise UnknownFieldError(str(field), 'performance') from None

    if index < 0 or index >= len(points):
        logger.warning(f"Ignoring achieved edit for week index {index}; {len(points)} weeks tracked")
        return list(points)

    updated = list(points)
    point = updated[index]
    achieved = point.achieved.model_copy(update={field.value: coerce_number(raw_value)})
    updated[index] = point.model_copy(update={'achieved': achieved})
    logger.debug(f"Week {point.label}: achieved {field.value} -> {getattr(achieved, field.value)}")
    return updated


def replace_achieved_bulk(
    points: List[WeeklyPerformancePoint],
    records: List[AchievedImportRecord],
) -> List[WeeklyPerformancePoint]:
    """
    Replace the achieved metrics of every week from imported records.

    Records are keyed by week index. Weeks without a record are reset to zero;
    records for unknown weeks are ignored. When several records share an
    index the last one wins.
    """
    by_index = {}
    for record in records:
        if record.week_index >= len(points):
            logger.warning(f"Ignoring import record for unknown week index {record.week_index}")
            continue
        by_index[record.week_index] = record.to_metrics()

    updated = [
        point.model_copy(update={'achieved': by_index.get(i, PerformanceMetrics())})
        for i, point in enumerate(points)
    ]
    logger.info(f"Bulk achieved import applied to {len(by_index)} of {len(points)} weeks")
    return updated


def records_from_frame(df: pd.DataFrame) -> List[AchievedImportRecord]:
    """
    Convert an externally normalized DataFrame into import records.

    Column names are matched case-insensitively. Missing metric columns and
    non-numeric cells become 0; rows without a usable week index are dropped.
    """
    frame = df.copy()
    frame.columns = frame.columns.astype(str).str.lower().str.strip()

    if 'week_index' not in frame.columns:
        logger.warning("Import frame has no week_index column; nothing to import")
        return []

    for col in METRIC_COLUMNS:
        if col not in frame.columns:
            frame[col] = 0.0
        frame[col] = pd.to_numeric(frame[col], errors='coerce').fillna(0.0)

    frame['week_index'] = pd.to_numeric(frame['week_index'], errors='coerce')
    skipped = int(frame['week_index'].isna().sum() + (frame['week_index'] < 0).sum())
    frame = frame[frame['week_index'].notna() & (frame['week_index'] >= 0)]
    if skipped:
        logger.warning(f"Dropped {skipped} import row(s) without a valid week index")

    return [
        AchievedImportRecord(
            week_index=int(row['week_index']),
            **{col: float(row[col]) for col in METRIC_COLUMNS},
        )
        for _, row in frame[IMPORT_REQUIRED_COLUMNS].iterrows()
    ]
