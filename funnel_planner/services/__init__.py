"""
Funnel Planner Services Module

Business logic of the planner. Every calculation service is stateless: it
takes model values and returns new model values, so the API layer only loads
a project, calls a service and stores the result.

Services:
- numeric: safe division, coercion, rounding, tax view, display formatting
- quarterly_plan: business-value -> visits/leads/budget derivation
- weekly_distribution: week windows, weekly targets and plan commit
- reconciliation: performance tracker enrichment (cumulative, ratios, rolling CPL)
- forecast_simulator: per-platform what-if rows and commit to the tracker
- aggregation: per-project and cross-project dashboard totals
- advisory: snapshot export and advisory result validation
- projects: project aggregate edits, wired to the application settings
"""

# =============================================================================
# Numeric Helpers
# =============================================================================

from funnel_planner.services.numeric import (
    finite_or_zero,
    safe_divide,
    ratio_percent,
    coerce_number,
    round_half_up,
    round_count,
    tax_factor,
    to_tax_view,
    from_tax_view,
    format_large_currency,
    format_count,
)

# =============================================================================
# Quarterly Plan
# =============================================================================

from funnel_planner.services.quarterly_plan import (
    derive_quarterly_plan,
    build_quarterly_plan,
    update_plan_input,
)

# =============================================================================
# Weekly Distribution
# =============================================================================

from funnel_planner.services.weekly_distribution import (
    monday_of,
    generate_weeks,
    default_distribution_rows,
    distribution_total_percent,
    compute_weekly_targets,
    commit_weekly_plan,
)

# =============================================================================
# Performance Reconciliation
# =============================================================================

from funnel_planner.services.reconciliation import (
    compute_ratios,
    enrich_performance,
    tracker_totals,
    build_tracker_view,
    update_achieved_field,
    replace_achieved_bulk,
    records_from_frame,
)

# =============================================================================
# Forecast Simulator
# =============================================================================

from funnel_planner.services.forecast_simulator import (
    EditSpend,
    EditCostPerLead,
    EditLeads,
    EditRate,
    EditName,
    command_for_field,
    apply_command,
    apply_edit,
    recompute_stages,
    new_platform_row,
    rows_from_platforms,
    remove_platform_row,
    forecast_totals,
    forecast_view,
    commit_forecast,
    DEFAULT_VENDORS,
)

# =============================================================================
# Aggregation & Dashboard
# =============================================================================

from funnel_planner.services.aggregation import (
    week_overlaps,
    filter_weeks,
    project_totals,
    build_dashboard,
    list_pocs,
    ALL_POCS,
)

# =============================================================================
# Advisory
# =============================================================================

from funnel_planner.services.advisory import (
    build_advisory_snapshot,
    snapshot_payload,
    parse_advisory_result,
)


__all__ = [
    # numeric
    'finite_or_zero',
    'safe_divide',
    'ratio_percent',
    'coerce_number',
    'round_half_up',
    'round_count',
    'tax_factor',
    'to_tax_view',
    'from_tax_view',
    'format_large_currency',
    'format_count',
    # quarterly_plan
    'derive_quarterly_plan',
    'build_quarterly_plan',
    'update_plan_input',
    # weekly_distribution
    'monday_of',
    'generate_weeks',
    'default_distribution_rows',
    'distribution_total_percent',
    'compute_weekly_targets',
    'commit_weekly_plan',
    # reconciliation
    'compute_ratios',
    'enrich_performance',
    'tracker_totals',
    'build_tracker_view',
    'update_achieved_field',
    'replace_achieved_bulk',
    'records_from_frame',
    # forecast_simulator
    'EditSpend',
    'EditCostPerLead',
    'EditLeads',
    'EditRate',
    'EditName',
    'command_for_field',
    'apply_command',
    'apply_edit',
    'recompute_stages',
    'new_platform_row',
    'rows_from_platforms',
    'remove_platform_row',
    'forecast_totals',
    'forecast_view',
    'commit_forecast',
    'DEFAULT_VENDORS',
    # aggregation
    'week_overlaps',
    'filter_weeks',
    'project_totals',
    'build_dashboard',
    'list_pocs',
    'ALL_POCS',
    # advisory
    'build_advisory_snapshot',
    'snapshot_payload',
    'parse_advisory_result',
]
