"""
Package initialization file for Funnel Planner models.

Exports all Pydantic schemas, enumerations and domain exceptions so other
modules can import them from funnel_planner.models directly.

Usage:
    from funnel_planner.models import (
        QuarterlyPlanInputs,
        WeeklyPerformancePoint,
        PerformanceField,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from funnel_planner.models.enums import (
    ProjectStatus,
    PlanInputField,
    PerformanceField,
    FunnelStage,
    ForecastField,
    LeadsEditPolicy,
    CarryoverPolicy,
    TaxMode,
    GapStatus,
)

# =============================================================================
# Exceptions
# =============================================================================

from funnel_planner.models.exceptions import (
    FunnelPlannerError,
    ProjectNotFoundError,
    PlatformRowNotFoundError,
    UnknownFieldError,
)

# =============================================================================
# Schemas
# =============================================================================

from funnel_planner.models.schemas import (
    # Quarterly plan
    QuarterlyPlanInputs,
    QuarterlyPlanDerived,
    QuarterlyPlan,
    # Weekly planning
    WeekWindow,
    WeeklyDistributionRow,
    WeeklyTargetRow,
    # Performance tracking
    PerformanceMetrics,
    WeeklyPerformancePoint,
    RatioSet,
    EnrichedWeek,
    TrackerTotals,
    TrackerView,
    AchievedImportRecord,
    # Forecast simulator
    PlatformPerformance,
    PlatformForecastRow,
    ForecastTotals,
    ForecastView,
    # Project aggregate
    Project,
    # Aggregation & view
    ViewConfig,
    ProjectTotals,
    ProjectSummaryRow,
    DashboardView,
    # Advisory
    AdvisoryPlatformRow,
    AdvisorySnapshot,
    GapAnalysisItem,
    NextWeekForecast,
    PlatformPlan,
    StrategicPlan,
    # API requests
    ProjectCreate,
    ProjectUpdate,
    FieldEdit,
    WeeklyPlanRequest,
    WeeklyPlanPreview,
    ForecastRowCreate,
    ForecastCommitRequest,
)


__all__ = [
    # ----- Enums -----
    'ProjectStatus',
    'PlanInputField',
    'PerformanceField',
    'FunnelStage',
    'ForecastField',
    'LeadsEditPolicy',
    'CarryoverPolicy',
    'TaxMode',
    'GapStatus',
    # ----- Exceptions -----
    'FunnelPlannerError',
    'ProjectNotFoundError',
    'PlatformRowNotFoundError',
    'UnknownFieldError',
    # ----- Schemas -----
    'QuarterlyPlanInputs',
    'QuarterlyPlanDerived',
    'QuarterlyPlan',
    'WeekWindow',
    'WeeklyDistributionRow',
    'WeeklyTargetRow',
    'PerformanceMetrics',
    'WeeklyPerformancePoint',
    'RatioSet',
    'EnrichedWeek',
    'TrackerTotals',
    'TrackerView',
    'AchievedImportRecord',
    'PlatformPerformance',
    'PlatformForecastRow',
    'ForecastTotals',
    'ForecastView',
    'Project',
    'ViewConfig',
    'ProjectTotals',
    'ProjectSummaryRow',
    'DashboardView',
    'AdvisoryPlatformRow',
    'AdvisorySnapshot',
    'GapAnalysisItem',
    'NextWeekForecast',
    'PlatformPlan',
    'StrategicPlan',
    'ProjectCreate',
    'ProjectUpdate',
    'FieldEdit',
    'WeeklyPlanRequest',
    'WeeklyPlanPreview',
    'ForecastRowCreate',
    'ForecastCommitRequest',
]
