"""
Pydantic models for the Funnel Planner backend.

This module provides type-safe data validation and serialization for the
calculation core and the API contracts: the quarterly business plan, week
windows and weekly distribution rows, target/achieved performance metrics,
the enriched tracker view, platform forecast rows, dashboard aggregation and
the advisory snapshot.

Fields are snake_case in Python and serialize with camelCase aliases, which is
what the dashboard UI consumes. Either spelling is accepted on input.

All models use Pydantic v2 syntax.
"""

from datetime import date as DateType
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from funnel_planner.models.enums import (
    GapStatus,
    PerformanceField,
    ProjectStatus,
    TaxMode,
)


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Quarterly Business Plan
# =============================================================================


class QuarterlyPlanInputs(CamelModel):
    """
    Strategic inputs of the quarterly business plan.

    Currency values are in the plan's large scale (e.g. crore) for business
    value and ticket size, and in whole currency units for cost per lead.
    """
    overall_business_value: float = Field(
        default=0.0,
        description="Overall project business value target (large scale)"
    )
    digital_contribution_percent: float = Field(
        default=0.0,
        description="Share of business value expected from digital (0-100)"
    )
    average_ticket_size: float = Field(
        default=0.0,
        description="Average ticket size per unit (large scale)"
    )
    lead_to_visit_rate_percent: float = Field(
        default=0.0,
        description="Lead to final visit conversion (LTW %)"
    )
    visit_to_booking_rate_percent: float = Field(
        default=0.0,
        description="Final visit to booking conversion (WTB %)"
    )
    target_cost_per_lead: float = Field(
        default=0.0,
        description="Planned cost per lead (currency units)"
    )

    @field_validator('*', mode='before')
    @classmethod
    def _coerce(cls, value: Any) -> float:
        from funnel_planner.services.numeric import coerce_number

        return coerce_number(value)


class QuarterlyPlanDerived(CamelModel):
    """
    Quarterly targets derived from QuarterlyPlanInputs.

    Always a pure function of the inputs; never edited directly.
    """
    digital_revenue: float = 0.0
    digital_units_target: float = Field(
        default=0.0,
        description="Digital units, kept to 2 decimal places"
    )
    required_visits_target: int = 0
    required_leads_target: int = 0
    total_budget: int = Field(
        default=0,
        description="Planned budget, tax-exclusive, whole currency units"
    )


class QuarterlyPlan(CamelModel):
    """Inputs plus the derived bundle, stored together on a project."""
    inputs: QuarterlyPlanInputs = Field(default_factory=QuarterlyPlanInputs)
    derived: QuarterlyPlanDerived = Field(default_factory=QuarterlyPlanDerived)


# =============================================================================
# Weekly Planning
# =============================================================================


class WeekWindow(CamelModel):
    """
    One Monday-Sunday week of a quarter.

    The index determines cumulative-sum order; end_date is start_date + 6 days.
    """
    index: int = Field(..., ge=0)
    start_date: DateType
    end_date: DateType

    @property
    def week_id(self) -> str:
        """Stable identifier of the week, independent of its position."""
        return self.start_date.isoformat()


class WeeklyDistributionRow(CamelModel):
    """
    Editable per-week planning inputs.

    Rows pair with week windows by position.
    """
    distribution_percent: float = Field(
        default=0.0,
        description="Share of quarterly leads and spend assigned to the week"
    )
    visit_conversion_percent: float = Field(
        default=0.0,
        description="Week-specific lead to final visit rate"
    )
    active_flag: int = Field(
        default=1,
        ge=0,
        le=1,
        description="0 excludes the week from target generation"
    )

    @field_validator('distribution_percent', 'visit_conversion_percent', mode='before')
    @classmethod
    def _coerce(cls, value: Any) -> float:
        from funnel_planner.services.numeric import coerce_number

        return coerce_number(value)


class WeeklyTargetRow(CamelModel):
    """Per-week and running cumulative targets of a generated weekly plan."""
    week: WeekWindow
    distribution_percent: float
    visit_conversion_percent: float
    active_flag: int
    leads: int = 0
    final_visits: int = 0
    mid_funnel_visits: int = 0
    spend: int = 0
    tax_inclusive_spend: int = 0
    cumulative_leads: int = 0
    cumulative_final_visits: int = 0
    cumulative_mid_funnel_visits: int = 0
    cumulative_spend: int = 0
    cumulative_tax_inclusive_spend: int = 0


# =============================================================================
# Performance Tracking
# =============================================================================


class PerformanceMetrics(CamelModel):
    """
    Funnel metrics of one week.

    The same field set is used for the target and achieved variants so that
    ratios and gaps are always well-defined.
    """
    leads: float = 0.0
    mid_funnel_visits: float = 0.0
    final_visits: float = 0.0
    spend: float = 0.0

    def value_of(self, field: PerformanceField) -> float:
        return getattr(self, field.value)

    def plus(self, other: "PerformanceMetrics") -> "PerformanceMetrics":
        return PerformanceMetrics(
            leads=self.leads + other.leads,
            mid_funnel_visits=self.mid_funnel_visits + other.mid_funnel_visits,
            final_visits=self.final_visits + other.final_visits,
            spend=self.spend + other.spend,
        )


class WeeklyPerformancePoint(CamelModel):
    """A tracked week: immutable targets and editable achieved metrics."""
    week: WeekWindow
    label: str = Field(..., description="Display label, e.g. 'W3'")
    target: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    achieved: PerformanceMetrics = Field(default_factory=PerformanceMetrics)


class RatioSet(CamelModel):
    """Cost and conversion ratios; 0 wherever the denominator is 0."""
    cost_per_lead: float = 0.0
    cost_per_mid_funnel_visit: float = 0.0
    cost_per_final_visit: float = 0.0
    lead_to_final_visit_percent: float = 0.0
    lead_to_mid_funnel_percent: float = 0.0


class EnrichedWeek(CamelModel):
    """A tracked week with running totals, ratios and rolling cost per lead."""
    index: int
    label: str
    week: WeekWindow
    target: PerformanceMetrics
    achieved: PerformanceMetrics
    target_tax_inclusive_spend: float = 0.0
    achieved_tax_inclusive_spend: float = 0.0
    cumulative_target: PerformanceMetrics
    cumulative_achieved: PerformanceMetrics
    cumulative_target_tax_inclusive_spend: float = 0.0
    cumulative_achieved_tax_inclusive_spend: float = 0.0
    ratios: RatioSet
    cumulative_ratios: RatioSet
    rolling_cost_per_lead: float = 0.0


class TrackerTotals(CamelModel):
    """Tracker 'Total' column: the last week's cumulative values."""
    target: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    achieved: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    target_tax_inclusive_spend: float = 0.0
    achieved_tax_inclusive_spend: float = 0.0


class TrackerView(CamelModel):
    weeks: List[EnrichedWeek] = Field(default_factory=list)
    totals: TrackerTotals = Field(default_factory=TrackerTotals)


class AchievedImportRecord(CamelModel):
    """
    One externally normalized achieved-metrics record, keyed by week index.

    Non-numeric values are coerced to 0.
    """
    week_index: int = Field(..., ge=0)
    leads: float = 0.0
    mid_funnel_visits: float = 0.0
    final_visits: float = 0.0
    spend: float = 0.0

    @field_validator('leads', 'mid_funnel_visits', 'final_visits', 'spend', mode='before')
    @classmethod
    def _coerce(cls, value: Any) -> float:
        from funnel_planner.services.numeric import coerce_number

        return coerce_number(value)

    def to_metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            leads=self.leads,
            mid_funnel_visits=self.mid_funnel_visits,
            final_visits=self.final_visits,
            spend=self.spend,
        )


# =============================================================================
# Platform Forecast Simulator
# =============================================================================


class PlatformPerformance(CamelModel):
    """
    Current observed performance of one platform (simulator baseline).

    Non-numeric, NaN and infinite values are coerced to 0.
    """
    name: str
    spend: float = 0.0
    leads: float = 0.0
    mid_funnel_visits: float = 0.0
    final_visits: float = 0.0

    @field_validator('spend', 'leads', 'mid_funnel_visits', 'final_visits', mode='before')
    @classmethod
    def _coerce(cls, value: Any) -> float:
        from funnel_planner.services.numeric import coerce_number

        return coerce_number(value)


class PlatformForecastRow(CamelModel):
    """
    One platform line of the forecast simulator.

    spend, cost_per_lead and leads are mutually constrained
    (spend = leads x cost_per_lead); the three stages follow from leads.
    """
    id: str
    name: str = ""
    spend: float = 0.0
    cost_per_lead: float = 0.0
    leads: float = 0.0
    stage_a_percent: float = 0.0
    stage_b_percent: float = 0.0
    stage_c_percent: float = 0.0
    stage_a: int = Field(default=0, description="Projected proposed appointments (CAPI)")
    stage_b: int = Field(default=0, description="Projected appointments done (AP)")
    stage_c: int = Field(default=0, description="Projected walk-ins (AD)")


class ForecastTotals(CamelModel):
    spend: float = 0.0
    leads: float = 0.0
    stage_a: int = 0
    stage_b: int = 0
    stage_c: int = 0
    cost_per_lead: float = 0.0


class ForecastView(CamelModel):
    rows: List[PlatformForecastRow] = Field(default_factory=list)
    totals: ForecastTotals = Field(default_factory=ForecastTotals)


# =============================================================================
# Project Aggregate
# =============================================================================


class Project(CamelModel):
    """
    The project aggregate.

    Owns the quarterly plan, the ordered tracked weeks and the transient
    simulator rows. Every edit produces a whole new value.
    """
    id: int
    name: str
    poc: str = Field(..., description="Point of contact")
    status: ProjectStatus = ProjectStatus.NA
    plan: QuarterlyPlan = Field(default_factory=QuarterlyPlan)
    performance: List[WeeklyPerformancePoint] = Field(default_factory=list)
    current_platforms: List[PlatformPerformance] = Field(default_factory=list)
    forecast_rows: List[PlatformForecastRow] = Field(default_factory=list)


# =============================================================================
# Aggregation & View
# =============================================================================


class ViewConfig(CamelModel):
    """
    Immutable view configuration threaded through every aggregation call.

    Absent filter bounds are unbounded.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    tax_mode: TaxMode = TaxMode.EXCLUSIVE
    filter_start: Optional[DateType] = None
    filter_end: Optional[DateType] = None

    @property
    def is_filtered(self) -> bool:
        return self.filter_start is not None or self.filter_end is not None


class ProjectTotals(CamelModel):
    """
    Planned vs achieved totals under a view.

    Monetary fields (planned_budget, spend, cost_*) are already in the view's
    tax mode.
    """
    planned_budget: float = 0.0
    spend: float = 0.0
    leads_target: float = 0.0
    leads_achieved: float = 0.0
    mid_funnel_target: float = 0.0
    mid_funnel_achieved: float = 0.0
    final_visits_target: float = 0.0
    final_visits_achieved: float = 0.0
    cost_per_lead: float = 0.0
    cost_per_mid_funnel_visit: float = 0.0
    cost_per_final_visit: float = 0.0
    leads_achievement_percent: float = 0.0
    mid_funnel_achievement_percent: float = 0.0
    final_visits_achievement_percent: float = 0.0
    budget_utilization_percent: float = 0.0


class ProjectSummaryRow(CamelModel):
    project_id: int
    name: str
    poc: str
    status: ProjectStatus
    totals: ProjectTotals


class DashboardView(CamelModel):
    view: ViewConfig
    poc: Optional[str] = None
    pocs: List[str] = Field(default_factory=list)
    projects: List[ProjectSummaryRow] = Field(default_factory=list)
    totals: ProjectTotals = Field(default_factory=ProjectTotals)


# =============================================================================
# Advisory Snapshot & Opaque Advisory Result
# =============================================================================


class AdvisoryPlatformRow(CamelModel):
    platform: str
    budget: float
    cpl: float
    leads: float
    appointments: int
    walkins: int


class AdvisorySnapshot(CamelModel):
    """Plain serialization of a project sent to the external advisory call."""
    project_name: str
    poc: str
    plan: QuarterlyPlan
    recent_weeks: List[WeeklyPerformancePoint] = Field(default_factory=list)
    forecast: List[AdvisoryPlatformRow] = Field(default_factory=list)
    total_forecast_budget: float = 0.0


class GapAnalysisItem(CamelModel):
    metric: str
    target: str
    achieved: str
    gap: str
    status: GapStatus


class NextWeekForecast(CamelModel):
    overall_projected_leads: int
    overall_projected_appointments: int
    required_budget: float
    summary: str


class PlatformPlan(CamelModel):
    platform_name: str
    recommended_budget: float
    projected_leads: int
    projected_appointments: int
    projected_cpl: float = Field(..., alias="projectedCPL")
    projected_cpa: float = Field(..., alias="projectedCPA")
    recommendation: str


class StrategicPlan(CamelModel):
    """Display-only advisory result; never fed back into project state."""
    performance_summary: str
    gap_analysis: List[GapAnalysisItem] = Field(default_factory=list)
    next_week_forecast: NextWeekForecast
    platform_specific_plan: List[PlatformPlan] = Field(default_factory=list)


# =============================================================================
# API Request Models
# =============================================================================


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1)
    poc: str = Field(..., min_length=1)
    status: ProjectStatus = ProjectStatus.NA


class ProjectUpdate(CamelModel):
    """Partial update of a project's descriptive fields; unset fields are kept."""
    name: Optional[str] = Field(default=None, min_length=1)
    poc: Optional[str] = Field(default=None, min_length=1)
    status: Optional[ProjectStatus] = None


class FieldEdit(CamelModel):
    """Single-field edit; the raw value is coerced by the service layer."""
    field: str = Field(..., min_length=1)
    value: Any = None


class WeeklyPlanRequest(CamelModel):
    start_date: DateType
    number_of_weeks: Optional[int] = Field(default=None, ge=1, le=60)
    rows: Optional[List[WeeklyDistributionRow]] = Field(
        default=None,
        description="Distribution rows by week position; defaults to an even split"
    )


class WeeklyPlanPreview(CamelModel):
    rows: List[WeeklyTargetRow] = Field(default_factory=list)
    total_distribution_percent: float = 0.0


class ForecastRowCreate(CamelModel):
    name: str = ""


class ForecastCommitRequest(CamelModel):
    start_date: Optional[DateType] = None
