"""
Enumeration definitions for the Funnel Planner backend.

All enums inherit from both `str` and `Enum` to ensure JSON serialization
compatibility with Pydantic models and FastAPI query/body parsing.
"""

from enum import Enum


class ProjectStatus(str, Enum):
    """
    Lifecycle status of a campaign project, as shown on the dashboard.
    """
    PLAN_SENT = "Plan sent to BM"
    PLAN_APPROVED = "Plan approved"
    WILL_GO_LIVE = "Will go live"
    LIVE = "Live"
    PAUSED = "Paused"
    NA = "NA"


class PlanInputField(str, Enum):
    """
    Editable strategic inputs of the quarterly business plan.

    Every edit to one of these re-derives the full derived bundle.
    """
    OVERALL_BUSINESS_VALUE = "overall_business_value"
    DIGITAL_CONTRIBUTION_PERCENT = "digital_contribution_percent"
    AVERAGE_TICKET_SIZE = "average_ticket_size"
    LEAD_TO_VISIT_RATE_PERCENT = "lead_to_visit_rate_percent"
    VISIT_TO_BOOKING_RATE_PERCENT = "visit_to_booking_rate_percent"
    TARGET_COST_PER_LEAD = "target_cost_per_lead"


class PerformanceField(str, Enum):
    """
    Scalar fields of a PerformanceMetrics record.

    Shared by the target and achieved variants of a week.

    - leads: top-of-funnel contacts
    - mid_funnel_visits: AP (site visits done)
    - final_visits: AD (walk-ins / actual demonstrations)
    - spend: net regional spend (tax-exclusive)
    """
    LEADS = "leads"
    MID_FUNNEL_VISITS = "mid_funnel_visits"
    FINAL_VISITS = "final_visits"
    SPEND = "spend"


class FunnelStage(str, Enum):
    """
    Downstream stages of the platform forecast funnel, in order.

    - stage_a: leads -> proposed appointments (CAPI)
    - stage_b: proposed -> appointments done (AP)
    - stage_c: appointments done -> walk-ins (AD)
    """
    STAGE_A = "stage_a"
    STAGE_B = "stage_b"
    STAGE_C = "stage_c"


class ForecastField(str, Enum):
    """
    Editable fields of a platform forecast row.
    """
    NAME = "name"
    SPEND = "spend"
    COST_PER_LEAD = "cost_per_lead"
    LEADS = "leads"
    STAGE_A_PERCENT = "stage_a_percent"
    STAGE_B_PERCENT = "stage_b_percent"
    STAGE_C_PERCENT = "stage_c_percent"


class LeadsEditPolicy(str, Enum):
    """
    What an edit to a simulator row's leads recomputes.

    - recompute_spend: spend := round(leads x cost_per_lead), cost per lead held fixed
    - recompute_cost_per_lead: cost_per_lead := spend / leads, spend held fixed
    """
    RECOMPUTE_SPEND = "recompute_spend"
    RECOMPUTE_COST_PER_LEAD = "recompute_cost_per_lead"


class CarryoverPolicy(str, Enum):
    """
    How already-entered achieved values follow a regenerated weekly plan.

    - index: by sequence position (a plan with a different start date
      silently re-labels history)
    - week_start: by the week's start date; weeks with no match start at zero
    """
    INDEX = "index"
    WEEK_START = "week_start"


class TaxMode(str, Enum):
    """
    Tax-inclusion view of monetary figures.

    Stored figures are always tax-exclusive; the inclusive view multiplies
    them once, at the aggregation boundary.
    """
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


class GapStatus(str, Enum):
    """
    Status labels of an advisory gap analysis item.
    """
    ON_TRACK = "On Track"
    AT_RISK = "At Risk"
    NEEDS_ATTENTION = "Needs Attention"
