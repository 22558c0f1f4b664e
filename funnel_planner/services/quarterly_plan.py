"""
Quarterly plan derivation service.

Expands the strategic inputs of a quarterly business plan into the chain of
derived targets. Each step feeds the next:

    digital_revenue        = overall_business_value x digital_contribution% / 100
    digital_units_target   = digital_revenue / average_ticket_size      (0 if ATS <= 0)
    required_visits_target = digital_units / (visit_to_booking% / 100)
    required_leads_target  = visits / (lead_to_visit% / 100)
    total_budget           = leads x target_cost_per_lead

A conversion rate of 0 is read as 100% (divisor 1) so the chain never
produces an infinite target; an output that overflows the float range is
stored as 0. Intermediate values are carried unrounded; only the stored
outputs are rounded (units to 2 decimals, counts and budget to whole numbers).

The derivation is total and pure: no errors, no NaN/Infinity, same output for
the same inputs.
"""

import logging
from typing import Any, Union

from funnel_planner.models.enums import PlanInputField
from funnel_planner.models.exceptions import UnknownFieldError
from funnel_planner.models.schemas import (
    QuarterlyPlan,
    QuarterlyPlanDerived,
    QuarterlyPlanInputs,
)
from funnel_planner.services.numeric import (
    coerce_number,
    finite_or_zero,
    round_count,
    round_half_up,
    safe_divide,
)


logger = logging.getLogger(__name__)


def _rate_divisor(rate_percent: float) -> float:
    # 0% (or less) is treated as 100%
    if rate_percent <= 0:
        return 1.0
    return rate_percent / 100.0


def derive_quarterly_plan(inputs: QuarterlyPlanInputs) -> QuarterlyPlanDerived:
    """
    Derive the quarterly target bundle from the strategic inputs.

    Args:
        inputs: The strategic plan inputs.

    Returns:
        QuarterlyPlanDerived with revenue, units, visits, leads and budget.

    Example:
        >>> derived = derive_quarterly_plan(QuarterlyPlanInputs(
        ...     overall_business_value=350,
        ...     digital_contribution_percent=12.5,
        ...     average_ticket_size=7,
        ...     visit_to_booking_rate_percent=6.0,
        ...     lead_to_visit_rate_percent=3.0,
        ...     target_cost_per_lead=4819,
        ... ))
        >>> derived.digital_units_target, derived.required_visits_target, derived.required_leads_target
        (6.25, 104, 3472)
    """
    digital_revenue = finite_or_zero(
        inputs.overall_business_value * (inputs.digital_contribution_percent / 100.0)
    )
    digital_units = safe_divide(digital_revenue, inputs.average_ticket_size)
    visits = digital_units / _rate_divisor(inputs.visit_to_booking_rate_percent)
    leads = visits / _rate_divisor(inputs.lead_to_visit_rate_percent)
    budget = leads * inputs.target_cost_per_lead

    return QuarterlyPlanDerived(
        digital_revenue=digital_revenue,
        digital_units_target=round_half_up(digital_units, 2),
        required_visits_target=round_count(visits),
        required_leads_target=round_count(leads),
        total_budget=round_count(budget),
    )


def build_quarterly_plan(inputs: QuarterlyPlanInputs) -> QuarterlyPlan:
    """Pair inputs with their freshly derived bundle."""
    return QuarterlyPlan(inputs=inputs, derived=derive_quarterly_plan(inputs))


def update_plan_input(
    plan: QuarterlyPlan,
    field: Union[PlanInputField, str],
    raw_value: Any,
) -> QuarterlyPlan:
    """
    Apply a keystroke-level edit to one strategic input and re-derive.

    The raw value is coerced (unparseable -> 0). The derived bundle is always
    recomputed in full.

    Raises:
        UnknownFieldError: If `field` is not a strategic input.
    """
    try:
        field = PlanInputField(field)
    except ValueError:
        raise UnknownFieldError(str(field), 'plan input') from None

    inputs = plan.inputs.model_copy(update={field.value: coerce_number(raw_value)})
    updated = build_quarterly_plan(inputs)
    logger.debug(
        f"Plan input {field.value} -> {getattr(inputs, field.value)}; "
        f"leads={updated.derived.required_leads_target}, budget={updated.derived.total_budget}"
    )
    return updated
