"""
Advisory snapshot service.

The AI advisory call itself lives outside this service. This module only
builds the plain, JSON-serializable snapshot an external caller sends (plan,
recent tracked weeks, current simulator rows) and validates the structure that
comes back. The result is display-only: nothing here writes to project state,
so a failed or missing advisory leaves the planner fully usable.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from funnel_planner.core.config import get_settings
from funnel_planner.models.schemas import (
    AdvisoryPlatformRow,
    AdvisorySnapshot,
    PlatformForecastRow,
    Project,
    StrategicPlan,
)


logger = logging.getLogger(__name__)


def build_advisory_snapshot(
    project: Project,
    rows: Optional[List[PlatformForecastRow]] = None,
    recent_weeks: Optional[int] = None,
) -> AdvisorySnapshot:
    """
    Snapshot of a project for the external advisory call.

    Args:
        project: The project aggregate.
        rows: Simulator rows to include; defaults to the project's own rows.
        recent_weeks: Number of trailing tracked weeks to include
            (default: Settings.advisory_recent_weeks).
    """
    if recent_weeks is None:
        recent_weeks = get_settings().advisory_recent_weeks
    rows = project.forecast_rows if rows is None else rows
    recent = project.performance[-recent_weeks:] if recent_weeks > 0 else []

    return AdvisorySnapshot(
        project_name=project.name,
        poc=project.poc,
        plan=project.plan,
        recent_weeks=[point.model_copy(deep=True) for point in recent],
        forecast=[
            AdvisoryPlatformRow(
                platform=row.name,
                budget=row.spend,
                cpl=row.cost_per_lead,
                leads=row.leads,
                appointments=row.stage_b,
                walkins=row.stage_c,
            )
            for row in rows
        ],
        total_forecast_budget=sum(row.spend for row in rows),
    )


def snapshot_payload(snapshot: AdvisorySnapshot) -> Dict[str, Any]:
    """JSON-ready dict of a snapshot, camelCase keys."""
    return snapshot.model_dump(mode='json', by_alias=True)


def parse_advisory_result(payload: Any) -> Optional[StrategicPlan]:
    """
    Validate an advisory response for display.

    Returns None (and logs) when the payload does not match the expected
    structure.
    """
    try:
        return StrategicPlan.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Discarding malformed advisory result: {e.error_count()} validation error(s)")
        return None
