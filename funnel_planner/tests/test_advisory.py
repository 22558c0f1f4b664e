"""
Tests for the advisory snapshot export and advisory result validation.
"""

from typing import Any, Dict

import pytest

from funnel_planner.models import GapStatus
from funnel_planner.services.advisory import (
    build_advisory_snapshot,
    parse_advisory_result,
    snapshot_payload,
)
from funnel_planner.services.forecast_simulator import EditSpend, apply_command, new_platform_row


@pytest.fixture
def advisory_result() -> Dict[str, Any]:
    return {
        "performanceSummary": "Lead volume is behind plan; CPL is on target.",
        "gapAnalysis": [
            {
                "metric": "Leads",
                "target": "300",
                "achieved": "200",
                "gap": "-100",
                "status": "At Risk",
            },
        ],
        "nextWeekForecast": {
            "overallProjectedLeads": 120,
            "overallProjectedAppointments": 18,
            "requiredBudget": 240000,
            "summary": "Shift budget to search.",
        },
        "platformSpecificPlan": [
            {
                "platformName": "Google Search",
                "recommendedBudget": 150000,
                "projectedLeads": 75,
                "projectedAppointments": 12,
                "projectedCPL": 2000,
                "projectedCPA": 12500,
                "recommendation": "Scale up",
            },
        ],
    }


class TestSnapshot:

    def test_includes_plan_and_recent_weeks(self, project_factory, sample_points) -> None:
        project = project_factory(performance=sample_points)
        snapshot = build_advisory_snapshot(project, recent_weeks=2)

        assert snapshot.project_name == 'Skyline Towers'
        assert snapshot.plan.derived.required_leads_target == 3472
        assert [w.label for w in snapshot.recent_weeks] == ['W2', 'W3']

    def test_forecast_rows(self, project_factory) -> None:
        row = new_platform_row('Google Search').model_copy(update={'cost_per_lead': 2000})
        row = apply_command(row, EditSpend(100000))
        project = project_factory().model_copy(update={'forecast_rows': [row]})

        snapshot = build_advisory_snapshot(project)

        assert snapshot.forecast[0].platform == 'Google Search'
        assert snapshot.forecast[0].leads == 50
        assert snapshot.forecast[0].appointments == row.stage_b
        assert snapshot.total_forecast_budget == 100000

    def test_zero_recent_weeks(self, project_factory, sample_points) -> None:
        project = project_factory(performance=sample_points)
        assert build_advisory_snapshot(project, recent_weeks=0).recent_weeks == []

    def test_payload_is_camel_case_json(self, project_factory, sample_points) -> None:
        payload = snapshot_payload(build_advisory_snapshot(project_factory(performance=sample_points)))

        assert payload['projectName'] == 'Skyline Towers'
        assert payload['plan']['derived']['totalBudget'] == 16732639
        assert payload['recentWeeks'][0]['week']['startDate'] == '2025-10-06'


class TestParseAdvisoryResult:

    def test_valid_result(self, advisory_result) -> None:
        plan = parse_advisory_result(advisory_result)

        assert plan is not None
        assert plan.gap_analysis[0].status == GapStatus.AT_RISK
        assert plan.next_week_forecast.overall_projected_leads == 120
        assert plan.platform_specific_plan[0].projected_cpl == 2000

    def test_malformed_result_returns_none(self, advisory_result) -> None:
        del advisory_result['nextWeekForecast']
        assert parse_advisory_result(advisory_result) is None

    def test_non_mapping_returns_none(self) -> None:
        assert parse_advisory_result("not json") is None
