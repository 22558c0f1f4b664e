"""
Tests for week generation, weekly target computation and plan commit.

Reference plan: 3472 leads, 16,732,639 budget, 3% lead-to-visit rate.
With the default 13 weeks / 12 active, every active week gets:

    leads   round(3472 / 12)        = 289
    final   round(289 x 3%)         = 9
    mid     9 x 2                   = 18
    spend   round(16732639 / 12)    = 1,394,387
    all-in  round(1394387 x 1.18)   = 1,645,377
"""

from datetime import date, timedelta

import pytest

from funnel_planner.core.config import get_settings
from funnel_planner.models import CarryoverPolicy, WeeklyDistributionRow
from funnel_planner.services.weekly_distribution import (
    commit_weekly_plan,
    compute_weekly_targets,
    default_distribution_rows,
    distribution_total_percent,
    generate_weeks,
    monday_of,
)


@pytest.fixture
def quarter_weeks(quarter_start):
    return generate_weeks(quarter_start, 13)


@pytest.fixture
def default_targets(quarter_weeks, sample_plan):
    rows = default_distribution_rows(quarter_weeks, sample_plan)
    return compute_weekly_targets(quarter_weeks, rows, sample_plan.derived)


class TestGenerateWeeks:

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 10, 6), date(2025, 10, 6)),    # Monday
        (date(2025, 10, 8), date(2025, 10, 6)),    # Wednesday
        (date(2025, 10, 12), date(2025, 10, 6)),   # Sunday -> prior Monday
    ])
    def test_monday_of(self, day, expected) -> None:
        assert monday_of(day) == expected

    def test_weeks_start_on_monday_of_start_date(self) -> None:
        weeks = generate_weeks(date(2025, 10, 12), 3)

        assert [w.start_date for w in weeks] == [
            date(2025, 10, 6),
            date(2025, 10, 13),
            date(2025, 10, 20),
        ]
        assert all(w.end_date == w.start_date + timedelta(days=6) for w in weeks)
        assert [w.index for w in weeks] == [0, 1, 2]

    def test_default_is_thirteen_weeks(self, quarter_start) -> None:
        assert len(generate_weeks(quarter_start)) == 13

    def test_default_week_count_follows_settings(self, monkeypatch, quarter_start, sample_plan) -> None:
        monkeypatch.setenv('DEFAULT_WEEK_COUNT', '6')
        monkeypatch.setenv('DEFAULT_ACTIVE_WEEKS', '4')
        get_settings.cache_clear()

        weeks = generate_weeks(quarter_start)
        rows = default_distribution_rows(weeks, sample_plan)

        assert len(weeks) == 6
        assert [row.active_flag for row in rows] == [1, 1, 1, 1, 0, 0]

    def test_zero_weeks(self, quarter_start) -> None:
        assert generate_weeks(quarter_start, 0) == []


class TestDefaultDistribution:

    def test_even_split_over_twelve_active_weeks(self, quarter_weeks, sample_plan) -> None:
        rows = default_distribution_rows(quarter_weeks, sample_plan)

        assert len(rows) == 13
        assert [r.active_flag for r in rows] == [1] * 12 + [0]
        assert rows[0].distribution_percent == pytest.approx(100 / 12)
        assert rows[12].distribution_percent == 0
        assert distribution_total_percent(rows) == pytest.approx(100.0)

    def test_visit_conversion_defaults_to_plan_rate(self, quarter_weeks, sample_plan) -> None:
        rows = default_distribution_rows(quarter_weeks, sample_plan)
        assert all(r.visit_conversion_percent == 3.0 for r in rows)

    def test_visit_conversion_fallback(self, quarter_weeks, sample_plan) -> None:
        plan = sample_plan.model_copy(update={
            'inputs': sample_plan.inputs.model_copy(update={'lead_to_visit_rate_percent': 0}),
        })
        rows = default_distribution_rows(quarter_weeks, plan, fallback_visit_conversion=4.5)
        assert rows[0].visit_conversion_percent == 4.5

    def test_total_percent_ignores_inactive_rows(self) -> None:
        rows = [
            WeeklyDistributionRow(distribution_percent=60, active_flag=1),
            WeeklyDistributionRow(distribution_percent=30, active_flag=0),
            WeeklyDistributionRow(distribution_percent=30, active_flag=1),
        ]
        # Not forced to 100
        assert distribution_total_percent(rows) == pytest.approx(90.0)


class TestComputeWeeklyTargets:

    def test_active_week_targets(self, default_targets) -> None:
        first = default_targets[0]

        assert first.leads == 289
        assert first.final_visits == 9
        assert first.mid_funnel_visits == 18
        assert first.spend == 1394387
        assert first.tax_inclusive_spend == 1645377

    def test_cumulative_is_running_sum(self, default_targets) -> None:
        running = 0
        for row in default_targets:
            running += row.leads
            assert row.cumulative_leads == running

        assert default_targets[1].cumulative_spend == 2 * 1394387
        assert default_targets[1].cumulative_mid_funnel_visits == 36

    def test_inactive_week_is_zero_and_carries_cumulative(self, default_targets) -> None:
        last = default_targets[12]

        assert last.active_flag == 0
        assert last.leads == 0
        assert last.spend == 0
        assert last.tax_inclusive_spend == 0
        assert last.cumulative_leads == default_targets[11].cumulative_leads == 289 * 12
        assert last.cumulative_spend == default_targets[11].cumulative_spend

    def test_mid_funnel_is_twice_final(self, default_targets) -> None:
        assert all(r.mid_funnel_visits == 2 * r.final_visits for r in default_targets)

    def test_inactive_week_in_the_middle(self, quarter_start, sample_plan) -> None:
        weeks = generate_weeks(quarter_start, 3)
        rows = [
            WeeklyDistributionRow(distribution_percent=50, visit_conversion_percent=3),
            WeeklyDistributionRow(distribution_percent=50, visit_conversion_percent=3, active_flag=0),
            WeeklyDistributionRow(distribution_percent=50, visit_conversion_percent=3),
        ]
        targets = compute_weekly_targets(weeks, rows, sample_plan.derived)

        assert targets[0].leads == 1736
        assert targets[1].leads == 0
        assert targets[1].cumulative_leads == 1736
        assert targets[2].cumulative_leads == 3472

    def test_missing_rows_are_inactive(self, quarter_start, sample_plan) -> None:
        weeks = generate_weeks(quarter_start, 3)
        rows = [WeeklyDistributionRow(distribution_percent=100, visit_conversion_percent=3)]
        targets = compute_weekly_targets(weeks, rows, sample_plan.derived)

        assert len(targets) == 3
        assert targets[0].leads == 3472
        assert targets[2].leads == 0
        assert targets[2].active_flag == 0

    def test_custom_tax_multiplier(self, quarter_weeks, sample_plan) -> None:
        rows = default_distribution_rows(quarter_weeks, sample_plan)
        targets = compute_weekly_targets(quarter_weeks, rows, sample_plan.derived, tax_multiplier=1.0)
        assert targets[0].tax_inclusive_spend == targets[0].spend


class TestCommitWeeklyPlan:

    def test_only_active_weeks_are_committed(self, default_targets) -> None:
        points = commit_weekly_plan(default_targets)

        assert len(points) == 12
        assert [p.label for p in points[:3]] == ['W1', 'W2', 'W3']
        assert [p.week.index for p in points] == list(range(12))

    def test_targets_come_from_rows(self, default_targets) -> None:
        point = commit_weekly_plan(default_targets)[0]

        assert point.target.leads == 289
        assert point.target.final_visits == 9
        assert point.target.mid_funnel_visits == 18
        assert point.target.spend == 1394387
        assert point.achieved.leads == 0

    def test_inactive_gap_is_reindexed(self, quarter_start, sample_plan) -> None:
        weeks = generate_weeks(quarter_start, 3)
        rows = [
            WeeklyDistributionRow(distribution_percent=50),
            WeeklyDistributionRow(distribution_percent=0, active_flag=0),
            WeeklyDistributionRow(distribution_percent=50),
        ]
        points = commit_weekly_plan(compute_weekly_targets(weeks, rows, sample_plan.derived))

        assert [p.label for p in points] == ['W1', 'W2']
        assert points[1].week.index == 1
        assert points[1].week.start_date == weeks[2].start_date

    def test_index_carryover_keeps_achieved_by_position(self, sample_points, sample_plan) -> None:
        weeks = generate_weeks(date(2025, 10, 13), 13)
        targets = compute_weekly_targets(
            weeks, default_distribution_rows(weeks, sample_plan), sample_plan.derived,
        )
        points = commit_weekly_plan(targets, sample_points, CarryoverPolicy.INDEX)

        assert points[0].achieved == sample_points[0].achieved
        assert points[2].achieved.leads == 120
        assert points[3].achieved.leads == 0

    def test_week_start_carryover_follows_dates(self, sample_points, sample_plan) -> None:
        weeks = generate_weeks(date(2025, 10, 13), 13)
        targets = compute_weekly_targets(
            weeks, default_distribution_rows(weeks, sample_plan), sample_plan.derived,
        )
        points = commit_weekly_plan(targets, sample_points, CarryoverPolicy.WEEK_START)

        # 2025-10-13 was the second tracked week
        assert points[0].achieved.spend == 10000
        assert points[1].achieved.leads == 120
        assert points[2].achieved.leads == 0

    def test_regeneration_replaces_targets(self, default_targets, sample_points) -> None:
        points = commit_weekly_plan(default_targets, sample_points)
        assert points[0].target.leads == 289
