"""
Tests for the project aggregate service, the in-memory store and settings.
"""

from datetime import date

import pytest

from funnel_planner.core.config import Settings, get_settings
from funnel_planner.models import (
    AchievedImportRecord,
    CarryoverPolicy,
    LeadsEditPolicy,
    PlatformPerformance,
    ProjectNotFoundError,
    ProjectStatus,
    UnknownFieldError,
    WeeklyDistributionRow,
)
from funnel_planner.services import projects as project_service


class TestSettings:

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.tax_multiplier == pytest.approx(1.18)
        assert settings.default_week_count == 13
        assert settings.default_active_weeks == 12
        assert settings.rolling_window_weeks == 4
        assert settings.leads_edit_policy == LeadsEditPolicy.RECOMPUTE_SPEND
        assert settings.achieved_carryover == CarryoverPolicy.INDEX

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv('LEADS_EDIT_POLICY', 'recompute_cost_per_lead')
        monkeypatch.setenv('TAX_MULTIPLIER', '1.05')
        get_settings.cache_clear()

        settings = get_settings()
        assert settings.leads_edit_policy == LeadsEditPolicy.RECOMPUTE_COST_PER_LEAD
        assert settings.tax_multiplier == pytest.approx(1.05)

    def test_singleton(self) -> None:
        assert get_settings() is get_settings()


class TestProjectStore:

    def test_put_and_get(self, store, project_factory) -> None:
        project = project_factory(project_id=store.next_id())
        store.put(project)

        assert store.get(project.id) == project
        assert len(store) == 1

    def test_ids_increase(self, store) -> None:
        assert [store.next_id(), store.next_id()] == [1, 2]

    def test_put_replaces_whole_aggregate(self, store, project_factory) -> None:
        store.put(project_factory(project_id=1))
        store.put(project_factory(project_id=1, name='Renamed'))

        assert store.get(1).name == 'Renamed'
        assert len(store.list()) == 1

    def test_put_advances_next_id(self, store, project_factory) -> None:
        store.put(project_factory(project_id=5))
        assert store.next_id() == 6

    def test_missing_project(self, store) -> None:
        with pytest.raises(ProjectNotFoundError):
            store.get(42)
        with pytest.raises(ProjectNotFoundError):
            store.delete(42)

    def test_list_is_ordered_by_id(self, store, project_factory) -> None:
        store.put(project_factory(project_id=3))
        store.put(project_factory(project_id=1))
        assert [p.id for p in store.list()] == [1, 3]

    def test_delete(self, store, project_factory) -> None:
        store.put(project_factory(project_id=1))
        store.delete(1)
        assert len(store) == 0


class TestProjectLifecycle:

    def test_new_project_defaults(self) -> None:
        project = project_service.new_project(1, 'Skyline Towers', 'Asha')

        assert project.status == ProjectStatus.NA
        assert project.plan.inputs.digital_contribution_percent == 10
        assert project.plan.inputs.visit_to_booking_rate_percent == 5
        assert project.plan.inputs.lead_to_visit_rate_percent == 3
        assert project.plan.inputs.target_cost_per_lead == 2000
        assert project.plan.derived.total_budget == 0
        assert project.performance == []

    def test_update_details_keeps_unset_fields(self, project_factory) -> None:
        project = project_service.update_details(project_factory(), status=ProjectStatus.LIVE)

        assert project.status == ProjectStatus.LIVE
        assert project.name == 'Skyline Towers'

    def test_set_current_platforms(self, project_factory) -> None:
        platforms = [PlatformPerformance(name='Meta Main', spend=90000, leads=45)]
        project = project_service.set_current_platforms(project_factory(), platforms)
        assert project.current_platforms == platforms


class TestPlanningFlow:

    def test_edit_plan(self, project_factory) -> None:
        project = project_service.edit_plan(project_factory(), 'target_cost_per_lead', 5000)
        assert project.plan.derived.total_budget == 17361111

    def test_edit_plan_unknown_field(self, project_factory) -> None:
        with pytest.raises(UnknownFieldError):
            project_service.edit_plan(project_factory(), 'budget', 1)

    def test_preview_uses_settings_defaults(self, project_factory) -> None:
        rows = project_service.preview_weekly_plan(project_factory(), date(2025, 10, 8), settings=Settings())

        assert len(rows) == 13
        assert rows[0].week.start_date == date(2025, 10, 6)
        assert rows[0].leads == 289

    def test_preview_with_rows_defaults_week_count(self, project_factory) -> None:
        rows = [WeeklyDistributionRow(distribution_percent=50, visit_conversion_percent=3)] * 2
        targets = project_service.preview_weekly_plan(project_factory(), date(2025, 10, 6), rows=rows)

        assert len(targets) == 2
        assert targets[1].cumulative_leads == 3472

    def test_commit_then_edit_achieved(self, project_factory) -> None:
        project = project_service.commit_weekly(project_factory(), date(2025, 10, 6), settings=Settings())
        project = project_service.edit_achieved(project, 0, 'leads', 250)
        view = project_service.tracker_view(project, Settings())

        assert len(view.weeks) == 12
        assert view.weeks[0].achieved.leads == 250
        assert view.totals.target.leads == 289 * 12

    def test_recommit_carries_achieved_by_week_start(self, project_factory) -> None:
        settings = Settings(achieved_carryover=CarryoverPolicy.WEEK_START)
        project = project_service.commit_weekly(project_factory(), date(2025, 10, 6), settings=settings)
        project = project_service.edit_achieved(project, 1, 'spend', 7000)

        project = project_service.commit_weekly(project, date(2025, 10, 13), settings=settings)
        assert project.performance[0].achieved.spend == 7000


class TestForecastFlow:

    def test_add_edit_commit(self, project_factory) -> None:
        project = project_service.add_forecast_row(project_factory(), 'Google Search', Settings())
        row_id = project.forecast_rows[0].id

        project = project_service.edit_forecast_row(project, row_id, 'cost_per_lead', 2000, Settings())
        project = project_service.edit_forecast_row(project, row_id, 'spend', 100000, Settings())
        project = project_service.commit_forecast_rows(project, date(2025, 10, 6))

        assert project.forecast_rows[0].leads == 50
        assert project.performance[0].label == 'W1 (Forecast)'
        assert project.performance[0].target.spend == 100000

    def test_leads_policy_from_settings(self, project_factory) -> None:
        settings = Settings(leads_edit_policy=LeadsEditPolicy.RECOMPUTE_COST_PER_LEAD)
        project = project_service.add_forecast_row(project_factory(), 'Meta Main', settings)
        row_id = project.forecast_rows[0].id
        project = project_service.edit_forecast_row(project, row_id, 'spend', 100000, settings)
        project = project_service.edit_forecast_row(project, row_id, 'leads', 40, settings)

        assert project.forecast_rows[0].cost_per_lead == pytest.approx(2500)

    def test_seed_and_remove(self, project_factory) -> None:
        project = project_service.set_current_platforms(project_factory(), [
            PlatformPerformance(name='Meta Main', spend=90000, leads=45),
            PlatformPerformance(name='Taboola', spend=5000, leads=5),
        ])
        project = project_service.seed_forecast_from_platforms(project)
        taboola = next(row for row in project.forecast_rows if row.name == 'Taboola')
        project = project_service.remove_forecast_row(project, taboola.id)

        assert [row.name for row in project.forecast_rows] == ['Meta Main']

    def test_import_achieved(self, project_factory, sample_points) -> None:
        project = project_factory(performance=sample_points)
        project = project_service.import_achieved(project, [AchievedImportRecord(week_index=1, leads=9)])

        assert [p.achieved.leads for p in project.performance] == [0, 9, 0]
