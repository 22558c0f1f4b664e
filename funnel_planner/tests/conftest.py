"""
Pytest configuration and shared fixtures for the Funnel Planner tests.

Provides:
- Custom markers (api, slow)
- A reference quarterly plan whose derivation is known by hand
- Hand-built tracked weeks for tracker and dashboard tests
- Project factories
- A settings cache reset so environment overrides never leak between tests

Dependencies:
- pytest
- pytest-asyncio (API tests)
- httpx (ASGI test client)
- pandas (import frame tests)
"""

from datetime import date, timedelta
from typing import Callable, Generator, List

import pytest

from funnel_planner.core.config import get_settings
from funnel_planner.core.store import ProjectStore
from funnel_planner.models import (
    PerformanceMetrics,
    Project,
    QuarterlyPlanInputs,
    WeeklyPerformancePoint,
    WeekWindow,
)
from funnel_planner.services.quarterly_plan import build_quarterly_plan


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Register custom markers.

    - api: tests exercising the FastAPI application over ASGI
    - slow: tests over long week sequences (deselect with -m "not slow")
    """
    config.addinivalue_line('markers', 'api: marks tests exercising the HTTP API')
    config.addinivalue_line('markers', 'slow: marks tests as slow (deselect with -m "not slow")')


# ============================================================
# SETTINGS
# ============================================================

@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Drop the cached Settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# QUARTERLY PLAN FIXTURES
# ============================================================

@pytest.fixture
def sample_plan_inputs() -> QuarterlyPlanInputs:
    """
    Reference plan:

        revenue 350 x 12.5%      = 43.75
        units   43.75 / 7        = 6.25
        visits  6.25 / 6%        = 104.17  -> 104
        leads   104.17 / 3%      = 3472.22 -> 3472
        budget  3472.22 x 4819   = 16,732,638.9 -> 16,732,639
    """
    return QuarterlyPlanInputs(
        overall_business_value=350,
        digital_contribution_percent=12.5,
        average_ticket_size=7,
        visit_to_booking_rate_percent=6.0,
        lead_to_visit_rate_percent=3.0,
        target_cost_per_lead=4819,
    )


@pytest.fixture
def sample_plan(sample_plan_inputs):
    return build_quarterly_plan(sample_plan_inputs)


# ============================================================
# TRACKED WEEK FIXTURES
# ============================================================

def make_point(
    index: int,
    start: date,
    target: PerformanceMetrics = None,
    achieved: PerformanceMetrics = None,
    label: str = None,
) -> WeeklyPerformancePoint:
    """Build a tracked week starting on `start`."""
    return WeeklyPerformancePoint(
        week=WeekWindow(index=index, start_date=start, end_date=start + timedelta(days=6)),
        label=label or f"W{index + 1}",
        target=target or PerformanceMetrics(),
        achieved=achieved or PerformanceMetrics(),
    )


@pytest.fixture
def quarter_start() -> date:
    # A Monday
    return date(2025, 10, 6)


@pytest.fixture
def sample_points(quarter_start) -> List[WeeklyPerformancePoint]:
    """
    Three tracked weeks:

        W1 target 100 leads / 50,000 spend; achieved 80 leads, 20 mid, 10 final, 40,000 spend
        W2 target 100 leads / 50,000 spend; achieved 0 leads, 10,000 spend
        W3 target 100 leads / 50,000 spend; achieved 120 leads, 30 mid, 15 final, 60,000 spend
    """
    target = PerformanceMetrics(leads=100, mid_funnel_visits=6, final_visits=3, spend=50000)
    return [
        make_point(0, quarter_start, target, PerformanceMetrics(
            leads=80, mid_funnel_visits=20, final_visits=10, spend=40000,
        )),
        make_point(1, quarter_start + timedelta(weeks=1), target, PerformanceMetrics(
            leads=0, mid_funnel_visits=0, final_visits=0, spend=10000,
        )),
        make_point(2, quarter_start + timedelta(weeks=2), target, PerformanceMetrics(
            leads=120, mid_funnel_visits=30, final_visits=15, spend=60000,
        )),
    ]


# ============================================================
# PROJECT FIXTURES
# ============================================================

@pytest.fixture
def project_factory(sample_plan) -> Callable[..., Project]:
    """Factory for projects with the reference plan."""

    def _make(
        project_id: int = 1,
        name: str = 'Skyline Towers',
        poc: str = 'Asha',
        performance: List[WeeklyPerformancePoint] = None,
    ) -> Project:
        return Project(
            id=project_id,
            name=name,
            poc=poc,
            plan=sample_plan.model_copy(deep=True),
            performance=performance or [],
        )

    return _make


@pytest.fixture
def store() -> ProjectStore:
    """An empty, isolated project store."""
    return ProjectStore()
