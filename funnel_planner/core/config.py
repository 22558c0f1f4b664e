"""
Settings and environment management module for the Funnel Planner backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Defaults equal to the fixed constants of the funnel calculations
- Singleton pattern via @lru_cache for efficient access

Funnel Defaults:
- tax_multiplier: 1.18 (tax-inclusive view and all-in spend)
- mid_funnel_multiplier: 2 (mid-funnel visits = final visits x 2)
- default_week_count: 13 weeks per quarter, 12 of them active
- rolling_window_weeks: 4 (trailing cost-per-lead window)
- leads_edit_policy: what an edit to simulator leads recomputes
- achieved_carryover: how achieved values survive weekly plan regeneration

Usage:
    from funnel_planner.core.config import get_settings

    settings = get_settings()
    multiplier = settings.tax_multiplier
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from funnel_planner.models.enums import CarryoverPolicy, LeadsEditPolicy


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a default so the service starts without a .env file.
    Environment variable names are the upper-cased field names
    (e.g. TAX_MULTIPLIER=1.18, LEADS_EDIT_POLICY=recompute_cost_per_lead).

    Attributes:
        tax_multiplier: Surcharge factor of the tax-inclusive view.
        mid_funnel_multiplier: Fixed ratio between mid-funnel and final visits.
        default_week_count: Number of week windows generated for a quarter.
        default_active_weeks: Leading weeks active in a freshly generated plan.
        default_visit_conversion_percent: Weekly lead->visit rate when the plan has none.
        rolling_window_weeks: Trailing window of the rolling cost-per-lead.
        leads_edit_policy: Simulator policy for edits to the leads field.
        achieved_carryover: Weekly plan regeneration carry-over policy.
        default_stage_a_percent: Lead -> proposed appointment rate of new simulator rows.
        default_stage_b_percent: Proposed -> appointment done rate of new simulator rows.
        default_stage_c_percent: Appointment -> walk-in rate of new simulator rows.
        baseline_stage_c_percent: Appointment -> walk-in rate of rows seeded from platforms.
        advisory_recent_weeks: Weeks of history exported in the advisory snapshot.
        log_level: Root logging level.
        cors_origins: Origins allowed by the CORS middleware.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=False,
    )

    # =========================================================================
    # Funnel Constants
    # =========================================================================

    # All-in agency billing vs net regional spend
    tax_multiplier: float = 1.18

    # AP = AD * 2
    mid_funnel_multiplier: int = 2

    # =========================================================================
    # Weekly Planning Defaults
    # =========================================================================

    default_week_count: int = 13
    default_active_weeks: int = 12
    default_visit_conversion_percent: float = 3.0

    # =========================================================================
    # Performance Tracker
    # =========================================================================

    rolling_window_weeks: int = 4
    achieved_carryover: CarryoverPolicy = CarryoverPolicy.INDEX

    # =========================================================================
    # Platform Forecast Simulator
    # =========================================================================

    leads_edit_policy: LeadsEditPolicy = LeadsEditPolicy.RECOMPUTE_SPEND
    default_stage_a_percent: float = 50.0
    default_stage_b_percent: float = 40.0
    default_stage_c_percent: float = 100.0

    # Rows seeded from observed performance assume AP = AD x 2
    baseline_stage_c_percent: float = 50.0

    # =========================================================================
    # Advisory Snapshot
    # =========================================================================

    advisory_recent_weeks: int = 4

    # =========================================================================
    # Application
    # =========================================================================

    log_level: str = 'INFO'
    cors_origins: List[str] = [
        'http://localhost:3000',
        'http://127.0.0.1:3000',
    ]


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns:
        Settings: The application settings instance.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid value
            (e.g. LEADS_EDIT_POLICY=unknown).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
