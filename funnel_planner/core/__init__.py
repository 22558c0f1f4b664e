"""
Core infrastructure package for the Funnel Planner API.

Provides:
- Configuration management via pydantic-settings
- The in-memory project store
- FastAPI dependency injection utilities

Re-exports allow simplified imports such as:

    from funnel_planner.core import get_settings, StoreDep
"""

# =============================================================================
# Re-exports from funnel_planner.core.config
# =============================================================================
from funnel_planner.core.config import Settings, get_settings

# =============================================================================
# Re-exports from funnel_planner.core.store
# =============================================================================
from funnel_planner.core.store import ProjectStore, get_store

# =============================================================================
# Re-exports from funnel_planner.core.dependencies
# =============================================================================
from funnel_planner.core.dependencies import (
    get_settings_dependency,
    get_store_dependency,
    SettingsDep,
    StoreDep,
)


__all__ = [
    # Configuration
    'Settings',
    'get_settings',
    # Store
    'ProjectStore',
    'get_store',
    # Dependencies
    'get_settings_dependency',
    'get_store_dependency',
    'SettingsDep',
    'StoreDep',
]
