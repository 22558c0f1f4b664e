"""
FastAPI dependency injection for the Funnel Planner API.

Provides:
- get_settings_dependency: the cached Settings singleton
- get_store_dependency: the process-wide ProjectStore
- SettingsDep / StoreDep: Annotated aliases for endpoint signatures

Tests override these through `app.dependency_overrides`:

    app.dependency_overrides[get_store_dependency] = lambda: ProjectStore()
"""

from typing import Annotated

from fastapi import Depends

from funnel_planner.core.config import Settings, get_settings
from funnel_planner.core.store import ProjectStore, get_store


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """Return the Settings singleton; a thin wrapper so tests can override it."""
    return get_settings()


# =============================================================================
# Store Dependency
# =============================================================================

def get_store_dependency() -> ProjectStore:
    return get_store()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

# Usage: async def endpoint(store: StoreDep)
StoreDep = Annotated[ProjectStore, Depends(get_store_dependency)]
