"""
Funnel Planner Package.

Campaign business-plan tracking service. Expands a quarterly business target into
a funnel of sub-targets (revenue -> units -> visits -> leads -> budget), spreads
those targets over weeks, reconciles achieved performance against them and runs
a per-platform spend/lead simulator.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration, in-memory project store, and dependencies
    - models: Pydantic schemas, enums and domain exceptions
    - services: Funnel calculation services
"""

__version__ = "1.0.0"
