"""
Domain exceptions raised by the Funnel Planner service layer.

The calculation core itself never raises for numeric reasons (safe division,
coercion to 0). These cover structural errors only: unknown aggregates, rows
or fields. API routers translate them into HTTP errors.
"""


class FunnelPlannerError(Exception):
    """Base class for Funnel Planner domain errors."""


class ProjectNotFoundError(FunnelPlannerError):
    """No project with the requested id exists in the store."""

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class PlatformRowNotFoundError(FunnelPlannerError):
    """No simulator row with the requested id exists on the project."""

    def __init__(self, row_id: str):
        self.row_id = row_id
        super().__init__(f"Platform row '{row_id}' not found")


class UnknownFieldError(FunnelPlannerError):
    """An edit named a field that is not editable on the target record."""

    def __init__(self, field: str, record: str):
        self.field = field
        self.record = record
        super().__init__(f"Unknown {record} field '{field}'")
