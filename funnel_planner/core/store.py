"""
In-memory project store.

Holds Project aggregates keyed by id. Writes replace the whole aggregate, so
every edit endpoint follows the same load -> transform -> put cycle and a
project never exists in a half-updated state.

The store is a process-wide singleton (see get_store). Tests get an isolated
instance by overriding the get_store dependency.
"""

import logging
import threading
from functools import lru_cache
from typing import Dict, List

from funnel_planner.models.exceptions import ProjectNotFoundError
from funnel_planner.models.schemas import Project


logger = logging.getLogger(__name__)


class ProjectStore:
    """Dictionary-backed repository of Project aggregates."""

    def __init__(self) -> None:
        self._projects: Dict[int, Project] = {}
        self._next_id: int = 1
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            project_id = self._next_id
            self._next_id += 1
            return project_id

    def get(self, project_id: int) -> Project:
        """
        Raises:
            ProjectNotFoundError: If no project has `project_id`.
        """
        try:
            return self._projects[project_id]
        except KeyError:
            raise ProjectNotFoundError(project_id) from None

    def put(self, project: Project) -> Project:
        with self._lock:
            self._projects[project.id] = project
            if project.id >= self._next_id:
                self._next_id = project.id + 1
        return project

    def list(self) -> List[Project]:
        return [self._projects[key] for key in sorted(self._projects)]

    def delete(self, project_id: int) -> None:
        with self._lock:
            if self._projects.pop(project_id, None) is None:
                raise ProjectNotFoundError(project_id)
        logger.info(f"Project {project_id} deleted")

    def __len__(self) -> int:
        return len(self._projects)


@lru_cache()
def get_store() -> ProjectStore:
    """Process-wide ProjectStore singleton."""
    return ProjectStore()
