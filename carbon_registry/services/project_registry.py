from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from carbon_registry.core.metrics import PROJECTS_REGISTERED
from carbon_registry.models.project import PROJECT_CATEGORIES, Project
from carbon_registry.repos.project_repo import ProjectRepo
from carbon_registry.repos.sequence import IdSequence
from carbon_registry.repos.verification_repo import VerificationRepo
from carbon_registry.services.errors import (
    EmptyFieldError,
    InvalidCategoryError,
    InvalidDateRangeError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """Owns project metadata and lifecycle status."""

    def __init__(
        self,
        projects: ProjectRepo,
        verifications: VerificationRepo,
        ids: IdSequence,
        lock: threading.RLock,
        clock: Callable[[], int],
    ) -> None:
        self._projects = projects
        self._verifications = verifications
        self._ids = ids
        self._lock = lock
        self._clock = clock

    def register(
        self,
        *,
        name: str,
        description: str,
        location: str,
        category: str,
        start: int,
        end: int,
        registry_url: str,
        caller: str,
    ) -> int:
        if category not in PROJECT_CATEGORIES:
            logger.warning("Rejected project with category=%r", category)
            raise InvalidCategoryError(f"unsupported category {category!r}")
        if start >= end:
            logger.warning("Rejected project with start=%d end=%d", start, end)
            raise InvalidDateRangeError("start must be before end")
        if not name.strip():
            raise EmptyFieldError("name must be non-empty")
        if not location.strip():
            raise EmptyFieldError("location must be non-empty")

        with self._lock:
            project = Project.new(
                id=self._ids.next(),
                name=name,
                description=description,
                location=location,
                category=category,  # type: ignore[arg-type]
                start=start,
                end=end,
                owner=caller,
                registry_url=registry_url,
                created_at=self._clock(),
            )
            self._projects.add(project)
            self._verifications.init_sequence(project.id)

        PROJECTS_REGISTERED.labels(category=category).inc()
        logger.info(
            "Registered project id=%d owner=%s category=%s",
            project.id,
            caller,
            category,
        )
        return project.id

    def get(self, project_id: int) -> Project:
        project = self._projects.get(project_id)
        if project is None:
            raise NotFoundError(f"project {project_id} not found")
        return project

    def list_by_owner(self, owner: str) -> list[Project]:
        return sorted(self._projects.list_by_owner(owner), key=lambda p: p.id)
