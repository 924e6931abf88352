from __future__ import annotations

from typing import Protocol

from carbon_registry.models.project import Project


class ProjectRepo(Protocol):
    def get(self, project_id: int) -> Project | None: ...
    def add(self, project: Project) -> None: ...
    def save(self, project: Project) -> None: ...
    def list_by_owner(self, owner: str) -> list[Project]: ...


class InMemoryProjectRepo:
    def __init__(self) -> None:
        self._by_id: dict[int, Project] = {}

    def get(self, project_id: int) -> Project | None:
        return self._by_id.get(project_id)

    def add(self, project: Project) -> None:
        if project.id in self._by_id:
            raise ValueError("project id already exists")
        self._by_id[project.id] = project

    def save(self, project: Project) -> None:
        if project.id not in self._by_id:
            raise KeyError("project not found")
        self._by_id[project.id] = project

    def list_by_owner(self, owner: str) -> list[Project]:
        return [p for p in self._by_id.values() if p.owner == owner]
