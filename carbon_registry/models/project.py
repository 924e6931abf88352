from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

ProjectCategory = Literal[
    "renewable-energy",
    "forestry",
    "methane-capture",
    "energy-efficiency",
    "direct-air-capture",
    "soil-carbon",
    "blue-carbon",
    "waste-management",
]
ProjectStatus = Literal["pending", "active", "completed", "suspended"]

PROJECT_CATEGORIES: frozenset[str] = frozenset(get_args(ProjectCategory))


@dataclass(frozen=True, slots=True)
class Project:
    """An offset project and its credit counters.

    total_credits only grows (by verification); available_credits shrinks
    as batches are carved out; retired_credits grows by retirement.
    """

    id: int
    name: str
    description: str
    location: str
    category: ProjectCategory
    start: int
    end: int
    owner: str
    registry_url: str
    created_at: int
    status: ProjectStatus = "pending"
    verified: bool = False
    total_credits: int = 0
    available_credits: int = 0
    retired_credits: int = 0
    verification_data: bytes | None = None

    @staticmethod
    def new(
        *,
        id: int,
        name: str,
        description: str,
        location: str,
        category: ProjectCategory,
        start: int,
        end: int,
        owner: str,
        registry_url: str,
        created_at: int,
    ) -> Project:
        return Project(
            id=id,
            name=name,
            description=description,
            location=location,
            category=category,
            start=start,
            end=end,
            owner=owner,
            registry_url=registry_url,
            created_at=created_at,
        )

    @property
    def is_active(self) -> bool:
        return self.status == "active"
