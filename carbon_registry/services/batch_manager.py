from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from carbon_registry.models.batch import MIN_VINTAGE_YEAR, CreditBatch
from carbon_registry.repos.batch_repo import BatchRepo
from carbon_registry.repos.project_repo import ProjectRepo
from carbon_registry.repos.sequence import IdSequence
from carbon_registry.services.errors import (
    InsufficientAvailableCreditsError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidVintageError,
    NotFoundError,
    NotOwnerError,
    NotVerifiedError,
    ProjectInactiveError,
)

logger = logging.getLogger(__name__)


class BatchManager:
    """Carves a verified project's available credits into sellable lots."""

    def __init__(
        self,
        projects: ProjectRepo,
        batches: BatchRepo,
        ids: IdSequence,
        lock: threading.RLock,
        clock: Callable[[], int],
    ) -> None:
        self._projects = projects
        self._batches = batches
        self._ids = ids
        self._lock = lock
        self._clock = clock

    def create_batch(
        self,
        *,
        project_id: int,
        vintage_year: int,
        quantity: int,
        unit_price: int,
        caller: str,
    ) -> int:
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                raise NotFoundError(f"project {project_id} not found")
            if project.owner != caller:
                logger.warning(
                    "Rejected batch on project=%d by non-owner=%s", project_id, caller
                )
                raise NotOwnerError("only the project owner can create batches")
            if not project.verified:
                logger.warning("Rejected batch on unverified project=%d", project_id)
                raise NotVerifiedError("project has not been verified")
            if not project.is_active:
                logger.warning(
                    "Rejected batch on project=%d in status=%s", project_id, project.status
                )
                raise ProjectInactiveError(f"project status is {project.status}")
            if quantity <= 0:
                raise InvalidQuantityError("quantity must be positive")
            if project.available_credits < quantity:
                logger.warning(
                    "Rejected batch of %d on project=%d with available=%d",
                    quantity,
                    project_id,
                    project.available_credits,
                )
                raise InsufficientAvailableCreditsError(
                    f"only {project.available_credits} credits available"
                )
            if unit_price <= 0:
                raise InvalidPriceError("unit_price must be positive")
            if vintage_year < MIN_VINTAGE_YEAR:
                raise InvalidVintageError(
                    f"vintage_year must be at least {MIN_VINTAGE_YEAR}"
                )

            batch = CreditBatch.new(
                id=self._ids.next(),
                project_id=project_id,
                vintage_year=vintage_year,
                quantity=quantity,
                unit_price=unit_price,
                created_at=self._clock(),
            )
            self._batches.add(batch)
            self._projects.save(
                replace(project, available_credits=project.available_credits - quantity)
            )

        logger.info(
            "Created batch id=%d project=%d vintage=%d quantity=%d price=%d",
            batch.id,
            project_id,
            vintage_year,
            quantity,
            unit_price,
        )
        return batch.id

    def get(self, batch_id: int) -> CreditBatch:
        batch = self._batches.get(batch_id)
        if batch is None:
            raise NotFoundError(f"batch {batch_id} not found")
        return batch

    def list_for_project(self, project_id: int) -> list[CreditBatch]:
        if self._projects.get(project_id) is None:
            raise NotFoundError(f"project {project_id} not found")
        return sorted(self._batches.list_for_project(project_id), key=lambda b: b.id)
