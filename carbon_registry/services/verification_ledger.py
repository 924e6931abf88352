from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from carbon_registry.core.metrics import CREDITS_ISSUED
from carbon_registry.models.verification import VerificationRecord
from carbon_registry.repos.project_repo import ProjectRepo
from carbon_registry.repos.verification_repo import VerificationRepo
from carbon_registry.services.errors import (
    EmptyFieldError,
    InvalidPeriodError,
    NotAuthorizedVerifierError,
    NotFoundError,
    ProjectNotPendingError,
    ZeroCreditsError,
)
from carbon_registry.services.verifier_directory import VerifierDirectory

logger = logging.getLogger(__name__)


class VerificationLedger:
    """Records verification events and issues credits to the project.

    Verification is one-shot: only a ``pending`` project can be verified,
    and a successful verification moves it to ``active`` for good. The
    per-project sequence still keys records so the (project, sequence)
    identity stays stable.
    """

    def __init__(
        self,
        projects: ProjectRepo,
        verifications: VerificationRepo,
        directory: VerifierDirectory,
        lock: threading.RLock,
        clock: Callable[[], int],
    ) -> None:
        self._projects = projects
        self._verifications = verifications
        self._directory = directory
        self._lock = lock
        self._clock = clock

    def verify(
        self,
        *,
        project_id: int,
        credits_issued: int,
        report_url: str,
        methodology: str,
        period_start: int,
        period_end: int,
        evidence: bytes,
        caller: str,
    ) -> int:
        """Verify a pending project. Returns the verification sequence number."""
        with self._lock:
            project = self._projects.get(project_id)
            if project is None:
                raise NotFoundError(f"project {project_id} not found")
            if not self._directory.is_active(caller):
                logger.warning(
                    "Rejected verification of project=%d by non-verifier=%s",
                    project_id,
                    caller,
                )
                raise NotAuthorizedVerifierError("caller is not an active verifier")
            if project.status != "pending":
                logger.warning(
                    "Rejected verification of project=%d in status=%s",
                    project_id,
                    project.status,
                )
                raise ProjectNotPendingError("project is not pending verification")
            if period_start > period_end:
                raise InvalidPeriodError("period_start must not exceed period_end")
            if credits_issued <= 0:
                raise ZeroCreditsError("credits_issued must be positive")
            if not methodology.strip():
                raise EmptyFieldError("methodology must be non-empty")

            now = self._clock()
            sequence = self._verifications.next_sequence(project_id)
            self._verifications.add(
                VerificationRecord(
                    project_id=project_id,
                    sequence=sequence,
                    verifier=caller,
                    timestamp=now,
                    credits_issued=credits_issued,
                    report_url=report_url,
                    methodology=methodology,
                    period_start=period_start,
                    period_end=period_end,
                )
            )
            self._projects.save(
                replace(
                    project,
                    verified=True,
                    status="active",
                    verification_data=evidence,
                    total_credits=project.total_credits + credits_issued,
                    available_credits=project.available_credits + credits_issued,
                )
            )

        CREDITS_ISSUED.inc(credits_issued)
        logger.info(
            "Verified project=%d seq=%d verifier=%s credits=%d",
            project_id,
            sequence,
            caller,
            credits_issued,
        )
        return sequence

    def get(self, project_id: int, sequence: int) -> VerificationRecord:
        record = self._verifications.get(project_id, sequence)
        if record is None:
            raise NotFoundError(
                f"verification {sequence} of project {project_id} not found"
            )
        return record

    def list_for_project(self, project_id: int) -> list[VerificationRecord]:
        if self._projects.get(project_id) is None:
            raise NotFoundError(f"project {project_id} not found")
        return self._verifications.list_for_project(project_id)
