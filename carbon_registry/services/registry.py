"""Wiring for the six registry components.

All components share one set of repositories, one re-entrant lock and one
clock. Each write operation takes the lock for its whole
read-validate-write span, so calls are applied one at a time and a
rejected call never leaves partial state behind.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from carbon_registry.repos.batch_repo import InMemoryBatchRepo
from carbon_registry.repos.holding_repo import InMemoryHoldingRepo
from carbon_registry.repos.project_repo import InMemoryProjectRepo
from carbon_registry.repos.retirement_repo import InMemoryRetirementRepo
from carbon_registry.repos.sequence import IdSequence
from carbon_registry.repos.verification_repo import (
    InMemoryVerificationRepo,
    InMemoryVerifierRepo,
)
from carbon_registry.services.batch_manager import BatchManager
from carbon_registry.services.credit_ledger import CreditLedger
from carbon_registry.services.project_registry import ProjectRegistry
from carbon_registry.services.retirement_ledger import RetirementLedger
from carbon_registry.services.value_transfer import InMemoryValueLedger, ValueTransfer
from carbon_registry.services.verification_ledger import VerificationLedger
from carbon_registry.services.verifier_directory import AdminPolicy, VerifierDirectory


def wall_clock() -> int:
    return int(time.time())


@dataclass(frozen=True, slots=True)
class ConservationReport:
    """Both credit conservation laws for one project.

    issuance:    total == available + sum(batch.quantity)
    circulation: sum(batch.quantity - batch.remaining)
                 == sum(holdings) + retired
    """

    project_id: int
    total_credits: int
    available_credits: int
    retired_credits: int
    batched_credits: int
    sold_credits: int
    held_credits: int

    @property
    def issuance_balanced(self) -> bool:
        return self.total_credits == self.available_credits + self.batched_credits

    @property
    def circulation_balanced(self) -> bool:
        return self.sold_credits == self.held_credits + self.retired_credits

    @property
    def balanced(self) -> bool:
        return self.issuance_balanced and self.circulation_balanced


class CarbonRegistry:
    def __init__(
        self,
        *,
        is_admin: AdminPolicy,
        payments: ValueTransfer | None = None,
        clock: Callable[[], int] = wall_clock,
    ) -> None:
        self.lock = threading.RLock()
        self.payments = payments if payments is not None else InMemoryValueLedger()

        self._projects = InMemoryProjectRepo()
        self._verifications = InMemoryVerificationRepo()
        self._batches = InMemoryBatchRepo()
        self._holdings = InMemoryHoldingRepo()
        self._retirements = InMemoryRetirementRepo()

        self.projects = ProjectRegistry(
            self._projects, self._verifications, IdSequence(), self.lock, clock
        )
        self.verifiers = VerifierDirectory(
            InMemoryVerifierRepo(), is_admin, self.lock, clock
        )
        self.verifications = VerificationLedger(
            self._projects, self._verifications, self.verifiers, self.lock, clock
        )
        self.batches = BatchManager(
            self._projects, self._batches, IdSequence(), self.lock, clock
        )
        self.credits = CreditLedger(
            self._projects, self._batches, self._holdings, self.payments, self.lock
        )
        self.retirements = RetirementLedger(
            self._projects,
            self._holdings,
            self._retirements,
            IdSequence(),
            is_admin,
            self.lock,
            clock,
        )
        self.is_admin = is_admin

    def audit_project(self, project_id: int) -> ConservationReport:
        with self.lock:
            project = self.projects.get(project_id)
            batches = self._batches.list_for_project(project_id)
            holdings = self._holdings.list_for_project(project_id)
            return ConservationReport(
                project_id=project_id,
                total_credits=project.total_credits,
                available_credits=project.available_credits,
                retired_credits=project.retired_credits,
                batched_credits=sum(b.quantity for b in batches),
                sold_credits=sum(b.sold_quantity for b in batches),
                held_credits=sum(h.balance for h in holdings),
            )
