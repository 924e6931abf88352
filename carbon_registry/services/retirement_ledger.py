from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from carbon_registry.core.metrics import CREDITS_RETIRED
from carbon_registry.models.retirement import RetirementRecord
from carbon_registry.repos.holding_repo import HoldingRepo
from carbon_registry.repos.project_repo import ProjectRepo
from carbon_registry.repos.retirement_repo import RetirementRepo
from carbon_registry.repos.sequence import IdSequence
from carbon_registry.services.errors import (
    CertificateAlreadySetError,
    EmptyFieldError,
    EmptyReasonError,
    EmptyUrlError,
    InsufficientBalanceError,
    InvalidQuantityError,
    NoHoldingError,
    NotAdminError,
    NotFoundError,
    SelfBeneficiaryError,
)
from carbon_registry.services.verifier_directory import AdminPolicy

logger = logging.getLogger(__name__)


class RetirementLedger:
    """Permanently removes credits from circulation with an audit record."""

    def __init__(
        self,
        projects: ProjectRepo,
        holdings: HoldingRepo,
        retirements: RetirementRepo,
        ids: IdSequence,
        is_admin: AdminPolicy,
        lock: threading.RLock,
        clock: Callable[[], int],
    ) -> None:
        self._projects = projects
        self._holdings = holdings
        self._retirements = retirements
        self._ids = ids
        self._is_admin = is_admin
        self._lock = lock
        self._clock = clock

    def retire(
        self,
        *,
        project_id: int,
        vintage_year: int,
        quantity: int,
        reason: str,
        beneficiary: str | None,
        caller: str,
    ) -> int:
        if quantity <= 0:
            raise InvalidQuantityError("quantity must be positive")
        if not reason.strip():
            raise EmptyReasonError("reason must be non-empty")
        if beneficiary is not None:
            if not beneficiary.strip():
                raise EmptyFieldError("beneficiary must be non-empty when given")
            if beneficiary == caller:
                raise SelfBeneficiaryError("beneficiary must differ from the caller")

        with self._lock:
            holding = self._holdings.get((caller, project_id, vintage_year))
            if holding is None:
                logger.warning(
                    "Rejected retirement by %s: no holding project=%d vintage=%d",
                    caller,
                    project_id,
                    vintage_year,
                )
                raise NoHoldingError("caller holds no credits for this project/vintage")
            if holding.balance < quantity:
                logger.warning(
                    "Rejected retirement of %d by account=%s with balance=%d",
                    quantity,
                    caller,
                    holding.balance,
                )
                raise InsufficientBalanceError(
                    f"balance {holding.balance} is below {quantity}"
                )
            project = self._projects.get(project_id)
            if project is None:
                raise NotFoundError(f"project {project_id} not found")

            record = RetirementRecord(
                id=self._ids.next(),
                account=caller,
                project_id=project_id,
                vintage_year=vintage_year,
                quantity=quantity,
                reason=reason,
                timestamp=self._clock(),
                beneficiary=beneficiary,
            )
            self._holdings.save(replace(holding, balance=holding.balance - quantity))
            self._projects.save(
                replace(project, retired_credits=project.retired_credits + quantity)
            )
            self._retirements.add(record)

        CREDITS_RETIRED.inc(quantity)
        logger.info(
            "Retired id=%d account=%s project=%d vintage=%d quantity=%d",
            record.id,
            caller,
            project_id,
            vintage_year,
            quantity,
        )
        return record.id

    def issue_certificate(self, *, retirement_id: int, url: str, caller: str) -> None:
        """Attach a certificate URL to a retirement. Succeeds at most once."""
        if not self._is_admin(caller):
            logger.warning("Access denied: caller=%s is not an admin", caller)
            raise NotAdminError("admin privilege required")

        with self._lock:
            record = self._retirements.get(retirement_id)
            if record is None:
                raise NotFoundError(f"retirement {retirement_id} not found")
            if record.has_certificate:
                logger.warning(
                    "Rejected second certificate for retirement=%d", retirement_id
                )
                raise CertificateAlreadySetError("certificate already issued")
            if not url.strip():
                raise EmptyUrlError("certificate url must be non-empty")
            self._retirements.save(replace(record, certificate_url=url))

        logger.info("Issued certificate for retirement=%d by %s", retirement_id, caller)

    def get(self, retirement_id: int) -> RetirementRecord:
        record = self._retirements.get(retirement_id)
        if record is None:
            raise NotFoundError(f"retirement {retirement_id} not found")
        return record

    def list_by_account(self, account: str) -> list[RetirementRecord]:
        return sorted(self._retirements.list_by_account(account), key=lambda r: r.id)
