from __future__ import annotations

import logging
import threading
from dataclasses import replace

from carbon_registry.core.metrics import CREDITS_PURCHASED
from carbon_registry.models.holding import CreditHolding
from carbon_registry.repos.batch_repo import BatchRepo
from carbon_registry.repos.holding_repo import HoldingRepo
from carbon_registry.repos.project_repo import ProjectRepo
from carbon_registry.services.errors import (
    BatchNotAvailableError,
    InsufficientBalanceError,
    InsufficientRemainingError,
    InvalidQuantityError,
    NoHoldingError,
    NotFoundError,
    PaymentFailedError,
)
from carbon_registry.services.value_transfer import ValueTransfer

logger = logging.getLogger(__name__)


class CreditLedger:
    """Per-account credit balances keyed by (holder, project, vintage)."""

    def __init__(
        self,
        projects: ProjectRepo,
        batches: BatchRepo,
        holdings: HoldingRepo,
        payments: ValueTransfer,
        lock: threading.RLock,
    ) -> None:
        self._projects = projects
        self._batches = batches
        self._holdings = holdings
        self._payments = payments
        self._lock = lock

    def _credit(self, holder: str, project_id: int, vintage_year: int, amount: int) -> None:
        key = (holder, project_id, vintage_year)
        holding = self._holdings.get(key) or CreditHolding(
            holder=holder, project_id=project_id, vintage_year=vintage_year
        )
        self._holdings.save(replace(holding, balance=holding.balance + amount))

    def purchase(self, *, batch_id: int, quantity: int, buyer: str) -> None:
        with self._lock:
            batch = self._batches.get(batch_id)
            if batch is None:
                raise NotFoundError(f"batch {batch_id} not found")
            if batch.status != "available":
                logger.warning(
                    "Rejected purchase from batch=%d in status=%s", batch_id, batch.status
                )
                raise BatchNotAvailableError(f"batch {batch_id} is {batch.status}")
            if quantity <= 0:
                raise InvalidQuantityError("quantity must be positive")
            if batch.remaining < quantity:
                logger.warning(
                    "Rejected purchase of %d from batch=%d with remaining=%d",
                    quantity,
                    batch_id,
                    batch.remaining,
                )
                raise InsufficientRemainingError(
                    f"only {batch.remaining} credits remain in batch {batch_id}"
                )
            project = self._projects.get(batch.project_id)
            if project is None:
                raise NotFoundError(f"project {batch.project_id} not found")

            # Payment settles before any ledger write so a decline leaves
            # batch and holdings untouched.
            amount = quantity * batch.unit_price
            if not self._payments.transfer(buyer, project.owner, amount):
                logger.warning(
                    "Payment of %d from buyer=%s for batch=%d failed",
                    amount,
                    buyer,
                    batch_id,
                )
                raise PaymentFailedError("value transfer was declined")

            remaining = batch.remaining - quantity
            self._batches.save(
                replace(
                    batch,
                    remaining=remaining,
                    status="sold" if remaining == 0 else "available",
                )
            )
            self._credit(buyer, batch.project_id, batch.vintage_year, quantity)

        CREDITS_PURCHASED.inc(quantity)
        logger.info(
            "Purchase batch=%d quantity=%d buyer=%s amount=%d remaining=%d",
            batch_id,
            quantity,
            buyer,
            amount,
            remaining,
        )

    def transfer(
        self,
        *,
        project_id: int,
        vintage_year: int,
        recipient: str,
        quantity: int,
        sender: str,
    ) -> None:
        if quantity <= 0:
            raise InvalidQuantityError("quantity must be positive")

        with self._lock:
            holding = self._holdings.get((sender, project_id, vintage_year))
            if holding is None:
                logger.warning(
                    "Rejected transfer by %s: no holding project=%d vintage=%d",
                    sender,
                    project_id,
                    vintage_year,
                )
                raise NoHoldingError("sender holds no credits for this project/vintage")
            if holding.balance < quantity:
                logger.warning(
                    "Rejected transfer of %d by sender=%s with balance=%d",
                    quantity,
                    sender,
                    holding.balance,
                )
                raise InsufficientBalanceError(
                    f"balance {holding.balance} is below {quantity}"
                )
            self._holdings.save(replace(holding, balance=holding.balance - quantity))
            # Read the recipient after the debit so a self-transfer nets to zero
            self._credit(recipient, project_id, vintage_year, quantity)

        logger.info(
            "Transferred %d of project=%d vintage=%d from %s to %s",
            quantity,
            project_id,
            vintage_year,
            sender,
            recipient,
        )

    def balance(self, holder: str, project_id: int, vintage_year: int) -> int:
        holding = self._holdings.get((holder, project_id, vintage_year))
        return holding.balance if holding is not None else 0

    def holdings_of(self, holder: str) -> list[CreditHolding]:
        held = [h for h in self._holdings.list_by_holder(holder) if h.balance > 0]
        return sorted(held, key=lambda h: (h.project_id, h.vintage_year))
