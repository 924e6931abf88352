"""Value-ledger account endpoints.

Deposits only exist on the in-memory value ledger used in dev and test;
a deployment wired to an external value-transfer backend answers 501.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit
from carbon_registry.services.errors import InvalidAmountError, NotAdminError
from carbon_registry.services.value_transfer import InMemoryValueLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/accounts", tags=["accounts"])


class DepositIn(BaseModel):
    amount: int


class AccountOut(BaseModel):
    account: str
    balance: int


def _in_memory_ledger(payments: object) -> InMemoryValueLedger:
    if not isinstance(payments, InMemoryValueLedger):
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="value ledger is external",
        )
    return payments


@router.post(
    "/{account}/deposit",
    response_model=AccountOut,
    dependencies=[Depends(require_rate_limit())],
)
def deposit(
    account: str,
    body: DepositIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> AccountOut:
    if not registry.is_admin(principal.account):
        logger.warning("Deposit denied: caller=%s is not an admin", principal.account)
        raise NotAdminError("admin privilege required")
    if body.amount <= 0:
        raise InvalidAmountError("amount must be positive")

    ledger = _in_memory_ledger(registry.payments)
    return AccountOut(account=account, balance=ledger.deposit(account, body.amount))


@router.get("/{account}", response_model=AccountOut)
def get_account(account: str, registry: RegistryDep) -> AccountOut:
    ledger = _in_memory_ledger(registry.payments)
    return AccountOut(account=account, balance=ledger.balance_of(account))
