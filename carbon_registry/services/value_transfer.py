"""Value-transfer collaborator used to settle purchases.

A purchase moves ``quantity * unit_price`` units of value from the buyer
to the project owner through exactly one ``transfer`` call. The transfer
is all-or-nothing: it either moves the full amount and returns True, or
moves nothing and returns False.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ValueTransfer(Protocol):
    def transfer(self, payer: str, payee: str, amount: int) -> bool: ...


class InMemoryValueLedger:
    """Single-process account balances for dev and tests.

    Accounts start at zero and are funded with ``deposit``.
    """

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}
        self._lock = threading.Lock()

    def deposit(self, account: str, amount: int) -> int:
        if amount <= 0:
            raise ValueError("deposit amount must be positive")
        with self._lock:
            self._balances[account] = self._balances.get(account, 0) + amount
            balance = self._balances[account]
        logger.info("Deposited %d to account=%s balance=%d", amount, account, balance)
        return balance

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def transfer(self, payer: str, payee: str, amount: int) -> bool:
        if amount <= 0:
            return False
        with self._lock:
            funds = self._balances.get(payer, 0)
            if funds < amount:
                logger.warning(
                    "Transfer of %d from account=%s declined, balance=%d",
                    amount,
                    payer,
                    funds,
                )
                return False
            self._balances[payer] = funds - amount
            self._balances[payee] = self._balances.get(payee, 0) + amount
        return True
