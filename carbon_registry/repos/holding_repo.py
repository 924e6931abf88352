from __future__ import annotations

from typing import Protocol

from carbon_registry.models.holding import CreditHolding, HoldingKey


class HoldingRepo(Protocol):
    def get(self, key: HoldingKey) -> CreditHolding | None: ...
    def save(self, holding: CreditHolding) -> None: ...
    def list_by_holder(self, holder: str) -> list[CreditHolding]: ...
    def list_for_project(self, project_id: int) -> list[CreditHolding]: ...


class InMemoryHoldingRepo:
    """Holdings keyed by (holder, project_id, vintage_year).

    Holdings that drop to zero are kept; a zero balance is still a record
    that the account once held the pair.
    """

    def __init__(self) -> None:
        self._store: dict[HoldingKey, CreditHolding] = {}

    def get(self, key: HoldingKey) -> CreditHolding | None:
        return self._store.get(key)

    def save(self, holding: CreditHolding) -> None:
        if holding.balance < 0:
            raise ValueError("holding balance cannot be negative")
        self._store[holding.key] = holding

    def list_by_holder(self, holder: str) -> list[CreditHolding]:
        return [h for h in self._store.values() if h.holder == holder]

    def list_for_project(self, project_id: int) -> list[CreditHolding]:
        return [h for h in self._store.values() if h.project_id == project_id]
