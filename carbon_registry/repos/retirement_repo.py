from __future__ import annotations

from typing import Protocol

from carbon_registry.models.retirement import RetirementRecord


class RetirementRepo(Protocol):
    def get(self, retirement_id: int) -> RetirementRecord | None: ...
    def add(self, record: RetirementRecord) -> None: ...
    def save(self, record: RetirementRecord) -> None: ...
    def list_by_account(self, account: str) -> list[RetirementRecord]: ...


class InMemoryRetirementRepo:
    def __init__(self) -> None:
        self._by_id: dict[int, RetirementRecord] = {}

    def get(self, retirement_id: int) -> RetirementRecord | None:
        return self._by_id.get(retirement_id)

    def add(self, record: RetirementRecord) -> None:
        if record.id in self._by_id:
            raise ValueError("retirement id already exists")
        self._by_id[record.id] = record

    def save(self, record: RetirementRecord) -> None:
        if record.id not in self._by_id:
            raise KeyError("retirement not found")
        self._by_id[record.id] = record

    def list_by_account(self, account: str) -> list[RetirementRecord]:
        return [r for r in self._by_id.values() if r.account == account]
