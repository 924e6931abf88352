from __future__ import annotations

from typing import Protocol

from carbon_registry.models.batch import CreditBatch


class BatchRepo(Protocol):
    def get(self, batch_id: int) -> CreditBatch | None: ...
    def add(self, batch: CreditBatch) -> None: ...
    def save(self, batch: CreditBatch) -> None: ...
    def list_for_project(self, project_id: int) -> list[CreditBatch]: ...


class InMemoryBatchRepo:
    def __init__(self) -> None:
        self._by_id: dict[int, CreditBatch] = {}

    def get(self, batch_id: int) -> CreditBatch | None:
        return self._by_id.get(batch_id)

    def add(self, batch: CreditBatch) -> None:
        if batch.id in self._by_id:
            raise ValueError("batch id already exists")
        self._by_id[batch.id] = batch

    def save(self, batch: CreditBatch) -> None:
        if batch.id not in self._by_id:
            raise KeyError("batch not found")
        self._by_id[batch.id] = batch

    def list_for_project(self, project_id: int) -> list[CreditBatch]:
        return [b for b in self._by_id.values() if b.project_id == project_id]
