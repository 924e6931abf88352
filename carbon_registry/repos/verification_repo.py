from __future__ import annotations

from typing import Protocol

from carbon_registry.models.verification import VerificationRecord, Verifier
from carbon_registry.repos.sequence import IdSequence


class VerificationRepo(Protocol):
    def init_sequence(self, project_id: int) -> None: ...
    def next_sequence(self, project_id: int) -> int: ...
    def get(self, project_id: int, sequence: int) -> VerificationRecord | None: ...
    def add(self, record: VerificationRecord) -> None: ...
    def list_for_project(self, project_id: int) -> list[VerificationRecord]: ...


class InMemoryVerificationRepo:
    """Append-only verification records plus one sequence per project."""

    def __init__(self) -> None:
        self._records: dict[tuple[int, int], VerificationRecord] = {}
        self._sequences: dict[int, IdSequence] = {}

    def init_sequence(self, project_id: int) -> None:
        self._sequences.setdefault(project_id, IdSequence())

    def next_sequence(self, project_id: int) -> int:
        return self._sequences.setdefault(project_id, IdSequence()).next()

    def get(self, project_id: int, sequence: int) -> VerificationRecord | None:
        return self._records.get((project_id, sequence))

    def add(self, record: VerificationRecord) -> None:
        if record.key in self._records:
            raise ValueError("verification record already exists")
        self._records[record.key] = record

    def list_for_project(self, project_id: int) -> list[VerificationRecord]:
        records = [r for r in self._records.values() if r.project_id == project_id]
        return sorted(records, key=lambda r: r.sequence)


class VerifierRepo(Protocol):
    def get(self, verifier_id: str) -> Verifier | None: ...
    def upsert(self, verifier: Verifier) -> None: ...


class InMemoryVerifierRepo:
    def __init__(self) -> None:
        self._by_id: dict[str, Verifier] = {}

    def get(self, verifier_id: str) -> Verifier | None:
        return self._by_id.get(verifier_id)

    def upsert(self, verifier: Verifier) -> None:
        self._by_id[verifier.id] = verifier
