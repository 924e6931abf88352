from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

VerifierStatus = Literal["active", "inactive"]


@dataclass(frozen=True, slots=True)
class Verifier:
    """An account permitted (or formerly permitted) to verify projects."""

    id: str
    name: str
    credentials: str
    authorized_by: str
    authorized_at: int
    status: VerifierStatus = "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"


@dataclass(frozen=True, slots=True)
class VerificationRecord:
    """One third-party verification event. Never mutated once stored."""

    project_id: int
    sequence: int  # per-project, starts at 0
    verifier: str
    timestamp: int
    credits_issued: int
    report_url: str
    methodology: str
    period_start: int
    period_end: int

    @property
    def key(self) -> tuple[int, int]:
        return (self.project_id, self.sequence)
