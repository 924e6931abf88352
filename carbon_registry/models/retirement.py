from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetirementRecord:
    """Auditable record of credits permanently removed from circulation.

    batch_id is informational: holdings are pooled per (project, vintage),
    so the originating batch is not known and is stored as None.
    certificate_url may be set exactly once after creation.
    """

    id: int
    account: str
    project_id: int
    vintage_year: int
    quantity: int
    reason: str
    timestamp: int
    beneficiary: str | None = None
    batch_id: int | None = None
    certificate_url: str | None = None

    @property
    def has_certificate(self) -> bool:
        return self.certificate_url is not None
