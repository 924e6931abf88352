from __future__ import annotations

from dataclasses import dataclass

HoldingKey = tuple[str, int, int]  # (holder, project_id, vintage_year)


@dataclass(frozen=True, slots=True)
class CreditHolding:
    holder: str
    project_id: int
    vintage_year: int
    balance: int = 0

    @property
    def key(self) -> HoldingKey:
        return (self.holder, self.project_id, self.vintage_year)
