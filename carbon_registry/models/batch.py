from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# "retired" is reserved for batch-level retirement; nothing sets it yet.
BatchStatus = Literal["available", "sold", "retired"]

MIN_VINTAGE_YEAR = 2020


@dataclass(frozen=True, slots=True)
class CreditBatch:
    """A sellable lot carved out of a project's available credits."""

    id: int
    project_id: int
    vintage_year: int
    quantity: int
    remaining: int
    unit_price: int
    created_at: int
    status: BatchStatus = "available"

    @staticmethod
    def new(
        *,
        id: int,
        project_id: int,
        vintage_year: int,
        quantity: int,
        unit_price: int,
        created_at: int,
    ) -> CreditBatch:
        return CreditBatch(
            id=id,
            project_id=project_id,
            vintage_year=vintage_year,
            quantity=quantity,
            remaining=quantity,
            unit_price=unit_price,
            created_at=created_at,
        )

    @property
    def sold_quantity(self) -> int:
        return self.quantity - self.remaining
