from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit

router = APIRouter(prefix="/v1/holdings", tags=["holdings"])


class TransferIn(BaseModel):
    project_id: int
    vintage_year: int
    recipient: str
    quantity: int


class HoldingOut(BaseModel):
    holder: str
    project_id: int
    vintage_year: int
    balance: int


@router.post(
    "/transfer",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_rate_limit())],
)
def transfer(body: TransferIn, principal: PrincipalDep, registry: RegistryDep) -> None:
    registry.credits.transfer(
        project_id=body.project_id,
        vintage_year=body.vintage_year,
        recipient=body.recipient,
        quantity=body.quantity,
        sender=principal.account,
    )


@router.get("/{holder}", response_model=list[HoldingOut])
def list_holdings(holder: str, registry: RegistryDep) -> list[HoldingOut]:
    return [
        HoldingOut(
            holder=h.holder,
            project_id=h.project_id,
            vintage_year=h.vintage_year,
            balance=h.balance,
        )
        for h in registry.credits.holdings_of(holder)
    ]


@router.get("/{holder}/{project_id}/{vintage_year}", response_model=HoldingOut)
def get_balance(
    holder: str, project_id: int, vintage_year: int, registry: RegistryDep
) -> HoldingOut:
    """Zero when the holder never held the pair; never 404s."""
    return HoldingOut(
        holder=holder,
        project_id=project_id,
        vintage_year=vintage_year,
        balance=registry.credits.balance(holder, project_id, vintage_year),
    )
