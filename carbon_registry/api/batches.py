from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit
from carbon_registry.models.batch import CreditBatch

router = APIRouter(tags=["batches"])


class BatchCreateIn(BaseModel):
    project_id: int
    vintage_year: int
    quantity: int
    unit_price: int


class BatchOut(BaseModel):
    id: int
    project_id: int
    vintage_year: int
    quantity: int
    remaining: int
    unit_price: int
    created_at: int
    status: str


class CreatedOut(BaseModel):
    id: int


class PurchaseIn(BaseModel):
    quantity: int


def _batch_out(b: CreditBatch) -> BatchOut:
    return BatchOut(
        id=b.id,
        project_id=b.project_id,
        vintage_year=b.vintage_year,
        quantity=b.quantity,
        remaining=b.remaining,
        unit_price=b.unit_price,
        created_at=b.created_at,
        status=b.status,
    )


@router.post(
    "/v1/batches",
    response_model=CreatedOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_rate_limit())],
)
def create_batch(
    body: BatchCreateIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> CreatedOut:
    """Carve a lot out of the project's available credits. Owner only."""
    batch_id = registry.batches.create_batch(
        project_id=body.project_id,
        vintage_year=body.vintage_year,
        quantity=body.quantity,
        unit_price=body.unit_price,
        caller=principal.account,
    )
    return CreatedOut(id=batch_id)


@router.get("/v1/batches/{batch_id}", response_model=BatchOut)
def get_batch(batch_id: int, registry: RegistryDep) -> BatchOut:
    return _batch_out(registry.batches.get(batch_id))


@router.get("/v1/projects/{project_id}/batches", response_model=list[BatchOut])
def list_project_batches(project_id: int, registry: RegistryDep) -> list[BatchOut]:
    return [_batch_out(b) for b in registry.batches.list_for_project(project_id)]


@router.post(
    "/v1/batches/{batch_id}/purchase",
    response_model=BatchOut,
    dependencies=[Depends(require_rate_limit())],
)
def purchase(
    batch_id: int,
    body: PurchaseIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> BatchOut:
    """Buy credits from a batch; returns the batch after the sale."""
    registry.credits.purchase(
        batch_id=batch_id, quantity=body.quantity, buyer=principal.account
    )
    return _batch_out(registry.batches.get(batch_id))
