"""Retirement endpoints.

POST /v1/retirements                  retire credits from the caller's holding
GET  /v1/retirements/{id}             public lookup of a retirement record
GET  /v1/retirements?account=         retirements made by an account
PUT  /v1/retirements/{id}/certificate attach the certificate URL (admin, once)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit
from carbon_registry.models.retirement import RetirementRecord

router = APIRouter(prefix="/v1/retirements", tags=["retirements"])


class RetireIn(BaseModel):
    project_id: int
    vintage_year: int
    quantity: int
    reason: str
    beneficiary: str | None = None


class CertificateIn(BaseModel):
    url: str


class RetirementOut(BaseModel):
    id: int
    account: str
    project_id: int
    vintage_year: int
    batch_id: int | None
    quantity: int
    reason: str
    beneficiary: str | None
    timestamp: int
    certificate_url: str | None


class CreatedOut(BaseModel):
    id: int


def _retirement_out(r: RetirementRecord) -> RetirementOut:
    return RetirementOut(
        id=r.id,
        account=r.account,
        project_id=r.project_id,
        vintage_year=r.vintage_year,
        batch_id=r.batch_id,
        quantity=r.quantity,
        reason=r.reason,
        beneficiary=r.beneficiary,
        timestamp=r.timestamp,
        certificate_url=r.certificate_url,
    )


@router.post(
    "",
    response_model=CreatedOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_rate_limit())],
)
def retire(body: RetireIn, principal: PrincipalDep, registry: RegistryDep) -> CreatedOut:
    retirement_id = registry.retirements.retire(
        project_id=body.project_id,
        vintage_year=body.vintage_year,
        quantity=body.quantity,
        reason=body.reason,
        beneficiary=body.beneficiary,
        caller=principal.account,
    )
    return CreatedOut(id=retirement_id)


@router.get("", response_model=list[RetirementOut])
def list_retirements(account: str, registry: RegistryDep) -> list[RetirementOut]:
    return [_retirement_out(r) for r in registry.retirements.list_by_account(account)]


@router.get("/{retirement_id}", response_model=RetirementOut)
def get_retirement(retirement_id: int, registry: RegistryDep) -> RetirementOut:
    return _retirement_out(registry.retirements.get(retirement_id))


@router.put(
    "/{retirement_id}/certificate",
    response_model=RetirementOut,
    dependencies=[Depends(require_rate_limit())],
)
def issue_certificate(
    retirement_id: int,
    body: CertificateIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> RetirementOut:
    registry.retirements.issue_certificate(
        retirement_id=retirement_id, url=body.url, caller=principal.account
    )
    return _retirement_out(registry.retirements.get(retirement_id))
