"""Verifier directory endpoints. Writes require the admin capability."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit

router = APIRouter(prefix="/v1/verifiers", tags=["verifiers"])


class VerifierIn(BaseModel):
    name: str
    credentials: str


class VerifierOut(BaseModel):
    id: str
    name: str
    credentials: str
    authorized_by: str
    authorized_at: int
    status: str


@router.put(
    "/{verifier_id}",
    response_model=VerifierOut,
    dependencies=[Depends(require_rate_limit())],
)
def authorize_verifier(
    verifier_id: str,
    body: VerifierIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> VerifierOut:
    registry.verifiers.authorize(
        verifier_id=verifier_id,
        name=body.name,
        credentials=body.credentials,
        caller=principal.account,
    )
    return get_verifier(verifier_id, registry)


@router.delete(
    "/{verifier_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_rate_limit())],
)
def deauthorize_verifier(
    verifier_id: str,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> None:
    registry.verifiers.deauthorize(verifier_id=verifier_id, caller=principal.account)


@router.get("/{verifier_id}", response_model=VerifierOut)
def get_verifier(verifier_id: str, registry: RegistryDep) -> VerifierOut:
    v = registry.verifiers.get(verifier_id)
    return VerifierOut(
        id=v.id,
        name=v.name,
        credentials=v.credentials,
        authorized_by=v.authorized_by,
        authorized_at=v.authorized_at,
        status=v.status,
    )
