"""Project registration, lookup, verification and audit endpoints."""

from __future__ import annotations

import base64

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from carbon_registry.api.dependencies import PrincipalDep, RegistryDep
from carbon_registry.api.ratelimit import require_rate_limit
from carbon_registry.models.project import Project
from carbon_registry.models.verification import VerificationRecord
from carbon_registry.services.errors import InvalidEvidenceError

router = APIRouter(prefix="/v1/projects", tags=["projects"])


class ProjectCreateIn(BaseModel):
    name: str
    description: str = ""
    location: str
    category: str
    start: int
    end: int
    registry_url: str = ""


class ProjectOut(BaseModel):
    id: int
    name: str
    description: str
    location: str
    category: str
    start: int
    end: int
    owner: str
    status: str
    verified: bool
    total_credits: int
    available_credits: int
    retired_credits: int
    verification_data: str | None  # base64
    registry_url: str
    created_at: int


class CreatedOut(BaseModel):
    id: int


class VerifyIn(BaseModel):
    credits_issued: int
    report_url: str = ""
    methodology: str
    period_start: int
    period_end: int
    evidence: str = ""  # base64-encoded opaque blob


class VerificationOut(BaseModel):
    project_id: int
    sequence: int
    verifier: str
    timestamp: int
    credits_issued: int
    report_url: str
    methodology: str
    period_start: int
    period_end: int


class AuditOut(BaseModel):
    project_id: int
    total_credits: int
    available_credits: int
    retired_credits: int
    batched_credits: int
    sold_credits: int
    held_credits: int
    balanced: bool


def _project_out(p: Project) -> ProjectOut:
    data = p.verification_data
    return ProjectOut(
        id=p.id,
        name=p.name,
        description=p.description,
        location=p.location,
        category=p.category,
        start=p.start,
        end=p.end,
        owner=p.owner,
        status=p.status,
        verified=p.verified,
        total_credits=p.total_credits,
        available_credits=p.available_credits,
        retired_credits=p.retired_credits,
        verification_data=base64.b64encode(data).decode() if data is not None else None,
        registry_url=p.registry_url,
        created_at=p.created_at,
    )


def _verification_out(r: VerificationRecord) -> VerificationOut:
    return VerificationOut(
        project_id=r.project_id,
        sequence=r.sequence,
        verifier=r.verifier,
        timestamp=r.timestamp,
        credits_issued=r.credits_issued,
        report_url=r.report_url,
        methodology=r.methodology,
        period_start=r.period_start,
        period_end=r.period_end,
    )


@router.post(
    "",
    response_model=CreatedOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_rate_limit())],
)
def register_project(
    body: ProjectCreateIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> CreatedOut:
    """Register a project. The caller becomes its owner."""
    project_id = registry.projects.register(
        name=body.name,
        description=body.description,
        location=body.location,
        category=body.category,
        start=body.start,
        end=body.end,
        registry_url=body.registry_url,
        caller=principal.account,
    )
    return CreatedOut(id=project_id)


@router.get("", response_model=list[ProjectOut])
def list_projects(owner: str, registry: RegistryDep) -> list[ProjectOut]:
    return [_project_out(p) for p in registry.projects.list_by_owner(owner)]


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, registry: RegistryDep) -> ProjectOut:
    return _project_out(registry.projects.get(project_id))


@router.get("/{project_id}/audit", response_model=AuditOut)
def audit_project(project_id: int, registry: RegistryDep) -> AuditOut:
    report = registry.audit_project(project_id)
    return AuditOut(
        project_id=report.project_id,
        total_credits=report.total_credits,
        available_credits=report.available_credits,
        retired_credits=report.retired_credits,
        batched_credits=report.batched_credits,
        sold_credits=report.sold_credits,
        held_credits=report.held_credits,
        balanced=report.balanced,
    )


@router.post(
    "/{project_id}/verifications",
    response_model=VerificationOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_rate_limit())],
)
def verify_project(
    project_id: int,
    body: VerifyIn,
    principal: PrincipalDep,
    registry: RegistryDep,
) -> VerificationOut:
    """Record a verification. Caller must be an active verifier."""
    try:
        evidence = base64.b64decode(body.evidence, validate=True)
    except ValueError:
        # binascii.Error for bad padding or alphabet, plain ValueError for non-ASCII
        raise InvalidEvidenceError("evidence must be base64") from None

    sequence = registry.verifications.verify(
        project_id=project_id,
        credits_issued=body.credits_issued,
        report_url=body.report_url,
        methodology=body.methodology,
        period_start=body.period_start,
        period_end=body.period_end,
        evidence=evidence,
        caller=principal.account,
    )
    return _verification_out(registry.verifications.get(project_id, sequence))


@router.get("/{project_id}/verifications", response_model=list[VerificationOut])
def list_verifications(project_id: int, registry: RegistryDep) -> list[VerificationOut]:
    return [
        _verification_out(r)
        for r in registry.verifications.list_for_project(project_id)
    ]
