from __future__ import annotations

import pytest

from carbon_registry.services import errors
from carbon_registry.services.registry import CarbonRegistry
from tests.conftest import ADMIN, VERIFIER, register_project


@pytest.fixture
def project_id(registry: CarbonRegistry) -> int:
    registry.verifiers.authorize(
        verifier_id=VERIFIER, name="Acme Audits", credentials="ISO 14065", caller=ADMIN
    )
    return register_project(registry)


def _verify(registry: CarbonRegistry, project_id: int, **overrides) -> int:
    fields = {
        "project_id": project_id,
        "credits_issued": 1000,
        "report_url": "https://reports.example/1",
        "methodology": "ACM0002",
        "period_start": 100,
        "period_end": 150,
        "evidence": b"\x00evidence",
        "caller": VERIFIER,
    }
    fields.update(overrides)
    return registry.verifications.verify(**fields)


def test_verify_activates_project_and_issues_credits(
    registry: CarbonRegistry, project_id: int
) -> None:
    sequence = _verify(registry, project_id)
    assert sequence == 0

    project = registry.projects.get(project_id)
    assert project.status == "active"
    assert project.verified is True
    assert project.total_credits == 1000
    assert project.available_credits == 1000
    assert project.verification_data == b"\x00evidence"


def test_verify_appends_record(registry: CarbonRegistry, project_id: int) -> None:
    _verify(registry, project_id)
    record = registry.verifications.get(project_id, 0)
    assert record.verifier == VERIFIER
    assert record.credits_issued == 1000
    assert record.methodology == "ACM0002"
    assert (record.period_start, record.period_end) == (100, 150)
    assert registry.verifications.list_for_project(project_id) == [record]


def test_verify_is_one_shot(registry: CarbonRegistry, project_id: int) -> None:
    _verify(registry, project_id)
    with pytest.raises(errors.ProjectNotPendingError):
        _verify(registry, project_id, credits_issued=5)

    project = registry.projects.get(project_id)
    assert project.total_credits == 1000
    assert project.status == "active"
    assert len(registry.verifications.list_for_project(project_id)) == 1


def test_verify_unknown_project(registry: CarbonRegistry) -> None:
    with pytest.raises(errors.NotFoundError):
        _verify(registry, 99)


def test_verify_requires_active_verifier(
    registry: CarbonRegistry, project_id: int
) -> None:
    with pytest.raises(errors.NotAuthorizedVerifierError):
        _verify(registry, project_id, caller="random-account")


def test_deauthorized_verifier_is_rejected(
    registry: CarbonRegistry, project_id: int
) -> None:
    registry.verifiers.deauthorize(verifier_id=VERIFIER, caller=ADMIN)
    with pytest.raises(errors.NotAuthorizedVerifierError):
        _verify(registry, project_id)
    assert registry.projects.get(project_id).status == "pending"


def test_verify_rejects_inverted_period(
    registry: CarbonRegistry, project_id: int
) -> None:
    with pytest.raises(errors.InvalidPeriodError):
        _verify(registry, project_id, period_start=151, period_end=150)


def test_verify_accepts_single_instant_period(
    registry: CarbonRegistry, project_id: int
) -> None:
    _verify(registry, project_id, period_start=150, period_end=150)
    assert registry.projects.get(project_id).status == "active"


@pytest.mark.parametrize("credits", [0, -5])
def test_verify_rejects_non_positive_credits(
    registry: CarbonRegistry, project_id: int, credits: int
) -> None:
    with pytest.raises(errors.ZeroCreditsError):
        _verify(registry, project_id, credits_issued=credits)


def test_verify_rejects_empty_methodology(
    registry: CarbonRegistry, project_id: int
) -> None:
    with pytest.raises(errors.EmptyFieldError):
        _verify(registry, project_id, methodology=" ")


def test_rejected_verify_leaves_no_trace(
    registry: CarbonRegistry, project_id: int
) -> None:
    with pytest.raises(errors.ZeroCreditsError):
        _verify(registry, project_id, credits_issued=0)

    assert registry.verifications.list_for_project(project_id) == []
    # The sequence was not consumed either.
    assert _verify(registry, project_id) == 0


def test_get_missing_record(registry: CarbonRegistry, project_id: int) -> None:
    with pytest.raises(errors.NotFoundError):
        registry.verifications.get(project_id, 0)
