from __future__ import annotations

import pytest

from carbon_registry.services import errors
from carbon_registry.services.registry import CarbonRegistry
from tests.conftest import ADMIN, BUYER, holding_of


def _retire(registry: CarbonRegistry, project_id: int, **overrides) -> int:
    fields = {
        "project_id": project_id,
        "vintage_year": 2024,
        "quantity": 50,
        "reason": "Scope 1 offset FY2024",
        "beneficiary": None,
        "caller": BUYER,
    }
    fields.update(overrides)
    return registry.retirements.retire(**fields)


# ---- retire ----


def test_retire_debits_holding_and_records(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 150)
    retirement_id = _retire(registry, project_id)

    assert retirement_id == 0
    assert registry.credits.balance(BUYER, project_id, 2024) == 100
    assert registry.projects.get(project_id).retired_credits == 50

    record = registry.retirements.get(retirement_id)
    assert record.account == BUYER
    assert record.quantity == 50
    assert record.reason == "Scope 1 offset FY2024"
    assert record.beneficiary is None
    assert record.batch_id is None
    assert record.certificate_url is None
    assert record.has_certificate is False


def test_retire_on_behalf_of_beneficiary(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 150)
    retirement_id = _retire(registry, project_id, beneficiary="Acme Corp")
    assert registry.retirements.get(retirement_id).beneficiary == "Acme Corp"


def test_retirement_ids_are_sequential(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 150)
    assert [_retire(registry, project_id, quantity=10) for _ in range(3)] == [0, 1, 2]
    assert registry.projects.get(project_id).retired_credits == 30


def test_retire_entire_balance(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 150)
    _retire(registry, project_id, quantity=150)
    assert registry.credits.balance(BUYER, project_id, 2024) == 0


@pytest.mark.parametrize(
    "overrides,error",
    [
        ({"quantity": 0}, errors.InvalidQuantityError),
        ({"reason": "  "}, errors.EmptyReasonError),
        ({"beneficiary": BUYER}, errors.SelfBeneficiaryError),
        ({"beneficiary": ""}, errors.EmptyFieldError),
        ({"quantity": 151}, errors.InsufficientBalanceError),
        ({"vintage_year": 2030}, errors.NoHoldingError),
        ({"caller": "stranger"}, errors.NoHoldingError),
    ],
)
def test_rejected_retirement_changes_nothing(
    registry: CarbonRegistry, overrides: dict, error: type[Exception]
) -> None:
    project_id = holding_of(registry, 150)
    with pytest.raises(error):
        _retire(registry, project_id, **overrides)

    assert registry.credits.balance(BUYER, project_id, 2024) == 150
    assert registry.projects.get(project_id).retired_credits == 0
    assert registry.retirements.list_by_account(BUYER) == []


def test_list_by_account(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 150)
    first = _retire(registry, project_id, quantity=10)
    second = _retire(registry, project_id, quantity=20)
    assert [r.id for r in registry.retirements.list_by_account(BUYER)] == [first, second]
    assert registry.retirements.list_by_account("nobody") == []


def test_get_unknown_retirement(registry: CarbonRegistry) -> None:
    with pytest.raises(errors.NotFoundError):
        registry.retirements.get(9)


# ---- certificates ----


def test_issue_certificate_once(registry: CarbonRegistry) -> None:
    retirement_id = _retire(registry, holding_of(registry, 150))
    registry.retirements.issue_certificate(
        retirement_id=retirement_id, url="https://cert.example/0", caller=ADMIN
    )
    record = registry.retirements.get(retirement_id)
    assert record.certificate_url == "https://cert.example/0"
    assert record.has_certificate is True

    with pytest.raises(errors.CertificateAlreadySetError):
        registry.retirements.issue_certificate(
            retirement_id=retirement_id, url="https://cert.example/other", caller=ADMIN
        )
    assert registry.retirements.get(retirement_id).certificate_url == "https://cert.example/0"


def test_issue_certificate_requires_admin(registry: CarbonRegistry) -> None:
    retirement_id = _retire(registry, holding_of(registry, 150))
    with pytest.raises(errors.NotAdminError):
        registry.retirements.issue_certificate(
            retirement_id=retirement_id, url="https://cert.example/0", caller=BUYER
        )
    assert registry.retirements.get(retirement_id).certificate_url is None


def test_issue_certificate_unknown_retirement(registry: CarbonRegistry) -> None:
    with pytest.raises(errors.NotFoundError):
        registry.retirements.issue_certificate(
            retirement_id=5, url="https://cert.example/5", caller=ADMIN
        )


def test_issue_certificate_rejects_empty_url(registry: CarbonRegistry) -> None:
    retirement_id = _retire(registry, holding_of(registry, 150))
    with pytest.raises(errors.EmptyUrlError):
        registry.retirements.issue_certificate(
            retirement_id=retirement_id, url="", caller=ADMIN
        )
    assert registry.retirements.get(retirement_id).has_certificate is False
