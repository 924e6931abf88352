"""End-to-end walk through the credit lifecycle.

Register, verify, batch, purchase, retire and certify one project, checking
every intermediate figure and both conservation laws along the way.
"""

from __future__ import annotations

import pytest

from carbon_registry.services import errors
from carbon_registry.services.registry import CarbonRegistry
from carbon_registry.services.value_transfer import InMemoryValueLedger


def test_full_lifecycle(registry: CarbonRegistry, payments: InMemoryValueLedger) -> None:
    owner, verifier, buyer, admin = "P", "V", "B", "admin"
    payments.deposit(buyer, 10_000)

    project_id = registry.projects.register(
        name="Solar Park",
        description="Utility-scale PV",
        location="Ouarzazate, MA",
        category="renewable-energy",
        start=1_700_000_000,
        end=1_900_000_000,
        registry_url="https://registry.example/solar",
        caller=owner,
    )
    assert project_id == 0
    assert registry.projects.get(project_id).status == "pending"

    registry.verifiers.authorize(
        verifier_id=verifier, name="Verra Auditor", credentials="VVB-042", caller=admin
    )
    registry.verifications.verify(
        project_id=project_id,
        credits_issued=1000,
        report_url="https://reports.example/solar",
        methodology="AMS-I.D",
        period_start=1_700_000_000,
        period_end=1_750_000_000,
        evidence=b"sha256:abc",
        caller=verifier,
    )
    project = registry.projects.get(project_id)
    assert (project.status, project.total_credits, project.available_credits) == (
        "active",
        1000,
        1000,
    )

    batch_id = registry.batches.create_batch(
        project_id=project_id, vintage_year=2024, quantity=400, unit_price=10, caller=owner
    )
    assert batch_id == 0
    assert registry.projects.get(project_id).available_credits == 600

    registry.credits.purchase(batch_id=batch_id, quantity=150, buyer=buyer)
    assert registry.batches.get(batch_id).remaining == 250
    assert registry.credits.balance(buyer, project_id, 2024) == 150
    assert payments.balance_of(owner) == 1500

    retirement_id = registry.retirements.retire(
        project_id=project_id,
        vintage_year=2024,
        quantity=50,
        reason="Carbon neutral 2024",
        beneficiary=None,
        caller=buyer,
    )
    assert retirement_id == 0
    assert registry.credits.balance(buyer, project_id, 2024) == 100
    assert registry.projects.get(project_id).retired_credits == 50
    assert registry.retirements.get(retirement_id).has_certificate is False

    registry.retirements.issue_certificate(
        retirement_id=retirement_id, url="https://cert.example/0", caller=admin
    )
    assert registry.retirements.get(retirement_id).certificate_url == "https://cert.example/0"
    with pytest.raises(errors.CertificateAlreadySetError):
        registry.retirements.issue_certificate(
            retirement_id=retirement_id, url="https://cert.example/1", caller=admin
        )

    report = registry.audit_project(project_id)
    assert report.total_credits == 1000
    assert report.available_credits == 600
    assert report.batched_credits == 400
    assert report.sold_credits == 150
    assert report.held_credits == 100
    assert report.retired_credits == 50
    assert report.balanced


def test_conservation_holds_after_transfers(registry: CarbonRegistry, payments) -> None:
    payments.deposit("B", 100_000)
    registry.verifiers.authorize(verifier_id="V", name="n", credentials="c", caller="admin")
    project_id = registry.projects.register(
        name="Peatland",
        description="",
        location="Somerset, UK",
        category="soil-carbon",
        start=1,
        end=2,
        registry_url="",
        caller="P",
    )
    registry.verifications.verify(
        project_id=project_id,
        credits_issued=500,
        report_url="",
        methodology="VM0036",
        period_start=1,
        period_end=2,
        evidence=b"",
        caller="V",
    )
    first = registry.batches.create_batch(
        project_id=project_id, vintage_year=2023, quantity=200, unit_price=3, caller="P"
    )
    second = registry.batches.create_batch(
        project_id=project_id, vintage_year=2024, quantity=100, unit_price=4, caller="P"
    )
    registry.credits.purchase(batch_id=first, quantity=200, buyer="B")
    registry.credits.purchase(batch_id=second, quantity=60, buyer="B")
    registry.credits.transfer(
        project_id=project_id, vintage_year=2023, recipient="C", quantity=80, sender="B"
    )
    registry.retirements.retire(
        project_id=project_id,
        vintage_year=2023,
        quantity=30,
        reason="offset",
        beneficiary="D",
        caller="C",
    )

    report = registry.audit_project(project_id)
    assert report.issuance_balanced
    assert report.circulation_balanced
    assert report.sold_credits == 260
    assert report.held_credits == 230
    assert report.retired_credits == 30


def test_audit_unknown_project(registry: CarbonRegistry) -> None:
    with pytest.raises(errors.NotFoundError):
        registry.audit_project(404)
