from __future__ import annotations

import pytest

from carbon_registry.services import errors
from carbon_registry.services.registry import CarbonRegistry
from carbon_registry.services.value_transfer import InMemoryValueLedger
from tests.conftest import BUYER, OWNER, holding_of, verified_project


@pytest.fixture
def batch_id(registry: CarbonRegistry) -> int:
    project_id = verified_project(registry)
    return registry.batches.create_batch(
        project_id=project_id, vintage_year=2024, quantity=400, unit_price=10, caller=OWNER
    )


# ---- purchase ----


def test_purchase_moves_credits_and_payment(
    registry: CarbonRegistry, payments: InMemoryValueLedger, batch_id: int
) -> None:
    registry.credits.purchase(batch_id=batch_id, quantity=150, buyer=BUYER)

    batch = registry.batches.get(batch_id)
    assert batch.remaining == 250
    assert batch.status == "available"
    assert registry.credits.balance(BUYER, batch.project_id, 2024) == 150
    assert payments.balance_of(OWNER) == 1500
    assert payments.balance_of(BUYER) == 1_000_000 - 1500


def test_purchase_accumulates_into_one_holding(
    registry: CarbonRegistry, batch_id: int
) -> None:
    registry.credits.purchase(batch_id=batch_id, quantity=100, buyer=BUYER)
    registry.credits.purchase(batch_id=batch_id, quantity=50, buyer=BUYER)
    holdings = registry.credits.holdings_of(BUYER)
    assert len(holdings) == 1
    assert holdings[0].balance == 150


def test_purchase_of_whole_remainder_marks_batch_sold(
    registry: CarbonRegistry, batch_id: int
) -> None:
    registry.credits.purchase(batch_id=batch_id, quantity=400, buyer=BUYER)
    batch = registry.batches.get(batch_id)
    assert batch.remaining == 0
    assert batch.status == "sold"

    with pytest.raises(errors.BatchNotAvailableError):
        registry.credits.purchase(batch_id=batch_id, quantity=1, buyer=BUYER)


def test_purchase_unknown_batch(registry: CarbonRegistry) -> None:
    with pytest.raises(errors.NotFoundError):
        registry.credits.purchase(batch_id=3, quantity=1, buyer=BUYER)


@pytest.mark.parametrize("quantity", [0, -10])
def test_purchase_rejects_non_positive_quantity(
    registry: CarbonRegistry, batch_id: int, quantity: int
) -> None:
    with pytest.raises(errors.InvalidQuantityError):
        registry.credits.purchase(batch_id=batch_id, quantity=quantity, buyer=BUYER)


def test_purchase_rejects_more_than_remaining(
    registry: CarbonRegistry, batch_id: int
) -> None:
    with pytest.raises(errors.InsufficientRemainingError):
        registry.credits.purchase(batch_id=batch_id, quantity=401, buyer=BUYER)
    assert registry.batches.get(batch_id).remaining == 400


def test_declined_payment_changes_nothing(
    registry: CarbonRegistry, payments: InMemoryValueLedger, batch_id: int
) -> None:
    payments.deposit("broke", 5)

    with pytest.raises(errors.PaymentFailedError):
        registry.credits.purchase(batch_id=batch_id, quantity=10, buyer="broke")

    batch = registry.batches.get(batch_id)
    assert batch.remaining == 400
    assert batch.status == "available"
    assert registry.credits.balance("broke", batch.project_id, 2024) == 0
    assert registry.credits.holdings_of("broke") == []
    assert payments.balance_of("broke") == 5
    assert payments.balance_of(OWNER) == 0


def test_purchase_uses_injected_payment_collaborator(
    registry: CarbonRegistry, batch_id: int
) -> None:
    calls: list[tuple[str, str, int]] = []

    class Recorder:
        def transfer(self, payer: str, payee: str, amount: int) -> bool:
            calls.append((payer, payee, amount))
            return True

    registry.credits._payments = Recorder()
    registry.credits.purchase(batch_id=batch_id, quantity=7, buyer="anyone")
    assert calls == [("anyone", OWNER, 70)]


# ---- transfer ----


def test_transfer_moves_balance(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    registry.credits.transfer(
        project_id=project_id, vintage_year=2024, recipient="friend", quantity=30, sender=BUYER
    )
    assert registry.credits.balance(BUYER, project_id, 2024) == 70
    assert registry.credits.balance("friend", project_id, 2024) == 30


def test_transfer_of_entire_balance_empties_holding(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    registry.credits.transfer(
        project_id=project_id, vintage_year=2024, recipient="friend", quantity=100, sender=BUYER
    )
    assert registry.credits.balance(BUYER, project_id, 2024) == 0
    assert registry.credits.holdings_of(BUYER) == []


def test_self_transfer_is_a_no_op(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    registry.credits.transfer(
        project_id=project_id, vintage_year=2024, recipient=BUYER, quantity=40, sender=BUYER
    )
    assert registry.credits.balance(BUYER, project_id, 2024) == 100


def test_transfer_without_holding(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    with pytest.raises(errors.NoHoldingError):
        registry.credits.transfer(
            project_id=project_id, vintage_year=2024, recipient=BUYER, quantity=1, sender="nobody"
        )


def test_transfer_other_vintage_has_no_holding(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    with pytest.raises(errors.NoHoldingError):
        registry.credits.transfer(
            project_id=project_id, vintage_year=2025, recipient="friend", quantity=1, sender=BUYER
        )


def test_transfer_over_balance(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    with pytest.raises(errors.InsufficientBalanceError):
        registry.credits.transfer(
            project_id=project_id, vintage_year=2024, recipient="friend", quantity=101, sender=BUYER
        )
    assert registry.credits.balance(BUYER, project_id, 2024) == 100
    assert registry.credits.balance("friend", project_id, 2024) == 0


def test_transfer_rejects_zero_quantity(registry: CarbonRegistry) -> None:
    project_id = holding_of(registry, 100)
    with pytest.raises(errors.InvalidQuantityError):
        registry.credits.transfer(
            project_id=project_id, vintage_year=2024, recipient="friend", quantity=0, sender=BUYER
        )


def test_balance_of_unknown_holding_is_zero(registry: CarbonRegistry) -> None:
    assert registry.credits.balance("ghost", 0, 2024) == 0


def test_holdings_of_orders_by_project_and_vintage(registry: CarbonRegistry) -> None:
    project_id = verified_project(registry)
    for vintage in (2025, 2023):
        batch = registry.batches.create_batch(
            project_id=project_id, vintage_year=vintage, quantity=10, unit_price=1, caller=OWNER
        )
        registry.credits.purchase(batch_id=batch, quantity=5, buyer=BUYER)

    assert [h.vintage_year for h in registry.credits.holdings_of(BUYER)] == [2023, 2025]
