from __future__ import annotations

import itertools
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import carbon_registry` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from carbon_registry.api import ratelimit  # noqa: E402
from carbon_registry.api.dependencies import get_registry  # noqa: E402
from carbon_registry.main import app  # noqa: E402
from carbon_registry.services import token_service  # noqa: E402
from carbon_registry.services.registry import CarbonRegistry  # noqa: E402
from carbon_registry.services.value_transfer import InMemoryValueLedger  # noqa: E402
from carbon_registry.services.verifier_directory import (  # noqa: E402
    admin_accounts_policy,
)

ADMIN = "admin"
OWNER = "owner"
VERIFIER = "verifier"
BUYER = "buyer"


@pytest.fixture
def payments() -> InMemoryValueLedger:
    ledger = InMemoryValueLedger()
    ledger.deposit(BUYER, 1_000_000)
    return ledger


@pytest.fixture
def registry(payments: InMemoryValueLedger) -> CarbonRegistry:
    """Fresh registry per test; the clock ticks 100, 101, 102, ..."""
    return CarbonRegistry(
        is_admin=admin_accounts_policy(frozenset({ADMIN})),
        payments=payments,
        clock=itertools.count(100).__next__,
    )


@pytest.fixture(autouse=True)
def override_registry(registry: CarbonRegistry) -> Iterator[None]:
    app.dependency_overrides[get_registry] = lambda: registry
    yield
    app.dependency_overrides.pop(get_registry, None)


@pytest.fixture(autouse=True)
def reset_rate_limiter() -> None:
    """Clear rate limit buckets between tests so limits don't bleed."""
    if hasattr(ratelimit._rate_limiter, "_buckets"):
        ratelimit._rate_limiter._buckets.clear()  # type: ignore[union-attr]


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(account: str = "test-user", roles: list[str] | None = None) -> str:
    return token_service.create_access_token(sub=account, roles=roles)


def auth(account: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(account)}"}


# ---------------------------------------------------------------------------
# Ledger helpers
# ---------------------------------------------------------------------------


def register_project(registry: CarbonRegistry, owner: str = OWNER) -> int:
    return registry.projects.register(
        name="Wind Farm",
        description="Coastal wind farm",
        location="Tarifa, ES",
        category="renewable-energy",
        start=100,
        end=200,
        registry_url="https://registry.example/p",
        caller=owner,
    )


def verified_project(registry: CarbonRegistry, credits: int = 1000) -> int:
    """Register a project and verify it for ``credits`` credits."""
    project_id = register_project(registry)
    registry.verifiers.authorize(
        verifier_id=VERIFIER, name="Acme Audits", credentials="ISO 14065", caller=ADMIN
    )
    registry.verifications.verify(
        project_id=project_id,
        credits_issued=credits,
        report_url="https://reports.example/1",
        methodology="ACM0002",
        period_start=100,
        period_end=150,
        evidence=b"report-hash",
        caller=VERIFIER,
    )
    return project_id


def holding_of(
    registry: CarbonRegistry,
    quantity: int,
    holder: str = BUYER,
    vintage: int = 2024,
) -> int:
    """Verified project with one batch of which ``holder`` bought ``quantity``."""
    project_id = verified_project(registry)
    batch_id = registry.batches.create_batch(
        project_id=project_id,
        vintage_year=vintage,
        quantity=400,
        unit_price=10,
        caller=OWNER,
    )
    registry.credits.purchase(batch_id=batch_id, quantity=quantity, buyer=holder)
    return project_id
