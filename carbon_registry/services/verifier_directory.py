from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import replace

from carbon_registry.models.verification import Verifier
from carbon_registry.repos.verification_repo import VerifierRepo
from carbon_registry.services.errors import (
    EmptyFieldError,
    NotAdminError,
    NotFoundError,
    SelfAuthorizationError,
)

logger = logging.getLogger(__name__)

AdminPolicy = Callable[[str], bool]


def admin_accounts_policy(accounts: frozenset[str]) -> AdminPolicy:
    """Admin predicate that grants the capability to a fixed set of accounts."""

    def _is_admin(account: str) -> bool:
        return account in accounts

    return _is_admin


class VerifierDirectory:
    """Authorizes and deauthorizes accounts permitted to verify projects."""

    def __init__(
        self,
        verifiers: VerifierRepo,
        is_admin: AdminPolicy,
        lock: threading.RLock,
        clock: Callable[[], int],
    ) -> None:
        self._verifiers = verifiers
        self._is_admin = is_admin
        self._lock = lock
        self._clock = clock

    def _require_admin(self, caller: str) -> None:
        if not self._is_admin(caller):
            logger.warning("Access denied: caller=%s is not an admin", caller)
            raise NotAdminError("admin privilege required")

    def authorize(
        self, *, verifier_id: str, name: str, credentials: str, caller: str
    ) -> None:
        self._require_admin(caller)
        if verifier_id == caller:
            logger.warning("Rejected self-authorization by caller=%s", caller)
            raise SelfAuthorizationError("an admin cannot authorize itself")
        if not name.strip():
            raise EmptyFieldError("name must be non-empty")
        if not credentials.strip():
            raise EmptyFieldError("credentials must be non-empty")

        with self._lock:
            self._verifiers.upsert(
                Verifier(
                    id=verifier_id,
                    name=name,
                    credentials=credentials,
                    authorized_by=caller,
                    authorized_at=self._clock(),
                    status="active",
                )
            )
        logger.info("Authorized verifier=%s by admin=%s", verifier_id, caller)

    def deauthorize(self, *, verifier_id: str, caller: str) -> None:
        self._require_admin(caller)
        with self._lock:
            verifier = self._verifiers.get(verifier_id)
            if verifier is None:
                raise NotFoundError(f"verifier {verifier_id} not found")
            self._verifiers.upsert(replace(verifier, status="inactive"))
        logger.info("Deauthorized verifier=%s by admin=%s", verifier_id, caller)

    def is_active(self, verifier_id: str) -> bool:
        verifier = self._verifiers.get(verifier_id)
        return verifier is not None and verifier.is_active

    def get(self, verifier_id: str) -> Verifier:
        verifier = self._verifiers.get(verifier_id)
        if verifier is None:
            raise NotFoundError(f"verifier {verifier_id} not found")
        return verifier
