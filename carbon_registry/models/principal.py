from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller extracted from a validated JWT.

    account: the ``sub`` claim; this is the identity every ledger
        operation records as caller, owner, buyer or retiring account.
    roles: informational role claims carried in the token. Admin
        privilege is decided by the registry's admin predicate, not here.
    """

    account: str
    roles: frozenset[str]
