"""Capability set a credit token binding would have to provide.

Credits are tracked as (project, vintage) balances in the CreditLedger,
not as a transferable token type. This Protocol only pins down the shape
of a future binding so adapters can be type-checked against it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CreditTokenStandard(Protocol):
    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...
    def get_balance(self, account: str) -> int: ...
    def get_total_supply(self) -> int: ...
    def get_name(self) -> str: ...
    def get_symbol(self) -> str: ...
    def get_decimals(self) -> int: ...
    def get_token_uri(self) -> str | None: ...
