"""
Actions returned by receive handlers and applied by the host.

A handler never moves value itself; it returns one of these and the host
applies it atomically together with the new contract state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .context import AccountAddress


@dataclass(frozen=True)
class Accept:
    """Retain the value attached to the call; nothing is transferred out."""

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "accept"}


@dataclass(frozen=True)
class SimpleTransfer:
    """Transfer ``amount`` from the contract to the account ``to``."""

    to: AccountAddress
    amount: int

    def __post_init__(self) -> None:
        if not isinstance(self.to, AccountAddress):
            raise TypeError("transfer target must be an AccountAddress")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int) or self.amount < 0:
            raise ValueError(f"transfer amount must be a non-negative int, got {self.amount!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "transfer", "to": str(self.to), "amount": self.amount}


Action = Union[Accept, SimpleTransfer]

__all__ = ["Accept", "SimpleTransfer", "Action"]
