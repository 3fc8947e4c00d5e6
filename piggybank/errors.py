"""
Structured errors raised by the piggybank host and contracts.

Every failure that aborts a call derives from :class:`BankError`. The host
rolls back state and value movement for the call before re-raising, so the
caller only ever observes the error, never a partial effect.

    from piggybank.errors import BankError, InvalidStateError

    try:
        host.invoke(addr, "insertAmount", sender=alice, amount=5)
    except BankError as e:
        print(e.to_dict())   # {"code": "invalid_state", "message": ..., "context": {...}}
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class BankError(Exception):
    """
    Base error carrying a short machine-readable ``code``, a human-readable
    ``message`` and an optional ``context`` mapping for debugging / tooling.
    """

    code: str = "bank_error"

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = str(message)
        if code is not None:
            self.code = str(code)
        self.context: Dict[str, Any] = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class DecodeError(BankError):
    """Parameter or state bytes could not be decoded against the expected schema."""

    code = "decode_error"


class UnauthorizedError(BankError):
    """The sender is not allowed to invoke an owner-only entrypoint."""

    code = "unauthorized"


class InvalidStateError(BankError):
    """The operation requires a lifecycle state the contract is not in."""

    code = "invalid_state"


class NotPayableError(BankError):
    """Value was attached to an entrypoint that does not accept it."""

    code = "not_payable"


class UnknownEntrypointError(BankError):
    code = "unknown_entrypoint"


class UnknownContractError(BankError):
    code = "unknown_contract"


class LedgerError(BankError):
    """Invalid amount or balance overflow in the treasury."""

    code = "ledger_error"


class InsufficientFundsError(LedgerError):
    code = "insufficient_funds"


__all__ = [
    "BankError",
    "DecodeError",
    "UnauthorizedError",
    "InvalidStateError",
    "NotPayableError",
    "UnknownEntrypointError",
    "UnknownContractError",
    "LedgerError",
    "InsufficientFundsError",
]
