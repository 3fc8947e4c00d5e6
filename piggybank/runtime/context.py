"""
piggybank.runtime.context: addresses and the per-call contexts handed to contracts

Contracts never read ambient/global state: every handler receives an explicit
context carrying the owner, the sender, the contract's balance and the raw
parameter bytes. Contexts are frozen and validated on construction.

Design notes
------------
- Account addresses are 32 raw bytes. Hex strings (with or without "0x") are
  accepted by helpers and normalized to bytes.
- Contract addresses are (index, subindex) pairs allocated by the host.
- A sender may be either kind; only an account can match the owner.
- `self_balance` already includes any value attached to the current call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..abi.decoding import ParameterCursor

ACCOUNT_ADDRESS_LEN = 32


class ContextError(ValueError):
    """Validation or coercion failure for addresses and contexts."""


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise ContextError(f"hex string must have even length, got {len(h)}")
        try:
            return bytes.fromhex(h)
        except ValueError as e:
            raise ContextError(f"invalid hex string: {value!r}") from e
    raise ContextError(f"cannot convert type {type(value).__name__} to bytes")


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _require_non_negative_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ContextError(f"{name} must be int, got {type(v).__name__}")
    if v < 0:
        raise ContextError(f"{name} must be non-negative, got {v}")
    return v


# ----------------------------- addresses ------------------------------ #

@dataclass(frozen=True)
class AccountAddress:
    raw: bytes

    def __post_init__(self) -> None:
        raw = to_bytes(self.raw)
        if len(raw) != ACCOUNT_ADDRESS_LEN:
            raise ContextError(
                f"account address must be {ACCOUNT_ADDRESS_LEN} bytes, got {len(raw)}"
            )
        object.__setattr__(self, "raw", raw)

    def matches_account(self, account: "AccountAddress") -> bool:
        return self == account

    def __str__(self) -> str:
        return to_hex(self.raw)


@dataclass(frozen=True)
class ContractAddress:
    index: int
    subindex: int = 0

    def __post_init__(self) -> None:
        _require_non_negative_int("index", self.index)
        _require_non_negative_int("subindex", self.subindex)

    def matches_account(self, account: AccountAddress) -> bool:
        return False

    def __str__(self) -> str:
        return f"<{self.index},{self.subindex}>"


Address = Union[AccountAddress, ContractAddress]


def parse_address(value: Union[str, bytes, Address]) -> Address:
    """
    Accept an address object, 32 raw bytes, a hex account string, or the
    textual contract form "<index,subindex>".
    """
    if isinstance(value, (AccountAddress, ContractAddress)):
        return value
    if isinstance(value, str) and value.strip().startswith("<"):
        body = value.strip()
        if not body.endswith(">"):
            raise ContextError(f"malformed contract address: {value!r}")
        parts = body[1:-1].split(",")
        if len(parts) != 2:
            raise ContextError(f"malformed contract address: {value!r}")
        try:
            return ContractAddress(int(parts[0]), int(parts[1]))
        except ValueError as e:
            raise ContextError(f"malformed contract address: {value!r}") from e
    return AccountAddress(to_bytes(value))


# ----------------------------- contexts ------------------------------ #

@dataclass(frozen=True)
class InitContext:
    """
    Deployment-time context.

    Fields
    ------
    init_origin:  Account deploying the contract; becomes the owner.
    parameter:    Raw init parameter bytes (may be empty).
    """
    init_origin: AccountAddress
    parameter: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.init_origin, AccountAddress):
            raise ContextError("init_origin must be an AccountAddress")
        object.__setattr__(self, "parameter", to_bytes(self.parameter))

    def owner(self) -> AccountAddress:
        return self.init_origin

    def parameter_bytes(self) -> bytes:
        return self.parameter

    def parameter_cursor(self) -> ParameterCursor:
        return ParameterCursor(self.parameter)


@dataclass(frozen=True)
class ReceiveContext:
    """
    Per-call context passed to receive handlers.

    Fields
    ------
    self_owner:    Owner captured at deployment.
    invoker:       Sender of this call (account or contract).
    self_address:  Address of the contract being called.
    balance:       Contract balance, including the value attached to this call.
    parameter:     Raw parameter bytes.
    """
    self_owner: AccountAddress
    invoker: Address
    self_address: ContractAddress
    balance: int
    parameter: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.self_owner, AccountAddress):
            raise ContextError("owner must be an AccountAddress")
        if not isinstance(self.invoker, (AccountAddress, ContractAddress)):
            raise ContextError("sender must be an AccountAddress or ContractAddress")
        if not isinstance(self.self_address, ContractAddress):
            raise ContextError("self_address must be a ContractAddress")
        _require_non_negative_int("balance", self.balance)
        object.__setattr__(self, "parameter", to_bytes(self.parameter))

    def owner(self) -> AccountAddress:
        return self.self_owner

    def sender(self) -> Address:
        return self.invoker

    def self_balance(self) -> int:
        return self.balance

    def parameter_bytes(self) -> bytes:
        return self.parameter

    def parameter_cursor(self) -> ParameterCursor:
        return ParameterCursor(self.parameter)


__all__ = [
    "ACCOUNT_ADDRESS_LEN",
    "ContextError",
    "to_bytes",
    "to_hex",
    "AccountAddress",
    "ContractAddress",
    "Address",
    "parse_address",
    "InitContext",
    "ReceiveContext",
]
