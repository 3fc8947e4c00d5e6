"""
piggybank: custodial piggy bank contracts and the host that runs them.

This module exposes a small, stable façade:

- __version__: semantic version (optionally with a git describe suffix)
- Host: deploys contract instances and executes calls atomically
    host = Host()
    addr = host.deploy("DCBBank", owner)
    host.invoke(addr, "insertAmount", sender=alice, amount=100)
    host.invoke(addr, "smashAmount", sender=owner)
- get_contract(name) / list_contracts(): the registry of shipped contracts
- encode / decode: parameter wire format helpers
- BankError and its subclasses: every failure that aborts a call

Importing the package registers the shipped contract modules.
"""

from __future__ import annotations

from . import contracts as contracts
from .abi import decode, encode, parse_type
from .errors import (BankError, DecodeError, InsufficientFundsError,
                     InvalidStateError, LedgerError, NotPayableError,
                     UnauthorizedError, UnknownContractError,
                     UnknownEntrypointError)
from .runtime import (AccountAddress, CallOutcome, ContractAddress, Host,
                      get_contract, list_contracts)
from .version import __version__


def version() -> str:
    """Return the piggybank semantic version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "Host",
    "CallOutcome",
    "AccountAddress",
    "ContractAddress",
    "get_contract",
    "list_contracts",
    "encode",
    "decode",
    "parse_type",
    "BankError",
    "DecodeError",
    "InsufficientFundsError",
    "InvalidStateError",
    "LedgerError",
    "NotPayableError",
    "UnauthorizedError",
    "UnknownContractError",
    "UnknownEntrypointError",
]
