"""
piggybank runtime package

This package contains the host that stands in for the ledger (treasury,
instances, atomic calls) and the contract-facing pieces handlers use:
contexts, actions, guards and the entrypoint registry.

Convenience re-exports live here so callers can do:

    from piggybank.runtime import Host, AccountAddress, Accept, SimpleTransfer
"""

from __future__ import annotations

from .actions import Accept, Action, SimpleTransfer
from .context import (AccountAddress, Address, ContextError, ContractAddress,
                      InitContext, ReceiveContext, parse_address)
from .guards import require
from .host import CallOutcome, Host, Instance
from .registry import (ContractModule, Entrypoint, get_contract,
                       list_contracts, register_contract)
from .treasury import Journal, Treasury

__all__ = [
    "Accept",
    "Action",
    "SimpleTransfer",
    "AccountAddress",
    "Address",
    "ContextError",
    "ContractAddress",
    "InitContext",
    "ReceiveContext",
    "parse_address",
    "require",
    "CallOutcome",
    "Host",
    "Instance",
    "ContractModule",
    "Entrypoint",
    "get_contract",
    "list_contracts",
    "register_contract",
    "Journal",
    "Treasury",
]
