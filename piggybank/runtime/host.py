"""
piggybank.runtime.host: in-process transactional host for contract instances

The Host plays the part of the ledger around a contract: it deploys instances,
owns the treasury, and runs exactly one handler per call with all-or-nothing
semantics.

Call pipeline (Host.invoke)
---------------------------
  1) Resolve the instance and the named entrypoint.
  2) Reject value sent to a non-payable entrypoint.
  3) Enforce the parameter size cap and decode the declared parameter.
  4) Open a journal, move the attached value sender → contract.
  5) Run the handler against the decoded state and a fresh ReceiveContext.
  6) Apply the returned action and persist the new state bytes.
  7) On any failure revert the journal, restore the state bytes and re-raise.

Calls on one host are serialized by a host-wide lock, so every call observes
the fully committed result of all prior calls. Rollback touches only the
balance deltas the failing call applied itself: funding, or calls on another
host sharing the same Treasury, that commit meanwhile are left in place.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..abi.decoding import decode
from ..config import BankConfig, load_config
from ..errors import (BankError, DecodeError, LedgerError, NotPayableError,
                      UnknownContractError)
from .actions import Accept, Action, SimpleTransfer
from .context import (AccountAddress, Address, ContextError, ContractAddress,
                      InitContext, ReceiveContext, parse_address, to_bytes,
                      to_hex)
from .registry import ContractModule, get_contract
from .treasury import Journal, Treasury

log = logging.getLogger(__name__)

AddressLike = Union[str, bytes, Address]


@dataclass
class Instance:
    address: ContractAddress
    module: ContractModule
    owner: AccountAddress
    state: bytes

    def load_state(self) -> Any:
        return self.module.state_type.from_bytes(self.state)


@dataclass(frozen=True)
class CallOutcome:
    address: ContractAddress
    entrypoint: str
    action: Action
    state: Any
    balance: int

    def to_dict(self) -> Dict[str, Any]:
        state = self.state
        return {
            "ok": True,
            "address": str(self.address),
            "entrypoint": self.entrypoint,
            "action": self.action.to_dict(),
            "state": getattr(state, "label", repr(state)),
            "balance": self.balance,
        }


class Host:
    """Deploys contract instances and executes calls against them atomically."""

    def __init__(
        self,
        *,
        config: Optional[BankConfig] = None,
        treasury: Optional[Treasury] = None,
    ) -> None:
        self.config = config or load_config()
        self.treasury = treasury or Treasury(max_bits=self.config.max_amount_bits)
        self._L = threading.RLock()
        self._instances: Dict[ContractAddress, Instance] = {}

    # ---------- helpers ---------- #

    def _check_parameter(self, parameter: bytes) -> bytes:
        raw = to_bytes(parameter)
        if len(raw) > self.config.max_parameter_bytes:
            raise DecodeError(
                "parameter too large",
                context={"size": len(raw), "max": self.config.max_parameter_bytes},
            )
        return raw

    def _check_amount(self, amount: int) -> int:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise LedgerError(f"amount must be a non-negative int, got {amount!r}")
        return amount

    def _apply(self, address: ContractAddress, action: Action, journal: Journal) -> None:
        if isinstance(action, Accept):
            return
        if isinstance(action, SimpleTransfer):
            self.treasury.transfer(address, action.to, action.amount, journal=journal)
            return
        raise BankError(
            f"handler returned unsupported action {action!r}",
            code="invalid_action",
        )

    # ---------- accounts ---------- #

    def fund(self, account: AddressLike, amount: int) -> None:
        """Credit an account out of thin air (genesis / test setup)."""
        self.treasury.credit(parse_address(account), self._check_amount(amount))

    def balance_of(self, address: AddressLike) -> int:
        return self.treasury.balance(parse_address(address))

    # ---------- instances ---------- #

    def instance(self, address: AddressLike) -> Instance:
        addr = parse_address(address)
        with self._L:
            inst = self._instances.get(addr) if isinstance(addr, ContractAddress) else None
        if inst is None:
            raise UnknownContractError(f"no contract instance at {addr}", context={"address": str(addr)})
        return inst

    def state_of(self, address: AddressLike) -> Any:
        return self.instance(address).load_state()

    def deploy(
        self,
        contract: Union[str, ContractModule],
        owner: AddressLike,
        parameter: bytes = b"",
    ) -> ContractAddress:
        """
        Run the contract's init handler and record a new instance.

        On failure (e.g. DecodeError) nothing is recorded and the error
        propagates to the caller.
        """
        module = get_contract(contract) if isinstance(contract, str) else contract
        owner_addr = parse_address(owner)
        if not isinstance(owner_addr, AccountAddress):
            raise ContextError("contracts must be deployed by an account")
        raw = self._check_parameter(parameter)

        ctx = InitContext(owner_addr, raw)
        try:
            state = module.init_entry.handler(ctx)
        except BankError as e:
            log.warning("deploy %s failed: %s (%s)", module.name, e.code, e.message)
            raise
        state_bytes = state.to_bytes()

        with self._L:
            address = self.treasury.new_contract_address()
            self._instances[address] = Instance(address, module, owner_addr, state_bytes)
        log.info("deployed %s at %s owner=%s state=%s", module.name, address, owner_addr, to_hex(state_bytes))
        return address

    # ---------- calls ---------- #

    def invoke(
        self,
        address: AddressLike,
        entrypoint: str,
        sender: AddressLike,
        amount: int = 0,
        parameter: bytes = b"",
    ) -> CallOutcome:
        """Execute one receive call; raises BankError after rolling back on failure."""
        sender_addr = parse_address(sender)
        amount = self._check_amount(amount)

        with self._L:
            inst = self.instance(address)
            entry = inst.module.entrypoint(entrypoint)
            if amount and not entry.payable:
                raise NotPayableError(
                    f"{inst.module.name}.{entrypoint} does not accept value",
                    context={"entrypoint": entrypoint, "amount": amount},
                )
            raw = self._check_parameter(parameter)
            if entry.parameter is not None:
                decode(raw, entry.parameter, strict=self.config.strict_mode)

            journal = Journal()
            prev_state = inst.state
            try:
                if amount:
                    self.treasury.transfer(sender_addr, inst.address, amount, journal=journal)
                state = inst.load_state()
                ctx = ReceiveContext(
                    self_owner=inst.owner,
                    invoker=sender_addr,
                    self_address=inst.address,
                    balance=self.treasury.balance(inst.address),
                    parameter=raw,
                )
                action = entry.handler(ctx, amount, state)
                self._apply(inst.address, action, journal)
                inst.state = state.to_bytes()
            except Exception as e:
                self.treasury.revert(journal)
                inst.state = prev_state
                if isinstance(e, BankError):
                    log.warning(
                        "call %s.%s from %s rolled back: %s (%s)",
                        inst.module.name, entrypoint, sender_addr, e.code, e.message,
                    )
                raise

            outcome = CallOutcome(
                address=inst.address,
                entrypoint=entrypoint,
                action=action,
                state=state,
                balance=self.treasury.balance(inst.address),
            )
        log.info("call %s.%s from %s amount=%d -> %s", inst.module.name, entrypoint, sender_addr, amount, action)
        return outcome


__all__ = ["Host", "Instance", "CallOutcome"]
