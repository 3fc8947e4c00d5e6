"""
piggybank.runtime.registry: static entrypoint tables for contract modules

A contract module is a name, a state type, one init handler and a table of
named receive entrypoints. Entries are registered with decorators when the
contract module is imported, and looked up by name at call time; nothing is
resolved by reflection on handler objects.

    bank = ContractModule("DCBBank", PiggyBank)

    @bank.init()
    def init(ctx): ...

    @bank.receive("insertAmount", payable=True)
    def insert(ctx, amount, state): ...

Handlers are returned unchanged by the decorators, so one function can be
registered under several modules or names.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import (Any, Callable, Dict, Iterator, List, Optional, Protocol,
                    Type, Union)

from ..abi.types import SchemaType, as_schema
from ..errors import UnknownContractError, UnknownEntrypointError
from .actions import Action
from .context import InitContext, ReceiveContext

log = logging.getLogger(__name__)


class ContractState(Protocol):
    """Persisted contract state: round-trips through bytes."""

    def to_bytes(self) -> bytes: ...

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ContractState": ...


InitHandler = Callable[[InitContext], ContractState]
ReceiveHandler = Callable[[ReceiveContext, int, Any], Action]


@dataclass(frozen=True)
class InitEntry:
    handler: InitHandler
    parameter: Optional[SchemaType] = None


@dataclass(frozen=True)
class Entrypoint:
    name: str
    handler: ReceiveHandler
    payable: bool = False
    parameter: Optional[SchemaType] = None

    def describe(self) -> Dict[str, Any]:
        return {
            "payable": self.payable,
            "parameter": self.parameter.to_json() if self.parameter is not None else None,
        }


def _schema_or_none(spec: Union[str, SchemaType, None]) -> Optional[SchemaType]:
    return None if spec is None else as_schema(spec)


class ContractModule:
    """Init handler plus the receive dispatch table of one contract."""

    def __init__(self, name: str, state_type: Type[Any], *, description: str = "") -> None:
        if not name:
            raise ValueError("contract name must be non-empty")
        self.name = name
        self.state_type = state_type
        self.description = description
        self._init: Optional[InitEntry] = None
        self._entrypoints: Dict[str, Entrypoint] = {}

    # ---- registration ---- #

    def init(self, *, parameter: Union[str, SchemaType, None] = None) -> Callable[[InitHandler], InitHandler]:
        def deco(fn: InitHandler) -> InitHandler:
            if self._init is not None:
                raise ValueError(f"{self.name}: init already registered")
            self._init = InitEntry(fn, _schema_or_none(parameter))
            return fn

        return deco

    def receive(
        self,
        name: str,
        *,
        payable: bool = False,
        parameter: Union[str, SchemaType, None] = None,
    ) -> Callable[[ReceiveHandler], ReceiveHandler]:
        def deco(fn: ReceiveHandler) -> ReceiveHandler:
            if name in self._entrypoints:
                raise ValueError(f"{self.name}: entrypoint {name!r} already registered")
            self._entrypoints[name] = Entrypoint(name, fn, payable, _schema_or_none(parameter))
            return fn

        return deco

    # ---- lookup ---- #

    @property
    def init_entry(self) -> InitEntry:
        if self._init is None:
            raise UnknownEntrypointError(f"{self.name}: no init handler", context={"contract": self.name})
        return self._init

    def entrypoint(self, name: str) -> Entrypoint:
        try:
            return self._entrypoints[name]
        except KeyError:
            raise UnknownEntrypointError(
                f"{self.name} has no entrypoint {name!r}",
                context={"contract": self.name, "entrypoint": name},
            ) from None

    def entrypoints(self) -> List[str]:
        return list(self._entrypoints)

    def __iter__(self) -> Iterator[Entrypoint]:
        return iter(self._entrypoints.values())

    def schema(self) -> Dict[str, Any]:
        init_param = self._init.parameter if self._init is not None else None
        return {
            "contract": self.name,
            "description": self.description,
            "init": {"parameter": init_param.to_json() if init_param is not None else None},
            "entrypoints": {e.name: e.describe() for e in self},
        }

    def __repr__(self) -> str:
        return f"ContractModule({self.name!r}, entrypoints={self.entrypoints()!r})"


# ------------------------------ global registry ------------------------------ #

_L = threading.RLock()
_CONTRACTS: Dict[str, ContractModule] = {}


def register_contract(module: ContractModule) -> ContractModule:
    with _L:
        if module.name in _CONTRACTS and _CONTRACTS[module.name] is not module:
            raise ValueError(f"contract {module.name!r} already registered")
        _CONTRACTS[module.name] = module
    log.debug("registry: registered %s (%d entrypoints)", module.name, len(module.entrypoints()))
    return module


def get_contract(name: str) -> ContractModule:
    with _L:
        module = _CONTRACTS.get(name)
    if module is None:
        raise UnknownContractError(f"unknown contract {name!r}", context={"contract": name})
    return module


def list_contracts() -> List[str]:
    with _L:
        return sorted(_CONTRACTS)


__all__ = [
    "ContractState",
    "InitEntry",
    "Entrypoint",
    "ContractModule",
    "register_contract",
    "get_contract",
    "list_contracts",
]
