"""
Piggy bank contract.

Anyone may insert value; only the owner may smash the bank and take the whole
balance. A smashed bank refuses further deposits forever.

- init() -> PiggyBank
    Always starts Intact.

- insertAmount (payable)
    Accepts the attached value while Intact. The balance itself is held by the
    host; the handler only decides whether the value is kept.

- smashAmount
    Owner only. Moves Intact -> Smashed and transfers the entire balance to
    the owner in the same call.

- balanceOf
    Owner only. Transfers the entire balance to the owner but leaves the state
    as it is.

The lifecycle state is the only persisted data: one byte, 0x00 Intact /
0x01 Smashed.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import DecodeError, InvalidStateError, UnauthorizedError
from ..runtime.actions import Accept, Action, SimpleTransfer
from ..runtime.context import InitContext, ReceiveContext
from ..runtime.guards import require
from ..runtime.registry import ContractModule


class BankState(enum.Enum):
    INTACT = 0
    SMASHED = 1


@dataclass
class PiggyBank:
    status: BankState = BankState.INTACT

    @classmethod
    def from_flag(cls, intact: bool) -> "PiggyBank":
        return cls(BankState.INTACT if intact else BankState.SMASHED)

    @property
    def is_intact(self) -> bool:
        return self.status is BankState.INTACT

    @property
    def label(self) -> str:
        return self.status.name.capitalize()

    def smash(self) -> None:
        """Intact -> Smashed. Smashed is terminal."""
        require(self.is_intact, "already smashed", error=InvalidStateError)
        self.status = BankState.SMASHED

    def to_bytes(self) -> bytes:
        return bytes([self.status.value])

    @classmethod
    def from_bytes(cls, raw: bytes) -> "PiggyBank":
        if len(raw) != 1:
            raise DecodeError("bank state must be exactly one byte", context={"size": len(raw)})
        try:
            return cls(BankState(raw[0]))
        except ValueError:
            raise DecodeError("unknown bank state tag", context={"tag": raw[0]}) from None


# ------------------------------ handlers ------------------------------ #

def init_intact(ctx: InitContext) -> PiggyBank:
    return PiggyBank()


def insert_amount(ctx: ReceiveContext, amount: int, state: PiggyBank) -> Action:
    require(state.is_intact, "already smashed", error=InvalidStateError)
    return Accept()


def smash_amount(ctx: ReceiveContext, amount: int, state: PiggyBank) -> Action:
    owner = ctx.owner()
    sender = ctx.sender()

    require(
        sender.matches_account(owner),
        "only the owner can smash the bank",
        error=UnauthorizedError,
        context={"sender": str(sender)},
    )
    require(state.is_intact, "already smashed", error=InvalidStateError)
    state.smash()

    return SimpleTransfer(owner, ctx.self_balance())


def balance_of(ctx: ReceiveContext, amount: int, state: PiggyBank) -> Action:
    # Sweeps the balance like smashAmount but keeps the bank Intact.
    owner = ctx.owner()
    sender = ctx.sender()

    require(
        sender.matches_account(owner),
        "only the owner can query the balance",
        error=UnauthorizedError,
        context={"sender": str(sender)},
    )
    return SimpleTransfer(owner, ctx.self_balance())


# ------------------------------ module ------------------------------ #

DCB_BANK = ContractModule("DCBBank", PiggyBank, description="piggy bank without init parameter")
DCB_BANK.init()(init_intact)
DCB_BANK.receive("insertAmount", payable=True)(insert_amount)
DCB_BANK.receive("smashAmount")(smash_amount)
DCB_BANK.receive("balanceOf")(balance_of)

__all__ = [
    "BankState",
    "PiggyBank",
    "init_intact",
    "insert_amount",
    "smash_amount",
    "balance_of",
    "DCB_BANK",
]
