"""
piggybank.runtime.treasury: deterministic in-memory balance ledger.

The host keeps one Treasury holding the native-unit balance of every account
and contract it knows about:

- balance(addr) -> int
- credit(addr, amount) / debit(addr, amount)
- transfer(frm, to, amount)         # debit then credit, atomic under the lock
- new_contract_address()            # next free <index,0>, shared by all hosts
- Journal / revert(journal)         # per-call record of applied deltas

Mutations accept an optional ``journal``. A failing call reverts only the
deltas recorded in its own journal, so balance changes committed meanwhile by
other threads or other hosts sharing the treasury are kept.

Notes
-----
* This is a simulation ledger. Real chain accounting belongs to the node that
  embeds these contracts.
* Deterministic: no wall-clock, no randomness, pure arithmetic with explicit caps.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple

from ..config import CFG
from ..errors import InsufficientFundsError, LedgerError
from .context import AccountAddress, Address, ContractAddress


def _check_addr(addr: Address) -> None:
    if not isinstance(addr, (AccountAddress, ContractAddress)):
        raise LedgerError(f"address must be an account or contract address, got {type(addr).__name__}")


class Journal:
    """Signed balance deltas applied on behalf of one call, oldest first."""

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: List[Tuple[Address, int]] = []

    def record(self, addr: Address, delta: int) -> None:
        if delta:
            self.entries.append((addr, delta))

    def __len__(self) -> int:
        return len(self.entries)


class Treasury:
    """Address → balance map with overflow and underflow checks."""

    def __init__(self, *, max_bits: Optional[int] = None) -> None:
        self.max_bits = int(max_bits if max_bits is not None else CFG.max_amount_bits)
        self._L = threading.RLock()
        self._ledger: Dict[Address, int] = {}
        self._next_contract = 0

    # ---- checks ---- #

    def _check_amount(self, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise LedgerError("amount must be int")
        if amount < 0:
            raise LedgerError("amount must be non-negative")
        if amount.bit_length() > self.max_bits:
            raise LedgerError(f"amount exceeds {self.max_bits}-bit limit")

    def _add_checked(self, a: int, b: int) -> int:
        c = a + b
        if c.bit_length() > self.max_bits:
            raise LedgerError("balance overflow")
        return c

    # ---- public API ---- #

    def balance(self, addr: Address) -> int:
        _check_addr(addr)
        with self._L:
            return self._ledger.get(addr, 0)

    def new_contract_address(self) -> ContractAddress:
        """Allocate the next contract address; sequential per treasury."""
        with self._L:
            addr = ContractAddress(self._next_contract, 0)
            self._next_contract += 1
            return addr

    def credit(self, addr: Address, amount: int, *, journal: Optional[Journal] = None) -> None:
        """Increase the balance of ``addr`` by ``amount``."""
        _check_addr(addr)
        self._check_amount(amount)
        with self._L:
            self._ledger[addr] = self._add_checked(self._ledger.get(addr, 0), amount)
            if journal is not None:
                journal.record(addr, amount)

    def debit(self, addr: Address, amount: int, *, journal: Optional[Journal] = None) -> None:
        """Decrease the balance of ``addr`` by ``amount`` if sufficient."""
        _check_addr(addr)
        self._check_amount(amount)
        with self._L:
            cur = self._ledger.get(addr, 0)
            if amount > cur:
                raise InsufficientFundsError(
                    "insufficient balance",
                    context={"address": str(addr), "balance": cur, "amount": amount},
                )
            self._ledger[addr] = cur - amount
            if journal is not None:
                journal.record(addr, -amount)

    def transfer(self, frm: Address, to: Address, amount: int, *, journal: Optional[Journal] = None) -> None:
        """
        Debit ``frm`` and credit ``to`` by ``amount``.

        Either both sides change or neither does.
        """
        _check_addr(frm)
        _check_addr(to)
        self._check_amount(amount)
        if amount == 0:
            return
        with self._L:
            cur_from = self._ledger.get(frm, 0)
            if amount > cur_from:
                raise InsufficientFundsError(
                    "insufficient balance",
                    context={"address": str(frm), "balance": cur_from, "amount": amount},
                )
            if frm == to:
                return
            new_to = self._add_checked(self._ledger.get(to, 0), amount)
            self._ledger[frm] = cur_from - amount
            self._ledger[to] = new_to
            if journal is not None:
                journal.record(frm, -amount)
                journal.record(to, amount)

    def revert(self, journal: Journal) -> None:
        """Undo every delta in ``journal``, newest first, and clear it."""
        with self._L:
            for addr, delta in reversed(journal.entries):
                self._ledger[addr] = self._ledger.get(addr, 0) - delta
            journal.entries.clear()


__all__ = ["Journal", "Treasury"]
