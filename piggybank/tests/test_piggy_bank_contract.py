"""
Drive the piggy bank handlers directly, without a host: build a
ReceiveContext by hand, call the handler, inspect the returned action and
the mutated state.
"""

from __future__ import annotations

import pytest

from piggybank.contracts.piggy_bank import (BankState, PiggyBank, balance_of,
                                            init_intact, insert_amount,
                                            smash_amount)
from piggybank.errors import (DecodeError, InvalidStateError,
                              UnauthorizedError)
from piggybank.runtime import (Accept, ContractAddress, InitContext,
                               ReceiveContext, SimpleTransfer)

SELF = ContractAddress(7, 0)


def _ctx(owner, sender, balance=0, parameter=b""):
    return ReceiveContext(
        self_owner=owner,
        invoker=sender,
        self_address=SELF,
        balance=balance,
        parameter=parameter,
    )


def test_init_is_intact(owner):
    state = init_intact(InitContext(owner))
    assert state.status is BankState.INTACT
    assert state.label == "Intact"


def test_insert_accepts_while_intact(owner, alice):
    state = PiggyBank()
    action = insert_amount(_ctx(owner, alice, balance=50), 50, state)
    assert action == Accept()
    assert state.is_intact


def test_insert_rejected_when_smashed(owner, alice):
    state = PiggyBank(BankState.SMASHED)
    with pytest.raises(InvalidStateError, match="already smashed"):
        insert_amount(_ctx(owner, alice, balance=1), 1, state)


def test_smash_by_owner_sweeps_balance(owner):
    state = PiggyBank()
    action = smash_amount(_ctx(owner, owner, balance=123), 0, state)
    assert action == SimpleTransfer(owner, 123)
    assert state.status is BankState.SMASHED


def test_smash_by_other_is_unauthorized(owner, alice):
    state = PiggyBank()
    with pytest.raises(UnauthorizedError) as ei:
        smash_amount(_ctx(owner, alice, balance=5), 0, state)
    assert ei.value.context["sender"] == str(alice)
    assert state.is_intact


def test_smash_checks_owner_before_state(owner, alice):
    state = PiggyBank(BankState.SMASHED)
    with pytest.raises(UnauthorizedError):
        smash_amount(_ctx(owner, alice), 0, state)


def test_smash_twice_is_invalid_state(owner):
    state = PiggyBank()
    smash_amount(_ctx(owner, owner, balance=10), 0, state)
    with pytest.raises(InvalidStateError):
        smash_amount(_ctx(owner, owner, balance=0), 0, state)


def test_contract_sender_never_matches_owner(owner):
    with pytest.raises(UnauthorizedError):
        smash_amount(_ctx(owner, ContractAddress(0, 0), balance=5), 0, PiggyBank())


def test_balance_of_sweeps_without_state_change(owner):
    state = PiggyBank()
    action = balance_of(_ctx(owner, owner, balance=77), 0, state)
    assert action == SimpleTransfer(owner, 77)
    assert state.is_intact


def test_balance_of_by_other_is_unauthorized(owner, bob):
    with pytest.raises(UnauthorizedError):
        balance_of(_ctx(owner, bob, balance=77), 0, PiggyBank())


def test_state_bytes():
    assert PiggyBank().to_bytes() == b"\x00"
    assert PiggyBank(BankState.SMASHED).to_bytes() == b"\x01"
    assert PiggyBank.from_bytes(b"\x01").status is BankState.SMASHED


@pytest.mark.parametrize("raw", [b"", b"\x02", b"\x00\x00"])
def test_state_bytes_rejects_garbage(raw):
    with pytest.raises(DecodeError):
        PiggyBank.from_bytes(raw)


def test_smash_is_terminal():
    state = PiggyBank()
    state.smash()
    with pytest.raises(InvalidStateError):
        state.smash()
