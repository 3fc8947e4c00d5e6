from __future__ import annotations

import logging

import pytest

from piggybank.abi import encode
from piggybank.config import BankConfig
from piggybank.contracts import BankState
from piggybank.errors import (DecodeError, InsufficientFundsError,
                              InvalidStateError, LedgerError, NotPayableError,
                              UnauthorizedError, UnknownContractError,
                              UnknownEntrypointError)
from piggybank.runtime import (Accept, ContextError, ContractAddress, Host,
                               SimpleTransfer)


def test_deposit_smash_deposit_scenario(host, bank, owner, alice):
    assert host.state_of(bank).status is BankState.INTACT

    out = host.invoke(bank, "insertAmount", sender=alice, amount=100)
    assert out.action == Accept()
    assert out.balance == 100
    assert host.balance_of(bank) == 100
    assert host.state_of(bank).status is BankState.INTACT

    owner_before = host.balance_of(owner)
    out = host.invoke(bank, "smashAmount", sender=owner)
    assert out.action == SimpleTransfer(owner, 100)
    assert host.state_of(bank).status is BankState.SMASHED
    assert host.balance_of(bank) == 0
    assert host.balance_of(owner) == owner_before + 100

    alice_before = host.balance_of(alice)
    with pytest.raises(InvalidStateError):
        host.invoke(bank, "insertAmount", sender=alice, amount=1)
    assert host.balance_of(alice) == alice_before
    assert host.balance_of(bank) == 0
    assert host.state_of(bank).status is BankState.SMASHED


def test_deposits_accumulate(host, bank, alice, bob):
    host.invoke(bank, "insertAmount", sender=alice, amount=10)
    host.invoke(bank, "insertAmount", sender=bob, amount=0)
    host.invoke(bank, "insertAmount", sender=bob, amount=32)
    assert host.balance_of(bank) == 42


def test_smash_by_non_owner_leaves_everything(host, bank, alice):
    host.invoke(bank, "insertAmount", sender=alice, amount=9)
    with pytest.raises(UnauthorizedError):
        host.invoke(bank, "smashAmount", sender=alice)
    assert host.balance_of(bank) == 9
    assert host.state_of(bank).is_intact


def test_second_smash_fails_regardless_of_sender(host, bank, owner, alice):
    host.invoke(bank, "smashAmount", sender=owner)
    with pytest.raises(InvalidStateError):
        host.invoke(bank, "smashAmount", sender=owner)
    with pytest.raises(UnauthorizedError):
        host.invoke(bank, "smashAmount", sender=alice)


def test_smash_empty_bank_transfers_zero(host, bank, owner):
    out = host.invoke(bank, "smashAmount", sender=owner)
    assert out.action == SimpleTransfer(owner, 0)
    assert host.state_of(bank).status is BankState.SMASHED


def test_balance_of_sweeps_but_keeps_bank_intact(host, bank, owner, alice):
    host.invoke(bank, "insertAmount", sender=alice, amount=25)
    owner_before = host.balance_of(owner)

    out = host.invoke(bank, "balanceOf", sender=owner)
    assert out.action == SimpleTransfer(owner, 25)
    assert host.balance_of(owner) == owner_before + 25
    assert host.balance_of(bank) == 0
    assert host.state_of(bank).is_intact

    host.invoke(bank, "insertAmount", sender=alice, amount=1)
    assert host.balance_of(bank) == 1


def test_balance_of_by_non_owner(host, bank, alice):
    host.invoke(bank, "insertAmount", sender=alice, amount=3)
    with pytest.raises(UnauthorizedError):
        host.invoke(bank, "balanceOf", sender=alice)
    assert host.balance_of(bank) == 3
    assert host.state_of(bank).is_intact


def test_contract_sender_cannot_smash(host, bank):
    other = host.deploy("DCBBank", "0x" + "09" * 32)
    with pytest.raises(UnauthorizedError):
        host.invoke(bank, "smashAmount", sender=other)


def test_value_on_non_payable_entrypoint(host, bank, owner):
    before = host.balance_of(owner)
    with pytest.raises(NotPayableError):
        host.invoke(bank, "smashAmount", sender=owner, amount=5)
    assert host.balance_of(owner) == before
    assert host.state_of(bank).is_intact


def test_deposit_without_funds_rolls_back(host, bank):
    poor = "0x" + "0a" * 32
    with pytest.raises(InsufficientFundsError):
        host.invoke(bank, "insertAmount", sender=poor, amount=1)
    assert host.balance_of(bank) == 0


def test_unknown_entrypoint_and_contract(host, bank, owner):
    with pytest.raises(UnknownEntrypointError):
        host.invoke(bank, "withdrawAll", sender=owner)
    with pytest.raises(UnknownContractError):
        host.invoke(ContractAddress(99), "insertAmount", sender=owner)
    with pytest.raises(UnknownContractError):
        host.deploy("NoSuchBank", owner)


def test_negative_amount_rejected(host, bank, alice):
    with pytest.raises(LedgerError):
        host.invoke(bank, "insertAmount", sender=alice, amount=-1)


def test_deploy_by_contract_rejected(host, bank):
    with pytest.raises(ContextError):
        host.deploy("DCBBank", bank)


def test_addresses_are_sequential(host, owner):
    a = host.deploy("DCBBank", owner)
    b = host.deploy("DCBBank", owner)
    assert b.index == a.index + 1
    assert str(a) == f"<{a.index},0>"


def test_receive_parameter_must_decode(host, owner, alice):
    addr = host.deploy("INDBankStruct", owner, encode(True, "bool"))
    host.invoke(addr, "insertAmount", sender=alice, amount=5, parameter=encode(7, "u8"))
    host.invoke(addr, "insertAmount3", sender=alice, amount=5, parameter=encode(2**40, "u64"))
    host.invoke(addr, "insertAmount4", sender=alice, amount=5, parameter=encode(-3, "i8"))
    assert host.balance_of(addr) == 15

    with pytest.raises(DecodeError):
        host.invoke(addr, "insertAmount1", sender=alice, amount=5, parameter=b"\x01")
    with pytest.raises(DecodeError):
        host.invoke(addr, "insertAmount", sender=alice, amount=5)
    assert host.balance_of(addr) == 15


def test_trailing_parameter_bytes_follow_strict_mode(owner, alice):
    lax = Host(config=BankConfig(strict_mode=False, max_parameter_bytes=1024, max_amount_bits=64, log_level="WARNING"))
    strict = Host(config=BankConfig(strict_mode=True, max_parameter_bytes=1024, max_amount_bits=64, log_level="WARNING"))
    for h in (lax, strict):
        h.fund(alice, 10)
    a = lax.deploy("Struct2U8", owner, b"\x01\x00")
    b = strict.deploy("Struct2U8", owner, b"\x01\x00")

    lax.invoke(a, "insertAmount", sender=alice, amount=1, parameter=b"\x01\x02")
    with pytest.raises(DecodeError):
        strict.invoke(b, "insertAmount", sender=alice, amount=1, parameter=b"\x01\x02")


def test_parameter_size_cap(owner, alice):
    h = Host(config=BankConfig(strict_mode=True, max_parameter_bytes=4, max_amount_bits=64, log_level="WARNING"))
    with pytest.raises(DecodeError, match="too large"):
        h.deploy("Struct2U8", owner, b"\x01" * 5)
    addr = h.deploy("Struct2U8", owner, b"\x01")
    with pytest.raises(DecodeError, match="too large"):
        h.invoke(addr, "insertAmount", sender=alice, parameter=b"\x00" * 5)


def test_amount_width_is_bounded(owner, alice):
    h = Host(config=BankConfig(strict_mode=True, max_parameter_bytes=1024, max_amount_bits=8, log_level="WARNING"))
    h.fund(alice, 255)
    addr = h.deploy("DCBBank", owner)
    with pytest.raises(LedgerError):
        h.fund(alice, 256)
    h.invoke(addr, "insertAmount", sender=alice, amount=200)
    h.fund(alice, 200)
    with pytest.raises(LedgerError, match="overflow"):
        h.invoke(addr, "insertAmount", sender=alice, amount=100)
    assert h.balance_of(addr) == 200
    assert h.balance_of(alice) == 255


def test_rollback_is_logged(host, bank, alice, caplog):
    with caplog.at_level(logging.WARNING, logger="piggybank.runtime.host"):
        with pytest.raises(UnauthorizedError):
            host.invoke(bank, "smashAmount", sender=alice)
    assert "rolled back" in caplog.text
    assert "unauthorized" in caplog.text
