from __future__ import annotations

import threading

import pytest

from piggybank.contracts import PiggyBank
from piggybank.contracts.piggy_bank import init_intact
from piggybank.errors import UnauthorizedError
from piggybank.runtime import (AccountAddress, ContractModule, Host, Journal,
                               Treasury, require)


def _failing_bank(name, side_effect):
    """A bank whose deposit runs ``side_effect`` on another thread, then fails."""
    module = ContractModule(name, PiggyBank)
    module.init()(init_intact)

    @module.receive("insertAmount", payable=True)
    def insert(ctx, amount, state):
        worker = threading.Thread(target=side_effect)
        worker.start()
        worker.join()
        require(False, "refused", error=UnauthorizedError)

    return module


def test_treasury_revert_only_undoes_own_journal(owner, alice):
    treasury = Treasury(max_bits=64)
    treasury.credit(alice, 100)
    journal = Journal()
    treasury.transfer(alice, owner, 30, journal=journal)
    treasury.credit(owner, 5)
    treasury.revert(journal)
    assert treasury.balance(alice) == 100
    assert treasury.balance(owner) == 5
    assert len(journal) == 0


def test_funding_during_failed_call_is_kept(host, owner, alice):
    carol = AccountAddress(b"\x04" * 32)
    bank = host.deploy(_failing_bank("FundsCarol", lambda: host.fund(carol, 10)), owner)

    with pytest.raises(UnauthorizedError):
        host.invoke(bank, "insertAmount", sender=alice, amount=5)

    assert host.balance_of(carol) == 10
    assert host.balance_of(alice) == 1_000_000
    assert host.balance_of(bank) == 0


def test_call_on_host_sharing_treasury_is_kept(config, owner, alice, bob):
    treasury = Treasury(max_bits=config.max_amount_bits)
    host_a = Host(config=config, treasury=treasury)
    host_b = Host(config=config, treasury=treasury)
    host_a.fund(alice, 1000)
    host_b.fund(bob, 1000)

    bank_b = host_b.deploy("DCBBank", owner)

    def deposit_on_b():
        host_b.invoke(bank_b, "insertAmount", sender=bob, amount=40)

    bank_a = host_a.deploy(_failing_bank("DepositsOnB", deposit_on_b), owner)
    assert bank_a != bank_b

    with pytest.raises(UnauthorizedError):
        host_a.invoke(bank_a, "insertAmount", sender=alice, amount=5)

    assert host_b.balance_of(bank_b) == 40
    assert host_b.balance_of(bob) == 960
    assert host_b.state_of(bank_b).is_intact
    assert host_a.balance_of(alice) == 1000
    assert host_a.balance_of(bank_a) == 0

    # B's deposit is intact, so the owner sweeps exactly what was deposited
    out = host_b.invoke(bank_b, "smashAmount", sender=owner)
    assert out.action.amount == 40


def test_hosts_sharing_treasury_allocate_distinct_addresses(config, owner):
    treasury = Treasury(max_bits=config.max_amount_bits)
    first = Host(config=config, treasury=treasury).deploy("DCBBank", owner)
    second = Host(config=config, treasury=treasury).deploy("DCBBank", owner)
    assert (str(first), str(second)) == ("<0,0>", "<1,0>")
