from __future__ import annotations

import pytest

from piggybank.config import BankConfig
from piggybank.runtime import AccountAddress, ContractAddress, Host


def account(n: int) -> AccountAddress:
    return AccountAddress(bytes([n]) * 32)


@pytest.fixture
def owner() -> AccountAddress:
    return account(1)


@pytest.fixture
def alice() -> AccountAddress:
    return account(2)


@pytest.fixture
def bob() -> AccountAddress:
    return account(3)


@pytest.fixture
def config() -> BankConfig:
    return BankConfig(strict_mode=True, max_parameter_bytes=1024, max_amount_bits=64, log_level="WARNING")


@pytest.fixture
def host(config: BankConfig, owner, alice, bob) -> Host:
    """Fresh host with the owner and two depositors funded."""
    h = Host(config=config)
    for who in (owner, alice, bob):
        h.fund(who, 1_000_000)
    return h


@pytest.fixture
def bank(host: Host, owner) -> ContractAddress:
    """A DCBBank instance owned by `owner`."""
    return host.deploy("DCBBank", owner)
