"""
Contract modules shipped with piggybank.

Importing this package registers every module below with the global registry
so hosts and the CLI can find them by name.
"""

from __future__ import annotations

from ..runtime.registry import register_contract
from .piggy_bank import DCB_BANK, BankState, PiggyBank
from .variants import IND_BANK_STRUCT, STRUCT_2U8, USER_FULL, USER_MIXED

ALL_CONTRACTS = (DCB_BANK, IND_BANK_STRUCT, STRUCT_2U8, USER_FULL, USER_MIXED)

for _module in ALL_CONTRACTS:
    register_contract(_module)

__all__ = [
    "BankState",
    "PiggyBank",
    "ALL_CONTRACTS",
    "DCB_BANK",
    "IND_BANK_STRUCT",
    "STRUCT_2U8",
    "USER_FULL",
    "USER_MIXED",
]
