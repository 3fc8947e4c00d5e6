"""
Piggy bank variants whose initial state depends on a decoded init parameter.

Each variant declares the parameter structure it expects, reads a value from
the start of the parameter bytes and derives Intact/Smashed from it. Reads are
prefix reads: bytes of the declared structure beyond the value read are not
inspected. A parameter too short or malformed for the read fails init with
DecodeError.

| contract        | reads        | Intact when                      |
|-----------------|--------------|----------------------------------|
| INDBankStruct   | bool         | flag is true                     |
| Struct2U8       | bool         | flag is true                     |
| UserFullDetails | [string;3]   | second item == "UserFullDetails" |
| UserMixed       | [u8;3]       | second item > 0                  |

Deposit entrypoints declare a scalar parameter that must decode but is
otherwise ignored.
"""

from __future__ import annotations

from typing import Any, Callable, Union

from ..abi.types import SchemaType, Struct, as_schema
from ..runtime.context import InitContext
from ..runtime.registry import ContractModule
from .piggy_bank import PiggyBank, insert_amount, smash_amount

INIT_PARAMETER = Struct.of("InitParameter", age1="u8", age="u8")

USER_FULL_DETAILS = Struct.of(
    "UserDetails",
    age="u8",
    name="string",
    city="string",
    country="string",
    nicknames="[string;3]",
)

USER_MIXED_DETAILS = Struct.of(
    "UserDetails",
    age="u8",
    name="string",
    city="string",
    country="string",
    integers="[u8;3]",
)


def init_from_parameter(read: Union[str, SchemaType], predicate: Callable[[Any], bool]):
    """Build an init handler: decode ``read`` from the parameter, Intact iff ``predicate``."""
    schema = as_schema(read)

    def init(ctx: InitContext) -> PiggyBank:
        value = ctx.parameter_cursor().get(schema)
        return PiggyBank.from_flag(bool(predicate(value)))

    return init


# INDBankStruct: one deposit entrypoint per scalar width.
IND_BANK_STRUCT = ContractModule("INDBankStruct", PiggyBank, description="flag-gated bank, typed deposits")
IND_BANK_STRUCT.init(parameter=INIT_PARAMETER)(init_from_parameter("bool", lambda flag: flag))
for _name, _param in (
    ("insertAmount", "u8"),
    ("insertAmount1", "u16"),
    ("insertAmount2", "u32"),
    ("insertAmount3", "u64"),
    ("insertAmount4", "i8"),
    ("insertAmount5", "i16"),
    ("insertAmount6", "i32"),
    ("insertAmount7", "i64"),
):
    IND_BANK_STRUCT.receive(_name, payable=True, parameter=_param)(insert_amount)
IND_BANK_STRUCT.receive("smashAmount")(smash_amount)

STRUCT_2U8 = ContractModule("Struct2U8", PiggyBank, description="flag-gated bank")
STRUCT_2U8.init(parameter=INIT_PARAMETER)(init_from_parameter("bool", lambda flag: flag))
STRUCT_2U8.receive("insertAmount", payable=True, parameter="u8")(insert_amount)

USER_FULL = ContractModule("UserFullDetails", PiggyBank, description="bank gated on a nickname")
USER_FULL.init(parameter=USER_FULL_DETAILS)(
    init_from_parameter("[string;3]", lambda tokens: tokens[1] == "UserFullDetails")
)
USER_FULL.receive("insertAmount", payable=True, parameter="u8")(insert_amount)

USER_MIXED = ContractModule("UserMixed", PiggyBank, description="bank gated on a byte array")
USER_MIXED.init(parameter=USER_MIXED_DETAILS)(init_from_parameter("[u8;3]", lambda tokens: tokens[1] > 0))
USER_MIXED.receive("insertAmount", payable=True, parameter="u8")(insert_amount)
USER_MIXED.receive("returnStruct")(insert_amount)

__all__ = [
    "INIT_PARAMETER",
    "USER_FULL_DETAILS",
    "USER_MIXED_DETAILS",
    "init_from_parameter",
    "IND_BANK_STRUCT",
    "STRUCT_2U8",
    "USER_FULL",
    "USER_MIXED",
]
