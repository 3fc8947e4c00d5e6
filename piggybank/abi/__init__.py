"""
piggybank.abi
=============

Parameter schemas and their wire format.

This package provides:
  • Schema types (integers, bool, string, fixed arrays, structs, unit).
  • decode()/ParameterCursor for reading parameter bytes handed to contracts.
  • encode() for building parameter bytes in tooling and tests.

Everything here is pure-Python and deterministic.
"""

from __future__ import annotations

from .decoding import ParameterCursor, decode
from .encoding import encode
from .types import (ABITypeError, ArrayType, BoolType, IntType, SchemaType,
                    StringType, Struct, UIntType, UnitType, ValidationError,
                    as_schema, parse_type)

__all__ = [
    "ABITypeError",
    "ValidationError",
    "ArrayType",
    "BoolType",
    "IntType",
    "SchemaType",
    "StringType",
    "Struct",
    "UIntType",
    "UnitType",
    "as_schema",
    "parse_type",
    "ParameterCursor",
    "decode",
    "encode",
]
