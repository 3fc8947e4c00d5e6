"""
Canonical encoding of piggybank parameter values.

- uN / iN:      fixed width, little-endian (two's complement for iN)
- bool:         0x00 / 0x01
- string:       u32 LE byte length || UTF-8 bytes
- [T;N]:        N consecutive items, no length prefix
- struct:       fields concatenated in declaration order
- unit:         no bytes

Values are validated against the schema first (types.ValidationError on
mismatch), so encode() never produces bytes that decode() would reject.
"""

from __future__ import annotations

from typing import Any, Union

from .types import (ArrayType, BoolType, IntType, SchemaType, StringType,
                    Struct, UIntType, UnitType, as_schema)

__all__ = ["encode"]


def _encode(value: Any, typ: SchemaType) -> bytes:
    if isinstance(typ, UnitType):
        return b""
    if isinstance(typ, BoolType):
        return b"\x01" if value else b"\x00"
    if isinstance(typ, UIntType):
        return int(value).to_bytes(typ.size, "little", signed=False)
    if isinstance(typ, IntType):
        return int(value).to_bytes(typ.size, "little", signed=True)
    if isinstance(typ, StringType):
        raw = value.encode("utf-8")
        return len(raw).to_bytes(4, "little", signed=False) + raw
    if isinstance(typ, ArrayType):
        return b"".join(_encode(v, typ.item) for v in value)
    if isinstance(typ, Struct):
        return b"".join(_encode(value[name], t) for name, t in typ.fields)
    raise TypeError(f"unsupported schema: {typ!r}")


def encode(value: Any, schema: Union[str, SchemaType, None]) -> bytes:
    """Validate ``value`` against ``schema`` and return its canonical bytes."""
    typ = as_schema(schema)
    return _encode(typ.validate(value), typ)
