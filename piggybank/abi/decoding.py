"""
Decoder for piggybank parameter bytes (inverse of encoding.py).

Conventions mirrored from the encoder:
- uN / iN:      fixed width, little-endian (two's complement for iN)
- bool:         1 byte (0x00/0x01); any other byte is rejected
- string:       u32 LE byte length || UTF-8 bytes
- [T;N]:        N consecutive items, no length prefix
- struct:       fields concatenated in declaration order
- unit:         no bytes

Top-level:
- ParameterCursor(buf).get(schema) -> value   (prefix read, advances the cursor)
- decode(buf, schema, strict=True) -> value   (whole-buffer read)

Every failure surfaces as piggybank.errors.DecodeError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Union

from ..errors import DecodeError
from .types import (ArrayType, BoolType, IntType, SchemaType, StringType,
                    Struct, UIntType, UnitType, as_schema)

__all__ = ["ParameterCursor", "decode"]

log = logging.getLogger(__name__)


class ParameterCursor:
    """
    Sequential reader over parameter bytes.

    Values are read from the current position; trailing bytes after a read
    are left for subsequent reads and are not an error by themselves.
    """

    __slots__ = ("_buf", "_pos")

    def __init__(self, buf: Union[bytes, bytearray, memoryview]) -> None:
        self._buf = bytes(buf)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._pos

    def _take(self, n: int) -> bytes:
        j = self._pos + n
        if j > len(self._buf):
            raise DecodeError(
                "truncated parameter",
                context={"needed": n, "offset": self._pos, "size": len(self._buf)},
            )
        out = self._buf[self._pos:j]
        self._pos = j
        return out

    def get(self, schema: Union[str, SchemaType, None]) -> Any:
        """Decode one value of ``schema`` at the current position."""
        return self._read(as_schema(schema))

    def _read(self, typ: SchemaType) -> Any:
        if isinstance(typ, UnitType):
            return None

        if isinstance(typ, BoolType):
            b = self._take(1)[0]
            if b == 0x00:
                return False
            if b == 0x01:
                return True
            raise DecodeError("invalid boolean value", context={"byte": b})

        if isinstance(typ, UIntType):
            return int.from_bytes(self._take(typ.size), "little", signed=False)

        if isinstance(typ, IntType):
            return int.from_bytes(self._take(typ.size), "little", signed=True)

        if isinstance(typ, StringType):
            length = int.from_bytes(self._take(4), "little", signed=False)
            raw = self._take(length)
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError("string is not valid UTF-8") from e

        if isinstance(typ, ArrayType):
            return [self._read(typ.item) for _ in range(typ.length)]

        if isinstance(typ, Struct):
            out: Dict[str, Any] = {}
            for name, field_type in typ.fields:
                out[name] = self._read(field_type)
            return out

        raise DecodeError(f"unsupported schema: {typ!r}")


def decode(
    buf: Union[bytes, bytearray, memoryview],
    schema: Union[str, SchemaType, None],
    *,
    strict: bool = True,
) -> Any:
    """
    Decode a complete value of ``schema`` from ``buf``.

    With ``strict`` the whole buffer must be consumed; leftover bytes raise
    DecodeError. Without it they are ignored (logged at DEBUG).
    """
    cur = ParameterCursor(buf)
    value = cur.get(schema)
    if cur.remaining:
        if strict:
            raise DecodeError(
                "trailing bytes after parameter",
                context={"trailing": cur.remaining},
            )
        log.debug("decode: ignoring %d trailing byte(s)", cur.remaining)
    return value
