"""
Parameter schema types for piggybank contracts.

The surface mirrors the shapes contract entrypoints declare:
  - u8 … u128 / i8 … i128 (fixed-width integers)
  - bool
  - string (UTF-8, u32 length prefix on the wire)
  - [T;N] fixed-length arrays
  - named structs (fields in declaration order)
  - unit (no payload)

Utilities here *only* describe and validate Python values; the on-wire format
is implemented in piggybank.abi.encoding/decoding.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple, Union

__all__ = [
    "ABITypeError",
    "ValidationError",
    "UIntType",
    "IntType",
    "BoolType",
    "StringType",
    "ArrayType",
    "Struct",
    "UnitType",
    "SchemaType",
    "parse_type",
    "as_schema",
]

_WIDTHS = (8, 16, 32, 64, 128)


class ABITypeError(TypeError):
    """Raised when a schema spec is malformed or unsupported."""


class ValidationError(ValueError):
    """Raised when a Python value does not conform to a schema."""


@dataclass(frozen=True)
class UIntType:
    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in _WIDTHS:
            raise ABITypeError(f"unsupported unsigned width: {self.bits}")

    @property
    def size(self) -> int:
        return self.bits // 8

    def validate(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{self.name} expects int, got {type(value).__name__}")
        if value < 0 or value.bit_length() > self.bits:
            raise ValidationError(f"{value} out of range for {self.name}")
        return value

    @property
    def name(self) -> str:
        return f"u{self.bits}"

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class IntType:
    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in _WIDTHS:
            raise ABITypeError(f"unsupported signed width: {self.bits}")

    @property
    def size(self) -> int:
        return self.bits // 8

    def validate(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{self.name} expects int, got {type(value).__name__}")
        lo = -(1 << (self.bits - 1))
        hi = (1 << (self.bits - 1)) - 1
        if not lo <= value <= hi:
            raise ValidationError(f"{value} out of range for {self.name}")
        return value

    @property
    def name(self) -> str:
        return f"i{self.bits}"

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class BoolType:
    def validate(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise ValidationError(f"bool expects bool, got {type(value).__name__}")
        return value

    @property
    def name(self) -> str:
        return "bool"

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class StringType:
    def validate(self, value: Any) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"string expects str, got {type(value).__name__}")
        if len(value.encode("utf-8")) > 0xFFFFFFFF:
            raise ValidationError("string longer than u32 length prefix")
        return value

    @property
    def name(self) -> str:
        return "string"

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class UnitType:
    def validate(self, value: Any) -> None:
        if value is not None:
            raise ValidationError("unit expects None")
        return None

    @property
    def name(self) -> str:
        return "unit"

    def to_json(self) -> Any:
        return self.name


@dataclass(frozen=True)
class ArrayType:
    item: "SchemaType"
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ABITypeError("array length must be >= 0")

    def validate(self, value: Any) -> List[Any]:
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f"{self.name} expects a sequence, got {type(value).__name__}")
        if len(value) != self.length:
            raise ValidationError(f"{self.name} expects {self.length} items, got {len(value)}")
        return [self.item.validate(v) for v in value]

    @property
    def name(self) -> str:
        return f"[{self.item.name};{self.length}]"

    def to_json(self) -> Any:
        return {"array": self.item.to_json(), "length": self.length}


@dataclass(frozen=True)
class Struct:
    """A named record; ``fields`` is an ordered tuple of (name, type) pairs."""

    type_name: str
    fields: Tuple[Tuple[str, "SchemaType"], ...]

    @classmethod
    def of(cls, type_name: str, **fields: Union[str, "SchemaType"]) -> "Struct":
        """Build from keyword fields; string values are parsed with parse_type."""
        return cls(
            type_name,
            tuple((k, parse_type(v) if isinstance(v, str) else v) for k, v in fields.items()),
        )

    def validate(self, value: Any) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise ValidationError(f"{self.type_name} expects a mapping, got {type(value).__name__}")
        expected = [k for k, _ in self.fields]
        extra = set(value) - set(expected)
        if extra:
            raise ValidationError(f"{self.type_name}: unexpected fields {sorted(extra)}")
        out: Dict[str, Any] = {}
        for k, typ in self.fields:
            if k not in value:
                raise ValidationError(f"{self.type_name}: missing field {k!r}")
            out[k] = typ.validate(value[k])
        return out

    @property
    def name(self) -> str:
        return self.type_name

    def to_json(self) -> Any:
        return {"struct": self.type_name, "fields": [[k, t.to_json()] for k, t in self.fields]}


SchemaType = Union[UIntType, IntType, BoolType, StringType, UnitType, ArrayType, Struct]

_ARRAY_RE = re.compile(r"^\[\s*(.+?)\s*;\s*(\d+)\s*\]$")


def parse_type(spec: str) -> SchemaType:
    """
    Parse a textual type spec into a schema object.
    Supported forms:
      - "u8" "u16" "u32" "u64" "u128"
      - "i8" "i16" "i32" "i64" "i128"
      - "bool", "string", "unit"
      - "[T;N]" where T is any supported spec (nesting allowed)
    Structs have no textual form; build them with Struct.of(...).
    """
    if not isinstance(spec, str) or not spec.strip():
        raise ABITypeError("type spec must be a non-empty string")

    s = spec.strip().lower()

    if s == "bool":
        return BoolType()
    if s == "string":
        return StringType()
    if s in ("unit", "()"):
        return UnitType()

    m = _ARRAY_RE.match(s)
    if m:
        return ArrayType(parse_type(m.group(1)), int(m.group(2)))

    if s[:1] in ("u", "i") and s[1:].isdigit():
        bits = int(s[1:])
        if bits not in _WIDTHS:
            raise ABITypeError(f"unsupported integer width in {spec!r}")
        return UIntType(bits) if s[0] == "u" else IntType(bits)

    raise ABITypeError(f"unsupported type spec: {spec!r}")


def as_schema(spec: Union[str, SchemaType, None]) -> SchemaType:
    """Normalize a spec (text, schema object or None for unit) to a schema object."""
    if spec is None:
        return UnitType()
    if isinstance(spec, str):
        return parse_type(spec)
    return spec
