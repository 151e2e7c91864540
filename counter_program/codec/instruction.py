"""
Instruction codec for the counter program.

Wire format (Borsh enum layout)
-------------------------------
    tag:     u8
    operand: u32 little-endian, present only for variants that take one

    tag  variant    operand
    ---  ---------  -------
     0   Init       -
     1   Double     -
     2   Half       -
     3   Add        u32
     4   Subtract   u32
     5   Multiply   u32
     6   Divide     u32

The tag table is part of the program's public contract: clients already
build `[tag]` / `[tag, le32(value)]` buffers by hand, so entries are only
ever appended.

Decoding is exhaustive over `Op`; anything else is MalformedInstruction.
With `strict=True` (the default, mirroring Borsh `try_from_slice`) bytes
after the operand are rejected as well.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from counter_program.config import load_config
from counter_program.errors import MalformedInstruction

from .record import U32_MAX

__all__ = [
    "Op",
    "Instruction",
    "OPERAND_OPS",
    "decode_instruction",
    "encode_instruction",
]

_TAG = struct.Struct("<B")
_OPERAND = struct.Struct("<I")


class Op(IntEnum):
    INIT = 0
    DOUBLE = 1
    HALF = 2
    ADD = 3
    SUBTRACT = 4
    MULTIPLY = 5
    DIVIDE = 6

    @property
    def takes_operand(self) -> bool:
        return self in OPERAND_OPS

    @classmethod
    def from_name(cls, name: str) -> "Op":
        """Parse a case-insensitive variant name ('add', 'Subtract', 'sub')."""
        norm = name.strip().upper()
        norm = _ALIASES.get(norm, norm)
        try:
            return cls[norm]
        except KeyError:
            raise ValueError(f"unknown operation: {name!r}") from None


OPERAND_OPS = frozenset({Op.ADD, Op.SUBTRACT, Op.MULTIPLY, Op.DIVIDE})

_ALIASES = {"SUB": "SUBTRACT", "MUL": "MULTIPLY", "DIV": "DIVIDE"}


@dataclass(frozen=True)
class Instruction:
    """
    A decoded, typed request.

    `value` is set exactly when `op.takes_operand`; it must fit in u32.
    """
    op: Op
    value: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "op", Op(self.op))
        if self.op.takes_operand:
            if not isinstance(self.value, int) or isinstance(self.value, bool):
                raise TypeError(f"{self.op.name} requires an int operand")
            if not 0 <= self.value <= U32_MAX:
                raise ValueError(f"operand out of u32 range: {self.value}")
        elif self.value is not None:
            raise ValueError(f"{self.op.name} takes no operand")

    # ---- constructors ---- #

    @classmethod
    def init(cls) -> "Instruction":
        return cls(Op.INIT)

    @classmethod
    def double(cls) -> "Instruction":
        return cls(Op.DOUBLE)

    @classmethod
    def half(cls) -> "Instruction":
        return cls(Op.HALF)

    @classmethod
    def add(cls, value: int) -> "Instruction":
        return cls(Op.ADD, value)

    @classmethod
    def subtract(cls, value: int) -> "Instruction":
        return cls(Op.SUBTRACT, value)

    @classmethod
    def multiply(cls, value: int) -> "Instruction":
        return cls(Op.MULTIPLY, value)

    @classmethod
    def divide(cls, value: int) -> "Instruction":
        return cls(Op.DIVIDE, value)

    def to_dict(self) -> dict:
        d: dict = {"op": self.op.name, "tag": int(self.op)}
        if self.value is not None:
            d["value"] = self.value
        return d


def decode_instruction(
    data: bytes | bytearray | memoryview, *, strict: Optional[bool] = None
) -> Instruction:
    """
    Parse `data` into an Instruction.

    `strict=None` takes the setting from config (COUNTER_STRICT_INSTRUCTION).
    """
    if strict is None:
        strict = load_config().strict_instruction_length
    buf = bytes(data)
    if not buf:
        raise MalformedInstruction("empty instruction", data={"expected": 1, "got": 0})

    (tag,) = _TAG.unpack_from(buf, 0)
    try:
        op = Op(tag)
    except ValueError:
        raise MalformedInstruction("unknown instruction tag", tag=tag) from None

    offset = _TAG.size
    value: Optional[int] = None
    if op.takes_operand:
        need = offset + _OPERAND.size
        if len(buf) < need:
            raise MalformedInstruction(
                "truncated operand", tag=tag, data={"expected": need, "got": len(buf)}
            )
        (value,) = _OPERAND.unpack_from(buf, offset)
        offset = need

    if strict and len(buf) != offset:
        raise MalformedInstruction(
            "trailing bytes after instruction",
            tag=tag,
            data={"expected": offset, "got": len(buf)},
        )
    return Instruction(op, value)


def encode_instruction(instruction: Instruction) -> bytes:
    """Inverse of `decode_instruction`."""
    out = _TAG.pack(int(instruction.op))
    if instruction.value is not None:
        out += _OPERAND.pack(instruction.value)
    return out
