"""
counter_program.engine — the transition function and its arithmetic helpers.

`apply(record, instruction)` is pure: it reads one Record, returns a new one
and touches nothing else.

Arithmetic policy
-----------------
Python ints are unbounded, so every growth path clamps explicitly at the
record's u32 bounds instead of wrapping:

    Init         -> 1
    Add(v)       -> min(count + v, U32_MAX)
    Subtract(v)  -> max(count - v, 0)
    Multiply(v)  -> min(count * v, U32_MAX)
    Divide(v)    -> count // v          (DivisionByZero when v == 0)
    Double       -> min(count * 2, U32_MAX)
    Half         -> count // 2

Multiply saturates like the other growth operations; an overflowing
multiply is clamped, never a fault. Division by a literal zero is the only
arithmetic error.
"""

from __future__ import annotations

from typing import Callable, Dict

from counter_program.codec.instruction import Instruction, Op
from counter_program.codec.record import U32_MAX, Record
from counter_program.errors import DivisionByZero

__all__ = [
    "saturating_add",
    "saturating_sub",
    "saturating_mul",
    "checked_div",
    "apply",
]


# ------------------------------ arithmetic -----------------------------------


def _ensure_nonneg_int(n: int) -> int:
    if not isinstance(n, int):
        raise TypeError(f"expected int, got {type(n).__name__}")
    if n < 0:
        raise ValueError("value must be non-negative")
    return n


def saturating_add(a: int, b: int, *, cap: int = U32_MAX) -> int:
    """Saturating addition. Returns min(a + b, cap)."""
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    s = a + b
    return cap if s > cap else s


def saturating_sub(a: int, b: int) -> int:
    """Saturating subtraction. Returns max(a - b, 0)."""
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    return a - b if a >= b else 0


def saturating_mul(a: int, b: int, *, cap: int = U32_MAX) -> int:
    """Saturating multiplication. Returns min(a * b, cap)."""
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    p = a * b
    return cap if p > cap else p


def checked_div(a: int, b: int) -> int:
    """Truncating division; raises DivisionByZero when b == 0."""
    _ensure_nonneg_int(a)
    _ensure_nonneg_int(b)
    if b == 0:
        raise DivisionByZero(count=a)
    return a // b


# ------------------------------ transitions ----------------------------------

_Transition = Callable[[int, Instruction], int]

_TRANSITIONS: Dict[Op, _Transition] = {
    Op.INIT: lambda count, ix: 1,
    Op.DOUBLE: lambda count, ix: saturating_mul(count, 2),
    Op.HALF: lambda count, ix: count // 2,
    Op.ADD: lambda count, ix: saturating_add(count, ix.value),
    Op.SUBTRACT: lambda count, ix: saturating_sub(count, ix.value),
    Op.MULTIPLY: lambda count, ix: saturating_mul(count, ix.value),
    Op.DIVIDE: lambda count, ix: checked_div(count, ix.value),
}


def apply(record: Record, instruction: Instruction) -> Record:
    """Return the record that results from applying `instruction` to `record`."""
    step = _TRANSITIONS[instruction.op]
    return Record(step(record.count, instruction))
