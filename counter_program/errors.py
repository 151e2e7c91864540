"""
counter_program.errors — exceptions raised while processing an instruction.

Every failure is a *typed exception* that aborts the single invocation. The
host turns it into a structured result; the account is left untouched.

Hierarchy
---------
ProgramError (base)
 ├─ MalformedInstruction : unknown tag, truncated operand, trailing bytes
 ├─ CorruptRecord        : stored bytes shorter than the fixed record width
 ├─ Unauthorized         : missing or invalid signing credential
 ├─ DivisionByZero       : Divide instruction with a zero operand
 ├─ AccountInUse         : handle already borrowed by another invocation
 └─ AccountExists        : host asked to create an account twice

Notes
-----
* Overflow/underflow on Add/Subtract/Multiply/Double is *not* an error; the
  engine saturates instead.
* Nothing here is retryable. Retries belong to the host.

These classes import nothing from the rest of the package so the codec,
engine and runtime can all use them without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class ProgramError(Exception):
    """
    Base program error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'UNAUTHORIZED').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "program error"
    code: str = "PROGRAM_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for results/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class MalformedInstruction(ProgramError):
    """
    The instruction buffer could not be decoded.

    Typical triggers:
      - empty buffer
      - tag not in the variant table
      - operand shorter than 4 bytes
      - leftover bytes after the operand (strict mode)
    """
    def __init__(
        self,
        message: str = "malformed instruction",
        *,
        tag: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if tag is not None:
            d.setdefault("tag", tag)
        super().__init__(message=message, code="MALFORMED_INSTRUCTION", data=d or None)


class CorruptRecord(ProgramError):
    """The account's bytes do not hold a full record."""
    def __init__(
        self,
        message: str = "corrupt record",
        *,
        expected: Optional[int] = None,
        got: Optional[int] = None,
    ):
        d: Dict[str, Any] = {}
        if expected is not None:
            d["expected"] = expected
        if got is not None:
            d["got"] = got
        super().__init__(message=message, code="CORRUPT_RECORD", data=d or None)


class Unauthorized(ProgramError):
    """
    The caller did not prove control of the account being mutated.

    `address` is carried as hex when known so operators can see which account
    rejected the call.
    """
    def __init__(
        self,
        message: str = "missing required signature",
        *,
        address: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = {}
        if data:
            d.update(data)
        if address is not None:
            d.setdefault("address", address)
        super().__init__(message=message, code="UNAUTHORIZED", data=d or None)


class DivisionByZero(ProgramError):
    def __init__(self, message: str = "division by zero", *, count: Optional[int] = None):
        super().__init__(
            message=message,
            code="DIVISION_BY_ZERO",
            data=({"count": count} if count is not None else None),
        )


class AccountInUse(ProgramError):
    """A second mutable borrow of the same account was attempted."""
    def __init__(self, message: str = "account already borrowed", *, address: Optional[str] = None):
        super().__init__(
            message=message,
            code="ACCOUNT_IN_USE",
            data=({"address": address} if address is not None else None),
        )


class AccountExists(ProgramError):
    def __init__(self, message: str = "account already exists", *, address: Optional[str] = None):
        super().__init__(
            message=message,
            code="ACCOUNT_EXISTS",
            data=({"address": address} if address is not None else None),
        )


# -------- helper utilities --------------------------------------------------


def error_to_result_fields(err: ProgramError) -> Dict[str, Any]:
    """
    Map a ProgramError to canonical invocation-result fields.

    Returns:
        {
          "status": "failed",
          "error":  {code, message, data?}
        }
    """
    return {"status": "failed", "error": err.to_dict()}


__all__ = [
    "ProgramError",
    "MalformedInstruction",
    "CorruptRecord",
    "Unauthorized",
    "DivisionByZero",
    "AccountInUse",
    "AccountExists",
    "error_to_result_fields",
]
