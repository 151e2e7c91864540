"""
counter_program — a persistent-counter state machine over one account.

A host hands the program an instruction buffer plus a handle to one account;
the program decodes the instruction, checks the caller signed for that
account, applies one saturating arithmetic transition to the stored u32 and
writes it back. The call either commits fully or leaves the account as it
was.

Public entrypoints:

- process_instruction(handle, instruction_data) -> Record
- decode_instruction / encode_instruction      (u8 tag || [u32 operand])
- decode_record / encode_record                (u32 little-endian)
- apply(record, instruction) -> Record
- authorize(handle, instruction_data); Keypair / sign_request for clients
- InMemoryHost for tests and local simulation
"""

from __future__ import annotations

from .version import __version__
from .errors import (AccountExists, AccountInUse, CorruptRecord,
                     DivisionByZero, MalformedInstruction, ProgramError,
                     Unauthorized)
from .codec import (RECORD_SIZE, U32_MAX, Instruction, Op, Record,
                    decode_instruction, decode_record, encode_instruction,
                    encode_record)
from .engine import apply
from .auth import Credential, Keypair, authorize, sign_request
from .runtime import (AccountHandle, InMemoryHost, InvocationResult,
                      InvocationStatus, commit, process_instruction)


def version() -> str:
    """Return the counter_program semantic version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "ProgramError",
    "MalformedInstruction",
    "CorruptRecord",
    "Unauthorized",
    "DivisionByZero",
    "AccountInUse",
    "AccountExists",
    "Op",
    "Instruction",
    "Record",
    "RECORD_SIZE",
    "U32_MAX",
    "decode_instruction",
    "encode_instruction",
    "decode_record",
    "encode_record",
    "apply",
    "Credential",
    "Keypair",
    "authorize",
    "sign_request",
    "AccountHandle",
    "commit",
    "process_instruction",
    "InMemoryHost",
    "InvocationResult",
    "InvocationStatus",
]
