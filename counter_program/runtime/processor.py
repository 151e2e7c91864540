"""
counter_program.runtime.processor — one invocation, end to end.

    decode_instruction → authorize → decode_record → apply → encode_record → write

Every step before the write may raise a ProgramError; the write is the last
statement, so a failed call leaves `handle.data` byte-for-byte unchanged.
"""

from __future__ import annotations

from typing import Optional

from counter_program import logging as clog
from counter_program.auth import authorize
from counter_program.codec.instruction import Instruction, Op, decode_instruction
from counter_program.codec.record import (RECORD_SIZE, Record, decode_record,
                                          encode_record)
from counter_program.config import ProgramConfig, load_config
from counter_program.engine import apply
from counter_program.errors import ProgramError

from .handle import AccountHandle

log = clog.get_logger(__name__)


def _load_record(handle: AccountHandle, instruction: Instruction) -> Record:
    # First Init on a host-allocatable empty account starts from zero.
    if instruction.op is Op.INIT and handle.is_empty and handle.allocatable:
        return Record(0)
    return decode_record(handle.data)


def commit(handle: AccountHandle, record: Record) -> None:
    """Encode `record` and overwrite the handle's record bytes."""
    encoded = encode_record(record)
    if handle.is_empty and handle.allocatable:
        handle.allocate(RECORD_SIZE)
    handle.data[:RECORD_SIZE] = encoded


def process_instruction(
    handle: AccountHandle,
    instruction_data: bytes,
    *,
    config: Optional[ProgramConfig] = None,
) -> Record:
    """
    Decode, authorize, transition and commit one instruction.

    Returns the committed Record. Raises ProgramError without writing.
    """
    cfg = config or load_config()
    with handle.borrow():
        try:
            instruction = decode_instruction(
                instruction_data, strict=cfg.strict_instruction_length
            )
            log.debug("instruction decoded", extra=instruction.to_dict())

            authorize(handle, instruction_data, domain=cfg.sign_domain)

            current = _load_record(handle, instruction)
            updated = apply(current, instruction)
        except ProgramError as e:
            log.warning("invocation rejected", extra={"code": e.code, "reason": e.message})
            raise

        commit(handle, updated)
        log.info(
            "invocation committed",
            extra={"op": instruction.op.name, "before": current.count, "count": updated.count},
        )
        return updated


__all__ = ["commit", "process_instruction"]
