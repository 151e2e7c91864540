"""
counter_program.codec — instruction and record wire formats.

Both formats are fixed, little-endian and Borsh-compatible:

- Instruction: u8 tag || [u32 operand]   (see codec.instruction)
- Record:      u32 count                 (see codec.record)
"""

from .instruction import (OPERAND_OPS, Instruction, Op, decode_instruction,
                          encode_instruction)
from .record import RECORD_SIZE, U32_MAX, Record, decode_record, encode_record

__all__ = [
    "Op",
    "Instruction",
    "OPERAND_OPS",
    "decode_instruction",
    "encode_instruction",
    "RECORD_SIZE",
    "U32_MAX",
    "Record",
    "decode_record",
    "encode_record",
]
