"""
Record codec for the counter program.

The record stored in an account is a single unsigned 32-bit integer:

    count: u32 little-endian (4 bytes, no padding, no version tag)

This is byte-identical to the Borsh layout of `struct { count: u32 }`, so an
account written by a Borsh client reads back here unchanged.

Decoding reads exactly the first RECORD_SIZE bytes. Accounts allocated with
extra space (hosts often round allocations up) decode the same; the tail is
neither read nor rewritten.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from counter_program.errors import CorruptRecord

__all__ = [
    "RECORD_SIZE",
    "U32_MAX",
    "Record",
    "decode_record",
    "encode_record",
]

_U32 = struct.Struct("<I")

RECORD_SIZE: int = _U32.size
U32_MAX: int = (1 << 32) - 1


@dataclass(frozen=True)
class Record:
    """
    The persistent counter value.

    Invariant: 0 <= count <= U32_MAX.
    """
    count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.count, int) or isinstance(self.count, bool):
            raise TypeError(f"count must be int, got {type(self.count).__name__}")
        if not 0 <= self.count <= U32_MAX:
            raise ValueError(f"count out of u32 range: {self.count}")


def decode_record(data: bytes | bytearray | memoryview) -> Record:
    """Parse the fixed-width record at the start of `data`."""
    buf = bytes(data[:RECORD_SIZE])
    if len(buf) < RECORD_SIZE:
        raise CorruptRecord(
            "record shorter than fixed width", expected=RECORD_SIZE, got=len(buf)
        )
    (count,) = _U32.unpack(buf)
    return Record(count)


def encode_record(record: Record) -> bytes:
    """Return exactly RECORD_SIZE bytes for `record`."""
    return _U32.pack(record.count)
