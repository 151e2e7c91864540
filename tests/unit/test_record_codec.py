from __future__ import annotations

import pytest

from counter_program.codec.record import (RECORD_SIZE, U32_MAX, Record,
                                          decode_record, encode_record)
from counter_program.errors import CorruptRecord


def test_record_is_four_bytes_little_endian() -> None:
    assert RECORD_SIZE == 4
    assert encode_record(Record(1)) == b"\x01\x00\x00\x00"
    assert encode_record(Record(0x01020304)) == b"\x04\x03\x02\x01"
    assert encode_record(Record(U32_MAX)) == b"\xff\xff\xff\xff"


def test_decode_known_bytes() -> None:
    assert decode_record(b"\x2a\x00\x00\x00") == Record(42)
    assert decode_record(bytearray(4)) == Record(0)


def test_decode_reads_only_fixed_width() -> None:
    # Over-allocated account: the tail is not part of the record.
    assert decode_record(b"\x2a\x00\x00\x00\xff\xff\xff\xff") == Record(42)


@pytest.mark.parametrize("data", [b"", b"\x01", b"\x01\x02\x03"])
def test_short_buffer_is_corrupt(data: bytes) -> None:
    with pytest.raises(CorruptRecord) as ei:
        decode_record(data)
    assert ei.value.code == "CORRUPT_RECORD"
    assert ei.value.data == {"expected": 4, "got": len(data)}


@pytest.mark.parametrize("count", [-1, U32_MAX + 1])
def test_record_range(count: int) -> None:
    with pytest.raises(ValueError):
        Record(count)


def test_record_type() -> None:
    with pytest.raises(TypeError):
        Record("1")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Record(True)


def test_default_record_is_zero() -> None:
    assert Record() == Record(0)
