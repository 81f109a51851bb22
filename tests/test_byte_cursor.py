import io
import math

import pytest

from flv_inspector.decoder import ByteCursor, TruncatedInputError, extract_bits


class TrickleStream:
    """Returns at most one byte per read call, like a slow pipe."""

    def __init__(self, data: bytes):
        self._data = io.BytesIO(data)

    def read(self, size: int) -> bytes:
        return self._data.read(min(size, 1))


def _cursor(data: bytes) -> ByteCursor:
    return ByteCursor(io.BytesIO(data))


def test_extract_bits_low_bit_is_zero():
    assert extract_bits(0xAF, 4, 4) == 0xA
    assert extract_bits(0xAF, 2, 2) == 3
    assert extract_bits(0xAF, 1, 1) == 1
    assert extract_bits(0xAF, 0, 1) == 1
    assert extract_bits(0x05, 2, 1) == 1
    assert extract_bits(0x05, 1, 1) == 0
    assert extract_bits(0x3F, 0, 5) == 0x1F


def test_fixed_width_reads_are_big_endian():
    cursor = _cursor(b"\x01" + b"\x02\x03" + b"\x04\x05\x06" + b"\x07\x08\x09\x0a")

    assert cursor.read_u8() == 0x01
    assert cursor.read_u16_be() == 0x0203
    assert cursor.read_u24_be() == 0x040506
    assert cursor.read_u32_be() == 0x0708090A
    assert cursor.offset == 10


def test_u24_keeps_top_byte_zero():
    assert _cursor(b"\xff\xff\xff").read_u24_be() == 0x00FFFFFF


def test_f64_reads_network_order_double():
    assert _cursor(b"\x40\x09\x21\xfb\x54\x44\x2d\x18").read_f64_be() == math.pi
    assert _cursor(b"\x40\x59\x00\x00\x00\x00\x00\x00").read_f64_be() == 100.0


def test_partial_read_raises_truncated_input():
    cursor = _cursor(b"\x00\x01")
    with pytest.raises(TruncatedInputError) as exc_info:
        cursor.read_u32_be()

    assert exc_info.value.requested == 4
    assert exc_info.value.available == 2
    assert exc_info.value.offset == 0
    assert exc_info.value.kind == "TruncatedInput"


def test_zero_bytes_mid_record_is_truncated_not_end_of_stream():
    cursor = _cursor(b"\x01")
    cursor.read_u8()
    with pytest.raises(TruncatedInputError) as exc_info:
        cursor.read_u24_be()
    assert exc_info.value.available == 0
    assert exc_info.value.offset == 1


def test_clean_boundary_on_empty_stream():
    assert _cursor(b"").at_clean_boundary() is True


def test_clean_boundary_probe_does_not_consume():
    cursor = _cursor(b"\x2a\x00")

    assert cursor.at_clean_boundary() is False
    assert cursor.offset == 0
    assert cursor.read_u16_be() == 0x2A00
    assert cursor.at_clean_boundary() is True


def test_short_reads_are_retried():
    cursor = ByteCursor(TrickleStream(b"\x00\x00\x00\x09abc"))

    assert cursor.read_u32_be() == 9
    assert cursor.read_bytes(3) == b"abc"
    assert cursor.at_clean_boundary() is True


def test_read_bytes_zero_and_negative():
    cursor = _cursor(b"")
    assert cursor.read_bytes(0) == b""
    with pytest.raises(ValueError):
        cursor.read_bytes(-1)
