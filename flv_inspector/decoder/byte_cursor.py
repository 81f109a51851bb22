"""
Sequential big-endian reader over a binary stream.

The cursor never seeks: every read consumes bytes from the front of the
stream. A one-byte lookahead lets the tag loop ask whether the stream ended
exactly on a record boundary without consuming anything.
"""

import logging
import struct
from typing import BinaryIO

from flv_inspector.decoder.errors import TruncatedInputError

logger = logging.getLogger(__name__)


def extract_bits(value: int, start_bit: int, width: int) -> int:
    """
    Extract an unsigned bit field from a single byte.

    Bit 0 is the least-significant bit, so ``extract_bits(0xAF, 4, 4)`` is 0xA.
    """
    return (value >> start_bit) & ((1 << width) - 1)


class ByteCursor:
    """Fixed-width big-endian primitive reader with offset tracking."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lookahead = b""
        self._offset = 0

    @property
    def offset(self) -> int:
        """Number of bytes consumed so far (absolute stream offset)."""
        return self._offset

    def _read_some(self, size: int) -> bytes:
        """Read up to size bytes, retrying short reads until the stream is exhausted."""
        parts = []
        if self._lookahead:
            parts.append(self._lookahead[:size])
            self._lookahead = self._lookahead[size:]
        remaining = size - sum(len(p) for p in parts)
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            parts.append(chunk)
            remaining -= len(chunk)
        return b"".join(parts)

    def at_clean_boundary(self) -> bool:
        """Return True if no further bytes are available from the stream."""
        if self._lookahead:
            return False
        chunk = self._read_some(1)
        if not chunk:
            return True
        self._lookahead = chunk
        return False

    def read_bytes(self, size: int) -> bytes:
        """Read exactly size bytes or raise TruncatedInputError."""
        if size < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {size}")
        if size == 0:
            return b""
        data = self._read_some(size)
        if len(data) != size:
            raise TruncatedInputError(
                f"needed {size} bytes, only {len(data)} available",
                offset=self._offset,
                requested=size,
                available=len(data),
            )
        self._offset += size
        return data

    def skip(self, size: int) -> int:
        """Discard exactly size bytes. Returns the number of bytes skipped."""
        self.read_bytes(size)
        return size

    def read_u8(self) -> int:
        return self.read_bytes(1)[0]

    def read_u16_be(self) -> int:
        return struct.unpack(">H", self.read_bytes(2))[0]

    def read_u24_be(self) -> int:
        """Read a 24-bit big-endian value into a 32-bit container (top byte zero)."""
        return struct.unpack(">I", b"\x00" + self.read_bytes(3))[0]

    def read_u32_be(self) -> int:
        return struct.unpack(">I", self.read_bytes(4))[0]

    def read_f64_be(self) -> float:
        """Read an IEEE-754 double stored in big-endian (network) byte order."""
        return struct.unpack(">d", self.read_bytes(8))[0]
