"""
Bitcoin wire format primitives.

This module provides a bounds-checked reader over an immutable byte buffer
plus the compact size ("varint") encoding helpers used when re-serializing
transactions.
"""

import struct

from txinspector.errors import InvalidVarIntError, UnexpectedEOFError


def encode_varint(value: int) -> bytes:
    """Encode variable-length integer"""
    if value < 0xfd:
        return struct.pack('<B', value)
    elif value <= 0xffff:
        return struct.pack('<BH', 0xfd, value)
    elif value <= 0xffffffff:
        return struct.pack('<BI', 0xfe, value)
    else:
        return struct.pack('<BQ', 0xff, value)


class ByteReader:
    """Sequential little-endian reader over a byte buffer.

    Every read checks bounds first and raises UnexpectedEOFError with the
    current position and the requested byte count. After an error the
    position is undefined and the reader must not be used again.
    """

    def __init__(self, data: bytes, strict: bool = False) -> None:
        """Initialize the reader.

        Args:
            data: Buffer to read from
            strict: Reject compact size integers that are not minimally encoded
        """
        self.data = bytes(data)
        self.strict = strict
        self.pos = 0
        # Non-minimal compact sizes accepted in lenient mode
        self.non_minimal_varints = 0

    @property
    def position(self) -> int:
        return self.pos

    @property
    def remaining(self) -> int:
        return max(len(self.data) - self.pos, 0)

    def seek(self, position: int) -> None:
        """Move the read position (only used to undo a peek-style lookahead)."""
        if position < 0 or position > len(self.data):
            raise ValueError(f"Seek position out of range: {position}")
        self.pos = position

    def _take(self, n: int) -> bytes:
        if n < 0 or self.pos + n > len(self.data):
            raise UnexpectedEOFError(self.pos, n)
        chunk = self.data[self.pos:self.pos + n]
        self.pos += n
        return chunk

    def peek(self, n: int) -> bytes:
        """Return the next n bytes without consuming them."""
        if self.pos + n > len(self.data):
            raise UnexpectedEOFError(self.pos, n)
        return self.data[self.pos:self.pos + n]

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return struct.unpack('<H', self._take(2))[0]

    def read_u32(self) -> int:
        return struct.unpack('<I', self._take(4))[0]

    def read_i32(self) -> int:
        return struct.unpack('<i', self._take(4))[0]

    def read_u64(self) -> int:
        return struct.unpack('<Q', self._take(8))[0]

    def read_bytes(self, n: int) -> bytes:
        return self._take(n)

    def read_hash(self) -> str:
        """Read a 32-byte hash and return it as hex in display order."""
        return self._take(32)[::-1].hex()

    def read_varint(self) -> int:
        """
        Read a compact size integer.

        Format:
        - < 0xfd: the byte itself
        - 0xfd: uint16 follows
        - 0xfe: uint32 follows
        - 0xff: uint64 follows

        Wider-than-needed encodings are accepted unless the reader is strict.
        """
        start = self.pos
        first_byte = self.read_u8()

        if first_byte < 0xfd:
            return first_byte
        elif first_byte == 0xfd:
            value = self.read_u16()
            minimum = 0xfd
        elif first_byte == 0xfe:
            value = self.read_u32()
            minimum = 0x10000
        else:  # 0xff
            value = self.read_u64()
            minimum = 0x100000000

        if value < minimum:
            if self.strict:
                raise InvalidVarIntError(start)
            self.non_minimal_varints += 1
        return value
