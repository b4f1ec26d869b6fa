"""
Test wire format primitives.

This test verifies compact size integers and the bounds-checked reader.
"""

import unittest
import sys
from pathlib import Path

# Add src to path
src_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(src_dir))

from txinspector.errors import InvalidVarIntError, UnexpectedEOFError
from txinspector.serialization import ByteReader, encode_varint


class TestVarInt(unittest.TestCase):
    """Test compact size encoding and decoding"""

    def test_read_single_byte(self):
        """Test a value below 0xfd is the byte itself"""
        reader = ByteReader(bytes.fromhex("42"))
        self.assertEqual(reader.read_varint(), 66)
        self.assertEqual(reader.remaining, 0)

    def test_read_prefixed_forms(self):
        """Test 0xfd, 0xfe and 0xff prefixes"""
        self.assertEqual(ByteReader(bytes.fromhex("fd0001")).read_varint(), 256)
        self.assertEqual(ByteReader(bytes.fromhex("fe00000100")).read_varint(), 65536)
        self.assertEqual(
            ByteReader(bytes.fromhex("ff0000000001000000")).read_varint(), 0x100000000
        )

    def test_encode_minimal(self):
        """Test encode_varint always picks the shortest form"""
        self.assertEqual(encode_varint(0), b'\x00')
        self.assertEqual(encode_varint(0xfc), b'\xfc')
        self.assertEqual(encode_varint(0xfd), bytes.fromhex("fdfd00"))
        self.assertEqual(encode_varint(0xffff), bytes.fromhex("fdffff"))
        self.assertEqual(encode_varint(0x10000), bytes.fromhex("fe00000100"))
        self.assertEqual(encode_varint(0x100000000), bytes.fromhex("ff0000000001000000"))

    def test_non_minimal_lenient(self):
        """Test a non-minimal encoding is accepted and counted by default"""
        reader = ByteReader(bytes.fromhex("fd0100"))
        self.assertEqual(reader.read_varint(), 1)
        self.assertEqual(reader.non_minimal_varints, 1)

    def test_non_minimal_strict(self):
        """Test a non-minimal encoding is rejected in strict mode"""
        reader = ByteReader(bytes.fromhex("aafe05000000"), strict=True)
        reader.read_u8()
        with self.assertRaises(InvalidVarIntError) as cm:
            reader.read_varint()
        self.assertEqual(cm.exception.position, 1)

    def test_truncated_varint(self):
        """Test a prefix without its payload raises UnexpectedEOFError"""
        reader = ByteReader(bytes.fromhex("fd01"))
        with self.assertRaises(UnexpectedEOFError) as cm:
            reader.read_varint()
        self.assertEqual(cm.exception.position, 1)
        self.assertEqual(cm.exception.expected, 2)


class TestByteReader(unittest.TestCase):
    """Test ByteReader"""

    def test_little_endian_integers(self):
        """Test fixed-width integers are little-endian"""
        reader = ByteReader(bytes.fromhex("01020304" "ffffffff" "0100000000000000"))
        self.assertEqual(reader.read_u32(), 0x04030201)
        self.assertEqual(reader.read_i32(), -1)
        self.assertEqual(reader.read_u64(), 1)
        self.assertEqual(reader.position, 16)

    def test_read_hash_reversed(self):
        """Test hashes are returned in display (byte-reversed) order"""
        raw = bytes(range(1, 33))
        reader = ByteReader(raw)
        self.assertEqual(reader.read_hash(), raw[::-1].hex())

    def test_eof_reports_position_and_expected(self):
        """Test reading past the end reports where and how much"""
        reader = ByteReader(b'\x00' * 10)
        reader.read_bytes(8)
        with self.assertRaises(UnexpectedEOFError) as cm:
            reader.read_u32()
        self.assertEqual(cm.exception.position, 8)
        self.assertEqual(cm.exception.expected, 4)
        self.assertIn("position 8", str(cm.exception))

    def test_peek_does_not_consume(self):
        """Test peek leaves the position unchanged"""
        reader = ByteReader(bytes.fromhex("0001ff"))
        self.assertEqual(reader.peek(2), b'\x00\x01')
        self.assertEqual(reader.position, 0)

    def test_seek_out_of_range(self):
        """Test seeking outside the buffer is rejected"""
        reader = ByteReader(b'\x00')
        with self.assertRaises(ValueError):
            reader.seek(2)


if __name__ == '__main__':
    unittest.main()
