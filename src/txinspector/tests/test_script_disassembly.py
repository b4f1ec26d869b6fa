"""
Test script disassembly.

This test verifies that Bitcoin scripts are correctly disassembled
to human-readable ASM format, including scripts with malformed pushes.
"""

import unittest
import sys
from pathlib import Path

# Add src to path
src_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(src_dir))

from txinspector.script import disassemble_script, find_script_error, opcode_name


class TestScriptDisassembly(unittest.TestCase):
    """Test script disassembly"""

    def test_disassemble_p2pkh_script(self):
        """Test disassembling a P2PKH script"""
        script = bytes.fromhex("76a91489abcdefabbaabbaabbaabbaabbaabbaabbaabba88ac")

        asm = disassemble_script(script)

        self.assertEqual(
            asm,
            "OP_DUP OP_HASH160 89abcdefabbaabbaabbaabbaabbaabbaabbaabba "
            "OP_EQUALVERIFY OP_CHECKSIG",
        )

    def test_disassemble_empty_script(self):
        """Test disassembling an empty script"""
        self.assertEqual(disassemble_script(b""), "")

    def test_disassemble_op_0(self):
        """Test disassembling OP_0"""
        self.assertEqual(disassemble_script(bytes([0x00])), "OP_0")

    def test_disassemble_op_numbers(self):
        """Test disassembling OP_1 through OP_16"""
        for i in range(1, 17):
            opcode = 0x50 + i
            self.assertEqual(disassemble_script(bytes([opcode])), f"OP_{i}")

    def test_disassemble_data_push(self):
        """Test disassembling a direct data push"""
        data = b"abc"
        script = bytes([len(data)]) + data
        self.assertEqual(disassemble_script(script), data.hex())

    def test_disassemble_pushdata(self):
        """Test PUSHDATA1/2/4 show only the pushed data"""
        self.assertEqual(disassemble_script(bytes.fromhex("4c02abcd")), "abcd")
        self.assertEqual(disassemble_script(bytes.fromhex("4d0200abcd")), "abcd")
        self.assertEqual(disassemble_script(bytes.fromhex("4e02000000abcd")), "abcd")

    def test_disassemble_op_return(self):
        """Test disassembling OP_RETURN with data"""
        script = bytes.fromhex("6a0568656c6c6f")
        self.assertEqual(disassemble_script(script), "OP_RETURN 68656c6c6f")

    def test_disassemble_taproot_opcodes(self):
        """Test OP_CHECKSIGADD and unknown opcodes"""
        self.assertEqual(disassemble_script(bytes([0xba])), "OP_CHECKSIGADD")
        self.assertEqual(disassemble_script(bytes([0xbb])), "OP_UNKNOWN_bb")
        self.assertEqual(opcode_name(0xff), "OP_UNKNOWN_ff")

    def test_disassemble_common_opcodes(self):
        """Test disassembling common opcodes"""
        self.assertEqual(disassemble_script(bytes([0x76])), "OP_DUP")
        self.assertEqual(disassemble_script(bytes([0xa9])), "OP_HASH160")
        self.assertEqual(disassemble_script(bytes([0xae])), "OP_CHECKMULTISIG")
        self.assertEqual(disassemble_script(bytes([0xb1])), "OP_CHECKLOCKTIMEVERIFY")


class TestMalformedScripts(unittest.TestCase):
    """Test that malformed pushes end the ASM with an error token"""

    def test_direct_push_past_end(self):
        script = bytes.fromhex("76030102")
        self.assertEqual(disassemble_script(script), "OP_DUP [error: push 3 bytes past end]")

    def test_pushdata_past_end(self):
        self.assertEqual(
            disassemble_script(bytes.fromhex("4c0501")), "[error: PUSHDATA1 past end]"
        )
        self.assertEqual(
            disassemble_script(bytes.fromhex("4d0001")), "[error: PUSHDATA2 past end]"
        )
        self.assertEqual(
            disassemble_script(bytes.fromhex("4e05000000")), "[error: PUSHDATA4 past end]"
        )

    def test_truncated_length_prefix(self):
        """Test a cut-off PUSHDATA length prefix stops without a token"""
        self.assertEqual(disassemble_script(bytes.fromhex("764d01")), "OP_DUP")

    def test_find_script_error(self):
        """Test find_script_error reports the first malformed push"""
        self.assertIsNone(find_script_error(bytes.fromhex("76a90102")))
        self.assertEqual(find_script_error(bytes.fromhex("0201")), "push 2 bytes past end")
        self.assertEqual(
            find_script_error(bytes.fromhex("4c")), "push length prefix past end"
        )


if __name__ == '__main__':
    unittest.main()
