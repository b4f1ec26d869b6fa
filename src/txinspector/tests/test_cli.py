"""
Test the command-line interface.

This test drives the click commands with CliRunner against a config file
that does not exist, so only defaults and flags apply.
"""

import json
import logging
import os
import tempfile
import unittest
import warnings
import sys
from pathlib import Path

from click.testing import CliRunner

# Add src to path
src_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(src_dir))

from txinspector.cli import cli

# Block 170: first bitcoin transfer, two P2PK outputs
LEGACY_TX = (
    "0100000001c997a5e56e104102fa209c6a852dd90660a20b2d9c352423edce25857fcd3704"
    "000000004847304402204e45e16932b8af514961a1d3a1a25fdf3f4f7732e9d624c6c61548ab"
    "5fb8cd410220181522ec8eca07de4860a4acdd12909d831cc56cbbac4622082221a8768d1d09"
    "01ffffffff0200ca9a3b00000000434104ae1a62fe09c5f51b13905f07f06b99a2f7159b2225"
    "f374cd378d71302fa28414e7aab37397f554a7df5f142c21c1b7303b8a0626f1baded5c72a70"
    "4f7e6cd84cac00286bee0000000043410411db93e1dcdb8a016b49840f8c53bc1eb68a382e97"
    "b1482ecad7b148a6909a5cb2e0eaddfb84ccf9744464f82e160bfa9b8b64f9d4c03f999b8643"
    "f656b412a3ac00000000"
)

# Segwit coinbase with a P2WPKH output and a witness commitment
SEGWIT_COINBASE_TX = (
    "020000000001010000000000000000000000000000000000000000000000000000000000000000"
    "ffffffff0502e8030101ffffffff0200f2052a0100000016001496ba8ba89947e739cd4e4850"
    "7f9d26f47ed31c4e0000000000000000266a24aa21a9ede2f61c3f71d1defd3fa999dfa36953"
    "755c690689799962b48bebd836974e8cf901200000000000000000000000000000000000000000"
    "00000000000000000000000000000000"
)


class TestCLI(unittest.TestCase):
    """Test CLI commands"""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_path = str(Path(self.tmpdir.name) / "none.conf")
        self.runner = CliRunner()
        self._saved_env = {k: v for k, v in os.environ.items() if k.startswith('TXINSPECTOR_')}
        for key in self._saved_env:
            del os.environ[key]

    def tearDown(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        os.environ.update(self._saved_env)
        self.tmpdir.cleanup()

    def invoke(self, *args, **kwargs):
        return self.runner.invoke(cli, ["--config", self.config_path, *args], **kwargs)

    def test_txid(self):
        result = self.invoke("txid", LEGACY_TX)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(
            result.output.strip(),
            "f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16",
        )

    def test_txid_from_stdin(self):
        result = self.invoke("txid", "-", input=SEGWIT_COINBASE_TX + "\n")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("647381a24ce97c4480e56fe60e3d4deaeeae47adea6d98974321b35d2cb518b2", result.output)

    def test_txid_from_piped_stdin(self):
        """Test stdin is read without an argument and without deprecation warnings"""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = self.invoke("txid", input=LEGACY_TX)
        self.assertEqual(result.exit_code, 0)
        self.assertIn("f4184fc596403b9d638783cf57adfe4c75c605f6356fbc91338530e9831e9e16", result.output)
        self.assertEqual(
            [str(w.message) for w in caught if "get_text_stream" in str(w.message)], []
        )

    def test_decode_from_file(self):
        tx_file = Path(self.tmpdir.name) / "tx.hex"
        tx_file.write_text(LEGACY_TX + "\n")
        result = self.invoke("decode", "-f", str(tx_file), "-o", "json", "--compact")
        self.assertEqual(result.exit_code, 0)
        data = json.loads(result.output)
        self.assertEqual(data["raw_size"], 275)
        self.assertEqual(data["outputs"][1]["value"], 4000000000)

    def test_decode_pretty_default(self):
        result = self.invoke("decode", SEGWIT_COINBASE_TX)
        self.assertEqual(result.exit_code, 0)
        self.assertIn("BITCOIN TRANSACTION", result.output)
        self.assertIn("bc1qj6agh2yeglnnnn2wfpg8l8fx73ldx8zwtahndu", result.output)

    def test_decode_summary_testnet(self):
        result = self.invoke("decode", SEGWIT_COINBASE_TX, "-o", "summary", "--network", "testnet")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("tb1qj6agh2yeglnnnn2wfpg8l8fx73ldx8zwpmvqk0", result.output)

    def test_decode_with_input_values(self):
        result = self.invoke("decode", LEGACY_TX, "-o", "json", "--input-values", "5000002000")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output)["fee_satoshis"], 2000)

    def test_input_values_mismatch_warns(self):
        result = self.invoke("decode", LEGACY_TX, "-o", "ascii", "--input-values", "1,2")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Provided 2 input values but transaction has 1 inputs", result.output)

    def test_input_values_not_integer(self):
        result = self.invoke("decode", LEGACY_TX, "--input-values", "12,abc")
        self.assertEqual(result.exit_code, 2)

    def test_output_from_config(self):
        os.environ['TXINSPECTOR_OUTPUT'] = 'json'
        try:
            result = self.invoke("decode", LEGACY_TX)
        finally:
            del os.environ['TXINSPECTOR_OUTPUT']
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output)["version"], 1)

    def test_decode_invalid(self):
        result = self.invoke("decode", "zz")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Failed to parse transaction", result.output)
        self.assertIn("Invalid hex string", result.output)

    def test_validate(self):
        result = self.invoke("validate", LEGACY_TX)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), "valid")

    def test_validate_trailing_data(self):
        result = self.invoke("validate", LEGACY_TX + "00")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("invalid: Data remaining after parsing: 1 bytes", result.output)

    def test_validate_strict(self):
        non_minimal = "01000000fd0100" + LEGACY_TX[10:]
        self.assertEqual(self.invoke("validate", non_minimal).exit_code, 0)
        result = self.invoke("validate", "--strict", non_minimal)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Invalid varint encoding at position 4", result.output)

    def test_version(self):
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("0.1.0", result.output)


if __name__ == '__main__':
    unittest.main()
