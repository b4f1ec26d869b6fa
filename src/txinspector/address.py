"""
Address derivation from output scripts.

Legacy and script-hash outputs are encoded with Base58Check, witness v0
outputs with Bech32 and taproot outputs with Bech32m. Both the mainnet and
testnet encodings are produced for every addressable output.
"""

import logging
from enum import Enum
from typing import Optional

import base58
from bip_utils import Bech32ChecksumError, SegwitBech32Decoder, SegwitBech32Encoder

from txinspector.hashing import hash160
from txinspector.models import AddressInfo
from txinspector.script import ScriptType, extract_witness_program

logger = logging.getLogger(__name__)


class Network(Enum):
    """Networks addresses are derived for"""
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @property
    def p2pkh_version(self) -> int:
        return 0x00 if self is Network.MAINNET else 0x6f

    @property
    def p2sh_version(self) -> int:
        return 0x05 if self is Network.MAINNET else 0xc4

    @property
    def bech32_hrp(self) -> str:
        return "bc" if self is Network.MAINNET else "tb"


def base58check_encode(version: int, payload: bytes) -> str:
    """Encode with version byte and 4-byte double SHA256 checksum."""
    return base58.b58encode_check(bytes([version]) + payload).decode("ascii")


def encode_segwit_address(hrp: str, witness_version: int, program: bytes) -> Optional[str]:
    """
    Encode a witness program as a segwit address.

    Version 0 uses Bech32, version 1 and above Bech32m. The result is
    decoded again so that programs of invalid length are refused.

    Returns:
        Address string, or None if the program is not encodable
    """
    try:
        address = SegwitBech32Encoder.Encode(hrp, witness_version, program)
        SegwitBech32Decoder.Decode(hrp, address)
        return address
    except (ValueError, Bech32ChecksumError) as e:
        logger.debug(f"Bech32 encoding failed for v{witness_version} program: {e}")
        return None


def _base58_pair(payload: bytes, address_type: str, p2sh: bool = False) -> AddressInfo:
    if p2sh:
        versions = (Network.MAINNET.p2sh_version, Network.TESTNET.p2sh_version)
    else:
        versions = (Network.MAINNET.p2pkh_version, Network.TESTNET.p2pkh_version)
    return AddressInfo(
        mainnet=base58check_encode(versions[0], payload),
        testnet=base58check_encode(versions[1], payload),
        address_type=address_type,
    )


def _segwit_pair(script: bytes, address_type: str) -> Optional[AddressInfo]:
    witness = extract_witness_program(script)
    if witness is None:
        return None
    version, program = witness
    mainnet = encode_segwit_address(Network.MAINNET.bech32_hrp, version, program)
    testnet = encode_segwit_address(Network.TESTNET.bech32_hrp, version, program)
    if mainnet is None or testnet is None:
        return None
    return AddressInfo(mainnet=mainnet, testnet=testnet, address_type=address_type)


def derive_address(script: bytes, script_type: ScriptType) -> Optional[AddressInfo]:
    """
    Derive mainnet and testnet addresses for an output script.

    Args:
        script: scriptPubKey bytes
        script_type: Result of detect_script_type(script)

    Returns:
        AddressInfo, or None for kinds without a canonical address
        (OP_RETURN, bare multisig, unknown witness versions, non-standard)
    """
    if script_type is ScriptType.P2PKH:
        return _base58_pair(script[3:23], "P2PKH")

    if script_type is ScriptType.P2SH:
        return _base58_pair(script[2:22], "P2SH", p2sh=True)

    if script_type is ScriptType.P2PK:
        pubkey_len = script[0]
        pubkey = script[1:1 + pubkey_len]
        return _base58_pair(hash160(pubkey), "P2PK (derived P2PKH)")

    if script_type is ScriptType.P2WPKH:
        return _segwit_pair(script, "P2WPKH")

    if script_type is ScriptType.P2WSH:
        return _segwit_pair(script, "P2WSH")

    if script_type is ScriptType.P2TR:
        return _segwit_pair(script, "P2TR")

    if script_type in (
        ScriptType.MULTISIG,
        ScriptType.OP_RETURN,
        ScriptType.WITNESS_UNKNOWN,
        ScriptType.NONSTANDARD,
    ):
        return None

    raise ValueError(f"Unhandled script type: {script_type!r}")
