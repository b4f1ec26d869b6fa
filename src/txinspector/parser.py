"""
Transaction decoder.

This module turns a serialized transaction (legacy or segwit encoding) into
a Transaction model: inputs, outputs, classified scripts, addresses, txid,
wtxid and weight.
"""

import binascii
import logging
import struct
from typing import List

from txinspector.address import derive_address
from txinspector.errors import (
    InvalidHexError,
    InvalidScriptError,
    InvalidTransactionError,
    InvalidWitnessError,
    TrailingDataError,
)
from txinspector.hashing import hash256, hash_to_hex
from txinspector.models import (
    Script,
    Transaction,
    TxInput,
    TxOutput,
    satoshis_to_btc,
)
from txinspector.script import detect_script_type, disassemble_script, find_script_error
from txinspector.serialization import ByteReader, encode_varint

logger = logging.getLogger(__name__)

NULL_TXID = "00" * 32
COINBASE_VOUT = 0xffffffff
SEGWIT_MARKER = b'\x00\x01'


def serialize_without_witness(
    version: int,
    inputs: List[TxInput],
    outputs: List[TxOutput],
    locktime: int,
) -> bytes:
    """
    Rebuild the legacy (non-witness) serialization from decoded fields.

    Format:
    - version (4 bytes, little-endian, signed)
    - input count (varint)
    - inputs: prev_txid (32 bytes, wire order), prev_vout (4 bytes),
      script_sig length (varint), script_sig, sequence (4 bytes)
    - output count (varint)
    - outputs: value (8 bytes), script_pubkey length (varint), script_pubkey
    - locktime (4 bytes)

    Counts and lengths are always written in minimal varint form.
    """
    data = struct.pack('<i', version)

    data += encode_varint(len(inputs))
    for tx_in in inputs:
        data += bytes.fromhex(tx_in.txid)[::-1]
        data += struct.pack('<I', tx_in.vout)
        script_sig = tx_in.script_sig.to_bytes()
        data += encode_varint(len(script_sig))
        data += script_sig
        data += struct.pack('<I', tx_in.sequence)

    data += encode_varint(len(outputs))
    for tx_out in outputs:
        data += struct.pack('<Q', tx_out.value)
        script_pubkey = tx_out.script_pubkey.to_bytes()
        data += encode_varint(len(script_pubkey))
        data += script_pubkey

    data += struct.pack('<I', locktime)
    return data


def calculate_weight(raw_size: int, is_segwit: bool, witness_bytes: int = 0) -> int:
    """
    Transaction weight in weight units.

    Non-witness bytes count 4, witness bytes (marker, flag and witness
    stacks) count 1.

    Args:
        raw_size: Length of the full serialization
        is_segwit: Whether marker and flag are present
        witness_bytes: Bytes taken by the witness stacks as read from the wire
    """
    if not is_segwit:
        return raw_size * 4
    base_size = raw_size - len(SEGWIT_MARKER) - witness_bytes
    return base_size * 3 + raw_size


class TransactionParser:
    """Decodes one transaction from a buffer"""

    def __init__(self, data: bytes, strict: bool = False) -> None:
        """
        Initialize the parser.

        Args:
            data: Serialized transaction
            strict: Reject non-minimal varints, superfluous witness data and
                output scripts with malformed pushes
        """
        self.reader = ByteReader(data, strict=strict)
        self.strict = strict

    @property
    def position(self) -> int:
        return self.reader.position

    @property
    def remaining(self) -> int:
        return self.reader.remaining

    def parse_transaction(self) -> Transaction:
        """
        Decode the transaction starting at the current position.

        Bytes after the locktime are left unread; see decode_transaction().

        Returns:
            Decoded Transaction

        Raises:
            ParseError: On truncated or structurally invalid data
        """
        reader = self.reader
        start_pos = reader.position

        version = reader.read_i32()
        is_segwit = self._check_segwit()

        input_count = reader.read_varint()
        if input_count == 0 and not is_segwit:
            raise InvalidTransactionError("Transaction has no inputs")

        inputs = [self._parse_input(i) for i in range(input_count)]

        output_count = reader.read_varint()
        if output_count == 0:
            raise InvalidTransactionError("Transaction has no outputs")

        outputs = [self._parse_output(i) for i in range(output_count)]

        witness_start = reader.position
        if is_segwit:
            for tx_in in inputs:
                tx_in.witness = self._parse_witness()
            if self.strict and inputs and all(not tx_in.witness for tx_in in inputs):
                raise InvalidWitnessError("Superfluous witness record")
        witness_bytes = reader.position - witness_start

        locktime = reader.read_u32()

        raw_size = reader.position - start_pos
        raw_tx = reader.data[start_pos:reader.position]

        if reader.non_minimal_varints:
            logger.warning(
                f"Transaction uses {reader.non_minimal_varints} non-minimal varint(s); "
                "txid is computed from the minimal re-encoding"
            )

        txid = hash_to_hex(hash256(serialize_without_witness(version, inputs, outputs, locktime)))
        wtxid = hash_to_hex(hash256(raw_tx))
        weight = calculate_weight(raw_size, is_segwit, witness_bytes)

        total_output_satoshis = sum(tx_out.value for tx_out in outputs)

        logger.debug(
            f"Decoded tx {txid}: version={version} segwit={is_segwit} "
            f"inputs={len(inputs)} outputs={len(outputs)} size={raw_size} weight={weight}"
        )

        return Transaction(
            version=version,
            is_segwit=is_segwit,
            inputs=inputs,
            outputs=outputs,
            locktime=locktime,
            txid=txid,
            wtxid=wtxid,
            raw_size=raw_size,
            weight=weight,
            total_output_satoshis=total_output_satoshis,
            total_output_btc=satoshis_to_btc(total_output_satoshis),
        )

    def _check_segwit(self) -> bool:
        """Consume the segwit marker and flag (0x00, 0x01) if present."""
        saved_pos = self.reader.position
        if self.reader.remaining >= 2:
            if self.reader.read_bytes(2) == SEGWIT_MARKER:
                return True
        self.reader.seek(saved_pos)
        return False

    def _parse_input(self, index: int) -> TxInput:
        reader = self.reader
        prev_txid = reader.read_hash()
        prev_vout = reader.read_u32()
        script_sig_len = reader.read_varint()
        script_sig = reader.read_bytes(script_sig_len)
        sequence = reader.read_u32()

        is_coinbase = prev_txid == NULL_TXID and prev_vout == COINBASE_VOUT
        if is_coinbase:
            # Coinbase scriptSig is arbitrary data
            asm = f"[coinbase] {script_sig.hex()}"
        else:
            asm = disassemble_script(script_sig)

        return TxInput(
            index=index,
            txid=prev_txid,
            vout=prev_vout,
            script_sig=Script(hex=script_sig.hex(), asm=asm, size=len(script_sig)),
            sequence=sequence,
            is_coinbase=is_coinbase,
        )

    def _parse_output(self, index: int) -> TxOutput:
        reader = self.reader
        value = reader.read_u64()
        script_pubkey_len = reader.read_varint()
        script_pubkey = reader.read_bytes(script_pubkey_len)

        if self.strict:
            error = find_script_error(script_pubkey)
            if error is not None:
                raise InvalidScriptError(f"output {index}: {error}")

        script_type = detect_script_type(script_pubkey)

        return TxOutput(
            index=index,
            value=value,
            value_btc=satoshis_to_btc(value),
            script_pubkey=Script(
                hex=script_pubkey.hex(),
                asm=disassemble_script(script_pubkey),
                size=len(script_pubkey),
            ),
            script_type=script_type,
            address=derive_address(script_pubkey, script_type),
        )

    def _parse_witness(self) -> List[str]:
        stack_count = self.reader.read_varint()
        witness = []
        for _ in range(stack_count):
            item_len = self.reader.read_varint()
            witness.append(self.reader.read_bytes(item_len).hex())
        return witness


def decode_transaction(data: bytes, strict: bool = False) -> Transaction:
    """
    Decode a complete buffer holding exactly one transaction.

    Raises:
        TrailingDataError: If bytes remain after the locktime
        ParseError: For any other decoding failure
    """
    parser = TransactionParser(data, strict=strict)
    tx = parser.parse_transaction()
    if parser.remaining:
        raise TrailingDataError(parser.remaining)
    return tx


def decode_hex(hex_str: str, strict: bool = False) -> Transaction:
    """Decode a hex-encoded transaction (case-insensitive, surrounding whitespace ignored)."""
    try:
        data = binascii.unhexlify(hex_str.strip())
    except (binascii.Error, ValueError) as e:
        raise InvalidHexError(str(e)) from e
    return decode_transaction(data, strict=strict)

