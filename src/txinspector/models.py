"""Decoded transaction models."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from txinspector.script import ScriptType

logger = logging.getLogger(__name__)

SATOSHIS_PER_BTC = 100_000_000


def satoshis_to_btc(satoshis: int) -> float:
    """Convert satoshis to BTC"""
    return satoshis / SATOSHIS_PER_BTC


def calculate_fee(input_values: Sequence[Optional[int]], total_output: int) -> Optional[int]:
    """
    Calculate a transaction fee.

    Args:
        input_values: Value of every input in satoshis (None if unknown)
        total_output: Sum of output values in satoshis

    Returns:
        Fee in satoshis, None if any input value is unknown. Clamped to 0
        when the outputs exceed the inputs.
    """
    if any(value is None for value in input_values):
        return None
    total_input = sum(input_values)
    if total_output > total_input:
        logger.warning(
            f"Outputs ({total_output} sats) exceed inputs ({total_input} sats), fee clamped to 0"
        )
        return 0
    return total_input - total_output


class Script(BaseModel):
    """Script bytes with their disassembly."""
    model_config = ConfigDict(frozen=True)

    hex: str
    asm: str
    size: int

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.hex)


class AddressInfo(BaseModel):
    """Address information model."""
    mainnet: str
    testnet: str
    address_type: str

    def for_network(self, network: str) -> str:
        return self.testnet if network == "testnet" else self.mainnet


class TxInput(BaseModel):
    """Transaction input."""
    index: int
    txid: str  # previous txid, display order
    vout: int
    script_sig: Script
    sequence: int
    witness: Optional[List[str]] = None
    value: Optional[int] = None  # satoshis, supplied by the caller
    is_coinbase: bool = False


class TxOutput(BaseModel):
    """Transaction output."""
    index: int
    value: int  # satoshis
    value_btc: float
    script_pubkey: Script
    script_type: ScriptType
    address: Optional[AddressInfo] = None


class Transaction(BaseModel):
    """Decoded Bitcoin transaction."""
    version: int
    is_segwit: bool
    inputs: List[TxInput]
    outputs: List[TxOutput]
    locktime: int
    txid: str
    wtxid: str
    raw_size: int
    weight: int
    total_output_satoshis: int
    total_output_btc: float
    fee_satoshis: Optional[int] = None
    fee_btc: Optional[float] = None

    @classmethod
    def from_hex(cls, hex_str: str, strict: bool = False) -> 'Transaction':
        """Decode a transaction from a hex string."""
        from txinspector.parser import decode_hex
        return decode_hex(hex_str, strict=strict)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = False) -> 'Transaction':
        """Decode a transaction from raw bytes."""
        from txinspector.parser import decode_transaction
        return decode_transaction(data, strict=strict)

    def total_output_value(self) -> int:
        return sum(output.value for output in self.outputs)

    def calculate_fee(self) -> Optional[int]:
        return calculate_fee([tx_in.value for tx_in in self.inputs], self.total_output_value())

    def size(self) -> int:
        return self.raw_size

    def get_weight(self) -> int:
        return self.weight

    def get_vsize(self) -> int:
        """Virtual size: ceil(weight / 4)"""
        return (self.weight + 3) // 4

    def set_input_values(self, values: Sequence[int]) -> bool:
        """
        Attach previous output values to the inputs and update the fee.

        Values are assigned by position; extra values are ignored and inputs
        without a value stay unset.

        Args:
            values: Input values in satoshis

        Returns:
            True if the number of values matched the number of inputs
        """
        matched = len(values) == len(self.inputs)
        if not matched:
            logger.warning(
                f"Provided {len(values)} input values but transaction has {len(self.inputs)} inputs"
            )

        for tx_in, value in zip(self.inputs, values):
            tx_in.value = value

        fee = self.calculate_fee()
        self.fee_satoshis = fee
        self.fee_btc = satoshis_to_btc(fee) if fee is not None else None
        return matched

    def fee_rate(self) -> Optional[float]:
        """Fee rate in sat/vB"""
        if self.fee_satoshis is None:
            return None
        return self.fee_satoshis / self.get_vsize()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, compact: bool = False) -> str:
        return self.model_dump_json(exclude_none=True, indent=None if compact else 2)
