"""txinspector - Decode and inspect raw Bitcoin transactions."""

__version__ = "0.1.0"

# Core modules
from txinspector.errors import ParseError
from txinspector.models import AddressInfo, Script, Transaction, TxInput, TxOutput
from txinspector.parser import TransactionParser, decode_hex, decode_transaction
from txinspector.script import ScriptType, detect_script_type, disassemble_script
from txinspector.address import Network, derive_address
from txinspector.hashing import hash160, hash256
from txinspector.rpc import RPCServer

__all__ = [
    "__version__",
    "ParseError",
    "AddressInfo",
    "Script",
    "Transaction",
    "TxInput",
    "TxOutput",
    "TransactionParser",
    "decode_hex",
    "decode_transaction",
    "ScriptType",
    "detect_script_type",
    "disassemble_script",
    "Network",
    "derive_address",
    "hash160",
    "hash256",
    "RPCServer",
]
