"""
Bitcoin script classification and disassembly.

This module recognises the standard output script templates (P2PKH, P2SH,
P2WPKH, P2WSH, P2TR, P2PK, bare multisig, OP_RETURN) and renders any script
as human-readable ASM. Scripts are never executed.
"""

from enum import Enum
from typing import Iterator, List, Optional, Tuple


OP_0 = 0x00
OP_PUSHDATA1 = 0x4c
OP_PUSHDATA2 = 0x4d
OP_PUSHDATA4 = 0x4e
OP_1 = 0x51
OP_16 = 0x60
OP_RETURN = 0x6a
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xa9
OP_CHECKSIG = 0xac
OP_CHECKMULTISIG = 0xae


class ScriptType(str, Enum):
    """Output script kinds; the value is the JSON tag"""
    P2PKH = "p2pkh"
    P2SH = "p2sh"
    P2WPKH = "p2wpkh"
    P2WSH = "p2wsh"
    P2TR = "p2tr"
    P2PK = "p2pk"
    MULTISIG = "multisig"
    OP_RETURN = "op_return"
    WITNESS_UNKNOWN = "witness_unknown"
    NONSTANDARD = "nonstandard"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def __str__(self) -> str:
        return self.description


_DESCRIPTIONS = {
    ScriptType.P2PKH: "P2PKH (Pay to Public Key Hash)",
    ScriptType.P2SH: "P2SH (Pay to Script Hash)",
    ScriptType.P2WPKH: "P2WPKH (Pay to Witness Public Key Hash)",
    ScriptType.P2WSH: "P2WSH (Pay to Witness Script Hash)",
    ScriptType.P2TR: "P2TR (Pay to Taproot)",
    ScriptType.P2PK: "P2PK (Pay to Public Key)",
    ScriptType.MULTISIG: "Bare Multisig",
    ScriptType.OP_RETURN: "OP_RETURN (Data)",
    ScriptType.WITNESS_UNKNOWN: "Witness Unknown",
    ScriptType.NONSTANDARD: "Non-standard",
}


_NAMED_OPCODES = {
    0x00: "OP_0",
    0x4c: "OP_PUSHDATA1",
    0x4d: "OP_PUSHDATA2",
    0x4e: "OP_PUSHDATA4",
    0x4f: "OP_1NEGATE",
    0x50: "OP_RESERVED",
    0x61: "OP_NOP",
    0x62: "OP_VER",
    0x63: "OP_IF",
    0x64: "OP_NOTIF",
    0x65: "OP_VERIF",
    0x66: "OP_VERNOTIF",
    0x67: "OP_ELSE",
    0x68: "OP_ENDIF",
    0x69: "OP_VERIFY",
    0x6a: "OP_RETURN",
    0x6b: "OP_TOALTSTACK",
    0x6c: "OP_FROMALTSTACK",
    0x6d: "OP_2DROP",
    0x6e: "OP_2DUP",
    0x6f: "OP_3DUP",
    0x70: "OP_2OVER",
    0x71: "OP_2ROT",
    0x72: "OP_2SWAP",
    0x73: "OP_IFDUP",
    0x74: "OP_DEPTH",
    0x75: "OP_DROP",
    0x76: "OP_DUP",
    0x77: "OP_NIP",
    0x78: "OP_OVER",
    0x79: "OP_PICK",
    0x7a: "OP_ROLL",
    0x7b: "OP_ROT",
    0x7c: "OP_SWAP",
    0x7d: "OP_TUCK",
    0x7e: "OP_CAT",
    0x7f: "OP_SUBSTR",
    0x80: "OP_LEFT",
    0x81: "OP_RIGHT",
    0x82: "OP_SIZE",
    0x83: "OP_INVERT",
    0x84: "OP_AND",
    0x85: "OP_OR",
    0x86: "OP_XOR",
    0x87: "OP_EQUAL",
    0x88: "OP_EQUALVERIFY",
    0x89: "OP_RESERVED1",
    0x8a: "OP_RESERVED2",
    0x8b: "OP_1ADD",
    0x8c: "OP_1SUB",
    0x8d: "OP_2MUL",
    0x8e: "OP_2DIV",
    0x8f: "OP_NEGATE",
    0x90: "OP_ABS",
    0x91: "OP_NOT",
    0x92: "OP_0NOTEQUAL",
    0x93: "OP_ADD",
    0x94: "OP_SUB",
    0x95: "OP_MUL",
    0x96: "OP_DIV",
    0x97: "OP_MOD",
    0x98: "OP_LSHIFT",
    0x99: "OP_RSHIFT",
    0x9a: "OP_BOOLAND",
    0x9b: "OP_BOOLOR",
    0x9c: "OP_NUMEQUAL",
    0x9d: "OP_NUMEQUALVERIFY",
    0x9e: "OP_NUMNOTEQUAL",
    0x9f: "OP_LESSTHAN",
    0xa0: "OP_GREATERTHAN",
    0xa1: "OP_LESSTHANOREQUAL",
    0xa2: "OP_GREATERTHANOREQUAL",
    0xa3: "OP_MIN",
    0xa4: "OP_MAX",
    0xa5: "OP_WITHIN",
    0xa6: "OP_RIPEMD160",
    0xa7: "OP_SHA1",
    0xa8: "OP_SHA256",
    0xa9: "OP_HASH160",
    0xaa: "OP_HASH256",
    0xab: "OP_CODESEPARATOR",
    0xac: "OP_CHECKSIG",
    0xad: "OP_CHECKSIGVERIFY",
    0xae: "OP_CHECKMULTISIG",
    0xaf: "OP_CHECKMULTISIGVERIFY",
    0xb0: "OP_NOP1",
    0xb1: "OP_CHECKLOCKTIMEVERIFY",
    0xb2: "OP_CHECKSEQUENCEVERIFY",
    0xb3: "OP_NOP4",
    0xb4: "OP_NOP5",
    0xb5: "OP_NOP6",
    0xb6: "OP_NOP7",
    0xb7: "OP_NOP8",
    0xb8: "OP_NOP9",
    0xb9: "OP_NOP10",
    0xba: "OP_CHECKSIGADD",
}
# OP_1 .. OP_16
_NAMED_OPCODES.update({OP_1 + n - 1: f"OP_{n}" for n in range(1, 17)})

# Indexed by opcode byte
OPCODE_NAMES: Tuple[str, ...] = tuple(
    _NAMED_OPCODES.get(opcode, f"OP_UNKNOWN_{opcode:02x}") for opcode in range(256)
)


def opcode_name(opcode: int) -> str:
    """Name of a non-push opcode"""
    return OPCODE_NAMES[opcode]


def _is_small_int(opcode: int) -> bool:
    return OP_1 <= opcode <= OP_16


def _walk_script(script: bytes) -> Iterator[Tuple[str, object]]:
    """
    Walk a script one element at a time.

    Yields ("op", opcode), ("data", bytes) or ("error", message). An error
    is always the last item; its message is None when a PUSHDATA length
    prefix is itself cut off.
    """
    i = 0
    while i < len(script):
        opcode = script[i]

        # Data push operations (0x01-0x4b)
        if 1 <= opcode <= 75:
            data_len = opcode
            if i + 1 + data_len > len(script):
                yield "error", f"push {data_len} bytes past end"
                return
            yield "data", script[i + 1:i + 1 + data_len]
            i += 1 + data_len
            continue

        # OP_PUSHDATA1/2/4 carry a 1, 2 or 4 byte length prefix
        if opcode in (OP_PUSHDATA1, OP_PUSHDATA2, OP_PUSHDATA4):
            prefix_len = {OP_PUSHDATA1: 1, OP_PUSHDATA2: 2, OP_PUSHDATA4: 4}[opcode]
            label = OPCODE_NAMES[opcode][3:]
            if i + 1 + prefix_len > len(script):
                yield "error", None
                return
            data_len = int.from_bytes(script[i + 1:i + 1 + prefix_len], 'little')
            start = i + 1 + prefix_len
            if start + data_len > len(script):
                yield "error", f"{label} past end"
                return
            yield "data", script[start:start + data_len]
            i = start + data_len
            continue

        yield "op", opcode
        i += 1


def disassemble_script(script: bytes) -> str:
    """
    Disassemble a script to ASM.

    Pushes are shown as hex, opcodes by name. A push running past the end
    of the script ends the output with an "[error: ...]" token instead of
    raising.

    Args:
        script: Raw script bytes

    Returns:
        Space separated ASM string ("" for an empty script)
    """
    asm: List[str] = []
    for kind, value in _walk_script(script):
        if kind == "data":
            asm.append(value.hex())
        elif kind == "op":
            asm.append(OPCODE_NAMES[value])
        elif value is not None:
            asm.append(f"[error: {value}]")
    return " ".join(asm)


def find_script_error(script: bytes) -> Optional[str]:
    """Return a description of the first malformed push, or None."""
    for kind, value in _walk_script(script):
        if kind == "error":
            return value or "push length prefix past end"
    return None


def detect_script_type(script: bytes) -> ScriptType:
    """
    Classify an output script.

    Rules are checked in order and the first match wins.

    Args:
        script: scriptPubKey bytes

    Returns:
        Detected ScriptType
    """
    length = len(script)
    if length == 0:
        return ScriptType.NONSTANDARD

    if (length == 25
            and script[0] == OP_DUP
            and script[1] == OP_HASH160
            and script[2] == 0x14
            and script[23] == OP_EQUALVERIFY
            and script[24] == OP_CHECKSIG):
        return ScriptType.P2PKH

    if (length == 23
            and script[0] == OP_HASH160
            and script[1] == 0x14
            and script[22] == OP_EQUAL):
        return ScriptType.P2SH

    if length == 22 and script[0] == OP_0 and script[1] == 0x14:
        return ScriptType.P2WPKH

    if length == 34 and script[0] == OP_0 and script[1] == 0x20:
        return ScriptType.P2WSH

    if length == 34 and script[0] == OP_1 and script[1] == 0x20:
        return ScriptType.P2TR

    if (length in (35, 67)
            and script[0] in (0x21, 0x41)
            and script[-1] == OP_CHECKSIG):
        return ScriptType.P2PK

    if script[0] == OP_RETURN:
        return ScriptType.OP_RETURN

    # Future witness versions: OP_1..OP_16 followed by a single 2-40 byte push
    if length >= 2 and _is_small_int(script[0]):
        push_size = script[1]
        if length == 2 + push_size and 2 <= push_size <= 40:
            return ScriptType.WITNESS_UNKNOWN

    if (length >= 3
            and script[-1] == OP_CHECKMULTISIG
            and _is_small_int(script[0])
            and _is_small_int(script[-2])):
        return ScriptType.MULTISIG

    return ScriptType.NONSTANDARD


def extract_witness_program(script: bytes) -> Optional[Tuple[int, bytes]]:
    """
    Split a witness output script into (version, program).

    Returns None if the script is not <OP_0|OP_1..OP_16> <2-40 byte push>.
    """
    if len(script) < 4 or len(script) > 42:
        return None
    if script[0] != OP_0 and not _is_small_int(script[0]):
        return None
    if script[1] != len(script) - 2:
        return None
    version = 0 if script[0] == OP_0 else script[0] - OP_1 + 1
    return version, script[2:]
