"""Hash functions used for transaction ids and address derivation."""

import hashlib


def sha256(data: bytes) -> bytes:
    """Single SHA256"""
    return hashlib.sha256(data).digest()


def hash256(data: bytes) -> bytes:
    """Compute double SHA256"""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def hash160(data: bytes) -> bytes:
    """Compute HASH160 (RIPEMD160(SHA256(data)))"""
    sha256_hash = hashlib.sha256(data).digest()
    return hashlib.new('ripemd160', sha256_hash).digest()


def hash_to_hex(hash_bytes: bytes) -> str:
    """Hex string of a hash in display order (byte-reversed)"""
    return hash_bytes[::-1].hex()
