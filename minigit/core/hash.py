"""Hash utilities for minigit."""

import hashlib
import string

HEX_LENGTH = 40
RAW_LENGTH = 20

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.

    Args:
        data: Bytes to hash

    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def hash_file(filepath: str) -> str:
    """
    Compute SHA-1 hash of file.

    Args:
        filepath: Path to file

    Returns:
        40-character hex string
    """
    with open(filepath, 'rb') as f:
        return hash_object(f.read())


def is_valid_hash(value) -> bool:
    """Return True for a 40-character lowercase hex string."""
    return (
        isinstance(value, str)
        and len(value) == HEX_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )


def hex_to_raw(hex_hash: str) -> bytes:
    """
    Convert a 40-character hex hash to its 20-byte binary form.

    Raises:
        ValueError: If the string is not a valid hash
    """
    if not is_valid_hash(hex_hash):
        raise ValueError(f"Invalid hash: {hex_hash!r}")
    return bytes.fromhex(hex_hash)


def raw_to_hex(raw: bytes) -> str:
    """Convert a 20-byte binary hash to 40 hex characters."""
    if len(raw) != RAW_LENGTH:
        raise ValueError(f"Invalid raw hash length: {len(raw)}")
    return raw.hex()
