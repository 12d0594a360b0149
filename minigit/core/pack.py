"""Pack archive codec.

A pack bundles already-compressed loose objects into one file::

    "MPK1" | uint32 count | count x (40-byte hex hash | uint32 length | payload)

Integers are big-endian. Payloads are copied as stored, never recompressed.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Iterable, List

from .errors import PackError
from .hash import HEX_LENGTH, is_valid_hash

logger = logging.getLogger(__name__)

MAGIC = b'MPK1'

_U32 = struct.Struct('>I')


@dataclass(frozen=True)
class PackEntry:
    """One object in a pack: its hash and compressed payload."""
    hash: str
    payload: bytes

    def __repr__(self) -> str:
        return f"PackEntry({self.hash[:7]}, {len(self.payload)} bytes)"


def encode_pack(entries: Iterable[PackEntry]) -> bytes:
    """Serialize entries into a pack archive."""
    entries = list(entries)
    content = bytearray(MAGIC)
    content.extend(_U32.pack(len(entries)))

    for entry in entries:
        if not is_valid_hash(entry.hash):
            raise PackError(f"Cannot pack invalid hash {entry.hash!r}")
        content.extend(entry.hash.encode('ascii'))
        content.extend(_U32.pack(len(entry.payload)))
        content.extend(entry.payload)

    return bytes(content)


def decode_pack(data: bytes) -> List[PackEntry]:
    """
    Parse a pack archive.

    The archive is valid only as a whole: bad magic, a truncated entry, an
    invalid hash or trailing bytes after the last entry all reject it.

    Raises:
        PackError: If the archive is invalid
    """
    if len(data) < len(MAGIC) + _U32.size:
        raise PackError("Pack is too short for its header")
    if data[:len(MAGIC)] != MAGIC:
        raise PackError(f"Bad pack magic: {data[:len(MAGIC)]!r}")

    (count,) = _U32.unpack_from(data, len(MAGIC))
    offset = len(MAGIC) + _U32.size
    entries = []

    for i in range(count):
        if offset + HEX_LENGTH + _U32.size > len(data):
            raise PackError(f"Pack truncated in header of entry {i} of {count}")

        try:
            obj_hash = data[offset:offset + HEX_LENGTH].decode('ascii')
        except UnicodeDecodeError:
            obj_hash = ''
        if not is_valid_hash(obj_hash):
            raise PackError(f"Pack entry {i} has an invalid hash")
        offset += HEX_LENGTH

        (length,) = _U32.unpack_from(data, offset)
        offset += _U32.size
        if offset + length > len(data):
            raise PackError(f"Pack truncated in payload of entry {i} ({obj_hash})")

        entries.append(PackEntry(obj_hash, data[offset:offset + length]))
        offset += length

    if offset != len(data):
        raise PackError(f"Pack has {len(data) - offset} unexpected trailing bytes")

    return entries


def collect_entries(store) -> List[PackEntry]:
    """Every object in the store, sorted by hash."""
    return [PackEntry(h, store.read_raw(h)) for h in store.iter_hashes()]


def write_pack(store, storage, relative_path: str) -> int:
    """
    Pack every stored object into a file.

    Args:
        store: ObjectStore to read from
        storage: Storage the pack is written to
        relative_path: Pack path within storage

    Returns:
        int: Number of objects packed

    Raises:
        PackError: If the store holds no objects
    """
    entries = collect_entries(store)
    if not entries:
        raise PackError("No objects to pack")

    storage.write_bytes(relative_path, encode_pack(entries))
    logger.info("packed %d objects into %s", len(entries), relative_path)
    return len(entries)


def read_pack(storage, relative_path: str) -> List[PackEntry]:
    """Read and parse a pack file. See decode_pack."""
    return decode_pack(storage.read_bytes(relative_path))


def unpack_into(store, entries: Iterable[PackEntry]) -> int:
    """
    Import pack entries as loose objects.

    Each payload is verified against its hash before it is written; objects
    already present are skipped.

    Returns:
        int: Number of objects newly written
    """
    imported = 0
    for entry in entries:
        if store.put_raw(entry.hash, entry.payload):
            imported += 1
    logger.info("unpacked %d new objects", imported)
    return imported
