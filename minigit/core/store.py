"""Content-addressed object store."""

import logging
from typing import Iterator, Optional, Tuple

from .compression import Compressor, ZlibCompressor
from .errors import InvariantError, ObjectFormatError, ObjectNotFoundError
from .hash import HEX_LENGTH, hash_object, is_valid_hash
from .objects import Commit, MinigitObject, OBJECT_TYPES, Tree, split_header
from .storage import Storage

logger = logging.getLogger(__name__)

OBJECTS_DIR = 'objects'

_HEX_CHARS = set('0123456789abcdef')


def _is_hex(value: str, length: int) -> bool:
    return len(value) == length and set(value) <= _HEX_CHARS


class ObjectStore:
    """
    Persists compressed objects keyed by their hash.

    Loose objects live at ``objects/<hash[:2]>/<hash[2:]>`` and hold the
    compressed ``<kind> <size>\\0<body>`` encoding. Objects are never
    overwritten or deleted.
    """

    def __init__(self, storage: Storage, compressor: Optional[Compressor] = None):
        """
        Initialize object store.

        Args:
            storage: Byte storage rooted at the repository directory
            compressor: Compressor for loose objects (zlib by default)
        """
        self.storage = storage
        self.compressor = compressor or ZlibCompressor()

    def object_path(self, obj_hash: str) -> str:
        """
        Storage path for an object.

        Raises:
            InvariantError: If obj_hash is not 40 lowercase hex characters
        """
        if not is_valid_hash(obj_hash):
            raise InvariantError(f"Refusing to compute object path for {obj_hash!r}")
        return f"{OBJECTS_DIR}/{obj_hash[:2]}/{obj_hash[2:]}"

    def put(self, data: bytes) -> str:
        """
        Store an encoded object.

        Args:
            data: Full ``<kind> <size>\\0<body>`` encoding

        Returns:
            str: Hash of data, whether or not a write happened
        """
        obj_hash = hash_object(data)
        path = self.object_path(obj_hash)

        if self.storage.exists(path):
            logger.debug("object %s already stored", obj_hash)
            return obj_hash

        self.storage.write_bytes(path, self.compressor.compress(data))
        logger.debug("stored object %s", obj_hash)
        return obj_hash

    def write(self, obj: MinigitObject) -> str:
        """Encode and store an object, returning its hash."""
        return self.put(obj.encode())

    def exists(self, obj_hash: str) -> bool:
        return self.storage.exists(self.object_path(obj_hash))

    def read_raw(self, obj_hash: str) -> bytes:
        """
        Compressed bytes exactly as stored.

        Raises:
            ObjectNotFoundError: If the object is missing
        """
        path = self.object_path(obj_hash)
        if not self.storage.exists(path):
            raise ObjectNotFoundError(obj_hash)
        return self.storage.read_bytes(path)

    def put_raw(self, obj_hash: str, compressed: bytes) -> bool:
        """
        Store already-compressed bytes under obj_hash.

        The payload is decompressed and re-hashed first, so a mislabelled
        payload never lands at the wrong path.

        Returns:
            bool: True if written, False if the object already existed

        Raises:
            ObjectFormatError: If the payload is corrupt or its hash differs
        """
        path = self.object_path(obj_hash)
        if self.storage.exists(path):
            return False

        content = self.compressor.decompress(compressed)
        split_header(content)
        actual = hash_object(content)
        if actual != obj_hash:
            raise ObjectFormatError(f"Payload for {obj_hash} hashes to {actual}")

        self.storage.write_bytes(path, compressed)
        logger.debug("imported object %s", obj_hash)
        return True

    def load(self, obj_hash: str) -> Tuple[str, bytes]:
        """
        Read an object and split its header.

        Returns:
            Tuple of (kind, body)
        """
        content = self.compressor.decompress(self.read_raw(obj_hash))
        return split_header(content)

    def get(self, obj_hash: str) -> bytes:
        """
        Read an object's body, header stripped.

        Raises:
            ObjectNotFoundError: If the object is missing
            ObjectFormatError: If the stored bytes are corrupt
        """
        return self.load(obj_hash)[1]

    def read(self, obj_hash: str) -> MinigitObject:
        """Read and decode an object into Blob, Tree or Commit."""
        kind, body = self.load(obj_hash)
        return OBJECT_TYPES[kind].from_body(body)

    def read_commit(self, obj_hash: str) -> Commit:
        obj = self.read(obj_hash)
        if not isinstance(obj, Commit):
            raise ObjectFormatError(f"Object {obj_hash} is a {obj.kind}, not a commit")
        return obj

    def read_tree(self, obj_hash: str) -> Tree:
        obj = self.read(obj_hash)
        if not isinstance(obj, Tree):
            raise ObjectFormatError(f"Object {obj_hash} is a {obj.kind}, not a tree")
        return obj

    def iter_hashes(self) -> Iterator[str]:
        """
        Every stored object hash, in sorted order.

        Entries under ``objects/`` that are not loose objects are skipped.
        """
        for prefix in self.storage.list_dir(OBJECTS_DIR):
            if not _is_hex(prefix, 2):
                continue
            for rest in self.storage.list_dir(f"{OBJECTS_DIR}/{prefix}"):
                if _is_hex(rest, HEX_LENGTH - 2):
                    yield prefix + rest

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_hashes())

    def __repr__(self) -> str:
        return f"ObjectStore(storage={self.storage!r})"
