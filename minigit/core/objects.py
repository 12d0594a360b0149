"""Object model for minigit: blobs, trees and commits."""

import re
from abc import ABC, abstractmethod
from bisect import insort
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import InvariantError, ObjectFormatError
from .hash import RAW_LENGTH, hash_object, hex_to_raw, is_valid_hash, raw_to_hex

MODE_FILE = '100644'
MODE_EXECUTABLE = '100755'
MODE_DIR = '40000'

DIR_MODES = frozenset({MODE_DIR, '040000'})

_HEADER_RE = re.compile(rb'^(blob|tree|commit) (\d+)$')


def split_header(data: bytes) -> Tuple[str, bytes]:
    """
    Split a full ``<kind> <size>\\0<body>`` buffer.

    Args:
        data: Encoded object including header

    Returns:
        Tuple of (kind, body)

    Raises:
        ObjectFormatError: If the header is missing, malformed, or its size
            does not match the body
    """
    null_idx = data.find(b'\0')
    if null_idx < 0:
        raise ObjectFormatError("Object header is missing its NUL terminator")

    match = _HEADER_RE.match(data[:null_idx])
    if not match:
        raise ObjectFormatError(f"Invalid object header: {data[:null_idx][:32]!r}")

    body = data[null_idx + 1:]
    size = int(match.group(2))
    if size != len(body):
        raise ObjectFormatError(f"Object size mismatch: expected {size}, got {len(body)}")
    return match.group(1).decode(), body


def _strip_own_header(data: bytes, kind: str, strict: bool = True) -> bytes:
    """
    Return the body whether data carries a header for ``kind`` or not.

    With ``strict`` a well-formed header whose size disagrees with the body
    is a format error; otherwise the buffer is taken as a bare body.
    """
    prefix = f"{kind} ".encode()
    if not data.startswith(prefix):
        return data

    null_idx = data.find(b'\0')
    if null_idx < 0 or not data[len(prefix):null_idx].isdigit():
        return data

    try:
        return split_header(data)[1]
    except ObjectFormatError:
        if strict:
            raise
        return data


class MinigitObject(ABC):
    """Base class for all stored objects."""

    kind = ''

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize the object body, without header.

        Returns:
            bytes: Serialized object data
        """

    @classmethod
    @abstractmethod
    def from_body(cls, body: bytes) -> 'MinigitObject':
        """Build an object from its header-less body."""

    @classmethod
    def decode(cls, data: bytes) -> 'MinigitObject':
        """
        Build an object from its encoding.

        Accepts the full ``<kind> <size>\\0<body>`` form as well as the bare
        body returned by ``ObjectStore.get``.
        """
        return cls.from_body(_strip_own_header(data, cls.kind))

    @property
    def type(self) -> str:
        """Object kind name (blob, tree, commit)."""
        return self.kind

    def encode(self) -> bytes:
        """
        Canonical encoding: ``<kind> <size>\\0<body>``.

        This is the exact byte sequence hashed and stored.
        """
        body = self.serialize()
        return f"{self.kind} {len(body)}\0".encode() + body

    @property
    def hash(self) -> str:
        """40-character SHA-1 of the canonical encoding."""
        return hash_object(self.encode())

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.serialize() == other.serialize()

    def __hash__(self) -> int:
        return hash((self.kind, self.serialize()))


class Blob(MinigitObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    kind = 'blob'

    def __init__(self, data: Optional[bytes] = None):
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    @classmethod
    def from_body(cls, body: bytes) -> 'Blob':
        return cls(body)

    @classmethod
    def decode(cls, data: bytes) -> 'Blob':
        return cls(_strip_own_header(data, cls.kind, strict=False))

    @classmethod
    def from_file(cls, filepath) -> 'Blob':
        """Create blob from a file on disk."""
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


@dataclass(frozen=True)
class TreeEntry:
    """
    A single entry in a tree.

    - mode: '100644'/'100755' for files, '40000' for directories
    - name: file or directory name, no separators
    - hash: hash of the blob or subtree
    """
    mode: str
    name: str
    hash: str

    @property
    def type(self) -> str:
        return 'tree' if self.is_dir else 'blob'

    @property
    def is_dir(self) -> bool:
        return self.mode in DIR_MODES

    def __lt__(self, other: 'TreeEntry') -> bool:
        """Sort entries by name for consistent ordering."""
        return self.name < other.name

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode} {self.type} {self.hash[:7]} {self.name})"


class Tree(MinigitObject):
    """
    Represents directory structure.

    A tree contains entries pointing to blobs (files) and other trees
    (subdirectories), kept sorted by name with unique names.
    """

    kind = 'tree'

    def __init__(self, entries: Optional[List[TreeEntry]] = None):
        self.entries: List[TreeEntry] = []
        self._names = set()
        for entry in entries or []:
            self.add_entry(entry.mode, entry.name, entry.hash)

    def add_entry(self, mode: str, name: str, obj_hash: str) -> TreeEntry:
        """
        Add entry to tree.

        Raises:
            InvariantError: On an invalid name, a malformed hash, or a
                name already present in this tree
        """
        if not name or '/' in name or '\0' in name:
            raise InvariantError(f"Invalid tree entry name: {name!r}")
        if not is_valid_hash(obj_hash):
            raise InvariantError(f"Invalid hash for tree entry {name!r}: {obj_hash!r}")
        if name in self._names:
            raise InvariantError(f"Duplicate tree entry name: {name!r}")

        entry = TreeEntry(mode, name, obj_hash)
        insort(self.entries, entry)
        self._names.add(name)
        return entry

    def get(self, name: str) -> Optional[TreeEntry]:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def serialize(self) -> bytes:
        """
        Serialize tree entries.

        Format per entry: ``<mode> <name>\\0<20-byte hash>``, sorted by name.
        """
        parts = []
        for entry in sorted(self.entries):
            parts.append(f"{entry.mode} {entry.name}".encode() + b'\0')
            parts.append(hex_to_raw(entry.hash))
        return b''.join(parts)

    @classmethod
    def from_body(cls, body: bytes) -> 'Tree':
        tree = cls()
        pos = 0

        while pos < len(body):
            null_pos = body.find(b'\0', pos)
            if null_pos < 0:
                raise ObjectFormatError(f"Tree entry at offset {pos} has no NUL separator")

            space_pos = body.find(b' ', pos, null_pos)
            if space_pos < 0:
                raise ObjectFormatError(f"Tree entry at offset {pos} has no mode")

            hash_end = null_pos + 1 + RAW_LENGTH
            if hash_end > len(body):
                raise ObjectFormatError(f"Tree entry at offset {pos} has a truncated hash")

            try:
                mode = body[pos:space_pos].decode('ascii')
                name = body[space_pos + 1:null_pos].decode('utf-8')
            except UnicodeDecodeError as e:
                raise ObjectFormatError(f"Tree entry at offset {pos} is not valid text") from e

            try:
                tree.add_entry(mode, name, raw_to_hex(body[null_pos + 1:hash_end]))
            except InvariantError as e:
                raise ObjectFormatError(str(e)) from e

            pos = hash_end

        return tree

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


class Commit(MinigitObject):
    """
    Represents a commit.

    A commit captures:
    - Snapshot of project (tree hash)
    - Parent commit(s) for history
    - Author and committer identity strings
    - Commit message
    """

    kind = 'commit'

    def __init__(
        self,
        tree: str = '',
        parents: Optional[List[str]] = None,
        author: str = '',
        committer: str = '',
        message: str = ''
    ):
        self.tree = tree
        self.parents: List[str] = list(parents or [])
        self.author = author
        self.committer = committer
        self.message = message

    def serialize(self) -> bytes:
        """
        Serialize commit body.

        Format:
        tree <tree-hash>
        parent <parent-hash>  (zero or more)
        author <identity>
        committer <identity>

        <commit message>
        """
        lines = [f'tree {self.tree}']
        for parent in self.parents:
            lines.append(f'parent {parent}')
        lines.append(f'author {self.author}')
        lines.append(f'committer {self.committer}')
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    @classmethod
    def from_body(cls, body: bytes) -> 'Commit':
        try:
            content = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ObjectFormatError("Commit is not valid UTF-8") from e

        commit = cls()
        headers, sep, message = content.partition('\n\n')
        if not sep and headers.endswith('\n'):
            headers = headers[:-1]

        for line in headers.split('\n') if headers else []:
            if line.startswith('tree '):
                commit.tree = line[5:]
            elif line.startswith('parent '):
                commit.parents.append(line[7:])
            elif line.startswith('author '):
                commit.author = line[7:]
            elif line.startswith('committer '):
                commit.committer = line[10:]
            # Unknown header lines are skipped

        commit.message = message

        if not commit.tree:
            raise ObjectFormatError("Commit has no tree")
        if not is_valid_hash(commit.tree):
            raise ObjectFormatError(f"Commit has an invalid tree hash: {commit.tree!r}")
        for parent in commit.parents:
            if not is_valid_hash(parent):
                raise ObjectFormatError(f"Commit has an invalid parent hash: {parent!r}")

        return commit

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        committer: str,
        message: str
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author identity (e.g., "Name <email> 1700000000 +0000")
            committer: Committer identity
            message: Commit message

        Returns:
            Commit: New commit object
        """
        if not is_valid_hash(tree_hash):
            raise InvariantError(f"Invalid tree hash: {tree_hash!r}")
        for parent in parent_hashes:
            if not is_valid_hash(parent):
                raise InvariantError(f"Invalid parent hash: {parent!r}")
        return cls(tree_hash, parent_hashes, author, committer, message)

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


OBJECT_TYPES = {cls.kind: cls for cls in (Blob, Tree, Commit)}


def parse_object(data: bytes) -> MinigitObject:
    """
    Decode a full ``<kind> <size>\\0<body>`` buffer into the right class.

    Raises:
        ObjectFormatError: If the header or body is malformed
    """
    kind, body = split_header(data)
    return OBJECT_TYPES[kind].from_body(body)
