"""Index (staging area) implementation."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import IndexFormatError, PreconditionError, StorageError
from .hash import is_valid_hash
from .objects import Blob, MODE_EXECUTABLE, MODE_FILE
from .storage import Storage

logger = logging.getLogger(__name__)

INDEX_FILE = 'index'


@dataclass(frozen=True)
class IndexEntry:
    """
    A single staged file.

    The flat counterpart of a tree leaf: ``path`` is the full
    slash-separated path relative to the work tree.
    """
    mode: str
    path: str
    hash: str

    def to_line(self) -> str:
        return f"{self.mode} {self.hash} {self.path}\n"

    @classmethod
    def from_line(cls, line: str) -> 'IndexEntry':
        """
        Parse a ``<mode> <hash> <path>`` line.

        Raises:
            IndexFormatError: If the line is malformed
        """
        parts = line.split(' ', 2)
        if len(parts) != 3:
            raise IndexFormatError(f"Malformed index line: {line!r}")
        mode, obj_hash, path = parts
        if not mode or not path or not is_valid_hash(obj_hash):
            raise IndexFormatError(f"Malformed index line: {line!r}")
        return cls(mode=mode, path=path, hash=obj_hash)

    def __repr__(self) -> str:
        return f"IndexEntry({self.mode} {self.hash[:7]} {self.path})"


class Index:
    """
    Staging area.

    Entries are keyed by path and keep their first-insertion order, which is
    also the order they are written back in.
    """

    def __init__(self, entries: Optional[Iterable[IndexEntry]] = None):
        self.entries: Dict[str, IndexEntry] = {}
        for entry in entries or []:
            self.entries[entry.path] = entry

    def add_entry(self, path: str, obj_hash: str, mode: str = MODE_FILE) -> IndexEntry:
        """
        Add or update the entry for path.

        Entries that clash with path are dropped: a file staged at one of
        its parent directories, or anything staged below path itself.

        Args:
            path: Slash-separated path relative to the work tree
            obj_hash: Hash of the staged blob
            mode: File mode
        """
        self._drop_clashes(path)
        entry = IndexEntry(mode=mode, path=path, hash=obj_hash)
        self.entries[path] = entry
        return entry

    def _drop_clashes(self, path: str) -> None:
        parent = path.rpartition('/')[0]
        while parent:
            if self.entries.pop(parent, None) is not None:
                logger.debug("unstaged %s, now a directory", parent)
            parent = parent.rpartition('/')[0]

        prefix = path + '/'
        for other in [p for p in self.entries if p.startswith(prefix)]:
            del self.entries[other]
            logger.debug("unstaged %s, %s is now a file", other, path)

    def remove_entry(self, path: str) -> bool:
        """Remove entry for path. Returns True if it was present."""
        return self.entries.pop(path, None) is not None

    def get_entry(self, path: str) -> Optional[IndexEntry]:
        return self.entries.get(path)

    def replace(self, entries: Iterable[IndexEntry]) -> None:
        """Replace the whole staging list, e.g. after checkout or merge."""
        self.entries = {}
        for entry in entries:
            self.entries[entry.path] = entry

    def clear(self) -> None:
        self.entries.clear()

    def serialize(self) -> bytes:
        return ''.join(entry.to_line() for entry in self.entries.values()).encode('utf-8')

    @classmethod
    def deserialize(cls, data: bytes) -> 'Index':
        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise IndexFormatError("Index is not valid UTF-8") from e

        index = cls()
        for line in text.split('\n'):
            line = line.rstrip('\r')
            if not line:
                continue
            entry = IndexEntry.from_line(line)
            index.entries[entry.path] = entry
        return index

    @classmethod
    def read(cls, storage: Storage, name: str = INDEX_FILE) -> 'Index':
        """Load the index. A missing file is an empty index."""
        if not storage.exists(name):
            return cls()
        return cls.deserialize(storage.read_bytes(name))

    def write(self, storage: Storage, name: str = INDEX_FILE) -> None:
        storage.write_bytes(name, self.serialize())
        logger.debug("wrote index with %d entries", len(self.entries))

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries.values())

    def __contains__(self, path: str) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"Index(entries={len(self.entries)})"


def file_mode(file_path: Path) -> str:
    """Tree mode for a regular file on disk."""
    return MODE_EXECUTABLE if os.access(file_path, os.X_OK) else MODE_FILE


def _relative_path(repo, filepath) -> Path:
    file_path = Path(filepath)
    if not file_path.is_absolute():
        file_path = repo.work_tree / file_path
    file_path = file_path.resolve()

    if not file_path.is_file():
        raise PreconditionError(f"Not a file: {filepath}")

    try:
        rel_path = file_path.relative_to(repo.work_tree)
    except ValueError:
        raise PreconditionError(f"{filepath} is outside repository at {repo.work_tree}")

    if rel_path.parts[0] == repo.REPO_DIR_NAME:
        raise PreconditionError(f"Cannot stage repository internals: {filepath}")
    return rel_path


def stage_files(repo, paths: List) -> List[IndexEntry]:
    """
    Stage files for commit.

    Writes one blob per file, upserts the entries and persists the index
    once at the end.

    Args:
        repo: Repository instance
        paths: File paths, absolute or relative to the work tree

    Returns:
        List of staged entries, in argument order

    Raises:
        PreconditionError: If a path is not a file inside the work tree
        StorageError: If a file cannot be read
    """
    index = repo.read_index()
    staged = []

    for filepath in paths:
        rel_path = _relative_path(repo, filepath)
        file_path = repo.work_tree / rel_path
        try:
            blob = Blob.from_file(file_path)
        except OSError as e:
            raise StorageError(f"Cannot read {filepath}: {e}") from e

        obj_hash = repo.objects.write(blob)
        entry = index.add_entry(rel_path.as_posix(), obj_hash, file_mode(file_path))
        staged.append(entry)
        logger.debug("staged %s as %s", entry.path, obj_hash)

    repo.write_index(index)
    return staged


def stage_file(repo, filepath) -> IndexEntry:
    """Stage a single file. See stage_files."""
    return stage_files(repo, [filepath])[0]
