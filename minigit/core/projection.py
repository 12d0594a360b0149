"""Conversion between the flat index and the tree hierarchy.

``project`` turns staged ``(mode, path, hash)`` entries into nested tree
objects and returns the root tree hash. ``flatten`` walks a tree back into
file-only entries with full paths.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from .errors import InvariantError
from .index import IndexEntry
from .objects import MODE_DIR, Tree

logger = logging.getLogger(__name__)

SEPARATOR = '/'


def _depth(directory: str) -> int:
    return directory.count(SEPARATOR) + 1 if directory else 0


def _check_path(path: str) -> None:
    parts = path.split(SEPARATOR)
    if not path or any(part in ('', '.', '..') for part in parts):
        raise InvariantError(f"Invalid index path: {path!r}")


def project(store, entries: Iterable[IndexEntry]) -> str:
    """
    Build and store the tree hierarchy for a flat list of entries.

    Directories are processed deepest first, so every child tree hash is
    known before its parent is encoded. Directories with no files of their
    own still get a tree holding their subdirectories.

    Args:
        store: ObjectStore to write trees into
        entries: Staged entries; order does not matter

    Returns:
        str: Hash of the root tree (the empty tree for no entries)

    Raises:
        InvariantError: On duplicate paths, malformed paths, or a path used
            both as a file and as a directory
    """
    files: Dict[str, List[IndexEntry]] = defaultdict(list)
    directories = {''}
    seen = set()

    for entry in entries:
        _check_path(entry.path)
        if entry.path in seen:
            raise InvariantError(f"Duplicate index path: {entry.path!r}")
        seen.add(entry.path)

        parent = entry.path.rpartition(SEPARATOR)[0]
        files[parent].append(entry)

        while parent and parent not in directories:
            directories.add(parent)
            parent = parent.rpartition(SEPARATOR)[0]

    clashes = seen & directories
    if clashes:
        raise InvariantError(f"Paths used as both file and directory: {sorted(clashes)}")

    children: Dict[str, List[str]] = defaultdict(list)
    for directory in directories:
        if directory:
            parent, _, name = directory.rpartition(SEPARATOR)
            children[parent].append(name)

    tree_hashes: Dict[str, str] = {}
    for directory in sorted(directories, key=lambda d: (-_depth(d), d)):
        tree = Tree()
        for entry in files[directory]:
            tree.add_entry(entry.mode, entry.path.rpartition(SEPARATOR)[2], entry.hash)
        for name in children[directory]:
            child = f"{directory}{SEPARATOR}{name}" if directory else name
            tree.add_entry(MODE_DIR, name, tree_hashes[child])
        tree_hashes[directory] = store.write(tree)

    logger.debug("projected %d entries into %d trees", len(seen), len(tree_hashes))
    return tree_hashes['']


def flatten(store, tree_hash: str, prefix: str = '') -> List[IndexEntry]:
    """
    Walk a tree into file entries with full paths.

    Subdirectory entries are descended into, never emitted.

    Args:
        store: ObjectStore to read trees from
        tree_hash: Root tree hash
        prefix: Path prefix for emitted entries (used when recursing)

    Returns:
        List of IndexEntry, depth-first in tree order
    """
    result = []
    tree = store.read_tree(tree_hash)

    for entry in tree.entries:
        if entry.is_dir:
            result.extend(flatten(store, entry.hash, f"{prefix}{entry.name}{SEPARATOR}"))
        else:
            result.append(IndexEntry(mode=entry.mode, path=prefix + entry.name, hash=entry.hash))

    return result


def flatten_to_map(store, tree_hash: str) -> Dict[str, str]:
    """Flatten a tree into a ``{path: blob_hash}`` mapping."""
    return {entry.path: entry.hash for entry in flatten(store, tree_hash)}


def empty_tree_hash(store) -> str:
    """Store the empty tree and return its hash."""
    return store.write(Tree())
