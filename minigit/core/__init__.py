"""Core functionality for minigit.

This module contains the core data structures:
- Objects (Blob, Tree, Commit) and their wire codec
- The content-addressed object store and its storage backends
- Index/staging area and tree projection
- Reference management
- Configuration management
- Pack archives
- Hashing utilities

For commit, checkout, history and merge, see minigit.operations
"""

from minigit.core.errors import (ErrorKind, MinigitError, StorageError, ObjectNotFoundError,
                                 ObjectFormatError, IndexFormatError, PackError,
                                 PreconditionError, InvariantError)
from minigit.core.objects import MinigitObject, Blob, Tree, TreeEntry, Commit, parse_object
from minigit.core.storage import Storage, FileStorage, MemoryStorage
from minigit.core.store import ObjectStore
from minigit.core.repository import Repository
from minigit.core.hash import hash_object, hash_file
from minigit.core.index import Index, IndexEntry
from minigit.core.projection import project, flatten
from minigit.core.refs import RefManager
from minigit.core.config import Config, build_identity

__all__ = [
    'ErrorKind',
    'MinigitError',
    'StorageError',
    'ObjectNotFoundError',
    'ObjectFormatError',
    'IndexFormatError',
    'PackError',
    'PreconditionError',
    'InvariantError',
    'MinigitObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'parse_object',
    'Storage',
    'FileStorage',
    'MemoryStorage',
    'ObjectStore',
    'Repository',
    'Index',
    'IndexEntry',
    'project',
    'flatten',
    'RefManager',
    'Config',
    'build_identity',
    'hash_object',
    'hash_file',
]
