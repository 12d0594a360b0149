"""Byte storage addressed by relative path.

The object store, index, refs and pack code only ever talk to a ``Storage``.
``FileStorage`` is rooted at a repository directory on disk and
``MemoryStorage`` keeps everything in a dict for tests.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from .errors import StorageError

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


_UMASK = _current_umask()


class Storage(ABC):
    """Minimal byte storage plus directory enumeration.

    Paths are relative and slash-separated, e.g. ``objects/ab/cdef...``.
    """

    @abstractmethod
    def read_bytes(self, relative: str) -> bytes:
        """Read a file, raising StorageError if it is missing or unreadable."""

    @abstractmethod
    def write_bytes(self, relative: str, data: bytes) -> None:
        """Atomically write a file, creating parent directories."""

    @abstractmethod
    def exists(self, relative: str) -> bool:
        """Check whether a file or directory exists."""

    @abstractmethod
    def is_dir(self, relative: str) -> bool:
        """Check whether a directory exists."""

    @abstractmethod
    def list_dir(self, relative: str) -> List[str]:
        """Names directly inside a directory, sorted. Empty if missing."""

    @abstractmethod
    def make_dirs(self, relative: str) -> None:
        """Create a directory and its parents."""

    @abstractmethod
    def delete(self, relative: str) -> None:
        """Remove a file if present."""


class FileStorage(Storage):
    """Storage rooted at a directory on the local filesystem."""

    def __init__(self, root):
        self.root = Path(root)

    def path(self, relative: str) -> Path:
        return self.root / relative if relative else self.root

    def read_bytes(self, relative: str) -> bytes:
        try:
            return self.path(relative).read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot read {relative}: {e}") from e

    def write_bytes(self, relative: str, data: bytes) -> None:
        target = self.path(relative)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # Temp file lives beside the target so os.replace stays on one filesystem
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix='.tmp-')
            try:
                with os.fdopen(fd, 'wb') as f:
                    f.write(data)
                # mkstemp creates 0600; match what open() would have given
                os.chmod(tmp_name, 0o666 & ~_UMASK)
                os.replace(tmp_name, target)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {relative}: {e}") from e
        logger.debug("wrote %s (%d bytes)", relative, len(data))

    def exists(self, relative: str) -> bool:
        return self.path(relative).exists()

    def is_dir(self, relative: str) -> bool:
        return self.path(relative).is_dir()

    def list_dir(self, relative: str) -> List[str]:
        directory = self.path(relative)
        if not directory.is_dir():
            return []
        try:
            return sorted(
                item.name for item in directory.iterdir()
                if not item.name.startswith('.tmp-')
            )
        except OSError as e:
            raise StorageError(f"Cannot list {relative}: {e}") from e

    def make_dirs(self, relative: str) -> None:
        try:
            self.path(relative).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {relative}: {e}") from e

    def delete(self, relative: str) -> None:
        try:
            self.path(relative).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {relative}: {e}") from e

    def __repr__(self) -> str:
        return f"FileStorage(root={self.root})"


class MemoryStorage(Storage):
    """In-memory storage, used to exercise the core without a filesystem."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.dirs = {''}

    @staticmethod
    def _norm(relative: str) -> str:
        return relative.strip('/')

    def _add_parents(self, relative: str) -> None:
        parts = relative.split('/')
        for i in range(1, len(parts)):
            self.dirs.add('/'.join(parts[:i]))

    def read_bytes(self, relative: str) -> bytes:
        key = self._norm(relative)
        if key not in self.files:
            raise StorageError(f"Cannot read {relative}: no such file")
        return self.files[key]

    def write_bytes(self, relative: str, data: bytes) -> None:
        key = self._norm(relative)
        if key in self.dirs:
            raise StorageError(f"Cannot write {relative}: is a directory")
        self._add_parents(key)
        self.files[key] = bytes(data)

    def exists(self, relative: str) -> bool:
        key = self._norm(relative)
        return key in self.files or key in self.dirs

    def is_dir(self, relative: str) -> bool:
        return self._norm(relative) in self.dirs

    def list_dir(self, relative: str) -> List[str]:
        key = self._norm(relative)
        if key not in self.dirs:
            return []
        prefix = f"{key}/" if key else ''
        names = set()
        for path in list(self.files) + list(self.dirs):
            if path and path.startswith(prefix) and path != key:
                names.add(path[len(prefix):].split('/', 1)[0])
        return sorted(names)

    def make_dirs(self, relative: str) -> None:
        key = self._norm(relative)
        if key:
            self._add_parents(key)
            self.dirs.add(key)

    def delete(self, relative: str) -> None:
        self.files.pop(self._norm(relative), None)

    def __repr__(self) -> str:
        return f"MemoryStorage(files={len(self.files)})"
