"""Repository context for minigit."""

import logging
from pathlib import Path
from typing import Optional

from .compression import Compressor, ZlibCompressor
from .config import Config, build_identity
from .errors import PreconditionError
from .index import INDEX_FILE, Index
from .refs import HEAD_FILE, RefManager
from .storage import FileStorage, MemoryStorage, Storage
from .store import OBJECTS_DIR, ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = 'main'


class Repository:
    """
    Explicit repository context.

    Bundles the work tree path, the storage rooted at ``.minigit``, the
    object store, refs and config. Every operation takes one of these
    instead of relying on a current directory or global state.
    """

    REPO_DIR_NAME = '.minigit'

    def __init__(
        self,
        path='.',
        storage: Optional[Storage] = None,
        compressor: Optional[Compressor] = None,
        bare: bool = False
    ):
        """
        Initialize repository.

        Args:
            path: Path to work tree root (defaults to current directory)
            storage: Storage for repository data; defaults to a FileStorage
                rooted at ``<path>/.minigit``
            compressor: Object compressor (zlib by default)
            bare: Repository has no work tree; checkouts only update refs
                and the index
        """
        self.bare = bare
        self.work_tree = Path(path).resolve()
        self.repo_dir = self.work_tree / self.REPO_DIR_NAME
        self.storage = storage if storage is not None else FileStorage(self.repo_dir)
        self.objects = ObjectStore(self.storage, compressor or ZlibCompressor())
        self.config_file = self.repo_dir / 'config'
        self.refs = RefManager(self)
        self._config = None

    @classmethod
    def in_memory(cls, path='.') -> 'Repository':
        """Bare repository backed by MemoryStorage, already initialized."""
        repo = cls(path, storage=MemoryStorage(), bare=True)
        repo.init()
        return repo

    @property
    def config(self) -> Config:
        if self._config is None:
            repo_config = self.config_file if isinstance(self.storage, FileStorage) else None
            self._config = Config(repo_config)
        return self._config

    def init(self, initial_branch: str = DEFAULT_BRANCH) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .minigit directory structure:
        .minigit/
        ├── objects/       # Object database
        ├── refs/heads/    # Branch references
        ├── HEAD           # Current branch/commit
        └── config         # Repository configuration

        Raises:
            PreconditionError: If repository already exists
        """
        if self.storage.exists(HEAD_FILE):
            raise PreconditionError(f"Repository already exists at {self.repo_dir}")

        self.storage.make_dirs(OBJECTS_DIR)
        self.storage.make_dirs('refs/heads')
        self.refs.set_head_symbolic(f"refs/heads/{initial_branch}")
        self.storage.write_bytes('config', b'[core]\n\trepositoryformatversion = 0\n')

        logger.info("initialized repository in %s", self.repo_dir)
        return self

    @classmethod
    def find_repository(cls, path='.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / cls.REPO_DIR_NAME).is_dir():
                return cls(current)
            if current == current.parent:
                return None
            current = current.parent

    def read_index(self) -> Index:
        return Index.read(self.storage, INDEX_FILE)

    def write_index(self, index: Index) -> None:
        index.write(self.storage, INDEX_FILE)

    def identity(self, role: str = 'author') -> str:
        """Author or committer identity string for a new commit."""
        return build_identity(role, self.config)

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree}, bare={self.bare})"
