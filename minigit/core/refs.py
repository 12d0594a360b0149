"""Reference management for minigit."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import InvariantError, PreconditionError
from .hash import is_valid_hash

logger = logging.getLogger(__name__)

HEAD_FILE = 'HEAD'
HEADS_PREFIX = 'refs/heads/'
SYMBOLIC_PREFIX = 'ref: '


@dataclass(frozen=True)
class Head:
    """
    State of HEAD.

    When ``symbolic`` is True, ``target`` is a ref name such as
    ``refs/heads/main``; otherwise it is a commit hash (detached HEAD).
    """
    symbolic: bool
    target: str


def validate_refname(refname: str) -> None:
    """
    Reject ref names that could escape the refs directory.

    Raises:
        PreconditionError: If the name is not a usable ref
    """
    parts = refname.split('/')
    if (not refname.startswith('refs/') or len(parts) < 3
            or any(part in ('', '.', '..') for part in parts)
            or any(c in refname for c in ' \t\n\0:\\')):
        raise PreconditionError(f"Invalid ref name: {refname!r}")


class RefManager:
    """
    Manages HEAD and branch references.

    HEAD holds either ``ref: <refname>\\n`` (symbolic) or ``<hash>\\n``
    (detached). Ref files hold ``<hash>\\n``. All access goes through the
    repository storage.
    """

    def __init__(self, repo):
        """
        Initialize reference manager.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.storage = repo.storage

    def read_head(self) -> Optional[Head]:
        """Current HEAD, or None if missing or unreadable."""
        if not self.storage.exists(HEAD_FILE):
            return None

        content = self.storage.read_bytes(HEAD_FILE).decode('utf-8', errors='replace').strip()
        if content.startswith(SYMBOLIC_PREFIX):
            refname = content[len(SYMBOLIC_PREFIX):].strip()
            return Head(symbolic=True, target=refname) if refname else None
        if is_valid_hash(content):
            return Head(symbolic=False, target=content)
        return None

    def set_head_symbolic(self, refname: str) -> None:
        """Point HEAD at a ref, e.g. ``refs/heads/main``."""
        validate_refname(refname)
        self.storage.write_bytes(HEAD_FILE, f"{SYMBOLIC_PREFIX}{refname}\n".encode())

    def set_head_detached(self, commit_hash: str) -> None:
        """Point HEAD directly at a commit."""
        if not is_valid_hash(commit_hash):
            raise InvariantError(f"Invalid commit hash for HEAD: {commit_hash!r}")
        self.storage.write_bytes(HEAD_FILE, f"{commit_hash}\n".encode())

    def read_ref(self, refname: str) -> Optional[str]:
        """
        Read a reference and return its commit hash.

        Returns:
            Commit hash or None if the ref does not exist or is malformed
        """
        validate_refname(refname)
        if not self.storage.exists(refname) or self.storage.is_dir(refname):
            return None

        content = self.storage.read_bytes(refname).decode('utf-8', errors='replace').strip()
        return content if is_valid_hash(content) else None

    def write_ref(self, refname: str, commit_hash: str) -> None:
        """Write a reference to point to a commit."""
        validate_refname(refname)
        if not is_valid_hash(commit_hash):
            raise InvariantError(f"Invalid commit hash for {refname}: {commit_hash!r}")
        self.storage.write_bytes(refname, f"{commit_hash}\n".encode())
        logger.debug("updated %s to %s", refname, commit_hash)

    def resolve_head(self) -> Optional[str]:
        """Commit hash HEAD points at, following one symbolic level."""
        head = self.read_head()
        if head is None:
            return None
        if head.symbolic:
            return self.read_ref(head.target)
        return head.target

    def get_current_branch(self) -> Optional[str]:
        """Branch name HEAD points at, or None when detached."""
        head = self.read_head()
        if head is None or not head.symbolic:
            return None
        if head.target.startswith(HEADS_PREFIX):
            return head.target[len(HEADS_PREFIX):]
        return head.target

    def update_head(self, commit_hash: str) -> None:
        """
        Advance HEAD to a commit.

        Updates the branch HEAD points at, or HEAD itself when detached
        or unset.
        """
        head = self.read_head()
        if head is not None and head.symbolic:
            self.write_ref(head.target, commit_hash)
        else:
            self.set_head_detached(commit_hash)

    def list_branches(self) -> List[Tuple[str, str]]:
        """
        List all branches.

        Returns:
            List of (branch_name, commit_hash) tuples, sorted by name
        """
        branches = []
        self._collect_branches(HEADS_PREFIX.rstrip('/'), '', branches)
        return sorted(branches)

    def _collect_branches(self, directory: str, prefix: str, out: List[Tuple[str, str]]) -> None:
        for name in self.storage.list_dir(directory):
            path = f"{directory}/{name}"
            if self.storage.is_dir(path):
                self._collect_branches(path, f"{prefix}{name}/", out)
                continue
            commit_hash = self.read_ref(path)
            if commit_hash:
                out.append((prefix + name, commit_hash))

    def create_branch(self, branch_name: str, commit_hash: str) -> None:
        """
        Create a branch at a commit.

        Raises:
            PreconditionError: If the branch already exists
        """
        refname = HEADS_PREFIX + branch_name
        if self.read_ref(refname) is not None:
            raise PreconditionError(f"Branch '{branch_name}' already exists")
        self.write_ref(refname, commit_hash)

    def resolve_reference(self, ref: str) -> Optional[str]:
        """
        Resolve a reference to a commit hash.

        Accepts ``HEAD``, a full hash, a full ref name, or a branch name.
        """
        if ref == HEAD_FILE:
            return self.resolve_head()
        if is_valid_hash(ref):
            return ref
        try:
            if ref.startswith('refs/'):
                return self.read_ref(ref)
            return self.read_ref(HEADS_PREFIX + ref)
        except PreconditionError:
            return None

    def __repr__(self) -> str:
        return f"RefManager(head={self.read_head()})"
