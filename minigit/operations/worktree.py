"""Snapshot and restore the working directory."""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from minigit.core.errors import PreconditionError, StorageError
from minigit.core.hash import is_valid_hash
from minigit.core.index import Index, file_mode
from minigit.core.objects import Blob, MODE_DIR, MODE_EXECUTABLE, Tree
from minigit.core.projection import flatten, flatten_to_map
from minigit.core.refs import HEADS_PREFIX

logger = logging.getLogger(__name__)

REPO_DIR_NAME = '.minigit'


def write_tree(store, directory) -> str:
    """
    Snapshot a directory into tree and blob objects.

    The ``.minigit`` directory, symlinks and other non-regular files are
    skipped.

    Returns:
        str: Hash of the directory's tree
    """
    tree = Tree()
    try:
        items = sorted(os.scandir(directory), key=lambda item: item.name)
    except OSError as e:
        raise StorageError(f"Cannot list {directory}: {e}") from e

    for item in items:
        if item.name == REPO_DIR_NAME or item.is_symlink():
            continue
        if item.is_dir():
            tree.add_entry(MODE_DIR, item.name, write_tree(store, item.path))
        elif item.is_file():
            try:
                blob = Blob.from_file(item.path)
            except OSError as e:
                raise StorageError(f"Cannot read {item.path}: {e}") from e
            tree.add_entry(file_mode(Path(item.path)), item.name, store.write(blob))

    return store.write(tree)


def clear_work_tree(directory) -> None:
    """Remove everything in directory except the repository itself."""
    for item in Path(directory).iterdir():
        if item.name == REPO_DIR_NAME:
            continue
        if item.is_dir() and not item.is_symlink():
            shutil.rmtree(item)
        else:
            item.unlink()


def checkout_tree(store, directory, tree_hash: str) -> Index:
    """
    Make directory match a tree snapshot.

    Clears the work tree (keeping ``.minigit``) and writes every file of the
    tree back.

    Returns:
        Index: The flattened tree, ready to become the staging list
    """
    entries = flatten(store, tree_hash)
    root = Path(directory)

    try:
        clear_work_tree(root)
        for entry in entries:
            target = root / entry.path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(store.get(entry.hash))
            target.chmod(0o755 if entry.mode == MODE_EXECUTABLE else 0o644)
    except OSError as e:
        raise StorageError(f"Checkout into {directory} failed: {e}") from e

    logger.info("checked out tree %s (%d files)", tree_hash, len(entries))
    return Index(entries)


def checkout_commit(store, directory, commit_hash: str) -> Index:
    """Materialize a commit's tree into directory. See checkout_tree."""
    return checkout_tree(store, directory, store.read_commit(commit_hash).tree)


def materialize(repo, tree_hash: str) -> Index:
    """
    Bring the work tree and index of repo to a tree snapshot.

    Bare repositories only get their index rewritten.
    """
    if repo.bare:
        index = Index(flatten(repo.objects, tree_hash))
    else:
        index = checkout_tree(repo.objects, repo.work_tree, tree_hash)
    repo.write_index(index)
    return index


def checkout_head(repo) -> Index:
    """
    Rebuild the work tree from the commit HEAD resolves to.

    Raises:
        PreconditionError: If HEAD does not resolve to a commit
    """
    commit_hash = repo.refs.resolve_head()
    if not commit_hash:
        raise PreconditionError("HEAD does not point at a commit")
    return materialize(repo, repo.objects.read_commit(commit_hash).tree)


def switch_to(repo, target: str) -> str:
    """
    Check out a branch, a commit hash or a tree hash.

    A branch name moves HEAD to that branch; a commit hash detaches HEAD;
    a tree hash only rewrites the work tree and index.

    Returns:
        str: The commit (or tree) hash that was checked out

    Raises:
        PreconditionError: If target names nothing that can be checked out
    """
    if is_valid_hash(target):
        if not repo.objects.exists(target):
            raise PreconditionError(f"Unknown revision: {target}")
        kind, _ = repo.objects.load(target)
        if kind == 'commit':
            materialize(repo, repo.objects.read_commit(target).tree)
            repo.refs.set_head_detached(target)
        elif kind == 'tree':
            materialize(repo, target)
        else:
            raise PreconditionError(f"Cannot check out a {kind}: {target}")
        return target

    refname = target if target.startswith(HEADS_PREFIX) else HEADS_PREFIX + target
    commit_hash = repo.refs.read_ref(refname)
    if not commit_hash:
        raise PreconditionError(f"Unknown revision: {target}")

    materialize(repo, repo.objects.read_commit(commit_hash).tree)
    repo.refs.set_head_symbolic(refname)
    return commit_hash


def scan_work_tree(directory) -> Dict[str, str]:
    """
    Blob hashes of every regular file under directory.

    Nothing is written to the object store.

    Returns:
        ``{path: blob_hash}`` with ``/``-separated relative paths
    """
    root = Path(directory)
    files = {}
    for path in root.rglob('*'):
        rel_path = path.relative_to(root)
        if rel_path.parts[0] == REPO_DIR_NAME or path.is_symlink() or not path.is_file():
            continue
        try:
            files[rel_path.as_posix()] = Blob.from_file(path).hash
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
    return files


@dataclass
class WorkTreeStatus:
    """Differences between HEAD, the index and the work tree."""
    branch: Optional[str] = None
    head: Optional[str] = None
    staged_new: List[str] = field(default_factory=list)
    staged_modified: List[str] = field(default_factory=list)
    staged_deleted: List[str] = field(default_factory=list)
    unstaged_modified: List[str] = field(default_factory=list)
    unstaged_deleted: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def has_staged(self) -> bool:
        return bool(self.staged_new or self.staged_modified or self.staged_deleted)

    @property
    def has_unstaged(self) -> bool:
        return bool(self.unstaged_modified or self.unstaged_deleted)

    @property
    def clean(self) -> bool:
        return not (self.has_staged or self.has_unstaged or self.untracked)


def status(repo) -> WorkTreeStatus:
    """
    Compare HEAD with the index, and the index with the work tree.

    Raises:
        PreconditionError: For a bare repository
    """
    if repo.bare:
        raise PreconditionError("Bare repository has no work tree")

    report = WorkTreeStatus(branch=repo.refs.get_current_branch(), head=repo.refs.resolve_head())
    head_files = {}
    if report.head:
        head_files = flatten_to_map(repo.objects, repo.objects.read_commit(report.head).tree)
    index_files = {entry.path: entry.hash for entry in repo.read_index()}
    working_files = scan_work_tree(repo.work_tree)

    for path, index_hash in sorted(index_files.items()):
        if path not in head_files:
            report.staged_new.append(path)
        elif head_files[path] != index_hash:
            report.staged_modified.append(path)
        if path not in working_files:
            report.unstaged_deleted.append(path)
        elif working_files[path] != index_hash:
            report.unstaged_modified.append(path)

    report.staged_deleted = sorted(set(head_files) - set(index_files))
    report.untracked = sorted(set(working_files) - set(index_files))
    return report
