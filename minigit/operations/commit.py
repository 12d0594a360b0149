"""Commit creation for minigit."""

import logging
from typing import List, Optional

from minigit.core.errors import MinigitError
from minigit.core.objects import Commit
from minigit.core.projection import project
from minigit.operations.results import CommitResult

logger = logging.getLogger(__name__)


def write_commit(
    repo,
    tree_hash: str,
    parents: List[str],
    message: str,
    author: Optional[str] = None,
    committer: Optional[str] = None
) -> str:
    """
    Store a commit object and advance HEAD to it.

    Args:
        repo: Repository instance
        tree_hash: Root tree of the snapshot
        parents: Parent commit hashes, in order
        message: Commit message
        author: Author identity; built from env/config when omitted
        committer: Committer identity; built from env/config when omitted

    Returns:
        str: Hash of the new commit
    """
    author = author or repo.identity('author')
    committer = committer or repo.identity('committer')

    commit = Commit.create(
        tree_hash=tree_hash,
        parent_hashes=parents,
        author=author,
        committer=committer,
        message=message
    )
    commit_hash = repo.objects.write(commit)
    repo.refs.update_head(commit_hash)
    return commit_hash


def commit_index(
    repo,
    message: str,
    author: Optional[str] = None,
    committer: Optional[str] = None
) -> CommitResult:
    """
    Record the staged files as a new commit.

    The staging list is projected into trees, the commit's parent is the
    commit HEAD resolves to (none for the first commit), and HEAD (or the
    branch it names) moves to the new commit. An empty index commits the
    empty tree.

    Returns:
        CommitResult with the new commit and tree hashes
    """
    try:
        index = repo.read_index()
        tree_hash = project(repo.objects, index)
        parent = repo.refs.resolve_head()
        parents = [parent] if parent else []
        commit_hash = write_commit(repo, tree_hash, parents, message, author, committer)
    except MinigitError as e:
        logger.error("commit failed: %s", e)
        return CommitResult.failure(e)

    logger.info("created commit %s (tree %s)", commit_hash, tree_hash)
    return CommitResult(
        success=True,
        message=f"Created commit {commit_hash[:7]}",
        commit_hash=commit_hash,
        tree_hash=tree_hash,
        parents=tuple(parents)
    )
