"""Ancestry queries over the commit graph."""

from collections import deque
from typing import Iterator, List, Optional, Set, Tuple

from minigit.core.objects import Commit


def iter_ancestors(store, start_hash: str) -> Iterator[str]:
    """
    Breadth-first walk over a commit and its ancestors.

    Each commit is yielded once, so diamond histories are not re-walked.
    Parents are visited in the order they are recorded.

    Args:
        store: ObjectStore holding the commits
        start_hash: Commit to start from (yielded first)
    """
    queue = deque([start_hash])
    visited: Set[str] = {start_hash}

    while queue:
        current = queue.popleft()
        yield current
        for parent in store.read_commit(current).parents:
            if parent not in visited:
                visited.add(parent)
                queue.append(parent)


def get_ancestors(store, commit_hash: str) -> Set[str]:
    """All ancestors of a commit, the commit itself included."""
    return set(iter_ancestors(store, commit_hash))


def is_ancestor(store, candidate: str, descendant: str) -> bool:
    """
    Check whether candidate is reachable from descendant via parent links.

    A commit is its own ancestor.
    """
    return any(current == candidate for current in iter_ancestors(store, descendant))


def common_ancestor(store, a: str, b: str) -> Optional[str]:
    """
    A merge base for two commits.

    Collects every ancestor of ``a``, then walks ``b`` breadth-first and
    returns the first commit found in that set. With several merge bases
    (criss-cross histories) this is the first one reached, not necessarily
    the best one.

    Returns:
        Commit hash, or None if the histories are unrelated
    """
    ancestors_a = get_ancestors(store, a)
    for current in iter_ancestors(store, b):
        if current in ancestors_a:
            return current
    return None


def can_fast_forward(store, current_hash: str, target_hash: str) -> bool:
    """
    Check if we can fast-forward from current to target.

    A fast-forward is possible when current is an ancestor of target.
    """
    return is_ancestor(store, current_hash, target_hash)


def walk_history(store, start_hash: str, max_count: Optional[int] = None) -> List[Tuple[str, Commit]]:
    """
    Commits reachable from start_hash for display.

    Returns:
        List of (commit_hash, commit) tuples in breadth-first order
    """
    history = []
    for commit_hash in iter_ancestors(store, start_hash):
        if max_count is not None and len(history) >= max_count:
            break
        history.append((commit_hash, store.read_commit(commit_hash)))
    return history
