"""Three-way merge for minigit."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from minigit.core.errors import MinigitError, PreconditionError
from minigit.core.index import IndexEntry
from minigit.core.projection import flatten, project
from minigit.operations.commit import write_commit
from minigit.operations.history import can_fast_forward, common_ancestor, is_ancestor
from minigit.operations.results import OperationResult
from minigit.operations.worktree import materialize, status

logger = logging.getLogger(__name__)

STRATEGIES = ('ours', 'theirs')


@dataclass
class MergeOutcome:
    """Merged ``{path: hash}`` mapping plus the paths that conflict."""
    merged: Dict[str, str]
    conflicts: List[str]

    @property
    def clean(self) -> bool:
        return not self.conflicts

    def __repr__(self) -> str:
        return f"MergeOutcome(merged={len(self.merged)}, conflicts={len(self.conflicts)})"


def path_clashes(paths: Iterable[str]) -> List[str]:
    """
    Paths that are a file in one place and a directory of another path.

    Both sides of each clash are returned, sorted, e.g. ``x`` and ``x/y``.
    """
    paths = set(paths)
    clashes = set()
    for path in paths:
        parent = path.rpartition('/')[0]
        while parent:
            if parent in paths:
                clashes.update((parent, path))
            parent = parent.rpartition('/')[0]
    return sorted(clashes)


def _with_clashes_as_conflicts(merged: Dict[str, str], conflicts: List[str]) -> MergeOutcome:
    clashes = path_clashes(merged)
    if not clashes:
        return MergeOutcome(merged, conflicts)
    merged = {path: obj_hash for path, obj_hash in merged.items() if path not in clashes}
    return MergeOutcome(merged, sorted(set(conflicts) | set(clashes)))


def three_way_merge(
    base: Mapping[str, str],
    ours: Mapping[str, str],
    theirs: Mapping[str, str]
) -> MergeOutcome:
    """
    Reconcile two flat projections against their common base.

    A path missing from a mapping is "absent", which is a value of its own:
    a side that deleted a file disagrees with a side that kept it.

    For each path in the union of the three mappings:

    - both sides agree: keep that state (dropped when both deleted it)
    - only theirs changed it: take theirs
    - only ours changed it: take ours
    - both changed it differently: conflict, left out of ``merged``

    A merged file whose path is also a directory of another merged path
    (``x`` and ``x/y``) cannot be projected; both paths become conflicts.

    Args:
        base: ``{path: hash}`` of the merge base
        ours: ``{path: hash}`` of the current side
        theirs: ``{path: hash}`` of the side being merged in

    Returns:
        MergeOutcome; conflicts are listed in path order
    """
    merged: Dict[str, str] = {}
    conflicts: List[str] = []

    for path in sorted(set(base) | set(ours) | set(theirs)):
        b, o, t = base.get(path), ours.get(path), theirs.get(path)

        if o == t:
            result = o
        elif o == b:
            result = t
        elif t == b:
            result = o
        else:
            conflicts.append(path)
            continue

        if result is not None:
            merged[path] = result

    return _with_clashes_as_conflicts(merged, conflicts)


def resolve_conflicts(
    outcome: MergeOutcome,
    ours: Mapping[str, str],
    theirs: Mapping[str, str],
    strategy: str
) -> MergeOutcome:
    """
    Settle every conflict of outcome by preferring one side.

    With ``'ours'`` each conflicted path takes our state, with ``'theirs'``
    their state. If the preferred side deleted the path it stays deleted.

    Raises:
        ValueError: For an unknown strategy
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown merge strategy: {strategy!r}")

    preferred = ours if strategy == 'ours' else theirs
    merged = dict(outcome.merged)
    for path in outcome.conflicts:
        if path in preferred:
            merged[path] = preferred[path]

    return _with_clashes_as_conflicts(merged, [])


@dataclass
class MergeResult(OperationResult):
    """Result of a merge operation."""
    conflicts: List[str] = field(default_factory=list)
    merged_tree_hash: Optional[str] = None
    commit_hash: Optional[str] = None
    base_hash: Optional[str] = None
    is_fast_forward: bool = False

    def __repr__(self) -> str:
        if self.success:
            if self.is_fast_forward:
                return "MergeResult(fast-forward, conflicts=0)"
            return f"MergeResult(success, conflicts={len(self.conflicts)})"
        return f"MergeResult(failed, conflicts={len(self.conflicts)})"


class MergeEngine:
    """
    Handles merge operations for minigit.

    Supports:
    - Fast-forward merges
    - Three-way merges against a common ancestor
    - Conflict detection, with optional ours/theirs resolution
    """

    def __init__(self, repo):
        """
        Initialize merge engine.

        Args:
            repo: Repository instance
        """
        self.repo = repo
        self.store = repo.objects

    def find_merge_base(self, ours_hash: str, theirs_hash: str) -> Optional[str]:
        """Common ancestor of two commits, or None if unrelated."""
        return common_ancestor(self.store, ours_hash, theirs_hash)

    def can_fast_forward(self, current_hash: str, target_hash: str) -> bool:
        """
        Check if we can fast-forward from current to target.

        A fast-forward is possible when target is a descendant of current.
        """
        return can_fast_forward(self.store, current_hash, target_hash)

    def resolve_target(self, target: str) -> str:
        """
        Resolve a branch name, ref or hash to a commit hash.

        Raises:
            PreconditionError: If target does not name a commit
        """
        commit_hash = self.repo.refs.resolve_reference(target)
        if not commit_hash or not self.store.exists(commit_hash):
            raise PreconditionError(f"Cannot merge '{target}': no such branch or commit")
        self.store.read_commit(commit_hash)
        return commit_hash

    def fast_forward(self, target_hash: str) -> MergeResult:
        """
        Move the current branch (or detached HEAD) to target_hash.

        The work tree and index are brought to the target's tree; no commit
        is created.
        """
        materialize(self.repo, self.store.read_commit(target_hash).tree)
        self.repo.refs.update_head(target_hash)

        logger.info("fast-forward to %s", target_hash)
        return MergeResult(
            success=True,
            message=f"Fast-forward to {target_hash[:7]}",
            commit_hash=target_hash,
            is_fast_forward=True
        )

    def _flatten_commit(self, commit_hash: Optional[str]) -> Dict[str, IndexEntry]:
        if commit_hash is None:
            return {}
        tree_hash = self.store.read_commit(commit_hash).tree
        return {entry.path: entry for entry in flatten(self.store, tree_hash)}

    def three_way(
        self,
        ours_hash: str,
        theirs_hash: str,
        strategy: Optional[str] = None,
        message: Optional[str] = None,
        label: Optional[str] = None
    ) -> MergeResult:
        """
        Merge theirs_hash into ours_hash and commit the result.

        Unrelated histories merge against an empty base. On conflicts
        nothing is written and the conflicting paths are reported.
        """
        base_hash = self.find_merge_base(ours_hash, theirs_hash)
        base = self._flatten_commit(base_hash)
        ours = self._flatten_commit(ours_hash)
        theirs = self._flatten_commit(theirs_hash)

        base_map = {path: entry.hash for path, entry in base.items()}
        ours_map = {path: entry.hash for path, entry in ours.items()}
        theirs_map = {path: entry.hash for path, entry in theirs.items()}

        outcome = three_way_merge(base_map, ours_map, theirs_map)
        if outcome.conflicts and strategy:
            logger.info("resolving %d conflicts with strategy '%s'", len(outcome.conflicts), strategy)
            outcome = resolve_conflicts(outcome, ours_map, theirs_map, strategy)

        if outcome.conflicts:
            logger.warning("merge of %s into %s has %d conflicts",
                           theirs_hash, ours_hash, len(outcome.conflicts))
            return MergeResult(
                success=False,
                message=f"Merge conflicts in {len(outcome.conflicts)} file(s)",
                conflicts=outcome.conflicts,
                base_hash=base_hash
            )

        entries = []
        for path, obj_hash in outcome.merged.items():
            # Keep the mode of the side whose content won
            source = ours.get(path)
            if source is None or source.hash != obj_hash:
                source = theirs.get(path)
            entries.append(IndexEntry(mode=source.mode, path=path, hash=obj_hash))

        merged_tree_hash = project(self.store, entries)
        message = message or (f"Merge branch '{label}'" if label else f"Merge {theirs_hash[:7]}")
        commit_hash = write_commit(self.repo, merged_tree_hash, [ours_hash, theirs_hash], message)
        materialize(self.repo, merged_tree_hash)

        logger.info("merge commit %s (base %s)", commit_hash, base_hash)
        return MergeResult(
            success=True,
            message=f"Merged {theirs_hash[:7]} into {ours_hash[:7]}",
            merged_tree_hash=merged_tree_hash,
            commit_hash=commit_hash,
            base_hash=base_hash
        )

    def merge(
        self,
        target: str,
        allow_fast_forward: bool = True,
        fast_forward_only: bool = False,
        strategy: Optional[str] = None,
        message: Optional[str] = None
    ) -> MergeResult:
        """
        Merge a branch or commit into the current HEAD.

        A repository with a work tree must be clean: the merge result
        replaces every file outside ``.minigit``.

        Args:
            target: Branch name, ref or commit hash to merge in
            allow_fast_forward: Whether to allow fast-forward merges
            fast_forward_only: Fail unless the merge is a fast-forward
            strategy: Conflict resolution strategy:
                - None: No auto-resolution (report conflicts)
                - 'ours': Always take our version
                - 'theirs': Always take their version
            message: Merge commit message

        Returns:
            MergeResult with status and any conflicts. A conflicted merge
            has ``success`` False, a non-empty ``conflicts`` list and no
            ``error_kind``; errors set ``error_kind``.
        """
        if strategy is not None and strategy not in STRATEGIES:
            return MergeResult.failure(PreconditionError(f"Unknown merge strategy: {strategy}"))

        try:
            ours_hash = self.repo.refs.resolve_head()
            if not ours_hash:
                raise PreconditionError("No commits on current branch")
            theirs_hash = self.resolve_target(target)

            if is_ancestor(self.store, theirs_hash, ours_hash):
                return MergeResult(success=True, message="Already up to date", commit_hash=ours_hash)

            if not self.repo.bare and not status(self.repo).clean:
                raise PreconditionError(
                    "Uncommitted or untracked changes would be overwritten by merge; "
                    "commit them first")

            fast_forward = self.can_fast_forward(ours_hash, theirs_hash)
            if fast_forward and (allow_fast_forward or fast_forward_only):
                return self.fast_forward(theirs_hash)
            if fast_forward_only:
                raise PreconditionError("Not possible to fast-forward, aborting")

            return self.three_way(ours_hash, theirs_hash, strategy=strategy, message=message,
                                  label=target if target != theirs_hash else None)
        except MinigitError as e:
            logger.error("merge of %s failed: %s", target, e)
            return MergeResult.failure(e)
