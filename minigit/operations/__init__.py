"""Operations module for high-level minigit operations.

This module contains the business logic for:
- Commit creation
- Checkout and work tree snapshots
- History and ancestry queries
- Merge algorithms
- Pack import/export
"""

from minigit.operations.results import OperationResult, CommitResult, PackResult
from minigit.operations.commit import commit_index, write_commit
from minigit.operations.history import is_ancestor, common_ancestor, walk_history
from minigit.operations.merge import MergeEngine, MergeResult, MergeOutcome, three_way_merge
from minigit.operations.packing import build_pack, import_pack

__all__ = [
    'OperationResult', 'CommitResult', 'PackResult',
    'commit_index', 'write_commit',
    'is_ancestor', 'common_ancestor', 'walk_history',
    'MergeEngine', 'MergeResult', 'MergeOutcome', 'three_way_merge',
    'build_pack', 'import_pack',
]
