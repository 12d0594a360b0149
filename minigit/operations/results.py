"""Result objects returned by public operations."""

from dataclasses import dataclass
from typing import Optional

from minigit.core.errors import ErrorKind, MinigitError


@dataclass
class OperationResult:
    """Outcome of an operation; failures carry the error kind."""
    success: bool
    message: str = ""
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def failure(cls, error: MinigitError, **kwargs) -> 'OperationResult':
        return cls(success=False, message=str(error), error_kind=error.kind, **kwargs)


@dataclass
class CommitResult(OperationResult):
    """Result of creating a commit."""
    commit_hash: Optional[str] = None
    tree_hash: Optional[str] = None
    parents: tuple = ()


@dataclass
class PackResult(OperationResult):
    """Result of building or importing a pack."""
    path: Optional[str] = None
    object_count: int = 0
