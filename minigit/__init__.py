"""minigit - a minimal content-addressed version control engine."""

__version__ = '0.1.0'

from minigit.core.repository import Repository
from minigit.core.objects import MinigitObject, Blob, Tree, Commit

__all__ = [
    'Repository',
    'MinigitObject',
    'Blob',
    'Tree',
    'Commit',
]
