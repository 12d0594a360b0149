"""Error types for minigit.

Operations recover every ``MinigitError`` at their public boundary and turn
it into a result object carrying the ``kind``. ``InvariantError`` is not a
``MinigitError`` and propagates to the caller.
"""

from enum import Enum


class ErrorKind(Enum):
    """Category of a failure reported to callers."""
    IO = 'io'
    NOT_FOUND = 'not-found'
    FORMAT = 'invalid-format'
    PRECONDITION = 'precondition'


class MinigitError(Exception):
    """Base class for recoverable minigit errors."""

    kind = ErrorKind.IO


class StorageError(MinigitError):
    """Reading or writing the underlying storage failed."""

    kind = ErrorKind.IO


class ObjectNotFoundError(MinigitError):
    """No object is stored under the requested hash."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, obj_hash: str):
        self.hash = obj_hash
        super().__init__(f"Object {obj_hash} not found")


class ObjectFormatError(MinigitError):
    """An object could not be decoded."""

    kind = ErrorKind.FORMAT


class IndexFormatError(MinigitError):
    """The staging list file is malformed."""

    kind = ErrorKind.FORMAT


class PackError(MinigitError):
    """A pack archive is invalid or could not be built."""

    kind = ErrorKind.FORMAT


class PreconditionError(MinigitError):
    """The repository is not in a state that allows the operation."""

    kind = ErrorKind.PRECONDITION


class InvariantError(Exception):
    """Internal misuse, such as a malformed hash reaching the store.

    Raised loudly and never converted into a result.
    """
