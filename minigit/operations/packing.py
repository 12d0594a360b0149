"""Pack and unpack a repository's objects."""

import logging
from pathlib import Path

from minigit.core.errors import MinigitError
from minigit.core.pack import read_pack, unpack_into, write_pack
from minigit.core.storage import FileStorage
from minigit.operations.results import PackResult

logger = logging.getLogger(__name__)


def _pack_location(path):
    pack_path = Path(path).resolve()
    return FileStorage(pack_path.parent), pack_path.name


def build_pack(repo, path) -> PackResult:
    """
    Write every object of repo into a pack file at path.

    Returns:
        PackResult with the number of objects packed; an empty repository
        is a failure
    """
    storage, name = _pack_location(path)
    try:
        count = write_pack(repo.objects, storage, name)
    except MinigitError as e:
        logger.error("pack to %s failed: %s", path, e)
        return PackResult.failure(e, path=str(path))

    return PackResult(
        success=True,
        message=f"Packed {count} objects into {path}",
        path=str(path),
        object_count=count
    )


def import_pack(repo, path) -> PackResult:
    """
    Import the objects of a pack file into repo.

    The whole pack is parsed before anything is written, so a corrupt or
    truncated file imports nothing.

    Returns:
        PackResult with the number of newly written objects
    """
    storage, name = _pack_location(path)
    try:
        entries = read_pack(storage, name)
        count = unpack_into(repo.objects, entries)
    except MinigitError as e:
        logger.error("unpack of %s failed: %s", path, e)
        return PackResult.failure(e, path=str(path))

    return PackResult(
        success=True,
        message=f"Unpacked {count} new objects ({len(entries)} in pack)",
        path=str(path),
        object_count=count
    )
