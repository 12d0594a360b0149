"""Storage backend tests."""

import os
import pytest
from minigit.core.errors import StorageError
from minigit.core.storage import FileStorage, MemoryStorage


@pytest.fixture(params=['file', 'memory'])
def storage(request, temp_dir):
    if request.param == 'file':
        return FileStorage(temp_dir)
    return MemoryStorage()


def test_write_and_read(storage):
    storage.write_bytes('a/b/c.txt', b'data')
    assert storage.read_bytes('a/b/c.txt') == b'data'
    assert storage.exists('a/b/c.txt')
    assert storage.is_dir('a/b')
    assert not storage.is_dir('a/b/c.txt')


def test_overwrite_replaces_content(storage):
    storage.write_bytes('HEAD', b'one')
    storage.write_bytes('HEAD', b'two')
    assert storage.read_bytes('HEAD') == b'two'


def test_read_missing_raises(storage):
    with pytest.raises(StorageError):
        storage.read_bytes('missing')


def test_list_dir_sorted(storage):
    storage.write_bytes('refs/heads/main', b'x')
    storage.write_bytes('refs/heads/dev', b'x')
    storage.make_dirs('refs/heads/feature')
    assert storage.list_dir('refs/heads') == ['dev', 'feature', 'main']


def test_list_missing_dir_is_empty(storage):
    assert storage.list_dir('nope') == []


def test_delete(storage):
    storage.write_bytes('index', b'x')
    storage.delete('index')
    assert not storage.exists('index')
    storage.delete('index')


def test_file_storage_leaves_no_temp_files(temp_dir):
    storage = FileStorage(temp_dir)
    storage.write_bytes('objects/ab/cdef', b'payload')
    assert os.listdir(temp_dir / 'objects' / 'ab') == ['cdef']


def test_file_storage_hides_temp_files(temp_dir):
    storage = FileStorage(temp_dir)
    storage.write_bytes('objects/ab/cdef', b'payload')
    (temp_dir / 'objects' / 'ab' / '.tmp-stale').write_bytes(b'partial')
    assert storage.list_dir('objects/ab') == ['cdef']


def test_memory_storage_rejects_writing_over_directory():
    storage = MemoryStorage()
    storage.make_dirs('objects')
    with pytest.raises(StorageError):
        storage.write_bytes('objects', b'x')


@pytest.mark.skipif(os.name != 'posix', reason="POSIX permissions")
def test_file_storage_respects_umask(temp_dir):
    mask = os.umask(0)
    os.umask(mask)
    storage = FileStorage(temp_dir)
    storage.write_bytes('objects/ab/cdef', b'payload')
    mode = (temp_dir / 'objects' / 'ab' / 'cdef').stat().st_mode & 0o777
    assert mode == 0o666 & ~mask
