"""Pack archive tests."""

import struct
import zlib
import pytest
from minigit.core.errors import ErrorKind, ObjectFormatError, PackError
from minigit.core.objects import Blob, Tree
from minigit.core.pack import (
    MAGIC, PackEntry, collect_entries, decode_pack, encode_pack, unpack_into,
)
from minigit.core.repository import Repository
from minigit.operations.packing import build_pack, import_pack


def header(count):
    return MAGIC + struct.pack('>I', count)


def test_encode_layout():
    entry = PackEntry('a' * 40, b'xyz')
    data = encode_pack([entry])
    assert data == header(1) + b'a' * 40 + struct.pack('>I', 3) + b'xyz'


def test_encode_empty_pack():
    assert encode_pack([]) == header(0)
    assert decode_pack(header(0)) == []


def test_decode_preserves_order_and_payloads():
    entries = [PackEntry('b' * 40, b'second'), PackEntry('a' * 40, b'')]
    assert decode_pack(encode_pack(entries)) == entries


@pytest.mark.parametrize('data', [
    b'',
    b'MPK',
    b'MPK2' + struct.pack('>I', 0),
    b'PACK' + struct.pack('>I', 0),
])
def test_decode_rejects_bad_header(data):
    with pytest.raises(PackError):
        decode_pack(data)


def test_decode_rejects_truncated_entry_header():
    with pytest.raises(PackError, match='truncated'):
        decode_pack(header(1) + b'a' * 20)


def test_decode_rejects_truncated_payload():
    data = encode_pack([PackEntry('a' * 40, b'payload')])
    with pytest.raises(PackError, match='truncated'):
        decode_pack(data[:-1])


def test_decode_rejects_missing_entries():
    data = encode_pack([PackEntry('a' * 40, b'x')])
    data = header(2) + data[len(header(1)):]
    with pytest.raises(PackError):
        decode_pack(data)


def test_decode_rejects_trailing_bytes():
    data = encode_pack([PackEntry('a' * 40, b'x')])
    with pytest.raises(PackError, match='trailing'):
        decode_pack(data + b'\x00')


@pytest.mark.parametrize('bad_hash', [b'A' * 40, b'g' * 40, b'\xff' * 40])
def test_decode_rejects_invalid_hash(bad_hash):
    data = header(1) + bad_hash + struct.pack('>I', 0)
    with pytest.raises(PackError, match='invalid hash'):
        decode_pack(data)


def test_encode_rejects_invalid_hash():
    with pytest.raises(PackError):
        encode_pack([PackEntry('xyz', b'')])


def test_pack_error_kind():
    assert PackError('x').kind == ErrorKind.FORMAT


def test_collect_entries_sorted_raw_payloads(memory_repo):
    store = memory_repo.objects
    store.write(Blob(b'one'))
    store.write(Blob(b'two'))
    entries = collect_entries(store)
    assert [e.hash for e in entries] == sorted(e.hash for e in entries)
    for entry in entries:
        assert entry.payload == store.read_raw(entry.hash)


def test_unpack_into_counts_new_objects(memory_repo):
    source = memory_repo.objects
    source.write(Blob(b'one'))
    source.write(Tree())
    entries = collect_entries(source)

    target = Repository.in_memory().objects
    existing = target.write(Blob(b'one'))

    assert unpack_into(target, entries) == 1
    assert existing in list(target.iter_hashes())
    assert target.read(Tree().hash) == Tree()
    assert unpack_into(target, entries) == 0


def test_unpack_rejects_mislabelled_payload(memory_repo):
    payload = zlib.compress(Blob(b'real').encode())
    with pytest.raises(ObjectFormatError):
        unpack_into(memory_repo.objects, [PackEntry(Blob(b'fake').hash, payload)])
    assert not memory_repo.objects.exists(Blob(b'fake').hash)


def test_build_and_import_pack(repo_with_commits, temp_dir):
    pack_path = temp_dir / 'out.pack'
    result = build_pack(repo_with_commits, pack_path)

    expected = len(repo_with_commits.objects)
    assert result.success
    assert result.object_count == expected
    assert pack_path.read_bytes().startswith(MAGIC)

    other = Repository.in_memory()
    imported = import_pack(other, pack_path)
    assert imported.success
    assert imported.object_count == expected
    assert sorted(other.objects.iter_hashes()) == sorted(repo_with_commits.objects.iter_hashes())

    head = repo_with_commits.refs.resolve_head()
    assert other.objects.read_commit(head).message == 'Second commit'


def test_build_pack_of_empty_repository(repo, temp_dir):
    result = build_pack(repo, temp_dir / 'empty.pack')
    assert not result.success
    assert result.error_kind == ErrorKind.FORMAT
    assert not (temp_dir / 'empty.pack').exists()


def test_import_corrupt_pack_writes_nothing(repo_with_commits, temp_dir):
    pack_path = temp_dir / 'out.pack'
    build_pack(repo_with_commits, pack_path)
    pack_path.write_bytes(pack_path.read_bytes()[:-3])

    other = Repository.in_memory()
    result = import_pack(other, pack_path)

    assert not result.success
    assert result.error_kind == ErrorKind.FORMAT
    assert len(other.objects) == 0


def test_import_missing_pack(repo, temp_dir):
    result = import_pack(repo, temp_dir / 'nope.pack')
    assert not result.success
    assert result.error_kind == ErrorKind.IO
