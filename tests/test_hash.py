"""Hash utilities tests."""

import pytest
import tempfile
from pathlib import Path
from minigit.core.hash import hash_object, hash_file, is_valid_hash, hex_to_raw, raw_to_hex


def test_hash_object_known_vectors():
    """Raw SHA-1 digests of well-known inputs."""
    assert hash_object(b'hello world') == '2aae6c35c94fcfb415dbe95f408b9ce91ee846ed'
    assert hash_object(b'') == 'da39a3ee5e6b4b0d3255bfef95601890afd80709'


def test_hash_object_different_data():
    """Test different data produces different hashes."""
    assert hash_object(b'hello') != hash_object(b'world')


def test_hash_file():
    """Test hashing file contents."""
    with tempfile.NamedTemporaryFile(mode='wb', delete=False) as f:
        f.write(b'hello world')
        temp_path = f.name

    try:
        assert hash_file(temp_path) == hash_object(b'hello world')
    finally:
        Path(temp_path).unlink()


@pytest.mark.parametrize('value,expected', [
    ('2aae6c35c94fcfb415dbe95f408b9ce91ee846ed', True),
    ('2AAE6C35C94FCFB415DBE95F408B9CE91EE846ED', False),
    ('2aae6c35', False),
    ('z' * 40, False),
    (None, False),
])
def test_is_valid_hash(value, expected):
    assert is_valid_hash(value) is expected


def test_hex_raw_conversion():
    hex_hash = '95d09f2b10159347eece71399a7e2e907ea3df4f'
    raw = hex_to_raw(hex_hash)
    assert len(raw) == 20
    assert raw_to_hex(raw) == hex_hash


def test_hex_to_raw_rejects_invalid():
    with pytest.raises(ValueError):
        hex_to_raw('abc')


def test_raw_to_hex_rejects_wrong_length():
    with pytest.raises(ValueError):
        raw_to_hex(b'\x00' * 19)
