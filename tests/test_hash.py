"""Hash utilities tests."""

import pytest
from mingit.core.hash import hash_object, hash_file, hash_to_hex, hex_to_hash, to_hash
from mingit.core.errors import InvalidHashEncoding


def test_hash_object_empty():
    """Test hashing empty bytes."""
    result = hash_object(b'')
    assert len(result) == 20
    assert isinstance(result, bytes)
    assert result.hex() == 'da39a3ee5e6b4b0d3255bfef95601890afd80709'


def test_hash_object_deterministic():
    """Test hash consistency for same input."""
    assert hash_object(b'hello world') == hash_object(b'hello world')


def test_hash_object_different_data():
    """Test different data produces different hashes."""
    assert hash_object(b'hello') != hash_object(b'world')


def test_hash_file(tmp_path):
    """Test hashing file contents."""
    path = tmp_path / 'data.bin'
    path.write_bytes(b'test content')
    assert hash_file(path) == hash_object(b'test content')


def test_hex_roundtrip():
    """Test hex conversion in both directions."""
    raw = bytes(range(20))
    hexsha = hash_to_hex(raw)
    assert hexsha == '000102030405060708090a0b0c0d0e0f10111213'
    assert hex_to_hash(hexsha) == raw


def test_hash_to_hex_is_lowercase():
    """Test hex output uses lowercase digits."""
    assert hash_to_hex(b'\xab' * 20) == 'ab' * 20


def test_hex_to_hash_accepts_uppercase():
    """Test uppercase hex still parses."""
    assert hex_to_hash('AB' * 20) == b'\xab' * 20


@pytest.mark.parametrize('value', [
    'abc',            # odd length
    'a' * 39,         # odd length, one short
    'zz' * 20,        # not hex
    'ab' * 19,        # even but too short
    'ab' * 21,        # too long
    ' ' + 'a' * 39,   # whitespace
    '',
])
def test_hex_to_hash_rejects_invalid(value):
    """Test malformed hex input raises InvalidHashEncoding."""
    with pytest.raises(InvalidHashEncoding):
        hex_to_hash(value)


def test_hash_to_hex_rejects_wrong_width():
    """Test raw hashes must be exactly 20 bytes."""
    with pytest.raises(InvalidHashEncoding):
        hash_to_hex(b'\x00' * 19)


def test_to_hash_accepts_both_forms():
    """Test raw and hex hashes normalize to the same raw value."""
    raw = bytes(range(20))
    assert to_hash(raw) == raw
    assert to_hash(raw.hex()) == raw
    assert to_hash(raw.hex().encode('ascii')) == raw
